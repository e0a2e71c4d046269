"""Test actors: identities created on, or discovered in, the resim ledger."""

from __future__ import annotations

from dataclasses import dataclass

from . import patterns
from .config import HarnessConfig
from .extract import extract_one
from .process import ProcessRunner
from .shared.logging import get_logger

logger = get_logger(__name__)

# Key material that cannot be recovered from a ledger dump
UNKNOWN_KEY = "unknown"


@dataclass(frozen=True)
class Actor:
    """An account owned by the scenario."""

    public_key: str
    private_key: str
    address: str

    @property
    def can_sign(self) -> bool:
        """Whether the private key is known."""
        return self.private_key != UNKNOWN_KEY


class ActorFactory:
    """Create actors through ``resim new-account``."""

    def __init__(self, runner: ProcessRunner, config: HarnessConfig | None = None):
        self.runner = runner
        self.config = config or HarnessConfig()

    def create_fresh_actor(self) -> Actor:
        """Create a new account on the ledger.

        All three fields are extracted before the Actor is built, so a
        missing field raises NoMatchFound and no Actor exists.
        """
        output = self.runner.run(self.config.command("new-account"))
        public_key = extract_one(output, patterns.PUBLIC_KEY)
        private_key = extract_one(output, patterns.PRIVATE_KEY)
        address = extract_one(output, patterns.ACCOUNT_COMPONENT_ADDRESS)

        logger.info("actor_created", address=address, public_key=public_key)
        return Actor(public_key=public_key, private_key=private_key, address=address)

    @staticmethod
    def wrap_known_actor(address: str) -> Actor:
        """Wrap an existing account address; its keys are unknown."""
        return Actor(public_key=UNKNOWN_KEY, private_key=UNKNOWN_KEY, address=address)
