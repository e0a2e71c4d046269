"""Scenario fixture: the ledger state a scenario starts from.

A fixture is built by exactly one of two transitions:

- ``new_scenario`` resets the ledger, creates fresh actors and publishes
  the package from the working tree.
- ``attach_to_existing`` reads ``show-ledger`` and adopts the accounts
  and the most recently listed package found there.

After construction the fixture is read-only. ``environment_for`` derives
the named values manifests consume; callers extend copies of it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from . import patterns
from .actors import Actor, ActorFactory
from .config import HarnessConfig
from .errors import ScenarioStateError
from .extract import extract_all, extract_one
from .process import ProcessRunner
from .shared.logging import get_logger

logger = get_logger(__name__)

# Environment keys
ACCOUNT_KEYS = ("account_1", "account_2", "account_3")
PACKAGE_KEY = "package_address"
PAYER_KEY = "payer_account"


@dataclass(frozen=True)
class ScenarioFixture:
    """Actors and package of one scenario."""

    actors: tuple[Actor, ...]
    package_address: str
    runner: ProcessRunner = field(repr=False, compare=False, default_factory=ProcessRunner)
    config: HarnessConfig = field(repr=False, compare=False, default_factory=HarnessConfig)

    @classmethod
    def new_scenario(
        cls,
        runner: ProcessRunner | None = None,
        config: HarnessConfig | None = None,
    ) -> ScenarioFixture:
        """Start from an empty ledger.

        Args:
            runner: Process runner (default: run in the current directory)
            config: Harness config (default: built-in defaults)

        Returns:
            Fixture holding ``config.actor_count`` fresh actors and the
            newly published package
        """
        runner = runner or ProcessRunner()
        config = config or HarnessConfig()

        runner.run(config.command("reset"))
        logger.info("ledger_reset")

        factory = ActorFactory(runner, config)
        actors = tuple(factory.create_fresh_actor() for _ in range(config.actor_count))

        output = runner.run(config.command("publish", config.package_dir))
        package_address = extract_one(output, patterns.NEW_PACKAGE)
        logger.info("package_published", package_address=package_address)

        return cls(actors=actors, package_address=package_address, runner=runner, config=config)

    @classmethod
    def attach_to_existing(
        cls,
        runner: ProcessRunner | None = None,
        config: HarnessConfig | None = None,
    ) -> ScenarioFixture:
        """Adopt the accounts and package already on the ledger.

        The last package in dump order is selected. That relies on
        ``show-ledger`` listing packages oldest first, which resim does
        not document.
        """
        runner = runner or ProcessRunner()
        config = config or HarnessConfig()

        output = runner.run(config.command("show-ledger"))
        accounts = extract_all(output, patterns.LEDGER_ACCOUNT)
        packages = extract_all(output, patterns.LEDGER_PACKAGE)
        if not packages:
            raise ScenarioStateError("No package found on the ledger; run a fresh scenario first")
        if len(packages) > 1:
            logger.warning(
                "multiple_packages",
                packages=packages,
                selected=packages[-1],
            )

        actors = tuple(ActorFactory.wrap_known_actor(a) for a in accounts)
        logger.info("ledger_attached", accounts=accounts, package_address=packages[-1])
        return cls(actors=actors, package_address=packages[-1], runner=runner, config=config)

    def environment_for(self) -> dict[str, str]:
        """Build the environment for scripted invocations.

        Queries ``show-configs`` on every call so ``payer_account`` follows
        the tool's current default account. The returned dict is a new
        object; extending it does not affect the fixture.
        """
        if len(self.actors) < len(ACCOUNT_KEYS):
            raise ScenarioStateError(
                f"Scenario needs {len(ACCOUNT_KEYS)} accounts, ledger has {len(self.actors)}"
            )

        env = {key: actor.address for key, actor in zip(ACCOUNT_KEYS, self.actors)}
        env[PACKAGE_KEY] = self.package_address

        output = self.runner.run(self.config.command("show-configs"))
        env[PAYER_KEY] = extract_one(output, patterns.DEFAULT_ACCOUNT)
        return env
