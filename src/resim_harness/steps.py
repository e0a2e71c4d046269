"""Scripted invocations chained through the environment.

Each step runs a manifest with the current environment and the caller
picks identifiers out of its output to build the next environment.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from . import patterns
from .config import HarnessConfig
from .errors import NoMatchFound
from .extract import extract_all, extract_one
from .process import ProcessRunner
from .shared.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class StepResult:
    """Output of one ``resim run`` and the environment it ran with."""

    manifest: str
    output: str = field(repr=False)
    env: Mapping[str, str] = field(default_factory=dict)

    @property
    def component(self) -> str:
        """First component address in the output."""
        return extract_one(self.output, patterns.COMPONENT)

    @property
    def resources(self) -> list[str]:
        """Every resource address, in output order."""
        return extract_all(self.output, patterns.RESOURCE)

    @property
    def last_resource(self) -> str:
        """Most recently emitted resource address."""
        resources = self.resources
        if not resources:
            raise NoMatchFound(pattern=patterns.RESOURCE, text=self.output)
        return resources[-1]


def extend_environment(env: Mapping[str, str], **values: str) -> dict[str, str]:
    """Return a copy of ``env`` with ``values`` added or overwritten."""
    extended = dict(env)
    extended.update(values)
    return extended


def run_manifest(
    runner: ProcessRunner,
    manifest: str,
    env: Mapping[str, str],
    config: HarnessConfig | None = None,
) -> StepResult:
    """Run ``resim run <manifest>`` with ``env`` layered on the process env."""
    config = config or HarnessConfig()
    snapshot = dict(env)
    logger.info("step_started", manifest=manifest, env=snapshot)
    output = runner.run(config.command("run", manifest), snapshot)
    return StepResult(manifest=manifest, output=output, env=snapshot)
