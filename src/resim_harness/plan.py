"""Scenario plans: YAML descriptions of a chained resim scenario.

Example::

    name: close-early
    fixture: attach
    steps:
      - manifest: manifests/amount_bound_instantiate.rtm
        capture:
          - key: component_address
            pattern: component
          - key: nft_address
            pattern: resource
            pick: last
      - manifest: manifests/amount_bound_close_early.rtm

``pattern`` is either a name from NAMED_PATTERNS or a regex with one
capture group.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from . import patterns
from .config import HarnessConfig
from .errors import NoMatchFound, PlanError
from .extract import extract_all, extract_one
from .fixture import ScenarioFixture
from .process import ProcessRunner
from .shared.logging import get_logger
from .steps import StepResult, extend_environment, run_manifest

logger = get_logger(__name__)

NAMED_PATTERNS = {
    "component": patterns.COMPONENT,
    "resource": patterns.RESOURCE,
    "package": patterns.NEW_PACKAGE,
    "account": patterns.LEDGER_ACCOUNT,
}

FIXTURE_MODES = ("fresh", "attach")
PICKS = ("first", "last", "all")


@dataclass
class Capture:
    """One value taken from a step's output into the environment."""

    key: str
    pattern: str
    pick: str = "first"

    def apply(self, output: str) -> str:
        """Extract this capture's value from ``output``."""
        regex = NAMED_PATTERNS.get(self.pattern, self.pattern)
        if self.pick == "first":
            return extract_one(output, regex)

        values = extract_all(output, regex)
        if not values:
            raise NoMatchFound(pattern=regex, text=output)
        if self.pick == "last":
            return values[-1]
        return ",".join(values)


@dataclass
class PlanStep:
    """A manifest run and the values captured from it."""

    manifest: str
    captures: list[Capture] = field(default_factory=list)


@dataclass
class ScenarioPlan:
    """Parsed scenario plan."""

    name: str
    fixture: str = "fresh"
    steps: list[PlanStep] = field(default_factory=list)


@dataclass
class PlanResult:
    """Outcome of a plan run."""

    fixture: ScenarioFixture
    env: dict[str, str]
    steps: list[StepResult] = field(default_factory=list)


def _parse_capture(raw: Any, where: str) -> Capture:
    if not isinstance(raw, dict) or "key" not in raw or "pattern" not in raw:
        raise PlanError(f"{where}: capture needs 'key' and 'pattern'")
    pick = str(raw.get("pick", "first"))
    if pick not in PICKS:
        raise PlanError(f"{where}: pick must be one of {', '.join(PICKS)}, got '{pick}'")
    return Capture(key=str(raw["key"]), pattern=str(raw["pattern"]), pick=pick)


def parse_plan(data: Any, default_name: str = "scenario") -> ScenarioPlan:
    """Build a ScenarioPlan from parsed YAML.

    Raises:
        PlanError: If the structure is invalid
    """
    if not isinstance(data, dict):
        raise PlanError("Plan must be a mapping")

    mode = str(data.get("fixture", "fresh"))
    if mode not in FIXTURE_MODES:
        raise PlanError(f"fixture must be one of {', '.join(FIXTURE_MODES)}, got '{mode}'")

    raw_steps = data.get("steps") or []
    if not isinstance(raw_steps, list):
        raise PlanError("steps must be a list")

    steps = []
    for i, raw in enumerate(raw_steps, start=1):
        where = f"step {i}"
        if not isinstance(raw, dict) or "manifest" not in raw:
            raise PlanError(f"{where}: missing 'manifest'")
        manifest = str(raw["manifest"])
        if len(manifest.split()) != 1:
            raise PlanError(f"{where}: manifest path cannot contain whitespace")
        captures = [_parse_capture(c, where) for c in raw.get("capture") or []]
        steps.append(PlanStep(manifest=manifest, captures=captures))

    return ScenarioPlan(name=str(data.get("name", default_name)), fixture=mode, steps=steps)


def load_plan(path: str | Path) -> ScenarioPlan:
    """Load a scenario plan from a YAML file."""
    plan_path = Path(path)
    try:
        with open(plan_path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise PlanError(f"Cannot read plan {plan_path}: {e}") from e
    except yaml.YAMLError as e:
        raise PlanError(f"Invalid YAML in {plan_path}: {e}") from e
    return parse_plan(data, default_name=plan_path.stem)


def run_plan(
    plan: ScenarioPlan,
    runner: ProcessRunner | None = None,
    config: HarnessConfig | None = None,
) -> PlanResult:
    """Run a plan from its fixture through every step.

    The caller is responsible for holding the ledger lock.
    """
    runner = runner or ProcessRunner()
    config = config or HarnessConfig()

    if plan.fixture == "attach":
        fixture = ScenarioFixture.attach_to_existing(runner, config)
    else:
        fixture = ScenarioFixture.new_scenario(runner, config)

    env = fixture.environment_for()
    results = []
    for step in plan.steps:
        result = run_manifest(runner, step.manifest, env, config)
        results.append(result)
        captured = {c.key: c.apply(result.output) for c in step.captures}
        if captured:
            logger.info("values_captured", manifest=step.manifest, values=captured)
        env = extend_environment(env, **captured)

    logger.info("plan_finished", plan=plan.name, steps=len(results))
    return PlanResult(fixture=fixture, env=env, steps=results)
