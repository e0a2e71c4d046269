"""resim harness - chained integration scenarios against the resim ledger simulator."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("resim-harness")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"  # Fallback for source checkouts without metadata

from .actors import Actor, ActorFactory
from .errors import (
    EncodingError,
    ExternalToolFailure,
    HarnessError,
    LedgerBusy,
    MalformedPattern,
    NoMatchFound,
    PlanError,
    ScenarioStateError,
    ToolNotFound,
)
from .extract import extract_all, extract_one
from .fixture import ScenarioFixture
from .lock import LedgerLock
from .process import ProcessRunner
from .steps import StepResult, extend_environment, run_manifest

__all__ = [
    "__version__",
    # Components
    "ProcessRunner",
    "extract_one",
    "extract_all",
    "Actor",
    "ActorFactory",
    "ScenarioFixture",
    # Step chaining
    "StepResult",
    "run_manifest",
    "extend_environment",
    "LedgerLock",
    # Errors
    "HarnessError",
    "ExternalToolFailure",
    "ToolNotFound",
    "EncodingError",
    "NoMatchFound",
    "MalformedPattern",
    "ScenarioStateError",
    "LedgerBusy",
    "PlanError",
]
