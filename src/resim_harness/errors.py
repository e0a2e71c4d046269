"""Error taxonomy for the resim harness.

Every error here means a scenario's precondition chain is broken, so none
of them is handled locally: they propagate and abort the scenario.
"""

from dataclasses import dataclass, field


@dataclass
class HarnessError(Exception):
    """Base error class for harness errors."""

    message: str = "Harness error"

    def __str__(self) -> str:
        return self.message


@dataclass
class ExternalToolFailure(HarnessError):
    """External command exited with a non-zero status."""

    command: list[str] = field(default_factory=list)
    returncode: int = 1
    stdout: str = ""
    stderr: str = ""
    message: str = "External tool failed"

    def __str__(self) -> str:
        lines = [
            f"{self.message}: `{' '.join(self.command)}` exited with {self.returncode}",
            "--- stdout ---",
            self.stdout.rstrip(),
            "--- stderr ---",
            self.stderr.rstrip(),
        ]
        return "\n".join(lines)


@dataclass
class ToolNotFound(HarnessError):
    """Executable is not on PATH."""

    executable: str = ""
    message: str = "Executable not found"

    def __str__(self) -> str:
        return f"{self.message}: {self.executable}"


@dataclass
class EncodingError(HarnessError):
    """Captured stdout is not valid UTF-8."""

    command: list[str] = field(default_factory=list)
    reason: str = ""
    message: str = "Output is not valid UTF-8"

    def __str__(self) -> str:
        return f"{self.message} (`{' '.join(self.command)}`): {self.reason}"


@dataclass
class NoMatchFound(HarnessError):
    """Expected pattern is absent from the tool output."""

    pattern: str = ""
    text: str = ""
    message: str = "Pattern not found in output"

    def __str__(self) -> str:
        return f"{self.message}: {self.pattern!r}\n--- searched text ---\n{self.text.rstrip()}"


@dataclass
class MalformedPattern(HarnessError):
    """Pattern failed to compile."""

    pattern: str = ""
    reason: str = ""
    message: str = "Malformed pattern"

    def __str__(self) -> str:
        return f"{self.message} {self.pattern!r}: {self.reason}"


@dataclass
class ScenarioStateError(HarnessError):
    """Fixture lacks state a later step depends on."""

    message: str = "Scenario state is incomplete"


@dataclass
class LedgerBusy(HarnessError):
    """Another live process holds the ledger lock."""

    lock_path: str = ""
    pid: int | None = None
    message: str = "Ledger is locked by another scenario"

    def __str__(self) -> str:
        return f"{self.message} (pid {self.pid}, lock {self.lock_path})"


@dataclass
class PlanError(HarnessError):
    """Scenario plan file is invalid."""

    message: str = "Invalid scenario plan"
