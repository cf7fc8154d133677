"""Error taxonomy for the runtime broker and gate."""
from __future__ import annotations


class LeakGateError(Exception):
    """Base class for broker failures."""


class NoRuntimeAvailable(LeakGateError):
    """No container backend is installed."""

    def __init__(self, hints: list[str], preferred: str | None = None) -> None:
        self.hints = hints
        self.preferred = preferred
        if preferred:
            message = f"Container runtime '{preferred}' is not installed"
        else:
            message = "No container runtime available"
        super().__init__(message)


class RuntimeStartTimeout(LeakGateError):
    """A backend was found but did not come online in time."""

    def __init__(self, runtime: str, stderr: str = "") -> None:
        self.runtime = runtime
        self.stderr = stderr
        super().__init__(f"{runtime} failed to start")


class ScannerExecutionError(LeakGateError):
    """The scanner subprocess could not be launched or did not finish."""


class StagingIOError(LeakGateError):
    """Reading the git index or writing the staging tree failed."""
