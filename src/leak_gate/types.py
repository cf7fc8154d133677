"""Core value types shared by the runtime broker and the gate."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

DEFAULT_MOUNT_PATH = "/code"


class RuntimeBackend(str, Enum):
    """Container backends, values match the CLI ``--runtime`` choices."""

    APPLE_CONTAINER = "container"
    DOCKER = "docker"
    COLIMA = "colima"


class RuntimeState(str, Enum):
    """Lifecycle of a backend within one invocation."""

    NOT_INSTALLED = "not_installed"
    INSTALLED_STOPPED = "installed_stopped"
    RUNNING = "running"
    FAILED_TO_START = "failed_to_start"


@dataclass(frozen=True)
class ScanRequest:
    """Everything a provider needs to render a scanner command line."""

    staging_root: Path
    image: str
    config_path: Path | None = None
    baseline_path: Path | None = None
    report_path: Path | None = None
    mount_path: str = DEFAULT_MOUNT_PATH


@dataclass(frozen=True)
class ScanResult:
    """Raw outcome of a scanner run."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""


@dataclass(frozen=True)
class StartResult:
    """Outcome of a single ``start()`` attempt."""

    ok: bool
    stderr: str = ""


@dataclass(frozen=True)
class LaunchResult:
    """Outcome of ``RuntimeLauncher.ensure_running``."""

    state: RuntimeState
    stderr: str = ""
    waited: float = 0.0
    started: bool = False

    @property
    def running(self) -> bool:
        return self.state is RuntimeState.RUNNING
