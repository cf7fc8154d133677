"""Base class for container runtime providers."""
from __future__ import annotations

import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath

import structlog

from leak_gate.types import RuntimeBackend, ScanRequest, StartResult

# Container-side roots for files that live outside the staging root
CONFIG_MOUNT = PurePosixPath("/leak-gate/config")
BASELINE_MOUNT = PurePosixPath("/leak-gate/baseline")
REPORT_MOUNT = PurePosixPath("/leak-gate/report")


class RuntimeProvider(ABC):
    """Abstract base class for container backends.

    A provider can tell whether its CLI is installed, whether its daemon or
    VM is live, try to start it, and render a scanner command line in its
    own syntax.
    """

    backend: RuntimeBackend
    display_name: str = "unknown"
    binary: str = ""
    install_hint: str = ""
    readonly_mounts: bool = True

    def __init__(
        self,
        probe_timeout: float = 10.0,
        start_timeout: float = 60.0,
    ) -> None:
        self.probe_timeout = probe_timeout
        self.start_timeout = start_timeout
        self.logger = structlog.get_logger().bind(runtime=self.name)

    @property
    def name(self) -> str:
        return self.backend.value

    def detect(self) -> bool:
        """Return True if the backend CLI is resolvable on PATH."""
        return shutil.which(self.binary) is not None

    @abstractmethod
    def is_live(self) -> bool:
        """Return True if a status probe succeeds. Never raises."""

    @abstractmethod
    def start(self) -> StartResult:
        """Make one attempt to bring the backend online."""

    @abstractmethod
    def command_prefix(self) -> list[str]:
        """Arguments that precede the mounts, e.g. ``docker run --rm``."""

    def mount_spec(self, host: Path, target: PurePosixPath | str, readonly: bool = False) -> str:
        """Render a ``-v`` value in this backend's syntax."""
        spec = f"{host}:{target}"
        if readonly and self.readonly_mounts:
            spec += ":ro"
        return spec

    def build_invocation(self, request: ScanRequest) -> list[str]:
        """Render the full scanner command for *request*.

        Pure path arithmetic: nothing on disk is inspected. Files already
        inside the staging root are addressed through the main mount; files
        elsewhere get their parent directory mounted on a side path.
        """
        mount = PurePosixPath(request.mount_path)
        volumes = ["-v", self.mount_spec(request.staging_root, mount)]
        flags = ["detect", f"--source={mount}", "--no-git", "-v"]

        if request.config_path is not None:
            target, extra = _container_path(
                request.config_path, request.staging_root, mount, CONFIG_MOUNT
            )
            if extra:
                volumes += ["-v", self.mount_spec(extra, CONFIG_MOUNT, readonly=True)]
            flags.append(f"--config={target}")

        if request.baseline_path is not None:
            target, extra = _container_path(
                request.baseline_path, request.staging_root, mount, BASELINE_MOUNT
            )
            if extra:
                volumes += ["-v", self.mount_spec(extra, BASELINE_MOUNT, readonly=True)]
            flags.append(f"--baseline-path={target}")

        if request.report_path is not None:
            target, extra = _container_path(
                request.report_path, request.staging_root, mount, REPORT_MOUNT
            )
            if extra:
                volumes += ["-v", self.mount_spec(extra, REPORT_MOUNT)]
            flags += [f"--report-path={target}", "--report-format=json"]

        return [*self.command_prefix(), *volumes, request.image, *flags]

    def _probe(self, args: list[str]) -> bool:
        """Run a status command, True on exit 0 within the probe timeout."""
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                stdin=subprocess.DEVNULL,
                timeout=self.probe_timeout,
            )
        except (subprocess.SubprocessError, OSError) as e:
            self.logger.debug("Status probe failed", command=args[0], error=str(e))
            return False
        return result.returncode == 0

    def _attempt(self, args: list[str]) -> StartResult:
        """Run a start command once and report its outcome."""
        self.logger.info("Starting runtime", command=" ".join(args))
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                stdin=subprocess.DEVNULL,
                text=True,
                timeout=self.start_timeout,
            )
        except subprocess.TimeoutExpired:
            return StartResult(
                ok=False,
                stderr=f"'{' '.join(args)}' did not return within {self.start_timeout:g}s",
            )
        except OSError as e:
            return StartResult(ok=False, stderr=str(e))

        return StartResult(ok=result.returncode == 0, stderr=(result.stderr or "").strip())


def _container_path(
    host_path: Path,
    staging_root: Path,
    mount: PurePosixPath,
    side_mount: PurePosixPath,
) -> tuple[PurePosixPath, Path | None]:
    """Map a host file to its in-container path.

    Returns the container path and, when the file is outside the staging
    root, the host directory that must be mounted at *side_mount*.
    """
    try:
        relative = host_path.relative_to(staging_root)
    except ValueError:
        return side_mount / host_path.name, host_path.parent
    return mount.joinpath(*relative.parts), None
