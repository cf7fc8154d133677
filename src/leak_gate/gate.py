"""Pre-commit gate: staged files in, allow/block decision out."""
from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import structlog

from leak_gate.config import GateConfig
from leak_gate.decision import GateDecision, allow, decide, warn
from leak_gate.errors import (
    NoRuntimeAvailable,
    RuntimeStartTimeout,
    ScannerExecutionError,
    StagingIOError,
)
from leak_gate.invoker import invoke_scan
from leak_gate.runtime.base import RuntimeProvider
from leak_gate.runtime.detector import default_providers, describe_missing, detect_runtime
from leak_gate.runtime.launcher import RuntimeLauncher
from leak_gate.staging import list_staged, staging_root
from leak_gate.types import RuntimeBackend, ScanRequest
from leak_gate.utils.console import Diagnostics
from leak_gate.utils.git import repo_root


def acquire_runtime(
    providers: Sequence[RuntimeProvider],
    launcher: RuntimeLauncher,
    out: Diagnostics,
    preferred: RuntimeBackend | str | None = None,
) -> RuntimeProvider:
    """Detect a runtime and make sure it is running.

    Raises:
        NoRuntimeAvailable: Nothing (or not the preferred backend) is installed
        RuntimeStartTimeout: The backend did not come online in time
    """
    provider = detect_runtime(providers, preferred=preferred)
    if provider is None:
        candidates = providers
        if preferred is not None:
            candidates = [p for p in providers if p.backend is RuntimeBackend(preferred)]
        raise NoRuntimeAvailable(
            [p.install_hint for p in candidates],
            preferred=RuntimeBackend(preferred).value if preferred is not None else None,
        )

    out.info(f"Using runtime: {provider.name}")

    launch = launcher.ensure_running(
        provider, on_start=lambda p: out.warning(f"Starting {p.display_name}...")
    )
    if not launch.running:
        raise RuntimeStartTimeout(provider.display_name, launch.stderr)
    if launch.started:
        out.success(f"{provider.display_name} started")

    return provider


class CommitGate:
    """Scans the staged content of a repository and decides on the commit."""

    def __init__(
        self,
        config: GateConfig | None = None,
        providers: Sequence[RuntimeProvider] | None = None,
        launcher: RuntimeLauncher | None = None,
        out: Diagnostics | None = None,
    ) -> None:
        self.config = config or GateConfig()
        self.providers = list(providers) if providers is not None else default_providers(self.config)
        self.launcher = launcher or RuntimeLauncher(
            start_timeout=self.config.start_timeout,
            poll_interval=self.config.poll_interval,
        )
        self.out = out or Diagnostics()
        self.logger = structlog.get_logger()

    def run(self, cwd: Path) -> GateDecision:
        """Run detection, launch, export, scan and decision in order."""
        try:
            repo = repo_root(cwd)
            entries = list_staged(repo)
        except StagingIOError as e:
            return self._degraded("Cannot read staged files", e)

        if not entries:
            return allow("No staged files to scan")

        try:
            provider = acquire_runtime(
                self.providers, self.launcher, self.out, preferred=self.config.runtime
            )
        except NoRuntimeAvailable as e:
            self.logger.info("No container runtime available", hints=e.hints)
            return warn(f"{e} - skipping secret scan\nInstall {describe_missing(e.hints)}")
        except RuntimeStartTimeout as e:
            return self._degraded(f"{e.runtime} failed to start - skipping secret scan", e.stderr)

        self.out.info("Exporting staged files...")
        try:
            with staging_root(
                repo,
                entries,
                config_filename=self.config.config_filename,
                baseline_filename=self.config.baseline_filename,
            ) as export:
                if export.baseline_path:
                    self.out.info(f"Using baseline: {self.config.baseline_filename}")
                if export.config_path:
                    self.out.info(f"Using config: {self.config.config_filename}")

                request = ScanRequest(
                    staging_root=export.root,
                    image=self.config.image,
                    config_path=export.config_path,
                    baseline_path=export.baseline_path,
                    mount_path=self.config.mount_path,
                )
                result = invoke_scan(provider, request, timeout=self.config.scan_timeout)
        except StagingIOError as e:
            return self._degraded("Failed to export staged files", e)
        except ScannerExecutionError as e:
            return self._degraded("Gitleaks could not be run", e)

        self.out.passthrough(result.stdout)
        self.out.passthrough(result.stderr)
        return decide(result.exit_code)

    def _degraded(self, summary: str, detail: object) -> GateDecision:
        self.logger.info(summary, detail=str(detail))
        lines = [summary]
        if str(detail).strip():
            lines.append(str(detail).strip())
        lines.append("Allowing commit - secret scan did not run")
        return warn("\n".join(lines))
