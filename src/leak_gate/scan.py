"""Standalone directory scan with automatic runtime detection."""
from __future__ import annotations

from collections.abc import Sequence
from enum import IntEnum
from pathlib import Path

import structlog

from leak_gate.config import GateConfig
from leak_gate.errors import NoRuntimeAvailable, RuntimeStartTimeout, ScannerExecutionError
from leak_gate.gate import acquire_runtime
from leak_gate.invoker import invoke_scan
from leak_gate.runtime.base import RuntimeProvider
from leak_gate.runtime.detector import default_providers, describe_missing
from leak_gate.runtime.launcher import RuntimeLauncher
from leak_gate.types import RuntimeBackend, ScanRequest
from leak_gate.utils.console import Diagnostics

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Standalone exit codes; scanner codes above 1 are passed through."""

    CLEAN = 0
    FINDINGS = 1
    ERROR = 2


def _existing_file(path: Path | None, what: str) -> Path | None:
    if path is None:
        return None
    if not path.is_file():
        raise FileNotFoundError(f"{what} file '{path}' does not exist")
    return path.resolve()


def run_scan(
    path: Path = Path("."),
    runtime: RuntimeBackend | str | None = None,
    report: Path | None = None,
    config_file: Path | None = None,
    baseline: Path | None = None,
    config: GateConfig | None = None,
    providers: Sequence[RuntimeProvider] | None = None,
    launcher: RuntimeLauncher | None = None,
    out: Diagnostics | None = None,
) -> int:
    """Scan a directory in place and return the process exit code.

    Args:
        path: Directory to scan
        runtime: Backend to use; auto-detected when omitted
        report: Write a JSON report here
        config_file: Gitleaks rule config
        baseline: Gitleaks baseline of accepted findings
        config: leak-gate settings

    Returns:
        0 clean, 1 secrets found, >1 tool or configuration error
    """
    config = config or GateConfig()
    out = out or Diagnostics(label="[leak-gate]")
    providers = list(providers) if providers is not None else default_providers(config)
    launcher = launcher or RuntimeLauncher(
        start_timeout=config.start_timeout,
        poll_interval=config.poll_interval,
    )

    scan_path = path.resolve()
    if not scan_path.is_dir():
        out.error(f"Error: Path '{path}' does not exist")
        return ExitCode.ERROR

    try:
        config_path = _existing_file(config_file, "Config")
        baseline_path = _existing_file(baseline, "Baseline")
    except FileNotFoundError as e:
        out.error(f"Error: {e}")
        return ExitCode.ERROR

    report_path = None
    if report is not None:
        report_path = report.resolve()
        try:
            report_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            out.error(f"Error: cannot create report directory: {e}")
            return ExitCode.ERROR

    out.info("Detecting container runtime...")
    try:
        provider = acquire_runtime(
            providers, launcher, out, preferred=runtime or config.runtime
        )
    except NoRuntimeAvailable as e:
        out.error(f"Error: {e}")
        out.info(f"Install one of: {describe_missing(e.hints)}")
        return ExitCode.ERROR
    except RuntimeStartTimeout as e:
        out.error(f"Error: Failed to start {e.runtime}")
        if e.stderr:
            out.info(e.stderr)
        return ExitCode.ERROR

    request = ScanRequest(
        staging_root=scan_path,
        image=config.image,
        config_path=config_path,
        baseline_path=baseline_path,
        report_path=report_path,
        mount_path=config.mount_path,
    )

    out.info(f"Scanning: {scan_path}")
    try:
        result = invoke_scan(provider, request, timeout=config.scan_timeout)
    except ScannerExecutionError as e:
        out.error(f"Error running gitleaks: {e}")
        return ExitCode.ERROR

    out.passthrough(result.stdout)
    out.passthrough(result.stderr)

    if result.exit_code == ExitCode.CLEAN:
        out.success("No secrets detected")
    elif result.exit_code == ExitCode.FINDINGS:
        out.error("Secrets detected!")
    else:
        out.error(f"Error running gitleaks (exit code: {result.exit_code})")

    if report_path is not None and result.exit_code in (ExitCode.CLEAN, ExitCode.FINDINGS):
        out.info(f"Report: {report_path}")

    logger.debug("Scan finished", exit_code=result.exit_code)
    # Signal deaths surface as negative return codes
    return result.exit_code if result.exit_code >= 0 else ExitCode.ERROR
