"""Run the containerized scanner."""
from __future__ import annotations

import subprocess
from typing import TYPE_CHECKING

import structlog

from leak_gate.errors import ScannerExecutionError
from leak_gate.types import ScanResult

if TYPE_CHECKING:
    from leak_gate.runtime.base import RuntimeProvider
    from leak_gate.types import ScanRequest

logger = structlog.get_logger()


def invoke_scan(
    provider: RuntimeProvider,
    request: ScanRequest,
    timeout: float | None = None,
) -> ScanResult:
    """Execute the provider-built scanner command.

    The exit code is returned as-is, whatever it is. Only failures to run
    the command at all are raised.

    Raises:
        ScannerExecutionError: The command could not be launched or did not
            finish within *timeout* seconds
    """
    args = provider.build_invocation(request)
    logger.info("Running scanner", runtime=provider.name, image=request.image)
    logger.debug("Scanner command", command=args)

    try:
        result = subprocess.run(
            args,
            capture_output=True,
            stdin=subprocess.DEVNULL,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise ScannerExecutionError(
            f"scanner did not finish within {timeout:g} seconds"
        ) from e
    except OSError as e:
        raise ScannerExecutionError(f"cannot launch {args[0]}: {e}") from e

    logger.debug("Scanner finished", exit_code=result.returncode)
    return ScanResult(
        exit_code=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
    )
