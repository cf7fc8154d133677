"""Select the container runtime to scan with."""
from __future__ import annotations

from collections.abc import Sequence

import structlog

from leak_gate.config import GateConfig
from leak_gate.runtime.apple_container import AppleContainerProvider
from leak_gate.runtime.base import RuntimeProvider
from leak_gate.runtime.colima import ColimaProvider
from leak_gate.runtime.docker_engine import DockerProvider
from leak_gate.types import RuntimeBackend

logger = structlog.get_logger()


def default_providers(config: GateConfig | None = None) -> list[RuntimeProvider]:
    """Build providers in precedence order: Apple Container, Docker, Colima."""
    config = config or GateConfig()

    timeouts = {
        "probe_timeout": config.probe_timeout,
        "start_timeout": config.start_timeout,
    }
    return [
        AppleContainerProvider(**timeouts),
        DockerProvider(socket_path=config.docker_socket, **timeouts),
        ColimaProvider(tools=config.colima_tools, **timeouts),
    ]


def detect_runtime(
    providers: Sequence[RuntimeProvider],
    preferred: RuntimeBackend | str | None = None,
) -> RuntimeProvider | None:
    """Return the first installed provider, or None if none is installed.

    Liveness is not considered here: an installed but stopped backend is
    still selected and left to the launcher.

    Args:
        providers: Candidates in precedence order
        preferred: Restrict the search to this backend

    Returns:
        The selected provider, or None when nothing is available
    """
    if preferred is not None:
        wanted = RuntimeBackend(preferred)
        providers = [p for p in providers if p.backend is wanted]

    for provider in providers:
        if provider.detect():
            logger.info("Detected container runtime", runtime=provider.name)
            return provider
        logger.debug("Runtime not installed", runtime=provider.name, binary=provider.binary)

    return None


def describe_missing(hints: Sequence[str]) -> str:
    """Join install hints into "a, b, or c"."""
    hints = list(hints)
    if len(hints) <= 1:
        return "".join(hints)
    return ", ".join(hints[:-1]) + f", or {hints[-1]}"
