"""Container runtime providers."""

from leak_gate.runtime.apple_container import AppleContainerProvider
from leak_gate.runtime.base import RuntimeProvider
from leak_gate.runtime.colima import ColimaProvider
from leak_gate.runtime.detector import default_providers, describe_missing, detect_runtime
from leak_gate.runtime.docker_engine import DockerProvider
from leak_gate.runtime.launcher import RuntimeLauncher

__all__ = [
    "AppleContainerProvider",
    "ColimaProvider",
    "DockerProvider",
    "RuntimeLauncher",
    "RuntimeProvider",
    "default_providers",
    "describe_missing",
    "detect_runtime",
]
