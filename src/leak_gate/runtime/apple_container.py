"""Apple Container runtime provider (macOS 26+)."""
from __future__ import annotations

from leak_gate.runtime.base import RuntimeProvider
from leak_gate.types import RuntimeBackend, StartResult


class AppleContainerProvider(RuntimeProvider):
    """Apple's native ``container`` CLI.

    Its ``-v`` flag takes plain ``host:target`` pairs, so side mounts are
    not marked read-only.
    """

    backend = RuntimeBackend.APPLE_CONTAINER
    display_name = "Apple Container"
    binary = "container"
    install_hint = "Apple Container (macOS 26+)"
    readonly_mounts = False

    def is_live(self) -> bool:
        return self._probe([self.binary, "system", "status"])

    def start(self) -> StartResult:
        return self._attempt([self.binary, "system", "start"])

    def command_prefix(self) -> list[str]:
        return [self.binary, "run", "--rm"]
