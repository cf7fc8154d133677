"""Colima runtime provider, reached through mise."""
from __future__ import annotations

from leak_gate.runtime.base import RuntimeProvider
from leak_gate.types import RuntimeBackend, StartResult

DEFAULT_TOOLS = ("lima@latest", "colima@latest")


class ColimaProvider(RuntimeProvider):
    """Colima VM driven via ``mise exec``.

    Status, start and the scanner's ``docker run`` all go through the same
    mise prefix, so the docker CLI talks to Colima's own context.
    """

    backend = RuntimeBackend.COLIMA
    display_name = "Colima (via mise)"
    binary = "mise"
    install_hint = "mise with Colima"

    def __init__(
        self,
        tools: list[str] | tuple[str, ...] = DEFAULT_TOOLS,
        probe_timeout: float = 10.0,
        start_timeout: float = 60.0,
    ) -> None:
        super().__init__(probe_timeout=probe_timeout, start_timeout=start_timeout)
        self.tools = list(tools)

    def exec_prefix(self) -> list[str]:
        return [self.binary, "exec", *self.tools, "--"]

    def is_live(self) -> bool:
        return self._probe([*self.exec_prefix(), "colima", "status"])

    def start(self) -> StartResult:
        return self._attempt([*self.exec_prefix(), "colima", "start"])

    def command_prefix(self) -> list[str]:
        return [*self.exec_prefix(), "docker", "run", "--rm"]
