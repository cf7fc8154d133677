"""Docker runtime provider."""
from __future__ import annotations

import os
import platform

import docker
import docker.errors

from leak_gate.runtime.base import RuntimeProvider
from leak_gate.types import RuntimeBackend, StartResult


class DockerProvider(RuntimeProvider):
    """Docker Desktop or Docker Engine.

    Liveness is checked by pinging the daemon through the Docker SDK rather
    than shelling out to ``docker info``.
    """

    backend = RuntimeBackend.DOCKER
    display_name = "Docker"
    binary = "docker"
    install_hint = "Docker Desktop or Docker Engine"

    def __init__(
        self,
        socket_path: str | None = None,
        probe_timeout: float = 10.0,
        start_timeout: float = 60.0,
    ) -> None:
        super().__init__(probe_timeout=probe_timeout, start_timeout=start_timeout)
        self._configured_socket = socket_path

    @property
    def socket_path(self) -> str:
        # Docker Desktop creates its socket only after start; resolved per probe
        return self._configured_socket or self._find_socket()

    def _find_socket(self) -> str:
        """Find the Docker socket path."""
        paths = [
            "/var/run/docker.sock",
            os.path.expanduser("~/.docker/run/docker.sock"),
            os.path.expanduser(
                "~/Library/Containers/com.docker.docker/Data/docker.sock"
            ),
        ]

        for path in paths:
            if os.path.exists(path):
                return path

        return "/var/run/docker.sock"

    def base_url(self) -> str:
        # DOCKER_HOST wins, same as the docker CLI
        return os.environ.get("DOCKER_HOST") or f"unix://{self.socket_path}"

    def get_client(self) -> docker.DockerClient:
        """Create a Docker client bounded by the probe timeout."""
        return docker.DockerClient(
            base_url=self.base_url(),
            timeout=max(1, int(self.probe_timeout)),
        )

    def is_live(self) -> bool:
        try:
            client = self.get_client()
            try:
                return bool(client.ping())
            finally:
                client.close()
        except (docker.errors.DockerException, OSError) as e:
            self.logger.debug("Docker daemon not reachable", base_url=self.base_url(), error=str(e))
            return False

    def start(self) -> StartResult:
        if platform.system() == "Darwin":
            return self._attempt(["open", "-a", "Docker"])
        return StartResult(
            ok=False,
            stderr="Docker daemon is not running; start Docker manually and try again",
        )

    def command_prefix(self) -> list[str]:
        return [self.binary, "run", "--rm"]
