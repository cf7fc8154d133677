"""Tests for runtime detection order."""
import pytest

from conftest import FakeProvider
from leak_gate.config import GateConfig
from leak_gate.runtime import base
from leak_gate.runtime.detector import default_providers, describe_missing, detect_runtime
from leak_gate.types import RuntimeBackend

APPLE = RuntimeBackend.APPLE_CONTAINER
DOCKER = RuntimeBackend.DOCKER
COLIMA = RuntimeBackend.COLIMA


def _providers(installed):
    return [FakeProvider(b, installed=b in installed) for b in (APPLE, DOCKER, COLIMA)]


class TestDefaultProviders:
    def test_fixed_order(self):
        assert [p.backend for p in default_providers()] == [APPLE, DOCKER, COLIMA]

    def test_config_flows_into_providers(self):
        cfg = GateConfig(probe_timeout=3, start_timeout=20, colima_tools=["colima@0.8"], docker_socket="/x.sock")
        apple, docker, colima = default_providers(cfg)

        assert apple.probe_timeout == 3
        assert docker.start_timeout == 20
        assert docker.socket_path == "/x.sock"
        assert colima.tools == ["colima@0.8"]


class TestDetectRuntime:
    def test_docker_wins_over_colima_without_apple(self):
        providers = _providers({DOCKER, COLIMA})
        assert detect_runtime(providers).backend is DOCKER

    def test_apple_first_when_installed(self):
        providers = _providers({APPLE, DOCKER, COLIMA})
        selected = detect_runtime(providers)

        assert selected.backend is APPLE
        # later providers are never consulted
        assert providers[1].calls == []
        assert providers[2].calls == []

    def test_installed_but_stopped_still_selected(self):
        providers = [FakeProvider(APPLE, live=False), FakeProvider(DOCKER)]
        assert detect_runtime(providers).backend is APPLE

    def test_liveness_not_probed(self):
        providers = _providers({COLIMA})
        detect_runtime(providers)
        assert all("is_live" not in p.calls for p in providers)

    def test_none_available(self):
        assert detect_runtime(_providers(set())) is None

    def test_preferred_restricts_search(self):
        providers = _providers({APPLE, DOCKER, COLIMA})
        assert detect_runtime(providers, preferred="colima").backend is COLIMA
        assert providers[0].calls == []

    def test_preferred_not_installed(self):
        providers = _providers({APPLE})
        assert detect_runtime(providers, preferred=DOCKER) is None

    def test_unknown_preferred_rejected(self):
        with pytest.raises(ValueError):
            detect_runtime(_providers({APPLE}), preferred="podman")

    def test_real_providers_with_path_lookup(self, monkeypatch):
        on_path = {"docker", "mise"}
        monkeypatch.setattr(base.shutil, "which", lambda name: f"/bin/{name}" if name in on_path else None)

        assert detect_runtime(default_providers()).backend is DOCKER


def test_describe_missing():
    text = describe_missing([p.install_hint for p in default_providers()])
    assert text == "Apple Container (macOS 26+), Docker Desktop or Docker Engine, or mise with Colima"
