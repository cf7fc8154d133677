"""Tests for bringing a runtime online."""
from conftest import FakeProvider
from leak_gate.runtime.launcher import RuntimeLauncher
from leak_gate.types import RuntimeBackend, RuntimeState

APPLE = RuntimeBackend.APPLE_CONTAINER


class TestEnsureRunning:
    def test_live_runtime_is_not_started(self, launcher, clock):
        provider = FakeProvider(APPLE, live=True)
        result = launcher.ensure_running(provider)

        assert result.state is RuntimeState.RUNNING
        assert "start" not in provider.calls
        assert clock.sleeps == []

    def test_stopped_runtime_started_once(self, launcher, clock):
        provider = FakeProvider(APPLE, live=False, live_after_polls=2)
        result = launcher.ensure_running(provider)

        assert result.running
        assert provider.calls.count("start") == 1
        assert clock.sleeps == [2, 2]
        assert result.waited == 4

    def test_start_failure_reported_without_polling(self, launcher, clock):
        provider = FakeProvider(APPLE, live=False, start_ok=False, start_stderr="no kernel installed")
        result = launcher.ensure_running(provider)

        assert result.state is RuntimeState.FAILED_TO_START
        assert result.stderr == "no kernel installed"
        assert provider.calls == ["is_live", "start"]
        assert clock.sleeps == []

    def test_timeout_is_bounded(self, launcher, clock):
        provider = FakeProvider(APPLE, live=False, live_after_polls=None, start_stderr="booting vm")
        result = launcher.ensure_running(provider)

        assert result.state is RuntimeState.FAILED_TO_START
        assert clock.now == 60
        assert sum(clock.sleeps) == 60
        assert provider.calls.count("start") == 1
        assert result.stderr.startswith("booting vm\n")
        assert "failed to start within 60 seconds" in result.stderr

    def test_last_sleep_clipped_to_deadline(self, clock):
        launcher = RuntimeLauncher(start_timeout=5, poll_interval=2, clock=clock, sleep=clock.sleep)
        provider = FakeProvider(APPLE, live=False, live_after_polls=None)
        launcher.ensure_running(provider)

        assert clock.sleeps == [2, 2, 1]

    def test_timeout_message_without_stderr(self, clock):
        launcher = RuntimeLauncher(start_timeout=4, poll_interval=2, clock=clock, sleep=clock.sleep)
        provider = FakeProvider(RuntimeBackend.DOCKER, live=False, live_after_polls=None)
        result = launcher.ensure_running(provider)

        assert result.stderr == "Docker failed to start within 4 seconds"

    def test_started_flag_and_callback(self, launcher):
        announced = []
        provider = FakeProvider(APPLE, live=False, live_after_polls=1)
        result = launcher.ensure_running(provider, on_start=lambda p: announced.append(p.calls[:]))

        assert result.started
        # announced after the single liveness check, before the start attempt
        assert announced == [["is_live"]]

    def test_already_live_is_not_announced(self, launcher):
        announced = []
        result = launcher.ensure_running(FakeProvider(APPLE, live=True), on_start=announced.append)

        assert result.running
        assert not result.started
        assert announced == []
