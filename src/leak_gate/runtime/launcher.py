"""Bring a selected runtime online with a bounded wait."""
from __future__ import annotations

import time
from collections.abc import Callable
from typing import TYPE_CHECKING

import structlog

from leak_gate.types import LaunchResult, RuntimeState

if TYPE_CHECKING:
    from leak_gate.runtime.base import RuntimeProvider


class RuntimeLauncher:
    """Ensures a provider is running.

    One ``start()`` attempt, then ``is_live()`` polling at a fixed interval
    until a hard wall-clock deadline. ``start()`` is never retried so the
    total hook latency stays bounded.
    """

    def __init__(
        self,
        start_timeout: float = 60.0,
        poll_interval: float = 2.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.start_timeout = start_timeout
        self.poll_interval = poll_interval
        self._clock = clock
        self._sleep = sleep
        self.logger = structlog.get_logger()

    def ensure_running(
        self,
        provider: RuntimeProvider,
        on_start: Callable[[RuntimeProvider], None] | None = None,
    ) -> LaunchResult:
        """Start *provider* if needed and wait for it to become live.

        *on_start* is called once, right before the start attempt.
        """
        if provider.is_live():
            self.logger.debug("Runtime already running", runtime=provider.name)
            return LaunchResult(state=RuntimeState.RUNNING)

        self.logger.info("Runtime installed but stopped", runtime=provider.name)
        if on_start is not None:
            on_start(provider)
        began = self._clock()
        attempt = provider.start()

        if not attempt.ok:
            self.logger.info(
                "Runtime start failed",
                runtime=provider.name,
                stderr=attempt.stderr,
            )
            return LaunchResult(
                state=RuntimeState.FAILED_TO_START,
                stderr=attempt.stderr,
                waited=self._clock() - began,
            )

        deadline = began + self.start_timeout
        while True:
            if provider.is_live():
                waited = self._clock() - began
                self.logger.info("Runtime started", runtime=provider.name, waited=round(waited, 1))
                return LaunchResult(state=RuntimeState.RUNNING, waited=waited, started=True)

            remaining = deadline - self._clock()
            if remaining <= 0:
                break
            self._sleep(min(self.poll_interval, remaining))

        message = f"{provider.display_name} failed to start within {self.start_timeout:g} seconds"
        stderr = f"{attempt.stderr}\n{message}" if attempt.stderr else message
        self.logger.info("Runtime start timed out", runtime=provider.name)
        return LaunchResult(
            state=RuntimeState.FAILED_TO_START,
            stderr=stderr,
            waited=self._clock() - began,
        )
