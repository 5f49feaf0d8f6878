"""Bounded readiness polling.

Embedded web servers start asynchronously, so start() needs a ready
signal before tests send requests; an unbounded wait would hang the
suite on a broken server. The poller checks status, sleeps, and gives up
after a fixed number of waits.

Usage:
    poller = ReadinessPoller(interval=0.5, max_attempts=6)
    poller.wait(container.status)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from graphserver.config import PollingConfig
from graphserver.core.interfaces.container import ContainerStatus
from graphserver.errors import StartupError, StartupTimeoutError
from graphserver.logging_schema import LogEvent
from graphserver.metrics import READINESS_PROBES_TOTAL


class ReadinessPoller:
    """Polls a status probe until started, failed, or out of attempts.

    Args:
        interval: Seconds to wait after the first non-final status (default: 0.5)
        max_attempts: Number of waits before timing out (default: 6)
        backoff: Interval multiplier per attempt, 1.0 keeps it fixed (default: 1.0)
        max_interval: Upper bound for a single wait (default: 5.0)
        sleep: Sleep function, injectable for tests
        logger: Logger for status messages
    """

    def __init__(
        self,
        interval: float = 0.5,
        max_attempts: int = 6,
        backoff: float = 1.0,
        max_interval: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
        logger: logging.Logger | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.interval = interval
        self.max_attempts = max_attempts
        self.backoff = backoff
        self.max_interval = max_interval
        self._sleep = sleep
        self._logger = logger or logging.getLogger(__name__)
        self._interrupt: KeyboardInterrupt | None = None

    @classmethod
    def from_config(cls, config: PollingConfig, **kwargs) -> ReadinessPoller:
        return cls(
            interval=config.interval,
            max_attempts=config.max_attempts,
            backoff=config.backoff,
            max_interval=config.max_interval,
            **kwargs,
        )

    def delay_for(self, attempt: int) -> float:
        """Wait before probe `attempt + 1` (attempts count from 1)."""
        return min(self.interval * (self.backoff ** (attempt - 1)), self.max_interval)

    @property
    def budget(self) -> float:
        """Total seconds slept before a timeout."""
        return sum(self.delay_for(n) for n in range(1, self.max_attempts + 1))

    def wait(self, probe: Callable[[], ContainerStatus]) -> int:
        """Block until the probe reports STARTED.

        Probes once up front, then once after each of max_attempts waits.
        A Ctrl-C during a wait spends that attempt and is held back until
        raise_if_interrupted() so the caller can settle its state first.

        Returns:
            Number of probes made.

        Raises:
            StartupError: If the probe reports FAILED.
            StartupTimeoutError: If no definitive status within the budget.
        """
        self._interrupt = None
        probes = 0
        for attempt in range(1, self.max_attempts + 2):
            status = probe()
            probes += 1
            READINESS_PROBES_TOTAL.labels(status=status.value).inc()
            self._logger.info(
                "Graph server status: %s",
                status.value.upper(),
                extra={"event": LogEvent.POLL_STATUS, "status": status.value, "attempt": attempt},
            )
            if status == ContainerStatus.STARTED:
                return probes
            if status == ContainerStatus.FAILED:
                raise StartupError(f"Graph server startup failed (check {attempt})")
            if attempt > self.max_attempts:
                break
            self._pause(attempt)

        self._logger.error(
            "Graph server not ready after %d attempts",
            self.max_attempts,
            extra={"event": LogEvent.POLL_TIMEOUT, "budget": self.budget},
        )
        raise StartupTimeoutError(
            f"Graph server startup unsuccessful after waiting {self.max_attempts} times"
        )

    def raise_if_interrupted(self) -> None:
        """Re-raise a KeyboardInterrupt absorbed by the last wait()."""
        interrupt, self._interrupt = self._interrupt, None
        if interrupt is not None:
            raise interrupt

    def _pause(self, attempt: int) -> None:
        delay = self.delay_for(attempt)
        try:
            self._sleep(delay)
        except (InterruptedError, KeyboardInterrupt) as exc:
            # The attempt is spent; keep polling
            self._logger.warning(
                "Readiness wait interrupted: %r",
                exc,
                extra={"event": LogEvent.POLL_INTERRUPTED, "attempt": attempt},
            )
            if isinstance(exc, KeyboardInterrupt) and self._interrupt is None:
                self._interrupt = exc
