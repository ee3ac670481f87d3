"""Readiness polling for a freshly provisioned host."""

from __future__ import annotations

import time
from enum import Enum
from typing import Callable, Optional

from ..errors import ReachabilityTimeout
from ..ssh.probe import ProbeResult
from ..utils.logging import get_logger

logger = get_logger(__name__)

Probe = Callable[[str], ProbeResult]


class ReachabilityState(Enum):
    UNKNOWN = "unknown"
    REACHABLE = "reachable"
    EXHAUSTED = "exhausted"


class ReadinessPoller:
    """Polls a reachability probe until it succeeds or the attempt budget runs out.

    The SSH daemon of a new instance needs a while to come up. The poller
    sleeps ``interval`` seconds between failed probes and never sleeps after
    the last one, so total sleeping is at most ``(max_attempts - 1) * interval``.
    """

    def __init__(
        self,
        probe: Probe,
        *,
        max_attempts: int = 30,
        interval: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if interval < 0:
            raise ValueError("interval must not be negative")
        self.probe = probe
        self.max_attempts = max_attempts
        self.interval = interval
        self._sleep = sleep
        self.state = ReachabilityState.UNKNOWN
        self.attempts = 0
        self.last_result: Optional[ProbeResult] = None

    @property
    def worst_case_wait(self) -> float:
        return self.max_attempts * self.interval

    def wait_until_reachable(self, address: str) -> int:
        """Block until ``address`` answers the probe; returns the attempts used."""
        if not address:
            raise ValueError("Cannot poll an empty address")
        if self.state is not ReachabilityState.UNKNOWN:
            raise RuntimeError(f"Poller already finished in state {self.state.value}")

        logger.info(
            "⏳ Waiting for SSH to become available on %s (up to %ds)...",
            address,
            self.worst_case_wait,
        )
        while True:
            self.attempts += 1
            self.last_result = self.probe(address)
            if self.last_result.reachable:
                self.state = ReachabilityState.REACHABLE
                logger.info("✅ SSH is available (attempt %d).", self.attempts)
                return self.attempts

            logger.debug(
                "Attempt %d/%d failed: %s",
                self.attempts,
                self.max_attempts,
                self.last_result.detail,
            )
            if self.attempts >= self.max_attempts:
                self.state = ReachabilityState.EXHAUSTED
                raise ReachabilityTimeout(address, self.attempts, self.last_result.detail)
            self._sleep(self.interval)
