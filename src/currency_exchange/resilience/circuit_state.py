"""Shared circuit breaker state."""

import time
from collections.abc import Callable

# Seconds to wait after a failure before the backend is tried again
DEFAULT_RETRY_INTERVAL = 5.0


class CircuitState:
    """Open flag and last-failure time shared by a family of caches.

    The two fields are independent attributes, each written atomically,
    and are never updated together under a lock. Concurrent callers may
    both see an elapsed retry window and both issue a trial call, and a
    success report can race a failure report with the last writer winning.

    Attributes:
        is_open: True while the backend is considered unavailable
        last_failure_time: Clock reading of the most recent failure
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize a closed circuit.

        Args:
            clock: Returns the current time in seconds. Defaults to time.monotonic.
        """
        self.is_open = False
        self.last_failure_time = 0.0
        self._clock = clock

    def now(self) -> float:
        """Current reading of the circuit's clock."""
        return self._clock()

    def allows_attempt(self, retry_interval: float) -> bool:
        """Whether a call may go to the backend.

        A closed circuit always allows it. An open circuit allows it once
        more than ``retry_interval`` seconds have passed since the last
        failure; there is no separate half-open bookkeeping.
        """
        if not self.is_open:
            return True
        return self.now() - self.last_failure_time > retry_interval

    def record_failure(self) -> None:
        self.is_open = True
        self.last_failure_time = self.now()

    def record_success(self) -> bool:
        """Close the circuit if it is open.

        The failure time is left as is.

        Returns:
            True if this call closed the circuit
        """
        if self.is_open:
            self.is_open = False
            return True
        return False

    @property
    def status(self) -> str:
        return "open" if self.is_open else "closed"
