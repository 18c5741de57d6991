"""
Retry and circuit-breaking for calls to the ledger RPC endpoint.

The reputation probe hits the network once or twice per candidate, so a
flaky endpoint is retried briefly and a dead one is short-circuited
instead of being hammered for every user in the ranking.
"""

import functools
import time
from typing import Callable, Optional, Tuple, Type


class RetryError(Exception):
    """Raised when all retry attempts are exhausted."""
    pass


class CircuitOpenError(Exception):
    """Raised when a call is refused because the circuit is open."""
    pass


def exponential_backoff(
    max_retries: int = 2,
    base_delay: float = 0.5,
    max_delay: float = 10.0,
    exponential_base: float = 2.0,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    on_retry: Optional[Callable] = None,
    sleep: Callable[[float], None] = time.sleep,
):
    """
    Decorator retrying a function with exponentially growing delays.

    Args:
        max_retries: Retry attempts after the first call (0 = no retries)
        base_delay: First delay in seconds
        max_delay: Upper bound for any single delay
        exponential_base: Multiplier applied to the delay after each retry
        exceptions: Exception types that trigger a retry; others propagate
        on_retry: Optional callback(attempt, exception, delay)
        sleep: Sleep function, replaceable in tests

    Example:
        @exponential_backoff(max_retries=2, exceptions=(requests.exceptions.Timeout,))
        def call_rpc(payload):
            return session.post(url, json=payload)
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            delay = base_delay
            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempt == max_retries:
                        raise RetryError(
                            f"Failed after {max_retries + 1} attempts: {e}"
                        ) from e
                    current_delay = min(delay, max_delay)
                    if on_retry:
                        on_retry(attempt + 1, e, current_delay)
                    sleep(current_delay)
                    delay *= exponential_base
            raise RetryError("max_retries must be >= 0")

        return wrapper
    return decorator


class CircuitBreaker:
    """
    Stops calling a failing service until it has had time to recover.

    States:
    - CLOSED: calls pass through
    - OPEN: calls are refused with CircuitOpenError
    - HALF_OPEN: one trial call is let through after the recovery timeout
    """

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self._clock = clock

        self.failure_count = 0
        self.opened_at: Optional[float] = None
        self.state = self.CLOSED

    def call(self, func: Callable, *args, **kwargs):
        """
        Execute func under breaker protection.

        Raises:
            CircuitOpenError: If the circuit is open
            Original exception: If func fails
        """
        if self.state == self.OPEN:
            if self._time_until_reset() > 0:
                raise CircuitOpenError(
                    f"Circuit breaker is OPEN. Retry after {self._time_until_reset():.0f}s"
                )
            self.state = self.HALF_OPEN

        try:
            result = func(*args, **kwargs)
        except Exception:
            self._on_failure()
            raise
        self._on_success()
        return result

    def _time_until_reset(self) -> float:
        if self.opened_at is None:
            return 0.0
        elapsed = self._clock() - self.opened_at
        return max(0.0, self.recovery_timeout - elapsed)

    def _on_success(self):
        self.failure_count = 0
        self.opened_at = None
        self.state = self.CLOSED

    def _on_failure(self):
        self.failure_count += 1
        if self.state == self.HALF_OPEN or self.failure_count >= self.failure_threshold:
            self.state = self.OPEN
            self.opened_at = self._clock()

    def reset(self):
        """Manually close the circuit."""
        self._on_success()
