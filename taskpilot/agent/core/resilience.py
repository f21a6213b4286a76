"""Retries and circuit breaking for unreliable dependencies.

Both patterns are generic over any awaitable operation (an LLM call, an
HTTP call) and compose freely: a breaker may wrap a retried call, or a
retry loop may wrap a breaker-guarded call.
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from taskpilot.agent.core.errors import CircuitOpenError, NonRetryableError

logger = logging.getLogger(__name__)

T = TypeVar('T')

TRANSIENT_MESSAGE_MARKERS = (
    "ECONNRESET",
    "ETIMEDOUT",
    "429",
    "rate limit",
    "500",
    "502",
    "503",
    "overloaded",
    "capacity",
)


class CircuitState(Enum):
    """Circuit breaker states."""
    CLOSED = "closed"        # Normal operation
    OPEN = "open"            # Failing, reject calls
    HALF_OPEN = "half-open"  # Testing if service recovered


def is_retryable_error(error: BaseException) -> bool:
    """Classify a failure as transient (worth retrying) or permanent.

    Transient: connection resets, timeouts, rate limiting, 5xx responses and
    provider "overloaded"/"capacity" conditions. Anything else, and any error
    explicitly marked non-retryable, is permanent.
    """
    if isinstance(error, (NonRetryableError, CircuitOpenError)):
        return False

    if isinstance(error, (ConnectionError, TimeoutError, asyncio.TimeoutError)):
        return True

    status_code = getattr(error, "status_code", None)
    if isinstance(status_code, int) and (status_code == 429 or status_code >= 500):
        return True

    message = str(error).lower()
    return any(marker.lower() in message for marker in TRANSIENT_MESSAGE_MARKERS)


def backoff_delay(attempt: int, min_delay: float, max_delay: float, factor: float) -> float:
    """Delay before retry number ``attempt`` (1-based)."""
    return min(max_delay, min_delay * factor ** (attempt - 1))


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    retries: int = 3,
    min_delay: float = 1.0,
    max_delay: Optional[float] = None,
    factor: float = 2.0,
    on_retry: Optional[Callable[[BaseException, int], None]] = None,
    is_retryable: Callable[[BaseException], bool] = is_retryable_error,
) -> T:
    """Run ``operation`` with exponential backoff on transient failures.

    Args:
        operation: Zero-argument coroutine factory to invoke
        retries: Additional attempts after the first one
        min_delay: Delay in seconds before the first retry
        max_delay: Upper bound for any delay (defaults to ten times ``min_delay``)
        factor: Multiplier applied to the delay after each retry
        on_retry: Called with the failure and the failed attempt number before sleeping
        is_retryable: Failure classifier

    Returns:
        The operation's result

    Raises:
        The first non-retryable failure, or the last failure once retries run out
    """
    if retries < 0:
        raise ValueError("retries must not be negative")
    ceiling = max_delay if max_delay is not None else min_delay * 10

    attempt = 0
    while True:
        attempt += 1
        try:
            result = await operation()
            if attempt > 1:
                logger.info(f"Operation succeeded on attempt {attempt}")
            return result

        except Exception as e:
            if not is_retryable(e):
                logger.error(f"Operation failed with non-retryable error: {e}")
                raise

            retries_left = retries + 1 - attempt
            logger.warning(
                f"Retry attempt {attempt} failed ({retries_left} retries left): {e}"
            )
            if on_retry is not None:
                on_retry(e, attempt)
            if retries_left <= 0:
                logger.error(f"Operation failed after {attempt} attempts: {e}")
                raise

            await asyncio.sleep(backoff_delay(attempt, min_delay, ceiling, factor))


class CircuitBreaker:
    """Circuit breaker pattern for preventing cascading failures.

    Consecutive failures are counted while CLOSED; reaching
    ``failure_threshold`` opens the circuit. While OPEN every call is
    rejected with CircuitOpenError until ``reset_timeout`` seconds have
    passed since the last failure; the next call then runs HALF_OPEN and
    either closes the circuit (success) or re-opens it (failure).
    Calls arriving while that trial call is still running are rejected.
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        reset_timeout: float = 60.0,
        name: str = "default",
        clock: Callable[[], float] = time.monotonic,
    ):
        if failure_threshold <= 0:
            raise ValueError("failure_threshold must be greater than 0")
        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout
        self.name = name
        self._clock = clock

        self.failure_count = 0
        self.last_failure_time: Optional[float] = None
        self.state = CircuitState.CLOSED
        self._trial_in_flight = False

    async def execute(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Execute ``operation`` through the circuit breaker."""
        if self.state == CircuitState.OPEN:
            if self._should_attempt_reset():
                self.state = CircuitState.HALF_OPEN
                logger.info(f"Circuit breaker '{self.name}' entering HALF_OPEN state")
            else:
                raise CircuitOpenError(
                    f"Circuit breaker '{self.name}' is open",
                    breaker=self.name,
                    failure_count=self.failure_count,
                )
        elif self.state == CircuitState.HALF_OPEN and self._trial_in_flight:
            raise CircuitOpenError(
                f"Circuit breaker '{self.name}' is half-open with a trial call in progress",
                breaker=self.name,
                failure_count=self.failure_count,
            )

        # Only one call runs while HALF_OPEN
        is_trial = self.state == CircuitState.HALF_OPEN
        if is_trial:
            self._trial_in_flight = True
        try:
            result = await operation()
        except Exception:
            self._on_failure()
            raise
        finally:
            if is_trial:
                self._trial_in_flight = False

        self._on_success()
        return result

    def _on_success(self) -> None:
        if self.state == CircuitState.HALF_OPEN:
            logger.info(f"Circuit breaker '{self.name}' CLOSED after successful recovery")
        self.state = CircuitState.CLOSED
        self.failure_count = 0

    def _on_failure(self) -> None:
        self.failure_count += 1
        self.last_failure_time = self._clock()

        if self.state == CircuitState.HALF_OPEN:
            self.state = CircuitState.OPEN
            logger.warning(f"Circuit breaker '{self.name}' OPEN again after failure in HALF_OPEN state")
        elif self.state == CircuitState.CLOSED and self.failure_count >= self.failure_threshold:
            self.state = CircuitState.OPEN
            logger.warning(f"Circuit breaker '{self.name}' OPEN after {self.failure_count} failures")

    def _should_attempt_reset(self) -> bool:
        if self.last_failure_time is None:
            return True
        return self._clock() - self.last_failure_time >= self.reset_timeout

    def reset(self) -> None:
        """Force the breaker back to CLOSED."""
        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.last_failure_time = None
        self._trial_in_flight = False

    def get_state(self) -> Dict[str, Any]:
        """Get current circuit breaker state for monitoring."""
        return {
            "name": self.name,
            "state": self.state.value,
            "failure_count": self.failure_count,
            "last_failure_time": self.last_failure_time,
            "time_since_last_failure": (
                self._clock() - self.last_failure_time
                if self.last_failure_time is not None else None
            ),
        }
