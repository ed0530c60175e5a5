# vocab_swipe/shared/resilience.py
import time
from enum import Enum
from typing import Any, Awaitable, Callable, Dict

import httpx
import structlog
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from vocab_swipe.shared.config import settings

logger = structlog.get_logger()

# Answers that mean "the remote server is struggling", as opposed to "you asked for something wrong"
RETRYABLE_STATUS = frozenset({502, 503, 504})


class ResilienceError(Exception):
    """Base class for resilience-related errors."""


class CircuitBreakerOpenError(ResilienceError):
    """A call was refused without being attempted because the breaker is OPEN."""

    def __init__(self, service_name: str, retry_in: float):
        self.service_name = service_name
        self.retry_in = retry_in
        super().__init__(f"{service_name} is unavailable; next attempt allowed in {retry_in:.0f}s.")


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


def is_remote_failure(exc: BaseException) -> bool:
    """Transport failures and gateway-style 5xx answers count against the remote server."""
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS
    return False


class CircuitBreaker:
    """
    Stops hammering a remote word-source server that keeps failing.

    After `failure_threshold` consecutive remote failures the breaker opens
    and refuses calls for `recovery_timeout` seconds; the first call after
    that is a probe whose outcome closes or re-opens it. Errors that are not
    remote failures (bad payloads, programming errors) pass through
    untouched and leave the counters alone.
    """

    def __init__(self, name: str, failure_threshold: int = 5, recovery_timeout: float = 30):
        self.name = name
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout

        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.last_failure_time = 0.0

    def remaining_cooldown(self) -> float:
        if self.state != CircuitState.OPEN:
            return 0.0
        return max(self.recovery_timeout - (time.time() - self.last_failure_time), 0.0)

    async def a_call(self, func: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
        self._before_call()
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            if is_remote_failure(e):
                self._record_failure()
            raise
        self._record_success()
        return result

    def _before_call(self) -> None:
        if self.state != CircuitState.OPEN:
            return
        if self.remaining_cooldown() > 0:
            raise CircuitBreakerOpenError(self.name, self.remaining_cooldown())
        self._set_state(CircuitState.HALF_OPEN)

    def _record_success(self) -> None:
        if self.state == CircuitState.HALF_OPEN:
            logger.info("circuit_breaker_recovered", service=self.name)
            self.state = CircuitState.CLOSED
        self.failure_count = 0

    def _record_failure(self) -> None:
        self.failure_count += 1
        self.last_failure_time = time.time()
        if self.state == CircuitState.HALF_OPEN or self.failure_count >= self.failure_threshold:
            self._set_state(CircuitState.OPEN)

    def _set_state(self, new_state: CircuitState) -> None:
        self.state = new_state
        logger.warning(
            "circuit_breaker_state_change",
            service=self.name,
            state=new_state.value,
            failures=self.failure_count,
        )


# One breaker per remote server, shared by every repository pointing at it
_breakers: Dict[str, CircuitBreaker] = {}


def get_circuit_breaker(service_name: str) -> CircuitBreaker:
    breaker = _breakers.get(service_name)
    if breaker is None:
        breaker = CircuitBreaker(
            name=service_name,
            failure_threshold=5,
            recovery_timeout=settings.REMOTE_TIMEOUT_SEC * 3,
        )
        _breakers[service_name] = breaker
    return breaker


def _log_retry(retry_state) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning("remote_call_retry", attempt=retry_state.attempt_number, error=str(error))


def retry_external_api(func):
    """
    Retries a coroutine against the remote source server.

    Three attempts with exponential backoff (0.5s, 1s, capped at 4s). Only
    remote failures are retried; a 404 or 400 answer is final.
    """
    return retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        retry=retry_if_exception(is_remote_failure),
        before_sleep=_log_retry,
        reraise=True,
    )(func)
