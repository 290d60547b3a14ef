"""Retry policy for AI provider calls, built on tenacity.

Only transient failures (network, timeout, rate limit) are retried, with
exponential backoff and jitter. A rate-limit response's ``retry_after`` is
honoured when the provider sends one.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from onboardkit.domain.exceptions import AIRateLimitError, OnboardKitError

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Retry configuration.

    max_attempts is the TOTAL number of tries, so 4 means one call and up
    to three retries.
    """

    max_attempts: int = 4
    base_delay: float = 1.0  # seconds
    max_delay: float = 8.0  # seconds
    exponential_base: float = 2.0
    jitter: float = 0.5  # seconds

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

    @classmethod
    def no_retry(cls) -> RetryPolicy:
        return cls(max_attempts=1)


def is_retryable(error: BaseException) -> bool:
    return isinstance(error, OnboardKitError) and error.retryable


class _BackoffWait:
    """Exponential backoff that defers to a server-provided retry_after."""

    def __init__(self, policy: RetryPolicy) -> None:
        self._policy = policy
        self._exponential = wait_exponential_jitter(
            initial=policy.base_delay,
            max=policy.max_delay,
            exp_base=policy.exponential_base,
            jitter=policy.jitter,
        )

    def __call__(self, retry_state: RetryCallState) -> float:
        outcome = retry_state.outcome
        error = outcome.exception() if outcome is not None else None
        if isinstance(error, AIRateLimitError) and error.retry_after is not None:
            return min(error.retry_after, self._policy.max_delay)
        return self._exponential(retry_state)


def call_with_retry(
    operation: Callable[[], T],
    policy: RetryPolicy,
    *,
    sleep: Callable[[float], None] | None = None,
) -> T:
    """Run operation, retrying transient provider errors.

    Args:
        operation: Zero-argument callable making one provider request
        policy: Retry configuration
        sleep: Replacement for time.sleep (tests pass a no-op)

    Returns:
        Result of the first successful attempt

    Raises:
        The last error once attempts are exhausted, or the first
        non-retryable error immediately.
    """

    def log_retry(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "AI request failed (attempt %d/%d): %s; retrying",
            retry_state.attempt_number,
            policy.max_attempts,
            error,
        )

    extra: dict[str, Callable[[float], None]] = {"sleep": sleep} if sleep else {}
    retrying = Retrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=_BackoffWait(policy),
        retry=retry_if_exception(is_retryable),
        before_sleep=log_retry,
        reraise=True,
        **extra,
    )
    return retrying(operation)
