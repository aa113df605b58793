"""Retry executor - exponential backoff around fallible provider calls.

Wraps any zero-argument coroutine factory with tenacity. Only failures whose
message contains one of the retryable signatures (transport/RPC errors,
HTTP 500/429, rate limiting, "at capacity") are retried; everything else,
and the final failure once attempts are exhausted, propagates unchanged.
Classification into the user-facing taxonomy happens one layer up.

Usage:
    response = await with_retry(
        lambda: client.aio.models.generate_content(...),
        RetryPolicy(max_attempts=3, initial_delay_ms=1000, backoff_multiplier=2),
    )
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ..constants import (
    RETRY_BACKOFF_MULTIPLIER,
    RETRY_INITIAL_DELAY_MS,
    RETRY_MAX_ATTEMPTS,
    RETRYABLE_SIGNATURES,
)

_logger = logging.getLogger("ai_calls")

T = TypeVar("T")

# Async sleep used between attempts (injectable for tests)
SleepFunc = Callable[[float], Awaitable[None]]


class RetryPolicy(BaseModel):
    """Backoff policy: delay after attempt n = initial * multiplier ** (n - 1)."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=RETRY_MAX_ATTEMPTS, ge=1)
    initial_delay_ms: int = Field(default=RETRY_INITIAL_DELAY_MS, ge=0)
    backoff_multiplier: float = Field(default=RETRY_BACKOFF_MULTIPLIER, ge=1.0)

    def delay_for_attempt(self, attempt: int) -> float:
        """Delay in milliseconds after the given (1-based) failed attempt."""
        return self.initial_delay_ms * self.backoff_multiplier ** (attempt - 1)


DEFAULT_RETRY_POLICY = RetryPolicy()


def is_retryable(error: BaseException) -> bool:
    """Check the error message against the retryable signatures."""
    message = str(error).lower()
    return any(signature in message for signature in RETRYABLE_SIGNATURES)


def _log_retry(label: str | None, policy: RetryPolicy) -> Callable[[RetryCallState], None]:
    def before_sleep(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        delay_ms = policy.delay_for_attempt(retry_state.attempt_number)
        _logger.warning(
            f"AI_RETRY | task:{label or '-'} | attempt:{retry_state.attempt_number}/"
            f"{policy.max_attempts} | retry_in:{delay_ms:.0f}ms | error:{error}"
        )

    return before_sleep


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
    *,
    sleep: SleepFunc | None = None,
    label: str | None = None,
) -> T:
    """Run ``operation`` with exponential backoff on transient failures.

    Args:
        operation: Zero-argument callable returning a fresh awaitable per attempt.
        policy: Backoff policy (defaults to 3 attempts, 1s, doubling).
        sleep: Async sleep used between attempts.
        label: Task name used in retry log lines.

    Returns:
        The first successful result.

    Raises:
        The last underlying exception, unchanged.
    """
    policy = policy or DEFAULT_RETRY_POLICY

    retrying = AsyncRetrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=wait_exponential(
            multiplier=policy.initial_delay_ms / 1000.0,
            exp_base=policy.backoff_multiplier,
            min=0,
        ),
        retry=retry_if_exception(is_retryable),
        sleep=sleep or asyncio.sleep,
        before_sleep=_log_retry(label, policy),
        reraise=True,
    )

    async for attempt in retrying:
        with attempt:
            return await operation()

    # AsyncRetrying either returns inside the loop or re-raises
    raise RuntimeError("Retry loop exited without a result")
