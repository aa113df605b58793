"""Tests for the retry executor.

Tests cover:
- Backoff delays for the default policy
- Non-retryable errors short-circuit
- Exhaustion re-raises the last underlying error
- Policy validation
"""

import pytest
from pydantic import ValidationError

from content_studio.services.retry import (
    DEFAULT_RETRY_POLICY,
    RetryPolicy,
    is_retryable,
    with_retry,
)


class FlakyOperation:
    """Fails with the given errors in order, then returns ``result``."""

    def __init__(self, errors, result="ok"):
        self.errors = list(errors)
        self.result = result
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.result


# =============================================================================
# Retryable Signatures
# =============================================================================

class TestIsRetryable:
    """Test matching of error messages against retryable signatures."""

    @pytest.mark.parametrize("message", [
        "XHR error while sending request",
        "Rpc failed: deadline",
        "500 Internal Server Error",
        "429 Too Many Requests",
        "You are being rate-limited",
        "The model is AT CAPACITY",
    ])
    def test_retryable_messages(self, message):
        assert is_retryable(Exception(message)) is True

    @pytest.mark.parametrize("message", [
        "invalid api key",
        "403 permission denied",
        "safety policy violation",
        "",
    ])
    def test_non_retryable_messages(self, message):
        assert is_retryable(Exception(message)) is False


# =============================================================================
# Backoff
# =============================================================================

class TestBackoff:
    """Test delays between attempts."""

    @pytest.mark.asyncio
    async def test_succeeds_on_third_attempt_after_one_and_two_seconds(self, fake_sleep, sleep_calls):
        """Two retryable failures wait 1000 + 2000 ms before succeeding."""
        operation = FlakyOperation([Exception("500 backend"), Exception("500 backend")], "done")
        policy = RetryPolicy(max_attempts=3, initial_delay_ms=1000, backoff_multiplier=2)

        result = await with_retry(operation, policy, sleep=fake_sleep)

        assert result == "done"
        assert operation.calls == 3
        assert sleep_calls == [1.0, 2.0]
        assert sum(sleep_calls) * 1000 == pytest.approx(3000)

    @pytest.mark.asyncio
    async def test_success_returns_immediately(self, fake_sleep, sleep_calls):
        operation = FlakyOperation([], "first")

        assert await with_retry(operation, sleep=fake_sleep) == "first"
        assert operation.calls == 1
        assert sleep_calls == []

    @pytest.mark.asyncio
    async def test_custom_multiplier(self, fake_sleep, sleep_calls):
        operation = FlakyOperation([Exception("429"), Exception("429"), Exception("429")])
        policy = RetryPolicy(max_attempts=4, initial_delay_ms=500, backoff_multiplier=3)

        await with_retry(operation, policy, sleep=fake_sleep)

        assert sleep_calls == pytest.approx([0.5, 1.5, 4.5])

    def test_delay_for_attempt(self):
        policy = RetryPolicy(initial_delay_ms=1000, backoff_multiplier=2)
        assert [policy.delay_for_attempt(n) for n in (1, 2, 3)] == [1000, 2000, 4000]


# =============================================================================
# Failure Propagation
# =============================================================================

class TestFailurePropagation:
    """Test which errors escape and how often the operation runs."""

    @pytest.mark.asyncio
    async def test_non_retryable_attempted_once(self, fake_sleep, sleep_calls):
        """A non-retryable error propagates unchanged after a single attempt."""
        error = ValueError("invalid api key")
        operation = FlakyOperation([error])

        with pytest.raises(ValueError) as exc_info:
            await with_retry(operation, DEFAULT_RETRY_POLICY, sleep=fake_sleep)

        assert exc_info.value is error
        assert operation.calls == 1
        assert sleep_calls == []

    @pytest.mark.asyncio
    async def test_exhaustion_reraises_last_error(self, fake_sleep, sleep_calls):
        """An always-failing retryable operation runs 3 times then re-raises the last error."""
        errors = [RuntimeError(f"xhr error #{n}") for n in range(1, 4)]
        operation = FlakyOperation(errors)

        with pytest.raises(RuntimeError) as exc_info:
            await with_retry(operation, RetryPolicy(max_attempts=3), sleep=fake_sleep)

        assert str(exc_info.value) == "xhr error #3"
        assert operation.calls == 3
        assert len(sleep_calls) == 2

    @pytest.mark.asyncio
    async def test_single_attempt_policy_never_sleeps(self, fake_sleep, sleep_calls):
        operation = FlakyOperation([Exception("500")])

        with pytest.raises(Exception, match="500"):
            await with_retry(operation, RetryPolicy(max_attempts=1), sleep=fake_sleep)

        assert operation.calls == 1
        assert sleep_calls == []

    @pytest.mark.asyncio
    async def test_retry_stops_at_first_non_retryable(self, fake_sleep, sleep_calls):
        operation = FlakyOperation([Exception("503 rpc failed"), KeyError("quota")])

        with pytest.raises(KeyError):
            await with_retry(operation, sleep=fake_sleep)

        assert operation.calls == 2
        assert sleep_calls == [1.0]


# =============================================================================
# Policy Validation
# =============================================================================

class TestRetryPolicy:
    """Test policy defaults and constraints."""

    def test_defaults(self):
        assert DEFAULT_RETRY_POLICY.max_attempts == 3
        assert DEFAULT_RETRY_POLICY.initial_delay_ms == 1000
        assert DEFAULT_RETRY_POLICY.backoff_multiplier == 2.0

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValidationError):
            RetryPolicy(max_attempts=0)

    def test_is_immutable(self):
        with pytest.raises(ValidationError):
            DEFAULT_RETRY_POLICY.max_attempts = 5
