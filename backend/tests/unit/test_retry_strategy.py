"""Tests for the provider retry strategy.

Sleeps are patched out; delays are captured and checked directly.
"""

from unittest.mock import AsyncMock, patch

import pytest

from career_pathway.providers.config import ProviderConfig
from career_pathway.providers.errors import (
    AuthenticationError,
    RateLimitError,
    TransientError,
)
from career_pathway.providers.retry import with_retries


@pytest.fixture
def config():
    """Three retries with short delays."""
    return ProviderConfig(
        max_retries=3, retry_base_delay_ms=100, retry_max_delay_ms=1000
    )


@pytest.fixture
def sleeps():
    """Record requested sleep delays without sleeping; jitter pinned to 0."""
    recorded: list[float] = []

    async def fake_sleep(delay: float) -> None:
        recorded.append(delay)

    with (
        patch("career_pathway.providers.retry.asyncio.sleep", side_effect=fake_sleep),
        patch("career_pathway.providers.retry.random.uniform", return_value=0),
    ):
        yield recorded


class TestWithRetries:
    """Tests for retry and give-up behaviour."""

    @pytest.mark.asyncio
    async def test_success_first_try(self, config, sleeps):
        """No retry and no sleep when the call succeeds."""
        func = AsyncMock(return_value="ok")

        assert await with_retries(func, config) == "ok"
        func.assert_called_once()
        assert sleeps == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error", [TransientError("temporary"), RateLimitError("slow down")]
    )
    async def test_retryable_errors_are_retried(self, config, sleeps, error):
        """Transient and rate-limit errors are retried."""
        func = AsyncMock(side_effect=[error, "ok"])

        assert await with_retries(func, config) == "ok"
        assert func.call_count == 2
        assert len(sleeps) == 1

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self, config, sleeps):  # noqa: ARG002
        """The last error is re-raised after max_retries + 1 attempts."""
        func = AsyncMock(side_effect=TransientError("still down"))

        with pytest.raises(TransientError, match="still down"):
            await with_retries(func, config)

        assert func.call_count == 4

    @pytest.mark.asyncio
    async def test_authentication_error_not_retried(self, config, sleeps):
        """Non-retryable errors propagate immediately."""
        func = AsyncMock(side_effect=AuthenticationError("bad key"))

        with pytest.raises(AuthenticationError):
            await with_retries(func, config)

        func.assert_called_once()
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_default_config_retries_once(self, sleeps):  # noqa: ARG002
        """The default policy makes two attempts in total."""
        func = AsyncMock(side_effect=TransientError("down"))

        with pytest.raises(TransientError):
            await with_retries(func, ProviderConfig())

        assert func.call_count == 2

    @pytest.mark.asyncio
    async def test_custom_retryable_errors(self, config, sleeps):  # noqa: ARG002
        """Errors outside retryable_errors are not retried."""
        func = AsyncMock(side_effect=RateLimitError("slow down"))

        with pytest.raises(RateLimitError):
            await with_retries(func, config, retryable_errors=(TransientError,))

        func.assert_called_once()


class TestBackoffDelays:
    """Tests for delay calculation."""

    @pytest.mark.asyncio
    async def test_exponential_backoff(self, config, sleeps):
        """Delays double each attempt."""
        func = AsyncMock(side_effect=[TransientError("x")] * 3 + ["ok"])

        await with_retries(func, config)

        assert sleeps == pytest.approx([0.1, 0.2, 0.4])

    @pytest.mark.asyncio
    async def test_delay_capped(self, sleeps):
        """Backoff never exceeds retry_max_delay_ms."""
        config = ProviderConfig(
            max_retries=3, retry_base_delay_ms=600, retry_max_delay_ms=1000
        )
        func = AsyncMock(side_effect=[TransientError("x")] * 2 + ["ok"])

        await with_retries(func, config)

        assert sleeps == pytest.approx([0.6, 1.0])

    @pytest.mark.asyncio
    async def test_rate_limit_hint_used(self, config, sleeps):
        """retry_after_seconds replaces backoff, capped at the max delay."""
        func = AsyncMock(
            side_effect=[
                RateLimitError("slow", retry_after_seconds=0.5),
                RateLimitError("slow", retry_after_seconds=30.0),
                "ok",
            ]
        )

        await with_retries(func, config)

        assert sleeps == pytest.approx([0.5, 1.0])
