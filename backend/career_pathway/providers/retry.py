"""Bounded retry for provider calls.

Transient failures back off exponentially with a little jitter; rate
limits wait for the provider's retry-after hint when one is given. Both
are capped by ``retry_max_delay_ms`` so a retry never outlives the
per-turn timeout by much.
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar

from career_pathway.providers.errors import RateLimitError, TransientError

__all__ = ["with_retries"]

if TYPE_CHECKING:
    from career_pathway.providers.config import ProviderConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

_JITTER_FRACTION = 0.1


def _delay_seconds(error: Exception, attempt: int, config: "ProviderConfig") -> float:
    """Seconds to wait before retry number ``attempt + 1``."""
    cap_seconds = config.retry_max_delay_ms / 1000
    if isinstance(error, RateLimitError) and error.retry_after_seconds:
        return min(error.retry_after_seconds, cap_seconds)

    backoff_ms = config.retry_base_delay_ms * 2**attempt
    backoff_ms += random.uniform(0, backoff_ms * _JITTER_FRACTION)  # nosec B311
    return min(backoff_ms / 1000, cap_seconds)


async def with_retries(
    func: Callable[[], Awaitable[T]],
    config: "ProviderConfig",
    retryable_errors: tuple[type[Exception], ...] = (TransientError, RateLimitError),
) -> T:
    """Await ``func`` with up to ``config.max_retries`` retries.

    Args:
        func: Zero-argument coroutine factory, called once per attempt.
        config: Provider configuration with the retry policy.
        retryable_errors: Exception types worth another attempt. Anything
            else propagates immediately.

    Returns:
        The first successful result.

    Raises:
        Exception: The last retryable error once attempts run out.
    """
    attempts = config.max_retries + 1
    for attempt in range(attempts):
        try:
            return await func()
        except retryable_errors as e:
            if attempt + 1 == attempts:
                raise
            delay = _delay_seconds(e, attempt, config)
            logger.warning(
                "Provider call failed (attempt %d/%d): %s. Retrying in %.2fs",
                attempt + 1,
                attempts,
                e,
                delay,
            )
            await asyncio.sleep(delay)

    raise RuntimeError("with_retries needs max_retries >= 0")
