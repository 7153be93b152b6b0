"""Provider error taxonomy.

Adapters translate SDK exceptions into these classes so the advisory
loop can treat every provider the same way: retry what is transient,
fall back to the deterministic interview on everything else.
"""


__all__ = [
    "ProviderError",
    "RateLimitError",
    "AuthenticationError",
    "ModelNotFoundError",
    "ContentFilterError",
    "ContextLengthError",
    "TransientError",
    "bad_request_error",
    "retry_after_seconds",
]


class ProviderError(Exception):
    """Base class for all provider errors.

    Catching this one class is enough for callers that only need to know
    "the model did not answer".
    """


class RateLimitError(ProviderError):
    """Rate limit exceeded.

    Carries the provider's retry-after hint when one was sent.
    """

    def __init__(self, message: str, retry_after_seconds: float | None = None):
        """Initialize RateLimitError.

        Args:
            message: Error description from the provider.
            retry_after_seconds: Optional hint from provider on when to retry.
        """
        super().__init__(message)
        self.retry_after_seconds = retry_after_seconds


class AuthenticationError(ProviderError):
    """Missing, invalid or expired API key. Never retried."""


class ModelNotFoundError(ProviderError):
    """Routed model doesn't exist or isn't accessible with this key."""


class ContentFilterError(ProviderError):
    """Prompt or completion blocked by the provider's safety filter."""


class ContextLengthError(ProviderError):
    """Prompt exceeded the model's context window."""


class TransientError(ProviderError):
    """Temporary failure (network, timeout, server overload). Safe to retry."""


def retry_after_seconds(response: object) -> float | None:
    """Read a numeric ``retry-after`` header from an SDK error's response.

    Returns None when there is no response, no header, or the header is
    an HTTP date rather than a number of seconds.
    """
    headers = getattr(response, "headers", None)
    if not headers:
        return None
    value = headers.get("retry-after")
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def bad_request_error(message: str) -> ProviderError:
    """Classify a 400 from either SDK by its message text."""
    lowered = message.lower()
    if "context_length" in lowered or "too long" in lowered:
        return ContextLengthError(message)
    if "content_policy" in lowered:
        return ContentFilterError(message)
    return ProviderError(message)
