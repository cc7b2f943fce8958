"""
Exception hierarchy for provider clients.

All exceptions inherit from ProviderClientError, allowing callers to
catch every terminal client failure with a single except clause.

Rotation is internal to a client: AuthFailure and RateLimited are raised
by a single attempt and consumed by the retry policy. Callers only ever
see NoCredentialsConfigured, ProviderError (and its subclasses) or
ProviderExhausted.

Example:
    >>> try:
    ...     await clients.image.generate_image("a lighthouse at dusk")
    ... except ProviderClientError as e:
    ...     print(f"{e.provider}: {e}")
"""

from __future__ import annotations

from .error_types import ErrorType


class ProviderClientError(Exception):
    """Base exception for all provider client errors.

    Attributes:
        provider: Name of the provider family or backend (e.g. "replicate")
        message: Human-readable explanation
    """

    error_type: ErrorType = ErrorType.UNEXPECTED_ERROR

    def __init__(self, provider: str, message: str) -> None:
        self.provider = provider
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(provider={self.provider!r}, message={self.message!r})"


class NoCredentialsConfigured(ProviderClientError):
    """Raised when a provider's pool is empty and no default credential resolves.

    User-actionable; surfaced verbatim.

    Example:
        >>> await clients.image.generate_image("cat", provider=ImageProvider.STABILITY)
        >>> NoCredentialsConfigured: No API keys configured for stability.
    """

    error_type = ErrorType.NO_CREDENTIALS

    def __init__(self, provider: str) -> None:
        super().__init__(provider, f"No API keys configured for {provider}.")


class AuthFailure(ProviderClientError):
    """Raised when the provider rejects a credential (HTTP 401/403)."""

    error_type = ErrorType.AUTH_ERROR

    def __init__(self, provider: str, status_code: int, message: str) -> None:
        self.status_code = status_code
        super().__init__(provider, message)


class RateLimited(ProviderClientError):
    """Raised when the provider throttles a credential (HTTP 429)."""

    error_type = ErrorType.RATE_LIMIT

    def __init__(self, provider: str, message: str) -> None:
        self.status_code = 429
        super().__init__(provider, message)


class ProviderError(ProviderClientError):
    """Raised for any non-auth, non-rate-limit failure from a provider.

    Attributes:
        status_code: HTTP status code (0 for transport errors)
    """

    error_type = ErrorType.PROVIDER_ERROR

    def __init__(self, provider: str, message: str, status_code: int = 0) -> None:
        self.status_code = status_code
        super().__init__(provider, message)


class MalformedResponse(ProviderError):
    """Raised when a provider payload does not have the expected shape."""

    error_type = ErrorType.MALFORMED_RESPONSE


class ImageJobTimeout(ProviderError):
    """Raised when an asynchronous image job is still running after the poll ceiling."""

    error_type = ErrorType.TIMEOUT

    def __init__(self, provider: str, job_id: str, polls: int) -> None:
        self.job_id = job_id
        self.polls = polls
        super().__init__(
            provider,
            f"Image job {job_id} did not finish after {polls} status checks",
        )


class ProviderExhausted(ProviderClientError):
    """Raised when every allowed attempt against a provider has failed.

    Attributes:
        attempts: Number of attempts made before giving up
    """

    error_type = ErrorType.EXHAUSTED

    def __init__(self, provider: str, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(
            provider,
            f"Failed to get a response from {provider} after {attempts} attempt"
            f"{'s' if attempts != 1 else ''}. Check your API keys.",
        )


__all__ = [
    "ProviderClientError",
    "NoCredentialsConfigured",
    "AuthFailure",
    "RateLimited",
    "ProviderError",
    "MalformedResponse",
    "ImageJobTimeout",
    "ProviderExhausted",
]
