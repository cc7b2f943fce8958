"""Error type enumeration for searchdeck.

Provides type-safe error categorization for logs and error responses.
"""

from enum import Enum


class ErrorType(str, Enum):
    """Error type categories for provider client failures.

    These error types are used for:
    - ProviderClientError.error_type
    - JSON error bodies returned by the HTTP API
    - Rotation log lines
    """

    # Configuration
    NO_CREDENTIALS = "no_credentials"  # Pool empty and no default credential

    # Rotation triggers
    AUTH_ERROR = "auth_error"  # 401/403 from the provider
    RATE_LIMIT = "rate_limit"  # 429 from the provider

    # Terminal provider failures
    PROVIDER_ERROR = "provider_error"  # Any other non-2xx or transport failure
    MALFORMED_RESPONSE = "malformed_response"  # Payload shape violates expectations
    TIMEOUT = "timeout"  # Asynchronous job did not finish in time
    EXHAUSTED = "provider_exhausted"  # Retry budget spent

    # Catch-all
    UNEXPECTED_ERROR = "unexpected_error"
