"""Bounded retry with credential rotation, shared by every provider client."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from searchdeck.core.exceptions import (
    AuthFailure,
    NoCredentialsConfigured,
    ProviderExhausted,
    RateLimited,
)
from searchdeck.core.key_pool import KeyPool
from searchdeck.core.logging import fingerprint

logger = logging.getLogger(__name__)

T = TypeVar("T")

CredentialOperation = Callable[[str], Awaitable[T]]


@dataclass(frozen=True)
class RetryRotationPolicy:
    """Run an operation against pooled credentials until one succeeds.

    Attributes:
        provider: Name used in errors and logs
        min_attempts: Floor for the attempt budget; the budget is
            ``max(len(pool), min_attempts)``
        retry_unknown_errors: Whether failures other than AuthFailure and
            RateLimited also consume an attempt and continue. When False they
            propagate immediately.

    AuthFailure and RateLimited always mark the credential unhealthy and
    move on to the next candidate.
    """

    provider: str
    min_attempts: int = 1
    retry_unknown_errors: bool = False

    def max_attempts(self, pool: KeyPool) -> int:
        return max(len(pool), self.min_attempts)

    async def run(
        self,
        pool: KeyPool,
        operation: "CredentialOperation[T]",
        default_credential: str | None = None,
    ) -> T:
        """Execute ``operation(credential)`` with rotation.

        Args:
            pool: Credential pool to draw candidates from
            operation: Coroutine function performing one attempt
            default_credential: Single credential used when the pool is empty

        Returns:
            The first successful result.

        Raises:
            NoCredentialsConfigured: Pool empty and no default credential
            ProviderExhausted: Attempt budget spent without success
        """
        if len(pool) == 0 and not default_credential:
            raise NoCredentialsConfigured(self.provider)

        max_attempts = self.max_attempts(pool)
        attempts = 0
        last_error: Exception | None = None

        while attempts < max_attempts:
            credential = pool.next_candidate() if len(pool) else default_credential
            if credential is None:
                break

            try:
                return await operation(credential)
            except (AuthFailure, RateLimited) as e:
                pool.mark_unhealthy(credential)
                attempts += 1
                last_error = e
                logger.warning(
                    "%s rejected key %s (%s), rotating (attempt %s/%s)",
                    self.provider,
                    fingerprint(credential),
                    e.error_type.value,
                    attempts,
                    max_attempts,
                )
            except Exception as e:
                if not self.retry_unknown_errors:
                    raise
                attempts += 1
                last_error = e
                logger.warning(
                    "%s request failed with key %s: %s (attempt %s/%s)",
                    self.provider,
                    fingerprint(credential),
                    e,
                    attempts,
                    max_attempts,
                )

        raise ProviderExhausted(self.provider, attempts) from last_error
