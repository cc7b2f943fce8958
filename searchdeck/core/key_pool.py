"""Credential pool with round-robin rotation and health tracking."""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from searchdeck.core.logging import fingerprint


class CredentialHealth(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


@dataclass(frozen=True)
class CredentialStatus:
    """Display-safe view of one pooled credential."""

    fingerprint: str
    status: CredentialHealth


class KeyPool:
    """Ordered credentials for one provider plus health state and a rotation cursor.

    Responsibilities:
    - Keep credentials deduplicated in insertion order
    - Hand out the next healthy credential, round-robin from index 0
    - Track which credentials the provider rejected

    Unhealthy credentials are skipped but never removed; only
    set_credentials() clears health. When every credential is unhealthy,
    ``fallback_when_exhausted`` decides whether next_candidate() still returns
    the credential at the cursor as a last resort or returns None.

    No method performs I/O or awaits, so pool state only changes between
    suspension points of the calling coroutine.
    """

    def __init__(
        self,
        provider: str,
        credentials: Iterable[str] = (),
        fallback_when_exhausted: bool = True,
    ) -> None:
        self.provider = provider
        self.fallback_when_exhausted = fallback_when_exhausted
        self._credentials: list[str] = []
        self._unhealthy: set[str] = set()
        self._cursor = 0
        self.set_credentials(credentials)

    def set_credentials(self, credentials: Iterable[str]) -> None:
        """Replace the pool, trimming blanks and duplicates; resets cursor and health."""
        cleaned: list[str] = []
        for credential in credentials:
            credential = credential.strip()
            if credential and credential not in cleaned:
                cleaned.append(credential)

        self._credentials = cleaned
        self._unhealthy.clear()
        self._cursor = 0

    def next_candidate(self) -> str | None:
        """Return the next healthy credential at or after the cursor.

        Returns:
            A credential, or None when the pool is empty (or fully unhealthy
            and the pool does not fall back).
        """
        if not self._credentials:
            return None

        size = len(self._credentials)
        for offset in range(size):
            idx = (self._cursor + offset) % size
            credential = self._credentials[idx]
            if credential not in self._unhealthy:
                self._cursor = (idx + 1) % size
                return credential

        if self.fallback_when_exhausted:
            credential = self._credentials[self._cursor]
            self._cursor = (self._cursor + 1) % size
            return credential
        return None

    def mark_unhealthy(self, credential: str) -> None:
        # Credentials outside the pool (e.g. an environment default) are ignored
        if credential in self._credentials:
            self._unhealthy.add(credential)

    def is_healthy(self, credential: str) -> bool:
        return credential in self._credentials and credential not in self._unhealthy

    @property
    def healthy_count(self) -> int:
        return len(self._credentials) - len(self._unhealthy)

    @property
    def credentials(self) -> tuple[str, ...]:
        return tuple(self._credentials)

    @property
    def cursor(self) -> int:
        return self._cursor

    def snapshot(self) -> list[CredentialStatus]:
        return [
            CredentialStatus(
                fingerprint=fingerprint(credential),
                status=(
                    CredentialHealth.UNHEALTHY
                    if credential in self._unhealthy
                    else CredentialHealth.HEALTHY
                ),
            )
            for credential in self._credentials
        ]

    def __len__(self) -> int:
        return len(self._credentials)

    def __contains__(self, credential: object) -> bool:
        return credential in self._credentials

    def __repr__(self) -> str:
        return (
            f"KeyPool(provider={self.provider!r}, size={len(self)}, "
            f"healthy={self.healthy_count}, cursor={self._cursor})"
        )
