"""Journal unlock lockout policy and entry helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

DEFAULT_MAX_FAILED_ATTEMPTS = 3
DEFAULT_LOCKOUT = timedelta(minutes=15)


@dataclass(frozen=True)
class LockoutState:
    """Outcome of a failed PIN attempt."""

    failed_attempts: int
    locked_until: datetime | None
    attempts_remaining: int


@dataclass(frozen=True)
class JournalLockPolicy:
    """Lock the journal after repeated wrong PINs.

    Once ``max_failed_attempts`` consecutive failures are reached the
    journal stays locked for ``lockout``.  Every further failure while at or
    above the limit restarts the lockout.
    """

    max_failed_attempts: int = DEFAULT_MAX_FAILED_ATTEMPTS
    lockout: timedelta = DEFAULT_LOCKOUT

    def is_locked(self, locked_until: datetime | None, now: datetime) -> bool:
        return locked_until is not None and locked_until > now

    def register_failure(self, failed_attempts: int, now: datetime) -> LockoutState:
        attempts = failed_attempts + 1
        locked_until = now + self.lockout if attempts >= self.max_failed_attempts else None
        return LockoutState(
            failed_attempts=attempts,
            locked_until=locked_until,
            attempts_remaining=max(0, self.max_failed_attempts - attempts),
        )


def count_words(content: str) -> int:
    return len(content.split())
