"""
Core types for the Viteset client.

SCOPE:
- SubscriptionStatus enum (controller lifecycle)
- FetchResult / FetchOutcome (classification of one fetch)
- Update (what a subscriber receives)
- No I/O, no external dependencies
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .exceptions import FetchError


class SubscriptionStatus(Enum):
    """
    Subscription controller lifecycle states.

    IDLE: Client created, never subscribed
    ACTIVE: Background polling task is live
    CANCELED: Subscription stopped; terminal

    State transitions:
    - IDLE -> ACTIVE (via subscribe())
    - ACTIVE -> CANCELED (via cancel())

    No other transitions are valid. A canceled client is not reused.
    """
    IDLE = "idle"
    ACTIVE = "active"
    CANCELED = "canceled"


class FetchResult(Enum):
    """Classification of a single conditional fetch."""
    UNCHANGED = "unchanged"
    CHANGED = "changed"
    FAILED = "failed"


@dataclass(frozen=True)
class FetchOutcome:
    """
    Result of one BlobFetcher.fetch() call.

    - UNCHANGED: value, etag and error are all None
    - CHANGED: value holds the body, etag the new validator (may be None)
    - FAILED: error holds the FetchError
    """

    result: FetchResult
    value: Optional[bytes] = None
    etag: Optional[str] = None
    error: Optional[FetchError] = None

    @classmethod
    def unchanged(cls) -> "FetchOutcome":
        return cls(result=FetchResult.UNCHANGED)

    @classmethod
    def changed(cls, value: bytes, etag: Optional[str]) -> "FetchOutcome":
        return cls(result=FetchResult.CHANGED, value=value, etag=etag)

    @classmethod
    def failed(cls, error: FetchError) -> "FetchOutcome":
        return cls(result=FetchResult.FAILED, error=error)


@dataclass(frozen=True)
class Update:
    """
    A blob's latest value, or the error from the last fetch.

    Exactly one of value/error is set. Check error before reading value.
    Fetch errors are usually transient; logging them and keeping the last
    known value is a reasonable reaction.
    """

    value: Optional[bytes] = None
    error: Optional[FetchError] = None

    def __post_init__(self):
        """Validate that exactly one field is populated."""
        if (self.value is None) == (self.error is None):
            raise ValueError("Update must carry exactly one of value or error")

    @classmethod
    def changed(cls, value: bytes) -> "Update":
        return cls(value=value)

    @classmethod
    def failed(cls, error: FetchError) -> "Update":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        """True if this update carries a value."""
        return self.error is None

    def __repr__(self) -> str:
        if self.error is not None:
            return f"Update(error={self.error!r})"
        return f"Update(value=<{len(self.value)} bytes>)"
