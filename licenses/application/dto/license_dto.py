"""
License DTOs.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class StatusCacheEntry:
    """Memoized result of a remote validity check."""

    cache_key: str
    valid: bool
    fetched_at: float
    ttl: int

    def is_expired(self, now: float) -> bool:
        return now >= self.fetched_at + self.ttl
