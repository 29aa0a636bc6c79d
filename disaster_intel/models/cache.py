from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, field_validator


class CacheEntry(BaseModel):
    """One row of the cache table."""
    key: str
    value: Any
    expires_at: datetime

    @field_validator("expires_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # Rows written by other clients may carry naive timestamps.
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
