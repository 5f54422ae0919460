"""
Base model for records kept in the durable store.

Every stored record carries an opaque storage identity (``_id``) that is
assigned by the store and is distinct from any domain identifier, plus
creation/update timestamps. All timestamps are timezone-aware UTC.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utcnow() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class StoredRecord(BaseModel):
    """Fields shared by all persisted records."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
    )

    storage_id: Optional[str] = Field(
        default=None,
        alias="_id",
        description="Opaque storage identity assigned by the store"
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        description="When the record was first stored"
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        description="Last update timestamp"
    )

    @field_validator('created_at', 'updated_at')
    @classmethod
    def normalize_timestamps(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    def to_record(self) -> dict:
        """Convert to a plain dict for the store (storage identity omitted when unset)."""
        return self.model_dump(by_alias=True, exclude_none=True)
