"""Domain value objects following Domain-Driven Design principles.

Value objects give identities and record keys type safety and validation
instead of passing bare strings around.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Identity(BaseModel):
    """Value object representing a verified caller identity.

    The service treats identities as opaque, comparable tokens. Proving that
    a caller controls an identity happens before it reaches the service.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    value: str = Field(..., min_length=1, max_length=128, description="Opaque identity token")

    @field_validator("value")
    @classmethod
    def validate_identity(cls, v: str) -> str:
        """Identities must not contain whitespace or control characters."""
        if any(c.isspace() or ord(c) < 32 for c in v):
            raise ValueError("Identity cannot contain whitespace or control characters")
        return v

    @classmethod
    def of(cls, value: Identity | str) -> Identity:
        """Coerce a string or an existing identity into an Identity."""
        if isinstance(value, Identity):
            return value
        return cls(value=value)

    def __str__(self) -> str:
        """String representation returns the value."""
        return self.value

    def __eq__(self, other: Any) -> bool:
        """Equality comparison."""
        if isinstance(other, Identity):
            return self.value == other.value
        if isinstance(other, str):
            return self.value == other
        return False

    def __hash__(self) -> int:
        """Make hashable for use in sets and dicts."""
        return hash(self.value)


class SubscriptionKey(BaseModel):
    """Composite key of a subscription record: one per (provider, subscriber)."""

    model_config = ConfigDict(frozen=True)

    provider_id: str = Field(..., min_length=1)
    subscriber: Identity

    @field_validator("subscriber", mode="before")
    @classmethod
    def parse_subscriber(cls, v: Any) -> Identity:
        """Accept plain strings for the subscriber."""
        if isinstance(v, str):
            return Identity(value=v)
        return v

    def as_tuple(self) -> tuple[str, str]:
        """Return the key as a plain tuple for storage lookups."""
        return (self.provider_id, self.subscriber.value)

    def __str__(self) -> str:
        return f"{self.provider_id}/{self.subscriber}"
