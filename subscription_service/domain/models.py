"""Domain models: providers, subscriptions and content records.

All timestamps are signed unix seconds supplied by the clock port. The
models never read the clock themselves so their behaviour is fully
determined by their inputs.
"""

from __future__ import annotations

import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .enums import ContentType, SubscriptionState
from .exceptions import (
    AutoRenewalDisabledError,
    InvalidStartTimeError,
    SubscriptionStillActiveError,
    UnauthorizedError,
)
from .value_objects import Identity, SubscriptionKey

# Fixed-size record layout: 64 bytes per string minus a 4-byte length prefix
MAX_CONTENT_FIELD_LENGTH = 60


def _new_id() -> str:
    return str(uuid.uuid4())


def _parse_identity(v: Any) -> Any:
    if isinstance(v, str):
        return Identity(value=v)
    return v


class Provider(BaseModel):
    """A content provider and its subscription terms.

    Business Rules:
    - Price and duration are fixed at registration
    - The subscriber counter only ever goes up
    """

    model_config = ConfigDict(validate_assignment=True)

    provider_id: str = Field(default_factory=_new_id, frozen=True)
    authority: Identity = Field(..., frozen=True)
    subscription_price: int = Field(..., ge=0, strict=True, frozen=True)
    subscription_duration: int = Field(..., gt=0, strict=True, frozen=True)
    total_subscribers: int = Field(default=0, ge=0)

    @field_validator("authority", mode="before")
    @classmethod
    def parse_authority(cls, v: Any) -> Any:
        """Accept plain strings for the authority."""
        return _parse_identity(v)

    def record_new_subscriber(self) -> None:
        """Count one more subscription opened against this provider."""
        self.total_subscribers += 1

    def __str__(self) -> str:
        return f"Provider({self.provider_id} by {self.authority})"


class Subscription(BaseModel):
    """Entitlement record for one (provider, subscriber) pair.

    This aggregate owns the subscription window and enforces the lifecycle
    rules around opening, renewing and toggling auto-renewal. Payment is
    orchestrated by the application layer between the precondition checks
    and the state change.
    """

    model_config = ConfigDict(validate_assignment=True)

    subscriber: Identity = Field(..., frozen=True)
    provider_id: str = Field(..., min_length=1, frozen=True)
    start_time: int
    end_time: int
    last_payment: int
    auto_renewal: bool = True

    @field_validator("subscriber", mode="before")
    @classmethod
    def parse_subscriber(cls, v: Any) -> Any:
        """Accept plain strings for the subscriber."""
        return _parse_identity(v)

    @model_validator(mode="after")
    def check_window(self) -> Subscription:
        if self.start_time > self.end_time:
            raise ValueError("start_time must not be after end_time")
        return self

    @property
    def key(self) -> SubscriptionKey:
        return SubscriptionKey(provider_id=self.provider_id, subscriber=self.subscriber)

    @classmethod
    def open(
        cls,
        provider: Provider,
        subscriber: Identity,
        requested_start_time: int,
        now: int,
    ) -> Subscription:
        """Build a new subscription starting at the requested time.

        The start time is the caller's choice and may lie in the future;
        only a start before ``now`` is rejected.

        Raises:
            InvalidStartTimeError: If ``requested_start_time`` precedes ``now``.
        """
        if requested_start_time < now:
            raise InvalidStartTimeError(requested_start_time, now)

        return cls(
            subscriber=subscriber,
            provider_id=provider.provider_id,
            start_time=requested_start_time,
            end_time=requested_start_time + provider.subscription_duration,
            last_payment=now,
            auto_renewal=True,
        )

    def ensure_renewable(self, now: int) -> None:
        """Check renewal preconditions without changing anything.

        Raises:
            AutoRenewalDisabledError: If auto-renewal is switched off.
            SubscriptionStillActiveError: If the current window has not elapsed.
        """
        if not self.auto_renewal:
            raise AutoRenewalDisabledError(self.provider_id, str(self.subscriber))
        if now < self.end_time:
            raise SubscriptionStillActiveError(self.end_time, now)

    def renew(self, provider: Provider, now: int) -> Subscription:
        """Return this subscription advanced by exactly one period.

        The new window starts where the old one ended, however late the
        renewal happens, so it may already lie partly or wholly in the past.
        The record itself is left untouched.
        """
        self.ensure_renewable(now)
        renewed = self.model_copy(
            update={
                "start_time": self.end_time,
                "end_time": self.end_time + provider.subscription_duration,
                "last_payment": now,
            }
        )
        return type(self).model_validate(
            {**renewed.model_dump(), "subscriber": renewed.subscriber}
        )

    def toggle_auto_renewal(self, caller: Identity) -> None:
        """Flip the auto-renewal flag. Only the subscriber may do this."""
        if caller != self.subscriber:
            raise UnauthorizedError(
                "Only the subscriber can toggle auto-renewal",
                details={"subscriber": str(self.subscriber), "caller": str(caller)},
            )
        self.auto_renewal = not self.auto_renewal

    def is_active_at(self, now: int) -> bool:
        return self.start_time <= now <= self.end_time

    def state_at(self, now: int) -> SubscriptionState:
        if now < self.start_time:
            return SubscriptionState.SCHEDULED
        if now > self.end_time:
            return SubscriptionState.EXPIRED
        return SubscriptionState.ACTIVE

    def is_due_for_renewal(self, now: int) -> bool:
        return self.auto_renewal and now >= self.end_time

    def __str__(self) -> str:
        return (
            f"Subscription({self.provider_id}/{self.subscriber} "
            f"[{self.start_time}, {self.end_time}])"
        )


class Content(BaseModel):
    """An immutable record proving a content hash was published by a provider."""

    model_config = ConfigDict(frozen=True)

    content_record_id: str = Field(default_factory=_new_id)
    provider_id: str = Field(..., min_length=1)
    content_id: str = Field(..., min_length=1, max_length=MAX_CONTENT_FIELD_LENGTH)
    content_hash: str = Field(..., min_length=1, max_length=MAX_CONTENT_FIELD_LENGTH)
    content_type: ContentType
    timestamp: int


class PaymentReceipt(BaseModel):
    """Outcome of a single payment gateway transfer."""

    model_config = ConfigDict(frozen=True)

    success: bool
    amount: int = Field(..., ge=0)
    from_identity: Identity
    to_identity: Identity
    transaction_id: str | None = None
    reason: str | None = None

    @field_validator("from_identity", "to_identity", mode="before")
    @classmethod
    def parse_identities(cls, v: Any) -> Any:
        return _parse_identity(v)

    @classmethod
    def approved(
        cls, from_identity: Identity, to_identity: Identity, amount: int
    ) -> PaymentReceipt:
        return cls(
            success=True,
            amount=amount,
            from_identity=from_identity,
            to_identity=to_identity,
            transaction_id=_new_id(),
        )

    @classmethod
    def declined(
        cls, from_identity: Identity, to_identity: Identity, amount: int, reason: str
    ) -> PaymentReceipt:
        return cls(
            success=False,
            amount=amount,
            from_identity=from_identity,
            to_identity=to_identity,
            reason=reason,
        )


class AccessDecision(BaseModel):
    """Result of a granted access check."""

    model_config = ConfigDict(frozen=True)

    granted: bool = True
    subscriber: Identity
    provider_id: str
    content_record_id: str
    checked_at: int
    window_start: int
    window_end: int
