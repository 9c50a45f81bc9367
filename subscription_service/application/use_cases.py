"""Application use cases following hexagonal architecture principles.

Each use case orchestrates one operation: it loads records through the
repository ports, asks the domain model to validate and apply the change,
collects payment through the gateway port where needed and only then
persists. A failure at any step leaves stored state untouched.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..domain.enums import ContentType
from ..domain.exceptions import (
    DuplicateSubscriptionError,
    InvalidConfigurationError,
    NotFoundError,
    PaymentFailedError,
    SubscriptionServiceError,
    UnauthorizedError,
)
from ..domain.models import (
    MAX_CONTENT_FIELD_LENGTH,
    AccessDecision,
    Content,
    PaymentReceipt,
    Provider,
    Subscription,
)
from ..domain.services import AccessGate
from ..domain.value_objects import Identity, SubscriptionKey
from ..ports.clock import ClockPort
from ..ports.logger import LoggerPort
from ..ports.payment_gateway import PaymentGatewayPort
from ..ports.repository import ContentRepository, ProviderRepository, SubscriptionRepository
from .locking import KeyedLockRegistry, provider_lock_key, subscription_lock_key


class UseCase(Protocol):
    """Protocol for use case implementations."""

    async def execute(self, request: Any) -> Any:
        """Execute the use case with the given request."""
        ...


async def load_provider(providers: ProviderRepository, provider_id: str) -> Provider:
    provider = await providers.get(provider_id)
    if provider is None:
        raise NotFoundError("Provider", provider_id)
    return provider


async def load_subscription(
    subscriptions: SubscriptionRepository, key: SubscriptionKey
) -> Subscription:
    subscription = await subscriptions.get(key)
    if subscription is None:
        raise NotFoundError("Subscription", str(key))
    return subscription


async def collect_payment(
    gateway: PaymentGatewayPort, subscriber: Identity, provider: Provider
) -> PaymentReceipt:
    """Charge one subscription period or raise PaymentFailedError.

    A gateway that raises is treated the same as a declined transfer.
    """
    amount = provider.subscription_price
    try:
        receipt = await gateway.transfer(subscriber, provider.authority, amount)
    except SubscriptionServiceError:
        raise
    except Exception as e:
        raise PaymentFailedError(f"gateway error: {e}", amount=amount) from e

    if not receipt.success:
        raise PaymentFailedError(receipt.reason or "declined", amount=amount)
    return receipt


async def reverse_payment(
    gateway: PaymentGatewayPort, receipt: PaymentReceipt, logger: LoggerPort
) -> None:
    """Send a collected payment back after the ledger failed to record it.

    A failed reversal is logged for manual settlement and never masks the
    error that triggered it.
    """
    context = {
        "transaction_id": receipt.transaction_id,
        "from_identity": str(receipt.to_identity),
        "to_identity": str(receipt.from_identity),
        "amount": receipt.amount,
    }
    try:
        reversal = await gateway.transfer(
            receipt.to_identity, receipt.from_identity, receipt.amount
        )
    except Exception as e:
        logger.exception("Payment reversal failed", exc_info=e, **context)
        return

    if not reversal.success:
        logger.error("Payment reversal declined", reason=reversal.reason, **context)
        return
    logger.warning("Payment reversed", reversal_id=reversal.transaction_id, **context)


@contextmanager
def provider_terms() -> Iterator[None]:
    """Report invalid provider terms as InvalidConfigurationError."""
    try:
        yield
    except ValidationError as e:
        raise InvalidConfigurationError(
            f"Invalid provider configuration: {e.error_count()} error(s)",
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e


class RegisterProviderRequest(BaseModel):
    """Request model for provider registration."""

    model_config = ConfigDict(strict=True)

    authority: str = Field(..., description="Identity that owns the provider")
    subscription_price: int = Field(..., description="Price per period, smallest currency unit")
    subscription_duration: int = Field(..., description="Period length in seconds")


class RegisterProviderUseCase:
    """Use case for registering a new content provider."""

    def __init__(self, providers: ProviderRepository, logger: LoggerPort):
        self._providers = providers
        self._logger = logger

    async def execute(self, request: RegisterProviderRequest) -> Provider:
        """Register a provider with zero subscribers.

        Raises:
            InvalidConfigurationError: If price is negative or duration is not positive
        """
        with provider_terms():
            provider = Provider(
                authority=request.authority,
                subscription_price=request.subscription_price,
                subscription_duration=request.subscription_duration,
            )

        await self._providers.save(provider)
        self._logger.info(
            "Provider registered",
            provider_id=provider.provider_id,
            authority=str(provider.authority),
            price=provider.subscription_price,
            duration=provider.subscription_duration,
        )
        return provider


class PublishContentRequest(BaseModel):
    """Request model for publishing a content record."""

    provider_id: str = Field(..., min_length=1)
    authority: str = Field(..., description="Identity claiming to own the provider")
    content_id: str = Field(..., min_length=1, max_length=MAX_CONTENT_FIELD_LENGTH)
    content_hash: str = Field(..., min_length=1, max_length=MAX_CONTENT_FIELD_LENGTH)
    content_type: ContentType

    @field_validator("content_type", mode="before")
    @classmethod
    def parse_content_type(cls, v: Any) -> Any:
        """Accept content type names in any case."""
        if isinstance(v, str):
            return v.lower()
        return v


class PublishContentUseCase:
    """Use case for adding an immutable record to a provider's catalog."""

    def __init__(
        self,
        providers: ProviderRepository,
        contents: ContentRepository,
        clock: ClockPort,
        logger: LoggerPort,
    ):
        self._providers = providers
        self._contents = contents
        self._clock = clock
        self._logger = logger

    async def execute(self, request: PublishContentRequest) -> Content:
        """Publish content stamped with the current time.

        Raises:
            NotFoundError: If the provider does not exist
            UnauthorizedError: If the caller is not the provider's authority
        """
        provider = await load_provider(self._providers, request.provider_id)
        authority = Identity.of(request.authority)
        if authority != provider.authority:
            raise UnauthorizedError(
                "Only the provider authority can publish content",
                details={"provider_id": provider.provider_id, "caller": str(authority)},
            )

        content = Content(
            provider_id=provider.provider_id,
            content_id=request.content_id,
            content_hash=request.content_hash,
            content_type=request.content_type,
            timestamp=self._clock.now(),
        )
        await self._contents.add(content)
        self._logger.info(
            "Content published",
            provider_id=provider.provider_id,
            content_record_id=content.content_record_id,
            content_id=content.content_id,
            content_type=content.content_type.value,
        )
        return content


class OpenSubscriptionRequest(BaseModel):
    """Request model for opening a subscription."""

    provider_id: str = Field(..., min_length=1)
    subscriber: str = Field(..., description="Paying subscriber identity")
    requested_start_time: int = Field(..., description="Window start, now or later")


class OpenSubscriptionUseCase:
    """Use case for opening a paid subscription window.

    Holds the pair lock for the whole operation and the provider lock
    while the new record and the subscriber counter are committed.
    """

    def __init__(
        self,
        providers: ProviderRepository,
        subscriptions: SubscriptionRepository,
        payment_gateway: PaymentGatewayPort,
        clock: ClockPort,
        locks: KeyedLockRegistry,
        logger: LoggerPort,
    ):
        self._providers = providers
        self._subscriptions = subscriptions
        self._payment_gateway = payment_gateway
        self._clock = clock
        self._locks = locks
        self._logger = logger

    async def execute(self, request: OpenSubscriptionRequest) -> Subscription:
        """Open a subscription starting at the requested time.

        Raises:
            NotFoundError: If the provider does not exist
            InvalidStartTimeError: If the requested start is in the past
            DuplicateSubscriptionError: If the pair already has a subscription
            PaymentFailedError: If the payment gateway declines or errors
        """
        subscriber = Identity.of(request.subscriber)
        key = SubscriptionKey(provider_id=request.provider_id, subscriber=subscriber)

        async with self._locks.hold(subscription_lock_key(*key.as_tuple())):
            provider = await load_provider(self._providers, request.provider_id)
            now = self._clock.now()
            subscription = Subscription.open(
                provider, subscriber, request.requested_start_time, now
            )
            if await self._subscriptions.get(key) is not None:
                raise DuplicateSubscriptionError(*key.as_tuple())

            receipt = await collect_payment(self._payment_gateway, subscriber, provider)
            try:
                provider = await self._commit(subscription)
            except Exception:
                await reverse_payment(self._payment_gateway, receipt, self._logger)
                raise

        self._logger.info(
            "Subscription opened",
            provider_id=provider.provider_id,
            subscriber=str(subscriber),
            start_time=subscription.start_time,
            end_time=subscription.end_time,
            transaction_id=receipt.transaction_id,
        )
        return subscription

    async def _commit(self, subscription: Subscription) -> Provider:
        """Store the record and bump the counter, or neither."""
        async with self._locks.hold(provider_lock_key(subscription.provider_id)):
            # Re-read so concurrent opens on other pairs are counted
            provider = await load_provider(self._providers, subscription.provider_id)
            provider.record_new_subscriber()
            await self._subscriptions.create(subscription)
            try:
                await self._providers.save(provider)
            except Exception:
                await self._subscriptions.delete(subscription.key)
                raise
        return provider


class RenewSubscriptionRequest(BaseModel):
    """Request model for renewing a subscription."""

    provider_id: str = Field(..., min_length=1)
    subscriber: str


class RenewSubscriptionUseCase:
    """Use case for extending an elapsed subscription by one period."""

    def __init__(
        self,
        providers: ProviderRepository,
        subscriptions: SubscriptionRepository,
        payment_gateway: PaymentGatewayPort,
        clock: ClockPort,
        locks: KeyedLockRegistry,
        logger: LoggerPort,
    ):
        self._providers = providers
        self._subscriptions = subscriptions
        self._payment_gateway = payment_gateway
        self._clock = clock
        self._locks = locks
        self._logger = logger

    async def execute(self, request: RenewSubscriptionRequest) -> Subscription:
        """Renew a subscription whose window has fully elapsed.

        The new window is ``[old end, old end + duration]`` no matter how
        late the renewal is.

        Raises:
            NotFoundError: If the provider or subscription does not exist
            AutoRenewalDisabledError: If auto-renewal is switched off
            SubscriptionStillActiveError: If the current window has not elapsed
            PaymentFailedError: If the payment gateway declines or errors
        """
        subscriber = Identity.of(request.subscriber)
        key = SubscriptionKey(provider_id=request.provider_id, subscriber=subscriber)

        async with self._locks.hold(subscription_lock_key(*key.as_tuple())):
            provider = await load_provider(self._providers, request.provider_id)
            subscription = await load_subscription(self._subscriptions, key)
            now = self._clock.now()
            renewed = subscription.renew(provider, now)

            receipt = await collect_payment(self._payment_gateway, subscriber, provider)
            try:
                await self._subscriptions.update(renewed)
            except Exception:
                await reverse_payment(self._payment_gateway, receipt, self._logger)
                raise
            subscription = renewed

        self._logger.info(
            "Subscription renewed",
            provider_id=provider.provider_id,
            subscriber=str(subscriber),
            start_time=subscription.start_time,
            end_time=subscription.end_time,
            transaction_id=receipt.transaction_id,
        )
        return subscription


class ToggleAutoRenewalRequest(BaseModel):
    """Request model for flipping a subscription's auto-renewal flag."""

    provider_id: str = Field(..., min_length=1)
    subscriber: str = Field(..., description="Owner of the subscription record")
    caller: str = Field(..., description="Verified identity making the request")


class ToggleAutoRenewalUseCase:
    """Use case for flipping auto-renewal on a subscription."""

    def __init__(
        self,
        subscriptions: SubscriptionRepository,
        locks: KeyedLockRegistry,
        logger: LoggerPort,
    ):
        self._subscriptions = subscriptions
        self._locks = locks
        self._logger = logger

    async def execute(self, request: ToggleAutoRenewalRequest) -> Subscription:
        """Flip the flag. Only the subscriber may toggle their own record.

        Raises:
            NotFoundError: If the subscription does not exist
            UnauthorizedError: If the caller is not the subscriber
        """
        key = SubscriptionKey(provider_id=request.provider_id, subscriber=request.subscriber)
        caller = Identity.of(request.caller)

        async with self._locks.hold(subscription_lock_key(*key.as_tuple())):
            subscription = await load_subscription(self._subscriptions, key)
            subscription.toggle_auto_renewal(caller)
            await self._subscriptions.update(subscription)

        self._logger.info(
            "Auto-renewal toggled",
            provider_id=subscription.provider_id,
            subscriber=str(subscription.subscriber),
            auto_renewal=subscription.auto_renewal,
        )
        return subscription


class CheckAccessRequest(BaseModel):
    """Request model for an access check."""

    content_record_id: str = Field(..., min_length=1)
    provider_id: str = Field(
        ..., min_length=1, description="Provider of the presented subscription"
    )
    subscriber: str = Field(..., description="Owner of the presented subscription")
    caller: str = Field(..., description="Verified identity requesting access")


class CheckAccessUseCase:
    """Use case for gating content access on the subscription window.

    Read-only: takes no locks and never touches the payment gateway.
    """

    def __init__(
        self,
        subscriptions: SubscriptionRepository,
        contents: ContentRepository,
        clock: ClockPort,
        logger: LoggerPort,
        access_gate: AccessGate | None = None,
    ):
        self._subscriptions = subscriptions
        self._contents = contents
        self._clock = clock
        self._logger = logger
        self._access_gate = access_gate or AccessGate()

    async def execute(self, request: CheckAccessRequest) -> AccessDecision:
        """Grant access iff the presented subscription is active now.

        Raises:
            NotFoundError: If the content or subscription does not exist
            UnauthorizedError: If the subscription is not the caller's or is
                for another provider than the content
            InactiveSubscriptionError: If now is outside the window
        """
        content = await self._contents.get(request.content_record_id)
        if content is None:
            raise NotFoundError("Content", request.content_record_id)
        key = SubscriptionKey(provider_id=request.provider_id, subscriber=request.subscriber)
        subscription = await load_subscription(self._subscriptions, key)

        decision = self._access_gate.check_access(
            content, subscription, Identity.of(request.caller), self._clock.now()
        )
        self._logger.debug(
            "Access granted",
            content_record_id=content.content_record_id,
            subscriber=str(subscription.subscriber),
            checked_at=decision.checked_at,
        )
        return decision
