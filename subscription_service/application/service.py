"""Subscription service facade.

Single entry point for a hosting layer. Wires the use cases to the ports,
shares one lock registry between them and logs every rejected operation
before re-raising it unchanged.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from functools import partial
from typing import Any, TypeVar

from ..domain.enums import ContentType, SubscriptionState
from ..domain.exceptions import NotFoundError, SubscriptionServiceError
from ..domain.models import AccessDecision, Content, Provider, Subscription
from ..domain.value_objects import Identity, SubscriptionKey
from ..ports.clock import ClockPort
from ..ports.logger import LoggerPort
from ..ports.payment_gateway import PaymentGatewayPort
from ..ports.repository import ContentRepository, ProviderRepository, SubscriptionRepository
from .locking import KeyedLockRegistry
from .use_cases import (
    CheckAccessRequest,
    CheckAccessUseCase,
    OpenSubscriptionRequest,
    OpenSubscriptionUseCase,
    PublishContentRequest,
    PublishContentUseCase,
    RegisterProviderRequest,
    RegisterProviderUseCase,
    RenewSubscriptionRequest,
    RenewSubscriptionUseCase,
    ToggleAutoRenewalRequest,
    ToggleAutoRenewalUseCase,
    load_provider,
    load_subscription,
    provider_terms,
)

T = TypeVar("T")


class SubscriptionService:
    """Provider registry, content catalog, subscription ledger and access gate.

    Example:
        >>> service = create_subscription_service(clock=ManualClock(1000))
        >>> provider = await service.register_provider("alice", 100, 2_592_000)
        >>> sub = await service.open_subscription(provider.provider_id, "bob", 1000)
        >>> (sub.start_time, sub.end_time)
        (1000, 2593000)
    """

    def __init__(
        self,
        providers: ProviderRepository,
        subscriptions: SubscriptionRepository,
        contents: ContentRepository,
        payment_gateway: PaymentGatewayPort,
        clock: ClockPort,
        logger: LoggerPort,
        locks: KeyedLockRegistry | None = None,
    ):
        self._providers = providers
        self._subscriptions = subscriptions
        self._contents = contents
        self._clock = clock
        self._logger = logger
        self._locks = locks if locks is not None else KeyedLockRegistry()

        self._register_provider = RegisterProviderUseCase(providers, logger)
        self._publish_content = PublishContentUseCase(providers, contents, clock, logger)
        self._open_subscription = OpenSubscriptionUseCase(
            providers, subscriptions, payment_gateway, clock, self._locks, logger
        )
        self._renew_subscription = RenewSubscriptionUseCase(
            providers, subscriptions, payment_gateway, clock, self._locks, logger
        )
        self._toggle_auto_renewal = ToggleAutoRenewalUseCase(subscriptions, self._locks, logger)
        self._check_access = CheckAccessUseCase(subscriptions, contents, clock, logger)

    @property
    def clock(self) -> ClockPort:
        return self._clock

    @property
    def locks(self) -> KeyedLockRegistry:
        return self._locks

    @property
    def renew_use_case(self) -> RenewSubscriptionUseCase:
        return self._renew_subscription

    @property
    def subscriptions(self) -> SubscriptionRepository:
        return self._subscriptions

    # Provider registry

    async def register_provider(
        self, authority: Identity | str, subscription_price: int, subscription_duration: int
    ) -> Provider:
        def make_request() -> RegisterProviderRequest:
            with provider_terms():
                return RegisterProviderRequest(
                    authority=str(authority),
                    subscription_price=subscription_price,
                    subscription_duration=subscription_duration,
                )

        return await self._run(
            "register_provider",
            self._register_provider.execute,
            make_request,
            authority=str(authority),
        )

    async def get_provider(self, provider_id: str) -> Provider:
        return await load_provider(self._providers, provider_id)

    # Content catalog

    async def publish_content(
        self,
        provider_id: str,
        authority: Identity | str,
        content_id: str,
        content_hash: str,
        content_type: ContentType | str,
    ) -> Content:
        request = partial(
            PublishContentRequest,
            provider_id=provider_id,
            authority=str(authority),
            content_id=content_id,
            content_hash=content_hash,
            content_type=content_type,
        )
        return await self._run(
            "publish_content",
            self._publish_content.execute,
            request,
            provider_id=provider_id,
            caller=str(authority),
        )

    async def get_content(self, content_record_id: str) -> Content:
        content = await self._contents.get(content_record_id)
        if content is None:
            raise NotFoundError("Content", content_record_id)
        return content

    async def list_content(self, provider_id: str) -> list[Content]:
        await load_provider(self._providers, provider_id)
        return list(await self._contents.list_by_provider(provider_id))

    # Subscription ledger

    async def open_subscription(
        self, provider_id: str, subscriber: Identity | str, requested_start_time: int
    ) -> Subscription:
        request = partial(
            OpenSubscriptionRequest,
            provider_id=provider_id,
            subscriber=str(subscriber),
            requested_start_time=requested_start_time,
        )
        return await self._run(
            "open_subscription",
            self._open_subscription.execute,
            request,
            provider_id=provider_id,
            subscriber=str(subscriber),
        )

    async def renew_subscription(
        self, provider_id: str, subscriber: Identity | str
    ) -> Subscription:
        request = partial(
            RenewSubscriptionRequest, provider_id=provider_id, subscriber=str(subscriber)
        )
        return await self._run(
            "renew_subscription",
            self._renew_subscription.execute,
            request,
            provider_id=provider_id,
            subscriber=str(subscriber),
        )

    async def toggle_auto_renewal(
        self, provider_id: str, subscriber: Identity | str, caller: Identity | str
    ) -> Subscription:
        request = partial(
            ToggleAutoRenewalRequest,
            provider_id=provider_id,
            subscriber=str(subscriber),
            caller=str(caller),
        )
        return await self._run(
            "toggle_auto_renewal",
            self._toggle_auto_renewal.execute,
            request,
            provider_id=provider_id,
            subscriber=str(subscriber),
            caller=str(caller),
        )

    async def get_subscription(
        self, provider_id: str, subscriber: Identity | str
    ) -> Subscription:
        key = SubscriptionKey(provider_id=provider_id, subscriber=str(subscriber))
        return await load_subscription(self._subscriptions, key)

    async def subscription_state(
        self, provider_id: str, subscriber: Identity | str
    ) -> SubscriptionState:
        subscription = await self.get_subscription(provider_id, subscriber)
        return subscription.state_at(self._clock.now())

    # Access gate

    async def check_access(
        self,
        content_record_id: str,
        provider_id: str,
        subscriber: Identity | str,
        caller: Identity | str,
    ) -> AccessDecision:
        request = partial(
            CheckAccessRequest,
            content_record_id=content_record_id,
            provider_id=provider_id,
            subscriber=str(subscriber),
            caller=str(caller),
        )
        return await self._run(
            "check_access",
            self._check_access.execute,
            request,
            content_record_id=content_record_id,
            subscriber=str(subscriber),
            caller=str(caller),
        )

    async def _run(
        self,
        operation: str,
        execute: Callable[[Any], Awaitable[T]],
        make_request: Callable[[], Any],
        **context: Any,
    ) -> T:
        try:
            return await execute(make_request())
        except SubscriptionServiceError as e:
            self._logger.warning(
                f"{operation} rejected",
                error_code=e.error_code,
                reason=e.message,
                **context,
            )
            raise
