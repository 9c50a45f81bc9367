"""Factories that wire the service to concrete adapters."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import SubscriptionServiceConfig
from .in_memory_payment_gateway import InMemoryPaymentGateway
from .in_memory_repository import (
    InMemoryContentRepository,
    InMemoryProviderRepository,
    InMemorySubscriptionRepository,
)
from .simple_logger import SimpleLogger
from .system_clock import SystemClock

if TYPE_CHECKING:
    from ..application.renewal_worker import RenewalWorker
    from ..application.service import SubscriptionService
    from ..ports.clock import ClockPort
    from ..ports.logger import LoggerPort
    from ..ports.payment_gateway import PaymentGatewayPort
    from ..ports.repository import (
        ContentRepository,
        ProviderRepository,
        SubscriptionRepository,
    )


def create_logger(config: SubscriptionServiceConfig) -> LoggerPort:
    """Create the default logger for a configuration."""
    return SimpleLogger(name=config.logger_name, level=config.log_level)


def create_subscription_service(
    config: SubscriptionServiceConfig | None = None,
    clock: ClockPort | None = None,
    payment_gateway: PaymentGatewayPort | None = None,
    logger: LoggerPort | None = None,
    providers: ProviderRepository | None = None,
    subscriptions: SubscriptionRepository | None = None,
    contents: ContentRepository | None = None,
) -> SubscriptionService:
    """Create a subscription service, defaulting every missing port.

    Defaults are the system clock, in-memory repositories and an in-memory
    payment gateway with empty accounts.
    """
    from ..application.service import SubscriptionService

    config = config or SubscriptionServiceConfig()
    return SubscriptionService(
        providers=providers or InMemoryProviderRepository(),
        subscriptions=subscriptions or InMemorySubscriptionRepository(),
        contents=contents or InMemoryContentRepository(),
        payment_gateway=payment_gateway or InMemoryPaymentGateway(),
        clock=clock or SystemClock(),
        logger=logger or create_logger(config),
    )


def create_renewal_worker(
    service: SubscriptionService,
    config: SubscriptionServiceConfig | None = None,
    logger: LoggerPort | None = None,
) -> RenewalWorker:
    """Create a renewal worker that renews through ``service``'s ledger."""
    from ..application.renewal_worker import RenewalWorker

    config = config or SubscriptionServiceConfig()
    return RenewalWorker(
        subscriptions=service.subscriptions,
        renew_use_case=service.renew_use_case,
        clock=service.clock,
        logger=logger or create_logger(config),
        interval_seconds=config.renewal_sweep_interval_seconds,
        batch_size=config.renewal_batch_size,
        stop_timeout_seconds=config.worker_stop_timeout_seconds,
    )
