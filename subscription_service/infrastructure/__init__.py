"""Infrastructure layer - Adapters implementing the ports."""

from .config import SubscriptionServiceConfig, load_config_from_env
from .factories import create_renewal_worker, create_subscription_service
from .in_memory_payment_gateway import InMemoryPaymentGateway
from .in_memory_repository import (
    InMemoryContentRepository,
    InMemoryProviderRepository,
    InMemorySubscriptionRepository,
)
from .simple_logger import SimpleLogger
from .system_clock import ManualClock, SystemClock

__all__ = [
    "InMemoryContentRepository",
    "InMemoryPaymentGateway",
    "InMemoryProviderRepository",
    "InMemorySubscriptionRepository",
    "ManualClock",
    "SimpleLogger",
    "SubscriptionServiceConfig",
    "SystemClock",
    "create_renewal_worker",
    "create_subscription_service",
    "load_config_from_env",
]
