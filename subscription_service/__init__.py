"""Subscription service - Time-bounded, payment-gated access to content."""

from .application.renewal_worker import RenewalWorker
from .application.service import SubscriptionService
from .domain.enums import ContentType, SubscriptionState
from .infrastructure.factories import create_renewal_worker, create_subscription_service

__all__ = [
    "ContentType",
    "RenewalWorker",
    "SubscriptionService",
    "SubscriptionState",
    "create_renewal_worker",
    "create_subscription_service",
]
__version__ = "0.1.0"
