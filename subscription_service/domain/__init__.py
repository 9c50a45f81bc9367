"""Domain layer - Core business logic and entities."""

from .enums import ContentType, SubscriptionState
from .exceptions import (
    AutoRenewalDisabledError,
    DuplicateSubscriptionError,
    InactiveSubscriptionError,
    InvalidConfigurationError,
    InvalidStartTimeError,
    NotFoundError,
    PaymentFailedError,
    SubscriptionServiceError,
    SubscriptionStillActiveError,
    UnauthorizedError,
)
from .models import AccessDecision, Content, PaymentReceipt, Provider, Subscription
from .services import AccessGate
from .value_objects import Identity, SubscriptionKey

__all__ = [
    "AccessDecision",
    "AccessGate",
    "AutoRenewalDisabledError",
    "Content",
    "ContentType",
    "DuplicateSubscriptionError",
    "Identity",
    "InactiveSubscriptionError",
    "InvalidConfigurationError",
    "InvalidStartTimeError",
    "NotFoundError",
    "PaymentFailedError",
    "PaymentReceipt",
    "Provider",
    "Subscription",
    "SubscriptionKey",
    "SubscriptionServiceError",
    "SubscriptionState",
    "SubscriptionStillActiveError",
    "UnauthorizedError",
]
