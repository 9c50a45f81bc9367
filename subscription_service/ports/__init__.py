"""Ports layer - Interfaces to the outside world."""

from .clock import ClockPort
from .logger import LoggerPort
from .payment_gateway import PaymentGatewayPort
from .repository import ContentRepository, ProviderRepository, SubscriptionRepository

__all__ = [
    "ClockPort",
    "ContentRepository",
    "LoggerPort",
    "PaymentGatewayPort",
    "ProviderRepository",
    "SubscriptionRepository",
]
