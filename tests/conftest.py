"""Pytest configuration and shared fixtures."""

from unittest.mock import Mock

import pytest
import pytest_asyncio

from subscription_service.application.service import SubscriptionService
from subscription_service.infrastructure.in_memory_payment_gateway import InMemoryPaymentGateway
from subscription_service.infrastructure.in_memory_repository import (
    InMemoryContentRepository,
    InMemoryProviderRepository,
    InMemorySubscriptionRepository,
)
from subscription_service.infrastructure.system_clock import ManualClock
from subscription_service.ports.logger import LoggerPort

THIRTY_DAYS = 2_592_000
PRICE = 100
AUTHORITY = "alice"
SUBSCRIBER = "bob"


@pytest.fixture
def clock():
    """Manual clock starting at t=1000."""
    return ManualClock(1000)


@pytest.fixture
def payment_gateway():
    """Payment gateway with a funded subscriber."""
    gateway = InMemoryPaymentGateway()
    gateway.deposit(SUBSCRIBER, 10_000)
    return gateway


@pytest.fixture
def mock_logger():
    """Create a mock logger port."""
    return Mock(spec=LoggerPort)


@pytest.fixture
def providers():
    return InMemoryProviderRepository()


@pytest.fixture
def subscriptions():
    return InMemorySubscriptionRepository()


@pytest.fixture
def contents():
    return InMemoryContentRepository()


@pytest.fixture
def service(providers, subscriptions, contents, payment_gateway, clock, mock_logger):
    """Fully wired in-memory subscription service."""
    return SubscriptionService(
        providers=providers,
        subscriptions=subscriptions,
        contents=contents,
        payment_gateway=payment_gateway,
        clock=clock,
        logger=mock_logger,
    )


@pytest_asyncio.fixture
async def provider(service):
    """Provider charging 100 per 30-day period."""
    return await service.register_provider(AUTHORITY, PRICE, THIRTY_DAYS)
