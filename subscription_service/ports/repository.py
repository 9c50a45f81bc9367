"""Repository port interfaces for providers, subscriptions and content.

This module defines the durable store interfaces following hexagonal
architecture principles. Implementations must store and return copies so
that callers can only change persisted state through these methods.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from ..domain.models import Content, Provider, Subscription
from ..domain.value_objects import SubscriptionKey


class ProviderRepository(ABC):
    """Abstract repository for providers, keyed by provider id."""

    @abstractmethod
    async def save(self, provider: Provider) -> None:
        """Create or update a provider."""
        ...

    @abstractmethod
    async def get(self, provider_id: str) -> Provider | None:
        """Get a provider by id."""
        ...


class SubscriptionRepository(ABC):
    """Abstract repository for subscriptions, keyed by (provider id, subscriber)."""

    @abstractmethod
    async def create(self, subscription: Subscription) -> None:
        """Store a new subscription.

        Raises:
            DuplicateSubscriptionError: If a record already exists for the key.
        """
        ...

    @abstractmethod
    async def update(self, subscription: Subscription) -> None:
        """Replace an existing subscription.

        Raises:
            NotFoundError: If no record exists for the key.
        """
        ...

    @abstractmethod
    async def delete(self, key: SubscriptionKey) -> None:
        """Remove a subscription. Removing a missing record is a no-op."""
        ...

    @abstractmethod
    async def get(self, key: SubscriptionKey) -> Subscription | None:
        """Get a subscription by its composite key."""
        ...

    @abstractmethod
    async def list_due_for_renewal(
        self, now: int, limit: int | None = None
    ) -> Sequence[Subscription]:
        """List auto-renewing subscriptions whose window has elapsed at ``now``."""
        ...


class ContentRepository(ABC):
    """Abstract repository for content records, keyed by content record id."""

    @abstractmethod
    async def add(self, content: Content) -> None:
        """Store a new content record. Records are never replaced."""
        ...

    @abstractmethod
    async def get(self, content_record_id: str) -> Content | None:
        """Get a content record by id."""
        ...

    @abstractmethod
    async def list_by_provider(self, provider_id: str) -> Sequence[Content]:
        """List every content record published by a provider."""
        ...
