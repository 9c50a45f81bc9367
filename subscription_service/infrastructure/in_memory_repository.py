"""In-memory implementations of the repository ports.

These are infrastructure adapters for testing, development and single
process deployments. Every read and write goes through a deep copy, so a
caller mutating a returned model changes nothing until it saves it back.
"""

from ..domain.exceptions import DuplicateSubscriptionError, NotFoundError
from ..domain.models import Content, Provider, Subscription
from ..domain.value_objects import SubscriptionKey
from ..ports.repository import ContentRepository, ProviderRepository, SubscriptionRepository


class InMemoryProviderRepository(ProviderRepository):
    """In-memory provider store keyed by provider id."""

    def __init__(self) -> None:
        self._storage: dict[str, Provider] = {}

    async def save(self, provider: Provider) -> None:
        self._storage[provider.provider_id] = provider.model_copy(deep=True)

    async def get(self, provider_id: str) -> Provider | None:
        provider = self._storage.get(provider_id)
        return provider.model_copy(deep=True) if provider else None

    def clear(self) -> None:
        """Clear all stored providers (useful for testing)."""
        self._storage.clear()


class InMemorySubscriptionRepository(SubscriptionRepository):
    """In-memory subscription store with a unique (provider, subscriber) key."""

    def __init__(self) -> None:
        # Key is (provider_id, subscriber)
        self._storage: dict[tuple[str, str], Subscription] = {}

    async def create(self, subscription: Subscription) -> None:
        key = subscription.key.as_tuple()
        if key in self._storage:
            raise DuplicateSubscriptionError(*key)
        self._storage[key] = subscription.model_copy(deep=True)

    async def update(self, subscription: Subscription) -> None:
        key = subscription.key.as_tuple()
        if key not in self._storage:
            raise NotFoundError("Subscription", str(subscription.key))
        self._storage[key] = subscription.model_copy(deep=True)

    async def delete(self, key: SubscriptionKey) -> None:
        self._storage.pop(key.as_tuple(), None)

    async def get(self, key: SubscriptionKey) -> Subscription | None:
        subscription = self._storage.get(key.as_tuple())
        return subscription.model_copy(deep=True) if subscription else None

    async def list_due_for_renewal(
        self, now: int, limit: int | None = None
    ) -> list[Subscription]:
        due = sorted(
            (s for s in self._storage.values() if s.is_due_for_renewal(now)),
            key=lambda s: s.end_time,
        )
        if limit is not None:
            due = due[:limit]
        return [s.model_copy(deep=True) for s in due]

    def clear(self) -> None:
        """Clear all stored subscriptions (useful for testing)."""
        self._storage.clear()

    def get_all(self) -> list[Subscription]:
        """Get all stored subscriptions (useful for testing)."""
        return [s.model_copy(deep=True) for s in self._storage.values()]


class InMemoryContentRepository(ContentRepository):
    """In-memory append-only content catalog."""

    def __init__(self) -> None:
        self._storage: dict[str, Content] = {}

    async def add(self, content: Content) -> None:
        if content.content_record_id in self._storage:
            raise ValueError(f"Content record '{content.content_record_id}' already exists")
        # Content is frozen, no copy needed
        self._storage[content.content_record_id] = content

    async def get(self, content_record_id: str) -> Content | None:
        return self._storage.get(content_record_id)

    async def list_by_provider(self, provider_id: str) -> list[Content]:
        return [c for c in self._storage.values() if c.provider_id == provider_id]

    def clear(self) -> None:
        """Clear all stored content (useful for testing)."""
        self._storage.clear()
