"""Tests for the in-memory repository adapters."""

import pytest

from subscription_service.domain.enums import ContentType
from subscription_service.domain.exceptions import DuplicateSubscriptionError, NotFoundError
from subscription_service.domain.models import Content, Provider, Subscription
from subscription_service.domain.value_objects import Identity, SubscriptionKey
from subscription_service.infrastructure.in_memory_repository import (
    InMemoryContentRepository,
    InMemoryProviderRepository,
    InMemorySubscriptionRepository,
)


def make_subscription(provider_id="p1", subscriber="bob", start=1000, end=2000, auto=True):
    return Subscription(
        subscriber=subscriber,
        provider_id=provider_id,
        start_time=start,
        end_time=end,
        last_payment=start,
        auto_renewal=auto,
    )


class TestInMemoryProviderRepository:
    """Test cases for InMemoryProviderRepository."""

    @pytest.fixture
    def repository(self):
        return InMemoryProviderRepository()

    @pytest.mark.asyncio
    async def test_save_and_get(self, repository):
        provider = Provider(authority="alice", subscription_price=5, subscription_duration=60)
        await repository.save(provider)

        retrieved = await repository.get(provider.provider_id)

        assert retrieved == provider
        assert retrieved is not provider

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, repository):
        assert await repository.get("missing") is None

    @pytest.mark.asyncio
    async def test_mutating_returned_copy_does_not_change_store(self, repository):
        provider = Provider(authority="alice", subscription_price=5, subscription_duration=60)
        await repository.save(provider)

        copy = await repository.get(provider.provider_id)
        copy.record_new_subscriber()

        stored = await repository.get(provider.provider_id)
        assert stored.total_subscribers == 0


class TestInMemorySubscriptionRepository:
    """Test cases for InMemorySubscriptionRepository."""

    @pytest.fixture
    def repository(self):
        return InMemorySubscriptionRepository()

    @pytest.mark.asyncio
    async def test_create_and_get(self, repository):
        subscription = make_subscription()
        await repository.create(subscription)

        retrieved = await repository.get(SubscriptionKey(provider_id="p1", subscriber="bob"))

        assert retrieved == subscription

    @pytest.mark.asyncio
    async def test_create_enforces_unique_pair(self, repository):
        await repository.create(make_subscription())

        with pytest.raises(DuplicateSubscriptionError):
            await repository.create(make_subscription(start=5000, end=6000))

        stored = await repository.get(SubscriptionKey(provider_id="p1", subscriber="bob"))
        assert stored.start_time == 1000

    @pytest.mark.asyncio
    async def test_same_subscriber_on_other_provider_is_separate(self, repository):
        await repository.create(make_subscription(provider_id="p1"))
        await repository.create(make_subscription(provider_id="p2"))

        assert len(repository.get_all()) == 2

    @pytest.mark.asyncio
    async def test_update_requires_existing_record(self, repository):
        with pytest.raises(NotFoundError):
            await repository.update(make_subscription())

    @pytest.mark.asyncio
    async def test_update_replaces_record(self, repository):
        subscription = make_subscription()
        await repository.create(subscription)

        subscription.toggle_auto_renewal(Identity(value="bob"))
        await repository.update(subscription)

        stored = await repository.get(subscription.key)
        assert stored.auto_renewal is False

    @pytest.mark.asyncio
    async def test_delete(self, repository):
        subscription = make_subscription()
        await repository.create(subscription)

        await repository.delete(subscription.key)
        await repository.delete(subscription.key)

        assert await repository.get(subscription.key) is None
        await repository.create(subscription)

    @pytest.mark.asyncio
    async def test_list_due_for_renewal(self, repository):
        await repository.create(make_subscription(subscriber="due-late", end=2000))
        await repository.create(make_subscription(subscriber="due-early", end=1500))
        await repository.create(make_subscription(subscriber="not-due", end=9000))
        await repository.create(make_subscription(subscriber="opted-out", end=1000, auto=False))

        due = await repository.list_due_for_renewal(now=2000)

        assert [str(s.subscriber) for s in due] == ["due-early", "due-late"]

    @pytest.mark.asyncio
    async def test_list_due_for_renewal_respects_limit(self, repository):
        for i in range(5):
            await repository.create(make_subscription(subscriber=f"s{i}", end=1000 + i))

        due = await repository.list_due_for_renewal(now=5000, limit=2)

        assert [str(s.subscriber) for s in due] == ["s0", "s1"]

    @pytest.mark.asyncio
    async def test_clear(self, repository):
        await repository.create(make_subscription())
        repository.clear()
        assert repository.get_all() == []


class TestInMemoryContentRepository:
    """Test cases for InMemoryContentRepository."""

    @pytest.fixture
    def repository(self):
        return InMemoryContentRepository()

    def make_content(self, provider_id="p1", content_id="c1"):
        return Content(
            provider_id=provider_id,
            content_id=content_id,
            content_hash="hash",
            content_type=ContentType.AUDIO,
            timestamp=1000,
        )

    @pytest.mark.asyncio
    async def test_add_and_get(self, repository):
        content = self.make_content()
        await repository.add(content)
        assert await repository.get(content.content_record_id) == content

    @pytest.mark.asyncio
    async def test_records_are_never_replaced(self, repository):
        content = self.make_content()
        await repository.add(content)
        with pytest.raises(ValueError):
            await repository.add(content)

    @pytest.mark.asyncio
    async def test_list_by_provider(self, repository):
        await repository.add(self.make_content(provider_id="p1", content_id="a"))
        await repository.add(self.make_content(provider_id="p1", content_id="b"))
        await repository.add(self.make_content(provider_id="p2", content_id="c"))

        listed = await repository.list_by_provider("p1")

        assert sorted(c.content_id for c in listed) == ["a", "b"]
