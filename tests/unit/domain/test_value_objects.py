"""Tests for domain value objects."""

import pytest
from pydantic import ValidationError

from subscription_service.domain.value_objects import Identity, SubscriptionKey


class TestIdentity:
    """Test cases for the Identity value object."""

    def test_equality_with_identity_and_string(self):
        assert Identity(value="bob") == Identity(value="bob")
        assert Identity(value="bob") == "bob"
        assert Identity(value="bob") != Identity(value="alice")
        assert Identity(value="bob") != 42

    def test_hashable(self):
        assert len({Identity(value="bob"), Identity(value="bob"), Identity(value="eve")}) == 2

    def test_str_returns_value(self):
        assert str(Identity(value="7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU")) == (
            "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"
        )

    @pytest.mark.parametrize("value", ["", "with space", "tab\there", "x" * 129])
    def test_invalid_identities(self, value):
        with pytest.raises(ValidationError):
            Identity(value=value)

    def test_immutable(self):
        identity = Identity(value="bob")
        with pytest.raises(ValidationError):
            identity.value = "eve"

    def test_of_coerces_strings_and_passes_identities_through(self):
        bob = Identity(value="bob")
        assert Identity.of(bob) is bob
        assert Identity.of("bob") == bob


class TestSubscriptionKey:
    """Test cases for the composite subscription key."""

    def test_accepts_string_subscriber(self):
        key = SubscriptionKey(provider_id="p1", subscriber="bob")
        assert key.subscriber == Identity(value="bob")
        assert key.as_tuple() == ("p1", "bob")
        assert str(key) == "p1/bob"

    def test_keys_with_same_pair_are_equal(self):
        a = SubscriptionKey(provider_id="p1", subscriber="bob")
        b = SubscriptionKey(provider_id="p1", subscriber=Identity(value="bob"))
        assert a == b
        assert hash(a) == hash(b)

    def test_different_providers_differ(self):
        assert SubscriptionKey(provider_id="p1", subscriber="bob") != SubscriptionKey(
            provider_id="p2", subscriber="bob"
        )
