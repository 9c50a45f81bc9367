"""Domain services for logic that spans more than one aggregate."""

from __future__ import annotations

from .exceptions import InactiveSubscriptionError, UnauthorizedError
from .models import AccessDecision, Content, Subscription
from .value_objects import Identity


class AccessGate:
    """Decides whether a subscriber may access a piece of content.

    Pure predicate over a subscription, a content record and the current
    time. Has no state, never mutates its inputs and never talks to the
    payment gateway, so checks can be repeated freely.
    """

    def check_access(
        self,
        content: Content,
        subscription: Subscription,
        caller: Identity,
        now: int,
    ) -> AccessDecision:
        """Grant access iff ``start_time <= now <= end_time``.

        Args:
            content: Content record being accessed
            subscription: Subscription presented for the access
            caller: Verified identity of the requester
            now: Current trusted timestamp

        Returns:
            AccessDecision describing the granted window

        Raises:
            UnauthorizedError: If the subscription does not belong to the caller
                or was taken out with a different provider than the content's
            InactiveSubscriptionError: If ``now`` lies outside the window
        """
        if subscription.subscriber != caller:
            raise UnauthorizedError(
                "Subscription does not belong to the caller",
                details={"subscriber": str(subscription.subscriber), "caller": str(caller)},
            )
        if subscription.provider_id != content.provider_id:
            raise UnauthorizedError(
                "Subscription is for a different provider than the content",
                details={
                    "subscription_provider": subscription.provider_id,
                    "content_provider": content.provider_id,
                },
            )

        if not subscription.is_active_at(now):
            raise InactiveSubscriptionError(subscription.start_time, subscription.end_time, now)

        return AccessDecision(
            subscriber=subscription.subscriber,
            provider_id=content.provider_id,
            content_record_id=content.content_record_id,
            checked_at=now,
            window_start=subscription.start_time,
            window_end=subscription.end_time,
        )
