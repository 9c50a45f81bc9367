"""Domain enums for type safety and consistency."""

from enum import Enum


class ContentType(str, Enum):
    """Kind of published content. The set is closed."""

    VIDEO = "video"
    ARTICLE = "article"
    AUDIO = "audio"
    OTHER = "other"


class SubscriptionState(str, Enum):
    """State of a subscription window relative to a point in time.

    Derived from the window and the clock; never stored.
    """

    SCHEDULED = "scheduled"  # Window has not started yet
    ACTIVE = "active"  # Inside [start_time, end_time], both ends inclusive
    EXPIRED = "expired"  # Past end_time
