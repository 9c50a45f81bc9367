"""Domain-specific exceptions for the subscription service.

Every error aborts the operation that raised it and is surfaced verbatim
to the caller. None of them are retried by the service.
"""

from __future__ import annotations

from typing import Any


class SubscriptionServiceError(Exception):
    """Base exception for all subscription service errors."""

    error_code = "SUBSCRIPTION_SERVICE_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidConfigurationError(SubscriptionServiceError):
    """Raised when provider or service configuration is invalid."""

    error_code = "INVALID_CONFIGURATION"


class InvalidStartTimeError(SubscriptionServiceError):
    """Raised when a subscription is requested to start in the past."""

    error_code = "INVALID_START_TIME"

    def __init__(self, requested_start_time: int, current_time: int):
        super().__init__(
            f"Invalid subscription start time {requested_start_time}: "
            f"precedes current time {current_time}",
            details={
                "requested_start_time": requested_start_time,
                "current_time": current_time,
            },
        )
        self.requested_start_time = requested_start_time
        self.current_time = current_time


class DuplicateSubscriptionError(SubscriptionServiceError):
    """Raised when a subscription already exists for a provider/subscriber pair."""

    error_code = "DUPLICATE_SUBSCRIPTION"

    def __init__(self, provider_id: str, subscriber: str):
        super().__init__(
            f"Subscription already exists for subscriber '{subscriber}' "
            f"on provider '{provider_id}'",
            details={"provider_id": provider_id, "subscriber": subscriber},
        )
        self.provider_id = provider_id
        self.subscriber = subscriber


class PaymentFailedError(SubscriptionServiceError):
    """Raised when the payment gateway declines or errors."""

    error_code = "PAYMENT_FAILED"

    def __init__(self, reason: str, amount: int | None = None):
        super().__init__(f"Payment failed: {reason}", details={"reason": reason})
        self.reason = reason
        self.amount = amount
        if amount is not None:
            self.details["amount"] = amount


class AutoRenewalDisabledError(SubscriptionServiceError):
    """Raised when renewal is attempted while auto-renewal is off."""

    error_code = "AUTO_RENEWAL_DISABLED"

    def __init__(self, provider_id: str, subscriber: str):
        super().__init__(
            "Auto-renewal is disabled for this subscription",
            details={"provider_id": provider_id, "subscriber": subscriber},
        )


class SubscriptionStillActiveError(SubscriptionServiceError):
    """Raised when renewal is attempted before the current window has elapsed."""

    error_code = "SUBSCRIPTION_STILL_ACTIVE"

    def __init__(self, end_time: int, current_time: int):
        super().__init__(
            f"Subscription is still active until {end_time} (now {current_time})",
            details={"end_time": end_time, "current_time": current_time},
        )
        self.end_time = end_time
        self.current_time = current_time


class UnauthorizedError(SubscriptionServiceError):
    """Raised when the caller does not own the targeted record."""

    error_code = "UNAUTHORIZED"


class InactiveSubscriptionError(SubscriptionServiceError):
    """Raised when access is requested outside the subscription window."""

    error_code = "INACTIVE_SUBSCRIPTION"

    def __init__(self, start_time: int, end_time: int, current_time: int):
        super().__init__(
            "Subscription is not active",
            details={
                "start_time": start_time,
                "end_time": end_time,
                "current_time": current_time,
            },
        )


class NotFoundError(SubscriptionServiceError):
    """Raised when a provider, subscription or content record does not exist."""

    error_code = "NOT_FOUND"

    def __init__(self, record_type: str, key: str):
        super().__init__(f"{record_type} '{key}' not found")
        self.record_type = record_type
        self.key = key
        self.details["record_type"] = record_type
        self.details["key"] = key
