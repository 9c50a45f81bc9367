"""Application layer - Use cases and orchestration."""

from .locking import KeyedLockRegistry
from .renewal_worker import RenewalOutcome, RenewalSweepResult, RenewalWorker
from .service import SubscriptionService
from .use_cases import (
    CheckAccessRequest,
    CheckAccessUseCase,
    OpenSubscriptionRequest,
    OpenSubscriptionUseCase,
    PublishContentRequest,
    PublishContentUseCase,
    RegisterProviderRequest,
    RegisterProviderUseCase,
    RenewSubscriptionRequest,
    RenewSubscriptionUseCase,
    ToggleAutoRenewalRequest,
    ToggleAutoRenewalUseCase,
)

__all__ = [
    "CheckAccessRequest",
    "CheckAccessUseCase",
    "KeyedLockRegistry",
    "OpenSubscriptionRequest",
    "OpenSubscriptionUseCase",
    "PublishContentRequest",
    "PublishContentUseCase",
    "RegisterProviderRequest",
    "RegisterProviderUseCase",
    "RenewSubscriptionRequest",
    "RenewSubscriptionUseCase",
    "RenewalOutcome",
    "RenewalSweepResult",
    "RenewalWorker",
    "SubscriptionService",
    "ToggleAutoRenewalRequest",
    "ToggleAutoRenewalUseCase",
]
