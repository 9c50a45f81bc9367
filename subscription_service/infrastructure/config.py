"""Service configuration and its environment loader."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..domain.exceptions import InvalidConfigurationError

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Environment variable -> config field
ENV_VARIABLES = {
    "SUBSCRIPTION_LOG_LEVEL": "log_level",
    "SUBSCRIPTION_LOGGER_NAME": "logger_name",
    "SUBSCRIPTION_RENEWAL_INTERVAL": "renewal_sweep_interval_seconds",
    "SUBSCRIPTION_RENEWAL_BATCH_SIZE": "renewal_batch_size",
    "SUBSCRIPTION_WORKER_STOP_TIMEOUT": "worker_stop_timeout_seconds",
}


class SubscriptionServiceConfig(BaseModel):
    """Strongly-typed configuration for a subscription service instance."""

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    log_level: LogLevel = Field(default="INFO", description="Level for the service logger")
    logger_name: str = Field(
        default="subscription_service",
        min_length=1,
        description="Name of the logger the service writes to",
    )
    renewal_sweep_interval_seconds: float = Field(
        default=60.0,
        gt=0,
        le=86400,
        description="Seconds between automatic renewal sweeps",
    )
    renewal_batch_size: int = Field(
        default=100,
        ge=1,
        description="Maximum subscriptions renewed per sweep",
    )
    worker_stop_timeout_seconds: float = Field(
        default=2.0,
        gt=0,
        description="Grace period for the renewal worker to stop before it is cancelled",
    )


def load_config_from_env(environ: Mapping[str, str] | None = None) -> SubscriptionServiceConfig:
    """Build configuration from ``SUBSCRIPTION_*`` environment variables.

    Unset variables fall back to the defaults.

    Raises:
        InvalidConfigurationError: If any value fails validation
    """
    environ = os.environ if environ is None else environ
    values: dict[str, str] = {}
    for variable, field_name in ENV_VARIABLES.items():
        raw = environ.get(variable)
        if raw is None or not raw.strip():
            continue
        values[field_name] = raw.strip().upper() if field_name == "log_level" else raw

    try:
        # Environment values are strings; lax mode coerces numeric fields
        return SubscriptionServiceConfig.model_validate(values)
    except ValidationError as e:
        raise InvalidConfigurationError(
            f"Failed to load configuration: {e}", details={"errors": e.errors()}
        ) from e
