"""Configuration models and loaders for fetchretry."""

from .loader import ConfigError, ENV_PREFIX, SECTION_KEY, dump_example_config, load_config
from .models import (
    DelayStrategy,
    FetchRetryParams,
    RETRY_FIELDS,
    RetryPredicate,
    SYSTEM_DEFAULTS,
)

__all__ = [
    "ConfigError",
    "DelayStrategy",
    "ENV_PREFIX",
    "FetchRetryParams",
    "RETRY_FIELDS",
    "RetryPredicate",
    "SECTION_KEY",
    "SYSTEM_DEFAULTS",
    "dump_example_config",
    "load_config",
]
