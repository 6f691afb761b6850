"""Transparent retries for fetch-style request functions."""

from .config import ConfigError, FetchRetryParams, SYSTEM_DEFAULTS, load_config
from .errors import BodyConsumedError, FetchRetryError, TransportError, normalize_error
from .fetch import fetch_builder
from .policy import Policy, resolve_policy
from .request import Request, Reusable, SingleUseBody, describe
from .sync import fetch_builder_sync
from .transport import requests_fetch, requests_fetch_sync
from .util.logging import configure_logging

__version__ = "0.1.0"

__all__ = [
    "BodyConsumedError",
    "ConfigError",
    "FetchRetryError",
    "FetchRetryParams",
    "Policy",
    "Request",
    "Reusable",
    "SYSTEM_DEFAULTS",
    "SingleUseBody",
    "TransportError",
    "configure_logging",
    "describe",
    "fetch_builder",
    "fetch_builder_sync",
    "load_config",
    "normalize_error",
    "requests_fetch",
    "requests_fetch_sync",
    "resolve_policy",
]
