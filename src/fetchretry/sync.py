"""Blocking counterpart of ``fetch_builder`` for synchronous transports."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

from fetchretry.errors import PASSTHROUGH_FAULTS, normalize_error
from fetchretry.fetch import describe_outcome, log_give_up, split_init
from fetchretry.policy import ParamsLike, Policy, resolve_params, resolve_policy
from fetchretry.request import Descriptor, describe
from fetchretry.util.typing import SyncFetch

LOGGER = logging.getLogger(__name__)


def run_attempts(fetch_func: SyncFetch, policy: Policy, descriptor: Descriptor, init: dict[str, Any]) -> Any:
    """Execute attempts on the calling thread, sleeping between them."""

    attempt = 0
    while True:
        upcoming = descriptor.duplicate() if policy.may_retry_after(attempt) else None
        error: Exception | None = None
        response: Any = None

        LOGGER.debug("Attempt %d for %r", attempt, descriptor.value)
        try:
            response = fetch_func(descriptor.value, init)
        except PASSTHROUGH_FAULTS:
            raise
        except BaseException as fault:  # noqa: BLE001 - offered to the retry predicate
            error = normalize_error(fault)
            if not policy.should_retry(attempt, error, None):
                log_give_up(attempt, policy, error, None, logger=LOGGER)
                if error is fault:
                    raise
                raise error from fault
        else:
            if not policy.should_retry(attempt, None, response):
                log_give_up(attempt, policy, None, response, logger=LOGGER)
                return response

        delay = policy.delay_for(attempt, error, response)
        LOGGER.info(
            "Retrying %r after attempt %d (%s) in %.0f ms",
            descriptor.value,
            attempt,
            describe_outcome(error, response),
            delay,
        )
        time.sleep(delay / 1000)
        attempt += 1
        descriptor = upcoming if upcoming is not None else descriptor.duplicate()


def fetch_builder_sync(fetch_func: SyncFetch, params: ParamsLike = None) -> Callable[..., Any]:
    """Wrap a blocking ``fetch_func`` with the same retry semantics as ``fetch_builder``."""

    defaults = resolve_params(params)

    def fetch_with_retry(resource: Any, init: Mapping[str, Any] | None = None, **options: Any) -> Any:
        overrides, transport_init = split_init(init, options)
        policy = resolve_policy(overrides, defaults)
        return run_attempts(fetch_func, policy, describe(resource), transport_init)

    return fetch_with_retry


__all__ = ["fetch_builder_sync", "run_attempts"]
