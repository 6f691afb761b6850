"""Asynchronous retrying wrapper around a fetch-style request function.

``fetch_builder`` takes any coroutine function shaped like
``fetch(resource, init) -> response`` and returns one with the same shape that
re-issues the request according to a resolved ``Policy``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Optional

from fetchretry.config.models import RETRY_FIELDS
from fetchretry.errors import PASSTHROUGH_FAULTS, normalize_error
from fetchretry.policy import ParamsLike, Policy, resolve_params, resolve_policy, status_of
from fetchretry.request import Descriptor, describe
from fetchretry.util.typing import AsyncFetch

LOGGER = logging.getLogger(__name__)


def split_init(init: Mapping[str, Any] | None, options: Mapping[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    """Separate retry overrides from transport options.

    Keyword ``options`` win over ``init`` entries with the same key.
    """

    merged = dict(init or {})
    merged.update(options)
    overrides = {name: merged.pop(name) for name in RETRY_FIELDS if name in merged}
    return overrides, merged


def describe_outcome(error: Optional[BaseException], response: Any) -> str:
    if error is not None:
        return f"{type(error).__name__}: {error}"
    return f"status {status_of(response)}"


def log_give_up(
    attempt: int,
    policy: Policy,
    error: Optional[BaseException],
    response: Any,
    *,
    logger: logging.Logger = LOGGER,
) -> None:
    """Warn when a call ends on a retriable outcome after at least one retry."""

    if attempt and (error is not None or policy.still_retriable(response)):
        logger.warning("Giving up after %d attempts (%s)", attempt + 1, describe_outcome(error, response))


class AttemptLoop:
    """Drives the attempts of one wrapped call until a terminal outcome.

    The loop owns its attempt number and current descriptor; nothing is
    shared with other calls.
    """

    def __init__(self, fetch_func: AsyncFetch, policy: Policy, init: dict[str, Any]) -> None:
        self._fetch = fetch_func
        self._policy = policy
        self._init = init
        self.attempt = 0

    async def run(self, descriptor: Descriptor) -> Any:
        while True:
            upcoming = descriptor.duplicate() if self._policy.may_retry_after(self.attempt) else None
            error: Optional[Exception] = None
            response: Any = None

            LOGGER.debug("Attempt %d for %r", self.attempt, descriptor.value)
            try:
                response = await self._fetch(descriptor.value, self._init)
            except PASSTHROUGH_FAULTS:
                raise
            except BaseException as fault:  # noqa: BLE001 - offered to the retry predicate
                error = normalize_error(fault)
                if not self._policy.should_retry(self.attempt, error, None):
                    log_give_up(self.attempt, self._policy, error, None)
                    if error is fault:
                        raise
                    raise error from fault
            else:
                if not self._policy.should_retry(self.attempt, None, response):
                    log_give_up(self.attempt, self._policy, None, response)
                    LOGGER.debug("Attempt %d finished with %s", self.attempt, describe_outcome(None, response))
                    return response

            delay = self._policy.delay_for(self.attempt, error, response)
            LOGGER.info(
                "Retrying %r after attempt %d (%s) in %.0f ms",
                descriptor.value,
                self.attempt,
                describe_outcome(error, response),
                delay,
            )
            await asyncio.sleep(delay / 1000)
            self.attempt += 1
            descriptor = upcoming if upcoming is not None else descriptor.duplicate()


def fetch_builder(fetch_func: AsyncFetch, params: ParamsLike = None) -> Callable[..., Awaitable[Any]]:
    """Wrap ``fetch_func`` so failed or unsatisfactory attempts are retried.

    ``params`` provides builder-time defaults (``FetchRetryParams``, a mapping
    or ``None``); they are validated once here. Each call may override
    ``retries``, ``retry_delay`` and ``retry_on`` through ``init`` or keyword
    options; the remaining options are forwarded to ``fetch_func`` as its
    ``init``.

    Builder-time ``params`` accept only the retry fields; transport options
    such as ``timeout`` belong in each call and raise ``ValidationError`` here.
    """

    defaults = resolve_params(params)

    async def fetch_with_retry(resource: Any, init: Mapping[str, Any] | None = None, **options: Any) -> Any:
        overrides, transport_init = split_init(init, options)
        policy = resolve_policy(overrides, defaults)
        loop = AttemptLoop(fetch_func, policy, transport_init)
        return await loop.run(describe(resource))

    return fetch_with_retry


__all__ = ["AttemptLoop", "describe_outcome", "fetch_builder", "log_give_up", "split_init"]
