"""Resolution of call-time, builder-time and system retry settings into a policy."""

from __future__ import annotations

from collections.abc import Collection, Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union

from fetchretry.config.models import (
    SYSTEM_DEFAULTS,
    DelayStrategy,
    FetchRetryParams,
    RetryPredicate,
)

ParamsLike = Union[FetchRetryParams, Mapping[str, Any], None]


@dataclass(frozen=True)
class Policy:
    """Fully resolved retry policy for a single wrapped call."""

    max_retries: int
    delay_strategy: DelayStrategy
    retry_predicate: RetryPredicate
    # Highest attempt number that may still be retried, when the predicate makes it knowable.
    retry_ceiling: Optional[int] = None
    # Status codes that trigger a retry, when the predicate was built from a status list.
    retry_statuses: Optional[frozenset[int]] = None

    def should_retry(self, attempt: int, error: Optional[BaseException], response: Any) -> bool:
        return bool(self.retry_predicate(attempt, self.max_retries, error, response))

    def delay_for(self, attempt: int, error: Optional[BaseException], response: Any) -> float:
        """Milliseconds to wait before the attempt following ``attempt``."""

        return max(0.0, float(self.delay_strategy(attempt, error, response)))

    def may_retry_after(self, attempt: int) -> bool:
        """Return False only when no outcome of ``attempt`` can lead to another attempt.

        Caller-supplied predicates have no ceiling, so a duplicate is also taken
        before what turns out to be the final attempt.
        """

        return self.retry_ceiling is None or attempt < self.retry_ceiling

    def still_retriable(self, response: Any) -> bool:
        """True when ``response`` would have been retried had attempts remained.

        Always False for caller-supplied predicates.
        """

        if self.retry_statuses is None:
            return False
        return response is None or status_of(response) in self.retry_statuses


def as_params(value: ParamsLike) -> FetchRetryParams:
    """Coerce a mapping (or ``None``) into validated ``FetchRetryParams``."""

    if value is None:
        return FetchRetryParams()
    if isinstance(value, FetchRetryParams):
        return value
    return FetchRetryParams.model_validate({key: val for key, val in value.items() if val is not None})


def resolve_params(*layers: ParamsLike) -> FetchRetryParams:
    """Merge layers, highest precedence first; the first non-``None`` field wins."""

    resolved: dict[str, Any] = {}
    for layer in layers:
        for name, value in as_params(layer).overrides().items():
            resolved.setdefault(name, value)
    return FetchRetryParams(**resolved)


def constant_delay(milliseconds: float) -> DelayStrategy:
    """Wrap a constant delay into a strategy ignoring its arguments."""

    def _delay(attempt: int, error: Optional[BaseException], response: Any) -> float:
        return milliseconds

    return _delay


def status_of(response: Any) -> Optional[int]:
    """Return the HTTP status of ``response`` (``status`` or ``status_code``)."""

    status = getattr(response, "status", None)
    if status is None:
        status = getattr(response, "status_code", None)
    return status


def status_predicate(statuses: Collection[int]) -> RetryPredicate:
    """Retry on any error, a missing response, or a status in ``statuses``, while attempts remain."""

    members = frozenset(statuses)

    def _predicate(attempt: int, retries: int, error: Optional[BaseException], response: Any) -> bool:
        retriable = error is not None or response is None or status_of(response) in members
        return retriable and attempt < retries

    return _predicate


def resolve_policy(overrides: ParamsLike = None, defaults: ParamsLike = None) -> Policy:
    """Build the effective policy: call-time > builder-time > system defaults."""

    params = resolve_params(overrides, defaults, SYSTEM_DEFAULTS)

    retry_delay = params.retry_delay
    delay_strategy = retry_delay if callable(retry_delay) else constant_delay(retry_delay)

    retry_on = params.retry_on
    if callable(retry_on):
        return Policy(params.retries, delay_strategy, retry_on)
    return Policy(
        params.retries,
        delay_strategy,
        status_predicate(retry_on),
        retry_ceiling=params.retries,
        retry_statuses=frozenset(retry_on),
    )


__all__ = [
    "ParamsLike",
    "Policy",
    "as_params",
    "constant_delay",
    "resolve_params",
    "resolve_policy",
    "status_of",
    "status_predicate",
]
