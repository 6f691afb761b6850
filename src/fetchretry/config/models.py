"""Pydantic models describing retry configuration."""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, field_validator

DelayStrategy = Callable[[int, Optional[BaseException], Any], float]
RetryPredicate = Callable[[int, int, Optional[BaseException], Any], bool]

RETRY_FIELDS = ("retries", "retry_delay", "retry_on")


class FetchRetryParams(BaseModel):
    """Partial retry policy; ``None`` marks a field that falls back to the next layer.

    ``retry_delay`` is expressed in milliseconds, either as a constant or as a
    strategy called with ``(attempt, error, response)``. ``retry_on`` is a list
    of HTTP status codes or a predicate called with
    ``(attempt, retries, error, response)``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    retries: Optional[int] = Field(default=None, ge=0)
    retry_delay: Optional[Union[NonNegativeFloat, DelayStrategy]] = None
    retry_on: Optional[Union[List[int], RetryPredicate]] = None

    @field_validator("retry_on")
    @classmethod
    def _validate_statuses(cls, value: Any) -> Any:
        """Reject status codes outside the HTTP range."""

        if isinstance(value, list):
            invalid = [status for status in value if not 100 <= status <= 599]
            if invalid:
                raise ValueError(f"retry_on contains invalid HTTP status codes: {invalid}")
        return value

    def overrides(self) -> dict[str, Any]:
        """Return only the fields that were given a value."""

        return {name: getattr(self, name) for name in RETRY_FIELDS if getattr(self, name) is not None}


SYSTEM_DEFAULTS = FetchRetryParams(retries=3, retry_delay=500, retry_on=[419, 503, 504])


__all__ = [
    "DelayStrategy",
    "FetchRetryParams",
    "RETRY_FIELDS",
    "RetryPredicate",
    "SYSTEM_DEFAULTS",
]
