"""Exception types and fault normalization."""

from __future__ import annotations

import asyncio

# Control-flow exceptions are never offered to a retry predicate.
PASSTHROUGH_FAULTS: tuple[type[BaseException], ...] = (
    asyncio.CancelledError,
    KeyboardInterrupt,
    SystemExit,
    GeneratorExit,
)


class FetchRetryError(Exception):
    """Base class for errors raised by fetchretry itself."""


class TransportError(FetchRetryError):
    """Wraps a transport fault that was not an ``Exception`` instance."""


class BodyConsumedError(FetchRetryError):
    """Raised when a single-use request body is read or cloned after consumption."""


def normalize_error(fault: BaseException) -> Exception:
    """Return a uniform error value for ``fault``.

    Ordinary exceptions pass through untouched. Anything else is wrapped in a
    ``TransportError`` carrying its string form; the wording is informational.
    """

    if isinstance(fault, Exception):
        return fault
    error = TransportError(str(fault) or type(fault).__name__)
    error.__cause__ = fault
    return error


__all__ = [
    "BodyConsumedError",
    "FetchRetryError",
    "PASSTHROUGH_FAULTS",
    "TransportError",
    "normalize_error",
]
