"""Shared typing helpers for fetchretry modules."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional, Protocol, runtime_checkable


@runtime_checkable
class SupportsClone(Protocol):
    """Request objects able to produce an independently consumable duplicate."""

    def clone(self) -> Any:
        """Return a copy whose body can be read without affecting this one."""
        ...


AsyncFetch = Callable[[Any, Optional[dict[str, Any]]], Awaitable[Any]]
SyncFetch = Callable[[Any, Optional[dict[str, Any]]], Any]


__all__ = ["AsyncFetch", "SupportsClone", "SyncFetch"]
