"""Request descriptors and their preparation for repeated network attempts.

A call's input is classified once into one of two variants:

* ``Reusable`` wraps a plain identifier such as a URL string. It carries no
  single-use state, so every attempt can share it.
* ``SingleUseBody`` wraps an object exposing ``clone()``, typically a
  ``Request`` whose body is a stream. The next attempt's copy must be taken
  before the current attempt starts reading the body.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union

from fetchretry.errors import BodyConsumedError
from fetchretry.util.typing import SupportsClone

BodyLike = Union[bytes, bytearray, str, Iterable[bytes], Any, None]

_CHUNK_SIZE = 8192


def _as_stream(body: BodyLike) -> Optional[Iterator[bytes]]:
    """Turn any supported body into a one-shot iterator of byte chunks."""

    if body is None:
        return None
    if isinstance(body, str):
        return iter((body.encode("utf-8"),))
    if isinstance(body, (bytes, bytearray, memoryview)):
        return iter((bytes(body),))
    if hasattr(body, "read"):
        return iter(lambda: body.read(_CHUNK_SIZE), b"")
    return iter(body)


class Request:
    """HTTP request whose body can be consumed exactly once.

    ``clone()`` tees the unread body so the clone and the original can each be
    read in full, independently. Reading or cloning after the body has been
    consumed raises ``BodyConsumedError``.
    """

    def __init__(
        self,
        url: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: BodyLike = None,
    ) -> None:
        self.url = url
        self.method = method.upper()
        self.headers: dict[str, str] = dict(headers or {})
        self._stream = _as_stream(body)
        self._body_used = False

    @property
    def has_body(self) -> bool:
        return self._stream is not None

    @property
    def body_used(self) -> bool:
        return self._body_used

    def iter_body(self) -> Iterator[bytes]:
        """Yield the body chunks, marking the body consumed."""

        if self._body_used:
            raise BodyConsumedError(f"Body of {self.method} {self.url} has already been consumed")
        self._body_used = True
        if self._stream is None:
            return iter(())
        stream, self._stream = self._stream, iter(())
        return stream

    def read(self) -> bytes:
        return b"".join(self.iter_body())

    def clone(self) -> "Request":
        if self._body_used:
            raise BodyConsumedError(f"Cannot clone {self.method} {self.url}: body already consumed")
        duplicate = Request(self.url, method=self.method, headers=self.headers)
        if self._stream is not None:
            self._stream, duplicate._stream = itertools.tee(self._stream)
        return duplicate

    def __repr__(self) -> str:
        return f"Request({self.method} {self.url!r})"


@dataclass(frozen=True)
class Reusable:
    """Descriptor with nothing to consume; duplicates are the descriptor itself."""

    value: Any

    def duplicate(self) -> "Reusable":
        return self


@dataclass(frozen=True)
class SingleUseBody:
    """Descriptor whose value must be cloned before each additional attempt."""

    value: SupportsClone

    def duplicate(self) -> "SingleUseBody":
        return SingleUseBody(self.value.clone())


Descriptor = Union[Reusable, SingleUseBody]


def describe(resource: Any) -> Descriptor:
    """Classify ``resource`` once for the lifetime of a wrapped call."""

    if isinstance(resource, (Reusable, SingleUseBody)):
        return resource
    if isinstance(resource, SupportsClone) and callable(resource.clone):
        return SingleUseBody(resource)
    return Reusable(resource)


__all__ = [
    "BodyLike",
    "Descriptor",
    "Request",
    "Reusable",
    "SingleUseBody",
    "describe",
]
