from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from fetchretry.request import Request


class FakeResponse:
    def __init__(self, status: int, body: bytes = b"") -> None:
        self.status = status
        self.body = body

    def __repr__(self) -> str:
        return f"FakeResponse({self.status})"


class CountingRequest(Request):
    """Request recording how many clones were taken across the whole family."""

    def __init__(self, *args: Any, counter: list[int] | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.counter = counter if counter is not None else [0]

    def clone(self) -> "CountingRequest":
        duplicate = super().clone()
        copy = CountingRequest(duplicate.url, method=duplicate.method, headers=duplicate.headers, counter=self.counter)
        copy._stream = duplicate._stream
        self.counter[0] += 1
        return copy

    @property
    def clone_count(self) -> int:
        return self.counter[0]


class ScriptedTransport:
    """Sync transport replaying ``outcomes``: ints become responses, exceptions are raised.

    The last outcome repeats once the script runs out. Request bodies are read
    the way a real transport would, and recorded per attempt.
    """

    def __init__(self, outcomes: Iterable[Any]) -> None:
        self.outcomes = list(outcomes)
        self.calls: list[tuple[Any, dict[str, Any] | None]] = []
        self.bodies: list[bytes | None] = []

    def _next(self, resource: Any, init: dict[str, Any] | None) -> Any:
        self.calls.append((resource, init))
        if isinstance(resource, Request):
            self.bodies.append(resource.read())
        else:
            self.bodies.append(None)
        outcome = self.outcomes[min(len(self.calls), len(self.outcomes)) - 1]
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, int):
            return FakeResponse(outcome)
        return outcome

    def __call__(self, resource: Any, init: dict[str, Any] | None = None) -> Any:
        return self._next(resource, init)

    @property
    def attempts(self) -> int:
        return len(self.calls)


class AsyncScriptedTransport(ScriptedTransport):
    async def __call__(self, resource: Any, init: dict[str, Any] | None = None) -> Any:  # type: ignore[override]
        return self._next(resource, init)
