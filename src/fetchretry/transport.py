"""``requests``-backed transports satisfying the fetch contract."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

import requests

from fetchretry.request import Request
from fetchretry.util.typing import AsyncFetch, SyncFetch

DEFAULT_HEADERS: Mapping[str, str] = {
    "User-Agent": "fetchretry",
    "Accept": "*/*",
    "Connection": "keep-alive",
}


def requests_fetch_sync(
    session: requests.Session | None = None,
    *,
    timeout_seconds: float | None = None,
    headers: Mapping[str, str] | None = None,
) -> SyncFetch:
    """Return a blocking fetch function issuing requests through ``session``.

    ``resource`` is a URL or a ``Request``. The fetch-style ``init`` keys
    ``method``, ``headers`` and ``body`` are mapped onto
    ``requests.Session.request``; any other key (``params``, ``json``,
    ``timeout``...) is passed through unchanged.
    """

    http = session or requests.Session()

    def _fetch(resource: Any, init: Mapping[str, Any] | None = None) -> requests.Response:
        options = dict(init or {})

        merged_headers = dict(DEFAULT_HEADERS)
        if headers:
            merged_headers.update(headers)

        if isinstance(resource, Request):
            url = resource.url
            method = options.pop("method", resource.method)
            merged_headers.update(resource.headers)
            data = resource.read() if resource.has_body else options.pop("body", None)
        else:
            url = str(resource)
            method = options.pop("method", "GET")
            data = options.pop("body", None)
        options.pop("body", None)
        merged_headers.update(options.pop("headers", None) or {})
        options.setdefault("timeout", timeout_seconds)

        return http.request(method.upper(), url, headers=merged_headers, data=data, **options)

    return _fetch


def requests_fetch(
    session: requests.Session | None = None,
    *,
    timeout_seconds: float | None = None,
    headers: Mapping[str, str] | None = None,
) -> AsyncFetch:
    """Async variant of ``requests_fetch_sync``; each request runs in a worker thread."""

    blocking = requests_fetch_sync(session, timeout_seconds=timeout_seconds, headers=headers)

    async def _fetch(resource: Any, init: Mapping[str, Any] | None = None) -> requests.Response:
        return await asyncio.to_thread(blocking, resource, init)

    return _fetch


__all__ = ["DEFAULT_HEADERS", "requests_fetch", "requests_fetch_sync"]
