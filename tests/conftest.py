"""Shared test fixtures for apiweave.

Provides a recording transport that stands in for the network, plus a
factory fixture for building one with canned responses. These fixtures are
automatically discovered by pytest and available to all test modules
without explicit imports.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Optional

import httpx
import pytest

from apiweave.models import RequestOptions


BASE_URL = "https://api.example.com"


def _build_response(canned: dict[str, Any], url: str, options: RequestOptions) -> httpx.Response:
    request = httpx.Request(options.method, url)
    if "content" in canned:
        return httpx.Response(
            status_code=canned.get("status", 200),
            content=canned["content"],
            request=request,
        )
    return httpx.Response(
        status_code=canned.get("status", 200),
        headers={"content-type": "application/json"},
        content=json.dumps(canned.get("body", {})).encode(),
        request=request,
    )


class RecordingTransport:
    """Async transport that records every call and replays canned responses.

    Each canned response is a dict with optional ``status``, ``body`` (JSON
    encoded), or ``content`` (raw bytes). After the last one is used it is
    repeated for any further calls. When *error* is set every call raises it.
    """

    def __init__(
        self, *responses: dict[str, Any], error: Optional[BaseException] = None
    ) -> None:
        self.calls: list[tuple[str, RequestOptions]] = []
        self._responses = list(responses) or [{}]
        self._error = error

    async def __call__(self, url: str, options: RequestOptions) -> httpx.Response:
        self.calls.append((url, options))
        if self._error is not None:
            raise self._error
        index = min(len(self.calls) - 1, len(self._responses) - 1)
        return _build_response(self._responses[index], url, options)

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def last_url(self) -> str:
        return self.calls[-1][0]

    @property
    def last_options(self) -> RequestOptions:
        return self.calls[-1][1]


@pytest.fixture
def make_transport() -> Callable[..., RecordingTransport]:
    """Factory for :class:`RecordingTransport` instances."""
    return RecordingTransport


@pytest.fixture
def transport() -> RecordingTransport:
    """A transport answering every call with ``200 {}``."""
    return RecordingTransport()


@pytest.fixture
def base_url() -> str:
    return BASE_URL
