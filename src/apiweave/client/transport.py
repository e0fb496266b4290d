"""Default transport backed by :mod:`httpx`.

:class:`HttpxTransport` adapts :class:`httpx.AsyncClient` to the transport
call shape used by the pipeline: ``await transport(url, options)`` returning
an :class:`httpx.Response` whose body has already been read.

Without a shared client, every call opens and closes its own
:class:`httpx.AsyncClient`, so the transport holds no connections between
calls. Pass ``client=`` to reuse a client whose lifecycle you manage.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from apiweave.models import RequestOptions

logger = logging.getLogger(__name__)


class HttpxTransport:
    """Transport that sends requests with :class:`httpx.AsyncClient`.

    Args:
        client: Optional caller-owned client. It is never closed here.
        timeout: Timeout in seconds for per-call clients.
        verify_ssl: TLS verification for per-call clients.
        transport: Optional :class:`httpx.AsyncBaseTransport` for per-call
            clients (e.g. :class:`httpx.MockTransport` in tests).

    Example::

        async with httpx.AsyncClient(http2=True) as shared:
            config = ClientConfig(base_url=url, transport=HttpxTransport(client=shared))
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = client
        self._timeout = timeout
        self._verify_ssl = verify_ssl
        self._transport = transport

    async def __call__(self, url: str, options: RequestOptions) -> httpx.Response:
        if self._client is not None:
            return await self._send(self._client, url, options)

        async with httpx.AsyncClient(
            timeout=self._timeout,
            verify=self._verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            return await self._send(client, url, options)

    async def _send(
        self, client: httpx.AsyncClient, url: str, options: RequestOptions
    ) -> httpx.Response:
        kwargs: dict[str, Any] = {"headers": options.headers}
        if options.body is not None:
            kwargs["content"] = options.body
        if "timeout" in options.extensions:
            kwargs["timeout"] = options.extensions["timeout"]

        logger.debug("%s %s", options.method, url)
        response = await client.request(options.method, url, **kwargs)
        await response.aread()
        return response

    def __repr__(self) -> str:
        mode = "shared" if self._client is not None else "per-call"
        return f"HttpxTransport({mode}, timeout={self._timeout})"
