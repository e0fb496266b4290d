"""Client construction and request execution.

Classes and functions:
    :func:`build_client` -- walks a descriptor tree into a :class:`ClientNamespace`.
    :func:`default_executor` -- the built-in request issuer.
    :class:`HttpxTransport` -- the default transport, backed by :mod:`httpx`.

Example::

    from apiweave.client import build_client

    client = build_client(definitions, config)
    user = await client.users.get({"id": 1})
"""

from apiweave.client.builder import ClientNamespace, build_client
from apiweave.client.executor import build_url, default_executor
from apiweave.client.transport import HttpxTransport

__all__ = [
    "ClientNamespace",
    "HttpxTransport",
    "build_client",
    "build_url",
    "default_executor",
]
