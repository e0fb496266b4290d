"""Exception hierarchy for apiweave.

All library errors inherit from :class:`ApiweaveError` so callers can catch
them with a single ``except`` clause. Errors raised by the injected transport
(e.g. :class:`httpx.ConnectError`) and by JSON decoding of a successful
response are *not* wrapped -- they propagate unchanged.

Subclass hierarchy::

    ApiweaveError
    +-- DefinitionError   (malformed endpoint/group tree, build time)
    +-- PluginError       (duplicate plugin identity, build time)
    +-- RequestFailure    (non-2xx response, call time)
    +-- ConfigError       (unresolvable configuration)
"""

from __future__ import annotations

from typing import Any


class ApiweaveError(Exception):
    """Base exception for all apiweave errors."""


class DefinitionError(ApiweaveError):
    """Raised when an endpoint or group descriptor cannot be built into a client.

    Covers descriptors that fail validation, an endpoint and a sub-group
    sharing one key inside the same namespace, and a top-level definition
    shadowing the ``plugins`` namespace.
    """


class PluginError(ApiweaveError):
    """Raised when plugins cannot be registered together (e.g. duplicate names)."""


class RequestFailure(ApiweaveError):
    """Raised by the default executor when the API returns a non-2xx status.

    Args:
        status: The HTTP status code of the response.
        status_text: The reason phrase (e.g. ``"Not Found"``).
        error: The decoded JSON error body, or ``{}`` when the body could
            not be decoded.
    """

    def __init__(self, status: int, status_text: str, error: Any) -> None:
        message = f"HTTP {status}"
        if status_text:
            message = f"{message} {status_text}"
        super().__init__(message)
        self.status = status
        self.status_text = status_text
        self.error = error

    def __repr__(self) -> str:
        return (
            f"RequestFailure(status={self.status!r}, "
            f"status_text={self.status_text!r}, error={self.error!r})"
        )


class ConfigError(ApiweaveError):
    """Raised when a client configuration cannot be resolved (e.g. no base URL)."""
