"""The default executor -- the built-in request issuer.

Used for every endpoint that does not supply a custom handler. The pipeline
is linear: build the URL, build the request options, send through an
enhanced transport, check the status, decode the JSON body.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from apiweave.exceptions import RequestFailure
from apiweave.hooks import Transport, create_enhanced_transport, resolve
from apiweave.models import BODYLESS_METHODS, Hooks, RequestOptions

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = {"Content-Type": "application/json"}


def build_url(path: str, base_url: str) -> str:
    """Join *path* onto *base_url* with exactly one slash between them.

    At most one trailing slash is stripped from *base_url*; a leading slash
    is added to *path* when missing.

    Example::

        >>> build_url("users", "https://api.example.com/")
        'https://api.example.com/users'
    """
    base = base_url[:-1] if base_url.endswith("/") else base_url
    if not path.startswith("/"):
        path = f"/{path}"
    return f"{base}{path}"


def build_request_options(
    method: str, input: Any, default_headers: Mapping[str, str]
) -> RequestOptions:
    """Return the options for a default-executed request.

    The body is the JSON encoding of *input*, except for GET and DELETE
    requests and when *input* is ``None``.
    """
    body = None
    if method not in BODYLESS_METHODS and input is not None:
        body = json.dumps(input)
    return RequestOptions(
        method=method,
        headers={**JSON_CONTENT_TYPE, **default_headers},
        body=body,
    )


async def _decode_error_body(response: Any) -> Any:
    try:
        return await resolve(response.json())
    except Exception:
        logger.debug("Could not decode error body", exc_info=True)
        return {}


async def default_executor(
    method: str,
    path: str,
    input: Any,
    hooks: Hooks,
    base_url: str,
    default_headers: Mapping[str, str],
    transport: Transport,
) -> Any:
    """Send one request and return the decoded JSON response body.

    *transport* is wrapped with *hooks* before use, so when it is already an
    enhanced transport built from the same hooks, every hook runs twice.

    Args:
        method: HTTP method string.
        path: The resolved endpoint path.
        input: Call input; JSON-encoded as the body where applicable.
        hooks: Merged hooks for the endpoint.
        base_url: The client's base URL.
        default_headers: Headers added to every request.
        transport: The transport to send through.

    Returns:
        The decoded JSON body of a 2xx response.

    Raises:
        RequestFailure: For a non-2xx response. ``error`` holds the decoded
            body, or ``{}`` when it cannot be read or decoded.
    """
    url = build_url(path, base_url)
    options = build_request_options(method, input, default_headers)
    enhanced = create_enhanced_transport(transport, hooks)
    response = await enhanced(url, options)

    if not response.is_success:
        error = await _decode_error_body(response)
        logger.debug("%s %s failed with HTTP %s", method, url, response.status_code)
        raise RequestFailure(response.status_code, response.reason_phrase, error)

    return await resolve(response.json())
