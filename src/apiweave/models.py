"""Canonical data shapes shared across apiweave modules.

The models fall into two groups:

**Descriptor models** -- authored once, validated by Pydantic and frozen:
    :class:`Hooks`, :class:`Endpoint`, and :class:`Group`. The helper
    :func:`as_definition` turns a plain mapping into the right descriptor.

**Call-time records** -- small immutable dataclasses passed through the
request pipeline:
    :class:`RequestOptions`, :class:`HookRequest`, :class:`CallContext`,
    and :class:`HandlerContext`.

Descriptor models use ``arbitrary_types_allowed`` because hooks, paths and
handlers are plain callables.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from apiweave.exceptions import DefinitionError


class HTTPMethod(str, enum.Enum):
    """HTTP methods an endpoint may declare."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


BODYLESS_METHODS = frozenset({HTTPMethod.GET.value, HTTPMethod.DELETE.value})
"""Methods for which the default executor never attaches a request body."""


# --- Request records ---


@dataclass(frozen=True)
class RequestOptions:
    """Options for a single transport call.

    Hooks never mutate an instance; they return a new one, typically via
    :func:`dataclasses.replace`.

    Attributes:
        method: HTTP method string (e.g. ``"POST"``).
        headers: Request headers.
        body: Encoded request body, or ``None`` for no body.
        extensions: Transport-specific extras (e.g. ``{"timeout": 5.0}``).
    """

    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    body: Optional[Union[str, bytes]] = None
    extensions: dict[str, Any] = field(default_factory=dict)


class HookRequest(NamedTuple):
    """The ``(url, options)`` pair threaded through ``before_request`` hooks."""

    url: str
    options: RequestOptions


# --- Descriptor models ---


class Hooks(BaseModel):
    """The three optional interceptors of the request pipeline.

    Each hook may be a plain function or a coroutine function:

    * ``before_request(url, options) -> (url, options)``
    * ``after_response(response, url, options) -> response``
    * ``on_error(error) -> None``

    Example::

        Hooks(before_request=lambda url, opts: (url + "?debug=1", opts))
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    before_request: Optional[Callable[..., Any]] = None
    after_response: Optional[Callable[..., Any]] = None
    on_error: Optional[Callable[..., Any]] = None


class Endpoint(BaseModel):
    """A single callable operation of the API.

    Args:
        method: HTTP method. Lower-case strings are accepted.
        path: A literal path, or a function of the call input returning one.
        hooks: Hooks applying to this endpoint only (innermost layer).
        handler: Optional coroutine function replacing the default executor.
            It receives a :class:`HandlerContext`.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    method: HTTPMethod
    path: Union[str, Callable[[Any], str]]
    hooks: Optional[Hooks] = None
    handler: Optional[Callable[..., Any]] = None

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value

    def resolve_path(self, input: Any) -> str:
        """Return the concrete path for a call with *input*."""
        if callable(self.path):
            return self.path(input)
        return self.path


class Group(BaseModel):
    """A namespace of endpoints and sub-groups sharing hooks.

    Children may be :class:`Endpoint`/:class:`Group` instances or plain
    mappings; they are classified with :func:`as_definition` when the client
    is built.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    hooks: Optional[Hooks] = None
    endpoints: Optional[dict[str, Any]] = None
    groups: Optional[dict[str, Any]] = None


Definition = Union[Endpoint, Group]


def as_definition(name: str, value: Any) -> Definition:
    """Classify *value* as an :class:`Endpoint` or a :class:`Group`.

    Descriptor instances are returned unchanged. A mapping with an
    ``endpoints`` or ``groups`` key becomes a group; any other mapping,
    including a hooks-only one, is validated as an endpoint.

    Raises:
        DefinitionError: If *value* is neither a descriptor nor a mapping,
            or fails validation.
    """
    if isinstance(value, (Endpoint, Group)):
        return value
    if not isinstance(value, Mapping):
        raise DefinitionError(
            f"Definition '{name}' must be an Endpoint, a Group or a mapping, "
            f"got {type(value).__name__}"
        )

    model = Group if ("endpoints" in value or "groups" in value) else Endpoint
    try:
        return model.model_validate(dict(value))
    except ValidationError as exc:
        raise DefinitionError(
            f"Invalid {model.__name__.lower()} definition '{name}': {exc}"
        ) from exc


# --- Call contexts ---


@dataclass(frozen=True)
class CallContext:
    """Context handed to handler wrappers and base executors on every call.

    Attributes:
        transport: The enhanced transport for this endpoint's merged hooks.
        method: The endpoint's HTTP method string.
        path: The resolved path for this call.
        base_url: The client's base URL.
    """

    transport: Callable[..., Any]
    method: str
    path: str
    base_url: str


@dataclass(frozen=True)
class HandlerContext:
    """Context passed to an endpoint's custom handler."""

    input: Any
    transport: Callable[..., Any]
    method: str
    path: str
    base_url: str
