"""Shorthand constructors for endpoint and group descriptors.

Example::

    from apiweave.helpers import get, group, post

    definitions = {
        "users": group(
            endpoints={
                "list": get("/users"),
                "get": get(lambda input: f"/users/{input['id']}"),
                "create": post("/users"),
            },
        ),
    }
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Union

from apiweave.models import Endpoint, Group, Hooks, HTTPMethod

Path = Union[str, Callable[[Any], str]]


def endpoint(
    method: Union[str, HTTPMethod],
    path: Path,
    handler: Optional[Callable[..., Any]] = None,
    hooks: Optional[Union[Hooks, Mapping[str, Any]]] = None,
) -> Endpoint:
    """Create an :class:`~apiweave.models.Endpoint`."""
    return Endpoint(method=method, path=path, handler=handler, hooks=hooks)


def group(
    endpoints: Optional[Mapping[str, Any]] = None,
    groups: Optional[Mapping[str, Any]] = None,
    hooks: Optional[Union[Hooks, Mapping[str, Any]]] = None,
) -> Group:
    """Create a :class:`~apiweave.models.Group`."""
    return Group(
        hooks=hooks,
        endpoints=dict(endpoints) if endpoints is not None else None,
        groups=dict(groups) if groups is not None else None,
    )


def get(
    path: Path,
    handler: Optional[Callable[..., Any]] = None,
    hooks: Optional[Union[Hooks, Mapping[str, Any]]] = None,
) -> Endpoint:
    """Create a GET endpoint."""
    return endpoint(HTTPMethod.GET, path, handler, hooks)


def post(
    path: Path,
    handler: Optional[Callable[..., Any]] = None,
    hooks: Optional[Union[Hooks, Mapping[str, Any]]] = None,
) -> Endpoint:
    """Create a POST endpoint. The call input is sent as the JSON body."""
    return endpoint(HTTPMethod.POST, path, handler, hooks)


def put(
    path: Path,
    handler: Optional[Callable[..., Any]] = None,
    hooks: Optional[Union[Hooks, Mapping[str, Any]]] = None,
) -> Endpoint:
    """Create a PUT endpoint. The call input is sent as the JSON body."""
    return endpoint(HTTPMethod.PUT, path, handler, hooks)


def patch(
    path: Path,
    handler: Optional[Callable[..., Any]] = None,
    hooks: Optional[Union[Hooks, Mapping[str, Any]]] = None,
) -> Endpoint:
    """Create a PATCH endpoint. The call input is sent as the JSON body."""
    return endpoint(HTTPMethod.PATCH, path, handler, hooks)


def delete(
    path: Path,
    handler: Optional[Callable[..., Any]] = None,
    hooks: Optional[Union[Hooks, Mapping[str, Any]]] = None,
) -> Endpoint:
    """Create a DELETE endpoint. No body is ever sent."""
    return endpoint(HTTPMethod.DELETE, path, handler, hooks)
