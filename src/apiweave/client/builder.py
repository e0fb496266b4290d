"""Client builder -- turns a descriptor tree into a callable client.

:func:`build_client` walks the endpoint/group tree once, synchronously, and
returns a :class:`ClientNamespace` mirroring its shape. Groups become nested
namespaces; endpoints become coroutine functions ``call(input=None)``.

Hooks for each endpoint are merged at build time, outermost first::

    plugin hooks -> global hooks -> group hooks (outer -> inner) -> endpoint hooks

Every endpoint call then runs:

1. path resolution from the input,
2. the plugin handler-wrapper chain (last plugin outermost),
3. the base executor -- the endpoint's custom handler, or
   :func:`~apiweave.client.executor.default_executor`.

The call context carries a transport enhanced with the merged hooks. The
default executor enhances that transport again with the same hooks, so for
default-executed endpoints every hook runs twice per call; a custom handler
that only uses ``ctx.transport`` sees each hook once.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

from apiweave.client.executor import default_executor
from apiweave.client.transport import HttpxTransport
from apiweave.config import ClientConfig
from apiweave.exceptions import DefinitionError
from apiweave.hooks import Transport, create_enhanced_transport, merge_hooks, resolve
from apiweave.models import (
    CallContext,
    Endpoint,
    Group,
    HandlerContext,
    Hooks,
    as_definition,
)
from apiweave.plugins.base import Handler
from apiweave.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

PLUGINS_NAMESPACE = "plugins"


class ClientNamespace:
    """Read-only namespace of endpoints, sub-namespaces, or plugin methods.

    Members are reachable as attributes (``client.users.get_all``) or items
    (``client["users"]["get_all"]``). Assigning or deleting attributes raises
    :class:`AttributeError`.
    """

    # Mangled so member names such as ``_name`` never resolve to a slot.
    __slots__ = ("__name", "__members")

    def __init__(self, members: Mapping[str, Any], name: str = "client") -> None:
        object.__setattr__(self, "_ClientNamespace__members", MappingProxyType(dict(members)))
        object.__setattr__(self, "_ClientNamespace__name", name)

    def __getattr__(self, key: str) -> Any:
        if key.startswith("_ClientNamespace__"):
            # Slot not populated yet, e.g. on an instance created by __new__.
            raise AttributeError(key)
        try:
            return self.__members[key]
        except KeyError:
            raise AttributeError(f"'{self.__name}' has no member '{key}'") from None

    def __getitem__(self, key: str) -> Any:
        return self.__members[key]

    def __setattr__(self, key: str, value: Any) -> None:
        raise AttributeError(f"'{self.__name}' is read-only")

    def __delattr__(self, key: str) -> None:
        raise AttributeError(f"'{self.__name}' is read-only")

    def __copy__(self) -> ClientNamespace:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> ClientNamespace:
        return self

    def __contains__(self, key: object) -> bool:
        return key in self.__members

    def __iter__(self) -> Iterator[str]:
        return iter(self.__members)

    def __len__(self) -> int:
        return len(self.__members)

    def __dir__(self) -> list[str]:
        return sorted(self.__members)

    def __repr__(self) -> str:
        return f"<ClientNamespace '{self.__name}': {', '.join(self.__members)}>"


def build_client(definitions: Mapping[str, Any], config: ClientConfig) -> ClientNamespace:
    """Build a callable client from *definitions*.

    Args:
        definitions: Top-level mapping of names to :class:`~apiweave.models.Endpoint`,
            :class:`~apiweave.models.Group`, or plain mappings classified by
            :func:`~apiweave.models.as_definition`.
        config: Client wiring: base URL, transport, headers, hooks, plugins.

    Returns:
        The root :class:`ClientNamespace`. When any plugin defines methods
        it also has a ``plugins`` member holding one namespace per plugin.

    Raises:
        PluginError: If two plugins share a name.
        DefinitionError: If a descriptor is invalid, an endpoint and a
            sub-group share a key, or a top-level definition is named
            ``plugins`` while plugin methods exist.
    """
    manager = PluginManager(config.plugins)
    transport: Transport
    if config.transport is None:
        transport = HttpxTransport(timeout=config.timeout, verify_ssl=config.verify_ssl)
    else:
        transport = config.transport

    members = _build_members(definitions, config, transport, (), manager, "client")

    if manager.methods:
        if PLUGINS_NAMESPACE in members:
            raise DefinitionError(
                f"Definition '{PLUGINS_NAMESPACE}' clashes with the plugin methods namespace"
            )
        members[PLUGINS_NAMESPACE] = ClientNamespace(
            {
                name: ClientNamespace(methods, f"{PLUGINS_NAMESPACE}.{name}")
                for name, methods in manager.methods.items()
            },
            PLUGINS_NAMESPACE,
        )

    logger.debug("Built client with %d top-level members", len(members))
    return ClientNamespace(members, "client")


def _build_members(
    definitions: Mapping[str, Any],
    config: ClientConfig,
    transport: Transport,
    ancestor_hooks: tuple[Hooks, ...],
    manager: PluginManager,
    prefix: str,
) -> dict[str, Any]:
    members: dict[str, Any] = {}
    for name, value in definitions.items():
        qualname = f"{prefix}.{name}"
        definition = as_definition(qualname, value)
        if isinstance(definition, Group):
            members[name] = _build_group(
                definition, config, transport, ancestor_hooks, manager, qualname
            )
        else:
            members[name] = _build_endpoint(
                name, definition, config, transport, ancestor_hooks, manager, qualname
            )
    return members


def _build_group(
    group: Group,
    config: ClientConfig,
    transport: Transport,
    ancestor_hooks: tuple[Hooks, ...],
    manager: PluginManager,
    qualname: str,
) -> ClientNamespace:
    if group.hooks is not None:
        ancestor_hooks = (*ancestor_hooks, group.hooks)

    endpoints = _build_members(
        group.endpoints or {}, config, transport, ancestor_hooks, manager, qualname
    )
    groups = _build_members(
        group.groups or {}, config, transport, ancestor_hooks, manager, qualname
    )

    clashes = endpoints.keys() & groups.keys()
    if clashes:
        raise DefinitionError(
            f"Group '{qualname}' defines {', '.join(sorted(clashes))} "
            "both as an endpoint and as a group"
        )
    return ClientNamespace({**endpoints, **groups}, qualname)


def _build_endpoint(
    name: str,
    endpoint: Endpoint,
    config: ClientConfig,
    transport: Transport,
    ancestor_hooks: tuple[Hooks, ...],
    manager: PluginManager,
    qualname: str,
) -> Any:
    hooks = merge_hooks(*manager.hooks, config.hooks, *ancestor_hooks, endpoint.hooks)
    enhanced = create_enhanced_transport(transport, hooks)
    method = endpoint.method.value
    base = _base_executor(endpoint, hooks, MappingProxyType(dict(config.default_headers)))
    executor = manager.wrap(base, endpoint)

    async def call(input: Any = None) -> Any:
        path = endpoint.resolve_path(input)
        context = CallContext(
            transport=enhanced,
            method=method,
            path=path,
            base_url=config.base_url,
        )
        logger.debug("Calling %s (%s %s)", qualname, method, path)
        return await executor(input, context)

    call.__name__ = name
    call.__qualname__ = qualname
    call.__doc__ = f"{method} {endpoint.path if isinstance(endpoint.path, str) else '<dynamic>'}"
    return call


def _base_executor(
    endpoint: Endpoint, hooks: Hooks, default_headers: Mapping[str, str]
) -> Handler:
    handler: Optional[Any] = endpoint.handler

    if handler is not None:

        async def run_handler(input: Any, context: CallContext) -> Any:
            return await resolve(
                handler(
                    HandlerContext(
                        input=input,
                        transport=context.transport,
                        method=context.method,
                        path=context.path,
                        base_url=context.base_url,
                    )
                )
            )

        return run_handler

    async def run_default(input: Any, context: CallContext) -> Any:
        return await default_executor(
            context.method,
            context.path,
            input,
            hooks,
            context.base_url,
            default_headers,
            context.transport,
        )

    return run_default
