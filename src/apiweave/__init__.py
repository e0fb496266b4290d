"""apiweave -- build callable HTTP API clients from declarative endpoint trees.

Describe an API as a tree of endpoints and groups, hand it to
:func:`build_client`, and call endpoints as coroutine functions. Cross-cutting
behaviour (auth, logging, retries, caching) is added with hooks at the
global, group, or endpoint level, or with plugins, without touching endpoint
definitions.

Typical usage::

    from apiweave import ClientConfig, build_client
    from apiweave.helpers import get, group, post

    client = build_client(
        {"users": group(endpoints={"list": get("/users"), "create": post("/users")})},
        ClientConfig(base_url="https://api.example.com"),
    )
    users = await client.users.list()

Modules:
    models: Descriptor models and call-time records.
    config: :class:`ClientConfig` and environment-aware resolution.
    hooks: Hook merging and the enhanced transport.
    plugins: Plugin base class, factory helper, and composition.
    client: Client builder, default executor, and httpx transport.
    helpers: Shorthand descriptor constructors.
    exceptions: Exception hierarchy.
"""

from apiweave.client import ClientNamespace, HttpxTransport, build_client
from apiweave.config import ClientConfig, resolve_config
from apiweave.exceptions import (
    ApiweaveError,
    ConfigError,
    DefinitionError,
    PluginError,
    RequestFailure,
)
from apiweave.hooks import create_enhanced_transport, merge_hooks
from apiweave.models import (
    CallContext,
    Endpoint,
    Group,
    HandlerContext,
    HookRequest,
    Hooks,
    HTTPMethod,
    RequestOptions,
)
from apiweave.plugins import Plugin, PluginManager, PluginOptions, create_plugin

__version__ = "0.1.0"

__all__ = [
    "ApiweaveError",
    "CallContext",
    "ClientConfig",
    "ClientNamespace",
    "ConfigError",
    "DefinitionError",
    "Endpoint",
    "Group",
    "HTTPMethod",
    "HandlerContext",
    "HookRequest",
    "Hooks",
    "HttpxTransport",
    "Plugin",
    "PluginError",
    "PluginManager",
    "PluginOptions",
    "RequestFailure",
    "RequestOptions",
    "build_client",
    "create_enhanced_transport",
    "create_plugin",
    "merge_hooks",
    "resolve_config",
]
