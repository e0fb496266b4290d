"""Base class and factory helper for apiweave plugins.

A plugin is a named contributor of up to three things:

* ``hooks`` -- a :class:`~apiweave.models.Hooks` set applied as the
  outermost hook layer of every endpoint.
* ``handler_wrapper`` -- a function ``(handler, endpoint) -> handler`` that
  wraps each endpoint's executor (retries, caching, timing, ...).
* ``methods`` -- functions exposed on the built client under
  ``client.plugins.<name>``.

Plugins are written either as :class:`Plugin` subclasses or, for the common
closure-over-config case, with :func:`create_plugin`.

Example:
    Class-based plugin::

        class AuthPlugin(Plugin):
            def __init__(self, token: str) -> None:
                self._token = token

            @property
            def name(self) -> str:
                return "auth"

            @property
            def hooks(self) -> Hooks:
                return Hooks(before_request=self._inject)

            def _inject(self, url, options):
                headers = {**options.headers, "Authorization": f"Bearer {self._token}"}
                return url, replace(options, headers=headers)

    Factory-based plugin::

        metrics = create_plugin("metrics", lambda: PluginOptions(
            methods={"count": lambda: 0},
        ))
        client = build_client(defs, ClientConfig(base_url=..., plugins=[metrics()]))
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional

from apiweave.models import CallContext, Endpoint, Hooks

Handler = Callable[[Any, CallContext], Awaitable[Any]]
"""An executor: ``async (input, context) -> output``."""

HandlerWrapper = Callable[[Handler, Endpoint], Handler]
"""Transforms one executor into another for a given endpoint."""


class Plugin(ABC):
    """Base class for all apiweave plugins.

    Subclasses must implement :attr:`name`. The other members default to
    ``None``, meaning the plugin contributes nothing of that kind.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the plugin identity, unique within one client.

        Also used as the attribute name under ``client.plugins``.
        """
        ...

    @property
    def hooks(self) -> Optional[Hooks]:
        """Return the hook set this plugin contributes, if any."""
        return None

    @property
    def handler_wrapper(self) -> Optional[HandlerWrapper]:
        """Return the handler wrapper this plugin contributes, if any."""
        return None

    @property
    def methods(self) -> Optional[Mapping[str, Callable[..., Any]]]:
        """Return the methods exposed under ``client.plugins.<name>``, if any."""
        return None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


@dataclass(frozen=True)
class PluginOptions:
    """What a :func:`create_plugin` factory returns."""

    hooks: Optional[Hooks] = None
    handler_wrapper: Optional[HandlerWrapper] = None
    methods: Optional[Mapping[str, Callable[..., Any]]] = None


class _FactoryPlugin(Plugin):
    def __init__(self, name: str, options: PluginOptions) -> None:
        self._name = name
        self._options = options

    @property
    def name(self) -> str:
        return self._name

    @property
    def hooks(self) -> Optional[Hooks]:
        return self._options.hooks

    @property
    def handler_wrapper(self) -> Optional[HandlerWrapper]:
        return self._options.handler_wrapper

    @property
    def methods(self) -> Optional[Mapping[str, Callable[..., Any]]]:
        return self._options.methods


def create_plugin(
    name: str, factory: Callable[..., PluginOptions]
) -> Callable[..., Plugin]:
    """Turn *factory* into a plugin factory carrying the identity *name*.

    Args:
        name: The plugin identity.
        factory: Called with whatever configuration the user passes and
            returns :class:`PluginOptions`. State the plugin needs across
            calls (a cache, counters) lives in the factory's closure.

    Returns:
        A callable with the same arguments as *factory* returning a
        :class:`Plugin`.
    """

    def build(*args: Any, **kwargs: Any) -> Plugin:
        options = factory(*args, **kwargs)
        if isinstance(options, Mapping):
            options = PluginOptions(**options)
        return _FactoryPlugin(name, options)

    build.__name__ = f"{name}_plugin"
    build.__doc__ = factory.__doc__
    return build
