"""Plugin manager -- registration, validation, and composition.

:class:`PluginManager` takes the ordered plugin list from
:class:`~apiweave.config.ClientConfig`, checks that plugin names are
unique, and exposes what the client builder needs:

* :attr:`PluginManager.hooks` -- the plugins' hook sets, fed into
  :func:`~apiweave.hooks.merge_hooks` as the outermost layer.
* :attr:`PluginManager.handler_wrappers` -- wrappers applied to every
  endpoint executor by :func:`apply_handler_wrappers`.
* :attr:`PluginManager.methods` -- plugin methods grouped by plugin name.

Everything is computed once at construction time and never mutated.
"""

from __future__ import annotations

import logging
from functools import reduce
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from apiweave.exceptions import PluginError
from apiweave.models import Endpoint, Hooks
from apiweave.plugins.base import Handler, HandlerWrapper, Plugin

logger = logging.getLogger(__name__)


def apply_handler_wrappers(
    base: Handler, wrappers: Iterable[HandlerWrapper], endpoint: Endpoint
) -> Handler:
    """Fold *wrappers* around *base*.

    The first wrapper becomes the innermost and the last the outermost, so
    for wrappers ``[a, b]`` a call runs ``b``'s pre-logic, then ``a``'s, then
    *base*, and unwinds through ``a`` and ``b`` in that order.

    Args:
        base: The executor to wrap.
        wrappers: Handler wrappers in plugin registration order.
        endpoint: The endpoint the executor belongs to, passed to every
            wrapper.

    Returns:
        The composed executor (``base`` itself when there are no wrappers).
    """
    return reduce(lambda handler, wrap: wrap(handler, endpoint), wrappers, base)


class PluginManager:
    """Validates and aggregates the plugins registered on one client.

    Args:
        plugins: Plugin instances in registration order.

    Raises:
        PluginError: If two plugins share a name. The first duplicate found
            is reported.

    Example::

        manager = PluginManager([auth_plugin, retry_plugin])
        merged = merge_hooks(*manager.hooks, config.hooks)
    """

    def __init__(self, plugins: Sequence[Plugin] = ()) -> None:
        seen: set[str] = set()
        for plugin in plugins:
            if plugin.name in seen:
                raise PluginError(f'Duplicate plugin name: "{plugin.name}"')
            seen.add(plugin.name)
            logger.info("Registered plugin '%s'", plugin.name)

        self._plugins: tuple[Plugin, ...] = tuple(plugins)
        self._hooks: tuple[Optional[Hooks], ...] = tuple(p.hooks for p in self._plugins)
        self._wrappers: tuple[HandlerWrapper, ...] = tuple(
            p.handler_wrapper for p in self._plugins if p.handler_wrapper is not None
        )
        self._methods: Mapping[str, Mapping[str, Callable[..., Any]]] = MappingProxyType(
            {
                p.name: MappingProxyType(dict(p.methods))
                for p in self._plugins
                if p.methods is not None
            }
        )

    @property
    def hooks(self) -> tuple[Optional[Hooks], ...]:
        """One entry per plugin, ``None`` where a plugin has no hooks."""
        return self._hooks

    @property
    def handler_wrappers(self) -> tuple[HandlerWrapper, ...]:
        """Handler wrappers of the plugins that define one."""
        return self._wrappers

    @property
    def methods(self) -> Mapping[str, Mapping[str, Callable[..., Any]]]:
        """Read-only ``{plugin name: {method name: function}}`` map.

        Empty when no plugin defines methods.
        """
        return self._methods

    def wrap(self, base: Handler, endpoint: Endpoint) -> Handler:
        """Apply every registered handler wrapper to *base*."""
        return apply_handler_wrappers(base, self.handler_wrappers, endpoint)
