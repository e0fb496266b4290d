"""Plugin system for apiweave -- hooks, handler wrappers, and methods.

A plugin contributes any of: a hook set applied outside all other hooks, a
handler wrapper applied around every endpoint executor, and methods exposed
under ``client.plugins.<name>``. Plugins are passed to
:class:`~apiweave.config.ClientConfig` in registration order.

Key classes:

* :class:`Plugin` -- Abstract base class that all plugins extend.
* :class:`PluginOptions` -- What a :func:`create_plugin` factory returns.
* :class:`PluginManager` -- Validates names and aggregates contributions.

Example:
    A retry wrapper as a factory plugin::

        from apiweave.plugins import PluginOptions, create_plugin

        def _retry(max_retries: int) -> PluginOptions:
            def wrap(handler, endpoint):
                async def run(input, context):
                    for attempt in range(max_retries):
                        try:
                            return await handler(input, context)
                        except RequestFailure:
                            pass
                    return await handler(input, context)
                return run
            return PluginOptions(handler_wrapper=wrap)

        retry = create_plugin("retry", _retry)
        config = ClientConfig(base_url=url, plugins=[retry(max_retries=3)])
"""

from apiweave.plugins.base import Handler, HandlerWrapper, Plugin, PluginOptions, create_plugin
from apiweave.plugins.manager import PluginManager, apply_handler_wrappers

__all__ = [
    "Handler",
    "HandlerWrapper",
    "Plugin",
    "PluginManager",
    "PluginOptions",
    "apply_handler_wrappers",
    "create_plugin",
]
