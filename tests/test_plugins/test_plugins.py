"""Tests for the apiweave plugin system."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from apiweave.exceptions import PluginError
from apiweave.helpers import get
from apiweave.models import CallContext, Hooks
from apiweave.plugins.base import Plugin, PluginOptions, create_plugin
from apiweave.plugins.manager import PluginManager, apply_handler_wrappers


# ---------------------------------------------------------------------------
# Test helpers: concrete Plugin subclasses
# ---------------------------------------------------------------------------


class MinimalPlugin(Plugin):
    """Smallest valid plugin, implementing only the required ``name`` property."""

    @property
    def name(self) -> str:
        return "minimal"


class HeaderPlugin(Plugin):
    """Contributes a before_request hook."""

    def __init__(self) -> None:
        self._hooks = Hooks(before_request=lambda url, options: (url, options))

    @property
    def name(self) -> str:
        return "header"

    @property
    def hooks(self) -> Hooks:
        return self._hooks


class CounterPlugin(Plugin):
    """Exposes methods over state it owns."""

    def __init__(self) -> None:
        self.count = 0

    @property
    def name(self) -> str:
        return "counter"

    @property
    def methods(self) -> dict[str, Any]:
        return {"increment": self._increment, "value": lambda: self.count}

    def _increment(self) -> int:
        self.count += 1
        return self.count


def _recording_wrapper(tag: str, order: list[str]):
    def wrap(handler, endpoint):
        async def run(input: Any, context: CallContext) -> Any:
            order.append(f"{tag}-before")
            result = await handler(input, context)
            order.append(f"{tag}-after")
            return result

        return run

    return wrap


def _context() -> CallContext:
    async def transport(url, options=None):
        raise AssertionError("not used")

    return CallContext(
        transport=transport, method="GET", path="/test", base_url="https://api.example.com"
    )


@pytest.fixture
def endpoint():
    return get("/test")


# ---------------------------------------------------------------------------
# Plugin ABC
# ---------------------------------------------------------------------------


class TestPluginABC:
    """Verify the abstract base class contract."""

    def test_cannot_instantiate_without_name(self) -> None:
        class NoName(Plugin):
            pass

        with pytest.raises(TypeError):
            NoName()  # type: ignore[abstract]

    def test_defaults_contribute_nothing(self) -> None:
        plugin = MinimalPlugin()
        assert plugin.hooks is None
        assert plugin.handler_wrapper is None
        assert plugin.methods is None

    def test_repr_includes_name(self) -> None:
        assert repr(MinimalPlugin()) == "<MinimalPlugin 'minimal'>"


# ---------------------------------------------------------------------------
# create_plugin
# ---------------------------------------------------------------------------


class TestCreatePlugin:
    def test_without_config(self) -> None:
        factory = create_plugin(
            "logging",
            lambda: PluginOptions(hooks=Hooks(before_request=lambda url, o: (url, o))),
        )
        plugin = factory()
        assert isinstance(plugin, Plugin)
        assert plugin.name == "logging"
        assert plugin.hooks is not None
        assert plugin.hooks.before_request is not None
        assert plugin.handler_wrapper is None
        assert plugin.methods is None

    def test_with_config(self) -> None:
        def build(prefix: str) -> PluginOptions:
            return PluginOptions(methods={"format": lambda text: f"{prefix}: {text}"})

        plugin = create_plugin("config", build)(prefix="LOG")
        assert plugin.methods["format"]("hello") == "LOG: hello"

    def test_accepts_mapping_options(self) -> None:
        plugin = create_plugin("mapping", lambda: {"methods": {"ping": lambda: "pong"}})()
        assert plugin.methods["ping"]() == "pong"

    def test_each_call_builds_independent_state(self) -> None:
        def build() -> PluginOptions:
            calls: list[int] = []
            return PluginOptions(methods={"hit": lambda: calls.append(1) or len(calls)})

        factory = create_plugin("stateful", build)
        first, second = factory(), factory()
        first.methods["hit"]()
        assert first.methods["hit"]() == 2
        assert second.methods["hit"]() == 1


# ---------------------------------------------------------------------------
# apply_handler_wrappers
# ---------------------------------------------------------------------------


class TestApplyHandlerWrappers:
    def test_no_wrappers_returns_base(self, endpoint) -> None:
        async def base(input: Any, context: CallContext) -> Any:
            return input

        assert apply_handler_wrappers(base, [], endpoint) is base

    @pytest.mark.asyncio
    async def test_first_wrapper_is_innermost(self, endpoint) -> None:
        order: list[str] = []

        async def base(input: Any, context: CallContext) -> Any:
            order.append("base")
            return "done"

        handler = apply_handler_wrappers(
            base, [_recording_wrapper("A", order), _recording_wrapper("B", order)], endpoint
        )
        assert await handler(None, _context()) == "done"
        assert order == ["B-before", "A-before", "base", "A-after", "B-after"]

    def test_wrappers_receive_endpoint(self, endpoint) -> None:
        seen: list[Any] = []

        def wrap(handler, ep):
            seen.append(ep)
            return handler

        async def base(input: Any, context: CallContext) -> Any:
            return None

        apply_handler_wrappers(base, [wrap], endpoint)
        assert seen == [endpoint]


# ---------------------------------------------------------------------------
# PluginManager
# ---------------------------------------------------------------------------


class TestPluginManager:
    def test_empty(self) -> None:
        manager = PluginManager()
        assert manager.hooks == ()
        assert manager.handler_wrappers == ()
        assert dict(manager.methods) == {}

    def test_duplicate_name_raises(self) -> None:
        first = create_plugin("cache", lambda: PluginOptions(methods={"get": lambda: 1}))
        second = create_plugin("cache", lambda: PluginOptions(methods={"set": lambda: 2}))
        with pytest.raises(PluginError, match='Duplicate plugin name: "cache"'):
            PluginManager([first(), second()])

    def test_hooks_keep_registration_order_with_gaps(self) -> None:
        header = HeaderPlugin()
        manager = PluginManager([MinimalPlugin(), header])
        assert manager.hooks == (None, header.hooks)

    def test_handler_wrappers_skip_plugins_without_one(self) -> None:
        order: list[str] = []
        wrapper = _recording_wrapper("w", order)
        plugin = create_plugin("wrapping", lambda: PluginOptions(handler_wrapper=wrapper))()
        manager = PluginManager([MinimalPlugin(), plugin])
        assert manager.handler_wrappers == (wrapper,)

    def test_methods_grouped_by_name(self) -> None:
        counter = CounterPlugin()
        manager = PluginManager([MinimalPlugin(), counter])
        assert list(manager.methods) == ["counter"]
        assert manager.methods["counter"]["increment"]() == 1
        assert manager.methods["counter"]["value"]() == 1

    def test_methods_are_read_only(self) -> None:
        manager = PluginManager([CounterPlugin()])
        with pytest.raises(TypeError):
            manager.methods["other"] = {}  # type: ignore[index]
        with pytest.raises(TypeError):
            manager.methods["counter"]["extra"] = lambda: None  # type: ignore[index]

    def test_logs_registration(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="apiweave.plugins.manager"):
            PluginManager([MinimalPlugin()])
        assert "Registered plugin 'minimal'" in caplog.text
