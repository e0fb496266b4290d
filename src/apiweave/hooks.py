"""Hook merging and the enhanced transport.

This module provides the two lowest layers of the request pipeline:

* :func:`merge_hooks` -- Folds any number of optional :class:`~apiweave.models.Hooks`
  into one. ``before_request`` hooks run in the given order,
  ``after_response`` hooks in reverse order (innermost context unwinds
  first), and ``on_error`` hooks in the given order.
* :func:`create_enhanced_transport` -- Wraps a transport function so that one
  hook set is applied around every call.

Hooks may be plain functions or coroutine functions; every result is
awaited when it is awaitable.
"""

from __future__ import annotations

import dataclasses
import inspect
import logging
from functools import reduce
from typing import Any, Awaitable, Callable, Optional, Union

import httpx

from apiweave.models import HookRequest, Hooks, RequestOptions

logger = logging.getLogger(__name__)

Transport = Callable[[str, RequestOptions], Awaitable[Any]]


async def resolve(value: Any) -> Any:
    """Await *value* if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


def _as_hook_request(result: Any) -> HookRequest:
    if not isinstance(result, (tuple, list)) or len(result) != 2:
        raise TypeError(
            f"before_request hooks must return a (url, options) pair, got {type(result).__name__}"
        )
    url, options = result
    return HookRequest(url, options)


# ---------------------------------------------------------------------------
# Composition steps
# ---------------------------------------------------------------------------


async def _pass_request(url: str, options: RequestOptions) -> HookRequest:
    return HookRequest(url, options)


async def _pass_response(response: Any, url: str, options: RequestOptions) -> Any:
    return response


def _chain_before(first: Callable[..., Any], second: Callable[..., Any]) -> Callable[..., Any]:
    async def before_request(url: str, options: RequestOptions) -> HookRequest:
        url, options = _as_hook_request(await resolve(first(url, options)))
        return _as_hook_request(await resolve(second(url, options)))

    return before_request


def _chain_after(first: Callable[..., Any], second: Callable[..., Any]) -> Callable[..., Any]:
    async def after_response(response: Any, url: str, options: RequestOptions) -> Any:
        response = await resolve(first(response, url, options))
        return await resolve(second(response, url, options))

    return after_response


def _collect_errors(hooks: tuple[Callable[..., Any], ...]) -> Callable[..., Any]:
    async def on_error(error: BaseException) -> None:
        for hook in hooks:
            try:
                await resolve(hook(error))
            except Exception:
                # Never let an error hook mask the original failure.
                logger.warning("on_error hook %r raised", hook, exc_info=True)

    return on_error


def merge_hooks(*sources: Optional[Hooks]) -> Hooks:
    """Combine hook sets into one, preserving per-kind ordering rules.

    Args:
        *sources: Hook sets ordered from outermost to innermost (plugins,
            global, groups, endpoint). ``None`` entries are skipped.

    Returns:
        A new :class:`~apiweave.models.Hooks`. A hook kind that no source
        defines is left as ``None`` so callers can detect that there is
        nothing to run.
    """
    present = [hooks for hooks in sources if hooks is not None]
    before = tuple(h.before_request for h in present if h.before_request is not None)
    after = tuple(h.after_response for h in present if h.after_response is not None)
    errors = tuple(h.on_error for h in present if h.on_error is not None)

    return Hooks(
        before_request=reduce(_chain_before, before, _pass_request) if before else None,
        after_response=(
            reduce(_chain_after, reversed(after), _pass_response) if after else None
        ),
        on_error=_collect_errors(errors) if errors else None,
    )


# ---------------------------------------------------------------------------
# Enhanced transport
# ---------------------------------------------------------------------------


def _target_url(target: Union[str, httpx.URL, httpx.Request]) -> str:
    if isinstance(target, httpx.Request):
        return str(target.url)
    return str(target)


def _copy_options(options: Optional[RequestOptions]) -> RequestOptions:
    if options is None:
        return RequestOptions()
    return dataclasses.replace(
        options,
        headers=dict(options.headers),
        extensions=dict(options.extensions),
    )


def create_enhanced_transport(transport: Transport, hooks: Hooks) -> Transport:
    """Wrap *transport* so every call runs through *hooks*.

    Per call the target is normalized to a URL string, ``before_request``
    may replace the URL and options, the transport is invoked exactly once,
    and ``after_response`` may replace the response. If any of those steps
    raises, ``on_error`` is awaited and the original exception is re-raised
    unchanged.

    Args:
        transport: Coroutine function ``(url, options) -> response``.
        hooks: The (usually merged) hook set to apply.

    Returns:
        A coroutine function with the same call shape as *transport*.
    """

    async def enhanced(
        target: Union[str, httpx.URL, httpx.Request],
        options: Optional[RequestOptions] = None,
    ) -> Any:
        url = _target_url(target)
        final_options = _copy_options(options)
        try:
            if hooks.before_request is not None:
                url, final_options = _as_hook_request(
                    await resolve(hooks.before_request(url, final_options))
                )

            response = await transport(url, final_options)

            if hooks.after_response is not None:
                response = await resolve(hooks.after_response(response, url, final_options))
            return response
        except Exception as exc:
            if hooks.on_error is not None:
                await resolve(hooks.on_error(exc))
            raise

    return enhanced
