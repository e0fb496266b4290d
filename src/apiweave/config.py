"""Client configuration and precedence resolution.

:class:`ClientConfig` is the single wiring object handed to
:func:`~apiweave.client.builder.build_client`. It is a frozen Pydantic model,
so one config can be shared between clients.

:func:`resolve_config` builds a config from explicit arguments layered over
environment variables, for applications that keep the API location in the
environment.

Precedence (high to low):
    1. Explicit keyword arguments
    2. Environment variables (``APIWEAVE_BASE_URL``, ``APIWEAVE_TIMEOUT``,
       ``APIWEAVE_VERIFY_SSL``)
    3. Model defaults
"""

from __future__ import annotations

import os
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from apiweave.exceptions import ConfigError
from apiweave.models import Hooks
from apiweave.plugins.base import Plugin

ENV_PREFIX = "APIWEAVE_"

_FALSE_VALUES = {"0", "false", "no", "off"}


class ClientConfig(BaseModel):
    """Wiring for one built client.

    Args:
        base_url: Base address every endpoint path is joined to.
        transport: Coroutine function ``(url, options) -> response``. When
            ``None``, an :class:`~apiweave.client.transport.HttpxTransport`
            configured from ``timeout`` and ``verify_ssl`` is used.
        default_headers: Headers added to every default-executed request.
            They override the built-in ``Content-Type``. The client copies
            them when it is built.
        hooks: Global hooks, applied inside plugin hooks and outside group
            and endpoint hooks. A mapping is coerced to :class:`Hooks`.
        plugins: Plugins in registration order.
        timeout: Request timeout in seconds for the default transport.
        verify_ssl: Whether the default transport verifies TLS certificates.

    Example::

        ClientConfig(
            base_url="https://api.example.com",
            default_headers={"Accept-Language": "en"},
            plugins=[auth_plugin(token="...")],
        )
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    base_url: str
    transport: Optional[Callable[..., Any]] = None
    default_headers: dict[str, str] = Field(default_factory=dict)
    hooks: Optional[Hooks] = None
    plugins: list[Plugin] = Field(default_factory=list)
    timeout: float = Field(default=30.0, gt=0)
    verify_ssl: bool = True


def _env(name: str) -> Optional[str]:
    value = os.environ.get(f"{ENV_PREFIX}{name}", "")
    return value or None


def resolve_config(
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
    verify_ssl: Optional[bool] = None,
    **kwargs: Any,
) -> ClientConfig:
    """Build a :class:`ClientConfig` from arguments layered over the environment.

    Args:
        base_url: Overrides ``APIWEAVE_BASE_URL``.
        timeout: Overrides ``APIWEAVE_TIMEOUT``.
        verify_ssl: Overrides ``APIWEAVE_VERIFY_SSL``.
        **kwargs: Remaining :class:`ClientConfig` fields (``transport``,
            ``hooks``, ``plugins``, ``default_headers``).

    Raises:
        ConfigError: If no base URL is given or set in the environment, or
            ``APIWEAVE_TIMEOUT`` is not a number, or the resulting fields fail
            validation.
    """
    if base_url is None:
        base_url = _env("BASE_URL")
    if base_url is None:
        raise ConfigError(
            f"No base URL configured. Pass base_url or set {ENV_PREFIX}BASE_URL."
        )

    fields: dict[str, Any] = dict(kwargs)
    fields["base_url"] = base_url

    if timeout is None:
        env_timeout = _env("TIMEOUT")
        if env_timeout is not None:
            try:
                timeout = float(env_timeout)
            except ValueError:
                raise ConfigError(
                    f"Invalid {ENV_PREFIX}TIMEOUT value: {env_timeout!r}"
                ) from None
    if timeout is not None:
        fields["timeout"] = timeout

    if verify_ssl is None:
        env_verify = _env("VERIFY_SSL")
        if env_verify is not None:
            verify_ssl = env_verify.strip().lower() not in _FALSE_VALUES
    if verify_ssl is not None:
        fields["verify_ssl"] = verify_ssl

    try:
        return ClientConfig(**fields)
    except ValidationError as exc:
        raise ConfigError(f"Invalid client configuration: {exc}") from exc
