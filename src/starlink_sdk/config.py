"""
Client configuration.

Configuration is built once per client from caller-supplied values merged
with defaults, and is immutable afterwards. Timeouts and backoff bounds are
in milliseconds.

Environment variables (read by config_from_env):
- STARLINK_ADDRESS: device address, host:port
- STARLINK_DEBUG: "1" or "true" enables debug records
- STARLINK_REQUEST_TIMEOUT_MS / STARLINK_CONNECTION_TIMEOUT_MS
"""

from __future__ import annotations

import os
import ssl
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping

from starlink_sdk.errors import StarlinkError

# Default configuration
DEFAULT_ADDRESS = "192.168.100.1:9200"
DEFAULT_REQUEST_TIMEOUT = 30000
DEFAULT_CONNECTION_TIMEOUT = 10000
DEFAULT_MAX_RETRIES = 3
DEFAULT_AUTO_RECONNECT = True
DEFAULT_RECONNECT_BACKOFF_MS = 1000
DEFAULT_MAX_RECONNECT_BACKOFF_MS = 30000
DEFAULT_DEBUG = False


@dataclass(frozen=True)
class Credentials:
    """Channel security settings.

    Attributes:
        ssl_context: TLS context; None means an insecure (plain TCP) channel
        server_hostname: Hostname to verify against, when it differs from the address
    """

    ssl_context: ssl.SSLContext | None = None
    server_hostname: str | None = None

    @classmethod
    def insecure(cls) -> "Credentials":
        return cls()

    @classmethod
    def secure(cls, ssl_context: ssl.SSLContext | None = None, server_hostname: str | None = None) -> "Credentials":
        """TLS credentials, using the system trust store when no context is given."""
        return cls(ssl_context=ssl_context or ssl.create_default_context(), server_hostname=server_hostname)

    @property
    def is_secure(self) -> bool:
        return self.ssl_context is not None


@dataclass(frozen=True)
class ClientConfig:
    """Normalized client configuration (all fields populated).

    Attributes:
        address: Device address as host:port
        credentials: Channel security settings
        request_timeout: Per-request transport deadline in milliseconds
        connection_timeout: Dial timeout in milliseconds
        max_retries: Dial attempts before a reconnect gives up
        auto_reconnect: Whether a dropped or closed channel is re-established on next use
        reconnect_backoff_ms: Initial delay between dial attempts
        max_reconnect_backoff_ms: Upper bound for the dial delay
        debug: Emit a debug record for every dispatched operation
    """

    address: str = DEFAULT_ADDRESS
    credentials: Credentials = field(default_factory=Credentials.insecure)
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT
    connection_timeout: int = DEFAULT_CONNECTION_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    auto_reconnect: bool = DEFAULT_AUTO_RECONNECT
    reconnect_backoff_ms: int = DEFAULT_RECONNECT_BACKOFF_MS
    max_reconnect_backoff_ms: int = DEFAULT_MAX_RECONNECT_BACKOFF_MS
    debug: bool = DEFAULT_DEBUG

    @property
    def host(self) -> str:
        return _split_address(self.address)[0]

    @property
    def port(self) -> int:
        return _split_address(self.address)[1]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary (credentials reported as a security mode)."""
        return {
            "address": self.address,
            "credentials": "secure" if self.credentials.is_secure else "insecure",
            "request_timeout": self.request_timeout,
            "connection_timeout": self.connection_timeout,
            "max_retries": self.max_retries,
            "auto_reconnect": self.auto_reconnect,
            "reconnect_backoff_ms": self.reconnect_backoff_ms,
            "max_reconnect_backoff_ms": self.max_reconnect_backoff_ms,
            "debug": self.debug,
        }


_FIELD_NAMES = frozenset(f.name for f in fields(ClientConfig))


def _split_address(address: str) -> tuple[str, int]:
    host, sep, port = address.rpartition(":")
    if not sep or not host or not port.isdigit():
        raise StarlinkError.validation(f"Invalid address {address!r}: expected host:port", address=address)
    return host.strip("[]"), int(port)


def _validate(config: ClientConfig) -> ClientConfig:
    _split_address(config.address)

    if not isinstance(config.credentials, Credentials):
        raise StarlinkError.validation(f"credentials must be a Credentials instance, got {type(config.credentials).__name__}")

    for name in ("request_timeout", "connection_timeout", "max_retries", "reconnect_backoff_ms", "max_reconnect_backoff_ms"):
        value = getattr(config, name)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            raise StarlinkError.validation(f"{name} must be a non-negative number, got {value!r}", field=name)

    if config.max_reconnect_backoff_ms < config.reconnect_backoff_ms:
        raise StarlinkError.validation(
            "max_reconnect_backoff_ms must not be smaller than reconnect_backoff_ms",
            field="max_reconnect_backoff_ms",
        )

    return config


def normalize_config(
    partial: Mapping[str, Any] | ClientConfig | None = None,
    **overrides: Any,
) -> ClientConfig:
    """Merge caller-supplied values with defaults.

    Explicit None values count as "not supplied". The input mapping is never
    mutated.

    Args:
        partial: Mapping of config fields, an existing ClientConfig, or None
        **overrides: Individual fields, applied on top of ``partial``

    Returns:
        A validated, immutable ClientConfig

    Raises:
        StarlinkError: (VALIDATION) for unknown fields or invalid values
    """
    if isinstance(partial, ClientConfig):
        base = partial
        supplied: dict[str, Any] = {}
    else:
        base = ClientConfig()
        supplied = dict(partial or {})

    supplied.update(overrides)

    unknown = sorted(set(supplied) - _FIELD_NAMES)
    if unknown:
        raise StarlinkError.validation(f"Unknown configuration field(s): {', '.join(unknown)}", fields=unknown)

    values = {name: value for name, value in supplied.items() if value is not None}
    return _validate(replace(base, **values))


def config_from_env(environ: Mapping[str, str] | None = None) -> ClientConfig:
    """Build a configuration from STARLINK_* environment variables."""
    env = os.environ if environ is None else environ
    values: dict[str, Any] = {}

    address = env.get("STARLINK_ADDRESS")
    if address:
        values["address"] = address

    debug = env.get("STARLINK_DEBUG")
    if debug is not None:
        values["debug"] = debug.strip().lower() in ("1", "true", "yes")

    for variable, name in (
        ("STARLINK_REQUEST_TIMEOUT_MS", "request_timeout"),
        ("STARLINK_CONNECTION_TIMEOUT_MS", "connection_timeout"),
    ):
        raw = env.get(variable)
        if raw is None:
            continue
        try:
            values[name] = int(raw)
        except ValueError:
            raise StarlinkError.validation(f"{variable} must be an integer, got {raw!r}", variable=variable) from None

    return normalize_config(values)
