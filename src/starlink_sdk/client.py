"""
Starlink client.

The client owns one configuration, one transport binding and one dispatcher,
and exposes them through four façades.

Example:
    >>> async with StarlinkClient(address="192.168.100.1:9200") as client:
    ...     info = await client.device.get_info()
    ...     print(f"{info.id} running {info.software_version}")
    ...     status = await client.dish.get_status()
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from starlink_sdk.config import ClientConfig, normalize_config
from starlink_sdk.dispatch import Dispatcher
from starlink_sdk.services import DeviceService, DishService, TransceiverService, WifiService
from starlink_sdk.transport import Channel, ChannelFactory, ConnectionState, TransportBinding

logger = logging.getLogger(__name__)


class StarlinkClient:
    """Client for one Starlink dish or router.

    No connection is made at construction. The channel is created on the
    first operation or on ``wait_for_ready()``.

    Args:
        config: A ClientConfig, a mapping of config fields, or None for defaults
        channel_factory: Builds the channel from the config (defaults to StreamChannel)
        **overrides: Individual config fields, applied on top of ``config``
    """

    def __init__(
        self,
        config: ClientConfig | Mapping[str, Any] | None = None,
        *,
        channel_factory: ChannelFactory | None = None,
        **overrides: Any,
    ) -> None:
        self._config = normalize_config(config, **overrides)
        self._transport = TransportBinding(self._config, channel_factory)
        self._dispatcher = Dispatcher(self._transport, self._config)

        self.device = DeviceService(self._dispatcher)
        self.dish = DishService(self._dispatcher)
        self.wifi = WifiService(self._dispatcher)
        self.transceiver = TransceiverService(self._dispatcher)

        self.debug("Client created", self._config.to_dict())

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def state(self) -> ConnectionState:
        return self._transport.state

    @property
    def channel(self) -> Channel:
        """The live channel, created on first access."""
        return self._transport.ensure_connected()

    def is_ready(self) -> bool:
        return self._transport.is_ready()

    async def wait_for_ready(self, timeout: float | None = None) -> None:
        """Create the channel if needed and wait until it is usable.

        Args:
            timeout: Seconds, passed to the channel
        """
        await self._transport.wait_for_ready(timeout)
        self.debug("Channel ready")

    async def close(self) -> None:
        """Release the channel. Safe to call repeatedly or before any connection."""
        await self._transport.close()
        self.debug("Client closed")

    def debug(self, message: str, data: Any = None) -> None:
        """Emit a debug record when ``config.debug`` is enabled."""
        if not self._config.debug:
            return
        if data is None:
            logger.debug(f"[StarlinkClient] {message}")
        else:
            logger.debug(f"[StarlinkClient] {message} {data}")

    async def __aenter__(self) -> "StarlinkClient":
        return self

    async def __aexit__(
        self,
        exc_type: type | None,  # noqa: ARG002
        exc_val: Exception | None,  # noqa: ARG002
        exc_tb: Any,  # noqa: ARG002
    ) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"StarlinkClient(address={self._config.address!r}, state={self.state.value})"


def create_client(
    config: ClientConfig | Mapping[str, Any] | None = None,
    *,
    channel_factory: ChannelFactory | None = None,
    **overrides: Any,
) -> StarlinkClient:
    """Build a StarlinkClient; same arguments as the constructor."""
    return StarlinkClient(config, channel_factory=channel_factory, **overrides)
