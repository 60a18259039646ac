"""
Transport binding for Starlink devices.

A client owns one TransportBinding, which lazily owns at most one Channel.
The channel carries request envelopes to the device's single "handle" RPC
and returns response envelopes.

Supports:
- Pluggable channels through a ChannelFactory (tests, alternative wire stacks)
- StreamChannel, the default: asyncio streams carrying newline-delimited JSON
  envelopes, TLS when the credentials carry an SSLContext
- Response correlation by envelope id with per-request deadlines
- Redial with exponential backoff after the device drops the connection
- An explicit UNINITIALIZED → CONNECTED → CLOSED state machine
"""

from __future__ import annotations

import abc
import asyncio
import logging
import threading
from enum import Enum
from typing import Any, Callable

from starlink_sdk.config import ClientConfig
from starlink_sdk.errors import StarlinkError, map_transport_error
from starlink_sdk.messages import RequestEnvelope, ResponseEnvelope, decode_response_frame, encode_frame
from starlink_sdk.utils import calculate_backoff, sleep

logger = logging.getLogger(__name__)

# Per-line read limit; an obstruction map reply is several hundred KB.
STREAM_LIMIT = 16 * 1024 * 1024


class ConnectionState(Enum):
    """Transport binding state."""

    UNINITIALIZED = "uninitialized"
    CONNECTED = "connected"
    CLOSED = "closed"


class Channel(abc.ABC):
    """A connection to one device exposing the single envelope RPC."""

    @abc.abstractmethod
    async def handle(self, request: RequestEnvelope) -> ResponseEnvelope:
        """Send one request envelope and return the device's response envelope."""

    async def wait_for_ready(self, timeout: float | None = None) -> None:  # noqa: ARG002
        """Resolve once the channel can carry requests."""
        return None

    @abc.abstractmethod
    async def close(self) -> None:
        """Release the connection. Must be idempotent."""


ChannelFactory = Callable[[ClientConfig], Channel]


class StreamChannel(Channel):
    """Channel over an asyncio stream with newline-delimited JSON envelopes.

    Constructing the channel performs no I/O. The socket is dialled on the
    first request (or an explicit ``connect()``), bounded by the connection
    timeout. A background read loop resolves pending requests by envelope id.

    Example:
        >>> channel = StreamChannel(normalize_config(address="127.0.0.1:9200"))
        >>> response = await channel.handle(RequestEnvelope(RequestTag.GET_DEVICE_INFO, id=1))
        >>> await channel.close()
    """

    def __init__(self, config: ClientConfig) -> None:
        self._config = config
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._read_task: asyncio.Task[None] | None = None
        self._pending: dict[int, asyncio.Future[ResponseEnvelope]] = {}
        self._dial_lock: asyncio.Lock | None = None
        self._has_connected = False
        self._closed = False

    @property
    def is_open(self) -> bool:
        return self._writer is not None and not self._writer.is_closing()

    async def connect(self) -> None:
        """Dial the device now instead of on the first request."""
        await self._ensure_open()

    async def handle(self, request: RequestEnvelope) -> ResponseEnvelope:
        """Send a request envelope and wait for the response with the same id.

        Raises:
            StarlinkError: CONNECTION if the channel is closed or the device
                drops the connection, TIMEOUT if no response arrives within
                the request timeout
        """
        await self._ensure_open()
        writer = self._writer
        if writer is None:
            raise StarlinkError.connection("Connection lost before sending", address=self._config.address)

        loop = asyncio.get_running_loop()
        future: asyncio.Future[ResponseEnvelope] = loop.create_future()
        self._pending[request.id] = future

        timeout_ms = self._config.request_timeout
        try:
            writer.write(encode_frame(request))
            await writer.drain()
            logger.debug(f"Sent {request.tag.value} (id={request.id})")

            return await asyncio.wait_for(future, timeout=timeout_ms / 1000.0)

        except asyncio.TimeoutError:
            logger.warning(f"Request {request.tag.value} (id={request.id}) timed out after {timeout_ms}ms")
            raise StarlinkError.timeout(
                f"Request {request.tag.value} timed out after {timeout_ms}ms", timeout_ms=timeout_ms
            ) from None

        finally:
            self._pending.pop(request.id, None)

    async def close(self) -> None:
        """Close the connection and fail any pending requests. Idempotent."""
        if self._closed:
            return
        self._closed = True

        if self._read_task and not self._read_task.done():
            self._read_task.cancel()
            try:
                await self._read_task
            except asyncio.CancelledError:
                pass

        await self._close_stream()
        self._fail_pending(StarlinkError.connection("Channel closed", address=self._config.address))
        logger.info(f"Closed channel to {self._config.address}")

    # =========================================================================
    # Connection management
    # =========================================================================

    async def _ensure_open(self) -> None:
        if self._closed:
            raise StarlinkError.connection("Channel is closed", address=self._config.address)
        if self.is_open:
            return

        if self._dial_lock is None:
            self._dial_lock = asyncio.Lock()

        async with self._dial_lock:
            if self.is_open:
                return
            if self._has_connected and not self._config.auto_reconnect:
                raise StarlinkError.connection("Connection lost and auto_reconnect is disabled", address=self._config.address)

            # First dial is a single attempt; redials back off.
            attempts = max(1, self._config.max_retries) if self._has_connected else 1
            for attempt in range(attempts):
                try:
                    await self._dial()
                    return
                except (OSError, asyncio.TimeoutError) as e:
                    if attempt + 1 >= attempts:
                        raise
                    delay = calculate_backoff(
                        attempt, self._config.reconnect_backoff_ms, self._config.max_reconnect_backoff_ms
                    )
                    logger.warning(f"Dial {attempt + 1}/{attempts} to {self._config.address} failed ({e}), retrying in {delay}ms")
                    await sleep(delay)

    async def _dial(self) -> None:
        config = self._config
        credentials = config.credentials
        logger.info(f"Connecting to {config.address}{' (TLS)' if credentials.is_secure else ''}")

        kwargs: dict[str, Any] = {}
        if credentials.is_secure:
            kwargs["ssl"] = credentials.ssl_context
            kwargs["server_hostname"] = credentials.server_hostname or config.host

        self._reader, self._writer = await asyncio.wait_for(
            asyncio.open_connection(config.host, config.port, limit=STREAM_LIMIT, **kwargs),
            timeout=config.connection_timeout / 1000.0,
        )
        self._has_connected = True
        self._read_task = asyncio.create_task(self._read_loop())
        logger.info(f"Connected to {config.address}")

    async def _close_stream(self) -> None:
        writer = self._writer
        self._reader = None
        self._writer = None
        await self._close_writer(writer)

    @staticmethod
    async def _close_writer(writer: asyncio.StreamWriter | None) -> None:
        if writer is not None and not writer.is_closing():
            writer.close()
            try:
                await writer.wait_closed()
            except KeyboardInterrupt:  # noqa: KBI002
                raise
            except Exception as e:
                logger.debug(f"Error closing stream: {e}")

    def _fail_pending(self, error: StarlinkError) -> None:
        for request_id, future in list(self._pending.items()):
            if not future.done():
                future.set_exception(error)
            self._pending.pop(request_id, None)

    # =========================================================================
    # Read loop
    # =========================================================================

    async def _read_loop(self) -> None:
        """Background task resolving pending requests from incoming frames."""
        reader = self._reader
        logger.debug("Read loop started")

        try:
            while reader is not None:
                try:
                    line = await reader.readline()
                except (OSError, asyncio.IncompleteReadError) as e:
                    logger.warning(f"Read error: {e}")
                    break

                if not line:
                    logger.warning(f"Connection closed by device at {self._config.address}")
                    break
                if not line.strip():
                    continue

                try:
                    response = decode_response_frame(line)
                except StarlinkError as e:
                    self._reject(e)
                    continue

                self._resolve(response)

        except asyncio.CancelledError:
            logger.debug("Read loop cancelled")
            raise
        except KeyboardInterrupt:  # noqa: KBI002
            raise
        except Exception as e:
            logger.error(f"Read loop error: {e}")

        # Detach and fail before awaiting so a redial cannot interleave.
        if not self._closed and self._reader is reader:
            writer = self._writer
            self._reader = None
            self._writer = None
            self._fail_pending(StarlinkError.connection("Connection closed by device", address=self._config.address))
            await self._close_writer(writer)

    def _match(self, response_id: int) -> asyncio.Future[ResponseEnvelope] | None:
        future = self._pending.get(response_id)
        if future is None and response_id == 0 and len(self._pending) == 1:
            # Device did not echo the id; only one request can own the response.
            future = next(iter(self._pending.values()))
        return future

    def _resolve(self, response: ResponseEnvelope) -> None:
        future = self._match(response.id)
        if future is None:
            logger.warning(f"Received response for unknown request: {response.id}")
            return
        if not future.done():
            future.set_result(response)

    def _reject(self, error: StarlinkError) -> None:
        """Fail the request a malformed envelope answers, or drop the frame.

        Frames that are not JSON objects carry no usable id and are dropped.
        """
        future = self._match(error.details["id"]) if "id" in error.details else None
        if future is None:
            logger.warning(f"Dropping malformed frame: {error}")
            return
        logger.warning(f"Malformed response for request {error.details['id']}: {error}")
        if not future.done():
            future.set_exception(error)


def default_channel_factory(config: ClientConfig) -> Channel:
    return StreamChannel(config)


class TransportBinding:
    """Lazily owns exactly one channel for one client.

    Channel creation runs under a lock with no await between the check and
    the assignment, so concurrent first use creates a single channel.
    """

    def __init__(self, config: ClientConfig, channel_factory: ChannelFactory | None = None) -> None:
        self._config = config
        self._factory = channel_factory or default_channel_factory
        self._channel: Channel | None = None
        self._state = ConnectionState.UNINITIALIZED
        self._lock = threading.Lock()

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def address(self) -> str:
        return self._config.address

    def ensure_connected(self) -> Channel:
        """Return the channel, creating it on first use.

        After ``close()`` a fresh channel is created only when
        ``auto_reconnect`` is enabled.

        Raises:
            StarlinkError: CONNECTION if the binding is closed and reconnect is disabled
        """
        with self._lock:
            if self._state is ConnectionState.CONNECTED and self._channel is not None:
                return self._channel
            if self._state is ConnectionState.CLOSED and not self._config.auto_reconnect:
                raise StarlinkError.connection("Client is closed", address=self._config.address)

            self._channel = self._factory(self._config)
            self._state = ConnectionState.CONNECTED
            logger.debug(f"Created channel for {self._config.address}")
            return self._channel

    def is_ready(self) -> bool:
        return self._state is ConnectionState.CONNECTED and self._channel is not None

    async def wait_for_ready(self, timeout: float | None = None) -> None:
        """Create the channel if needed and wait until it is usable.

        Args:
            timeout: Passed through to the channel (seconds); enforcement is
                the channel's concern
        """
        channel = self.ensure_connected()
        try:
            await channel.wait_for_ready(timeout)
        except KeyboardInterrupt:  # noqa: KBI002
            raise
        except Exception as e:
            raise map_transport_error(e, self._config.address) from e

    async def send(self, envelope: RequestEnvelope) -> ResponseEnvelope:
        """Carry one envelope over the channel.

        Raises:
            StarlinkError: Every failure, classified by map_transport_error
        """
        channel = self.ensure_connected()
        try:
            return await channel.handle(envelope)
        except KeyboardInterrupt:  # noqa: KBI002
            raise
        except Exception as e:
            raise map_transport_error(e, self._config.address) from e

    async def close(self) -> None:
        """Release the channel and mark the binding closed. Never raises."""
        with self._lock:
            channel, self._channel = self._channel, None
            self._state = ConnectionState.CLOSED

        if channel is None:
            return
        try:
            await channel.close()
        except KeyboardInterrupt:  # noqa: KBI002
            raise
        except Exception as e:
            logger.debug(f"Error closing channel for {self._config.address}: {e}")
