"""Starlink SDK - async client for Starlink dishes and routers.

Example:
    >>> from starlink_sdk import StarlinkClient
    >>> async with StarlinkClient() as client:
    ...     info = await client.device.get_info()
"""

from starlink_sdk.client import StarlinkClient, create_client
from starlink_sdk.config import ClientConfig, Credentials, config_from_env, normalize_config
from starlink_sdk.errors import ErrorKind, StarlinkError, map_transport_error
from starlink_sdk.messages import Message, RequestEnvelope, RequestTag, ResponseEnvelope, ResponseTag
from starlink_sdk.operations import OPERATIONS, Operation
from starlink_sdk.transport import Channel, ConnectionState, StreamChannel
from starlink_sdk.utils import calculate_backoff, retry_with_backoff, sleep, with_timeout

__version__ = "0.1.0"

__all__ = [
    "OPERATIONS",
    "Channel",
    "ClientConfig",
    "ConnectionState",
    "Credentials",
    "ErrorKind",
    "Message",
    "Operation",
    "RequestEnvelope",
    "RequestTag",
    "ResponseEnvelope",
    "ResponseTag",
    "StarlinkClient",
    "StarlinkError",
    "StreamChannel",
    "calculate_backoff",
    "config_from_env",
    "create_client",
    "map_transport_error",
    "normalize_config",
    "retry_with_backoff",
    "sleep",
    "with_timeout",
]
