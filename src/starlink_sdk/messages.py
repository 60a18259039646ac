"""
Envelope protocol for Starlink device communication.

Every device capability travels through one physical RPC ("handle") as an
envelope: a generic request whose payload is a tagged union with exactly one
branch set, answered by a generic response carrying the matching branch.

Supports:
- Closed enumerations of the request and response union branches
- A Message base class giving every payload dataclass camelCase
  to_dict()/from_dict() conversion
- Request/response envelopes and their newline-delimited JSON framing
"""

from __future__ import annotations

import dataclasses
import json
import typing
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, TypeVar

from starlink_sdk.errors import ErrorKind, StarlinkError

M = TypeVar("M", bound="Message")


class RequestTag(Enum):
    """Request union branches (wire names)."""

    # Device
    GET_DEVICE_INFO = "getDeviceInfo"
    GET_STATUS = "getStatus"
    REBOOT = "reboot"
    GET_LOG = "getLog"
    GET_LOCATION = "getLocation"
    SPEED_TEST = "speedTest"
    GET_PING = "getPing"
    PING_HOST = "pingHost"
    GET_NETWORK_INTERFACES = "getNetworkInterfaces"
    GET_DIAGNOSTICS = "getDiagnostics"

    # Dish
    DISH_GET_CONTEXT = "dishGetContext"
    DISH_STOW = "dishStow"
    DISH_GET_OBSTRUCTION_MAP = "dishGetObstructionMap"
    DISH_CLEAR_OBSTRUCTION_MAP = "dishClearObstructionMap"
    DISH_GET_EMC = "dishGetEmc"
    DISH_SET_EMC = "dishSetEmc"
    DISH_GET_CONFIG = "dishGetConfig"
    DISH_SET_CONFIG = "dishSetConfig"
    DISH_POWER_SAVE = "dishPowerSave"
    DISH_ACTIVATE_RSSI_SCAN = "dishActivateRssiScan"
    DISH_GET_RSSI_SCAN_RESULT = "dishGetRssiScanResult"

    # WiFi
    WIFI_GET_CLIENTS = "wifiGetClients"
    WIFI_GET_CONFIG = "wifiGetConfig"
    WIFI_SET_CONFIG = "wifiSetConfig"
    WIFI_SETUP = "wifiSetup"
    WIFI_GET_PING_METRICS = "wifiGetPingMetrics"
    WIFI_GET_CLIENT_HISTORY = "wifiGetClientHistory"
    WIFI_SET_CLIENT_GIVEN_NAME = "wifiSetClientGivenName"
    WIFI_SELF_TEST = "wifiSelfTest"
    WIFI_GET_FIREWALL = "wifiGetFirewall"
    WIFI_GUEST_INFO = "wifiGuestInfo"

    # Transceiver
    TRANSCEIVER_GET_TELEMETRY = "transceiverGetTelemetry"
    TRANSCEIVER_IF_LOOPBACK_TEST = "transceiverIfLoopbackTest"


class ResponseTag(Enum):
    """Response union branches (wire names).

    The device picks the branch. A polymorphic request such as
    ``getStatus`` is answered with ``dishGetStatus``, ``wifiGetStatus`` or
    ``transceiverGetStatus`` depending on which subsystem handled it.
    """

    # Device
    GET_DEVICE_INFO = "getDeviceInfo"
    GET_STATUS = "getStatus"
    REBOOT = "reboot"
    GET_LOG = "getLog"
    GET_LOCATION = "getLocation"
    SPEED_TEST = "speedTest"
    GET_PING = "getPing"
    PING_HOST = "pingHost"
    GET_NETWORK_INTERFACES = "getNetworkInterfaces"
    GET_DIAGNOSTICS = "getDiagnostics"

    # Dish
    DISH_GET_CONTEXT = "dishGetContext"
    DISH_GET_STATUS = "dishGetStatus"
    DISH_STOW = "dishStow"
    DISH_GET_OBSTRUCTION_MAP = "dishGetObstructionMap"
    DISH_CLEAR_OBSTRUCTION_MAP = "dishClearObstructionMap"
    DISH_GET_EMC = "dishGetEmc"
    DISH_SET_EMC = "dishSetEmc"
    DISH_GET_CONFIG = "dishGetConfig"
    DISH_SET_CONFIG = "dishSetConfig"
    DISH_POWER_SAVE = "dishPowerSave"
    DISH_ACTIVATE_RSSI_SCAN = "dishActivateRssiScan"
    DISH_GET_RSSI_SCAN_RESULT = "dishGetRssiScanResult"
    DISH_GET_DIAGNOSTICS = "dishGetDiagnostics"

    # WiFi
    WIFI_GET_CLIENTS = "wifiGetClients"
    WIFI_GET_CONFIG = "wifiGetConfig"
    WIFI_SET_CONFIG = "wifiSetConfig"
    WIFI_SETUP = "wifiSetup"
    WIFI_GET_STATUS = "wifiGetStatus"
    WIFI_GET_PING_METRICS = "wifiGetPingMetrics"
    WIFI_GET_CLIENT_HISTORY = "wifiGetClientHistory"
    WIFI_SET_CLIENT_GIVEN_NAME = "wifiSetClientGivenName"
    WIFI_GET_DIAGNOSTICS = "wifiGetDiagnostics"
    WIFI_SELF_TEST = "wifiSelfTest"
    WIFI_GET_FIREWALL = "wifiGetFirewall"
    WIFI_GUEST_INFO = "wifiGuestInfo"

    # Transceiver
    TRANSCEIVER_GET_STATUS = "transceiverGetStatus"
    TRANSCEIVER_GET_TELEMETRY = "transceiverGetTelemetry"
    TRANSCEIVER_IF_LOOPBACK_TEST = "transceiverIfLoopbackTest"

    @classmethod
    def from_string(cls, value: str | None) -> "ResponseTag | None":
        """Convert a wire name to a ResponseTag, or None if it is not a known branch."""
        try:
            return cls(value)
        except ValueError:
            return None


# =============================================================================
# Payload base class
# =============================================================================


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


_FIELD_CACHE: dict[type, tuple[tuple[str, str, str, Any], ...]] = {}


def _unwrap_optional(hint: Any) -> Any:
    args = [arg for arg in typing.get_args(hint) if arg is not type(None)]
    if len(args) == 1 and type(None) in typing.get_args(hint):
        return args[0]
    return hint


_PLAIN_TYPES = (str, int, float, bool, list, dict)


def _is_message_type(hint: Any) -> bool:
    return isinstance(hint, type) and issubclass(hint, Message)


def _coerce_plain(owner: type, name: str, target: type | None, value: Any) -> Any:
    """Check a plain field value against its declared type.

    64-bit integers arrive as decimal strings in proto JSON, so int fields
    accept those. Float fields accept any JSON number. Items of plain lists
    and dicts are not checked.

    Raises:
        StarlinkError: (VALIDATION) if the value has another type
    """
    is_number = isinstance(value, (int, float)) and not isinstance(value, bool)
    if target is None:
        return value
    if target is bool and isinstance(value, bool):
        return value
    if target is int and is_number and (isinstance(value, int) or value.is_integer()):
        return int(value)
    if target is int and isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
    if target is float and is_number:
        return float(value)
    if target is dict and isinstance(value, Mapping):
        return dict(value)
    if target in (str, list) and isinstance(value, target):
        return value
    raise StarlinkError.validation(
        f"{owner.__name__}.{name} expects {target.__name__}, got {type(value).__name__}", field=name
    )


def _describe_fields(cls: type) -> tuple[tuple[str, str, str, Any], ...]:
    """Return (name, wire_key, kind, target) per field, where kind is
    "message", "message_list" or "plain". For plain fields the target is
    the scalar or container type to check, or None to accept any value."""
    cached = _FIELD_CACHE.get(cls)
    if cached is not None:
        return cached

    hints = typing.get_type_hints(cls)
    described = []
    for f in dataclasses.fields(cls):
        hint = _unwrap_optional(hints.get(f.name, Any))
        kind, target = "plain", None
        origin = typing.get_origin(hint) or hint
        if _is_message_type(hint):
            kind, target = "message", hint
        elif origin is list and _is_message_type((typing.get_args(hint) or (Any,))[0]):
            kind, target = "message_list", typing.get_args(hint)[0]
        elif origin in _PLAIN_TYPES:
            target = origin
        described.append((f.name, _camel(f.name), kind, target))

    result = tuple(described)
    _FIELD_CACHE[cls] = result
    return result


class Message:
    """Base class for operation payload dataclasses.

    Subclasses are plain ``@dataclass`` classes whose fields all have
    defaults, so ``SomeRequest()`` is always the "type defaults" payload.
    """

    def to_dict(self) -> dict[str, Any]:
        """Convert to a camelCase dictionary for JSON serialization."""
        result: dict[str, Any] = {}
        for name, key, kind, _target in _describe_fields(type(self)):
            value = getattr(self, name)
            if kind == "message" and value is not None:
                value = value.to_dict()
            elif kind == "message_list":
                value = [item.to_dict() for item in value]
            elif isinstance(value, list):
                value = list(value)
            elif isinstance(value, dict):
                value = dict(value)
            result[key] = value
        return result

    @classmethod
    def from_dict(cls: type[M], data: Mapping[str, Any] | None) -> M:
        """Create an instance from a dictionary.

        Accepts camelCase or snake_case keys. Unknown keys are ignored;
        absent and null keys keep their defaults.

        Raises:
            StarlinkError: (VALIDATION) if ``data`` is not a mapping or a
                field value does not match the field type
        """
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise StarlinkError.validation(f"{cls.__name__} expects a mapping, got {type(data).__name__}")

        kwargs: dict[str, Any] = {}
        for name, key, kind, target in _describe_fields(cls):
            if key in data:
                value = data[key]
            elif name in data:
                value = data[name]
            else:
                continue

            if value is None and kind != "message":
                continue
            if kind == "message":
                if value is not None and not isinstance(value, target):
                    value = target.from_dict(value)
            elif kind == "message_list":
                if not isinstance(value, list):
                    raise StarlinkError.validation(
                        f"{cls.__name__}.{name} expects a list, got {type(value).__name__}", field=name
                    )
                value = [item if isinstance(item, target) else target.from_dict(item) for item in value]
            else:
                value = _coerce_plain(cls, name, target, value)
            kwargs[name] = value

        return cls(**kwargs)


@dataclass
class Empty(Message):
    """Payload with no fields."""


# =============================================================================
# Envelopes
# =============================================================================


@dataclass(frozen=True)
class RequestEnvelope:
    """Client → Device: one operation wrapped in the generic request.

    Attributes:
        tag: Request union branch
        payload: Operation-specific input message
        id: Request identifier, echoed back by the device
        epoch: Protocol epoch (always 0 from this client)
        target: Routing hint, usually empty
    """

    tag: RequestTag
    payload: Message = field(default_factory=Empty)
    id: int = 0
    epoch: int = 0
    target: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.tag, RequestTag):
            raise StarlinkError.validation(f"Unknown request type: {self.tag!r}", tag=repr(self.tag))
        if not isinstance(self.payload, Message):
            raise StarlinkError.validation(
                f"Request payload for {self.tag.value} must be a Message, got {type(self.payload).__name__}",
                tag=self.tag.value,
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "epoch": self.epoch,
            "target": self.target,
            "request": {"case": self.tag.value, "value": self.payload.to_dict()},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], payload_type: type[Message] = Empty) -> "RequestEnvelope":
        """Create RequestEnvelope from dictionary, decoding the branch value as ``payload_type``."""
        request = data.get("request") or {}
        try:
            tag = RequestTag(request.get("case"))
        except ValueError:
            raise StarlinkError.validation(f"Unknown request type: {request.get('case')!r}") from None
        return cls(
            tag=tag,
            payload=payload_type.from_dict(request.get("value")),
            id=int(data.get("id", 0)),
            epoch=int(data.get("epoch", 0)),
            target=data.get("target", ""),
        )


@dataclass(frozen=True)
class ErrorStatus:
    """Status reported by the device in place of a response branch.

    Attributes:
        code: Status code (gRPC numbering)
        message: Description supplied by the device
    """

    code: int
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ErrorStatus":
        """Create ErrorStatus from dictionary; a missing code means UNKNOWN (2).

        Raises:
            StarlinkError: (PROTOCOL_MISMATCH) if the code is not an integer
        """
        code = data.get("code", 2)
        try:
            if isinstance(code, bool) or (isinstance(code, float) and not code.is_integer()):
                raise ValueError(code)
            code = int(code)
        except (TypeError, ValueError):
            raise StarlinkError(f"Malformed error status code: {code!r}", ErrorKind.PROTOCOL_MISMATCH) from None
        return cls(code=code, message=str(data.get("message", "")))


@dataclass(frozen=True)
class ResponseEnvelope:
    """Device → Client: the generic response.

    Attributes:
        tag: Response union branch name as received (None when no branch is set)
        value: Raw branch value, decoded by the dispatcher into the expected type
        id: Identifier of the request this answers (0 if the device does not echo it)
        error: Device-reported status, set instead of a branch on failure
    """

    tag: str | None = None
    value: dict[str, Any] = field(default_factory=dict)
    id: int = 0
    error: ErrorStatus | None = None

    @property
    def response_tag(self) -> ResponseTag | None:
        return ResponseTag.from_string(self.tag)

    @classmethod
    def of(
        cls,
        tag: ResponseTag | str,
        value: Message | Mapping[str, Any] | None = None,
        id: int = 0,
    ) -> "ResponseEnvelope":
        """Build a response carrying ``value`` in the ``tag`` branch."""
        if isinstance(value, Message):
            value = value.to_dict()
        name = tag.value if isinstance(tag, ResponseTag) else tag
        return cls(tag=name, value=dict(value or {}), id=id)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        if self.error is not None:
            return {"id": self.id, "error": self.error.to_dict()}
        return {"id": self.id, "response": {"case": self.tag, "value": dict(self.value)}}

    @classmethod
    def from_dict(cls, data: Any) -> "ResponseEnvelope":
        """Create ResponseEnvelope from dictionary.

        Raises:
            StarlinkError: (PROTOCOL_MISMATCH) if the data is not a response envelope
        """
        if not isinstance(data, Mapping):
            raise StarlinkError("Malformed response envelope: expected an object", ErrorKind.PROTOCOL_MISMATCH)

        try:
            response_id = int(data.get("id") or 0)
        except (TypeError, ValueError):
            raise StarlinkError(f"Malformed response id: {data.get('id')!r}", ErrorKind.PROTOCOL_MISMATCH) from None

        error = data.get("error")
        if error is not None:
            if not isinstance(error, Mapping):
                error = {"message": str(error)}
            try:
                status = ErrorStatus.from_dict(error)
            except StarlinkError as e:
                e.details.setdefault("id", response_id)
                raise
            return cls(id=response_id, error=status)

        response = data.get("response")
        if response is None:
            return cls(id=response_id)
        if not isinstance(response, Mapping):
            raise StarlinkError(
                "Malformed response envelope: response must be an object", ErrorKind.PROTOCOL_MISMATCH, {"id": response_id}
            )

        tag = response.get("case")
        value = response.get("value") or {}
        if tag is not None and not isinstance(tag, str):
            raise StarlinkError(f"Malformed response case: {tag!r}", ErrorKind.PROTOCOL_MISMATCH, {"id": response_id})
        if not isinstance(value, Mapping):
            raise StarlinkError(f"Malformed value for response {tag}", ErrorKind.PROTOCOL_MISMATCH, {"id": response_id})

        return cls(tag=tag, value=dict(value), id=response_id)


# =============================================================================
# Framing
# =============================================================================


def encode_frame(envelope: RequestEnvelope | ResponseEnvelope) -> bytes:
    """Serialize an envelope as one line of compact JSON."""
    return json.dumps(envelope.to_dict(), separators=(",", ":")).encode("utf-8") + b"\n"


def decode_response_frame(line: bytes) -> ResponseEnvelope:
    """Deserialize one line of JSON into a ResponseEnvelope.

    Raises:
        StarlinkError: (PROTOCOL_MISMATCH) if the line is not valid JSON
    """
    try:
        data = json.loads(line.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise StarlinkError(f"Invalid JSON frame: {e}", ErrorKind.PROTOCOL_MISMATCH) from e
    return ResponseEnvelope.from_dict(data)
