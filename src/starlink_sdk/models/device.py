"""
Device payloads: identity, status, logs, location, connectivity tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from starlink_sdk.messages import Message


class PositionSource(Enum):
    """Source for location queries."""

    AUTO = "AUTO"
    NONE = "NONE"
    UT_INFO = "UT_INFO"
    EXTERNAL = "EXTERNAL"
    GPS = "GPS"
    STARLINK = "STARLINK"


# =============================================================================
# Requests
# =============================================================================


@dataclass
class GetDeviceInfoRequest(Message):
    """Client → Device: identity query (no fields)."""


@dataclass
class GetStatusRequest(Message):
    """Client → Device: status query (no fields).

    Shared by every façade; the device answers with the status branch of
    whichever subsystem handles it.
    """


@dataclass
class RebootRequest(Message):
    """Client → Device: reboot (no fields)."""


@dataclass
class GetLogRequest(Message):
    """Client → Device: log retrieval (no fields)."""


@dataclass
class GetLocationRequest(Message):
    """Client → Device: location query.

    Attributes:
        source: Position source name (see PositionSource)
    """

    source: str = PositionSource.AUTO.value


@dataclass
class SpeedTestRequest(Message):
    """Client → Device: run a speed test.

    Attributes:
        id: Test identifier chosen by the caller
        client_speedtest: Results of a test the client ran itself, reported to the device
    """

    id: int = 0
    client_speedtest: dict[str, Any] = field(default_factory=dict)


@dataclass
class GetPingRequest(Message):
    """Client → Device: ping statistics query (no fields)."""


@dataclass
class PingHostRequest(Message):
    """Client → Device: ping a specific host.

    Attributes:
        address: Host name or IP address to ping
        size: Payload size in bytes (0 = device default)
    """

    address: str = ""
    size: int = 0


@dataclass
class GetNetworkInterfacesRequest(Message):
    """Client → Device: network interface listing (no fields)."""


@dataclass
class GetDiagnosticsRequest(Message):
    """Client → Device: diagnostics query (no fields).

    Shared by the device, dish and WiFi façades.
    """


# =============================================================================
# Responses
# =============================================================================


@dataclass
class DeviceInfo(Message):
    """Device → Client: hardware and software identity."""

    id: str = ""
    hardware_version: str = ""
    software_version: str = ""
    country_code: str = ""
    utc_offset_s: int = 0
    is_prod: bool = False
    boot_count: int = 0
    anti_rollback_version: int = 0
    is_wifi_only: bool = False
    has_ncm: bool = False


@dataclass
class DeviceStatus(Message):
    """Device → Client: device-level health and throughput."""

    uptime_s: int = 0
    seconds_to_first_nonempty_slot: float = 0.0
    pop_ping_drop_rate: float = 0.0
    pop_ping_latency_ms: float = 0.0
    downlink_throughput_bps: float = 0.0
    uplink_throughput_bps: float = 0.0
    is_snr_above_nominal: bool = False
    is_obstructed: bool = False
    is_boot_complete: bool = False
    is_operational: bool = False
    is_heating_up: bool = False
    is_moving: bool = False
    is_temperature_throttled: bool = False
    seconds_since_last_boot: int = 0


@dataclass
class RebootResponse(Message):
    """Device → Client: reboot acknowledgement."""

    success: bool = False


@dataclass
class LogResponse(Message):
    """Device → Client: log contents."""

    syslog: str = ""
    offline_log: str = ""


@dataclass
class Location(Message):
    """Device → Client: position fix."""

    latitude: float = 0.0
    longitude: float = 0.0
    altitude: float = 0.0
    accuracy: float = 0.0
    source: str = ""


@dataclass
class SpeedTestResult(Message):
    """Device → Client: speed test outcome."""

    download_mbps: float = 0.0
    upload_mbps: float = 0.0
    latency_ms: float = 0.0
    packet_loss: float = 0.0


@dataclass
class PingStats(Message):
    """Device → Client: aggregate ping statistics."""

    latency_ms: float = 0.0
    packet_loss: float = 0.0
    min_latency_ms: float = 0.0
    max_latency_ms: float = 0.0
    avg_latency_ms: float = 0.0
    results: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class PingHostResult(Message):
    """Device → Client: result of pinging one host."""

    address: str = ""
    latency_ms: float = 0.0
    dropped: bool = False


@dataclass
class NetworkInterface(Message):
    """One network interface on the device."""

    name: str = ""
    up: bool = False
    mac_address: str = ""
    ipv4_addresses: list[str] = field(default_factory=list)
    ipv6_addresses: list[str] = field(default_factory=list)
    rx_bytes: int = 0
    tx_bytes: int = 0


@dataclass
class NetworkInterfaces(Message):
    """Device → Client: network interface listing."""

    network_interfaces: list[NetworkInterface] = field(default_factory=list)


@dataclass
class DeviceDiagnostics(Message):
    """Device → Client: device-level diagnostics."""

    id: str = ""
    hardware_version: str = ""
    software_version: str = ""
    alerts: dict[str, bool] = field(default_factory=dict)
    disablement_code: str = ""
