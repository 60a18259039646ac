"""
WiFi router payloads: clients, configuration, metrics, self tests and
guest access.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from starlink_sdk.messages import Message

# =============================================================================
# Shared
# =============================================================================


@dataclass
class WifiClient(Message):
    """One client attached to the router."""

    mac: str = ""
    name: str = ""
    given_name: str = ""
    client_id: int = 0
    ip_address: str = ""
    signal_strength: float = 0.0
    frequency: int = 0
    bandwidth: int = 0
    is_authenticated: bool = False
    last_seen: int = 0


@dataclass
class WifiConfig(Message):
    """Router configuration."""

    network_name: str = ""
    country_code: str = ""
    setup_complete: bool = False
    boot_count: int = 0
    mesh_enabled: bool = False
    networks: list[dict[str, Any]] = field(default_factory=list)


# =============================================================================
# Requests
# =============================================================================


@dataclass
class WifiGetClientsRequest(Message):
    """Client → Router: attached client listing (no fields)."""


@dataclass
class WifiGetConfigRequest(Message):
    """Client → Router: configuration query (no fields)."""


@dataclass
class WifiSetConfigRequest(Message):
    """Client → Router: replace configuration.

    Attributes:
        wifi_config: Configuration to apply
    """

    wifi_config: WifiConfig = field(default_factory=WifiConfig)


@dataclass
class WifiSetupRequest(Message):
    """Client → Router: first-time setup.

    Attributes:
        network_name: SSID to create
        network_password: WPA passphrase
        skip: Skip setup and keep factory settings
    """

    network_name: str = ""
    network_password: str = ""
    skip: bool = False


@dataclass
class WifiGetPingMetricsRequest(Message):
    """Client → Router: ping metrics query (no fields)."""


@dataclass
class WifiGetClientHistoryRequest(Message):
    """Client → Router: client history query.

    Attributes:
        mac_address: Restrict history to one client (empty = all)
    """

    mac_address: str = ""


@dataclass
class WifiSetClientGivenNameRequest(Message):
    """Client → Router: label a client.

    Attributes:
        client_id: Router-assigned client identifier
        given_name: Display name to assign
    """

    client_id: int = 0
    given_name: str = ""


@dataclass
class WifiRunSelfTestRequest(Message):
    """Client → Router: run the self test.

    Attributes:
        full: Run the extended test suite
    """

    full: bool = False


@dataclass
class WifiGetFirewallRequest(Message):
    """Client → Router: firewall query (no fields)."""


@dataclass
class WifiGuestInfoRequest(Message):
    """Client → Router: guest network query.

    Attributes:
        client_mac: Guest client MAC to look up (empty = all)
    """

    client_mac: str = ""


# =============================================================================
# Responses
# =============================================================================


@dataclass
class WifiClients(Message):
    """Router → Client: attached clients."""

    clients: list[WifiClient] = field(default_factory=list)


@dataclass
class WifiConfigResponse(Message):
    """Router → Client: current configuration."""

    wifi_config: WifiConfig = field(default_factory=WifiConfig)


@dataclass
class WifiSetConfigResponse(Message):
    """Router → Client: applied configuration."""

    updated_wifi_config: WifiConfig = field(default_factory=WifiConfig)


@dataclass
class WifiSetupResponse(Message):
    """Router → Client: setup acknowledgement (no fields)."""


@dataclass
class WifiStatus(Message):
    """Router → Client: radio status."""

    wifi_ssid: str = ""
    wifi_hide: bool = False
    wifi_security_type: str = ""
    wifi_power: int = 0
    wifi_channel: int = 0
    wifi_mode: str = ""
    wifi_freq: int = 0
    wifi_country_code: str = ""
    uptime_s: int = 0
    clients: list[WifiClient] = field(default_factory=list)


@dataclass
class WifiPingMetrics(Message):
    """Router → Client: ping metrics per target."""

    internet: dict[str, Any] = field(default_factory=dict)
    pop: dict[str, Any] = field(default_factory=dict)
    dish: dict[str, Any] = field(default_factory=dict)


@dataclass
class WifiClientHistory(Message):
    """Router → Client: client connection history."""

    clients: list[WifiClient] = field(default_factory=list)
    events: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class WifiSetClientGivenNameResponse(Message):
    """Router → Client: rename acknowledgement (no fields)."""


@dataclass
class WifiDiagnostics(Message):
    """Router → Client: router diagnostics."""

    id: str = ""
    hardware_version: str = ""
    software_version: str = ""
    networks: list[dict[str, Any]] = field(default_factory=list)
    alerts: dict[str, bool] = field(default_factory=dict)


@dataclass
class WifiSelfTestResult(Message):
    """Router → Client: self test outcome."""

    passed: bool = False
    results: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class WifiFirewall(Message):
    """Router → Client: firewall state."""

    enabled: bool = False
    rules: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class WifiGuestInfo(Message):
    """Router → Client: guest network state."""

    guests: list[WifiClient] = field(default_factory=list)
    is_guest_network_enabled: bool = False
