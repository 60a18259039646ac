"""
Dish payloads: positioning, obstruction mapping, EMC, configuration, power
and RSSI scans.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from starlink_sdk.messages import Message

# =============================================================================
# Requests
# =============================================================================


@dataclass
class DishGetContextRequest(Message):
    """Client → Dish: context query (no fields)."""


@dataclass
class DishStowRequest(Message):
    """Client → Dish: stow or unstow.

    Attributes:
        unstow: False stows the dish, True returns it to tracking
    """

    unstow: bool = False


@dataclass
class DishGetObstructionMapRequest(Message):
    """Client → Dish: obstruction map query (no fields)."""


@dataclass
class DishClearObstructionMapRequest(Message):
    """Client → Dish: reset the obstruction map (no fields)."""


@dataclass
class DishGetEmcRequest(Message):
    """Client → Dish: EMC settings query (no fields)."""


@dataclass
class DishSetEmcRequest(Message):
    """Client → Dish: EMC test pointing.

    Attributes:
        theta: Beam theta angle in degrees
        phi: Beam phi angle in degrees
        rx_chan: Receive channel
        tx_chan: Transmit channel
        modulation: Modulation scheme number
        desired_tilt_angle: Tilt angle in degrees
    """

    theta: float = 0.0
    phi: float = 0.0
    rx_chan: int = 0
    tx_chan: int = 0
    modulation: int = 0
    desired_tilt_angle: float = 0.0


@dataclass
class DishGetConfigRequest(Message):
    """Client → Dish: configuration query (no fields)."""


@dataclass
class DishConfig(Message):
    """Persisted dish configuration."""

    snow_melt_mode: str = ""
    location_request_mode: str = ""
    level_dish_mode: str = ""
    power_save_start_minutes: int = 0
    power_save_duration_minutes: int = 0
    power_save_mode: bool = False


@dataclass
class DishSetConfigRequest(Message):
    """Client → Dish: replace configuration.

    Attributes:
        dish_config: Configuration to apply
    """

    dish_config: DishConfig = field(default_factory=DishConfig)


@dataclass
class DishPowerSaveRequest(Message):
    """Client → Dish: power save schedule.

    Attributes:
        power_save_start_minutes: Minutes after midnight when power save begins
        power_save_duration_minutes: Length of the power save window
        enable_power_save: Whether power save is enabled
    """

    power_save_start_minutes: int = 0
    power_save_duration_minutes: int = 0
    enable_power_save: bool = False


@dataclass
class DishActivateRssiScanRequest(Message):
    """Client → Dish: start an RSSI scan.

    Attributes:
        target_theta_deg: Scan target theta in degrees
        target_phi_deg: Scan target phi in degrees
        dwell_time_ms: Dwell time per point in milliseconds
        sub_band_index: Frequency sub-band to scan
    """

    target_theta_deg: float = 0.0
    target_phi_deg: float = 0.0
    dwell_time_ms: int = 0
    sub_band_index: int = 0


@dataclass
class DishGetRssiScanResultRequest(Message):
    """Client → Dish: RSSI scan result query (no fields)."""


# =============================================================================
# Responses
# =============================================================================


@dataclass
class DishContext(Message):
    """Dish → Client: pointing context."""

    cell_id: int = 0
    obstruction_fraction: float = 0.0
    boresight_azimuth_deg: float = 0.0
    boresight_elevation_deg: float = 0.0
    orientation_azimuth_deg: float = 0.0
    orientation_elevation_deg: float = 0.0
    orientation_roll_deg: float = 0.0
    dish_euler_rate_azimuth_deg_s: float = 0.0
    dish_euler_rate_elevation_deg_s: float = 0.0
    dish_euler_rate_roll_deg_s: float = 0.0


@dataclass
class DishStatus(Message):
    """Dish → Client: dish status."""

    uptime_s: int = 0
    state: str = ""
    seconds_to_first_nonempty_slot: float = 0.0
    pop_ping_drop_rate: float = 0.0
    pop_ping_latency_ms: float = 0.0
    downlink_throughput_bps: float = 0.0
    uplink_throughput_bps: float = 0.0
    boresight_azimuth_deg: float = 0.0
    boresight_elevation_deg: float = 0.0
    is_snr_above_nominal: bool = False
    is_obstructed: bool = False
    stow_requested: bool = False
    alerts: dict[str, bool] = field(default_factory=dict)


@dataclass
class DishStowResponse(Message):
    """Dish → Client: stow acknowledgement (no fields)."""


@dataclass
class DishObstructionMap(Message):
    """Dish → Client: obstruction map.

    ``snr`` is a row-major grid of ``num_rows * num_cols`` values; -1 marks
    cells without data.
    """

    num_rows: int = 0
    num_cols: int = 0
    snr: list[float] = field(default_factory=list)
    min_elevation_deg: float = 0.0
    max_theta_deg: float = 0.0

    def grid(self) -> list[list[float]]:
        """Return ``snr`` reshaped into rows."""
        if self.num_cols <= 0:
            return []
        return [self.snr[row * self.num_cols : (row + 1) * self.num_cols] for row in range(self.num_rows)]


@dataclass
class DishClearObstructionMapResponse(Message):
    """Dish → Client: obstruction map reset acknowledgement (no fields)."""


@dataclass
class DishEmcSettings(Message):
    """Dish → Client: EMC state."""

    theta: float = 0.0
    phi: float = 0.0
    rx_chan: int = 0
    tx_chan: int = 0
    modulation: int = 0
    desired_tilt_angle: float = 0.0
    uptime_s: int = 0


@dataclass
class DishSetEmcResponse(Message):
    """Dish → Client: EMC update acknowledgement (no fields)."""


@dataclass
class DishConfigResponse(Message):
    """Dish → Client: current configuration."""

    dish_config: DishConfig = field(default_factory=DishConfig)


@dataclass
class DishRssiScanActivation(Message):
    """Dish → Client: RSSI scan start result."""

    success: bool = False


@dataclass
class DishRssiScanResult(Message):
    """Dish → Client: RSSI scan result."""

    result: list[dict[str, Any]] = field(default_factory=list)
    scan_complete: bool = False


@dataclass
class DishDiagnostics(Message):
    """Dish → Client: dish diagnostics."""

    id: str = ""
    hardware_version: str = ""
    software_version: str = ""
    utc_offset_s: int = 0
    hardware_self_test: str = ""
    disablement_code: str = ""
    alerts: dict[str, bool] = field(default_factory=dict)
    location: dict[str, Any] = field(default_factory=dict)
