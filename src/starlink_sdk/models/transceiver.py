"""
RF transceiver payloads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from starlink_sdk.messages import Message


@dataclass
class TransceiverGetTelemetryRequest(Message):
    """Client → Transceiver: telemetry query (no fields)."""


@dataclass
class TransceiverIfLoopbackTestRequest(Message):
    """Client → Transceiver: IF loopback test.

    Attributes:
        enable_if_loopback: Route IF output back into the receiver
    """

    enable_if_loopback: bool = False


@dataclass
class TransceiverStatus(Message):
    """Transceiver → Client: modem and GPS/IMU status."""

    mod_state: str = ""
    demod_state: str = ""
    gps_signal: str = ""
    gps_no_sats: int = 0
    gps_week: int = 0
    gps_tow: int = 0
    gps_valid: bool = False
    imu_lin_acc_x: float = 0.0
    imu_lin_acc_y: float = 0.0
    imu_lin_acc_z: float = 0.0
    imu_ang_vel_x: float = 0.0
    imu_ang_vel_y: float = 0.0
    imu_ang_vel_z: float = 0.0
    imu_temp: float = 0.0


@dataclass
class TransceiverTelemetry(Message):
    """Transceiver → Client: RF telemetry."""

    alerts: dict[str, bool] = field(default_factory=dict)
    rx_snr_db: float = 0.0
    tx_power_dbm: float = 0.0
    temperatures: dict[str, Any] = field(default_factory=dict)


@dataclass
class TransceiverIfLoopbackTestResult(Message):
    """Transceiver → Client: loopback test outcome."""

    ber_loopback_test: float = 0.0
    snr_loopback_test: float = 0.0
