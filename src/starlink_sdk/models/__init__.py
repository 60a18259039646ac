"""
Typed payloads for every device operation, grouped by subsystem.
"""

from starlink_sdk.models import device, dish, transceiver, wifi

__all__ = ["device", "dish", "transceiver", "wifi"]
