"""
Capability façades.

Each façade groups the operations of one subsystem. Methods are thin
bindings of a row in ``starlink_sdk.operations`` to the shared dispatcher;
``request`` may be the operation's input dataclass, a mapping of its fields,
or omitted for type defaults.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping

from starlink_sdk import operations as ops
from starlink_sdk.messages import Message
from starlink_sdk.models import device, dish, transceiver, wifi

if TYPE_CHECKING:
    from starlink_sdk.dispatch import Dispatcher

Request = Message | Mapping[str, Any] | None


class _Service:
    def __init__(self, dispatcher: "Dispatcher") -> None:
        self._dispatcher = dispatcher


class DeviceService(_Service):
    """Device-level operations (identity, status, logs, connectivity tests)."""

    async def get_info(self, request: Request = None) -> device.DeviceInfo:
        """Hardware and software identity."""
        return await self._dispatcher.call(ops.DEVICE_GET_INFO, request)

    async def get_status(self, request: Request = None) -> device.DeviceStatus:
        return await self._dispatcher.call(ops.DEVICE_GET_STATUS, request)

    async def reboot(self, request: Request = None) -> device.RebootResponse:
        """Reboot the device. The connection drops shortly after the acknowledgement."""
        return await self._dispatcher.call(ops.DEVICE_REBOOT, request)

    async def get_logs(self, request: Request = None) -> device.LogResponse:
        return await self._dispatcher.call(ops.DEVICE_GET_LOGS, request)

    async def get_location(self, request: device.GetLocationRequest | Mapping[str, Any] | None = None) -> device.Location:
        """Position fix. Requires location access to be enabled on the device."""
        return await self._dispatcher.call(ops.DEVICE_GET_LOCATION, request)

    async def speed_test(self, request: Request = None) -> device.SpeedTestResult:
        return await self._dispatcher.call(ops.DEVICE_SPEED_TEST, request)

    async def get_ping(self, request: Request = None) -> device.PingStats:
        return await self._dispatcher.call(ops.DEVICE_GET_PING, request)

    async def ping_host(self, request: device.PingHostRequest | Mapping[str, Any] | None = None) -> device.PingHostResult:
        """Ping ``request.address`` from the device."""
        return await self._dispatcher.call(ops.DEVICE_PING_HOST, request)

    async def get_network_interfaces(self, request: Request = None) -> device.NetworkInterfaces:
        return await self._dispatcher.call(ops.DEVICE_GET_NETWORK_INTERFACES, request)

    async def get_diagnostics(self, request: Request = None) -> device.DeviceDiagnostics:
        return await self._dispatcher.call(ops.DEVICE_GET_DIAGNOSTICS, request)


class DishService(_Service):
    """Dish operations (pointing, obstructions, EMC, configuration, power)."""

    async def get_context(self, request: Request = None) -> dish.DishContext:
        return await self._dispatcher.call(ops.DISH_GET_CONTEXT, request)

    async def get_status(self, request: Request = None) -> dish.DishStatus:
        """Dish status. Sends ``getStatus`` and expects the ``dishGetStatus`` branch back."""
        return await self._dispatcher.call(ops.DISH_GET_STATUS, request)

    async def stow(self, request: dish.DishStowRequest | Mapping[str, Any] | None = None) -> dish.DishStowResponse:
        """Stow the dish, or unstow it with ``DishStowRequest(unstow=True)``."""
        return await self._dispatcher.call(ops.DISH_STOW, request)

    async def get_obstruction_map(self, request: Request = None) -> dish.DishObstructionMap:
        return await self._dispatcher.call(ops.DISH_GET_OBSTRUCTION_MAP, request)

    async def clear_obstruction_map(self, request: Request = None) -> dish.DishClearObstructionMapResponse:
        return await self._dispatcher.call(ops.DISH_CLEAR_OBSTRUCTION_MAP, request)

    async def get_emc(self, request: Request = None) -> dish.DishEmcSettings:
        return await self._dispatcher.call(ops.DISH_GET_EMC, request)

    async def set_emc(self, request: dish.DishSetEmcRequest | Mapping[str, Any] | None = None) -> dish.DishSetEmcResponse:
        return await self._dispatcher.call(ops.DISH_SET_EMC, request)

    async def get_config(self, request: Request = None) -> dish.DishConfigResponse:
        return await self._dispatcher.call(ops.DISH_GET_CONFIG, request)

    async def set_config(
        self, request: dish.DishSetConfigRequest | Mapping[str, Any] | None = None
    ) -> dish.DishConfigResponse:
        return await self._dispatcher.call(ops.DISH_SET_CONFIG, request)

    async def set_power_save(self, request: dish.DishPowerSaveRequest | Mapping[str, Any] | None = None) -> None:
        """Apply a power save schedule. The device returns no payload."""
        await self._dispatcher.call(ops.DISH_SET_POWER_SAVE, request)

    async def activate_rssi_scan(
        self, request: dish.DishActivateRssiScanRequest | Mapping[str, Any] | None = None
    ) -> dish.DishRssiScanActivation:
        return await self._dispatcher.call(ops.DISH_ACTIVATE_RSSI_SCAN, request)

    async def get_rssi_scan_result(self, request: Request = None) -> dish.DishRssiScanResult:
        return await self._dispatcher.call(ops.DISH_GET_RSSI_SCAN_RESULT, request)

    async def get_diagnostics(self, request: Request = None) -> dish.DishDiagnostics:
        """Dish diagnostics. Sends ``getDiagnostics`` and expects ``dishGetDiagnostics``."""
        return await self._dispatcher.call(ops.DISH_GET_DIAGNOSTICS, request)


class WifiService(_Service):
    """WiFi router operations."""

    async def get_clients(self, request: Request = None) -> wifi.WifiClients:
        return await self._dispatcher.call(ops.WIFI_GET_CLIENTS, request)

    async def get_config(self, request: Request = None) -> wifi.WifiConfigResponse:
        return await self._dispatcher.call(ops.WIFI_GET_CONFIG, request)

    async def set_config(
        self, request: wifi.WifiSetConfigRequest | Mapping[str, Any] | None = None
    ) -> wifi.WifiSetConfigResponse:
        return await self._dispatcher.call(ops.WIFI_SET_CONFIG, request)

    async def setup(self, request: wifi.WifiSetupRequest | Mapping[str, Any] | None = None) -> wifi.WifiSetupResponse:
        return await self._dispatcher.call(ops.WIFI_SETUP, request)

    async def get_status(self, request: Request = None) -> wifi.WifiStatus:
        """Router status. Sends ``getStatus`` and expects the ``wifiGetStatus`` branch back."""
        return await self._dispatcher.call(ops.WIFI_GET_STATUS, request)

    async def get_ping_metrics(self, request: Request = None) -> wifi.WifiPingMetrics:
        return await self._dispatcher.call(ops.WIFI_GET_PING_METRICS, request)

    async def get_client_history(
        self, request: wifi.WifiGetClientHistoryRequest | Mapping[str, Any] | None = None
    ) -> wifi.WifiClientHistory:
        return await self._dispatcher.call(ops.WIFI_GET_CLIENT_HISTORY, request)

    async def set_client_given_name(
        self, request: wifi.WifiSetClientGivenNameRequest | Mapping[str, Any] | None = None
    ) -> wifi.WifiSetClientGivenNameResponse:
        return await self._dispatcher.call(ops.WIFI_SET_CLIENT_GIVEN_NAME, request)

    async def get_diagnostics(self, request: Request = None) -> wifi.WifiDiagnostics:
        return await self._dispatcher.call(ops.WIFI_GET_DIAGNOSTICS, request)

    async def run_self_test(
        self, request: wifi.WifiRunSelfTestRequest | Mapping[str, Any] | None = None
    ) -> wifi.WifiSelfTestResult:
        return await self._dispatcher.call(ops.WIFI_RUN_SELF_TEST, request)

    async def get_firewall(self, request: Request = None) -> wifi.WifiFirewall:
        return await self._dispatcher.call(ops.WIFI_GET_FIREWALL, request)

    async def get_guest_info(self, request: wifi.WifiGuestInfoRequest | Mapping[str, Any] | None = None) -> wifi.WifiGuestInfo:
        return await self._dispatcher.call(ops.WIFI_GET_GUEST_INFO, request)


class TransceiverService(_Service):
    """RF transceiver operations."""

    async def get_status(self, request: Request = None) -> transceiver.TransceiverStatus:
        """Transceiver status. Sends ``getStatus`` and expects ``transceiverGetStatus``."""
        return await self._dispatcher.call(ops.TRANSCEIVER_GET_STATUS, request)

    async def get_telemetry(self, request: Request = None) -> transceiver.TransceiverTelemetry:
        return await self._dispatcher.call(ops.TRANSCEIVER_GET_TELEMETRY, request)

    async def if_loopback_test(
        self, request: transceiver.TransceiverIfLoopbackTestRequest | Mapping[str, Any] | None = None
    ) -> transceiver.TransceiverIfLoopbackTestResult:
        return await self._dispatcher.call(ops.TRANSCEIVER_IF_LOOPBACK_TEST, request)
