"""
Operation descriptors.

Each façade method is one row here: the request branch it sends, the input
payload type, the response branch it expects back and the output type to
decode. The dispatcher consumes these rows; no façade carries its own
dispatch logic.

Request and response tags differ for the polymorphic ``getStatus`` and
``getDiagnostics`` requests: the same request is answered with the status
branch of whichever subsystem the façade targets.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from starlink_sdk.errors import StarlinkError
from starlink_sdk.messages import Message, RequestTag, ResponseTag
from starlink_sdk.models import device, dish, transceiver, wifi


@dataclass(frozen=True)
class Operation:
    """One logical RPC carried over the envelope.

    Attributes:
        label: Façade-qualified name, e.g. ``"dish.get_status"``
        request_tag: Request branch to set
        input_type: Payload type for the request branch
        response_tag: Branch the response must carry (None for void operations)
        output_type: Payload type decoded from the response branch (None for void)
    """

    label: str
    request_tag: RequestTag
    input_type: type[Message]
    response_tag: ResponseTag | None
    output_type: type[Message] | None

    @property
    def is_void(self) -> bool:
        return self.response_tag is None

    def build_input(self, payload: Message | Mapping[str, Any] | None = None) -> Message:
        """Coerce a caller-supplied payload to this operation's input type.

        None means "type defaults"; a mapping is decoded with ``from_dict``.

        Raises:
            StarlinkError: (VALIDATION) for any other value
        """
        if payload is None:
            return self.input_type()
        if isinstance(payload, self.input_type):
            return payload
        if isinstance(payload, Mapping):
            return self.input_type.from_dict(payload)
        raise StarlinkError.validation(
            f"{self.label} expects {self.input_type.__name__}, got {type(payload).__name__}",
            operation=self.label,
        )


def _op(
    label: str,
    request_tag: RequestTag,
    input_type: type[Message],
    response_tag: ResponseTag | None,
    output_type: type[Message] | None,
) -> Operation:
    return Operation(label, request_tag, input_type, response_tag, output_type)


# =============================================================================
# Device
# =============================================================================

DEVICE_GET_INFO = _op(
    "device.get_info", RequestTag.GET_DEVICE_INFO, device.GetDeviceInfoRequest, ResponseTag.GET_DEVICE_INFO, device.DeviceInfo
)
DEVICE_GET_STATUS = _op(
    "device.get_status", RequestTag.GET_STATUS, device.GetStatusRequest, ResponseTag.GET_STATUS, device.DeviceStatus
)
DEVICE_REBOOT = _op("device.reboot", RequestTag.REBOOT, device.RebootRequest, ResponseTag.REBOOT, device.RebootResponse)
DEVICE_GET_LOGS = _op("device.get_logs", RequestTag.GET_LOG, device.GetLogRequest, ResponseTag.GET_LOG, device.LogResponse)
DEVICE_GET_LOCATION = _op(
    "device.get_location", RequestTag.GET_LOCATION, device.GetLocationRequest, ResponseTag.GET_LOCATION, device.Location
)
DEVICE_SPEED_TEST = _op(
    "device.speed_test", RequestTag.SPEED_TEST, device.SpeedTestRequest, ResponseTag.SPEED_TEST, device.SpeedTestResult
)
DEVICE_GET_PING = _op("device.get_ping", RequestTag.GET_PING, device.GetPingRequest, ResponseTag.GET_PING, device.PingStats)
DEVICE_PING_HOST = _op(
    "device.ping_host", RequestTag.PING_HOST, device.PingHostRequest, ResponseTag.PING_HOST, device.PingHostResult
)
DEVICE_GET_NETWORK_INTERFACES = _op(
    "device.get_network_interfaces",
    RequestTag.GET_NETWORK_INTERFACES,
    device.GetNetworkInterfacesRequest,
    ResponseTag.GET_NETWORK_INTERFACES,
    device.NetworkInterfaces,
)
DEVICE_GET_DIAGNOSTICS = _op(
    "device.get_diagnostics",
    RequestTag.GET_DIAGNOSTICS,
    device.GetDiagnosticsRequest,
    ResponseTag.GET_DIAGNOSTICS,
    device.DeviceDiagnostics,
)

# =============================================================================
# Dish
# =============================================================================

DISH_GET_CONTEXT = _op(
    "dish.get_context", RequestTag.DISH_GET_CONTEXT, dish.DishGetContextRequest, ResponseTag.DISH_GET_CONTEXT, dish.DishContext
)
DISH_GET_STATUS = _op(
    "dish.get_status", RequestTag.GET_STATUS, device.GetStatusRequest, ResponseTag.DISH_GET_STATUS, dish.DishStatus
)
DISH_STOW = _op("dish.stow", RequestTag.DISH_STOW, dish.DishStowRequest, ResponseTag.DISH_STOW, dish.DishStowResponse)
DISH_GET_OBSTRUCTION_MAP = _op(
    "dish.get_obstruction_map",
    RequestTag.DISH_GET_OBSTRUCTION_MAP,
    dish.DishGetObstructionMapRequest,
    ResponseTag.DISH_GET_OBSTRUCTION_MAP,
    dish.DishObstructionMap,
)
DISH_CLEAR_OBSTRUCTION_MAP = _op(
    "dish.clear_obstruction_map",
    RequestTag.DISH_CLEAR_OBSTRUCTION_MAP,
    dish.DishClearObstructionMapRequest,
    ResponseTag.DISH_CLEAR_OBSTRUCTION_MAP,
    dish.DishClearObstructionMapResponse,
)
DISH_GET_EMC = _op("dish.get_emc", RequestTag.DISH_GET_EMC, dish.DishGetEmcRequest, ResponseTag.DISH_GET_EMC, dish.DishEmcSettings)
DISH_SET_EMC = _op(
    "dish.set_emc", RequestTag.DISH_SET_EMC, dish.DishSetEmcRequest, ResponseTag.DISH_SET_EMC, dish.DishSetEmcResponse
)
DISH_GET_CONFIG = _op(
    "dish.get_config", RequestTag.DISH_GET_CONFIG, dish.DishGetConfigRequest, ResponseTag.DISH_GET_CONFIG, dish.DishConfigResponse
)
DISH_SET_CONFIG = _op(
    "dish.set_config", RequestTag.DISH_SET_CONFIG, dish.DishSetConfigRequest, ResponseTag.DISH_SET_CONFIG, dish.DishConfigResponse
)
DISH_SET_POWER_SAVE = _op("dish.set_power_save", RequestTag.DISH_POWER_SAVE, dish.DishPowerSaveRequest, None, None)
DISH_ACTIVATE_RSSI_SCAN = _op(
    "dish.activate_rssi_scan",
    RequestTag.DISH_ACTIVATE_RSSI_SCAN,
    dish.DishActivateRssiScanRequest,
    ResponseTag.DISH_ACTIVATE_RSSI_SCAN,
    dish.DishRssiScanActivation,
)
DISH_GET_RSSI_SCAN_RESULT = _op(
    "dish.get_rssi_scan_result",
    RequestTag.DISH_GET_RSSI_SCAN_RESULT,
    dish.DishGetRssiScanResultRequest,
    ResponseTag.DISH_GET_RSSI_SCAN_RESULT,
    dish.DishRssiScanResult,
)
DISH_GET_DIAGNOSTICS = _op(
    "dish.get_diagnostics",
    RequestTag.GET_DIAGNOSTICS,
    device.GetDiagnosticsRequest,
    ResponseTag.DISH_GET_DIAGNOSTICS,
    dish.DishDiagnostics,
)

# =============================================================================
# WiFi
# =============================================================================

WIFI_GET_CLIENTS = _op(
    "wifi.get_clients", RequestTag.WIFI_GET_CLIENTS, wifi.WifiGetClientsRequest, ResponseTag.WIFI_GET_CLIENTS, wifi.WifiClients
)
WIFI_GET_CONFIG = _op(
    "wifi.get_config", RequestTag.WIFI_GET_CONFIG, wifi.WifiGetConfigRequest, ResponseTag.WIFI_GET_CONFIG, wifi.WifiConfigResponse
)
WIFI_SET_CONFIG = _op(
    "wifi.set_config",
    RequestTag.WIFI_SET_CONFIG,
    wifi.WifiSetConfigRequest,
    ResponseTag.WIFI_SET_CONFIG,
    wifi.WifiSetConfigResponse,
)
WIFI_SETUP = _op("wifi.setup", RequestTag.WIFI_SETUP, wifi.WifiSetupRequest, ResponseTag.WIFI_SETUP, wifi.WifiSetupResponse)
WIFI_GET_STATUS = _op("wifi.get_status", RequestTag.GET_STATUS, device.GetStatusRequest, ResponseTag.WIFI_GET_STATUS, wifi.WifiStatus)
WIFI_GET_PING_METRICS = _op(
    "wifi.get_ping_metrics",
    RequestTag.WIFI_GET_PING_METRICS,
    wifi.WifiGetPingMetricsRequest,
    ResponseTag.WIFI_GET_PING_METRICS,
    wifi.WifiPingMetrics,
)
WIFI_GET_CLIENT_HISTORY = _op(
    "wifi.get_client_history",
    RequestTag.WIFI_GET_CLIENT_HISTORY,
    wifi.WifiGetClientHistoryRequest,
    ResponseTag.WIFI_GET_CLIENT_HISTORY,
    wifi.WifiClientHistory,
)
WIFI_SET_CLIENT_GIVEN_NAME = _op(
    "wifi.set_client_given_name",
    RequestTag.WIFI_SET_CLIENT_GIVEN_NAME,
    wifi.WifiSetClientGivenNameRequest,
    ResponseTag.WIFI_SET_CLIENT_GIVEN_NAME,
    wifi.WifiSetClientGivenNameResponse,
)
WIFI_GET_DIAGNOSTICS = _op(
    "wifi.get_diagnostics",
    RequestTag.GET_DIAGNOSTICS,
    device.GetDiagnosticsRequest,
    ResponseTag.WIFI_GET_DIAGNOSTICS,
    wifi.WifiDiagnostics,
)
WIFI_RUN_SELF_TEST = _op(
    "wifi.run_self_test", RequestTag.WIFI_SELF_TEST, wifi.WifiRunSelfTestRequest, ResponseTag.WIFI_SELF_TEST, wifi.WifiSelfTestResult
)
WIFI_GET_FIREWALL = _op(
    "wifi.get_firewall", RequestTag.WIFI_GET_FIREWALL, wifi.WifiGetFirewallRequest, ResponseTag.WIFI_GET_FIREWALL, wifi.WifiFirewall
)
WIFI_GET_GUEST_INFO = _op(
    "wifi.get_guest_info", RequestTag.WIFI_GUEST_INFO, wifi.WifiGuestInfoRequest, ResponseTag.WIFI_GUEST_INFO, wifi.WifiGuestInfo
)

# =============================================================================
# Transceiver
# =============================================================================

TRANSCEIVER_GET_STATUS = _op(
    "transceiver.get_status",
    RequestTag.GET_STATUS,
    device.GetStatusRequest,
    ResponseTag.TRANSCEIVER_GET_STATUS,
    transceiver.TransceiverStatus,
)
TRANSCEIVER_GET_TELEMETRY = _op(
    "transceiver.get_telemetry",
    RequestTag.TRANSCEIVER_GET_TELEMETRY,
    transceiver.TransceiverGetTelemetryRequest,
    ResponseTag.TRANSCEIVER_GET_TELEMETRY,
    transceiver.TransceiverTelemetry,
)
TRANSCEIVER_IF_LOOPBACK_TEST = _op(
    "transceiver.if_loopback_test",
    RequestTag.TRANSCEIVER_IF_LOOPBACK_TEST,
    transceiver.TransceiverIfLoopbackTestRequest,
    ResponseTag.TRANSCEIVER_IF_LOOPBACK_TEST,
    transceiver.TransceiverIfLoopbackTestResult,
)


OPERATIONS: dict[str, Operation] = {
    op.label: op
    for op in (
        DEVICE_GET_INFO,
        DEVICE_GET_STATUS,
        DEVICE_REBOOT,
        DEVICE_GET_LOGS,
        DEVICE_GET_LOCATION,
        DEVICE_SPEED_TEST,
        DEVICE_GET_PING,
        DEVICE_PING_HOST,
        DEVICE_GET_NETWORK_INTERFACES,
        DEVICE_GET_DIAGNOSTICS,
        DISH_GET_CONTEXT,
        DISH_GET_STATUS,
        DISH_STOW,
        DISH_GET_OBSTRUCTION_MAP,
        DISH_CLEAR_OBSTRUCTION_MAP,
        DISH_GET_EMC,
        DISH_SET_EMC,
        DISH_GET_CONFIG,
        DISH_SET_CONFIG,
        DISH_SET_POWER_SAVE,
        DISH_ACTIVATE_RSSI_SCAN,
        DISH_GET_RSSI_SCAN_RESULT,
        DISH_GET_DIAGNOSTICS,
        WIFI_GET_CLIENTS,
        WIFI_GET_CONFIG,
        WIFI_SET_CONFIG,
        WIFI_SETUP,
        WIFI_GET_STATUS,
        WIFI_GET_PING_METRICS,
        WIFI_GET_CLIENT_HISTORY,
        WIFI_SET_CLIENT_GIVEN_NAME,
        WIFI_GET_DIAGNOSTICS,
        WIFI_RUN_SELF_TEST,
        WIFI_GET_FIREWALL,
        WIFI_GET_GUEST_INFO,
        TRANSCEIVER_GET_STATUS,
        TRANSCEIVER_GET_TELEMETRY,
        TRANSCEIVER_IF_LOOPBACK_TEST,
    )
}
