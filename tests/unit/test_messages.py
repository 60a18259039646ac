"""Unit tests for payload messages and the envelope codec."""

import json

import pytest

from starlink_sdk.errors import ErrorKind, StarlinkError
from starlink_sdk.messages import (
    Empty,
    ErrorStatus,
    RequestEnvelope,
    RequestTag,
    ResponseEnvelope,
    ResponseTag,
    decode_response_frame,
    encode_frame,
)
from starlink_sdk.models.device import DeviceInfo, NetworkInterface, NetworkInterfaces, PingHostRequest
from starlink_sdk.models.dish import DishConfig, DishObstructionMap, DishSetConfigRequest
from starlink_sdk.models.wifi import WifiClient, WifiClients


class TestTags:
    def test_polymorphic_request_tags(self):
        assert RequestTag("getStatus") is RequestTag.GET_STATUS
        assert RequestTag("getDiagnostics") is RequestTag.GET_DIAGNOSTICS

    def test_status_branches_exist_only_as_responses(self):
        for name in ("dishGetStatus", "wifiGetStatus", "transceiverGetStatus"):
            assert ResponseTag(name).value == name
            with pytest.raises(ValueError):
                RequestTag(name)

    def test_response_tag_from_string(self):
        assert ResponseTag.from_string("wifiGetClients") is ResponseTag.WIFI_GET_CLIENTS
        assert ResponseTag.from_string("notABranch") is None
        assert ResponseTag.from_string(None) is None


class TestMessage:
    """Test camelCase conversion of payload dataclasses."""

    def test_to_dict_uses_camel_case(self):
        info = DeviceInfo(id="ut01", hardware_version="rev3_proto2", utc_offset_s=-18000, has_ncm=True)
        data = info.to_dict()
        assert data["id"] == "ut01"
        assert data["hardwareVersion"] == "rev3_proto2"
        assert data["utcOffsetS"] == -18000
        assert data["hasNcm"] is True
        assert "hardware_version" not in data

    def test_from_dict_accepts_camel_and_snake_case(self):
        a = DeviceInfo.from_dict({"softwareVersion": "2024.1", "bootCount": 5})
        b = DeviceInfo.from_dict({"software_version": "2024.1", "boot_count": 5})
        assert a == b
        assert a.software_version == "2024.1"
        assert a.boot_count == 5

    def test_from_dict_ignores_unknown_keys(self):
        info = DeviceInfo.from_dict({"id": "x", "newFirmwareField": 1})
        assert info.id == "x"

    def test_from_dict_none_gives_defaults(self):
        assert DeviceInfo.from_dict(None) == DeviceInfo()

    def test_from_dict_rejects_non_mapping(self):
        with pytest.raises(StarlinkError) as exc_info:
            DeviceInfo.from_dict(["not", "a", "mapping"])
        assert exc_info.value.kind is ErrorKind.VALIDATION

    def test_from_dict_coerces_numbers(self):
        info = DeviceInfo.from_dict({"bootCount": "42", "antiRollbackVersion": 3.0})
        assert info.boot_count == 42
        assert info.anti_rollback_version == 3
        assert DishObstructionMap.from_dict({"minElevationDeg": 25}).min_elevation_deg == 25.0

    def test_from_dict_null_keeps_default(self):
        assert DeviceInfo.from_dict({"id": None, "bootCount": None}) == DeviceInfo()

    @pytest.mark.parametrize(
        "data",
        [
            {"isProd": "nope"},
            {"bootCount": True},
            {"bootCount": 1.5},
            {"id": 5},
            {"softwareVersion": ["2024"]},
        ],
    )
    def test_from_dict_rejects_wrong_scalar_type(self, data):
        with pytest.raises(StarlinkError) as exc_info:
            DeviceInfo.from_dict(data)
        assert exc_info.value.kind is ErrorKind.VALIDATION
        assert exc_info.value.details["field"] in ("is_prod", "boot_count", "id", "software_version")

    @pytest.mark.parametrize("clients", ["ab", 7, [1], ["laptop"]])
    def test_from_dict_rejects_bad_message_list(self, clients):
        with pytest.raises(StarlinkError) as exc_info:
            WifiClients.from_dict({"clients": clients})
        assert exc_info.value.kind is ErrorKind.VALIDATION

    def test_from_dict_keeps_message_instances(self):
        config = DishConfig(snow_melt_mode="ALWAYS_ON")
        assert DishSetConfigRequest.from_dict({"dishConfig": config}).dish_config is config

    def test_nested_message_list(self):
        clients = WifiClients.from_dict(
            {"clients": [{"mac": "aa:bb", "givenName": "Laptop"}, {"mac": "cc:dd", "signalStrength": -52}]}
        )
        assert clients.clients == [WifiClient(mac="aa:bb", given_name="Laptop"), WifiClient(mac="cc:dd", signal_strength=-52)]
        assert clients.to_dict()["clients"][0]["givenName"] == "Laptop"

    def test_nested_message(self):
        request = DishSetConfigRequest(dish_config=DishConfig(snow_melt_mode="ALWAYS_ON"))
        data = request.to_dict()
        assert data == {"dishConfig": {**DishConfig().to_dict(), "snowMeltMode": "ALWAYS_ON"}}
        assert DishSetConfigRequest.from_dict(data) == request

    def test_list_of_plain_values_is_copied(self):
        iface = NetworkInterface(name="eth0", ipv4_addresses=["192.168.1.1"])
        data = NetworkInterfaces(network_interfaces=[iface]).to_dict()
        data["networkInterfaces"][0]["ipv4Addresses"].append("10.0.0.1")
        assert iface.ipv4_addresses == ["192.168.1.1"]

    def test_obstruction_grid(self):
        obstruction = DishObstructionMap(num_rows=2, num_cols=3, snr=[1, 2, 3, 4, 5, 6])
        assert obstruction.grid() == [[1, 2, 3], [4, 5, 6]]
        assert DishObstructionMap().grid() == []


class TestRequestEnvelope:
    def test_defaults(self):
        envelope = RequestEnvelope(RequestTag.GET_DEVICE_INFO)
        assert envelope.payload == Empty()
        assert envelope.id == 0
        assert envelope.epoch == 0
        assert envelope.target == ""

    def test_wire_shape(self):
        envelope = RequestEnvelope(RequestTag.PING_HOST, PingHostRequest(address="8.8.8.8", size=64), id=7)
        assert envelope.to_dict() == {
            "id": 7,
            "epoch": 0,
            "target": "",
            "request": {"case": "pingHost", "value": {"address": "8.8.8.8", "size": 64}},
        }

    def test_from_dict(self):
        data = RequestEnvelope(RequestTag.PING_HOST, PingHostRequest(address="1.1.1.1"), id=3).to_dict()
        decoded = RequestEnvelope.from_dict(data, PingHostRequest)
        assert decoded.tag is RequestTag.PING_HOST
        assert decoded.payload == PingHostRequest(address="1.1.1.1")
        assert decoded.id == 3

    def test_unknown_tag_rejected(self):
        with pytest.raises(StarlinkError) as exc_info:
            RequestEnvelope("getDeviceInfo")  # type: ignore[arg-type]
        assert exc_info.value.kind is ErrorKind.VALIDATION

    def test_unknown_tag_in_dict_rejected(self):
        with pytest.raises(StarlinkError):
            RequestEnvelope.from_dict({"request": {"case": "launchRocket", "value": {}}})

    def test_non_message_payload_rejected(self):
        with pytest.raises(StarlinkError) as exc_info:
            RequestEnvelope(RequestTag.PING_HOST, {"address": "8.8.8.8"})  # type: ignore[arg-type]
        assert exc_info.value.kind is ErrorKind.VALIDATION


class TestResponseEnvelope:
    def test_of_message(self):
        response = ResponseEnvelope.of(ResponseTag.GET_DEVICE_INFO, DeviceInfo(id="ut01"), id=4)
        assert response.tag == "getDeviceInfo"
        assert response.response_tag is ResponseTag.GET_DEVICE_INFO
        assert response.value["id"] == "ut01"
        assert response.id == 4

    def test_from_dict(self):
        response = ResponseEnvelope.from_dict({"id": 2, "response": {"case": "dishStow", "value": {}}})
        assert response.tag == "dishStow"
        assert response.value == {}
        assert response.id == 2
        assert response.error is None

    def test_missing_response_has_no_tag(self):
        response = ResponseEnvelope.from_dict({"id": 1})
        assert response.tag is None
        assert response.response_tag is None

    def test_error_status(self):
        response = ResponseEnvelope.from_dict({"id": 1, "error": {"code": 12, "message": "unimplemented"}})
        assert response.error == ErrorStatus(code=12, message="unimplemented")
        assert response.to_dict() == {"id": 1, "error": {"code": 12, "message": "unimplemented"}}

    def test_bad_error_code_keeps_request_id(self):
        with pytest.raises(StarlinkError) as exc_info:
            ResponseEnvelope.from_dict({"id": 4, "error": {"code": "oops", "message": "bad"}})
        assert exc_info.value.kind is ErrorKind.PROTOCOL_MISMATCH
        assert exc_info.value.details["id"] == 4

    def test_error_without_code_is_unknown(self):
        assert ResponseEnvelope.from_dict({"error": {"message": "boom"}}).error == ErrorStatus(code=2, message="boom")

    @pytest.mark.parametrize(
        "data",
        [
            ["not", "an", "object"],
            {"id": "seven"},
            {"response": "dishStow"},
            {"response": {"case": 5, "value": {}}},
            {"response": {"case": "dishStow", "value": [1, 2]}},
            {"error": {"code": "oops"}},
            {"error": {"code": 2.5}},
        ],
    )
    def test_malformed_is_protocol_mismatch(self, data):
        with pytest.raises(StarlinkError) as exc_info:
            ResponseEnvelope.from_dict(data)
        assert exc_info.value.kind is ErrorKind.PROTOCOL_MISMATCH


class TestFraming:
    def test_encode_is_one_line(self):
        frame = encode_frame(RequestEnvelope(RequestTag.REBOOT, id=1))
        assert frame.endswith(b"\n")
        assert frame.count(b"\n") == 1
        assert json.loads(frame)["request"]["case"] == "reboot"

    def test_decode_response(self):
        frame = encode_frame(ResponseEnvelope.of("wifiGetStatus", {"wifiSsid": "STARLINK"}, id=9))
        response = decode_response_frame(frame)
        assert response.tag == "wifiGetStatus"
        assert response.value == {"wifiSsid": "STARLINK"}
        assert response.id == 9

    def test_invalid_json(self):
        with pytest.raises(StarlinkError) as exc_info:
            decode_response_frame(b"{not json\n")
        assert exc_info.value.kind is ErrorKind.PROTOCOL_MISMATCH
