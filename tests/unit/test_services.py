"""Unit tests for the capability façades.

Each façade method must send its operation's request branch and accept
only its operation's response branch.
"""

import asyncio

import pytest

from starlink_sdk.messages import RequestTag, ResponseEnvelope
from starlink_sdk.models.device import Location, PingHostRequest
from starlink_sdk.models.dish import DishPowerSaveRequest, DishStowRequest
from starlink_sdk.models.transceiver import TransceiverIfLoopbackTestRequest, TransceiverIfLoopbackTestResult
from starlink_sdk.models.wifi import WifiSetClientGivenNameRequest
from starlink_sdk.operations import OPERATIONS
from starlink_sdk.services import DeviceService, DishService, TransceiverService, WifiService

FACADES = {
    "device": DeviceService,
    "dish": DishService,
    "wifi": WifiService,
    "transceiver": TransceiverService,
}


def _run(coro):
    """Helper to run an async coroutine in a new event loop."""
    return asyncio.run(coro)


def _public_methods(cls):
    return sorted(name for name in vars(cls) if not name.startswith("_"))


class TestFacadeCoverage:
    @pytest.mark.parametrize("facade", sorted(FACADES))
    def test_methods_match_operation_table(self, facade):
        expected = sorted(label.split(".", 1)[1] for label in OPERATIONS if label.startswith(f"{facade}."))
        assert _public_methods(FACADES[facade]) == expected

    @pytest.mark.parametrize("label", sorted(OPERATIONS))
    def test_method_sends_its_request_tag(self, label, client, fake_channel):
        op = OPERATIONS[label]
        facade, method = label.split(".", 1)
        if not op.is_void:
            fake_channel.queue(ResponseEnvelope.of(op.response_tag, {}))
        else:
            fake_channel.queue(ResponseEnvelope())

        result = _run(getattr(getattr(client, facade), method)())

        assert fake_channel.last_request.tag is op.request_tag
        if op.is_void:
            assert result is None
        else:
            assert isinstance(result, op.output_type)


class TestRequestPayloads:
    def test_location_round_trip(self, client, fake_channel):
        fake_channel.queue(
            ResponseEnvelope.of("getLocation", {"latitude": 47.6062, "longitude": -122.3321, "altitude": 56.0})
        )
        location = _run(client.device.get_location())
        assert location == Location(latitude=47.6062, longitude=-122.3321, altitude=56.0)
        assert fake_channel.last_request.payload.source == "AUTO"

    def test_ping_host_mapping_payload(self, client, fake_channel):
        fake_channel.queue(ResponseEnvelope.of("pingHost", {"latencyMs": 23.5}))
        result = _run(client.device.ping_host({"address": "1.1.1.1", "size": 56}))
        assert result.latency_ms == 23.5
        assert fake_channel.last_request.payload == PingHostRequest(address="1.1.1.1", size=56)

    def test_unstow(self, client, fake_channel):
        fake_channel.queue(ResponseEnvelope.of("dishStow"))
        _run(client.dish.stow(DishStowRequest(unstow=True)))
        assert fake_channel.last_request.tag is RequestTag.DISH_STOW
        assert fake_channel.last_request.to_dict()["request"]["value"] == {"unstow": True}

    def test_power_save_is_void(self, client, fake_channel):
        fake_channel.queue(ResponseEnvelope())
        request = DishPowerSaveRequest(power_save_start_minutes=60, power_save_duration_minutes=120, enable_power_save=True)
        assert _run(client.dish.set_power_save(request)) is None
        assert fake_channel.last_request.payload == request

    def test_set_client_given_name(self, client, fake_channel):
        fake_channel.queue(ResponseEnvelope.of("wifiSetClientGivenName"))
        _run(client.wifi.set_client_given_name(WifiSetClientGivenNameRequest(client_id=4, given_name="Office")))
        assert fake_channel.last_request.to_dict()["request"]["value"] == {"clientId": 4, "givenName": "Office"}

    def test_if_loopback_test(self, client, fake_channel):
        fake_channel.queue(
            ResponseEnvelope.of("transceiverIfLoopbackTest", {"berLoopbackTest": 0.001, "snrLoopbackTest": 12.5})
        )
        result = _run(client.transceiver.if_loopback_test(TransceiverIfLoopbackTestRequest(enable_if_loopback=True)))
        assert result == TransceiverIfLoopbackTestResult(ber_loopback_test=0.001, snr_loopback_test=12.5)
