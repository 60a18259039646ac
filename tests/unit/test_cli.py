"""Unit tests for the `starlink` command-line interface."""

import json
from unittest.mock import patch

import pytest
from rich.console import Console

from starlink_sdk.cli import COMMANDS, Command, build_parser, main, render
from starlink_sdk.errors import StarlinkError
from starlink_sdk.messages import RequestTag, ResponseEnvelope

from conftest import FakeChannel


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("STARLINK_ADDRESS", "STARLINK_DEBUG", "STARLINK_REQUEST_TIMEOUT_MS", "STARLINK_CONNECTION_TIMEOUT_MS"):
        monkeypatch.delenv(name, raising=False)


def _factory(channel, configs=None):
    def factory(config):
        if configs is not None:
            configs.append(config)
        return channel

    return factory


class TestParser:
    def test_all_commands_registered(self):
        parser = build_parser()
        for name in COMMANDS:
            assert parser.parse_args([name]).command == name

    def test_global_flags(self):
        args = build_parser().parse_args(["--address", "10.0.0.1:9200", "--debug", "--json", "-t", "500", "reboot"])
        assert args.address == "10.0.0.1:9200"
        assert args.debug is True
        assert args.json is True
        assert args.timeout == 500


class TestMain:
    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage: starlink" in capsys.readouterr().out

    def test_device_info_json(self, capsys):
        channel = FakeChannel().queue(ResponseEnvelope.of("getDeviceInfo", {"id": "ut01", "countryCode": "US"}))

        assert main(["--json", "device-info"], channel_factory=_factory(channel)) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["id"] == "ut01"
        assert output["countryCode"] == "US"
        assert channel.close_calls == 1

    def test_device_info_table(self, capsys):
        channel = FakeChannel().queue(ResponseEnvelope.of("getDeviceInfo", {"id": "ut01"}))
        assert main(["device-info"], channel_factory=_factory(channel)) == 0
        out = capsys.readouterr().out
        assert "hardwareVersion" in out
        assert "ut01" in out

    def test_wifi_clients_table(self, capsys):
        channel = FakeChannel().queue(
            ResponseEnvelope.of("wifiGetClients", {"clients": [{"name": "laptop", "mac": "aa:bb:cc:dd:ee:ff"}]})
        )
        assert main(["wifi-clients"], channel_factory=_factory(channel)) == 0
        out = capsys.readouterr().out
        assert "laptop" in out
        assert "aa:bb:cc:dd:ee:ff" in out

    def test_wifi_clients_empty(self, capsys):
        channel = FakeChannel().queue(ResponseEnvelope.of("wifiGetClients", {"clients": []}))
        assert main(["wifi-clients"], channel_factory=_factory(channel)) == 0
        assert "No clients connected" in capsys.readouterr().out

    @pytest.mark.parametrize("command,unstow", [("stow", False), ("unstow", True)])
    def test_stow_commands(self, command, unstow, capsys):
        channel = FakeChannel().queue(ResponseEnvelope.of("dishStow"))
        assert main([command], channel_factory=_factory(channel)) == 0
        assert channel.last_request.tag is RequestTag.DISH_STOW
        assert channel.last_request.payload.unstow is unstow
        assert "Dish" in capsys.readouterr().out

    def test_flags_override_environment(self, monkeypatch):
        monkeypatch.setenv("STARLINK_ADDRESS", "10.9.9.9:9200")
        monkeypatch.setenv("STARLINK_REQUEST_TIMEOUT_MS", "1234")
        configs = []
        channel = FakeChannel().queue(ResponseEnvelope.of("reboot"))

        assert main(["--address", "10.0.0.1:9000", "reboot"], channel_factory=_factory(channel, configs)) == 0
        assert configs[0].address == "10.0.0.1:9000"
        assert configs[0].request_timeout == 1234

    def test_protocol_mismatch_exits_1(self, capsys):
        channel = FakeChannel().queue(ResponseEnvelope.of("wifiGetStatus"))
        assert main(["dish-status"], channel_factory=_factory(channel)) == 1
        err = capsys.readouterr().err
        assert err.startswith("Error [PROTOCOL_MISMATCH_ERROR]: ")
        assert "wifiGetStatus" in err

    def test_connection_failure_exits_1(self, capsys):
        channel = FakeChannel().queue(StarlinkError.connection("Failed to connect to Starlink device"))
        assert main(["device-status"], channel_factory=_factory(channel)) == 1
        assert "Error [CONNECTION_ERROR]: Failed to connect" in capsys.readouterr().err

    def test_debug_configures_logging(self):
        channel = FakeChannel().queue(ResponseEnvelope.of("getLocation", {"latitude": 1.0}))
        with patch("starlink_sdk.cli.logging.basicConfig") as mock_basic:
            assert main(["--debug", "--json", "location"], channel_factory=_factory(channel)) == 0
        mock_basic.assert_called_once()


class TestRender:
    def test_empty_result_without_done_message(self, capsys):
        command = Command("noop", "Nothing to show", lambda c: None)
        render(Console(), command, None, as_json=False)
        out = capsys.readouterr().out
        assert "No data" in out
        assert "Nothing to show" not in out

    def test_empty_result_as_json(self, capsys):
        render(Console(), COMMANDS["reboot"], None, as_json=True)
        assert json.loads(capsys.readouterr().out) == {}

    def test_done_message(self, capsys):
        render(Console(), COMMANDS["reboot"], None, as_json=False)
        assert "Reboot requested" in capsys.readouterr().out
