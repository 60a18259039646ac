"""
Command-line interface for the Starlink SDK.

This module provides the `starlink` CLI tool for querying a dish or router.

Examples:
    starlink device-info
    starlink --address 192.168.1.1:9000 wifi-clients
    starlink --json dish-status
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Sequence

from rich.console import Console
from rich.table import Table

from starlink_sdk.client import StarlinkClient
from starlink_sdk.config import config_from_env, normalize_config
from starlink_sdk.errors import StarlinkError
from starlink_sdk.messages import Message
from starlink_sdk.models.device import GetLocationRequest
from starlink_sdk.models.dish import DishStowRequest
from starlink_sdk.models.wifi import WifiClients
from starlink_sdk.transport import ChannelFactory


@dataclass(frozen=True)
class Command:
    """A CLI command bound to one façade call."""

    name: str
    help: str
    run: Callable[[StarlinkClient], Awaitable[Message | None]]
    done_message: str = ""


COMMANDS: dict[str, Command] = {
    cmd.name: cmd
    for cmd in (
        Command("device-info", "Show device identity", lambda c: c.device.get_info()),
        Command("device-status", "Show device status", lambda c: c.device.get_status()),
        Command("dish-status", "Show dish status", lambda c: c.dish.get_status()),
        Command("wifi-status", "Show router status", lambda c: c.wifi.get_status()),
        Command("wifi-clients", "List clients attached to the router", lambda c: c.wifi.get_clients()),
        Command("location", "Show the device position", lambda c: c.device.get_location(GetLocationRequest())),
        Command("stow", "Stow the dish", lambda c: c.dish.stow(DishStowRequest(unstow=False)), "Dish stowed"),
        Command("unstow", "Unstow the dish", lambda c: c.dish.stow(DishStowRequest(unstow=True)), "Dish unstowed"),
        Command("reboot", "Reboot the device", lambda c: c.device.reboot(), "Reboot requested"),
    )
}


def _format_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def _render_fields(console: Console, title: str, data: dict[str, Any]) -> None:
    table = Table(title=title)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(key, _format_value(value))
    console.print(table)


def _render_clients(console: Console, result: WifiClients) -> None:
    if not result.clients:
        console.print("No clients connected")
        return

    table = Table(title=f"WiFi clients ({len(result.clients)})")
    table.add_column("Name", style="cyan")
    table.add_column("MAC")
    table.add_column("IP")
    table.add_column("Signal", justify="right")
    for client in result.clients:
        table.add_row(client.given_name or client.name, client.mac, client.ip_address, f"{client.signal_strength:g}")
    console.print(table)


def render(console: Console, command: Command, result: Message | None, as_json: bool) -> None:
    """Print a command result as JSON or a rich table."""
    if as_json:
        print(json.dumps(result.to_dict() if result is not None else {}, indent=2))
        return

    if command.done_message:
        console.print(f"[green]✓[/green] {command.done_message}")
        return
    if result is None:
        console.print("No data")
        return
    if isinstance(result, WifiClients):
        _render_clients(console, result)
        return
    _render_fields(console, command.help, result.to_dict())


async def run_command(
    command: Command,
    args: argparse.Namespace,
    channel_factory: ChannelFactory | None = None,
) -> Message | None:
    """Build a client from the environment and flags, run one command and close."""
    config = normalize_config(
        config_from_env(),
        address=args.address,
        request_timeout=args.timeout,
        debug=True if args.debug else None,
    )
    async with StarlinkClient(config, channel_factory=channel_factory) as client:
        return await command.run(client)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="starlink",
        description="Query and control a Starlink dish or router",
    )
    parser.add_argument(
        "-a",
        "--address",
        default=None,
        help="Device address as host:port (default: $STARLINK_ADDRESS or 192.168.100.1:9200)",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        default=None,
        type=int,
        help="Request timeout in milliseconds",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Log every request sent to the device",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")
    for command in COMMANDS.values():
        subparsers.add_parser(command.name, help=command.help)

    return parser


def main(argv: Sequence[str] | None = None, channel_factory: ChannelFactory | None = None) -> int:
    """Entry point for the `starlink` command.

    Returns:
        Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    command = COMMANDS[args.command]
    console = Console()

    try:
        result = asyncio.run(run_command(command, args, channel_factory))
    except StarlinkError as e:
        print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:  # noqa: KBI002
        print("\nInterrupted by user", file=sys.stderr)
        return 130

    render(console, command, result, args.json)
    return 0


if __name__ == "__main__":
    sys.exit(main())
