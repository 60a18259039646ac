"""
Example: read identity and status from a Starlink dish.

Usage:
    python examples/device_info_example.py [HOST:PORT]
"""

import asyncio
import logging
import sys

from starlink_sdk import StarlinkClient, StarlinkError


async def main(address: str) -> int:
    async with StarlinkClient(address=address, debug=True) as client:
        try:
            info = await client.device.get_info()
            print(f"Device:   {info.id}")
            print(f"Hardware: {info.hardware_version}")
            print(f"Software: {info.software_version}")

            status = await client.dish.get_status()
            print(f"Uptime:   {status.uptime_s}s")
            print(f"Latency:  {status.pop_ping_latency_ms:.1f}ms")
            print(f"Obstructed: {status.is_obstructed}")
        except StarlinkError as e:
            print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    target = sys.argv[1] if len(sys.argv) > 1 else "192.168.100.1:9200"
    sys.exit(asyncio.run(main(target)))
