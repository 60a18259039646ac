"""
Example: wrap façade calls in timeout and retry helpers.

Transient connection and timeout failures are retried with exponential
backoff; protocol mismatches and validation errors fail immediately.
"""

import asyncio
import sys

from starlink_sdk import StarlinkClient, StarlinkError, retry_with_backoff, with_timeout
from starlink_sdk.utils import is_retryable


async def main() -> int:
    async with StarlinkClient() as client:
        try:
            clients = await retry_with_backoff(
                lambda: with_timeout(client.wifi.get_clients(), 5000, "router did not answer"),
                max_retries=3,
                initial_ms=500,
                max_ms=4000,
                should_retry=is_retryable,
            )
        except StarlinkError as e:
            print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
            return 1

    for wifi_client in clients.clients:
        print(f"{wifi_client.given_name or wifi_client.name:<24} {wifi_client.mac} {wifi_client.ip_address}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
