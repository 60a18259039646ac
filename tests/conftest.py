"""Pytest configuration and fixtures for starlink_sdk tests.

Provides FakeChannel, an in-memory channel that records every request
envelope and replays scripted responses, so client and dispatch tests run
without a device.
"""

import dataclasses
from typing import Any, Callable

import pytest

from starlink_sdk.client import StarlinkClient
from starlink_sdk.messages import RequestEnvelope, ResponseEnvelope
from starlink_sdk.transport import Channel

Scripted = ResponseEnvelope | BaseException | Callable[[RequestEnvelope], ResponseEnvelope]


class FakeChannel(Channel):
    """Channel double that answers from a queue of scripted responses.

    Args:
        echo_ids: Stamp each response with the id of the request it answers
            (responses scripted with a non-zero id keep it)
    """

    def __init__(self, echo_ids: bool = True) -> None:
        self.echo_ids = echo_ids
        self.requests: list[RequestEnvelope] = []
        self.responses: list[Scripted] = []
        self.ready_calls: list[Any] = []
        self.close_calls = 0

    def queue(self, *responses: Scripted) -> "FakeChannel":
        self.responses.extend(responses)
        return self

    @property
    def last_request(self) -> RequestEnvelope:
        return self.requests[-1]

    async def handle(self, request: RequestEnvelope) -> ResponseEnvelope:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"No scripted response for {request.tag.value}")

        item = self.responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        if callable(item):
            item = item(request)
        if self.echo_ids and item.id == 0 and item.error is None:
            item = dataclasses.replace(item, id=request.id)
        return item

    async def wait_for_ready(self, timeout: float | None = None) -> None:
        self.ready_calls.append(timeout)

    async def close(self) -> None:
        self.close_calls += 1


@pytest.fixture
def fake_channel() -> FakeChannel:
    return FakeChannel()


@pytest.fixture
def channel_factory(fake_channel: FakeChannel) -> Callable[..., FakeChannel]:
    """Factory returning the shared fake_channel, recording each config it was called with."""
    configs = []

    def factory(config):
        configs.append(config)
        return fake_channel

    factory.configs = configs
    return factory


@pytest.fixture
def client(channel_factory) -> StarlinkClient:
    return StarlinkClient(channel_factory=channel_factory)
