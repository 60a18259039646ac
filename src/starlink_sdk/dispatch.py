"""
Dispatch core: one logical operation, one envelope round trip.
"""

from __future__ import annotations

import itertools
import logging
from typing import TYPE_CHECKING, Any, Mapping

from starlink_sdk.errors import ErrorKind, StarlinkError
from starlink_sdk.messages import Message, RequestEnvelope, ResponseEnvelope
from starlink_sdk.operations import Operation

if TYPE_CHECKING:
    from starlink_sdk.config import ClientConfig
    from starlink_sdk.transport import TransportBinding

logger = logging.getLogger(__name__)


class Dispatcher:
    """Builds, sends and unwraps envelopes for every operation.

    Owned by one client; request ids come from this instance's counter so
    two clients never share an id sequence.
    """

    def __init__(self, transport: "TransportBinding", config: "ClientConfig") -> None:
        self._transport = transport
        self._config = config
        self._ids = itertools.count(1)

    def next_request_id(self) -> int:
        return next(self._ids)

    async def call(self, operation: Operation, payload: Message | Mapping[str, Any] | None = None) -> Any:
        """Send ``operation`` and return its decoded output.

        Args:
            operation: Row from the operation table
            payload: Input payload, a mapping of its fields, or None for type defaults

        Returns:
            An instance of ``operation.output_type``, or None for void operations

        Raises:
            StarlinkError: VALIDATION for a bad payload, PROTOCOL_MISMATCH when
                the response carries another branch, another request id or a
                value that does not decode to the output type,
                the mapped kind for device-reported status, and any
                transport failure
        """
        request = operation.build_input(payload)
        envelope = RequestEnvelope(tag=operation.request_tag, payload=request, id=self.next_request_id())

        self._debug(operation, request)
        response = await self._transport.send(envelope)

        if response.error is not None:
            raise StarlinkError.from_status(response.error.code, response.error.message)

        if operation.is_void:
            return None

        self._check_id(envelope, response)

        expected = operation.response_tag.value
        if response.tag != expected:
            raise StarlinkError.unexpected_response(expected, response.tag)

        try:
            return operation.output_type.from_dict(response.value)
        except StarlinkError as e:
            raise StarlinkError(
                f"Malformed {expected} response: {e.message}",
                ErrorKind.PROTOCOL_MISMATCH,
                {**e.details, "tag": expected},
            ) from e

    @staticmethod
    def _check_id(envelope: RequestEnvelope, response: ResponseEnvelope) -> None:
        # Devices that do not echo ids answer with 0.
        if response.id and response.id != envelope.id:
            raise StarlinkError(
                f"Response id {response.id} does not match request id {envelope.id}",
                ErrorKind.PROTOCOL_MISMATCH,
                {"expected_id": envelope.id, "actual_id": response.id},
            )

    def _debug(self, operation: Operation, request: Message) -> None:
        if not self._config.debug:
            return
        try:
            logger.debug(f"[StarlinkClient] {operation.label} {request.to_dict()}")
        except KeyboardInterrupt:  # noqa: KBI002
            raise
        except Exception:
            pass
