"""
Error type for the Starlink SDK.

Every failure surfaced by the SDK is a single exception class, StarlinkError,
tagged with an ErrorKind. Callers branch on ``error.kind`` (or the string
``error.code``) instead of on a subclass hierarchy.

Example:
    >>> try:
    ...     await client.dish.get_status()
    ... except StarlinkError as e:
    ...     if e.kind is ErrorKind.PROTOCOL_MISMATCH:
    ...         print(f"Unexpected response: {e.details['actual']}")
"""

from __future__ import annotations

import asyncio
import ssl
from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """Classification of SDK failures."""

    CONNECTION = "CONNECTION_ERROR"
    TIMEOUT = "TIMEOUT_ERROR"
    AUTHENTICATION = "AUTHENTICATION_ERROR"
    DEVICE = "DEVICE_ERROR"
    VALIDATION = "VALIDATION_ERROR"
    NOT_SUPPORTED = "NOT_SUPPORTED_ERROR"
    PROTOCOL_MISMATCH = "PROTOCOL_MISMATCH_ERROR"
    UNKNOWN = "UNKNOWN_ERROR"


# Device status codes (gRPC numbering) with a dedicated kind.
_STATUS_KINDS: dict[int, ErrorKind] = {
    3: ErrorKind.VALIDATION,  # INVALID_ARGUMENT
    4: ErrorKind.TIMEOUT,  # DEADLINE_EXCEEDED
    12: ErrorKind.NOT_SUPPORTED,  # UNIMPLEMENTED
    14: ErrorKind.CONNECTION,  # UNAVAILABLE
    16: ErrorKind.AUTHENTICATION,  # UNAUTHENTICATED
}

# Checked in order against the failure message.
_MESSAGE_MARKERS: tuple[tuple[tuple[str, ...], ErrorKind, str], ...] = (
    (("UNAVAILABLE", "unavailable"), ErrorKind.CONNECTION, "Failed to connect to Starlink device"),
    (("DEADLINE_EXCEEDED", "deadline"), ErrorKind.TIMEOUT, "Request timed out"),
    (("UNAUTHENTICATED", "unauthenticated"), ErrorKind.AUTHENTICATION, "Authentication failed"),
    (("INVALID_ARGUMENT", "invalid"), ErrorKind.VALIDATION, "Invalid request"),
)


class StarlinkError(Exception):
    """Base and only exception raised by the SDK.

    Attributes:
        message: Human-readable description
        kind: Classification of the failure
        details: Structured context (e.g. ``{"address": ...}``)
        status_code: Device status code, for device-reported failures
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.details: dict[str, Any] = dict(details or {})
        self.status_code = status_code

    @property
    def code(self) -> str:
        """String form of the error kind, e.g. ``"TIMEOUT_ERROR"``."""
        return self.kind.value

    def __repr__(self) -> str:
        return f"StarlinkError({self.message!r}, kind={self.kind.name}, details={self.details!r})"

    @classmethod
    def connection(cls, message: str, **details: Any) -> "StarlinkError":
        return cls(message, ErrorKind.CONNECTION, details)

    @classmethod
    def timeout(cls, message: str, **details: Any) -> "StarlinkError":
        return cls(message, ErrorKind.TIMEOUT, details)

    @classmethod
    def authentication(cls, message: str, **details: Any) -> "StarlinkError":
        return cls(message, ErrorKind.AUTHENTICATION, details)

    @classmethod
    def device(cls, message: str, status_code: int | None = None, **details: Any) -> "StarlinkError":
        if status_code is not None:
            details.setdefault("status_code", status_code)
        return cls(message, ErrorKind.DEVICE, details, status_code=status_code)

    @classmethod
    def validation(cls, message: str, **details: Any) -> "StarlinkError":
        return cls(message, ErrorKind.VALIDATION, details)

    @classmethod
    def not_supported(cls, message: str, **details: Any) -> "StarlinkError":
        return cls(message, ErrorKind.NOT_SUPPORTED, details)

    @classmethod
    def unexpected_response(cls, expected: str, actual: str | None) -> "StarlinkError":
        """The response union carried a different branch than the caller expected."""
        return cls(
            f"Unexpected response type: {actual} (expected {expected})",
            ErrorKind.PROTOCOL_MISMATCH,
            {"expected": expected, "actual": actual},
        )

    @classmethod
    def from_status(cls, code: int, message: str = "") -> "StarlinkError":
        """Build the error for a status the device reported in its response."""
        kind = _STATUS_KINDS.get(code)
        text = message or f"Device returned status {code}"
        if kind is None:
            return cls.device(text, status_code=code)
        return cls(text, kind, {"status_code": code}, status_code=code)


def map_transport_error(error: BaseException, address: str | None = None) -> StarlinkError:
    """Wrap a lower-level failure in a StarlinkError.

    SDK errors pass through unchanged. Known Python exception types are
    classified directly; anything else is classified by looking for status
    markers in its message, falling back to ``ErrorKind.UNKNOWN``.

    Args:
        error: The exception raised below the SDK
        address: Device address, attached to connection failures

    Returns:
        The classified StarlinkError (never raises)
    """
    if isinstance(error, StarlinkError):
        return error

    message = str(error) or type(error).__name__
    cause = type(error).__name__

    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return StarlinkError.timeout(f"Request timed out: {message}", cause=cause)

    if isinstance(error, ssl.SSLCertVerificationError):
        return StarlinkError.authentication(f"Authentication failed: {message}", cause=cause)

    if isinstance(error, (ConnectionError, OSError)):
        details: dict[str, Any] = {"cause": cause}
        if address is not None:
            details["address"] = address
        return StarlinkError(f"Failed to connect to Starlink device: {message}", ErrorKind.CONNECTION, details)

    for markers, kind, prefix in _MESSAGE_MARKERS:
        if any(marker in message for marker in markers):
            details = {"cause": cause}
            if kind is ErrorKind.CONNECTION and address is not None:
                details["address"] = address
            return StarlinkError(f"{prefix}: {message}", kind, details)

    return StarlinkError(message, ErrorKind.UNKNOWN, {"cause": cause})
