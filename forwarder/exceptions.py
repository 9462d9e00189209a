"""
Custom Exceptions for the SES Forwarder

Every stage failure is terminal for the run. Exceptions carry the
context needed for structured logging and for the caller's retry decision.
"""

from dataclasses import dataclass
from typing import Any


class ForwarderError(Exception):
    """Base exception for the forwarding pipeline."""

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


@dataclass
class InvalidEventError(ForwarderError):
    """Inbound notification is not a single SES receipt record."""

    reason: str

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(
            f"Received invalid SES message: {reason}",
            reason=reason,
        )


@dataclass
class StorageError(ForwarderError):
    """S3 operation on the stored message failed."""

    operation: str  # "copy", "get"
    bucket: str
    key: str
    error_code: str | None = None

    def __init__(
        self,
        operation: str,
        bucket: str,
        key: str,
        error_code: str | None = None,
        error_message: str | None = None,
    ) -> None:
        self.operation = operation
        self.bucket = bucket
        self.key = key
        self.error_code = error_code
        super().__init__(
            f"S3 {operation} failed for s3://{bucket}/{key}: "
            f"{error_message or 'Unknown error'}",
            operation=operation,
            bucket=bucket,
            key=key,
            error_code=error_code,
        )


class StorageCopyError(StorageError):
    """Could not make a readable private copy of the stored message."""

    def __init__(
        self,
        bucket: str,
        key: str,
        error_code: str | None = None,
        error_message: str | None = None,
    ) -> None:
        super().__init__(
            operation="copy",
            bucket=bucket,
            key=key,
            error_code=error_code,
            error_message=error_message,
        )


class StorageReadError(StorageError):
    """Could not load the message body from S3."""

    def __init__(
        self,
        bucket: str,
        key: str,
        error_code: str | None = None,
        error_message: str | None = None,
    ) -> None:
        super().__init__(
            operation="get",
            bucket=bucket,
            key=key,
            error_code=error_code,
            error_message=error_message,
        )


@dataclass
class DispatchError(ForwarderError):
    """SES SendRawEmail failed for the destination set."""

    source: str
    destinations: list[str]
    error_code: str | None = None

    def __init__(
        self,
        source: str,
        destinations: list[str],
        error_code: str | None = None,
        error_message: str | None = None,
    ) -> None:
        self.source = source
        self.destinations = destinations
        self.error_code = error_code
        super().__init__(
            f"Email sending failed from '{source}': {error_message or 'Unknown error'}",
            source=source,
            destinations=destinations,
            error_code=error_code,
        )
