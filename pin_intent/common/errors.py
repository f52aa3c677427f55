"""Error types raised by intent operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


class ErrorCode(str, Enum):
    """Codes carried by every IntentError."""

    INTENT_NOT_FOUND = "INTENT_NOT_FOUND"
    INVALID_FORMAT = "INVALID_FORMAT"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    SIGNATURE_FAILED = "SIGNATURE_FAILED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    PROCESSING_FAILED = "PROCESSING_FAILED"
    HANDLER_NOT_FOUND = "HANDLER_NOT_FOUND"
    INTENT_EXPIRED = "INTENT_EXPIRED"
    ALREADY_PROCESSED = "ALREADY_PROCESSED"
    NETWORK_UNAVAILABLE = "NETWORK_UNAVAILABLE"
    BROADCAST_FAILED = "BROADCAST_FAILED"
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"
    MATCHING_FAILED = "MATCHING_FAILED"
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
    PROCESSING_TIMEOUT = "PROCESSING_TIMEOUT"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    SECURITY_ERROR = "SECURITY_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    PROCESSING_ERROR = "PROCESSING_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"

    def __str__(self) -> str:
        return self.value


_DEFAULT_MESSAGES = {
    ErrorCode.INTENT_NOT_FOUND: "Intent not found",
    ErrorCode.INVALID_FORMAT: "Intent format is invalid",
    ErrorCode.VALIDATION_FAILED: "Intent validation failed",
    ErrorCode.SIGNATURE_FAILED: "Intent signature verification failed",
    ErrorCode.PERMISSION_DENIED: "Permission denied",
    ErrorCode.PROCESSING_FAILED: "Intent processing failed",
    ErrorCode.HANDLER_NOT_FOUND: "No handler found for intent type",
    ErrorCode.INTENT_EXPIRED: "Intent has expired",
    ErrorCode.ALREADY_PROCESSED: "Intent has already been processed",
    ErrorCode.NETWORK_UNAVAILABLE: "Network is unavailable",
    ErrorCode.BROADCAST_FAILED: "Failed to broadcast intent",
    ErrorCode.INVALID_CONFIGURATION: "Invalid configuration",
    ErrorCode.MATCHING_FAILED: "Intent matching failed",
    ErrorCode.STORAGE_UNAVAILABLE: "Storage is unavailable",
    ErrorCode.PROCESSING_TIMEOUT: "Processing timeout exceeded",
    ErrorCode.RATE_LIMIT_EXCEEDED: "Rate limit exceeded",
}


def _normalise_code(code: Union[ErrorCode, str]) -> Union[ErrorCode, str]:
    try:
        return ErrorCode(code)
    except ValueError:
        return str(code)


class IntentError(Exception):
    """An error from an intent operation, identified by a code.

    When no message is given, the standard message for a known code is used.
    """

    def __init__(
        self,
        code: Union[ErrorCode, str],
        message: Optional[str] = None,
        details: str = "",
    ) -> None:
        self.code = _normalise_code(code)
        if message is None:
            message = _DEFAULT_MESSAGES.get(self.code, "")
        self.message = message
        self.details = details
        super().__init__(str(self))

    def __str__(self) -> str:
        code = str(self.code)
        if self.details:
            return f"[{code}] {self.message}: {self.details}"
        return f"[{code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={str(self.code)!r}, "
            f"message={self.message!r}, details={self.details!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the error as a JSON-ready mapping."""
        data: dict[str, Any] = {"code": str(self.code), "message": self.message}
        if self.details:
            data["details"] = self.details
        return data


class ValidationError(IntentError):
    """A field failed validation."""

    def __init__(self, field: str, value: str, message: str) -> None:
        self.field = field
        self.value = value
        super().__init__(
            ErrorCode.VALIDATION_ERROR,
            message,
            f"field: {field}, value: {value}",
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.field:
            data["field"] = self.field
        if self.value:
            data["value"] = self.value
        return data


class SecurityError(IntentError):
    """A security check failed."""

    def __init__(self, reason: str, message: str) -> None:
        self.reason = reason
        super().__init__(ErrorCode.SECURITY_ERROR, message, reason)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.reason:
            data["reason"] = self.reason
        return data


class NetworkError(IntentError):
    """A network operation involving a peer or topic failed."""

    def __init__(self, peer_id: str, topic: str, message: str) -> None:
        self.peer_id = peer_id
        self.topic = topic
        super().__init__(
            ErrorCode.NETWORK_ERROR,
            message,
            f"peer: {peer_id}, topic: {topic}",
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.peer_id:
            data["peer_id"] = self.peer_id
        if self.topic:
            data["topic"] = self.topic
        return data


class ProcessingError(IntentError):
    """A processing stage failed for an intent."""

    def __init__(self, stage: str, intent_id: str, message: str) -> None:
        self.stage = stage
        self.intent_id = intent_id
        super().__init__(
            ErrorCode.PROCESSING_ERROR,
            message,
            f"stage: {stage}, intent: {intent_id}",
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.stage:
            data["stage"] = self.stage
        if self.intent_id:
            data["intent_id"] = self.intent_id
        return data


@dataclass
class ErrorResponse:
    """A standardised error response."""

    error: IntentError
    request_id: str = ""
    timestamp: int = 0

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"error": self.error.to_dict()}
        if self.request_id:
            data["request_id"] = self.request_id
        data["timestamp"] = self.timestamp
        return data


def is_intent_error(err: BaseException) -> bool:
    """Tell whether err is an IntentError."""
    return isinstance(err, IntentError)


def get_error_code(err: BaseException) -> str:
    """Return the code of an IntentError, or UNKNOWN_ERROR for anything else."""
    if isinstance(err, IntentError):
        return str(err.code)
    return ErrorCode.UNKNOWN_ERROR.value


def wrap_error(
    err: BaseException, code: Union[ErrorCode, str], message: str
) -> IntentError:
    """Wrap any exception as an IntentError whose details are the original text."""
    wrapped = IntentError(code, message, str(err))
    wrapped.__cause__ = err
    return wrapped