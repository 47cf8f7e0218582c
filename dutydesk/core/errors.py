"""Error types raised by the duty engine and their user-facing classification."""

from enum import Enum

from pydantic import BaseModel


class DutyDeskError(Exception):
    """Base exception for dutydesk."""


class InvalidTransitionError(DutyDeskError, ValueError):
    """Requested status is not reachable from the current status."""

    def __init__(self, *, current: str, requested: str, item_id: str | None = None) -> None:
        self.current = current
        self.requested = requested
        self.item_id = item_id
        subject = f"item {item_id}" if item_id else "item"
        super().__init__(f"Cannot move {subject} from {current} to {requested}")


class FutureDateError(DutyDeskError, ValueError):
    """A duty scheduled for a later calendar day cannot be started yet."""

    def __init__(self, *, duty_date: str, duty_id: str | None = None) -> None:
        self.duty_date = duty_date
        self.duty_id = duty_id
        super().__init__(f"Cannot start a duty scheduled for a future date ({duty_date})")


class MalformedDateError(DutyDeskError, ValueError):
    """A date or clock value failed every parse strategy."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Malformed date value: {value!r}")


class ConfirmationDeclinedError(DutyDeskError):
    """The caller's confirmation hook refused the transition."""


class StaleTransitionError(DutyDeskError):
    """The local copy changed between proposing and committing a transition."""


class TransportError(DutyDeskError, RuntimeError):
    """The backend collaborator rejected a request or could not be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ErrorCode:
    """Error codes for specific error conditions."""

    ERR_INVALID_STATE_TRANSITION = "ERR_INVALID_STATE_TRANSITION"
    ERR_FUTURE_DUTY = "ERR_FUTURE_DUTY"
    ERR_MALFORMED_DATE = "ERR_MALFORMED_DATE"
    ERR_CONFIRMATION_DECLINED = "ERR_CONFIRMATION_DECLINED"
    ERR_STALE_RECORD = "ERR_STALE_RECORD"
    ERR_NETWORK_ERROR = "ERR_NETWORK_ERROR"
    ERR_REJECTED_BY_SERVER = "ERR_REJECTED_BY_SERVER"
    ERR_UNKNOWN = "ERR_UNKNOWN"


class ErrorResponse(BaseModel):
    """Structured error response with user-friendly messaging."""

    code: str
    message: str
    suggestion: str
    severity: ErrorSeverity


def classify_error_with_response(exception: Exception) -> ErrorResponse:  # noqa: PLR0911
    """Classify an error and return a structured response with recovery suggestions.

    Args:
        exception: The exception raised by a lifecycle operation or the backend client

    Returns:
        ErrorResponse with code, message, suggestion, and severity
    """
    if isinstance(exception, FutureDateError):
        return ErrorResponse(
            code=ErrorCode.ERR_FUTURE_DUTY,
            message="Cannot start a duty scheduled for a future date.",
            suggestion=f"Wait until {exception.duty_date} to start this duty.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, InvalidTransitionError):
        return ErrorResponse(
            code=ErrorCode.ERR_INVALID_STATE_TRANSITION,
            message=f"This item is {exception.current} and cannot become {exception.requested}.",
            suggestion="Refresh the list and try again.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, MalformedDateError):
        return ErrorResponse(
            code=ErrorCode.ERR_MALFORMED_DATE,
            message="This item has a date that could not be read.",
            suggestion="Ask a manager to fix the date on the assignment.",
            severity=ErrorSeverity.MEDIUM,
        )

    if isinstance(exception, ConfirmationDeclinedError):
        return ErrorResponse(
            code=ErrorCode.ERR_CONFIRMATION_DECLINED,
            message="The action was cancelled.",
            suggestion="No changes were made.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, StaleTransitionError):
        return ErrorResponse(
            code=ErrorCode.ERR_STALE_RECORD,
            message="This item was changed while you were working on it.",
            suggestion="Refresh the list to see the latest status.",
            severity=ErrorSeverity.MEDIUM,
        )

    if isinstance(exception, TransportError):
        if exception.status_code is None:
            return ErrorResponse(
                code=ErrorCode.ERR_NETWORK_ERROR,
                message="Network error occurred.",
                suggestion="Please check your connection and try again.",
                severity=ErrorSeverity.MEDIUM,
            )
        return ErrorResponse(
            code=ErrorCode.ERR_REJECTED_BY_SERVER,
            message=f"The server rejected the update (HTTP {exception.status_code}).",
            suggestion="Refresh the list and try again. If the problem persists, contact support.",
            severity=ErrorSeverity.HIGH,
        )

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        suggestion="Please try again later. If the problem persists, contact support.",
        severity=ErrorSeverity.MEDIUM,
    )
