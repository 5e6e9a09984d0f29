"""Error classification utilities for API and service errors."""

from enum import Enum

from pydantic import BaseModel, ValidationError

from src.core.db_client import DatabaseError, RecordNotFoundError


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCode:
    """Error codes for specific error conditions."""

    # Record errors
    ERR_TASK_NOT_FOUND = "ERR_TASK_NOT_FOUND"
    ERR_RULE_NOT_FOUND = "ERR_RULE_NOT_FOUND"
    ERR_NOTIFICATION_NOT_FOUND = "ERR_NOTIFICATION_NOT_FOUND"
    ERR_RECORD_NOT_FOUND = "ERR_RECORD_NOT_FOUND"

    # Input errors
    ERR_VALIDATION = "ERR_VALIDATION"
    ERR_UNSUPPORTED_ACTION = "ERR_UNSUPPORTED_ACTION"

    # Storage errors
    ERR_DATABASE = "ERR_DATABASE"

    # Generic errors
    ERR_UNKNOWN = "ERR_UNKNOWN"


class ErrorResponse(BaseModel):
    """Structured error response with user-friendly messaging."""

    code: str
    message: str
    suggestion: str
    severity: ErrorSeverity

    @property
    def status_code(self) -> int:
        """HTTP status the API reports for this error."""
        if self.code in _NOT_FOUND_CODES:
            return 404
        if self.code in (ErrorCode.ERR_VALIDATION, ErrorCode.ERR_UNSUPPORTED_ACTION):
            return 422
        return 500


_NOT_FOUND_MESSAGES = {
    "tasks": (ErrorCode.ERR_TASK_NOT_FOUND, "Task not found.", "Refresh the task list and try again."),
    "automation_rules": (
        ErrorCode.ERR_RULE_NOT_FOUND,
        "Automation rule not found.",
        "Refresh the automation list; the rule may have been deleted.",
    ),
    "notifications": (
        ErrorCode.ERR_NOTIFICATION_NOT_FOUND,
        "Notification not found.",
        "The notification may already have been dismissed.",
    ),
}

_NOT_FOUND_CODES = {code for code, _, _ in _NOT_FOUND_MESSAGES.values()} | {ErrorCode.ERR_RECORD_NOT_FOUND}


def _validation_message(exception: ValidationError) -> str:
    errors = exception.errors()
    if not errors:
        return "Invalid input."
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first['msg']}" if location else first["msg"]


def classify_error_with_response(exception: Exception) -> ErrorResponse:
    """Classify an error and return a structured response with recovery suggestions.

    Args:
        exception: The exception raised during execution

    Returns:
        ErrorResponse with code, message, suggestion, and severity
    """
    if isinstance(exception, RecordNotFoundError):
        code, message, suggestion = _NOT_FOUND_MESSAGES.get(
            exception.collection,
            (ErrorCode.ERR_RECORD_NOT_FOUND, "Record not found.", "Check the identifier and try again."),
        )
        return ErrorResponse(code=code, message=message, suggestion=suggestion, severity=ErrorSeverity.LOW)

    if isinstance(exception, ValidationError):
        return ErrorResponse(
            code=ErrorCode.ERR_VALIDATION,
            message=_validation_message(exception),
            suggestion="Correct the highlighted field and try again.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, ValueError):
        error_str = str(exception)
        if "not supported" in error_str.lower():
            return ErrorResponse(
                code=ErrorCode.ERR_UNSUPPORTED_ACTION,
                message=error_str,
                suggestion="Choose NOTIFY, SET_PRIORITY or DELETE as the rule action.",
                severity=ErrorSeverity.LOW,
            )
        return ErrorResponse(
            code=ErrorCode.ERR_VALIDATION,
            message=error_str or "Invalid input.",
            suggestion="Correct the input and try again.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, DatabaseError):
        return ErrorResponse(
            code=ErrorCode.ERR_DATABASE,
            message="The task database could not complete the request.",
            suggestion="Please try again later. If the problem persists, check the server logs.",
            severity=ErrorSeverity.HIGH,
        )

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        suggestion="Please try again later. If the problem persists, check the server logs.",
        severity=ErrorSeverity.MEDIUM,
    )
