"""Error classification utilities for user-facing error responses."""

from enum import Enum

from pydantic import BaseModel, ValidationError

from easyclean.core.config import constants
from easyclean.core.db_client import DatabaseError, RecordNotFoundError


class BackupFormatError(ValueError):
    """Raised when a backup document cannot be read."""


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCode:
    """Error codes for specific error conditions."""

    # Inventory errors
    ERR_TASK_NOT_FOUND = "ERR_TASK_NOT_FOUND"
    ERR_SESSION_NOT_FOUND = "ERR_SESSION_NOT_FOUND"
    ERR_RECORD_NOT_FOUND = "ERR_RECORD_NOT_FOUND"
    ERR_INVALID_STATE_TRANSITION = "ERR_INVALID_STATE_TRANSITION"
    ERR_VALIDATION = "ERR_VALIDATION"

    # Backup errors
    ERR_INVALID_BACKUP = "ERR_INVALID_BACKUP"

    # Storage errors
    ERR_STORAGE = "ERR_STORAGE"

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
        """HTTP status code for this error."""
        return _STATUS_CODES.get(self.code, constants.HTTP_SERVER_ERROR)


_STATUS_CODES = {
    ErrorCode.ERR_TASK_NOT_FOUND: constants.HTTP_NOT_FOUND,
    ErrorCode.ERR_SESSION_NOT_FOUND: constants.HTTP_NOT_FOUND,
    ErrorCode.ERR_RECORD_NOT_FOUND: constants.HTTP_NOT_FOUND,
    ErrorCode.ERR_INVALID_STATE_TRANSITION: constants.HTTP_BAD_REQUEST,
    ErrorCode.ERR_VALIDATION: constants.HTTP_BAD_REQUEST,
    ErrorCode.ERR_INVALID_BACKUP: constants.HTTP_UNPROCESSABLE,
}


def classify_error_with_response(exception: Exception) -> ErrorResponse:  # noqa: PLR0911
    """Classify an error and return a structured response with recovery suggestions.

    Args:
        exception: The exception raised during execution

    Returns:
        ErrorResponse with code, message, suggestion, and severity
    """
    error_str = str(exception).lower()

    if isinstance(exception, BackupFormatError):
        return ErrorResponse(
            code=ErrorCode.ERR_INVALID_BACKUP,
            message="That backup file could not be read.",
            suggestion="Choose a file exported by easyclean.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, RecordNotFoundError | KeyError):
        if "tasks" in error_str:
            return ErrorResponse(
                code=ErrorCode.ERR_TASK_NOT_FOUND,
                message="I couldn't find that task.",
                suggestion="Refresh the task list and try again.",
                severity=ErrorSeverity.LOW,
            )
        if "sessions" in error_str:
            return ErrorResponse(
                code=ErrorCode.ERR_SESSION_NOT_FOUND,
                message="That session has ended or never existed.",
                suggestion="Start a new session.",
                severity=ErrorSeverity.LOW,
            )
        return ErrorResponse(
            code=ErrorCode.ERR_RECORD_NOT_FOUND,
            message="The requested item was not found.",
            suggestion="Refresh and try again.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, ValidationError):
        return ErrorResponse(
            code=ErrorCode.ERR_VALIDATION,
            message="Some of the values are invalid.",
            suggestion="Check durations are positive and priorities are between 1 and 3.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, ValueError) and "cannot" in error_str:
        return ErrorResponse(
            code=ErrorCode.ERR_INVALID_STATE_TRANSITION,
            message="This action cannot be performed right now.",
            suggestion="Check the session status and try again.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, ValueError):
        return ErrorResponse(
            code=ErrorCode.ERR_VALIDATION,
            message="Some of the values are invalid.",
            suggestion="Check the request and try again.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, DatabaseError):
        return ErrorResponse(
            code=ErrorCode.ERR_STORAGE,
            message="Your data could not be saved or loaded.",
            suggestion="Please try again. If the problem persists, check the database file.",
            severity=ErrorSeverity.HIGH,
        )

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        suggestion="Please try again later.",
        severity=ErrorSeverity.MEDIUM,
    )
