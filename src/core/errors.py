"""Error taxonomy and user-facing error classification."""

from enum import Enum

from pydantic import BaseModel


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCode:
    """Error codes for specific error conditions."""

    ERR_NOT_FOUND = "ERR_NOT_FOUND"
    ERR_INVALID_STATE = "ERR_INVALID_STATE"
    ERR_ALREADY_RUNNING_ELSEWHERE = "ERR_ALREADY_RUNNING_ELSEWHERE"
    ERR_STORE_UNAVAILABLE = "ERR_STORE_UNAVAILABLE"
    ERR_REWARD_GENERATION_FAILED = "ERR_REWARD_GENERATION_FAILED"
    ERR_VALIDATION = "ERR_VALIDATION"
    ERR_UNKNOWN = "ERR_UNKNOWN"


class QuestFlowError(Exception):
    """Base class for expected questflow failures."""

    code: str = ErrorCode.ERR_UNKNOWN


class NotFoundError(QuestFlowError):
    """Task id unknown to this user."""

    code = ErrorCode.ERR_NOT_FOUND

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Task not found: {task_id}")


class InvalidStateError(QuestFlowError):
    """Operation illegal for the task's current state."""

    code = ErrorCode.ERR_INVALID_STATE

    def __init__(self, task_id: str, reason: str) -> None:
        self.task_id = task_id
        self.reason = reason
        super().__init__(f"Invalid state for task {task_id}: {reason}")


class AlreadyRunningElsewhereError(QuestFlowError):
    """Another task's timer holds the single running slot."""

    code = ErrorCode.ERR_ALREADY_RUNNING_ELSEWHERE

    def __init__(self, task_id: str, running_task_id: str) -> None:
        self.task_id = task_id
        self.running_task_id = running_task_id
        super().__init__(f"Cannot start timer for task {task_id}: task {running_task_id} is already running")


class StoreUnavailableError(QuestFlowError):
    """Backing persistence failed; the attempted mutation was not applied."""

    code = ErrorCode.ERR_STORE_UNAVAILABLE

    def __init__(self, operation: str, details: str) -> None:
        self.operation = operation
        self.details = details
        super().__init__(f"Store {operation} failed: {details}")


class RewardGenerationFailedError(QuestFlowError):
    """Reward draw failed. Absorbed by the reward engine, which falls back to a default reward."""

    code = ErrorCode.ERR_REWARD_GENERATION_FAILED


class ErrorResponse(BaseModel):
    """Structured error response with user-friendly messaging."""

    code: str
    message: str
    suggestion: str
    severity: ErrorSeverity


def classify_error_with_response(exception: Exception) -> ErrorResponse:
    """Classify an error and return a structured response with recovery suggestions.

    Args:
        exception: The exception raised during execution

    Returns:
        ErrorResponse with code, message, suggestion, and severity
    """
    if isinstance(exception, NotFoundError):
        return ErrorResponse(
            code=ErrorCode.ERR_NOT_FOUND,
            message="I couldn't find that quest.",
            suggestion="Refresh your quest list and try again.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, AlreadyRunningElsewhereError):
        return ErrorResponse(
            code=ErrorCode.ERR_ALREADY_RUNNING_ELSEWHERE,
            message="Another quest's timer is already running.",
            suggestion="Pause the active quest before starting this one.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, InvalidStateError):
        return ErrorResponse(
            code=ErrorCode.ERR_INVALID_STATE,
            message="This action cannot be performed on the quest right now.",
            suggestion="Completed quests can't be restarted or reset.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, StoreUnavailableError):
        return ErrorResponse(
            code=ErrorCode.ERR_STORE_UNAVAILABLE,
            message="Your changes could not be saved.",
            suggestion="Please reload your quests and try again.",
            severity=ErrorSeverity.HIGH,
        )

    if isinstance(exception, RewardGenerationFailedError):
        return ErrorResponse(
            code=ErrorCode.ERR_REWARD_GENERATION_FAILED,
            message="Your reward could not be generated.",
            suggestion="Your quest still counts. Keep going!",
            severity=ErrorSeverity.MEDIUM,
        )

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        suggestion="Please try again later. If the problem persists, contact support.",
        severity=ErrorSeverity.MEDIUM,
    )
