"""Map questflow errors to HTTP responses carrying an ErrorResponse body."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.core.config import constants
from src.core.errors import (
    AlreadyRunningElsewhereError,
    ErrorCode,
    ErrorResponse,
    ErrorSeverity,
    InvalidStateError,
    NotFoundError,
    QuestFlowError,
    classify_error_with_response,
)


logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[type[QuestFlowError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidStateError: status.HTTP_409_CONFLICT,
    AlreadyRunningElsewhereError: status.HTTP_409_CONFLICT,
}


def status_for(exc: Exception) -> int:
    for error_type, status_code in _STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_json(response: ErrorResponse, status_code: int) -> JSONResponse:
    return JSONResponse(content=response.model_dump(mode="json"), status_code=status_code)


async def handle_questflow_error(request: Request, exc: Exception) -> JSONResponse:
    status_code = status_for(exc)
    level = "error" if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR else "info"
    getattr(logger, level)(
        "request_failed",
        extra={"path": request.url.path, "error_type": type(exc).__name__, "error": str(exc)},
    )
    return _error_json(classify_error_with_response(exc), status_code)


async def handle_validation_error(request: Request, exc: Exception) -> JSONResponse:
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    logger.info("request_invalid", extra={"path": request.url.path, "errors": len(errors)})
    details = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in errors)
    response = ErrorResponse(
        code=ErrorCode.ERR_VALIDATION,
        message="Some of the quest details are invalid.",
        suggestion=details or "Check the submitted fields and try again.",
        severity=ErrorSeverity.LOW,
    )
    return _error_json(response, constants.HTTP_UNPROCESSABLE)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request_crashed", extra={"path": request.url.path, "error_type": type(exc).__name__})
    return _error_json(classify_error_with_response(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error handlers on an application."""
    app.add_exception_handler(QuestFlowError, handle_questflow_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
