import logging
import traceback
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from heatloss.services.error_types import (
    CalculationCancelledError,
    ConfigurationError,
    HeatLossError,
    InputValidationError,
    MissingRequiredFieldError,
)

logger = logging.getLogger(__name__)


def create_error_response(error_type: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Create structured error response"""
    return {
        "error": {
            "type": error_type,
            "message": message,
            "details": details or {},
        }
    }


def _status_for(exc: HeatLossError) -> int:
    if isinstance(exc, (InputValidationError, MissingRequiredFieldError)):
        return 422
    if isinstance(exc, CalculationCancelledError):
        return 409
    if isinstance(exc, ConfigurationError):
        return 500
    return 400


async def heat_loss_exception_handler(request: Request, exc: HeatLossError):
    status_code = _status_for(exc)
    details = dict(exc.details)
    if isinstance(exc, InputValidationError):
        details["messages"] = exc.messages

    logger.warning(f"{request.method} {request.url.path} -> {status_code} {type(exc).__name__}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content=create_error_response(type(exc).__name__, exc.message, details),
    )


async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = [
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content=create_error_response("RequestValidationError", "Invalid request body", {"messages": messages}),
    )


def make_traceback_exception_handler(debug: bool = False):
    async def traceback_exception_handler(request: Request, exc: Exception):
        tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        logger.error(tb)

        message = tb if debug else "Internal server error"
        return JSONResponse(
            status_code=500,
            content=create_error_response("InternalServerError", message),
        )

    return traceback_exception_handler


def register_error_handlers(app: FastAPI, debug: bool = False):
    app.add_exception_handler(HeatLossError, heat_loss_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, make_traceback_exception_handler(debug))
