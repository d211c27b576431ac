"""
Error handling utilities and FastAPI exception handlers
"""

import traceback
from typing import Any, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from person_service.core.config import config
from person_service.core.logger import logger


class ErrorResponse(Exception):
    """Custom exception for application errors"""

    def __init__(self, message: str, status_code: int = 400, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ErrorResponseModel(BaseModel):
    """Pydantic model for error responses"""
    errorMessage: str
    details: Optional[Any] = None


def error_body(message: str, details=None) -> dict:
    body = {"errorMessage": message}
    if details:
        body["details"] = details
    return body


async def error_response_handler(request: Request, exc: ErrorResponse):
    """Handler for custom ErrorResponse exceptions"""
    metadata = {
        "event": "error_response",
        "status_code": exc.status_code,
        "url": str(request.url),
        "method": request.method,
        **exc.details,
    }

    if config.environment == "development":
        metadata["traceback"] = traceback.format_exc()

    logger.error(
        f"Error: {exc.message}",
        metadata=metadata
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.details)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handler for malformed request bodies and missing parameters"""
    errors = jsonable_encoder(exc.errors())

    logger.warning(
        "Request validation failed",
        metadata={
            "event": "validation_error",
            "url": str(request.url),
            "method": request.method,
            "errors": errors,
        }
    )

    return JSONResponse(
        status_code=400,
        content=error_body("Validation error", errors)
    )
