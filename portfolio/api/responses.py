"""
JSON envelope helpers and exception handlers.

Every endpoint answers ``{success, data?, error?, message?}``.
"""

from typing import Any, Dict, Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..core.exceptions import PortfolioError, StorageError
from ..core.logging_config import get_logger
from ..schemas.common import first_error_message

logger = get_logger(__name__)

_MISSING = object()


def _encode(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, (list, tuple)):
        return [_encode(item) for item in data]
    return data


def success_response(
    data: Any = _MISSING,
    message: Optional[str] = None,
    status_code: int = 200,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    content: Dict[str, Any] = {"success": True}
    if data is not _MISSING:
        content["data"] = _encode(data)
    if message:
        content["message"] = message
    return JSONResponse(content=content, status_code=status_code, headers=headers)


def error_response(
    status_code: int,
    error: str,
    message: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    content: Dict[str, Any] = {"success": False, "error": error}
    if message:
        content["message"] = message
    return JSONResponse(content=content, status_code=status_code, headers=headers)


async def portfolio_error_handler(request: Request, exc: PortfolioError) -> JSONResponse:
    if isinstance(exc, StorageError):
        # Details were logged where the driver error was caught
        return error_response(exc.status_code, exc.error, "Something went wrong, please try again")
    return error_response(exc.status_code, exc.error, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(400, "Validation error", first_error_message(exc.errors()))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PortfolioError, portfolio_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
