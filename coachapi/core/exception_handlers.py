import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .exceptions import BaseAPIException, InternalServerError, ValidationError

logger = logging.getLogger("coachapi")


def _describe(request: Request) -> str:
    client = request.client.host if request.client else "-"
    return f"{request.method} {request.url} from {client}"


def _log_by_status(kind: str, request: Request, status_code: int, message: Any) -> None:
    line = f"[{kind}] {_describe(request)} -> {status_code}: {message}"
    if status_code >= 500:
        logger.error(line)
    else:
        logger.warning(line)


def _envelope(
    status_code: int,
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    content = {
        "success": False,
        "error": {"code": code, "message": message, "details": details or {}},
    }
    return JSONResponse(
        status_code=status_code, content=jsonable_encoder(content), headers=headers
    )


async def handle_base_api_exception(request: Request, exc: BaseAPIException):
    _log_by_status(type(exc).__name__, request, exc.status_code, exc.message)
    return _envelope(exc.status_code, exc.error_code, exc.message, exc.details)


async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    """프레임워크가 던진 HTTPException (404, 405 등)을 공통 포맷으로 변환"""
    _log_by_status("HTTPException", request, exc.status_code, exc.detail)
    return _envelope(
        exc.status_code,
        "HTTP_ERROR",
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    _log_by_status("RequestValidation", request, 422, exc.errors())
    return _envelope(
        422,
        ValidationError.error_code,
        ValidationError.default_message,
        {"errors": exc.errors()},
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    # 스택 트레이스 포함
    logger.exception(
        f"[Unhandled Error] {_describe(request)}: {type(exc).__name__}: {str(exc)}"
    )
    internal = InternalServerError()
    return _envelope(internal.status_code, internal.error_code, internal.message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseAPIException, handle_base_api_exception)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
