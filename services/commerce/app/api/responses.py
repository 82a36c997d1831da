"""
JSON envelope shared by every endpoint:

    {"success": bool, "data": ..., "message": str, "errors": {field: [messages]}}
"""

from typing import Any, Dict, List, Optional
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from shared.core import get_logger
from app.domain.errors import DomainError

logger = get_logger(__name__)

def send_response(data: Any, message: str, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "data": jsonable_encoder(data), "message": message},
    )

def send_error(message: str, errors: Optional[Dict[str, List[str]]] = None,
               status_code: int = status.HTTP_404_NOT_FOUND) -> JSONResponse:
    content = {"success": False, "message": message}
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content)

def _field_errors(exc: RequestValidationError) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        # Drop the "body"/"query" prefix so keys name the offending field
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.setdefault(".".join(loc) or "body", []).append(error.get("msg", "Invalid value"))
    return errors

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        return send_error(exc.message, exc.to_errors(), exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return send_error("Validation Error", _field_errors(exc), status.HTTP_422_UNPROCESSABLE_ENTITY)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return send_error(str(exc.detail), None, exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled error: {request.method} {request.url.path}",
            exc_info=exc,
            extra={'extra_fields': {'method': request.method, 'path': request.url.path}},
        )
        return send_error("Internal Server Error", None, status.HTTP_500_INTERNAL_SERVER_ERROR)
