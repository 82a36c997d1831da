"""
Structured logging configuration for the commerce service

Every record is emitted as a single JSON object carrying the service
identity, the request trace context (request id, correlation id, tenant id)
and any ``extra_fields`` passed by the caller.
"""

import logging
import logging.handlers
import sys
import json
import time
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from contextvars import ContextVar
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

# Context variables for request tracking
request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
correlation_id_var: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)
tenant_id_var: ContextVar[Optional[str]] = ContextVar('tenant_id', default=None)
user_id_var: ContextVar[Optional[str]] = ContextVar('user_id', default=None)

_TRACE_VARS = {
    "request_id": request_id_var,
    "correlation_id": correlation_id_var,
    "tenant_id": tenant_id_var,
    "user_id": user_id_var,
}

def current_trace_context() -> Dict[str, str]:
    """Trace identifiers bound to the current request, skipping unset ones"""
    return {name: var.get() for name, var in _TRACE_VARS.items() if var.get()}

class StructuredFormatter(logging.Formatter):
    """JSON formatter; one object per line so log shippers can parse it as-is"""

    def __init__(self, service_name: str, environment: str = "development", version: str = "1.0.0"):
        super().__init__()
        self.service_name = service_name
        self.environment = environment
        self.version = version

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "@timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "environment": self.environment,
            "version": self.version,
            "location": {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
                "module": record.module,
            },
        }

        trace_context = current_trace_context()
        if trace_context:
            log_obj["trace"] = trace_context

        if record.exc_info and record.exc_info[0] is not None:
            log_obj["error"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        if hasattr(record, 'extra_fields'):
            log_obj["custom"] = record.extra_fields

        if hasattr(record, 'duration_ms'):
            log_obj["performance"] = {"duration_ms": record.duration_ms}

        return json.dumps(log_obj, default=str)

class SecurityFilter(logging.Filter):
    """Redacts credential-looking keys from ``extra_fields`` before they are written"""

    SENSITIVE_FIELDS = (
        'password', 'password_confirmation', 'token', 'access_token',
        'authorization', 'secret', 'cookie',
    )

    def filter(self, record: logging.LogRecord) -> bool:
        fields = getattr(record, 'extra_fields', None)
        if isinstance(fields, dict):
            record.extra_fields = self._redact(fields)
        return True

    def _redact(self, data: Dict[str, Any]) -> Dict[str, Any]:
        clean = {}
        for key, value in data.items():
            if key.lower() in self.SENSITIVE_FIELDS:
                clean[key] = "***REDACTED***"
            elif isinstance(value, dict):
                clean[key] = self._redact(value)
            else:
                clean[key] = value
        return clean

def setup_logging(
    service_name: str,
    level: str = "INFO",
    environment: str = "development",
    version: str = "1.0.0",
    log_file: Optional[str] = None,
) -> None:
    """
    Configure the root logger with the structured formatter

    Args:
        service_name: Name reported in every record
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        environment: Deployment environment reported in every record
        version: Service version reported in every record
        log_file: Optional path of a size-rotated log file
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers = []

    formatter = StructuredFormatter(service_name, environment, version)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10485760,  # 10MB
            backupCount=5,
        ))
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(SecurityFilter())
        root_logger.addHandler(handler)

    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

    root_logger.info(
        "Logging initialized",
        extra={'extra_fields': {'service': service_name, 'level': level, 'file': bool(log_file)}},
    )

class LoggerAdapter(logging.LoggerAdapter):
    """Merges the caller's ``extra`` with the request trace context"""

    def process(self, msg, kwargs):
        extra = dict(kwargs.get('extra') or {})
        for name, value in current_trace_context().items():
            extra.setdefault(name, value)
        kwargs['extra'] = extra
        return msg, kwargs

def get_logger(name: str) -> LoggerAdapter:
    return LoggerAdapter(logging.getLogger(name), {})

def set_request_context(
    request_id: Optional[str] = None,
    correlation_id: Optional[str] = None,
    tenant_id: Optional[Any] = None,
    user_id: Optional[Any] = None,
) -> None:
    """Bind trace identifiers to the current context; ``None`` leaves a value untouched"""
    if request_id:
        request_id_var.set(request_id)
    if correlation_id:
        correlation_id_var.set(correlation_id)
    if tenant_id is not None:
        tenant_id_var.set(str(tenant_id))
    if user_id is not None:
        user_id_var.set(str(user_id))

def generate_request_id() -> str:
    return str(uuid.uuid4())

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs request start and completion with duration
    and echoes the request id back in ``X-Request-ID``
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get('X-Request-ID') or generate_request_id()
        correlation_id = request.headers.get('X-Correlation-ID')
        request_id_var.set(request_id)
        correlation_id_var.set(correlation_id)
        tenant_id_var.set(None)
        user_id_var.set(None)

        logger = get_logger(__name__)
        fields = {'method': request.method, 'path': request.url.path}
        logger.info(
            f"Request started: {request.method} {request.url.path}",
            extra={'extra_fields': {**fields, 'client_host': request.client.host if request.client else None}},
        )

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                f"Request failed: {request.method} {request.url.path}",
                exc_info=True,
                extra={'extra_fields': {**fields, 'duration_ms': (time.perf_counter() - start_time) * 1000}},
            )
            raise

        logger.info(
            f"Request completed: {request.method} {request.url.path}",
            extra={'extra_fields': {
                **fields,
                'status_code': response.status_code,
                'duration_ms': (time.perf_counter() - start_time) * 1000,
            }},
        )
        response.headers['X-Request-ID'] = request_id
        return response
