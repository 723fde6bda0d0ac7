"""
Centralized Error Handling and Logging System
Maps failures to the API's error bodies and writes structured error logs.
"""

import json
import logging
import traceback
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from contextvars import ContextVar

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

# Context variables for request tracing
request_id_var: ContextVar[str] = ContextVar('request_id', default='')

logger = logging.getLogger(__name__)


class ErrorHandlingConfig:
    """Centralized configuration for error handling behavior"""

    # Keys redacted from logged headers and bodies
    SENSITIVE_FIELD_PATTERNS = ['password', 'token', 'secret', 'authorization', 'cookie']

    LOG_REQUEST_BODIES = True
    MAX_BODY_LOG_SIZE = 5000  # Truncate large bodies

    @classmethod
    def is_sensitive_field(cls, field_name: str) -> bool:
        """Check if a field contains sensitive data"""
        field_lower = field_name.lower()
        return any(pattern in field_lower for pattern in cls.SENSITIVE_FIELD_PATTERNS)

    @classmethod
    def sanitize_data(cls, data: Any) -> Any:
        """Recursively redact sensitive keys and truncate long strings"""
        if isinstance(data, dict):
            return {
                key: "***REDACTED***" if cls.is_sensitive_field(str(key)) else cls.sanitize_data(value)
                for key, value in data.items()
            }
        elif isinstance(data, list):
            return [cls.sanitize_data(item) for item in data]
        elif isinstance(data, str) and len(data) > cls.MAX_BODY_LOG_SIZE:
            return data[:cls.MAX_BODY_LOG_SIZE] + "...[TRUNCATED]"
        else:
            return data


class FieldValidationError(Exception):
    """Request fields failed validation; carries every failing field"""

    def __init__(self, errors: List[Dict[str, Any]]):
        super().__init__(f"{len(errors)} invalid field(s)")
        self.errors = errors


class StructuredLogger:
    """Structured logging with consistent format and context"""

    @staticmethod
    def log_error(
        error_type: str,
        message: str,
        request: Optional[Request] = None,
        exception: Optional[Exception] = None,
        extra_context: Optional[Dict] = None,
        include_traceback: bool = True,
        level: int = logging.ERROR
    ) -> str:
        """Log structured error with full context"""

        trace_id = request_id_var.get('') or str(uuid.uuid4())[:8]

        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "trace_id": trace_id,
            "error_type": error_type,
            "message": message,
            "level": logging.getLevelName(level)
        }

        if request:
            headers = dict(request.headers)
            log_entry["request"] = {
                "method": request.method,
                "path": request.url.path,
                "query_params": dict(request.query_params),
                "headers": ErrorHandlingConfig.sanitize_data(headers),
                "client_ip": request.client.host if request.client else None
            }

        if exception:
            log_entry["exception"] = {
                "type": type(exception).__name__,
                "details": str(exception)
            }
            if include_traceback:
                log_entry["exception"]["traceback"] = traceback.format_exc()

        if extra_context:
            log_entry["context"] = ErrorHandlingConfig.sanitize_data(extra_context)

        logger.log(level, json.dumps(log_entry, indent=2, default=str))

        return trace_id


def _captured_body(request: Request) -> Any:
    """Request body for logs; JSON bodies are parsed so sensitive keys get redacted"""
    body = getattr(request.state, 'captured_body', None)
    if not body:
        return None
    try:
        text = body.decode('utf-8')
    except UnicodeDecodeError:
        return "DECODE_ERROR"
    try:
        return ErrorHandlingConfig.sanitize_data(json.loads(text))
    except ValueError:
        return ErrorHandlingConfig.sanitize_data(text)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware to capture request context and add request IDs"""

    async def dispatch(self, request: Request, call_next):
        trace_id = str(uuid.uuid4())[:8]
        request_id_var.set(trace_id)

        # Store request body for potential error logging
        body = None
        if ErrorHandlingConfig.LOG_REQUEST_BODIES:
            body = await request.body()

        request.state.captured_body = body
        request.state.trace_id = trace_id

        response = await call_next(request)
        # Add trace ID to response headers for client-side debugging
        response.headers["X-Trace-ID"] = trace_id
        return response


def jsonable_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Make sure error values (e.g. raw bytes of bad JSON) can be serialized"""
    safe = []
    for error in errors:
        value = error.get("value")
        if isinstance(value, bytes):
            value = value.decode('utf-8', errors='replace')
        elif value is not None and not isinstance(value, (str, int, float, bool, list, dict)):
            value = str(value)
        safe.append({**error, "value": value})
    return safe


# Global Exception Handlers
async def field_validation_exception_handler(request: Request, exc: FieldValidationError) -> JSONResponse:
    """Handle rejected user payloads (HTTP 400)"""
    StructuredLogger.log_error(
        "validation_error_400",
        f"Request validation failed: {len(exc.errors)} invalid field(s)",
        request=request,
        extra_context={"errors": exc.errors, "request_body": _captured_body(request)},
        include_traceback=False,
        level=logging.WARNING
    )
    return JSONResponse(status_code=400, content={"errors": exc.errors})


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle malformed bodies (bad JSON, non-string values) as HTTP 400"""
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", [])]
        errors.append({
            "type": "field",
            "value": error.get("input"),
            "msg": error.get("msg", "Invalid value"),
            "path": ".".join(loc[1:]) if len(loc) > 1 else "",
            "location": loc[0] if loc else "body"
        })

    StructuredLogger.log_error(
        "validation_error_400",
        f"Request validation failed: {len(errors)} validation errors",
        request=request,
        extra_context={"errors": errors, "request_body": _captured_body(request)},
        include_traceback=False,
        level=logging.WARNING
    )
    return JSONResponse(status_code=400, content={"errors": jsonable_errors(errors)})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions with logging"""
    if exc.status_code >= 500:
        StructuredLogger.log_error(
            f"http_{exc.status_code}",
            f"HTTP {exc.status_code}: {exc.detail}",
            request=request,
            exception=exc,
            extra_context={"request_body": _captured_body(request)},
            include_traceback=False
        )
    else:
        logger.info(f"HTTP {exc.status_code} for {request.method} {request.url.path}: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None)
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all other exceptions without exposing internal details"""
    StructuredLogger.log_error(
        "internal_server_error",
        f"Unhandled exception: {str(exc)}",
        request=request,
        exception=exc,
        extra_context={"request_body": _captured_body(request)},
        include_traceback=True
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def setup_error_handling(app):
    """Setup error handling for FastAPI app"""

    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(FieldValidationError, field_validation_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info("Centralized error handling system initialized")
