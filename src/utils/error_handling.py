"""
Centralized Error Handling and Logging System
Renders error pages and writes structured log entries with a trace ID.
"""

import json
import logging
import traceback
import uuid
from datetime import datetime, timezone
from typing import Dict, Optional
from contextvars import ContextVar

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from api.templating import templates

# Context variables for request tracing
request_id_var: ContextVar[str] = ContextVar('request_id', default='')

logger = logging.getLogger(__name__)

class NotFoundError(Exception):
    """An expected record is absent"""

    status_code = 404

    def __init__(self, message: str = "Not found"):
        super().__init__(message)
        self.message = message


class ErrorHandlingConfig:
    """Centralized configuration for error handling behavior"""

    SENSITIVE_FIELD_PATTERNS = [
        'password', 'token', 'key', 'secret', 'authorization', 'cookie'
    ]
    MAX_LOG_VALUE_SIZE = 2000
    LOG_CLIENT_ERRORS = True
    INCLUDE_TRACE_ID = True

    @classmethod
    def is_sensitive_field(cls, field_name: str) -> bool:
        field_lower = field_name.lower()
        return any(pattern in field_lower for pattern in cls.SENSITIVE_FIELD_PATTERNS)

    @classmethod
    def sanitize_data(cls, data):
        """Recursively redact sensitive values and truncate long strings"""
        if isinstance(data, dict):
            return {
                key: "***REDACTED***" if cls.is_sensitive_field(key) else cls.sanitize_data(value)
                for key, value in data.items()
            }
        elif isinstance(data, list):
            return [cls.sanitize_data(item) for item in data]
        elif isinstance(data, str) and len(data) > cls.MAX_LOG_VALUE_SIZE:
            return data[:cls.MAX_LOG_VALUE_SIZE] + "...[TRUNCATED]"
        return data


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
        """Log structured error with full context, returning its trace ID"""
        trace_id = request_id_var.get('') or str(uuid.uuid4())[:8]

        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "trace_id": trace_id,
            "error_type": error_type,
            "message": message,
            "level": logging.getLevelName(level)
        }

        if request:
            log_entry["request"] = {
                "method": request.method,
                "path": request.url.path,
                "query_params": ErrorHandlingConfig.sanitize_data(dict(request.query_params)),
                "client_ip": request.client.host if request.client else None,
                "user_agent": request.headers.get("user-agent", "unknown")
            }

        if exception:
            log_entry["exception"] = {
                "type": type(exception).__name__,
                "details": str(exception),
                "module": getattr(exception, '__module__', 'unknown')
            }
            if include_traceback:
                log_entry["exception"]["traceback"] = "".join(
                    traceback.format_exception(type(exception), exception, exception.__traceback__)
                )

        if extra_context:
            log_entry["context"] = ErrorHandlingConfig.sanitize_data(extra_context)

        logger.log(level, json.dumps(log_entry, indent=2, default=str))
        return trace_id


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware to assign each request a trace ID"""

    async def dispatch(self, request: Request, call_next):
        trace_id = str(uuid.uuid4())[:8]
        request_id_var.set(trace_id)
        request.state.trace_id = trace_id

        response = await call_next(request)
        # Add trace ID to response headers for client-side debugging
        response.headers["X-Trace-ID"] = trace_id
        return response


def render_error(request: Request, status_code: int, message: str, trace_id: Optional[str] = None):
    """Render the error page with the given status"""
    context = {
        "title": "Error",
        "status_code": status_code,
        "message": message,
        "trace_id": trace_id if ErrorHandlingConfig.INCLUDE_TRACE_ID else None,
    }
    return templates.TemplateResponse(request, "error.html", context, status_code=status_code)


# Global Exception Handlers
async def not_found_handler(request: Request, exc: NotFoundError):
    """Handle absent records (HTTP 404)"""
    StructuredLogger.log_error(
        "not_found",
        exc.message,
        request=request,
        include_traceback=False,
        level=logging.INFO
    )
    return render_error(request, exc.status_code, exc.message)

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions (routing 404s, bad requests) with logging"""
    trace_id = None
    if exc.status_code >= 500 or ErrorHandlingConfig.LOG_CLIENT_ERRORS:
        trace_id = StructuredLogger.log_error(
            f"http_{exc.status_code}",
            f"HTTP {exc.status_code}: {exc.detail}",
            request=request,
            exception=exc,
            include_traceback=exc.status_code >= 500,
            level=logging.ERROR if exc.status_code >= 500 else logging.INFO
        )
    return render_error(request, exc.status_code, str(exc.detail), trace_id)

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle FastAPI request validation errors (HTTP 422)"""
    validation_details = [
        {
            "field": " -> ".join(str(loc) for loc in error.get("loc", [])),
            "message": error.get("msg", "Unknown validation error"),
        }
        for error in exc.errors()
    ]
    trace_id = StructuredLogger.log_error(
        "validation_error_422",
        f"Request validation failed: {len(validation_details)} validation errors",
        request=request,
        extra_context={"validation_errors": validation_details},
        include_traceback=False,
        level=logging.INFO
    )
    message = "; ".join(f"{d['field']}: {d['message']}" for d in validation_details)
    return render_error(request, 422, message or "Request validation failed", trace_id)

async def general_exception_handler(request: Request, exc: Exception):
    """Handle all other exceptions, including datastore failures"""
    trace_id = StructuredLogger.log_error(
        "internal_server_error",
        f"Unhandled exception: {str(exc)}",
        request=request,
        exception=exc,
        include_traceback=True
    )
    # Don't expose internal details
    response = render_error(request, 500, "An unexpected error occurred", trace_id)
    # Served outside RequestContextMiddleware, so the header is set here
    response.headers["X-Trace-ID"] = trace_id
    return response

def setup_error_handling(app):
    """Setup error handling for the FastAPI app"""
    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info("Centralized error handling initialized")
