"""
Structured logging utilities for Arkitek Builder.

This module provides structured logging capabilities with request tracking,
operation timing, and contextual information for debugging and monitoring.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from contextvars import ContextVar

from ..config import settings


# Attributes every LogRecord carries; anything else was passed through `extra`.
_RESERVED_RECORD_ATTRS = frozenset([
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'lineno', 'funcName', 'created',
    'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'getMessage', 'exc_info',
    'exc_text', 'stack_info', 'taskName', 'message'
])


# Context variable for request tracking
request_context: ContextVar[Dict[str, Any]] = ContextVar('request_context', default={})


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured JSON logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        context = request_context.get()
        if context:
            log_entry['request_context'] = context

        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_ATTRS and key not in log_entry:
                log_entry[key] = value

        if record.exc_info:
            log_entry['exception'] = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else None,
                'message': str(record.exc_info[1]) if record.exc_info[1] else None,
                'traceback': self.formatException(record.exc_info)
            }

        return json.dumps(log_entry, default=str, ensure_ascii=False)


class RequestTrackingFilter(logging.Filter):
    """Filter to add request tracking information to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add request context to log record."""
        for key, value in request_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


def setup_logging(
    log_level: Optional[str] = None,
    structured: Optional[bool] = None,
    enable_request_tracking: bool = True
) -> None:
    """
    Set up application logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        structured: Whether to use structured JSON logging
        enable_request_tracking: Whether to enable request tracking
    """
    if log_level is None:
        log_level = settings.monitoring.log_level.value
    if structured is None:
        structured = settings.monitoring.structured_logging

    level = getattr(logging, log_level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    if structured:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(settings.monitoring.log_format)
    console_handler.setFormatter(formatter)

    if enable_request_tracking:
        console_handler.addFilter(RequestTrackingFilter())

    root_logger.addHandler(console_handler)

    configure_logger_levels()


def configure_logger_levels():
    """Configure specific logger levels to reduce noise."""
    logging.getLogger('asyncio').setLevel(logging.WARNING)
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)

    logging.getLogger('arkitek_builder').setLevel(logging.DEBUG if settings.debug else logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def set_request_context(**kwargs):
    """
    Set request context for logging.

    Args:
        **kwargs: Context key-value pairs
    """
    current_context = dict(request_context.get())
    current_context.update(kwargs)
    request_context.set(current_context)


def clear_request_context():
    """Clear the current request context."""
    request_context.set({})


def log_api_request(
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
    request_id: str,
    user_agent: Optional[str] = None,
    client_ip: Optional[str] = None,
    **extra_context
):
    """
    Log API request with structured information.

    Args:
        method: HTTP method
        path: Request path
        status_code: HTTP status code
        duration_ms: Request duration in milliseconds
        request_id: Unique request identifier
        user_agent: Client user agent
        client_ip: Client IP address
        **extra_context: Additional context
    """
    logger = get_logger('arkitek_builder.api.requests')

    log_data = {
        'request_id': request_id,
        'method': method,
        'path': path,
        'status_code': status_code,
        'duration_ms': round(duration_ms, 2),
        'user_agent': user_agent,
        'client_ip': client_ip,
        **extra_context
    }

    if status_code >= 500:
        level = logging.ERROR
        message = f"API Error: {method} {path} -> {status_code}"
    elif status_code >= 400:
        level = logging.WARNING
        message = f"API Client Error: {method} {path} -> {status_code}"
    else:
        level = logging.INFO
        message = f"API Request: {method} {path} -> {status_code}"

    logger.log(level, message, extra=log_data)


def log_service_operation(
    service: str,
    operation: str,
    success: bool,
    duration_ms: float,
    error: Optional[str] = None,
    **context
):
    """
    Log service operation with timing.

    Args:
        service: Service name
        operation: Operation name
        success: Whether operation succeeded
        duration_ms: Operation duration in milliseconds
        error: Error message if operation failed
        **context: Additional context
    """
    logger = get_logger(f'arkitek_builder.services.{service}')

    log_data = {
        'service': service,
        'operation': operation,
        'success': success,
        'duration_ms': round(duration_ms, 2),
        'error': error,
        **context
    }

    if success:
        logger.info(f"Service operation completed: {service}.{operation}", extra=log_data)
    else:
        logger.warning(f"Service operation failed: {service}.{operation} - {error}", extra=log_data)


# Initialize logging on module import
if not logging.getLogger().handlers:
    setup_logging()
