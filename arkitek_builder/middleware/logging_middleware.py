"""
Logging middleware for FastAPI request/response tracking.

This middleware provides request/response logging with timing, error
tracking, and request ids for tracing.
"""

import time
import uuid
from typing import Callable, Dict, Optional
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ..utils.logging import (
    get_logger,
    set_request_context,
    clear_request_context,
    log_api_request
)


logger = get_logger(__name__)

SENSITIVE_HEADERS = frozenset([
    'authorization', 'cookie', 'x-api-key', 'x-auth-token',
    'x-access-token', 'x-csrf-token', 'x-session-id'
])


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for logging HTTP requests and responses with timing.

    Every request gets a short request id that is placed in the logging
    context and returned in the `X-Request-ID` response header.
    """

    def __init__(
        self,
        app: ASGIApp,
        log_requests: bool = True,
        log_responses: bool = True,
        exclude_paths: Optional[list] = None
    ):
        """
        Initialize logging middleware.

        Args:
            app: ASGI application
            log_requests: Whether to log incoming requests
            log_responses: Whether to log outgoing responses
            exclude_paths: List of paths to exclude from logging
        """
        super().__init__(app)
        self.log_requests = log_requests
        self.log_responses = log_responses
        self.exclude_paths = exclude_paths if exclude_paths is not None else ['/health', '/favicon.ico']

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and response with logging."""
        request_id = str(uuid.uuid4())[:8]

        method = request.method
        path = request.url.path

        if path in self.exclude_paths:
            return await call_next(request)

        client_ip = self._get_client_ip(request)
        user_agent = request.headers.get('user-agent')

        set_request_context(
            request_id=request_id,
            method=method,
            path=path,
            client_ip=client_ip
        )

        if self.log_requests:
            logger.info(
                f"Incoming request: {method} {path}",
                extra={
                    'query_params': str(request.query_params) if request.query_params else None,
                    'headers': self._filter_sensitive_headers(dict(request.headers)),
                    'user_agent': user_agent
                }
            )

        start_time = time.time()
        error = None

        try:
            response = await call_next(request)
        except Exception as e:
            error = e
            logger.error(
                f"Request processing failed: {method} {path}",
                extra={
                    'error_type': type(e).__name__,
                    'error_message': str(e)
                },
                exc_info=True
            )
            response = JSONResponse(
                status_code=500,
                content={
                    'error': 'INTERNAL_SERVER_ERROR',
                    'message': 'An unexpected error occurred',
                    'request_id': request_id
                }
            )

        duration_ms = (time.time() - start_time) * 1000
        status_code = response.status_code
        response.headers['X-Request-ID'] = request_id

        if self.log_responses:
            self._log_response(method, path, status_code, duration_ms, error)

        log_api_request(
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=duration_ms,
            request_id=request_id,
            user_agent=user_agent,
            client_ip=client_ip
        )

        clear_request_context()
        return response

    def _get_client_ip(self, request: Request) -> str:
        """Extract client IP address from request."""
        forwarded_for = request.headers.get('x-forwarded-for')
        if forwarded_for:
            return forwarded_for.split(',')[0].strip()

        real_ip = request.headers.get('x-real-ip')
        if real_ip:
            return real_ip

        if request.client:
            return request.client.host

        return 'unknown'

    def _log_response(
        self,
        method: str,
        path: str,
        status_code: int,
        duration_ms: float,
        error: Optional[Exception]
    ):
        """Log outgoing response details."""
        log_data = {
            'status_code': status_code,
            'duration_ms': round(duration_ms, 2)
        }

        if error:
            log_data['error'] = {
                'type': type(error).__name__,
                'message': str(error)
            }

        if status_code >= 500:
            logger.error(f"Response sent: {method} {path} -> {status_code}", extra=log_data)
        elif status_code >= 400:
            logger.warning(f"Response sent: {method} {path} -> {status_code}", extra=log_data)
        else:
            logger.info(f"Response sent: {method} {path} -> {status_code}", extra=log_data)

    def _filter_sensitive_headers(self, headers: Dict[str, str]) -> Dict[str, str]:
        """Filter out sensitive header values."""
        return {
            key: '<redacted>' if key.lower() in SENSITIVE_HEADERS else value
            for key, value in headers.items()
        }
