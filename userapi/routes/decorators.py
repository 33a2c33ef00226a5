"""Decorators shared by the API endpoints."""

import logging
import time
from functools import wraps
from typing import Callable

from flask import current_app, request

logger = logging.getLogger(__name__)


def log_api_request(include_response_time: bool = True):
    """Decorator for API request logging.

    Args:
        include_response_time: Whether to log response time

    Returns:
        Decorated function with request/response logging
    """
    def decorator(f: Callable) -> Callable:
        @wraps(f)
        def decorated_function(*args, **kwargs):
            start_time = time.time() if include_response_time else None

            logger.info(
                f"API Request: {request.method} {request.path}",
                extra={
                    "method": request.method,
                    "path": request.path,
                    "endpoint": request.endpoint,
                    "ip": request.remote_addr,
                }
            )

            try:
                response = f(*args, **kwargs)

                if include_response_time:
                    duration = time.time() - start_time
                    logger.info(
                        f"API Response: {request.method} {request.path} - {duration:.3f}s",
                        extra={
                            "method": request.method,
                            "path": request.path,
                            "endpoint": request.endpoint,
                            "response_time": duration,
                        }
                    )

                return response

            except Exception as err:
                logger.error(
                    f"API Error: {request.method} {request.path} - {err}",
                    extra={
                        "method": request.method,
                        "path": request.path,
                        "endpoint": request.endpoint,
                        "error": str(err),
                    },
                    exc_info=True
                )
                raise

        return decorated_function
    return decorator


def security_headers():
    """Add browser hardening headers to the /users responses.

    Applied to every user endpoint, including error and 204 responses, after
    the view returns. Unmatched routes and uncaught errors go through the
    app-wide handlers in ``userapi.errors`` and are not covered.
    """
    def decorator(f: Callable) -> Callable:
        @wraps(f)
        def decorated_function(*args, **kwargs):
            response = current_app.make_response(f(*args, **kwargs))

            response.headers['X-Content-Type-Options'] = 'nosniff'
            response.headers['X-Frame-Options'] = 'DENY'
            response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'

            return response

        return decorated_function
    return decorator
