"""
Common decorators for scheduled (EventBridge-triggered) Lambda handlers.
"""

from __future__ import annotations

import traceback
from collections.abc import Callable
from functools import wraps
from typing import Any

from aws_lambda_powertools import Logger

from core.models.errors import ConfigurationError, HousekeeperError

logger = Logger(UTC=True)


def _log_error(
    message: str,
    *,
    handler_name: str,
    request_id: str | None,
    exc: Exception,
    level: str = "error",
) -> None:
    """
    Log error with consistent structure and full context.

    Args:
        message: Log message
        handler_name: Name of the handler function
        request_id: AWS request ID
        exc: Exception that was raised
        level: Log level ('error' or 'exception')
    """
    log_extra: dict[str, Any] = {
        "handler": handler_name,
        "request_id": request_id,
        "error": str(exc),
        "error_type": type(exc).__name__,
    }

    if isinstance(exc, HousekeeperError):
        log_extra["error_code"] = exc.error_code
        log_extra["details"] = exc.details

    if level == "exception":
        # logger.exception automatically includes traceback
        logger.exception(message, extra=log_extra)
    else:
        log_extra["traceback"] = traceback.format_exc()
        logger.error(message, extra=log_extra)


def scheduled_handler(
    func: Callable[..., Any],
) -> Callable[..., None]:
    """
    Decorator for scheduled Lambda handlers.

    Provides:
    - Centralized exception handling: nothing is ever re-raised
    - Request ID tracking and structured logging
    - A ``None`` return value regardless of what the handler returns

    Example:
        @scheduled_handler
        def handler(event, context):
            run_cleanup()
    """

    @wraps(func)
    def wrapper(event: Any, context: Any) -> None:
        request_id = getattr(context, "aws_request_id", None)

        try:
            func(event, context)

        # Malformed configuration - fatal, not retried
        except ConfigurationError as exc:
            _log_error(
                "Invalid configuration, run aborted",
                handler_name=func.__name__,
                request_id=request_id,
                exc=exc,
            )

        # Known domain failures (e.g. reference collection)
        except HousekeeperError as exc:
            _log_error(
                exc.message,
                handler_name=func.__name__,
                request_id=request_id,
                exc=exc,
            )

        # Catch-all for unexpected errors
        except Exception as exc:
            _log_error(
                "Unexpected error in handler",
                handler_name=func.__name__,
                request_id=request_id,
                exc=exc,
                level="exception",
            )

    return wrapper
