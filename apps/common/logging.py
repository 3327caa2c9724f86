"""
Request-correlated logging for EMall.

RequestIDMiddleware stores the current request ID in thread-local storage;
RequestIDFilter copies it onto every log record so the production JSON
formatter can emit it.
"""

from __future__ import annotations

import logging
import threading

# Thread-local storage for request context
_request_context = threading.local()


def set_request_id(request_id: str) -> None:
    """Set the current request ID in thread-local storage."""
    _request_context.request_id = request_id


def get_request_id() -> str | None:
    """Get the current request ID from thread-local storage."""
    return getattr(_request_context, "request_id", None)


def clear_request_id() -> None:
    """Clear the request ID from thread-local storage."""
    _request_context.request_id = None


class RequestIDFilter(logging.Filter):
    """Add request_id to log records, '-' outside a request"""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = get_request_id() or "-"  # type: ignore[attr-defined]
        return True
