# ===============================================================================
# API ERROR RESPONSES ⚠️
# ===============================================================================

from typing import Any

from rest_framework import status as http_status
from rest_framework.response import Response

from apps.common.types import BusinessError


def error_response(
    error: BusinessError | str,
    code: str | None = None,
    status: int | None = None,
    details: Any = None,
) -> Response:
    """
    Uniform error body: {"error": message, "code": CODE}.
    Business errors carrying `code` and `http_status` map themselves.
    """
    message = getattr(error, 'message', None) or str(error)
    body: dict[str, Any] = {
        'error': message,
        'code': code or getattr(error, 'code', 'VALIDATION_ERROR'),
    }
    if details is not None:
        body['details'] = details

    return Response(
        body,
        status=status or getattr(error, 'http_status', http_status.HTTP_400_BAD_REQUEST),
    )
