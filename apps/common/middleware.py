"""
Common middleware for EMall
Request tracing for audit logs.
"""

import logging
import uuid
from collections.abc import Callable

from django.http import HttpRequest, HttpResponse

from apps.common.logging import clear_request_id, set_request_id

logger = logging.getLogger(__name__)

MAX_REQUEST_ID_LENGTH = 64

# ===============================================================================
# REQUEST ID MIDDLEWARE
# ===============================================================================

class RequestIDMiddleware:
    """Add unique request ID for tracing and audit logs"""

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        incoming = request.headers.get('X-Request-ID', '')
        if incoming and len(incoming) <= MAX_REQUEST_ID_LENGTH and incoming.replace('-', '').isalnum():
            request_id = incoming
        else:
            request_id = str(uuid.uuid4())

        request.META['REQUEST_ID'] = request_id
        set_request_id(request_id)
        try:
            response = self.get_response(request)
        finally:
            clear_request_id()

        response['X-Request-ID'] = request_id
        return response
