"""
Security event logging for EMall
Pickup abuse signals (cross-merchant probes, replays) land here for monitoring.
"""

import logging
from typing import Any

from apps.common.logging import get_request_id

logger = logging.getLogger(__name__)


# ===============================================================================
# SECURITY EVENT LOGGING
# ===============================================================================

def log_security_event(event_type: str, details: dict[str, Any], request_ip: str | None = None) -> None:
    """
    Log security events for monitoring and forensics.
    The current request ID is attached so events can be joined with access logs.
    """
    logger.warning(
        f"🚨 [Security] {event_type}: {details} from IP: {request_ip or '-'}",
        extra={'security_event': event_type, 'request_id': get_request_id() or '-'},
    )
