# ===============================================================================
# API CORE INFRASTRUCTURE - SHARED BASE CLASSES 🏗️
# ===============================================================================

from .permissions import IsMerchant
from .responses import error_response
from .throttling import OrderCreateThrottle, PickupConfirmThrottle, PickupVerifyThrottle

__all__ = [
    'IsMerchant',
    'OrderCreateThrottle',
    'PickupConfirmThrottle',
    'PickupVerifyThrottle',
    'error_response',
]
