# ===============================================================================
# API THROTTLING CLASSES 🚦
# ===============================================================================

from rest_framework.throttling import ScopedRateThrottle


# 🔒 SECURITY: Pickup codes are short, so guessing must stay expensive
class PickupVerifyThrottle(ScopedRateThrottle):
    """Throttling for pickup code verification"""
    scope = 'pickup_verify'


class PickupConfirmThrottle(ScopedRateThrottle):
    """Throttling for pickup code redemption"""
    scope = 'pickup_confirm'


class OrderCreateThrottle(ScopedRateThrottle):
    """Throttling for order creation endpoints"""
    scope = 'order_create'
