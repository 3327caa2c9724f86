# ===============================================================================
# API PERMISSIONS CLASSES 🔐
# ===============================================================================

from typing import Any

from rest_framework import permissions
from rest_framework.request import Request


class IsMerchant(permissions.BasePermission):
    """
    Authenticated user operating an active merchant store.
    The store is exposed to views as request.user.merchant.
    """

    message = 'Merchant account required'

    def has_permission(self, request: Request, view: Any) -> bool:
        user = request.user
        if not (user and user.is_authenticated):
            return False
        merchant = getattr(user, 'merchant', None)
        return merchant is not None and merchant.is_active

