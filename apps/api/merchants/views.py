"""
Merchant API Views for EMall
Pickup rewards dashboard for the signed-in merchant.
"""

from rest_framework.decorators import api_view, permission_classes
from rest_framework.request import Request
from rest_framework.response import Response

from apps.api.core import IsMerchant
from apps.merchants.services import RewardService


@api_view(['GET'])
@permission_classes([IsMerchant])
def reward_summary(request: Request) -> Response:
    """Counters, milestone ladder with progress, and recent reward history"""
    merchant = request.user.merchant
    summary = RewardService.get_reward_summary(merchant)
    return Response({
        'merchant': {
            'id': str(merchant.id),
            'business_name': merchant.business_name,
            'business_name_ar': merchant.business_name_ar,
        },
        **summary,
    })
