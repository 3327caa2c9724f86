"""
Pickup API Views for EMall
Merchant-facing verification and redemption of customer pickup codes.
"""

import logging

from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.request import Request
from rest_framework.response import Response

from apps.api.core import IsMerchant, PickupConfirmThrottle, PickupVerifyThrottle, error_response
from apps.api.orders.serializers import OrderItemSerializer, PickupOrderSerializer
from apps.common.request_ip import get_safe_client_ip
from apps.orders.services import OrderService, PickupVerificationService

from .serializers import PickupCodeInputSerializer

logger = logging.getLogger(__name__)


def build_pickup_service() -> PickupVerificationService:
    """Service wired with its default collaborators"""
    return PickupVerificationService()


@api_view(['POST'])
@permission_classes([IsMerchant])
@throttle_classes([PickupVerifyThrottle])
def verify_pickup(request: Request) -> Response:
    """
    Check a pickup code without redeeming it.
    Returns the order and its items so the merchant can hand over the goods.
    """
    input_serializer = PickupCodeInputSerializer(data=request.data)
    if not input_serializer.is_valid():
        return error_response('Pickup code is required', code='VALIDATION_ERROR', details=input_serializer.errors)

    merchant = request.user.merchant
    result = build_pickup_service().verify_code(merchant, input_serializer.validated_data['code'])

    if result.is_err():
        logger.info(
            f"🎫 [Pickup API] Verification rejected for merchant {merchant.pk} "
            f"from {get_safe_client_ip(request)}: {result.error.code}"
        )
        return error_response(result.error)

    verification = result.unwrap()
    return Response({
        'success': True,
        'order': PickupOrderSerializer(verification.order).data,
        'items': OrderItemSerializer(verification.items, many=True).data,
        'expires_in': verification.expires_in,
    })


@api_view(['POST'])
@permission_classes([IsMerchant])
@throttle_classes([PickupConfirmThrottle])
def confirm_pickup(request: Request) -> Response:
    """Redeem a pickup code: completes the order and credits merchant rewards"""
    input_serializer = PickupCodeInputSerializer(data=request.data)
    if not input_serializer.is_valid():
        return error_response('Pickup code is required', code='VALIDATION_ERROR', details=input_serializer.errors)

    merchant = request.user.merchant
    result = build_pickup_service().confirm_pickup(
        merchant, input_serializer.validated_data['code'], confirmed_by=request.user
    )

    if result.is_err():
        logger.info(
            f"🎫 [Pickup API] Confirmation rejected for merchant {merchant.pk} "
            f"from {get_safe_client_ip(request)}: {result.error.code}"
        )
        return error_response(result.error)

    confirmation = result.unwrap()
    return Response({
        'success': True,
        'message': 'Pickup confirmed! Rewards added automatically.',
        'order': PickupOrderSerializer(confirmation.order).data,
        'reward': confirmation.reward.as_dict(),
    })


@api_view(['GET'])
@permission_classes([IsMerchant])
def pickup_stats(request: Request) -> Response:
    """Redeemed pickup count for the merchant's store"""
    return Response(OrderService.get_pickup_stats(request.user.merchant))
