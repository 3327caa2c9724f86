"""
Order API Views for EMall
DRF views for order creation, order status changes and pickup QR codes.
"""

import logging

from django.http import HttpResponse
from rest_framework import serializers, status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from apps.api.core import IsMerchant, error_response
from apps.api.core.throttling import OrderCreateThrottle
from apps.merchants.models import Merchant
from apps.orders.models import Order
from apps.orders.qr import PickupQRCodeEncoder
from apps.orders.services import OrderCreateData, OrderQueryService, OrderService, StatusChangeData

from .serializers import OrderCreateInputSerializer, OrderDetailSerializer

logger = logging.getLogger(__name__)


class StatusChangeInputSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES)
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@throttle_classes([OrderCreateThrottle])
def create_order(request: Request) -> Response:
    """
    Place an order with one merchant.
    Pickup orders come back with their pickup code and expiry.
    """
    input_serializer = OrderCreateInputSerializer(data=request.data)
    if not input_serializer.is_valid():
        return error_response('Invalid input', code='VALIDATION_ERROR', details=input_serializer.errors)

    validated_data = input_serializer.validated_data

    try:
        merchant = Merchant.objects.get(id=validated_data['merchant_id'], is_active=True)
    except Merchant.DoesNotExist:
        return error_response('Merchant not found', code='NOT_FOUND', status=status.HTTP_404_NOT_FOUND)

    result = OrderService.create_order(OrderCreateData(
        customer=request.user,
        merchant=merchant,
        items=[dict(item) for item in validated_data['items']],
        delivery_method=validated_data['delivery_method'],
        payment_method=validated_data.get('payment_method', ''),
        currency=validated_data['currency'],
        notes=validated_data.get('notes', ''),
    ))

    if result.is_err():
        logger.warning(f"⚠️ [Orders API] Order creation failed for user {request.user.pk}: {result.error}")
        return error_response(result.error, code='VALIDATION_ERROR')

    order = result.unwrap()
    logger.info(f"🛒 [Orders API] Order {order.order_number} created by user {request.user.pk}")
    return Response({
        'success': True,
        'order': OrderDetailSerializer(order).data,
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def order_detail(request: Request, order_id: str) -> Response:
    """Order details for the customer who placed it"""
    result = OrderQueryService.get_order_with_items(order_id, customer=request.user)
    if result.is_err():
        return error_response(result.error, code='NOT_FOUND', status=status.HTTP_404_NOT_FOUND)
    return Response(OrderDetailSerializer(result.unwrap()).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def pickup_qr(request: Request, order_id: str) -> HttpResponse | Response:
    """PNG QR code of the order's pickup code, for the customer who placed it"""
    result = OrderQueryService.get_order_with_items(order_id, customer=request.user)
    if result.is_err():
        return error_response(result.error, code='NOT_FOUND', status=status.HTTP_404_NOT_FOUND)

    order = result.unwrap()
    if not order.pickup_code:
        return error_response('This order has no pickup code', code='NOT_FOUND', status=status.HTTP_404_NOT_FOUND)

    try:
        size_px = int(request.query_params.get('size', PickupQRCodeEncoder.default_size()))
        png = PickupQRCodeEncoder().to_png_bytes(order.pickup_code, size_px)
    except ValueError as e:
        return error_response(str(e), code='VALIDATION_ERROR')

    response = HttpResponse(png, content_type='image/png')
    response['Cache-Control'] = 'no-store'
    return response


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def regenerate_pickup_code(request: Request, order_id: str) -> Response:
    """Issue a fresh pickup code after the previous one expired"""
    result = OrderQueryService.get_order_with_items(order_id, customer=request.user)
    if result.is_err():
        return error_response(result.error, code='NOT_FOUND', status=status.HTTP_404_NOT_FOUND)

    order = result.unwrap()
    if not order.is_pickup:
        return error_response('Only pickup orders have a pickup code', code='VALIDATION_ERROR')

    regenerated = OrderService.regenerate_pickup_code(order)
    if regenerated.is_err():
        return error_response(regenerated.error, code='ORDER_CLOSED', status=status.HTTP_409_CONFLICT)

    order = regenerated.unwrap()
    return Response({
        'success': True,
        'pickup_code': order.pickup_code,
        'pickup_code_expiry': order.pickup_code_expiry,
        'expires_in': order.pickup_expires_in(),
    })


@api_view(['POST'])
@permission_classes([IsMerchant])
def update_order_status(request: Request, order_id: str) -> Response:
    """Merchant moves one of their orders through its lifecycle"""
    input_serializer = StatusChangeInputSerializer(data=request.data)
    if not input_serializer.is_valid():
        return error_response('Invalid input', code='VALIDATION_ERROR', details=input_serializer.errors)

    try:
        order = Order.objects.get(id=order_id, merchant=request.user.merchant)
    except Order.DoesNotExist:
        return error_response('Order not found', code='NOT_FOUND', status=status.HTTP_404_NOT_FOUND)

    validated_data = input_serializer.validated_data
    result = OrderService.update_order_status(order, StatusChangeData(
        new_status=validated_data['status'],
        reason=validated_data['reason'],
        notes=validated_data['notes'],
        changed_by=request.user,
    ))
    if result.is_err():
        return error_response(result.error, code='INVALID_TRANSITION', status=status.HTTP_409_CONFLICT)

    return Response({'success': True, 'order': OrderDetailSerializer(result.unwrap()).data})
