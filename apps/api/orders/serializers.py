"""
Order API Serializers for EMall
DRF serializers for order creation and pickup code display.
"""

from rest_framework import serializers

from apps.common.constants import DEFAULT_CURRENCY
from apps.common.types import SUPPORTED_CURRENCIES
from apps.orders.models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    """Order item with pricing snapshot for API responses"""

    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            'id', 'product_id', 'product_name', 'quantity', 'unit_price_cents',
            'unit_price', 'line_total_cents', 'line_total', 'selected_size', 'selected_color'
        ]


class PickupOrderSerializer(serializers.ModelSerializer):
    """Order as the merchant sees it when a pickup code is checked"""

    short_id = serializers.CharField(read_only=True)
    total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    customer_name = serializers.CharField(source='customer.get_full_name', read_only=True)
    customer_phone = serializers.CharField(source='customer.phone', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'short_id', 'status', 'status_display',
            'delivery_method', 'payment_status', 'payment_method',
            'total_cents', 'total', 'currency', 'customer_name', 'customer_phone',
            'pickup_code_expiry', 'pickup_code_used', 'created_at', 'completed_at'
        ]


class OrderDetailSerializer(serializers.ModelSerializer):
    """Full order details for the customer who placed it, including the pickup code"""

    items = OrderItemSerializer(many=True, read_only=True)
    total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    merchant_name = serializers.CharField(source='merchant.business_name', read_only=True)
    pickup_state = serializers.SerializerMethodField()
    pickup_expires_in = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'status', 'status_display', 'merchant', 'merchant_name',
            'delivery_method', 'payment_status', 'payment_method', 'total_cents', 'total',
            'currency', 'pickup_code', 'pickup_code_expiry', 'pickup_code_used',
            'pickup_state', 'pickup_expires_in', 'notes', 'items', 'created_at', 'completed_at'
        ]

    def get_pickup_state(self, obj: Order) -> str | None:
        return obj.pickup_state().value if obj.pickup_code else None

    def get_pickup_expires_in(self, obj: Order) -> int:
        return obj.pickup_expires_in()


class OrderItemInputSerializer(serializers.Serializer):
    """Input serializer for a cart line"""

    product_id = serializers.UUIDField(required=False, allow_null=True)
    product_name = serializers.CharField(max_length=255)
    quantity = serializers.IntegerField(min_value=1, max_value=100)
    unit_price_cents = serializers.IntegerField(min_value=0)
    selected_size = serializers.CharField(max_length=50, required=False, allow_blank=True)
    selected_color = serializers.CharField(max_length=50, required=False, allow_blank=True)


class OrderCreateInputSerializer(serializers.Serializer):
    """Input serializer for order creation"""

    merchant_id = serializers.UUIDField()
    delivery_method = serializers.ChoiceField(choices=Order.DELIVERY_METHOD_CHOICES, default='pickup')
    payment_method = serializers.ChoiceField(
        choices=Order.PAYMENT_METHOD_CHOICES, required=False, allow_blank=True, default=''
    )
    currency = serializers.ChoiceField(choices=SUPPORTED_CURRENCIES, default=DEFAULT_CURRENCY)
    items = OrderItemInputSerializer(many=True, allow_empty=False)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
