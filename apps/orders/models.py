"""
Order Management models for EMall
Handles the order lifecycle from checkout to pickup at the merchant's store.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import IntegrityError, models, transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.common.constants import DEFAULT_CURRENCY, ORDER_NUMBER_MAX_ATTEMPTS, ORDER_SHORT_ID_LENGTH

from .pickup import PickupState, format_remaining, is_expired, remaining_seconds

logger = logging.getLogger(__name__)

# ===============================================================================
# ORDER MANAGEMENT MODELS
# ===============================================================================

class Order(models.Model):
    """
    Customer order placed with a single merchant.
    Pickup orders carry a short-lived, single-use pickup code.
    """

    # Use UUID for better security and external references
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Order identification
    order_number = models.CharField(
        max_length=50,
        unique=True,
        help_text=_("Human-readable order number")
    )

    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='orders'
    )
    merchant = models.ForeignKey(
        'merchants.Merchant',
        on_delete=models.PROTECT,
        related_name='orders'
    )

    # Order status workflow
    STATUS_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        ('pending', _('Pending')),         # Placed, awaiting merchant
        ('confirmed', _('Confirmed')),     # Accepted by merchant
        ('completed', _('Completed')),     # Delivered or picked up
        ('cancelled', _('Cancelled')),     # Cancelled by customer or merchant
    )
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default='pending',
        help_text=_("Current order status")
    )

    OPEN_STATUSES: ClassVar[tuple[str, ...]] = ('pending', 'confirmed')
    TERMINAL_STATUSES: ClassVar[tuple[str, ...]] = ('completed', 'cancelled')

    DELIVERY_METHOD_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        ('delivery', _('Delivery')),
        ('pickup', _('Store Pickup')),
    )
    delivery_method = models.CharField(
        max_length=20,
        choices=DELIVERY_METHOD_CHOICES,
        default='pickup'
    )

    PAYMENT_STATUS_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        ('pending', _('Pending')),
        ('paid', _('Paid')),
        ('failed', _('Failed')),
        ('refunded', _('Refunded')),
    )
    payment_status = models.CharField(
        max_length=20,
        choices=PAYMENT_STATUS_CHOICES,
        default='pending'
    )

    PAYMENT_METHOD_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        ('cash', _('Cash on Pickup')),
        ('card', _('Card')),
        ('wallet', _('Mobile Wallet')),
    )
    payment_method = models.CharField(
        max_length=20,
        choices=PAYMENT_METHOD_CHOICES,
        blank=True
    )

    # Amounts in cents (piasters) for precision
    total_cents = models.BigIntegerField(
        default=0,
        validators=[MinValueValidator(0)],
        help_text=_("Final total amount in cents")
    )
    currency = models.CharField(max_length=3, default=DEFAULT_CURRENCY)

    # Pickup code
    pickup_code = models.CharField(
        max_length=12,
        null=True,
        blank=True,
        help_text=_("Uppercase pickup code shown to the customer")
    )
    pickup_code_expiry = models.DateTimeField(null=True, blank=True)
    pickup_code_used = models.BooleanField(default=False)

    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'orders'
        verbose_name = _('Order')
        verbose_name_plural = _('Orders')
        ordering: ClassVar[tuple[str, ...]] = ('-created_at',)
        indexes: ClassVar[tuple[models.Index, ...]] = (
            models.Index(fields=['customer', '-created_at'], name='orders_customer_idx'),
            models.Index(fields=['merchant', 'status'], name='orders_merchant_status_idx'),
            models.Index(fields=['pickup_code'], name='orders_pickup_code_idx'),
            models.Index(fields=['status', '-created_at'], name='orders_status_idx'),
        )

    def __str__(self) -> str:
        return f"Order {self.order_number}"

    def save(self, *args: Any, **kwargs: Any) -> None:
        """Auto-generate order number before saving, retrying if a concurrent checkout took it"""
        if self.pickup_code:
            self.pickup_code = self.pickup_code.upper()
        if self.order_number or not self._state.adding:
            super().save(*args, **kwargs)
            return

        for attempt in range(1, ORDER_NUMBER_MAX_ATTEMPTS + 1):
            self.generate_order_number()
            try:
                with transaction.atomic():
                    super().save(*args, **kwargs)
                return
            except IntegrityError:
                if attempt == ORDER_NUMBER_MAX_ATTEMPTS:
                    raise
                logger.warning(f"⚠️ [Orders] Order number {self.order_number} taken, retrying")
                self.order_number = ''

    @property
    def total(self) -> Decimal:
        """Return total in currency units"""
        return Decimal(self.total_cents) / 100

    @property
    def short_id(self) -> str:
        """Short reference shown in notifications"""
        return str(self.id)[:ORDER_SHORT_ID_LENGTH].upper()

    @property
    def is_pickup(self) -> bool:
        return self.delivery_method == 'pickup'

    @property
    def is_open(self) -> bool:
        return self.status in self.OPEN_STATUSES

    @property
    def can_be_cancelled(self) -> bool:
        return self.is_open

    def pickup_state(self, now: datetime | None = None) -> PickupState:
        """Current state of this order's pickup code"""
        now = now or timezone.now()
        if not self.pickup_code:
            return PickupState.INVALID
        if self.pickup_code_used:
            return PickupState.REDEEMED
        if not self.is_open:
            return PickupState.INVALID
        if self.pickup_code_expiry is None or is_expired(self.pickup_code_expiry, now):
            return PickupState.EXPIRED
        return PickupState.ISSUED

    def pickup_expires_in(self, now: datetime | None = None) -> int:
        """Seconds until the pickup code expires"""
        if not self.pickup_code_expiry:
            return 0
        return remaining_seconds(self.pickup_code_expiry, now or timezone.now())

    def pickup_countdown(self, now: datetime | None = None) -> str:
        if not self.pickup_code_expiry:
            return ''
        return format_remaining(self.pickup_code_expiry, now or timezone.now())

    def generate_order_number(self) -> None:
        """Generate a unique order number based on date and sequence"""
        if not self.order_number:
            # Format: EM-YYYYMMDD-XXXXXX
            date_part = timezone.now().strftime('%Y%m%d')
            prefix = f"EM-{date_part}-"
            last_number = (
                Order.objects.filter(order_number__startswith=prefix)
                .order_by('-order_number')
                .values_list('order_number', flat=True)
                .first()
            )
            last_sequence = int(last_number[len(prefix):]) if last_number else 0
            sequence = str(last_sequence + 1).zfill(6)
            self.order_number = f"{prefix}{sequence}"

    def calculate_totals(self) -> None:
        """Recalculate order total from line items"""
        self.total_cents = max(0, sum(item.line_total_cents for item in self.items.all()))
        self.save(update_fields=['total_cents', 'updated_at'])


class OrderItem(models.Model):
    """
    Individual line item in an order.
    Stores a product snapshot so later catalog edits do not change the order.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name='items'
    )

    # Catalog reference, the catalog itself lives outside this service
    product_id = models.UUIDField(null=True, blank=True)
    product_name = models.CharField(
        max_length=255,
        help_text=_("Product name at time of order")
    )

    quantity = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)]
    )
    unit_price_cents = models.BigIntegerField(
        validators=[MinValueValidator(0)],
        help_text=_("Unit price in cents at time of order")
    )
    line_total_cents = models.BigIntegerField(default=0)

    selected_size = models.CharField(max_length=50, blank=True)
    selected_color = models.CharField(max_length=50, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'order_items'
        verbose_name = _('Order Item')
        verbose_name_plural = _('Order Items')
        ordering: ClassVar[tuple[str, ...]] = ('created_at',)
        indexes: ClassVar[tuple[models.Index, ...]] = (
            models.Index(fields=['order', 'created_at'], name='order_items_order_idx'),
        )

    def __str__(self) -> str:
        return f"{self.product_name} x{self.quantity} ({self.order.order_number})"

    def save(self, *args: Any, **kwargs: Any) -> None:
        """Calculate line total before saving"""
        self.line_total_cents = self.calculate_line_total()
        super().save(*args, **kwargs)

    def calculate_line_total(self) -> int:
        return self.quantity * self.unit_price_cents

    @property
    def unit_price(self) -> Decimal:
        return Decimal(self.unit_price_cents) / 100

    @property
    def line_total(self) -> Decimal:
        return Decimal(self.line_total_cents) / 100


class OrderStatusHistory(models.Model):
    """
    Track order status changes for audit trail and customer notifications.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name='status_history'
    )

    # Status change details
    old_status = models.CharField(
        max_length=20,
        blank=True,
        help_text=_("Previous status")
    )
    new_status = models.CharField(
        max_length=20,
        help_text=_("New status")
    )

    # Change context
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        help_text=_("User who made the change")
    )
    reason = models.CharField(
        max_length=255,
        blank=True,
        help_text=_("Reason for status change")
    )
    notes = models.TextField(blank=True)

    # Automatic vs manual change
    is_automatic = models.BooleanField(
        default=False,
        help_text=_("Whether this was an automatic system change")
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'order_status_history'
        verbose_name = _('Order Status History')
        verbose_name_plural = _('Order Status Histories')
        ordering: ClassVar[tuple[str, ...]] = ('-created_at',)
        indexes: ClassVar[tuple[models.Index, ...]] = (
            models.Index(fields=['order', '-created_at'], name='order_status_history_idx'),
        )

    def __str__(self) -> str:
        return f"{self.order.order_number}: {self.old_status} → {self.new_status}"
