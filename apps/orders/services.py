"""
Order Management Services for EMall
Handles order lifecycle, pickup code issuance and pickup redemption at the store.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, TypedDict

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from apps.common.constants import DEFAULT_CURRENCY
from apps.common.types import SUPPORTED_CURRENCIES, Err, Ok, Result
from apps.common.validators import log_security_event
from apps.merchants.services import RewardOutcome, RewardService
from apps.notifications.services import NotificationService

from .models import Order, OrderItem, OrderStatusHistory
from .pickup import (
    PickupCodeAlreadyRedeemed,
    PickupCodeExpired,
    PickupCodeForbidden,
    PickupCodeNotFound,
    PickupError,
    PickupOrderClosed,
    is_expired,
    issue_pickup_code,
    validate_code_format,
)

if TYPE_CHECKING:
    from apps.merchants.models import Merchant
    from apps.merchants.services import MilestoneGrant
    from apps.users.models import User

logger = logging.getLogger(__name__)

# ===============================================================================
# ORDER SERVICE PARAMETER OBJECTS
# ===============================================================================

class OrderItemData(TypedDict, total=False):
    """Type definition for order item data"""
    product_id: uuid.UUID | None
    product_name: str
    quantity: int
    unit_price_cents: int
    selected_size: str
    selected_color: str

@dataclass
class OrderCreateData:
    """Parameter object for order creation"""
    customer: User
    merchant: Merchant
    items: list[OrderItemData]
    delivery_method: str = 'pickup'
    payment_method: str = ''
    currency: str = DEFAULT_CURRENCY
    notes: str = ''

@dataclass
class StatusChangeData:
    """Parameter object for order status changes"""
    new_status: str
    notes: str = ''
    reason: str = ''
    changed_by: User | None = None

# ===============================================================================
# ORDER SERVICE
# ===============================================================================

class OrderService:
    """Main service for order management operations"""

    VALID_TRANSITIONS: ClassVar[dict[str, tuple[str, ...]]] = {
        'pending': ('confirmed', 'cancelled'),
        'confirmed': ('completed', 'cancelled'),
        'completed': (),  # Terminal state
        'cancelled': (),  # Terminal state
    }

    @staticmethod
    def _validate_create_data(data: OrderCreateData) -> str | None:
        """Return the first problem with an order request, or None"""
        if not data.items:
            return "Order must contain at least one item"
        if data.delivery_method not in dict(Order.DELIVERY_METHOD_CHOICES):
            return f"Invalid delivery method: {data.delivery_method}"
        if data.payment_method and data.payment_method not in dict(Order.PAYMENT_METHOD_CHOICES):
            return f"Invalid payment method: {data.payment_method}"
        if data.currency not in SUPPORTED_CURRENCIES:
            return f"Unsupported currency: {data.currency}"
        if not data.merchant.is_active:
            return "Merchant is not accepting orders"

        for item in data.items:
            if not item.get('product_name'):
                return "Every item needs a product name"
            if int(item.get('quantity', 0)) < 1:
                return "Item quantity must be at least 1"
            if int(item.get('unit_price_cents', -1)) < 0:
                return "Item price cannot be negative"
        return None

    @staticmethod
    def is_pickup_code_outstanding(code: str, now: datetime) -> bool:
        """Whether an unredeemed, unexpired code on an open order already uses `code`"""
        return Order.objects.filter(
            pickup_code=code,
            pickup_code_used=False,
            pickup_code_expiry__gte=now,
            status__in=Order.OPEN_STATUSES,
        ).exists()

    @staticmethod
    @transaction.atomic
    def create_order(data: OrderCreateData, now: datetime | None = None) -> Result[Order, str]:
        """Create new order, issuing a pickup code for pickup orders"""
        if problem := OrderService._validate_create_data(data):
            return Err(problem)

        try:
            now = now or timezone.now()

            pickup_fields: dict[str, Any] = {}
            if data.delivery_method == 'pickup':
                issued = issue_pickup_code(
                    now, is_taken=lambda code: OrderService.is_pickup_code_outstanding(code, now)
                )
                pickup_fields = {
                    'pickup_code': issued.code,
                    'pickup_code_expiry': issued.expires_at,
                    'pickup_code_used': False,
                }

            order = Order.objects.create(
                customer=data.customer,
                merchant=data.merchant,
                delivery_method=data.delivery_method,
                payment_method=data.payment_method,
                currency=data.currency,
                notes=data.notes,
                **pickup_fields,
            )

            for item_data in data.items:
                OrderItem.objects.create(
                    order=order,
                    product_id=item_data.get('product_id'),
                    product_name=item_data['product_name'],
                    quantity=int(item_data['quantity']),
                    unit_price_cents=int(item_data['unit_price_cents']),
                    selected_size=item_data.get('selected_size') or '',
                    selected_color=item_data.get('selected_color') or '',
                )

            order.calculate_totals()

            OrderService._create_status_history(
                order, None, 'pending', 'Order created', data.customer, is_automatic=True
            )

            log_security_event(
                'order_created',
                {
                    'order_number': order.order_number,
                    'order_id': str(order.id),
                    'customer_id': str(data.customer.id),
                    'merchant_id': str(data.merchant.id),
                    'delivery_method': order.delivery_method,
                    'total_cents': order.total_cents,
                }
            )

            transaction.on_commit(lambda: NotificationService.notify_merchant_new_order(order))
            return Ok(order)

        except Exception as e:
            logger.exception(f"Failed to create order: {e}")
            return Err(f"Failed to create order: {e!s}")

    @staticmethod
    @transaction.atomic
    def update_order_status(order: Order, status_data: StatusChangeData) -> Result[Order, str]:
        """Update order status with validation and audit trail"""
        old_status = order.status
        new_status = status_data.new_status

        if not OrderService._is_valid_status_transition(old_status, new_status):
            return Err(f"Invalid status transition from {old_status} to {new_status}")

        if new_status == 'completed' and order.is_pickup and not order.pickup_code_used:
            return Err("Pickup orders are completed by confirming the pickup code")

        try:
            now = timezone.now()
            fields: dict[str, Any] = {'status': new_status, 'updated_at': now}
            if new_status == 'completed':
                fields['completed_at'] = now

            # Conditional on the status we validated against
            updated = Order.objects.filter(pk=order.pk, status=old_status).update(**fields)
            if not updated:
                return Err("Order status was changed by another request")
            order.refresh_from_db()

            OrderService._create_status_history(
                order, old_status, new_status, status_data.notes,
                status_data.changed_by, reason=status_data.reason
            )

            log_security_event(
                'order_status_changed',
                {
                    'order_number': order.order_number,
                    'order_id': str(order.id),
                    'old_status': old_status,
                    'new_status': new_status,
                    'user_id': str(status_data.changed_by.id) if status_data.changed_by else None,
                }
            )

            transaction.on_commit(lambda: NotificationService.notify_customer_order_update(order, new_status))
            return Ok(order)

        except Exception as e:
            logger.exception(f"Failed to update order status: {e}")
            return Err(f"Failed to update order status: {e!s}")

    @staticmethod
    @transaction.atomic
    def regenerate_pickup_code(order: Order, now: datetime | None = None) -> Result[Order, str]:
        """Issue a fresh code and expiry for an open, unredeemed pickup order"""
        if not order.is_pickup:
            return Err("Only pickup orders have a pickup code")
        if order.pickup_code_used:
            return Err("Pickup code has already been used")
        if not order.is_open:
            return Err("Order is no longer open for pickup")

        now = now or timezone.now()
        try:
            issued = issue_pickup_code(
                now, is_taken=lambda code: OrderService.is_pickup_code_outstanding(code, now)
            )
        except RuntimeError as e:
            logger.exception(f"🔥 [Pickup] {e}")
            return Err(str(e))

        updated = Order.objects.filter(
            pk=order.pk, pickup_code_used=False, status__in=Order.OPEN_STATUSES
        ).update(pickup_code=issued.code, pickup_code_expiry=issued.expires_at, updated_at=now)
        if not updated:
            return Err("Order is no longer open for pickup")

        order.refresh_from_db()
        logger.info(f"🎫 [Pickup] New pickup code issued for order {order.order_number}")
        return Ok(order)

    @staticmethod
    @transaction.atomic
    def update_payment_status(order: Order, payment_status: str) -> Result[Order, str]:
        """Record a payment outcome and tell the customer"""
        if payment_status not in dict(Order.PAYMENT_STATUS_CHOICES):
            return Err(f"Invalid payment status: {payment_status}")
        if order.payment_status == payment_status:
            return Ok(order)

        old_payment_status = order.payment_status
        order.payment_status = payment_status
        order.save(update_fields=['payment_status', 'updated_at'])

        log_security_event(
            'order_payment_status_changed',
            {
                'order_number': order.order_number,
                'order_id': str(order.id),
                'old_payment_status': old_payment_status,
                'new_payment_status': payment_status,
            }
        )

        if payment_status != 'pending':
            transaction.on_commit(lambda: NotificationService.notify_payment_status(order, payment_status))
        return Ok(order)

    @staticmethod
    def get_pickup_stats(merchant: Merchant) -> dict[str, int]:
        """Redeemed pickup orders for a merchant"""
        total_pickups = Order.objects.filter(
            merchant=merchant, delivery_method='pickup', pickup_code_used=True
        ).count()
        return {'total_pickups': total_pickups}

    @staticmethod
    def _create_status_history(  # noqa: PLR0913
        order: Order,
        old_status: str | None,
        new_status: str,
        notes: str,
        changed_by: User | None,
        reason: str = '',
        is_automatic: bool = False,
    ) -> None:
        """Create order status history entry"""
        OrderStatusHistory.objects.create(
            order=order,
            old_status=old_status or '',  # Convert None to empty string
            new_status=new_status,
            notes=notes,
            reason=reason,
            changed_by=changed_by,
            is_automatic=is_automatic,
        )

    @staticmethod
    def _is_valid_status_transition(old_status: str, new_status: str) -> bool:
        """Validate order status transitions according to business rules"""
        return new_status in OrderService.VALID_TRANSITIONS.get(old_status, ())

# ===============================================================================
# ORDER QUERY SERVICE
# ===============================================================================

class OrderQueryService:
    """Service for order querying operations"""

    @staticmethod
    def get_order_with_items(order_id: uuid.UUID | str, customer: User | None = None) -> Result[Order, str]:
        """Get order with related items, optionally scoped to customer"""
        queryset = Order.objects.select_related('customer', 'merchant').prefetch_related('items')
        if customer is not None:
            queryset = queryset.filter(customer=customer)

        try:
            return Ok(queryset.get(id=order_id))
        except (Order.DoesNotExist, ValidationError, ValueError):
            return Err("Order not found")

# ===============================================================================
# PICKUP VERIFICATION SERVICE
# ===============================================================================

class PickupNotifier(Protocol):
    """Notification hooks fired after a pickup is redeemed"""

    def notify_customer_pickup_confirmed(self, order: Order) -> bool: ...

    def notify_rewards_earned(self, merchant: Merchant, reward: RewardOutcome) -> bool: ...

    def notify_milestone_reached(self, merchant: Merchant, grant: MilestoneGrant) -> bool: ...


@dataclass
class PickupVerification:
    """Read-only view of an order whose pickup code checked out"""
    order: Order
    items: list[OrderItem]
    expires_in: int


@dataclass
class PickupConfirmation:
    """Outcome of a redeemed pickup code"""
    order: Order
    reward: RewardOutcome


class PickupVerificationService:
    """
    Pickup code verification and redemption for merchants.

    A code verifies only for the merchant owning the order, only while unused
    and only until its expiry instant. Redemption is a single conditional
    UPDATE, so of two concurrent confirmations exactly one succeeds and the
    other is diagnosed as already redeemed.
    """

    def __init__(
        self,
        notifier: PickupNotifier | None = None,
        reward_service: RewardService | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.notifier = notifier or NotificationService()
        self.reward_service = reward_service or RewardService()
        self.clock = clock or timezone.now

    def verify_code(self, merchant: Merchant, raw_code: str | None) -> Result[PickupVerification, PickupError]:
        """Check a code without redeeming it"""
        format_result = validate_code_format(raw_code)
        if format_result.is_err():
            return format_result

        code = format_result.unwrap()
        now = self.clock()

        lookup = self._find_order(merchant, code)
        if lookup.is_err():
            return lookup

        order = lookup.unwrap()
        if failure := self._diagnose(order, now):
            self._log_failure(merchant, code, failure)
            return Err(failure)

        return Ok(PickupVerification(
            order=order,
            items=list(order.items.all()),
            expires_in=order.pickup_expires_in(now),
        ))

    def confirm_pickup(
        self, merchant: Merchant, raw_code: str | None, confirmed_by: User | None = None
    ) -> Result[PickupConfirmation, PickupError]:
        """Redeem a code: complete the order, accrue rewards, notify after commit"""
        format_result = validate_code_format(raw_code)
        if format_result.is_err():
            return format_result

        code = format_result.unwrap()
        now = self.clock()

        lookup = self._find_order(merchant, code)
        if lookup.is_err():
            return lookup
        order = lookup.unwrap()

        with transaction.atomic():
            old_status = order.status
            updated = Order.objects.filter(
                pk=order.pk,
                merchant=merchant,
                pickup_code=code,
                pickup_code_used=False,
                pickup_code_expiry__gte=now,
                status__in=Order.OPEN_STATUSES,
            ).update(pickup_code_used=True, status='completed', completed_at=now, updated_at=now)

            if not updated:
                order.refresh_from_db()
                failure = self._diagnose(order, now) or PickupCodeAlreadyRedeemed()
                self._log_failure(merchant, code, failure)
                return Err(failure)

            order.refresh_from_db()
            OrderService._create_status_history(
                order, old_status, 'completed', 'Pickup code verified at store',
                confirmed_by, reason='pickup_confirmed'
            )
            reward = self.reward_service.record_pickup(merchant, order)

            transaction.on_commit(lambda: self._notify_confirmed(order, merchant, reward))

        logger.info(
            f"🎫 [Pickup] Order {order.order_number} picked up at merchant {merchant.pk} "
            f"(+{reward.points_earned} points)"
        )
        return Ok(PickupConfirmation(order=order, reward=reward))

    def _find_order(self, merchant: Merchant, code: str) -> Result[Order, PickupError]:
        """Resolve a code to this merchant's order, telling foreign codes apart from unknown ones"""
        own_order = (
            Order.objects.select_related('customer', 'merchant')
            .filter(pickup_code=code, merchant=merchant)
            .order_by('pickup_code_used', '-created_at')
            .first()
        )
        if own_order is not None:
            return Ok(own_order)

        if Order.objects.filter(pickup_code=code).exclude(merchant=merchant).exists():
            log_security_event(
                'pickup_code_cross_merchant',
                {'merchant_id': str(merchant.pk), 'code_prefix': code[:2]}
            )
            return Err(PickupCodeForbidden())

        return Err(PickupCodeNotFound())

    @staticmethod
    def _diagnose(order: Order, now: datetime) -> PickupError | None:
        """Why this order's code cannot be redeemed right now, if it cannot"""
        if order.pickup_code_used:
            return PickupCodeAlreadyRedeemed()
        if order.pickup_code_expiry is None or is_expired(order.pickup_code_expiry, now):
            return PickupCodeExpired()
        if not order.is_open:
            return PickupOrderClosed()
        return None

    @staticmethod
    def _log_failure(merchant: Merchant, code: str, failure: PickupError) -> None:
        if isinstance(failure, PickupCodeAlreadyRedeemed):
            log_security_event(
                'pickup_code_replay',
                {'merchant_id': str(merchant.pk), 'code_prefix': code[:2]}
            )
        else:
            logger.info(f"🎫 [Pickup] Code rejected for merchant {merchant.pk}: {failure.code}")

    def _notify_confirmed(self, order: Order, merchant: Merchant, reward: RewardOutcome) -> None:
        self.notifier.notify_customer_pickup_confirmed(order)
        if reward.points_earned:
            self.notifier.notify_rewards_earned(merchant, reward)
        for grant in reward.milestones_reached:
            self.notifier.notify_milestone_reached(merchant, grant)
