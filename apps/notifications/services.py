"""
Notification Services for EMall
Creates in-app notifications for order, payment, pickup and reward events.
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Any

from django.db.models import QuerySet
from django.utils import timezone

from apps.common.constants import MAX_RECENT_NOTIFICATIONS_LIMIT, RECENT_NOTIFICATIONS_LIMIT
from apps.common.types import Money

from .models import Notification

if TYPE_CHECKING:
    from apps.merchants.models import Merchant
    from apps.merchants.services import MilestoneGrant, RewardOutcome
    from apps.orders.models import Order
    from apps.users.models import User

logger = logging.getLogger(__name__)

ORDER_STATUS_MESSAGES: dict[str, tuple[str, str, str]] = {
    'confirmed': (
        '✓ Order Confirmed',
        'Your order #{short_id} has been confirmed and is being prepared.',
        'success',
    ),
    'completed': (
        '🎉 Order Completed',
        'Your order #{short_id} has been completed. Thank you for shopping with us!',
        'success',
    ),
    'cancelled': (
        '❌ Order Cancelled',
        'Your order #{short_id} has been cancelled.',
        'error',
    ),
}

PAYMENT_STATUS_MESSAGES: dict[str, tuple[str, str, str]] = {
    'paid': (
        '✓ Payment Successful',
        'Your payment of {amount} for order #{short_id} has been confirmed.',
        'success',
    ),
    'failed': (
        '❌ Payment Failed',
        'Payment for order #{short_id} failed. Please try again or use a different payment method.',
        'error',
    ),
    'refunded': (
        '💰 Payment Refunded',
        'Your payment of {amount} for order #{short_id} has been refunded.',
        'info',
    ),
}


# ===============================================================================
# NOTIFICATION SERVICE
# ===============================================================================

class NotificationService:
    """
    In-app notification dispatcher.

    Notifications are best effort: a failure is logged and reported as
    None/False so it never rolls back the business operation that caused it.
    """

    @staticmethod
    def send(  # noqa: PLR0913
        recipient: User,
        title: str,
        message: str,
        category: str = 'info',
        link: str | None = None,
        metadata: dict[str, Any] | None = None,
        send_email: bool = False,
        send_sms: bool = False,
    ) -> Notification | None:
        """Create an in-app notification and optionally hand off to email/SMS"""
        if recipient is None or not title or not message:
            logger.error("🔥 [Notifications] Missing required notification fields")
            return None

        try:
            notification = Notification.objects.create(
                recipient=recipient,
                title=title,
                message=message,
                category=category or 'info',
                link=link or '',
                metadata=metadata or {},
            )
        except Exception as e:
            logger.exception(f"🔥 [Notifications] Failed to create notification for {recipient.pk}: {e}")
            return None

        if send_email:
            NotificationService._send_email(recipient, title, message)
        if send_sms:
            NotificationService._send_sms(recipient, title, message)

        logger.info(f"🔔 [Notifications] {category} notification sent to user {recipient.pk}: {title}")
        return notification

    @staticmethod
    def _send_email(recipient: User, title: str, message: str) -> None:
        """Email delivery placeholder"""
        if not recipient.email:
            logger.info(f"📧 [Email] No email found for user {recipient.pk}")
            return
        logger.info(f"📧 [Email] Would send '{title}' to {recipient.email}")

    @staticmethod
    def _send_sms(recipient: User, title: str, message: str) -> None:
        """SMS delivery placeholder"""
        if not recipient.phone:
            logger.info(f"📱 [SMS] No phone found for user {recipient.pk}")
            return
        logger.info(f"📱 [SMS] Would send '{title}' to {recipient.phone}")

    # ===============================================================================
    # ORDER EVENTS
    # ===============================================================================

    @staticmethod
    def notify_merchant_new_order(order: Order) -> bool:
        """Tell the merchant a new order was placed"""
        merchant_user = order.merchant.user
        delivery = 'Pickup' if order.is_pickup else 'Delivery'
        customer_name = order.customer.get_full_name() or 'Customer'
        amount = Money(order.total_cents, order.currency)

        notification = NotificationService.send(
            recipient=merchant_user,
            title='🛍️ New Order Received!',
            message=f"New {delivery} order #{order.short_id} from {customer_name} - {amount}",
            category='order',
            link=f"/dashboard/orders/{order.id}",
            metadata={
                'order_id': str(order.id),
                'customer_id': str(order.customer_id),
                'total_cents': order.total_cents,
                'delivery_method': order.delivery_method,
            },
        )
        return notification is not None

    @staticmethod
    def notify_customer_order_update(order: Order, status: str) -> bool:
        """Tell the customer their order moved to `status`"""
        status_info = ORDER_STATUS_MESSAGES.get(status)
        if status_info is None:
            logger.error(f"🔥 [Notifications] Invalid order status for notification: {status}")
            return False

        title, template, category = status_info
        notification = NotificationService.send(
            recipient=order.customer,
            title=title,
            message=template.format(short_id=order.short_id),
            category=category,
            link=f"/orders/{order.id}",
            metadata={'order_id': str(order.id), 'status': status},
        )
        return notification is not None

    @staticmethod
    def notify_customer_pickup_confirmed(order: Order) -> bool:
        """Tell the customer their pickup was confirmed at the store"""
        notification = NotificationService.send(
            recipient=order.customer,
            title='Order Picked Up',
            message=f"Your order #{order.short_id} has been picked up successfully. Enjoy your purchase!",
            category='success',
            link=f"/orders/{order.id}",
            metadata={'order_id': str(order.id), 'status': order.status},
        )
        return notification is not None

    @staticmethod
    def notify_payment_status(order: Order, payment_status: str) -> bool:
        """Tell the customer how their payment ended"""
        payment_info = PAYMENT_STATUS_MESSAGES.get(payment_status)
        if payment_info is None:
            logger.error(f"🔥 [Notifications] Invalid payment status for notification: {payment_status}")
            return False

        title, template, category = payment_info
        amount = Money(order.total_cents, order.currency)
        notification = NotificationService.send(
            recipient=order.customer,
            title=title,
            message=template.format(short_id=order.short_id, amount=amount),
            category=category,
            link=f"/orders/{order.id}",
            metadata={
                'order_id': str(order.id),
                'payment_status': payment_status,
                'total_cents': order.total_cents,
            },
        )
        return notification is not None

    # ===============================================================================
    # REWARD EVENTS
    # ===============================================================================

    @staticmethod
    def notify_rewards_earned(merchant: Merchant, reward: RewardOutcome) -> bool:
        """Tell the merchant the points a confirmed pickup earned them"""
        notification = NotificationService.send(
            recipient=merchant.user,
            title='⭐ Rewards Earned!',
            message=(
                f"You earned {reward.points_earned} pickup points. "
                f"Total: {reward.pickup_rewards_points} points from {reward.pickup_orders_count} pickups."
            ),
            category='reward',
            link='/dashboard/rewards',
            metadata={
                'merchant_id': str(merchant.id),
                'points_earned': reward.points_earned,
                'pickup_rewards_points': reward.pickup_rewards_points,
            },
        )
        return notification is not None

    @staticmethod
    def notify_milestone_reached(merchant: Merchant, grant: MilestoneGrant) -> bool:
        """Tell the merchant a pickup milestone was unlocked"""
        notification = NotificationService.send(
            recipient=merchant.user,
            title='🏆 Milestone Reached!',
            message=f"{grant.pickups_required} pickups completed. Reward unlocked: {grant.description}",
            category='reward',
            link='/dashboard/rewards',
            metadata={
                'merchant_id': str(merchant.id),
                'pickups_required': grant.pickups_required,
                'reward_type': grant.reward_type,
                'reward_value': grant.reward_value,
            },
        )
        return notification is not None

    # ===============================================================================
    # INBOX MANAGEMENT
    # ===============================================================================

    @staticmethod
    def mark_as_read(notification_id: uuid.UUID | str, user: User) -> bool:
        updated = Notification.objects.filter(
            id=notification_id, recipient=user, is_read=False
        ).update(is_read=True, read_at=timezone.now())
        return updated > 0 or Notification.objects.filter(id=notification_id, recipient=user).exists()

    @staticmethod
    def mark_all_as_read(user: User) -> int:
        """Mark every unread notification as read, returns how many changed"""
        return Notification.objects.filter(recipient=user, is_read=False).update(
            is_read=True, read_at=timezone.now()
        )

    @staticmethod
    def get_unread_count(user: User) -> int:
        return Notification.objects.filter(recipient=user, is_read=False).count()

    @staticmethod
    def get_recent(user: User, limit: int = RECENT_NOTIFICATIONS_LIMIT) -> QuerySet[Notification]:
        limit = max(1, min(limit, MAX_RECENT_NOTIFICATIONS_LIMIT))
        return Notification.objects.filter(recipient=user).order_by('-created_at')[:limit]

    @staticmethod
    def delete(notification_id: uuid.UUID | str, user: User) -> bool:
        deleted, _ = Notification.objects.filter(id=notification_id, recipient=user).delete()
        return deleted > 0

    @staticmethod
    def delete_all(user: User) -> int:
        deleted, _ = Notification.objects.filter(recipient=user).delete()
        return deleted
