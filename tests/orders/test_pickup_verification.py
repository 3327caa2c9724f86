"""
Test suite for pickup verification and redemption in EMall
Tests ownership, single use, expiry and concurrent redemption.
"""

from datetime import timedelta
from unittest.mock import patch

from django.test import TestCase
from django.utils import timezone

from apps.common.types import Ok
from apps.merchants.models import PickupReward
from apps.notifications.models import Notification
from apps.orders.models import Order, OrderStatusHistory
from apps.orders.pickup import (
    PickupCodeAlreadyRedeemed,
    PickupCodeExpired,
    PickupCodeForbidden,
    PickupCodeNotFound,
    PickupCodeValidationError,
    PickupOrderClosed,
    PickupState,
)
from apps.orders.services import PickupVerificationService
from tests.factories.emall import (
    PickupOrderRequest,
    create_customer_user,
    create_merchant,
    create_pickup_order,
)


class RecordingNotifier:
    """Collects pickup notifications instead of storing them"""

    def __init__(self):
        self.pickups = []
        self.rewards = []
        self.milestones = []

    def notify_customer_pickup_confirmed(self, order):
        self.pickups.append(order.pk)
        return True

    def notify_rewards_earned(self, merchant, reward):
        self.rewards.append(reward.points_earned)
        return True

    def notify_milestone_reached(self, merchant, grant):
        self.milestones.append(grant.pickups_required)
        return True


class PickupTestMixin:
    def setUp(self):
        self.issued_at = timezone.now().replace(microsecond=0)
        self.customer = create_customer_user()
        self.merchant = create_merchant()
        self.other_merchant = create_merchant(email='other@emall.test', business_name='Alexandria Shoes')
        self.order = create_pickup_order(PickupOrderRequest(
            customer=self.customer, merchant=self.merchant, issued_at=self.issued_at
        ))
        self.notifier = RecordingNotifier()

    def service_at(self, now):
        return PickupVerificationService(notifier=self.notifier, clock=lambda: now)


class PickupVerifyTestCase(PickupTestMixin, TestCase):
    """Test cases for verifying a code without redeeming it"""

    def test_valid_code_returns_order_and_items(self):
        result = self.service_at(self.issued_at + timedelta(minutes=2)).verify_code(self.merchant, 'K7M4QX')

        self.assertTrue(result.is_ok())
        verification = result.unwrap()
        self.assertEqual(verification.order.pk, self.order.pk)
        self.assertEqual(len(verification.items), 1)
        self.assertEqual(verification.expires_in, 480)

    def test_verification_does_not_redeem(self):
        service = self.service_at(self.issued_at)
        service.verify_code(self.merchant, 'K7M4QX')
        service.verify_code(self.merchant, 'K7M4QX')

        self.order.refresh_from_db()
        self.assertFalse(self.order.pickup_code_used)
        self.assertEqual(self.order.status, 'pending')

    def test_lowercase_input_with_whitespace_accepted(self):
        result = self.service_at(self.issued_at).verify_code(self.merchant, '  k7m4qx ')
        self.assertTrue(result.is_ok())

    def test_malformed_code(self):
        result = self.service_at(self.issued_at).verify_code(self.merchant, 'K7M4')
        self.assertIsInstance(result.error, PickupCodeValidationError)

    def test_unknown_code(self):
        result = self.service_at(self.issued_at).verify_code(self.merchant, 'ZZZZZZ')
        self.assertIsInstance(result.error, PickupCodeNotFound)

    def test_other_merchants_code_is_forbidden(self):
        with patch('apps.orders.services.log_security_event') as mock_log:
            result = self.service_at(self.issued_at).verify_code(self.other_merchant, 'K7M4QX')

        self.assertIsInstance(result.error, PickupCodeForbidden)
        mock_log.assert_called_once()
        self.assertEqual(mock_log.call_args[0][0], 'pickup_code_cross_merchant')

    def test_valid_through_expiry_instant(self):
        result = self.service_at(self.issued_at + timedelta(minutes=10)).verify_code(self.merchant, 'K7M4QX')
        self.assertTrue(result.is_ok())
        self.assertEqual(result.unwrap().expires_in, 0)

    def test_expired_one_second_after(self):
        now = self.issued_at + timedelta(minutes=10, seconds=1)
        result = self.service_at(now).verify_code(self.merchant, 'K7M4QX')

        self.assertIsInstance(result.error, PickupCodeExpired)
        self.assertEqual(result.error.http_status, 410)

    def test_cancelled_order(self):
        Order.objects.filter(pk=self.order.pk).update(status='cancelled')
        result = self.service_at(self.issued_at).verify_code(self.merchant, 'K7M4QX')
        self.assertIsInstance(result.error, PickupOrderClosed)

    def test_redeemed_code(self):
        Order.objects.filter(pk=self.order.pk).update(pickup_code_used=True, status='completed')
        result = self.service_at(self.issued_at).verify_code(self.merchant, 'K7M4QX')
        self.assertIsInstance(result.error, PickupCodeAlreadyRedeemed)


class PickupConfirmTestCase(PickupTestMixin, TestCase):
    """Test cases for redeeming a code"""

    def test_confirm_completes_order(self):
        now = self.issued_at + timedelta(minutes=3)
        with self.captureOnCommitCallbacks(execute=True):
            result = self.service_at(now).confirm_pickup(
                self.merchant, 'k7m4qx', confirmed_by=self.merchant.user
            )

        self.assertTrue(result.is_ok())
        self.order.refresh_from_db()
        self.assertTrue(self.order.pickup_code_used)
        self.assertEqual(self.order.status, 'completed')
        self.assertEqual(self.order.completed_at, now)
        self.assertEqual(self.order.pickup_state(now), PickupState.REDEEMED)

        history = OrderStatusHistory.objects.get(order=self.order, new_status='completed')
        self.assertEqual(history.old_status, 'pending')
        self.assertEqual(history.reason, 'pickup_confirmed')
        self.assertEqual(history.changed_by, self.merchant.user)

    def test_confirm_credits_merchant_rewards(self):
        with self.captureOnCommitCallbacks(execute=True):
            result = self.service_at(self.issued_at).confirm_pickup(self.merchant, 'K7M4QX')

        reward = result.unwrap().reward
        self.assertEqual(reward.points_earned, 10)
        self.assertEqual(reward.pickup_orders_count, 1)
        self.assertEqual(reward.pickup_rewards_points, 10)

        self.merchant.refresh_from_db()
        self.assertEqual(self.merchant.pickup_orders_count, 1)
        self.assertEqual(self.merchant.pickup_rewards_points, 10)
        self.assertTrue(PickupReward.objects.filter(
            merchant=self.merchant, order=self.order, reward_type='pickup_points'
        ).exists())

    def test_customer_notified_after_commit(self):
        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            self.service_at(self.issued_at).confirm_pickup(self.merchant, 'K7M4QX')

        self.assertEqual(self.notifier.pickups, [])
        for callback in callbacks:
            callback()
        self.assertEqual(self.notifier.pickups, [self.order.pk])
        self.assertEqual(self.notifier.rewards, [10])

    def test_default_notifier_stores_notification(self):
        service = PickupVerificationService(clock=lambda: self.issued_at)
        with self.captureOnCommitCallbacks(execute=True):
            service.confirm_pickup(self.merchant, 'K7M4QX')

        notification = Notification.objects.get(recipient=self.customer)
        self.assertEqual(notification.title, 'Order Picked Up')
        self.assertIn(self.order.short_id, notification.message)

        merchant_notification = Notification.objects.get(recipient=self.merchant.user, title='⭐ Rewards Earned!')
        self.assertIn('You earned 10 pickup points', merchant_notification.message)
        self.assertEqual(merchant_notification.metadata['pickup_rewards_points'], 10)

    def test_second_confirmation_is_rejected(self):
        service = self.service_at(self.issued_at)
        with self.captureOnCommitCallbacks(execute=True):
            first = service.confirm_pickup(self.merchant, 'K7M4QX')
        with patch('apps.orders.services.log_security_event') as mock_log:
            second = service.confirm_pickup(self.merchant, 'K7M4QX')

        self.assertTrue(first.is_ok())
        self.assertIsInstance(second.error, PickupCodeAlreadyRedeemed)
        self.assertEqual(mock_log.call_args[0][0], 'pickup_code_replay')

        self.merchant.refresh_from_db()
        self.assertEqual(self.merchant.pickup_orders_count, 1)

    def test_concurrent_redemption_only_one_wins(self):
        """A confirmation working from a stale read loses at the conditional update"""
        stale_order = Order.objects.get(pk=self.order.pk)
        service = self.service_at(self.issued_at)
        with self.captureOnCommitCallbacks(execute=True):
            winner = service.confirm_pickup(self.merchant, 'K7M4QX')

        with patch.object(PickupVerificationService, '_find_order', return_value=Ok(stale_order)):
            loser = service.confirm_pickup(self.merchant, 'K7M4QX')

        self.assertTrue(winner.is_ok())
        self.assertIsInstance(loser.error, PickupCodeAlreadyRedeemed)
        self.assertEqual(PickupReward.objects.filter(reward_type='pickup_points').count(), 1)
        self.assertEqual(
            OrderStatusHistory.objects.filter(order=self.order, new_status='completed').count(), 1
        )

    def test_expired_code_cannot_be_redeemed(self):
        now = self.issued_at + timedelta(minutes=10, seconds=1)
        result = self.service_at(now).confirm_pickup(self.merchant, 'K7M4QX')

        self.assertIsInstance(result.error, PickupCodeExpired)
        self.order.refresh_from_db()
        self.assertFalse(self.order.pickup_code_used)
        self.assertEqual(self.order.status, 'pending')

    def test_other_merchant_cannot_redeem(self):
        result = self.service_at(self.issued_at).confirm_pickup(self.other_merchant, 'K7M4QX')

        self.assertIsInstance(result.error, PickupCodeForbidden)
        self.order.refresh_from_db()
        self.assertFalse(self.order.pickup_code_used)
        self.other_merchant.refresh_from_db()
        self.assertEqual(self.other_merchant.pickup_orders_count, 0)

    def test_confirmed_orders_can_be_redeemed(self):
        Order.objects.filter(pk=self.order.pk).update(status='confirmed')
        with self.captureOnCommitCallbacks(execute=True):
            result = self.service_at(self.issued_at).confirm_pickup(self.merchant, 'K7M4QX')
        self.assertTrue(result.is_ok())

    def test_cancelled_order_cannot_be_redeemed(self):
        Order.objects.filter(pk=self.order.pk).update(status='cancelled')
        result = self.service_at(self.issued_at).confirm_pickup(self.merchant, 'K7M4QX')
        self.assertIsInstance(result.error, PickupOrderClosed)

    def test_reused_code_resolves_to_open_order(self):
        """An old redeemed order sharing the code does not shadow the open one"""
        Order.objects.filter(pk=self.order.pk).update(pickup_code_used=True, status='completed')
        fresh = create_pickup_order(PickupOrderRequest(
            customer=self.customer, merchant=self.merchant, issued_at=self.issued_at
        ))

        with self.captureOnCommitCallbacks(execute=True):
            result = self.service_at(self.issued_at).confirm_pickup(self.merchant, 'K7M4QX')

        self.assertTrue(result.is_ok())
        self.assertEqual(result.unwrap().order.pk, fresh.pk)
