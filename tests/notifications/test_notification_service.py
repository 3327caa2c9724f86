"""
Test suite for notification services in EMall
Tests notification creation for order, payment, pickup and reward events plus inbox management.
"""

import uuid
from datetime import timedelta
from unittest.mock import patch

from django.test import TestCase
from django.utils import timezone

from apps.merchants.services import MilestoneGrant, RewardOutcome
from apps.notifications.models import Notification
from apps.notifications.services import NotificationService
from tests.factories.emall import (
    PickupOrderRequest,
    create_customer_user,
    create_merchant,
    create_pickup_order,
)


class NotificationSendTestCase(TestCase):
    """Test cases for the base send operation"""

    def setUp(self):
        self.user = create_customer_user()

    def test_send_creates_notification(self):
        notification = NotificationService.send(
            recipient=self.user,
            title='Hello',
            message='Welcome to EMall',
            metadata={'source': 'test'},
        )

        self.assertIsNotNone(notification)
        self.assertEqual(notification.category, 'info')
        self.assertEqual(notification.link, '')
        self.assertEqual(notification.metadata, {'source': 'test'})
        self.assertFalse(notification.is_read)

    def test_missing_fields_return_none(self):
        self.assertIsNone(NotificationService.send(recipient=self.user, title='', message='body'))
        self.assertIsNone(NotificationService.send(recipient=self.user, title='title', message=''))
        self.assertFalse(Notification.objects.exists())

    def test_storage_failure_is_contained(self):
        with patch.object(Notification.objects, 'create', side_effect=RuntimeError('db down')):
            result = NotificationService.send(recipient=self.user, title='Hi', message='There')
        self.assertIsNone(result)

    def test_email_and_sms_are_logged_only(self):
        with self.assertLogs('apps.notifications.services', level='INFO') as logs:
            NotificationService.send(
                recipient=self.user, title='Hi', message='There', send_email=True, send_sms=True
            )
        output = '\n'.join(logs.output)
        self.assertIn('[Email] Would send', output)
        self.assertIn('[SMS] Would send', output)


class OrderEventNotificationTestCase(TestCase):
    """Test cases for order, payment and pickup notifications"""

    def setUp(self):
        self.customer = create_customer_user()
        self.merchant = create_merchant()
        self.order = create_pickup_order(PickupOrderRequest(customer=self.customer, merchant=self.merchant))

    def test_new_order_goes_to_merchant(self):
        self.assertTrue(NotificationService.notify_merchant_new_order(self.order))

        notification = Notification.objects.get()
        self.assertEqual(notification.recipient, self.merchant.user)
        self.assertEqual(
            notification.message,
            f'New Pickup order #{self.order.short_id} from Mona Hassan - 300.00 EGP',
        )
        self.assertEqual(notification.metadata['order_id'], str(self.order.id))

    def test_status_updates(self):
        test_cases = [
            ('confirmed', '✓ Order Confirmed', 'success'),
            ('completed', '🎉 Order Completed', 'success'),
            ('cancelled', '❌ Order Cancelled', 'error'),
        ]
        for status, title, category in test_cases:
            with self.subTest(status=status):
                self.assertTrue(NotificationService.notify_customer_order_update(self.order, status))
                notification = Notification.objects.get(recipient=self.customer, title=title)
                self.assertEqual(notification.title, title)
                self.assertEqual(notification.category, category)
                self.assertIn(self.order.short_id, notification.message)

    def test_unknown_status_not_sent(self):
        self.assertFalse(NotificationService.notify_customer_order_update(self.order, 'shipped'))
        self.assertFalse(Notification.objects.exists())

    def test_pickup_confirmed(self):
        self.assertTrue(NotificationService.notify_customer_pickup_confirmed(self.order))

        notification = Notification.objects.get(recipient=self.customer)
        self.assertEqual(notification.title, 'Order Picked Up')
        self.assertEqual(
            notification.message,
            f'Your order #{self.order.short_id} has been picked up successfully. Enjoy your purchase!',
        )

    def test_payment_statuses(self):
        test_cases = [
            ('paid', '✓ Payment Successful', 'success'),
            ('failed', '❌ Payment Failed', 'error'),
            ('refunded', '💰 Payment Refunded', 'info'),
        ]
        for payment_status, title, category in test_cases:
            with self.subTest(payment_status=payment_status):
                self.assertTrue(NotificationService.notify_payment_status(self.order, payment_status))
                notification = Notification.objects.get(recipient=self.customer, title=title)
                self.assertEqual(notification.title, title)
                self.assertEqual(notification.category, category)

    def test_unknown_payment_status_not_sent(self):
        self.assertFalse(NotificationService.notify_payment_status(self.order, 'pending'))


class RewardEventNotificationTestCase(TestCase):
    """Test cases for reward notifications"""

    def setUp(self):
        self.customer = create_customer_user()
        self.merchant = create_merchant()

    def test_rewards_earned_goes_to_merchant(self):
        reward = RewardOutcome(
            points_earned=10, pickup_orders_count=3, pickup_rewards_points=30, discount_percentage=0
        )

        self.assertTrue(NotificationService.notify_rewards_earned(self.merchant, reward))

        notification = Notification.objects.get()
        self.assertEqual(notification.recipient, self.merchant.user)
        self.assertEqual(notification.title, '⭐ Rewards Earned!')
        self.assertEqual(
            notification.message, 'You earned 10 pickup points. Total: 30 points from 3 pickups.'
        )
        self.assertEqual(notification.category, 'reward')

    def test_milestone_reached_goes_to_merchant(self):
        grant = MilestoneGrant(10, 'discount', 5, '5% Discount on monthly subscription')

        self.assertTrue(NotificationService.notify_milestone_reached(self.merchant, grant))

        notification = Notification.objects.get()
        self.assertEqual(notification.recipient, self.merchant.user)
        self.assertEqual(notification.title, '🏆 Milestone Reached!')
        self.assertEqual(notification.metadata['reward_type'], 'discount')


class NotificationInboxTestCase(TestCase):
    """Test cases for reading and clearing notifications"""

    def setUp(self):
        self.user = create_customer_user()
        self.other = create_customer_user(email='other@emall.test')
        self.notifications = [
            NotificationService.send(recipient=self.user, title=f'Title {i}', message='Body')
            for i in range(3)
        ]
        self.foreign = NotificationService.send(recipient=self.other, title='Foreign', message='Body')

    def test_unread_count(self):
        self.assertEqual(NotificationService.get_unread_count(self.user), 3)

    def test_mark_as_read(self):
        target = self.notifications[0]
        self.assertTrue(NotificationService.mark_as_read(target.id, self.user))

        target.refresh_from_db()
        self.assertTrue(target.is_read)
        self.assertIsNotNone(target.read_at)
        self.assertEqual(NotificationService.get_unread_count(self.user), 2)

    def test_mark_as_read_is_idempotent(self):
        target = self.notifications[0]
        NotificationService.mark_as_read(target.id, self.user)
        self.assertTrue(NotificationService.mark_as_read(target.id, self.user))

    def test_cannot_touch_other_users_notifications(self):
        self.assertFalse(NotificationService.mark_as_read(self.foreign.id, self.user))
        self.assertFalse(NotificationService.delete(self.foreign.id, self.user))
        self.assertTrue(Notification.objects.filter(id=self.foreign.id, is_read=False).exists())

    def test_unknown_notification(self):
        self.assertFalse(NotificationService.mark_as_read(uuid.uuid4(), self.user))

    def test_mark_all_as_read(self):
        self.assertEqual(NotificationService.mark_all_as_read(self.user), 3)
        self.assertEqual(NotificationService.get_unread_count(self.user), 0)
        self.assertEqual(NotificationService.get_unread_count(self.other), 1)

    def test_recent_is_newest_first_and_clamped(self):
        base = timezone.now()
        for offset, notification in enumerate(self.notifications):
            Notification.objects.filter(pk=notification.pk).update(created_at=base + timedelta(minutes=offset))

        recent = list(NotificationService.get_recent(self.user, limit=2))
        self.assertEqual(len(recent), 2)
        self.assertEqual(recent[0].title, 'Title 2')
        self.assertEqual(len(NotificationService.get_recent(self.user, limit=0)), 1)

    def test_delete(self):
        self.assertTrue(NotificationService.delete(self.notifications[0].id, self.user))
        self.assertEqual(Notification.objects.filter(recipient=self.user).count(), 2)

    def test_delete_all(self):
        self.assertEqual(NotificationService.delete_all(self.user), 3)
        self.assertEqual(Notification.objects.count(), 1)
