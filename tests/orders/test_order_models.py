"""
Test suite for order models in EMall
Pickup state and countdown as the wall clock moves, plus order numbering.
"""

from datetime import timedelta
from unittest.mock import patch

from django.test import TestCase
from django.utils import timezone
from freezegun import freeze_time

from apps.orders.models import Order, OrderItem
from apps.orders.pickup import PickupState
from tests.factories.emall import (
    PickupOrderRequest,
    create_customer_user,
    create_merchant,
    create_pickup_order,
)


class OrderPickupStateTestCase(TestCase):
    """Test cases for pickup state derived from the stored code"""

    def setUp(self):
        self.customer = create_customer_user()
        self.merchant = create_merchant()
        self.issued_at = timezone.now().replace(microsecond=0)
        self.order = create_pickup_order(PickupOrderRequest(
            customer=self.customer, merchant=self.merchant, issued_at=self.issued_at
        ))

    def test_state_over_time(self):
        test_cases = [
            (timedelta(0), PickupState.ISSUED, '10:00', 600),
            (timedelta(minutes=9, seconds=59), PickupState.ISSUED, '00:01', 1),
            (timedelta(minutes=10), PickupState.ISSUED, '00:00', 0),
            (timedelta(minutes=10, seconds=1), PickupState.EXPIRED, 'Expired', 0),
        ]
        for offset, state, countdown, seconds in test_cases:
            with self.subTest(offset=offset), freeze_time(self.issued_at + offset):
                self.assertEqual(self.order.pickup_state(), state)
                self.assertEqual(self.order.pickup_countdown(), countdown)
                self.assertEqual(self.order.pickup_expires_in(), seconds)

    def test_redeemed_wins_over_expiry(self):
        self.order.pickup_code_used = True
        self.order.status = 'completed'
        with freeze_time(self.issued_at + timedelta(hours=2)):
            self.assertEqual(self.order.pickup_state(), PickupState.REDEEMED)

    def test_closed_order_is_invalid(self):
        self.order.status = 'cancelled'
        self.assertEqual(self.order.pickup_state(self.issued_at), PickupState.INVALID)

    def test_code_stored_uppercase(self):
        self.order.pickup_code = 'abcdef'
        self.order.save()
        self.order.refresh_from_db()
        self.assertEqual(self.order.pickup_code, 'ABCDEF')


class OrderBasicsTestCase(TestCase):
    """Test cases for order numbering and totals"""

    def setUp(self):
        self.customer = create_customer_user()
        self.merchant = create_merchant()

    @freeze_time('2025-03-01 09:30:00')
    def test_order_number_uses_date_and_sequence(self):
        first = Order.objects.create(customer=self.customer, merchant=self.merchant)
        second = Order.objects.create(customer=self.customer, merchant=self.merchant)

        self.assertEqual(first.order_number, 'EM-20250301-000001')
        self.assertEqual(second.order_number, 'EM-20250301-000002')

    @freeze_time('2025-03-01 09:30:00')
    def test_order_number_follows_highest_sequence(self):
        first = Order.objects.create(customer=self.customer, merchant=self.merchant)
        Order.objects.create(customer=self.customer, merchant=self.merchant)
        first.delete()

        third = Order.objects.create(customer=self.customer, merchant=self.merchant)

        self.assertEqual(third.order_number, 'EM-20250301-000003')

    @freeze_time('2025-03-01 09:30:00')
    def test_order_number_collision_retried(self):
        Order.objects.create(customer=self.customer, merchant=self.merchant)
        numbers = iter(['EM-20250301-000001', 'EM-20250301-000002'])

        def stale_generate(order):
            order.order_number = next(numbers)

        with patch.object(Order, 'generate_order_number', autospec=True, side_effect=stale_generate):
            second = Order.objects.create(customer=self.customer, merchant=self.merchant)

        self.assertEqual(second.order_number, 'EM-20250301-000002')
        self.assertEqual(Order.objects.count(), 2)

    def test_line_totals_and_order_total(self):
        order = Order.objects.create(customer=self.customer, merchant=self.merchant)
        item = OrderItem.objects.create(order=order, product_name='Scarf', quantity=3, unit_price_cents=4500)
        OrderItem.objects.create(order=order, product_name='Gloves', quantity=1, unit_price_cents=1000)

        order.calculate_totals()

        self.assertEqual(item.line_total_cents, 13500)
        self.assertEqual(order.total_cents, 14500)

    def test_short_id(self):
        order = Order.objects.create(customer=self.customer, merchant=self.merchant)
        self.assertEqual(order.short_id, str(order.id)[:8].upper())
        self.assertEqual(len(order.short_id), 8)
