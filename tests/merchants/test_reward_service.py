"""
Test suite for merchant reward services in EMall
Tests point accrual, milestone grants, grant idempotency and the rewards dashboard.
"""

from django.test import TestCase, override_settings

from apps.merchants.models import Merchant, PickupReward, RewardMilestone
from apps.merchants.rewards import MilestoneSpec
from apps.merchants.services import RewardService
from tests.factories.emall import (
    PickupOrderRequest,
    create_customer_user,
    create_merchant,
    create_milestone_ladder,
    create_pickup_order,
)


class RewardAccrualTestCase(TestCase):
    """Test cases for accruing points from confirmed pickups"""

    def setUp(self):
        self.merchant = create_merchant()
        self.customer = create_customer_user()
        self.service = RewardService()

    def test_single_pickup(self):
        order = create_pickup_order(PickupOrderRequest(customer=self.customer, merchant=self.merchant))

        outcome = self.service.record_pickup(self.merchant, order)

        self.assertEqual(outcome.points_earned, 10)
        self.assertEqual(outcome.pickup_orders_count, 1)
        self.assertEqual(outcome.pickup_rewards_points, 10)
        self.assertEqual(outcome.milestones_reached, [])

        entry = PickupReward.objects.get(merchant=self.merchant)
        self.assertEqual(entry.reward_type, 'pickup_points')
        self.assertEqual(entry.order, order)
        self.assertEqual(entry.description, f'Pickup order {order.order_number}')

    def test_counters_only_grow(self):
        counts = []
        for _ in range(5):
            counts.append(self.service.record_pickup(self.merchant).pickup_orders_count)
        self.assertEqual(counts, [1, 2, 3, 4, 5])

    def test_counter_increment_survives_stale_instance(self):
        """Increments happen in the database, not on the Python object"""
        stale = Merchant.objects.get(pk=self.merchant.pk)
        self.service.record_pickup(self.merchant)
        self.service.record_pickup(stale)

        self.merchant.refresh_from_db()
        self.assertEqual(self.merchant.pickup_orders_count, 2)
        self.assertEqual(self.merchant.pickup_rewards_points, 20)

    @override_settings(PICKUP_REWARD_POINTS_PER_ORDER=25)
    def test_points_per_order_from_settings(self):
        self.assertEqual(RewardService().record_pickup(self.merchant).points_earned, 25)

    def test_explicit_points_per_order(self):
        self.assertEqual(RewardService(points_per_order=3).record_pickup(self.merchant).pickup_rewards_points, 3)


class MilestoneGrantTestCase(TestCase):
    """Test cases for milestone grants"""

    def setUp(self):
        self.merchant = create_merchant()
        self.service = RewardService()

    def set_count(self, count):
        Merchant.objects.filter(pk=self.merchant.pk).update(pickup_orders_count=count)

    def test_default_ladder_used_without_configuration(self):
        self.assertFalse(RewardMilestone.objects.exists())
        self.assertEqual([m.pickups_required for m in RewardService.get_milestones()], [10, 25, 50, 100, 200, 500])

    def test_configured_ladder_replaces_default(self):
        create_milestone_ladder([3, 6])
        RewardMilestone.objects.create(pickups_required=9, reward_type='boost', reward_value=1,
                                       description='inactive', is_active=False)
        self.assertEqual([m.pickups_required for m in RewardService.get_milestones()], [3, 6])

    def test_tenth_pickup_grants_discount(self):
        self.set_count(9)

        outcome = self.service.record_pickup(self.merchant)

        self.assertEqual([g.pickups_required for g in outcome.milestones_reached], [10])
        self.assertEqual(outcome.discount_percentage, 5)
        grant = PickupReward.objects.get(merchant=self.merchant, milestone_threshold=10)
        self.assertEqual(grant.reward_type, 'discount')
        self.assertEqual(grant.reward_value, 5)

    def test_milestone_granted_once(self):
        self.set_count(9)
        self.service.record_pickup(self.merchant)
        later = self.service.record_pickup(self.merchant)

        self.assertEqual(later.milestones_reached, [])
        self.assertEqual(PickupReward.objects.filter(milestone_threshold=10).count(), 1)

    def test_counter_jump_grants_every_missed_milestone(self):
        self.set_count(59)

        outcome = self.service.record_pickup(self.merchant)

        self.assertEqual([g.pickups_required for g in outcome.milestones_reached], [10, 25, 50])
        self.merchant.refresh_from_db()
        self.assertEqual(self.merchant.discount_percentage, 10)
        self.assertEqual(self.merchant.visibility_boost, 10)

    def test_concurrent_grant_is_skipped(self):
        """A ledger row written by another pickup wins over this one"""
        self.set_count(9)
        PickupReward.objects.create(
            merchant=self.merchant, milestone_threshold=10, reward_type='discount', reward_value=5
        )

        outcome = self.service.record_pickup(self.merchant)

        self.assertEqual(outcome.milestones_reached, [])
        self.assertEqual(PickupReward.objects.filter(milestone_threshold=10).count(), 1)

    def test_discount_never_lowered(self):
        Merchant.objects.filter(pk=self.merchant.pk).update(discount_percentage=20)
        RewardService.apply_grant(self.merchant, MilestoneSpec(10, 'discount', 5, 'small'))

        self.merchant.refresh_from_db()
        self.assertEqual(self.merchant.discount_percentage, 20)

    def test_badge_and_vip_flags(self):
        RewardService.apply_grant(self.merchant, MilestoneSpec(100, 'badge', 15, 'badge'))
        self.merchant.refresh_from_db()
        self.assertTrue(self.merchant.is_featured)
        self.assertEqual(self.merchant.discount_percentage, 15)

        RewardService.apply_grant(self.merchant, MilestoneSpec(500, 'vip', 30, 'vip'))
        self.merchant.refresh_from_db()
        self.assertTrue(self.merchant.is_vip)
        self.assertEqual(self.merchant.discount_percentage, 30)

    def test_boost_accumulates(self):
        RewardService.apply_grant(self.merchant, MilestoneSpec(25, 'boost', 10, 'boost'))
        RewardService.apply_grant(self.merchant, MilestoneSpec(75, 'boost', 5, 'boost'))
        self.merchant.refresh_from_db()
        self.assertEqual(self.merchant.visibility_boost, 15)
        self.assertEqual(self.merchant.discount_percentage, 0)

    def test_outcome_serialization(self):
        self.set_count(9)
        data = self.service.record_pickup(self.merchant).as_dict()

        self.assertEqual(data['pickup_orders_count'], 10)
        self.assertEqual(data['milestones_reached'][0]['pickups_required'], 10)
        self.assertEqual(data['milestones_reached'][0]['reward_type'], 'discount')


class RewardSummaryTestCase(TestCase):
    """Test cases for the rewards dashboard"""

    def setUp(self):
        self.merchant = create_merchant()
        self.customer = create_customer_user()
        create_milestone_ladder([10, 25, 50])

    def test_summary_at_fifteen_pickups(self):
        Merchant.objects.filter(pk=self.merchant.pk).update(pickup_orders_count=15, pickup_rewards_points=150)

        summary = RewardService.get_reward_summary(self.merchant)

        self.assertEqual(summary['pickup_orders_count'], 15)
        self.assertEqual(summary['pickup_rewards_points'], 150)
        self.assertEqual(summary['current_milestone']['pickups_required'], 10)
        self.assertEqual(summary['next_milestone']['pickups_required'], 25)
        self.assertEqual(summary['progress_percent'], 33.33)
        self.assertEqual(summary['pickups_to_next'], 10)
        self.assertEqual([m['status'] for m in summary['milestones']], ['achieved', 'current', 'locked'])

    def test_summary_for_new_merchant(self):
        summary = RewardService.get_reward_summary(self.merchant)

        self.assertIsNone(summary['current_milestone'])
        self.assertEqual(summary['next_milestone']['pickups_required'], 10)
        self.assertEqual(summary['progress_percent'], 0.0)
        self.assertEqual(summary['pickups_to_next'], 10)
        self.assertEqual(summary['history'], [])

    def test_summary_after_top_milestone(self):
        Merchant.objects.filter(pk=self.merchant.pk).update(pickup_orders_count=50)

        summary = RewardService.get_reward_summary(self.merchant)

        self.assertIsNone(summary['next_milestone'])
        self.assertEqual(summary['progress_percent'], 100.0)
        self.assertEqual(summary['pickups_to_next'], 0)

    def test_history_lists_recent_entries(self):
        service = RewardService()
        order = create_pickup_order(PickupOrderRequest(
            customer=self.customer, merchant=self.merchant,
            pickup_code_used=True, status='completed',
        ))
        service.record_pickup(self.merchant, order)
        for _ in range(11):
            service.record_pickup(self.merchant)

        summary = RewardService.get_reward_summary(self.merchant)

        self.assertEqual(len(summary['history']), 10)
        self.assertEqual(summary['completed_pickups'], 1)
        self.assertEqual(summary['pickup_orders_count'], 12)
