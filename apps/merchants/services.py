"""
Merchant Reward Services for EMall
Accrues pickup points, grants milestone rewards and builds the rewards dashboard.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypedDict

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import F

from apps.common.constants import (
    MAX_DISCOUNT_PERCENTAGE,
    PICKUP_REWARD_POINTS_PER_ORDER,
    REWARD_HISTORY_LIMIT,
)

from .models import Merchant, PickupReward, RewardMilestone
from .rewards import (
    DEFAULT_REWARD_MILESTONES,
    MilestoneLike,
    compute_progress,
    milestone_status,
    reached_milestones,
)

if TYPE_CHECKING:
    from apps.orders.models import Order

logger = logging.getLogger(__name__)

DISCOUNT_REWARD_TYPES = frozenset({'discount', 'badge', 'vip'})

# ===============================================================================
# RESULT OBJECTS
# ===============================================================================

@dataclass(frozen=True)
class MilestoneGrant:
    """Milestone reward granted to a merchant by a pickup"""
    pickups_required: int
    reward_type: str
    reward_value: int
    description: str


@dataclass
class RewardOutcome:
    """Merchant reward state after one confirmed pickup"""
    points_earned: int
    pickup_orders_count: int
    pickup_rewards_points: int
    discount_percentage: int
    milestones_reached: list[MilestoneGrant] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {
            'points_earned': self.points_earned,
            'pickup_orders_count': self.pickup_orders_count,
            'pickup_rewards_points': self.pickup_rewards_points,
            'discount_percentage': self.discount_percentage,
            'milestones_reached': [
                {
                    'pickups_required': grant.pickups_required,
                    'reward_type': grant.reward_type,
                    'reward_value': grant.reward_value,
                    'description': grant.description,
                }
                for grant in self.milestones_reached
            ],
        }


class MilestoneData(TypedDict):
    pickups_required: int
    reward_type: str
    reward_value: int
    description: str
    description_ar: str
    status: str


class RewardSummary(TypedDict):
    """Merchant rewards dashboard payload"""
    pickup_orders_count: int
    pickup_rewards_points: int
    discount_percentage: int
    is_featured: bool
    is_vip: bool
    visibility_boost: int
    completed_pickups: int
    current_milestone: MilestoneData | None
    next_milestone: MilestoneData | None
    progress_percent: float
    pickups_to_next: int
    milestones: list[MilestoneData]
    history: list[dict[str, Any]]


# ===============================================================================
# REWARD SERVICE
# ===============================================================================

class RewardService:
    """
    Merchant pickup reward accrual.

    Counters are only ever incremented with F() expressions so concurrent
    pickups for the same merchant cannot lose updates. Milestone grants are
    recorded in the ledger with a unique (merchant, threshold) row, so each
    milestone is granted at most once even when two pickups cross it together.
    """

    def __init__(self, points_per_order: int | None = None) -> None:
        if points_per_order is None:
            points_per_order = getattr(settings, 'PICKUP_REWARD_POINTS_PER_ORDER', PICKUP_REWARD_POINTS_PER_ORDER)
        self.points_per_order = points_per_order

    @staticmethod
    def get_milestones() -> list[MilestoneLike]:
        """Active milestone ladder, falling back to the built-in ladder"""
        milestones: list[MilestoneLike] = list(RewardMilestone.objects.filter(is_active=True))
        if not milestones:
            return list(DEFAULT_REWARD_MILESTONES)
        return milestones

    @transaction.atomic
    def record_pickup(self, merchant: Merchant, order: Order | None = None) -> RewardOutcome:
        """Accrue one confirmed pickup and grant any milestone it unlocks"""
        Merchant.objects.filter(pk=merchant.pk).update(
            pickup_orders_count=F('pickup_orders_count') + 1,
            pickup_rewards_points=F('pickup_rewards_points') + self.points_per_order,
        )
        merchant.refresh_from_db(fields=['pickup_orders_count', 'pickup_rewards_points'])

        PickupReward.objects.create(
            merchant=merchant,
            order=order,
            reward_type='pickup_points',
            points_earned=self.points_per_order,
            description=f"Pickup order {order.order_number}" if order else "Pickup order",
        )

        grants = self._grant_reached_milestones(merchant)

        merchant.refresh_from_db(fields=[
            'pickup_orders_count', 'pickup_rewards_points', 'discount_percentage',
            'is_featured', 'is_vip', 'visibility_boost',
        ])

        logger.info(
            f"🏆 [Rewards] Merchant {merchant.pk} earned {self.points_per_order} points "
            f"(pickups={merchant.pickup_orders_count}, milestones={len(grants)})"
        )

        return RewardOutcome(
            points_earned=self.points_per_order,
            pickup_orders_count=merchant.pickup_orders_count,
            pickup_rewards_points=merchant.pickup_rewards_points,
            discount_percentage=merchant.discount_percentage,
            milestones_reached=grants,
        )

    def _grant_reached_milestones(self, merchant: Merchant) -> list[MilestoneGrant]:
        """Grant every reached milestone that has no ledger row yet"""
        already_granted = set(
            PickupReward.objects.filter(
                merchant=merchant, milestone_threshold__isnull=False
            ).values_list('milestone_threshold', flat=True)
        )

        grants: list[MilestoneGrant] = []
        for milestone in reached_milestones(merchant.pickup_orders_count, self.get_milestones()):
            if milestone.pickups_required in already_granted:
                continue

            try:
                with transaction.atomic():
                    PickupReward.objects.create(
                        merchant=merchant,
                        milestone_threshold=milestone.pickups_required,
                        reward_type=milestone.reward_type,
                        reward_value=milestone.reward_value,
                        description=milestone.description,
                    )
            except IntegrityError:
                # Granted by a concurrent pickup
                logger.info(
                    f"🏆 [Rewards] Milestone {milestone.pickups_required} already granted to merchant {merchant.pk}"
                )
                continue

            self.apply_grant(merchant, milestone)
            grants.append(MilestoneGrant(
                pickups_required=milestone.pickups_required,
                reward_type=milestone.reward_type,
                reward_value=milestone.reward_value,
                description=milestone.description,
            ))
            logger.info(
                f"🏆 [Rewards] Merchant {merchant.pk} reached milestone {milestone.pickups_required} "
                f"({milestone.reward_type} {milestone.reward_value})"
            )

        return grants

    @staticmethod
    def apply_grant(merchant: Merchant, milestone: MilestoneLike) -> None:
        """
        Apply a milestone reward to merchant state.

        discount, badge and vip raise discount_percentage to the reward value
        and never lower it. badge also sets is_featured, vip sets is_vip.
        boost adds the reward value to visibility_boost.
        """
        merchants = Merchant.objects.filter(pk=merchant.pk)
        reward_type = milestone.reward_type
        value = milestone.reward_value

        if reward_type in DISCOUNT_REWARD_TYPES:
            target = min(value, MAX_DISCOUNT_PERCENTAGE)
            merchants.filter(discount_percentage__lt=target).update(discount_percentage=target)

        if reward_type == 'badge':
            merchants.update(is_featured=True)
        elif reward_type == 'vip':
            merchants.update(is_vip=True)
        elif reward_type == 'boost':
            merchants.update(visibility_boost=F('visibility_boost') + value)

    # ===============================================================================
    # DASHBOARD
    # ===============================================================================

    @classmethod
    def get_reward_summary(cls, merchant: Merchant) -> RewardSummary:
        """Rewards dashboard: counters, milestone ladder with status and recent history"""
        from apps.orders.models import Order  # noqa: PLC0415 - Circular import prevention

        merchant.refresh_from_db()
        count = merchant.pickup_orders_count
        milestones = cls.get_milestones()
        progress = compute_progress(count, milestones)

        completed_pickups = Order.objects.filter(
            merchant=merchant,
            delivery_method='pickup',
            pickup_code_used=True,
        ).count()

        history = [
            {
                'id': str(entry.id),
                'reward_type': entry.reward_type,
                'points_earned': entry.points_earned,
                'reward_value': entry.reward_value,
                'description': entry.description,
                'order_number': entry.order.order_number if entry.order else None,
                'created_at': entry.created_at.isoformat(),
            }
            for entry in merchant.pickup_rewards.select_related('order')[:REWARD_HISTORY_LIMIT]
        ]

        return {
            'pickup_orders_count': count,
            'pickup_rewards_points': merchant.pickup_rewards_points,
            'discount_percentage': merchant.discount_percentage,
            'is_featured': merchant.is_featured,
            'is_vip': merchant.is_vip,
            'visibility_boost': merchant.visibility_boost,
            'completed_pickups': completed_pickups,
            'current_milestone': cls._milestone_data(progress.current, count, progress.next),
            'next_milestone': cls._milestone_data(progress.next, count, progress.next),
            'progress_percent': round(progress.progress_percent, 2),
            'pickups_to_next': progress.next.pickups_required - count if progress.next else 0,
            'milestones': [cls._milestone_data(m, count, progress.next) for m in milestones],
            'history': history,
        }

    @staticmethod
    def _milestone_data(
        milestone: MilestoneLike | None, count: int, next_milestone: MilestoneLike | None
    ) -> Any:
        if milestone is None:
            return None
        return {
            'pickups_required': milestone.pickups_required,
            'reward_type': milestone.reward_type,
            'reward_value': milestone.reward_value,
            'description': milestone.description,
            'description_ar': getattr(milestone, 'description_ar', ''),
            'status': milestone_status(milestone, count, next_milestone),
        }
