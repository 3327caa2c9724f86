"""
Merchant models for EMall
Merchant profiles, pickup reward counters, milestone ladder and reward ledger.
"""

import uuid
from typing import ClassVar

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from apps.common.constants import MAX_DISCOUNT_PERCENTAGE

REWARD_TYPE_CHOICES: tuple[tuple[str, str], ...] = (
    ('discount', _('Subscription Discount')),
    ('boost', _('Visibility Boost')),
    ('badge', _('Featured Badge')),
    ('vip', _('VIP Status')),
)

# ===============================================================================
# MERCHANT PROFILE
# ===============================================================================

class Merchant(models.Model):
    """
    Local store selling through the marketplace.
    Reward counters only ever grow, and only through confirmed pickups.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='merchant_profile',
        help_text=_("Account that operates this store")
    )

    business_name = models.CharField(max_length=200)
    business_name_ar = models.CharField(max_length=200, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    is_active = models.BooleanField(default=True)

    # Pickup reward state
    pickup_orders_count = models.PositiveIntegerField(
        default=0,
        help_text=_("Confirmed pickup orders, lifetime")
    )
    pickup_rewards_points = models.PositiveIntegerField(
        default=0,
        help_text=_("Reward points accrued from pickups, lifetime")
    )
    discount_percentage = models.PositiveSmallIntegerField(
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(MAX_DISCOUNT_PERCENTAGE)],
        help_text=_("Current subscription discount earned through milestones")
    )

    # Milestone perks
    is_featured = models.BooleanField(default=False, help_text=_("Featured merchant badge"))
    is_vip = models.BooleanField(default=False, help_text=_("VIP merchant status"))
    visibility_boost = models.PositiveIntegerField(
        default=0,
        help_text=_("Listing positions gained through boost rewards")
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'merchants'
        verbose_name = _('Merchant')
        verbose_name_plural = _('Merchants')
        ordering: ClassVar[tuple[str, ...]] = ('business_name',)
        constraints: ClassVar[list[models.BaseConstraint]] = [
            models.CheckConstraint(
                condition=Q(discount_percentage__lte=MAX_DISCOUNT_PERCENTAGE),
                name='merchant_discount_percentage_lte_100',
            ),
        ]
        indexes: ClassVar[tuple[models.Index, ...]] = (
            models.Index(fields=['is_active', 'business_name'], name='merchants_active_name_idx'),
            models.Index(fields=['-pickup_orders_count'], name='merchants_pickups_idx'),
        )

    def __str__(self) -> str:
        return self.business_name


# ===============================================================================
# REWARD MILESTONES
# ===============================================================================

class RewardMilestone(models.Model):
    """Pickup-count threshold that unlocks a merchant reward"""

    pickups_required = models.PositiveIntegerField(
        unique=True,
        validators=[MinValueValidator(1)],
        help_text=_("Confirmed pickups needed to unlock this reward")
    )
    reward_type = models.CharField(max_length=20, choices=REWARD_TYPE_CHOICES)
    reward_value = models.PositiveIntegerField(
        default=0,
        help_text=_("Discount percentage or boost positions, depending on reward type")
    )
    description = models.CharField(max_length=255)
    description_ar = models.CharField(max_length=255, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'reward_milestones'
        verbose_name = _('Reward Milestone')
        verbose_name_plural = _('Reward Milestones')
        ordering: ClassVar[tuple[str, ...]] = ('pickups_required',)

    def __str__(self) -> str:
        return f"{self.pickups_required} pickups: {self.description}"


# ===============================================================================
# REWARD LEDGER
# ===============================================================================

class PickupReward(models.Model):
    """
    Reward history entry for a merchant.
    One row per pickup accrual and one row per milestone grant.
    """

    REWARD_KIND_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        ('pickup_points', _('Pickup Points')),
        *REWARD_TYPE_CHOICES,
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    merchant = models.ForeignKey(
        Merchant,
        on_delete=models.CASCADE,
        related_name='pickup_rewards'
    )
    order = models.ForeignKey(
        'orders.Order',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='pickup_rewards'
    )
    milestone_threshold = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text=_("Milestone threshold this grant belongs to")
    )

    reward_type = models.CharField(max_length=20, choices=REWARD_KIND_CHOICES)
    points_earned = models.PositiveIntegerField(default=0)
    reward_value = models.PositiveIntegerField(default=0)
    description = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'pickup_rewards'
        verbose_name = _('Pickup Reward')
        verbose_name_plural = _('Pickup Rewards')
        ordering: ClassVar[tuple[str, ...]] = ('-created_at',)
        constraints: ClassVar[list[models.BaseConstraint]] = [
            models.UniqueConstraint(
                fields=['merchant', 'milestone_threshold'],
                condition=Q(milestone_threshold__isnull=False),
                name='uniq_milestone_grant_per_merchant',
            ),
            models.UniqueConstraint(
                fields=['merchant', 'order'],
                condition=Q(reward_type='pickup_points', order__isnull=False),
                name='uniq_pickup_points_per_order',
            ),
        ]
        indexes: ClassVar[tuple[models.Index, ...]] = (
            models.Index(fields=['merchant', '-created_at'], name='pickup_rewards_merchant_idx'),
        )

    def __str__(self) -> str:
        return f"{self.merchant}: {self.get_reward_type_display()} ({self.points_earned} pts)"
