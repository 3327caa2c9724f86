"""
Django admin configuration for merchants app.
Reward counters are read-only here: they only move through confirmed pickups.
"""

from typing import ClassVar

from django.contrib import admin

from .models import Merchant, PickupReward, RewardMilestone


@admin.register(Merchant)
class MerchantAdmin(admin.ModelAdmin):
    """Admin interface for merchants."""

    list_display: ClassVar[list[str]] = (
        'business_name', 'user', 'is_active', 'pickup_orders_count',
        'pickup_rewards_points', 'discount_percentage', 'is_featured', 'is_vip'
    )
    list_filter: ClassVar[list[str]] = ('is_active', 'is_featured', 'is_vip', 'created_at')
    search_fields: ClassVar[list[str]] = ('business_name', 'business_name_ar', 'user__email', 'phone')
    readonly_fields: ClassVar[list[str]] = (
        'pickup_orders_count', 'pickup_rewards_points', 'discount_percentage',
        'is_featured', 'is_vip', 'visibility_boost', 'created_at', 'updated_at'
    )

    fieldsets: ClassVar[tuple] = (
        ('Store', {
            'fields': ('user', 'business_name', 'business_name_ar', 'phone', 'is_active')
        }),
        ('Pickup Rewards', {
            'fields': (
                'pickup_orders_count', 'pickup_rewards_points', 'discount_percentage',
                'is_featured', 'is_vip', 'visibility_boost'
            )
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        })
    )


@admin.register(RewardMilestone)
class RewardMilestoneAdmin(admin.ModelAdmin):
    """Admin interface for the milestone ladder."""

    list_display: ClassVar[list[str]] = (
        'pickups_required', 'reward_type', 'reward_value', 'description', 'is_active'
    )
    list_filter: ClassVar[list[str]] = ('reward_type', 'is_active')
    ordering: ClassVar[tuple[str, ...]] = ('pickups_required',)


@admin.register(PickupReward)
class PickupRewardAdmin(admin.ModelAdmin):
    """Read-only reward ledger."""

    list_display: ClassVar[list[str]] = (
        'merchant', 'reward_type', 'points_earned', 'reward_value', 'milestone_threshold', 'created_at'
    )
    list_filter: ClassVar[list[str]] = ('reward_type', 'created_at')
    search_fields: ClassVar[list[str]] = ('merchant__business_name', 'order__order_number', 'description')
    readonly_fields: ClassVar[list[str]] = (
        'merchant', 'order', 'milestone_threshold', 'reward_type',
        'points_earned', 'reward_value', 'description', 'created_at'
    )

    def has_add_permission(self, request):  # type: ignore[no-untyped-def]
        return False
