"""
Reward milestone engine for EMall
Pure functions over a pickup count and an ordered milestone ladder.
No database access: works with RewardMilestone rows or plain MilestoneSpec values.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

# ===============================================================================
# MILESTONE TYPES
# ===============================================================================

class MilestoneLike(Protocol):
    """Anything exposing the milestone fields the engine reads"""
    pickups_required: int
    reward_type: str
    reward_value: int
    description: str


@dataclass(frozen=True)
class MilestoneSpec:
    """In-memory milestone used when no milestone rows are configured"""
    pickups_required: int
    reward_type: str
    reward_value: int
    description: str
    description_ar: str = ''


DEFAULT_REWARD_MILESTONES: tuple[MilestoneSpec, ...] = (
    MilestoneSpec(10, 'discount', 5, '5% Discount on monthly subscription',
                  'خصم 5% على الاشتراك الشهري'),
    MilestoneSpec(25, 'boost', 10, 'Visibility boost - 10 positions higher',
                  'تحسين ترتيب الظهور بـ 10 مراكز'),
    MilestoneSpec(50, 'discount', 10, '10% Discount on monthly subscription',
                  'خصم 10% على الاشتراك الشهري'),
    MilestoneSpec(100, 'badge', 15, 'Featured Badge + 15% Discount',
                  'شارة "تاجر مميز" + خصم 15%'),
    MilestoneSpec(200, 'discount', 20, '20% Discount on monthly subscription',
                  'خصم 20% على الاشتراك الشهري'),
    MilestoneSpec(500, 'vip', 30, '30% Discount + VIP Status',
                  'خصم 30% + حالة VIP'),
)


@dataclass(frozen=True)
class MilestoneProgress:
    """Where a merchant stands on the milestone ladder"""
    current: MilestoneLike | None
    next: MilestoneLike | None
    progress_percent: float


# ===============================================================================
# ENGINE
# ===============================================================================

def sort_milestones(milestones: Iterable[MilestoneLike]) -> list[MilestoneLike]:
    """Order milestones by threshold ascending"""
    return sorted(milestones, key=lambda m: m.pickups_required)


def compute_progress(count: int, milestones: Iterable[MilestoneLike]) -> MilestoneProgress:
    """
    Compute current milestone, next milestone and linear progress between them.

    current: highest threshold <= count (None below the first threshold)
    next: lowest threshold > count (None once every threshold is cleared)
    progress: (count - start) / (next - start) * 100 clamped to [0, 100],
    where start is the current threshold or 0. Always 100 with no next milestone.
    """
    ordered = sort_milestones(milestones)

    current: MilestoneLike | None = None
    upcoming: MilestoneLike | None = None
    for milestone in ordered:
        if milestone.pickups_required <= count:
            current = milestone
        elif upcoming is None:
            upcoming = milestone

    if upcoming is None:
        return MilestoneProgress(current=current, next=None, progress_percent=100.0)

    start = current.pickups_required if current else 0
    span = upcoming.pickups_required - start
    if span <= 0:
        # Zero-threshold ladders only
        return MilestoneProgress(current=current, next=upcoming, progress_percent=0.0)

    progress = (count - start) / span * 100
    return MilestoneProgress(
        current=current,
        next=upcoming,
        progress_percent=min(max(progress, 0.0), 100.0),
    )


def milestone_status(milestone: MilestoneLike, count: int, next_milestone: MilestoneLike | None) -> str:
    """Display status of one milestone: achieved, current or locked"""
    if count >= milestone.pickups_required:
        return 'achieved'
    if next_milestone is not None and next_milestone.pickups_required == milestone.pickups_required:
        return 'current'
    return 'locked'


def reached_milestones(count: int, milestones: Iterable[MilestoneLike]) -> list[MilestoneLike]:
    """All milestones whose threshold has been reached, ascending"""
    return [m for m in sort_milestones(milestones) if m.pickups_required <= count]

