"""
Management command to seed the pickup reward milestone ladder.
Creates the default EMall milestones: 10, 25, 50, 100, 200 and 500 pickups.
"""

from typing import Any

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.merchants.models import RewardMilestone
from apps.merchants.rewards import DEFAULT_REWARD_MILESTONES


class Command(BaseCommand):
    help = "Set up the default pickup reward milestones"

    def add_arguments(self, parser: Any) -> None:
        parser.add_argument(
            "--overwrite",
            action="store_true",
            help="Overwrite existing milestones with the default values",
        )

    @transaction.atomic
    def handle(self, *args: Any, **options: Any) -> None:
        """Create or refresh the default milestone rows"""

        self.stdout.write(self.style.SUCCESS("🏆 Setting up pickup reward milestones..."))

        overwrite = options.get("overwrite", False)
        created_count = 0
        updated_count = 0

        for spec in DEFAULT_REWARD_MILESTONES:
            defaults = {
                "reward_type": spec.reward_type,
                "reward_value": spec.reward_value,
                "description": spec.description,
                "description_ar": spec.description_ar,
                "is_active": True,
            }

            milestone = RewardMilestone.objects.filter(pickups_required=spec.pickups_required).first()
            if milestone is None:
                RewardMilestone.objects.create(pickups_required=spec.pickups_required, **defaults)
                created_count += 1
                self.stdout.write(f"  ✅ Created milestone: {spec.pickups_required} pickups")
            elif overwrite:
                for attr, value in defaults.items():
                    setattr(milestone, attr, value)
                milestone.save()
                updated_count += 1
                self.stdout.write(f"  🔄 Updated milestone: {spec.pickups_required} pickups")
            else:
                self.stdout.write(f"  ⏭️  Skipped existing milestone: {spec.pickups_required} pickups")

        self.stdout.write(
            self.style.SUCCESS(
                f"🎉 Reward milestones ready: {created_count} created, {updated_count} updated"
            )
        )
