# Generated migration for merchant profiles and the reward milestone ladder

import uuid

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Merchant',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('business_name', models.CharField(max_length=200)),
                ('business_name_ar', models.CharField(blank=True, max_length=200)),
                ('phone', models.CharField(blank=True, max_length=20)),
                ('is_active', models.BooleanField(default=True)),
                ('pickup_orders_count', models.PositiveIntegerField(default=0, help_text='Confirmed pickup orders, lifetime')),
                ('pickup_rewards_points', models.PositiveIntegerField(default=0, help_text='Reward points accrued from pickups, lifetime')),
                ('discount_percentage', models.PositiveSmallIntegerField(default=0, help_text='Current subscription discount earned through milestones', validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)])),
                ('is_featured', models.BooleanField(default=False, help_text='Featured merchant badge')),
                ('is_vip', models.BooleanField(default=False, help_text='VIP merchant status')),
                ('visibility_boost', models.PositiveIntegerField(default=0, help_text='Listing positions gained through boost rewards')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(help_text='Account that operates this store', on_delete=django.db.models.deletion.PROTECT, related_name='merchant_profile', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Merchant',
                'verbose_name_plural': 'Merchants',
                'db_table': 'merchants',
                'ordering': ('business_name',),
                'indexes': [
                    models.Index(fields=['is_active', 'business_name'], name='merchants_active_name_idx'),
                    models.Index(fields=['-pickup_orders_count'], name='merchants_pickups_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('discount_percentage__lte', 100)), name='merchant_discount_percentage_lte_100'),
                ],
            },
        ),
        migrations.CreateModel(
            name='RewardMilestone',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('pickups_required', models.PositiveIntegerField(help_text='Confirmed pickups needed to unlock this reward', unique=True, validators=[django.core.validators.MinValueValidator(1)])),
                ('reward_type', models.CharField(choices=[('discount', 'Subscription Discount'), ('boost', 'Visibility Boost'), ('badge', 'Featured Badge'), ('vip', 'VIP Status')], max_length=20)),
                ('reward_value', models.PositiveIntegerField(default=0, help_text='Discount percentage or boost positions, depending on reward type')),
                ('description', models.CharField(max_length=255)),
                ('description_ar', models.CharField(blank=True, max_length=255)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Reward Milestone',
                'verbose_name_plural': 'Reward Milestones',
                'db_table': 'reward_milestones',
                'ordering': ('pickups_required',),
            },
        ),
    ]
