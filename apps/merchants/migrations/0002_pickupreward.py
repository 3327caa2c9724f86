# Generated migration for the merchant reward ledger

import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('merchants', '0001_initial'),
        ('orders', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='PickupReward',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('milestone_threshold', models.PositiveIntegerField(blank=True, help_text='Milestone threshold this grant belongs to', null=True)),
                ('reward_type', models.CharField(choices=[('pickup_points', 'Pickup Points'), ('discount', 'Subscription Discount'), ('boost', 'Visibility Boost'), ('badge', 'Featured Badge'), ('vip', 'VIP Status')], max_length=20)),
                ('points_earned', models.PositiveIntegerField(default=0)),
                ('reward_value', models.PositiveIntegerField(default=0)),
                ('description', models.CharField(blank=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('merchant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='pickup_rewards', to='merchants.merchant')),
                ('order', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='pickup_rewards', to='orders.order')),
            ],
            options={
                'verbose_name': 'Pickup Reward',
                'verbose_name_plural': 'Pickup Rewards',
                'db_table': 'pickup_rewards',
                'ordering': ('-created_at',),
                'indexes': [models.Index(fields=['merchant', '-created_at'], name='pickup_rewards_merchant_idx')],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('milestone_threshold__isnull', False)), fields=('merchant', 'milestone_threshold'), name='uniq_milestone_grant_per_merchant'),
                    models.UniqueConstraint(condition=models.Q(('order__isnull', False), ('reward_type', 'pickup_points')), fields=('merchant', 'order'), name='uniq_pickup_points_per_order'),
                ],
            },
        ),
    ]
