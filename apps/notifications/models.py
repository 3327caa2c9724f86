"""
Notifications models for EMall
In-app notifications for customers and merchants.
"""

import uuid
from typing import ClassVar

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

# ===============================================================================
# IN-APP NOTIFICATIONS
# ===============================================================================

class Notification(models.Model):
    """
    In-app notification shown in the user's notification bell.
    Email and SMS delivery are placeholders and only logged.
    """

    CATEGORY_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        ('success', _('Success')),
        ('error', _('Error')),
        ('warning', _('Warning')),
        ('info', _('Information')),
        ('order', _('Order')),
        ('payment', _('Payment')),
        ('pickup', _('Pickup')),
        ('reward', _('Reward')),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notifications'
    )

    title = models.CharField(max_length=255)
    message = models.TextField()
    category = models.CharField(
        max_length=20,
        choices=CATEGORY_CHOICES,
        default='info'
    )
    link = models.CharField(
        max_length=500,
        blank=True,
        help_text=_("Relative URL the notification points to")
    )
    metadata = models.JSONField(default=dict, blank=True)

    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'notifications'
        verbose_name = _('Notification')
        verbose_name_plural = _('Notifications')
        ordering: ClassVar[tuple[str, ...]] = ('-created_at',)
        indexes: ClassVar[tuple[models.Index, ...]] = (
            models.Index(fields=['recipient', 'is_read'], name='notifications_unread_idx'),
            models.Index(fields=['recipient', '-created_at'], name='notifications_recent_idx'),
        )

    def __str__(self) -> str:
        return f"{self.title} → {self.recipient}"
