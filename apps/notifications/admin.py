"""
Django admin configuration for notifications app.
"""

from typing import ClassVar

from django.contrib import admin

from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """Admin interface for in-app notifications."""

    list_display: ClassVar[list[str]] = ('title', 'recipient', 'category', 'is_read', 'created_at')
    list_filter: ClassVar[list[str]] = ('category', 'is_read', 'created_at')
    search_fields: ClassVar[list[str]] = ('title', 'message', 'recipient__email')
    readonly_fields: ClassVar[list[str]] = ('created_at', 'read_at')
    date_hierarchy = 'created_at'
