"""
Django admin configuration for Users app
"""

from typing import ClassVar

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Email based user admin with marketplace roles"""

    list_display: ClassVar[list[str]] = (
        'email', 'get_full_name', 'role', 'is_active', 'is_staff', 'last_login', 'date_joined'
    )
    list_filter: ClassVar[list[str]] = ('role', 'is_active', 'is_staff', 'date_joined')
    search_fields: ClassVar[list[str]] = ('email', 'full_name', 'first_name', 'last_name', 'phone')
    ordering: ClassVar[tuple[str, ...]] = ('email',)

    fieldsets: ClassVar[tuple] = (
        (None, {'fields': ('email', 'password')}),
        (_('Profile'), {'fields': ('full_name', 'first_name', 'last_name', 'phone', 'role')}),
        (_('Permissions'), {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',)
        }),
        (_('Timestamps'), {'fields': ('last_login', 'date_joined')}),
    )
    add_fieldsets: ClassVar[tuple] = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'role', 'password1', 'password2'),
        }),
    )
