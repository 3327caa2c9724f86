"""
User models for EMall
Email based accounts shared by customers, merchants and marketplace staff.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.core.exceptions import ObjectDoesNotExist
from django.db import models
from django.utils.translation import gettext_lazy as _

if TYPE_CHECKING:
    from apps.merchants.models import Merchant


class UserManager(BaseUserManager):
    """Custom user manager for email-based authentication"""

    def create_user(self, email: str, password: str | None = None, **extra_fields: Any) -> User:
        """Create and return a regular user with email and password"""
        if not email:
            raise ValueError('The Email field must be set')
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email: str, password: str | None = None, **extra_fields: Any) -> User:
        """Create and return a superuser with email and password"""
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', 'admin')

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(email, password, **extra_fields)


class User(AbstractUser):
    """
    Marketplace account.
    A merchant user owns exactly one Merchant profile; customers place orders.
    """

    ROLE_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        ('customer', _('Customer')),
        ('merchant', _('Merchant')),
        ('admin', _('Administrator')),
    )

    username = None  # Remove username field, using email instead
    email = models.EmailField(_('email address'), unique=True)
    full_name = models.CharField(max_length=255, blank=True)
    phone = models.CharField(
        max_length=20,
        blank=True,
        help_text=_('International phone format: +20 100 123 4567')
    )
    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default='customer',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS: ClassVar[list[str]] = []

    class Meta:
        db_table = 'users'
        verbose_name = _('User')
        verbose_name_plural = _('Users')
        indexes: ClassVar[tuple[models.Index, ...]] = (
            models.Index(fields=['role'], name='users_role_idx'),
        )

    def __str__(self) -> str:
        return f"{self.get_full_name()} ({self.email})"

    def get_full_name(self) -> str:
        """Get user's full name or email if name not available"""
        if self.full_name.strip():
            return self.full_name
        full_name = super().get_full_name()
        return full_name if full_name.strip() else self.email

    @property
    def is_merchant(self) -> bool:
        return self.role == 'merchant'

    @property
    def merchant(self) -> Merchant | None:
        """Merchant profile owned by this user, if any"""
        try:
            return self.merchant_profile
        except ObjectDoesNotExist:
            return None
