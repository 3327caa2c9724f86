"""
Django app configuration for Merchants app
"""

from django.apps import AppConfig


class MerchantsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.merchants'
    verbose_name = 'Merchants'
