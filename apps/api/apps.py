# ===============================================================================
# EMALL API APP CONFIGURATION 🛠️
# ===============================================================================

from django.apps import AppConfig


class ApiConfig(AppConfig):
    """
    Configuration for EMall's centralized API app.

    Provides REST endpoints for orders, store pickup verification,
    merchant rewards and in-app notifications.
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.api"
    label = "emall_api"
    verbose_name = "EMall API"
