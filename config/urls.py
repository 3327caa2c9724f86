"""
URL configuration for EMall
Pickup fulfilment API plus the Django admin.
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

# ===============================================================================
# MAIN URL PATTERNS
# ===============================================================================

urlpatterns = [
    path("admin/", admin.site.urls),
    # Django i18n for language switching
    path("i18n/", include("django.conf.urls.i18n")),
    # Customer and merchant API
    path("api/", include("apps.api.urls", namespace="api")),
]

# ===============================================================================
# DEVELOPMENT URLS (Static files)
# ===============================================================================

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
