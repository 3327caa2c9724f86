# ===============================================================================
# EMALL API MAIN URLS 🚀
# ===============================================================================
#
# Central API routing for all EMall domains.
#
# URL Structure:
#   /api/orders/         → Order creation, status and pickup QR codes
#   /api/pickup/         → Merchant pickup verification and redemption
#   /api/merchants/      → Merchant rewards dashboard
#   /api/notifications/  → In-app notification bell
#

from django.urls import include, path

app_name = 'api'

# ===============================================================================
# API ROUTING 📍
# ===============================================================================

urlpatterns = [
    path('orders/', include('apps.api.orders.urls')),
    path('pickup/', include('apps.api.pickup.urls')),
    path('merchants/', include('apps.api.merchants.urls')),
    path('notifications/', include('apps.api.notifications.urls')),
]
