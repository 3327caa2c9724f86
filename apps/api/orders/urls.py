"""
Order API URLs for EMall
"""

from django.urls import path

from . import views

app_name = 'orders'

urlpatterns = [
    path('', views.create_order, name='create_order'),
    path('<uuid:order_id>/', views.order_detail, name='order_detail'),
    path('<uuid:order_id>/status/', views.update_order_status, name='update_status'),
    path('<uuid:order_id>/pickup-qr/', views.pickup_qr, name='pickup_qr'),
    path('<uuid:order_id>/pickup-code/regenerate/', views.regenerate_pickup_code, name='regenerate_pickup_code'),
]
