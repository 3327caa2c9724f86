"""
Pickup API URLs for EMall
"""

from django.urls import path

from . import views

app_name = 'pickup'

urlpatterns = [
    path('verify/', views.verify_pickup, name='verify'),
    path('confirm/', views.confirm_pickup, name='confirm'),
    path('stats/', views.pickup_stats, name='stats'),
]
