"""
Merchant API URLs for EMall
"""

from django.urls import path

from . import views

app_name = 'merchants'

urlpatterns = [
    path('rewards/', views.reward_summary, name='rewards'),
]
