"""
URL configuration for core project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView

urlpatterns = [
    path('', RedirectView.as_view(url='/admin/', permanent=False)),
    path('admin/', admin.site.urls),
    path('api/health/', include('core.health_urls')),  # Liveness and readiness
    path('api/auth/', include('accounts.urls')),  # Login, tokens, profile, farm users
    path('api/settings/', include('accounts.settings_urls')),  # Per-user language
    path('api/farm/', include('farms.urls')),  # Farm profile
    path('api/farm/', include('dashboards.urls')),  # KPIs, trends, season report
    path('api/seasons/', include('ponds.season_urls')),
    path('api/ponds/', include('ponds.urls')),
    path('api/nursery-batches/', include('ponds.nursery_urls')),
    path('api/feed-inputs/', include('feeding.urls')),
    path('api/growth-samplings/', include('growth.urls')),
    path('api/water-quality/', include('water_quality.urls')),
    path('api/inventory/', include('inventory.urls')),
    path('api/events/', include('events.urls')),
    path('api/employees/', include('employees.urls')),
    path('api/expenses/', include('expenses.urls')),
    path('api/historical-insights/', include('insights.urls')),  # Pond comparisons
]
