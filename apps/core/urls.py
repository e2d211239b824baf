"""
URL configuration for core app.
"""

from django.urls import path

from . import health, views

app_name = "core"

urlpatterns = [
    path("", views.dashboard, name="dashboard"),
    path("api/dashboard/", views.dashboard_api, name="dashboard_api"),
    path("api/settings/", views.settings_api, name="settings_api"),
    path("health/", health.health_check, name="health_check"),
]
