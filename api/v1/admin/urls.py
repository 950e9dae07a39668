"""
URL configuration for administrative API endpoints.
"""

from django.urls import path

from api.v1.admin import views

urlpatterns = [
    path(
        "keys",
        views.LicenseKeysView.as_view(),
        name="license-keys",
    ),
    path(
        "keys/purge",
        views.LicensePurgeView.as_view(),
        name="purge-license",
    ),
    path(
        "logs/license-checks",
        views.CheckLogsView.as_view(),
        name="list-check-logs",
    ),
    path(
        "logs/admin-actions",
        views.AdminLogsView.as_view(),
        name="list-admin-logs",
    ),
    path(
        "stats",
        views.DashboardStatsView.as_view(),
        name="dashboard-stats",
    ),
]
