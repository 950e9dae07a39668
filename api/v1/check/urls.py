"""
URL configuration for the license check endpoint.
"""

from django.urls import path

from api.v1.check import views

urlpatterns = [
    path("", views.CheckLicenseView.as_view(), name="check-license"),
]
