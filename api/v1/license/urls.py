"""
URL configuration for license API endpoints.
"""

from django.urls import path

from api.v1.license import views

urlpatterns = [
    path(
        "generate",
        views.GenerateLicenseView.as_view(),
        name="generate-license",
    ),
    path(
        "validate",
        views.ValidateLicenseView.as_view(),
        name="validate-license",
    ),
    path(
        "<uuid:license_id>",
        views.LicenseDetailView.as_view(),
        name="license-detail",
    ),
    path(
        "<uuid:license_id>/revoke",
        views.RevokeLicenseView.as_view(),
        name="revoke-license",
    ),
]
