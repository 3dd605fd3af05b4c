"""
URL configuration for tenant API endpoints.
"""

from django.urls import path

from api.v1.tenant import views

urlpatterns = [
    path(
        "tenants",
        views.RegisterTenantView.as_view(),
        name="register-tenant",
    ),
    path(
        "tenants/login",
        views.TenantLoginView.as_view(),
        name="tenant-login",
    ),
    path(
        "tenants/<str:tenant_name>/users",
        views.ProfessionalUsersView.as_view(),
        name="professional-users",
    ),
    path(
        "tenants/<str:tenant_name>/user-limit",
        views.UserLimitView.as_view(),
        name="user-limit",
    ),
    path(
        "tenants/<str:tenant_name>/users/<str:username>/password",
        views.ProfessionalPasswordView.as_view(),
        name="professional-password",
    ),
]

professional_urlpatterns = [
    path(
        "login",
        views.ProfessionalLoginView.as_view(),
        name="professional-login",
    ),
]
