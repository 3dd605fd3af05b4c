"""
Model registry for the tenants app.

Django discovers models through ``<app>.models``; the definitions live in
the infrastructure layer.
"""
from tenants.infrastructure.models import ProfessionalUser, Tenant  # noqa: F401
