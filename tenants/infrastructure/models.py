"""
Tenant and ProfessionalUser models.
"""
from django.db import models
from django.utils import timezone


class Tenant(models.Model):
    """
    An institution account provisioned by redeeming a license.

    The name is the identity and never changes after registration.
    """

    name = models.CharField(max_length=150, primary_key=True)
    password_digest = models.CharField(max_length=255)
    legacy_user_limit = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="User cap recorded at registration (empty = unlimited)",
    )
    license = models.ForeignKey(
        "licenses.License",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="provisioned_tenants",
    )
    created_at = models.DateTimeField(default=timezone.now, editable=False)

    class Meta:
        db_table = "tenants"
        ordering = ["name"]

    def __str__(self):
        return self.name


class ProfessionalUser(models.Model):
    """A professional working under exactly one tenant."""

    id = models.BigAutoField(primary_key=True)
    username = models.CharField(max_length=150)
    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.PROTECT,
        related_name="professional_users",
    )
    real_name = models.CharField(max_length=255, blank=True, default="")
    password_digest = models.CharField(max_length=255)
    created_at = models.DateTimeField(default=timezone.now, editable=False)

    class Meta:
        db_table = "professional_users"
        ordering = ["username"]
        constraints = [
            models.UniqueConstraint(
                fields=["username", "tenant"], name="unique_username_per_tenant"
            )
        ]
        indexes = [
            models.Index(fields=["username"]),
        ]

    def __str__(self):
        return f"{self.username} @ {self.tenant_id}"
