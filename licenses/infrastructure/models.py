"""
License model.
"""
import uuid

from django.db import models
from django.utils import timezone


class License(models.Model):
    """
    A redeemable grant that provisions exactly one tenant.

    Only the keyed digest of the plaintext key is stored.
    """

    KIND_CHOICES = [
        ("basica", "Basic"),
        ("mediana", "Medium"),
        ("pro", "Pro"),
        ("custom", "Custom"),
    ]

    STATE_CHOICES = [
        ("pending", "Pending"),
        ("active", "Active"),
        ("revoked", "Revoked"),
        ("expired", "Expired"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    key_digest = models.CharField(
        max_length=64,
        unique=True,
        null=True,
        blank=True,
        help_text="HMAC-SHA256 of the plaintext key (null for legacy licenses)",
    )
    kind = models.CharField(max_length=20, choices=KIND_CHOICES, default="basica")
    max_users = models.PositiveIntegerField(
        null=True, blank=True, help_text="Professional users allowed (empty = unlimited)"
    )
    state = models.CharField(max_length=20, choices=STATE_CHOICES, default="pending")
    created_at = models.DateTimeField(default=timezone.now, editable=False)
    activated_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    tenant = models.ForeignKey(
        "tenants.Tenant",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="licenses",
    )
    notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "licenses"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["state"]),
            models.Index(fields=["tenant", "state"]),
        ]

    def __str__(self):
        return f"{self.kind} license {self.id} ({self.state})"
