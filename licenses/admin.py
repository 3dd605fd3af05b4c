"""
Django admin configuration for licenses app.

Licenses are read-mostly here: keys are generated through the API so the
plaintext can be shown once, and state changes go through the lifecycle.
"""
from django.contrib import admin
from django.utils.html import format_html

from licenses.infrastructure.models import License


@admin.register(License)
class LicenseAdmin(admin.ModelAdmin):
    """Admin interface for License model."""

    list_display = [
        "id",
        "kind",
        "state_display",
        "max_users",
        "tenant",
        "activated_at",
        "expires_at",
        "created_at",
    ]
    list_filter = ["state", "kind", "created_at", "expires_at"]
    search_fields = ["id", "tenant__name", "notes"]
    readonly_fields = [
        "id",
        "key_digest",
        "state",
        "tenant",
        "created_at",
        "activated_at",
        "expires_at",
    ]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "kind", "state", "max_users", "notes"),
            },
        ),
        (
            "Redemption",
            {
                "fields": ("tenant", "activated_at", "expires_at"),
            },
        ),
        (
            "Key",
            {
                "fields": ("key_digest", "created_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def state_display(self, obj):
        """Display state with color coding."""
        colors = {
            "pending": "blue",
            "active": "green",
            "revoked": "red",
            "expired": "gray",
        }
        color = colors.get(obj.state, "black")
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            color,
            obj.state.upper(),
        )

    state_display.short_description = "State"

    def has_add_permission(self, request):
        return False

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("tenant")
