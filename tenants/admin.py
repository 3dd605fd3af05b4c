"""
Django admin configuration for tenants app.
"""
from django.contrib import admin

from tenants.infrastructure.models import ProfessionalUser, Tenant


class ProfessionalUserInline(admin.TabularInline):
    """Inline listing of a tenant's professional users."""

    model = ProfessionalUser
    fields = ["username", "real_name", "created_at"]
    readonly_fields = ["username", "real_name", "created_at"]
    extra = 0
    can_delete = False


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    """Admin interface for Tenant model."""

    list_display = ["name", "license", "legacy_user_limit", "user_count", "created_at"]
    search_fields = ["name"]
    readonly_fields = ["name", "password_digest", "license", "created_at"]
    inlines = [ProfessionalUserInline]

    def user_count(self, obj):
        """Display number of professional users."""
        return obj.professional_users.count()

    user_count.short_description = "Users"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("license")


@admin.register(ProfessionalUser)
class ProfessionalUserAdmin(admin.ModelAdmin):
    """Admin interface for ProfessionalUser model."""

    list_display = ["username", "tenant", "real_name", "created_at"]
    list_filter = ["tenant"]
    search_fields = ["username", "real_name", "tenant__name"]
    readonly_fields = ["password_digest", "created_at"]
