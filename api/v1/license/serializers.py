"""
Serializers for License API endpoints.
"""

from rest_framework import serializers

from core.domain.value_objects import LicenseKind


class GenerateLicenseRequestSerializer(serializers.Serializer):
    """Serializer for generate license request."""

    kind = serializers.CharField(required=False, default=LicenseKind.BASIC.value)
    max_users = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    notes = serializers.CharField(required=False, allow_blank=True, default="", max_length=2000)

    def validate_kind(self, value):
        """Parse kind, accepting English aliases."""
        try:
            return LicenseKind.from_value(value)
        except ValueError as e:
            raise serializers.ValidationError(str(e)) from e


class GeneratedLicenseSerializer(serializers.Serializer):
    """Serializer for GeneratedLicenseDTO."""

    license_key = serializers.CharField()
    license_id = serializers.UUIDField()
    kind = serializers.CharField()
    max_users = serializers.IntegerField(allow_null=True)


class ValidateLicenseRequestSerializer(serializers.Serializer):
    """Serializer for validate license request."""

    license_key = serializers.CharField(required=True, min_length=8, max_length=64)


class LicenseValidationSerializer(serializers.Serializer):
    """Serializer for LicenseValidationDTO."""

    outcome = serializers.CharField()
    is_valid = serializers.BooleanField()
    kind = serializers.CharField(allow_null=True)
    max_users = serializers.IntegerField(allow_null=True)
    expires_at = serializers.DateTimeField(allow_null=True)
    assigned = serializers.BooleanField()


class RevokeLicenseRequestSerializer(serializers.Serializer):
    """Serializer for revoke license request."""

    reason = serializers.CharField(required=False, allow_blank=True, max_length=500)


class LicenseSerializer(serializers.Serializer):
    """Serializer for LicenseDTO."""

    id = serializers.UUIDField()
    kind = serializers.CharField()
    max_users = serializers.IntegerField(allow_null=True)
    state = serializers.CharField()
    created_at = serializers.DateTimeField()
    activated_at = serializers.DateTimeField(allow_null=True)
    expires_at = serializers.DateTimeField(allow_null=True)
    tenant_id = serializers.CharField(allow_null=True)
    notes = serializers.CharField(allow_blank=True)
