"""
Serializers for Tenant API endpoints.
"""

from rest_framework import serializers


class RegisterTenantRequestSerializer(serializers.Serializer):
    """Serializer for register tenant request."""

    name = serializers.CharField(required=True, min_length=3, max_length=150)
    password = serializers.CharField(required=True, min_length=6, max_length=128)
    confirm_password = serializers.CharField(required=True, max_length=128)
    license_key = serializers.CharField(required=True, min_length=8, max_length=64)

    def validate_name(self, value):
        """Tenant names are used in URLs, so no slashes."""
        value = value.strip()
        if "/" in value:
            raise serializers.ValidationError("Name cannot contain '/'")
        return value

    def validate(self, attrs):
        """Check that both passwords match."""
        if attrs["password"] != attrs["confirm_password"]:
            raise serializers.ValidationError({"confirm_password": "Passwords do not match"})
        return attrs


class RegisteredTenantSerializer(serializers.Serializer):
    """Serializer for RegisteredTenantDTO."""

    name = serializers.CharField()
    license_id = serializers.UUIDField()
    kind = serializers.CharField()
    max_users = serializers.IntegerField(allow_null=True)
    activated_at = serializers.DateTimeField()
    expires_at = serializers.DateTimeField()


class LoginRequestSerializer(serializers.Serializer):
    """Serializer for tenant login request."""

    name = serializers.CharField(required=True, min_length=3, max_length=150)
    password = serializers.CharField(required=True, min_length=6, max_length=128)


class TenantLoginSerializer(serializers.Serializer):
    """Serializer for TenantLoginDTO."""

    name = serializers.CharField()
    kind = serializers.CharField(allow_null=True)
    is_admin = serializers.BooleanField()


class ProfessionalLoginRequestSerializer(serializers.Serializer):
    """Serializer for professional login request."""

    username = serializers.CharField(required=True, min_length=3, max_length=150)
    password = serializers.CharField(required=True, min_length=6, max_length=128)
    tenant = serializers.CharField(required=False, allow_blank=True, max_length=150)


class ProfessionalLoginSerializer(serializers.Serializer):
    """Serializer for ProfessionalLoginDTO."""

    username = serializers.CharField()
    tenant = serializers.CharField()


class AddProfessionalUserRequestSerializer(serializers.Serializer):
    """Serializer for add professional user request."""

    username = serializers.CharField(required=True, min_length=3, max_length=150)
    real_name = serializers.CharField(required=True, min_length=3, max_length=255)
    password = serializers.CharField(required=True, min_length=6, max_length=128)


class ProfessionalUserSerializer(serializers.Serializer):
    """Serializer for ProfessionalUserDTO."""

    username = serializers.CharField()
    tenant = serializers.CharField()
    real_name = serializers.CharField(allow_blank=True)


class ProfessionalUserListSerializer(serializers.Serializer):
    """Serializer for ProfessionalUserListDTO."""

    tenant = serializers.CharField()
    users = ProfessionalUserSerializer(many=True)


class UserLimitSerializer(serializers.Serializer):
    """Serializer for UserLimitDTO."""

    tenant = serializers.CharField()
    max_users = serializers.IntegerField(allow_null=True)
    unlimited = serializers.BooleanField()
    current_users = serializers.IntegerField()
    can_add_user = serializers.BooleanField()


class ChangePasswordRequestSerializer(serializers.Serializer):
    """Serializer for a tenant resetting a user's password."""

    tenant_password = serializers.CharField(required=True, min_length=6, max_length=128)
    new_password = serializers.CharField(required=True, min_length=6, max_length=128)
