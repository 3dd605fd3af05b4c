"""
Integration tests for License API endpoints.
"""

import uuid
from datetime import timedelta

import pytest
from asgiref.sync import async_to_sync
from django.test import override_settings
from django.urls import reverse

from licenses.domain.license import utc_now
from licenses.infrastructure.models import License


@pytest.mark.django_db
@pytest.mark.integration
class TestGenerateLicenseAPI:
    """Integration tests for license generation."""

    def test_generate_license(self, api_client, admin_headers):
        """Test generating a license returns the key once and stores its digest."""
        response = api_client.post(
            reverse("license:generate-license"),
            {"kind": "mediana", "notes": "Clinic onboarding"},
            format="json",
            **admin_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["kind"] == "mediana"
        assert data["max_users"] == 7
        stored = License.objects.get(id=data["license_id"])
        assert stored.state == "pending"
        assert stored.key_digest != data["license_key"]

    def test_generate_defaults_and_aliases(self, api_client, admin_headers):
        """Test the default kind and English aliases."""
        url = reverse("license:generate-license")

        default = api_client.post(url, {}, format="json", **admin_headers)
        alias = api_client.post(url, {"kind": "medium"}, format="json", **admin_headers)
        custom = api_client.post(
            url, {"kind": "custom", "max_users": 42}, format="json", **admin_headers
        )

        assert default.json()["kind"] == "basica"
        assert default.json()["max_users"] == 3
        assert alias.json()["kind"] == "mediana"
        assert custom.json()["max_users"] == 42

    def test_generate_unknown_kind(self, api_client, admin_headers):
        """Test an unknown kind is invalid input."""
        response = api_client.post(
            reverse("license:generate-license"),
            {"kind": "enterprise"},
            format="json",
            **admin_headers,
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "INVALID_INPUT"
        assert "kind" in error["fields"]

    def test_generate_requires_admin_token(self, api_client):
        """Test generation without the admin token is unauthorized."""
        url = reverse("license:generate-license")

        missing = api_client.post(url, {}, format="json")
        wrong = api_client.post(url, {}, format="json", HTTP_X_ADMIN_TOKEN="nope")

        assert missing.status_code == 401
        assert wrong.status_code == 401
        assert missing.json()["error"]["code"] == "UNAUTHORIZED"
        assert not License.objects.exists()

    @override_settings(ADMIN_TOKEN="")
    def test_generate_disabled_without_configured_token(self, api_client):
        """Test privileged endpoints are closed when no token is configured."""
        response = api_client.post(
            reverse("license:generate-license"), {}, format="json", HTTP_X_ADMIN_TOKEN=""
        )

        assert response.status_code == 401


@pytest.mark.django_db
@pytest.mark.integration
class TestValidateLicenseAPI:
    """Integration tests for license validation."""

    def test_redeemable(self, api_client, generate_license):
        """Test a pending key validates without admin token."""
        generated = generate_license()

        response = api_client.post(
            reverse("license:validate-license"),
            {"license_key": generated.plaintext_key},
            format="json",
        )

        assert response.status_code == 200
        data = response.json()
        assert data["outcome"] == "redeemable"
        assert data["is_valid"] is True
        assert data["kind"] == "basica"
        assert data["assigned"] is False

    def test_not_found(self, api_client, db):
        """Test an unknown key."""
        response = api_client.post(
            reverse("license:validate-license"),
            {"license_key": "0000-0000-0000"},
            format="json",
        )

        assert response.status_code == 404
        assert response.json()["outcome"] == "not_found"

    def test_already_redeemed(self, api_client, generate_license, provisioning_service):
        """Test a redeemed key answers conflict."""
        generated = generate_license()
        async_to_sync(provisioning_service.register_tenant)(
            "ClinicA", "pw123456", generated.plaintext_key
        )

        response = api_client.post(
            reverse("license:validate-license"),
            {"license_key": generated.plaintext_key},
            format="json",
        )

        assert response.status_code == 409
        assert response.json()["outcome"] == "already_redeemed"
        assert response.json()["assigned"] is True

    def test_expired(self, api_client, generate_license):
        """Test a key past its term answers gone."""
        generated = generate_license()
        past = utc_now() - timedelta(days=400)
        License.objects.filter(id=generated.license.id).update(
            activated_at=past, expires_at=past + timedelta(days=365)
        )

        response = api_client.post(
            reverse("license:validate-license"),
            {"license_key": generated.plaintext_key},
            format="json",
        )

        assert response.status_code == 410
        assert response.json()["outcome"] == "expired"
        assert License.objects.get(id=generated.license.id).state == "expired"

    def test_revoked(self, api_client, admin_headers, generate_license):
        """Test a revoked key answers forbidden."""
        generated = generate_license()
        api_client.post(
            reverse("license:revoke-license", args=[generated.license.id]),
            {},
            format="json",
            **admin_headers,
        )

        response = api_client.post(
            reverse("license:validate-license"),
            {"license_key": generated.plaintext_key},
            format="json",
        )

        assert response.status_code == 403
        assert response.json()["outcome"] == "revoked"

    def test_short_key(self, api_client, db):
        """Test malformed keys are invalid input."""
        response = api_client.post(
            reverse("license:validate-license"), {"license_key": "abc"}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_INPUT"


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseAdminAPI:
    """Integration tests for license lookup and revocation."""

    def test_get_license(self, api_client, admin_headers, generate_license):
        """Test looking up a license by ID."""
        generated = generate_license(notes="trial")

        response = api_client.get(
            reverse("license:license-detail", args=[generated.license.id]), **admin_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(generated.license.id)
        assert data["state"] == "pending"
        assert data["notes"] == "trial"
        assert "key_digest" not in data

    def test_get_unknown_license(self, api_client, admin_headers, db):
        """Test looking up a missing license."""
        response = api_client.get(
            reverse("license:license-detail", args=[uuid.uuid4()]), **admin_headers
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "LICENSE_NOT_FOUND"

    def test_revoke(self, api_client, admin_headers, generate_license):
        """Test revoking a pending license."""
        generated = generate_license()

        response = api_client.post(
            reverse("license:revoke-license", args=[generated.license.id]),
            {"reason": "sold by mistake"},
            format="json",
            **admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["state"] == "revoked"

    def test_revoke_active_license(self, api_client, admin_headers, registered_tenant):
        """Test an active license cannot be revoked."""
        result = registered_tenant()

        response = api_client.post(
            reverse("license:revoke-license", args=[result.license.id]),
            {},
            format="json",
            **admin_headers,
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "LICENSE_NOT_REVOCABLE"
