"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class InternalServiceError(DomainException):
    """Raised when an unexpected failure is downgraded at a service boundary."""

    def __init__(self, message: str = "An internal error occurred"):
        super().__init__(message, code="INTERNAL_ERROR")


class LicenseException(DomainException):
    """Base exception for license-related errors."""

    pass


class LicenseNotFoundError(LicenseException):
    """Raised when a license is not found."""

    def __init__(self, message: str = "License not found"):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class InvalidLicenseKeyError(LicenseException):
    """Raised when a license key does not match any license."""

    def __init__(self, message: str = "Invalid license key"):
        super().__init__(message, code="INVALID_LICENSE_KEY")


class LicenseNotRedeemableError(LicenseException):
    """Raised when a license is active, revoked or expired at redemption time."""

    def __init__(self, message: str = "License is not available for redemption"):
        super().__init__(message, code="LICENSE_NOT_REDEEMABLE")


class LicenseNotRevocableError(LicenseException):
    """Raised when revoking a license that is no longer pending."""

    def __init__(self, message: str = "Only pending licenses can be revoked"):
        super().__init__(message, code="LICENSE_NOT_REVOCABLE")


class DuplicateLicenseKeyError(LicenseException):
    """Raised by persistence when a generated key digest already exists."""

    def __init__(self, message: str = "License key digest already exists"):
        super().__init__(message, code="DUPLICATE_LICENSE_KEY")


class TenantException(DomainException):
    """Base exception for tenant-related errors."""

    pass


class TenantNotFoundError(TenantException):
    """Raised when a tenant is not found."""

    def __init__(self, message: str = "Tenant not found"):
        super().__init__(message, code="TENANT_NOT_FOUND")


class TenantNameTakenError(TenantException):
    """Raised when a tenant name is already registered."""

    def __init__(self, message: str = "Tenant name is already taken"):
        super().__init__(message, code="TENANT_NAME_TAKEN")


class InvalidCredentialsError(TenantException):
    """Raised when a name/password pair does not authenticate."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class ProfessionalUserException(DomainException):
    """Base exception for professional-user errors."""

    pass


class ProfessionalUserNotFoundError(ProfessionalUserException):
    """Raised when a professional user does not exist within a tenant."""

    def __init__(self, message: str = "Professional user not found"):
        super().__init__(message, code="PROFESSIONAL_USER_NOT_FOUND")


class ProfessionalUserExistsError(ProfessionalUserException):
    """Raised when a username is already registered within a tenant."""

    def __init__(self, message: str = "Professional user already exists for this tenant"):
        super().__init__(message, code="PROFESSIONAL_USER_EXISTS")


class UserLimitReachedError(ProfessionalUserException):
    """Raised when a tenant has reached its effective user limit."""

    def __init__(self, message: str = "User limit reached for this tenant"):
        super().__init__(message, code="USER_LIMIT_REACHED")
