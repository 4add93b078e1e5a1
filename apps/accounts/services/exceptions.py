"""Domain-specific exceptions for accounts services."""

import enum


class RegistrationErrorKind(enum.Enum):
    """Failure categories of the registration flow."""

    VALIDATION = 'validation'
    CONFLICT = 'conflict'
    STORE_UNAVAILABLE = 'store_unavailable'
    STORE_ERROR = 'store_error'
    UNKNOWN = 'unknown'


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class UserRegistrationError(AccountsServiceError):
    """Raised when user registration fails."""

    kind = RegistrationErrorKind.UNKNOWN


class RegistrationValidationError(UserRegistrationError):
    """Raised when a required registration field is missing or empty."""

    kind = RegistrationErrorKind.VALIDATION


class EmailAlreadyRegisteredError(UserRegistrationError):
    """Raised when an account already exists for the email."""

    kind = RegistrationErrorKind.CONFLICT


class IdentityStoreUnavailableError(UserRegistrationError):
    """Raised when the account database cannot be reached or is misconfigured."""

    kind = RegistrationErrorKind.STORE_UNAVAILABLE


class IdentityStoreError(UserRegistrationError):
    """Raised for any other database failure during registration."""

    kind = RegistrationErrorKind.STORE_ERROR


class InvalidCredentialsError(AccountsServiceError):
    """Raised when authentication credentials are invalid."""
    pass


class InactiveAccountError(AccountsServiceError):
    """Raised when account is deactivated."""
    pass
