"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    RegistrationErrorKind,
    UserRegistrationError,
    RegistrationValidationError,
    EmailAlreadyRegisteredError,
    IdentityStoreUnavailableError,
    IdentityStoreError,
    InvalidCredentialsError,
    InactiveAccountError,
)
from .user_registration import RegistrationService, get_registration_service, register_user
from .user_authentication import authenticate_user
from .account_management import update_display_name

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'RegistrationErrorKind',
    'UserRegistrationError',
    'RegistrationValidationError',
    'EmailAlreadyRegisteredError',
    'IdentityStoreUnavailableError',
    'IdentityStoreError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    # Services
    'RegistrationService',
    'get_registration_service',
    'register_user',
    'authenticate_user',
    'update_display_name',
]
