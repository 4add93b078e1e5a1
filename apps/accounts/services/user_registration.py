"""User registration service."""

import logging

from django.apps import apps as django_apps
from django.contrib.auth.hashers import make_password

from ..models import User, canonical_email
from ..store import AccountStore, StoreErrorKind, StoreFailure
from .exceptions import (
    EmailAlreadyRegisteredError,
    IdentityStoreError,
    IdentityStoreUnavailableError,
    RegistrationValidationError,
)

logger = logging.getLogger(__name__)


class RegistrationService:
    """
    Creates accounts: validate, check for an existing email, hash, insert.

    The existence check and the insert are separate short database calls;
    nothing is held open while the password is hashed. A unique-constraint
    violation on insert is reported exactly like a failed existence check.
    """

    def __init__(self, store: AccountStore, hasher=None) -> None:
        self._store = store
        self._hasher = hasher or 'default'

    def register(self, *, name: str, email: str, password: str) -> User:
        """
        Register a new account.

        Args:
            name: Display name
            email: Login email, compared case-insensitively
            password: Plaintext password (only its hash is stored)

        Returns:
            Created User instance

        Raises:
            RegistrationValidationError: If a field is missing or empty
            EmailAlreadyRegisteredError: If the email is already taken
            IdentityStoreUnavailableError: If the database cannot be reached
            IdentityStoreError: If the database fails in any other way
        """
        if not all(isinstance(value, str) for value in (name, email, password)):
            raise RegistrationValidationError("All fields are required")

        name = name.strip()
        email = canonical_email(email)
        if not name or not email or not password:
            raise RegistrationValidationError("All fields are required")

        try:
            taken = self._store.exists_with_email(email)
        except StoreFailure as failure:
            raise self._translate(failure) from failure

        if taken:
            raise EmailAlreadyRegisteredError("User with this email already exists")

        password_hash = make_password(password, hasher=self._hasher)

        try:
            user = self._store.insert(
                email=email,
                display_name=name,
                password_hash=password_hash,
            )
        except StoreFailure as failure:
            raise self._translate(failure) from failure

        logger.info("Registered account %s", user.pk)
        return user

    def _translate(self, failure: StoreFailure):
        if failure.kind is StoreErrorKind.CONFLICT:
            return EmailAlreadyRegisteredError("User with this email already exists")
        if failure.kind is StoreErrorKind.UNAVAILABLE:
            return IdentityStoreUnavailableError("Identity store unavailable")
        return IdentityStoreError("Identity store error")


def get_registration_service() -> RegistrationService:
    """Return the service built when the accounts app was loaded."""
    return django_apps.get_app_config('accounts').registration_service


def register_user(*, name: str, email: str, password: str) -> User:
    """Register an account through the process-wide registration service."""
    return get_registration_service().register(name=name, email=email, password=password)
