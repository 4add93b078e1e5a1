"""
Identity store: the access layer over the ``users`` table.

Every database failure leaving this module is a ``StoreFailure`` tagged
with a ``StoreErrorKind``, so callers branch on the kind instead of on
driver exception types.
"""

import enum
import logging

from django.core.exceptions import ImproperlyConfigured
from django.db import (
    DatabaseError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    transaction,
)

from .models import User

logger = logging.getLogger(__name__)


class StoreErrorKind(enum.Enum):
    """Classification of identity store failures."""

    UNAVAILABLE = 'unavailable'
    CONFLICT = 'conflict'
    ERROR = 'error'


class StoreFailure(Exception):
    """Raised by ``AccountStore`` when the database call does not succeed."""

    def __init__(self, kind: StoreErrorKind, operation: str):
        super().__init__(f"{operation} failed: {kind.value}")
        self.kind = kind
        self.operation = operation


def classify_error(exc: Exception) -> StoreErrorKind:
    """Map a database-layer exception to a ``StoreErrorKind``."""
    if isinstance(exc, IntegrityError):
        return StoreErrorKind.CONFLICT
    if isinstance(exc, (OperationalError, InterfaceError, ImproperlyConfigured)):
        return StoreErrorKind.UNAVAILABLE
    return StoreErrorKind.ERROR


class AccountStore:
    """Account persistence bound to one database alias."""

    def __init__(self, using: str = 'default') -> None:
        self.using = using

    @property
    def accounts(self):
        return User.objects.db_manager(self.using)

    def exists_with_email(self, email: str) -> bool:
        """Return whether an account already holds ``email`` (canonical form)."""
        try:
            return self.accounts.filter(email=email).exists()
        except (DatabaseError, ImproperlyConfigured) as exc:
            raise self._failure(exc, 'exists_with_email') from exc

    def insert(self, *, email: str, display_name: str, password_hash: str) -> User:
        """
        Insert a new account row with an already-encoded password hash.

        The unique constraint on ``email`` is the authoritative guard;
        a violation surfaces as ``StoreErrorKind.CONFLICT``.
        """
        user = User(email=email, display_name=display_name, password=password_hash)
        try:
            with transaction.atomic(using=self.using):
                user.save(using=self.using, force_insert=True)
        except (DatabaseError, ImproperlyConfigured) as exc:
            raise self._failure(exc, 'insert') from exc
        return user

    def _failure(self, exc: Exception, operation: str) -> StoreFailure:
        kind = classify_error(exc)
        if kind is StoreErrorKind.CONFLICT:
            logger.info("Identity store rejected %s on unique constraint", operation)
        else:
            logger.error(
                "Identity store %s failed (%s)", operation, kind.value, exc_info=exc
            )
        return StoreFailure(kind, operation)
