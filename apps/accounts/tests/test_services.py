"""
Tests for the registration service and identity store.

The service tests use an in-memory store so the exact sequence of
store calls can be asserted.
"""

import pytest
from django.db import IntegrityError, InterfaceError, OperationalError, DatabaseError
from django.core.exceptions import ImproperlyConfigured

from apps.accounts.hashers import BCryptPasswordHasher
from apps.accounts.models import User
from apps.accounts.services import (
    EmailAlreadyRegisteredError,
    IdentityStoreError,
    IdentityStoreUnavailableError,
    RegistrationErrorKind,
    RegistrationService,
    RegistrationValidationError,
    get_registration_service,
    register_user,
)
from apps.accounts.store import AccountStore, StoreErrorKind, StoreFailure, classify_error


class FakeStore:
    """In-memory identity store recording every call."""

    def __init__(self, existing=(), fail_on=None, failure_kind=None):
        self.emails = set(existing)
        self.calls = []
        self.fail_on = fail_on
        self.failure_kind = failure_kind

    def exists_with_email(self, email):
        self.calls.append('exists')
        if self.fail_on == 'exists':
            raise StoreFailure(self.failure_kind, 'exists_with_email')
        return email in self.emails

    def insert(self, *, email, display_name, password_hash):
        self.calls.append('insert')
        if self.fail_on == 'insert':
            raise StoreFailure(self.failure_kind, 'insert')
        self.emails.add(email)
        return User(email=email, display_name=display_name, password=password_hash)


class RecordingHasher(BCryptPasswordHasher):
    """bcrypt hasher that appends to the store's call log when it runs."""

    def __init__(self, calls):
        self.calls = calls

    def encode(self, password, salt):
        self.calls.append('hash')
        return super().encode(password, salt)


# =============================================================================
# RegistrationService Tests
# =============================================================================

class TestRegistrationService:
    """Tests for RegistrationService.register"""

    def test_register_sequence(self):
        """One read, then the hash, then one write."""
        store = FakeStore()
        service = RegistrationService(store, hasher=RecordingHasher(store.calls))

        user = service.register(name='Sam', email='sam@x.com', password='pw123456')

        assert store.calls == ['exists', 'hash', 'insert']
        assert user.email == 'sam@x.com'
        assert user.display_name == 'Sam'
        assert user.check_password('pw123456')

    def test_register_conflict_skips_hash_and_insert(self):
        store = FakeStore(existing={'sam@x.com'})
        service = RegistrationService(store, hasher=RecordingHasher(store.calls))

        with pytest.raises(EmailAlreadyRegisteredError) as excinfo:
            service.register(name='Sam', email='Sam@X.com', password='pw123456')

        assert excinfo.value.kind is RegistrationErrorKind.CONFLICT
        assert store.calls == ['exists']

    @pytest.mark.parametrize('name, email, password', [
        ('', 'sam@x.com', 'pw123456'),
        ('Sam', '  ', 'pw123456'),
        ('Sam', 'sam@x.com', ''),
        (None, 'sam@x.com', 'pw123456'),
        ('Sam', 42, 'pw123456'),
    ])
    def test_register_validation_touches_nothing(self, name, email, password):
        store = FakeStore()
        service = RegistrationService(store)

        with pytest.raises(RegistrationValidationError) as excinfo:
            service.register(name=name, email=email, password=password)

        assert excinfo.value.kind is RegistrationErrorKind.VALIDATION
        assert store.calls == []

    def test_register_trims_name(self):
        store = FakeStore()
        service = RegistrationService(store)

        user = service.register(name='  Sam  ', email='sam@x.com', password='pw123456')

        assert user.display_name == 'Sam'

    @pytest.mark.parametrize('fail_on', ['exists', 'insert'])
    @pytest.mark.parametrize('kind, expected', [
        (StoreErrorKind.UNAVAILABLE, IdentityStoreUnavailableError),
        (StoreErrorKind.ERROR, IdentityStoreError),
        (StoreErrorKind.CONFLICT, EmailAlreadyRegisteredError),
    ])
    def test_register_translates_store_failures(self, fail_on, kind, expected):
        store = FakeStore(fail_on=fail_on, failure_kind=kind)
        service = RegistrationService(store)

        with pytest.raises(expected):
            service.register(name='Sam', email='sam@x.com', password='pw123456')


# =============================================================================
# AccountStore Tests
# =============================================================================

@pytest.mark.django_db
class TestAccountStore:
    """Tests for the database-backed AccountStore"""

    def test_insert_and_exists(self):
        store = AccountStore()

        assert store.exists_with_email('new@example.com') is False
        user = store.insert(
            email='new@example.com',
            display_name='New',
            password_hash='bcrypt$placeholder',
        )

        assert store.exists_with_email('new@example.com') is True
        assert User.objects.get(pk=user.pk).password == 'bcrypt$placeholder'

    def test_insert_duplicate_is_conflict(self, user):
        store = AccountStore()

        with pytest.raises(StoreFailure) as excinfo:
            store.insert(email=user.email, display_name='Dup', password_hash='x')

        assert excinfo.value.kind is StoreErrorKind.CONFLICT
        assert User.objects.filter(email=user.email).count() == 1

    @pytest.mark.parametrize('exc, kind', [
        (IntegrityError('unique'), StoreErrorKind.CONFLICT),
        (OperationalError('no route to host'), StoreErrorKind.UNAVAILABLE),
        (InterfaceError('connection already closed'), StoreErrorKind.UNAVAILABLE),
        (ImproperlyConfigured('settings.DATABASES is improperly configured'), StoreErrorKind.UNAVAILABLE),
        (DatabaseError('syntax error'), StoreErrorKind.ERROR),
    ])
    def test_classify_error(self, exc, kind):
        assert classify_error(exc) is kind


# =============================================================================
# Startup Wiring Tests
# =============================================================================

@pytest.mark.django_db
class TestRegistrationWiring:
    """The app config owns the process-wide service"""

    def test_service_built_at_startup(self):
        service = get_registration_service()

        assert isinstance(service, RegistrationService)
        assert get_registration_service() is service

    def test_register_user_persists(self):
        user = register_user(name='Sam', email='SAM@x.com', password='pw123456')

        assert User.objects.filter(email='sam@x.com').count() == 1
        assert user.password.startswith('bcrypt$')
