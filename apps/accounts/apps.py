from django.apps import AppConfig


class AccountsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.accounts"
    label = "accounts"
    verbose_name = "Accounts"

    registration_service = None

    def ready(self):
        from .services.user_registration import RegistrationService
        from .store import AccountStore

        # One store and service per process, shared by all requests
        self.registration_service = RegistrationService(AccountStore(using="default"))
