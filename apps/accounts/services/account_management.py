"""Account management service."""

from django.contrib.auth import get_user_model

User = get_user_model()


def update_display_name(*, user: User, display_name: str) -> User:
    """Change the account's display name; other fields are not editable here."""
    user.display_name = display_name.strip()
    user.save(update_fields=['display_name'])
    return user
