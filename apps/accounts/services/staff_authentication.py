"""Staff authentication service (the login gate)."""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone

from apps.accounts.models import StaffStatus
from .exceptions import (
    InvalidCredentialsError,
    InactiveAccountError,
    RegistrationIncompleteError,
)

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def authenticate_staff(*, email: str, password: str) -> User:
    """
    Authenticate a staff member and resolve their role.

    Uses select_for_update() to prevent race conditions when updating last_login.

    Args:
        email: Staff email (case-insensitive)
        password: Staff password

    Returns:
        Authenticated User instance

    Raises:
        InvalidCredentialsError: If credentials are invalid
        RegistrationIncompleteError: If the invitation was never completed
        InactiveAccountError: If access was revoked
    """
    try:
        user = (
            User.objects
            .select_for_update()
            .get(email=email.strip().lower())
        )
    except User.DoesNotExist:
        raise InvalidCredentialsError("Invalid email or password")

    if user.status != StaffStatus.REGISTERED:
        raise RegistrationIncompleteError(
            "This account has not completed registration. Use the invitation to register."
        )

    if not user.check_password(password):
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        logger.warning("Login refused for deactivated account %s", user.email)
        raise InactiveAccountError("Access Denied: your access has been revoked")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    return user
