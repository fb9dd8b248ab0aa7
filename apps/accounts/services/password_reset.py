"""
Password reset and change services.

Reset links carry a uid and a token from Django's default token generator.
The token is derived from the password hash and last login, so it stops
working once the password has been changed.
"""

import logging
import smtplib
from typing import Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.tokens import default_token_generator
from django.core.exceptions import ValidationError
from django.core.mail import send_mail
from django.db import transaction
from django.utils.encoding import force_bytes, force_str
from django.utils.http import urlsafe_base64_encode, urlsafe_base64_decode

from apps.accounts.models import StaffStatus
from .exceptions import (
    InvalidCredentialsError,
    InvalidResetTokenError,
    EmailDispatchError,
)

User = get_user_model()
logger = logging.getLogger(__name__)

SUBJECT = "Reset your Bookstore IMS password"

BODY_TEMPLATE = """Hello {name},

We received a request to reset the password for your Bookstore IMS account.

Choose a new password here:
{reset_link}

If you did not ask for a reset you can ignore this email.
"""


def build_reset_link(user: User, link_base: str = '') -> str:
    base = (link_base or settings.PASSWORD_RESET_LINK_BASE).rstrip('/')
    uid = urlsafe_base64_encode(force_bytes(user.pk))
    token = default_token_generator.make_token(user)
    return f"{base}?uid={uid}&token={token}"


def request_password_reset(*, email: str, link_base: str = '') -> Optional[str]:
    """
    Email a reset link to an active, registered staff member.

    Unknown, pending and revoked accounts get no email, and the caller
    cannot tell them apart from a successful request.

    Returns:
        The reset link that was sent, or None when nothing was sent

    Raises:
        EmailDispatchError: The mail backend rejected the message
    """
    clean_email = email.strip().lower()
    user = User.objects.filter(
        email=clean_email,
        is_active=True,
        status=StaffStatus.REGISTERED,
    ).first()
    if user is None:
        logger.info("Password reset requested for unknown or inactive account %s", clean_email)
        return None

    reset_link = build_reset_link(user, link_base)
    try:
        send_mail(
            subject=SUBJECT,
            message=BODY_TEMPLATE.format(name=user.get_display_name(), reset_link=reset_link),
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[user.email],
            fail_silently=False,
        )
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Password reset email failed for %s: %s", user.email, e)
        raise EmailDispatchError("Email provider rejected the request.") from e

    logger.info("Password reset email sent to %s", user.email)
    return reset_link


@transaction.atomic
def confirm_password_reset(*, uid: str, token: str, new_password: str) -> User:
    """
    Set a new password from a reset link.

    Raises:
        InvalidResetTokenError: If the uid or token is invalid, used or expired
    """
    try:
        user_id = force_str(urlsafe_base64_decode(uid))
        user = (
            User.objects
            .select_for_update()
            .get(pk=user_id, is_active=True, status=StaffStatus.REGISTERED)
        )
    except (TypeError, ValueError, OverflowError, ValidationError, User.DoesNotExist):
        raise InvalidResetTokenError("Invalid or expired reset link")

    if not default_token_generator.check_token(user, token):
        raise InvalidResetTokenError("Invalid or expired reset link")

    user.set_password(new_password)
    user.save(update_fields=['password'])

    logger.info("Password reset completed for %s", user.email)
    return user


@transaction.atomic
def change_password(*, user: User, current_password: str, new_password: str) -> User:
    """
    Change the password of a signed-in staff member.

    Raises:
        InvalidCredentialsError: If current_password is wrong
    """
    if not user.check_password(current_password):
        raise InvalidCredentialsError("Current password is incorrect")

    user.set_password(new_password)
    user.save(update_fields=['password'])

    logger.info("Password changed for %s", user.email)
    return user
