"""
Invitation email service.

Sends the templated "you have been authorized" message to a pending staff
member over SMTP. The email is only sent when the target is already on the
whitelist in PENDING state, so the endpoint cannot be used as an open relay.
"""

import logging
import re
import smtplib

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.mail import send_mail

from apps.accounts.models import ADMIN_ROLES, StaffStatus
from .exceptions import (
    InsufficientPermissionsError,
    InvalidInviteRequestError,
    InviteTargetNotPendingError,
    EmailDispatchError,
)

User = get_user_model()
logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
MAX_NAME_LENGTH = 150

ADMIN_MESSAGE = (
    "You have been granted elevated Administrative privileges to manage the "
    "system and personnel."
)
EMPLOYEE_MESSAGE = (
    "You have been assigned the Employee role with access to process "
    "transactions and manage inventory."
)

SUBJECT = "You have been invited to the Bookstore IMS"

BODY_TEMPLATE = """Hello {to_name},

{message}

Complete your registration here:
{invite_link}

If you were not expecting this invitation you can ignore this email.
"""


def _check_caller(caller: User):
    if (
        not caller.is_active
        or caller.status != StaffStatus.REGISTERED
        or caller.role not in ADMIN_ROLES
    ):
        raise InsufficientPermissionsError("Forbidden: Insufficient privileges")


def validate_invite_input(to_name, to_email) -> tuple[str, str]:
    """
    Sanitize invitation input.

    Returns:
        (clean_name, clean_email)

    Raises:
        InvalidInviteRequestError: On a missing/oversized name or malformed email
    """
    if not to_name or not isinstance(to_name, str) or len(to_name) > MAX_NAME_LENGTH:
        raise InvalidInviteRequestError("Invalid name provided")
    if not to_email or not isinstance(to_email, str) or not EMAIL_PATTERN.match(to_email):
        raise InvalidInviteRequestError("Invalid email address format")
    return to_name.strip(), to_email.strip().lower()


def send_invite_email(
    *,
    to_name,
    to_email,
    invite_link: str = '',
    caller: User
) -> User:
    """
    Send the invitation email to a pending staff member.

    Args:
        to_name: Display name used in the greeting
        to_email: Target address, must already be a PENDING whitelist entry
        invite_link: Registration link; defaults to settings.INVITE_LINK_BASE
        caller: Authenticated staff member requesting the send

    Returns:
        The pending target User

    Raises:
        InsufficientPermissionsError: Caller is not an active registered admin
        InvalidInviteRequestError: Input failed validation
        InviteTargetNotPendingError: Target missing or already registered
        EmailDispatchError: The mail backend rejected the message
    """
    _check_caller(caller)
    clean_name, clean_email = validate_invite_input(to_name, to_email)

    target = User.objects.filter(email=clean_email).first()
    if target is None or target.status != StaffStatus.PENDING:
        raise InviteTargetNotPendingError(
            "Forbidden: Target user is not in a pending invitation state."
        )

    message = ADMIN_MESSAGE if target.role in ADMIN_ROLES else EMPLOYEE_MESSAGE
    body = BODY_TEMPLATE.format(
        to_name=clean_name,
        message=message,
        invite_link=invite_link or settings.INVITE_LINK_BASE,
    )

    try:
        send_mail(
            subject=SUBJECT,
            message=body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[clean_email],
            fail_silently=False,
        )
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Email dispatch failed for %s: %s", clean_email, e)
        raise EmailDispatchError("Email provider rejected the request.") from e

    logger.info("Invitation email sent to %s by %s", clean_email, caller.email)
    return target
