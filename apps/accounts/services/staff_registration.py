"""Staff invitation and registration services."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from apps.accounts.models import StaffRole, StaffStatus
from .exceptions import (
    NotInvitedError,
    AlreadyRegisteredError,
    StaffAlreadyExistsError,
    InsufficientPermissionsError,
)

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def invite_staff(
    *,
    email: str,
    full_name: str,
    role: str,
    invited_by: User
) -> User:
    """
    Put an email on the staff whitelist as a pending invitation.

    Args:
        email: Invitee email
        full_name: Invitee full name
        role: EMPLOYEE, ADMIN or SUPER_ADMIN
        invited_by: Admin issuing the invitation

    Returns:
        The pending User

    Raises:
        InsufficientPermissionsError: If the inviter is not an admin, or a
            non-super-admin tries to invite a super admin
        StaffAlreadyExistsError: If the email is already on the whitelist
    """
    if not invited_by.is_admin:
        raise InsufficientPermissionsError("Only admins can invite staff")
    if role == StaffRole.SUPER_ADMIN and invited_by.role != StaffRole.SUPER_ADMIN:
        raise InsufficientPermissionsError("Only a super admin can invite another super admin")

    clean_email = email.strip().lower()
    if User.objects.filter(email=clean_email).exists():
        raise StaffAlreadyExistsError(f"{clean_email} is already on the staff list")

    try:
        user = User.objects.create_user(
            email=clean_email,
            password=None,
            full_name=full_name.strip(),
            role=role,
            status=StaffStatus.PENDING,
            invited_by=invited_by,
        )
    except IntegrityError:
        raise StaffAlreadyExistsError(f"{clean_email} is already on the staff list")

    logger.info("Staff invitation created for %s (%s) by %s", clean_email, role, invited_by.email)
    return user


@transaction.atomic
def register_staff(*, email: str, password: str) -> User:
    """
    Complete a pending invitation.

    Args:
        email: Invited email
        password: Chosen password

    Returns:
        The registered User

    Raises:
        NotInvitedError: If the email was never invited
        AlreadyRegisteredError: If the invitation was already used
    """
    try:
        user = (
            User.objects
            .select_for_update()
            .get(email=email.strip().lower())
        )
    except User.DoesNotExist:
        raise NotInvitedError("ACCESS DENIED: This email has not been invited by Admin.")

    if user.status == StaffStatus.REGISTERED:
        raise AlreadyRegisteredError("This account is already registered. Please Login.")

    user.mark_registered(password)
    logger.info("Staff registration completed for %s", user.email)
    return user
