"""Staff administration service (role changes and revocation)."""

import logging
from uuid import UUID

from django.db import transaction
from django.contrib.auth import get_user_model
from django.db.models import QuerySet

from apps.accounts.models import StaffRole
from .exceptions import StaffNotFoundError, InsufficientPermissionsError

User = get_user_model()
logger = logging.getLogger(__name__)


def get_staff_list() -> QuerySet:
    return User.objects.select_related('invited_by').order_by('full_name', 'email')


def _lock_target(staff_id: UUID) -> User:
    try:
        return User.objects.select_for_update().get(id=staff_id)
    except User.DoesNotExist:
        raise StaffNotFoundError("Staff member not found")


def _check_can_manage(target: User, actor: User, verb: str):
    if not actor.is_admin:
        raise InsufficientPermissionsError("Only admins can manage staff")
    if target.id == actor.id:
        raise InsufficientPermissionsError(f"You cannot {verb} yourself.")
    if target.role == StaffRole.SUPER_ADMIN and actor.role != StaffRole.SUPER_ADMIN:
        raise InsufficientPermissionsError("Only a super admin can manage a super admin")


@transaction.atomic
def toggle_staff_role(*, staff_id: UUID, actor: User) -> User:
    """
    Flip a staff member between ADMIN and EMPLOYEE.

    Raises:
        StaffNotFoundError: If the target does not exist
        InsufficientPermissionsError: If the actor targets themselves, is not
            an admin, or the target is a super admin
    """
    target = _lock_target(staff_id)
    _check_can_manage(target, actor, 'change the role of')
    if target.role == StaffRole.SUPER_ADMIN:
        raise InsufficientPermissionsError("Super admin roles cannot be toggled")

    target.role = StaffRole.EMPLOYEE if target.role == StaffRole.ADMIN else StaffRole.ADMIN
    target.save(update_fields=['role'])

    logger.info("%s changed role of %s to %s", actor.email, target.email, target.role)
    return target


@transaction.atomic
def revoke_staff_access(*, staff_id: UUID, actor: User) -> User:
    """
    Deactivate a staff member so they can no longer sign in.

    Raises:
        StaffNotFoundError: If the target does not exist
        InsufficientPermissionsError: If the actor targets themselves or lacks rights
    """
    target = _lock_target(staff_id)
    _check_can_manage(target, actor, 'revoke')

    target.is_active = False
    target.save(update_fields=['is_active'])

    logger.info("%s revoked access for %s", actor.email, target.email)
    return target


@transaction.atomic
def restore_staff_access(*, staff_id: UUID, actor: User) -> User:
    """Reactivate a previously revoked staff member."""
    target = _lock_target(staff_id)
    _check_can_manage(target, actor, 'restore')

    target.is_active = True
    target.save(update_fields=['is_active'])

    logger.info("%s restored access for %s", actor.email, target.email)
    return target
