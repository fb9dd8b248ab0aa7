"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    InvalidCredentialsError,
    InactiveAccountError,
    RegistrationIncompleteError,
    NotInvitedError,
    AlreadyRegisteredError,
    StaffAlreadyExistsError,
    StaffNotFoundError,
    InsufficientPermissionsError,
    InvalidInviteRequestError,
    InviteTargetNotPendingError,
    EmailDispatchError,
    AccessSyncError,
    InvalidResetTokenError,
)
from .staff_authentication import authenticate_staff
from .staff_registration import invite_staff, register_staff
from .staff_management import (
    get_staff_list,
    toggle_staff_role,
    revoke_staff_access,
    restore_staff_access,
)
from .invitation_email import send_invite_email
from .password_reset import request_password_reset, confirm_password_reset, change_password
from .access_sync import CloudflareAccessClient, sync_access_allowlist

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'RegistrationIncompleteError',
    'NotInvitedError',
    'AlreadyRegisteredError',
    'StaffAlreadyExistsError',
    'StaffNotFoundError',
    'InsufficientPermissionsError',
    'InvalidInviteRequestError',
    'InviteTargetNotPendingError',
    'EmailDispatchError',
    'AccessSyncError',
    'InvalidResetTokenError',
    # Services
    'authenticate_staff',
    'invite_staff',
    'register_staff',
    'get_staff_list',
    'toggle_staff_role',
    'revoke_staff_access',
    'restore_staff_access',
    'send_invite_email',
    'request_password_reset',
    'confirm_password_reset',
    'change_password',
    'CloudflareAccessClient',
    'sync_access_allowlist',
]
