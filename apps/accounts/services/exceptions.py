"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class InvalidCredentialsError(AccountsServiceError):
    """Raised when authentication credentials are invalid."""
    pass


class InactiveAccountError(AccountsServiceError):
    """Raised when account is deactivated."""
    pass


class RegistrationIncompleteError(AccountsServiceError):
    """Raised when an invited account has not completed registration."""
    pass


class NotInvitedError(AccountsServiceError):
    """Raised when an email is not on the staff whitelist."""
    pass


class AlreadyRegisteredError(AccountsServiceError):
    """Raised when an invitation has already been used."""
    pass


class StaffAlreadyExistsError(AccountsServiceError):
    """Raised when inviting an email that is already on the whitelist."""
    pass


class StaffNotFoundError(AccountsServiceError):
    """Raised when a staff member does not exist."""
    pass


class InsufficientPermissionsError(AccountsServiceError):
    """Raised when the acting staff member may not perform the operation."""
    pass


class InvalidInviteRequestError(AccountsServiceError):
    """Raised when invitation email input fails validation."""
    pass


class InviteTargetNotPendingError(AccountsServiceError):
    """Raised when the invitation target is not awaiting registration."""
    pass


class EmailDispatchError(AccountsServiceError):
    """Raised when the mail backend rejects the invitation."""
    pass


class InvalidResetTokenError(AccountsServiceError):
    """Raised when a password reset link is invalid, used or expired."""
    pass


class AccessSyncError(AccountsServiceError):
    """Raised when the edge-access allow-list cannot be updated."""
    pass
