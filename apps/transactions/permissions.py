"""
Custom permission classes for transactions app.

Recording receipts is open to every active staff member; reversing them
is reserved for administrators.
"""
from apps.accounts.permissions import IsAdminStaff


class CanVoidReceipt(IsAdminStaff):
    """
    Permission to void a receipt.

    Usage:
        def get_permissions(self):
            if self.action == 'void':
                return [CanVoidReceipt()]
            return super().get_permissions()
    """

    message = 'Only administrators can void transactions.'
