import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, StaffRole, StaffStatus
from apps.catalog.models import Product
from apps.transactions.services import process_inventory_batch, void_transaction_by_ref


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


# =============================================================================
# Users
# =============================================================================

@pytest.fixture
def analytics_admin(db):
    return User.objects.create_user(
        email='admin@bookstore.edu',
        password='TestPass123!',
        full_name='Ada Admin',
        role=StaffRole.ADMIN,
        status=StaffStatus.REGISTERED,
    )


@pytest.fixture
def analytics_clerk(db):
    return User.objects.create_user(
        email='clerk@bookstore.edu',
        password='TestPass123!',
        full_name='Carl Clerk',
        role=StaffRole.EMPLOYEE,
        status=StaffStatus.REGISTERED,
    )


@pytest.fixture
def analytics_client(analytics_clerk):
    """Return an API client authenticated as an employee."""
    client = APIClient()
    refresh = RefreshToken.for_user(analytics_clerk)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


# =============================================================================
# Products and movements
# =============================================================================

@pytest.fixture
def analytics_pen(db):
    return Product.objects.create(
        barcode='PEN-001',
        name='Ballpen Blue',
        price=Decimal('15.00'),
        unit_cost=Decimal('10.00'),
        min_stock_level=5,
        current_stock=20,
    )


@pytest.fixture
def analytics_notebook(db):
    return Product.objects.create(
        barcode='NB-001',
        name='Notebook 80 Leaves',
        price=Decimal('45.00'),
        unit_cost=Decimal('30.00'),
        min_stock_level=10,
        current_stock=5,
    )


@pytest.fixture
def analytics_movements(analytics_admin, analytics_clerk, analytics_pen, analytics_notebook):
    """
    Record today's movements.

    Pens: +10 received, -4 issued, +1 returned.
    Notebooks: -2 pulled out, -1 issued then voided.
    """
    student = {
        'student_id': '2024-0001',
        'student_name': 'Juan Dela Cruz',
        'course': 'BSIT',
        'year_level': '2',
    }

    def record(header, barcode, qty):
        return process_inventory_batch(
            header=header, items=[{'barcode': barcode, 'qty': qty}], user=analytics_clerk
        )

    record({'type': 'RECEIVING', 'supplier': 'Rex'}, 'PEN-001', 10)
    record({'type': 'ISSUANCE', 'transaction_mode': 'CASH', **student}, 'PEN-001', 4)
    record({'type': 'ISSUANCE_RETURN', 'transaction_mode': 'CASH', **student}, 'PEN-001', 1)
    record({'type': 'PULL_OUT', 'remarks': 'water damage'}, 'NB-001', 2)
    voided = record({'type': 'ISSUANCE', 'transaction_mode': 'CHARGED', **student}, 'NB-001', 1)
    void_transaction_by_ref(
        reference_number=voided['reference_number'], reason='wrong item', user=analytics_admin
    )
