import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, StaffRole, StaffStatus
from apps.catalog.models import Product
from apps.transactions.services import process_inventory_batch


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def admin_user(db):
    """Create and return a registered admin."""
    return User.objects.create_user(
        email='admin@bookstore.edu',
        password='TestPass123!',
        full_name='Ada Admin',
        role=StaffRole.ADMIN,
        status=StaffStatus.REGISTERED,
    )


@pytest.fixture
def employee(db):
    """Create and return a registered employee."""
    return User.objects.create_user(
        email='clerk@bookstore.edu',
        password='TestPass123!',
        full_name='Carl Clerk',
        role=StaffRole.EMPLOYEE,
        status=StaffStatus.REGISTERED,
    )


@pytest.fixture
def admin_client(admin_user):
    """Return an API client authenticated as an admin."""
    return _client_for(admin_user)


@pytest.fixture
def employee_client(employee):
    """Return an API client authenticated as an employee."""
    return _client_for(employee)


@pytest.fixture
def pen(db):
    """Create and return a product with 20 in stock."""
    return Product.objects.create(
        barcode='PEN-001',
        accpac_code='AP-PEN',
        name='Ballpen Blue',
        price=Decimal('15.00'),
        unit_cost=Decimal('10.00'),
        min_stock_level=5,
        current_stock=20,
    )


@pytest.fixture
def notebook(db):
    """Create and return a product with 5 in stock."""
    return Product.objects.create(
        barcode='NB-001',
        accpac_code='AP-NB',
        name='Notebook 80 Leaves',
        price=Decimal('45.00'),
        unit_cost=Decimal('30.00'),
        min_stock_level=10,
        current_stock=5,
    )


@pytest.fixture
def issuance_header():
    return {
        'type': 'ISSUANCE',
        'transaction_mode': 'CASH',
        'student_id': '2024-0001',
        'student_name': 'Juan Dela Cruz',
        'course': 'BSIT',
        'year_level': '2',
    }


@pytest.fixture
def issued_receipt(employee, pen, notebook, issuance_header):
    """Record an issuance of 2 pens and 1 notebook and return its receipt."""
    return process_inventory_batch(
        header=issuance_header,
        items=[{'barcode': 'PEN-001', 'qty': 2}, {'barcode': 'NB-001', 'qty': 1}],
        user=employee,
    )
