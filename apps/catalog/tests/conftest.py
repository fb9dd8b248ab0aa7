import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, StaffRole, StaffStatus
from apps.catalog.models import Product


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
def product(db):
    """Create and return a stocked product."""
    return Product.objects.create(
        barcode='9789710001',
        accpac_code='BK-001',
        name='Intro to Programming',
        price=Decimal('450.00'),
        unit_cost=Decimal('300.00'),
        min_stock_level=5,
        current_stock=12,
        location='Shelf A',
    )


@pytest.fixture
def low_stock_product(db):
    """Create and return a product at its minimum level."""
    return Product.objects.create(
        barcode='PE-SHIRT-M',
        accpac_code='UN-010',
        name='PE Shirt Medium',
        price=Decimal('250.00'),
        unit_cost=Decimal('180.00'),
        min_stock_level=10,
        current_stock=3,
    )


@pytest.fixture
def empty_product(db):
    """Create and return a product with nothing on hand."""
    return Product.objects.create(
        barcode='PE-SHIRT-XL',
        accpac_code='UN-012',
        name='PE Shirt XL',
        price=Decimal('250.00'),
        unit_cost=Decimal('180.00'),
        current_stock=0,
    )


@pytest.fixture
def accpac_csv():
    """AccPac export with banner lines, a repeated code and a blank row."""
    return (
        "University Bookstore\n"
        "Item Export 2026-10-19\n"
        "ACCPAC ITEM CODE,ITEM DESCRIPTION,UNIT\n"
        "bk-001,Intro to Programming,PC\n"
        "BK-002,Data Structures,PC\n"
        "UN-020,Lanyard,PC\n"
        "UN-020,Lanyard Blue,PC\n"
        ",Missing Code,PC\n"
    ).encode('utf-8')
