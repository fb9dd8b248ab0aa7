import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, StaffRole, StaffStatus
from apps.registry.models import Student, Supplier


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
def employee_client(employee):
    """Return an API client authenticated as an employee."""
    client = APIClient()
    refresh = RefreshToken.for_user(employee)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def student(db):
    """Create and return a student."""
    return Student.objects.create(
        student_id='2024-0001',
        name='JUAN DELA CRUZ',
        course='BSIT',
        year_level='2',
    )


@pytest.fixture
def other_student(db):
    return Student.objects.create(
        student_id='2023-0042',
        name='MARIA SANTOS',
        course='BSED',
        year_level='3',
    )


@pytest.fixture
def supplier(db):
    """Create and return a supplier."""
    return Supplier.objects.create(name='Rex Book Store', contact_info='8-123-4567')
