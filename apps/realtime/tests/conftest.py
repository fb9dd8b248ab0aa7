import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, StaffRole, StaffStatus


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
def api_client():
    return APIClient()
