import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, StaffRole, StaffStatus


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
def super_admin(db):
    """Create and return a registered super admin."""
    return User.objects.create_user(
        email='root@bookstore.edu',
        password='TestPass123!',
        full_name='Root Admin',
        role=StaffRole.SUPER_ADMIN,
        status=StaffStatus.REGISTERED,
    )


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
def pending_employee(db, admin_user):
    """Create and return an invited employee who has not registered yet."""
    return User.objects.create_user(
        email='newhire@bookstore.edu',
        full_name='New Hire',
        role=StaffRole.EMPLOYEE,
        invited_by=admin_user,
    )


@pytest.fixture
def pending_admin(db, super_admin):
    """Create and return an invited admin who has not registered yet."""
    return User.objects.create_user(
        email='newadmin@bookstore.edu',
        full_name='New Admin',
        role=StaffRole.ADMIN,
        invited_by=super_admin,
    )


@pytest.fixture
def revoked_employee(db):
    """Create and return a registered employee whose access was revoked."""
    return User.objects.create_user(
        email='former@bookstore.edu',
        password='TestPass123!',
        full_name='Former Clerk',
        role=StaffRole.EMPLOYEE,
        status=StaffStatus.REGISTERED,
        is_active=False,
    )


@pytest.fixture
def admin_client(admin_user):
    """Return an API client authenticated as an admin."""
    return _client_for(admin_user)


@pytest.fixture
def super_admin_client(super_admin):
    """Return an API client authenticated as the super admin."""
    return _client_for(super_admin)


@pytest.fixture
def employee_client(employee):
    """Return an API client authenticated as an employee."""
    return _client_for(employee)


@pytest.fixture
def fake_access_client():
    """In-memory stand-in for the Cloudflare Access group client."""

    class FakeAccessClient:
        def __init__(self):
            self.group = {
                'name': 'Bookstore Staff',
                'include': [{'email': {'email': 'admin@bookstore.edu'}}],
                'exclude': [{'email': {'email': 'blocked@bookstore.edu'}}],
                'require': [],
            }
            self.puts = []

        def get_group(self):
            return self.group

        def put_group(self, payload):
            self.puts.append(payload)
            self.group = payload

    return FakeAccessClient()
