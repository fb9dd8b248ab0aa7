import pytest
from unittest.mock import patch, MagicMock
from urllib.parse import urlsplit, parse_qs
from django.urls import reverse
from rest_framework import status

from apps.accounts.models import User, StaffRole, StaffStatus
from apps.accounts.services import AccessSyncError, request_password_reset


# =============================================================================
# Registration Tests
# =============================================================================

@pytest.mark.django_db
class TestRegister:
    """Tests for POST /api/auth/register/"""

    def test_register_invited_email(self, api_client, pending_employee):
        """Invited staff complete registration and receive tokens."""
        url = reverse('accounts:register')
        data = {
            'email': pending_employee.email,
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert 'access' in response.data['tokens']
        assert response.data['user']['status'] == StaffStatus.REGISTERED

    def test_register_not_invited(self, api_client, db):
        """Emails that are not on the whitelist are refused."""
        url = reverse('accounts:register')
        data = {
            'email': 'stranger@bookstore.edu',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert 'not been invited' in response.data['error']

    def test_register_password_mismatch(self, api_client, pending_employee):
        url = reverse('accounts:register')
        data = {
            'email': pending_employee.email,
            'password': 'SecurePass123!',
            'password_confirm': 'Different123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_register_already_registered(self, api_client, employee):
        url = reverse('accounts:register')
        data = {
            'email': employee.email,
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Login Tests
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_login_success(self, api_client, employee):
        url = reverse('accounts:login')
        response = api_client.post(url, {'email': employee.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_200_OK
        assert 'refresh' in response.data['tokens']
        assert response.data['user']['role'] == StaffRole.EMPLOYEE

    def test_login_wrong_password(self, api_client, employee):
        url = reverse('accounts:login')
        response = api_client.post(url, {'email': employee.email, 'password': 'Wrong123!'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert 'error' in response.data

    def test_login_revoked(self, api_client, revoked_employee):
        url = reverse('accounts:login')
        response = api_client.post(
            url, {'email': revoked_employee.email, 'password': 'TestPass123!'}
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_login_pending(self, api_client, pending_employee):
        url = reverse('accounts:login')
        response = api_client.post(
            url, {'email': pending_employee.email, 'password': 'TestPass123!'}
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# Current user / gate
# =============================================================================

@pytest.mark.django_db
class TestCurrentUser:
    """Tests for GET /api/auth/user/"""

    def test_current_user(self, employee_client, employee):
        response = employee_client.get(reverse('accounts:current-user'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == employee.email
        assert response.data['display_name'] == 'Carl Clerk'

    def test_unauthenticated(self, api_client):
        response = api_client.get(reverse('accounts:current-user'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestPasswordResetApi:
    """Tests for /api/auth/password-reset/ and /api/auth/password/change/"""

    def test_request_same_answer_for_unknown_email(self, api_client, employee, mailoutbox):
        url = reverse('accounts:password-reset')

        known = api_client.post(url, {'email': employee.email}, format='json')
        unknown = api_client.post(url, {'email': 'ghost@bookstore.edu'}, format='json')

        assert known.status_code == unknown.status_code == status.HTTP_200_OK
        assert known.data == unknown.data
        assert len(mailoutbox) == 1

    def test_request_provider_failure(self, api_client, employee):
        with patch('apps.accounts.services.password_reset.send_mail', side_effect=OSError('down')):
            response = api_client.post(
                reverse('accounts:password-reset'), {'email': employee.email}, format='json'
            )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data['error'] == 'Internal server error while dispatching email.'

    def test_confirm_then_login(self, api_client, employee):
        query = parse_qs(urlsplit(request_password_reset(email=employee.email)).query)
        data = {
            'uid': query['uid'][0],
            'token': query['token'][0],
            'new_password': 'NewShelf456!',
            'new_password_confirm': 'NewShelf456!',
        }

        response = api_client.post(reverse('accounts:password-reset-confirm'), data, format='json')

        assert response.status_code == status.HTTP_200_OK
        login = api_client.post(
            reverse('accounts:login'),
            {'email': employee.email, 'password': 'NewShelf456!'},
            format='json',
        )
        assert login.status_code == status.HTTP_200_OK

    def test_confirm_bad_token(self, api_client, employee):
        query = parse_qs(urlsplit(request_password_reset(email=employee.email)).query)
        data = {
            'uid': query['uid'][0],
            'token': 'forged-token',
            'new_password': 'NewShelf456!',
            'new_password_confirm': 'NewShelf456!',
        }

        response = api_client.post(reverse('accounts:password-reset-confirm'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Invalid or expired reset link'

    def test_change_password(self, employee_client, employee):
        data = {
            'current_password': 'TestPass123!',
            'new_password': 'NewShelf456!',
            'new_password_confirm': 'NewShelf456!',
        }

        response = employee_client.post(reverse('accounts:password-change'), data, format='json')

        assert response.status_code == status.HTTP_200_OK
        employee.refresh_from_db()
        assert employee.check_password('NewShelf456!')

    def test_change_password_wrong_current(self, employee_client):
        data = {
            'current_password': 'nope',
            'new_password': 'NewShelf456!',
            'new_password_confirm': 'NewShelf456!',
        }

        response = employee_client.post(reverse('accounts:password-change'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_change_password_requires_login(self, api_client):
        response = api_client.post(reverse('accounts:password-change'), {}, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Staff management
# =============================================================================

@pytest.mark.django_db
class TestStaffManagementApi:

    def test_list_requires_admin(self, employee_client):
        response = employee_client.get(reverse('accounts:staff-list'))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_list(self, admin_client, employee, admin_user):
        response = admin_client.get(reverse('accounts:staff-list'))

        assert response.status_code == status.HTTP_200_OK
        emails = {row['email'] for row in response.data}
        assert {employee.email, admin_user.email} <= emails

    def test_invite(self, admin_client):
        response = admin_client.post(
            reverse('accounts:staff-invite'),
            {'email': 'Next@Bookstore.edu', 'full_name': 'Next One', 'role': 'EMPLOYEE'},
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == StaffStatus.PENDING
        assert User.objects.filter(email='next@bookstore.edu').exists()

    def test_invite_duplicate(self, admin_client, employee):
        response = admin_client.post(
            reverse('accounts:staff-invite'), {'email': employee.email, 'role': 'EMPLOYEE'}
        )
        assert response.status_code == status.HTTP_409_CONFLICT

    def test_toggle_role(self, admin_client, employee):
        url = reverse('accounts:staff-toggle-role', kwargs={'staff_id': employee.id})
        response = admin_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['role'] == StaffRole.ADMIN

    def test_toggle_super_admin_forbidden(self, admin_client, super_admin):
        url = reverse('accounts:staff-toggle-role', kwargs={'staff_id': super_admin.id})
        response = admin_client.post(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_revoke(self, admin_client, employee):
        url = reverse('accounts:staff-revoke', kwargs={'staff_id': employee.id})
        response = admin_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['is_active'] is False

    def test_revoked_token_is_refused(self, admin_client, employee, employee_client):
        admin_client.post(reverse('accounts:staff-revoke', kwargs={'staff_id': employee.id}))

        response = employee_client.get(reverse('accounts:current-user'))
        assert response.status_code in (
            status.HTTP_401_UNAUTHORIZED,
            status.HTTP_403_FORBIDDEN,
        )


# =============================================================================
# Invitation email proxy
# =============================================================================

@pytest.mark.django_db
class TestSendInviteEmailApi:
    """Tests for POST /api/auth/send-invite-email/"""

    def test_success(self, admin_client, pending_employee, mailoutbox):
        response = admin_client.post(
            reverse('accounts:send-invite-email'),
            {'to_name': 'New Hire', 'to_email': pending_employee.email},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'success': True}
        assert len(mailoutbox) == 1

    def test_get_not_allowed(self, admin_client):
        response = admin_client.get(reverse('accounts:send-invite-email'))
        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED

    def test_missing_bearer(self, api_client):
        response = api_client.post(reverse('accounts:send-invite-email'), {}, format='json')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_employee_forbidden(self, employee_client, pending_employee):
        response = employee_client.post(
            reverse('accounts:send-invite-email'),
            {'to_name': 'New Hire', 'to_email': pending_employee.email},
            format='json',
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_invalid_email(self, admin_client, pending_employee):
        response = admin_client.post(
            reverse('accounts:send-invite-email'),
            {'to_name': 'New Hire', 'to_email': 'nope'},
            format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Invalid email address format'

    def test_registered_target_forbidden(self, admin_client, employee):
        response = admin_client.post(
            reverse('accounts:send-invite-email'),
            {'to_name': 'Carl', 'to_email': employee.email},
            format='json',
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_provider_failure(self, admin_client, pending_employee):
        with patch(
            'apps.accounts.services.invitation_email.send_mail',
            side_effect=OSError('connection refused'),
        ):
            response = admin_client.post(
                reverse('accounts:send-invite-email'),
                {'to_name': 'New Hire', 'to_email': pending_employee.email},
                format='json',
            )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data == {'error': 'Internal server error while dispatching email.'}


# =============================================================================
# Access allow-list proxy
# =============================================================================

@pytest.mark.django_db
class TestAccessSyncApi:
    """Tests for POST /api/auth/access-sync/"""

    def test_success(self, admin_client, fake_access_client):
        with patch('apps.accounts.views.get_access_client', return_value=fake_access_client):
            response = admin_client.post(
                reverse('accounts:access-sync'),
                {'email': 'clerk@bookstore.edu', 'action': 'add'},
                format='json',
            )

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'success': True}
        assert len(fake_access_client.puts) == 1

    def test_bad_action(self, admin_client, fake_access_client):
        with patch('apps.accounts.views.get_access_client', return_value=fake_access_client):
            response = admin_client.post(
                reverse('accounts:access-sync'),
                {'email': 'clerk@bookstore.edu', 'action': 'wipe'},
                format='json',
            )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_employee_forbidden(self, employee_client, fake_access_client):
        with patch('apps.accounts.views.get_access_client', return_value=fake_access_client):
            response = employee_client.post(
                reverse('accounts:access-sync'),
                {'email': 'clerk@bookstore.edu', 'action': 'add'},
                format='json',
            )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_upstream_failure(self, admin_client, fake_access_client):
        fake_access_client.put_group = MagicMock(side_effect=AccessSyncError('quota exceeded'))
        with patch('apps.accounts.views.get_access_client', return_value=fake_access_client):
            response = admin_client.post(
                reverse('accounts:access-sync'),
                {'email': 'clerk@bookstore.edu', 'action': 'add'},
                format='json',
            )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data['error'] == 'quota exceeded'
