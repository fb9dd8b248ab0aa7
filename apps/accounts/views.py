from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema

from .permissions import IsActiveStaff, IsAdminStaff
from .serializers import (
    StaffSerializer,
    StaffLoginSerializer,
    StaffRegistrationSerializer,
    StaffInviteSerializer,
    InviteEmailSerializer,
    AccessSyncSerializer,
    PasswordResetRequestSerializer,
    PasswordResetConfirmSerializer,
    PasswordChangeSerializer,
)
from .services import (
    authenticate_staff,
    register_staff,
    invite_staff,
    get_staff_list,
    toggle_staff_role,
    revoke_staff_access,
    restore_staff_access,
    send_invite_email,
    request_password_reset,
    confirm_password_reset,
    change_password,
    sync_access_allowlist,
    CloudflareAccessClient,
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


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = StaffSerializer()
    tokens = TokensResponseSerializer()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class SuccessResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


def _auth_response(user, message, status_code=status.HTTP_200_OK):
    refresh = RefreshToken.for_user(user)
    return Response({
        'message': message,
        'user': StaffSerializer(user).data,
        'tokens': {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
        }
    }, status=status_code)


def get_access_client():
    """Build the Cloudflare Access client used by the allow-list proxy."""
    return CloudflareAccessClient.from_settings()


@extend_schema(
    request=StaffRegistrationSerializer,
    responses={
        201: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Complete a pending invitation by setting a password.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Register an invited staff member."""
    serializer = StaffRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = register_staff(
            email=serializer.validated_data['email'],
            password=serializer.validated_data['password'],
        )
    except NotInvitedError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except AlreadyRegisteredError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return _auth_response(user, 'Registration successful', status.HTTP_201_CREATED)


@extend_schema(
    request=StaffLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate with email and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with email and password."""
    serializer = StaffLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = authenticate_staff(
            email=serializer.validated_data['email'],
            password=serializer.validated_data['password'],
        )
    except InvalidCredentialsError as e:
        return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
    except (InactiveAccountError, RegistrationIncompleteError) as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return _auth_response(user, 'Login successful')


@extend_schema(
    responses={200: StaffSerializer},
    description="Get the current staff member's profile and role.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsActiveStaff])
def get_current_user(request):
    return Response(StaffSerializer(request.user).data)


@extend_schema(
    request=PasswordResetRequestSerializer,
    responses={200: MessageResponseSerializer, 500: ErrorResponseSerializer},
    description="Email a password reset link. Answers the same whether or not the account exists.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def password_reset_request(request):
    serializer = PasswordResetRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        request_password_reset(email=serializer.validated_data['email'])
    except EmailDispatchError:
        return Response(
            {'error': 'Internal server error while dispatching email.'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return Response({'message': 'If the account exists, a password reset link has been sent.'})


@extend_schema(
    request=PasswordResetConfirmSerializer,
    responses={200: MessageResponseSerializer, 400: ErrorResponseSerializer},
    description="Set a new password using the uid and token from a reset link.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def password_reset_confirm(request):
    serializer = PasswordResetConfirmSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        confirm_password_reset(
            uid=serializer.validated_data['uid'],
            token=serializer.validated_data['token'],
            new_password=serializer.validated_data['new_password'],
        )
    except InvalidResetTokenError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({'message': 'Password reset successful'})


@extend_schema(
    request=PasswordChangeSerializer,
    responses={200: MessageResponseSerializer, 400: ErrorResponseSerializer},
    description="Change the signed-in staff member's password.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsActiveStaff])
def password_change(request):
    serializer = PasswordChangeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        change_password(
            user=request.user,
            current_password=serializer.validated_data['current_password'],
            new_password=serializer.validated_data['new_password'],
        )
    except InvalidCredentialsError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({'message': 'Password updated'})


@extend_schema(
    responses={200: StaffSerializer(many=True)},
    description="List every whitelisted staff member (admin only).",
    tags=['staff'],
)
@api_view(['GET'])
@permission_classes([IsAdminStaff])
def staff_list(request):
    return Response(StaffSerializer(get_staff_list(), many=True).data)


@extend_schema(
    request=StaffInviteSerializer,
    responses={
        201: StaffSerializer,
        403: ErrorResponseSerializer,
        409: ErrorResponseSerializer,
    },
    description="Add an email to the staff whitelist in PENDING state.",
    tags=['staff'],
)
@api_view(['POST'])
@permission_classes([IsAdminStaff])
def invite(request):
    serializer = StaffInviteSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = invite_staff(invited_by=request.user, **serializer.validated_data)
    except InsufficientPermissionsError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except StaffAlreadyExistsError as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

    return Response(StaffSerializer(user).data, status=status.HTTP_201_CREATED)


def _manage_staff(service, request, staff_id):
    try:
        target = service(staff_id=staff_id, actor=request.user)
    except StaffNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except InsufficientPermissionsError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    return Response(StaffSerializer(target).data)


@extend_schema(
    request=None,
    responses={200: StaffSerializer, 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    description="Swap a staff member between ADMIN and EMPLOYEE.",
    tags=['staff'],
)
@api_view(['POST'])
@permission_classes([IsAdminStaff])
def toggle_role(request, staff_id):
    return _manage_staff(toggle_staff_role, request, staff_id)


@extend_schema(
    request=None,
    responses={200: StaffSerializer, 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    description="Revoke a staff member's access.",
    tags=['staff'],
)
@api_view(['POST'])
@permission_classes([IsAdminStaff])
def revoke_access(request, staff_id):
    return _manage_staff(revoke_staff_access, request, staff_id)


@extend_schema(
    request=None,
    responses={200: StaffSerializer, 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    description="Restore a revoked staff member's access.",
    tags=['staff'],
)
@api_view(['POST'])
@permission_classes([IsAdminStaff])
def restore_access(request, staff_id):
    return _manage_staff(restore_staff_access, request, staff_id)


@extend_schema(
    request=InviteEmailSerializer,
    responses={
        200: SuccessResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
        500: ErrorResponseSerializer,
    },
    description="Send the invitation email to a pending staff member.",
    tags=['staff'],
)
@api_view(['POST'])
@permission_classes([IsActiveStaff])
def send_invite_email_view(request):
    serializer = InviteEmailSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        send_invite_email(caller=request.user, **serializer.validated_data)
    except (InsufficientPermissionsError, InviteTargetNotPendingError) as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except InvalidInviteRequestError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except EmailDispatchError:
        return Response(
            {'error': 'Internal server error while dispatching email.'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return Response({'success': True})


@extend_schema(
    request=AccessSyncSerializer,
    responses={
        200: SuccessResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
        500: ErrorResponseSerializer,
    },
    description="Add or remove a staff email on the Cloudflare Access allow-list.",
    tags=['staff'],
)
@api_view(['POST'])
@permission_classes([IsActiveStaff])
def access_sync(request):
    serializer = AccessSyncSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        sync_access_allowlist(
            email=serializer.validated_data['email'],
            action=serializer.validated_data['action'],
            caller=request.user,
            client=get_access_client(),
        )
    except InsufficientPermissionsError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except InvalidInviteRequestError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except AccessSyncError as e:
        return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({'success': True})
