from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password

from .models import User, StaffRole


class StaffSerializer(serializers.ModelSerializer):
    """Staff member as shown on the staff management screen."""

    display_name = serializers.CharField(source='get_display_name', read_only=True)
    invited_by_email = serializers.EmailField(source='invited_by.email', read_only=True, default=None)

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'full_name',
            'display_name',
            'role',
            'status',
            'is_active',
            'invited_by_email',
            'invited_at',
            'registered_at',
            'last_login',
        ]
        read_only_fields = fields


class StaffLoginSerializer(serializers.Serializer):
    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class StaffRegistrationSerializer(serializers.Serializer):
    """Completes a pending invitation by choosing a password."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )

    def validate(self, attrs):
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match'
            })
        return attrs


class StaffInviteSerializer(serializers.Serializer):
    email = serializers.EmailField(required=True)
    full_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default='')
    role = serializers.ChoiceField(choices=StaffRole.choices, default=StaffRole.EMPLOYEE)


class InviteEmailSerializer(serializers.Serializer):
    """
    Raw invitation email payload.

    Validation of name/email format happens in the service so that the
    proxy answers with a single {'error': ...} message.
    """

    to_name = serializers.JSONField(required=False, default=None)
    to_email = serializers.JSONField(required=False, default=None)
    invite_link = serializers.CharField(required=False, allow_blank=True, default='')


class AccessSyncSerializer(serializers.Serializer):
    email = serializers.CharField(required=False, allow_blank=True, default='')
    action = serializers.CharField(required=False, allow_blank=True, default='')


class PasswordResetRequestSerializer(serializers.Serializer):
    email = serializers.EmailField(required=True)


class PasswordResetConfirmSerializer(serializers.Serializer):
    uid = serializers.CharField(required=True)
    token = serializers.CharField(required=True)
    new_password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    new_password_confirm = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )

    def validate(self, attrs):
        if attrs['new_password'] != attrs['new_password_confirm']:
            raise serializers.ValidationError({
                'new_password_confirm': 'Passwords do not match'
            })
        return attrs


class PasswordChangeSerializer(serializers.Serializer):
    """Password change for a signed-in staff member."""

    current_password = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )
    new_password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    new_password_confirm = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )

    def validate(self, attrs):
        if attrs['new_password'] != attrs['new_password_confirm']:
            raise serializers.ValidationError({
                'new_password_confirm': 'Passwords do not match'
            })
        return attrs
