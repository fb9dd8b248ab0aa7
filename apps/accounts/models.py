from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.utils import timezone
import uuid


class StaffRole(models.TextChoices):
    EMPLOYEE = 'EMPLOYEE', 'Employee'
    ADMIN = 'ADMIN', 'Admin'
    SUPER_ADMIN = 'SUPER_ADMIN', 'Super Admin'


class StaffStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    REGISTERED = 'REGISTERED', 'Registered'


ADMIN_ROLES = (StaffRole.ADMIN, StaffRole.SUPER_ADMIN)


class UserManager(BaseUserManager):
    """Manager for email-based staff accounts."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')

        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', StaffRole.SUPER_ADMIN)
        extra_fields.setdefault('status', StaffStatus.REGISTERED)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Bookstore staff member.

    A row is created when an admin invites an email (status PENDING, no usable
    password). Registration sets the password and flips status to REGISTERED.
    The row doubles as the authorization whitelist: role decides what the
    member may do, is_active=False revokes access entirely.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255, db_index=True)
    full_name = models.CharField(max_length=150, blank=True)

    # Authorization
    role = models.CharField(max_length=20, choices=StaffRole.choices, default=StaffRole.EMPLOYEE)
    status = models.CharField(max_length=20, choices=StaffStatus.choices, default=StaffStatus.PENDING)
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    # Invitation trail
    invited_by = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='invited_staff'
    )
    invited_at = models.DateTimeField(default=timezone.now)
    registered_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    last_login = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'authorized_users'
        indexes = [
            models.Index(fields=['role', 'status'], name='staff_role_status_idx'),
            models.Index(fields=['created_at'], name='staff_created_at_idx'),
        ]
        ordering = ['full_name', 'email']

    def __str__(self):
        return self.email

    def get_display_name(self):
        """Return full name or email."""
        return self.full_name or self.email

    @property
    def is_admin(self):
        return self.role in ADMIN_ROLES

    @property
    def is_registered(self):
        return self.status == StaffStatus.REGISTERED

    def mark_registered(self, password):
        self.set_password(password)
        self.status = StaffStatus.REGISTERED
        self.registered_at = timezone.now()
        self.save(update_fields=['password', 'status', 'registered_at'])
