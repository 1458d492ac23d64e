"""
Authentication Models
Custom user with a company role, plus the per-user profile that links
the user to a Company, Department and Unit
"""

from uuid import uuid4

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


class BaseUserModelManager(BaseUserManager):
    """Manager for BaseUserModel - email is the login identifier"""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("Email is required")
        email = self.normalize_email(email)
        extra_fields.setdefault('username', email.split('@')[0])
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('role', 'admin')
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        return self.create_user(email, password, **extra_fields)


class BaseUserModel(AbstractBaseUser, PermissionsMixin):
    """User account. Role is scoped to the user's company."""
    ROLE_CHOICES = [
        ('admin', 'Admin'),
        ('manager', 'Manager'),
        ('user', 'User'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid4, editable=False)
    email = models.EmailField(unique=True)
    username = models.CharField(max_length=150, unique=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='user')

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    date_joined = models.DateTimeField(default=timezone.now)

    objects = BaseUserModelManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    class Meta:
        ordering = ['email']
        indexes = [
            models.Index(fields=['role', 'is_active'], name='user_role_active_idx'),
        ]

    def __str__(self):
        return self.email


class UserProfile(models.Model):
    """
    Profile of a user inside a company.
    Department must belong to the company, unit must belong to the department.
    """
    id = models.BigAutoField(primary_key=True)
    user = models.OneToOneField(
        BaseUserModel, on_delete=models.CASCADE,
        related_name='own_user_profile'
    )
    company = models.ForeignKey(
        'CompanyManagement.Company', on_delete=models.CASCADE,
        null=True, blank=True,
        related_name='profiles',
        help_text="Tenant this user belongs to"
    )
    department = models.ForeignKey(
        'CompanyManagement.Department', on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='profiles'
    )
    unit = models.ForeignKey(
        'CompanyManagement.Unit', on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='profiles'
    )
    full_name = models.CharField(max_length=255, blank=True, null=True)
    avatar_url = models.URLField(max_length=500, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['full_name']
        indexes = [
            models.Index(fields=['company', 'department'], name='profile_company_dept_idx'),
        ]

    def __str__(self):
        return self.full_name or self.user.email

    def clean(self):
        if self.department_id and self.department.company_id != self.company_id:
            raise ValidationError("Department must belong to the user's company")
        if self.unit_id:
            if not self.department_id:
                raise ValidationError("A unit requires a department")
            if self.unit.department_id != self.department_id:
                raise ValidationError("Unit must belong to the selected department")

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)
