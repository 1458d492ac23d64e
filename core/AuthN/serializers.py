from django.contrib.auth.password_validation import validate_password
from django.db import transaction
from rest_framework import serializers

from CompanyManagement.models import Company, Department, Unit
from CompanyManagement.utils import create_default_company_resources
from .models import BaseUserModel, UserProfile


class CustomUserSerializer(serializers.ModelSerializer):
    role = serializers.ChoiceField(choices=BaseUserModel.ROLE_CHOICES, required=False)
    password = serializers.CharField(write_only=True)

    class Meta:
        model = BaseUserModel
        fields = ['id', 'email', 'username', 'password', 'role']
        read_only_fields = ['id']
        extra_kwargs = {
            'email': {'required': True},
            'username': {'required': True},
        }

    def validate_email(self, value):
        """Validate email is unique"""
        value = (value or '').strip().lower()
        if not value:
            raise serializers.ValidationError("Email is required.")

        queryset = BaseUserModel.objects.filter(email__iexact=value)
        if self.instance:
            queryset = queryset.exclude(id=self.instance.id)
        if queryset.exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return value

    def validate_username(self, value):
        """Validate username is unique"""
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError("Username is required.")

        queryset = BaseUserModel.objects.filter(username=value)
        if self.instance:
            queryset = queryset.exclude(id=self.instance.id)
        if queryset.exists():
            raise serializers.ValidationError("A user with this username already exists.")
        return value

    def validate_password(self, value):
        validate_password(value)
        return value


# ==================== REGISTRATION SERIALIZERS ====================

class CompanyRegistrationSerializer(serializers.Serializer):
    """
    Registers a new tenant: creates the Company, its first admin user and
    the default asset categories in one transaction.
    """
    company_name = serializers.CharField(max_length=255)
    company_description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    timezone = serializers.CharField(max_length=64, required=False, default='UTC')
    full_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    user = CustomUserSerializer()

    def validate_company_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Company name is required.")
        if Company.objects.filter(name__iexact=value).exists():
            raise serializers.ValidationError("A company with this name already exists.")
        return value

    @transaction.atomic
    def create(self, validated_data):
        user_data = validated_data.pop('user')
        user_data['role'] = 'admin'

        company = Company.objects.create(
            name=validated_data['company_name'],
            description=validated_data.get('company_description'),
            timezone=validated_data.get('timezone') or 'UTC',
        )
        user = BaseUserModel.objects.create_user(**user_data)
        profile = UserProfile.objects.create(
            user=user,
            company=company,
            full_name=validated_data.get('full_name') or user.username,
        )

        create_default_company_resources(company)
        return profile


class UserRegistrationSerializer(serializers.ModelSerializer):
    """
    Registers a user inside the requesting admin's company.
    The company comes from serializer context, never from the payload.
    """
    user = CustomUserSerializer()

    class Meta:
        model = UserProfile
        fields = ['id', 'user', 'full_name', 'avatar_url', 'department', 'unit']
        read_only_fields = ['id']

    def validate(self, attrs):
        company = self.context['company']
        department = attrs.get('department')
        unit = attrs.get('unit')

        if department and department.company_id != company.id:
            raise serializers.ValidationError({'department': "Department does not belong to your company."})
        if unit:
            if not department:
                raise serializers.ValidationError({'unit': "A unit requires a department."})
            if unit.department_id != department.id:
                raise serializers.ValidationError({'unit': "Unit does not belong to the selected department."})
        return attrs

    @transaction.atomic
    def create(self, validated_data):
        user_data = validated_data.pop('user')
        user_data.setdefault('role', 'user')
        user = BaseUserModel.objects.create_user(**user_data)
        return UserProfile.objects.create(
            user=user,
            company=self.context['company'],
            **validated_data
        )


# ==================== READ / UPDATE SERIALIZERS ====================

class UserProfileReadSerializer(serializers.ModelSerializer):
    user_id = serializers.UUIDField(source='user.id', read_only=True)
    email = serializers.EmailField(source='user.email', read_only=True)
    username = serializers.CharField(source='user.username', read_only=True)
    role = serializers.CharField(source='user.role', read_only=True)
    is_active = serializers.BooleanField(source='user.is_active', read_only=True)
    company_name = serializers.CharField(source='company.name', read_only=True, default=None)
    department_name = serializers.CharField(source='department.name', read_only=True, default=None)
    unit_name = serializers.CharField(source='unit.name', read_only=True, default=None)

    class Meta:
        model = UserProfile
        fields = [
            'id', 'user_id', 'email', 'username', 'role', 'is_active',
            'full_name', 'avatar_url',
            'company', 'company_name', 'department', 'department_name', 'unit', 'unit_name',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class UserProfileUpdateSerializer(serializers.ModelSerializer):
    """
    Profile update. Role, department and unit are only writable by company
    admins; the view passes `is_admin` in context.
    """
    role = serializers.ChoiceField(choices=BaseUserModel.ROLE_CHOICES, required=False)
    department = serializers.PrimaryKeyRelatedField(
        queryset=Department.objects.all(), required=False, allow_null=True
    )
    unit = serializers.PrimaryKeyRelatedField(
        queryset=Unit.objects.all(), required=False, allow_null=True
    )

    class Meta:
        model = UserProfile
        fields = ['full_name', 'avatar_url', 'department', 'unit', 'role']

    def validate(self, attrs):
        is_admin = self.context.get('is_admin', False)
        restricted = {'role', 'department', 'unit'} & set(attrs.keys())
        if restricted and not is_admin:
            raise serializers.ValidationError(
                f"Only company admins can change: {', '.join(sorted(restricted))}"
            )

        company_id = self.instance.company_id
        department = attrs.get('department', self.instance.department)
        unit = attrs.get('unit', self.instance.unit)

        # Moving to another department drops a unit that no longer fits
        if 'department' in attrs and 'unit' not in attrs and unit and (
            department is None or unit.department_id != department.id
        ):
            attrs['unit'] = None
            unit = None

        if department and department.company_id != company_id:
            raise serializers.ValidationError({'department': "Department does not belong to your company."})
        if unit:
            if not department:
                raise serializers.ValidationError({'unit': "A unit requires a department."})
            if unit.department_id != department.id:
                raise serializers.ValidationError({'unit': "Unit does not belong to the selected department."})
        return attrs

    def update(self, instance, validated_data):
        role = validated_data.pop('role', None)
        if role and role != instance.user.role:
            instance.user.role = role
            instance.user.save(update_fields=['role'])
        return super().update(instance, validated_data)


class ChangePasswordSerializer(serializers.Serializer):
    old_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True)

    def validate_new_password(self, value):
        validate_password(value, user=self.context.get('user'))
        return value

    def validate(self, attrs):
        if attrs['old_password'] == attrs['new_password']:
            raise serializers.ValidationError("New password must be different from the old password.")
        return attrs
