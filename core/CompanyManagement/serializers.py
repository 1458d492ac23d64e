"""
Company Management Serializers
"""
import pytz
from rest_framework import serializers

from AuthN.models import UserProfile
from .models import Company, Department, Unit


class CompanySerializer(serializers.ModelSerializer):
    """Company read/update serializer"""
    departments_count = serializers.IntegerField(source='departments.count', read_only=True)

    class Meta:
        model = Company
        fields = ['id', 'name', 'description', 'timezone', 'is_active', 'departments_count', 'created_at', 'updated_at']
        read_only_fields = ['id', 'is_active', 'created_at', 'updated_at']

    def validate_timezone(self, value):
        if value not in pytz.all_timezones_set:
            raise serializers.ValidationError(f"Unknown timezone: {value}")
        return value


class DepartmentSerializer(serializers.ModelSerializer):
    manager_name = serializers.SerializerMethodField()
    units_count = serializers.IntegerField(source='units.count', read_only=True)

    class Meta:
        model = Department
        fields = [
            'id', 'company', 'name', 'description', 'manager', 'manager_name',
            'budget', 'units_count', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'company', 'created_at', 'updated_at']
        validators = []

    def get_manager_name(self, obj):
        if not obj.manager_id:
            return None
        profile = getattr(obj.manager, 'own_user_profile', None)
        return (profile.full_name if profile else None) or obj.manager.email

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Department name is required.")

        company = self.context['company']
        queryset = Department.objects.filter(company_id=company.id, name__iexact=value)
        if self.instance:
            queryset = queryset.exclude(id=self.instance.id)
        if queryset.exists():
            raise serializers.ValidationError("A department with this name already exists in your company.")
        return value

    def validate_manager(self, value):
        if value is None:
            return value
        company = self.context['company']
        if not UserProfile.objects.filter(user_id=value.id, company_id=company.id).exists():
            raise serializers.ValidationError("Manager must belong to your company.")
        return value


class UnitSerializer(serializers.ModelSerializer):
    department_name = serializers.CharField(source='department.name', read_only=True)

    class Meta:
        model = Unit
        fields = ['id', 'department', 'department_name', 'name', 'description', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_department(self, value):
        company = self.context['company']
        if value.company_id != company.id:
            raise serializers.ValidationError("Department does not belong to your company.")
        return value

    def validate(self, attrs):
        name = attrs.get('name', getattr(self.instance, 'name', None))
        department = attrs.get('department', getattr(self.instance, 'department', None))
        if name and department:
            queryset = Unit.objects.filter(department_id=department.id, name__iexact=name.strip())
            if self.instance:
                queryset = queryset.exclude(id=self.instance.id)
            if queryset.exists():
                raise serializers.ValidationError({'name': "A unit with this name already exists in this department."})
        return attrs
