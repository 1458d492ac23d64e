"""
Asset Management Serializers
Tenant checks: every related row (category, department, unit, responsible
user) must belong to the company passed in serializer context.
"""

from django.conf import settings
from rest_framework import serializers

from AuthN.models import BaseUserModel, UserProfile
from .models import AssetCategory, Asset, AssetAuditLog, AssetDocument, AssetDisposal


class AssetCategorySerializer(serializers.ModelSerializer):
    """Asset Category Serializer"""
    assets_count = serializers.SerializerMethodField()

    class Meta:
        model = AssetCategory
        fields = ['id', 'company', 'name', 'description', 'is_active', 'assets_count', 'created_at', 'updated_at']
        read_only_fields = ['id', 'company', 'is_active', 'created_at', 'updated_at']
        # uniqueness per company is checked in validate_name
        validators = []

    def get_assets_count(self, obj):
        return obj.assets.filter(is_active=True).count()

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Category name is required.")
        company = self.context['company']
        queryset = AssetCategory.objects.filter(company_id=company.id, name__iexact=value, is_active=True)
        if self.instance:
            queryset = queryset.exclude(id=self.instance.id)
        if queryset.exists():
            raise serializers.ValidationError("A category with this name already exists.")
        return value


class AssetSerializer(serializers.ModelSerializer):
    """Asset Serializer - depreciation figures are computed, never stored"""
    category_name = serializers.CharField(source='category.name', read_only=True, default=None)
    department_name = serializers.CharField(source='department.name', read_only=True, default=None)
    unit_name = serializers.CharField(source='unit.name', read_only=True, default=None)
    assigned_to_name = serializers.SerializerMethodField()
    code = serializers.CharField(max_length=100, required=False, allow_blank=True)
    assigned_to = serializers.PrimaryKeyRelatedField(
        queryset=BaseUserModel.objects.all(), required=False, allow_null=True
    )
    accumulated_depreciation = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    book_value = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    qr_payload = serializers.CharField(read_only=True)

    class Meta:
        model = Asset
        fields = [
            'id', 'company', 'category', 'category_name',
            'department', 'department_name', 'unit', 'unit_name',
            'code', 'name', 'serial_number', 'description', 'status',
            'purchase_value', 'purchase_date', 'residual_value', 'useful_life_years',
            'accumulated_depreciation', 'book_value',
            'location_type', 'current_location', 'latitude', 'longitude', 'rfid_id',
            'assigned_to', 'assigned_to_name', 'created_by', 'qr_payload',
            'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'company', 'created_by', 'is_active', 'created_at', 'updated_at']
        validators = []

    def get_assigned_to_name(self, obj):
        if not obj.assigned_to_id:
            return None
        profile = getattr(obj.assigned_to, 'own_user_profile', None)
        return (profile.full_name if profile else None) or obj.assigned_to.email

    def _current(self, attrs, field):
        if field in attrs:
            return attrs[field]
        return getattr(self.instance, field, None) if self.instance else None

    def validate_useful_life_years(self, value):
        if value is None or value < 1:
            raise serializers.ValidationError("Useful life must be at least 1 year.")
        return value

    def validate_status(self, value):
        if value == 'disposed':
            raise serializers.ValidationError("Use the disposal endpoint to dispose an asset.")
        return value

    def validate_code(self, value):
        value = (value or '').strip()
        if not value:
            return value
        company = self.context['company']
        queryset = Asset.objects.filter(company_id=company.id, code=value)
        if self.instance:
            queryset = queryset.exclude(id=self.instance.id)
        if queryset.exists():
            raise serializers.ValidationError("An asset with this code already exists.")
        return value

    def validate(self, attrs):
        company = self.context['company']

        if self.instance and self.instance.status == 'disposed':
            raise serializers.ValidationError("Disposed assets cannot be modified.")

        category = attrs.get('category')
        if category and (category.company_id != company.id or not category.is_active):
            raise serializers.ValidationError({'category': "Category does not belong to your company."})

        department = self._current(attrs, 'department')
        unit = self._current(attrs, 'unit')
        if 'department' in attrs and department and department.company_id != company.id:
            raise serializers.ValidationError({'department': "Department does not belong to your company."})
        if unit:
            if unit.department.company_id != company.id:
                raise serializers.ValidationError({'unit': "Unit does not belong to your company."})
            if department is None:
                attrs['department'] = unit.department
            elif unit.department_id != department.id:
                raise serializers.ValidationError({'unit': "Unit does not belong to the selected department."})

        assigned_to = attrs.get('assigned_to')
        if assigned_to and not UserProfile.objects.filter(user_id=assigned_to.id, company_id=company.id).exists():
            raise serializers.ValidationError({'assigned_to': "Responsible user must belong to your company."})

        purchase_value = self._current(attrs, 'purchase_value')
        residual_value = self._current(attrs, 'residual_value')
        if purchase_value is not None and residual_value is not None and residual_value > purchase_value:
            raise serializers.ValidationError({'residual_value': "Residual value cannot exceed the purchase value."})

        latitude = self._current(attrs, 'latitude')
        longitude = self._current(attrs, 'longitude')
        if (latitude is None) != (longitude is None):
            raise serializers.ValidationError("Latitude and longitude must be provided together.")

        return attrs


class AssetMapSerializer(serializers.ModelSerializer):
    """Compact representation for map markers"""
    category_name = serializers.CharField(source='category.name', read_only=True, default=None)

    class Meta:
        model = Asset
        fields = [
            'id', 'code', 'name', 'status', 'category_name',
            'location_type', 'current_location', 'latitude', 'longitude', 'rfid_id', 'updated_at'
        ]
        read_only_fields = fields


class AssetLocationSerializer(serializers.ModelSerializer):
    """Location/tracking update"""

    class Meta:
        model = Asset
        fields = ['location_type', 'current_location', 'latitude', 'longitude', 'rfid_id']

    def validate(self, attrs):
        location_type = attrs.get('location_type', self.instance.location_type)
        latitude = attrs.get('latitude', self.instance.latitude)
        longitude = attrs.get('longitude', self.instance.longitude)
        rfid_id = attrs.get('rfid_id', self.instance.rfid_id)

        if (latitude is None) != (longitude is None):
            raise serializers.ValidationError("Latitude and longitude must be provided together.")
        if location_type == 'gps' and latitude is None:
            raise serializers.ValidationError("GPS tracking requires latitude and longitude.")
        if location_type == 'rfid' and not rfid_id:
            raise serializers.ValidationError({'rfid_id': "RFID tracking requires an RFID tag id."})
        return attrs


class AssetAuditLogSerializer(serializers.ModelSerializer):
    user_email = serializers.EmailField(source='user.email', read_only=True, default=None)

    class Meta:
        model = AssetAuditLog
        fields = ['id', 'asset', 'user', 'user_email', 'action', 'old_data', 'new_data', 'created_at']
        read_only_fields = fields


class AssetDocumentSerializer(serializers.ModelSerializer):
    uploaded_by_email = serializers.EmailField(source='uploaded_by.email', read_only=True, default=None)
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)

    class Meta:
        model = AssetDocument
        fields = [
            'id', 'asset', 'name', 'document_type', 'file', 'file_size', 'mime_type',
            'uploaded_by', 'uploaded_by_email', 'created_at'
        ]
        read_only_fields = ['id', 'asset', 'file_size', 'mime_type', 'uploaded_by', 'created_at']

    def validate_file(self, value):
        max_bytes = settings.ASSET_DOCUMENT_MAX_BYTES
        if value.size > max_bytes:
            raise serializers.ValidationError(
                f"File too large ({value.size} bytes). Maximum is {max_bytes // (1024 * 1024)} MB."
            )
        content_type = getattr(value, 'content_type', '') or ''
        allowed = settings.ASSET_DOCUMENT_ALLOWED_TYPES
        if not any(content_type.startswith(prefix) if prefix.endswith('/') else content_type == prefix
                   for prefix in allowed):
            raise serializers.ValidationError("Only images and PDF files are allowed.")
        return value

    def create(self, validated_data):
        uploaded = validated_data['file']
        validated_data['file_size'] = uploaded.size
        validated_data['mime_type'] = getattr(uploaded, 'content_type', None)
        if not validated_data.get('name'):
            validated_data['name'] = uploaded.name
        return super().create(validated_data)


class AssetDisposalSerializer(serializers.ModelSerializer):
    asset_code = serializers.CharField(source='asset.code', read_only=True)
    asset_name = serializers.CharField(source='asset.name', read_only=True)

    class Meta:
        model = AssetDisposal
        fields = [
            'id', 'asset', 'asset_code', 'asset_name', 'disposal_date', 'disposal_method',
            'sale_value', 'buyer_info', 'disposal_reason', 'environmental_compliance',
            'certificate_url', 'book_value_at_disposal', 'disposed_by', 'created_at'
        ]
        read_only_fields = ['id', 'asset', 'book_value_at_disposal', 'disposed_by', 'created_at']

    def validate_disposal_reason(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError("Disposal reason is required.")
        return value

    def validate(self, attrs):
        if attrs.get('disposal_method') == 'venda' and attrs.get('sale_value') is None:
            raise serializers.ValidationError({'sale_value': "Sale value is required when the asset is sold."})
        return attrs
