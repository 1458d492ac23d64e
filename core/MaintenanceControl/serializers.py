"""
Maintenance Management Serializers
"""

from django.utils import timezone
from rest_framework import serializers

from .models import AssetMaintenance, SparePart, AssetPart, MaintenancePart


class MaintenancePartSerializer(serializers.ModelSerializer):
    part_name = serializers.CharField(source='part.name', read_only=True)
    part_number = serializers.CharField(source='part.part_number', read_only=True)
    total_cost = serializers.DecimalField(max_digits=16, decimal_places=2, read_only=True)
    cost_per_unit = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, min_value=0)
    quantity_used = serializers.IntegerField(min_value=1)

    class Meta:
        model = MaintenancePart
        fields = [
            'id', 'maintenance', 'part', 'part_name', 'part_number',
            'quantity_used', 'cost_per_unit', 'total_cost', 'created_at'
        ]
        read_only_fields = ['id', 'maintenance', 'created_at']

    def validate_part(self, value):
        company = self.context['company']
        if value.company_id != company.id or not value.is_active:
            raise serializers.ValidationError("Spare part does not belong to your company.")
        return value


class AssetMaintenanceSerializer(serializers.ModelSerializer):
    """Status is read-only here: changes go through the status endpoint"""
    asset_name = serializers.CharField(source='asset.name', read_only=True)
    asset_code = serializers.CharField(source='asset.code', read_only=True)
    unit_id = serializers.UUIDField(source='asset.unit_id', read_only=True, allow_null=True)
    parts_used = MaintenancePartSerializer(many=True, read_only=True)
    is_overdue = serializers.SerializerMethodField()

    class Meta:
        model = AssetMaintenance
        fields = [
            'id', 'asset', 'asset_name', 'asset_code', 'unit_id',
            'maintenance_type', 'description', 'cost', 'performed_by',
            'scheduled_date', 'completed_date', 'status', 'next_maintenance_date',
            'labor_hours', 'is_overdue', 'parts_used', 'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'status', 'completed_date', 'created_by', 'created_at', 'updated_at']

    def get_is_overdue(self, obj):
        return obj.status == 'agendada' and obj.scheduled_date < timezone.localdate()

    def validate_asset(self, value):
        company = self.context['company']
        if value.company_id != company.id or not value.is_active:
            raise serializers.ValidationError("Asset does not belong to your company.")
        if value.status == 'disposed':
            raise serializers.ValidationError("Disposed assets cannot receive maintenance.")
        if self.instance and self.instance.asset_id != value.id:
            raise serializers.ValidationError("The asset of a maintenance record cannot be changed.")
        return value

    def validate_description(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError("Description is required.")
        return value

    def validate(self, attrs):
        if self.instance and self.instance.is_terminal:
            raise serializers.ValidationError("Completed or cancelled maintenance cannot be edited.")

        scheduled_date = attrs.get('scheduled_date', getattr(self.instance, 'scheduled_date', None))
        next_date = attrs.get('next_maintenance_date', getattr(self.instance, 'next_maintenance_date', None))
        if scheduled_date and next_date and next_date < scheduled_date:
            raise serializers.ValidationError({
                'next_maintenance_date': "Next maintenance date cannot be before the scheduled date."
            })
        return attrs


class MaintenanceStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=AssetMaintenance.STATUS_CHOICES)
    completed_date = serializers.DateField(required=False)
    cost = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, min_value=0)


class SparePartSerializer(serializers.ModelSerializer):
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = SparePart
        fields = [
            'id', 'company', 'name', 'part_number', 'description', 'stock_quantity',
            'minimum_stock', 'unit_cost', 'supplier', 'is_low_stock', 'is_active',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'company', 'is_active', 'created_at', 'updated_at']
        validators = []

    def validate_part_number(self, value):
        value = value.strip()
        company = self.context['company']
        queryset = SparePart.objects.filter(company_id=company.id, part_number__iexact=value)
        if self.instance:
            queryset = queryset.exclude(id=self.instance.id)
        if queryset.exists():
            raise serializers.ValidationError("A spare part with this part number already exists.")
        return value


class AssetPartSerializer(serializers.ModelSerializer):
    asset_code = serializers.CharField(source='asset.code', read_only=True)
    part_name = serializers.CharField(source='part.name', read_only=True)
    part_number = serializers.CharField(source='part.part_number', read_only=True)
    stock_quantity = serializers.IntegerField(source='part.stock_quantity', read_only=True)

    class Meta:
        model = AssetPart
        fields = [
            'id', 'asset', 'asset_code', 'part', 'part_name', 'part_number',
            'quantity_required', 'stock_quantity', 'created_at'
        ]
        read_only_fields = ['id', 'asset', 'created_at']
        validators = []

    def validate_part(self, value):
        company = self.context['company']
        if value.company_id != company.id or not value.is_active:
            raise serializers.ValidationError("Spare part does not belong to your company.")
        return value

    def validate(self, attrs):
        asset = self.context['asset']
        part = attrs.get('part', getattr(self.instance, 'part', None))
        queryset = AssetPart.objects.filter(asset_id=asset.id, part_id=part.id)
        if self.instance:
            queryset = queryset.exclude(id=self.instance.id)
        if queryset.exists():
            raise serializers.ValidationError("This part is already linked to the asset.")
        return attrs

