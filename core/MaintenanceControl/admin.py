"""
Maintenance Management Admin
"""

from django.contrib import admin
from .models import AssetMaintenance, SparePart, AssetPart, MaintenancePart


class MaintenancePartInline(admin.TabularInline):
    model = MaintenancePart
    extra = 0


@admin.register(AssetMaintenance)
class AssetMaintenanceAdmin(admin.ModelAdmin):
    list_display = ['asset', 'maintenance_type', 'status', 'scheduled_date', 'completed_date', 'cost']
    list_filter = ['maintenance_type', 'status']
    search_fields = ['description', 'asset__code', 'asset__name']
    inlines = [MaintenancePartInline]


@admin.register(SparePart)
class SparePartAdmin(admin.ModelAdmin):
    list_display = ['part_number', 'name', 'company', 'stock_quantity', 'minimum_stock', 'unit_cost', 'is_active']
    list_filter = ['is_active', 'company']
    search_fields = ['part_number', 'name', 'supplier']


@admin.register(AssetPart)
class AssetPartAdmin(admin.ModelAdmin):
    list_display = ['asset', 'part', 'quantity_required']
