"""
Asset Management Admin
"""

from django.contrib import admin
from .models import AssetCategory, Asset, AssetAuditLog, AssetDocument, AssetDisposal


@admin.register(AssetCategory)
class AssetCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'company', 'is_active', 'created_at']
    list_filter = ['is_active', 'company']
    search_fields = ['name']
    readonly_fields = ['id', 'created_at', 'updated_at']


@admin.register(Asset)
class AssetAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'company', 'category', 'status', 'purchase_value', 'is_active']
    list_filter = ['status', 'location_type', 'is_active', 'company']
    search_fields = ['code', 'name', 'serial_number']
    readonly_fields = ['id', 'created_at', 'updated_at']


@admin.register(AssetAuditLog)
class AssetAuditLogAdmin(admin.ModelAdmin):
    list_display = ['asset', 'action', 'user', 'created_at']
    list_filter = ['action']
    readonly_fields = ['asset', 'user', 'action', 'old_data', 'new_data', 'created_at']

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(AssetDocument)
class AssetDocumentAdmin(admin.ModelAdmin):
    list_display = ['name', 'asset', 'document_type', 'file_size', 'created_at']
    list_filter = ['document_type']


@admin.register(AssetDisposal)
class AssetDisposalAdmin(admin.ModelAdmin):
    list_display = ['asset', 'disposal_method', 'disposal_date', 'sale_value', 'book_value_at_disposal']
    list_filter = ['disposal_method']
