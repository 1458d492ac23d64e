"""
Company Management Admin
"""

from django.contrib import admin
from .models import Company, Department, Unit


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ['name', 'timezone', 'is_active', 'created_at']
    list_filter = ['is_active']
    search_fields = ['name']
    readonly_fields = ['id', 'created_at', 'updated_at']


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ['name', 'company', 'manager', 'budget']
    list_filter = ['company']
    search_fields = ['name']
    readonly_fields = ['id', 'created_at', 'updated_at']


@admin.register(Unit)
class UnitAdmin(admin.ModelAdmin):
    list_display = ['name', 'department']
    list_filter = ['department__company']
    search_fields = ['name', 'department__name']
    readonly_fields = ['id', 'created_at', 'updated_at']
