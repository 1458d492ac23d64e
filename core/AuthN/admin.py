from django.contrib import admin

from .models import BaseUserModel, UserProfile


@admin.register(BaseUserModel)
class BaseUserModelAdmin(admin.ModelAdmin):
    list_display = ['email', 'username', 'role', 'is_active', 'is_staff', 'date_joined']
    list_filter = ['role', 'is_active', 'is_staff']
    search_fields = ['email', 'username']
    exclude = ['password']
    readonly_fields = ['id', 'last_login', 'date_joined']


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'user', 'company', 'department', 'unit']
    list_filter = ['company']
    search_fields = ['full_name', 'user__email']
    readonly_fields = ['created_at', 'updated_at']
