from django.contrib import admin
from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['notification_key', 'user', 'company', 'notification_type', 'is_read', 'is_dismissed', 'created_at']
    list_filter = ['notification_type', 'is_read', 'is_dismissed']
    search_fields = ['notification_key', 'title', 'user__email']
