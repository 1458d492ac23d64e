from rest_framework import serializers

from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    type = serializers.CharField(source='notification_type', read_only=True)
    asset_code = serializers.CharField(source='asset.code', read_only=True, default=None)

    class Meta:
        model = Notification
        fields = [
            'id', 'notification_key', 'title', 'message', 'type', 'is_read',
            'asset', 'asset_code', 'maintenance', 'created_at', 'read_at'
        ]
        read_only_fields = fields
