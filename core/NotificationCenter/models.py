"""
In-app notifications, one row per user and notification key
"""

from django.conf import settings
from django.db import models

from AssetManagement.models import Asset
from CompanyManagement.models import Company
from MaintenanceControl.models import AssetMaintenance


class Notification(models.Model):
    TYPE_CHOICES = [
        ('warning', 'Warning'),
        ('info', 'Info'),
    ]

    id = models.BigAutoField(primary_key=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE,
        related_name='notifications'
    )
    company = models.ForeignKey(Company, on_delete=models.CASCADE, related_name='notifications')
    notification_key = models.CharField(
        max_length=100,
        help_text="Dedupe key, e.g. overdue-<maintenance id> or depreciation-<asset id>"
    )
    title = models.CharField(max_length=255)
    message = models.TextField()
    notification_type = models.CharField(max_length=10, choices=TYPE_CHOICES, default='info')
    is_read = models.BooleanField(default=False)
    is_dismissed = models.BooleanField(default=False)
    asset = models.ForeignKey(
        Asset, on_delete=models.CASCADE,
        null=True, blank=True,
        related_name='notifications'
    )
    maintenance = models.ForeignKey(
        AssetMaintenance, on_delete=models.CASCADE,
        null=True, blank=True,
        related_name='notifications'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    read_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        unique_together = ('user', 'notification_key')
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['user', 'is_dismissed', 'is_read'], name='notif_user_state_idx'),
        ]

    def __str__(self):
        return f"{self.notification_key} -> {self.user_id}"
