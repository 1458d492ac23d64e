"""
Saved report prompts - private to the user who saved them
"""

from uuid import uuid4

from django.conf import settings
from django.db import models

from CompanyManagement.models import Company


class SavedReport(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE,
        related_name='saved_reports'
    )
    company = models.ForeignKey(Company, on_delete=models.CASCADE, related_name='saved_reports')
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    prompt = models.TextField()
    parameters = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'created_at'], name='report_user_created_idx'),
        ]

    def __str__(self):
        return self.name
