"""
Asset Management System
Fixed asset register: categories, assets, documents, disposal and the
immutable audit trail
"""

import random
import string
import time
from uuid import uuid4

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

from CompanyManagement.models import Company, Department, Unit
from .depreciation import calculate_book_value, calculate_depreciation, depreciation_ratio
from .exceptions import AuditLogImmutableError
from utils.Asset.qr_utils import build_qr_payload


def generate_asset_code():
    """AST + last 6 digits of the current timestamp + 3 random characters"""
    timestamp = str(int(time.time() * 1000))[-6:]
    suffix = ''.join(random.choices(string.ascii_uppercase + string.digits, k=3))
    return f"AST{timestamp}{suffix}"


class AssetCategory(models.Model):
    """Asset Category Model - per company"""
    id = models.UUIDField(primary_key=True, default=uuid4, editable=False)
    company = models.ForeignKey(
        Company, on_delete=models.CASCADE,
        related_name='asset_categories',
        help_text="Company that owns this category"
    )

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('company', 'name')
        ordering = ['name']
        verbose_name = 'Asset Category'
        verbose_name_plural = 'Asset Categories'
        indexes = [
            models.Index(fields=['company', 'is_active'], name='ac_company_active_idx'),
        ]

    def __str__(self):
        return self.name


class Asset(models.Model):
    """Asset Model"""
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('maintenance', 'Under Maintenance'),
        ('inactive', 'Inactive'),
        ('disposed', 'Disposed'),
    ]

    LOCATION_TYPE_CHOICES = [
        ('rfid', 'RFID'),
        ('gps', 'GPS'),
        ('manual', 'Manual'),
    ]

    id = models.BigAutoField(primary_key=True)
    company = models.ForeignKey(
        Company, on_delete=models.CASCADE,
        related_name='assets',
        help_text="Tenant that owns this asset"
    )
    category = models.ForeignKey(
        AssetCategory, on_delete=models.PROTECT,
        null=True, blank=True,
        related_name='assets'
    )
    department = models.ForeignKey(
        Department, on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='assets'
    )
    unit = models.ForeignKey(
        Unit, on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='assets'
    )

    # Asset Identification
    code = models.CharField(max_length=100, help_text="Asset code, unique per company; generated when blank")
    name = models.CharField(max_length=255)
    serial_number = models.CharField(max_length=100, blank=True, null=True)
    description = models.TextField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')

    # Financial
    purchase_value = models.DecimalField(max_digits=14, decimal_places=2, validators=[MinValueValidator(0)])
    purchase_date = models.DateField()
    residual_value = models.DecimalField(
        max_digits=14, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    useful_life_years = models.PositiveIntegerField(default=5, validators=[MinValueValidator(1)])

    # Location / tracking
    location_type = models.CharField(max_length=10, choices=LOCATION_TYPE_CHOICES, default='manual')
    current_location = models.CharField(max_length=255, blank=True, null=True)
    latitude = models.DecimalField(
        max_digits=9, decimal_places=6, null=True, blank=True,
        validators=[MinValueValidator(-90), MaxValueValidator(90)]
    )
    longitude = models.DecimalField(
        max_digits=9, decimal_places=6, null=True, blank=True,
        validators=[MinValueValidator(-180), MaxValueValidator(180)]
    )
    rfid_id = models.CharField(max_length=100, blank=True, null=True)

    # Responsibility
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='assigned_assets'
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='created_assets'
    )

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('company', 'code')
        ordering = ['-created_at']
        indexes = [
            # Primary list query
            models.Index(fields=['company', 'is_active', 'created_at'], name='asset_co_act_created_idx'),
            models.Index(fields=['company', 'status'], name='asset_co_status_idx'),
            models.Index(fields=['company', 'category'], name='asset_co_cat_idx'),
            models.Index(fields=['company', 'department', 'unit'], name='asset_co_dept_unit_idx'),
            models.Index(fields=['company', 'code'], name='asset_co_code_idx'),
        ]

    def __str__(self):
        return f"{self.code} - {self.name}"

    def save(self, *args, **kwargs):
        if not self.code:
            code = generate_asset_code()
            while Asset.objects.filter(company_id=self.company_id, code=code).exists():
                code = generate_asset_code()
            self.code = code
        super().save(*args, **kwargs)

    @property
    def accumulated_depreciation(self):
        return calculate_depreciation(
            self.purchase_value, self.residual_value, self.useful_life_years, self.purchase_date
        )

    @property
    def book_value(self):
        return calculate_book_value(
            self.purchase_value, self.residual_value, self.useful_life_years, self.purchase_date
        )

    @property
    def depreciation_ratio(self):
        return depreciation_ratio(self.useful_life_years, self.purchase_date)

    @property
    def qr_payload(self):
        return build_qr_payload(self.code)


class AssetAuditLogQuerySet(models.QuerySet):
    """Bulk update/delete are blocked: audit rows are append-only"""

    def update(self, **kwargs):
        raise AuditLogImmutableError("Audit log entries cannot be modified")

    def delete(self):
        raise AuditLogImmutableError("Audit log entries cannot be deleted")


class AssetAuditLog(models.Model):
    """Immutable change record with before/after snapshots"""
    ACTION_CHOICES = [
        ('created', 'Created'),
        ('updated', 'Updated'),
        ('assigned_responsible', 'Assigned Responsible'),
        ('removed_responsible', 'Removed Responsible'),
        ('location_updated', 'Location Updated'),
        ('document_uploaded', 'Document Uploaded'),
        ('disposed', 'Disposed'),
        ('deleted', 'Deleted'),
    ]

    id = models.BigAutoField(primary_key=True)
    asset = models.ForeignKey(Asset, on_delete=models.CASCADE, related_name='audit_logs')
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='asset_audit_logs'
    )
    action = models.CharField(max_length=30, choices=ACTION_CHOICES)
    old_data = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    new_data = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = AssetAuditLogQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['asset', 'created_at'], name='audit_asset_created_idx'),
            models.Index(fields=['asset', 'action'], name='audit_asset_action_idx'),
        ]

    def __str__(self):
        return f"{self.asset_id} {self.action} @ {self.created_at}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise AuditLogImmutableError("Audit log entries cannot be modified")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise AuditLogImmutableError("Audit log entries cannot be deleted")


def asset_document_upload_path(instance, filename):
    return f"asset_documents/{instance.asset.company_id}/{instance.asset_id}/{uuid4().hex}_{filename}"


class AssetDocument(models.Model):
    """File attachment (invoice, manual, warranty...) linked to an asset"""
    DOCUMENT_TYPE_CHOICES = [
        ('invoice', 'Invoice'),
        ('manual', 'Manual'),
        ('warranty', 'Warranty'),
        ('other', 'Other'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid4, editable=False)
    asset = models.ForeignKey(Asset, on_delete=models.CASCADE, related_name='documents')
    name = models.CharField(max_length=255)
    document_type = models.CharField(max_length=20, choices=DOCUMENT_TYPE_CHOICES, default='other')
    file = models.FileField(upload_to=asset_document_upload_path)
    file_size = models.PositiveBigIntegerField(default=0)
    mime_type = models.CharField(max_length=100, blank=True, null=True)
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='uploaded_asset_documents'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return self.name


class AssetDisposal(models.Model):
    """Terminal lifecycle record - at most one per asset"""
    DISPOSAL_METHOD_CHOICES = [
        ('venda', 'Venda'),
        ('descarte', 'Descarte'),
        ('doacao', 'Doação'),
        ('reciclagem', 'Reciclagem'),
    ]

    id = models.BigAutoField(primary_key=True)
    asset = models.OneToOneField(Asset, on_delete=models.CASCADE, related_name='disposal')
    disposal_date = models.DateField()
    disposal_method = models.CharField(max_length=20, choices=DISPOSAL_METHOD_CHOICES)
    sale_value = models.DecimalField(
        max_digits=14, decimal_places=2, null=True, blank=True, validators=[MinValueValidator(0)]
    )
    buyer_info = models.TextField(blank=True, null=True)
    disposal_reason = models.TextField()
    environmental_compliance = models.BooleanField(default=False)
    certificate_url = models.URLField(max_length=500, blank=True, null=True)
    book_value_at_disposal = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    disposed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='asset_disposals'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-disposal_date']

    def __str__(self):
        return f"Disposal of {self.asset_id} ({self.disposal_method})"
