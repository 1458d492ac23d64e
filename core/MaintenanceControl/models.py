"""
Maintenance Management System
Preventive/corrective maintenance records, spare parts inventory and parts
consumption per maintenance
"""

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from AssetManagement.models import Asset
from CompanyManagement.models import Company


class AssetMaintenance(models.Model):
    """Maintenance record of an asset - status follows the maintenance workflow"""
    TYPE_CHOICES = [
        ('preventiva', 'Preventiva'),
        ('corretiva', 'Corretiva'),
        ('emergencial', 'Emergencial'),
    ]

    STATUS_CHOICES = [
        ('agendada', 'Agendada'),
        ('em_andamento', 'Em andamento'),
        ('concluída', 'Concluída'),
        ('cancelada', 'Cancelada'),
    ]

    TERMINAL_STATUSES = ('concluída', 'cancelada')

    id = models.BigAutoField(primary_key=True)
    asset = models.ForeignKey(
        Asset, on_delete=models.CASCADE,
        related_name='maintenances',
        help_text="Asset under maintenance; tenant comes from asset.company"
    )
    maintenance_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='preventiva')
    description = models.TextField()
    cost = models.DecimalField(
        max_digits=14, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    performed_by = models.CharField(max_length=255, blank=True, null=True, help_text="Technician or supplier")
    scheduled_date = models.DateField()
    completed_date = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='agendada')
    next_maintenance_date = models.DateField(null=True, blank=True)
    labor_hours = models.DecimalField(
        max_digits=8, decimal_places=2, null=True, blank=True, validators=[MinValueValidator(0)]
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='created_maintenances'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-scheduled_date', '-id']
        indexes = [
            models.Index(fields=['asset', 'status'], name='maint_asset_status_idx'),
            models.Index(fields=['status', 'scheduled_date'], name='maint_status_sched_idx'),
            models.Index(fields=['completed_date'], name='maint_completed_idx'),
        ]

    def __str__(self):
        return f"{self.get_maintenance_type_display()} - {self.asset_id} ({self.status})"

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES


class SparePart(models.Model):
    """Spare parts inventory - per company"""
    id = models.BigAutoField(primary_key=True)
    company = models.ForeignKey(
        Company, on_delete=models.CASCADE,
        related_name='spare_parts'
    )
    name = models.CharField(max_length=255)
    part_number = models.CharField(max_length=100)
    description = models.TextField(blank=True, null=True)
    stock_quantity = models.PositiveIntegerField(default=0)
    minimum_stock = models.PositiveIntegerField(default=0, help_text="Low stock threshold")
    unit_cost = models.DecimalField(
        max_digits=14, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    supplier = models.CharField(max_length=255, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('company', 'part_number')
        ordering = ['name']
        indexes = [
            models.Index(fields=['company', 'is_active'], name='part_company_active_idx'),
        ]

    def __str__(self):
        return f"{self.part_number} - {self.name}"

    @property
    def is_low_stock(self):
        return self.stock_quantity <= self.minimum_stock


class AssetPart(models.Model):
    """Bill of materials: which parts an asset uses"""
    id = models.BigAutoField(primary_key=True)
    asset = models.ForeignKey(Asset, on_delete=models.CASCADE, related_name='asset_parts')
    part = models.ForeignKey(SparePart, on_delete=models.CASCADE, related_name='asset_links')
    quantity_required = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('asset', 'part')

    def __str__(self):
        return f"{self.asset_id} uses {self.quantity_required} x {self.part_id}"


class MaintenancePart(models.Model):
    """Part consumed by a maintenance - stock is decremented when recorded"""
    id = models.BigAutoField(primary_key=True)
    maintenance = models.ForeignKey(AssetMaintenance, on_delete=models.CASCADE, related_name='parts_used')
    part = models.ForeignKey(SparePart, on_delete=models.PROTECT, related_name='consumptions')
    quantity_used = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    cost_per_unit = models.DecimalField(
        max_digits=14, decimal_places=2, validators=[MinValueValidator(0)]
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at']

    def __str__(self):
        return f"{self.quantity_used} x {self.part_id} on maintenance {self.maintenance_id}"

    @property
    def total_cost(self):
        return self.cost_per_unit * self.quantity_used
