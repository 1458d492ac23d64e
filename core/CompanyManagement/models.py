"""
Company Management Models
Company is the tenant boundary: Company -> Departments -> Units
"""
from uuid import uuid4

from django.core.validators import MinValueValidator
from django.db import models


class Company(models.Model):
    """Tenant. Every asset, maintenance and part row is scoped to one company."""
    id = models.UUIDField(primary_key=True, default=uuid4, editable=False)
    name = models.CharField(max_length=255, unique=True, help_text="Company name")
    description = models.TextField(blank=True, null=True)
    timezone = models.CharField(max_length=64, default='UTC', help_text="IANA timezone used for date based checks")
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        verbose_name_plural = 'Companies'

    def __str__(self):
        return self.name


class Department(models.Model):
    """Department inside a company"""
    id = models.UUIDField(primary_key=True, default=uuid4, editable=False)
    company = models.ForeignKey(
        Company, on_delete=models.CASCADE,
        related_name='departments'
    )
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    manager = models.ForeignKey(
        'AuthN.BaseUserModel', on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='managed_departments',
        help_text="Department manager (must belong to the same company)"
    )
    budget = models.DecimalField(
        max_digits=14, decimal_places=2,
        null=True, blank=True,
        validators=[MinValueValidator(0)]
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('company', 'name')
        ordering = ['name']
        indexes = [
            models.Index(fields=['company', 'name'], name='dept_company_name_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.company.name})"


class Unit(models.Model):
    """Unit inside a department"""
    id = models.UUIDField(primary_key=True, default=uuid4, editable=False)
    department = models.ForeignKey(
        Department, on_delete=models.CASCADE,
        related_name='units'
    )
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('department', 'name')
        ordering = ['name']

    def __str__(self):
        return self.name
