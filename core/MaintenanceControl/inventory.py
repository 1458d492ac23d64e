"""
Spare parts stock movements
"""

import logging

from django.db import transaction

from .exceptions import InsufficientStockError, MaintenanceLockedError
from .models import AssetMaintenance, MaintenancePart, SparePart

logger = logging.getLogger(__name__)


@transaction.atomic
def consume_part(maintenance, part, quantity, cost_per_unit=None):
    """
    Record a part used by a maintenance and take it out of stock.
    cost_per_unit defaults to the part's current unit_cost.
    """
    maintenance = AssetMaintenance.objects.select_for_update().get(pk=maintenance.pk)
    if maintenance.is_terminal:
        raise MaintenanceLockedError("Parts cannot be added to a completed or cancelled maintenance")

    part = SparePart.objects.select_for_update().get(pk=part.pk)
    if quantity > part.stock_quantity:
        raise InsufficientStockError(
            f"Insufficient stock for {part.part_number}: requested {quantity}, available {part.stock_quantity}"
        )

    part.stock_quantity -= quantity
    part.save(update_fields=['stock_quantity', 'updated_at'])

    line = MaintenancePart.objects.create(
        maintenance=maintenance,
        part=part,
        quantity_used=quantity,
        cost_per_unit=part.unit_cost if cost_per_unit is None else cost_per_unit,
    )
    logger.info(f"Maintenance {maintenance.id} consumed {quantity} x {part.part_number}; stock now {part.stock_quantity}")
    return line


@transaction.atomic
def release_part(line):
    """Delete a consumption line and put the quantity back in stock"""
    maintenance = AssetMaintenance.objects.select_for_update().get(pk=line.maintenance_id)
    if maintenance.is_terminal:
        raise MaintenanceLockedError("Parts of a completed or cancelled maintenance cannot be removed")

    return _restore_line(line)


@transaction.atomic
def return_parts_to_stock(maintenance):
    """Put back every part of a maintenance that is about to be deleted"""
    for line in maintenance.parts_used.all():
        _restore_line(line)


def _restore_line(line):
    part = SparePart.objects.select_for_update().get(pk=line.part_id)
    part.stock_quantity += line.quantity_used
    part.save(update_fields=['stock_quantity', 'updated_at'])
    line.delete()
    logger.info(f"Returned {line.quantity_used} x {part.part_number} to stock; stock now {part.stock_quantity}")
    return part
