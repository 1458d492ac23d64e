"""
Maintenance status workflow

    agendada -> em_andamento -> concluída
    agendada | em_andamento -> cancelada

concluída and cancelada are terminal.
"""

import logging

from django.db import transaction
from django.utils import timezone

from .exceptions import MaintenanceTransitionError
from .models import AssetMaintenance

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    'agendada': {'em_andamento', 'cancelada'},
    'em_andamento': {'concluída', 'cancelada'},
    'concluída': set(),
    'cancelada': set(),
}


def can_transition(current_status, new_status):
    return new_status in ALLOWED_TRANSITIONS.get(current_status, set())


@transaction.atomic
def transition_maintenance(maintenance, new_status, completed_date=None, cost=None):
    """
    Move a maintenance to new_status. Completing stamps completed_date with
    today unless one is supplied; a final cost may be recorded at the same time.
    """
    maintenance = AssetMaintenance.objects.select_for_update().get(pk=maintenance.pk)
    old_status = maintenance.status

    if new_status not in ALLOWED_TRANSITIONS:
        raise MaintenanceTransitionError(f"Unknown maintenance status '{new_status}'")
    if not can_transition(old_status, new_status):
        raise MaintenanceTransitionError(
            f"Cannot change maintenance status from '{old_status}' to '{new_status}'"
        )

    maintenance.status = new_status
    update_fields = ['status', 'updated_at']

    if new_status == 'concluída':
        maintenance.completed_date = completed_date or timezone.localdate()
        update_fields.append('completed_date')
        if cost is not None:
            maintenance.cost = cost
            update_fields.append('cost')

    maintenance.save(update_fields=update_fields)
    logger.info(f"Maintenance {maintenance.id}: {old_status} -> {new_status}")
    return maintenance
