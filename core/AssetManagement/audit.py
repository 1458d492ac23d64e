"""
Audit Log Writer
Appends before/after JSON snapshots whenever an asset is mutated
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from .models import AssetAuditLog

logger = logging.getLogger(__name__)

AUDITED_FIELDS = [
    'code', 'name', 'serial_number', 'description', 'status',
    'category_id', 'department_id', 'unit_id',
    'purchase_value', 'purchase_date', 'residual_value', 'useful_life_years',
    'location_type', 'current_location', 'latitude', 'longitude', 'rfid_id',
    'assigned_to_id', 'is_active',
]


def _json_value(value):
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    return value


def snapshot_asset(asset, fields=None):
    """JSON-safe dict of the audited fields of an asset"""
    return {field: _json_value(getattr(asset, field)) for field in (fields or AUDITED_FIELDS)}


def diff_snapshots(old_data, new_data):
    """Keep only the keys whose value changed; returns (old_changed, new_changed)"""
    changed = [key for key in new_data if old_data.get(key) != new_data.get(key)]
    return (
        {key: old_data.get(key) for key in changed},
        {key: new_data.get(key) for key in changed},
    )


def record_asset_audit(asset, user, action, old_data=None, new_data=None):
    """
    Append one audit row. `user` may be None for system actions.
    """
    entry = AssetAuditLog.objects.create(
        asset=asset,
        user=user if user is not None and user.is_authenticated else None,
        action=action,
        old_data=old_data,
        new_data=new_data,
    )
    logger.info(f"Audit: asset {asset.id} {action} by {entry.user_id}")
    return entry


def record_asset_update(asset, user, old_snapshot):
    """
    Compare against a snapshot taken before the change and write the audit
    rows: 'assigned_responsible'/'removed_responsible' for responsible changes,
    'updated' for the rest. Returns the list of rows written.
    """
    new_snapshot = snapshot_asset(asset)
    old_changed, new_changed = diff_snapshots(old_snapshot, new_snapshot)
    entries = []

    if 'assigned_to_id' in new_changed:
        previous = old_changed.pop('assigned_to_id')
        current = new_changed.pop('assigned_to_id')
        action = 'assigned_responsible' if current else 'removed_responsible'
        entries.append(record_asset_audit(
            asset, user, action,
            old_data={'assigned_to_id': previous},
            new_data={'assigned_to_id': current},
        ))

    if new_changed:
        entries.append(record_asset_audit(asset, user, 'updated', old_data=old_changed, new_data=new_changed))

    return entries
