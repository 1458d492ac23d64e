"""
Asset lifecycle operations that touch more than one row
"""

import logging

from django.db import transaction

from .audit import record_asset_audit, snapshot_asset
from .depreciation import calculate_book_value
from .exceptions import AssetDisposalError
from .models import Asset, AssetDisposal

logger = logging.getLogger(__name__)


@transaction.atomic
def dispose_asset(asset, user, disposal_data):
    """
    Create the disposal record, mark the asset as disposed and write the
    audit row. The asset row is locked for the duration of the transaction.
    """
    asset = Asset.objects.select_for_update().get(pk=asset.pk)

    if not asset.is_active:
        raise AssetDisposalError("Deleted assets cannot be disposed")
    if asset.status == 'disposed' or AssetDisposal.objects.filter(asset_id=asset.id).exists():
        raise AssetDisposalError("Asset is already disposed")

    old_status = asset.status
    book_value = calculate_book_value(
        asset.purchase_value, asset.residual_value, asset.useful_life_years,
        asset.purchase_date, disposal_data['disposal_date']
    )

    disposal = AssetDisposal.objects.create(
        asset=asset,
        disposed_by=user,
        book_value_at_disposal=book_value,
        **disposal_data
    )

    asset.status = 'disposed'
    asset.save(update_fields=['status', 'updated_at'])

    record_asset_audit(
        asset, user, 'disposed',
        old_data={'status': old_status},
        new_data={
            'status': 'disposed',
            'disposal_id': disposal.id,
            'disposal_method': disposal.disposal_method,
            'disposal_date': disposal.disposal_date.isoformat(),
            'sale_value': str(disposal.sale_value) if disposal.sale_value is not None else None,
            'book_value_at_disposal': str(book_value),
        },
    )

    logger.info(f"Asset {asset.id} disposed via {disposal.disposal_method} by {getattr(user, 'id', None)}")
    return disposal


@transaction.atomic
def soft_delete_asset(asset, user):
    """is_active=False plus a 'deleted' audit row"""
    old_snapshot = snapshot_asset(asset)
    Asset.objects.filter(id=asset.id).update(is_active=False)
    asset.is_active = False
    record_asset_audit(asset, user, 'deleted', old_data=old_snapshot, new_data={'is_active': False})
