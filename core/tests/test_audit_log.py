import pytest

from AssetManagement.audit import record_asset_audit, record_asset_update, snapshot_asset
from AssetManagement.exceptions import AuditLogImmutableError
from AssetManagement.models import AssetAuditLog

pytestmark = pytest.mark.django_db


def test_existing_entry_cannot_be_saved_again(asset, admin_user):
    entry = record_asset_audit(asset, admin_user, 'created', new_data=snapshot_asset(asset))
    entry.action = 'updated'

    with pytest.raises(AuditLogImmutableError):
        entry.save()

    entry.refresh_from_db()
    assert entry.action == 'created'


def test_entries_cannot_be_deleted(asset, admin_user):
    entry = record_asset_audit(asset, admin_user, 'created')

    with pytest.raises(AuditLogImmutableError):
        entry.delete()
    with pytest.raises(AuditLogImmutableError):
        AssetAuditLog.objects.filter(asset=asset).delete()

    assert AssetAuditLog.objects.filter(id=entry.id).exists()


def test_bulk_update_is_blocked(asset, admin_user):
    record_asset_audit(asset, admin_user, 'created')

    with pytest.raises(AuditLogImmutableError):
        AssetAuditLog.objects.filter(asset=asset).update(action='deleted')


def test_system_actions_have_no_user(asset):
    entry = record_asset_audit(asset, None, 'updated', new_data={'status': 'inactive'})

    assert entry.user_id is None


def test_record_update_splits_responsible_change(asset, admin_user, member_user):
    before = snapshot_asset(asset)
    asset.assigned_to = member_user
    asset.status = 'maintenance'
    asset.save()

    entries = record_asset_update(asset, admin_user, before)

    assert [entry.action for entry in entries] == ['assigned_responsible', 'updated']
    assert entries[1].old_data == {'status': 'active'}
    assert entries[1].new_data == {'status': 'maintenance'}


def test_history_endpoint_newest_first_with_filter(admin_client, asset, member_user):
    admin_client.put(f'/api/assets/{asset.id}/', {'name': 'Notebook 2'}, format='json')
    admin_client.put(f'/api/assets/{asset.id}/assign/', {'assigned_to': str(member_user.id)}, format='json')

    response = admin_client.get(f'/api/assets/{asset.id}/history/')

    assert response.status_code == 200
    actions = [row['action'] for row in response.data['data']['results']]
    assert actions == ['assigned_responsible', 'updated']
    assert response.data['data']['results'][0]['user_email'] == 'admin@acme.test'

    filtered = admin_client.get(f'/api/assets/{asset.id}/history/?action=updated')
    assert [row['action'] for row in filtered.data['data']['results']] == ['updated']


def test_location_update_is_audited(admin_client, asset):
    response = admin_client.put(f'/api/assets/{asset.id}/location/', {
        'location_type': 'gps', 'latitude': '-23.550520', 'longitude': '-46.633308', 'current_location': 'São Paulo'
    }, format='json')

    assert response.status_code == 200
    log = AssetAuditLog.objects.get(asset=asset, action='location_updated')
    assert log.old_data['location_type'] == 'manual'
    assert log.new_data['latitude'] == '-23.550520'


@pytest.mark.parametrize('payload', [
    {'location_type': 'gps'},
    {'location_type': 'rfid'},
    {'latitude': '10.000000'},
])
def test_location_update_validation(admin_client, asset, payload):
    response = admin_client.put(f'/api/assets/{asset.id}/location/', payload, format='json')

    assert response.status_code == 400
    assert not AssetAuditLog.objects.filter(asset=asset, action='location_updated').exists()


def test_disposal_marks_asset_and_is_final(admin_client, asset):
    response = admin_client.post(f'/api/assets/{asset.id}/disposal/', {
        'disposal_date': '2026-01-01',
        'disposal_method': 'venda',
        'sale_value': '3500.00',
        'buyer_info': 'Comprador XPTO',
        'disposal_reason': 'Obsoleto',
    }, format='json')

    assert response.status_code == 201
    # 2024-01-01 -> 2026-01-01 is 731 days of a 9000 / 5 years schedule
    assert response.data['data']['book_value_at_disposal'] == '6397.54'

    asset.refresh_from_db()
    assert asset.status == 'disposed'
    log = AssetAuditLog.objects.get(asset=asset, action='disposed')
    assert log.old_data == {'status': 'active'}
    assert log.new_data['disposal_method'] == 'venda'

    again = admin_client.post(f'/api/assets/{asset.id}/disposal/', {
        'disposal_date': '2026-02-01', 'disposal_method': 'descarte', 'disposal_reason': 'x'
    }, format='json')
    assert again.status_code == 400
    assert again.data['message'] == 'Asset is already disposed'

    edit = admin_client.put(f'/api/assets/{asset.id}/', {'name': 'Reviver'}, format='json')
    assert edit.status_code == 400

    assert admin_client.get(f'/api/assets/{asset.id}/disposal/').data['data']['disposal_method'] == 'venda'


def test_sale_requires_value(admin_client, asset):
    response = admin_client.post(f'/api/assets/{asset.id}/disposal/', {
        'disposal_date': '2026-01-01', 'disposal_method': 'venda', 'disposal_reason': 'Obsoleto'
    }, format='json')

    assert response.status_code == 400
    assert 'sale_value' in response.data['data']


def test_disposal_not_found_before_disposal(admin_client, asset):
    assert admin_client.get(f'/api/assets/{asset.id}/disposal/').status_code == 404
