from datetime import date
from decimal import Decimal

import pytest

from MaintenanceControl.exceptions import InsufficientStockError, MaintenanceLockedError
from MaintenanceControl.inventory import consume_part, release_part
from MaintenanceControl.models import AssetMaintenance, AssetPart, MaintenancePart, SparePart

pytestmark = pytest.mark.django_db


@pytest.fixture
def part(company):
    return SparePart.objects.create(
        company=company, name='Filtro de óleo', part_number='FO-10',
        stock_quantity=10, minimum_stock=3, unit_cost=Decimal('25.00'), supplier='Peças Brasil'
    )


@pytest.fixture
def maintenance(asset):
    return AssetMaintenance.objects.create(asset=asset, description='Troca de filtro', scheduled_date=date(2026, 2, 1))


def test_consume_takes_stock_and_defaults_cost(maintenance, part):
    line = consume_part(maintenance, part, 4)

    part.refresh_from_db()
    assert part.stock_quantity == 6
    assert line.cost_per_unit == Decimal('25.00')
    assert line.total_cost == Decimal('100.00')


def test_consume_more_than_stock_fails_without_changes(maintenance, part):
    with pytest.raises(InsufficientStockError):
        consume_part(maintenance, part, 11)

    part.refresh_from_db()
    assert part.stock_quantity == 10
    assert not MaintenancePart.objects.exists()


def test_terminal_maintenance_is_locked(maintenance, part):
    maintenance.status = 'concluída'
    maintenance.save()

    with pytest.raises(MaintenanceLockedError):
        consume_part(maintenance, part, 1)


def test_release_restores_stock(maintenance, part):
    line = consume_part(maintenance, part, 7, cost_per_unit=Decimal('20.00'))

    restored = release_part(line)

    assert restored.stock_quantity == 10
    assert not MaintenancePart.objects.exists()


def test_consume_rereads_status_of_a_stale_instance(maintenance, part):
    AssetMaintenance.objects.filter(pk=maintenance.pk).update(status='cancelada')
    assert maintenance.status == 'agendada'

    with pytest.raises(MaintenanceLockedError):
        consume_part(maintenance, part, 1)

    part.refresh_from_db()
    assert part.stock_quantity == 10


@pytest.mark.parametrize('final_status', ['concluída', 'cancelada'])
def test_release_refused_on_terminal_maintenance(maintenance, part, final_status):
    line = consume_part(maintenance, part, 3)
    AssetMaintenance.objects.filter(pk=maintenance.pk).update(status=final_status)

    with pytest.raises(MaintenanceLockedError):
        release_part(line)

    part.refresh_from_db()
    assert part.stock_quantity == 7
    assert MaintenancePart.objects.filter(id=line.id).exists()


def test_parts_of_completed_maintenance_cannot_be_removed(admin_client, maintenance, part):
    line = consume_part(maintenance, part, 3)
    maintenance.status = 'concluída'
    maintenance.save()

    response = admin_client.delete(f'/api/maintenance/{maintenance.id}/parts/{line.id}/')

    assert response.status_code == 400
    assert 'cannot be removed' in response.data['message']
    part.refresh_from_db()
    assert part.stock_quantity == 7


def test_parts_endpoint(admin_client, maintenance, part):
    url = f'/api/maintenance/{maintenance.id}/parts/'

    created = admin_client.post(url, {'part': part.id, 'quantity_used': 2}, format='json')
    assert created.status_code == 201
    assert created.data['data']['total_cost'] == '50.00'
    assert created.data['data']['part_number'] == 'FO-10'

    too_many = admin_client.post(url, {'part': part.id, 'quantity_used': 50}, format='json')
    assert too_many.status_code == 400
    assert 'Insufficient stock' in too_many.data['message']

    zero = admin_client.post(url, {'part': part.id, 'quantity_used': 0}, format='json')
    assert zero.status_code == 400

    listed = admin_client.get(url).data['data']
    assert len(listed) == 1

    detail = admin_client.get(f'/api/maintenance/{maintenance.id}/').data['data']
    assert detail['parts_used'][0]['quantity_used'] == 2

    removed = admin_client.delete(f"/api/maintenance/{maintenance.id}/parts/{created.data['data']['id']}/")
    assert removed.status_code == 200
    assert removed.data['data'] == {'part': part.id, 'stock_quantity': 10}


def test_parts_endpoint_rejects_foreign_part(admin_client, maintenance, other_company):
    foreign = SparePart.objects.create(company=other_company, name='Correia', part_number='C-1', stock_quantity=5)

    response = admin_client.post(
        f'/api/maintenance/{maintenance.id}/parts/', {'part': foreign.id, 'quantity_used': 1}, format='json'
    )

    assert response.status_code == 400
    assert 'part' in response.data['data']
    foreign.refresh_from_db()
    assert foreign.stock_quantity == 5


def test_deleting_open_maintenance_returns_parts(admin_client, maintenance, part):
    consume_part(maintenance, part, 3)

    response = admin_client.delete(f'/api/maintenance/{maintenance.id}/')

    assert response.status_code == 200
    part.refresh_from_db()
    assert part.stock_quantity == 10
    assert not AssetMaintenance.objects.exists()


def test_deleting_completed_maintenance_keeps_parts_consumed(admin_client, maintenance, part):
    consume_part(maintenance, part, 3)
    maintenance.status = 'concluída'
    maintenance.save()

    admin_client.delete(f'/api/maintenance/{maintenance.id}/')

    part.refresh_from_db()
    assert part.stock_quantity == 7


def test_deleting_cancelled_maintenance_returns_parts(admin_client, maintenance, part):
    consume_part(maintenance, part, 4)
    maintenance.status = 'cancelada'
    maintenance.save()

    assert admin_client.delete(f'/api/maintenance/{maintenance.id}/').status_code == 200

    part.refresh_from_db()
    assert part.stock_quantity == 10
    assert not MaintenancePart.objects.exists()


def test_spare_part_crud_and_low_stock(admin_client, company, part):
    SparePart.objects.create(company=company, name='Correia', part_number='CR-1', stock_quantity=1, minimum_stock=2)

    created = admin_client.post('/api/maintenance/spare-parts/', {
        'name': 'Vela', 'part_number': 'VL-5', 'stock_quantity': 40, 'minimum_stock': 10, 'unit_cost': '8.90'
    }, format='json')
    assert created.status_code == 201
    assert created.data['data']['is_low_stock'] is False

    duplicate = admin_client.post('/api/maintenance/spare-parts/', {'name': 'Outra', 'part_number': 'fo-10'}, format='json')
    assert duplicate.status_code == 400
    assert 'part_number' in duplicate.data['data']

    low = admin_client.get('/api/maintenance/spare-parts/?low_stock=true').data['data']['results']
    assert [row['part_number'] for row in low] == ['CR-1']

    found = admin_client.get('/api/maintenance/spare-parts/?search=brasil').data['data']['results']
    assert [row['part_number'] for row in found] == ['FO-10']

    updated = admin_client.put(f'/api/maintenance/spare-parts/{part.id}/', {'stock_quantity': 2}, format='json')
    assert updated.status_code == 200
    assert updated.data['data']['is_low_stock'] is True

    assert admin_client.delete(f'/api/maintenance/spare-parts/{part.id}/').status_code == 200
    part.refresh_from_db()
    assert part.is_active is False


def test_asset_parts_links(admin_client, asset, part):
    url = f'/api/maintenance/asset-parts/{asset.id}/'

    created = admin_client.post(url, {'part': part.id, 'quantity_required': 2}, format='json')
    assert created.status_code == 201
    assert created.data['data']['stock_quantity'] == 10

    again = admin_client.post(url, {'part': part.id}, format='json')
    assert again.status_code == 400

    link_id = created.data['data']['id']
    updated = admin_client.put(f'{url}{link_id}/', {'quantity_required': 4}, format='json')
    assert updated.data['data']['quantity_required'] == 4

    admin_client.delete(f'/api/maintenance/spare-parts/{part.id}/')
    assert not AssetPart.objects.exists()
