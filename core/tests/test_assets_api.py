from datetime import date
from decimal import Decimal

import pytest
from django.utils import timezone

from AssetManagement.models import Asset, AssetAuditLog, AssetCategory

pytestmark = pytest.mark.django_db


def asset_payload(category, **overrides):
    payload = {
        'name': 'Empilhadeira',
        'category': str(category.id),
        'purchase_value': '12000.00',
        'residual_value': '2000.00',
        'useful_life_years': 10,
        'purchase_date': '2023-03-15',
        'serial_number': 'SN-001',
    }
    payload.update(overrides)
    return payload


def test_create_asset_generates_code_and_audit_row(admin_client, admin_user, company, category):
    response = admin_client.post('/api/assets/', asset_payload(category), format='json')

    assert response.status_code == 201
    data = response.data['data']
    assert data['code'].startswith('AST') and len(data['code']) == 12
    assert data['category_name'] == 'TI'
    assert data['qr_payload'] == f"ASSET:{data['code']}"

    asset = Asset.objects.get(id=data['id'])
    assert asset.company_id == company.id
    assert asset.created_by_id == admin_user.id

    log = AssetAuditLog.objects.get(asset=asset)
    assert log.action == 'created'
    assert log.user_id == admin_user.id
    assert log.old_data is None
    assert log.new_data['name'] == 'Empilhadeira'
    assert log.new_data['purchase_value'] == '12000.00'


def test_create_asset_keeps_explicit_code_unique_per_company(admin_client, category, other_company, make_asset):
    make_asset(other_company, code='PAT-1')

    first = admin_client.post('/api/assets/', asset_payload(category, code='PAT-1'), format='json')
    second = admin_client.post('/api/assets/', asset_payload(category, code='PAT-1'), format='json')

    assert first.status_code == 201
    assert second.status_code == 400
    assert 'code' in second.data['data']


@pytest.mark.parametrize('overrides,field', [
    ({'residual_value': '13000.00'}, 'residual_value'),
    ({'useful_life_years': 0}, 'useful_life_years'),
    ({'purchase_value': '-1'}, 'purchase_value'),
    ({'status': 'disposed'}, 'status'),
])
def test_create_asset_validation(admin_client, category, overrides, field):
    response = admin_client.post('/api/assets/', asset_payload(category, **overrides), format='json')

    assert response.status_code == 400
    assert field in response.data['data']
    assert not Asset.objects.exists()


def test_create_asset_rejects_foreign_category(admin_client, other_company):
    foreign = AssetCategory.objects.get(company=other_company, name='TI')

    response = admin_client.post('/api/assets/', asset_payload(foreign), format='json')

    assert response.status_code == 400
    assert 'category' in response.data['data']


def test_unit_fills_in_department(admin_client, category, department, unit):
    response = admin_client.post('/api/assets/', asset_payload(category, unit=str(unit.id)), format='json')

    assert response.status_code == 201
    assert response.data['data']['department'] == department.id


def test_list_filters_and_search(admin_client, company, category, make_asset):
    furniture = AssetCategory.objects.get(company=company, name='Mobiliário')
    make_asset(company, name='Notebook Dell', category=category, serial_number='DL-77')
    make_asset(company, name='Cadeira', category=furniture, status='inactive')
    make_asset(company, name='Mesa', category=furniture, current_location='Sala 12')

    def names(query):
        response = admin_client.get(f'/api/assets/{query}')
        assert response.status_code == 200
        return sorted(row['name'] for row in response.data['data']['results'])

    assert names('') == ['Cadeira', 'Mesa', 'Notebook Dell']
    assert names(f'?category={furniture.id}') == ['Cadeira', 'Mesa']
    assert names('?status=inactive') == ['Cadeira']
    assert names('?search=dl-77') == ['Notebook Dell']
    assert names('?search=sala') == ['Mesa']
    assert names('?search=mobili') == ['Cadeira', 'Mesa']


def test_list_is_paginated(admin_client, company, make_asset):
    for index in range(3):
        make_asset(company, name=f'Item {index}')

    response = admin_client.get('/api/assets/?page_size=2')

    data = response.data['data']
    assert data['count'] == 3
    assert data['total_pages'] == 2
    assert len(data['results']) == 2
    assert data['has_next'] is True


def test_invalid_date_filter_is_rejected(admin_client):
    response = admin_client.get('/api/assets/?purchased_from=15-03-2023')

    assert response.status_code == 400


def test_update_writes_diff_audit_row(admin_client, admin_user, asset):
    response = admin_client.put(
        f'/api/assets/{asset.id}/', {'name': 'Notebook Lenovo', 'current_location': 'Sala 3'}, format='json'
    )

    assert response.status_code == 200
    assert response.data['data']['name'] == 'Notebook Lenovo'

    log = AssetAuditLog.objects.get(asset=asset, action='updated')
    assert log.old_data == {'name': 'Notebook', 'current_location': None}
    assert log.new_data == {'name': 'Notebook Lenovo', 'current_location': 'Sala 3'}


def test_update_without_changes_writes_no_audit_row(admin_client, asset):
    admin_client.put(f'/api/assets/{asset.id}/', {'name': 'Notebook'}, format='json')

    assert not AssetAuditLog.objects.filter(asset=asset, action='updated').exists()


def test_assign_and_remove_responsible(admin_client, member_user, asset):
    assigned = admin_client.put(f'/api/assets/{asset.id}/assign/', {'assigned_to': str(member_user.id)}, format='json')

    assert assigned.status_code == 200
    assert assigned.data['data']['assigned_to'] == member_user.id
    assert assigned.data['data']['assigned_to_name'] == 'Member'
    log = AssetAuditLog.objects.get(asset=asset, action='assigned_responsible')
    assert log.new_data == {'assigned_to_id': str(member_user.id)}

    removed = admin_client.put(f'/api/assets/{asset.id}/assign/', {'assigned_to': None}, format='json')

    assert removed.status_code == 200
    assert removed.data['data']['assigned_to'] is None
    assert AssetAuditLog.objects.filter(asset=asset, action='removed_responsible').count() == 1


def test_assign_requires_member_of_company(admin_client, other_admin, asset):
    response = admin_client.put(f'/api/assets/{asset.id}/assign/', {'assigned_to': str(other_admin.id)}, format='json')

    assert response.status_code == 400
    asset.refresh_from_db()
    assert asset.assigned_to_id is None


def test_assign_requires_field(admin_client, asset):
    assert admin_client.put(f'/api/assets/{asset.id}/assign/', {}, format='json').status_code == 400


def test_soft_delete_hides_asset(admin_client, asset):
    response = admin_client.delete(f'/api/assets/{asset.id}/')

    assert response.status_code == 200
    asset.refresh_from_db()
    assert asset.is_active is False
    assert AssetAuditLog.objects.filter(asset=asset, action='deleted').exists()
    assert admin_client.get(f'/api/assets/{asset.id}/').status_code == 404
    assert admin_client.get('/api/assets/').data['data']['count'] == 0


def test_depreciation_endpoint(admin_client, asset):
    response = admin_client.get(f'/api/assets/{asset.id}/depreciation/?as_of=2040-01-01')

    assert response.status_code == 200
    data = response.data['data']
    assert data['annual_depreciation'] == '1800.00'
    assert data['accumulated_depreciation'] == '9000.00'
    assert data['book_value'] == '1000.00'
    assert data['fully_depreciated'] is True
    assert [row['year'] for row in data['schedule']] == [1, 2, 3, 4, 5]
    assert data['schedule'][-1]['book_value'] == '1000.00'


def test_asset_bought_today_shows_full_book_value(admin_client, company, make_asset):
    asset = make_asset(company, purchase_date=timezone.localdate())

    data = admin_client.get(f'/api/assets/{asset.id}/').data['data']

    assert data['book_value'] == '10000.00'
    assert data['accumulated_depreciation'] == '0.00'
    assert asset.book_value == Decimal('10000.00')


def test_depreciation_before_purchase(admin_client, asset):
    data = admin_client.get(f'/api/assets/{asset.id}/depreciation/?as_of=2023-06-01').data['data']

    assert data['accumulated_depreciation'] == '0.00'
    assert data['book_value'] == '10000.00'
    assert data['fully_depreciated'] is False


def test_depreciation_rejects_bad_date(admin_client, asset):
    assert admin_client.get(f'/api/assets/{asset.id}/depreciation/?as_of=yesterday').status_code == 400


def test_dashboard_totals_exclude_disposed(admin_client, member_user, company, category, make_asset):
    old = date(2000, 1, 1)
    make_asset(company, category=category, purchase_date=old, assigned_to=member_user)
    make_asset(company, purchase_date=old, purchase_value=Decimal('5000.00'), residual_value=Decimal('0.00'))
    make_asset(company, category=category, purchase_date=old, status='disposed')
    make_asset(company, category=category, purchase_date=old, is_active=False)

    response = admin_client.get('/api/assets/dashboard/')

    assert response.status_code == 200
    data = response.data['data']
    assert data['total_assets'] == 2
    assert data['total_value'] == '15000.00'
    assert data['total_depreciation'] == '14000.00'
    assert data['total_book_value'] == '1000.00'
    assert data['assigned_assets'] == 1
    assert data['status_breakdown']['active'] == 2
    assert data['status_breakdown']['disposed'] == 1
    assert {row['name']: row['total'] for row in data['by_category']} == {'TI': 1, 'Sem categoria': 1}


def test_category_crud_and_protection(admin_client, company, category, asset):
    created = admin_client.post('/api/assets/categories/', {'name': 'Imóveis'}, format='json')
    assert created.status_code == 201
    new_id = created.data['data']['id']

    duplicate = admin_client.post('/api/assets/categories/', {'name': 'imóveis'}, format='json')
    assert duplicate.status_code == 400

    in_use = admin_client.delete(f'/api/assets/categories/{category.id}/')
    assert in_use.status_code == 400

    assert admin_client.delete(f'/api/assets/categories/{new_id}/').status_code == 200
    listed = {row['name'] for row in admin_client.get('/api/assets/categories/').data['data']}
    assert 'Imóveis' not in listed

    revived = admin_client.post('/api/assets/categories/', {'name': 'Imóveis'}, format='json')
    assert revived.status_code == 201
    assert revived.data['data']['id'] == new_id
