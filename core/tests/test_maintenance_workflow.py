from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from MaintenanceControl.exceptions import MaintenanceTransitionError
from MaintenanceControl.models import AssetMaintenance
from MaintenanceControl.workflow import can_transition, transition_maintenance

pytestmark = pytest.mark.django_db


@pytest.fixture
def maintenance(asset, admin_user):
    return AssetMaintenance.objects.create(
        asset=asset,
        maintenance_type='preventiva',
        description='Revisão anual',
        scheduled_date=date(2026, 3, 1),
        created_by=admin_user,
    )


@pytest.mark.parametrize('current,new,allowed', [
    ('agendada', 'em_andamento', True),
    ('agendada', 'cancelada', True),
    ('agendada', 'concluída', False),
    ('em_andamento', 'concluída', True),
    ('em_andamento', 'cancelada', True),
    ('em_andamento', 'agendada', False),
    ('concluída', 'em_andamento', False),
    ('concluída', 'cancelada', False),
    ('cancelada', 'agendada', False),
    ('cancelada', 'em_andamento', False),
])
def test_transition_table(current, new, allowed):
    assert can_transition(current, new) is allowed


def test_complete_stamps_today_and_cost(maintenance):
    transition_maintenance(maintenance, 'em_andamento')
    done = transition_maintenance(maintenance, 'concluída', cost=Decimal('350.00'))

    done.refresh_from_db()
    assert done.status == 'concluída'
    assert done.completed_date == timezone.localdate()
    assert done.cost == Decimal('350.00')


def test_terminal_states_refuse_every_move(maintenance):
    transition_maintenance(maintenance, 'cancelada')

    for target in ('agendada', 'em_andamento', 'concluída'):
        with pytest.raises(MaintenanceTransitionError):
            transition_maintenance(maintenance, target)

    maintenance.refresh_from_db()
    assert maintenance.status == 'cancelada'


def test_create_always_starts_scheduled(admin_client, admin_user, asset):
    response = admin_client.post('/api/maintenance/', {
        'asset': asset.id,
        'maintenance_type': 'corretiva',
        'description': 'Troca da tela',
        'scheduled_date': '2026-05-10',
        'status': 'concluída',
        'completed_date': '2026-05-11',
    }, format='json')

    assert response.status_code == 201
    data = response.data['data']
    assert data['status'] == 'agendada'
    assert data['completed_date'] is None
    assert data['asset_code'] == asset.code
    assert AssetMaintenance.objects.get(id=data['id']).created_by_id == admin_user.id


def test_create_validation(admin_client, asset):
    response = admin_client.post('/api/maintenance/', {
        'asset': asset.id,
        'description': '   ',
        'scheduled_date': '2026-05-10',
        'next_maintenance_date': '2026-01-01',
    }, format='json')

    assert response.status_code == 400
    assert 'description' in response.data['data']


def test_next_date_not_before_scheduled(admin_client, asset):
    response = admin_client.post('/api/maintenance/', {
        'asset': asset.id,
        'description': 'Revisão',
        'scheduled_date': '2026-05-10',
        'next_maintenance_date': '2026-01-01',
    }, format='json')

    assert response.status_code == 400
    assert 'next_maintenance_date' in response.data['data']


def test_disposed_asset_cannot_get_maintenance(admin_client, company, make_asset):
    disposed = make_asset(company, status='disposed')

    response = admin_client.post('/api/maintenance/', {
        'asset': disposed.id, 'description': 'Revisão', 'scheduled_date': '2026-05-10'
    }, format='json')

    assert response.status_code == 400


def test_status_endpoint_walks_the_workflow(admin_client, maintenance):
    url = f'/api/maintenance/{maintenance.id}/status/'

    skipped = admin_client.put(url, {'status': 'concluída'}, format='json')
    assert skipped.status_code == 400

    started = admin_client.put(url, {'status': 'em_andamento'}, format='json')
    assert started.status_code == 200
    assert started.data['data']['status'] == 'em_andamento'

    finished = admin_client.put(url, {'status': 'concluída', 'completed_date': '2026-03-02', 'cost': '90.50'}, format='json')
    assert finished.status_code == 200
    assert finished.data['data']['completed_date'] == '2026-03-02'
    assert finished.data['data']['cost'] == '90.50'

    reopened = admin_client.put(url, {'status': 'agendada'}, format='json')
    assert reopened.status_code == 400


def test_status_endpoint_rejects_unknown_status(admin_client, maintenance):
    response = admin_client.put(f'/api/maintenance/{maintenance.id}/status/', {'status': 'pausada'}, format='json')

    assert response.status_code == 400
    assert 'status' in response.data['data']


def test_put_cannot_change_status_or_edit_terminal(admin_client, maintenance):
    url = f'/api/maintenance/{maintenance.id}/'

    edited = admin_client.put(url, {'description': 'Revisão completa', 'status': 'concluída'}, format='json')
    assert edited.status_code == 200
    assert edited.data['data']['description'] == 'Revisão completa'
    assert edited.data['data']['status'] == 'agendada'

    transition_maintenance(maintenance, 'cancelada')
    locked = admin_client.put(url, {'description': 'Outra'}, format='json')
    assert locked.status_code == 400


def test_list_filters(admin_client, asset, maintenance):
    AssetMaintenance.objects.create(
        asset=asset, maintenance_type='emergencial', description='Queda de energia',
        scheduled_date=date(2026, 4, 1), status='em_andamento'
    )

    def ids(query):
        return [row['id'] for row in admin_client.get(f'/api/maintenance/{query}').data['data']['results']]

    assert len(ids('')) == 2
    assert ids('?status=agendada') == [maintenance.id]
    assert ids('?type=preventiva') == [maintenance.id]
    assert len(ids('?date_from=2026-03-15')) == 1
    assert ids('?search=anual') == [maintenance.id]
    assert len(ids(f'?asset={asset.id}')) == 2


def test_overdue_flag_and_filter(admin_client, asset):
    today = timezone.localdate()
    late = AssetMaintenance.objects.create(asset=asset, description='Atrasada', scheduled_date=today - timedelta(days=2))
    AssetMaintenance.objects.create(asset=asset, description='Futura', scheduled_date=today + timedelta(days=2))
    AssetMaintenance.objects.create(
        asset=asset, description='Em curso', scheduled_date=today - timedelta(days=5), status='em_andamento'
    )

    rows = admin_client.get('/api/maintenance/?overdue=true').data['data']['results']

    assert [row['id'] for row in rows] == [late.id]
    assert rows[0]['is_overdue'] is True


def test_dashboard_chart_and_calendar(admin_client, asset):
    today = timezone.localdate()
    AssetMaintenance.objects.create(asset=asset, description='a', scheduled_date=today - timedelta(days=1))
    AssetMaintenance.objects.create(
        asset=asset, description='b', scheduled_date=today, status='em_andamento', maintenance_type='corretiva'
    )
    AssetMaintenance.objects.create(
        asset=asset, description='c', scheduled_date=today, status='concluída',
        completed_date=today, cost=Decimal('120.00')
    )
    AssetMaintenance.objects.create(asset=asset, description='d', scheduled_date=today, status='cancelada')

    dashboard = admin_client.get('/api/maintenance/dashboard/').data['data']
    assert dashboard == {
        'pending_count': 1,
        'in_progress_count': 1,
        'completed_this_month': 1,
        'total_cost_this_month': '120.00',
        'overdue': 1,
    }

    chart = admin_client.get('/api/maintenance/chart/').data['data']
    assert len(chart) == 6
    assert chart[-1]['month'] == today.strftime('%Y-%m')
    assert chart[-1]['corretiva'] == 1
    assert sum(row['preventiva'] + row['corretiva'] + row['emergencial'] for row in chart) == 4

    calendar = admin_client.get('/api/maintenance/calendar/').data['data']
    assert sum(row['total'] for row in calendar) == 2
    assert calendar[-1]['date'] == today.isoformat()


def test_maintenance_of_deleted_asset_is_hidden(admin_client, asset, maintenance):
    admin_client.delete(f'/api/assets/{asset.id}/')

    assert admin_client.get(f'/api/maintenance/{maintenance.id}/').status_code == 404
