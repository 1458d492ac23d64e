from datetime import date, datetime, timedelta, timezone as dt_timezone

import pytest
from django.utils import timezone

from MaintenanceControl.models import AssetMaintenance
from NotificationCenter import services, tasks
from NotificationCenter.models import Notification

pytestmark = pytest.mark.django_db


@pytest.fixture
def overdue_maintenance(company, make_asset):
    asset = make_asset(company, purchase_date=timezone.localdate())
    return AssetMaintenance.objects.create(
        asset=asset, description='Calibração', scheduled_date=timezone.localdate() - timedelta(days=3)
    )


def test_overdue_check_notifies_every_member(company, admin_user, member_user, overdue_maintenance):
    AssetMaintenance.objects.create(
        asset=overdue_maintenance.asset, description='Futura', scheduled_date=timezone.localdate() + timedelta(days=3)
    )

    created = services.check_overdue_maintenance(company)

    assert created == 2
    notification = Notification.objects.get(user=member_user)
    assert notification.notification_key == f'overdue-{overdue_maintenance.id}'
    assert notification.title == 'Manutenção em Atraso'
    assert notification.notification_type == 'warning'
    expected_date = overdue_maintenance.scheduled_date.strftime('%d/%m/%Y')
    assert notification.message == f'Manutenção do ativo "Notebook" está atrasada desde {expected_date}'


def test_checks_do_not_duplicate(company, admin_user, overdue_maintenance):
    assert services.check_overdue_maintenance(company) == 1
    assert services.check_overdue_maintenance(company) == 0
    assert Notification.objects.count() == 1


def test_in_progress_maintenance_is_not_overdue(company, admin_user, overdue_maintenance):
    overdue_maintenance.status = 'em_andamento'
    overdue_maintenance.save()

    assert services.check_overdue_maintenance(company) == 0


def test_depreciation_threshold(company, admin_user, make_asset):
    old = make_asset(company, name='Torno', purchase_date=date(2000, 1, 1))
    make_asset(company, name='Novo', purchase_date=timezone.localdate())
    make_asset(company, name='Parado', purchase_date=date(2000, 1, 1), status='inactive')

    created = services.check_depreciation_alerts(company)

    assert created == 1
    notification = Notification.objects.get()
    assert notification.asset_id == old.id
    assert notification.notification_type == 'info'
    assert notification.message == 'O ativo "Torno" está com alta depreciação. Considere substituição.'


def test_depreciation_ratio_must_exceed_eighty_percent(company, admin_user, make_asset):
    asset = make_asset(company, purchase_date=date(2020, 1, 1), useful_life_years=5)
    exactly_80 = datetime(2020, 1, 1, tzinfo=dt_timezone.utc) + timedelta(days=365.25 * 4)

    assert services.check_depreciation_alerts(company, as_of=exactly_80) == 0
    assert services.check_depreciation_alerts(company, as_of=exactly_80 + timedelta(days=1)) == 1
    assert Notification.objects.get().asset_id == asset.id


def test_other_company_is_not_notified(company, admin_user, other_admin, overdue_maintenance):
    services.check_overdue_maintenance(company)

    assert not Notification.objects.filter(user=other_admin).exists()


def test_list_excludes_dismissed_and_counts_unread(admin_client, company, admin_user, overdue_maintenance, make_asset):
    make_asset(company, name='Torno', purchase_date=date(2000, 1, 1))
    services.run_company_checks(company)

    response = admin_client.get('/api/notifications/')

    assert response.status_code == 200
    data = response.data['data']
    assert data['count'] == 2
    assert data['unread_count'] == 2
    assert {row['type'] for row in data['results']} == {'warning', 'info'}


def test_mark_read_and_read_all(admin_client, company, admin_user, overdue_maintenance, make_asset):
    make_asset(company, name='Torno', purchase_date=date(2000, 1, 1))
    services.run_company_checks(company)
    first = Notification.objects.filter(user=admin_user).first()

    read = admin_client.put(f'/api/notifications/{first.id}/read/')
    assert read.status_code == 200
    assert read.data['data']['is_read'] is True

    unread = admin_client.get('/api/notifications/?unread=true').data['data']
    assert unread['count'] == 1
    assert unread['unread_count'] == 1

    read_all = admin_client.put('/api/notifications/read-all/')
    assert read_all.data['data'] == {'updated': 1}
    assert admin_client.get('/api/notifications/').data['data']['unread_count'] == 0


def test_dismissed_notification_is_not_recreated(admin_client, company, admin_user, overdue_maintenance):
    services.check_overdue_maintenance(company)
    notification = Notification.objects.get(user=admin_user)

    assert admin_client.delete(f'/api/notifications/{notification.id}/').status_code == 200
    assert services.check_overdue_maintenance(company) == 0
    assert admin_client.get('/api/notifications/').data['data']['count'] == 0


def test_users_only_touch_their_own_notifications(member_client, company, admin_user, member_user, overdue_maintenance):
    services.check_overdue_maintenance(company)
    admins = Notification.objects.get(user=admin_user)

    assert member_client.put(f'/api/notifications/{admins.id}/read/').status_code == 404
    assert member_client.delete(f'/api/notifications/{admins.id}/').status_code == 404
    admins.refresh_from_db()
    assert admins.is_read is False
    assert admins.is_dismissed is False


def test_refresh_endpoint_runs_checks(admin_client, admin_user, overdue_maintenance):
    response = admin_client.post('/api/notifications/refresh/')

    assert response.status_code == 200
    assert response.data['data'] == {'overdue': 1, 'depreciation': 0}


def test_periodic_task_covers_all_companies(company, other_company, admin_user, other_admin, overdue_maintenance):
    results = tasks.run_notification_checks()

    assert results[str(company.id)] == {'overdue': 1, 'depreciation': 0}
    assert results[str(other_company.id)] == {'overdue': 0, 'depreciation': 0}


def test_task_keeps_going_when_a_company_fails(company, other_company, admin_user, overdue_maintenance, monkeypatch):
    original = services.check_overdue_maintenance

    def flaky(target):
        if target.id == other_company.id:
            raise RuntimeError('boom')
        return original(target)

    monkeypatch.setattr(services, 'check_overdue_maintenance', flaky)

    assert tasks.check_overdue_maintenance() == {'status': 'success', 'created': 1}


def test_depreciation_task_can_target_one_company(company, other_company, admin_user, other_admin, make_asset):
    make_asset(company, name='Torno', purchase_date=date(2000, 1, 1))
    make_asset(other_company, name='Prensa', purchase_date=date(2000, 1, 1))

    assert tasks.check_depreciation_alerts(company_id=company.id) == {'status': 'success', 'created': 1}
    assert Notification.objects.get().user_id == admin_user.id

    assert tasks.check_depreciation_alerts() == {'status': 'success', 'created': 1}
    assert Notification.objects.filter(user=other_admin).count() == 1
