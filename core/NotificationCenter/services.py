"""
Notification checks

Each check finds the rows that need attention in one company and fans a
notification out to every active member. The (user, notification_key) pair
is unique, so a notification is created once per user and a dismissed one is
never recreated.
"""

import logging
from decimal import Decimal

import pytz
from django.utils import timezone

from AssetManagement.depreciation import depreciation_ratio
from AssetManagement.models import Asset
from AuthN.models import BaseUserModel
from MaintenanceControl.models import AssetMaintenance
from .models import Notification

logger = logging.getLogger(__name__)

DEPRECIATION_ALERT_RATIO = Decimal('0.8')


def company_today(company):
    """Current date in the company's timezone"""
    try:
        tz = pytz.timezone(company.timezone or 'UTC')
    except pytz.UnknownTimeZoneError:
        tz = pytz.UTC
    return timezone.now().astimezone(tz).date()


def company_recipients(company):
    return list(BaseUserModel.objects.filter(
        own_user_profile__company_id=company.id, is_active=True
    ).only('id'))


def notify_users(users, company, notification_key, title, message, notification_type, asset=None, maintenance=None):
    """get_or_create per user; returns how many rows were created"""
    created_count = 0
    for user in users:
        _, created = Notification.objects.get_or_create(
            user=user,
            notification_key=notification_key,
            defaults={
                'company': company,
                'title': title,
                'message': message,
                'notification_type': notification_type,
                'asset': asset,
                'maintenance': maintenance,
            }
        )
        if created:
            created_count += 1
    return created_count


def check_overdue_maintenance(company, users=None):
    """Scheduled maintenances whose date has passed"""
    users = company_recipients(company) if users is None else users
    if not users:
        return 0

    overdue = AssetMaintenance.objects.filter(
        asset__company_id=company.id,
        asset__is_active=True,
        status='agendada',
        scheduled_date__lt=company_today(company)
    ).select_related('asset')

    created = 0
    for maintenance in overdue:
        created += notify_users(
            users, company,
            notification_key=f"overdue-{maintenance.id}",
            title='Manutenção em Atraso',
            message=(
                f'Manutenção do ativo "{maintenance.asset.name}" está atrasada desde '
                f'{maintenance.scheduled_date.strftime("%d/%m/%Y")}'
            ),
            notification_type='warning',
            asset=maintenance.asset,
            maintenance=maintenance,
        )
    return created


def check_depreciation_alerts(company, users=None, as_of=None):
    """Active assets past 80% of their useful life"""
    users = company_recipients(company) if users is None else users
    if not users:
        return 0

    assets = Asset.objects.filter(company_id=company.id, is_active=True, status='active').only(
        'id', 'name', 'purchase_date', 'useful_life_years'
    )

    created = 0
    for asset in assets:
        if depreciation_ratio(asset.useful_life_years, asset.purchase_date, as_of) <= DEPRECIATION_ALERT_RATIO:
            continue
        created += notify_users(
            users, company,
            notification_key=f"depreciation-{asset.id}",
            title='Ativo Altamente Depreciado',
            message=f'O ativo "{asset.name}" está com alta depreciação. Considere substituição.',
            notification_type='info',
            asset=asset,
        )
    return created


def run_company_checks(company):
    users = company_recipients(company)
    overdue = check_overdue_maintenance(company, users)
    depreciation = check_depreciation_alerts(company, users)
    logger.info(
        f"Notification checks for company {company.id}: {overdue} overdue, {depreciation} depreciation created"
    )
    return {'overdue': overdue, 'depreciation': depreciation}
