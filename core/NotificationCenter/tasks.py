"""
Celery Tasks for notification checks
Scheduled by CELERY_BEAT_SCHEDULE every 5 minutes
"""

import logging

from celery import shared_task

from CompanyManagement.models import Company
from . import services

logger = logging.getLogger(__name__)


def _active_companies(company_id=None):
    companies = Company.objects.filter(is_active=True)
    if company_id:
        companies = companies.filter(id=company_id)
    return companies


@shared_task
def check_overdue_maintenance(company_id=None):
    created = 0
    for company in _active_companies(company_id):
        try:
            created += services.check_overdue_maintenance(company)
        except Exception as e:
            logger.error(f"Overdue maintenance check failed for company {company.id}: {str(e)}")
    logger.info(f"Overdue maintenance check created {created} notifications")
    return {"status": "success", "created": created}


@shared_task
def check_depreciation_alerts(company_id=None):
    created = 0
    for company in _active_companies(company_id):
        try:
            created += services.check_depreciation_alerts(company)
        except Exception as e:
            logger.error(f"Depreciation check failed for company {company.id}: {str(e)}")
    logger.info(f"Depreciation check created {created} notifications")
    return {"status": "success", "created": created}


@shared_task
def run_notification_checks():
    """Both checks for every active company - one failing company does not stop the others"""
    results = {}
    for company in _active_companies():
        try:
            results[str(company.id)] = services.run_company_checks(company)
        except Exception as e:
            logger.error(f"Notification checks failed for company {company.id}: {str(e)}")
            results[str(company.id)] = {"status": "error", "message": str(e)}
    return results
