"""
Shared fixtures: two tenants, users with each role and authenticated API clients
"""

from datetime import date
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from AssetManagement.models import Asset, AssetCategory
from AuthN.models import BaseUserModel, UserProfile
from CompanyManagement.models import Company, Department, Unit
from CompanyManagement.utils import create_default_company_resources

PASSWORD = "Str0ngPass!2024"


def make_user(company, email, role='user', department=None, unit=None, full_name=None):
    user = BaseUserModel.objects.create_user(
        email=email, password=PASSWORD, role=role, username=email.replace('@', '_')
    )
    UserProfile.objects.create(
        user=user, company=company, department=department, unit=unit,
        full_name=full_name or email.split('@')[0].title()
    )
    return user


def client_for(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path / 'media')
    settings.OPENAI_API_KEY = 'test-key'


@pytest.fixture
def company(db):
    company = Company.objects.create(name='Acme Ltda', timezone='UTC')
    create_default_company_resources(company)
    return company


@pytest.fixture
def other_company(db):
    company = Company.objects.create(name='Globex SA', timezone='UTC')
    create_default_company_resources(company)
    return company


@pytest.fixture
def department(company):
    return Department.objects.create(company=company, name='Operações')


@pytest.fixture
def unit(department):
    return Unit.objects.create(department=department, name='Matriz')


@pytest.fixture
def admin_user(company):
    return make_user(company, 'admin@acme.test', role='admin')


@pytest.fixture
def member_user(company):
    return make_user(company, 'member@acme.test', role='user')


@pytest.fixture
def other_admin(other_company):
    return make_user(other_company, 'admin@globex.test', role='admin')


@pytest.fixture
def admin_client(admin_user):
    return client_for(admin_user)


@pytest.fixture
def member_client(member_user):
    return client_for(member_user)


@pytest.fixture
def other_client(other_admin):
    return client_for(other_admin)


@pytest.fixture
def category(company):
    return AssetCategory.objects.get(company=company, name='TI')


@pytest.fixture
def make_asset(admin_user):
    def _make_asset(company, **kwargs):
        values = {
            'name': 'Notebook',
            'purchase_value': Decimal('10000.00'),
            'residual_value': Decimal('1000.00'),
            'useful_life_years': 5,
            'purchase_date': date(2024, 1, 1),
            'created_by': admin_user,
        }
        values.update(kwargs)
        return Asset.objects.create(company=company, **values)
    return _make_asset


@pytest.fixture
def asset(company, category, make_asset):
    return make_asset(company, category=category)
