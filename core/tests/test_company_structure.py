import pytest

from CompanyManagement.models import Department, Unit

pytestmark = pytest.mark.django_db


def test_members_read_company(member_client, company):
    response = member_client.get('/api/company/')

    assert response.status_code == 200
    assert response.data['data']['name'] == 'Acme Ltda'


def test_company_timezone_is_validated(admin_client):
    response = admin_client.put('/api/company/', {'timezone': 'Mars/Olympus_Mons'}, format='json')

    assert response.status_code == 400
    assert 'timezone' in response.data['data']


def test_only_admins_write_structure(member_client, department):
    assert member_client.post('/api/company/departments/', {'name': 'TI'}, format='json').status_code == 403
    assert member_client.delete(f'/api/company/departments/{department.id}/').status_code == 403
    assert member_client.get('/api/company/departments/').status_code == 200


def test_department_crud(admin_client, company, member_user):
    created = admin_client.post('/api/company/departments/', {
        'name': 'Financeiro', 'manager': str(member_user.id), 'budget': '150000.00'
    }, format='json')
    assert created.status_code == 201
    department_id = created.data['data']['id']
    assert Department.objects.get(id=department_id).company_id == company.id

    duplicate = admin_client.post('/api/company/departments/', {'name': 'financeiro'}, format='json')
    assert duplicate.status_code == 400

    updated = admin_client.put(f'/api/company/departments/{department_id}/', {'budget': '1.00'}, format='json')
    assert updated.status_code == 200
    assert updated.data['data']['budget'] == '1.00'

    assert admin_client.delete(f'/api/company/departments/{department_id}/').status_code == 200
    assert not Department.objects.filter(id=department_id).exists()


def test_department_manager_must_belong_to_company(admin_client, other_admin):
    response = admin_client.post('/api/company/departments/', {
        'name': 'Compras', 'manager': str(other_admin.id)
    }, format='json')

    assert response.status_code == 400
    assert 'manager' in response.data['data']


def test_units_are_scoped_through_department(admin_client, department, other_company):
    foreign_department = Department.objects.create(company=other_company, name='Vendas')
    foreign_unit = Unit.objects.create(department=foreign_department, name='Filial')

    created = admin_client.post('/api/company/units/', {
        'department': str(department.id), 'name': 'Depósito'
    }, format='json')
    assert created.status_code == 201

    rejected = admin_client.post('/api/company/units/', {
        'department': str(foreign_department.id), 'name': 'Depósito'
    }, format='json')
    assert rejected.status_code == 400

    listed = admin_client.get('/api/company/units/')
    assert [row['name'] for row in listed.data['data']] == ['Depósito']
    assert admin_client.get(f'/api/company/units/{foreign_unit.id}/').status_code == 404


def test_other_tenant_department_is_not_found(other_client, department):
    assert other_client.get(f'/api/company/departments/{department.id}/').status_code == 404
    assert other_client.delete(f'/api/company/departments/{department.id}/').status_code == 404
    assert Department.objects.filter(id=department.id).exists()
