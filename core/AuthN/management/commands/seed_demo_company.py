from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from AssetManagement.audit import record_asset_audit, snapshot_asset
from AssetManagement.models import Asset, AssetCategory
from AuthN.models import BaseUserModel, UserProfile
from CompanyManagement.models import Company, Department, Unit
from CompanyManagement.utils import create_default_company_resources
from MaintenanceControl.models import AssetMaintenance, MaintenancePart, SparePart


class Command(BaseCommand):
    help = 'Creates a demo company with an admin, a manager, a user, a department/unit and a few assets'

    def add_arguments(self, parser):
        parser.add_argument(
            '--force',
            action='store_true',
            help='Delete the existing demo company and its users and recreate them',
        )
        parser.add_argument(
            '--password',
            default='Demo@12345',
            help='Password for the demo users',
        )

    def handle(self, *args, **options):
        force = options['force']
        password = options['password']
        company_name = 'Demo Company'
        self.stdout.write(self.style.SUCCESS('Starting demo data creation...'))

        with transaction.atomic():
            existing = Company.objects.filter(name=company_name).first()
            if existing:
                if not force:
                    self.stdout.write(self.style.WARNING(
                        f'{company_name} already exists. Use --force to recreate.'
                    ))
                    return
                self.stdout.write(self.style.WARNING(f'Deleting existing {company_name}'))
                # PROTECT relations (asset->category, consumption->part) go first
                MaintenancePart.objects.filter(maintenance__asset__company=existing).delete()
                Asset.objects.filter(company=existing).delete()
                BaseUserModel.objects.filter(own_user_profile__company=existing).delete()
                existing.delete()

            # 1. Company and structure
            company = Company.objects.create(
                name=company_name,
                description='Company created by seed_demo_company',
                timezone='America/Sao_Paulo'
            )
            create_default_company_resources(company)
            department = Department.objects.create(company=company, name='Operações', budget=Decimal('250000.00'))
            unit = Unit.objects.create(department=department, name='Matriz')
            self.stdout.write(self.style.SUCCESS(f'[OK] Company created: {company.name}'))

            # 2. Users
            users = {}
            for role, email, full_name in [
                ('admin', 'admin@demo.local', 'Demo Admin'),
                ('manager', 'manager@demo.local', 'Demo Manager'),
                ('user', 'user@demo.local', 'Demo User'),
            ]:
                user = BaseUserModel.objects.create_user(
                    email=email, password=password, role=role, username=f'demo_{role}'
                )
                UserProfile.objects.create(
                    user=user, company=company, full_name=full_name,
                    department=department, unit=unit
                )
                users[role] = user
                self.stdout.write(self.style.SUCCESS(f'[OK] {role.title()} created: {email}'))

            department.manager = users['manager']
            department.save(update_fields=['manager'])

            # 3. Assets
            today = timezone.localdate()
            categories = {c.name: c for c in AssetCategory.objects.filter(company=company)}
            assets_data = [
                ('Notebook Dell Latitude', 'TI', Decimal('6500.00'), Decimal('650.00'), 5, 4 * 365 + 300),
                ('Mesa de Escritório', 'Mobiliário', Decimal('1200.00'), Decimal('100.00'), 10, 2 * 365),
                ('Empilhadeira Elétrica', 'Maquinário', Decimal('85000.00'), Decimal('15000.00'), 10, 3 * 365),
                ('Furadeira de Impacto', 'Ferramentas', Decimal('900.00'), Decimal('0.00'), 5, 200),
            ]
            assets = []
            for name, category_name, purchase_value, residual_value, life, age_days in assets_data:
                asset = Asset.objects.create(
                    company=company,
                    category=categories.get(category_name),
                    department=department,
                    unit=unit,
                    name=name,
                    purchase_value=purchase_value,
                    residual_value=residual_value,
                    useful_life_years=life,
                    purchase_date=today - timedelta(days=age_days),
                    current_location='Matriz',
                    assigned_to=users['user'],
                    created_by=users['admin'],
                )
                record_asset_audit(asset, users['admin'], 'created', new_data=snapshot_asset(asset))
                assets.append(asset)
            self.stdout.write(self.style.SUCCESS(f'[OK] {len(assets)} assets created'))

            # 4. Maintenance and spare parts
            AssetMaintenance.objects.create(
                asset=assets[2],
                maintenance_type='preventiva',
                description='Revisão semestral da empilhadeira',
                scheduled_date=today - timedelta(days=3),
                created_by=users['manager'],
            )
            AssetMaintenance.objects.create(
                asset=assets[0],
                maintenance_type='corretiva',
                description='Troca de bateria',
                scheduled_date=today + timedelta(days=10),
                created_by=users['manager'],
            )
            SparePart.objects.create(
                company=company, name='Bateria de Tração', part_number='BAT-48V',
                stock_quantity=2, minimum_stock=1, unit_cost=Decimal('4200.00'), supplier='Fornecedor Demo'
            )
            self.stdout.write(self.style.SUCCESS('[OK] Maintenance and spare parts created'))

        self.stdout.write(self.style.SUCCESS('\nDemo data created successfully!'))
        self.stdout.write('Login with admin@demo.local / manager@demo.local / user@demo.local')
