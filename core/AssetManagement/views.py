"""
Asset Management Views
CRUD operations with standard response format: message, data, status
Every query is scoped to the requesting user's company
"""

import logging
from datetime import datetime, time, timedelta
from decimal import Decimal

from django.db import transaction
from django.db.models import Count, Q, Sum
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from utils.Asset import AssetExportService
from utils.pagination_utils import CustomPagination
from utils.tenant_filter_utils import get_company_and_profile
from .audit import record_asset_audit, record_asset_update, snapshot_asset
from .depreciation import calculate_book_value, calculate_depreciation, depreciation_summary, to_decimal
from .models import AssetCategory, Asset
from .serializers import AssetCategorySerializer, AssetSerializer
from .services import soft_delete_asset

logger = logging.getLogger(__name__)


def get_company_asset(company, pk, with_relations=True):
    """Single asset of the company, or None - other tenants' assets are never returned"""
    queryset = Asset.objects.filter(id=pk, company_id=company.id, is_active=True)
    if not with_relations:
        return queryset.first()
    return queryset.select_related(
        'category', 'department', 'unit', 'assigned_to', 'assigned_to__own_user_profile'
    ).first()


def parse_date_param(value):
    if not value:
        return None
    return datetime.strptime(value, '%Y-%m-%d').date()


class AssetCategoryAPIView(APIView):
    """Asset Category list/create"""

    def get(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            categories = AssetCategory.objects.filter(company_id=company.id, is_active=True)

            serializer = AssetCategorySerializer(categories, many=True)
            return Response({
                'message': 'Asset categories retrieved successfully',
                'data': serializer.data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error retrieving asset categories: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def post(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            serializer = AssetCategorySerializer(data=request.data, context={'company': company})
            if serializer.is_valid():
                # A previously deleted category with the same name is revived
                existing = AssetCategory.objects.filter(
                    company_id=company.id, name__iexact=serializer.validated_data['name'], is_active=False
                ).first()
                if existing:
                    existing.is_active = True
                    existing.description = serializer.validated_data.get('description', existing.description)
                    existing.save(update_fields=['is_active', 'description', 'updated_at'])
                    category = existing
                else:
                    category = serializer.save(company=company)
                return Response({
                    'message': 'Asset category created successfully',
                    'data': AssetCategorySerializer(category).data,
                    'status': status.HTTP_201_CREATED
                }, status=status.HTTP_201_CREATED)
            return Response({
                'message': 'Validation error',
                'data': serializer.errors,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            return Response({
                'message': f'Error creating asset category: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class AssetCategoryDetailAPIView(APIView):
    """Asset Category detail/update/delete"""

    def get(self, request, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            category = AssetCategory.objects.filter(id=pk, company_id=company.id, is_active=True).first()
            if not category:
                return Response({
                    'message': 'Asset category not found',
                    'data': None,
                    'status': status.HTTP_404_NOT_FOUND
                }, status=status.HTTP_404_NOT_FOUND)

            return Response({
                'message': 'Asset category retrieved successfully',
                'data': AssetCategorySerializer(category).data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error retrieving asset category: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def put(self, request, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            category = AssetCategory.objects.filter(id=pk, company_id=company.id, is_active=True).first()
            if not category:
                return Response({
                    'message': 'Asset category not found',
                    'data': None,
                    'status': status.HTTP_404_NOT_FOUND
                }, status=status.HTTP_404_NOT_FOUND)

            serializer = AssetCategorySerializer(category, data=request.data, partial=True, context={'company': company})
            if serializer.is_valid():
                serializer.save()
                return Response({
                    'message': 'Asset category updated successfully',
                    'data': serializer.data,
                    'status': status.HTTP_200_OK
                }, status=status.HTTP_200_OK)
            return Response({
                'message': 'Validation error',
                'data': serializer.errors,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            return Response({
                'message': f'Error updating asset category: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def delete(self, request, pk):
        """Soft delete; refused while active assets still use the category"""
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            category = AssetCategory.objects.filter(id=pk, company_id=company.id, is_active=True).first()
            if not category:
                return Response({
                    'message': 'Asset category not found',
                    'data': None,
                    'status': status.HTTP_404_NOT_FOUND
                }, status=status.HTTP_404_NOT_FOUND)

            in_use = Asset.objects.filter(category_id=category.id, is_active=True).count()
            if in_use:
                return Response({
                    'message': f'Category is used by {in_use} asset(s) and cannot be deleted',
                    'data': None,
                    'status': status.HTTP_400_BAD_REQUEST
                }, status=status.HTTP_400_BAD_REQUEST)

            AssetCategory.objects.filter(id=category.id).update(is_active=False)
            return Response({
                'message': 'Asset category deleted successfully',
                'data': None,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error deleting asset category: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class AssetAPIView(APIView):
    """Asset list (filters, search, pagination, export) and create"""
    pagination_class = CustomPagination

    def get(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            assets = Asset.objects.filter(
                company_id=company.id,
                is_active=True
            ).select_related(
                'category', 'department', 'unit', 'assigned_to', 'assigned_to__own_user_profile'
            ).order_by('-created_at')

            status_filter = request.query_params.get('status')
            if status_filter:
                assets = assets.filter(status=status_filter)

            category_id = request.query_params.get('category')
            if category_id:
                assets = assets.filter(category_id=category_id)

            department_id = request.query_params.get('department')
            if department_id:
                assets = assets.filter(department_id=department_id)

            unit_id = request.query_params.get('unit')
            if unit_id:
                assets = assets.filter(unit_id=unit_id)

            assigned_to = request.query_params.get('assigned_to')
            if assigned_to:
                assets = assets.filter(assigned_to_id=assigned_to)

            location_type = request.query_params.get('location_type')
            if location_type:
                assets = assets.filter(location_type=location_type)

            purchased_from = parse_date_param(request.query_params.get('purchased_from'))
            if purchased_from:
                assets = assets.filter(purchase_date__gte=purchased_from)

            purchased_to = parse_date_param(request.query_params.get('purchased_to'))
            if purchased_to:
                assets = assets.filter(purchase_date__lte=purchased_to)

            search = request.query_params.get('search', '').strip()
            if search:
                assets = assets.filter(
                    Q(name__icontains=search) |
                    Q(code__icontains=search) |
                    Q(serial_number__icontains=search) |
                    Q(description__icontains=search) |
                    Q(category__name__icontains=search) |
                    Q(current_location__icontains=search)
                )

            export_format = request.query_params.get('export', '').lower()
            if export_format:
                if export_format in ('excel', 'xlsx', 'true'):
                    return AssetExportService.generate_excel(assets)
                if export_format == 'csv':
                    return AssetExportService.generate_csv(assets)
                if export_format == 'pdf':
                    return AssetExportService.generate_pdf(assets)
                return Response({
                    'message': f'Unsupported export format: {export_format}',
                    'data': None,
                    'status': status.HTTP_400_BAD_REQUEST
                }, status=status.HTTP_400_BAD_REQUEST)

            paginator = self.pagination_class()
            page = paginator.paginate_queryset(assets, request)
            serializer = AssetSerializer(page, many=True)

            return Response({
                'message': 'Assets retrieved successfully',
                'data': paginator.get_paginated_response(serializer.data),
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except ValueError as e:
            return Response({
                'message': f'Invalid filter value: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            return Response({
                'message': f'Error retrieving assets: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def post(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            serializer = AssetSerializer(data=request.data, context={'company': company})
            if serializer.is_valid():
                with transaction.atomic():
                    asset = serializer.save(company=company, created_by=request.user)
                    record_asset_audit(asset, request.user, 'created', new_data=snapshot_asset(asset))
                return Response({
                    'message': 'Asset created successfully',
                    'data': AssetSerializer(asset).data,
                    'status': status.HTTP_201_CREATED
                }, status=status.HTTP_201_CREATED)
            return Response({
                'message': 'Validation error',
                'data': serializer.errors,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            return Response({
                'message': f'Error creating asset: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class AssetDetailAPIView(APIView):
    """Asset detail/update/delete"""

    def get(self, request, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            asset = get_company_asset(company, pk)
            if not asset:
                return Response({
                    'message': 'Asset not found',
                    'data': None,
                    'status': status.HTTP_404_NOT_FOUND
                }, status=status.HTTP_404_NOT_FOUND)

            return Response({
                'message': 'Asset retrieved successfully',
                'data': AssetSerializer(asset).data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error retrieving asset: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def put(self, request, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            asset = get_company_asset(company, pk, with_relations=False)
            if not asset:
                return Response({
                    'message': 'Asset not found',
                    'data': None,
                    'status': status.HTTP_404_NOT_FOUND
                }, status=status.HTTP_404_NOT_FOUND)

            old_snapshot = snapshot_asset(asset)
            serializer = AssetSerializer(asset, data=request.data, partial=True, context={'company': company})
            if serializer.is_valid():
                with transaction.atomic():
                    asset = serializer.save()
                    record_asset_update(asset, request.user, old_snapshot)
                return Response({
                    'message': 'Asset updated successfully',
                    'data': AssetSerializer(asset).data,
                    'status': status.HTTP_200_OK
                }, status=status.HTTP_200_OK)
            return Response({
                'message': 'Validation error',
                'data': serializer.errors,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            return Response({
                'message': f'Error updating asset: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def delete(self, request, pk):
        """Delete asset (soft delete)"""
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            asset = get_company_asset(company, pk, with_relations=False)
            if not asset:
                return Response({
                    'message': 'Asset not found',
                    'data': None,
                    'status': status.HTTP_404_NOT_FOUND
                }, status=status.HTTP_404_NOT_FOUND)

            soft_delete_asset(asset, request.user)
            return Response({
                'message': 'Asset deleted successfully',
                'data': None,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error deleting asset: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class AssetDepreciationAPIView(APIView):
    """Depreciation figures of one asset, optionally as of a given date, plus the yearly schedule"""

    def get(self, request, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            asset = get_company_asset(company, pk, with_relations=False)
            if not asset:
                return Response({
                    'message': 'Asset not found',
                    'data': None,
                    'status': status.HTTP_404_NOT_FOUND
                }, status=status.HTTP_404_NOT_FOUND)

            try:
                as_of = parse_date_param(request.query_params.get('as_of'))
            except ValueError:
                return Response({
                    'message': 'as_of must be a date in YYYY-MM-DD format',
                    'data': None,
                    'status': status.HTTP_400_BAD_REQUEST
                }, status=status.HTTP_400_BAD_REQUEST)

            summary = depreciation_summary(
                asset.purchase_value, asset.residual_value, asset.useful_life_years, asset.purchase_date, as_of
            )

            schedule = []
            for year in range(1, asset.useful_life_years + 1):
                year_end = datetime.combine(asset.purchase_date, time.min) + timedelta(days=365.25 * year)
                schedule.append({
                    'year': year,
                    'date': year_end.date().isoformat(),
                    'accumulated_depreciation': str(calculate_depreciation(
                        asset.purchase_value, asset.residual_value, asset.useful_life_years,
                        asset.purchase_date, year_end
                    )),
                    'book_value': str(calculate_book_value(
                        asset.purchase_value, asset.residual_value, asset.useful_life_years,
                        asset.purchase_date, year_end
                    )),
                })

            data = {key: str(value) if isinstance(value, Decimal) else value for key, value in summary.items()}
            data.update({
                'asset_id': asset.id,
                'code': asset.code,
                'as_of': (as_of.isoformat() if as_of else None),
                'schedule': schedule,
            })

            return Response({
                'message': 'Depreciation calculated successfully',
                'data': data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error calculating depreciation: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class AssetDashboardAPIView(APIView):
    """
    Dashboard statistics: totals over non-disposed assets, plus
    breakdowns by status and category
    """

    def get(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            assets = Asset.objects.filter(company_id=company.id, is_active=True)
            in_service = assets.exclude(status='disposed')

            total_value = Decimal('0')
            total_depreciation = Decimal('0')
            total_book_value = Decimal('0')
            for purchase_value, residual_value, life, purchase_date in in_service.values_list(
                'purchase_value', 'residual_value', 'useful_life_years', 'purchase_date'
            ):
                total_value += to_decimal(purchase_value)
                total_depreciation += calculate_depreciation(purchase_value, residual_value, life, purchase_date)
                total_book_value += calculate_book_value(purchase_value, residual_value, life, purchase_date)

            status_breakdown = {choice: 0 for choice, _ in Asset.STATUS_CHOICES}
            for row in assets.values('status').annotate(total=Count('id')):
                status_breakdown[row['status']] = row['total']

            by_category = [
                {
                    'name': row['category__name'] or 'Sem categoria',
                    'total': row['total'],
                    'value': str(row['value'] or Decimal('0.00')),
                }
                for row in in_service.values('category__name').annotate(
                    total=Count('id'), value=Sum('purchase_value')
                ).order_by('category__name')
            ]

            data = {
                'total_assets': in_service.count(),
                'total_value': str(total_value.quantize(Decimal('0.01'))),
                'total_depreciation': str(total_depreciation.quantize(Decimal('0.01'))),
                'total_book_value': str(total_book_value.quantize(Decimal('0.01'))),
                'assigned_assets': in_service.filter(assigned_to__isnull=False).count(),
                'status_breakdown': status_breakdown,
                'by_category': by_category,
            }

            return Response({
                'message': 'Dashboard statistics retrieved successfully',
                'data': data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error retrieving dashboard statistics: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)
