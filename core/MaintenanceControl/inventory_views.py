"""
Spare parts inventory, asset bill of materials and parts consumption
"""

import logging

from django.db.models import F, Q
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from AssetManagement.views import get_company_asset
from utils.pagination_utils import CustomPagination
from utils.tenant_filter_utils import get_company_and_profile
from .exceptions import InsufficientStockError, MaintenanceLockedError
from .inventory import consume_part, release_part
from .models import SparePart, AssetPart, MaintenancePart
from .serializers import SparePartSerializer, AssetPartSerializer, MaintenancePartSerializer
from .views import get_company_maintenance, maintenance_not_found

logger = logging.getLogger(__name__)


def part_not_found():
    return Response({
        'message': 'Spare part not found',
        'data': None,
        'status': status.HTTP_404_NOT_FOUND
    }, status=status.HTTP_404_NOT_FOUND)


class SparePartAPIView(APIView):
    """Spare parts list (?search=, ?low_stock=true) and create"""
    pagination_class = CustomPagination

    def get(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            parts = SparePart.objects.filter(company_id=company.id, is_active=True)

            search = request.query_params.get('search', '').strip()
            if search:
                parts = parts.filter(
                    Q(name__icontains=search) |
                    Q(part_number__icontains=search) |
                    Q(supplier__icontains=search)
                )

            if request.query_params.get('low_stock', '').lower() == 'true':
                parts = parts.filter(stock_quantity__lte=F('minimum_stock'))

            paginator = self.pagination_class()
            page = paginator.paginate_queryset(parts, request)
            serializer = SparePartSerializer(page, many=True)

            return Response({
                'message': 'Spare parts retrieved successfully',
                'data': paginator.get_paginated_response(serializer.data),
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error retrieving spare parts: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def post(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            serializer = SparePartSerializer(data=request.data, context={'company': company})
            if serializer.is_valid():
                part = serializer.save(company=company)
                return Response({
                    'message': 'Spare part created successfully',
                    'data': SparePartSerializer(part).data,
                    'status': status.HTTP_201_CREATED
                }, status=status.HTTP_201_CREATED)
            return Response({
                'message': 'Validation error',
                'data': serializer.errors,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            return Response({
                'message': f'Error creating spare part: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class SparePartDetailAPIView(APIView):
    """Spare part detail/update/delete"""

    def get(self, request, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            part = SparePart.objects.filter(id=pk, company_id=company.id, is_active=True).first()
            if not part:
                return part_not_found()

            return Response({
                'message': 'Spare part retrieved successfully',
                'data': SparePartSerializer(part).data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error retrieving spare part: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def put(self, request, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            part = SparePart.objects.filter(id=pk, company_id=company.id, is_active=True).first()
            if not part:
                return part_not_found()

            serializer = SparePartSerializer(part, data=request.data, partial=True, context={'company': company})
            if serializer.is_valid():
                serializer.save()
                return Response({
                    'message': 'Spare part updated successfully',
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
                'message': f'Error updating spare part: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def delete(self, request, pk):
        """Soft delete"""
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            part = SparePart.objects.filter(id=pk, company_id=company.id, is_active=True).first()
            if not part:
                return part_not_found()

            SparePart.objects.filter(id=part.id).update(is_active=False)
            AssetPart.objects.filter(part_id=part.id).delete()
            return Response({
                'message': 'Spare part deleted successfully',
                'data': None,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error deleting spare part: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class AssetPartAPIView(APIView):
    """Parts linked to an asset"""

    def get(self, request, asset_id):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            asset = get_company_asset(company, asset_id, with_relations=False)
            if not asset:
                return Response({
                    'message': 'Asset not found',
                    'data': None,
                    'status': status.HTTP_404_NOT_FOUND
                }, status=status.HTTP_404_NOT_FOUND)

            links = AssetPart.objects.filter(asset_id=asset.id, part__is_active=True).select_related('asset', 'part')
            return Response({
                'message': 'Asset parts retrieved successfully',
                'data': AssetPartSerializer(links, many=True).data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error retrieving asset parts: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def post(self, request, asset_id):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            asset = get_company_asset(company, asset_id, with_relations=False)
            if not asset:
                return Response({
                    'message': 'Asset not found',
                    'data': None,
                    'status': status.HTTP_404_NOT_FOUND
                }, status=status.HTTP_404_NOT_FOUND)

            serializer = AssetPartSerializer(data=request.data, context={'company': company, 'asset': asset})
            if serializer.is_valid():
                link = serializer.save(asset=asset)
                return Response({
                    'message': 'Part linked to asset successfully',
                    'data': AssetPartSerializer(link).data,
                    'status': status.HTTP_201_CREATED
                }, status=status.HTTP_201_CREATED)
            return Response({
                'message': 'Validation error',
                'data': serializer.errors,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            return Response({
                'message': f'Error linking part to asset: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class AssetPartDetailAPIView(APIView):
    """Update quantity_required or unlink a part"""

    def _get_link(self, company, asset_id, pk):
        return AssetPart.objects.filter(
            id=pk, asset_id=asset_id, asset__company_id=company.id, asset__is_active=True
        ).select_related('asset', 'part').first()

    def put(self, request, asset_id, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            link = self._get_link(company, asset_id, pk)
            if not link:
                return Response({
                    'message': 'Asset part not found',
                    'data': None,
                    'status': status.HTTP_404_NOT_FOUND
                }, status=status.HTTP_404_NOT_FOUND)

            serializer = AssetPartSerializer(
                link, data=request.data, partial=True, context={'company': company, 'asset': link.asset}
            )
            if serializer.is_valid():
                serializer.save()
                return Response({
                    'message': 'Asset part updated successfully',
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
                'message': f'Error updating asset part: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def delete(self, request, asset_id, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            link = self._get_link(company, asset_id, pk)
            if not link:
                return Response({
                    'message': 'Asset part not found',
                    'data': None,
                    'status': status.HTTP_404_NOT_FOUND
                }, status=status.HTTP_404_NOT_FOUND)

            link.delete()
            return Response({
                'message': 'Part unlinked from asset successfully',
                'data': None,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error unlinking part: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class MaintenancePartAPIView(APIView):
    """Parts consumed by a maintenance: list and record consumption"""

    def get(self, request, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            maintenance = get_company_maintenance(company, pk)
            if not maintenance:
                return maintenance_not_found()

            lines = MaintenancePart.objects.filter(maintenance_id=maintenance.id).select_related('part')
            return Response({
                'message': 'Maintenance parts retrieved successfully',
                'data': MaintenancePartSerializer(lines, many=True).data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error retrieving maintenance parts: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def post(self, request, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            maintenance = get_company_maintenance(company, pk)
            if not maintenance:
                return maintenance_not_found()

            serializer = MaintenancePartSerializer(data=request.data, context={'company': company})
            if not serializer.is_valid():
                return Response({
                    'message': 'Validation error',
                    'data': serializer.errors,
                    'status': status.HTTP_400_BAD_REQUEST
                }, status=status.HTTP_400_BAD_REQUEST)

            try:
                line = consume_part(
                    maintenance,
                    serializer.validated_data['part'],
                    serializer.validated_data['quantity_used'],
                    serializer.validated_data.get('cost_per_unit'),
                )
            except (InsufficientStockError, MaintenanceLockedError) as e:
                return Response({
                    'message': str(e),
                    'data': None,
                    'status': status.HTTP_400_BAD_REQUEST
                }, status=status.HTTP_400_BAD_REQUEST)

            return Response({
                'message': 'Part consumption recorded successfully',
                'data': MaintenancePartSerializer(line).data,
                'status': status.HTTP_201_CREATED
            }, status=status.HTTP_201_CREATED)
        except Exception as e:
            return Response({
                'message': f'Error recording part consumption: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class MaintenancePartDetailAPIView(APIView):
    """Remove a consumption line of an open maintenance - quantity goes back to stock"""

    def delete(self, request, pk, line_id):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            maintenance = get_company_maintenance(company, pk)
            if not maintenance:
                return maintenance_not_found()

            line = MaintenancePart.objects.filter(id=line_id, maintenance_id=maintenance.id).first()
            if not line:
                return Response({
                    'message': 'Consumption line not found',
                    'data': None,
                    'status': status.HTTP_404_NOT_FOUND
                }, status=status.HTTP_404_NOT_FOUND)

            try:
                part = release_part(line)
            except MaintenanceLockedError as e:
                return Response({
                    'message': str(e),
                    'data': None,
                    'status': status.HTTP_400_BAD_REQUEST
                }, status=status.HTTP_400_BAD_REQUEST)

            return Response({
                'message': 'Part consumption removed successfully',
                'data': {'part': part.id, 'stock_quantity': part.stock_quantity},
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error removing part consumption: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)
