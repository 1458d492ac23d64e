"""
Maintenance Management Views
Maintenance records are scoped to the company through their asset
"""

import logging
from datetime import datetime
from decimal import Decimal

from dateutil.relativedelta import relativedelta
from django.db import transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from utils.pagination_utils import CustomPagination
from utils.tenant_filter_utils import get_company_and_profile, filter_queryset_by_company
from .exceptions import MaintenanceTransitionError
from .inventory import return_parts_to_stock
from .models import AssetMaintenance
from .serializers import AssetMaintenanceSerializer, MaintenanceStatusSerializer
from .workflow import transition_maintenance

logger = logging.getLogger(__name__)

CHART_MONTHS = 6


def company_maintenances(company):
    return filter_queryset_by_company(
        AssetMaintenance.objects.filter(asset__is_active=True), company.id, 'asset__company'
    )


def get_company_maintenance(company, pk):
    return company_maintenances(company).filter(id=pk).select_related('asset').first()


def maintenance_not_found():
    return Response({
        'message': 'Maintenance not found',
        'data': None,
        'status': status.HTTP_404_NOT_FOUND
    }, status=status.HTTP_404_NOT_FOUND)


class MaintenanceAPIView(APIView):
    """Maintenance list/create"""
    pagination_class = CustomPagination

    def get(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            maintenances = company_maintenances(company).select_related('asset').prefetch_related(
                'parts_used__part'
            ).order_by('scheduled_date', 'id')

            asset_id = request.query_params.get('asset')
            if asset_id:
                maintenances = maintenances.filter(asset_id=asset_id)

            unit_id = request.query_params.get('unit')
            if unit_id:
                maintenances = maintenances.filter(asset__unit_id=unit_id)

            status_filter = request.query_params.get('status')
            if status_filter:
                maintenances = maintenances.filter(status=status_filter)

            maintenance_type = request.query_params.get('type') or request.query_params.get('maintenance_type')
            if maintenance_type:
                maintenances = maintenances.filter(maintenance_type=maintenance_type)

            date_from = request.query_params.get('date_from')
            if date_from:
                maintenances = maintenances.filter(
                    scheduled_date__gte=datetime.strptime(date_from, '%Y-%m-%d').date()
                )

            date_to = request.query_params.get('date_to')
            if date_to:
                maintenances = maintenances.filter(
                    scheduled_date__lte=datetime.strptime(date_to, '%Y-%m-%d').date()
                )

            if request.query_params.get('overdue', '').lower() == 'true':
                maintenances = maintenances.filter(status='agendada', scheduled_date__lt=timezone.localdate())

            search = request.query_params.get('search', '').strip()
            if search:
                maintenances = maintenances.filter(
                    Q(description__icontains=search) |
                    Q(performed_by__icontains=search) |
                    Q(asset__name__icontains=search) |
                    Q(asset__code__icontains=search)
                )

            paginator = self.pagination_class()
            page = paginator.paginate_queryset(maintenances, request)
            serializer = AssetMaintenanceSerializer(page, many=True)

            return Response({
                'message': 'Maintenances retrieved successfully',
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
                'message': f'Error retrieving maintenances: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def post(self, request):
        """New records always start as 'agendada'"""
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            serializer = AssetMaintenanceSerializer(data=request.data, context={'company': company})
            if serializer.is_valid():
                maintenance = serializer.save(status='agendada', created_by=request.user)
                logger.info(f"Maintenance {maintenance.id} scheduled for asset {maintenance.asset_id}")
                return Response({
                    'message': 'Maintenance scheduled successfully',
                    'data': AssetMaintenanceSerializer(maintenance).data,
                    'status': status.HTTP_201_CREATED
                }, status=status.HTTP_201_CREATED)
            return Response({
                'message': 'Validation error',
                'data': serializer.errors,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            return Response({
                'message': f'Error creating maintenance: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class MaintenanceDetailAPIView(APIView):
    """Maintenance detail/update/delete"""

    def get(self, request, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            maintenance = get_company_maintenance(company, pk)
            if not maintenance:
                return maintenance_not_found()

            return Response({
                'message': 'Maintenance retrieved successfully',
                'data': AssetMaintenanceSerializer(maintenance).data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error retrieving maintenance: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def put(self, request, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            maintenance = get_company_maintenance(company, pk)
            if not maintenance:
                return maintenance_not_found()

            serializer = AssetMaintenanceSerializer(
                maintenance, data=request.data, partial=True, context={'company': company}
            )
            if serializer.is_valid():
                serializer.save()
                return Response({
                    'message': 'Maintenance updated successfully',
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
                'message': f'Error updating maintenance: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def delete(self, request, pk):
        """
        Hard delete. Parts of a maintenance that was never completed go back to
        stock; parts of a completed one were really used and stay consumed.
        """
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            maintenance = get_company_maintenance(company, pk)
            if not maintenance:
                return maintenance_not_found()

            with transaction.atomic():
                if maintenance.status != 'concluída':
                    return_parts_to_stock(maintenance)
                maintenance.delete()

            return Response({
                'message': 'Maintenance deleted successfully',
                'data': None,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error deleting maintenance: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class MaintenanceStatusAPIView(APIView):
    """
    PUT - move a maintenance along the workflow
    Body: {"status": "em_andamento"} / {"status": "concluída", "completed_date": "...", "cost": "..."}
    """

    def put(self, request, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            maintenance = get_company_maintenance(company, pk)
            if not maintenance:
                return maintenance_not_found()

            serializer = MaintenanceStatusSerializer(data=request.data)
            if not serializer.is_valid():
                return Response({
                    'message': 'Validation error',
                    'data': serializer.errors,
                    'status': status.HTTP_400_BAD_REQUEST
                }, status=status.HTTP_400_BAD_REQUEST)

            try:
                maintenance = transition_maintenance(
                    maintenance,
                    serializer.validated_data['status'],
                    completed_date=serializer.validated_data.get('completed_date'),
                    cost=serializer.validated_data.get('cost'),
                )
            except MaintenanceTransitionError as e:
                return Response({
                    'message': str(e),
                    'data': None,
                    'status': status.HTTP_400_BAD_REQUEST
                }, status=status.HTTP_400_BAD_REQUEST)

            return Response({
                'message': 'Maintenance status updated successfully',
                'data': AssetMaintenanceSerializer(maintenance).data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error updating maintenance status: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class MaintenanceDashboardAPIView(APIView):
    """Counters for the maintenance dashboard"""

    def get(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            today = timezone.localdate()
            month_start = today.replace(day=1)
            month_end = month_start + relativedelta(months=1, days=-1)

            maintenances = company_maintenances(company)
            completed_this_month = maintenances.filter(
                status='concluída',
                completed_date__gte=month_start,
                completed_date__lte=month_end
            ).aggregate(total=Count('id'), cost=Sum('cost'))

            data = {
                'pending_count': maintenances.filter(status='agendada').count(),
                'in_progress_count': maintenances.filter(status='em_andamento').count(),
                'completed_this_month': completed_this_month['total'],
                'total_cost_this_month': str(completed_this_month['cost'] or Decimal('0.00')),
                'overdue': maintenances.filter(status='agendada', scheduled_date__lt=today).count(),
            }

            return Response({
                'message': 'Maintenance statistics retrieved successfully',
                'data': data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error retrieving maintenance statistics: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class MaintenanceChartAPIView(APIView):
    """Maintenances per month and type over the last 6 months (current month included)"""

    def get(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            first_month = timezone.localdate().replace(day=1) - relativedelta(months=CHART_MONTHS - 1)
            types = [choice for choice, _ in AssetMaintenance.TYPE_CHOICES]

            buckets = {}
            for offset in range(CHART_MONTHS):
                month = first_month + relativedelta(months=offset)
                buckets[month.strftime('%Y-%m')] = dict.fromkeys(types, 0)

            rows = company_maintenances(company).filter(
                scheduled_date__gte=first_month
            ).values_list('scheduled_date', 'maintenance_type')

            for scheduled_date, maintenance_type in rows:
                key = scheduled_date.strftime('%Y-%m')
                if key in buckets:
                    buckets[key][maintenance_type] += 1

            data = [{'month': month, **counts} for month, counts in buckets.items()]

            return Response({
                'message': 'Maintenance chart data retrieved successfully',
                'data': data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error retrieving chart data: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class MaintenanceCalendarAPIView(APIView):
    """Scheduled dates of open maintenances (agendada / em_andamento)"""

    def get(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            dates = company_maintenances(company).filter(
                status__in=['agendada', 'em_andamento']
            ).values('scheduled_date').annotate(total=Count('id')).order_by('scheduled_date')

            data = [
                {'date': row['scheduled_date'].isoformat(), 'total': row['total']}
                for row in dates
            ]

            return Response({
                'message': 'Maintenance calendar retrieved successfully',
                'data': data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error retrieving maintenance calendar: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)
