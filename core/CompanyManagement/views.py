"""
Company Management Views
Company, Department and Unit operations scoped to the requester's company
Standard response format: message, data, status
"""

import logging

from django.db.models import Q
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from AuthN.permissions import IsCompanyAdminOrReadOnly
from utils.tenant_filter_utils import get_company_and_profile, filter_queryset_by_company
from .models import Department, Unit
from .serializers import CompanySerializer, DepartmentSerializer, UnitSerializer

logger = logging.getLogger(__name__)


class CompanyDetailAPIView(APIView):
    """Requester's own company"""
    permission_classes = [IsCompanyAdminOrReadOnly]

    def get(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            return Response({
                'message': 'Company retrieved successfully',
                'data': CompanySerializer(company).data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error retrieving company: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def put(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            serializer = CompanySerializer(company, data=request.data, partial=True)
            if serializer.is_valid():
                serializer.save()
                return Response({
                    'message': 'Company updated successfully',
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
                'message': f'Error updating company: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class DepartmentAPIView(APIView):
    """Department list/create"""
    permission_classes = [IsCompanyAdminOrReadOnly]

    def get(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            departments = Department.objects.filter(company_id=company.id).select_related(
                'manager', 'manager__own_user_profile'
            ).order_by('name')

            search = request.query_params.get('search', '').strip()
            if search:
                departments = departments.filter(Q(name__icontains=search) | Q(description__icontains=search))

            serializer = DepartmentSerializer(departments, many=True)
            return Response({
                'message': 'Departments retrieved successfully',
                'data': serializer.data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error retrieving departments: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def post(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            serializer = DepartmentSerializer(data=request.data, context={'company': company})
            if serializer.is_valid():
                serializer.save(company=company)
                return Response({
                    'message': 'Department created successfully',
                    'data': serializer.data,
                    'status': status.HTTP_201_CREATED
                }, status=status.HTTP_201_CREATED)
            return Response({
                'message': 'Validation error',
                'data': serializer.errors,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            return Response({
                'message': f'Error creating department: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class DepartmentDetailAPIView(APIView):
    """Department detail/update/delete"""
    permission_classes = [IsCompanyAdminOrReadOnly]

    def get(self, request, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            department = Department.objects.filter(id=pk, company_id=company.id).first()
            if not department:
                return Response({
                    'message': 'Department not found',
                    'data': None,
                    'status': status.HTTP_404_NOT_FOUND
                }, status=status.HTTP_404_NOT_FOUND)

            return Response({
                'message': 'Department retrieved successfully',
                'data': DepartmentSerializer(department).data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error retrieving department: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def put(self, request, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            department = Department.objects.filter(id=pk, company_id=company.id).first()
            if not department:
                return Response({
                    'message': 'Department not found',
                    'data': None,
                    'status': status.HTTP_404_NOT_FOUND
                }, status=status.HTTP_404_NOT_FOUND)

            serializer = DepartmentSerializer(department, data=request.data, partial=True, context={'company': company})
            if serializer.is_valid():
                serializer.save()
                return Response({
                    'message': 'Department updated successfully',
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
                'message': f'Error updating department: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def delete(self, request, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            department = Department.objects.filter(id=pk, company_id=company.id).first()
            if not department:
                return Response({
                    'message': 'Department not found',
                    'data': None,
                    'status': status.HTTP_404_NOT_FOUND
                }, status=status.HTTP_404_NOT_FOUND)

            department.delete()
            logger.info(f"Department {pk} deleted by {request.user.id}")

            return Response({
                'message': 'Department deleted successfully',
                'data': None,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error deleting department: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class UnitAPIView(APIView):
    """Unit list/create, units are scoped through their department's company"""
    permission_classes = [IsCompanyAdminOrReadOnly]

    def get(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            units = filter_queryset_by_company(
                Unit.objects.select_related('department'), company.id, 'department__company'
            ).order_by('department__name', 'name')

            department_id = request.query_params.get('department')
            if department_id:
                units = units.filter(department_id=department_id)

            serializer = UnitSerializer(units, many=True)
            return Response({
                'message': 'Units retrieved successfully',
                'data': serializer.data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error retrieving units: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def post(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            serializer = UnitSerializer(data=request.data, context={'company': company})
            if serializer.is_valid():
                serializer.save()
                return Response({
                    'message': 'Unit created successfully',
                    'data': serializer.data,
                    'status': status.HTTP_201_CREATED
                }, status=status.HTTP_201_CREATED)
            return Response({
                'message': 'Validation error',
                'data': serializer.errors,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            return Response({
                'message': f'Error creating unit: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class UnitDetailAPIView(APIView):
    """Unit detail/update/delete"""
    permission_classes = [IsCompanyAdminOrReadOnly]

    def get_unit(self, company, pk):
        return Unit.objects.select_related('department').filter(
            id=pk, department__company_id=company.id
        ).first()

    def get(self, request, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            unit = self.get_unit(company, pk)
            if not unit:
                return Response({
                    'message': 'Unit not found',
                    'data': None,
                    'status': status.HTTP_404_NOT_FOUND
                }, status=status.HTTP_404_NOT_FOUND)

            return Response({
                'message': 'Unit retrieved successfully',
                'data': UnitSerializer(unit).data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error retrieving unit: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def put(self, request, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            unit = self.get_unit(company, pk)
            if not unit:
                return Response({
                    'message': 'Unit not found',
                    'data': None,
                    'status': status.HTTP_404_NOT_FOUND
                }, status=status.HTTP_404_NOT_FOUND)

            serializer = UnitSerializer(unit, data=request.data, partial=True, context={'company': company})
            if serializer.is_valid():
                serializer.save()
                return Response({
                    'message': 'Unit updated successfully',
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
                'message': f'Error updating unit: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def delete(self, request, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            unit = self.get_unit(company, pk)
            if not unit:
                return Response({
                    'message': 'Unit not found',
                    'data': None,
                    'status': status.HTTP_404_NOT_FOUND
                }, status=status.HTTP_404_NOT_FOUND)

            unit.delete()
            return Response({
                'message': 'Unit deleted successfully',
                'data': None,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error deleting unit: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)
