"""
AI Assistant Views
Asset analysis, category suggestion, report generation and saved reports
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from AssetManagement.models import AssetCategory
from utils.tenant_filter_utils import get_company_and_profile
from .exceptions import LLMServiceError
from .models import SavedReport
from .serializers import (
    AssetAnalysisRequestSerializer,
    CategorySuggestionRequestSerializer,
    ReportRequestSerializer,
    SavedReportSerializer,
)
from .services import analyze_asset, suggest_category, generate_report

logger = logging.getLogger(__name__)


def validation_error(errors):
    return Response({
        'message': 'Validation error',
        'data': errors,
        'status': status.HTTP_400_BAD_REQUEST
    }, status=status.HTTP_400_BAD_REQUEST)


def llm_unavailable(e):
    return Response({
        'message': f'AI service unavailable: {str(e)}',
        'data': None,
        'status': status.HTTP_502_BAD_GATEWAY
    }, status=status.HTTP_502_BAD_GATEWAY)


class AssetAnalysisAPIView(APIView):
    """POST {assetName, description} -> suggested category, useful life, residual %, maintenance plan"""

    def post(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            serializer = AssetAnalysisRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return validation_error(serializer.errors)

            try:
                analysis = analyze_asset(
                    serializer.validated_data['assetName'],
                    serializer.validated_data.get('description')
                )
            except LLMServiceError as e:
                return llm_unavailable(e)

            return Response({
                'message': 'Asset analysis completed successfully',
                'data': analysis,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error analyzing asset: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class CategorySuggestionAPIView(APIView):
    """POST {assetName, categories[]} - company categories are used when none are sent"""

    def post(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            serializer = CategorySuggestionRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return validation_error(serializer.errors)

            categories = [name.strip() for name in serializer.validated_data.get('categories') or [] if name.strip()]
            if not categories:
                categories = list(AssetCategory.objects.filter(
                    company_id=company.id, is_active=True
                ).order_by('name').values_list('name', flat=True))

            try:
                suggestion = suggest_category(serializer.validated_data['assetName'], categories)
            except LLMServiceError as e:
                return llm_unavailable(e)

            return Response({
                'message': 'Category suggested successfully',
                'data': suggestion,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error suggesting category: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class ReportGeneratorAPIView(APIView):
    """POST {prompt} -> aggregated rows plus title and insights"""

    def post(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            serializer = ReportRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return validation_error(serializer.errors)

            report = generate_report(company, serializer.validated_data['prompt'])
            return Response({
                'message': 'Report generated successfully',
                'data': report,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error generating report: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class SavedReportAPIView(APIView):
    """Own saved reports: list/create"""

    def get(self, request):
        try:
            reports = SavedReport.objects.filter(user_id=request.user.id)
            return Response({
                'message': 'Saved reports retrieved successfully',
                'data': SavedReportSerializer(reports, many=True).data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error retrieving saved reports: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def post(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            serializer = SavedReportSerializer(data=request.data)
            if not serializer.is_valid():
                return validation_error(serializer.errors)

            report = serializer.save(user=request.user, company=company)
            return Response({
                'message': 'Report saved successfully',
                'data': SavedReportSerializer(report).data,
                'status': status.HTTP_201_CREATED
            }, status=status.HTTP_201_CREATED)
        except Exception as e:
            return Response({
                'message': f'Error saving report: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class SavedReportDetailAPIView(APIView):
    """Own saved report: detail/update/delete - other users' reports are 404"""

    def _not_found(self):
        return Response({
            'message': 'Saved report not found',
            'data': None,
            'status': status.HTTP_404_NOT_FOUND
        }, status=status.HTTP_404_NOT_FOUND)

    def get(self, request, pk):
        try:
            report = SavedReport.objects.filter(id=pk, user_id=request.user.id).first()
            if not report:
                return self._not_found()

            return Response({
                'message': 'Saved report retrieved successfully',
                'data': SavedReportSerializer(report).data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error retrieving saved report: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def put(self, request, pk):
        try:
            report = SavedReport.objects.filter(id=pk, user_id=request.user.id).first()
            if not report:
                return self._not_found()

            serializer = SavedReportSerializer(report, data=request.data, partial=True)
            if not serializer.is_valid():
                return validation_error(serializer.errors)

            serializer.save()
            return Response({
                'message': 'Saved report updated successfully',
                'data': serializer.data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error updating saved report: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def delete(self, request, pk):
        try:
            report = SavedReport.objects.filter(id=pk, user_id=request.user.id).first()
            if not report:
                return self._not_found()

            report.delete()
            return Response({
                'message': 'Saved report deleted successfully',
                'data': None,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error deleting saved report: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)
