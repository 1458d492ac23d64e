"""
Asset lifecycle: audit history, documents and disposal
"""

import logging

from django.db import transaction
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from utils.pagination_utils import CustomPagination
from utils.tenant_filter_utils import get_company_and_profile
from .audit import record_asset_audit
from .exceptions import AssetDisposalError
from .models import AssetAuditLog, AssetDocument, AssetDisposal
from .serializers import AssetAuditLogSerializer, AssetDisposalSerializer, AssetDocumentSerializer
from .services import dispose_asset
from .views import get_company_asset

logger = logging.getLogger(__name__)


def asset_not_found():
    return Response({
        'message': 'Asset not found',
        'data': None,
        'status': status.HTTP_404_NOT_FOUND
    }, status=status.HTTP_404_NOT_FOUND)


class AssetHistoryAPIView(APIView):
    """Audit trail of one asset, newest first - ?action= to filter"""
    pagination_class = CustomPagination

    def get(self, request, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            asset = get_company_asset(company, pk, with_relations=False)
            if not asset:
                return asset_not_found()

            logs = AssetAuditLog.objects.filter(asset_id=asset.id).select_related('user')

            action = request.query_params.get('action')
            if action:
                logs = logs.filter(action=action)

            paginator = self.pagination_class()
            page = paginator.paginate_queryset(logs, request)
            serializer = AssetAuditLogSerializer(page, many=True)

            return Response({
                'message': 'Asset history retrieved successfully',
                'data': paginator.get_paginated_response(serializer.data),
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error retrieving asset history: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class AssetDocumentAPIView(APIView):
    """Documents of one asset: list and multipart upload"""
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    def get(self, request, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            asset = get_company_asset(company, pk, with_relations=False)
            if not asset:
                return asset_not_found()

            documents = AssetDocument.objects.filter(asset_id=asset.id).select_related('uploaded_by')
            document_type = request.query_params.get('document_type')
            if document_type:
                documents = documents.filter(document_type=document_type)

            return Response({
                'message': 'Asset documents retrieved successfully',
                'data': AssetDocumentSerializer(documents, many=True, context={'request': request}).data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error retrieving asset documents: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def post(self, request, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            asset = get_company_asset(company, pk, with_relations=False)
            if not asset:
                return asset_not_found()

            serializer = AssetDocumentSerializer(data=request.data, context={'request': request})
            if serializer.is_valid():
                with transaction.atomic():
                    document = serializer.save(asset=asset, uploaded_by=request.user)
                    record_asset_audit(
                        asset, request.user, 'document_uploaded',
                        new_data={
                            'document_id': str(document.id),
                            'name': document.name,
                            'document_type': document.document_type,
                            'file_size': document.file_size,
                        }
                    )
                return Response({
                    'message': 'Document uploaded successfully',
                    'data': AssetDocumentSerializer(document, context={'request': request}).data,
                    'status': status.HTTP_201_CREATED
                }, status=status.HTTP_201_CREATED)
            return Response({
                'message': 'Validation error',
                'data': serializer.errors,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            return Response({
                'message': f'Error uploading document: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class AssetDocumentDetailAPIView(APIView):
    """Delete a document (file removed from storage too)"""

    def delete(self, request, pk, document_id):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            asset = get_company_asset(company, pk, with_relations=False)
            if not asset:
                return asset_not_found()

            document = AssetDocument.objects.filter(id=document_id, asset_id=asset.id).first()
            if not document:
                return Response({
                    'message': 'Document not found',
                    'data': None,
                    'status': status.HTTP_404_NOT_FOUND
                }, status=status.HTTP_404_NOT_FOUND)

            document.file.delete(save=False)
            document.delete()
            logger.info(f"Document {document_id} removed from asset {asset.id} by {request.user.id}")
            return Response({
                'message': 'Document deleted successfully',
                'data': None,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error deleting document: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class AssetDisposalAPIView(APIView):
    """GET the disposal record, POST to dispose the asset"""

    def get(self, request, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            asset = get_company_asset(company, pk, with_relations=False)
            if not asset:
                return asset_not_found()

            disposal = AssetDisposal.objects.filter(asset_id=asset.id).select_related('asset').first()
            if not disposal:
                return Response({
                    'message': 'Asset has not been disposed',
                    'data': None,
                    'status': status.HTTP_404_NOT_FOUND
                }, status=status.HTTP_404_NOT_FOUND)

            return Response({
                'message': 'Disposal retrieved successfully',
                'data': AssetDisposalSerializer(disposal).data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error retrieving disposal: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)

    def post(self, request, pk):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            asset = get_company_asset(company, pk, with_relations=False)
            if not asset:
                return asset_not_found()

            serializer = AssetDisposalSerializer(data=request.data)
            if not serializer.is_valid():
                return Response({
                    'message': 'Validation error',
                    'data': serializer.errors,
                    'status': status.HTTP_400_BAD_REQUEST
                }, status=status.HTTP_400_BAD_REQUEST)

            try:
                disposal = dispose_asset(asset, request.user, serializer.validated_data)
            except AssetDisposalError as e:
                return Response({
                    'message': str(e),
                    'data': None,
                    'status': status.HTTP_400_BAD_REQUEST
                }, status=status.HTTP_400_BAD_REQUEST)

            return Response({
                'message': 'Asset disposed successfully',
                'data': AssetDisposalSerializer(disposal).data,
                'status': status.HTTP_201_CREATED
            }, status=status.HTTP_201_CREATED)
        except Exception as e:
            return Response({
                'message': f'Error disposing asset: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)
