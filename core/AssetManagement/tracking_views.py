"""
Asset tracking: responsible user, location updates, map, search and QR codes
"""

import logging

from django.db import transaction
from django.db.models import Q
from django.http import HttpResponse
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from AuthN.models import UserProfile
from utils.Asset import build_qr_payload, generate_qr_png, parse_qr_payload
from utils.tenant_filter_utils import get_company_and_profile
from .audit import record_asset_audit, record_asset_update, snapshot_asset
from .models import Asset
from .serializers import AssetLocationSerializer, AssetMapSerializer, AssetSerializer
from .views import get_company_asset

logger = logging.getLogger(__name__)

LOCATION_FIELDS = ['location_type', 'current_location', 'latitude', 'longitude', 'rfid_id']
TRACKING_SEARCH_LIMIT = 50


class AssetAssignAPIView(APIView):
    """
    PUT - assign or remove the responsible user
    Body: {"assigned_to": "<user uuid>"} or {"assigned_to": null}
    """

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

            if asset.status == 'disposed':
                return Response({
                    'message': 'Disposed assets cannot be reassigned',
                    'data': None,
                    'status': status.HTTP_400_BAD_REQUEST
                }, status=status.HTTP_400_BAD_REQUEST)

            if 'assigned_to' not in request.data:
                return Response({
                    'message': 'assigned_to is required (null removes the responsible user)',
                    'data': None,
                    'status': status.HTTP_400_BAD_REQUEST
                }, status=status.HTTP_400_BAD_REQUEST)

            user_id = request.data.get('assigned_to') or None
            if user_id and not UserProfile.objects.filter(
                user_id=user_id, company_id=company.id, user__is_active=True
            ).exists():
                return Response({
                    'message': 'Responsible user must be an active member of your company',
                    'data': None,
                    'status': status.HTTP_400_BAD_REQUEST
                }, status=status.HTTP_400_BAD_REQUEST)

            old_snapshot = snapshot_asset(asset)
            with transaction.atomic():
                asset.assigned_to_id = user_id
                asset.save(update_fields=['assigned_to', 'updated_at'])
                record_asset_update(asset, request.user, old_snapshot)

            asset = get_company_asset(company, pk)
            return Response({
                'message': 'Responsible user updated successfully',
                'data': AssetSerializer(asset).data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error assigning asset: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class AssetLocationAPIView(APIView):
    """PUT - update tracking method and position"""

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

            old_snapshot = snapshot_asset(asset, LOCATION_FIELDS)
            serializer = AssetLocationSerializer(asset, data=request.data, partial=True)
            if serializer.is_valid():
                with transaction.atomic():
                    asset = serializer.save()
                    new_snapshot = snapshot_asset(asset, LOCATION_FIELDS)
                    if new_snapshot != old_snapshot:
                        record_asset_audit(
                            asset, request.user, 'location_updated',
                            old_data=old_snapshot, new_data=new_snapshot
                        )
                return Response({
                    'message': 'Asset location updated successfully',
                    'data': AssetMapSerializer(asset).data,
                    'status': status.HTTP_200_OK
                }, status=status.HTTP_200_OK)
            return Response({
                'message': 'Validation error',
                'data': serializer.errors,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)
        except Exception as e:
            return Response({
                'message': f'Error updating asset location: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class AssetMapAPIView(APIView):
    """Assets with coordinates, for the map view"""

    def get(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            assets = Asset.objects.filter(
                company_id=company.id,
                is_active=True,
                latitude__isnull=False,
                longitude__isnull=False
            ).exclude(status='disposed').select_related('category')

            location_type = request.query_params.get('location_type')
            if location_type:
                assets = assets.filter(location_type=location_type)

            return Response({
                'message': 'Asset locations retrieved successfully',
                'data': AssetMapSerializer(assets, many=True).data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error retrieving asset locations: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class AssetTrackingSearchAPIView(APIView):
    """Search by name, code, RFID tag or current location - ?q="""

    def get(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            term = request.query_params.get('q', '').strip()
            if not term:
                return Response({
                    'message': 'Search term (q) is required',
                    'data': None,
                    'status': status.HTTP_400_BAD_REQUEST
                }, status=status.HTTP_400_BAD_REQUEST)

            assets = Asset.objects.filter(company_id=company.id, is_active=True).filter(
                Q(name__icontains=term) |
                Q(code__icontains=term) |
                Q(rfid_id__iexact=term) |
                Q(current_location__icontains=term)
            ).select_related('category').order_by('name')[:TRACKING_SEARCH_LIMIT]

            return Response({
                'message': 'Assets retrieved successfully',
                'data': AssetMapSerializer(assets, many=True).data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error searching assets: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class AssetQRCodeAPIView(APIView):
    """PNG QR code encoding ASSET:<code>"""

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

            png = generate_qr_png(build_qr_payload(asset.code))
            response = HttpResponse(png, content_type='image/png')
            response['Content-Disposition'] = f'inline; filename="{asset.code}.png"'
            return response
        except Exception as e:
            return Response({
                'message': f'Error generating QR code: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class AssetScanAPIView(APIView):
    """
    POST - resolve a scanned QR payload (or typed code) to an asset
    Body: {"payload": "ASSET:AST123456ABC"} or {"code": "AST123456ABC"}
    """

    def post(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            code = parse_qr_payload(request.data.get('payload') or request.data.get('code'))
            if not code:
                return Response({
                    'message': 'payload or code is required',
                    'data': None,
                    'status': status.HTTP_400_BAD_REQUEST
                }, status=status.HTTP_400_BAD_REQUEST)

            asset = Asset.objects.filter(
                company_id=company.id, code__iexact=code, is_active=True
            ).select_related(
                'category', 'department', 'unit', 'assigned_to', 'assigned_to__own_user_profile'
            ).first()
            if not asset:
                return Response({
                    'message': f'No asset found for code {code}',
                    'data': None,
                    'status': status.HTTP_404_NOT_FOUND
                }, status=status.HTTP_404_NOT_FOUND)

            return Response({
                'message': 'Asset found',
                'data': AssetSerializer(asset).data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error scanning asset: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)
