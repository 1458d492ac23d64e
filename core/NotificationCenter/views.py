"""
Notification Views - every query is limited to the requesting user's own rows
"""

import logging

from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from utils.pagination_utils import CustomPagination
from utils.tenant_filter_utils import get_company_and_profile
from .models import Notification
from .serializers import NotificationSerializer
from .services import run_company_checks

logger = logging.getLogger(__name__)


def notification_not_found():
    return Response({
        'message': 'Notification not found',
        'data': None,
        'status': status.HTTP_404_NOT_FOUND
    }, status=status.HTTP_404_NOT_FOUND)


class NotificationAPIView(APIView):
    """List notifications - ?unread=true for unread only"""
    pagination_class = CustomPagination

    def get(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            notifications = Notification.objects.filter(
                user_id=request.user.id, is_dismissed=False
            ).select_related('asset')

            unread_count = notifications.filter(is_read=False).count()
            if request.query_params.get('unread', '').lower() == 'true':
                notifications = notifications.filter(is_read=False)

            paginator = self.pagination_class()
            page = paginator.paginate_queryset(notifications, request)
            data = paginator.get_paginated_response(NotificationSerializer(page, many=True).data)
            data['unread_count'] = unread_count

            return Response({
                'message': 'Notifications retrieved successfully',
                'data': data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error retrieving notifications: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class NotificationReadAPIView(APIView):
    """PUT - mark one notification as read"""

    def put(self, request, pk):
        try:
            notification = Notification.objects.filter(
                id=pk, user_id=request.user.id, is_dismissed=False
            ).first()
            if not notification:
                return notification_not_found()

            if not notification.is_read:
                notification.is_read = True
                notification.read_at = timezone.now()
                notification.save(update_fields=['is_read', 'read_at'])

            return Response({
                'message': 'Notification marked as read',
                'data': NotificationSerializer(notification).data,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error updating notification: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class NotificationReadAllAPIView(APIView):
    """PUT - mark every notification of the user as read"""

    def put(self, request):
        try:
            updated = Notification.objects.filter(
                user_id=request.user.id, is_dismissed=False, is_read=False
            ).update(is_read=True, read_at=timezone.now())

            return Response({
                'message': 'All notifications marked as read',
                'data': {'updated': updated},
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error updating notifications: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class NotificationDismissAPIView(APIView):
    """DELETE - dismiss; the row is kept so the same key is not raised again"""

    def delete(self, request, pk):
        try:
            notification = Notification.objects.filter(
                id=pk, user_id=request.user.id, is_dismissed=False
            ).first()
            if not notification:
                return notification_not_found()

            notification.is_dismissed = True
            notification.save(update_fields=['is_dismissed'])

            return Response({
                'message': 'Notification dismissed',
                'data': None,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error dismissing notification: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)


class NotificationRefreshAPIView(APIView):
    """POST - run the checks for the user's company now instead of waiting for the beat"""

    def post(self, request):
        try:
            profile, company, error_response = get_company_and_profile(request)
            if error_response:
                return error_response

            result = run_company_checks(company)
            return Response({
                'message': 'Notification checks completed',
                'data': result,
                'status': status.HTTP_200_OK
            }, status=status.HTTP_200_OK)
        except Exception as e:
            return Response({
                'message': f'Error running notification checks: {str(e)}',
                'data': None,
                'status': status.HTTP_400_BAD_REQUEST
            }, status=status.HTTP_400_BAD_REQUEST)
