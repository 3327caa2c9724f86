"""
Notification API Views for EMall
Notification bell: recent list, unread count, mark read and delete.
"""

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from apps.api.core import error_response
from apps.common.constants import RECENT_NOTIFICATIONS_LIMIT
from apps.notifications.services import NotificationService

from .serializers import NotificationSerializer


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def notification_list(request: Request) -> Response:
    """GET recent notifications with unread count, DELETE clears the inbox"""
    if request.method == 'DELETE':
        deleted = NotificationService.delete_all(request.user)
        return Response({'success': True, 'deleted': deleted})

    try:
        limit = int(request.query_params.get('limit', RECENT_NOTIFICATIONS_LIMIT))
    except ValueError:
        return error_response('limit must be a number', code='VALIDATION_ERROR')

    notifications = NotificationService.get_recent(request.user, limit=limit)
    return Response({
        'results': NotificationSerializer(notifications, many=True).data,
        'unread_count': NotificationService.get_unread_count(request.user),
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def mark_read(request: Request, notification_id: str) -> Response:
    if not NotificationService.mark_as_read(notification_id, request.user):
        return error_response('Notification not found', code='NOT_FOUND', status=status.HTTP_404_NOT_FOUND)
    return Response({'success': True})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def mark_all_read(request: Request) -> Response:
    updated = NotificationService.mark_all_as_read(request.user)
    return Response({'success': True, 'updated': updated})


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def delete_notification(request: Request, notification_id: str) -> Response:
    if not NotificationService.delete(notification_id, request.user):
        return error_response('Notification not found', code='NOT_FOUND', status=status.HTTP_404_NOT_FOUND)
    return Response(status=status.HTTP_204_NO_CONTENT)
