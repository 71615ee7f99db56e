from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Notification, User
from ..permissions import IsAdminRole
from ..serializers.notifications import NotificationListQuerySerializer, NotificationSendSerializer
from ..services import notifications as notification_service
from ..services.notifications import serialize_notification


def _denied():
    return Response({'ok': False, 'detail': 'Permission denied', 'error': 'permission_denied'},
                    status=status.HTTP_403_FORBIDDEN)


def _owned(request, notification_id: int) -> Notification | None:
    n = get_object_or_404(Notification, pk=notification_id)
    if request.user.role != 'admin' and n.user_id != request.user.id:
        return None
    return n


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def send_notification(request):
    s = NotificationSendSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = dict(s.validated_data)
    user = get_object_or_404(User, pk=v.pop('user_id'))
    n = notification_service.notify(user, **v)
    return Response({'ok': True, 'data': serialize_notification(n)}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_notifications(request, user_id: int):
    if request.user.role != 'admin' and request.user.id != user_id:
        return _denied()
    q = NotificationListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = Notification.objects.filter(user_id=user_id)
    unread = qs.filter(is_read=False).count()
    if q.validated_data['unread_only']:
        qs = qs.filter(is_read=False)
    rows = qs.order_by('-created_at')[:q.validated_data['limit']]
    return Response({'ok': True, 'data': [serialize_notification(n) for n in rows], 'unread_count': unread})


@api_view(['PATCH', 'PUT'])
@permission_classes([IsAuthenticated])
def mark_notification_read(request, notification_id: int):
    n = _owned(request, notification_id)
    if n is None:
        return _denied()
    n = notification_service.mark_read(n)
    return Response({'ok': True, 'data': serialize_notification(n)})


@api_view(['PATCH', 'PUT'])
@permission_classes([IsAuthenticated])
def mark_all_notifications_read(request, user_id: int):
    if request.user.role != 'admin' and request.user.id != user_id:
        return _denied()
    user = get_object_or_404(User, pk=user_id)
    count = notification_service.mark_all_read(user)
    return Response({'ok': True, 'updated': count})


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def delete_notification(request, notification_id: int):
    n = _owned(request, notification_id)
    if n is None:
        return _denied()
    n.delete()
    return Response({'ok': True, 'message': 'Notification deleted'})
