from django.shortcuts import get_object_or_404
from rest_framework.views import APIView
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from .models import Notification
from .serializers import NotificationSerializer


class NotificationListView(APIView):
    @extend_schema(
        summary="List notifications",
        parameters=[
            OpenApiParameter(name='unread', type=OpenApiTypes.BOOL, location=OpenApiParameter.QUERY),
        ],
        responses={200: NotificationSerializer(many=True)}
    )
    def get(self, request):
        notifications = Notification.objects.all()
        if request.query_params.get('unread', '').lower() in ('1', 'true', 'yes'):
            notifications = notifications.unread()
        return Response({
            'unread_count': Notification.objects.unread().count(),
            'results': NotificationSerializer(notifications[:100], many=True).data,
        })


class MarkNotificationReadView(APIView):
    @extend_schema(summary="Mark a notification as read", request=None, responses={200: NotificationSerializer})
    def post(self, request, notification_id):
        notification = get_object_or_404(Notification, id=notification_id)
        if not notification.is_read:
            notification.is_read = True
            notification.save(update_fields=['is_read'])
        return Response(NotificationSerializer(notification).data)


class MarkAllNotificationsReadView(APIView):
    @extend_schema(summary="Mark every notification as read", request=None, responses={200: OpenApiTypes.OBJECT})
    def post(self, request):
        updated = Notification.objects.unread().update(is_read=True)
        return Response({'marked_read': updated})
