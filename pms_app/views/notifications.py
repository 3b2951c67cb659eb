# pms_app/views/notifications.py
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.exceptions import NotFound
from rest_framework import status
from ..models import Notification
from ..serializers import NotificationSerializer


class NotificationListView(APIView):
    def get(self, request):
        notifications = Notification.objects.filter(user=request.user).select_related('user')
        return Response(NotificationSerializer(notifications, many=True).data)


class UnreadNotificationListView(APIView):
    def get(self, request):
        notifications = Notification.objects.filter(user=request.user, read=False).select_related('user')
        return Response(NotificationSerializer(notifications, many=True).data)


class UnreadNotificationCountView(APIView):
    def get(self, request):
        return Response({
            'userId': request.user.id,
            'userName': request.user.name,
            'unreadCount': Notification.objects.filter(user=request.user, read=False).count(),
        })


class MarkNotificationReadView(APIView):
    def put(self, request, pk):
        # Only the owner's notifications match, so foreign ids look missing
        updated = Notification.objects.filter(pk=pk, user=request.user).update(read=True)
        if not updated:
            raise NotFound(f"Notification {pk} not found")
        return Response(status=status.HTTP_200_OK)


class MarkAllNotificationsReadView(APIView):
    def put(self, request):
        Notification.objects.filter(user=request.user, read=False).update(read=True)
        return Response(status=status.HTTP_200_OK)
