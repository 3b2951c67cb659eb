# pms_app/views/activity.py
"""Time entries and comments recorded against tasks."""
import logging

from django.db.models import Sum
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from ..models import Comment, TimeEntry
from ..serializers import TimeEntrySerializer, CommentSerializer
from .. import notifications
from .. import permissions
from .common import get_task, get_comment, require

logger = logging.getLogger(__name__)


def total_hours(queryset):
    return queryset.aggregate(total=Sum('hours_spent'))['total'] or 0.0


class TaskTimeEntryListView(APIView):
    def get(self, request, task_id):
        task = get_task(request, task_id)
        entries = task.time_entries.select_related('user', 'task')
        return Response(TimeEntrySerializer(entries, many=True).data)

    def post(self, request, task_id):
        task = get_task(request, task_id)
        serializer = TimeEntrySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entry = serializer.save(task=task, user=request.user)
        logger.info("User %s logged %.2fh on task %s", request.user.id, entry.hours_spent, task.id)
        return Response(TimeEntrySerializer(entry).data, status=status.HTTP_201_CREATED)


class MyTaskTimeEntryListView(APIView):
    def get(self, request, task_id):
        task = get_task(request, task_id)
        entries = task.time_entries.filter(user=request.user).select_related('user', 'task')
        return Response(TimeEntrySerializer(entries, many=True).data)


class TaskTimeSummaryView(APIView):
    def get(self, request, task_id):
        task = get_task(request, task_id)
        return Response({
            'taskId': task.id,
            'totalHours': total_hours(task.time_entries.all()),
            'userHours': total_hours(task.time_entries.filter(user=request.user)),
        })


class MyTimeEntryListView(APIView):
    def get(self, request):
        entries = TimeEntry.objects.filter(user=request.user).select_related('user', 'task')
        return Response(TimeEntrySerializer(entries, many=True).data)


class MyTotalHoursView(APIView):
    def get(self, request):
        return Response({
            'userId': request.user.id,
            'userName': request.user.name,
            'totalHours': total_hours(TimeEntry.objects.filter(user=request.user)),
        })


class TaskCommentListView(APIView):
    """
    Comments on a task, newest first.

    Anyone who can see the task may comment; the task's assignee is notified
    when someone else comments.
    """

    def get(self, request, task_id):
        task = get_task(request, task_id)
        comments = task.comments.select_related('user', 'task')
        return Response(CommentSerializer(comments, many=True).data)

    def post(self, request, task_id):
        task = get_task(request, task_id)
        serializer = CommentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = serializer.save(task=task, user=request.user)
        notifications.notify_new_comment(task, request.user)
        return Response(CommentSerializer(comment).data, status=status.HTTP_201_CREATED)


class CommentDetailView(APIView):

    def get(self, request, pk):
        return Response(CommentSerializer(get_comment(request, pk)).data)

    def put(self, request, pk):
        comment = get_comment(request, pk)
        require(permissions.can_edit_comment(comment, request.user), request, 'edit this comment')
        serializer = CommentSerializer(comment, data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    def delete(self, request, pk):
        comment = get_comment(request, pk)
        require(permissions.can_delete_comment(comment, request.user), request, 'delete this comment')
        comment.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


class MyCommentListView(APIView):
    def get(self, request):
        comments = Comment.objects.filter(user=request.user, task__deleted_at__isnull=True).select_related('user', 'task')
        return Response(CommentSerializer(comments, many=True).data)
