# pms_app/views/tasks.py
import logging

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.exceptions import ValidationError
from rest_framework import status
from ..models import Task
from ..serializers import TaskSerializer, TaskStatusSerializer
from ..queries import TaskQueryBuilder
from .. import notifications
from .. import permissions
from .common import get_project, get_task, require

logger = logging.getLogger(__name__)


def _parse_choice(value, enum, label):
    """Resolve a path segment such as ``in_progress`` to an enum value."""
    candidate = value.upper()
    if candidate not in enum.values:
        raise ValidationError({label: f"Unknown {label} '{value}'. Expected one of {', '.join(enum.values)}."})
    return candidate


def determine_assignee(project, user, requested):
    """
    Pick the assignee for a new task.

    A requested assignee is honoured only when the caller may assign to them;
    otherwise the task goes to the caller.
    """
    if requested is not None and permissions.can_assign_to_user(project, user, requested):
        return requested
    return user


def save_task_update(serializer, task, user):
    """
    Save a validated update to ``task``.

    A new assignee is applied only when ``user`` may assign tasks in the
    project; otherwise the current assignee stays. The new assignee is notified.
    """
    previous_assignee_id = task.assigned_to_id
    requested = serializer.validated_data.pop('assigned_to', None)
    if requested is not None and permissions.can_assign_task(task.project, user):
        serializer.validated_data['assigned_to'] = requested

    task = serializer.save()
    if task.assigned_to_id != previous_assignee_id:
        notifications.notify_task_assignment(task.assigned_to, task, user)
    return task


class ProjectTaskListView(APIView):
    """
    Tasks of a single project, newest first.

    POST creates a task in the project. Only the project creator or an admin
    may add tasks.
    """

    def get(self, request, project_id):
        project = get_project(request, project_id)
        return Response(TaskSerializer(TaskQueryBuilder.for_project(project), many=True).data)

    def post(self, request, project_id):
        project = get_project(request, project_id)
        require(permissions.can_modify_project(project, request.user), request, 'add tasks to this project')

        serializer = TaskSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        requested = serializer.validated_data.pop('assigned_to', None)
        assignee = determine_assignee(project, request.user, requested)

        task = serializer.save(project=project, assigned_to=assignee)
        notifications.notify_task_assignment(assignee, task, request.user)
        logger.info("Task %s created in project %s", task.id, project.id)
        return Response(TaskSerializer(task).data, status=status.HTTP_201_CREATED)


class TaskDetailView(APIView):

    def get(self, request, pk):
        return Response(TaskSerializer(get_task(request, pk)).data)

    def put(self, request, pk):
        task = get_task(request, pk)
        require(permissions.can_modify_task(task, request.user), request, 'update this task')

        serializer = TaskSerializer(task, data=request.data)
        serializer.is_valid(raise_exception=True)
        task = save_task_update(serializer, task, request.user)
        return Response(TaskSerializer(task).data)

    def delete(self, request, pk):
        task = get_task(request, pk)
        require(permissions.can_modify_task(task, request.user), request, 'delete this task')
        task.soft_delete()
        logger.info("Task %s deleted by user %s", task.id, request.user.id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class TaskStatusView(APIView):
    def put(self, request, pk):
        task = get_task(request, pk)
        require(permissions.can_modify_task(task, request.user), request, 'update this task')
        serializer = TaskStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        task.status = serializer.validated_data['status']
        task.save(update_fields=['status', 'updated_at'])
        return Response(TaskSerializer(task).data)


class ProjectTasksByStatusView(APIView):
    def get(self, request, project_id, task_status):
        project = get_project(request, project_id)
        value = _parse_choice(task_status, Task.Status, 'status')
        tasks = TaskQueryBuilder.for_project_with_status(project, value)
        return Response(TaskSerializer(tasks, many=True).data)


class ProjectTasksByPriorityView(APIView):
    def get(self, request, project_id, priority):
        project = get_project(request, project_id)
        value = _parse_choice(priority, Task.Priority, 'priority')
        tasks = TaskQueryBuilder.for_project_with_priority(project, value)
        return Response(TaskSerializer(tasks, many=True).data)


class AssignedToMeView(APIView):
    def get(self, request):
        return Response(TaskSerializer(TaskQueryBuilder.assigned_to(request.user), many=True).data)


class OverdueTasksView(APIView):
    def get(self, request):
        return Response(TaskSerializer(TaskQueryBuilder.overdue(request.user), many=True).data)


class DueTodayTasksView(APIView):
    def get(self, request):
        return Response(TaskSerializer(TaskQueryBuilder.due_today(request.user), many=True).data)


class DueSoonTasksView(APIView):
    max_days = 3650

    def get(self, request):
        days = request.query_params.get('days')
        if days is not None:
            try:
                days = int(days)
            except ValueError:
                raise ValidationError({'days': 'Must be an integer.'})
            if days < 0:
                raise ValidationError({'days': 'Must not be negative.'})
            if days > self.max_days:
                raise ValidationError({'days': f'Must not exceed {self.max_days}.'})
        return Response(TaskSerializer(TaskQueryBuilder.due_soon(request.user, days=days), many=True).data)


class HighPriorityTasksView(APIView):
    def get(self, request):
        return Response(TaskSerializer(TaskQueryBuilder.high_priority(request.user), many=True).data)
