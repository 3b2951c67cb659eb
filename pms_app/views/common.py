# pms_app/views/common.py
"""
Object lookups shared by the API views.

A resource the caller cannot see is reported exactly like a missing one.
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.exceptions import NotFound, PermissionDenied

from ..models import Project, Task, Milestone, Comment
from .. import permissions

logger = logging.getLogger(__name__)


def _get_or_404(queryset, pk, label):
    try:
        return queryset.get(pk=pk)
    except (queryset.model.DoesNotExist, DjangoValidationError, ValueError):
        raise NotFound(f"{label} {pk} not found")


def get_project(request, pk):
    project = _get_or_404(Project.objects.alive().select_related('creator'), pk, 'Project')
    if not permissions.can_access_project(project, request.user):
        raise NotFound(f"Project {pk} not found")
    return project


def get_task(request, pk):
    queryset = Task.objects.alive().filter(project__deleted_at__isnull=True).select_related('project', 'assigned_to')
    task = _get_or_404(queryset, pk, 'Task')
    if not permissions.can_access_task(task, request.user):
        raise NotFound(f"Task {pk} not found")
    return task


def get_milestone(request, pk):
    queryset = Milestone.objects.alive().filter(project__deleted_at__isnull=True).select_related('project')
    milestone = _get_or_404(queryset, pk, 'Milestone')
    if not permissions.can_access_project(milestone.project, request.user):
        raise NotFound(f"Milestone {pk} not found")
    return milestone


def get_comment(request, pk):
    queryset = Comment.objects.filter(task__deleted_at__isnull=True).select_related('task__project', 'user')
    comment = _get_or_404(queryset, pk, 'Comment')
    if not permissions.can_access_task(comment.task, request.user):
        raise NotFound(f"Comment {pk} not found")
    return comment


def require(allowed, request, action):
    """Raise PermissionDenied unless ``allowed``."""
    if not allowed:
        logger.info("Denied %s for user %s", action, request.user.id)
        raise PermissionDenied(f"You do not have permission to {action}.")
