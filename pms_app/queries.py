"""
Task and milestone query builders.

Shared by the REST views and the sync endpoint so both return identical
task sets for the same user and day.
"""
import datetime

from django.conf import settings
from django.db.models import Case, IntegerField, Value, When
from django.utils import timezone

from .models import Task
from .permissions import is_admin

PRIORITY_RANK = Case(
    When(priority=Task.Priority.HIGH, then=Value(3)),
    When(priority=Task.Priority.MEDIUM, then=Value(2)),
    default=Value(1),
    output_field=IntegerField(),
)


def _today(today):
    return today or timezone.localdate()


class TaskQueryBuilder:
    """Builds task querysets scoped the way the dashboard lists need them."""

    @staticmethod
    def live_tasks():
        return Task.objects.alive().filter(project__deleted_at__isnull=True).select_related('project', 'assigned_to')

    @staticmethod
    def scoped_to(user):
        """
        Admins see every task; everyone else only tasks assigned to them.
        """
        tasks = TaskQueryBuilder.live_tasks()
        if is_admin(user):
            return tasks
        return tasks.filter(assigned_to=user)

    @staticmethod
    def incomplete(queryset):
        return queryset.exclude(status=Task.Status.COMPLETED)

    @staticmethod
    def by_priority_desc(queryset):
        return queryset.annotate(priority_rank=PRIORITY_RANK).order_by('-priority_rank', '-created_at')

    @staticmethod
    def overdue(user, today=None):
        tasks = TaskQueryBuilder.scoped_to(user).filter(due_date__lt=_today(today))
        return TaskQueryBuilder.incomplete(tasks).order_by('due_date', '-created_at')

    @staticmethod
    def due_today(user, today=None):
        tasks = TaskQueryBuilder.scoped_to(user).filter(due_date=_today(today))
        return TaskQueryBuilder.by_priority_desc(tasks)

    @staticmethod
    def due_soon(user, days=None, today=None):
        today = _today(today)
        days = settings.PMS_DUE_SOON_DAYS if days is None else days
        tasks = TaskQueryBuilder.scoped_to(user).filter(
            due_date__gte=today, due_date__lte=today + datetime.timedelta(days=days)
        )
        return TaskQueryBuilder.incomplete(tasks).order_by('due_date', '-created_at')

    @staticmethod
    def high_priority(user):
        tasks = TaskQueryBuilder.scoped_to(user).filter(priority=Task.Priority.HIGH)
        return TaskQueryBuilder.incomplete(tasks).order_by('-created_at')

    @staticmethod
    def assigned_to(user):
        # Undated tasks sort last
        return TaskQueryBuilder.live_tasks().filter(assigned_to=user).annotate(
            has_due_date=Case(When(due_date__isnull=True, then=Value(0)), default=Value(1), output_field=IntegerField())
        ).order_by('-has_due_date', 'due_date', '-created_at')

    @staticmethod
    def for_project(project):
        return project.tasks.alive().select_related('assigned_to', 'project').order_by('-created_at')

    @staticmethod
    def for_project_with_status(project, status):
        return TaskQueryBuilder.by_priority_desc(TaskQueryBuilder.for_project(project).filter(status=status))

    @staticmethod
    def for_project_with_priority(project, priority):
        return TaskQueryBuilder.for_project(project).filter(priority=priority)


class MilestoneQueryBuilder:

    @staticmethod
    def for_project(project):
        return project.milestones.alive().select_related('project')

    @staticmethod
    def overdue(project, today=None):
        return MilestoneQueryBuilder.for_project(project).filter(
            target_date__lt=_today(today), completed=False
        ).order_by('target_date')

    @staticmethod
    def upcoming(project, days=None, today=None):
        today = _today(today)
        days = settings.PMS_UPCOMING_MILESTONE_DAYS if days is None else days
        return MilestoneQueryBuilder.for_project(project).filter(
            target_date__gte=today, target_date__lte=today + datetime.timedelta(days=days)
        ).order_by('target_date')
