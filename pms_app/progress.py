"""
Derived state shown next to projects and milestones: completion percentages,
the three-way progress color, and milestone schedule status.
"""
from django.conf import settings
from django.utils import timezone

from .models import Task

SUCCESS_THRESHOLD = 80
WARNING_THRESHOLD = 50

PROGRESS_COLORS = {
    'success': '#28a745',
    'warning': '#ffc107',
    'danger': '#dc3545',
}


def percentage(completed, total):
    if not total:
        return 0.0
    return completed / total * 100


def progress_level(progress):
    if progress >= SUCCESS_THRESHOLD:
        return 'success'
    if progress >= WARNING_THRESHOLD:
        return 'warning'
    return 'danger'


def progress_color(progress):
    return PROGRESS_COLORS[progress_level(progress)]


def project_progress(project):
    """Percentage of the project's live tasks that are completed."""
    tasks = project.tasks.alive()
    return percentage(tasks.filter(status=Task.Status.COMPLETED).count(), tasks.count())


def tasks_progress(tasks):
    """Same as project_progress, for tasks already loaded."""
    return percentage(sum(1 for task in tasks if task.is_completed), len(tasks))


def milestone_progress(project):
    milestones = project.milestones.alive()
    return percentage(milestones.filter(completed=True).count(), milestones.count())


def milestone_status(milestone, today=None):
    """
    Return ``(label, level)`` for a milestone.

    Completed wins over everything; a target before today is overdue; a target
    fewer than PMS_MILESTONE_DUE_SOON_DAYS away is due soon.
    """
    if milestone.completed:
        return 'Completed', 'success'
    today = today or timezone.localdate()
    days_left = (milestone.target_date - today).days
    if days_left < 0:
        return 'Overdue', 'danger'
    if days_left < settings.PMS_MILESTONE_DUE_SOON_DAYS:
        return 'Due Soon', 'warning'
    return 'On Track', 'primary'
