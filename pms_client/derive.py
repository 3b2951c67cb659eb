"""
Derived state computed on the client from fetched payloads.

Works on the camelCase dicts returned by the API so values can be recomputed
right after a local mutation, before the next fetch.
"""
import datetime

SUCCESS_THRESHOLD = 80
WARNING_THRESHOLD = 50
MILESTONE_DUE_SOON_DAYS = 7

PROGRESS_COLORS = {
    'success': '#28a745',
    'warning': '#ffc107',
    'danger': '#dc3545',
}


def percentage(completed, total):
    if not total:
        return 0.0
    return completed / total * 100


def task_progress(tasks):
    """Percentage of ``tasks`` whose status is COMPLETED."""
    tasks = list(tasks or [])
    completed = sum(1 for task in tasks if task.get('status') == 'COMPLETED')
    return percentage(completed, len(tasks))


def milestone_completion(milestones):
    milestones = list(milestones or [])
    return percentage(sum(1 for m in milestones if m.get('completed')), len(milestones))


def progress_level(progress):
    if progress >= SUCCESS_THRESHOLD:
        return 'success'
    if progress >= WARNING_THRESHOLD:
        return 'warning'
    return 'danger'


def progress_color(progress):
    return PROGRESS_COLORS[progress_level(progress)]


def parse_date(value):
    if value is None or isinstance(value, datetime.date):
        return value
    return datetime.date.fromisoformat(value[:10])


def is_overdue(task, today=None):
    due = parse_date(task.get('dueDate'))
    if due is None or task.get('status') == 'COMPLETED':
        return False
    return due < (today or datetime.date.today())


def milestone_status(milestone, today=None):
    """``(label, level)`` for a milestone dict; mirrors the server's rule."""
    if milestone.get('completed'):
        return 'Completed', 'success'
    today = today or datetime.date.today()
    days_left = (parse_date(milestone['targetDate']) - today).days
    if days_left < 0:
        return 'Overdue', 'danger'
    if days_left < MILESTONE_DUE_SOON_DAYS:
        return 'Due Soon', 'warning'
    return 'On Track', 'primary'


def _user_id(user):
    return user.get('userId', user.get('id'))


def is_admin(user):
    return bool(user) and user.get('role') == 'ADMIN'


def can_manage_project(user, project):
    """Edit, delete, add tasks and milestones, manage members."""
    if not user:
        return False
    return is_admin(user) or project.get('creatorId') == _user_id(user)


def can_edit_comment(user, comment):
    return bool(user) and comment.get('userId') == _user_id(user)


def can_delete_comment(user, comment):
    return can_edit_comment(user, comment) or is_admin(user)
