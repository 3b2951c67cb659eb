# pms_app/notifications.py
import logging

from .models import Notification

logger = logging.getLogger(__name__)


def create_notification(user, message):
    notification = Notification.objects.create(user=user, message=message)
    logger.debug("Notification %s for user %s: %s", notification.id, user.id, message)
    return notification


def notify_task_assignment(assignee, task, assigned_by):
    """Tell a user they were given a task, unless they assigned it to themselves."""
    if assignee is None or assignee.id == assigned_by.id:
        return None
    message = f"You have been assigned to task '{task.title}' in project '{task.project.name}'"
    return create_notification(assignee, message)


def notify_new_comment(task, commenter):
    assignee = task.assigned_to
    if assignee is None or assignee.id == commenter.id:
        return None
    message = f"{commenter.name or commenter.email} commented on task '{task.title}'"
    return create_notification(assignee, message)
