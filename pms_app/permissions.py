"""
Role-based access rules for projects, tasks and comments.

ADMIN users pass every check. Everyone else is judged by their relation to
the project (creator, member) and the project's visibility.
"""
from django.db.models import Q

from pms_user.models import User
from .models import Project, Task


def is_admin(user):
    return getattr(user, 'role', None) == User.Role.ADMIN


def is_project_creator(project, user):
    return project.creator_id == user.id


def is_project_member(project, user):
    return project.memberships.filter(user_id=user.id).exists()


def can_access_project(project, user):
    if is_admin(user):
        return True
    return (
        is_project_creator(project, user)
        or project.visibility == Project.Visibility.PUBLIC
        or is_project_member(project, user)
    )


def can_modify_project(project, user):
    """Update, delete, and adding tasks or milestones."""
    return is_admin(user) or is_project_creator(project, user)


def can_manage_members(project, user):
    return is_admin(user) or is_project_creator(project, user)


def is_task_assignee(task, user):
    return task.assigned_to_id is not None and task.assigned_to_id == user.id


def can_access_task(task, user):
    return can_access_project(task.project, user) or is_task_assignee(task, user)


def can_modify_task(task, user):
    if is_admin(user):
        return True
    return is_project_creator(task.project, user) or is_task_assignee(task, user)


def can_assign_task(project, user):
    if is_admin(user):
        return True
    return is_project_creator(project, user) or project.visibility == Project.Visibility.PUBLIC


def can_assign_to_user(project, user, assignee):
    if is_admin(user):
        return True
    # Self-assignment is always allowed; public projects accept any assignee
    return assignee.id == user.id or project.visibility == Project.Visibility.PUBLIC


def can_edit_comment(comment, user):
    return comment.user_id == user.id


def can_delete_comment(comment, user):
    return comment.user_id == user.id or is_admin(user)


def accessible_projects(user, include_deleted=False):
    """Projects the user may view, newest first."""
    projects = Project.objects.all() if include_deleted else Project.objects.alive()
    if is_admin(user):
        return projects
    return projects.filter(
        Q(creator=user) | Q(visibility=Project.Visibility.PUBLIC) | Q(memberships__user=user)
    ).distinct()


def accessible_tasks(user, include_deleted=False):
    """Tasks in accessible projects plus tasks assigned to the user."""
    tasks = Task.objects.all() if include_deleted else Task.objects.alive().filter(project__deleted_at__isnull=True)
    if is_admin(user):
        return tasks
    project_ids = accessible_projects(user, include_deleted=include_deleted).values('id')
    return tasks.filter(Q(project_id__in=project_ids) | Q(assigned_to=user)).distinct()
