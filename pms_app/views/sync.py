# pms_app/views/sync.py
import datetime
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.exceptions import ValidationError
from rest_framework import status
from pms_user.models import User
from pms_user.serializers import UserSerializer
from ..models import Project, ProjectMember, Task, Milestone
from ..serializers import SyncProjectSerializer, SyncTaskSerializer, SyncMilestoneSerializer
from .. import notifications
from .. import permissions
from .tasks import determine_assignee, save_task_update

logger = logging.getLogger(__name__)


def parse_last_pulled_at(value):
    """
    Convert a millisecond Unix timestamp to a UTC datetime.

    A missing value means "never pulled" and yields the earliest datetime.
    """
    if not value:
        return datetime.datetime.min.replace(tzinfo=datetime.timezone.utc)
    try:
        return datetime.datetime.fromtimestamp(int(value) / 1000, tz=datetime.timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        raise ValidationError({'last_pulled_at': 'Must be a timestamp in milliseconds.'})


class SyncView(APIView):
    """
    API view to handle synchronization of projects, tasks and milestones with a client application.
    Supports pulling changes from the server (GET) and pushing changes to the server (POST).
    Pulls are limited to what the caller can see; pushes go through the same permission
    rules as the REST endpoints and are applied atomically.
    """

    def get(self, request):
        """
        Handle GET requests to pull changes since the last synchronization timestamp.

        Query Parameters:
            last_pulled_at (str): Timestamp in milliseconds since Unix epoch representing the last sync time.

        Returns:
            Response: A JSON response containing:
                - changes: created, updated and deleted records for users, projects, tasks and milestones.
                - timestamp: Current server timestamp in milliseconds.

        Example Response:
            {
                "changes": {
                    "projects": {
                        "created": [...],
                        "updated": [...],
                        "deleted": ["6f1c...", "9ab0..."]
                    },
                    "tasks": {...},
                    "milestones": {...},
                    "users": {...}
                },
                "timestamp": 1698771234567
            }
        """
        # Taken before querying so nothing committed meanwhile is skipped next time
        current_timestamp = int(timezone.now().timestamp() * 1000)
        last_pulled_at = parse_last_pulled_at(request.query_params.get('last_pulled_at'))
        user = request.user

        projects = permissions.accessible_projects(user, include_deleted=True)
        tasks = permissions.accessible_tasks(user, include_deleted=True)
        milestones = Milestone.objects.filter(project_id__in=projects.values('id'))

        changes = {
            'users': self._pull(User.objects.all(), UserSerializer, last_pulled_at),
            'projects': self._pull(projects, SyncProjectSerializer, last_pulled_at),
            'tasks': self._pull(tasks, SyncTaskSerializer, last_pulled_at),
            'milestones': self._pull(milestones, SyncMilestoneSerializer, last_pulled_at),
        }
        return Response({'changes': changes, 'timestamp': current_timestamp})

    def _pull(self, queryset, serializer_class, last_pulled_at):
        """
        Partition a table into records created, updated and deleted since ``last_pulled_at``.

        Args:
            queryset: All rows of the table visible to the caller, soft-deleted ones included.
            serializer_class: Serializer used for created and updated rows.
            last_pulled_at (datetime): Lower bound (exclusive) of the change window.

        Returns:
            dict: ``created`` and ``updated`` serialized rows, ``deleted`` ids.
        """
        # Rows created after last_pulled_at and not deleted
        created = queryset.filter(created_at__gt=last_pulled_at, deleted_at__isnull=True)
        # Rows updated after last_pulled_at, created on or before, and not deleted
        updated = queryset.filter(
            updated_at__gt=last_pulled_at, created_at__lte=last_pulled_at, deleted_at__isnull=True
        )
        # IDs of rows soft-deleted after last_pulled_at
        deleted = queryset.filter(deleted_at__gt=last_pulled_at).values_list('id', flat=True)
        return {
            'created': serializer_class(created, many=True).data,
            'updated': serializer_class(updated, many=True).data,
            'deleted': list(deleted),
        }

    def post(self, request):
        """
        Handle POST requests to push changes from the client to the server.

        Request Body:
            changes (dict): created, updated and deleted records for projects, tasks and milestones.
                Example:
                    {
                        "projects": {
                            "created": [{"id": "6f1c...", "name": "Website"}],
                            "updated": [{"id": "9ab0...", "name": "Website v2"}],
                            "deleted": ["0d2e..."]
                        },
                        "tasks": {
                            "created": [{"id": "41aa...", "title": "Homepage", "projectId": "6f1c..."}],
                            "updated": [],
                            "deleted": []
                        },
                        "milestones": {"created": [], "updated": [], "deleted": []}
                    }

        Returns:
            Response: A JSON response indicating success or failure:
                - On success: {"status": "success"} with HTTP 200.
                - On failure: {"errors": [error_messages]} with HTTP 400; nothing is applied.
        """
        errors = []
        changes = request.data.get('changes', {}) if isinstance(request.data, dict) else None
        if not isinstance(changes, dict):
            return Response({'errors': ['changes must be an object']}, status=status.HTTP_400_BAD_REQUEST)

        tables = {name: self._read_table(name, changes.get(name), errors)
                  for name in ('projects', 'tasks', 'milestones')}
        if errors:
            logger.warning("Malformed sync push from user %s: %s", request.user.id, errors)
            return Response({'errors': errors}, status=status.HTTP_400_BAD_REQUEST)

        with transaction.atomic():
            errors.extend(self._apply_changes(
                request.user,
                tables['projects'],
                tables['tasks'],
                tables['milestones'],
            ))
            if errors:
                # All or nothing
                transaction.set_rollback(True)

        if errors:
            logger.warning("Sync push from user %s rejected with %d error(s)", request.user.id, len(errors))
            return Response({'errors': errors}, status=status.HTTP_400_BAD_REQUEST)
        return Response({'status': 'success'}, status=status.HTTP_200_OK)

    def _read_table(self, name, table, errors):
        """
        Check the shape of one table's changes.

        Returns:
            dict: ``created``, ``updated`` and ``deleted`` lists. Malformed
            entries are left out and reported in ``errors``.
        """
        if table is None:
            table = {}
        if not isinstance(table, dict):
            errors.append(f"changes.{name} must be an object")
            return {'created': [], 'updated': [], 'deleted': []}

        result = {}
        for key in ('created', 'updated', 'deleted'):
            items = table.get(key) or []
            if not isinstance(items, list):
                errors.append(f"changes.{name}.{key} must be a list")
                items = []
            if key == 'deleted':
                kind = 'an id'
                well_formed = lambda item: isinstance(item, (str, int)) and not isinstance(item, bool)
            else:
                kind = 'an object'
                well_formed = lambda item: isinstance(item, dict)
            result[key] = []
            for item in items:
                if well_formed(item):
                    result[key].append(item)
                else:
                    errors.append(f"Malformed entry in changes.{name}.{key}: {item!r} is not {kind}")
        return result

    def _apply_changes(self, user, projects_changes, tasks_changes, milestones_changes):
        """
        Apply pushed changes. Projects are created first so that tasks and
        milestones created in the same push can reference them.

        Returns:
            list: Error messages encountered during the process.
        """
        errors = []

        # Step 1: Create projects; the pusher becomes creator and owner
        for item in projects_changes.get('created', []):
            serializer = SyncProjectSerializer(data=item)
            if serializer.is_valid():
                project = serializer.save(creator=user)
                ProjectMember.objects.create(project=project, user=user, role=ProjectMember.Role.OWNER)
            else:
                errors.append(f"Project creation failed for ID {item.get('id', 'unknown')}: {serializer.errors}")

        # Step 2: Create tasks inside projects the pusher may modify
        for item in tasks_changes.get('created', []):
            serializer = SyncTaskSerializer(data=item)
            if not serializer.is_valid():
                errors.append(f"Task creation failed for ID {item.get('id', 'unknown')}: {serializer.errors}")
                continue
            project = serializer.validated_data['project']
            if not permissions.can_modify_project(project, user):
                errors.append(f"Task creation failed for ID {item.get('id', 'unknown')}: permission denied")
                continue
            requested = serializer.validated_data.pop('assigned_to', None)
            assignee = determine_assignee(project, user, requested)
            task = serializer.save(assigned_to=assignee)
            notifications.notify_task_assignment(assignee, task, user)

        # Step 3: Create milestones
        for item in milestones_changes.get('created', []):
            serializer = SyncMilestoneSerializer(data=item)
            if not serializer.is_valid():
                errors.append(f"Milestone creation failed for ID {item.get('id', 'unknown')}: {serializer.errors}")
                continue
            if not permissions.can_modify_project(serializer.validated_data['project'], user):
                errors.append(f"Milestone creation failed for ID {item.get('id', 'unknown')}: permission denied")
                continue
            serializer.save()

        # Step 4: Process updates and deletions
        errors.extend(self._apply_updated(
            user, projects_changes.get('updated', []), Project, SyncProjectSerializer,
            permissions.can_modify_project))
        errors.extend(self._apply_updated(
            user, tasks_changes.get('updated', []), Task, SyncTaskSerializer,
            permissions.can_modify_task, save=save_task_update))
        errors.extend(self._apply_updated(
            user, milestones_changes.get('updated', []), Milestone, SyncMilestoneSerializer,
            lambda milestone, u: permissions.can_modify_project(milestone.project, u)))
        errors.extend(self._apply_deleted(
            user, projects_changes.get('deleted', []), Project, permissions.can_modify_project))
        errors.extend(self._apply_deleted(
            user, tasks_changes.get('deleted', []), Task, permissions.can_modify_task))
        errors.extend(self._apply_deleted(
            user, milestones_changes.get('deleted', []), Milestone,
            lambda milestone, u: permissions.can_modify_project(milestone.project, u)))

        return errors

    def _apply_updated(self, user, items, model, serializer_class, can_modify, save=None):
        """
        Apply updates to existing records using partial updates.

        Args:
            user: The pushing user.
            items (list): Records to update, each containing an 'id' and updated fields.
            model (class): Model class of the records.
            serializer_class (class): Sync serializer for the model.
            can_modify (callable): Permission predicate taking ``(obj, user)``.
            save (callable): Optional ``(serializer, obj, user)`` hook replacing ``serializer.save()``.

        Returns:
            list: Error messages encountered during updates.
        """
        errors = []
        for item in items:
            record_id = item.get('id')
            try:
                obj = model.objects.alive().get(id=record_id)
            except (model.DoesNotExist, DjangoValidationError):
                errors.append(f"{model.__name__} {record_id} does not exist")
                continue
            if not can_modify(obj, user):
                errors.append(f"Update failed for {model.__name__} {record_id}: permission denied")
                continue
            # Records never move between projects through sync
            data = {k: v for k, v in item.items() if k != 'projectId'}
            serializer = serializer_class(obj, data=data, partial=True)
            if not serializer.is_valid():
                errors.append(f"Update failed for {model.__name__} {record_id}: {serializer.errors}")
            elif save is not None:
                save(serializer, obj, user)
            else:
                serializer.save()
        return errors

    def _apply_deleted(self, user, ids, model, can_modify):
        """
        Apply soft deletions by setting the deleted_at timestamp.

        Returns:
            list: Error messages encountered during deletions.
        """
        errors = []
        for record_id in ids:
            try:
                obj = model.objects.alive().get(id=record_id)
            except (model.DoesNotExist, DjangoValidationError):
                errors.append(f"{model.__name__} {record_id} does not exist")
                continue
            if not can_modify(obj, user):
                errors.append(f"Deletion failed for {model.__name__} {record_id}: permission denied")
                continue
            obj.soft_delete()
        return errors
