"""
Client-side views of server state.

Each state object keeps a local copy of one screen's data. Mutations go to the API
and are followed by a wholesale reload of the affected collection, so the
local copy never diverges from the server for longer than one request.
Failures are logged and surfaced through ``error``; they are not raised.
"""
import logging

from . import derive
from .exceptions import ApiError

logger = logging.getLogger(__name__)


class _State:
    def __init__(self, client):
        self.client = client
        self.error = None

    def _attempt(self, action, call, *args, **kwargs):
        """Run an API call, recording a generic message on failure."""
        try:
            result = call(*args, **kwargs)
        except ApiError as exc:
            logger.error("Failed to %s: %s", action, exc)
            self.error = f"Failed to {action}"
            return None, False
        self.error = None
        return result, True


class ProjectListState(_State):
    def __init__(self, client):
        super().__init__(client)
        self.projects = []

    def load(self):
        projects, ok = self._attempt('load projects', self.client.projects.get_all)
        if ok:
            self.projects = projects
        return ok

    def search(self, name):
        projects, ok = self._attempt('search projects', self.client.projects.search, name)
        if ok:
            self.projects = projects
        return ok

    def create(self, project):
        created, ok = self._attempt('create project', self.client.projects.create, project)
        if ok:
            self.load()
        return created

    def update(self, project_id, project):
        updated, ok = self._attempt('update project', self.client.projects.update, project_id, project)
        if ok:
            self.load()
        return updated

    def delete(self, project_id):
        _, ok = self._attempt('delete project', self.client.projects.delete, project_id)
        if ok:
            self.load()
        return ok

    def progress_of(self, project):
        return derive.task_progress(project.get('tasks'))

    def can_manage(self, project):
        return derive.can_manage_project(self.client.current_user, project)


class ProjectDetailState(_State):
    """One project with its tasks, milestones and members."""

    def __init__(self, client, project_id):
        super().__init__(client)
        self.project_id = project_id
        self.project = None
        self.tasks = []
        self.milestones = []
        self.members = []

    def load(self):
        project, ok = self._attempt('load project', self.client.projects.get_by_id, self.project_id)
        if not ok:
            return False
        self.project = project
        tasks, ok = self._attempt('load tasks', self.client.tasks.get_by_project, self.project_id)
        if ok:
            self.tasks = tasks
        milestones, ok = self._attempt('load milestones', self.client.milestones.get_by_project, self.project_id)
        if ok:
            self.milestones = milestones
        members, ok = self._attempt('load members', self.client.projects.get_members, self.project_id)
        if ok:
            self.members = members
        return self.error is None

    @property
    def progress(self):
        return derive.task_progress(self.tasks)

    @property
    def progress_color(self):
        return derive.progress_color(self.progress)

    @property
    def milestone_progress(self):
        return derive.milestone_completion(self.milestones)

    @property
    def can_manage(self):
        return self.project is not None and derive.can_manage_project(self.client.current_user, self.project)

    def tasks_with_status(self, status):
        return [task for task in self.tasks if task.get('status') == status]

    def _mutate(self, action, call, *args):
        result, ok = self._attempt(action, call, *args)
        if ok:
            self.load()
        return result if result is not None else ok

    def add_task(self, task):
        return self._mutate('create task', self.client.tasks.create, self.project_id, task)

    def update_task(self, task_id, task):
        return self._mutate('update task', self.client.tasks.update, task_id, task)

    def set_task_status(self, task_id, status):
        return self._mutate('update task status', self.client.tasks.update_status, task_id, status)

    def delete_task(self, task_id):
        return self._mutate('delete task', self.client.tasks.delete, task_id)

    def add_milestone(self, milestone):
        return self._mutate('create milestone', self.client.milestones.create, self.project_id, milestone)

    def update_milestone(self, milestone_id, milestone):
        return self._mutate('update milestone', self.client.milestones.update, milestone_id, milestone)

    def toggle_milestone(self, milestone_id):
        return self._mutate('update milestone', self.client.milestones.toggle, milestone_id)

    def delete_milestone(self, milestone_id):
        return self._mutate('delete milestone', self.client.milestones.delete, milestone_id)

    def add_member(self, user_id, role='MEMBER'):
        return self._mutate('add member', self.client.projects.add_member, self.project_id, user_id, role)

    def remove_member(self, user_id):
        return self._mutate('remove member', self.client.projects.remove_member, self.project_id, user_id)


class TaskActivityState(_State):
    """Comments and logged time for one task."""

    def __init__(self, client, task_id):
        super().__init__(client)
        self.task_id = task_id
        self.comments = []
        self.time_entries = []
        self.summary = {'totalHours': 0.0, 'userHours': 0.0}

    def load(self):
        comments, ok = self._attempt('load comments', self.client.comments.get_by_task, self.task_id)
        if ok:
            self.comments = comments
        entries, ok = self._attempt('load time entries', self.client.time_entries.get_by_task, self.task_id)
        if ok:
            self.time_entries = entries
        summary, ok = self._attempt('load time summary', self.client.time_entries.get_summary, self.task_id)
        if ok:
            self.summary = summary
        return self.error is None

    def _mutate(self, action, call, *args):
        result, ok = self._attempt(action, call, *args)
        if ok:
            self.load()
        return result if result is not None else ok

    def add_comment(self, text):
        if not text or not text.strip():
            self.error = 'Comment cannot be empty'
            return None
        return self._mutate('add comment', self.client.comments.create, self.task_id, text.strip())

    def edit_comment(self, comment_id, text):
        return self._mutate('update comment', self.client.comments.update, comment_id, text)

    def delete_comment(self, comment_id):
        return self._mutate('delete comment', self.client.comments.delete, comment_id)

    def log_time(self, hours_spent):
        if hours_spent is None or hours_spent <= 0:
            self.error = 'Hours spent must be positive'
            return None
        return self._mutate('log time', self.client.time_entries.create, self.task_id, hours_spent)

    def can_edit(self, comment):
        return derive.can_edit_comment(self.client.current_user, comment)

    def can_delete(self, comment):
        return derive.can_delete_comment(self.client.current_user, comment)


class Dashboard(_State):
    """The landing page lists: projects, overdue, due today, high priority and my tasks."""

    def __init__(self, client):
        super().__init__(client)
        self.projects = []
        self.overdue = []
        self.due_today = []
        self.high_priority = []
        self.assigned = []

    def load(self):
        loads = [
            ('projects', 'load projects', self.client.projects.get_all),
            ('overdue', 'load overdue tasks', self.client.tasks.get_overdue),
            ('due_today', 'load tasks due today', self.client.tasks.get_due_today),
            ('high_priority', 'load high priority tasks', self.client.tasks.get_high_priority),
            ('assigned', 'load assigned tasks', self.client.tasks.get_assigned_to_me),
        ]
        for attr, action, call in loads:
            result, ok = self._attempt(action, call)
            if not ok:
                return False
            setattr(self, attr, result)
        return True

    def summary(self):
        return {
            'projects': len(self.projects),
            'assigned': len(self.assigned),
            'overdue': len(self.overdue),
            'dueToday': len(self.due_today),
            'highPriority': len(self.high_priority),
        }

    def project_progress(self):
        """``(project, progress, color)`` for every project."""
        rows = []
        for project in self.projects:
            value = derive.task_progress(project.get('tasks'))
            rows.append((project, value, derive.progress_color(value)))
        return rows


SYNC_TABLES = ('users', 'projects', 'tasks', 'milestones')
PUSHABLE_TABLES = ('projects', 'tasks', 'milestones')


class LocalStore:
    """
    In-memory replica kept current through the sync endpoint.

    ``pull`` applies the server's changes since the last pull. Local edits are
    recorded with ``create``/``update``/``delete`` and sent by ``push``; they are
    kept until the server accepts them.
    """

    def __init__(self, client):
        self.client = client
        self.tables = {name: {} for name in SYNC_TABLES}
        self.last_pulled_at = None
        self._pending = self._empty_changes()

    def _empty_changes(self):
        return {name: {'created': {}, 'updated': {}, 'deleted': set()} for name in PUSHABLE_TABLES}

    def pull(self):
        data = self.client.sync.pull(self.last_pulled_at)
        for table, changes in data['changes'].items():
            rows = self.tables.setdefault(table, {})
            for record in changes['created'] + changes['updated']:
                rows[str(record['id'])] = record
            for record_id in changes['deleted']:
                rows.pop(str(record_id), None)
        self.last_pulled_at = data['timestamp']
        logger.info("Pulled changes up to %s", self.last_pulled_at)
        return data['changes']

    def create(self, table, record):
        record_id = str(record['id'])
        self.tables[table][record_id] = record
        self._pending[table]['created'][record_id] = record

    def update(self, table, record_id, fields):
        record_id = str(record_id)
        record = {**self.tables[table].get(record_id, {}), **fields, 'id': record_id}
        self.tables[table][record_id] = record
        pending = self._pending[table]
        if record_id in pending['created']:
            pending['created'][record_id] = record
        else:
            pending['updated'][record_id] = {**pending['updated'].get(record_id, {'id': record_id}), **fields}

    def delete(self, table, record_id):
        record_id = str(record_id)
        self.tables[table].pop(record_id, None)
        pending = self._pending[table]
        pending['updated'].pop(record_id, None)
        if pending['created'].pop(record_id, None) is None:
            pending['deleted'].add(record_id)

    def pending_changes(self):
        return {
            table: {
                'created': list(changes['created'].values()),
                'updated': list(changes['updated'].values()),
                'deleted': sorted(changes['deleted']),
            }
            for table, changes in self._pending.items()
        }

    def has_pending_changes(self):
        return any(c['created'] or c['updated'] or c['deleted'] for c in self._pending.values())

    def push(self):
        """Send pending changes, then pull so the replica reflects the server."""
        if self.has_pending_changes():
            self.client.sync.push(self.pending_changes())
            self._pending = self._empty_changes()
        return self.pull()

    def project_progress(self, project_id):
        project_id = str(project_id)
        tasks = [t for t in self.tables['tasks'].values() if str(t.get('projectId')) == project_id]
        return derive.task_progress(tasks)
