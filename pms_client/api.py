"""
Endpoint groups of the project management API.

Each group mirrors one area of the REST surface; all share one HttpClient.
"""
from .http import HttpClient


class _Endpoints:
    def __init__(self, http):
        self.http = http


class AuthApi(_Endpoints):

    def login(self, email, password):
        data = self.http.post('auth/login', {'email': email, 'password': password})
        self._remember(data)
        return data

    def register(self, name, email, password):
        data = self.http.post('auth/register', {'name': name, 'email': email, 'password': password})
        self._remember(data)
        return data

    def logout(self):
        self.http.tokens.clear()

    def _remember(self, data):
        user = {key: data.get(key) for key in ('userId', 'email', 'name', 'role')}
        self.http.tokens.save(data['token'], user)


class UserApi(_Endpoints):

    def get_all(self):
        return self.http.get('users')

    def get_all_admin(self):
        return self.http.get('users/admin')

    def me(self):
        return self.http.get('users/me')


class ProjectApi(_Endpoints):

    def get_all(self):
        return self.http.get('projects')

    def get_by_id(self, project_id):
        return self.http.get(f'projects/{project_id}')

    def create(self, project):
        return self.http.post('projects', project)

    def update(self, project_id, project):
        return self.http.put(f'projects/{project_id}', project)

    def delete(self, project_id):
        self.http.delete(f'projects/{project_id}')

    def get_progress(self, project_id):
        return self.http.get(f'projects/{project_id}/progress')

    def search(self, name):
        return self.http.get('projects/search', params={'name': name})

    def get_members(self, project_id):
        return self.http.get(f'projects/{project_id}/members')

    def add_member(self, project_id, user_id, role='MEMBER'):
        return self.http.post(f'projects/{project_id}/members', {'userId': user_id, 'role': role})

    def remove_member(self, project_id, user_id):
        self.http.delete(f'projects/{project_id}/members/{user_id}')


class TaskApi(_Endpoints):

    def get_by_project(self, project_id):
        return self.http.get(f'tasks/project/{project_id}')

    def get_by_id(self, task_id):
        return self.http.get(f'tasks/{task_id}')

    def create(self, project_id, task):
        return self.http.post(f'tasks/project/{project_id}', task)

    def update(self, task_id, task):
        return self.http.put(f'tasks/{task_id}', task)

    def update_status(self, task_id, status):
        return self.http.put(f'tasks/{task_id}/status', {'status': status})

    def delete(self, task_id):
        self.http.delete(f'tasks/{task_id}')

    def get_by_status(self, project_id, status):
        return self.http.get(f'tasks/project/{project_id}/status/{status}')

    def get_by_priority(self, project_id, priority):
        return self.http.get(f'tasks/project/{project_id}/priority/{priority}')

    def get_assigned_to_me(self):
        return self.http.get('tasks/assigned-to-me')

    def get_overdue(self):
        return self.http.get('tasks/overdue')

    def get_due_today(self):
        return self.http.get('tasks/due-today')

    def get_due_soon(self, days=None):
        return self.http.get('tasks/due-soon', params={'days': days} if days is not None else None)

    def get_high_priority(self):
        return self.http.get('tasks/high-priority')


class MilestoneApi(_Endpoints):

    def get_by_project(self, project_id):
        return self.http.get(f'projects/{project_id}/milestones')

    def get_by_id(self, milestone_id):
        return self.http.get(f'milestones/{milestone_id}')

    def create(self, project_id, milestone):
        return self.http.post(f'projects/{project_id}/milestones', milestone)

    def update(self, milestone_id, milestone):
        return self.http.put(f'milestones/{milestone_id}', milestone)

    def delete(self, milestone_id):
        self.http.delete(f'milestones/{milestone_id}')

    def toggle(self, milestone_id):
        return self.http.patch(f'milestones/{milestone_id}/toggle')

    def get_overdue(self, project_id):
        return self.http.get(f'projects/{project_id}/milestones/overdue')

    def get_upcoming(self, project_id):
        return self.http.get(f'projects/{project_id}/milestones/upcoming')

    def get_progress(self, project_id):
        return self.http.get(f'projects/{project_id}/milestones/progress')


class TimeEntryApi(_Endpoints):

    def create(self, task_id, hours_spent):
        return self.http.post(f'tasks/{task_id}/time-entries', {'hoursSpent': hours_spent})

    def get_by_task(self, task_id):
        return self.http.get(f'tasks/{task_id}/time-entries')

    def get_mine_for_task(self, task_id):
        return self.http.get(f'tasks/{task_id}/time-entries/me')

    def get_summary(self, task_id):
        return self.http.get(f'tasks/{task_id}/time-summary')

    def get_mine(self):
        return self.http.get('users/me/time-entries')

    def get_total_hours(self):
        return self.http.get('users/me/total-hours')


class CommentApi(_Endpoints):

    def create(self, task_id, text):
        return self.http.post(f'tasks/{task_id}/comments', {'text': text})

    def get_by_task(self, task_id):
        return self.http.get(f'tasks/{task_id}/comments')

    def get_by_id(self, comment_id):
        return self.http.get(f'comments/{comment_id}')

    def update(self, comment_id, text):
        return self.http.put(f'comments/{comment_id}', {'text': text})

    def delete(self, comment_id):
        self.http.delete(f'comments/{comment_id}')

    def get_mine(self):
        return self.http.get('users/me/comments')


class NotificationApi(_Endpoints):

    def get_all(self):
        return self.http.get('notifications')

    def get_unread(self):
        return self.http.get('notifications/unread')

    def get_unread_count(self):
        return self.http.get('notifications/unread-count')['unreadCount']

    def mark_as_read(self, notification_id):
        self.http.put(f'notifications/{notification_id}/read')

    def mark_all_as_read(self):
        self.http.put('notifications/read-all')


class SyncApi(_Endpoints):

    def pull(self, last_pulled_at=None):
        params = {'last_pulled_at': last_pulled_at} if last_pulled_at else None
        return self.http.get('sync/', params=params)

    def push(self, changes):
        return self.http.post('sync/', {'changes': changes})


class PmsClient:
    """
    Entry point bundling every endpoint group::

        client = PmsClient('http://localhost:8000/api')
        client.auth.login('ada@example.com', 'secret')
        projects = client.projects.get_all()
    """

    def __init__(self, base_url=None, tokens=None, on_unauthorized=None, session=None, timeout=None):
        kwargs = {'timeout': timeout} if timeout is not None else {}
        self.http = HttpClient(base_url, tokens=tokens, on_unauthorized=on_unauthorized, session=session, **kwargs)
        self.auth = AuthApi(self.http)
        self.users = UserApi(self.http)
        self.projects = ProjectApi(self.http)
        self.tasks = TaskApi(self.http)
        self.milestones = MilestoneApi(self.http)
        self.time_entries = TimeEntryApi(self.http)
        self.comments = CommentApi(self.http)
        self.notifications = NotificationApi(self.http)
        self.sync = SyncApi(self.http)

    @property
    def current_user(self):
        return self.http.tokens.user
