"""
Client-side derived values and state objects, driven by an in-memory fake API.
"""
import datetime
from types import SimpleNamespace

import pytest

from pms_client import derive
from pms_client.exceptions import ApiError, NotFound
from pms_client.state import Dashboard, ProjectDetailState, ProjectListState, TaskActivityState


class TestDerive:
    def test_task_progress(self):
        tasks = [{'status': 'COMPLETED'}, {'status': 'TODO'}, {'status': 'IN_PROGRESS'}, {'status': 'COMPLETED'}]
        assert derive.task_progress(tasks) == 50.0
        assert derive.task_progress([]) == 0.0
        assert derive.task_progress(None) == 0.0

    def test_colors(self):
        assert derive.progress_color(80) == '#28a745'
        assert derive.progress_color(50) == '#ffc107'
        assert derive.progress_color(49) == '#dc3545'

    def test_milestone_status(self):
        today = datetime.date(2024, 1, 10)
        assert derive.milestone_status({'targetDate': '2024-01-09', 'completed': False}, today) == ('Overdue', 'danger')
        assert derive.milestone_status({'targetDate': '2024-01-16', 'completed': False}, today)[0] == 'Due Soon'
        assert derive.milestone_status({'targetDate': '2024-01-17', 'completed': False}, today)[0] == 'On Track'
        assert derive.milestone_status({'targetDate': '2024-01-01', 'completed': True}, today)[0] == 'Completed'

    def test_is_overdue(self):
        today = datetime.date(2024, 1, 10)
        assert derive.is_overdue({'dueDate': '2024-01-09', 'status': 'TODO'}, today)
        assert not derive.is_overdue({'dueDate': '2024-01-09', 'status': 'COMPLETED'}, today)
        assert not derive.is_overdue({'dueDate': None, 'status': 'TODO'}, today)

    def test_permissions(self):
        admin = {'userId': 1, 'role': 'ADMIN'}
        owner = {'userId': 2, 'role': 'USER'}
        other = {'userId': 3, 'role': 'USER'}
        project = {'creatorId': 2}
        comment = {'userId': 3}
        assert derive.can_manage_project(admin, project)
        assert derive.can_manage_project(owner, project)
        assert not derive.can_manage_project(other, project)
        assert not derive.can_manage_project(None, project)
        assert derive.can_edit_comment(other, comment)
        assert not derive.can_edit_comment(admin, comment)
        assert derive.can_delete_comment(admin, comment)
        assert not derive.can_delete_comment(owner, comment)


class FakeProjects:
    def __init__(self):
        self.rows = {}
        self.loads = 0
        self.fail = False

    def get_all(self):
        self.loads += 1
        if self.fail:
            raise ApiError('boom', 500)
        return list(self.rows.values())

    def get_by_id(self, project_id):
        if project_id not in self.rows:
            raise NotFound('missing', 404)
        return self.rows[project_id]

    def create(self, project):
        created = {'id': str(len(self.rows) + 1), 'creatorId': 7, 'tasks': [], **project}
        self.rows[created['id']] = created
        return created

    def delete(self, project_id):
        del self.rows[project_id]

    def get_members(self, project_id):
        return [{'id': 7, 'memberRole': 'OWNER'}]


class FakeTasks:
    def __init__(self):
        self.rows = []

    def get_by_project(self, project_id):
        return list(self.rows)

    def create(self, project_id, task):
        created = {'id': f't{len(self.rows) + 1}', 'status': 'TODO', **task}
        self.rows.append(created)
        return created

    def update_status(self, task_id, status):
        for row in self.rows:
            if row['id'] == task_id:
                row['status'] = status
                return row
        raise NotFound('missing', 404)

    def get_overdue(self):
        return [row for row in self.rows if row.get('overdue')]

    def get_due_today(self):
        return []

    def get_high_priority(self):
        return [row for row in self.rows if row.get('priority') == 'HIGH']

    def get_assigned_to_me(self):
        return list(self.rows)


class FakeMilestones:
    def get_by_project(self, project_id):
        return [{'completed': True}, {'completed': False}]


@pytest.fixture
def fake_api():
    comments, entries = [], []
    api = SimpleNamespace(
        projects=FakeProjects(),
        tasks=FakeTasks(),
        milestones=FakeMilestones(),
        comments=SimpleNamespace(
            get_by_task=lambda task_id: list(comments),
            create=lambda task_id, text: comments.append({'id': len(comments) + 1, 'userId': 7, 'text': text}),
        ),
        time_entries=SimpleNamespace(
            get_by_task=lambda task_id: list(entries),
            get_summary=lambda task_id: {'totalHours': sum(e['hoursSpent'] for e in entries), 'userHours': 0.0},
            create=lambda task_id, hours: entries.append({'hoursSpent': hours}),
        ),
        current_user={'userId': 7, 'role': 'USER'},
    )
    return api


class TestProjectListState:
    def test_create_reloads(self, fake_api):
        state = ProjectListState(fake_api)
        state.load()
        state.create({'name': 'Launch'})
        assert [p['name'] for p in state.projects] == ['Launch']
        assert fake_api.projects.loads == 2
        assert state.can_manage(state.projects[0])

    def test_failure_sets_error_and_keeps_data(self, fake_api):
        state = ProjectListState(fake_api)
        state.create({'name': 'Launch'})
        fake_api.projects.fail = True
        assert state.load() is False
        assert state.error == 'Failed to load projects'
        assert [p['name'] for p in state.projects] == ['Launch']

    def test_delete_missing(self, fake_api):
        def missing(project_id):
            raise NotFound('missing', 404)

        fake_api.projects.delete = missing
        state = ProjectListState(fake_api)
        assert state.delete('nope') is False
        assert state.error == 'Failed to delete project'


class TestProjectDetailState:
    def test_load_and_task_mutations(self, fake_api):
        project = fake_api.projects.create({'name': 'Launch'})
        state = ProjectDetailState(fake_api, project['id'])
        assert state.load()
        assert state.members == [{'id': 7, 'memberRole': 'OWNER'}]
        assert state.milestone_progress == 50.0
        assert state.can_manage

        state.add_task({'title': 'a'})
        state.add_task({'title': 'b'})
        state.set_task_status('t1', 'COMPLETED')
        assert state.progress == 50.0
        assert state.progress_color == '#ffc107'
        assert [t['title'] for t in state.tasks_with_status('COMPLETED')] == ['a']

    def test_missing_project(self, fake_api):
        state = ProjectDetailState(fake_api, 'nope')
        assert state.load() is False
        assert state.error == 'Failed to load project'
        assert state.project is None
        assert not state.can_manage


class TestTaskActivityState:
    def test_comment_and_time(self, fake_api):
        state = TaskActivityState(fake_api, 't1')
        state.add_comment('  hello ')
        state.log_time(2.0)
        assert [c['text'] for c in state.comments] == ['hello']
        assert state.summary['totalHours'] == 2.0
        assert state.can_edit(state.comments[0])
        assert state.can_delete(state.comments[0])

    def test_validation_before_request(self, fake_api):
        state = TaskActivityState(fake_api, 't1')
        assert state.add_comment('   ') is None
        assert state.error == 'Comment cannot be empty'
        assert state.log_time(0) is None
        assert state.error == 'Hours spent must be positive'
        assert state.time_entries == []


class TestDashboard:
    def test_summary(self, fake_api):
        fake_api.projects.create({'name': 'Launch', 'tasks': [{'status': 'COMPLETED'}]})
        fake_api.tasks.create('1', {'title': 'late', 'overdue': True})
        fake_api.tasks.create('1', {'title': 'hot', 'priority': 'HIGH'})
        dashboard = Dashboard(fake_api)
        assert dashboard.load()
        assert dashboard.summary() == {
            'projects': 1, 'assigned': 2, 'overdue': 1, 'dueToday': 0, 'highPriority': 1,
        }
        [(project, value, color)] = dashboard.project_progress()
        assert project['name'] == 'Launch'
        assert (value, color) == (100.0, '#28a745')
