"""
Tests for the dashboard task queries and milestone queries.
"""
import datetime

import pytest

from pms_app.models import Task
from pms_app.queries import MilestoneQueryBuilder, TaskQueryBuilder

pytestmark = pytest.mark.django_db


def days(n):
    return datetime.timedelta(days=n)


@pytest.fixture
def project(alice, make_project):
    return make_project(alice)


class TestTaskQueries:
    def test_overdue_excludes_completed_and_future(self, project, bob, make_task, today):
        late = make_task(project, title='late', due_date=today - days(2), assigned_to=bob)
        make_task(project, title='done', due_date=today - days(2), assigned_to=bob, status=Task.Status.COMPLETED)
        make_task(project, title='today', due_date=today, assigned_to=bob)
        make_task(project, title='undated', assigned_to=bob)
        assert list(TaskQueryBuilder.overdue(bob, today=today)) == [late]

    def test_non_admin_only_sees_assigned(self, project, alice, bob, admin, make_task, today):
        mine = make_task(project, title='mine', due_date=today - days(1), assigned_to=bob)
        other = make_task(project, title='other', due_date=today - days(1), assigned_to=alice)
        assert list(TaskQueryBuilder.overdue(bob, today=today)) == [mine]
        assert set(TaskQueryBuilder.overdue(admin, today=today)) == {mine, other}

    def test_due_today_sorted_by_priority(self, project, bob, make_task, today):
        low = make_task(project, title='low', priority=Task.Priority.LOW, due_date=today, assigned_to=bob)
        high = make_task(project, title='high', priority=Task.Priority.HIGH, due_date=today, assigned_to=bob)
        medium = make_task(project, title='medium', priority=Task.Priority.MEDIUM, due_date=today, assigned_to=bob)
        make_task(project, title='tomorrow', due_date=today + days(1), assigned_to=bob)
        assert list(TaskQueryBuilder.due_today(bob, today=today)) == [high, medium, low]

    def test_due_soon_window(self, project, bob, make_task, today):
        first = make_task(project, title='today', due_date=today, assigned_to=bob)
        last = make_task(project, title='edge', due_date=today + days(7), assigned_to=bob)
        make_task(project, title='beyond', due_date=today + days(8), assigned_to=bob)
        make_task(project, title='past', due_date=today - days(1), assigned_to=bob)
        assert list(TaskQueryBuilder.due_soon(bob, today=today)) == [first, last]
        assert list(TaskQueryBuilder.due_soon(bob, days=0, today=today)) == [first]

    def test_high_priority_incomplete_only(self, project, bob, make_task):
        open_high = make_task(project, priority=Task.Priority.HIGH, assigned_to=bob)
        make_task(project, priority=Task.Priority.HIGH, assigned_to=bob, status=Task.Status.COMPLETED)
        make_task(project, priority=Task.Priority.LOW, assigned_to=bob)
        assert list(TaskQueryBuilder.high_priority(bob)) == [open_high]

    def test_deleted_tasks_and_projects_are_hidden(self, project, bob, make_task, make_project, alice):
        make_task(project, priority=Task.Priority.HIGH, assigned_to=bob).soft_delete()
        other = make_project(alice, name='Other')
        make_task(other, priority=Task.Priority.HIGH, assigned_to=bob)
        other.soft_delete()
        assert list(TaskQueryBuilder.high_priority(bob)) == []

    def test_assigned_to_puts_undated_last(self, project, bob, make_task, today):
        undated = make_task(project, title='undated', assigned_to=bob)
        later = make_task(project, title='later', due_date=today + days(5), assigned_to=bob)
        sooner = make_task(project, title='sooner', due_date=today + days(1), assigned_to=bob)
        assert list(TaskQueryBuilder.assigned_to(bob)) == [sooner, later, undated]


class TestMilestoneQueries:
    def test_overdue_and_upcoming(self, project, make_milestone, today):
        late = make_milestone(project, title='late', days_from_today=-3)
        make_milestone(project, title='late but done', days_from_today=-3, completed=True)
        soon = make_milestone(project, title='soon', days_from_today=5)
        make_milestone(project, title='far', days_from_today=45)
        assert list(MilestoneQueryBuilder.overdue(project, today=today)) == [late]
        assert list(MilestoneQueryBuilder.upcoming(project, today=today)) == [soon]
