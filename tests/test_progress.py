"""
Unit tests for the derived progress and milestone status values.
"""
import datetime

import pytest

from pms_app import progress
from pms_app.models import Milestone, Task


class TestPercentage:
    def test_empty_total_is_zero(self):
        assert progress.percentage(0, 0) == 0.0

    def test_ratio(self):
        assert progress.percentage(1, 4) == pytest.approx(25.0)
        assert progress.percentage(3, 3) == pytest.approx(100.0)


class TestProgressColor:
    @pytest.mark.parametrize('value, level', [
        (0, 'danger'),
        (49.9, 'danger'),
        (50, 'warning'),
        (79.99, 'warning'),
        (80, 'success'),
        (100, 'success'),
    ])
    def test_thresholds(self, value, level):
        assert progress.progress_level(value) == level

    def test_color_follows_level(self):
        assert progress.progress_color(90) == '#28a745'
        assert progress.progress_color(60) == '#ffc107'
        assert progress.progress_color(10) == '#dc3545'


class TestMilestoneStatus:
    today = datetime.date(2024, 6, 10)

    def _status(self, days, completed=False):
        milestone = Milestone(target_date=self.today + datetime.timedelta(days=days), completed=completed)
        return progress.milestone_status(milestone, today=self.today)

    def test_completed_wins(self):
        assert self._status(-30, completed=True) == ('Completed', 'success')

    def test_yesterday_is_overdue(self):
        assert self._status(-1) == ('Overdue', 'danger')

    def test_today_and_six_days_are_due_soon(self):
        assert self._status(0) == ('Due Soon', 'warning')
        assert self._status(6) == ('Due Soon', 'warning')

    def test_seven_days_is_on_track(self):
        assert self._status(7) == ('On Track', 'primary')


@pytest.mark.django_db
class TestProjectProgress:
    def test_no_tasks(self, alice, make_project):
        assert progress.project_progress(make_project(alice)) == 0.0

    def test_counts_live_tasks_only(self, alice, make_project, make_task):
        project = make_project(alice)
        make_task(project, status=Task.Status.COMPLETED)
        make_task(project, status=Task.Status.TODO)
        make_task(project, status=Task.Status.COMPLETED).soft_delete()
        assert progress.project_progress(project) == pytest.approx(50.0)

    def test_milestone_progress(self, alice, make_project, make_milestone):
        project = make_project(alice)
        make_milestone(project, completed=True)
        make_milestone(project)
        make_milestone(project)
        make_milestone(project)
        assert progress.milestone_progress(project) == pytest.approx(25.0)
