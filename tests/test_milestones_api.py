import pytest

from pms_app.models import Project

pytestmark = pytest.mark.django_db


@pytest.fixture
def project(alice, make_project):
    return make_project(alice, visibility=Project.Visibility.PUBLIC)


class TestMilestones:
    def test_create_and_list(self, api_for, alice, project, today):
        client = api_for(alice)
        response = client.post(f'/api/projects/{project.id}/milestones',
                               {'title': 'Beta', 'targetDate': today.isoformat()}, format='json')
        assert response.status_code == 201
        body = response.json()
        assert body['status'] == 'Due Soon'
        assert body['statusColor'] == 'warning'
        assert [m['title'] for m in client.get(f'/api/projects/{project.id}/milestones').json()] == ['Beta']

    def test_target_date_required(self, api_for, alice, project):
        response = api_for(alice).post(f'/api/projects/{project.id}/milestones', {'title': 'No date'},
                                       format='json')
        assert response.status_code == 400

    def test_visitor_can_read_but_not_write(self, api_for, bob, project, make_milestone):
        milestone = make_milestone(project)
        client = api_for(bob)
        assert client.get(f'/api/milestones/{milestone.id}').status_code == 200
        assert client.patch(f'/api/milestones/{milestone.id}/toggle').status_code == 403
        assert client.delete(f'/api/milestones/{milestone.id}').status_code == 403

    def test_private_milestone_is_not_found(self, api_for, alice, bob, make_project, make_milestone):
        milestone = make_milestone(make_project(alice, name='Hidden'))
        assert api_for(bob).get(f'/api/milestones/{milestone.id}').status_code == 404

    def test_toggle(self, api_for, alice, project, make_milestone):
        milestone = make_milestone(project, days_from_today=-2)
        client = api_for(alice)
        body = client.patch(f'/api/milestones/{milestone.id}/toggle').json()
        assert body['completed'] is True
        assert body['status'] == 'Completed'
        body = client.patch(f'/api/milestones/{milestone.id}/toggle').json()
        assert body['completed'] is False
        assert body['status'] == 'Overdue'

    def test_update(self, api_for, alice, project, make_milestone, today):
        milestone = make_milestone(project)
        response = api_for(alice).put(f'/api/milestones/{milestone.id}',
                                      {'title': 'GA', 'targetDate': today.isoformat(), 'completed': True},
                                      format='json')
        assert response.status_code == 200
        milestone.refresh_from_db()
        assert milestone.title == 'GA'
        assert milestone.completed

    def test_delete(self, api_for, alice, project, make_milestone):
        milestone = make_milestone(project)
        assert api_for(alice).delete(f'/api/milestones/{milestone.id}').status_code == 204
        assert api_for(alice).get(f'/api/milestones/{milestone.id}').status_code == 404

    def test_overdue_upcoming_and_progress(self, api_for, alice, project, make_milestone):
        make_milestone(project, title='late', days_from_today=-1)
        make_milestone(project, title='next', days_from_today=3)
        make_milestone(project, title='done', days_from_today=-5, completed=True)
        make_milestone(project, title='far', days_from_today=90)
        client = api_for(alice)
        assert [m['title'] for m in client.get(f'/api/projects/{project.id}/milestones/overdue').json()] == ['late']
        assert [m['title'] for m in client.get(f'/api/projects/{project.id}/milestones/upcoming').json()] == ['next']
        assert client.get(f'/api/projects/{project.id}/milestones/progress').json() == 25.0
