import uuid

import pytest

from pms_app.models import Project, ProjectMember, Task

pytestmark = pytest.mark.django_db


class TestProjectCrud:
    def test_create_makes_creator_owner(self, api_for, alice):
        response = api_for(alice).post('/api/projects', {'name': 'Launch', 'visibility': 'PUBLIC'}, format='json')
        assert response.status_code == 201
        body = response.json()
        assert body['creatorId'] == alice.id
        assert body['progress'] == 0.0
        assert body['memberCount'] == 1
        membership = ProjectMember.objects.get(project_id=body['id'], user=alice)
        assert membership.role == ProjectMember.Role.OWNER

    def test_create_accepts_client_id(self, api_for, alice):
        project_id = str(uuid.uuid4())
        response = api_for(alice).post('/api/projects', {'id': project_id, 'name': 'Offline'}, format='json')
        assert response.json()['id'] == project_id

    def test_end_before_start_rejected(self, api_for, alice):
        response = api_for(alice).post('/api/projects',
                                       {'name': 'Bad', 'startDate': '2024-05-10', 'endDate': '2024-05-01'},
                                       format='json')
        assert response.status_code == 400
        assert 'endDate' in response.json()

    def test_list_is_access_filtered(self, api_for, alice, bob, admin, make_project):
        make_project(alice, name='Private')
        make_project(alice, name='Public', visibility=Project.Visibility.PUBLIC)
        assert {p['name'] for p in api_for(bob).get('/api/projects').json()} == {'Public'}
        assert {p['name'] for p in api_for(admin).get('/api/projects').json()} == {'Private', 'Public'}

    def test_private_project_is_not_found_for_outsider(self, api_for, alice, bob, make_project):
        project = make_project(alice)
        assert api_for(bob).get(f'/api/projects/{project.id}').status_code == 404

    def test_unknown_project(self, api_for, alice):
        assert api_for(alice).get(f'/api/projects/{uuid.uuid4()}').status_code == 404

    def test_embedded_tasks_and_progress(self, api_for, alice, make_project, make_task):
        project = make_project(alice)
        make_task(project, status=Task.Status.COMPLETED)
        make_task(project)
        body = api_for(alice).get(f'/api/projects/{project.id}').json()
        assert len(body['tasks']) == 2
        assert body['progress'] == 50.0
        assert body['progressColor'] == '#ffc107'

    def test_update_forbidden_for_visitor(self, api_for, alice, bob, make_project):
        project = make_project(alice, visibility=Project.Visibility.PUBLIC)
        response = api_for(bob).put(f'/api/projects/{project.id}', {'name': 'Hijacked'}, format='json')
        assert response.status_code == 403

    def test_update_by_creator(self, api_for, alice, make_project):
        project = make_project(alice)
        response = api_for(alice).put(f'/api/projects/{project.id}',
                                      {'name': 'Renamed', 'visibility': 'PUBLIC'}, format='json')
        assert response.status_code == 200
        project.refresh_from_db()
        assert project.name == 'Renamed'
        assert project.visibility == Project.Visibility.PUBLIC

    def test_delete_is_soft_and_cascades(self, api_for, alice, make_project, make_task, make_milestone):
        project = make_project(alice)
        task = make_task(project)
        milestone = make_milestone(project)
        response = api_for(alice).delete(f'/api/projects/{project.id}')
        assert response.status_code == 204
        for obj in (project, task, milestone):
            obj.refresh_from_db()
            assert obj.deleted_at is not None
        assert api_for(alice).get(f'/api/projects/{project.id}').status_code == 404

    def test_admin_can_delete_any(self, api_for, alice, admin, make_project):
        project = make_project(alice)
        assert api_for(admin).delete(f'/api/projects/{project.id}').status_code == 204


class TestProjectQueries:
    def test_progress_endpoint(self, api_for, alice, make_project, make_task, make_milestone):
        project = make_project(alice)
        make_task(project, status=Task.Status.COMPLETED)
        make_milestone(project)
        body = api_for(alice).get(f'/api/projects/{project.id}/progress').json()
        assert body['progress'] == 100.0
        assert body['milestoneProgress'] == 0.0

    def test_search_is_case_insensitive_and_filtered(self, api_for, alice, bob, make_project):
        make_project(alice, name='Website Redesign', visibility=Project.Visibility.PUBLIC)
        make_project(alice, name='Secret website')
        make_project(alice, name='Mobile app', visibility=Project.Visibility.PUBLIC)
        response = api_for(bob).get('/api/projects/search', {'name': 'WEBSITE'})
        assert [p['name'] for p in response.json()] == ['Website Redesign']

    def test_list_query_count_does_not_grow_with_projects(self, api_for, alice, bob, make_project, make_task,
                                                          django_assert_max_num_queries):
        for name in ('One', 'Two', 'Three', 'Four'):
            project = make_project(alice, name=name)
            make_task(project, status=Task.Status.COMPLETED, assigned_to=bob)
            make_task(project)
        client = api_for(alice)
        with django_assert_max_num_queries(6):
            body = client.get('/api/projects').json()
        assert len(body) == 4
        assert all(p['progress'] == 50.0 and p['memberCount'] == 1 for p in body)
        assert {t['assignedToName'] for t in body[0]['tasks']} == {'Bob', None}

        with django_assert_max_num_queries(6):
            assert len(client.get('/api/projects/search', {'name': 'o'}).json()) == 3


class TestMembers:
    def test_add_and_list(self, api_for, alice, bob, make_project):
        project = make_project(alice)
        client = api_for(alice)
        response = client.post(f'/api/projects/{project.id}/members', {'userId': bob.id, 'role': 'member'},
                               format='json')
        assert response.status_code == 201
        assert response.json()['memberRole'] == 'MEMBER'
        members = client.get(f'/api/projects/{project.id}/members').json()
        assert [(m['id'], m['memberRole']) for m in members] == [(alice.id, 'OWNER'), (bob.id, 'MEMBER')]

    def test_member_can_view_private_project(self, api_for, alice, bob, make_project):
        project = make_project(alice)
        ProjectMember.objects.create(project=project, user=bob)
        assert api_for(bob).get(f'/api/projects/{project.id}').status_code == 200

    def test_duplicate_member(self, api_for, alice, bob, make_project):
        project = make_project(alice)
        ProjectMember.objects.create(project=project, user=bob)
        response = api_for(alice).post(f'/api/projects/{project.id}/members', {'userId': bob.id}, format='json')
        assert response.status_code == 400

    def test_only_creator_manages_members(self, api_for, alice, bob, make_user, make_project):
        carol = make_user('Carol')
        project = make_project(alice, visibility=Project.Visibility.PUBLIC)
        response = api_for(bob).post(f'/api/projects/{project.id}/members', {'userId': carol.id}, format='json')
        assert response.status_code == 403

    def test_remove_member(self, api_for, alice, bob, make_project):
        project = make_project(alice)
        ProjectMember.objects.create(project=project, user=bob)
        assert api_for(alice).delete(f'/api/projects/{project.id}/members/{bob.id}').status_code == 204
        assert not project.memberships.filter(user=bob).exists()

    def test_creator_cannot_be_removed(self, api_for, alice, admin, make_project):
        project = make_project(alice)
        response = api_for(admin).delete(f'/api/projects/{project.id}/members/{alice.id}')
        assert response.status_code == 400
        assert project.memberships.filter(user=alice).exists()

    def test_remove_non_member(self, api_for, alice, bob, make_project):
        project = make_project(alice)
        assert api_for(alice).delete(f'/api/projects/{project.id}/members/{bob.id}').status_code == 400
