"""Shared pytest fixtures for the test suite.

Fixture overview
----------------
make_user: factory for USER/ADMIN accounts (password ``password123``)
admin, alice,
bob: one admin and two regular users
api_for: factory returning an APIClient authenticated as a user
make_project: factory creating a project and its OWNER membership
make_task: factory creating a task in a project
make_milestone: factory creating a milestone in a project
"""
import datetime

import pytest
from django.utils import timezone
from rest_framework.authtoken.models import Token
from rest_framework.test import APIClient

from pms_app.models import Milestone, Project, ProjectMember, Task
from pms_user.models import User

PASSWORD = 'password123'


@pytest.fixture
def today():
    return timezone.localdate()


@pytest.fixture
def make_user(db):
    def _make(name, role=User.Role.USER, email=None):
        email = email or f"{name.lower()}@example.com"
        return User.objects.create_user(username=email, email=email, password=PASSWORD, name=name, role=role)
    return _make


@pytest.fixture
def admin(make_user):
    return make_user('Admin', role=User.Role.ADMIN)


@pytest.fixture
def alice(make_user):
    return make_user('Alice')


@pytest.fixture
def bob(make_user):
    return make_user('Bob')


@pytest.fixture
def anonymous():
    return APIClient()


@pytest.fixture
def api_for(db):
    def _client(user):
        token, _ = Token.objects.get_or_create(user=user)
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {token.key}")
        return client
    return _client


@pytest.fixture
def make_project(db):
    def _make(creator, name='Website', visibility=Project.Visibility.PRIVATE, **fields):
        project = Project.objects.create(creator=creator, name=name, visibility=visibility, **fields)
        ProjectMember.objects.create(project=project, user=creator, role=ProjectMember.Role.OWNER)
        return project
    return _make


@pytest.fixture
def make_task(db):
    def _make(project, title='Task', **fields):
        return Task.objects.create(project=project, title=title, **fields)
    return _make


@pytest.fixture
def make_milestone(db, today):
    def _make(project, title='Milestone', days_from_today=10, **fields):
        target = today + datetime.timedelta(days=days_from_today)
        return Milestone.objects.create(project=project, title=title, target_date=target, **fields)
    return _make


@pytest.fixture
def password():
    return PASSWORD
