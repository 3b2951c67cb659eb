# pms_app/views/projects.py
import logging

from django.db import transaction
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from ..models import ProjectMember
from ..serializers import ProjectSerializer, MemberSerializer, AddMemberSerializer
from .. import permissions
from .. import progress
from .common import get_project, require

logger = logging.getLogger(__name__)


class ProjectListView(APIView):
    """
    List the projects visible to the caller, or create a new one.

    Admins see every project; other users see projects they created, projects
    they are members of, and public projects.
    """

    def get(self, request):
        projects = ProjectSerializer.setup_eager_loading(permissions.accessible_projects(request.user))
        return Response(ProjectSerializer(projects, many=True).data)

    def post(self, request):
        serializer = ProjectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            project = serializer.save(creator=request.user)
            # The creator is always the owning member
            ProjectMember.objects.create(project=project, user=request.user, role=ProjectMember.Role.OWNER)
        logger.info("Project %s created by user %s", project.id, request.user.id)
        return Response(ProjectSerializer(project).data, status=status.HTTP_201_CREATED)


class ProjectDetailView(APIView):

    def get(self, request, pk):
        return Response(ProjectSerializer(get_project(request, pk)).data)

    def put(self, request, pk):
        project = get_project(request, pk)
        require(permissions.can_modify_project(project, request.user), request, 'update this project')
        serializer = ProjectSerializer(project, data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    def delete(self, request, pk):
        project = get_project(request, pk)
        require(permissions.can_modify_project(project, request.user), request, 'delete this project')
        project.soft_delete()
        logger.info("Project %s deleted by user %s", project.id, request.user.id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ProjectProgressView(APIView):
    def get(self, request, pk):
        project = get_project(request, pk)
        data = ProjectSerializer(project).data
        data['progress'] = progress.project_progress(project)
        data['milestoneProgress'] = progress.milestone_progress(project)
        return Response(data)


class ProjectSearchView(APIView):
    """Case-insensitive name search over the caller's visible projects."""

    def get(self, request):
        name = request.query_params.get('name', '').strip()
        projects = ProjectSerializer.setup_eager_loading(permissions.accessible_projects(request.user))
        if name:
            projects = projects.filter(name__icontains=name)
        return Response(ProjectSerializer(projects, many=True).data)


class ProjectMemberListView(APIView):

    def get(self, request, pk):
        project = get_project(request, pk)
        members = project.memberships.select_related('user')
        return Response(MemberSerializer(members, many=True).data)

    def post(self, request, pk):
        project = get_project(request, pk)
        require(permissions.can_manage_members(project, request.user), request, 'manage members of this project')
        serializer = AddMemberSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data['userId']

        if project.memberships.filter(user=user).exists():
            return Response({'message': 'User is already a member of this project'},
                            status=status.HTTP_400_BAD_REQUEST)

        member = ProjectMember.objects.create(project=project, user=user, role=serializer.validated_data['role'])
        logger.info("User %s added to project %s as %s", user.id, project.id, member.role)
        return Response(MemberSerializer(member).data, status=status.HTTP_201_CREATED)


class ProjectMemberDetailView(APIView):

    def delete(self, request, pk, user_id):
        project = get_project(request, pk)
        require(permissions.can_manage_members(project, request.user), request, 'manage members of this project')

        if project.creator_id == user_id:
            return Response({'message': 'The project creator cannot be removed'},
                            status=status.HTTP_400_BAD_REQUEST)

        deleted, _ = project.memberships.filter(user_id=user_id).delete()
        if not deleted:
            return Response({'message': 'User is not a member of this project'},
                            status=status.HTTP_400_BAD_REQUEST)
        logger.info("User %s removed from project %s", user_id, project.id)
        return Response(status=status.HTTP_204_NO_CONTENT)
