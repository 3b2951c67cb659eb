# pms_app/views/milestones.py
import logging

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from ..serializers import MilestoneSerializer
from ..queries import MilestoneQueryBuilder
from .. import permissions
from .. import progress
from .common import get_project, get_milestone, require

logger = logging.getLogger(__name__)


class ProjectMilestoneListView(APIView):
    def get(self, request, project_id):
        project = get_project(request, project_id)
        return Response(MilestoneSerializer(MilestoneQueryBuilder.for_project(project), many=True).data)

    def post(self, request, project_id):
        project = get_project(request, project_id)
        require(permissions.can_modify_project(project, request.user), request, 'add milestones to this project')
        serializer = MilestoneSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        milestone = serializer.save(project=project)
        logger.info("Milestone %s created in project %s", milestone.id, project.id)
        return Response(MilestoneSerializer(milestone).data, status=status.HTTP_201_CREATED)


class MilestoneDetailView(APIView):

    def get(self, request, pk):
        return Response(MilestoneSerializer(get_milestone(request, pk)).data)

    def put(self, request, pk):
        milestone = get_milestone(request, pk)
        require(permissions.can_modify_project(milestone.project, request.user), request, 'update this milestone')
        serializer = MilestoneSerializer(milestone, data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    def delete(self, request, pk):
        milestone = get_milestone(request, pk)
        require(permissions.can_modify_project(milestone.project, request.user), request, 'delete this milestone')
        milestone.soft_delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


class MilestoneToggleView(APIView):
    def patch(self, request, pk):
        milestone = get_milestone(request, pk)
        require(permissions.can_modify_project(milestone.project, request.user), request, 'update this milestone')
        milestone.completed = not milestone.completed
        milestone.save(update_fields=['completed', 'updated_at'])
        return Response(MilestoneSerializer(milestone).data)


class OverdueMilestonesView(APIView):
    def get(self, request, project_id):
        project = get_project(request, project_id)
        return Response(MilestoneSerializer(MilestoneQueryBuilder.overdue(project), many=True).data)


class UpcomingMilestonesView(APIView):
    def get(self, request, project_id):
        project = get_project(request, project_id)
        return Response(MilestoneSerializer(MilestoneQueryBuilder.upcoming(project), many=True).data)


class MilestoneProgressView(APIView):
    def get(self, request, project_id):
        project = get_project(request, project_id)
        return Response(progress.milestone_progress(project))
