from rest_framework import serializers
from django.db.models import Prefetch
from pms_user.models import User
from .models import Project, ProjectMember, Task, Milestone, TimeEntry, Comment, Notification
from . import progress


class ClientIdModelSerializer(serializers.ModelSerializer):
    """
    Model serializer for records whose UUID may be chosen by the client.
    The id is accepted on create and ignored on update.
    """

    def update(self, instance, validated_data):
        validated_data.pop('id', None)
        return super().update(instance, validated_data)


class TaskSerializer(ClientIdModelSerializer):
    projectId = serializers.PrimaryKeyRelatedField(source='project', read_only=True)
    dueDate = serializers.DateField(source='due_date', required=False, allow_null=True)
    assignedToId = serializers.PrimaryKeyRelatedField(
        source='assigned_to',
        queryset=User.objects.filter(deleted_at__isnull=True),
        allow_null=True,
        required=False
    )
    assignedToName = serializers.CharField(source='assigned_to.name', read_only=True, default=None)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Task
        fields = ['id', 'projectId', 'title', 'description', 'priority', 'status', 'dueDate',
                  'assignedToId', 'assignedToName', 'createdAt', 'updatedAt']


class TaskStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Task.Status.choices)

    def to_internal_value(self, data):
        if isinstance(data, dict) and isinstance(data.get('status'), str):
            data = {**data, 'status': data['status'].upper()}
        return super().to_internal_value(data)


class ProjectSerializer(ClientIdModelSerializer):
    startDate = serializers.DateField(source='start_date', required=False, allow_null=True)
    endDate = serializers.DateField(source='end_date', required=False, allow_null=True)
    creatorId = serializers.PrimaryKeyRelatedField(source='creator', read_only=True)
    creatorName = serializers.CharField(source='creator.name', read_only=True)
    tasks = serializers.SerializerMethodField()
    progress = serializers.SerializerMethodField()
    progressColor = serializers.SerializerMethodField()
    memberCount = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Project
        fields = ['id', 'name', 'description', 'startDate', 'endDate', 'visibility', 'creatorId', 'creatorName',
                  'tasks', 'progress', 'progressColor', 'memberCount', 'createdAt', 'updatedAt']

    def validate(self, attrs):
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError({'endDate': 'End date cannot be before start date.'})
        return attrs

    @staticmethod
    def setup_eager_loading(queryset):
        """Prefetch what a list of projects needs, so rows cost no extra queries."""
        return queryset.select_related('creator').prefetch_related(
            'memberships',
            Prefetch('tasks', queryset=Task.objects.alive().select_related('assigned_to'), to_attr='live_tasks'),
        )

    def _live_tasks(self, obj):
        if not hasattr(obj, 'live_tasks'):
            obj.live_tasks = list(obj.tasks.alive().select_related('assigned_to'))
        return obj.live_tasks

    def get_tasks(self, obj):
        return TaskSerializer(self._live_tasks(obj), many=True).data

    def get_progress(self, obj):
        return progress.tasks_progress(self._live_tasks(obj))

    def get_progressColor(self, obj):
        return progress.progress_color(self.get_progress(obj))

    def get_memberCount(self, obj):
        return len(obj.memberships.all())


class MilestoneSerializer(ClientIdModelSerializer):
    projectId = serializers.PrimaryKeyRelatedField(source='project', read_only=True)
    targetDate = serializers.DateField(source='target_date')
    status = serializers.SerializerMethodField()
    statusColor = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Milestone
        fields = ['id', 'projectId', 'title', 'description', 'targetDate', 'completed',
                  'status', 'statusColor', 'createdAt', 'updatedAt']

    def get_status(self, obj):
        return progress.milestone_status(obj)[0]

    def get_statusColor(self, obj):
        return progress.milestone_status(obj)[1]


class MemberSerializer(serializers.ModelSerializer):
    id = serializers.IntegerField(source='user.id', read_only=True)
    name = serializers.CharField(source='user.name', read_only=True)
    email = serializers.EmailField(source='user.email', read_only=True)
    role = serializers.CharField(source='user.role', read_only=True)
    memberRole = serializers.CharField(source='role', read_only=True)
    joinedAt = serializers.DateTimeField(source='joined_at', read_only=True)

    class Meta:
        model = ProjectMember
        fields = ['id', 'name', 'email', 'role', 'memberRole', 'joinedAt']


class AddMemberSerializer(serializers.Serializer):
    userId = serializers.PrimaryKeyRelatedField(queryset=User.objects.filter(deleted_at__isnull=True))
    role = serializers.ChoiceField(choices=ProjectMember.Role.choices, default=ProjectMember.Role.MEMBER)

    def to_internal_value(self, data):
        if isinstance(data, dict) and isinstance(data.get('role'), str):
            data = {**data, 'role': data['role'].upper()}
        return super().to_internal_value(data)


class TimeEntrySerializer(serializers.ModelSerializer):
    taskId = serializers.PrimaryKeyRelatedField(source='task', read_only=True)
    taskTitle = serializers.CharField(source='task.title', read_only=True)
    userId = serializers.PrimaryKeyRelatedField(source='user', read_only=True)
    userName = serializers.CharField(source='user.name', read_only=True)
    hoursSpent = serializers.FloatField(source='hours_spent')
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = TimeEntry
        fields = ['id', 'taskId', 'taskTitle', 'userId', 'userName', 'hoursSpent', 'createdAt']

    def validate_hoursSpent(self, value):
        if value <= 0:
            raise serializers.ValidationError('Hours spent must be positive')
        return value


class CommentSerializer(serializers.ModelSerializer):
    taskId = serializers.PrimaryKeyRelatedField(source='task', read_only=True)
    taskTitle = serializers.CharField(source='task.title', read_only=True)
    userId = serializers.PrimaryKeyRelatedField(source='user', read_only=True)
    userName = serializers.CharField(source='user.name', read_only=True)
    userEmail = serializers.EmailField(source='user.email', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Comment
        fields = ['id', 'taskId', 'taskTitle', 'userId', 'userName', 'userEmail', 'text', 'createdAt', 'updatedAt']

    def validate_text(self, value):
        if not value.strip():
            raise serializers.ValidationError('Comment text cannot be blank')
        return value


class NotificationSerializer(serializers.ModelSerializer):
    userId = serializers.PrimaryKeyRelatedField(source='user', read_only=True)
    userName = serializers.CharField(source='user.name', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Notification
        fields = ['id', 'userId', 'userName', 'message', 'read', 'createdAt']
        read_only_fields = ['message', 'read']


# Sync payloads carry flat rows with writable foreign keys

class SyncProjectSerializer(ClientIdModelSerializer):
    startDate = serializers.DateField(source='start_date', required=False, allow_null=True)
    endDate = serializers.DateField(source='end_date', required=False, allow_null=True)
    creatorId = serializers.PrimaryKeyRelatedField(source='creator', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Project
        fields = ['id', 'name', 'description', 'startDate', 'endDate', 'visibility', 'creatorId',
                  'createdAt', 'updatedAt']


class SyncTaskSerializer(TaskSerializer):
    projectId = serializers.PrimaryKeyRelatedField(
        source='project',
        queryset=Project.objects.alive()
    )


class SyncMilestoneSerializer(MilestoneSerializer):
    projectId = serializers.PrimaryKeyRelatedField(
        source='project',
        queryset=Project.objects.alive()
    )
