"""
Serializers for workspaces, projects, lists, tasks and comments.

Serializers only shape and validate payloads; every authorization rule runs
in the service layer.
"""

import logging

from rest_framework import serializers

from users.access_levels import AccessLevel
from users.serializers import AccessLevelField

from .models import (Comment, Priority, Project, ProjectMember, ProjectStatus,
                     Task, TaskAssignee, TaskList, TaskStatus, Workspace,
                     WorkspaceMember)

logger = logging.getLogger(__name__)

# -------------------------------------------------------------------
# WORKSPACES
# -------------------------------------------------------------------


class WorkspaceSerializer(serializers.ModelSerializer):
    owner_username = serializers.CharField(source="owner.username", read_only=True)

    class Meta:
        model = Workspace
        fields = ["id", "name", "owner", "owner_username", "created_date"]
        read_only_fields = ["id", "owner", "owner_username", "created_date"]

    def validate_name(self, value):
        value = value.strip()
        if not value:
            logger.warning(
                "Empty workspace name provided",
                extra={
                    "action": "workspace_name_validation_failed",
                    "component": "WorkspaceSerializer",
                    "severity": "low",
                },
            )
            raise serializers.ValidationError("Workspace name is required")
        return value


class WorkspaceMemberSerializer(serializers.ModelSerializer):
    access_level = AccessLevelField(read_only=True)
    username = serializers.CharField(source="user.username", read_only=True)
    email = serializers.CharField(source="user.email", read_only=True)

    class Meta:
        model = WorkspaceMember
        fields = ["id", "workspace", "user", "username", "email", "access_level", "created_date"]
        read_only_fields = fields


class AddWorkspaceMemberSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    access_level = AccessLevelField(default=AccessLevel.MEMBER)


class MemberAccessSerializer(serializers.Serializer):
    member_id = serializers.UUIDField()
    access_level = AccessLevelField()


# -------------------------------------------------------------------
# PROJECTS
# -------------------------------------------------------------------


class ProjectMemberSerializer(serializers.ModelSerializer):
    access_level = AccessLevelField(read_only=True)
    user = serializers.UUIDField(source="workspace_member.user_id", read_only=True)

    class Meta:
        model = ProjectMember
        fields = ["id", "project", "workspace_member", "user", "access_level", "created_date"]
        read_only_fields = fields


class ProjectSerializer(serializers.ModelSerializer):
    status = serializers.ChoiceField(choices=ProjectStatus.choices, required=False)

    class Meta:
        model = Project
        fields = [
            "id",
            "workspace",
            "name",
            "description",
            "start_date",
            "end_date",
            "status",
            "created_date",
        ]
        read_only_fields = ["id", "workspace", "created_date"]

    def validate(self, data):
        start = data.get("start_date", getattr(self.instance, "start_date", None))
        end = data.get("end_date", getattr(self.instance, "end_date", None))
        if start and end and end < start:
            raise serializers.ValidationError({"end_date": "End date cannot be before start date"})
        return data


class ProjectCreateSerializer(ProjectSerializer):
    workspace_id = serializers.UUIDField(write_only=True)

    class Meta(ProjectSerializer.Meta):
        fields = ProjectSerializer.Meta.fields + ["workspace_id"]


class AddProjectMemberSerializer(serializers.Serializer):
    project_id = serializers.UUIDField()
    workspace_member_id = serializers.UUIDField()
    access_level = AccessLevelField(default=AccessLevel.MEMBER)


# -------------------------------------------------------------------
# LISTS AND TASKS
# -------------------------------------------------------------------


class TaskAssigneeSerializer(serializers.ModelSerializer):
    class Meta:
        model = TaskAssignee
        fields = ["id", "task", "user", "assigned_date"]
        read_only_fields = fields


class TaskSerializer(serializers.ModelSerializer):
    status = serializers.ChoiceField(choices=TaskStatus.choices, required=False)
    priority = serializers.ChoiceField(choices=Priority.choices, required=False)
    assignees = serializers.SlugRelatedField(many=True, read_only=True, slug_field="user_id")

    class Meta:
        model = Task
        fields = [
            "id",
            "project",
            "list",
            "name",
            "description",
            "status",
            "priority",
            "deadline",
            "assignees",
            "created_date",
        ]
        read_only_fields = ["id", "project", "list", "assignees", "created_date"]


class TaskListSerializer(serializers.ModelSerializer):
    tasks = TaskSerializer(many=True, required=False)

    class Meta:
        model = TaskList
        fields = ["id", "project", "name", "position", "tasks", "created_date"]
        read_only_fields = ["id", "project", "position", "created_date"]


class ListPositionSerializer(serializers.Serializer):
    position = serializers.IntegerField()


class MoveTaskSerializer(serializers.Serializer):
    list_id = serializers.UUIDField()


class AssignUserSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()


# -------------------------------------------------------------------
# COMMENTS
# -------------------------------------------------------------------


class CommentSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source="user.username", read_only=True)

    class Meta:
        model = Comment
        fields = ["id", "task", "user", "username", "content", "created_date"]
        read_only_fields = ["id", "task", "user", "username", "created_date"]

    def validate_content(self, value):
        if not value.strip():
            raise serializers.ValidationError("Comment content cannot be empty")
        return value


class CommentCreateSerializer(CommentSerializer):
    task_id = serializers.UUIDField(write_only=True)

    class Meta(CommentSerializer.Meta):
        fields = CommentSerializer.Meta.fields + ["task_id"]
