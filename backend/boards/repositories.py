"""
Membership and resource lookups used by the authorization layer.

Lookups return ``None`` (or ``False``) for missing rows and for malformed
identifiers; deciding what absence means is left to the caller.
"""

import uuid

from django.contrib.auth import get_user_model

from .models import Comment, Project, ProjectMember, Workspace, WorkspaceMember

User = get_user_model()


def as_uuid(value):
    """Coerce an identifier to UUID, or None when it is not one."""
    if value is None or isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


class MembershipRepository:
    """ORM-backed lookups of workspace and project membership facts."""

    def workspace_exists(self, workspace_id) -> bool:
        workspace_id = as_uuid(workspace_id)
        return workspace_id is not None and Workspace.objects.filter(id=workspace_id).exists()

    def user_exists(self, user_id) -> bool:
        user_id = as_uuid(user_id)
        return user_id is not None and User.objects.filter(id=user_id).exists()

    def get_workspace(self, workspace_id):
        workspace_id = as_uuid(workspace_id)
        if workspace_id is None:
            return None
        return Workspace.objects.filter(id=workspace_id).select_related("owner").first()

    def get_workspace_member(self, workspace_id, user_id):
        workspace_id, user_id = as_uuid(workspace_id), as_uuid(user_id)
        if workspace_id is None or user_id is None:
            return None
        return WorkspaceMember.objects.filter(workspace_id=workspace_id, user_id=user_id).first()

    def get_workspace_member_by_id(self, member_id):
        member_id = as_uuid(member_id)
        if member_id is None:
            return None
        return (
            WorkspaceMember.objects.filter(id=member_id)
            .select_related("workspace", "user")
            .first()
        )

    def get_project(self, project_id):
        project_id = as_uuid(project_id)
        if project_id is None:
            return None
        return Project.objects.filter(id=project_id).select_related("workspace").first()

    def get_project_with_members(self, project_id):
        project_id = as_uuid(project_id)
        if project_id is None:
            return None
        return (
            Project.objects.filter(id=project_id)
            .select_related("workspace")
            .prefetch_related("members__workspace_member")
            .first()
        )

    def get_project_member(self, member_id):
        member_id = as_uuid(member_id)
        if member_id is None:
            return None
        return (
            ProjectMember.objects.filter(id=member_id)
            .select_related("project", "workspace_member")
            .first()
        )

    def get_project_member_for_user(self, project_id, user_id):
        project_id, user_id = as_uuid(project_id), as_uuid(user_id)
        if project_id is None or user_id is None:
            return None
        return (
            ProjectMember.objects.filter(project_id=project_id, workspace_member__user_id=user_id)
            .select_related("workspace_member")
            .first()
        )

    def project_member_exists(self, project_id, workspace_member_id) -> bool:
        return ProjectMember.objects.filter(
            project_id=project_id, workspace_member_id=workspace_member_id
        ).exists()

    def get_comment_with_task_chain(self, comment_id):
        comment_id = as_uuid(comment_id)
        if comment_id is None:
            return None
        return (
            Comment.objects.filter(id=comment_id)
            .select_related("task", "task__list", "task__list__project")
            .first()
        )
