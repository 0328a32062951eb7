"""
Workspace service for workspace lifecycle and membership operations.

Every entry point takes the acting user's id and system access level;
authorization runs through WorkspaceValidationService before any write.
"""

import logging

from django.db import DatabaseError, IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from users.access_levels import AccessLevel, is_admin, meets

from ..models import Project, Workspace, WorkspaceMember
from ..repositories import MembershipRepository, as_uuid
from .errors import (AccessForbidden, MembershipConflict, ResourceNotFound,
                     require_identity)
from .workspace_validation_service import WorkspaceValidationService

logger = logging.getLogger(__name__)


class WorkspaceService:
    """
    Workspace management with membership-based authorization.
    """

    def __init__(self, validation_service=None, repository=None):
        """Initialize service with dependency injection."""
        self.repository = repository or MembershipRepository()
        self.validation = validation_service or WorkspaceValidationService(self.repository)

    @transaction.atomic
    def create_workspace(self, name: str, user_id, system_access_level=None) -> Workspace:
        """
        Create a workspace and enrol the creator as an Owner member.

        Args:
            name: Workspace name (1-100 characters)
            user_id: Acting user, becomes the owner
            system_access_level: Acting user's system level

        Returns:
            Workspace: Created workspace instance

        Raises:
            MissingIdentity: No acting user id
            ResourceNotFound: Acting user does not exist
            ValidationError: Invalid name
        """
        require_identity(user_id)

        logger.info(
            "Workspace creation initiated",
            extra={
                "user_id": str(user_id),
                "workspace_name": name,
                "action": "workspace_creation_start",
                "component": "WorkspaceService",
            },
        )

        self.validation.ensure_user_exists(user_id)
        name = self._validate_workspace_name(name)

        try:
            workspace = Workspace.objects.create(name=name, owner_id=user_id)
            self._sync_owner_to_membership(workspace)
        except DatabaseError as e:
            logger.error(
                "Workspace creation failed - database error",
                extra={
                    "user_id": str(user_id),
                    "workspace_name": name,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                    "action": "workspace_creation_database_error",
                    "component": "WorkspaceService",
                    "severity": "high",
                },
                exc_info=True,
            )
            raise

        logger.info(
            "Workspace created successfully",
            extra={
                "workspace_id": str(workspace.id),
                "user_id": str(user_id),
                "workspace_name": workspace.name,
                "action": "workspace_creation_success",
                "component": "WorkspaceService",
            },
        )
        return workspace

    def list_workspaces(self, user_id, system_access_level):
        """Admin sees every workspace, everyone else only their memberships."""
        require_identity(user_id)
        workspaces = Workspace.objects.select_related("owner")
        if is_admin(system_access_level):
            return workspaces.all()
        return workspaces.filter(memberships__user_id=user_id).distinct()

    def get_workspace(self, workspace_id, user_id, system_access_level) -> Workspace:
        """
        Raises:
            ResourceNotFound: Workspace does not exist
            AccessForbidden: Caller is not a member and not Admin
        """
        require_identity(user_id)
        self.validation.ensure_workspace_exists(workspace_id)
        self.validation.validate_workspace_access(workspace_id, user_id, system_access_level)
        return self.repository.get_workspace(workspace_id)

    @transaction.atomic
    def update_workspace(self, workspace_id, data: dict, user_id, system_access_level) -> Workspace:
        require_identity(user_id)
        self.validation.ensure_workspace_exists(workspace_id)
        self.validation.validate_manage_permissions(workspace_id, user_id, system_access_level)

        workspace = self.repository.get_workspace(workspace_id)
        if "name" in data:
            workspace.name = self._validate_workspace_name(data["name"])
        workspace.save()

        logger.info(
            "Workspace updated successfully",
            extra={
                "workspace_id": str(workspace.id),
                "user_id": str(user_id),
                "updated_fields": sorted(data.keys()),
                "action": "workspace_update_success",
                "component": "WorkspaceService",
            },
        )
        return workspace

    @transaction.atomic
    def delete_workspace(self, workspace_id, user_id, system_access_level):
        """
        Delete a workspace with every member, project, list, task and comment under it.
        """
        require_identity(user_id)
        self.validation.ensure_workspace_exists(workspace_id)
        self.validation.validate_manage_permissions(workspace_id, user_id, system_access_level)

        workspace = self.repository.get_workspace(workspace_id)
        workspace.delete()

        logger.warning(
            "Workspace deleted",
            extra={
                "workspace_id": str(workspace_id),
                "user_id": str(user_id),
                "action": "workspace_deleted",
                "component": "WorkspaceService",
                "severity": "high",
            },
        )

    @transaction.atomic
    def add_member(self, workspace_id, target_user_id, access_level, user_id, system_access_level):
        """
        Add a user to a workspace.

        Checks run in order and all before the insert: workspace exists, caller
        may manage, target user exists, target not yet a member, level not above
        the caller's own.

        Returns:
            WorkspaceMember: The new membership

        Raises:
            ResourceNotFound: Workspace or user missing
            AccessForbidden: Caller cannot manage the workspace
            MembershipConflict: Target is already a member
            InvalidAssignment: Level above the caller's own
        """
        require_identity(user_id)
        access_level = AccessLevel(access_level)

        logger.info(
            "Workspace member addition initiated",
            extra={
                "workspace_id": str(workspace_id),
                "user_id": str(user_id),
                "target_user_id": str(target_user_id),
                "access_level": access_level.label,
                "action": "workspace_member_add_start",
                "component": "WorkspaceService",
            },
        )

        self.validation.ensure_workspace_exists(workspace_id)
        self.validation.validate_manage_permissions(workspace_id, user_id, system_access_level)
        self.validation.ensure_user_exists(target_user_id)
        self.validation.ensure_not_existing_member(workspace_id, target_user_id)
        self.validation.validate_access_level_assignment(
            workspace_id, user_id, access_level, system_access_level
        )

        try:
            with transaction.atomic():
                member = WorkspaceMember.objects.create(
                    workspace_id=workspace_id,
                    user_id=target_user_id,
                    access_level=access_level,
                )
        except IntegrityError:
            raise MembershipConflict("User is already a member of this workspace")

        logger.info(
            "Workspace member added successfully",
            extra={
                "workspace_id": str(workspace_id),
                "member_id": str(member.id),
                "target_user_id": str(target_user_id),
                "access_level": access_level.label,
                "action": "workspace_member_add_success",
                "component": "WorkspaceService",
            },
        )
        return member

    def get_members(self, workspace_id, user_id, system_access_level):
        require_identity(user_id)
        self.validation.ensure_workspace_exists(workspace_id)
        self.validation.validate_workspace_access(workspace_id, user_id, system_access_level)
        return WorkspaceMember.objects.filter(workspace_id=workspace_id).select_related("user")

    @transaction.atomic
    def remove_member(self, workspace_id, member_id, user_id, system_access_level):
        """
        Raises:
            ResourceNotFound: Workspace or member missing
            AccessForbidden: Caller cannot manage, or the member is the owner
        """
        require_identity(user_id)
        self.validation.ensure_workspace_exists(workspace_id)
        self.validation.validate_manage_permissions(workspace_id, user_id, system_access_level)

        member = self.repository.get_workspace_member_by_id(member_id)
        if member is None or member.workspace_id != as_uuid(workspace_id):
            raise ResourceNotFound("Workspace member not found")

        if member.user_id == member.workspace.owner_id:
            raise AccessForbidden("The workspace owner cannot be removed")

        member.delete()

        logger.info(
            "Workspace member removed",
            extra={
                "workspace_id": str(workspace_id),
                "member_id": str(member_id),
                "user_id": str(user_id),
                "action": "workspace_member_removed",
                "component": "WorkspaceService",
            },
        )

    @transaction.atomic
    def update_member_access(self, member_id, new_level, user_id, system_access_level):
        """
        Change a workspace member's level.

        Raises:
            ResourceNotFound: "Workspace member not found"
            AccessForbidden: Caller cannot manage the member's workspace
            InvalidAssignment: Level above the caller's own
        """
        require_identity(user_id)
        new_level = AccessLevel(new_level)

        member = self.repository.get_workspace_member_by_id(member_id)
        if member is None:
            logger.warning(
                "Workspace member access update failed - member not found",
                extra={
                    "member_id": str(member_id),
                    "user_id": str(user_id),
                    "action": "workspace_member_access_update_not_found",
                    "component": "WorkspaceService",
                    "severity": "medium",
                },
            )
            raise ResourceNotFound("Workspace member not found")

        self.validation.validate_manage_permissions(member.workspace_id, user_id, system_access_level)
        self.validation.validate_access_level_assignment(
            member.workspace_id, user_id, new_level, system_access_level
        )

        old_level = AccessLevel(member.access_level)
        member.access_level = new_level
        member.save(update_fields=["access_level"])

        # project seats never outrank the workspace seat
        clamped = member.project_memberships.filter(access_level__gt=new_level).update(
            access_level=new_level
        )

        logger.info(
            "Workspace member access updated successfully",
            extra={
                "workspace_id": str(member.workspace_id),
                "member_id": str(member.id),
                "user_id": str(user_id),
                "old_access_level": old_level.label,
                "new_access_level": new_level.label,
                "clamped_project_memberships": clamped,
                "action": "workspace_member_access_update_success",
                "component": "WorkspaceService",
            },
        )
        return member

    def get_workspace_projects(self, workspace_id, user_id, system_access_level):
        """
        Projects visible to the caller inside one workspace.

        Admin and workspace Owners see every project; other members see the
        projects they belong to.
        """
        require_identity(user_id)
        self.validation.ensure_workspace_exists(workspace_id)
        self.validation.validate_workspace_access(workspace_id, user_id, system_access_level)

        projects = Project.objects.filter(workspace_id=workspace_id)
        if is_admin(system_access_level):
            return projects

        member = self.repository.get_workspace_member(workspace_id, user_id)
        if meets(member.access_level, AccessLevel.OWNER):
            return projects
        return projects.filter(members__workspace_member=member).distinct()

    def _sync_owner_to_membership(self, workspace):
        """Enrol the owner as an Owner member, creating or raising the row."""
        member, created = WorkspaceMember.objects.get_or_create(
            workspace=workspace,
            user_id=workspace.owner_id,
            defaults={"access_level": AccessLevel.OWNER},
        )
        if not created and member.access_level < AccessLevel.OWNER:
            member.access_level = AccessLevel.OWNER
            member.save(update_fields=["access_level"])

        logger.debug(
            "Owner synchronized to membership",
            extra={
                "workspace_id": str(workspace.id),
                "user_id": str(workspace.owner_id),
                "created": created,
                "action": "owner_membership_synced",
                "component": "WorkspaceService",
            },
        )
        return member

    @staticmethod
    def _validate_workspace_name(name):
        name = (name or "").strip()
        if not name:
            raise ValidationError("Workspace name is required")
        if len(name) > 100:
            raise ValidationError("Workspace name must be at most 100 characters long")
        return name
