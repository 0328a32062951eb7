"""
Project service: project lifecycle, project membership and list creation.
"""

import logging

from django.db import IntegrityError, transaction
from django.db.models import Max
from rest_framework.exceptions import ValidationError

from users.access_levels import AccessLevel, is_admin

from ..models import Project, ProjectMember, Task, TaskList
from ..repositories import MembershipRepository
from . import decisions
from .access_gates import ProjectAccessGate
from .errors import (AccessForbidden, MembershipConflict, ResourceNotFound,
                     require_identity)
from .workspace_validation_service import WorkspaceValidationService

logger = logging.getLogger(__name__)

PROJECT_FIELDS = ("name", "description", "start_date", "end_date", "status")
TASK_FIELDS = ("name", "description", "status", "priority", "deadline")


class ProjectService:
    """
    Projects inside a workspace and the ProjectMember rows that grant
    authority over their lists, tasks and comments.
    """

    def __init__(self, gate=None, validation_service=None, repository=None):
        """Initialize service with dependency injection."""
        self.repository = repository or MembershipRepository()
        self.gate = gate or ProjectAccessGate(repository=self.repository)
        self.validation = validation_service or WorkspaceValidationService(self.repository)

    @transaction.atomic
    def create_project(self, data: dict, user_id, system_access_level) -> Project:
        """
        Create a project and make the creator its Owner.

        Args:
            data: workspace_id plus project fields
            user_id: Acting user
            system_access_level: Acting user's system level

        Returns:
            Project: Created project

        Raises:
            ResourceNotFound: Workspace does not exist
            AccessForbidden: Creator is not a workspace member and not Admin
        """
        require_identity(user_id)
        workspace_id = data.get("workspace_id")

        logger.info(
            "Project creation initiated",
            extra={
                "workspace_id": str(workspace_id),
                "user_id": str(user_id),
                "action": "project_creation_start",
                "component": "ProjectService",
            },
        )

        self.validation.ensure_workspace_exists(workspace_id)
        self.validation.validate_workspace_access(workspace_id, user_id, system_access_level)

        project = Project.objects.create(
            workspace_id=workspace_id,
            **{field: data[field] for field in PROJECT_FIELDS if data.get(field) is not None},
        )

        creator = self.repository.get_workspace_member(workspace_id, user_id)
        if creator is not None:
            ProjectMember.objects.create(
                project=project, workspace_member=creator, access_level=AccessLevel.OWNER
            )

        logger.info(
            "Project created successfully",
            extra={
                "project_id": str(project.id),
                "workspace_id": str(workspace_id),
                "user_id": str(user_id),
                "creator_enrolled": creator is not None,
                "action": "project_creation_success",
                "component": "ProjectService",
            },
        )
        return project

    def get_project(self, project_id, user_id, system_access_level) -> Project:
        require_identity(user_id)
        project = self.gate.require_project(project_id)
        self.validation.validate_workspace_access(project.workspace_id, user_id, system_access_level)
        return project

    def list_projects(self, user_id, system_access_level):
        require_identity(user_id)
        projects = Project.objects.select_related("workspace")
        if is_admin(system_access_level):
            return projects.all()
        return projects.filter(members__workspace_member__user_id=user_id).distinct()

    @transaction.atomic
    def update_project(self, project_id, data: dict, user_id, system_access_level) -> Project:
        require_identity(user_id)
        project = self.gate.require_project(project_id)
        self.gate.require_manager(project.id, user_id, system_access_level)

        changed = [field for field in PROJECT_FIELDS if field in data]
        for field in changed:
            setattr(project, field, data[field])
        project.save()

        logger.info(
            "Project updated successfully",
            extra={
                "project_id": str(project.id),
                "user_id": str(user_id),
                "updated_fields": changed,
                "action": "project_update_success",
                "component": "ProjectService",
            },
        )
        return project

    @transaction.atomic
    def delete_project(self, project_id, user_id, system_access_level):
        require_identity(user_id)
        project = self.gate.require_project(project_id)
        self.gate.require_manager(project.id, user_id, system_access_level)
        project.delete()

        logger.warning(
            "Project deleted",
            extra={
                "project_id": str(project_id),
                "user_id": str(user_id),
                "action": "project_deleted",
                "component": "ProjectService",
                "severity": "high",
            },
        )

    # -------------------------------------------------------------------
    # MEMBERSHIP
    # -------------------------------------------------------------------

    @transaction.atomic
    def add_project_member(self, project_id, workspace_member_id, access_level, user_id, system_access_level):
        """
        Enrol a workspace member in a project.

        Every check runs before the insert, in this order: project exists,
        actor belongs to the workspace, actor may manage the project, target
        exists, level within both the actor's and the target's workspace
        level, target in the same workspace, no duplicate.

        Returns:
            ProjectMember: The new membership

        Raises:
            ResourceNotFound: Project or workspace member missing
            AccessForbidden: Actor not in the workspace or cannot manage
            InvalidAssignment: A ceiling would be exceeded
            ValidationError: Target belongs to another workspace
            MembershipConflict: Already a project member
        """
        require_identity(user_id)
        access_level = AccessLevel(access_level)
        admin = is_admin(system_access_level)

        logger.info(
            "Project member addition initiated",
            extra={
                "project_id": str(project_id),
                "workspace_member_id": str(workspace_member_id),
                "user_id": str(user_id),
                "access_level": access_level.label,
                "action": "project_member_add_start",
                "component": "ProjectService",
            },
        )

        project = self.gate.require_project(project_id)

        actor = None if admin else self.repository.get_workspace_member(project.workspace_id, user_id)
        if not admin and actor is None:
            raise AccessForbidden()

        self.gate.require_manager(project.id, user_id, system_access_level)

        actor_level = AccessLevel(actor.access_level) if actor is not None else None

        target = self.repository.get_workspace_member_by_id(workspace_member_id)
        if target is None:
            raise ResourceNotFound("Workspace member not found")

        decision = decisions.project_member_addition(
            actor_level, AccessLevel(target.access_level), access_level, system_access_level
        )
        if not decision.allowed:
            logger.warning(
                "Project member addition rejected",
                extra={
                    "project_id": str(project.id),
                    "workspace_member_id": str(target.id),
                    "user_id": str(user_id),
                    "reason": decision.reason,
                    "action": "project_member_add_ceiling_denied",
                    "component": "ProjectService",
                    "severity": "high",
                },
            )
            decision.raise_if_denied()

        if target.workspace_id != project.workspace_id:
            raise ValidationError("Workspace member does not belong to the project's workspace")

        if self.repository.project_member_exists(project.id, target.id):
            raise MembershipConflict("Member already exists in project")

        try:
            with transaction.atomic():
                member = ProjectMember.objects.create(
                    project=project, workspace_member=target, access_level=access_level
                )
        except IntegrityError:
            raise MembershipConflict("Member already exists in project")

        logger.info(
            "Project member added successfully",
            extra={
                "project_id": str(project.id),
                "member_id": str(member.id),
                "user_id": str(user_id),
                "access_level": access_level.label,
                "action": "project_member_add_success",
                "component": "ProjectService",
            },
        )
        return member

    @transaction.atomic
    def update_member_access(self, member_id, new_level, user_id, system_access_level) -> ProjectMember:
        """
        Change a project member's level.

        The actor must be Admin or a project Owner. A non-Admin cannot grant
        above their own project level, and nobody can exceed the target's
        workspace level.

        Raises:
            ResourceNotFound: Member or project missing
            AccessForbidden: Actor may not manage members
            InvalidAssignment: A ceiling would be exceeded
        """
        require_identity(user_id)
        new_level = AccessLevel(new_level)

        target = self.repository.get_project_member(member_id)
        if target is None:
            raise ResourceNotFound("Project member not found")

        project = self.repository.get_project_with_members(target.project_id)
        if project is None:
            raise ResourceNotFound("Project not found")

        actor = next(
            (m for m in project.members.all() if str(m.workspace_member.user_id) == str(user_id)),
            None,
        )

        decision = decisions.project_member_elevation(
            AccessLevel(actor.access_level) if actor is not None else None,
            AccessLevel(target.workspace_member.access_level),
            new_level,
            system_access_level,
        )
        if not decision.allowed:
            logger.warning(
                "Project member access update rejected",
                extra={
                    "project_id": str(project.id),
                    "member_id": str(target.id),
                    "user_id": str(user_id),
                    "new_access_level": new_level.label,
                    "reason": decision.reason,
                    "action": "project_member_access_update_denied",
                    "component": "ProjectService",
                    "severity": "high",
                },
            )
            decision.raise_if_denied()

        old_level = AccessLevel(target.access_level)
        target.access_level = new_level
        target.save(update_fields=["access_level"])

        logger.info(
            "Project member access updated successfully",
            extra={
                "project_id": str(project.id),
                "member_id": str(target.id),
                "user_id": str(user_id),
                "old_access_level": old_level.label,
                "new_access_level": new_level.label,
                "action": "project_member_access_update_success",
                "component": "ProjectService",
            },
        )
        return target

    def get_members(self, project_id, user_id, system_access_level):
        require_identity(user_id)
        project = self.gate.require_project(project_id)
        self.gate.require_membership(project.id, user_id, system_access_level)
        return ProjectMember.objects.filter(project=project).select_related("workspace_member__user")

    # -------------------------------------------------------------------
    # LISTS
    # -------------------------------------------------------------------

    def get_lists(self, project_id, user_id, system_access_level):
        require_identity(user_id)
        project = self.gate.require_project(project_id)
        self.gate.require_membership(project.id, user_id, system_access_level)
        return TaskList.objects.filter(project=project).order_by("position", "created_date")

    @transaction.atomic
    def create_list(self, project_id, data: dict, user_id, system_access_level) -> TaskList:
        """
        Append a list to the project, optionally with initial tasks.

        The list takes the next free position: one past the current maximum,
        or 0 for the first list.
        """
        require_identity(user_id)
        project = self.gate.require_project(project_id)
        self.gate.require_level(project.id, user_id, AccessLevel.MEMBER, system_access_level)

        top = TaskList.objects.filter(project=project).aggregate(top=Max("position"))["top"]
        task_list = TaskList.objects.create(
            project=project,
            name=data["name"],
            position=0 if top is None else top + 1,
        )

        tasks = data.get("tasks") or []
        Task.objects.bulk_create(
            [
                Task(
                    project=project,
                    list=task_list,
                    **{field: task[field] for field in TASK_FIELDS if task.get(field) is not None},
                )
                for task in tasks
            ]
        )

        logger.info(
            "Task list created successfully",
            extra={
                "project_id": str(project.id),
                "list_id": str(task_list.id),
                "user_id": str(user_id),
                "position": task_list.position,
                "initial_tasks": len(tasks),
                "action": "task_list_creation_success",
                "component": "ProjectService",
            },
        )
        return task_list
