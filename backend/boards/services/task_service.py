"""
Task service.

Every operation resolves the task, then passes one gate:
``ensure_project_access(task, required_level)``. Reads and comments need
Guest, mutations need Member. Admin bypasses the gate.
"""

import logging

from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from users.access_levels import AccessLevel, is_admin

from ..models import Comment, Task, TaskAssignee, TaskList
from ..repositories import MembershipRepository, as_uuid
from . import decisions
from .authorization_service import AuthorizationService
from .errors import ResourceNotFound, require_identity
from .project_service import TASK_FIELDS

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(self, authorization_service=None, repository=None):
        """Initialize service with dependency injection."""
        self.repository = repository or MembershipRepository()
        self.authorization = authorization_service or AuthorizationService(self.repository)

    def ensure_project_access(self, task, user_id, required_level, system_access_level):
        """
        Admin, or the caller's ProjectMember level on the task's project
        at ``required_level`` or above.

        Raises:
            AccessForbidden: "User does not have required access level: <level>"
        """
        if is_admin(system_access_level):
            return
        if self.authorization.authorize_project_access(user_id, task.project_id, required_level):
            return

        member = self.repository.get_project_member_for_user(task.project_id, user_id)
        level = AccessLevel(member.access_level) if member is not None else None
        logger.warning(
            "Task access denied",
            extra={
                "task_id": str(task.id),
                "project_id": str(task.project_id),
                "user_id": str(user_id),
                "required_level": AccessLevel(required_level).label,
                "action": "task_access_denied",
                "component": "TaskService",
                "severity": "high",
            },
        )
        decisions.project_access(level, required_level, system_access_level).raise_if_denied()

    def get_task(self, task_id, user_id, system_access_level) -> Task:
        require_identity(user_id)
        task = self._get_task_or_404(task_id)
        self.ensure_project_access(task, user_id, AccessLevel.GUEST, system_access_level)
        return task

    def list_tasks(self, user_id, system_access_level):
        require_identity(user_id)
        tasks = Task.objects.select_related("list").prefetch_related("assignees")
        if is_admin(system_access_level):
            return tasks.all()
        return tasks.filter(project__members__workspace_member__user_id=user_id).distinct()

    @transaction.atomic
    def update_task(self, task_id, data: dict, user_id, system_access_level) -> Task:
        require_identity(user_id)
        task = self._get_task_or_404(task_id)
        self.ensure_project_access(task, user_id, AccessLevel.MEMBER, system_access_level)

        changed = [field for field in TASK_FIELDS if field in data]
        for field in changed:
            setattr(task, field, data[field])
        task.save()

        logger.info(
            "Task updated successfully",
            extra={
                "task_id": str(task.id),
                "user_id": str(user_id),
                "updated_fields": changed,
                "action": "task_update_success",
                "component": "TaskService",
            },
        )
        return task

    @transaction.atomic
    def delete_task(self, task_id, user_id, system_access_level):
        require_identity(user_id)
        task = self._get_task_or_404(task_id)
        self.ensure_project_access(task, user_id, AccessLevel.MEMBER, system_access_level)
        task.delete()

        logger.info(
            "Task deleted",
            extra={
                "task_id": str(task_id),
                "user_id": str(user_id),
                "action": "task_deleted",
                "component": "TaskService",
            },
        )

    @transaction.atomic
    def move_task(self, task_id, list_id, user_id, system_access_level) -> Task:
        """
        Raises:
            ResourceNotFound: Task or list missing
            ValidationError: Target list belongs to another project
        """
        require_identity(user_id)
        task = self._get_task_or_404(task_id)
        self.ensure_project_access(task, user_id, AccessLevel.MEMBER, system_access_level)

        list_uuid = as_uuid(list_id)
        target = TaskList.objects.filter(id=list_uuid).first() if list_uuid else None
        if target is None:
            raise ResourceNotFound("List not found")
        if target.project_id != task.project_id:
            raise ValidationError("Cannot move task to a list in a different project")

        old_list_id = task.list_id
        task.list = target
        task.save(update_fields=["list"])

        logger.info(
            "Task moved",
            extra={
                "task_id": str(task.id),
                "from_list_id": str(old_list_id),
                "to_list_id": str(target.id),
                "user_id": str(user_id),
                "action": "task_move_success",
                "component": "TaskService",
            },
        )
        return task

    # -------------------------------------------------------------------
    # COMMENTS
    # -------------------------------------------------------------------

    def get_comments(self, task_id, user_id, system_access_level):
        require_identity(user_id)
        task = self._get_task_or_404(task_id)
        self.ensure_project_access(task, user_id, AccessLevel.GUEST, system_access_level)
        return Comment.objects.filter(task=task).select_related("user")

    @transaction.atomic
    def add_comment(self, task_id, content, user_id, system_access_level) -> Comment:
        require_identity(user_id)
        task = self._get_task_or_404(task_id)
        self.ensure_project_access(task, user_id, AccessLevel.GUEST, system_access_level)

        comment = Comment.objects.create(task=task, user_id=user_id, content=content)
        logger.info(
            "Comment added to task",
            extra={
                "task_id": str(task.id),
                "comment_id": str(comment.id),
                "user_id": str(user_id),
                "action": "task_comment_added",
                "component": "TaskService",
            },
        )
        return comment

    # -------------------------------------------------------------------
    # ASSIGNEES
    # -------------------------------------------------------------------

    @transaction.atomic
    def assign_user(self, task_id, assignee_id, user_id, system_access_level) -> TaskAssignee:
        """
        Raises:
            ResourceNotFound: Task or assignee missing
            ValidationError: Already assigned, or assignee outside the project
        """
        require_identity(user_id)
        task = self._get_task_or_404(task_id)
        self.ensure_project_access(task, user_id, AccessLevel.MEMBER, system_access_level)

        if not self.repository.user_exists(assignee_id):
            raise ResourceNotFound("User not found")

        if TaskAssignee.objects.filter(task=task, user_id=assignee_id).exists():
            raise ValidationError("User is already assigned to this task")

        if not is_admin(system_access_level) and not self.authorization.authorize_project_membership(
            assignee_id, task.project_id
        ):
            raise ValidationError("Assignee must be a member of the project")

        try:
            with transaction.atomic():
                assignment = TaskAssignee.objects.create(task=task, user_id=assignee_id)
        except IntegrityError:
            raise ValidationError("User is already assigned to this task")

        logger.info(
            "User assigned to task",
            extra={
                "task_id": str(task.id),
                "assignee_id": str(assignee_id),
                "user_id": str(user_id),
                "action": "task_assign_success",
                "component": "TaskService",
            },
        )
        return assignment

    @transaction.atomic
    def unassign_user(self, task_id, assignee_id, user_id, system_access_level):
        """Assignees may always remove themselves; others need Member."""
        require_identity(user_id)
        task = self._get_task_or_404(task_id)
        if str(assignee_id) != str(user_id):
            self.ensure_project_access(task, user_id, AccessLevel.MEMBER, system_access_level)

        assignee_uuid = as_uuid(assignee_id)
        deleted = 0
        if assignee_uuid is not None:
            deleted, _ = TaskAssignee.objects.filter(task=task, user_id=assignee_uuid).delete()
        if not deleted:
            raise ResourceNotFound("User is not assigned to this task")

        logger.info(
            "User unassigned from task",
            extra={
                "task_id": str(task.id),
                "assignee_id": str(assignee_id),
                "user_id": str(user_id),
                "action": "task_unassign_success",
                "component": "TaskService",
            },
        )

    @staticmethod
    def _get_task_or_404(task_id):
        task_id = as_uuid(task_id)
        task = Task.objects.filter(id=task_id).first() if task_id else None
        if task is None:
            raise ResourceNotFound("Task not found")
        return task
