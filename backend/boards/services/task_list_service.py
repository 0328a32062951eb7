"""
Task list service: list reads, renames, reordering and task creation.
"""

import logging

from django.db import transaction
from django.db.models import F
from rest_framework.exceptions import ValidationError

from users.access_levels import AccessLevel, is_admin

from ..models import Task, TaskList
from ..repositories import as_uuid
from .access_gates import ProjectAccessGate
from .errors import ResourceNotFound, require_identity
from .project_service import TASK_FIELDS

logger = logging.getLogger(__name__)


class TaskListService:
    def __init__(self, gate=None):
        self.gate = gate or ProjectAccessGate()

    def get_list(self, list_id, user_id, system_access_level) -> TaskList:
        require_identity(user_id)
        task_list = self._get_list_or_404(list_id)
        self.gate.require_membership(task_list.project_id, user_id, system_access_level)
        return task_list

    def list_lists(self, user_id, system_access_level):
        require_identity(user_id)
        lists = TaskList.objects.select_related("project")
        if is_admin(system_access_level):
            return lists.all()
        return lists.filter(project__members__workspace_member__user_id=user_id).distinct()

    @transaction.atomic
    def update_list(self, list_id, data: dict, user_id, system_access_level) -> TaskList:
        require_identity(user_id)
        task_list = self._get_list_or_404(list_id)
        self.gate.require_level(task_list.project_id, user_id, AccessLevel.MEMBER, system_access_level)

        if "name" in data:
            task_list.name = data["name"]
            task_list.save(update_fields=["name"])

        logger.info(
            "Task list updated successfully",
            extra={
                "list_id": str(task_list.id),
                "user_id": str(user_id),
                "action": "task_list_update_success",
                "component": "TaskListService",
            },
        )
        return task_list

    @transaction.atomic
    def update_position(self, list_id, position, user_id, system_access_level) -> TaskList:
        """
        Move a list to ``position`` within its project.

        Lists between the old and the new position shift by one, so the
        project's positions stay contiguous.

        Raises:
            ValidationError: Position outside 0..count-1
        """
        require_identity(user_id)
        task_list = self._get_list_or_404(list_id)
        self.gate.require_level(task_list.project_id, user_id, AccessLevel.MEMBER, system_access_level)

        siblings = TaskList.objects.filter(project_id=task_list.project_id)
        # lock the project's lists while positions shift
        count = len(siblings.select_for_update().values_list("id", flat=True))
        if isinstance(position, bool) or not isinstance(position, int) or not 0 <= position < count:
            logger.warning(
                "Task list position update rejected",
                extra={
                    "list_id": str(task_list.id),
                    "requested_position": str(position),
                    "list_count": count,
                    "action": "task_list_position_invalid",
                    "component": "TaskListService",
                    "severity": "low",
                },
            )
            raise ValidationError("Invalid position")

        old_position = task_list.position
        others = siblings.exclude(id=task_list.id)
        if position < old_position:
            others.filter(position__gte=position, position__lt=old_position).update(
                position=F("position") + 1
            )
        elif position > old_position:
            others.filter(position__gt=old_position, position__lte=position).update(
                position=F("position") - 1
            )

        task_list.position = position
        task_list.save(update_fields=["position"])

        logger.info(
            "Task list moved",
            extra={
                "list_id": str(task_list.id),
                "user_id": str(user_id),
                "old_position": old_position,
                "new_position": position,
                "action": "task_list_position_update_success",
                "component": "TaskListService",
            },
        )
        return task_list

    def get_tasks(self, list_id, user_id, system_access_level):
        require_identity(user_id)
        task_list = self._get_list_or_404(list_id)
        self.gate.require_membership(task_list.project_id, user_id, system_access_level)
        return Task.objects.filter(list=task_list).prefetch_related("assignees")

    @transaction.atomic
    def create_task(self, list_id, data: dict, user_id, system_access_level) -> Task:
        require_identity(user_id)
        task_list = self._get_list_or_404(list_id)
        self.gate.require_level(task_list.project_id, user_id, AccessLevel.MEMBER, system_access_level)

        task = Task.objects.create(
            project_id=task_list.project_id,
            list=task_list,
            **{field: data[field] for field in TASK_FIELDS if data.get(field) is not None},
        )

        logger.info(
            "Task created successfully",
            extra={
                "task_id": str(task.id),
                "list_id": str(task_list.id),
                "project_id": str(task_list.project_id),
                "user_id": str(user_id),
                "action": "task_creation_success",
                "component": "TaskListService",
            },
        )
        return task

    @staticmethod
    def _get_list_or_404(list_id):
        list_id = as_uuid(list_id)
        task_list = TaskList.objects.filter(id=list_id).first() if list_id else None
        if task_list is None:
            raise ResourceNotFound("List not found")
        return task_list
