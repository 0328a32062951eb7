"""
Comment service. Reads follow project membership; edits belong to the author.
"""

import logging

from django.db import transaction

from users.access_levels import is_admin

from ..models import Comment, Task
from ..repositories import MembershipRepository, as_uuid
from .authorization_service import AuthorizationService
from .errors import AccessForbidden, ResourceNotFound, require_identity

logger = logging.getLogger(__name__)


class CommentService:
    def __init__(self, authorization_service=None, repository=None):
        self.repository = repository or MembershipRepository()
        self.authorization = authorization_service or AuthorizationService(self.repository)

    def list_comments(self, user_id, system_access_level, task_id=None):
        """Newest first, limited to projects the caller belongs to (Admin: all)."""
        require_identity(user_id)
        comments = Comment.objects.select_related("user", "task").order_by("-created_date")
        if task_id is not None:
            task_uuid = as_uuid(task_id)
            if task_uuid is None:
                return comments.none()
            comments = comments.filter(task_id=task_uuid)
        if is_admin(system_access_level):
            return comments
        return comments.filter(task__project__members__workspace_member__user_id=user_id).distinct()

    def get_comment(self, comment_id, user_id, system_access_level) -> Comment:
        require_identity(user_id)
        comment = self._get_comment_or_404(comment_id)
        if not self.authorization.authorize_comment_access(user_id, comment.id, system_access_level):
            self._deny(comment, user_id, "comment_access_denied")
            raise AccessForbidden()
        return comment

    @transaction.atomic
    def create_comment(self, task_id, content, user_id, system_access_level) -> Comment:
        """
        Raises:
            ResourceNotFound: Task missing
            AccessForbidden: Caller is neither Admin nor a member of the task's project
        """
        require_identity(user_id)
        task_uuid = as_uuid(task_id)
        task = Task.objects.filter(id=task_uuid).first() if task_uuid else None
        if task is None:
            raise ResourceNotFound("Task not found")

        if not is_admin(system_access_level) and not self.authorization.authorize_project_membership(
            user_id, task.project_id
        ):
            logger.warning(
                "Comment creation denied",
                extra={
                    "task_id": str(task.id),
                    "user_id": str(user_id),
                    "action": "comment_creation_denied",
                    "component": "CommentService",
                    "severity": "high",
                },
            )
            raise AccessForbidden()

        comment = Comment.objects.create(task=task, user_id=user_id, content=content)
        logger.info(
            "Comment created successfully",
            extra={
                "comment_id": str(comment.id),
                "task_id": str(task.id),
                "user_id": str(user_id),
                "action": "comment_creation_success",
                "component": "CommentService",
            },
        )
        return comment

    @transaction.atomic
    def update_comment(self, comment_id, content, user_id, system_access_level) -> Comment:
        require_identity(user_id)
        comment = self._get_comment_or_404(comment_id)
        self._ensure_author_or_admin(comment, user_id, system_access_level, "update")

        comment.content = content
        comment.save(update_fields=["content"])

        logger.info(
            "Comment updated successfully",
            extra={
                "comment_id": str(comment.id),
                "user_id": str(user_id),
                "action": "comment_update_success",
                "component": "CommentService",
            },
        )
        return comment

    @transaction.atomic
    def delete_comment(self, comment_id, user_id, system_access_level):
        require_identity(user_id)
        comment = self._get_comment_or_404(comment_id)
        self._ensure_author_or_admin(comment, user_id, system_access_level, "delete")
        comment.delete()

        logger.info(
            "Comment deleted",
            extra={
                "comment_id": str(comment_id),
                "user_id": str(user_id),
                "action": "comment_deleted",
                "component": "CommentService",
            },
        )

    def _ensure_author_or_admin(self, comment, user_id, system_access_level, verb):
        if is_admin(system_access_level) or str(comment.user_id) == str(user_id):
            return
        self._deny(comment, user_id, f"comment_{verb}_denied")
        raise AccessForbidden(f"Only the comment owner or an admin can {verb} this comment")

    @staticmethod
    def _deny(comment, user_id, action):
        logger.warning(
            "Comment access denied",
            extra={
                "comment_id": str(comment.id),
                "user_id": str(user_id),
                "action": action,
                "component": "CommentService",
                "severity": "high",
            },
        )

    @staticmethod
    def _get_comment_or_404(comment_id):
        comment_id = as_uuid(comment_id)
        comment = Comment.objects.filter(id=comment_id).first() if comment_id else None
        if comment is None:
            raise ResourceNotFound("Comment not found")
        return comment
