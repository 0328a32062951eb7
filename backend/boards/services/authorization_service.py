"""
Boolean authorization queries.

These never raise for "access denied"; denial is ``False`` and the caller
decides how to respond. Database errors propagate unchanged.
"""

import logging

from users.access_levels import AccessLevel, is_admin, meets

from ..repositories import MembershipRepository

logger = logging.getLogger(__name__)


class AuthorizationService:
    """
    Membership-based yes/no checks for workspaces, projects and comments.

    ``authorize_project_access`` has no Admin bypass: task and comment
    services check the system level themselves before calling it.
    """

    def __init__(self, repository=None):
        self.repository = repository or MembershipRepository()

    def authorize_workspace_membership(self, workspace_id, user_id) -> bool:
        allowed = self.repository.get_workspace_member(workspace_id, user_id) is not None
        self._log("authorize_workspace_membership", allowed, workspace_id=workspace_id, user_id=user_id)
        return allowed

    def authorize_project_membership(self, user_id, project_id) -> bool:
        allowed = self.repository.get_project_member_for_user(project_id, user_id) is not None
        self._log("authorize_project_membership", allowed, project_id=project_id, user_id=user_id)
        return allowed

    def authorize_project_access(self, user_id, project_id, required_level) -> bool:
        member = self.repository.get_project_member_for_user(project_id, user_id)
        allowed = member is not None and meets(member.access_level, required_level)
        self._log(
            "authorize_project_access",
            allowed,
            project_id=project_id,
            user_id=user_id,
            required_level=AccessLevel(required_level).label,
        )
        return allowed

    def has_sufficient_membership_permissions(self, workspace_id, user_id, system_access_level) -> bool:
        if is_admin(system_access_level):
            return True
        member = self.repository.get_workspace_member(workspace_id, user_id)
        allowed = member is not None and meets(member.access_level, AccessLevel.MEMBER)
        self._log(
            "has_sufficient_membership_permissions",
            allowed,
            workspace_id=workspace_id,
            user_id=user_id,
        )
        return allowed

    def can_manage_members(self, user_id, project_id, system_access_level) -> bool:
        if is_admin(system_access_level):
            return True
        member = self.repository.get_project_member_for_user(project_id, user_id)
        allowed = member is not None and meets(member.access_level, AccessLevel.OWNER)
        self._log("can_manage_members", allowed, project_id=project_id, user_id=user_id)
        return allowed

    def authorize_comment_access(self, user_id, comment_id, system_access_level) -> bool:
        """Walk comment -> task -> list -> project, then check project membership."""
        if is_admin(system_access_level):
            return True

        comment = self.repository.get_comment_with_task_chain(comment_id)
        if comment is None:
            self._log("authorize_comment_access", False, comment_id=comment_id, user_id=user_id)
            return False

        return self.authorize_project_membership(user_id, comment.task.list.project_id)

    def _log(self, check, allowed, **context):
        extra = {
            **{key: str(value) for key, value in context.items()},
            "check": check,
            "allowed": allowed,
            "action": f"{check}_{'granted' if allowed else 'denied'}",
            "component": "AuthorizationService",
        }
        logger.debug("Authorization check evaluated", extra=extra)
