"""
Workspace-scope validation gates.

``ensure_*`` and ``validate_*`` fail fast with a typed error: NotFound,
Forbidden (including InvalidAssignment) or Conflict. None of them writes.
"""

import logging

from users.access_levels import AccessLevel, is_admin

from ..repositories import MembershipRepository
from . import decisions
from .decisions import Decision

logger = logging.getLogger(__name__)


class WorkspaceValidationService:
    """
    Gatekeeper for workspace operations.

    System Admin short-circuits every ``validate_*`` gate.
    """

    def __init__(self, repository=None):
        self.repository = repository or MembershipRepository()

    def ensure_workspace_exists(self, workspace_id):
        """
        Raises:
            ResourceNotFound: Workspace does not exist
        """
        if self.repository.workspace_exists(workspace_id):
            return
        self._deny(
            Decision.not_found("Workspace not found"),
            "workspace_not_found",
            workspace_id=workspace_id,
        )

    def ensure_user_exists(self, user_id):
        """
        Raises:
            ResourceNotFound: User does not exist
        """
        if self.repository.user_exists(user_id):
            return
        self._deny(Decision.not_found("User not found"), "user_not_found", target_user_id=user_id)

    def ensure_not_existing_member(self, workspace_id, user_id):
        """
        Raises:
            MembershipConflict: User already has a membership in the workspace
        """
        if self.repository.get_workspace_member(workspace_id, user_id) is None:
            return
        self._deny(
            Decision.conflict("User is already a member of this workspace"),
            "workspace_member_duplicate",
            workspace_id=workspace_id,
            target_user_id=user_id,
        )

    def validate_workspace_access(self, workspace_id, user_id, system_access_level):
        """
        Read gate: any membership is enough.

        Raises:
            AccessForbidden: Not a member and not Admin
        """
        member = self._member(workspace_id, user_id, system_access_level)
        decision = decisions.workspace_access(self._level(member), system_access_level)
        self._enforce(decision, "workspace_access", workspace_id, user_id)

    def validate_manage_permissions(self, workspace_id, user_id, system_access_level):
        """
        Mutation gate: workspace Owner or above.

        Raises:
            AccessForbidden: Below Owner and not Admin
        """
        member = self._member(workspace_id, user_id, system_access_level)
        decision = decisions.workspace_manage(self._level(member), system_access_level)
        self._enforce(decision, "workspace_manage", workspace_id, user_id)

    def validate_access_level_assignment(self, workspace_id, user_id, new_level, system_access_level):
        """
        Ceiling gate: nobody grants more than they hold.

        Raises:
            InvalidAssignment: ``new_level`` above the actor's own level
        """
        member = self._member(workspace_id, user_id, system_access_level)
        decision = decisions.access_level_assignment(
            self._level(member), AccessLevel(new_level), system_access_level
        )
        self._enforce(decision, "access_level_assignment", workspace_id, user_id, new_level=new_level)

    def _member(self, workspace_id, user_id, system_access_level):
        # Admin decisions never look at the membership row
        if is_admin(system_access_level):
            return None
        return self.repository.get_workspace_member(workspace_id, user_id)

    @staticmethod
    def _level(member):
        return AccessLevel(member.access_level) if member is not None else None

    def _enforce(self, decision, gate, workspace_id, user_id, **context):
        if decision.allowed:
            logger.debug(
                "Workspace gate passed",
                extra={
                    "workspace_id": str(workspace_id),
                    "user_id": str(user_id),
                    "gate": gate,
                    "action": f"{gate}_granted",
                    "component": "WorkspaceValidationService",
                },
            )
            return
        self._deny(decision, f"{gate}_denied", workspace_id=workspace_id, user_id=user_id, **context)

    def _deny(self, decision, action, **context):
        logger.warning(
            "Workspace validation failed",
            extra={
                **{key: str(value) for key, value in context.items()},
                "outcome": decision.outcome.value,
                "reason": decision.reason,
                "action": action,
                "component": "WorkspaceValidationService",
                "severity": "medium" if decision.outcome is decisions.Outcome.NOT_FOUND else "high",
            },
        )
        decision.raise_if_denied()
