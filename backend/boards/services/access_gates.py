"""
Raising gates over the boolean project checks.

Project, list, task and comment services share these so a denial reads the
same everywhere. Admin is checked here before any membership lookup, since
``AuthorizationService.authorize_project_access`` has no Admin bypass.
"""

import logging

from users.access_levels import AccessLevel, is_admin

from ..repositories import MembershipRepository
from . import decisions
from .authorization_service import AuthorizationService
from .errors import AccessForbidden, ResourceNotFound

logger = logging.getLogger(__name__)


class ProjectAccessGate:
    def __init__(self, authorization_service=None, repository=None):
        self.repository = repository or MembershipRepository()
        self.authorization = authorization_service or AuthorizationService(self.repository)

    def require_project(self, project_id):
        """
        Raises:
            ResourceNotFound: Project does not exist
        """
        project = self.repository.get_project(project_id)
        if project is None:
            logger.warning(
                "Project lookup failed",
                extra={
                    "project_id": str(project_id),
                    "action": "project_not_found",
                    "component": "ProjectAccessGate",
                    "severity": "medium",
                },
            )
            raise ResourceNotFound("Project not found")
        return project

    def require_membership(self, project_id, user_id, system_access_level):
        """Admin, or any ProjectMember regardless of level."""
        if is_admin(system_access_level):
            return
        if not self.authorization.authorize_project_membership(user_id, project_id):
            self._deny(project_id, user_id, "project_membership_denied")
            raise AccessForbidden()

    def require_level(self, project_id, user_id, required_level, system_access_level):
        """
        Admin, or a ProjectMember at ``required_level`` or above.

        Raises:
            AccessForbidden: "User does not have required access level: <level>"
        """
        if is_admin(system_access_level):
            return
        if self.authorization.authorize_project_access(user_id, project_id, required_level):
            return
        self._deny(project_id, user_id, "project_access_denied", required_level=AccessLevel(required_level).label)
        decisions.project_access(None, required_level, system_access_level).raise_if_denied()

    def require_manager(self, project_id, user_id, system_access_level):
        """Admin, or a ProjectMember at Owner or above."""
        if not self.authorization.can_manage_members(user_id, project_id, system_access_level):
            self._deny(project_id, user_id, "project_manage_denied")
            raise AccessForbidden()

    def _deny(self, project_id, user_id, action, **context):
        logger.warning(
            "Project access denied",
            extra={
                "project_id": str(project_id),
                "user_id": str(user_id),
                **context,
                "action": action,
                "component": "ProjectAccessGate",
                "severity": "high",
            },
        )
