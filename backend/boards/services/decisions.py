"""
Pure authorization rules.

Each rule takes already-loaded access levels and returns a ``Decision``
instead of raising, so callers handle every outcome explicitly. Services
that must fail fast call ``Decision.raise_if_denied()``.

A ``system_level`` of ``None`` means the principal carries no system claim;
it is treated like any non-Admin level.
"""

import enum
from dataclasses import dataclass
from typing import Optional

from users.access_levels import AccessLevel, is_admin, meets

from .errors import (AccessForbidden, InvalidAssignment, MembershipConflict,
                     ResourceNotFound)

INSUFFICIENT_PERMISSIONS = "Insufficient permissions to perform this action"
ABOVE_OWN_LEVEL = "Cannot assign access level higher than your own"


class Outcome(enum.Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    CONFLICT = "conflict"
    INVALID_ASSIGNMENT = "invalid_assignment"


_EXCEPTIONS = {
    Outcome.NOT_FOUND: ResourceNotFound,
    Outcome.FORBIDDEN: AccessForbidden,
    Outcome.CONFLICT: MembershipConflict,
    Outcome.INVALID_ASSIGNMENT: InvalidAssignment,
}


@dataclass(frozen=True)
class Decision:
    outcome: Outcome
    reason: str = ""

    @classmethod
    def ok(cls):
        return cls(Outcome.OK)

    @classmethod
    def not_found(cls, reason):
        return cls(Outcome.NOT_FOUND, reason)

    @classmethod
    def forbidden(cls, reason=INSUFFICIENT_PERMISSIONS):
        return cls(Outcome.FORBIDDEN, reason)

    @classmethod
    def conflict(cls, reason):
        return cls(Outcome.CONFLICT, reason)

    @classmethod
    def invalid_assignment(cls, reason=ABOVE_OWN_LEVEL):
        return cls(Outcome.INVALID_ASSIGNMENT, reason)

    @property
    def allowed(self) -> bool:
        return self.outcome is Outcome.OK

    def raise_if_denied(self):
        if not self.allowed:
            raise _EXCEPTIONS[self.outcome](self.reason)


# -------------------------------------------------------------------
# Workspace scope
# -------------------------------------------------------------------


def workspace_access(member_level: Optional[AccessLevel], system_level: Optional[AccessLevel]) -> Decision:
    """Any membership, at any level, may read the workspace."""
    if is_admin(system_level):
        return Decision.ok()
    if member_level is None:
        return Decision.forbidden()
    return Decision.ok()


def workspace_manage(member_level: Optional[AccessLevel], system_level: Optional[AccessLevel]) -> Decision:
    if is_admin(system_level):
        return Decision.ok()
    if not meets(member_level, AccessLevel.OWNER):
        return Decision.forbidden()
    return Decision.ok()


def access_level_assignment(
    actor_level: Optional[AccessLevel],
    new_level: AccessLevel,
    system_level: Optional[AccessLevel],
) -> Decision:
    if is_admin(system_level):
        return Decision.ok()
    if not meets(actor_level, new_level):
        return Decision.invalid_assignment(ABOVE_OWN_LEVEL)
    return Decision.ok()


# -------------------------------------------------------------------
# Project scope
# -------------------------------------------------------------------


def project_access(
    member_level: Optional[AccessLevel],
    required_level: AccessLevel,
    system_level: Optional[AccessLevel],
) -> Decision:
    if is_admin(system_level):
        return Decision.ok()
    if not meets(member_level, required_level):
        return Decision.forbidden(
            f"User does not have required access level: {AccessLevel(required_level).label}"
        )
    return Decision.ok()


def project_member_addition(
    actor_workspace_level: Optional[AccessLevel],
    target_workspace_level: AccessLevel,
    new_level: AccessLevel,
    system_level: Optional[AccessLevel],
) -> Decision:
    """
    Ceilings for adding a project member. Both apply; the stricter wins.

    The actor ceiling is waived for Admin, the target's workspace ceiling is not.
    """
    if not is_admin(system_level) and not meets(actor_workspace_level, new_level):
        return Decision.invalid_assignment(ABOVE_OWN_LEVEL)
    if not meets(target_workspace_level, new_level):
        return Decision.invalid_assignment(
            "Cannot assign project access level higher than user's workspace access level"
        )
    return Decision.ok()


def project_member_elevation(
    actor_project_level: Optional[AccessLevel],
    target_workspace_level: AccessLevel,
    new_level: AccessLevel,
    system_level: Optional[AccessLevel],
) -> Decision:
    """
    Rules for changing an existing project member's level.

    1. Admin, or the actor's project level is at least Owner.
    2. Non-Admin actors cannot grant above their own project level.
    3. Nobody, Admin included, can exceed the target's workspace level.
    """
    admin = is_admin(system_level)

    if not admin and not meets(actor_project_level, AccessLevel.OWNER):
        return Decision.forbidden("Insufficient permissions")

    if not admin and not meets(actor_project_level, new_level):
        return Decision.invalid_assignment("Cannot assign higher access level than your own")

    if not meets(target_workspace_level, new_level):
        return Decision.invalid_assignment("Cannot exceed workspace access level")

    return Decision.ok()
