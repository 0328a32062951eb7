"""
The AccessLevel ladder shared by system, workspace and project scopes.

Levels are strictly ordered; ``meets`` is the only comparison used by
authorization checks.
"""

from django.db import models


class AccessLevel(models.IntegerChoices):
    GUEST = 0, "Guest"
    MEMBER = 10, "Member"
    OWNER = 20, "Owner"
    ADMIN = 30, "Admin"

    @classmethod
    def parse(cls, value):
        """
        Resolve a level from its name ("Owner", "owner", "OWNER") or ordinal (20, "20").

        Returns:
            AccessLevel or None: None when the value is missing or unknown
        """
        if value is None or isinstance(value, bool):
            return None

        if isinstance(value, cls):
            return value

        if isinstance(value, int):
            return cls(value) if value in cls.values else None

        text = str(value).strip()
        if text.lstrip("-").isdigit():
            return cls.parse(int(text))

        for level in cls:
            if text.lower() in (level.label.lower(), level.name.lower()):
                return level
        return None


def meets(actual, required):
    """True when ``actual`` is at or above ``required`` on the ladder."""
    if actual is None:
        return False
    return int(actual) >= int(required)


def is_admin(level):
    return level is not None and int(level) == AccessLevel.ADMIN
