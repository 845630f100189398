"""
Role definitions and the capability tier classifier.
"""
from enum import Enum


class Role(str, Enum):
    """Closed set of user roles, using the values stored in ``user.role``."""
    ADMIN = "ADMIN"
    GURU = "GURU"
    SISWA = "SISWA"

    def __str__(self):
        return self.value

    @classmethod
    def from_string(cls, role_str: str) -> 'Role':
        """
        Convert a stored role string to Role.

        Accepts the English aliases used by older records. Unknown values
        raise ValueError; there is no fallback role.
        """
        if role_str is None:
            raise ValueError("Role is missing")

        normalized = role_str.strip().upper()
        normalized = ROLE_ALIASES.get(normalized, normalized)
        for role in cls:
            if role.value == normalized:
                return role
        raise ValueError(f"Unknown role: {role_str}")


ROLE_ALIASES = {
    "ADMINISTRATOR": Role.ADMIN.value,
    "TEACHER": Role.GURU.value,
    "STUDENT": Role.SISWA.value,
}


class CapabilityTier(str, Enum):
    ADMINISTRATOR = "ADMINISTRATOR"
    TEACHER = "TEACHER"


class RoleNotApplicableError(Exception):
    """The principal's role is not governed by the class/subject permission model."""

    def __init__(self, role: Role):
        super().__init__(f"Role {role} is not covered by class permissions")
        self.role = role


_TIERS = {
    Role.ADMIN: CapabilityTier.ADMINISTRATOR,
    Role.GURU: CapabilityTier.TEACHER,
}


def classify_role(role: Role) -> CapabilityTier:
    """Map a role to its capability tier; raise RoleNotApplicableError for students."""
    try:
        return _TIERS[role]
    except KeyError:
        raise RoleNotApplicableError(role) from None
