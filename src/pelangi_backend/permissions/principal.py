from typing import FrozenSet, Iterable, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from pelangi_backend.permissions.roles import CapabilityTier, Role, classify_role


class Principal(BaseModel):
    """The authenticated actor of one request. Built per request, never cached."""

    user_id: str
    role: Role
    full_name: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_teacher(self) -> bool:
        return self.role == Role.GURU

    @property
    def tier(self) -> CapabilityTier:
        """Capability tier; raises RoleNotApplicableError for students."""
        return classify_role(self.role)


class AccessScope(BaseModel):
    """
    Set of class or subject ids a principal may act on.

    Two variants: unrestricted (``AccessScope.all()``) and restricted to an
    explicit, possibly empty, set (``AccessScope.only(ids)``). An empty
    restricted scope allows nothing.
    """

    unrestricted: bool = False
    ids: FrozenSet[str] = Field(default_factory=frozenset)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode='after')
    def check_variant(self):
        if self.unrestricted and self.ids:
            raise ValueError("An unrestricted scope cannot list ids")
        return self

    @classmethod
    def all(cls) -> 'AccessScope':
        return cls(unrestricted=True)

    @classmethod
    def only(cls, ids: Iterable[str]) -> 'AccessScope':
        return cls(ids=frozenset(ids))

    def allows(self, resource_id: str) -> bool:
        return self.unrestricted or resource_id in self.ids

    @property
    def is_empty(self) -> bool:
        """True only for a restricted scope with no ids."""
        return not self.unrestricted and not self.ids


class CapabilityDescriptor(BaseModel):
    """Resolved capabilities of one principal for one request."""

    tier: CapabilityTier
    can_view_all_subjects: bool
    can_create_assignments: bool
    can_grade_assignments: bool
    can_manage_attendance: bool
    can_assign_subjects: bool
    can_transfer_students: bool
    allowed_subjects: AccessScope
    allowed_classes: AccessScope

    model_config = ConfigDict(frozen=True)

    @classmethod
    def for_administrator(cls) -> 'CapabilityDescriptor':
        return cls(
            tier=CapabilityTier.ADMINISTRATOR,
            can_view_all_subjects=True,
            can_create_assignments=True,
            can_grade_assignments=True,
            can_manage_attendance=True,
            can_assign_subjects=True,
            can_transfer_students=True,
            allowed_subjects=AccessScope.all(),
            allowed_classes=AccessScope.all(),
        )

    @classmethod
    def for_teacher(cls, class_ids: Iterable[str], subject_ids: Iterable[str]) -> 'CapabilityDescriptor':
        return cls(
            tier=CapabilityTier.TEACHER,
            can_view_all_subjects=False,
            can_create_assignments=True,
            can_grade_assignments=True,
            can_manage_attendance=True,
            can_assign_subjects=False,
            can_transfer_students=False,
            allowed_subjects=AccessScope.only(subject_ids),
            allowed_classes=AccessScope.only(class_ids),
        )
