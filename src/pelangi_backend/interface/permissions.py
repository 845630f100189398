from typing import List
from pydantic import BaseModel, ConfigDict, Field

from pelangi_backend.permissions.principal import AccessScope, CapabilityDescriptor
from pelangi_backend.permissions.roles import CapabilityTier


class AccessScopeGet(BaseModel):
    unrestricted: bool = Field(description="True when every id is allowed")
    ids: List[str] = Field(default=[], description="Allowed ids when not unrestricted")

    @classmethod
    def from_scope(cls, scope: AccessScope) -> 'AccessScopeGet':
        return cls(unrestricted=scope.unrestricted, ids=sorted(scope.ids))


class CapabilityGet(BaseModel):
    tier: CapabilityTier = Field(description="Capability tier of the principal")
    can_view_all_subjects: bool
    can_create_assignments: bool
    can_grade_assignments: bool
    can_manage_attendance: bool
    can_assign_subjects: bool
    can_transfer_students: bool
    allowed_subjects: AccessScopeGet
    allowed_classes: AccessScopeGet

    model_config = ConfigDict(use_enum_values=True)

    @classmethod
    def from_descriptor(cls, descriptor: CapabilityDescriptor) -> 'CapabilityGet':
        return cls(
            tier=descriptor.tier,
            can_view_all_subjects=descriptor.can_view_all_subjects,
            can_create_assignments=descriptor.can_create_assignments,
            can_grade_assignments=descriptor.can_grade_assignments,
            can_manage_attendance=descriptor.can_manage_attendance,
            can_assign_subjects=descriptor.can_assign_subjects,
            can_transfer_students=descriptor.can_transfer_students,
            allowed_subjects=AccessScopeGet.from_scope(descriptor.allowed_subjects),
            allowed_classes=AccessScopeGet.from_scope(descriptor.allowed_classes),
        )


class AccessibleSubjectGet(BaseModel):
    subject_id: str = Field(description="Subject unique identifier")
    subject_name: str = Field(description="Subject name")
    subject_code: str = Field(description="Subject code")


class AccessibleClassGet(BaseModel):
    class_id: str = Field(description="Class unique identifier")
    class_name: str = Field(description="Class name")
    student_count: int = Field(0, description="Number of active students")
    subjects: List[AccessibleSubjectGet] = Field(default=[], description="Subjects the principal may work with")
