"""
Permission resolution for administrators and teachers.

The resolver is built per request around an assignment repository; it holds
no state of its own, so a descriptor always reflects the assignments as they
are at the time of the read.
"""

import logging
from pelangi_backend.permissions.principal import CapabilityDescriptor, Principal
from pelangi_backend.permissions.roles import CapabilityTier
from pelangi_backend.repositories.assignment import AssignmentRepository

logger = logging.getLogger(__name__)


class PermissionResolver:

    def __init__(self, assignments: AssignmentRepository):
        self.assignments = assignments

    def resolve(self, principal: Principal) -> CapabilityDescriptor:
        """
        Compute the capability descriptor of ``principal``.

        Administrators get the all-access descriptor without reading any
        assignment. Teachers get the fixed teacher flags plus the classes and
        subjects of their active assignments.

        Raises:
            RoleNotApplicableError: for roles outside this permission model
            RepositoryError: if the assignment read fails
        """
        if principal.tier == CapabilityTier.ADMINISTRATOR:
            return CapabilityDescriptor.for_administrator()

        assignments = self.assignments.list_active_assignments(principal.user_id)

        descriptor = CapabilityDescriptor.for_teacher(
            class_ids={a.class_id for a in assignments},
            subject_ids={a.subject_id for a in assignments},
        )
        logger.debug(
            f"Resolved teacher {principal.user_id}: "
            f"{len(descriptor.allowed_classes.ids)} classes, {len(descriptor.allowed_subjects.ids)} subjects"
        )
        return descriptor

    def can_access_subject(self, principal: Principal, class_id: str, subject_id: str) -> bool:
        """
        True if ``principal`` may act on ``subject_id`` within ``class_id``.

        For teachers this is a point lookup of one active assignment, not a
        full resolution.
        """
        if principal.tier == CapabilityTier.ADMINISTRATOR:
            return True

        return self.assignments.has_active_assignment(principal.user_id, class_id, subject_id)
