"""
Accessible-content aggregation: which classes and subjects a principal may
see, shaped for populating selectors in the UI.
"""

import logging
from typing import Dict, List
from pelangi_backend.interface.permissions import AccessibleClassGet, AccessibleSubjectGet
from pelangi_backend.permissions.principal import Principal
from pelangi_backend.permissions.roles import CapabilityTier
from pelangi_backend.repositories.assignment import AssignmentRepository
from pelangi_backend.repositories.school import SchoolClassRepository

logger = logging.getLogger(__name__)


def _subject_entry(subject) -> AccessibleSubjectGet:
    return AccessibleSubjectGet(subject_id=subject.id, subject_name=subject.name, subject_code=subject.code)


class AccessibleContentAggregator:

    def __init__(self, assignments: AssignmentRepository, classes: SchoolClassRepository):
        self.assignments = assignments
        self.classes = classes

    def get_accessible_content(self, principal: Principal) -> List[AccessibleClassGet]:
        """
        Administrators see every physical class with its active subjects;
        teachers see only the classes and subjects of their active assignments.

        Raises:
            RoleNotApplicableError: for roles outside this permission model
            RepositoryError: if a read fails
        """
        if principal.tier == CapabilityTier.ADMINISTRATOR:
            return self.all_physical_classes()

        return self.for_teacher(principal.user_id)

    def all_physical_classes(self) -> List[AccessibleClassGet]:
        classes = self.classes.list_physical_classes()
        class_ids = [c.id for c in classes]

        subjects = self.classes.active_subjects_by_class(class_ids)
        counts = self.classes.active_student_counts(class_ids)

        return [
            AccessibleClassGet(
                class_id=c.id,
                class_name=c.name,
                student_count=counts.get(c.id, 0),
                subjects=[_subject_entry(s) for s in subjects.get(c.id, [])],
            )
            for c in classes
        ]

    def for_teacher(self, teacher_id: str) -> List[AccessibleClassGet]:
        """Group the teacher's active assignments by class, keeping first-seen class order."""
        assignments = self.assignments.list_active_assignments(teacher_id)

        grouped: Dict[str, AccessibleClassGet] = {}
        for assignment in assignments:
            entry = grouped.get(assignment.class_id)
            if entry is None:
                entry = AccessibleClassGet(
                    class_id=assignment.class_id,
                    class_name=assignment.school_class.name,
                )
                grouped[assignment.class_id] = entry
            entry.subjects.append(_subject_entry(assignment.subject))

        counts = self.classes.active_student_counts(grouped.keys())
        for class_id, entry in grouped.items():
            entry.student_count = counts.get(class_id, 0)

        logger.debug(f"Teacher {teacher_id} has {len(grouped)} accessible classes")
        return list(grouped.values())
