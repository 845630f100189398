"""
In-memory stand-ins for the assignment repository and failing sessions.
"""

from dataclasses import dataclass
from typing import List, Optional
from unittest.mock import MagicMock
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session


@dataclass
class FakeAssignment:
    class_id: str
    subject_id: str
    teacher_id: str
    is_active: bool = True


class InMemoryAssignmentStore:
    """Implements the read operations the resolver and guard use."""

    def __init__(self, assignments: Optional[List[FakeAssignment]] = None):
        self.assignments = list(assignments or [])
        self.calls = []

    def add(self, class_id: str, subject_id: str, teacher_id: str, is_active: bool = True) -> FakeAssignment:
        assignment = FakeAssignment(class_id, subject_id, teacher_id, is_active)
        self.assignments.append(assignment)
        return assignment

    def list_active_assignments(self, teacher_id: str) -> List[FakeAssignment]:
        self.calls.append(("list_active_assignments", teacher_id))
        return [a for a in self.assignments if a.teacher_id == teacher_id and a.is_active]

    def has_active_assignment(self, teacher_id: str, class_id: str, subject_id: Optional[str] = None) -> bool:
        self.calls.append(("has_active_assignment", teacher_id, class_id, subject_id))
        return any(
            a.teacher_id == teacher_id
            and a.class_id == class_id
            and (subject_id is None or a.subject_id == subject_id)
            and a.is_active
            for a in self.assignments
        )


def failing_session() -> MagicMock:
    """Session whose every read fails like a timed-out statement."""
    error = OperationalError("SELECT 1", {}, Exception("canceling statement due to statement timeout"))

    query = MagicMock()
    for name in ("options", "filter", "join", "order_by", "group_by"):
        getattr(query, name).return_value = query
    query.all.side_effect = error
    query.first.side_effect = error

    db = MagicMock(spec=Session)
    db.query.return_value = query
    db.scalar.side_effect = error
    return db
