import pytest
from unittest.mock import MagicMock

from pelangi_backend.permissions.content import AccessibleContentAggregator
from pelangi_backend.permissions.principal import Principal
from pelangi_backend.permissions.roles import Role, RoleNotApplicableError
from pelangi_backend.repositories.assignment import AssignmentRepository
from pelangi_backend.repositories.school import SchoolClassRepository


@pytest.fixture
def aggregator(session, seed):
    return AccessibleContentAggregator(AssignmentRepository(session), SchoolClassRepository(session))


class TestAccessibleContent:

    def test_teacher_classes_grouped(self, aggregator, teacher_principal):
        content = aggregator.get_accessible_content(teacher_principal)

        # One entry per class, in order of the first assignment
        assert [c.class_id for c in content] == ["c-x-a", "c-x-b"]

        x_a = content[0]
        assert x_a.class_name == "X-A"
        assert [s.subject_id for s in x_a.subjects] == ["s-mtk", "s-bin"]
        assert x_a.student_count == 3

        x_b = content[1]
        assert [s.subject_code for s in x_b.subjects] == ["BIN"]
        assert x_b.student_count == 2

    def test_teacher_without_assignments(self, aggregator):
        content = aggregator.get_accessible_content(Principal(user_id="u-guru-legacy", role=Role.GURU))
        assert content == []

    def test_admin_sees_physical_classes(self, aggregator, admin_principal):
        content = aggregator.get_accessible_content(admin_principal)

        assert [c.class_name for c in content] == ["X-A", "X-B"]
        assert [s.subject_name for s in content[0].subjects] == ["Bahasa Indonesia", "Fisika", "Matematika"]
        assert [s.subject_code for s in content[1].subjects] == ["BIN", "MTK"]
        assert content[0].student_count == 3

    def test_admin_sees_subjects_without_teachers(self, aggregator, admin_principal):
        content = aggregator.get_accessible_content(admin_principal)
        # Nobody actively teaches FIS in X-A
        assert "s-fis" in [s.subject_id for s in content[0].subjects]

    def test_student_not_applicable(self, aggregator, student_principal):
        with pytest.raises(RoleNotApplicableError):
            aggregator.get_accessible_content(student_principal)

    def test_admin_does_not_read_assignments(self, session, seed, admin_principal):
        assignments = MagicMock()
        AccessibleContentAggregator(assignments, SchoolClassRepository(session)).get_accessible_content(admin_principal)
        assignments.list_active_assignments.assert_not_called()


def test_two_subjects_same_class_single_entry(session, seed):
    content = AccessibleContentAggregator(
        AssignmentRepository(session), SchoolClassRepository(session)
    ).for_teacher("u-guru-a")

    class_ids = [c.class_id for c in content]
    assert class_ids.count("c-x-a") == 1
    assert len(content[0].subjects) == 2
