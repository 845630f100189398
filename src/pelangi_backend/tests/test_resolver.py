"""
Permission resolution against an in-memory assignment store.
"""

import pytest
from unittest.mock import MagicMock

from pelangi_backend.permissions.principal import AccessScope, Principal
from pelangi_backend.permissions.resolver import PermissionResolver
from pelangi_backend.permissions.roles import CapabilityTier, Role, RoleNotApplicableError
from pelangi_backend.repositories.assignment import AssignmentRepository
from pelangi_backend.repositories.base import RepositoryError
from .fixtures import InMemoryAssignmentStore, failing_session

TEACHER = Principal(user_id="T", role=Role.GURU)
ADMIN = Principal(user_id="A", role=Role.ADMIN)


@pytest.fixture
def store():
    return InMemoryAssignmentStore()


class TestResolveTeacher:

    def test_single_active_assignment(self, store):
        store.add("C1", "S1", "T")
        resolver = PermissionResolver(store)

        descriptor = resolver.resolve(TEACHER)

        assert descriptor.tier == CapabilityTier.TEACHER
        assert descriptor.allowed_classes == AccessScope.only({"C1"})
        assert descriptor.allowed_subjects == AccessScope.only({"S1"})
        assert resolver.can_access_subject(TEACHER, "C1", "S1") is True
        assert resolver.can_access_subject(TEACHER, "C1", "S2") is False

    def test_deactivated_assignment_leaves_empty_scopes(self, store):
        assignment = store.add("C1", "S1", "T")
        resolver = PermissionResolver(store)
        assignment.is_active = False

        descriptor = resolver.resolve(TEACHER)

        assert descriptor.tier == CapabilityTier.TEACHER
        assert descriptor.allowed_classes.is_empty
        assert descriptor.allowed_subjects.is_empty
        assert not descriptor.allowed_classes.unrestricted

    def test_subjects_are_deduplicated_across_classes(self, store):
        store.add("C1", "S1", "T")
        store.add("C2", "S1", "T")
        store.add("C2", "S2", "T")
        store.add("C3", "S3", "T", is_active=False)
        store.add("C4", "S4", "OTHER")

        descriptor = PermissionResolver(store).resolve(TEACHER)

        assert descriptor.allowed_classes.ids == frozenset({"C1", "C2"})
        assert descriptor.allowed_subjects.ids == frozenset({"S1", "S2"})

    def test_toggling_active_flips_subject_access(self, store):
        assignment = store.add("C1", "S1", "T")
        resolver = PermissionResolver(store)

        assert resolver.can_access_subject(TEACHER, "C1", "S1") is True
        assignment.is_active = False
        assert resolver.can_access_subject(TEACHER, "C1", "S1") is False
        assignment.is_active = True
        assert resolver.can_access_subject(TEACHER, "C1", "S1") is True

    def test_subject_check_requires_exact_class(self, store):
        store.add("C1", "S1", "T")
        assert PermissionResolver(store).can_access_subject(TEACHER, "C2", "S1") is False

    def test_subject_check_is_point_lookup(self, store):
        store.add("C1", "S1", "T")
        PermissionResolver(store).can_access_subject(TEACHER, "C1", "S1")

        assert store.calls == [("has_active_assignment", "T", "C1", "S1")]


class TestResolveAdministrator:

    def test_admin_without_any_assignment(self, store):
        descriptor = PermissionResolver(store).resolve(ADMIN)

        assert descriptor.tier == CapabilityTier.ADMINISTRATOR
        assert descriptor.can_view_all_subjects
        assert descriptor.can_assign_subjects
        assert descriptor.can_transfer_students
        assert descriptor.allowed_classes == AccessScope.all()
        assert descriptor.allowed_subjects == AccessScope.all()

    def test_admin_never_reads_assignments(self):
        store = MagicMock()
        resolver = PermissionResolver(store)

        resolver.resolve(ADMIN)
        assert resolver.can_access_subject(ADMIN, "any-class", "any-subject") is True

        store.list_active_assignments.assert_not_called()
        store.has_active_assignment.assert_not_called()


class TestResolveErrors:

    def test_student_is_not_applicable(self, store):
        with pytest.raises(RoleNotApplicableError):
            PermissionResolver(store).resolve(Principal(user_id="S", role=Role.SISWA))

    def test_read_failure_propagates(self):
        resolver = PermissionResolver(AssignmentRepository(failing_session()))

        with pytest.raises(RepositoryError):
            resolver.resolve(TEACHER)

        with pytest.raises(RepositoryError):
            resolver.can_access_subject(TEACHER, "C1", "S1")


class TestResolveDatabase:

    def test_seeded_teacher(self, session, seed, teacher_principal):
        descriptor = PermissionResolver(AssignmentRepository(session)).resolve(teacher_principal)

        assert descriptor.allowed_classes.ids == frozenset({"c-x-a", "c-x-b"})
        # FIS in X-A is inactive
        assert descriptor.allowed_subjects.ids == frozenset({"s-mtk", "s-bin"})
