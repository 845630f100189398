"""
Pytest configuration and fixtures for all tests.
"""

import os
from datetime import datetime, timedelta, timezone

# Tests run against a private in-memory database
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["DEBUG_MODE"] = "development"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from pelangi_backend.database import get_db, get_engine
from pelangi_backend.interface.tokens import create_access_token, hash_password
from pelangi_backend.model import (
    Base, ClassSubject, ClassTeacherSubject, SchoolClass, Student,
    StudentSubjectEnrollment, Subject, User
)
from pelangi_backend.permissions.principal import Principal
from pelangi_backend.permissions.roles import Role

TEST_PASSWORD = "rahasia123"
_PASSWORD_HASH = hash_password(TEST_PASSWORD)

_T0 = datetime(2024, 7, 15, 7, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    """Shared in-memory engine with a fresh schema per test."""
    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session(engine):
    """Create a new database session for a test."""
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seed(session):
    """
    Seed a small school.

    guru_a teaches MTK and BIN in X-A and BIN in X-B, and once taught FIS in
    X-A (inactive). guru_b teaches MTK in X-B. The merged class holds no
    students of its own.
    """
    users = {
        "admin": User(id="u-admin", email="admin@pelangi.sch.id", full_name="Admin Sekolah", role="ADMIN", password=_PASSWORD_HASH),
        "guru_a": User(id="u-guru-a", email="budi@pelangi.sch.id", full_name="Budi Santoso", role="GURU", password=_PASSWORD_HASH),
        "guru_b": User(id="u-guru-b", email="sari@pelangi.sch.id", full_name="Sari Dewi", role="GURU", password=_PASSWORD_HASH),
        "guru_legacy": User(id="u-guru-legacy", email="legacy@pelangi.sch.id", full_name="Andi Wijaya", role="TEACHER", password=_PASSWORD_HASH),
        "guru_inactive": User(id="u-guru-off", email="off@pelangi.sch.id", full_name="Rina Putri", role="GURU", status="INACTIVE", password=_PASSWORD_HASH),
        "siswa": User(id="u-siswa", email="siswa@pelangi.sch.id", full_name="Dimas Pratama", role="SISWA", password=_PASSWORD_HASH),
        "unknown": User(id="u-unknown", email="kepsek@pelangi.sch.id", full_name="Kepala Sekolah", role="KEPALA_SEKOLAH", password=_PASSWORD_HASH),
    }

    classes = {
        "x_a": SchoolClass(id="c-x-a", name="X-A", grade_level="10", is_physical_class=True),
        "x_b": SchoolClass(id="c-x-b", name="X-B", grade_level="10", is_physical_class=True),
        "merged": SchoolClass(id="c-merged", name="Gabungan X", grade_level="10", is_physical_class=False),
    }

    subjects = {
        "mtk": Subject(id="s-mtk", name="Matematika", code="MTK"),
        "bin": Subject(id="s-bin", name="Bahasa Indonesia", code="BIN"),
        "fis": Subject(id="s-fis", name="Fisika", code="FIS"),
    }

    session.add_all(list(users.values()) + list(classes.values()) + list(subjects.values()))
    session.flush()

    session.add_all([
        ClassSubject(class_id="c-x-a", subject_id="s-mtk"),
        ClassSubject(class_id="c-x-a", subject_id="s-bin"),
        ClassSubject(class_id="c-x-a", subject_id="s-fis"),
        ClassSubject(class_id="c-x-b", subject_id="s-mtk"),
        ClassSubject(class_id="c-x-b", subject_id="s-bin"),
        ClassSubject(class_id="c-merged", subject_id="s-mtk"),
    ])

    assignments = {
        "a_xa_mtk": ClassTeacherSubject(id="a-1", class_id="c-x-a", subject_id="s-mtk", teacher_id="u-guru-a", created_at=_T0),
        "a_xb_bin": ClassTeacherSubject(id="a-2", class_id="c-x-b", subject_id="s-bin", teacher_id="u-guru-a", created_at=_T0 + timedelta(minutes=1)),
        "a_xa_bin": ClassTeacherSubject(id="a-3", class_id="c-x-a", subject_id="s-bin", teacher_id="u-guru-a", created_at=_T0 + timedelta(minutes=2)),
        "a_xa_fis": ClassTeacherSubject(id="a-4", class_id="c-x-a", subject_id="s-fis", teacher_id="u-guru-a", is_active=False, created_at=_T0 + timedelta(minutes=3)),
        "b_xb_mtk": ClassTeacherSubject(id="a-5", class_id="c-x-b", subject_id="s-mtk", teacher_id="u-guru-b", created_at=_T0 + timedelta(minutes=4)),
    }
    session.add_all(assignments.values())

    students = [
        Student(id="st-1", full_name="Ahmad Fauzi", nisn="0051", class_id="c-x-a"),
        Student(id="st-2", full_name="Citra Lestari", nisn="0052", class_id="c-x-a"),
        Student(id="st-3", full_name="Eko Prasetyo", nisn="0053", class_id="c-x-a"),
        Student(id="st-4", full_name="Fajar Nugroho", nisn="0054", class_id="c-x-a", status="INACTIVE"),
        Student(id="st-5", full_name="Gita Maharani", nisn="0055", class_id="c-x-b"),
        Student(id="st-6", full_name="Hendra Gunawan", nisn="0056", class_id="c-x-b"),
    ]
    session.add_all(students)
    session.flush()

    session.add_all([
        StudentSubjectEnrollment(student_id="st-2", class_id="c-x-a", subject_id="s-mtk", created_at=_T0),
        StudentSubjectEnrollment(student_id="st-1", class_id="c-x-a", subject_id="s-mtk", created_at=_T0),
        StudentSubjectEnrollment(student_id="st-3", class_id="c-x-a", subject_id="s-mtk", is_active=False, created_at=_T0),
        StudentSubjectEnrollment(student_id="st-5", class_id="c-x-b", subject_id="s-mtk", created_at=_T0),
    ])
    session.commit()

    return {"users": users, "classes": classes, "subjects": subjects, "assignments": assignments}


@pytest.fixture
def admin_principal():
    return Principal(user_id="u-admin", role=Role.ADMIN, full_name="Admin Sekolah")


@pytest.fixture
def teacher_principal():
    return Principal(user_id="u-guru-a", role=Role.GURU, full_name="Budi Santoso")


@pytest.fixture
def student_principal():
    return Principal(user_id="u-siswa", role=Role.SISWA, full_name="Dimas Pratama")


@pytest.fixture
def client(session):
    """TestClient bound to the test session."""
    from pelangi_backend.server import app

    def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def auth_headers(user_id: str, role: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id, role)}"}
