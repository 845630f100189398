from typing import Annotated
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from pelangi_backend.database import get_db
from pelangi_backend.api.exceptions import BadRequestException, NotFoundException
from pelangi_backend.interface.classes import (
    AssignmentCreate, AssignmentGet, ClassSubjectDetail, EnrolledStudentGet,
    SchoolClassFull, SchoolClassList, TeacherBrief
)
from pelangi_backend.interface.permissions import AccessibleClassGet, CapabilityGet
from pelangi_backend.permissions.auth import require_admin, require_admin_or_teacher
from pelangi_backend.permissions.content import AccessibleContentAggregator
from pelangi_backend.permissions.guard import require_class_access, require_subject_access
from pelangi_backend.permissions.principal import Principal
from pelangi_backend.permissions.query_builders import ClassPermissionQueryBuilder
from pelangi_backend.permissions.resolver import PermissionResolver
from pelangi_backend.repositories.assignment import AssignmentRepository
from pelangi_backend.repositories.base import DuplicateError, NotFoundError
from pelangi_backend.repositories.school import SchoolClassRepository

class_router = APIRouter()

@class_router.get("", response_model=list[SchoolClassList])
def list_classes(principal: Annotated[Principal, Depends(require_admin_or_teacher)], db: Session = Depends(get_db)):

    repository = SchoolClassRepository(db)
    query = ClassPermissionQueryBuilder.filter_classes(principal, repository.base_query())

    return repository.list_from_query(query)

@class_router.get("/permissions", response_model=CapabilityGet)
def get_permissions(principal: Annotated[Principal, Depends(require_admin_or_teacher)], db: Session = Depends(get_db)):

    descriptor = PermissionResolver(AssignmentRepository(db)).resolve(principal)

    return CapabilityGet.from_descriptor(descriptor)

@class_router.get("/accessible", response_model=list[AccessibleClassGet])
def get_accessible_content(principal: Annotated[Principal, Depends(require_admin_or_teacher)], db: Session = Depends(get_db)):

    aggregator = AccessibleContentAggregator(AssignmentRepository(db), SchoolClassRepository(db))

    return aggregator.get_accessible_content(principal)

@class_router.get("/{class_id}/full", response_model=SchoolClassFull)
def get_full_class(class_id: str, principal: Annotated[Principal, Depends(require_class_access)], db: Session = Depends(get_db)):

    repository = SchoolClassRepository(db)

    school_class = repository.get_by_id_optional(class_id)

    if school_class == None:
        raise NotFoundException("Class not found")

    subjects = repository.active_subjects_by_class([class_id]).get(class_id, [])
    teachers = repository.active_teachers_by_subject(class_id)
    student_count = repository.active_student_counts([class_id]).get(class_id, 0)

    return SchoolClassFull(
        id=school_class.id,
        name=school_class.name,
        grade_level=school_class.grade_level,
        is_physical_class=school_class.is_physical_class,
        student_count=student_count,
        subjects=[
            ClassSubjectDetail(
                id=subject.id,
                name=subject.name,
                code=subject.code,
                teachers=[TeacherBrief.model_validate(t) for t in teachers.get(subject.id, [])],
            )
            for subject in subjects
        ],
    )

@class_router.get("/{class_id}/subjects/{subject_id}/students", response_model=list[EnrolledStudentGet])
def list_class_subject_students(class_id: str, subject_id: str, principal: Annotated[Principal, Depends(require_subject_access)], db: Session = Depends(get_db)):

    rows = SchoolClassRepository(db).list_enrolled_students(class_id, subject_id)

    return [
        EnrolledStudentGet(
            id=student.id,
            full_name=student.full_name,
            nisn=student.nisn,
            enrollment_id=enrollment.id,
            enrolled_at=enrollment.created_at,
        )
        for enrollment, student in rows
    ]

@class_router.post("/{class_id}/subjects/{subject_id}/teachers", response_model=AssignmentGet)
def assign_teacher(class_id: str, subject_id: str, payload: AssignmentCreate, response: Response, principal: Annotated[Principal, Depends(require_admin)], db: Session = Depends(get_db)):

    try:
        assignment, created = AssignmentRepository(db).assign(class_id, subject_id, payload.teacher_id)
    except NotFoundError as e:
        raise NotFoundException(str(e))
    except DuplicateError:
        raise BadRequestException("Teacher is already assigned to this class-subject")

    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK

    return assignment

@class_router.delete("/{class_id}/subjects/{subject_id}/teachers/{teacher_id}", response_model=AssignmentGet)
def unassign_teacher(class_id: str, subject_id: str, teacher_id: str, principal: Annotated[Principal, Depends(require_admin)], db: Session = Depends(get_db)):

    try:
        return AssignmentRepository(db).deactivate(class_id, subject_id, teacher_id)
    except NotFoundError as e:
        raise NotFoundException(str(e))
