from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Index, String, func, text
)
from sqlalchemy.orm import relationship

from .base import Base, generate_id


class SchoolClass(Base):
    __tablename__ = 'school_class'

    id = Column(String(36), primary_key=True, default=generate_id)
    created_at = Column(DateTime(True), nullable=False, server_default=func.now())
    name = Column(String(255), nullable=False)
    grade_level = Column(String(32))
    # False for merged multi-subject groupings that hold no students of their own.
    is_physical_class = Column(Boolean, nullable=False, default=True, server_default=text("true"))

    # Relationships
    class_subjects = relationship("ClassSubject", back_populates="school_class", uselist=True, lazy="select")
    assignments = relationship("ClassTeacherSubject", back_populates="school_class", uselist=True, lazy="select")
    students = relationship("Student", back_populates="school_class", uselist=True, lazy="select")


class Subject(Base):
    __tablename__ = 'subject'

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    code = Column(String(32), nullable=False, unique=True)


class ClassSubject(Base):
    __tablename__ = 'class_subject'
    __table_args__ = (
        Index('class_subject_key', 'class_id', 'subject_id', unique=True),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    class_id = Column(ForeignKey('school_class.id', ondelete='CASCADE'), nullable=False)
    subject_id = Column(ForeignKey('subject.id', ondelete='CASCADE'), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, server_default=text("true"))

    school_class = relationship("SchoolClass", back_populates="class_subjects")
    subject = relationship("Subject")


class ClassTeacherSubject(Base):
    """Binds one teacher to one (class, subject) pair.

    Rows are deactivated, never deleted, when a teacher is unassigned.
    """
    __tablename__ = 'class_teacher_subject'
    __table_args__ = (
        Index('class_teacher_subject_key', 'class_id', 'teacher_id', 'subject_id', unique=True),
        Index('class_teacher_subject_teacher_idx', 'teacher_id', 'is_active'),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    created_at = Column(DateTime(True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(True), nullable=False, server_default=func.now(), onupdate=func.now())
    class_id = Column(ForeignKey('school_class.id', ondelete='CASCADE'), nullable=False)
    teacher_id = Column(ForeignKey('user.id', ondelete='CASCADE'), nullable=False)
    subject_id = Column(ForeignKey('subject.id', ondelete='CASCADE'), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, server_default=text("true"))

    school_class = relationship("SchoolClass", back_populates="assignments")
    teacher = relationship("User", back_populates="teaching_assignments")
    subject = relationship("Subject")


class Student(Base):
    __tablename__ = 'student'

    id = Column(String(36), primary_key=True, default=generate_id)
    full_name = Column(String(255), nullable=False)
    nisn = Column(String(32), unique=True)
    class_id = Column(ForeignKey('school_class.id', ondelete='SET NULL'))
    status = Column(String(16), nullable=False, default="ACTIVE")

    school_class = relationship("SchoolClass", back_populates="students")


class StudentSubjectEnrollment(Base):
    __tablename__ = 'student_subject_enrollment'
    __table_args__ = (
        Index('student_subject_enrollment_key', 'student_id', 'class_id', 'subject_id', unique=True),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    created_at = Column(DateTime(True), nullable=False, server_default=func.now())
    student_id = Column(ForeignKey('student.id', ondelete='CASCADE'), nullable=False)
    class_id = Column(ForeignKey('school_class.id', ondelete='CASCADE'), nullable=False)
    subject_id = Column(ForeignKey('subject.id', ondelete='CASCADE'), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, server_default=text("true"))

    student = relationship("Student")
