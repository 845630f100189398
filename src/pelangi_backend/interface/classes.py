from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class SchoolClassList(BaseModel):
    id: str = Field(description="Class unique identifier")
    name: str = Field(description="Class name")
    grade_level: Optional[str] = Field(None, description="Grade level")
    is_physical_class: bool = Field(True, description="False for merged multi-subject groupings")

    model_config = ConfigDict(from_attributes=True)


class TeacherBrief(BaseModel):
    id: str
    full_name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class ClassSubjectDetail(BaseModel):
    id: str = Field(description="Subject unique identifier")
    name: str
    code: str
    teachers: List[TeacherBrief] = Field(default=[], description="Actively assigned teachers")


class SchoolClassFull(SchoolClassList):
    student_count: int = Field(0, description="Number of active students")
    subjects: List[ClassSubjectDetail] = Field(default=[], description="Active subjects of the class")


class EnrolledStudentGet(BaseModel):
    id: str = Field(description="Student unique identifier")
    full_name: str
    nisn: Optional[str] = None
    enrollment_id: str
    enrolled_at: Optional[datetime] = None


class AssignmentCreate(BaseModel):
    teacher_id: str = Field(min_length=1, description="Teacher to assign")


class AssignmentGet(BaseModel):
    id: str
    class_id: str
    subject_id: str
    teacher_id: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
