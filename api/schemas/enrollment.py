from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime
from api.models.enrollment import EnrollmentStatus
from api.schemas.base import BaseSchema, CamelModel, reject_null


class EnrollmentCreate(CamelModel):
    student_id: int
    course_id: int
    progress: int = Field(default=0, ge=0, le=100)
    grade: Optional[str] = Field(default=None, max_length=10)
    status: EnrollmentStatus = EnrollmentStatus.active


class EnrollmentUpdate(CamelModel):
    progress: Optional[int] = Field(default=None, ge=0, le=100)
    grade: Optional[str] = Field(default=None, max_length=10)
    status: Optional[EnrollmentStatus] = None

    @field_validator("progress", "status")
    @classmethod
    def required_columns(cls, value):
        return reject_null(value)


class EnrollmentResponse(BaseSchema):
    id: int
    student_id: int
    course_id: int
    progress: int
    grade: Optional[str] = None
    status: EnrollmentStatus
    enrollment_date: datetime
