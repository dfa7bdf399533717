from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime
from api.models.course import CourseStatus
from api.schemas.base import BaseSchema, CamelModel, reject_null


# Request schemas (no from_attributes needed)
class CourseCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = ""
    faculty_id: Optional[int] = None  # required for admins, forced to self for faculty
    code: Optional[str] = None
    status: CourseStatus = CourseStatus.active
    category: Optional[str] = None
    semester: Optional[str] = None
    year: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    thumbnail: Optional[str] = None


class CourseUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    faculty_id: Optional[int] = None
    code: Optional[str] = None
    status: Optional[CourseStatus] = None
    category: Optional[str] = None
    semester: Optional[str] = None
    year: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    thumbnail: Optional[str] = None

    @field_validator("title", "description", "faculty_id", "status")
    @classmethod
    def required_columns(cls, value):
        return reject_null(value)


# Response schemas (need from_attributes for ORM)
class CourseResponse(BaseSchema):
    id: int
    code: Optional[str] = None
    title: str
    description: str
    faculty_id: int
    status: CourseStatus
    category: Optional[str] = None
    semester: Optional[str] = None
    year: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    thumbnail: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class StudentCourseResponse(CourseResponse):
    """A course as seen from one student's enrollment."""
    progress: int
