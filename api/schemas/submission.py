from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime
from api.models.submission import SubmissionStatus
from api.schemas.base import BaseSchema, CamelModel, reject_null


class SubmissionCreate(CamelModel):
    assignment_id: int
    student_id: int
    content: str = Field(min_length=1)
    file_url: Optional[str] = None


class SubmissionUpdate(CamelModel):
    content: Optional[str] = Field(default=None, min_length=1)
    file_url: Optional[str] = None
    grade: Optional[float] = Field(default=None, ge=0)
    feedback: Optional[str] = None
    status: Optional[SubmissionStatus] = None

    @field_validator("content", "status")
    @classmethod
    def required_columns(cls, value):
        return reject_null(value)


class SubmissionResponse(BaseSchema):
    id: int
    assignment_id: int
    student_id: int
    content: str
    file_url: Optional[str] = None
    submission_date: datetime
    grade: Optional[float] = None
    feedback: Optional[str] = None
    status: SubmissionStatus
