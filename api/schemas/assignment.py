from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime
from api.models.assignment import AssignmentStatus, AssignmentType
from api.schemas.base import BaseSchema, CamelModel, reject_null


class AssignmentCreate(CamelModel):
    course_id: int
    title: str = Field(min_length=1, max_length=255)
    description: str = ""
    instructions: Optional[str] = None
    due_date: Optional[datetime] = None
    max_score: int = Field(default=100, gt=0)
    status: AssignmentStatus = AssignmentStatus.published
    type: AssignmentType = AssignmentType.assignment


class AssignmentUpdate(CamelModel):
    course_id: Optional[int] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    instructions: Optional[str] = None
    due_date: Optional[datetime] = None
    max_score: Optional[int] = Field(default=None, gt=0)
    status: Optional[AssignmentStatus] = None
    type: Optional[AssignmentType] = None

    @field_validator("course_id", "title", "description", "max_score", "status", "type")
    @classmethod
    def required_columns(cls, value):
        return reject_null(value)


class AssignmentResponse(BaseSchema):
    id: int
    course_id: int
    title: str
    description: str
    instructions: Optional[str] = None
    due_date: Optional[datetime] = None
    max_score: int
    status: AssignmentStatus
    type: AssignmentType
    created_at: datetime
