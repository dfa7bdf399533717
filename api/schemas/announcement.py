from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime
from api.schemas.base import BaseSchema, CamelModel, reject_null


class AnnouncementCreate(CamelModel):
    course_id: Optional[int] = None
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    is_global: bool = False


class AnnouncementUpdate(CamelModel):
    course_id: Optional[int] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = Field(default=None, min_length=1)
    is_global: Optional[bool] = None

    @field_validator("title", "content", "is_global")
    @classmethod
    def required_columns(cls, value):
        return reject_null(value)


class AnnouncementResponse(BaseSchema):
    id: int
    course_id: Optional[int] = None
    author_id: int
    title: str
    content: str
    date_posted: datetime
    is_global: bool
