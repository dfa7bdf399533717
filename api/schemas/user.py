from pydantic import EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime
from api.models.user import UserRole
from api.schemas.base import BaseSchema, CamelModel, reject_null


# Request schemas
class UserCreate(CamelModel):
    username: str = Field(min_length=1, max_length=150)
    password: str = Field(min_length=1)
    email: EmailStr
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    role: UserRole = UserRole.student
    profile_image: Optional[str] = None
    department: Optional[str] = None
    bio: Optional[str] = None


class UserUpdate(CamelModel):
    username: Optional[str] = Field(default=None, min_length=1, max_length=150)
    password: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    role: Optional[UserRole] = None
    profile_image: Optional[str] = None
    department: Optional[str] = None
    bio: Optional[str] = None

    @field_validator("username", "password", "email", "first_name", "last_name", "role")
    @classmethod
    def required_columns(cls, value):
        return reject_null(value)


class LoginRequest(CamelModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


# Response schemas; the password hash has no field here
class UserResponse(BaseSchema):
    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    profile_image: Optional[str] = None
    department: Optional[str] = None
    bio: Optional[str] = None
    created_at: datetime


class MessageResponse(CamelModel):
    message: str
