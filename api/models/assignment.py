from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import relationship
import enum
from api.core.database import Base, utcnow


class AssignmentStatus(str, enum.Enum):
    draft = "draft"
    published = "published"
    closed = "closed"


class AssignmentType(str, enum.Enum):
    assignment = "assignment"
    quiz = "quiz"
    exam = "exam"
    project = "project"


class Assignment(Base):
    __tablename__ = "assignments"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    instructions = Column(Text, nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=True)
    max_score = Column(Integer, nullable=False, default=100)
    status = Column(SAEnum(AssignmentStatus, name="assignment_status"), nullable=False, default=AssignmentStatus.published)
    type = Column(SAEnum(AssignmentType, name="assignment_type"), nullable=False, default=AssignmentType.assignment)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    course = relationship("Course", back_populates="assignments")
    submissions = relationship("Submission", back_populates="assignment", cascade="all, delete-orphan")
