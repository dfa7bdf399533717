from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import relationship
import enum
from api.core.database import Base, utcnow


class SubmissionStatus(str, enum.Enum):
    submitted = "submitted"
    graded = "graded"
    late = "late"
    resubmitted = "resubmitted"


class Submission(Base):
    """A student's answer to an assignment; one per (assignment, student)."""
    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True, index=True)
    assignment_id = Column(Integer, ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    file_url = Column(String(500), nullable=True)
    submission_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    grade = Column(Float, nullable=True)
    feedback = Column(Text, nullable=True)
    status = Column(SAEnum(SubmissionStatus, name="submission_status"), nullable=False, default=SubmissionStatus.submitted)

    # Relationships
    assignment = relationship("Assignment", back_populates="submissions")
    student = relationship("User", back_populates="submissions")

    __table_args__ = (
        UniqueConstraint('assignment_id', 'student_id', name='unique_submission'),
    )
