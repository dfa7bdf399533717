from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from api.core.database import Base, utcnow


class Announcement(Base):
    __tablename__ = "announcements"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=True, index=True)  # NULL = platform-wide
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    date_posted = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    is_global = Column(Boolean, nullable=False, default=False)

    # Relationships
    course = relationship("Course", back_populates="announcements")
    author = relationship("User", back_populates="announcements")
