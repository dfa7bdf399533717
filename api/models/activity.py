from sqlalchemy import Column, Integer, String, Text, DateTime
from api.core.database import Base, utcnow


class Activity(Base):
    """Append-only audit record. user_id is kept after the user is deleted."""
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    action = Column(String(100), nullable=False)
    detail = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
