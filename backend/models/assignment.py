"""Assignment model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from backend.database import Base


class Assignment(Base):
    """Represents coursework attached to a course."""
    __tablename__ = "assignments"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    due_date = Column(DateTime)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="SET NULL"), nullable=True)
    file_path = Column(Text)
