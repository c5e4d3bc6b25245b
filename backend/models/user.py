"""User model definitions."""

from sqlalchemy import JSON, Boolean, Column, Integer, String
from sqlalchemy.dialects import postgresql

from backend.database import Base

# INTEGER[] on PostgreSQL, JSON elsewhere (SQLite in tests).
CourseIdList = JSON().with_variant(postgresql.ARRAY(Integer), "postgresql")


class User(Base):
    """Represents an application user and the courses they track."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    verified = Column(Boolean, default=False, nullable=False)
    tracked_courses = Column(CourseIdList, default=list, nullable=False)
