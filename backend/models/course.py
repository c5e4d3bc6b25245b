"""Course model definitions."""

from sqlalchemy import Column, Integer, String, Text

from backend.database import Base


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    instructor = Column(String(255))
