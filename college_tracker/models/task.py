"""
Task model - user-authored or schedule-generated to-do items
"""
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from college_tracker.database import Base
import enum


class TaskCategory(str, enum.Enum):
    ESSAY = "Essay"
    DOCUMENT = "Document"
    LOR = "LOR"
    GENERAL = "General"


class TaskPriority(str, enum.Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    # Null for global tasks (transcripts, FAFSA, ...)
    college_id = Column(Integer, ForeignKey("colleges.id", ondelete="CASCADE"), nullable=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    due_date = Column(Date, nullable=True)
    category = Column(String, nullable=False, default=TaskCategory.GENERAL.value)
    priority = Column(String, nullable=False, default=TaskPriority.MEDIUM.value)
    completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    college = relationship("College", back_populates="tasks")
