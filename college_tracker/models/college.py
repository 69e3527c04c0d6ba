"""
College model - a target institution on the user's list
"""
from sqlalchemy import Column, Integer, String, Date, DateTime, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime
from college_tracker.database import Base


class College(Base):
    __tablename__ = "colleges"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    application_platform = Column(String, nullable=True)  # "Common App", "UC Application"
    deadline = Column(Date, nullable=True)  # anchor for every derived task due date
    deadline_type = Column(String, nullable=True)  # "RD", "EA", "ED", "UC"
    test_policy = Column(String, nullable=True)  # "Required", "Test Optional", "Test Blind"
    lors_required = Column(Integer, nullable=False, default=0)
    portfolio_required = Column(Boolean, nullable=False, default=False)
    type = Column(String, nullable=True)  # "Reach", "Target", "Safety"
    status = Column(String, nullable=False, default="Not Started")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    essays = relationship("Essay", back_populates="college", cascade="all, delete-orphan", passive_deletes=True)
    tasks = relationship("Task", back_populates="college", cascade="all, delete-orphan", passive_deletes=True)
