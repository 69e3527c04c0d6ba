"""
Essay model - a writable document tied to an application requirement
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from college_tracker.database import Base


class Essay(Base):
    __tablename__ = "essays"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    # Null for global essays such as the personal statement
    college_id = Column(Integer, ForeignKey("colleges.id", ondelete="CASCADE"), nullable=True)
    title = Column(String, nullable=False)
    essay_type = Column(String, nullable=True)
    prompt = Column(Text, nullable=True)
    word_limit = Column(Integer, nullable=True)
    content = Column(Text, nullable=False, default="")
    word_count = Column(Integer, nullable=False, default=0)  # derived from content on save
    is_completed = Column(Boolean, nullable=False, default=False)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    college = relationship("College", back_populates="essays")
