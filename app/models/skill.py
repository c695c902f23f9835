"""
Skill model - assessable topics
"""
from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from app.database import Base, utcnow


class Skill(Base):
    """
    Skills table - each skill owns a pool of multiple-choice questions
    """
    __tablename__ = "skills"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text)
    category = Column(String(100), index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Skill(id={self.id}, name={self.name})>"
