"""
QuizAttempt model - one user's session against a skill
"""
from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer
from sqlalchemy.orm import relationship

from app.database import Base, utcnow


class QuizAttempt(Base):
    """
    Quiz attempts table

    correct_answers, score_percentage, time_taken and completed_at are written
    exactly once, when the attempt is completed.
    """
    __tablename__ = "quiz_attempts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    skill_id = Column(
        Integer, ForeignKey("skills.id", ondelete="CASCADE"), nullable=False, index=True
    )
    total_questions = Column(Integer, nullable=False)
    correct_answers = Column(Integer, nullable=False, default=0)
    score_percentage = Column(Float, nullable=False, default=0.0)
    time_taken = Column(Integer)  # seconds
    started_at = Column(DateTime, default=utcnow)
    completed_at = Column(DateTime, index=True)

    skill = relationship("Skill", lazy="joined")

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    def __repr__(self):
        return f"<QuizAttempt(id={self.id}, user_id={self.user_id}, score={self.score_percentage})>"
