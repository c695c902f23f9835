"""
QuizAnswer model - one submitted answer within an attempt
"""
from sqlalchemy import (
    Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
)
from sqlalchemy.orm import relationship

from app.database import Base, utcnow


class QuizAnswer(Base):
    """
    Quiz answers table - at most one row per (attempt, question)
    """
    __tablename__ = "quiz_answers"

    id = Column(Integer, primary_key=True, index=True)
    quiz_attempt_id = Column(
        Integer, ForeignKey("quiz_attempts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    question_id = Column(
        Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    selected_answer = Column(String(1), nullable=False)
    is_correct = Column(Boolean, nullable=False)
    time_taken = Column(Integer, default=0)
    created_at = Column(DateTime, default=utcnow)

    question = relationship("Question")

    __table_args__ = (
        UniqueConstraint("quiz_attempt_id", "question_id", name="uq_quiz_answers_attempt_question"),
        CheckConstraint(
            "selected_answer IN ('A', 'B', 'C', 'D')", name="ck_quiz_answers_selected_answer"
        ),
    )

    def __repr__(self):
        return f"<QuizAnswer(attempt={self.quiz_attempt_id}, question={self.question_id}, correct={self.is_correct})>"
