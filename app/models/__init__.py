"""
Database models package
"""
from app.models.user import User
from app.models.skill import Skill
from app.models.question import Question
from app.models.quiz_attempt import QuizAttempt
from app.models.quiz_answer import QuizAnswer
from app.models.notification import Notification

__all__ = ["User", "Skill", "Question", "QuizAttempt", "QuizAnswer", "Notification"]
