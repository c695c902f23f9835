"""
Question bank management
"""
import logging
import math
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.exceptions import BadRequestError, NotFoundError
from app.models import Question, Skill
from app.schemas.question import QuestionCreate, QuestionUpdate

logger = logging.getLogger(__name__)


def question_to_dict(question: Question, skill_name: Optional[str] = None) -> Dict[str, Any]:
    return {
        "id": question.id,
        "skill_id": question.skill_id,
        "skill_name": skill_name,
        "question_text": question.question_text,
        "options": question.options,
        "correct_answer": question.correct_answer,
        "difficulty": question.difficulty,
        "points": question.points,
        "is_active": question.is_active,
        "created_at": question.created_at,
    }


class QuestionService:
    """Service for the admin question bank and quiz question selection"""

    def __init__(self, db: Session):
        self.db = db

    def _get(self, question_id: int) -> Question:
        question = self.db.query(Question).filter(Question.id == question_id).first()
        if not question:
            raise NotFoundError("Question not found")
        return question

    def _ensure_skill(self, skill_id: int) -> None:
        if not self.db.query(Skill.id).filter(Skill.id == skill_id).first():
            raise NotFoundError("Skill not found")

    def list_questions(
        self,
        page: int = 1,
        limit: int = 10,
        skill_id: Optional[int] = None,
        difficulty: Optional[str] = None,
        search: Optional[str] = None
    ) -> Dict[str, Any]:
        query = self.db.query(Question, Skill.name).outerjoin(Skill, Question.skill_id == Skill.id)

        if skill_id:
            query = query.filter(Question.skill_id == skill_id)
        if difficulty:
            query = query.filter(Question.difficulty == difficulty)
        if search:
            query = query.filter(Question.question_text.ilike(f"%{search}%"))

        total = query.count()
        rows = query.order_by(Question.created_at.desc(), Question.id.desc()).offset(
            (page - 1) * limit
        ).limit(limit).all()

        return {
            "items": [question_to_dict(question, skill_name) for question, skill_name in rows],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": math.ceil(total / limit) if limit else 0,
            },
        }

    def get_quiz_questions(self, skill_id: int, limit: int = 10) -> List[Dict[str, Any]]:
        """
        Random active questions for a quiz taker, without correct answers
        """
        skill = self.db.query(Skill.id).filter(
            Skill.id == skill_id,
            Skill.is_active.is_(True)
        ).first()
        if not skill:
            raise NotFoundError("Skill not found or inactive")

        questions = self.db.query(Question).filter(
            Question.skill_id == skill_id,
            Question.is_active.is_(True)
        ).order_by(func.random()).limit(limit).all()

        return [
            {
                "id": question.id,
                "question_text": question.question_text,
                "options": question.options,
                "difficulty": question.difficulty,
                "points": question.points,
            }
            for question in questions
        ]

    def get_question(self, question_id: int) -> Dict[str, Any]:
        question = self._get(question_id)
        skill_name = self.db.query(Skill.name).filter(Skill.id == question.skill_id).scalar()
        return question_to_dict(question, skill_name)

    def create_question(self, data: QuestionCreate) -> Dict[str, Any]:
        self._ensure_skill(data.skill_id)

        question = Question(**data.model_dump())
        self.db.add(question)
        self.db.commit()
        self.db.refresh(question)

        logger.info(f"Question created: {question.id} (skill={question.skill_id})")
        return question_to_dict(question)

    def update_question(self, question_id: int, data: QuestionUpdate) -> Dict[str, Any]:
        question = self._get(question_id)

        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None
        }
        if not changes:
            raise BadRequestError("No fields to update")

        if "skill_id" in changes:
            self._ensure_skill(changes["skill_id"])

        for field, value in changes.items():
            setattr(question, field, value)

        self.db.commit()
        self.db.refresh(question)

        logger.info(f"Question updated: {question_id} ({', '.join(changes)})")
        return question_to_dict(question)

    def delete_question(self, question_id: int) -> None:
        question = self._get(question_id)
        self.db.delete(question)
        self.db.commit()

        logger.info(f"Question deleted: {question_id}")
