"""
Skill catalogue management
"""
import logging
import math
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.exceptions import BadRequestError, NotFoundError
from app.models import Question, Skill
from app.schemas.skill import SkillCreate, SkillUpdate, SkillWithQuestionsCreate

logger = logging.getLogger(__name__)


def skill_to_dict(skill: Skill, question_count: Optional[int] = None) -> Dict[str, Any]:
    return {
        "id": skill.id,
        "name": skill.name,
        "description": skill.description,
        "category": skill.category,
        "is_active": skill.is_active,
        "created_at": skill.created_at,
        "question_count": question_count,
    }


class SkillService:
    """Service for listing and administering skills"""

    def __init__(self, db: Session):
        self.db = db

    def _get(self, skill_id: int) -> Skill:
        skill = self.db.query(Skill).filter(Skill.id == skill_id).first()
        if not skill:
            raise NotFoundError("Skill not found")
        return skill

    def _ensure_unique_name(self, name: str, exclude_id: Optional[int] = None) -> None:
        query = self.db.query(Skill.id).filter(Skill.name == name)
        if exclude_id is not None:
            query = query.filter(Skill.id != exclude_id)
        if query.first():
            raise BadRequestError("Skill with this name already exists")

    def list_skills(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        category: Optional[str] = None,
        is_active: Optional[bool] = None
    ) -> Dict[str, Any]:
        """
        Paginated skill listing

        Args:
            search: Substring matched against name and description
            category: Exact category
            is_active: Filter on the active flag when given
        """
        query = self.db.query(Skill)

        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Skill.name.ilike(pattern), Skill.description.ilike(pattern)))

        if category:
            query = query.filter(Skill.category == category)

        if is_active is not None:
            query = query.filter(Skill.is_active.is_(is_active))

        total = query.count()
        skills = query.order_by(Skill.created_at.desc(), Skill.id.desc()).offset(
            (page - 1) * limit
        ).limit(limit).all()

        return {
            "items": [skill_to_dict(skill) for skill in skills],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": math.ceil(total / limit) if limit else 0,
            },
        }

    def list_categories(self) -> List[str]:
        rows = self.db.query(Skill.category).filter(
            Skill.category.isnot(None),
            Skill.category != ""
        ).distinct().order_by(Skill.category).all()
        return [row.category for row in rows]

    def get_skill(self, skill_id: int) -> Dict[str, Any]:
        skill = self._get(skill_id)
        question_count = self.db.query(func.count(Question.id)).filter(
            Question.skill_id == skill_id,
            Question.is_active.is_(True)
        ).scalar() or 0
        return skill_to_dict(skill, question_count)

    def create_skill(self, data: SkillCreate) -> Dict[str, Any]:
        self._ensure_unique_name(data.name)

        skill = Skill(
            name=data.name,
            description=data.description or None,
            category=data.category or None,
        )
        self.db.add(skill)
        self.db.commit()
        self.db.refresh(skill)

        logger.info(f"Skill created: {skill.id} ({skill.name})")
        return skill_to_dict(skill, 0)

    def update_skill(self, skill_id: int, data: SkillUpdate) -> Dict[str, Any]:
        skill = self._get(skill_id)

        changes = data.model_dump(exclude_unset=True)
        if not changes:
            raise BadRequestError("No fields to update")

        if "name" in changes:
            if changes["name"] is None:
                raise BadRequestError("Skill name cannot be empty")
            self._ensure_unique_name(changes["name"], exclude_id=skill_id)

        if "is_active" in changes and changes["is_active"] is None:
            del changes["is_active"]

        for field, value in changes.items():
            setattr(skill, field, value)

        self.db.commit()
        self.db.refresh(skill)

        logger.info(f"Skill updated: {skill_id} ({', '.join(changes)})")
        return skill_to_dict(skill)

    def delete_skill(self, skill_id: int) -> None:
        """Delete a skill; skills that still own questions are refused"""
        skill = self._get(skill_id)

        question_count = self.db.query(func.count(Question.id)).filter(
            Question.skill_id == skill_id
        ).scalar()
        if question_count:
            raise BadRequestError("Cannot delete skill with associated questions")

        self.db.delete(skill)
        self.db.commit()

        logger.info(f"Skill deleted: {skill_id}")

    def create_with_questions(self, data: SkillWithQuestionsCreate) -> Dict[str, Any]:
        """Create a skill and its questions in one transaction"""
        self._ensure_unique_name(data.name)

        skill = Skill(
            name=data.name,
            description=data.description or None,
            category=data.category or None,
        )
        self.db.add(skill)
        self.db.flush()

        for draft in data.questions:
            self.db.add(Question(skill_id=skill.id, **draft.model_dump()))

        self.db.commit()
        self.db.refresh(skill)

        logger.info(f"Skill created with {len(data.questions)} questions: {skill.id} ({skill.name})")

        return {
            "skill": skill_to_dict(skill, len(data.questions)),
            "questions_count": len(data.questions),
        }
