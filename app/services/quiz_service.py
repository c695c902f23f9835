"""
Quiz-attempt lifecycle: start, answer, complete, history and detail
"""
import logging
import math
from typing import Any, Dict, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.database import utcnow
from app.exceptions import BadRequestError, ConflictError, NotFoundError
from app.models import Question, QuizAnswer, QuizAttempt, Skill
from app.services.auth_service import RequestContext
from app.services.grading_service import grading_service, round_score

logger = logging.getLogger(__name__)


class QuizService:
    """
    Service for running quiz attempts

    An attempt is in progress until complete_quiz() stamps completed_at; after
    that it is immutable and further answers or completions are conflicts.
    """

    def __init__(self, db: Session):
        self.db = db

    def _get_own_attempt(self, user_id: int, attempt_id: int) -> QuizAttempt:
        attempt = self.db.query(QuizAttempt).filter(
            QuizAttempt.id == attempt_id,
            QuizAttempt.user_id == user_id
        ).first()

        if not attempt:
            raise NotFoundError("Quiz attempt not found")

        return attempt

    def start_quiz(self, user_id: int, skill_id: int) -> Dict[str, Any]:
        """
        Open a new attempt for an active skill

        Args:
            user_id: Quiz taker
            skill_id: Skill to be assessed

        Returns:
            Attempt metadata with the number of active questions
        """
        skill = self.db.query(Skill).filter(
            Skill.id == skill_id,
            Skill.is_active.is_(True)
        ).first()

        if not skill:
            raise NotFoundError("Skill not found or inactive")

        question_count = self.db.query(func.count(Question.id)).filter(
            Question.skill_id == skill_id,
            Question.is_active.is_(True)
        ).scalar()

        if not question_count:
            raise BadRequestError("No questions available for this skill")

        attempt = QuizAttempt(
            user_id=user_id,
            skill_id=skill_id,
            total_questions=question_count,
            correct_answers=0,
            score_percentage=0.0,
        )

        self.db.add(attempt)
        self.db.commit()
        self.db.refresh(attempt)

        logger.info(
            f"Quiz attempt created: {attempt.id} (user={user_id}, skill={skill.name}, "
            f"questions={question_count})"
        )

        return {
            "id": attempt.id,
            "user_id": user_id,
            "skill_id": skill_id,
            "skill_name": skill.name,
            "total_questions": question_count,
            "started_at": attempt.started_at,
        }

    def submit_answer(
        self,
        user_id: int,
        attempt_id: int,
        question_id: int,
        selected_answer: str,
        time_taken: int = 0
    ) -> Dict[str, Any]:
        """
        Record one answer and disclose whether it was correct

        Raises:
            NotFoundError: unknown attempt (or not the user's), unknown question
            ConflictError: attempt already completed, question already answered
        """
        attempt = self._get_own_attempt(user_id, attempt_id)

        if attempt.is_completed:
            raise ConflictError("Quiz has already been completed")

        # Only questions counted into total_questions at start are answerable
        question = self.db.query(Question).filter(
            Question.id == question_id,
            Question.skill_id == attempt.skill_id,
            Question.is_active.is_(True),
            Question.created_at <= attempt.started_at
        ).first()

        if not question:
            raise NotFoundError("Question not found")

        existing = self.db.query(QuizAnswer.id).filter(
            QuizAnswer.quiz_attempt_id == attempt_id,
            QuizAnswer.question_id == question_id
        ).first()

        if existing:
            raise ConflictError("Answer already submitted for this question")

        is_correct = grading_service.grade_answer(selected_answer, question.correct_answer)

        answer = QuizAnswer(
            quiz_attempt_id=attempt_id,
            question_id=question_id,
            selected_answer=selected_answer,
            is_correct=is_correct,
            time_taken=time_taken,
        )

        self.db.add(answer)
        try:
            self.db.commit()
        except IntegrityError:
            # A concurrent request for the same pair won the unique constraint
            self.db.rollback()
            raise ConflictError("Answer already submitted for this question")

        logger.info(
            f"Answer recorded: attempt={attempt_id}, question={question_id}, correct={is_correct}"
        )

        return {
            "is_correct": is_correct,
            "correct_answer": question.correct_answer,
        }

    def complete_quiz(self, user_id: int, attempt_id: int, time_taken: int = 0) -> Dict[str, Any]:
        """
        Score and close an attempt

        The stored percentage keeps full precision; only the returned value is
        rounded to two decimals.
        """
        attempt = self._get_own_attempt(user_id, attempt_id)

        if attempt.is_completed:
            raise ConflictError("Quiz has already been completed")

        correct_answers = self.db.query(func.count(QuizAnswer.id)).filter(
            QuizAnswer.quiz_attempt_id == attempt_id,
            QuizAnswer.is_correct.is_(True)
        ).scalar() or 0

        # A question reactivated mid-attempt could otherwise push the score past 100
        correct_answers = min(correct_answers, attempt.total_questions)

        score_percentage = grading_service.score_percentage(
            correct_answers, attempt.total_questions
        )

        attempt.correct_answers = correct_answers
        attempt.score_percentage = score_percentage
        attempt.time_taken = time_taken
        attempt.completed_at = utcnow()

        self.db.commit()

        logger.info(
            f"Quiz attempt completed: {attempt_id}, score: {correct_answers}/{attempt.total_questions} "
            f"({score_percentage:.2f}%)"
        )

        return {
            "total_questions": attempt.total_questions,
            "correct_answers": correct_answers,
            "score_percentage": round_score(score_percentage),
            "time_taken": time_taken,
        }

    def get_history(
        self,
        user_id: int,
        page: int = 1,
        limit: int = 10,
        skill_id: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Completed attempts for a user, newest completion first

        A page past the end yields an empty list.
        """
        query = self.db.query(QuizAttempt, Skill.name).outerjoin(
            Skill, QuizAttempt.skill_id == Skill.id
        ).filter(
            QuizAttempt.user_id == user_id,
            QuizAttempt.completed_at.isnot(None)
        )

        if skill_id:
            query = query.filter(QuizAttempt.skill_id == skill_id)

        total = query.count()

        rows = query.order_by(
            QuizAttempt.completed_at.desc(),
            QuizAttempt.id.desc()
        ).offset((page - 1) * limit).limit(limit).all()

        history = [
            {
                "id": attempt.id,
                "skill_id": attempt.skill_id,
                "skill_name": skill_name,
                "total_questions": attempt.total_questions,
                "correct_answers": attempt.correct_answers,
                "score_percentage": round_score(attempt.score_percentage),
                "time_taken": attempt.time_taken,
                "started_at": attempt.started_at,
                "completed_at": attempt.completed_at,
            }
            for attempt, skill_name in rows
        ]

        return {
            "quiz_history": history,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": math.ceil(total / limit) if limit else 0,
            },
        }

    def get_attempt_detail(self, requester: RequestContext, attempt_id: int) -> Dict[str, Any]:
        """
        One attempt with every answer and its question

        Visible to the owner and to admins. Anyone else gets the same
        not-found as for a missing attempt, so existence is not revealed.
        """
        attempt = self.db.query(QuizAttempt).filter(QuizAttempt.id == attempt_id).first()

        if not attempt or (
            attempt.user_id != requester.user_id and not requester.has_role("admin")
        ):
            raise NotFoundError("Quiz attempt not found")

        rows = self.db.query(QuizAnswer, Question).outerjoin(
            Question, QuizAnswer.question_id == Question.id
        ).filter(
            QuizAnswer.quiz_attempt_id == attempt_id
        ).order_by(QuizAnswer.created_at, QuizAnswer.id).all()

        answers = []
        for answer, question in rows:
            answers.append({
                "question_id": answer.question_id,
                "question_text": question.question_text if question else None,
                "options": question.options if question else {"A": None, "B": None, "C": None, "D": None},
                "selected_answer": answer.selected_answer,
                "correct_answer": question.correct_answer if question else None,
                "is_correct": answer.is_correct,
                "time_taken": answer.time_taken,
            })

        return {
            "id": attempt.id,
            "user_id": attempt.user_id,
            "skill_id": attempt.skill_id,
            "skill_name": attempt.skill.name if attempt.skill else "Unknown",
            "total_questions": attempt.total_questions,
            "correct_answers": attempt.correct_answers,
            "score_percentage": round_score(attempt.score_percentage),
            "time_taken": attempt.time_taken,
            "started_at": attempt.started_at,
            "completed_at": attempt.completed_at,
            "answers": answers,
        }
