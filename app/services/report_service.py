"""
Reporting service: read-only aggregations over quiz attempts
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, case, distinct, func, null
from sqlalchemy.orm import Session

from app.config import Settings
from app.database import utcnow
from app.exceptions import ForbiddenError, NotFoundError
from app.models import Question, QuizAnswer, QuizAttempt, Skill, User
from app.services.auth_service import RequestContext
from app.services.grading_service import grading_service, round_score
from app.utils.cache import CacheService, cached

logger = logging.getLogger(__name__)

SKILL_GAPS_CACHE_KEY = "skill_gaps_report"
OVERVIEW_CACHE_KEY = "system_overview_report"

PERIOD_WINDOWS = {
    "week": timedelta(days=7),
    "month": timedelta(days=30),
}


def period_start(period: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """Lower bound on completed_at for a leaderboard/report period ("all" has none)"""
    window = PERIOD_WINDOWS.get(period)
    if window is None:
        return None
    return (now or utcnow()) - window


class ReportService:
    """
    Service for generating admin and user reports

    The skill-gap and overview reports are expensive and are memoized in the
    cache for a few minutes; every other report is computed on demand.
    """

    def __init__(self, db: Session, settings: Settings, cache: Optional[CacheService] = None):
        self.db = db
        self.settings = settings
        self.cache = cache

    def _completed_attempts(self, since: Optional[datetime] = None, skill_id: Optional[int] = None):
        """Join condition for completed attempts, optionally windowed and per skill"""
        condition = QuizAttempt.completed_at.isnot(None)
        if since is not None:
            condition = and_(condition, QuizAttempt.completed_at >= since)
        if skill_id:
            condition = and_(condition, QuizAttempt.skill_id == skill_id)
        return condition

    def get_leaderboard(
        self,
        period: str = "all",
        skill_id: Optional[int] = None,
        limit: int = 10
    ) -> Dict[str, Any]:
        """
        Rank active users by average score, then by number of attempts

        Args:
            period: all, week or month
            skill_id: Restrict ranking to one skill
            limit: Number of ranked users to return
        """
        join_condition = and_(
            QuizAttempt.user_id == User.id,
            self._completed_attempts(period_start(period), skill_id)
        )

        quiz_count = func.count(QuizAttempt.id)
        avg_score = func.avg(QuizAttempt.score_percentage)

        rows = self.db.query(
            User.id,
            User.first_name,
            User.last_name,
            quiz_count.label("quiz_count"),
            avg_score.label("avg_score"),
            func.max(QuizAttempt.score_percentage).label("best_score"),
            func.sum(QuizAttempt.correct_answers).label("total_correct"),
            func.sum(QuizAttempt.total_questions).label("total_questions"),
        ).outerjoin(
            QuizAttempt, join_condition
        ).filter(
            User.is_active.is_(True)
        ).group_by(
            User.id, User.first_name, User.last_name
        ).having(
            quiz_count > 0
        ).order_by(
            avg_score.desc(), quiz_count.desc(), User.id
        ).limit(limit).all()

        leaderboard = [
            {
                "rank": index + 1,
                "id": row.id,
                "first_name": row.first_name,
                "last_name": row.last_name,
                "quiz_count": row.quiz_count,
                "avg_score": round_score(row.avg_score),
                "best_score": round_score(row.best_score),
                "accuracy_rate": grading_service.accuracy_rate(row.total_correct, row.total_questions),
            }
            for index, row in enumerate(rows)
        ]

        return {
            "leaderboard": leaderboard,
            "period": period,
            "skill_id": skill_id,
        }

    @cached(SKILL_GAPS_CACHE_KEY, lambda self: self.settings.SKILL_GAPS_CACHE_TTL)
    def get_skill_gaps(self) -> Dict[str, Any]:
        """
        Skill gap analysis for admins

        Returns:
        - Per-skill score spread, participation and gap level
        - Success rate per question difficulty
        - Average score per category
        """
        logger.info("Computing skill gap report")

        total_users = self.db.query(func.count(User.id)).filter(
            User.is_active.is_(True)
        ).scalar() or 0

        avg_score = func.avg(QuizAttempt.score_percentage)
        skill_rows = self.db.query(
            Skill.id,
            Skill.name,
            Skill.category,
            func.count(distinct(QuizAttempt.user_id)).label("users_attempted"),
            func.count(QuizAttempt.id).label("total_attempts"),
            avg_score.label("avg_score"),
            func.min(QuizAttempt.score_percentage).label("min_score"),
            func.max(QuizAttempt.score_percentage).label("max_score"),
        ).outerjoin(
            QuizAttempt,
            and_(QuizAttempt.skill_id == Skill.id, self._completed_attempts())
        ).filter(
            Skill.is_active.is_(True)
        ).group_by(
            Skill.id, Skill.name, Skill.category
        ).order_by(avg_score.asc(), Skill.id).all()

        skill_gaps = [
            {
                "skill_id": row.id,
                "skill_name": row.name,
                "category": row.category,
                "users_attempted": row.users_attempted or 0,
                "total_attempts": row.total_attempts or 0,
                "avg_score": round_score(row.avg_score),
                "min_score": round_score(row.min_score),
                "max_score": round_score(row.max_score),
                "participation_rate": (
                    round(row.users_attempted / total_users * 100, 2) if total_users else 0.0
                ),
                "gap_level": grading_service.classify_gap(row.avg_score),
            }
            for row in skill_rows
        ]

        success_rate = func.avg(
            case(
                (QuizAnswer.id.is_(None), null()),
                (QuizAnswer.is_correct.is_(True), 1.0),
                else_=0.0,
            )
        )
        difficulty_rows = self.db.query(
            Question.difficulty,
            func.count(distinct(Question.id)).label("total_questions"),
            success_rate.label("success_rate"),
            func.count(distinct(QuizAttempt.user_id)).label("users_attempted"),
        ).outerjoin(
            QuizAnswer, QuizAnswer.question_id == Question.id
        ).outerjoin(
            QuizAttempt, QuizAnswer.quiz_attempt_id == QuizAttempt.id
        ).filter(
            Question.is_active.is_(True)
        ).group_by(Question.difficulty).order_by(success_rate.asc()).all()

        difficulty_analysis = [
            {
                "difficulty": row.difficulty,
                "total_questions": row.total_questions,
                "success_rate": round((row.success_rate or 0) * 100, 2),
                "users_attempted": row.users_attempted or 0,
            }
            for row in difficulty_rows
        ]

        category_avg = func.avg(QuizAttempt.score_percentage)
        category_rows = self.db.query(
            Skill.category,
            func.count(distinct(Skill.id)).label("skill_count"),
            category_avg.label("avg_score"),
            func.count(distinct(QuizAttempt.user_id)).label("users_attempted"),
        ).outerjoin(
            QuizAttempt,
            and_(QuizAttempt.skill_id == Skill.id, self._completed_attempts())
        ).filter(
            Skill.is_active.is_(True),
            Skill.category.isnot(None),
            Skill.category != ""
        ).group_by(Skill.category).order_by(category_avg.asc()).all()

        category_performance = [
            {
                "category": row.category,
                "skill_count": row.skill_count,
                "avg_score": round_score(row.avg_score),
                "users_attempted": row.users_attempted or 0,
            }
            for row in category_rows
        ]

        return {
            "skill_gaps": skill_gaps,
            "difficulty_analysis": difficulty_analysis,
            "category_performance": category_performance,
        }

    @cached(OVERVIEW_CACHE_KEY, lambda self: self.settings.OVERVIEW_CACHE_TTL)
    def get_overview(self) -> Dict[str, Any]:
        """
        System overview for admins

        Returns:
        - Totals of active users, skills, questions and completed attempts
        - Activity over the last 30 days and per day over the last 14
        - Top performers and the most challenging skills
        """
        logger.info("Computing system overview report")

        now = utcnow()

        basic_statistics = {
            "total_users": self.db.query(func.count(User.id)).filter(User.is_active.is_(True)).scalar() or 0,
            "total_skills": self.db.query(func.count(Skill.id)).filter(Skill.is_active.is_(True)).scalar() or 0,
            "total_questions": self.db.query(func.count(Question.id)).filter(
                Question.is_active.is_(True)
            ).scalar() or 0,
            "total_quiz_attempts": self.db.query(func.count(QuizAttempt.id)).filter(
                QuizAttempt.completed_at.isnot(None)
            ).scalar() or 0,
        }

        recent = self.db.query(
            func.count(QuizAttempt.id).label("recent_attempts"),
            func.count(distinct(QuizAttempt.user_id)).label("active_users"),
            func.avg(QuizAttempt.score_percentage).label("avg_recent_score"),
        ).filter(
            self._completed_attempts(now - timedelta(days=30))
        ).one()

        day = func.date(QuizAttempt.completed_at)
        daily_rows = self.db.query(
            day.label("date"),
            func.count(QuizAttempt.id).label("quiz_count"),
            func.count(distinct(QuizAttempt.user_id)).label("unique_users"),
            func.avg(QuizAttempt.score_percentage).label("avg_score"),
        ).filter(
            self._completed_attempts(now - timedelta(days=14))
        ).group_by(day).order_by(day.desc()).all()

        user_quiz_count = func.count(QuizAttempt.id)
        user_avg = func.avg(QuizAttempt.score_percentage)
        top_rows = self.db.query(
            User.id,
            User.first_name,
            User.last_name,
            User.email,
            user_quiz_count.label("quiz_count"),
            user_avg.label("avg_score"),
        ).outerjoin(
            QuizAttempt,
            and_(QuizAttempt.user_id == User.id, self._completed_attempts())
        ).filter(
            User.is_active.is_(True)
        ).group_by(
            User.id, User.first_name, User.last_name, User.email
        ).having(
            user_quiz_count > 0
        ).order_by(user_avg.desc(), user_quiz_count.desc(), User.id).limit(10).all()

        skill_attempts = func.count(QuizAttempt.id)
        skill_avg = func.avg(QuizAttempt.score_percentage)
        challenging_rows = self.db.query(
            Skill.id,
            Skill.name,
            skill_attempts.label("attempts"),
            skill_avg.label("avg_score"),
        ).outerjoin(
            QuizAttempt,
            and_(QuizAttempt.skill_id == Skill.id, self._completed_attempts())
        ).filter(
            Skill.is_active.is_(True)
        ).group_by(
            Skill.id, Skill.name
        ).having(
            skill_attempts > 0
        ).order_by(skill_avg.asc(), Skill.id).limit(10).all()

        return {
            "basic_statistics": basic_statistics,
            "recent_activity": {
                "recent_attempts": recent.recent_attempts or 0,
                "active_users": recent.active_users or 0,
                "avg_recent_score": round_score(recent.avg_recent_score),
            },
            "daily_activity": [
                {
                    "date": str(row.date),
                    "quiz_count": row.quiz_count,
                    "unique_users": row.unique_users,
                    "avg_score": round_score(row.avg_score),
                }
                for row in daily_rows
            ],
            "top_users": [
                {
                    "id": row.id,
                    "first_name": row.first_name,
                    "last_name": row.last_name,
                    "email": row.email,
                    "quiz_count": row.quiz_count,
                    "avg_score": round_score(row.avg_score),
                }
                for row in top_rows
            ],
            "challenging_skills": [
                {
                    "id": row.id,
                    "name": row.name,
                    "attempts": row.attempts,
                    "avg_score": round_score(row.avg_score),
                }
                for row in challenging_rows
            ],
        }

    def get_quiz_usage(self) -> Dict[str, Any]:
        """Recent completions, per-skill usage and the latest score trend"""
        recent_rows = self.db.query(
            QuizAttempt.id,
            User.first_name,
            User.last_name,
            Skill.name.label("skill_name"),
            QuizAttempt.score_percentage,
            QuizAttempt.completed_at,
        ).join(
            User, QuizAttempt.user_id == User.id
        ).join(
            Skill, QuizAttempt.skill_id == Skill.id
        ).filter(
            QuizAttempt.completed_at.isnot(None)
        ).order_by(QuizAttempt.completed_at.desc(), QuizAttempt.id.desc()).limit(20).all()

        times_taken = func.count(QuizAttempt.id)
        skill_rows = self.db.query(
            Skill.id,
            Skill.name,
            times_taken.label("times_taken"),
        ).outerjoin(
            QuizAttempt,
            and_(QuizAttempt.skill_id == Skill.id, self._completed_attempts())
        ).group_by(Skill.id, Skill.name).order_by(times_taken.desc(), Skill.id).all()

        recent = [
            {
                "id": row.id,
                "username": f"{row.first_name} {row.last_name}",
                "skill_name": row.skill_name,
                "percentage": round_score(row.score_percentage),
                "completed_at": row.completed_at,
            }
            for row in recent_rows
        ]

        return {
            "recent": recent,
            "skills": [
                {"id": row.id, "name": row.name, "times_taken": row.times_taken}
                for row in skill_rows
            ],
            "trend": [
                {
                    "username": item["username"],
                    "score": item["percentage"],
                    "completed_at": item["completed_at"],
                }
                for item in recent[:10]
            ],
        }

    def get_user_report(
        self,
        requester: RequestContext,
        user_id: int,
        period: str = "all"
    ) -> Dict[str, Any]:
        """
        Performance report for one user

        Users may only read their own report; admins may read anyone's.
        """
        if requester.user_id != user_id and not requester.has_role("admin"):
            raise ForbiddenError("Access denied")

        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User not found")

        condition = and_(
            QuizAttempt.user_id == user_id,
            self._completed_attempts(period_start(period))
        )

        stats = self.db.query(
            func.count(QuizAttempt.id).label("total_quizzes"),
            func.avg(QuizAttempt.score_percentage).label("avg_score"),
            func.max(QuizAttempt.score_percentage).label("best_score"),
            func.min(QuizAttempt.score_percentage).label("worst_score"),
            func.sum(QuizAttempt.correct_answers).label("total_correct"),
            func.sum(QuizAttempt.total_questions).label("total_questions"),
            func.avg(QuizAttempt.time_taken).label("avg_time_taken"),
            func.count(distinct(QuizAttempt.skill_id)).label("skills_assessed"),
        ).filter(condition).one()

        skill_avg = func.avg(QuizAttempt.score_percentage)
        skill_rows = self.db.query(
            QuizAttempt.skill_id,
            Skill.name.label("skill_name"),
            func.count(QuizAttempt.id).label("attempts"),
            skill_avg.label("avg_score"),
            func.max(QuizAttempt.score_percentage).label("best_score"),
            func.sum(QuizAttempt.correct_answers).label("total_correct"),
            func.sum(QuizAttempt.total_questions).label("total_questions"),
        ).outerjoin(
            Skill, QuizAttempt.skill_id == Skill.id
        ).filter(condition).group_by(
            QuizAttempt.skill_id, Skill.name
        ).order_by(skill_avg.desc()).all()

        recent_rows = self.db.query(
            QuizAttempt, Skill.name
        ).outerjoin(
            Skill, QuizAttempt.skill_id == Skill.id
        ).filter(condition).order_by(
            QuizAttempt.completed_at.desc(), QuizAttempt.id.desc()
        ).limit(10).all()

        day = func.date(QuizAttempt.completed_at)
        trend_rows = self.db.query(
            day.label("date"),
            func.avg(QuizAttempt.score_percentage).label("avg_score"),
            func.count(QuizAttempt.id).label("quiz_count"),
        ).filter(condition).group_by(day).order_by(day.desc()).limit(10).all()

        return {
            "user": {
                "id": user.id,
                "first_name": user.first_name,
                "last_name": user.last_name,
                "email": user.email,
            },
            "period": period,
            "statistics": {
                "total_quizzes": stats.total_quizzes or 0,
                "avg_score": round_score(stats.avg_score),
                "best_score": round_score(stats.best_score),
                "worst_score": round_score(stats.worst_score),
                "total_correct": stats.total_correct or 0,
                "total_questions": stats.total_questions or 0,
                "avg_time_taken": round_score(stats.avg_time_taken),
                "accuracy_rate": grading_service.accuracy_rate(stats.total_correct, stats.total_questions),
                "skills_assessed": stats.skills_assessed or 0,
            },
            "skill_performance": [
                {
                    "skill_id": row.skill_id,
                    "skill_name": row.skill_name,
                    "attempts": row.attempts,
                    "avg_score": round_score(row.avg_score),
                    "best_score": round_score(row.best_score),
                    "accuracy_rate": grading_service.accuracy_rate(row.total_correct, row.total_questions),
                }
                for row in skill_rows
            ],
            "recent_quizzes": self._recent_quizzes(recent_rows),
            "performance_trend": [
                {
                    "date": str(row.date),
                    "avg_score": round_score(row.avg_score),
                    "quiz_count": row.quiz_count,
                }
                for row in trend_rows
            ],
        }

    def get_user_skill_usage(self, requester: RequestContext, user_id: int) -> Dict[str, Any]:
        """
        Every skill with how often the user completed it and their best score

        Skills the user never took are listed with a count of 0. Same access
        rule as the user report.
        """
        if requester.user_id != user_id and not requester.has_role("admin"):
            raise ForbiddenError("Access denied")

        if not self.db.query(User.id).filter(User.id == user_id).first():
            raise NotFoundError("User not found")

        attempt_count = func.count(QuizAttempt.id)
        rows = self.db.query(
            Skill.id,
            Skill.name,
            attempt_count.label("count"),
            func.max(QuizAttempt.score_percentage).label("best_score"),
        ).outerjoin(
            QuizAttempt,
            and_(
                QuizAttempt.skill_id == Skill.id,
                QuizAttempt.user_id == user_id,
                self._completed_attempts()
            )
        ).group_by(Skill.id, Skill.name).order_by(attempt_count.desc(), Skill.id).all()

        return {
            "skills": [
                {
                    "skill_id": row.id,
                    "skill_name": row.name,
                    "count": row.count,
                    "best_score": round_score(row.best_score),
                }
                for row in rows
            ]
        }

    def _attempt_summaries(self, *criteria, limit: int) -> List[Dict[str, Any]]:
        rows = self.db.query(
            QuizAttempt, User.first_name, User.last_name, User.email, Skill.name
        ).join(
            User, QuizAttempt.user_id == User.id
        ).join(
            Skill, QuizAttempt.skill_id == Skill.id
        ).filter(
            QuizAttempt.completed_at.isnot(None), *criteria
        ).order_by(
            QuizAttempt.completed_at.desc(), QuizAttempt.id.desc()
        ).limit(limit).all()

        return [
            {
                "id": attempt.id,
                "user_id": attempt.user_id,
                "first_name": first_name,
                "last_name": last_name,
                "email": email,
                "skill_id": attempt.skill_id,
                "skill_name": skill_name,
                "score_percentage": round_score(attempt.score_percentage),
                "correct_answers": attempt.correct_answers,
                "total_questions": attempt.total_questions,
                "time_taken": attempt.time_taken,
                "completed_at": attempt.completed_at,
            }
            for attempt, first_name, last_name, email, skill_name in rows
        ]

    def get_all_quiz_history(self, limit: int = 100) -> Dict[str, Any]:
        """Latest completed attempts across all users"""
        return {"history": self._attempt_summaries(limit=limit)}

    def get_toppers(self, limit: int = 20) -> Dict[str, Any]:
        """Latest completed attempts where every question was answered correctly"""
        perfect = and_(
            QuizAttempt.total_questions > 0,
            QuizAttempt.correct_answers == QuizAttempt.total_questions
        )
        return {"toppers": self._attempt_summaries(perfect, limit=limit)}

    def _recent_quizzes(self, rows) -> List[Dict[str, Any]]:
        return [
            {
                "id": attempt.id,
                "skill_name": skill_name,
                "score": round_score(attempt.score_percentage),
                "correct_answers": attempt.correct_answers,
                "total_questions": attempt.total_questions,
                "time_taken": attempt.time_taken,
                "completed_at": attempt.completed_at,
            }
            for attempt, skill_name in rows
        ]
