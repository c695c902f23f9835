"""
Pydantic schemas for reporting endpoints
"""
from datetime import datetime
from typing import List, Optional

from app.schemas.common import CamelModel


class LeaderboardEntry(CamelModel):
    rank: int
    id: int
    first_name: str
    last_name: str
    quiz_count: int
    avg_score: float
    best_score: float
    accuracy_rate: float


class LeaderboardData(CamelModel):
    leaderboard: List[LeaderboardEntry]
    period: str
    skill_id: Optional[int] = None


class SkillGap(CamelModel):
    """Per-skill performance with a remediation tier"""
    skill_id: int
    skill_name: str
    category: Optional[str] = None
    users_attempted: int
    total_attempts: int
    avg_score: float
    min_score: float
    max_score: float
    participation_rate: float
    gap_level: str


class DifficultyStat(CamelModel):
    difficulty: str
    total_questions: int
    success_rate: float
    users_attempted: int


class CategoryStat(CamelModel):
    category: str
    skill_count: int
    avg_score: float
    users_attempted: int


class SkillGapReport(CamelModel):
    skill_gaps: List[SkillGap]
    difficulty_analysis: List[DifficultyStat]
    category_performance: List[CategoryStat]


class BasicStatistics(CamelModel):
    total_users: int
    total_skills: int
    total_questions: int
    total_quiz_attempts: int


class RecentActivity(CamelModel):
    recent_attempts: int
    active_users: int
    avg_recent_score: float


class DailyActivity(CamelModel):
    date: str
    quiz_count: int
    unique_users: int
    avg_score: float


class TopUser(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: str
    quiz_count: int
    avg_score: float


class ChallengingSkill(CamelModel):
    id: int
    name: str
    attempts: int
    avg_score: float


class OverviewReport(CamelModel):
    basic_statistics: BasicStatistics
    recent_activity: RecentActivity
    daily_activity: List[DailyActivity]
    top_users: List[TopUser]
    challenging_skills: List[ChallengingSkill]


class RecentAttempt(CamelModel):
    id: int
    username: str
    skill_name: str
    percentage: float
    completed_at: Optional[datetime] = None


class SkillUsage(CamelModel):
    id: int
    name: str
    times_taken: int


class TrendPoint(CamelModel):
    username: str
    score: float
    completed_at: Optional[datetime] = None


class QuizUsageReport(CamelModel):
    recent: List[RecentAttempt]
    skills: List[SkillUsage]
    trend: List[TrendPoint]


class ReportUser(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: str


class UserStatistics(CamelModel):
    total_quizzes: int
    avg_score: float
    best_score: float
    worst_score: float
    total_correct: int
    total_questions: int
    avg_time_taken: float
    accuracy_rate: float
    skills_assessed: int


class SkillPerformance(CamelModel):
    skill_id: int
    skill_name: Optional[str] = None
    attempts: int
    avg_score: float
    best_score: float
    accuracy_rate: float


class RecentQuiz(CamelModel):
    id: int
    skill_name: Optional[str] = None
    score: float
    correct_answers: int
    total_questions: int
    time_taken: Optional[int] = None
    completed_at: Optional[datetime] = None


class TrendDay(CamelModel):
    date: str
    avg_score: float
    quiz_count: int


class UserReport(CamelModel):
    user: ReportUser
    period: str
    statistics: UserStatistics
    skill_performance: List[SkillPerformance]
    recent_quizzes: List[RecentQuiz]
    performance_trend: List[TrendDay]


class SkillUsageEntry(CamelModel):
    skill_id: int
    skill_name: str
    count: int
    best_score: float


class UserSkillUsage(CamelModel):
    skills: List[SkillUsageEntry]


class AttemptSummary(CamelModel):
    """A completed attempt with its taker, as listed to admins"""
    id: int
    user_id: int
    first_name: str
    last_name: str
    email: str
    skill_id: int
    skill_name: str
    score_percentage: float
    correct_answers: int
    total_questions: int
    time_taken: Optional[int] = None
    completed_at: Optional[datetime] = None


class AllQuizHistory(CamelModel):
    history: List[AttemptSummary]


class TopperResults(CamelModel):
    toppers: List[AttemptSummary]
