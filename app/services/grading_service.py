"""
Scoring rules for multiple-choice quizzes and skill-gap tiers
"""
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class GradingService:
    """
    Stateless scoring helpers shared by the quiz and reporting services

    Strategy:
    - Answers: exact letter match
    - Attempt score: share of correct answers over the attempt's total questions
    - Gap level: average score bucketed at 60 and 75
    """

    GAP_HIGH_BELOW = 60.0
    GAP_MEDIUM_BELOW = 75.0

    def grade_answer(self, selected_answer: str, correct_answer: str) -> bool:
        """Exact match on the option letter"""
        return selected_answer == correct_answer

    def score_percentage(self, correct_answers: int, total_questions: int) -> float:
        """
        Percentage of correct answers, kept at full precision

        Args:
            correct_answers: Number of correct answers recorded
            total_questions: Questions counted when the attempt started

        Returns:
            Score between 0 and 100
        """
        if total_questions <= 0:
            return 0.0
        return correct_answers / total_questions * 100

    def accuracy_rate(self, total_correct: Optional[float], total_questions: Optional[float]) -> float:
        if not total_questions:
            return 0.0
        return round((total_correct or 0) / total_questions * 100, 2)

    def classify_gap(self, avg_score: Optional[float]) -> str:
        """
        Remediation tier for a skill's average score

        Skills nobody has attempted yet count as 0 and land in "high".
        """
        score = avg_score or 0.0
        if score < self.GAP_HIGH_BELOW:
            return "high"
        if score < self.GAP_MEDIUM_BELOW:
            return "medium"
        return "low"


def round_score(value: Optional[float]) -> float:
    """Two-decimal display rounding; missing aggregates read as 0"""
    return round(value or 0.0, 2)


# Global instance
grading_service = GradingService()
