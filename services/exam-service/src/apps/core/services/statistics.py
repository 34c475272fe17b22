# services/exam-service/src/apps/core/services/statistics.py
"""
Statistics Reporter

Summarizes the realized selection of an exam.
"""

from collections import Counter
from typing import Dict, Any, Iterable

UNRATED_DIFFICULTY = 3
UNCATEGORIZED = 0


class StatisticsReporter:
    """Counts selected questions by difficulty, type and category."""

    @staticmethod
    def summarize(questions: Iterable) -> Dict[str, Any]:
        """
        Summarize a list of selected questions.

        Questions without a difficulty count as difficulty 3; questions
        without a category count under category 0.

        Args:
            questions: Selected questions

        Returns:
            Dict with total and per-dimension counts
        """
        questions = list(questions)

        difficulty = Counter(
            q.difficulty if q.difficulty is not None else UNRATED_DIFFICULTY
            for q in questions
        )
        types = Counter(q.question_type for q in questions)
        categories = Counter(
            q.category_id if q.category_id is not None else UNCATEGORIZED
            for q in questions
        )

        return {
            'total_questions': len(questions),
            'difficulty_distribution': dict(sorted(difficulty.items())),
            'type_distribution': dict(types),
            'category_distribution': dict(sorted(categories.items())),
        }
