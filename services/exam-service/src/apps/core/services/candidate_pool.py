# services/exam-service/src/apps/core/services/candidate_pool.py
"""
Candidate Pool Loader

Fetches the questions eligible for an exam.
"""

import logging
from typing import List

from .settings_resolver import ExamSettings

logger = logging.getLogger(__name__)


class CandidatePoolLoader:
    """Loads active questions matching the exam settings' filters."""

    def __init__(self, question_repository):
        self.question_repository = question_repository

    def load(self, settings: ExamSettings) -> List:
        """
        Load the candidate pool.

        Args:
            settings: Resolved exam settings

        Returns:
            List of candidate questions, possibly empty
        """
        pool = self.question_repository.find_candidates(
            question_types=settings.question_types,
            category_ids=settings.category_ids,
        )

        logger.info(
            f"Loaded {len(pool)} candidate questions "
            f"(types={list(settings.question_types)}, categories={list(settings.category_ids)})"
        )
        return pool
