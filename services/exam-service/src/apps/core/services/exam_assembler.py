# services/exam-service/src/apps/core/services/exam_assembler.py
"""
Exam Assembler

Writes an exam and its ordered question links.
"""

import logging
import math
from decimal import Decimal
from typing import List, Optional, Sequence
from uuid import UUID

from shared.common.exceptions import NoCandidateQuestionsException

from ..models import Exam, ExamQuestion, ExamStatus, ExamType
from .settings_resolver import ExamSettings

logger = logging.getLogger(__name__)


def question_score_for(question, total_score: int, question_count: int) -> Decimal:
    """Intrinsic score when set, otherwise an equal share of the total."""
    if question.score is not None:
        return Decimal(question.score)
    return Decimal(math.floor(total_score / question_count))


class ExamAssembler:
    """
    Persists Exam and ExamQuestion rows.

    Runs inside the caller's unit of work; it never opens one itself.
    """

    def __init__(self, exam_repository):
        self.exam_repository = exam_repository

    def assemble(
        self,
        settings: ExamSettings,
        questions: Sequence,
        created_by: Optional[UUID] = None,
        title: str = '',
        description: str = '',
        exam_type: int = ExamType.FORMAL,
        training_category: Optional[int] = None,
    ) -> Exam:
        """
        Create an exam from a selection.

        Args:
            settings: Resolved exam settings
            questions: Selected questions in presentation order
            created_by: User creating the exam
            title: Exam title
            description: Exam description
            exam_type: Formal or mock
            training_category: Training category

        Returns:
            Created exam

        Raises:
            NoCandidateQuestionsException: If the selection is empty
        """
        if not questions:
            raise NoCandidateQuestionsException()

        exam = self.exam_repository.create(
            title=title,
            description=description,
            exam_type=exam_type,
            category_id=settings.exam_category,
            training_category=training_category,
            level=settings.level,
            question_count=settings.question_count,
            total_score=settings.total_score,
            pass_score=settings.effective_pass_score,
            duration_minutes=settings.effective_duration,
            status=ExamStatus.ENABLED,
            created_by=created_by,
            updated_by=created_by,
        )

        self._insert_links(exam, settings, questions)

        logger.info(f"Assembled exam {exam.id} with {len(questions)} questions")
        return exam

    def replace_questions(
        self,
        exam: Exam,
        settings: ExamSettings,
        questions: Sequence,
        updated_by: Optional[UUID] = None,
    ) -> Exam:
        """
        Insert a new question set for an exam whose links were just deleted,
        and refresh its scoring fields.

        Args:
            exam: Locked exam
            settings: Resolved exam settings
            questions: Selected questions in presentation order
            updated_by: User regenerating the exam

        Returns:
            Updated exam
        """
        if not questions:
            raise NoCandidateQuestionsException()

        self._insert_links(exam, settings, questions)

        exam.total_score = settings.total_score
        exam.pass_score = settings.effective_pass_score
        exam.duration_minutes = settings.effective_duration
        exam.question_count = settings.question_count
        exam.updated_by = updated_by
        self.exam_repository.save(exam, update_fields=[
            'total_score', 'pass_score', 'duration_minutes',
            'question_count', 'updated_by', 'updated_at',
        ])

        logger.info(f"Replaced questions of exam {exam.id} with {len(questions)} questions")
        return exam

    def _insert_links(self, exam: Exam, settings: ExamSettings, questions: Sequence) -> List[ExamQuestion]:
        links = [
            ExamQuestion(
                exam=exam,
                question=question,
                question_score=question_score_for(
                    question, settings.total_score, settings.question_count
                ),
                question_order=order,
            )
            for order, question in enumerate(questions, start=1)
        ]
        return self.exam_repository.add_questions(links)
