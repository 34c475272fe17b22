# services/exam-service/src/apps/core/services/repositories.py
"""
Repositories

Django ORM data access used by the exam generation services. Services take
these as constructor arguments so tests can substitute their own.
"""

from typing import Iterable, List, Optional, Sequence
from uuid import UUID

from django.db import transaction
from django.db.models import Q, QuerySet

from ..models import (
    Exam,
    ExamQuestion,
    ExamRecord,
    Question,
    TrainingRecord,
    TrainingRecordParticipant,
)


class QuestionRepository:
    """Read access to the question bank."""

    def find_candidates(
        self,
        question_types: Sequence[str] = (),
        category_ids: Sequence[int] = (),
    ) -> List[Question]:
        """Active questions, optionally restricted by type and category."""
        queryset = Question.objects.filter(is_active=True)

        if question_types:
            queryset = queryset.filter(question_type__in=list(question_types))

        if category_ids:
            queryset = queryset.filter(category_id__in=list(category_ids))

        return list(queryset.prefetch_related('options').order_by('id'))


class RosterRepository:
    """Training records, their participants and exam records."""

    def get_training_record(self, training_record_id: UUID) -> Optional[TrainingRecord]:
        return TrainingRecord.objects.filter(id=training_record_id).first()

    def lock_training_record(self, training_record_id: UUID) -> Optional[TrainingRecord]:
        """Row-lock a training record; must run inside a transaction."""
        return (
            TrainingRecord.objects
            .select_for_update()
            .filter(id=training_record_id)
            .first()
        )

    def find_participants(self, training_record_id: UUID) -> List[TrainingRecordParticipant]:
        return list(
            TrainingRecordParticipant.objects.filter(training_record_id=training_record_id)
        )

    def find_existing_records(self, training_record_id: UUID) -> List[ExamRecord]:
        return list(ExamRecord.objects.filter(training_record_id=training_record_id))

    def create_records(self, records: List[ExamRecord]) -> List[ExamRecord]:
        if not records:
            return []
        return ExamRecord.objects.bulk_create(records)


class ExamRepository:
    """Exams and their question links."""

    def queryset(self) -> QuerySet:
        return Exam.objects.all()

    def get(self, exam_id: UUID) -> Optional[Exam]:
        return Exam.objects.filter(id=exam_id).first()

    def lock(self, exam_id: UUID) -> Optional[Exam]:
        """Row-lock an exam; must run inside a transaction."""
        return Exam.objects.select_for_update().filter(id=exam_id).first()

    def get_detail(self, exam_id: UUID) -> Optional[Exam]:
        """Exam with its ordered questions and their options."""
        return (
            Exam.objects
            .prefetch_related('exam_questions__question__options')
            .filter(id=exam_id)
            .first()
        )

    def create(self, **fields) -> Exam:
        return Exam.objects.create(**fields)

    def save(self, exam: Exam, update_fields: Iterable[str]) -> Exam:
        exam.save(update_fields=list(update_fields))
        return exam

    def add_questions(self, links: List[ExamQuestion]) -> List[ExamQuestion]:
        return ExamQuestion.objects.bulk_create(links)

    def delete_questions(self, exam: Exam) -> int:
        deleted, _ = ExamQuestion.objects.filter(exam=exam).delete()
        return deleted

    def count_active_records(self, exam: Exam) -> int:
        """Exam records that have been started or scored."""
        return ExamRecord.objects.filter(exam=exam).filter(
            Q(start_time__isnull=False) | Q(score__isnull=False)
        ).count()


class DjangoUnitOfWork:
    """
    Unit of work over the default database connection.

    Usage:
        with unit_of_work:
            ...
    Nested use joins the outer transaction through a savepoint.
    """

    def __init__(self, using: Optional[str] = None):
        self.using = using
        self._atomics = []

    def __enter__(self):
        atomic = transaction.atomic(using=self.using)
        atomic.__enter__()
        self._atomics.append(atomic)
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        atomic = self._atomics.pop()
        return atomic.__exit__(exc_type, exc_value, traceback)
