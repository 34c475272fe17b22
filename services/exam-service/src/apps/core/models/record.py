# services/exam-service/src/apps/core/models/record.py
"""
Exam Record Models

Per-participant exam-taking placeholders. Rows are created here and then
handed over to the exam-taking subsystem, which fills in times and results.
"""

from django.db import models

from shared.common.mixins import UUIDPrimaryKeyMixin, TimestampMixin

from .exam import Exam
from .training import TrainingRecord, TrainingRecordParticipant


class ExamRecord(UUIDPrimaryKeyMixin, TimestampMixin):
    """
    One participant's sitting of an exam within a training record.
    """

    exam = models.ForeignKey(
        Exam,
        on_delete=models.PROTECT,
        related_name='exam_records'
    )
    training_record = models.ForeignKey(
        TrainingRecord,
        on_delete=models.PROTECT,
        related_name='exam_records'
    )
    participant = models.ForeignKey(
        TrainingRecordParticipant,
        on_delete=models.PROTECT,
        related_name='exam_records'
    )

    start_time = models.DateTimeField(null=True, blank=True)
    end_time = models.DateTimeField(null=True, blank=True)
    score = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    is_passed = models.BooleanField(null=True, blank=True)
    notes = models.TextField(blank=True, default='')

    class Meta:
        db_table = 'exam_records'
        ordering = ['created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['training_record', 'participant'],
                name='unique_exam_record_per_participant'
            )
        ]

    def __str__(self):
        return f"{self.exam_id} - {self.participant_id}"

