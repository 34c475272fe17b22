# services/exam-service/src/apps/core/models/training.py
"""
Training Record Models

Local mirror of the training records and rosters exams are generated for.
"""

from django.db import models

from shared.common.mixins import UUIDPrimaryKeyMixin, TimestampMixin


class ExamGenerationStatus(models.IntegerChoices):
    """Whether an exam has been generated for a training record."""
    NOT_GENERATED = 0, 'Not Generated'
    GENERATED = 1, 'Generated'


class TrainingRecord(UUIDPrimaryKeyMixin, TimestampMixin):
    """
    A delivered training session of a training plan.
    """

    # Name of the training plan the session belongs to
    title = models.CharField(max_length=255)
    training_category = models.PositiveSmallIntegerField(null=True, blank=True)
    exam_status = models.PositiveSmallIntegerField(
        choices=ExamGenerationStatus.choices,
        default=ExamGenerationStatus.NOT_GENERATED
    )

    class Meta:
        db_table = 'training_records'
        ordering = ['-created_at']

    def __str__(self):
        return self.title

    def mark_exam_generated(self) -> None:
        self.exam_status = ExamGenerationStatus.GENERATED
        self.save(update_fields=['exam_status', 'updated_at'])


class TrainingRecordParticipant(models.Model):
    """Roster entry of a training record."""

    training_record = models.ForeignKey(
        TrainingRecord,
        on_delete=models.CASCADE,
        related_name='participants'
    )
    user_id = models.UUIDField(null=True, blank=True, db_index=True)
    worker_id = models.UUIDField(null=True, blank=True, db_index=True)
    is_trainer = models.BooleanField(default=False)

    class Meta:
        db_table = 'training_record_participants'
        ordering = ['id']

    def __str__(self):
        return f"{self.training_record_id} - {self.user_id or self.worker_id}"
