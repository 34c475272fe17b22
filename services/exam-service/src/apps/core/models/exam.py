# services/exam-service/src/apps/core/models/exam.py
"""
Exam Models

Assembled exams and their ordered question lists.
"""

from django.db import models
from django.utils import timezone

from shared.common.mixins import UUIDPrimaryKeyMixin, TimestampMixin, AuditMixin

from .question import Question


class ExamType(models.IntegerChoices):
    """Exam type choices."""
    FORMAL = 1, 'Formal Exam'
    MOCK = 2, 'Mock Exam'


class ExamStatus(models.TextChoices):
    """Exam status choices."""
    ENABLED = 'enabled', 'Enabled'
    DISABLED = 'disabled', 'Disabled'


class Exam(UUIDPrimaryKeyMixin, TimestampMixin, AuditMixin):
    """
    Exam model.

    Created once by exam assembly; its question list may later be replaced
    wholesale by regeneration.
    """

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')

    exam_type = models.PositiveSmallIntegerField(
        choices=ExamType.choices,
        default=ExamType.FORMAL
    )
    category_id = models.IntegerField(null=True, blank=True, db_index=True)
    training_category = models.PositiveSmallIntegerField(null=True, blank=True)
    level = models.PositiveSmallIntegerField(null=True, blank=True)

    # Scoring
    question_count = models.PositiveIntegerField(default=0)
    total_score = models.PositiveIntegerField(default=100)
    pass_score = models.PositiveIntegerField(default=60)

    duration_minutes = models.PositiveIntegerField(null=True, blank=True)

    # Status
    status = models.CharField(
        max_length=20,
        choices=ExamStatus.choices,
        default=ExamStatus.ENABLED
    )
    is_published = models.BooleanField(default=False)
    published_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'exams'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['exam_type']),
            models.Index(fields=['status']),
            models.Index(fields=['is_published']),
        ]

    def __str__(self):
        return self.title

    def publish(self) -> None:
        """Publish the exam."""
        if not self.exam_questions.exists():
            raise ValueError("Cannot publish exam without questions")

        self.is_published = True
        self.published_at = timezone.now()
        self.save(update_fields=['is_published', 'published_at', 'updated_at'])


class ExamQuestion(models.Model):
    """
    Exam question link model.

    question_order runs 1..N per exam without gaps.
    """

    exam = models.ForeignKey(
        Exam,
        on_delete=models.CASCADE,
        related_name='exam_questions'
    )
    question = models.ForeignKey(
        Question,
        on_delete=models.PROTECT,
        related_name='exam_links'
    )
    question_score = models.DecimalField(max_digits=12, decimal_places=2)
    question_order = models.PositiveIntegerField()

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'exam_questions'
        ordering = ['question_order']
        constraints = [
            models.UniqueConstraint(
                fields=['exam', 'question_order'],
                name='unique_exam_question_order'
            ),
            models.UniqueConstraint(
                fields=['exam', 'question'],
                name='unique_exam_question'
            ),
        ]

    def __str__(self):
        return f"{self.exam.title} - Q{self.question_order}"
