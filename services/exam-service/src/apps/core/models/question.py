# services/exam-service/src/apps/core/models/question.py
"""
Question Models

Question bank rows consumed by exam assembly. The bank itself is maintained
elsewhere; this service only reads it.
"""

from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

from shared.common.mixins import UUIDPrimaryKeyMixin, TimestampMixin, AuditMixin


class QuestionType(models.TextChoices):
    """Question type choices."""
    SINGLE_CHOICE = 'single_choice', 'Single Choice'
    MULTIPLE_CHOICE = 'multiple_choice', 'Multiple Choice'
    TRUE_FALSE = 'true_false', 'True/False'
    FILL_BLANK = 'fill_blank', 'Fill in the Blank'
    SHORT_ANSWER = 'short_answer', 'Short Answer'


class Question(UUIDPrimaryKeyMixin, TimestampMixin, AuditMixin):
    """
    Question model.

    Represents a question in the question bank.
    """

    # Categorization
    category_id = models.IntegerField(null=True, blank=True, db_index=True)
    training_category = models.PositiveSmallIntegerField(null=True, blank=True)

    question_type = models.CharField(
        max_length=20,
        choices=QuestionType.choices,
        default=QuestionType.SINGLE_CHOICE
    )

    # Content
    content = models.TextField()
    answer = models.TextField(blank=True, default='')
    analysis = models.TextField(blank=True, default='')

    # 1 (easiest) to 5 (hardest)
    difficulty = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )

    # Intrinsic score; exams fall back to an equal share when unset
    score = models.PositiveIntegerField(null=True, blank=True)

    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'questions'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['question_type']),
            models.Index(fields=['difficulty']),
            models.Index(fields=['is_active']),
        ]

    def __str__(self):
        return f"[{self.get_question_type_display()}] {self.content[:50]}"


class QuestionOption(models.Model):
    """Answer option of a choice question."""

    question = models.ForeignKey(
        Question,
        on_delete=models.CASCADE,
        related_name='options'
    )
    label = models.CharField(max_length=10)
    content = models.TextField()
    is_correct = models.BooleanField(default=False)
    sort_order = models.IntegerField(default=0)

    class Meta:
        db_table = 'question_options'
        ordering = ['sort_order', 'label']

    def __str__(self):
        return f"{self.label}. {self.content[:30]}"
