# services/exam-service/src/apps/core/api/serializers/__init__.py
"""
Exam Service API Serializers
"""

from .exam_serializers import (
    QuestionOptionSerializer,
    QuestionSerializer,
    ExamQuestionSerializer,
    ExamListSerializer,
    ExamDetailSerializer,
    ExamRecordSerializer,
)
from .generation_serializers import (
    GenerateExamSerializer,
    RegenerateExamSerializer,
    GenerateFromTrainingRecordSerializer,
    UpdateExamSettingsSerializer,
    EnrollParticipantsSerializer,
    GenerationResultSerializer,
)

__all__ = [
    # Exam
    'QuestionOptionSerializer',
    'QuestionSerializer',
    'ExamQuestionSerializer',
    'ExamListSerializer',
    'ExamDetailSerializer',
    'ExamRecordSerializer',
    # Generation
    'GenerateExamSerializer',
    'RegenerateExamSerializer',
    'GenerateFromTrainingRecordSerializer',
    'UpdateExamSettingsSerializer',
    'EnrollParticipantsSerializer',
    'GenerationResultSerializer',
]
