# services/exam-service/src/apps/core/api/views/__init__.py
"""
Exam Service API Views

ViewSets for REST API endpoints.
"""

from .exam_views import ExamViewSet, ExamFilter
from .training_record_views import TrainingRecordViewSet

__all__ = [
    'ExamViewSet',
    'ExamFilter',
    'TrainingRecordViewSet',
]
