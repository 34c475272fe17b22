# services/exam-service/src/apps/core/api/views/training_record_views.py
"""
Training Record Views

Exam generation entry point for training records.
"""

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from ...models import ExamType
from ...services import ExamGenerationService
from ..serializers import GenerateFromTrainingRecordSerializer, GenerationResultSerializer
from .exam_views import UUID_PATTERN


class TrainingRecordViewSet(viewsets.ViewSet):
    """
    ViewSet for training record exam actions.

    Custom actions:
    - generate_exam: Generate an exam and enroll the roster
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_PATTERN

    @action(detail=True, methods=['post'], url_path='generate-exam')
    def generate_exam(self, request, pk=None):
        """Generate an exam for a training record."""
        serializer = GenerateFromTrainingRecordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = ExamGenerationService().generate_for_training_record(
            training_record_id=pk,
            settings=data.get('settings'),
            selection_config=data.get('selection_config'),
            exam_type=data.get('exam_type', ExamType.FORMAL),
            created_by=request.user.id,
        )

        return Response(
            GenerationResultSerializer(result).data,
            status=status.HTTP_201_CREATED
        )
