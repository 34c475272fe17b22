# services/exam-service/src/apps/core/api/views/exam_views.py
"""
Exam Views

ViewSets for exam generation and management endpoints.
"""

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django_filters import rest_framework as filters

from ...models import Exam, ExamType
from ...services import ExamGenerationService
from ..serializers import (
    ExamListSerializer,
    ExamDetailSerializer,
    ExamRecordSerializer,
    GenerateExamSerializer,
    RegenerateExamSerializer,
    UpdateExamSettingsSerializer,
    EnrollParticipantsSerializer,
    GenerationResultSerializer,
)

UUID_PATTERN = '[0-9a-fA-F-]{36}'


class ExamFilter(filters.FilterSet):
    """Filter for exams."""

    exam_type = filters.ChoiceFilter(choices=ExamType.choices)
    training_category = filters.NumberFilter()
    level = filters.NumberFilter()
    category_id = filters.NumberFilter()
    is_published = filters.BooleanFilter()

    class Meta:
        model = Exam
        fields = ['exam_type', 'training_category', 'level', 'category_id', 'is_published']


class ExamViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for exams.

    list: Get exams
    retrieve: Get exam with ordered questions

    Custom actions:
    - generate: Assemble a new exam
    - regenerate: Replace an exam's questions
    - publish: Publish an exam
    - settings: Update total score, level or category
    - enroll: Enroll a training record's participants
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_PATTERN
    filterset_class = ExamFilter
    search_fields = ['title']
    ordering_fields = ['created_at', 'title', 'total_score']
    ordering = ['-created_at']

    def get_service(self) -> ExamGenerationService:
        return ExamGenerationService()

    def get_queryset(self):
        return self.get_service().list_exams()

    def get_serializer_class(self):
        """Return appropriate serializer class."""
        if self.action == 'list':
            return ExamListSerializer
        elif self.action == 'generate':
            return GenerateExamSerializer
        elif self.action == 'regenerate':
            return RegenerateExamSerializer
        elif self.action == 'update_settings':
            return UpdateExamSettingsSerializer
        elif self.action == 'enroll':
            return EnrollParticipantsSerializer
        return ExamDetailSerializer

    def retrieve(self, request, *args, **kwargs):
        exam = self.get_service().get_exam_detail(kwargs['pk'])
        return Response(ExamDetailSerializer(exam).data)

    @action(detail=False, methods=['post'])
    def generate(self, request):
        """Generate a new exam from the question bank."""
        serializer = GenerateExamSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = self.get_service().generate(
            title=data['title'],
            description=data.get('description', ''),
            training_category=data.get('training_category'),
            exam_type=data.get('exam_type', ExamType.FORMAL),
            settings=data.get('settings'),
            selection_config=data.get('selection_config'),
            training_record_id=data.get('training_record_id'),
            created_by=request.user.id,
        )

        return Response(
            GenerationResultSerializer(result).data,
            status=status.HTTP_201_CREATED
        )

    @action(detail=True, methods=['post'])
    def regenerate(self, request, pk=None):
        """Replace the exam's questions with a new selection."""
        serializer = RegenerateExamSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = self.get_service().regenerate(
            exam_id=pk,
            settings=serializer.validated_data.get('settings'),
            selection_config=serializer.validated_data.get('selection_config'),
            updated_by=request.user.id,
        )

        return Response(GenerationResultSerializer(result).data)

    @action(detail=True, methods=['post'])
    def publish(self, request, pk=None):
        """Publish an exam."""
        exam = self.get_service().publish_exam(pk)
        return Response(ExamListSerializer(exam).data)

    @action(detail=True, methods=['patch'], url_path='settings')
    def update_settings(self, request, pk=None):
        """Update exam total score, level or category."""
        serializer = UpdateExamSettingsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        exam = self.get_service().update_settings(
            exam_id=pk,
            settings=serializer.validated_data['settings'],
            updated_by=request.user.id,
        )

        return Response(ExamListSerializer(exam).data)

    @action(detail=True, methods=['post'])
    def enroll(self, request, pk=None):
        """Create exam records for a training record's participants."""
        serializer = EnrollParticipantsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        created = self.get_service().enroll_participants(
            training_record_id=serializer.validated_data['training_record_id'],
            exam_id=pk,
        )

        return Response(
            {
                'enrolled_count': len(created),
                'records': ExamRecordSerializer(created, many=True).data,
            },
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )
