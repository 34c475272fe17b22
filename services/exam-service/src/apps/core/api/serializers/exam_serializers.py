# services/exam-service/src/apps/core/api/serializers/exam_serializers.py
"""
Exam Serializers

Serializers for reading exams, their questions and exam records.
"""

from rest_framework import serializers

from ...models import Exam, ExamQuestion, ExamRecord, Question, QuestionOption


class QuestionOptionSerializer(serializers.ModelSerializer):

    class Meta:
        model = QuestionOption
        fields = ['id', 'label', 'content', 'is_correct', 'sort_order']


class QuestionSerializer(serializers.ModelSerializer):
    """Serializer for a question with its options."""

    options = QuestionOptionSerializer(many=True, read_only=True)

    class Meta:
        model = Question
        fields = [
            'id',
            'category_id',
            'training_category',
            'question_type',
            'content',
            'difficulty',
            'score',
            'answer',
            'analysis',
            'options',
        ]


class ExamQuestionSerializer(serializers.ModelSerializer):
    """Serializer for a question as placed in an exam."""

    question = QuestionSerializer(read_only=True)

    class Meta:
        model = ExamQuestion
        fields = ['id', 'question_order', 'question_score', 'question']


class ExamListSerializer(serializers.ModelSerializer):
    """Serializer for exam list view."""

    class Meta:
        model = Exam
        fields = [
            'id',
            'title',
            'exam_type',
            'category_id',
            'training_category',
            'level',
            'question_count',
            'total_score',
            'pass_score',
            'duration_minutes',
            'status',
            'is_published',
            'created_at',
        ]


class ExamDetailSerializer(serializers.ModelSerializer):
    """Serializer for exam detail view."""

    questions = ExamQuestionSerializer(source='exam_questions', many=True, read_only=True)

    class Meta:
        model = Exam
        fields = [
            'id',
            'title',
            'description',
            'exam_type',
            'category_id',
            'training_category',
            'level',
            'question_count',
            'total_score',
            'pass_score',
            'duration_minutes',
            'status',
            'is_published',
            'published_at',
            'questions',
            'created_by',
            'updated_by',
            'created_at',
            'updated_at',
        ]


class ExamRecordSerializer(serializers.ModelSerializer):
    """Serializer for exam records."""

    user_id = serializers.UUIDField(source='participant.user_id', read_only=True, allow_null=True)

    class Meta:
        model = ExamRecord
        fields = [
            'id',
            'exam',
            'training_record',
            'participant',
            'user_id',
            'start_time',
            'end_time',
            'score',
            'is_passed',
            'created_at',
        ]
