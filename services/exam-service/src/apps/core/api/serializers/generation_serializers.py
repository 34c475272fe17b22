# services/exam-service/src/apps/core/api/serializers/generation_serializers.py
"""
Generation Serializers

Request bodies for exam generation, regeneration and enrollment, and the
shared response envelope.
"""

from rest_framework import serializers

from ...models import ExamType
from .exam_serializers import ExamDetailSerializer, ExamRecordSerializer


class SettingsField(serializers.DictField):
    """
    Free-form settings object.

    Keys may be camelCase or snake_case; values are checked by the service.
    """

    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('allow_null', True)
        kwargs.setdefault('allow_empty', True)
        super().__init__(**kwargs)


class GenerateExamSerializer(serializers.Serializer):
    """Serializer for generating an exam."""

    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    training_category = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    exam_type = serializers.ChoiceField(choices=ExamType.choices, default=ExamType.FORMAL)
    training_record_id = serializers.UUIDField(required=False, allow_null=True)
    settings = SettingsField()
    selection_config = SettingsField()

    def to_internal_value(self, data):
        if hasattr(data, 'get'):
            data = {
                **data,
                **{
                    snake: data[camel]
                    for camel, snake in (
                        ('trainingCategory', 'training_category'),
                        ('examType', 'exam_type'),
                        ('recordId', 'training_record_id'),
                        ('trainingRecordId', 'training_record_id'),
                        ('selectionConfig', 'selection_config'),
                    )
                    if camel in data and snake not in data
                },
            }
        return super().to_internal_value(data)


class RegenerateExamSerializer(serializers.Serializer):
    """Serializer for regenerating an exam's questions."""

    settings = SettingsField()
    selection_config = SettingsField()

    def to_internal_value(self, data):
        if hasattr(data, 'get') and 'selectionConfig' in data and 'selection_config' not in data:
            data = {**data, 'selection_config': data['selectionConfig']}
        return super().to_internal_value(data)


class GenerateFromTrainingRecordSerializer(RegenerateExamSerializer):
    """Serializer for generating an exam from a training record."""

    exam_type = serializers.ChoiceField(choices=ExamType.choices, default=ExamType.FORMAL)


class UpdateExamSettingsSerializer(serializers.Serializer):
    """Serializer for updating exam settings."""

    settings = serializers.DictField()


class EnrollParticipantsSerializer(serializers.Serializer):
    """Serializer for enrolling a training record into an exam."""

    training_record_id = serializers.UUIDField()

    def to_internal_value(self, data):
        if hasattr(data, 'get') and 'training_record_id' not in data:
            for alias in ('trainingRecordId', 'recordId'):
                if alias in data:
                    data = {**data, 'training_record_id': data[alias]}
                    break
        return super().to_internal_value(data)


class GenerationResultSerializer(serializers.Serializer):
    """Serializer for generate and regenerate responses."""

    exam = ExamDetailSerializer(read_only=True)
    statistics = serializers.DictField(read_only=True)
    settings = serializers.SerializerMethodField()
    selection_config = serializers.SerializerMethodField()
    enrolled = ExamRecordSerializer(many=True, read_only=True)

    def get_settings(self, obj):
        return obj.settings.to_dict()

    def get_selection_config(self, obj):
        return obj.selection_config.to_dict()
