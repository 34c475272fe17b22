# services/exam-service/src/apps/core/services/__init__.py
"""
Exam Service Business Logic

Service layer for exam assembly, regeneration and enrollment.
"""

from .settings_resolver import SettingsResolver, ExamSettings, SelectionConfig
from .candidate_pool import CandidatePoolLoader
from .selector import StratifiedSelector, SelectionResult, quota_for
from .exam_assembler import ExamAssembler
from .participant_enroller import ParticipantEnroller
from .statistics import StatisticsReporter
from .repositories import (
    QuestionRepository,
    RosterRepository,
    ExamRepository,
    DjangoUnitOfWork,
)
from .exam_generation_service import ExamGenerationService, GenerationResult

__all__ = [
    'SettingsResolver',
    'ExamSettings',
    'SelectionConfig',
    'CandidatePoolLoader',
    'StratifiedSelector',
    'SelectionResult',
    'quota_for',
    'ExamAssembler',
    'ParticipantEnroller',
    'StatisticsReporter',
    'QuestionRepository',
    'RosterRepository',
    'ExamRepository',
    'DjangoUnitOfWork',
    'ExamGenerationService',
    'GenerationResult',
]
