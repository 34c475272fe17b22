"""
Exam Service Models

Database models for question selection, exam assembly and enrollment.
"""

from .question import Question, QuestionOption, QuestionType
from .training import TrainingRecord, TrainingRecordParticipant, ExamGenerationStatus
from .exam import Exam, ExamQuestion, ExamType, ExamStatus
from .record import ExamRecord

__all__ = [
    # Question
    'Question',
    'QuestionOption',
    'QuestionType',
    # Training
    'TrainingRecord',
    'TrainingRecordParticipant',
    'ExamGenerationStatus',
    # Exam
    'Exam',
    'ExamQuestion',
    'ExamType',
    'ExamStatus',
    # Record
    'ExamRecord',
]
