# services/exam-service/src/apps/core/tests/factories.py
"""
Test data helpers.
"""

import itertools
import uuid
from types import SimpleNamespace

from ..models import (
    Question,
    QuestionOption,
    QuestionType,
    TrainingRecord,
    TrainingRecordParticipant,
)

_ids = itertools.count(1)


def stub_question(difficulty=3, question_type=QuestionType.SINGLE_CHOICE, category_id=None, score=None):
    """In-memory question for selection and statistics tests."""
    return SimpleNamespace(
        id=next(_ids),
        difficulty=difficulty,
        question_type=question_type,
        category_id=category_id,
        score=score,
    )


def stub_pool(per_difficulty, difficulties=(1, 2, 3, 4, 5)):
    return [
        stub_question(difficulty=difficulty)
        for difficulty in difficulties
        for _ in range(per_difficulty)
    ]


def create_question(
    difficulty=3,
    question_type=QuestionType.SINGLE_CHOICE,
    category_id=1,
    score=None,
    is_active=True,
    with_options=False,
):
    question = Question.objects.create(
        difficulty=difficulty,
        question_type=question_type,
        category_id=category_id,
        score=score,
        is_active=is_active,
        content=f"Question {next(_ids)}",
        answer='A',
    )
    if with_options:
        QuestionOption.objects.create(question=question, label='A', content='Yes', is_correct=True, sort_order=1)
        QuestionOption.objects.create(question=question, label='B', content='No', sort_order=2)
    return question


def create_questions(count, **kwargs):
    return [create_question(**kwargs) for _ in range(count)]


def create_mixed_pool(per_difficulty=12, **kwargs):
    return [
        question
        for difficulty in range(1, 6)
        for question in create_questions(per_difficulty, difficulty=difficulty, **kwargs)
    ]


def create_training_record(participant_count=3, title='Cabin Safety', training_category=2):
    training_record = TrainingRecord.objects.create(
        title=title,
        training_category=training_category,
    )
    for index in range(participant_count):
        TrainingRecordParticipant.objects.create(
            training_record=training_record,
            user_id=uuid.uuid4(),
            is_trainer=index == 0,
        )
    return training_record
