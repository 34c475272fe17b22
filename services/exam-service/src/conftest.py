# services/exam-service/src/conftest.py
"""
Pytest configuration for Exam Service
"""

import os

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.testing')

import random
import uuid

import pytest


@pytest.fixture
def user_id():
    """Generate a test user ID."""
    return uuid.uuid4()


@pytest.fixture
def seeded_rng():
    """Deterministic random source for selection."""
    return random.Random(1234)


@pytest.fixture
def exam_generation_service(seeded_rng):
    """Create ExamGenerationService instance."""
    from apps.core.services import ExamGenerationService
    return ExamGenerationService(rng=seeded_rng)

