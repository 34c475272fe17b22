# services/exam-service/src/apps/core/events/__init__.py
"""
Exam Service Events

Event publishing for exam service.
"""

from .publishers import (
    publish_exam_generated,
    publish_exam_regenerated,
    publish_participants_enrolled,
    publish_exam_published,
)

__all__ = [
    'publish_exam_generated',
    'publish_exam_regenerated',
    'publish_participants_enrolled',
    'publish_exam_published',
]
