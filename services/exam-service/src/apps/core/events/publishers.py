# services/exam-service/src/apps/core/events/publishers.py
"""
Event Publishers

Functions for publishing exam events to other services.
"""

import logging
from typing import Dict, Any, Optional

from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)


def _publish_event(event_type: str, data: Dict[str, Any]) -> None:
    """
    Publish an event to the message broker.

    Args:
        event_type: Type of event
        data: Event data payload
    """
    event = {
        'type': event_type,
        'timestamp': timezone.now().isoformat(),
        'service': getattr(settings, 'SERVICE_NAME', 'exam-service'),
        'data': data
    }

    # Broker publishing is not wired up yet; events are logged only
    logger.info(f"Publishing event: {event_type}", extra={'event_data': event})


def publish_exam_generated(
    exam_id: str,
    question_count: int,
    training_record_id: Optional[str] = None,
    created_by: Optional[str] = None
) -> None:
    """
    Publish exam generated event.

    Args:
        exam_id: Exam ID
        question_count: Number of questions selected
        training_record_id: Training record the exam was generated for
        created_by: User ID
    """
    _publish_event('exam.generated', {
        'exam_id': exam_id,
        'question_count': question_count,
        'training_record_id': training_record_id,
        'created_by': created_by
    })


def publish_exam_regenerated(
    exam_id: str,
    question_count: int,
    updated_by: Optional[str] = None
) -> None:
    """
    Publish exam regenerated event.

    Args:
        exam_id: Exam ID
        question_count: Number of questions in the new set
        updated_by: User ID
    """
    _publish_event('exam.regenerated', {
        'exam_id': exam_id,
        'question_count': question_count,
        'updated_by': updated_by
    })


def publish_participants_enrolled(
    exam_id: str,
    training_record_id: str,
    enrolled_count: int
) -> None:
    _publish_event('exam.participants_enrolled', {
        'exam_id': exam_id,
        'training_record_id': training_record_id,
        'enrolled_count': enrolled_count
    })


def publish_exam_published(exam_id: str) -> None:
    _publish_event('exam.published', {
        'exam_id': exam_id
    })
