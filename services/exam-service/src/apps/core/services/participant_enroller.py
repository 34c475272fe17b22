# services/exam-service/src/apps/core/services/participant_enroller.py
"""
Participant Enroller

Creates one exam record per training record participant.
"""

import logging
from typing import List
from uuid import UUID

from shared.common.exceptions import NotFoundException

from ..models import Exam, ExamRecord

logger = logging.getLogger(__name__)


class ParticipantEnroller:
    """Idempotent enrollment of a training record's roster into an exam."""

    def __init__(self, roster_repository):
        self.roster_repository = roster_repository

    def enroll(self, training_record_id: UUID, exam: Exam) -> List[ExamRecord]:
        """
        Enroll every participant that has no exam record yet.

        Must run inside a transaction: the training record row stays locked
        until it commits, so concurrent calls cannot double-enroll.

        Args:
            training_record_id: Training record whose roster is enrolled
            exam: Exam the records point at

        Returns:
            Newly created exam records (empty when everyone is enrolled)

        Raises:
            NotFoundException: If the training record does not exist
        """
        training_record = self.roster_repository.lock_training_record(training_record_id)
        if training_record is None:
            raise NotFoundException(f"Training record {training_record_id} not found")

        participants = self.roster_repository.find_participants(training_record_id)
        enrolled = {
            record.participant_id
            for record in self.roster_repository.find_existing_records(training_record_id)
        }

        new_records = [
            ExamRecord(
                exam=exam,
                training_record=training_record,
                participant=participant,
                score=None,
                is_passed=None,
            )
            for participant in participants
            if participant.id not in enrolled
        ]
        created = self.roster_repository.create_records(new_records)

        logger.info(
            f"Enrolled {len(created)} participants of training record "
            f"{training_record_id} into exam {exam.id} "
            f"({len(participants) - len(created)} already enrolled)"
        )
        return created
