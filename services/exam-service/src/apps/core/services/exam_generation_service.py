# services/exam-service/src/apps/core/services/exam_generation_service.py
"""
Exam Generation Service

Business logic for assembling, regenerating and enrolling exams.
"""

import dataclasses
import logging
import random
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional
from uuid import UUID

from django.conf import settings as django_settings
from django.db import DatabaseError, transaction
from django.db.models import QuerySet

from shared.common.exceptions import (
    BadRequestException,
    ExamPersistenceException,
    NoCandidateQuestionsException,
    NotFoundException,
    ValidationException,
)

from ..events import (
    publish_exam_generated,
    publish_exam_regenerated,
    publish_participants_enrolled,
    publish_exam_published,
)
from ..models import Exam, ExamRecord, ExamType
from .candidate_pool import CandidatePoolLoader
from .exam_assembler import ExamAssembler
from .participant_enroller import ParticipantEnroller
from .repositories import (
    DjangoUnitOfWork,
    ExamRepository,
    QuestionRepository,
    RosterRepository,
)
from .selector import SelectionResult, StratifiedSelector
from .settings_resolver import (
    ExamSettings,
    SelectionConfig,
    SettingsResolver,
    is_bounded_int,
    to_snake_case,
)
from .statistics import StatisticsReporter

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Outcome of generate or regenerate."""

    exam: Exam
    statistics: Dict[str, Any]
    settings: ExamSettings
    selection_config: SelectionConfig
    selection: SelectionResult
    enrolled: List[ExamRecord] = field(default_factory=list)


def exam_title_for(training_title: str) -> str:
    """Exam title derived from a training record, cut to fit the title column."""
    suffix = ' Exam'
    max_length = Exam._meta.get_field('title').max_length
    return f"{training_title[:max_length - len(suffix)]}{suffix}"


def default_rng() -> random.Random:
    """Random source seeded from EXAM_GENERATION['SELECTION_SEED'] when set."""
    seed = getattr(django_settings, 'EXAM_GENERATION', {}).get('SELECTION_SEED')
    return random.Random(seed)


class ExamGenerationService:
    """Service for exam assembly, regeneration and participant enrollment."""

    SETTINGS_UPDATE_FIELDS = {
        'total_score': 'total_score',
        'level': 'level',
        'exam_category': 'category_id',
    }

    def __init__(
        self,
        question_repository: Optional[QuestionRepository] = None,
        roster_repository: Optional[RosterRepository] = None,
        exam_repository: Optional[ExamRepository] = None,
        unit_of_work: Optional[DjangoUnitOfWork] = None,
        rng: Optional[random.Random] = None,
    ):
        self.question_repository = question_repository or QuestionRepository()
        self.roster_repository = roster_repository or RosterRepository()
        self.exam_repository = exam_repository or ExamRepository()
        self.unit_of_work = unit_of_work or DjangoUnitOfWork()

        self.resolver = SettingsResolver()
        self.pool_loader = CandidatePoolLoader(self.question_repository)
        self.selector = StratifiedSelector(rng or default_rng())
        self.assembler = ExamAssembler(self.exam_repository)
        self.enroller = ParticipantEnroller(self.roster_repository)

    # =========================================================================
    # GENERATION
    # =========================================================================

    def generate(
        self,
        title: str,
        description: str = '',
        training_category: Optional[int] = None,
        exam_type: int = ExamType.FORMAL,
        settings: Optional[Dict[str, Any]] = None,
        selection_config: Optional[Dict[str, Any]] = None,
        training_record_id: Optional[UUID] = None,
        created_by: Optional[UUID] = None,
    ) -> GenerationResult:
        """
        Generate a new exam.

        Args:
            title: Exam title
            description: Exam description
            training_category: Training category
            exam_type: Formal or mock
            settings: Partial exam settings
            selection_config: Partial selection config
            training_record_id: Enroll this training record's roster
            created_by: User generating the exam

        Returns:
            GenerationResult with the exam and selection statistics
        """
        self._validate_header(title, exam_type)
        resolved = self.resolver.resolve_settings(settings)
        config = self.resolver.resolve_selection_config(selection_config)

        return self._generate(
            resolved,
            config,
            title=title,
            description=description,
            training_category=training_category,
            exam_type=exam_type,
            training_record_id=training_record_id,
            created_by=created_by,
        )

    def generate_for_training_record(
        self,
        training_record_id: UUID,
        settings: Optional[Dict[str, Any]] = None,
        selection_config: Optional[Dict[str, Any]] = None,
        exam_type: int = ExamType.FORMAL,
        created_by: Optional[UUID] = None,
    ) -> GenerationResult:
        """
        Generate an exam for a training record and enroll its roster.

        Title, description and training category come from the training
        record; the exam category is always the default one. The training
        record is flagged as having an exam in the same transaction.

        Args:
            training_record_id: Training record ID
            settings: Partial exam settings
            selection_config: Partial selection config
            exam_type: Formal or mock
            created_by: User generating the exam

        Returns:
            GenerationResult with the exam, statistics and new exam records
        """
        training_record = self.roster_repository.get_training_record(training_record_id)
        if training_record is None:
            raise NotFoundException(f"Training record {training_record_id} not found")

        self._validate_header(training_record.title, exam_type)
        resolved = dataclasses.replace(
            self.resolver.resolve_settings(settings),
            exam_category=django_settings.EXAM_GENERATION['DEFAULT_EXAM_CATEGORY'],
        )
        config = self.resolver.resolve_selection_config(selection_config)

        return self._generate(
            resolved,
            config,
            title=exam_title_for(training_record.title),
            description=f"Training record #{training_record.id}",
            training_category=training_record.training_category,
            exam_type=exam_type,
            training_record_id=training_record.id,
            created_by=created_by,
            mark_training_record=True,
        )

    def _generate(
        self,
        resolved: ExamSettings,
        config: SelectionConfig,
        title: str,
        description: str,
        training_category: Optional[int],
        exam_type: int,
        training_record_id: Optional[UUID],
        created_by: Optional[UUID],
        mark_training_record: bool = False,
    ) -> GenerationResult:
        pool = self.pool_loader.load(resolved)
        selection = self.selector.select(
            pool, resolved.question_count, config.difficulty_distribution
        )
        if not selection:
            logger.warning(f"No candidate questions for exam '{title}'")
            raise NoCandidateQuestionsException()

        if selection.is_short:
            logger.warning(
                f"Exam '{title}' short of questions: "
                f"{len(selection)}/{resolved.question_count}"
            )

        enrolled = []
        try:
            with self.unit_of_work:
                exam = self.assembler.assemble(
                    resolved,
                    selection.questions,
                    created_by=created_by,
                    title=title,
                    description=description,
                    exam_type=exam_type,
                    training_category=training_category,
                )

                if training_record_id:
                    enrolled = self.enroller.enroll(training_record_id, exam)

                    if mark_training_record:
                        training_record = self.roster_repository.lock_training_record(
                            training_record_id
                        )
                        training_record.mark_exam_generated()
        except DatabaseError as e:
            logger.exception(f"Failed to persist exam '{title}'")
            raise ExamPersistenceException() from e

        logger.info(
            f"Generated exam {exam.id} with {len(selection)} questions"
            + (f", enrolled {len(enrolled)}" if training_record_id else '')
        )

        exam_id = str(exam.id)
        transaction.on_commit(lambda: publish_exam_generated(
            exam_id=exam_id,
            question_count=len(selection),
            training_record_id=str(training_record_id) if training_record_id else None,
            created_by=str(created_by) if created_by else None,
        ))
        if enrolled:
            transaction.on_commit(lambda: publish_participants_enrolled(
                exam_id=exam_id,
                training_record_id=str(training_record_id),
                enrolled_count=len(enrolled),
            ))

        return GenerationResult(
            exam=self.exam_repository.get_detail(exam.id),
            statistics=StatisticsReporter.summarize(selection.questions),
            settings=resolved,
            selection_config=config,
            selection=selection,
            enrolled=enrolled,
        )

    # =========================================================================
    # REGENERATION
    # =========================================================================

    def regenerate(
        self,
        exam_id: UUID,
        settings: Optional[Dict[str, Any]] = None,
        selection_config: Optional[Dict[str, Any]] = None,
        updated_by: Optional[UUID] = None,
    ) -> GenerationResult:
        """
        Replace an exam's question set.

        Settings are resolved over the defaults, not over the exam's previous
        settings. Exam records are left untouched.

        Args:
            exam_id: Exam ID
            settings: Partial exam settings
            selection_config: Partial selection config
            updated_by: User regenerating the exam

        Returns:
            GenerationResult with the updated exam and statistics
        """
        resolved = self.resolver.resolve_settings(settings)
        config = self.resolver.resolve_selection_config(selection_config)

        try:
            with self.unit_of_work:
                exam = self.exam_repository.lock(exam_id)
                if exam is None:
                    raise NotFoundException(f"Exam {exam_id} not found")

                active = self.exam_repository.count_active_records(exam)
                if active:
                    logger.warning(
                        f"Regenerating exam {exam_id} with {active} exam records in progress"
                    )

                removed = self.exam_repository.delete_questions(exam)

                pool = self.pool_loader.load(resolved)
                selection = self.selector.select(
                    pool, resolved.question_count, config.difficulty_distribution
                )
                if not selection:
                    logger.warning(f"No candidate questions to regenerate exam {exam_id}")
                    raise NoCandidateQuestionsException()

                self.assembler.replace_questions(
                    exam, resolved, selection.questions, updated_by=updated_by
                )
        except DatabaseError as e:
            logger.exception(f"Failed to regenerate exam {exam_id}")
            raise ExamPersistenceException() from e

        logger.info(
            f"Regenerated exam {exam_id}: removed {removed}, added {len(selection)} questions"
        )

        transaction.on_commit(lambda: publish_exam_regenerated(
            exam_id=str(exam_id),
            question_count=len(selection),
            updated_by=str(updated_by) if updated_by else None,
        ))

        return GenerationResult(
            exam=self.exam_repository.get_detail(exam_id),
            statistics=StatisticsReporter.summarize(selection.questions),
            settings=resolved,
            selection_config=config,
            selection=selection,
        )

    # =========================================================================
    # ENROLLMENT
    # =========================================================================

    def enroll_participants(self, training_record_id: UUID, exam_id: UUID) -> List[ExamRecord]:
        """
        Enroll a training record's roster into an existing exam.

        Args:
            training_record_id: Training record ID
            exam_id: Exam ID

        Returns:
            Newly created exam records
        """
        try:
            with self.unit_of_work:
                exam = self.exam_repository.get(exam_id)
                if exam is None:
                    raise NotFoundException(f"Exam {exam_id} not found")

                created = self.enroller.enroll(training_record_id, exam)
        except DatabaseError as e:
            logger.exception(f"Failed to enroll training record {training_record_id}")
            raise ExamPersistenceException() from e

        if created:
            transaction.on_commit(lambda: publish_participants_enrolled(
                exam_id=str(exam_id),
                training_record_id=str(training_record_id),
                enrolled_count=len(created),
            ))

        return created

    # =========================================================================
    # EXAM MANAGEMENT
    # =========================================================================

    def publish_exam(self, exam_id: UUID) -> Exam:
        """Publish an exam."""
        exam = self._get_exam(exam_id)

        try:
            exam.publish()
        except ValueError as e:
            raise BadRequestException(str(e))

        logger.info(f"Published exam {exam_id}")
        transaction.on_commit(lambda: publish_exam_published(exam_id=str(exam_id)))
        return exam

    def update_settings(
        self,
        exam_id: UUID,
        settings: Dict[str, Any],
        updated_by: Optional[UUID] = None,
    ) -> Exam:
        """
        Update an exam's total score, level or category.

        Other settings keys are ignored; the question set is not touched.

        Args:
            exam_id: Exam ID
            settings: Partial settings
            updated_by: User updating the exam

        Returns:
            Updated exam
        """
        exam = self._get_exam(exam_id)

        changes = {
            to_snake_case(str(key)): value for key, value in (settings or {}).items()
        }
        errors = {}
        update_fields = []

        for key, model_field in self.SETTINGS_UPDATE_FIELDS.items():
            value = changes.get(key)
            if value is None:
                continue
            if not is_bounded_int(key, value):
                errors[key] = ['Must be a non-negative integer within range.']
                continue
            setattr(exam, model_field, value)
            update_fields.append(model_field)

        if errors:
            raise ValidationException(errors, detail='Invalid exam settings')

        exam.updated_by = updated_by
        self.exam_repository.save(exam, update_fields=update_fields + ['updated_by', 'updated_at'])

        logger.info(f"Updated settings of exam {exam_id}: {update_fields}")
        return exam

    def get_exam_detail(self, exam_id: UUID) -> Exam:
        """Get an exam with its ordered questions and options."""
        exam = self.exam_repository.get_detail(exam_id)
        if exam is None:
            raise NotFoundException(f"Exam {exam_id} not found")
        return exam

    def list_exams(self) -> QuerySet:
        return self.exam_repository.queryset()

    def _get_exam(self, exam_id: UUID) -> Exam:
        exam = self.exam_repository.get(exam_id)
        if exam is None:
            raise NotFoundException(f"Exam {exam_id} not found")
        return exam

    @staticmethod
    def _validate_header(title: str, exam_type: int) -> None:
        errors = {}
        if not title or not str(title).strip():
            errors['title'] = ['This field is required.']
        elif len(title) > Exam._meta.get_field('title').max_length:
            errors['title'] = ['Ensure this field has no more than 255 characters.']
        if exam_type not in ExamType.values:
            errors['exam_type'] = [f"Must be one of {ExamType.values}."]
        if errors:
            raise ValidationException(errors)
