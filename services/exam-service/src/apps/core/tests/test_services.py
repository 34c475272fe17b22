# services/exam-service/src/apps/core/tests/test_services.py
"""
Service Tests

Tests for exam generation, regeneration and enrollment.
"""

import random
import uuid
from decimal import Decimal
from unittest.mock import patch

from django.db import DatabaseError, IntegrityError, transaction
from django.test import TestCase
from django.utils import timezone

from shared.common.exceptions import (
    BadRequestException,
    ExamPersistenceException,
    NoCandidateQuestionsException,
    NotFoundException,
    ValidationException,
)

from ..models import (
    Exam,
    ExamQuestion,
    ExamRecord,
    ExamStatus,
    ExamGenerationStatus,
    Question,
    QuestionType,
    TrainingRecordParticipant,
)
from ..services import ExamGenerationService
from .factories import (
    create_mixed_pool,
    create_question,
    create_questions,
    create_training_record,
)


class ExamGenerationServiceTestCase(TestCase):
    """Base test case with a seeded service."""

    def setUp(self):
        """Set up test fixtures."""
        self.user_id = uuid.uuid4()
        self.service = ExamGenerationService(rng=random.Random(42))

    def generate(self, **kwargs):
        kwargs.setdefault('title', 'Dangerous Goods')
        kwargs.setdefault('created_by', self.user_id)
        return self.service.generate(**kwargs)


class GenerateExamTest(ExamGenerationServiceTestCase):
    """Tests for ExamGenerationService.generate."""

    def test_generate_creates_ordered_questions(self):
        """Test N distinct questions ordered 1..N."""
        create_mixed_pool(per_difficulty=12)

        result = self.generate(settings={'questionCount': 10})

        links = list(ExamQuestion.objects.filter(exam=result.exam))
        self.assertEqual(len(links), 10)
        self.assertEqual([link.question_order for link in links], list(range(1, 11)))
        self.assertEqual(len({link.question_id for link in links}), 10)

    def test_generate_exam_fields(self):
        """Test exam header fields and derived defaults."""
        create_mixed_pool(per_difficulty=12)

        result = self.generate(
            description='Annual recurrent',
            training_category=4,
            settings={'questionCount': 10, 'level': 2},
        )
        exam = Exam.objects.get(id=result.exam.id)

        self.assertEqual(exam.title, 'Dangerous Goods')
        self.assertEqual(exam.description, 'Annual recurrent')
        self.assertEqual(exam.status, ExamStatus.ENABLED)
        self.assertEqual(exam.category_id, 101)
        self.assertEqual(exam.training_category, 4)
        self.assertEqual(exam.level, 2)
        self.assertEqual(exam.question_count, 10)
        self.assertEqual(exam.total_score, 100)
        self.assertEqual(exam.pass_score, 60)
        self.assertEqual(exam.duration_minutes, 120)
        self.assertEqual(exam.created_by, self.user_id)
        self.assertFalse(exam.is_published)

    def test_generate_statistics(self):
        """Test statistics describe the realized selection."""
        create_mixed_pool(per_difficulty=20)

        result = self.generate()

        self.assertEqual(result.statistics['total_questions'], 50)
        self.assertEqual(
            result.statistics['difficulty_distribution'],
            {1: 5, 2: 10, 3: 20, 4: 10, 5: 5}
        )
        self.assertEqual(result.selection.backfilled, 0)

    def test_generate_empty_pool(self):
        """Test an empty pool raises and writes nothing."""
        with self.assertRaises(NoCandidateQuestionsException):
            self.generate()

        self.assertEqual(Exam.objects.count(), 0)
        self.assertEqual(ExamQuestion.objects.count(), 0)

    def test_inactive_questions_excluded(self):
        """Test inactive questions are never candidates."""
        create_questions(5, is_active=False)

        with self.assertRaises(NoCandidateQuestionsException):
            self.generate()

    def test_question_type_filter(self):
        """Test only the requested question types are selected."""
        create_questions(10, question_type=QuestionType.FILL_BLANK)
        create_questions(3, question_type=QuestionType.TRUE_FALSE)

        result = self.generate(settings={'questionCount': 10})

        self.assertEqual(result.statistics['total_questions'], 3)
        self.assertEqual(result.statistics['type_distribution'], {'true_false': 3})

    def test_category_filter(self):
        """Test category ids restrict the pool."""
        create_questions(5, category_id=1)
        create_questions(5, category_id=2)

        result = self.generate(settings={'questionCount': 10, 'categoryIds': [2]})

        self.assertEqual(result.statistics['category_distribution'], {2: 5})

    def test_single_difficulty_scores(self):
        """Test 60 difficulty-3 questions, {3: 1.0}, total 100, N 50."""
        create_questions(30, difficulty=3)
        create_questions(30, difficulty=3, score=4)

        result = self.generate(
            settings={'totalScore': 100, 'questionCount': 50},
            selection_config={'difficultyDistribution': {3: 1.0}},
        )

        links = ExamQuestion.objects.filter(exam=result.exam).select_related('question')
        self.assertEqual(links.count(), 50)
        for link in links:
            self.assertEqual(link.question.difficulty, 3)
            expected = Decimal(4) if link.question.score is not None else Decimal(2)
            self.assertEqual(link.question_score, expected)

    def test_score_sum_may_differ_from_total(self):
        """Test intrinsic scores are kept even when they do not add up to the total."""
        create_questions(10, score=5)

        result = self.generate(settings={'totalScore': 100, 'questionCount': 10})

        scores = ExamQuestion.objects.filter(exam=result.exam).values_list('question_score', flat=True)
        self.assertEqual(sum(scores), Decimal(50))
        self.assertEqual(Exam.objects.get(id=result.exam.id).total_score, 100)

    def test_large_total_single_question(self):
        """Test one question carrying a large total score."""
        create_questions(3)

        result = self.generate(settings={'totalScore': 5000, 'questionCount': 1})

        link = result.exam.exam_questions.get()
        self.assertEqual(link.question_score, Decimal(5000))
        self.assertEqual(result.exam.total_score, 5000)

    def test_large_intrinsic_score(self):
        """Test a four-digit intrinsic score is stored as is."""
        create_question(score=1500)

        result = self.generate(settings={'questionCount': 1})

        self.assertEqual(result.exam.exam_questions.get().question_score, Decimal(1500))

    def test_total_score_out_of_range(self):
        """Test a total score beyond the column range is rejected before writing."""
        create_mixed_pool(per_difficulty=2)

        with self.assertRaises(ValidationException):
            self.generate(settings={'totalScore': 2 ** 31})

        self.assertEqual(Exam.objects.count(), 0)

    def test_title_too_long(self):
        """Test a title longer than the column is rejected."""
        create_mixed_pool(per_difficulty=2)

        with self.assertRaises(ValidationException):
            self.generate(title='T' * 256)

    def test_short_pool_still_generates(self):
        """Test a pool smaller than N yields a shorter exam."""
        create_questions(4)

        result = self.generate(settings={'questionCount': 10})

        self.assertEqual(result.exam.exam_questions.count(), 4)
        self.assertEqual(result.exam.question_count, 10)

    def test_invalid_settings(self):
        """Test malformed settings fail before anything is written."""
        create_mixed_pool(per_difficulty=2)

        with self.assertRaises(ValidationException):
            self.generate(settings={'questionCount': 0})

        self.assertEqual(Exam.objects.count(), 0)

    def test_missing_title(self):
        """Test a blank title is rejected."""
        create_mixed_pool(per_difficulty=2)

        with self.assertRaises(ValidationException):
            self.generate(title='  ')

    def test_generate_with_training_record_enrolls(self):
        """Test passing a training record enrolls its roster."""
        create_mixed_pool(per_difficulty=4)
        training_record = create_training_record(participant_count=3)

        result = self.generate(training_record_id=training_record.id)

        self.assertEqual(len(result.enrolled), 3)
        self.assertEqual(
            ExamRecord.objects.filter(exam=result.exam, training_record=training_record).count(),
            3
        )
        training_record.refresh_from_db()
        self.assertEqual(training_record.exam_status, ExamGenerationStatus.NOT_GENERATED)

    def test_unknown_training_record_rolls_back(self):
        """Test enrollment failure removes the exam as well."""
        create_mixed_pool(per_difficulty=4)

        with self.assertRaises(NotFoundException):
            self.generate(training_record_id=uuid.uuid4())

        self.assertEqual(Exam.objects.count(), 0)
        self.assertEqual(ExamQuestion.objects.count(), 0)

    def test_persistence_failure_rolls_back(self):
        """Test a database error leaves no exam behind."""
        create_mixed_pool(per_difficulty=4)

        with patch.object(
            self.service.exam_repository,
            'add_questions',
            side_effect=DatabaseError('disk full')
        ):
            with self.assertRaises(ExamPersistenceException):
                self.generate()

        self.assertEqual(Exam.objects.count(), 0)

    def test_enrollment_failure_rolls_back(self):
        """Test a failed record insert rolls back exam and links."""
        create_mixed_pool(per_difficulty=4)
        training_record = create_training_record(participant_count=2)

        with patch.object(
            self.service.roster_repository,
            'create_records',
            side_effect=DatabaseError('deadlock')
        ):
            with self.assertRaises(ExamPersistenceException):
                self.generate(training_record_id=training_record.id)

        self.assertEqual(Exam.objects.count(), 0)
        self.assertEqual(ExamQuestion.objects.count(), 0)
        self.assertEqual(ExamRecord.objects.count(), 0)


class GenerateForTrainingRecordTest(ExamGenerationServiceTestCase):
    """Tests for ExamGenerationService.generate_for_training_record."""

    def test_generate_for_training_record(self):
        """Test exam header comes from the training record."""
        create_mixed_pool(per_difficulty=4)
        training_record = create_training_record(
            participant_count=2, title='Crew Resource Management', training_category=6
        )

        result = self.service.generate_for_training_record(
            training_record.id,
            settings={'examCategory': 7, 'questionCount': 10},
            created_by=self.user_id,
        )

        exam = result.exam
        self.assertEqual(exam.title, 'Crew Resource Management Exam')
        self.assertEqual(exam.description, f"Training record #{training_record.id}")
        self.assertEqual(exam.category_id, 101)
        self.assertEqual(exam.training_category, 6)
        self.assertEqual(len(result.enrolled), 2)

        training_record.refresh_from_db()
        self.assertEqual(training_record.exam_status, ExamGenerationStatus.GENERATED)

    def test_unknown_training_record(self):
        """Test a missing training record raises not found."""
        with self.assertRaises(NotFoundException):
            self.service.generate_for_training_record(uuid.uuid4())

    def test_long_training_title_fits_column(self):
        """Test the derived title is cut to the exam title length."""
        create_mixed_pool(per_difficulty=2)
        training_record = create_training_record(title='T' * 255)

        result = self.service.generate_for_training_record(
            training_record.id, settings={'questionCount': 5}
        )

        title = result.exam.title
        self.assertEqual(len(title), Exam._meta.get_field('title').max_length)
        self.assertTrue(title.endswith(' Exam'))

    def test_empty_pool_leaves_status(self):
        """Test the training record is not flagged when generation fails."""
        training_record = create_training_record()

        with self.assertRaises(NoCandidateQuestionsException):
            self.service.generate_for_training_record(training_record.id)

        training_record.refresh_from_db()
        self.assertEqual(training_record.exam_status, ExamGenerationStatus.NOT_GENERATED)
        self.assertEqual(ExamRecord.objects.count(), 0)


class RegenerateExamTest(ExamGenerationServiceTestCase):
    """Tests for ExamGenerationService.regenerate."""

    def setUp(self):
        """Set up test fixtures."""
        super().setUp()
        create_mixed_pool(per_difficulty=6)
        self.training_record = create_training_record(participant_count=2)
        self.exam = self.generate(
            settings={'questionCount': 10, 'totalScore': 200},
            training_record_id=self.training_record.id,
        ).exam

    def test_regenerate_replaces_every_link(self):
        """Test every question link is replaced."""
        old_link_ids = set(ExamQuestion.objects.filter(exam=self.exam).values_list('id', flat=True))

        self.service.regenerate(self.exam.id, settings={'questionCount': 10})

        new_links = list(ExamQuestion.objects.filter(exam=self.exam))
        self.assertEqual(len(new_links), 10)
        self.assertEqual([link.question_order for link in new_links], list(range(1, 11)))
        self.assertTrue(old_link_ids.isdisjoint({link.id for link in new_links}))

    def test_regenerate_keeps_exam_records(self):
        """Test exam records are not touched."""
        before = list(ExamRecord.objects.order_by('id').values('id', 'exam_id', 'participant_id'))

        self.service.regenerate(self.exam.id)

        after = list(ExamRecord.objects.order_by('id').values('id', 'exam_id', 'participant_id'))
        self.assertEqual(before, after)

    def test_regenerate_resolves_over_defaults(self):
        """Test settings missing from the request revert to defaults."""
        updated_by = uuid.uuid4()

        result = self.service.regenerate(self.exam.id, settings={'questionCount': 5}, updated_by=updated_by)

        exam = Exam.objects.get(id=self.exam.id)
        self.assertEqual(exam.total_score, 100)
        self.assertEqual(exam.pass_score, 60)
        self.assertEqual(exam.question_count, 5)
        self.assertEqual(exam.updated_by, updated_by)
        self.assertEqual(result.statistics['total_questions'], 5)

    def test_regenerate_empty_pool_rolls_back(self):
        """Test the old question set survives a failed regeneration."""
        old_link_ids = set(ExamQuestion.objects.filter(exam=self.exam).values_list('id', flat=True))
        Question.objects.update(is_active=False)

        with self.assertRaises(NoCandidateQuestionsException):
            self.service.regenerate(self.exam.id)

        current = set(ExamQuestion.objects.filter(exam=self.exam).values_list('id', flat=True))
        self.assertEqual(current, old_link_ids)
        self.assertEqual(Exam.objects.get(id=self.exam.id).total_score, 200)

    def test_regenerate_unknown_exam(self):
        """Test a missing exam raises not found."""
        with self.assertRaises(NotFoundException):
            self.service.regenerate(uuid.uuid4())

    def test_regenerate_with_active_records_warns(self):
        """Test regeneration proceeds but warns when records are in progress."""
        ExamRecord.objects.filter(exam=self.exam).update(start_time=timezone.now())

        with self.assertLogs('apps.core.services.exam_generation_service', level='WARNING') as logs:
            self.service.regenerate(self.exam.id, settings={'questionCount': 10})

        self.assertTrue(any('in progress' in line for line in logs.output))
        self.assertEqual(ExamQuestion.objects.filter(exam=self.exam).count(), 10)


class EnrollParticipantsTest(ExamGenerationServiceTestCase):
    """Tests for ExamGenerationService.enroll_participants."""

    def setUp(self):
        """Set up test fixtures."""
        super().setUp()
        create_mixed_pool(per_difficulty=2)
        self.exam = self.generate(settings={'questionCount': 5}).exam
        self.training_record = create_training_record(participant_count=3)

    def test_enroll_creates_records(self):
        """Test one record per participant with empty results."""
        created = self.service.enroll_participants(self.training_record.id, self.exam.id)

        self.assertEqual(len(created), 3)
        for record in ExamRecord.objects.all():
            self.assertEqual(record.exam_id, self.exam.id)
            self.assertIsNone(record.score)
            self.assertIsNone(record.is_passed)

    def test_enroll_twice_is_idempotent(self):
        """Test a second enrollment creates nothing."""
        self.service.enroll_participants(self.training_record.id, self.exam.id)
        first = set(ExamRecord.objects.values_list('id', flat=True))

        created = self.service.enroll_participants(self.training_record.id, self.exam.id)

        self.assertEqual(created, [])
        self.assertEqual(set(ExamRecord.objects.values_list('id', flat=True)), first)

    def test_enroll_only_new_participants(self):
        """Test participants added later are enrolled on re-run."""
        self.service.enroll_participants(self.training_record.id, self.exam.id)
        TrainingRecordParticipant.objects.create(
            training_record=self.training_record,
            user_id=uuid.uuid4(),
        )

        created = self.service.enroll_participants(self.training_record.id, self.exam.id)

        self.assertEqual(len(created), 1)
        self.assertEqual(ExamRecord.objects.count(), 4)

    def test_enroll_into_second_exam_creates_nothing(self):
        """Test a participant keeps a single record per training record."""
        self.service.enroll_participants(self.training_record.id, self.exam.id)
        other_exam = self.generate(title='Recurrent', settings={'questionCount': 5}).exam

        created = self.service.enroll_participants(self.training_record.id, other_exam.id)

        self.assertEqual(created, [])
        self.assertEqual(ExamRecord.objects.filter(exam=other_exam).count(), 0)
        self.assertEqual(ExamRecord.objects.count(), 3)

    def test_duplicate_record_rejected_by_database(self):
        """Test the database refuses a second record for one participant."""
        self.service.enroll_participants(self.training_record.id, self.exam.id)
        participant = TrainingRecordParticipant.objects.filter(
            training_record=self.training_record
        ).first()

        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                ExamRecord.objects.create(
                    exam=self.exam,
                    training_record=self.training_record,
                    participant=participant,
                )

        self.assertEqual(ExamRecord.objects.filter(participant=participant).count(), 1)

    def test_enroll_unknown_exam(self):
        """Test enrolling into a missing exam raises not found."""
        with self.assertRaises(NotFoundException):
            self.service.enroll_participants(self.training_record.id, uuid.uuid4())

    def test_enroll_unknown_training_record(self):
        """Test enrolling a missing training record raises not found."""
        with self.assertRaises(NotFoundException):
            self.service.enroll_participants(uuid.uuid4(), self.exam.id)


class ExamManagementTest(ExamGenerationServiceTestCase):
    """Tests for publish, settings update and detail."""

    def test_publish_exam(self):
        """Test publishing an exam."""
        create_mixed_pool(per_difficulty=2)
        exam = self.generate(settings={'questionCount': 5}).exam

        published = self.service.publish_exam(exam.id)

        self.assertTrue(published.is_published)
        self.assertIsNotNone(published.published_at)

    def test_publish_exam_without_questions(self):
        """Test an exam without questions cannot be published."""
        exam = Exam.objects.create(title='Empty')

        with self.assertRaises(BadRequestException):
            self.service.publish_exam(exam.id)

    def test_update_settings(self):
        """Test total score, level and category are updated."""
        create_mixed_pool(per_difficulty=2)
        exam = self.generate(settings={'questionCount': 5}).exam

        updated = self.service.update_settings(
            exam.id,
            {'totalScore': 150, 'level': 2, 'examCategory': 9, 'questionCount': 99},
            updated_by=self.user_id,
        )

        exam = Exam.objects.get(id=updated.id)
        self.assertEqual(exam.total_score, 150)
        self.assertEqual(exam.level, 2)
        self.assertEqual(exam.category_id, 9)
        self.assertEqual(exam.question_count, 5)
        self.assertEqual(exam.exam_questions.count(), 5)

    def test_update_settings_invalid(self):
        """Test malformed values are rejected."""
        exam = Exam.objects.create(title='Exam')

        with self.assertRaises(ValidationException):
            self.service.update_settings(exam.id, {'totalScore': 'lots'})

    def test_get_exam_detail(self):
        """Test detail includes ordered questions with options."""
        create_question(with_options=True)
        exam = self.generate(settings={'questionCount': 1}).exam

        detail = self.service.get_exam_detail(exam.id)

        link = detail.exam_questions.all()[0]
        self.assertEqual(link.question_order, 1)
        self.assertEqual(link.question.options.count(), 2)

    def test_get_exam_detail_not_found(self):
        """Test a missing exam raises not found."""
        with self.assertRaises(NotFoundException):
            self.service.get_exam_detail(uuid.uuid4())
