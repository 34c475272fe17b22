# services/exam-service/src/apps/core/services/settings_resolver.py
"""
Settings Resolver

Merges caller-supplied exam settings and selection config over the
service defaults.
"""

import logging
import math
import re
from dataclasses import dataclass, field, asdict
from numbers import Real
from typing import Dict, Any, List, Optional, Tuple

from django.conf import settings as django_settings

from shared.common.exceptions import ValidationException

from ..models import QuestionType

logger = logging.getLogger(__name__)


DEFAULT_QUESTION_TYPES: Tuple[str, ...] = (
    QuestionType.SINGLE_CHOICE.value,
    QuestionType.MULTIPLE_CHOICE.value,
    QuestionType.TRUE_FALSE.value,
)

DEFAULT_DIFFICULTY_DISTRIBUTION: Tuple[Tuple[int, float], ...] = (
    (1, 0.1),
    (2, 0.2),
    (3, 0.4),
    (4, 0.2),
    (5, 0.1),
)

DEFAULT_TYPE_DISTRIBUTION: Dict[str, float] = {
    QuestionType.SINGLE_CHOICE.value: 0.5,
    QuestionType.MULTIPLE_CHOICE.value: 0.3,
    QuestionType.TRUE_FALSE.value: 0.2,
}

VALID_QUESTION_TYPES = frozenset(QuestionType.values)
DIFFICULTY_LEVELS = range(1, 6)

# Column limits of Exam integer fields
MAX_INTEGER = 2147483647
MAX_SMALL_INTEGER = 32767
FIELD_LIMITS = {
    'level': MAX_SMALL_INTEGER,
}

_CAMEL_BOUNDARY = re.compile(r'(?<!^)(?=[A-Z])')


def _generation_setting(key: str, fallback):
    return getattr(django_settings, 'EXAM_GENERATION', {}).get(key, fallback)


@dataclass(frozen=True)
class ExamSettings:
    """Resolved exam settings."""

    total_score: int = 100
    question_count: int = 50
    level: int = 3
    exam_category: int = 101
    question_types: Tuple[str, ...] = DEFAULT_QUESTION_TYPES
    category_ids: Tuple[int, ...] = ()
    pass_score: Optional[int] = None
    duration: Optional[int] = None

    # Accepted and echoed back; not consumed by selection
    knowledge_coverage: int = 80
    difficulty: int = 3
    fairness_index: int = 85

    @property
    def effective_pass_score(self) -> int:
        if self.pass_score is not None:
            return self.pass_score
        ratio = _generation_setting('PASS_SCORE_RATIO', 0.6)
        return math.floor(self.total_score * ratio)

    @property
    def effective_duration(self) -> int:
        if self.duration is not None:
            return self.duration
        return _generation_setting('DEFAULT_DURATION_MINUTES', 120)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['question_types'] = list(self.question_types)
        data['category_ids'] = list(self.category_ids)
        return data


@dataclass(frozen=True)
class SelectionConfig:
    """
    Resolved selection config.

    Only difficulty_distribution drives selection. The remaining fields are
    validated and echoed back but have no effect on which questions are
    picked.
    """

    difficulty_distribution: Tuple[Tuple[int, float], ...] = DEFAULT_DIFFICULTY_DISTRIBUTION
    type_distribution: Dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_TYPE_DISTRIBUTION)
    )
    category_distribution: Dict[int, float] = field(default_factory=dict)
    avoid_recent_used: bool = True
    balance_knowledge: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            'difficulty_distribution': {
                str(level): fraction for level, fraction in self.difficulty_distribution
            },
            'type_distribution': dict(self.type_distribution),
            'category_distribution': {
                str(category): fraction
                for category, fraction in self.category_distribution.items()
            },
            'avoid_recent_used': self.avoid_recent_used,
            'balance_knowledge': self.balance_knowledge,
        }


def to_snake_case(key: str) -> str:
    """Convert a camelCase key to snake_case; snake_case keys pass through."""
    return _CAMEL_BOUNDARY.sub('_', key).lower()


def _normalize_keys(data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not data:
        return {}
    if not isinstance(data, dict):
        raise ValidationException({'non_field_errors': ['Expected an object.']})
    return {to_snake_case(str(key)): value for key, value in data.items()}


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_bounded_int(key: str, value, minimum: int = 0) -> bool:
    """Integer within the column range of the Exam field it is stored in."""
    return _is_int(value) and minimum <= value <= FIELD_LIMITS.get(key, MAX_INTEGER)


def _range_message(key: str, minimum: int) -> str:
    return f"Must be an integer between {minimum} and {FIELD_LIMITS.get(key, MAX_INTEGER)}."


def _is_fraction(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and value >= 0


class SettingsResolver:
    """Shallow merge of caller input over defaults, with shape validation."""

    SETTINGS_FIELDS = frozenset(ExamSettings.__dataclass_fields__)
    CONFIG_FIELDS = frozenset(SelectionConfig.__dataclass_fields__)

    def resolve_settings(self, caller_settings: Optional[Dict[str, Any]] = None) -> ExamSettings:
        """
        Resolve exam settings.

        Args:
            caller_settings: Partial settings, camelCase or snake_case keys

        Returns:
            Immutable ExamSettings

        Raises:
            ValidationException: If a supplied value is malformed
        """
        data = _normalize_keys(caller_settings)
        ignored = set(data) - self.SETTINGS_FIELDS
        if ignored:
            logger.debug(f"Ignoring unknown exam settings keys: {sorted(ignored)}")

        values = {key: value for key, value in data.items() if key in self.SETTINGS_FIELDS}
        errors: Dict[str, List[str]] = {}

        values.setdefault('exam_category', _generation_setting('DEFAULT_EXAM_CATEGORY', 101))

        for key in ('total_score', 'level', 'exam_category', 'knowledge_coverage',
                    'difficulty', 'fairness_index'):
            if key in values and not is_bounded_int(key, values[key]):
                errors[key] = [_range_message(key, 0)]

        if 'question_count' in values:
            if not is_bounded_int('question_count', values['question_count'], minimum=1):
                errors['question_count'] = [_range_message('question_count', 1)]

        for key in ('pass_score', 'duration'):
            value = values.get(key)
            if value is not None and not is_bounded_int(key, value):
                errors[key] = [_range_message(key, 0)]

        if 'question_types' in values:
            question_types = values['question_types'] or []
            if not isinstance(question_types, (list, tuple)):
                errors['question_types'] = ['Must be a list.']
            else:
                unknown = [t for t in question_types if t not in VALID_QUESTION_TYPES]
                if unknown:
                    errors['question_types'] = [f"Unknown question types: {unknown}"]
                else:
                    values['question_types'] = tuple(question_types)

        if 'category_ids' in values:
            category_ids = values['category_ids'] or []
            if not isinstance(category_ids, (list, tuple)) or not all(_is_int(c) for c in category_ids):
                errors['category_ids'] = ['Must be a list of integers.']
            else:
                values['category_ids'] = tuple(category_ids)

        if errors:
            raise ValidationException(errors, detail='Invalid exam settings')

        return ExamSettings(**values)

    def resolve_selection_config(
        self,
        caller_config: Optional[Dict[str, Any]] = None
    ) -> SelectionConfig:
        """
        Resolve selection config.

        A difficulty distribution given as a mapping is ordered by difficulty
        ascending; one given as a list of pairs keeps the caller's order.

        Args:
            caller_config: Partial selection config, camelCase or snake_case keys

        Returns:
            Immutable SelectionConfig

        Raises:
            ValidationException: If a supplied value is malformed
        """
        data = _normalize_keys(caller_config)
        values = {key: value for key, value in data.items() if key in self.CONFIG_FIELDS}
        errors: Dict[str, List[str]] = {}

        if 'difficulty_distribution' in values:
            try:
                values['difficulty_distribution'] = self._parse_difficulty_distribution(
                    values['difficulty_distribution']
                )
            except ValueError as e:
                errors['difficulty_distribution'] = [str(e)]

        if 'type_distribution' in values:
            distribution = values['type_distribution'] or {}
            if not isinstance(distribution, dict):
                errors['type_distribution'] = ['Must be an object.']
            elif any(t not in VALID_QUESTION_TYPES for t in distribution):
                errors['type_distribution'] = ['Unknown question type.']
            elif not all(_is_fraction(v) for v in distribution.values()):
                errors['type_distribution'] = ['Fractions must be non-negative numbers.']
            else:
                values['type_distribution'] = dict(distribution)

        if 'category_distribution' in values:
            distribution = values['category_distribution'] or {}
            try:
                values['category_distribution'] = self._parse_category_distribution(distribution)
            except ValueError as e:
                errors['category_distribution'] = [str(e)]

        for key in ('avoid_recent_used', 'balance_knowledge'):
            if key in values and not isinstance(values[key], bool):
                errors[key] = ['Must be a boolean.']

        if errors:
            raise ValidationException(errors, detail='Invalid selection config')

        return SelectionConfig(**values)

    @staticmethod
    def _parse_difficulty_distribution(raw) -> Tuple[Tuple[int, float], ...]:
        if isinstance(raw, dict):
            pairs = []
            for key, fraction in raw.items():
                try:
                    level = int(key)
                except (TypeError, ValueError):
                    raise ValueError(f"Invalid difficulty level: {key!r}")
                pairs.append((level, fraction))
            pairs.sort(key=lambda pair: pair[0])
        elif isinstance(raw, (list, tuple)):
            pairs = []
            for item in raw:
                if not isinstance(item, (list, tuple)) or len(item) != 2:
                    raise ValueError('Pairs must be [difficulty, fraction].')
                pairs.append((item[0], item[1]))
        else:
            raise ValueError('Must be an object or a list of pairs.')

        for level, fraction in pairs:
            if not _is_int(level) or level not in DIFFICULTY_LEVELS:
                raise ValueError(f"Invalid difficulty level: {level!r}")
            if not _is_fraction(fraction):
                raise ValueError(f"Invalid fraction for difficulty {level}: {fraction!r}")

        return tuple((level, float(fraction)) for level, fraction in pairs)

    @staticmethod
    def _parse_category_distribution(raw) -> Dict[int, float]:
        if not isinstance(raw, dict):
            raise ValueError('Must be an object.')

        parsed = {}
        for key, fraction in raw.items():
            try:
                category = int(key)
            except (TypeError, ValueError):
                raise ValueError(f"Invalid category id: {key!r}")
            if not _is_fraction(fraction):
                raise ValueError(f"Invalid fraction for category {category}: {fraction!r}")
            parsed[category] = float(fraction)
        return parsed
