# services/exam-service/src/apps/core/services/selector.py
"""
Stratified Selector

Picks a difficulty-balanced subset of a candidate pool.

Algorithm:
    1. For each (difficulty, fraction) pair in order, take up to
       floor(N * fraction) random unused questions of exactly that difficulty.
    2. Backfill from the remaining unused questions, any difficulty, until
       N questions are picked or the pool runs out.
    3. Shuffle the whole result and truncate to N.
"""

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


def quota_for(fraction: float, target_count: int) -> int:
    """Number of questions a difficulty bucket asks for before backfill."""
    return math.floor(target_count * fraction)


@dataclass
class SelectionResult:
    """Outcome of one selection run."""

    questions: List = field(default_factory=list)
    # Questions taken per difficulty before backfill
    bucket_counts: Dict[int, int] = field(default_factory=dict)
    backfilled: int = 0
    target_count: int = 0

    @property
    def is_short(self) -> bool:
        return len(self.questions) < self.target_count

    def __len__(self):
        return len(self.questions)

    def __bool__(self):
        return bool(self.questions)


class StratifiedSelector:
    """
    Quota-balanced random selection over a candidate pool.

    Pool items need ``id`` and ``difficulty`` attributes. A short result is not
    an error here; callers decide what an empty selection means.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def select(
        self,
        pool: Sequence,
        target_count: int,
        difficulty_distribution: Sequence[Tuple[int, float]],
    ) -> SelectionResult:
        """
        Select up to target_count questions from the pool.

        Args:
            pool: Candidate questions
            target_count: Desired number of questions (N)
            difficulty_distribution: Ordered (difficulty, fraction) pairs

        Returns:
            SelectionResult with at most target_count distinct questions
        """
        result = SelectionResult(target_count=target_count)
        if not pool or target_count <= 0:
            return result

        selected = []
        used = set()

        for difficulty, fraction in difficulty_distribution:
            quota = quota_for(fraction, target_count)
            bucket = [
                q for q in pool
                if q.id not in used and q.difficulty == difficulty
            ]
            self.rng.shuffle(bucket)
            taken = bucket[:quota]
            for question in taken:
                used.add(question.id)
            selected.extend(taken)
            result.bucket_counts[difficulty] = result.bucket_counts.get(difficulty, 0) + len(taken)

            if len(taken) < quota:
                logger.debug(
                    f"Difficulty {difficulty} short: wanted {quota}, found {len(taken)}"
                )

        if len(selected) < target_count:
            remaining = [q for q in pool if q.id not in used]
            self.rng.shuffle(remaining)
            fill = remaining[:target_count - len(selected)]
            selected.extend(fill)
            result.backfilled = len(fill)

        self.rng.shuffle(selected)
        result.questions = selected[:target_count]

        logger.debug(
            f"Selected {len(result.questions)}/{target_count} questions "
            f"(buckets={result.bucket_counts}, backfilled={result.backfilled})"
        )
        return result
