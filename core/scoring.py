# core/scoring.py
import math
from dataclasses import dataclass
from typing import Iterable, Optional

from core.errors import InvalidFormat

MIN_SCORE = 1
MAX_SCORE = 5


@dataclass(frozen=True)
class WorkScore:
    average: Optional[float]
    rounded: Optional[int]
    review_count: int


@dataclass(frozen=True)
class StarRating:
    filled: int
    unfilled: int
    not_reviewed: bool

    def render(self, filled_char: str = '★', unfilled_char: str = '☆') -> str:
        text = filled_char * self.filled + unfilled_char * self.unfilled
        return f"{text} (Not reviewed)" if self.not_reviewed else text


def round_half_up(value: float) -> int:
    """Round halves up: 2.5 gives 3"""
    return int(math.floor(value + 0.5))


def validate_score(score) -> int:
    """Check a review score is an integer 1..5"""
    if isinstance(score, bool) or not isinstance(score, int) or not MIN_SCORE <= score <= MAX_SCORE:
        raise InvalidFormat(f"Score must be an integer between {MIN_SCORE} and {MAX_SCORE}, got {score!r}")
    return score


def aggregate_scores(scores: Iterable[int]) -> WorkScore:
    """Average the review scores of a work's editions.

    No reviews gives average None, which is distinct from an average of 0.
    """
    values = [validate_score(score) for score in scores]
    if not values:
        return WorkScore(average=None, rounded=None, review_count=0)
    average = sum(values) / len(values)
    return WorkScore(average=average, rounded=round_half_up(average), review_count=len(values))


def score_to_stars(score: Optional[float], max_stars: int = MAX_SCORE) -> StarRating:
    """Split a nullable score into filled and unfilled star slots"""
    if score is None:
        return StarRating(filled=0, unfilled=max_stars, not_reviewed=True)
    filled = min(max(round_half_up(score), 0), max_stars)
    return StarRating(filled=filled, unfilled=max_stars - filled, not_reviewed=False)
