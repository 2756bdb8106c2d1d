# tests/test_scoring.py
import pytest

from core.errors import InvalidFormat
from core.scoring import StarRating, aggregate_scores, round_half_up, score_to_stars, validate_score

def test_aggregate_scores():
    score = aggregate_scores([3, 4, 5])
    assert score.average == 4.0
    assert score.rounded == 4
    assert score.review_count == 3

def test_aggregate_without_reviews():
    score = aggregate_scores([])
    assert score.average is None
    assert score.rounded is None
    assert score.review_count == 0

def test_aggregate_rejects_out_of_range():
    with pytest.raises(InvalidFormat):
        aggregate_scores([4, 7])

@pytest.mark.parametrize("value,expected", [(2.5, 3), (3.5, 4), (3.49, 3), (4.0, 4), (0.5, 1)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected

@pytest.mark.parametrize("score,filled", [(1, 1), (3.6, 4), (4.5, 5), (5, 5)])
def test_score_to_stars(score, filled):
    stars = score_to_stars(score)
    assert stars.filled == filled
    assert stars.unfilled == 5 - filled
    assert not stars.not_reviewed

def test_unscored_is_not_reviewed():
    assert score_to_stars(None) == StarRating(filled=0, unfilled=5, not_reviewed=True)

def test_render():
    assert score_to_stars(3).render() == '★★★☆☆'
    assert score_to_stars(None).render(filled_char='*', unfilled_char='-') == '----- (Not reviewed)'

@pytest.mark.parametrize("score", [0, 6, -1, 2.0, True, '3', None])
def test_validate_score_rejects(score):
    with pytest.raises(InvalidFormat):
        validate_score(score)
