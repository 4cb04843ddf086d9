"""Applicant score and waitlist position.

Score:
    base + per_interest * len(interests)
         + household_bonus  (household_size > household_threshold)
         + content_bonus    (content uploaded)

Position (lower is better):
    round(max_position - min(score, max_score) / max_score * (max_position - min_position))
    clamped to [min_position, max_position]

The defaults give a maximum intake score of 50 + 9 * 10 + 15 + 20 = 175
for the nine selectable interests, which maps to position 1.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

from ambassador.config import Settings, get_settings


@dataclass(frozen=True)
class ScoringParams:
    """Tunable constants for scoring and position mapping."""

    base: int = 50
    per_interest: int = 10
    household_threshold: int = 2
    household_bonus: int = 15
    content_bonus: int = 20
    max_score: int = 175
    min_position: int = 1
    max_position: int = 100

    def __post_init__(self) -> None:
        if self.max_score <= 0:
            msg = "max_score must be positive"
            raise ValueError(msg)
        if self.min_position < 1:
            msg = "min_position must be at least 1"
            raise ValueError(msg)
        if self.max_position < self.min_position:
            msg = "max_position must not be below min_position"
            raise ValueError(msg)
        if min(self.base, self.per_interest, self.household_bonus, self.content_bonus) < 0:
            msg = "score increments must be non-negative"
            raise ValueError(msg)


DEFAULT_PARAMS = ScoringParams()


def scoring_params_from_settings(settings: Settings | None = None) -> ScoringParams:
    """Build ScoringParams from AMB_SCORE_* / AMB_WAITLIST_* settings."""
    s = settings or get_settings()
    return ScoringParams(
        base=s.score_base,
        per_interest=s.score_per_interest,
        household_threshold=s.score_household_threshold,
        household_bonus=s.score_household_bonus,
        content_bonus=s.score_content_bonus,
        max_score=s.waitlist_max_score,
        min_position=s.waitlist_min_position,
        max_position=s.waitlist_max_position,
    )


def calculate_applicant_score(
    interests: Iterable[str],
    household_size: int,
    content_uploaded: bool,
    params: ScoringParams | None = None,
) -> int:
    """Score an applicant from their profile choices. Pure and deterministic."""
    p = params or DEFAULT_PARAMS
    if household_size < 1:
        msg = "household_size must be at least 1"
        raise ValueError(msg)

    score = p.base
    score += len(set(interests)) * p.per_interest
    if household_size > p.household_threshold:
        score += p.household_bonus
    if content_uploaded:
        score += p.content_bonus
    return score


def score_to_waitlist_position(score: int, params: ScoringParams | None = None) -> int:
    """Map a score (or point total) to a waitlist position. Higher score, lower position."""
    p = params or DEFAULT_PARAMS
    clamped = min(max(score, 0), p.max_score)
    normalized = clamped / p.max_score
    raw = p.max_position - normalized * (p.max_position - p.min_position)
    # Round half up; round() would use banker's rounding
    position = math.floor(raw + 0.5)
    return max(p.min_position, min(p.max_position, position))
