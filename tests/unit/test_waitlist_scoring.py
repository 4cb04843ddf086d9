"""Unit tests for applicant scoring and the score -> waitlist position map."""

import pytest

from ambassador.config import Settings
from ambassador.scoring.waitlist import (
    DEFAULT_PARAMS,
    ScoringParams,
    calculate_applicant_score,
    score_to_waitlist_position,
    scoring_params_from_settings,
)

ALL_INTERESTS = ["food", "music", "sports", "fashion", "gaming", "travel", "fitness", "art", "tech"]


class TestCalculateApplicantScore:
    """Test calculate_applicant_score."""

    def test_minimum_profile_scores_base(self):
        assert calculate_applicant_score([], 1, False) == 50

    def test_full_example(self):
        """Three interests, household of four, content uploaded."""
        assert calculate_applicant_score(["food", "music", "sports"], 4, True) == 115

    def test_each_interest_adds_ten(self):
        assert calculate_applicant_score(["food"], 1, False) == 60
        assert calculate_applicant_score(["food", "music"], 1, False) == 70

    def test_duplicate_interests_count_once(self):
        assert calculate_applicant_score(["food", "food", "food"], 1, False) == 60

    def test_household_bonus_needs_more_than_two(self):
        assert calculate_applicant_score([], 2, False) == 50
        assert calculate_applicant_score([], 3, False) == 65

    def test_content_bonus(self):
        assert calculate_applicant_score([], 1, True) == 70

    def test_maximum_score(self):
        assert calculate_applicant_score(ALL_INTERESTS, 5, True) == DEFAULT_PARAMS.max_score == 175

    def test_accepts_any_iterable(self):
        assert calculate_applicant_score(iter(("a", "b")), 1, False) == 70

    def test_household_size_below_one_rejected(self):
        with pytest.raises(ValueError, match="household_size"):
            calculate_applicant_score([], 0, False)

    def test_never_negative_and_monotone(self):
        previous = -1
        for n in range(len(ALL_INTERESTS) + 1):
            without = calculate_applicant_score(ALL_INTERESTS[:n], 1, False)
            with_content = calculate_applicant_score(ALL_INTERESTS[:n], 1, True)
            assert without >= 0
            assert with_content > without
            assert without > previous
            previous = without

    def test_custom_params(self):
        params = ScoringParams(base=0, per_interest=1, household_bonus=0, content_bonus=0)
        assert calculate_applicant_score(["a", "b", "c"], 9, True, params) == 3


class TestScoreToWaitlistPosition:
    """Test score_to_waitlist_position."""

    @pytest.mark.parametrize(
        ("score", "position"),
        [
            (0, 100),
            (40, 77),
            (50, 72),
            (55, 69),
            (70, 60),
            (115, 35),
            (175, 1),
        ],
    )
    def test_known_values(self, score, position):
        assert score_to_waitlist_position(score) == position

    def test_scores_above_max_clamp_to_front(self):
        assert score_to_waitlist_position(200) == 1
        assert score_to_waitlist_position(10_000) == 1

    def test_negative_scores_clamp_to_back(self):
        assert score_to_waitlist_position(-20) == 100

    def test_never_increases_as_score_grows(self):
        positions = [score_to_waitlist_position(s) for s in range(0, 260)]
        assert all(a >= b for a, b in zip(positions, positions[1:]))

    def test_always_within_bounds(self):
        for s in range(-50, 400, 7):
            assert 1 <= score_to_waitlist_position(s) <= 100

    def test_rounds_half_up(self):
        """score 1 of 2 lands exactly on 50.5, which must round to 51."""
        params = ScoringParams(max_score=2)
        assert score_to_waitlist_position(1, params) == 51

    def test_deterministic(self):
        assert {score_to_waitlist_position(115) for _ in range(50)} == {35}

    def test_single_slot_range(self):
        params = ScoringParams(min_position=7, max_position=7)
        assert score_to_waitlist_position(0, params) == 7
        assert score_to_waitlist_position(175, params) == 7


class TestScoringParams:
    """Test parameter validation and settings wiring."""

    def test_zero_max_score_rejected(self):
        with pytest.raises(ValueError, match="max_score"):
            ScoringParams(max_score=0)

    def test_min_position_below_one_rejected(self):
        with pytest.raises(ValueError, match="min_position"):
            ScoringParams(min_position=0)

    def test_inverted_position_range_rejected(self):
        with pytest.raises(ValueError, match="max_position"):
            ScoringParams(min_position=10, max_position=5)

    def test_negative_increment_rejected(self):
        with pytest.raises(ValueError):
            ScoringParams(per_interest=-1)

    def test_defaults_match_settings_defaults(self):
        assert scoring_params_from_settings(Settings()) == DEFAULT_PARAMS

    def test_settings_override(self):
        params = scoring_params_from_settings(Settings(score_base=60, waitlist_max_position=500))
        assert params.base == 60
        assert params.max_position == 500
