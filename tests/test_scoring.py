"""
Unit tests for target scoring.

Tests the selection logic:
- eligibility by saturation / lightness range
- weighted score calculation
- exclusivity across targets and tie-breaking
"""

import pytest

from prominence.services.colors.scoring import (
    dominant_population, generate_score, generate_scored_target,
    get_max_scored_swatch_for_target, select_swatches, should_be_scored_for_target,
)
from prominence.services.colors.swatch import Swatch
from prominence.services.colors.target import LIGHT_VIBRANT, MUTED, VIBRANT, Target

RED = Swatch((255, 0, 0), 10)
GREEN = Swatch((0, 255, 0), 10)
GRAY = Swatch((128, 128, 128), 40)


class TestEligibility:
    """Test range checks"""

    def test_inside_ranges(self):
        assert should_be_scored_for_target(RED, VIBRANT, set())
        assert should_be_scored_for_target(GRAY, MUTED, set())

    def test_outside_ranges(self):
        assert not should_be_scored_for_target(RED, LIGHT_VIBRANT, set()), "Lightness 0.5 is below 0.55"
        assert not should_be_scored_for_target(RED, MUTED, set()), "Saturation 1.0 is above 0.4"
        assert not should_be_scored_for_target(GRAY, VIBRANT, set())

    def test_bounds_are_inclusive(self):
        exact = Target(saturation=(1.0, 1.0, 1.0), lightness=(0.5, 0.5, 0.5))
        assert should_be_scored_for_target(RED, exact, set())

    def test_used_color_not_eligible(self):
        assert not should_be_scored_for_target(RED, VIBRANT, {(255, 0, 0)})


class TestScore:
    """Test score calculation"""

    def test_perfect_match(self):
        target = VIBRANT.normalize_weights()
        assert generate_score(RED, target, 10.0) == pytest.approx(1.0)

    def test_population_share(self):
        target = VIBRANT.normalize_weights()
        full = generate_score(RED, target, 10.0)
        half = generate_score(RED, target, 20.0)
        assert full - half == pytest.approx(0.24 * 0.5)

    def test_distance_penalty(self):
        target = Target(saturation=(0.0, 0.5, 1.0), lightness=(0.0, 0.5, 1.0), weights=(1.0, 0.0, 0.0))
        # Saturation 1.0 is 0.5 away from the target value
        assert generate_score(RED, target, 10.0) == pytest.approx(0.5)

    def test_dominant_population(self):
        assert dominant_population([RED, GRAY]) == 40.0
        assert dominant_population([]) == 1.0

    def test_zero_population_falls_back(self):
        empty = Swatch((200, 50, 50), 0)
        assert dominant_population([empty]) == 1.0
        assert generate_score(empty, VIBRANT.normalize_weights(), dominant_population([empty])) > 0.0


class TestSelection:
    """Test selecting swatches for targets"""

    def test_best_swatch_wins(self):
        dull_red = Swatch((180, 60, 60), 10)
        assert get_max_scored_swatch_for_target([dull_red, RED], VIBRANT.normalize_weights(), set()) == RED

    def test_first_seen_wins_ties(self):
        target = VIBRANT.normalize_weights()
        assert get_max_scored_swatch_for_target([RED, GREEN], target, set()) == RED
        assert get_max_scored_swatch_for_target([GREEN, RED], target, set()) == GREEN

    def test_nothing_eligible(self):
        assert get_max_scored_swatch_for_target([GRAY], VIBRANT, set()) is None
        assert get_max_scored_swatch_for_target([], VIBRANT, set()) is None

    def test_selection_claims_color(self):
        used = set()
        assert generate_scored_target([RED], VIBRANT, used) == RED
        assert used == {(255, 0, 0)}

    def test_non_exclusive_target_selects_nothing(self):
        used = set()
        target = Target(exclusive=False)
        assert generate_scored_target([RED], target, used) is None
        assert used == set()


class TestSelectSwatches:
    """Test assigning swatches across several targets"""

    def test_color_used_once(self):
        twin = Target.derived_from(VIBRANT)
        selected = select_swatches([RED], [VIBRANT, twin])

        assert selected[VIBRANT.id] == RED
        assert selected[twin.id] is None

    def test_earlier_target_claims_first(self):
        twin = Target.derived_from(VIBRANT)
        selected = select_swatches([RED], [twin, VIBRANT])

        assert selected[twin.id] == RED
        assert selected[VIBRANT.id] is None

    def test_runner_up_goes_to_next_target(self):
        twin = Target.derived_from(VIBRANT)
        selected = select_swatches([RED, GREEN], [VIBRANT, twin])

        assert selected[VIBRANT.id] == RED
        assert selected[twin.id] == GREEN

    def test_non_exclusive_does_not_claim(self):
        loose = Target.derived_from(VIBRANT, exclusive=False)
        selected = select_swatches([RED], [loose, VIBRANT])

        assert selected[loose.id] is None
        assert selected[VIBRANT.id] == RED

    def test_weights_normalized_before_scoring(self):
        # Unnormalized weights (0, 0, 5) still rank purely by population
        by_population = Target(weights=(0.0, 0.0, 5.0))
        selected = select_swatches([RED, GRAY], [by_population])
        assert selected[by_population.id] == GRAY

    def test_empty_swatches(self):
        selected = select_swatches([], [VIBRANT, MUTED])
        assert selected == {VIBRANT.id: None, MUTED.id: None}
