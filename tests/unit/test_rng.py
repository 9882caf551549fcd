"""Tests for the deterministic RNG helpers.

Tests cover:
- Determinism (same seed -> same result)
- Variety (different seeds -> different results)
- Edge cases and validation
- Property-based tests
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from skirmish.utils.rng import check_success, generate_seed, random_float, shuffled


class TestGenerateSeed:
    """Tests for generate_seed function."""

    def test_basic_seed_generation(self):
        seed = generate_seed("skirmish", 3, "critical:1:group_1:2")
        assert seed == "skirmish:3:critical:1:group_1:2"

    def test_different_parameters_produce_different_seeds(self):
        seeds = {
            generate_seed("a", 1, "x"),
            generate_seed("b", 1, "x"),
            generate_seed("a", 2, "x"),
            generate_seed("a", 1, "y"),
        }
        assert len(seeds) == 4

    def test_negative_tick_raises_error(self):
        with pytest.raises(ValueError, match="tick must be non-negative"):
            generate_seed("skirmish", -1, "attrition")

    def test_zero_tick_allowed(self):
        assert generate_seed("s", 0, "c") == "s:0:c"


class TestRandomFloat:
    """Tests for random_float function."""

    def test_same_seed_same_value(self):
        assert random_float("seed", 0.05, 0.1) == random_float("seed", 0.05, 0.1)

    def test_audit_structure(self):
        result = random_float("seed", 1.0, 2.0)
        assert set(result) == {"value", "min", "max", "seed"}
        assert result["seed"] == "seed"

    def test_invalid_range_raises_error(self):
        with pytest.raises(ValueError, match="cannot be greater"):
            random_float("seed", 2.0, 1.0)

    @given(
        seed=st.text(min_size=1),
        low=st.integers(min_value=-100, max_value=100),
        span=st.integers(min_value=0, max_value=100),
    )
    def test_value_within_bounds(self, seed, low, span):
        result = random_float(seed, low, low + span)
        assert low <= result["value"] <= low + span


class TestCheckSuccess:
    """Tests for check_success function."""

    def test_probability_zero_never_succeeds(self):
        assert all(not check_success(f"s{i}", 0.0)["success"] for i in range(50))

    def test_probability_one_always_succeeds(self):
        assert all(check_success(f"s{i}", 1.0)["success"] for i in range(50))

    def test_invalid_probability_raises_error(self):
        with pytest.raises(ValueError, match="probability must be between"):
            check_success("seed", 1.5)

    def test_success_matches_roll(self):
        result = check_success("seed", 0.4)
        assert result["success"] == (result["roll"] < 0.4)

    def test_different_seeds_vary(self):
        rolls = {check_success(f"seed-{i}", 0.5)["roll"] for i in range(20)}
        assert len(rolls) > 1

    @given(seed=st.text(min_size=1), probability=st.floats(min_value=0.0, max_value=1.0))
    def test_deterministic(self, seed, probability):
        assert check_success(seed, probability) == check_success(seed, probability)


class TestShuffled:
    """Tests for shuffled function."""

    def test_does_not_mutate_input(self):
        options = [1, 2, 3, 4, 5]
        shuffled("seed", options)
        assert options == [1, 2, 3, 4, 5]

    def test_empty_list(self):
        assert shuffled("seed", []) == []

    @given(seed=st.text(), options=st.lists(st.integers(), max_size=20))
    def test_is_permutation_and_deterministic(self, seed, options):
        first = shuffled(seed, options)
        assert sorted(first) == sorted(options)
        assert first == shuffled(seed, options)
