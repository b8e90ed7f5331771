"""Tests for the random source."""

from __future__ import annotations

from collections import Counter

import pytest

from tombcrawl.core.exceptions import DiceRollError
from tombcrawl.engine.dice import DiceRoller


class TestDiceRoller:
    """Tests for the DiceRoller class."""

    def test_randint_inclusive(self, dice_roller: DiceRoller) -> None:
        """Test randint can return both bounds and nothing outside them."""
        values = {dice_roller.randint(-1, 1) for _ in range(200)}

        assert values == {-1, 0, 1}

    def test_randrange_exclusive(self, dice_roller: DiceRoller) -> None:
        """Test randrange never returns its upper bound."""
        values = {dice_roller.randrange(3, 6) for _ in range(200)}

        assert values == {3, 4, 5}

    def test_empty_ranges_rejected(self, dice_roller: DiceRoller) -> None:
        """Test empty ranges raise DiceRollError."""
        with pytest.raises(DiceRollError):
            dice_roller.randint(2, 1)
        with pytest.raises(DiceRollError):
            dice_roller.randrange(4, 4)

    def test_seed_reproducible(self) -> None:
        """Test the same seed gives the same sequence."""
        first = DiceRoller(seed=7)
        second = DiceRoller(seed=7)

        assert [first.randint(0, 100) for _ in range(20)] == [
            second.randint(0, 100) for _ in range(20)
        ]
        assert first.seed == 7

    def test_coin_flip_both_sides(self, dice_roller: DiceRoller) -> None:
        """Test coin flips land on both sides."""
        assert {dice_roller.coin_flip() for _ in range(100)} == {True, False}


class TestWeightedChoice:
    """Tests for weighted selection."""

    def test_zero_weight_never_chosen(self, dice_roller: DiceRoller) -> None:
        """Test entries with weight 0 are excluded."""
        picks = {dice_roller.weighted_choice([("orc", 80), ("troll", 0)]) for _ in range(200)}

        assert picks == {"orc"}

    def test_weights_shape_distribution(self, dice_roller: DiceRoller) -> None:
        """Test heavier entries are chosen more often."""
        counts = Counter(
            dice_roller.weighted_choice([("a", 90), ("b", 10)]) for _ in range(2000)
        )

        assert counts["a"] > counts["b"] > 0

    def test_all_zero_rejected(self, dice_roller: DiceRoller) -> None:
        """Test a table with no positive weight raises DiceRollError."""
        with pytest.raises(DiceRollError):
            dice_roller.weighted_choice([("a", 0), ("b", 0)])
