"""Random source for map generation and AI behavior.

All randomness in a session flows through a single DiceRoller so a
seeded session replays identically.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TypeVar

from tombcrawl.core.exceptions import DiceRollError
from tombcrawl.core.logging import get_logger


logger = get_logger(__name__)

T = TypeVar("T")


class DiceRoller:
    """Seedable random number source.

    Example:
        >>> roller = DiceRoller(seed=42)
        >>> roller.randint(-1, 1) in (-1, 0, 1)
        True
    """

    def __init__(self, *, seed: int | None = None) -> None:
        """Initialize the dice roller.

        Args:
            seed: Optional random seed for reproducible rolls.
        """
        self._seed = seed
        self._rng = random.Random(seed)
        logger.info("DiceRoller initialized", seed=seed)

    @property
    def seed(self) -> int | None:
        return self._seed

    def randint(self, low: int, high: int) -> int:
        """Draw an integer from the inclusive range [low, high]."""
        if low > high:
            raise DiceRollError(
                "Empty range for random draw", details={"low": low, "high": high}
            )
        return self._rng.randint(low, high)

    def randrange(self, low: int, high: int) -> int:
        """Draw an integer from the half-open range [low, high)."""
        if low >= high:
            raise DiceRollError(
                "Empty range for random draw", details={"low": low, "high": high}
            )
        return self._rng.randrange(low, high)

    def coin_flip(self) -> bool:
        return self._rng.random() < 0.5

    def weighted_choice(self, options: Sequence[tuple[T, int]]) -> T:
        """Pick one value with probability proportional to its weight.

        Args:
            options: (value, weight) pairs. Entries with a weight of zero or
                less are never picked.

        Returns:
            The chosen value.

        Raises:
            DiceRollError: If no entry has a positive weight.
        """
        enabled = [(value, weight) for value, weight in options if weight > 0]
        total = sum(weight for _, weight in enabled)
        if total <= 0:
            raise DiceRollError(
                "Weighted choice needs at least one positive weight",
                details={"options": len(options)},
            )

        roll = self._rng.randrange(total)
        for value, weight in enabled:
            if roll < weight:
                return value
            roll -= weight
        # Unreachable: roll < total
        return enabled[-1][0]


__all__ = [
    "DiceRoller",
]
