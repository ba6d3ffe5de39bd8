"""Food items and their replenishment."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from grid_snake.grid import Position

if TYPE_CHECKING:
    from grid_snake.grid import Grid
    from grid_snake.snake import Snake

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Food:
    """A single consumable cell."""

    position: Position


class FoodSupply:
    """Keeps the board stocked with *target* food items.

    Placement uses rejection sampling over the playable interior with a
    seeded NumPy RNG, skipping any cell occupied by a snake. Items are not
    checked against each other, so two may share a cell.
    """

    def __init__(
        self,
        grid: Grid,
        target: int = 3,
        rng: np.random.Generator | None = None,
    ) -> None:
        if target < 1:
            raise ValueError("Food target must be at least 1.")
        if target >= grid.interior_size:
            raise ValueError("Food target must be smaller than the playable area.")
        self.grid = grid
        self.target = target
        self.rng = rng if rng is not None else np.random.default_rng()
        self.items: list[Food] = []

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Food]:
        return iter(self.items)

    @property
    def positions(self) -> list[Position]:
        return [f.position for f in self.items]

    def replenish(self, snakes: Iterable[Snake]) -> list[Food]:
        """Top the supply up to the target, avoiding snake bodies.

        Returns the newly placed items.
        """
        snakes = list(snakes)
        added: list[Food] = []
        while len(self.items) < self.target:
            pos = self.grid.random_position(self.rng)
            if any(s.contains(pos) for s in snakes):
                continue
            item = Food(pos)
            self.items.append(item)
            added.append(item)
        if added:
            logger.debug("Placed %d food item(s): %s", len(added), added)
        return added

    def remove(self, item: Food) -> bool:
        """Remove one food item. Returns True if it was present."""
        for i, existing in enumerate(self.items):
            if existing is item:
                del self.items[i]
                return True
        return False

    def to_dict(self) -> dict:
        """Serialize food state to a dictionary."""
        return {
            "positions": [list(p) for p in self.positions],
            "target": self.target,
        }
