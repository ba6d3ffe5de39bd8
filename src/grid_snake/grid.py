"""Grid geometry for the snake simulation."""

from __future__ import annotations

from typing import NamedTuple

import numpy as np


class Position(NamedTuple):
    """An immutable ``(x, y)`` cell coordinate.

    ``x`` grows to the right and ``y`` grows downwards, so ``(0, 0)`` is the
    top-left corner of the board.
    """

    x: int
    y: int


class Grid:
    """Bounded coordinate space of the board.

    The outer ring (``x`` or ``y`` equal to ``0``, ``width`` or ``height``)
    counts as wall, so the playable interior is ``1..width-1`` by
    ``1..height-1``.
    """

    def __init__(self, width: int = 30, height: int = 30) -> None:
        if width < 3 or height < 3:
            raise ValueError("Grid dimensions must be at least 3×3.")
        self.width = width
        self.height = height

    def is_out_of_bounds(self, pos: Position) -> bool:
        """Check whether a coordinate lies on or beyond the wall ring."""
        x, y = pos
        return x <= 0 or x >= self.width or y <= 0 or y >= self.height

    def random_position(self, rng: np.random.Generator) -> Position:
        """Sample a uniformly random cell from the playable interior."""
        x = int(rng.integers(1, self.width))
        y = int(rng.integers(1, self.height))
        return Position(x, y)

    @property
    def interior_size(self) -> int:
        return (self.width - 1) * (self.height - 1)

    def to_dict(self) -> dict:
        """Serialize grid dimensions to a dictionary."""
        return {"width": self.width, "height": self.height}
