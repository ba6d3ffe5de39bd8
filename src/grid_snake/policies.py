"""Growth and heading policies that specialise snake behaviour.

A :class:`~grid_snake.snake.Snake` holds one growth policy (how much growth
debt a meal adds) and one heading policy (how the queued heading is turned
into the heading actually taken each tick). The named variants are just
preset pairs; policies can also be mixed freely.
"""

from __future__ import annotations

import enum
import logging
from collections import deque
from typing import TYPE_CHECKING, Protocol

import numpy as np

if TYPE_CHECKING:
    from grid_snake.snake import Direction, Snake

logger = logging.getLogger(__name__)

DEFAULT_FIXED_GROWTH = 2
DEFAULT_MAX_GROWTH = 6
DEFAULT_RESTLESS_WINDOW = 8


class GrowthPolicy(Protocol):
    def amount(self) -> int: ...


class HeadingPolicy(Protocol):
    def resolve(self, snake: Snake) -> Direction: ...


class FixedGrowth:
    """Grow by the same number of segments after every meal."""

    def __init__(self, amount: int = DEFAULT_FIXED_GROWTH) -> None:
        if amount < 0:
            raise ValueError("Growth amount must be non-negative.")
        self._amount = amount

    def amount(self) -> int:
        return self._amount


class RandomGrowth:
    """Grow by a uniformly random amount in ``[0, max_growth)``."""

    def __init__(
        self,
        max_growth: int = DEFAULT_MAX_GROWTH,
        rng: np.random.Generator | None = None,
    ) -> None:
        if max_growth < 1:
            raise ValueError("max_growth must be at least 1.")
        self.max_growth = max_growth
        self.rng = rng if rng is not None else np.random.default_rng()

    def amount(self) -> int:
        return int(self.rng.integers(0, self.max_growth))


class StraightHeading:
    """Adopt the queued heading unchanged."""

    def resolve(self, snake: Snake) -> Direction:
        return snake.pending_heading


class RestlessHeading:
    """Veer off at random after *window* identical headings in a row.

    Every resolved heading is recorded. Once the last *window* entries are
    all the same, the queued heading is swapped for a random direction
    perpendicular to it before being adopted.
    """

    def __init__(
        self,
        window: int = DEFAULT_RESTLESS_WINDOW,
        rng: np.random.Generator | None = None,
    ) -> None:
        if window < 1:
            raise ValueError("window must be at least 1.")
        self.window = window
        self.rng = rng if rng is not None else np.random.default_rng()
        self.history: deque[Direction] = deque(maxlen=window)

    def is_bored(self) -> bool:
        """Check whether the last *window* resolved headings are identical."""
        if len(self.history) < self.window:
            return False
        first = self.history[0]
        return all(h == first for h in self.history)

    def resolve(self, snake: Snake) -> Direction:
        heading = snake.pending_heading
        if self.is_bored():
            options = heading.perpendiculars()
            heading = options[int(self.rng.integers(0, 2))]
            logger.debug(
                "Restless snake veers from %s to %s.",
                snake.pending_heading.name, heading.name,
            )
        self.history.append(heading)
        return heading


class AgentVariant(enum.Enum):
    """Preset growth/heading policy combinations."""

    STANDARD = "standard"
    RANDOM_GROWTH = "random_growth"
    RESTLESS = "restless"


def build_policies(
    variant: AgentVariant,
    rng: np.random.Generator | None = None,
    fixed_growth: int = DEFAULT_FIXED_GROWTH,
    max_growth: int = DEFAULT_MAX_GROWTH,
    restless_window: int = DEFAULT_RESTLESS_WINDOW,
) -> tuple[GrowthPolicy, HeadingPolicy]:
    """Return fresh ``(growth, heading)`` policies for *variant*."""
    if variant == AgentVariant.RANDOM_GROWTH:
        return RandomGrowth(max_growth, rng), StraightHeading()
    if variant == AgentVariant.RESTLESS:
        return FixedGrowth(fixed_growth), RestlessHeading(restless_window, rng)
    return FixedGrowth(fixed_growth), StraightHeading()
