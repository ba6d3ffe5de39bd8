"""Snake agent representation and movement logic."""

from __future__ import annotations

import enum
import logging
from collections import deque
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from grid_snake.grid import Position

if TYPE_CHECKING:
    from grid_snake.food import Food
    from grid_snake.grid import Grid
    from grid_snake.policies import GrowthPolicy, HeadingPolicy

logger = logging.getLogger(__name__)


class Direction(enum.Enum):
    """Cardinal movement directions with (dx, dy) values."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @classmethod
    def from_name(cls, name: str | Direction) -> Direction:
        """Parse a case-insensitive direction name such as ``"up"``."""
        if isinstance(name, Direction):
            return name
        try:
            return cls[str(name).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown direction: {name!r}.") from None

    @property
    def is_horizontal(self) -> bool:
        return self in (Direction.LEFT, Direction.RIGHT)

    def is_perpendicular(self, other: Direction) -> bool:
        """Return True if *other* is a 90° turn away from this direction."""
        return self.is_horizontal != other.is_horizontal

    def perpendiculars(self) -> tuple[Direction, Direction]:
        """Return the two directions at 90° to this one."""
        if self.is_horizontal:
            return Direction.UP, Direction.DOWN
        return Direction.LEFT, Direction.RIGHT


class Snake:
    """A snake agent represented as an ordered deque of body positions.

    The head is ``body[0]``; the tail is ``body[-1]``. Turning is two-phase:
    :meth:`set_heading` only queues ``pending_heading``, which is adopted on
    the next :meth:`advance`. How much the snake grows per meal and how the
    pending heading is resolved are delegated to the growth and heading
    policies supplied at construction.
    """

    def __init__(
        self,
        start: tuple[int, int],
        heading: Direction,
        growth_policy: GrowthPolicy,
        heading_policy: HeadingPolicy,
        color: str = "yellow",
        keymap: Mapping[str, Direction] | None = None,
    ) -> None:
        if not isinstance(heading, Direction):
            raise ValueError(f"Heading must be a Direction, got {heading!r}.")
        self.body: deque[Position] = deque([Position(*start)])
        self.heading = heading
        self.pending_heading = heading
        self.growth_debt = 0
        self.growth_policy = growth_policy
        self.heading_policy = heading_policy
        self.color = color
        self.keymap: dict[str, Direction] = dict(keymap or {})
        self.alive = True

    @property
    def head(self) -> Position:
        """Return the head coordinate."""
        return self.body[0]

    def __len__(self) -> int:
        return len(self.body)

    def contains(self, pos: tuple[int, int]) -> bool:
        """Check whether any body segment sits on *pos*."""
        return Position(*pos) in self.body

    def crashed_into_wall(self, grid: Grid) -> bool:
        return grid.is_out_of_bounds(self.head)

    def crashed_into_self(self) -> bool:
        """Check whether the head overlaps any other body segment."""
        head = self.head
        return any(seg == head for seg in list(self.body)[1:])

    def set_heading(self, requested: object) -> bool:
        """Queue a 90° turn for the next tick.

        The request must be perpendicular to both the current heading and
        the heading already queued, so at most one turn is queued per tick.
        Returns whether the request was accepted.
        """
        if not isinstance(requested, Direction):
            logger.debug("Ignoring non-cardinal heading %r.", requested)
            return False
        if not (
            requested.is_perpendicular(self.heading)
            and requested.is_perpendicular(self.pending_heading)
        ):
            logger.debug(
                "Ignoring turn to %s while heading %s (pending %s).",
                requested.name, self.heading.name, self.pending_heading.name,
            )
            return False
        self.pending_heading = requested
        return True

    def handle_key(self, key: str) -> bool:
        """Translate a key identifier through the keymap and try to turn."""
        direction = self.keymap.get(key)
        if direction is None:
            return False
        return self.set_heading(direction)

    def resolve_heading(self) -> Direction:
        """Adopt the pending heading as chosen by the heading policy."""
        resolved = self.heading_policy.resolve(self)
        self.pending_heading = resolved
        self.heading = resolved
        return resolved

    def advance(self) -> Position | None:
        """Move the snake one cell in its resolved heading.

        Returns the vacated tail cell, or ``None`` if the snake grew.
        """
        x, y = self.head
        self.resolve_heading()
        dx, dy = self.heading.value
        self.body.appendleft(Position(x + dx, y + dy))
        if self.growth_debt == 0:
            return self.body.pop()
        self.growth_debt -= 1
        return None

    def grow(self) -> int:
        """Add the growth policy's amount to the growth debt."""
        amount = self.growth_policy.amount()
        self.growth_debt += amount
        return amount

    def consumes_food(self, food: Iterable[Food]) -> Food | None:
        """Return the food item under the head, growing if there is one."""
        head = self.head
        eaten = next((f for f in food if f.position == head), None)
        if eaten is not None:
            amount = self.grow()
            logger.debug("Snake ate food at %s, growing by %d.", head, amount)
        return eaten

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "body": [list(seg) for seg in self.body],
            "heading": self.heading.name.lower(),
            "pending_heading": self.pending_heading.name.lower(),
            "growth_debt": self.growth_debt,
            "color": self.color,
            "alive": self.alive,
        }
