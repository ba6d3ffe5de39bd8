"""Game configuration values."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path

from grid_snake.policies import (
    DEFAULT_FIXED_GROWTH,
    DEFAULT_MAX_GROWTH,
    DEFAULT_RESTLESS_WINDOW,
    AgentVariant,
)
from grid_snake.snake import Direction

logger = logging.getLogger(__name__)

ARROW_KEYS: dict[str, Direction] = {
    "ArrowUp": Direction.UP,
    "ArrowDown": Direction.DOWN,
    "ArrowLeft": Direction.LEFT,
    "ArrowRight": Direction.RIGHT,
}

WASD_KEYS: dict[str, Direction] = {
    "w": Direction.UP,
    "a": Direction.LEFT,
    "s": Direction.DOWN,
    "d": Direction.RIGHT,
}


@dataclass(frozen=True)
class AgentConfig:
    """Per-snake settings.

    ``heading``, ``variant`` and the keymap values may be given as names
    (``"right"``, ``"restless"``), which is how they appear in JSON.
    """

    color: str = "yellow"
    keymap: Mapping[str, Direction] = field(
        default_factory=lambda: dict(ARROW_KEYS),
    )
    start: tuple[int, int] = (20, 20)
    heading: Direction = Direction.RIGHT
    variant: AgentVariant = AgentVariant.STANDARD

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", tuple(int(v) for v in self.start))
        if len(self.start) != 2:
            raise ValueError("start must be an (x, y) pair.")
        object.__setattr__(self, "heading", Direction.from_name(self.heading))
        object.__setattr__(
            self,
            "keymap",
            {str(k): Direction.from_name(v) for k, v in self.keymap.items()},
        )
        try:
            object.__setattr__(self, "variant", AgentVariant(self.variant))
        except ValueError:
            raise ValueError(f"Unknown agent variant: {self.variant!r}.") from None

    def to_dict(self) -> dict:
        return {
            "color": self.color,
            "keymap": {k: d.name.lower() for k, d in self.keymap.items()},
            "start": list(self.start),
            "heading": self.heading.name.lower(),
            "variant": self.variant.value,
        }


def _default_agents() -> tuple[AgentConfig, ...]:
    return (
        AgentConfig(
            color="yellow",
            keymap=dict(ARROW_KEYS),
            start=(20, 20),
            heading=Direction.RIGHT,
            variant=AgentVariant.RESTLESS,
        ),
    )


@dataclass(frozen=True)
class SimulationConfig:
    """Configuration for one game.

    Supports JSON serialization so a setup can be shared between runs.
    """

    # Board
    width: int = 30
    height: int = 30
    scale: int = 20

    # Food
    food_count: int = 3
    food_color: str = "green"

    # Timing
    tick_interval_ms: int = 400

    # Growth and heading policies
    fixed_growth: int = DEFAULT_FIXED_GROWTH
    max_growth: int = DEFAULT_MAX_GROWTH
    restless_window: int = DEFAULT_RESTLESS_WINDOW

    agents: tuple[AgentConfig, ...] = field(default_factory=_default_agents)
    seed: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "agents", tuple(self.agents))
        if self.width < 3 or self.height < 3:
            raise ValueError("width and height must each be at least 3.")
        if self.scale < 1:
            raise ValueError("scale must be at least 1.")
        if self.food_count < 1:
            raise ValueError("food_count must be at least 1.")
        if self.food_count >= (self.width - 1) * (self.height - 1):
            raise ValueError("food_count must be smaller than the playable area.")
        if self.tick_interval_ms < 0:
            raise ValueError("tick_interval_ms must be non-negative.")
        if self.fixed_growth < 0:
            raise ValueError("fixed_growth must be non-negative.")
        if self.max_growth < 1:
            raise ValueError("max_growth must be at least 1.")
        if self.restless_window < 1:
            raise ValueError("restless_window must be at least 1.")
        if not self.agents:
            raise ValueError("At least one agent must be configured.")

        starts: set[tuple[int, int]] = set()
        for i, agent in enumerate(self.agents):
            x, y = agent.start
            if not (0 < x < self.width and 0 < y < self.height):
                raise ValueError(
                    f"Start {agent.start} of agent {i} lies outside the "
                    f"playable area of a {self.width}x{self.height} grid."
                )
            if agent.start in starts:
                raise ValueError(f"Agent {i} shares its start cell with another agent.")
            starts.add(agent.start)

    def to_dict(self) -> dict:
        """Serialize to a plain, JSON-compatible dict."""
        return {
            "width": self.width,
            "height": self.height,
            "scale": self.scale,
            "food_count": self.food_count,
            "food_color": self.food_color,
            "tick_interval_ms": self.tick_interval_ms,
            "fixed_growth": self.fixed_growth,
            "max_growth": self.max_growth,
            "restless_window": self.restless_window,
            "agents": [a.to_dict() for a in self.agents],
            "seed": self.seed,
        }

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def from_dict(cls, raw: dict) -> SimulationConfig:
        raw = dict(raw)
        _reject_unknown_keys(cls, raw, "config")
        if "agents" in raw:
            agents = []
            for i, a in enumerate(raw["agents"]):
                _reject_unknown_keys(AgentConfig, a, f"agent {i}")
                agents.append(AgentConfig(**a))
            raw["agents"] = tuple(agents)
        return cls(**raw)

    @classmethod
    def load(cls, path: str | Path) -> SimulationConfig:
        """Load config from a JSON file."""
        return cls.from_dict(json.loads(Path(path).read_text()))


def _reject_unknown_keys(cls: type, raw: dict, where: str) -> None:
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown {where} key(s): {', '.join(unknown)}.")
