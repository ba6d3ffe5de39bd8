"""Fixed-tick game loop composing grid, snakes, and food."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable

import numpy as np

from grid_snake.config import SimulationConfig
from grid_snake.food import FoodSupply
from grid_snake.grid import Grid
from grid_snake.policies import build_policies
from grid_snake.render import NullRenderer, Renderer
from grid_snake.snake import Snake

logger = logging.getLogger(__name__)


class SimulationState(enum.Enum):
    """Lifecycle states of a simulation."""

    RUNNING = "running"
    ENDING = "ending"
    STOPPED = "stopped"


class Simulation:
    """Tick-based snake simulation for one or more snakes.

    The simulation owns the grid, the snakes and the food supply. Each call
    to :meth:`tick` performs, in this order:

    1. crash check for every live snake against the state left by the
       previous tick; any crash ends the game and nothing else runs;
    2. clear the renderer;
    3. draw the current food;
    4. advance each snake, 5. draw its body, 6. let it eat;
    7. top the food back up.

    Because the crash check looks at the previous tick, a snake that has just
    moved into a wall is still drawn there once before the game stops.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        renderer: Renderer | None = None,
        snakes: list[Snake] | None = None,
    ) -> None:
        cfg = config or SimulationConfig()
        self.config = cfg
        self.rng = np.random.default_rng(cfg.seed)
        self.grid = Grid(width=cfg.width, height=cfg.height)
        self.renderer: Renderer = renderer if renderer is not None else NullRenderer()

        self.snakes: list[Snake] = (
            snakes if snakes is not None else self._spawn_snakes(cfg)
        )
        if not self.snakes:
            raise ValueError("A simulation needs at least one snake.")

        self.food = FoodSupply(self.grid, target=cfg.food_count, rng=self.rng)
        self.food.replenish(self.snakes)

        self.tick_count = 0
        self.state = SimulationState.RUNNING
        self._game_over_listeners: list[Callable[[Simulation], None]] = []

    def _spawn_snakes(self, cfg: SimulationConfig) -> list[Snake]:
        """Build one snake per configured agent."""
        snakes: list[Snake] = []
        for agent in cfg.agents:
            growth, heading = build_policies(
                agent.variant,
                rng=self.rng,
                fixed_growth=cfg.fixed_growth,
                max_growth=cfg.max_growth,
                restless_window=cfg.restless_window,
            )
            snakes.append(
                Snake(
                    agent.start,
                    agent.heading,
                    growth_policy=growth,
                    heading_policy=heading,
                    color=agent.color,
                    keymap=agent.keymap,
                )
            )
        return snakes

    @property
    def running(self) -> bool:
        return self.state == SimulationState.RUNNING

    def add_game_over_listener(self, callback: Callable[[Simulation], None]) -> None:
        """Register a callable invoked once when the game stops."""
        self._game_over_listeners.append(callback)

    def remove_game_over_listener(self, callback: Callable[[Simulation], None]) -> None:
        if callback in self._game_over_listeners:
            self._game_over_listeners.remove(callback)

    def handle_key(self, key: str) -> None:
        """Forward a key press to every live snake while the game runs."""
        if not self.running:
            return
        for snake in self.snakes:
            if snake.alive:
                snake.handle_key(key)

    def tick(self) -> SimulationState:
        """Advance the game by one tick and return the resulting state."""
        if not self.running:
            return self.state

        crashed = [
            i for i, s in enumerate(self.snakes)
            if s.alive and (s.crashed_into_wall(self.grid) or s.crashed_into_self())
        ]
        if crashed:
            self._end_game(crashed)
            return self.state

        self.renderer.clear()
        for item in self.food:
            self.renderer.draw_point(item.position, self.config.food_color)

        for snake in self.snakes:
            if not snake.alive:
                continue
            snake.advance()
            for seg in snake.body:
                self.renderer.draw_point(seg, snake.color)
            eaten = snake.consumes_food(self.food)
            if eaten is not None:
                self.food.remove(eaten)

        self.food.replenish(self.snakes)
        self.tick_count += 1
        return self.state

    def _end_game(self, crashed: list[int]) -> None:
        """Run the RUNNING -> ENDING -> STOPPED transition."""
        self.state = SimulationState.ENDING
        for i in crashed:
            self.snakes[i].alive = False
            logger.info(
                "Snake %d crashed at %s after %d ticks (length %d).",
                i, self.snakes[i].head, self.tick_count, len(self.snakes[i]),
            )
        for callback in list(self._game_over_listeners):
            callback(self)
        self.state = SimulationState.STOPPED
        logger.info("Game over at tick %d.", self.tick_count)

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        return {
            "tick": self.tick_count,
            "state": self.state.value,
            "grid": self.grid.to_dict(),
            "snakes": [s.to_dict() for s in self.snakes],
            "food": self.food.to_dict(),
        }
