"""Grid Snake — fixed-tick multiplayer snake simulation."""

from grid_snake.config import ARROW_KEYS, WASD_KEYS, AgentConfig, SimulationConfig
from grid_snake.controls import KeyInput, parse_key_script
from grid_snake.engine import Simulation, SimulationState
from grid_snake.food import Food, FoodSupply
from grid_snake.grid import Grid, Position
from grid_snake.policies import (
    AgentVariant,
    FixedGrowth,
    RandomGrowth,
    RestlessHeading,
    StraightHeading,
    build_policies,
)
from grid_snake.render import FrameRenderer, NullRenderer, Renderer
from grid_snake.scheduler import IntervalScheduler
from grid_snake.snake import Direction, Snake

__all__ = [
    "ARROW_KEYS",
    "AgentConfig",
    "AgentVariant",
    "Direction",
    "FixedGrowth",
    "Food",
    "FoodSupply",
    "FrameRenderer",
    "Grid",
    "IntervalScheduler",
    "KeyInput",
    "NullRenderer",
    "Position",
    "RandomGrowth",
    "Renderer",
    "RestlessHeading",
    "Simulation",
    "SimulationConfig",
    "SimulationState",
    "Snake",
    "StraightHeading",
    "WASD_KEYS",
    "build_policies",
    "parse_key_script",
]
