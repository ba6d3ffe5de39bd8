"""Tests for the Simulation module."""

import json
from collections import deque

import pytest

from grid_snake.config import WASD_KEYS, AgentConfig, SimulationConfig
from grid_snake.engine import Simulation, SimulationState
from grid_snake.food import Food
from grid_snake.grid import Position
from grid_snake.policies import (
    AgentVariant,
    FixedGrowth,
    RestlessHeading,
    StraightHeading,
)
from grid_snake.snake import Direction, Snake


class RecordingRenderer:
    def __init__(self):
        self.calls = []

    def clear(self):
        self.calls.append(("clear",))

    def draw_point(self, position, color):
        self.calls.append(("draw", tuple(position), color))


def _config(*agents, **kwargs):
    if not agents:
        agents = (AgentConfig(start=(20, 20), heading=Direction.RIGHT),)
    return SimulationConfig(agents=agents, seed=kwargs.pop("seed", 0), **kwargs)


class TestSimulationInit:
    def test_default_init(self):
        sim = Simulation(SimulationConfig(seed=0))
        assert sim.state == SimulationState.RUNNING
        assert sim.tick_count == 0
        assert len(sim.snakes) == 1
        assert len(sim.food) == 3

    def test_default_snake_is_restless(self):
        sim = Simulation(SimulationConfig(seed=0))
        snake = sim.snakes[0]
        assert snake.head == (20, 20)
        assert snake.color == "yellow"
        assert isinstance(snake.heading_policy, RestlessHeading)

    def test_snakes_built_from_agent_configs(self):
        sim = Simulation(_config(
            AgentConfig(color="yellow", start=(20, 20)),
            AgentConfig(
                color="blue", keymap=WASD_KEYS, start=(10, 10),
                variant=AgentVariant.RANDOM_GROWTH,
            ),
        ))
        assert [s.color for s in sim.snakes] == ["yellow", "blue"]
        assert sim.snakes[1].keymap == WASD_KEYS

    def test_initial_food_avoids_snakes(self):
        sim = Simulation(_config())
        for pos in sim.food.positions:
            assert not sim.snakes[0].contains(pos)

    def test_explicit_snakes_required(self):
        with pytest.raises(ValueError, match="at least one snake"):
            Simulation(_config(), snakes=[])


class TestTick:
    def test_basic_tick(self):
        sim = Simulation(_config())
        state = sim.tick()
        assert state == SimulationState.RUNNING
        assert sim.snakes[0].head == (21, 20)
        assert len(sim.snakes[0]) == 1
        assert sim.tick_count == 1

    def test_render_order(self):
        renderer = RecordingRenderer()
        sim = Simulation(_config(), renderer=renderer)
        food_before = [tuple(p) for p in sim.food.positions]
        sim.tick()
        assert renderer.calls[0] == ("clear",)
        food_calls = renderer.calls[1:1 + len(food_before)]
        assert food_calls == [("draw", p, "green") for p in food_before]
        assert renderer.calls[-1] == ("draw", (21, 20), "yellow")

    def test_direction_change_applies_next_tick(self):
        sim = Simulation(_config())
        sim.handle_key("ArrowUp")
        assert sim.snakes[0].heading == Direction.RIGHT
        sim.tick()
        assert sim.snakes[0].head == (20, 19)

    def test_food_is_replenished(self):
        sim = Simulation(_config(food_count=1))
        sim.food.items = [Food(Position(21, 20))]
        sim.tick()
        assert len(sim.food) == 1
        assert Position(21, 20) not in sim.food.positions

    def test_eating_grows_snake(self):
        sim = Simulation(_config(food_count=1))
        sim.food.items = [Food(Position(21, 20))]
        sim.tick()
        snake = sim.snakes[0]
        assert snake.growth_debt == 2
        assert len(snake) == 1
        sim.food.items = [Food(Position(5, 5))]
        sim.tick()
        assert len(snake) == 2
        assert snake.growth_debt == 1

    def test_body_length_never_below_one(self):
        sim = Simulation(_config(seed=4))
        for _ in range(8):
            sim.tick()
            assert len(sim.snakes[0]) >= 1


class TestWallCollision:
    def test_death_frame_is_rendered_before_stop(self):
        renderer = RecordingRenderer()
        sim = Simulation(
            _config(AgentConfig(start=(1, 15), heading=Direction.LEFT)),
            renderer=renderer,
        )
        sim.tick()
        snake = sim.snakes[0]
        assert snake.head == (0, 15)
        assert sim.state == SimulationState.RUNNING
        assert ("draw", (0, 15), "yellow") in renderer.calls

        renderer.calls.clear()
        assert sim.tick() == SimulationState.STOPPED
        assert renderer.calls == []
        assert snake.head == (0, 15)
        assert not snake.alive
        assert sim.tick_count == 1

    def test_no_advance_after_stop(self):
        sim = Simulation(_config(AgentConfig(start=(1, 15), heading=Direction.LEFT)))
        sim.tick()
        sim.tick()
        sim.tick()
        assert sim.snakes[0].head == (0, 15)
        assert sim.tick_count == 1
        assert sim.state == SimulationState.STOPPED

    def test_runs_until_wall(self):
        sim = Simulation(_config(AgentConfig(start=(20, 20), heading=Direction.RIGHT)))
        for _ in range(20):
            sim.tick()
            if not sim.running:
                break
        assert sim.state == SimulationState.STOPPED
        assert sim.snakes[0].head == (30, 20)


class TestSelfCollision:
    def test_dies_on_self_collision(self):
        snake = Snake((10, 10), Direction.RIGHT, FixedGrowth(0), StraightHeading())
        snake.body = deque(
            Position(x, 10) for x in (10, 9, 8, 7, 6)
        )
        sim = Simulation(_config(), snakes=[snake])
        for turn in (Direction.UP, Direction.LEFT, Direction.DOWN):
            assert snake.set_heading(turn)
            sim.tick()
        assert snake.head == (9, 10)
        assert snake.crashed_into_self()
        assert sim.running
        sim.tick()
        assert sim.state == SimulationState.STOPPED


class TestGameOverListeners:
    def test_listener_called_once(self):
        sim = Simulation(_config(AgentConfig(start=(1, 15), heading=Direction.LEFT)))
        seen = []
        sim.add_game_over_listener(lambda s: seen.append(s.state))
        for _ in range(4):
            sim.tick()
        assert seen == [SimulationState.ENDING]

    def test_removed_listener_not_called(self):
        sim = Simulation(_config(AgentConfig(start=(1, 15), heading=Direction.LEFT)))
        seen = []

        def listener(s):
            seen.append(s)

        sim.add_game_over_listener(listener)
        sim.remove_game_over_listener(listener)
        sim.tick()
        sim.tick()
        assert seen == []

    def test_keys_ignored_after_stop(self):
        sim = Simulation(_config(AgentConfig(start=(1, 15), heading=Direction.LEFT)))
        sim.tick()
        sim.tick()
        sim.handle_key("ArrowUp")
        assert sim.snakes[0].pending_heading == Direction.LEFT


class TestMultipleSnakes:
    def test_snakes_move_independently(self):
        sim = Simulation(_config(
            AgentConfig(start=(20, 20), heading=Direction.RIGHT),
            AgentConfig(start=(10, 10), heading=Direction.DOWN, keymap=WASD_KEYS),
        ))
        sim.handle_key("a")
        sim.tick()
        assert sim.snakes[0].head == (21, 20)
        assert sim.snakes[1].head == (9, 10)

    def test_one_crash_stops_game(self):
        sim = Simulation(_config(
            AgentConfig(start=(1, 15), heading=Direction.LEFT),
            AgentConfig(start=(10, 10), heading=Direction.DOWN, keymap=WASD_KEYS),
        ))
        sim.tick()
        sim.tick()
        assert sim.state == SimulationState.STOPPED
        assert not sim.snakes[0].alive
        assert sim.snakes[1].alive
        assert sim.snakes[1].head == (10, 11)


class TestSerialization:
    def test_state_is_json_serializable(self):
        sim = Simulation(_config())
        sim.tick()
        serialized = json.dumps(sim.get_state())
        assert isinstance(serialized, str)

    def test_state_structure(self):
        state = Simulation(_config()).get_state()
        assert state["tick"] == 0
        assert state["state"] == "running"
        assert state["grid"] == {"width": 30, "height": 30}
        assert len(state["snakes"]) == 1
        assert len(state["food"]["positions"]) == 3


class TestDeterminism:
    def test_same_seed_same_outcome(self):
        assert self._run(seed=123) == self._run(seed=123)

    def test_different_seeds_differ(self):
        assert self._run(seed=1)["food"] != self._run(seed=2)["food"]

    @staticmethod
    def _run(seed):
        sim = Simulation(SimulationConfig(
            agents=(AgentConfig(start=(15, 15), variant=AgentVariant.RESTLESS),),
            seed=seed,
        ))
        for _ in range(12):
            sim.tick()
        return sim.get_state()
