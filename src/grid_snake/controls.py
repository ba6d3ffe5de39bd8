"""Keyboard input plumbing."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from grid_snake.engine import Simulation

logger = logging.getLogger(__name__)


class KeyInput:
    """Delivers key identifiers to a simulation until the game ends.

    Attaching registers a game-over listener that detaches the source again,
    after which further presses are dropped.
    """

    def __init__(self) -> None:
        self.simulation: Simulation | None = None

    @property
    def attached(self) -> bool:
        return self.simulation is not None

    def attach(self, simulation: Simulation) -> None:
        if self.simulation is not None:
            raise RuntimeError("KeyInput is already attached to a simulation.")
        self.simulation = simulation
        simulation.add_game_over_listener(self._on_game_over)

    def detach(self) -> None:
        if self.simulation is None:
            return
        self.simulation.remove_game_over_listener(self._on_game_over)
        self.simulation = None
        logger.debug("Key input detached.")

    def _on_game_over(self, simulation: Simulation) -> None:
        self.detach()

    def press(self, key: str) -> bool:
        """Forward a key press. Returns False if no simulation is listening."""
        if self.simulation is None:
            return False
        self.simulation.handle_key(key)
        return True


def parse_key_script(script: str) -> dict[int, list[str]]:
    """Parse ``"3:ArrowUp,7:ArrowLeft"`` into ``{3: ["ArrowUp"], 7: [...]}``.

    The number is the tick count at which the key is pressed, i.e. before
    the tick with that index runs.
    """
    schedule: dict[int, list[str]] = {}
    for entry in script.split(","):
        entry = entry.strip()
        if not entry:
            continue
        tick, sep, key = entry.partition(":")
        if not sep or not key.strip():
            raise ValueError(f"Malformed key script entry: {entry!r}.")
        try:
            at = int(tick)
        except ValueError:
            raise ValueError(f"Malformed key script entry: {entry!r}.") from None
        if at < 0:
            raise ValueError(f"Negative tick in key script entry: {entry!r}.")
        schedule.setdefault(at, []).append(key.strip())
    return schedule
