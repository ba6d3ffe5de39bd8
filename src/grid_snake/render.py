"""Renderers that receive the points drawn each tick."""

from __future__ import annotations

from typing import Protocol

import numpy as np

from grid_snake.grid import Position

# Characters used by FrameRenderer.to_text for well-known colors.
_COLOR_GLYPHS: dict[str, str] = {
    "green": "*",
    "yellow": "Y",
    "blue": "B",
    "red": "R",
}


class Renderer(Protocol):
    def clear(self) -> None: ...

    def draw_point(self, position: Position, color: str) -> None: ...


class NullRenderer:
    """Renderer that discards everything."""

    def clear(self) -> None:
        pass

    def draw_point(self, position: Position, color: str) -> None:
        pass


class FrameRenderer:
    """Rasterises points into a NumPy frame buffer.

    The buffer covers ``0..width`` by ``0..height`` inclusive so that the wall
    ring is visible. Each cell holds ``0`` for empty or ``1 + i`` where ``i``
    indexes :attr:`palette`, the colors in order of first use. Points outside
    the buffer are clipped.
    """

    def __init__(self, width: int, height: int, scale: int = 1) -> None:
        if scale < 1:
            raise ValueError("scale must be at least 1.")
        self.width = width
        self.height = height
        self.scale = scale
        self.palette: list[str] = []
        self.cells = np.zeros((height + 1, width + 1), dtype=np.int16)

    def clear(self) -> None:
        """Reset all cells to empty."""
        self.cells[:] = 0

    def draw_point(self, position: Position, color: str) -> None:
        x, y = position
        if not (0 <= x <= self.width and 0 <= y <= self.height):
            return
        if color not in self.palette:
            self.palette.append(color)
        self.cells[y, x] = self.palette.index(color) + 1

    def color_at(self, x: int, y: int) -> str | None:
        """Return the color drawn at a cell, or None if empty."""
        code = int(self.cells[y, x])
        return self.palette[code - 1] if code else None

    def to_pixels(self) -> np.ndarray:
        """Return the frame upscaled so each cell is ``scale``×``scale``."""
        block = np.ones((self.scale, self.scale), dtype=self.cells.dtype)
        return np.kron(self.cells, block)

    def to_text(self) -> str:
        """Render the frame as text, with ``#`` for the wall ring."""
        lines: list[str] = []
        for y in range(self.height + 1):
            row: list[str] = []
            for x in range(self.width + 1):
                color = self.color_at(x, y)
                if color is not None:
                    row.append(_COLOR_GLYPHS.get(color, color[:1].upper() or "?"))
                elif x in (0, self.width) or y in (0, self.height):
                    row.append("#")
                else:
                    row.append(".")
            lines.append("".join(row))
        return "\n".join(lines)
