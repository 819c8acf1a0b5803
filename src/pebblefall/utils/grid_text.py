from __future__ import annotations

from typing import Dict, Sequence

from pebblefall.components.grid import Grid
from pebblefall.components.pebble import PebbleColor

EMPTY_CHAR = "."

COLOR_CHARS: Dict[PebbleColor, str] = {
    PebbleColor.RED: "R",
    PebbleColor.GREEN: "G",
    PebbleColor.BLUE: "B",
    PebbleColor.YELLOW: "Y",
    PebbleColor.PURPLE: "P",
    PebbleColor.GLOWING: "*",
}
CHAR_COLORS: Dict[str, PebbleColor] = {v: k for k, v in COLOR_CHARS.items()}


def format_grid(grid: Grid) -> str:
    """Render the grid as one text line per row, top row first."""
    lines = []
    for row in grid.cells:
        lines.append("".join(COLOR_CHARS[c] if c is not None else EMPTY_CHAR for c in row))
    return "\n".join(lines)


def load_rows(grid: Grid, rows: Sequence[str]) -> None:
    """Reset ``grid`` and fill it from text rows aligned to the bottom edge.

    Each row uses the characters of ``COLOR_CHARS``; anything else is empty.
    Rows longer than the grid are rejected.
    """
    if len(rows) > grid.rows:
        raise ValueError(f"{len(rows)} rows do not fit a grid of height {grid.rows}")
    grid.reset()
    top = grid.rows - len(rows)
    for offset, line in enumerate(rows):
        if len(line) > grid.cols:
            raise ValueError(f"row {line!r} is wider than {grid.cols} columns")
        for x, char in enumerate(line):
            color = CHAR_COLORS.get(char)
            if color is not None:
                grid.place((x, top + offset), color)
