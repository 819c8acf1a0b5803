from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from pebblefall.components.pebble import PebbleColor, Position


@dataclass(slots=True)
class Grid:
    """Committed board state stored on the grid entity.

    Cells are kept row-major (``cells[y][x]``) with the origin at the top-left
    and y growing downward. ``None`` marks an empty cell. Every accessor is
    bounds-checked: reads outside the board behave as empty cells and writes
    outside the board are rejected, never raised.
    """
    cols: int
    rows: int
    cells: List[List[Optional[PebbleColor]]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.cells = [[None] * self.cols for _ in range(self.rows)]

    def is_valid(self, pos: Position) -> bool:
        x, y = pos
        return 0 <= x < self.cols and 0 <= y < self.rows

    def reset(self) -> None:
        for row in self.cells:
            for x in range(self.cols):
                row[x] = None

    def get(self, pos: Position) -> Optional[PebbleColor]:
        if not self.is_valid(pos):
            return None
        x, y = pos
        return self.cells[y][x]

    def place(self, pos: Position, color: PebbleColor) -> bool:
        if not self.is_valid(pos):
            return False
        x, y = pos
        if self.cells[y][x] is not None:
            return False
        self.cells[y][x] = color
        return True

    def remove(self, pos: Position) -> bool:
        if not self.is_valid(pos):
            return False
        x, y = pos
        self.cells[y][x] = None
        return True

    def is_empty(self, pos: Position) -> bool:
        if not self.is_valid(pos):
            return False
        x, y = pos
        return self.cells[y][x] is None

    def highest_occupied(self, column: int) -> int:
        """Row of the top-most pebble in ``column``; ``rows`` when empty, -1 when invalid."""
        if not 0 <= column < self.cols:
            return -1
        for y in range(self.rows):
            if self.cells[y][column] is not None:
                return y
        return self.rows

    def occupied(self) -> Iterator[Tuple[Position, PebbleColor]]:
        for y, row in enumerate(self.cells):
            for x, color in enumerate(row):
                if color is not None:
                    yield (x, y), color

    def count(self) -> int:
        return sum(1 for _ in self.occupied())
