import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, Tuple

from pebblefall.components.pebble import PebbleColor, Position

# Guards ceil() against float drift right at a row boundary.
ROW_EPSILON = 1e-6


class PiecePhase(Enum):
    FALLING = auto()
    DROPPING = auto()


class MoveDirection(Enum):
    LEFT = "left"
    RIGHT = "right"

    @property
    def dx(self) -> int:
        return -1 if self is MoveDirection.LEFT else 1


class RotateDirection(Enum):
    CLOCKWISE = "cw"
    COUNTER_CLOCKWISE = "ccw"


UNIT_OFFSETS: Tuple[Tuple[int, int], ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))


def rotate_offset(offset: Tuple[int, int], direction: RotateDirection) -> Tuple[int, int]:
    """Rotate the rotating cell's offset from the pivot by 90 degrees."""
    dx, dy = offset
    if direction is RotateDirection.CLOCKWISE:
        return (-dy, dx)
    return (dy, -dx)


@dataclass(slots=True)
class FallingPiece:
    """The player-controlled pair while it is still falling.

    ``y`` is the pivot's continuous row coordinate; the cells occupy the lowest
    grid row they touch. ``col`` is the authoritative pivot column, while
    ``display_x`` trails it for smooth horizontal slides.
    """
    pivot_color: PebbleColor
    rotating_color: PebbleColor
    col: int
    y: float
    offset: Tuple[int, int] = (1, 0)
    phase: PiecePhase = PiecePhase.FALLING
    display_x: Optional[float] = None

    def __post_init__(self) -> None:
        if self.display_x is None:
            self.display_x = float(self.col)

    @property
    def row(self) -> int:
        return math.ceil(self.y - ROW_EPSILON)

    @property
    def pivot_position(self) -> Position:
        return (self.col, self.row)

    @property
    def rotating_position(self) -> Position:
        return (self.col + self.offset[0], self.row + self.offset[1])

    def positions(self) -> List[Position]:
        return [self.pivot_position, self.rotating_position]

    def cells(self) -> List[Tuple[Position, PebbleColor]]:
        return [
            (self.pivot_position, self.pivot_color),
            (self.rotating_position, self.rotating_color),
        ]
