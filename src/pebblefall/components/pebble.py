from enum import Enum
from typing import Tuple

Position = Tuple[int, int]


class PebbleColor(Enum):
    """Closed palette of pebble colors; GLOWING is the wildcard."""
    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    YELLOW = "yellow"
    PURPLE = "purple"
    GLOWING = "glowing"

    @property
    def is_wildcard(self) -> bool:
        return self is PebbleColor.GLOWING


CONCRETE_COLORS: Tuple[PebbleColor, ...] = (
    PebbleColor.RED,
    PebbleColor.GREEN,
    PebbleColor.BLUE,
    PebbleColor.YELLOW,
    PebbleColor.PURPLE,
)
