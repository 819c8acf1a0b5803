from dataclasses import dataclass, field
from typing import List, Tuple

from pebblefall.components.pebble import PebbleColor

ColorPair = Tuple[PebbleColor, PebbleColor]


@dataclass(slots=True)
class PieceQueue:
    """Upcoming (pivot, rotating) color pairs, next piece first."""
    upcoming: List[ColorPair] = field(default_factory=list)
