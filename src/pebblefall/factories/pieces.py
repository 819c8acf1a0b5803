from __future__ import annotations

import random
from typing import Sequence

from pebblefall.components.pebble import CONCRETE_COLORS, PebbleColor
from pebblefall.components.piece_queue import ColorPair
from pebblefall.constants import WILDCARD_CHANCE


class PieceGenerator:
    """Draws color pairs for new pieces from an explicit random source."""

    def __init__(
        self,
        rng: random.Random | None = None,
        *,
        colors: Sequence[PebbleColor] = CONCRETE_COLORS,
        wildcard_chance: float = WILDCARD_CHANCE,
    ) -> None:
        palette = [color for color in colors if not color.is_wildcard]
        if not palette:
            raise ValueError("PieceGenerator needs at least one concrete color")
        self.rng = rng or random.Random()
        self.colors = palette
        self.wildcard_chance = max(0.0, min(1.0, float(wildcard_chance)))

    def next_color(self) -> PebbleColor:
        if self.wildcard_chance > 0.0 and self.rng.random() < self.wildcard_chance:
            return PebbleColor.GLOWING
        return self.rng.choice(self.colors)

    def next_pair(self) -> ColorPair:
        return self.next_color(), self.next_color()
