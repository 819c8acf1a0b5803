from __future__ import annotations

import logging
import random

from esper import World

from pebblefall.components.piece_queue import ColorPair
from pebblefall.constants import PREVIEW_COUNT, SPAWN_DELAY, SPAWN_OFFSET, SPAWN_PIVOT
from pebblefall.events.bus import (
    EventBus,
    EVENT_TICK,
    EVENT_GAME_STARTED,
    EVENT_SPAWN_READY,
    EVENT_PIECE_SPAWN_REQUEST,
    EVENT_NEXT_PIECES_CHANGED,
)
from pebblefall.factories.pieces import PieceGenerator
from pebblefall.utils.game_state import get_piece_queue, is_playing

logger = logging.getLogger(__name__)


class SpawnSystem:
    """Feeds new pieces: keeps the preview queue full and paces spawns on ticks."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        generator: PieceGenerator | None = None,
        rng: random.Random | None = None,
        preview_count: int = PREVIEW_COUNT,
        spawn_delay: float = SPAWN_DELAY,
        spawn_pivot: tuple[int, int] = SPAWN_PIVOT,
        spawn_offset: tuple[int, int] = SPAWN_OFFSET,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.generator = generator or PieceGenerator(rng or getattr(world, "random", None))
        self.preview_count = max(0, int(preview_count))
        self.spawn_delay = max(0.0, float(spawn_delay))
        self.spawn_pivot = spawn_pivot
        self.spawn_offset = spawn_offset
        # Seconds left before the pending spawn fires; None when nothing is pending.
        self._pending: float | None = None
        self.event_bus.subscribe(EVENT_GAME_STARTED, self.on_game_started)
        self.event_bus.subscribe(EVENT_SPAWN_READY, self.on_spawn_ready)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    @property
    def spawn_pending(self) -> bool:
        return self._pending is not None

    def on_game_started(self, sender, **kwargs):
        queue = get_piece_queue(self.world)
        queue.upcoming.clear()
        self._pending = None
        self._fill_queue()
        self.spawn_next()

    def on_spawn_ready(self, sender, **kwargs):
        if not is_playing(self.world):
            return
        if self.spawn_delay <= 0.0:
            self.spawn_next()
            return
        self._pending = self.spawn_delay

    def on_tick(self, sender, **kwargs):
        if self._pending is None:
            return
        if not is_playing(self.world):
            self._pending = None
            return
        self._pending -= kwargs.get('dt', 1/60)
        if self._pending <= 0.0:
            self._pending = None
            self.spawn_next()

    def upcoming(self) -> list[ColorPair]:
        return list(get_piece_queue(self.world).upcoming)

    def spawn_next(self) -> None:
        """Pop the next pair from the preview queue and request it as the active piece."""
        if not is_playing(self.world):
            return
        queue = get_piece_queue(self.world)
        self._fill_queue(extra=1)
        pivot_color, rotating_color = queue.upcoming.pop(0)
        self.event_bus.emit(EVENT_NEXT_PIECES_CHANGED, upcoming=list(queue.upcoming))
        self.event_bus.emit(
            EVENT_PIECE_SPAWN_REQUEST,
            pivot_color=pivot_color,
            rotating_color=rotating_color,
            pivot=self.spawn_pivot,
            offset=self.spawn_offset,
        )

    def _fill_queue(self, *, extra: int = 0) -> None:
        queue = get_piece_queue(self.world)
        while len(queue.upcoming) < self.preview_count + extra:
            queue.upcoming.append(self.generator.next_pair())
