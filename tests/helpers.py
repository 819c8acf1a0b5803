from __future__ import annotations

from typing import Dict, List, Sequence

from esper import World

from pebblefall.components.game_state import GameMode
from pebblefall.events.bus import EVENT_TICK, EventBus
from pebblefall.utils.grid_text import load_rows
from pebblefall.world import create_world


def make_world(
    *,
    cols: int = 6,
    rows: int = 12,
    mode: GameMode = GameMode.PLAYING,
) -> tuple[EventBus, World]:
    """Fresh bus + world already in ``mode`` so systems accept commands."""

    bus = EventBus()
    world = create_world(bus, mode, cols=cols, rows=rows)
    return bus, world


def record(bus: EventBus, *names: str) -> List[tuple[str, Dict]]:
    """Subscribe to each event name and collect (name, payload) pairs in emit order."""

    seen: List[tuple[str, Dict]] = []
    for name in names:
        bus.subscribe(name, lambda sender, _name=name, **payload: seen.append((_name, payload)))
    return seen


def payloads(seen: Sequence[tuple[str, Dict]], name: str) -> List[Dict]:
    return [payload for event, payload in seen if event == name]


def drive(bus: EventBus, ticks: int, dt: float = 0.1) -> None:
    for _ in range(ticks):
        bus.emit(EVENT_TICK, dt=dt)


__all__ = ["drive", "load_rows", "make_world", "payloads", "record"]
