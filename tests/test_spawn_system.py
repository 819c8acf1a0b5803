import random

import pytest

from pebblefall.components.falling_piece import FallingPiece
from pebblefall.components.game_state import GameMode
from pebblefall.components.pebble import CONCRETE_COLORS, PebbleColor
from pebblefall.events.bus import (
    EVENT_GAME_STARTED,
    EVENT_NEXT_PIECES_CHANGED,
    EVENT_PIECE_SPAWNED,
    EVENT_SPAWN_READY,
)
from pebblefall.factories.pieces import PieceGenerator
from pebblefall.systems.piece_system import PieceSystem
from pebblefall.systems.spawn_system import SpawnSystem
from pebblefall.utils.game_state import get_game_state
from tests.helpers import drive, make_world, payloads, record


def _setup(**kwargs):
    bus, world = make_world()
    pieces = PieceSystem(world, bus, fall_speed=0.0)
    spawner = SpawnSystem(world, bus, generator=PieceGenerator(random.Random(3)), **kwargs)
    return bus, world, pieces, spawner


def test_game_start_spawns_first_pair_and_fills_preview():
    bus, world, pieces, spawner = _setup()
    seen = record(bus, EVENT_NEXT_PIECES_CHANGED, EVENT_PIECE_SPAWNED)
    reference = PieceGenerator(random.Random(3))
    expected = [reference.next_pair() for _ in range(3)]

    bus.emit(EVENT_GAME_STARTED)

    _, piece = pieces.active_piece()
    assert (piece.pivot_color, piece.rotating_color) == expected[0]
    assert piece.positions() == [(2, 0), (3, 0)]
    assert spawner.upcoming() == expected[1:]
    assert payloads(seen, EVENT_NEXT_PIECES_CHANGED) == [{"upcoming": expected[1:]}]


def test_queue_advances_one_pair_per_spawn():
    bus, world, pieces, spawner = _setup(preview_count=1)
    bus.emit(EVENT_GAME_STARTED)
    first_preview = spawner.upcoming()
    assert len(first_preview) == 1

    pieces.discard()
    bus.emit(EVENT_SPAWN_READY)

    _, piece = pieces.active_piece()
    assert (piece.pivot_color, piece.rotating_color) == first_preview[0]
    assert len(spawner.upcoming()) == 1


def test_spawn_delay_counts_down_on_ticks():
    bus, world, pieces, spawner = _setup(spawn_delay=0.5)
    bus.emit(EVENT_GAME_STARTED)
    pieces.discard()

    bus.emit(EVENT_SPAWN_READY)
    assert spawner.spawn_pending
    drive(bus, 2, dt=0.2)
    assert pieces.active_piece() is None

    drive(bus, 1, dt=0.2)
    assert not spawner.spawn_pending
    assert pieces.active_piece() is not None


def test_pending_spawn_cancelled_when_game_stops():
    bus, world, pieces, spawner = _setup(spawn_delay=0.5)
    bus.emit(EVENT_GAME_STARTED)
    pieces.discard()
    bus.emit(EVENT_SPAWN_READY)

    get_game_state(world).mode = GameMode.GAME_OVER
    drive(bus, 5, dt=0.2)

    assert not spawner.spawn_pending
    assert world.get_component(FallingPiece) == []


def test_spawn_ready_ignored_outside_play():
    bus, world = make_world(mode=GameMode.IDLE)
    spawner = SpawnSystem(world, bus)
    bus.emit(EVENT_SPAWN_READY)
    assert not spawner.spawn_pending
    assert spawner.upcoming() == []


def test_generator_is_deterministic_for_a_seed():
    first = PieceGenerator(random.Random(11))
    second = PieceGenerator(random.Random(11))
    assert [first.next_pair() for _ in range(20)] == [second.next_pair() for _ in range(20)]


def test_generator_wildcard_chance_bounds():
    always = PieceGenerator(random.Random(1), wildcard_chance=1.0)
    never = PieceGenerator(random.Random(1), wildcard_chance=0.0)

    assert all(always.next_color() is PebbleColor.GLOWING for _ in range(50))
    drawn = {never.next_color() for _ in range(200)}
    assert PebbleColor.GLOWING not in drawn
    assert drawn <= set(CONCRETE_COLORS)


def test_generator_respects_restricted_palette():
    generator = PieceGenerator(
        random.Random(5),
        colors=[PebbleColor.RED, PebbleColor.BLUE, PebbleColor.GLOWING],
        wildcard_chance=0.0,
    )
    assert {generator.next_color() for _ in range(100)} == {PebbleColor.RED, PebbleColor.BLUE}


def test_generator_requires_a_concrete_color():
    with pytest.raises(ValueError):
        PieceGenerator(random.Random(), colors=[PebbleColor.GLOWING])
