from pebblefall.components.falling_piece import FallingPiece
from pebblefall.components.game_state import GameMode
from pebblefall.components.pebble import PebbleColor
from pebblefall.events.bus import (
    EVENT_GAME_MODE_CHANGED,
    EVENT_GAME_OVER,
    EVENT_GAME_START_REQUEST,
    EVENT_GAME_STARTED,
)
from pebblefall.systems.game_flow_system import GameFlowSystem
from pebblefall.systems.piece_system import PieceSystem
from pebblefall.utils.game_state import get_chain_state, get_game_state, get_grid, get_score
from tests.helpers import load_rows, make_world, payloads, record


def test_start_request_moves_idle_to_playing():
    bus, world = make_world(mode=GameMode.IDLE)
    seen = record(bus, EVENT_GAME_MODE_CHANGED, EVENT_GAME_STARTED)
    GameFlowSystem(world, bus)

    bus.emit(EVENT_GAME_START_REQUEST)

    assert get_game_state(world).mode == GameMode.PLAYING
    assert [name for name, _ in seen] == [EVENT_GAME_MODE_CHANGED, EVENT_GAME_STARTED]
    assert payloads(seen, EVENT_GAME_MODE_CHANGED)[0] == {
        "previous_mode": GameMode.IDLE,
        "new_mode": GameMode.PLAYING,
    }


def test_new_game_resets_board_score_and_piece():
    bus, world = make_world()
    flow = GameFlowSystem(world, bus)
    pieces = PieceSystem(world, bus)
    load_rows(get_grid(world), ["RGBY..", "PPRR.."])
    score = get_score(world)
    score.total = 420
    score.best_chain = 3
    get_chain_state(world).depth = 2
    pieces.spawn(PebbleColor.RED, PebbleColor.BLUE)
    get_game_state(world).mode = GameMode.GAME_OVER

    flow.new_game()

    assert get_grid(world).count() == 0
    assert score.total == 0
    assert score.best_chain == 0
    assert get_chain_state(world).depth == 0
    assert world.get_component(FallingPiece) == []
    assert get_game_state(world).mode == GameMode.PLAYING


def test_blocked_spawn_ends_game_once():
    bus, world = make_world()
    seen = record(bus, EVENT_GAME_OVER)
    GameFlowSystem(world, bus)
    pieces = PieceSystem(world, bus)
    get_grid(world).place((2, 0), PebbleColor.RED)
    get_score(world).total = 70

    assert not pieces.spawn(PebbleColor.RED, PebbleColor.BLUE)
    assert get_game_state(world).mode == GameMode.GAME_OVER
    assert not pieces.spawn(PebbleColor.RED, PebbleColor.BLUE)

    assert payloads(seen, EVENT_GAME_OVER) == [{"score": 70, "reason": "spawn_blocked"}]


def test_game_over_is_terminal_until_new_game():
    bus, world = make_world()
    flow = GameFlowSystem(world, bus)

    assert flow.game_over(reason="test")
    assert not flow.game_over(reason="test")

    flow.new_game()
    assert get_game_state(world).mode == GameMode.PLAYING
