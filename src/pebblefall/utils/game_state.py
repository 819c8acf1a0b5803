from __future__ import annotations

from esper import World

from pebblefall.components.chain_state import ChainState
from pebblefall.components.game_state import GameMode, GameState
from pebblefall.components.grid import Grid
from pebblefall.components.piece_queue import PieceQueue
from pebblefall.components.score import Score
from pebblefall.events.bus import EVENT_GAME_MODE_CHANGED, EVENT_GAME_OVER, EventBus


def get_game_state(world: World) -> GameState:
    """Return the shared GameState component, creating it if absent."""
    for _, state in world.get_component(GameState):
        return state
    state = GameState()
    world.create_entity(state)
    return state


def get_chain_state(world: World) -> ChainState:
    """Return the shared ChainState component, creating it if absent."""
    for _, state in world.get_component(ChainState):
        return state
    state = ChainState()
    world.create_entity(state)
    return state


def get_piece_queue(world: World) -> PieceQueue:
    for _, queue in world.get_component(PieceQueue):
        return queue
    queue = PieceQueue()
    world.create_entity(queue)
    return queue


def get_grid(world: World) -> Grid:
    for _, grid in world.get_component(Grid):
        return grid
    raise RuntimeError("Grid component not found")


def get_score(world: World) -> Score:
    for _, score in world.get_component(Score):
        return score
    raise RuntimeError("Score component not found")


def is_playing(world: World) -> bool:
    return get_game_state(world).mode == GameMode.PLAYING


def set_game_mode(world: World, event_bus: EventBus, mode: GameMode) -> bool:
    """Update the global game mode; emit a change event and return True when it differs."""

    state = get_game_state(world)
    previous_mode = state.mode
    if previous_mode == mode:
        return False
    state.mode = mode
    event_bus.emit(
        EVENT_GAME_MODE_CHANGED,
        previous_mode=previous_mode,
        new_mode=mode,
    )
    return True


def trigger_game_over(world: World, event_bus: EventBus, *, reason: str) -> bool:
    """Enter the terminal GAME_OVER mode once; later calls are no-ops returning False."""

    if not set_game_mode(world, event_bus, GameMode.GAME_OVER):
        return False
    event_bus.emit(EVENT_GAME_OVER, score=get_score(world).total, reason=reason)
    return True
