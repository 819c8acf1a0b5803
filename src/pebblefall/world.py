import random

from esper import World
from .events.bus import EventBus
from pebblefall.components.chain_state import ChainState
from pebblefall.components.game_state import GameMode, GameState
from pebblefall.components.grid import Grid
from pebblefall.components.piece_queue import PieceQueue
from pebblefall.components.score import Score
from pebblefall.constants import GRID_COLS, GRID_ROWS


def create_world(
    event_bus: EventBus,
    initial_mode: GameMode = GameMode.IDLE,
    *,
    cols: int = GRID_COLS,
    rows: int = GRID_ROWS,
    rng: random.Random | None = None,
) -> World:
    world = World()
    setattr(world, "random", rng or random.Random())

    # Global game state resource.
    state_entity = world.create_entity()
    world.add_component(state_entity, GameState(mode=initial_mode))
    world.add_component(state_entity, Score())
    world.add_component(state_entity, ChainState())

    # Single grid entity; the falling piece lives on its own short-lived entity.
    world.create_entity(Grid(cols=cols, rows=rows))
    world.create_entity(PieceQueue())
    return world
