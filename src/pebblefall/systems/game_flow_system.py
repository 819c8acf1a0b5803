"""High-level coordinator for game start, reset and game over transitions."""
from __future__ import annotations

import logging

from esper import World

from pebblefall.components.falling_piece import FallingPiece
from pebblefall.components.game_state import GameMode
from pebblefall.events.bus import (
    EventBus,
    EVENT_GAME_START_REQUEST,
    EVENT_GAME_STARTED,
    EVENT_PIECE_SPAWN_BLOCKED,
)
from pebblefall.utils.game_state import get_chain_state, get_grid, get_score, set_game_mode, trigger_game_over

logger = logging.getLogger(__name__)


class GameFlowSystem:
    """Central coordinator for the IDLE -> PLAYING -> GAME_OVER lifecycle."""

    def __init__(self, world: World, event_bus: EventBus) -> None:
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_GAME_START_REQUEST, self._on_start_request)
        self.event_bus.subscribe(EVENT_PIECE_SPAWN_BLOCKED, self._on_spawn_blocked)

    def _on_start_request(self, sender, **payload) -> None:
        self.new_game()

    def _on_spawn_blocked(self, sender, **payload) -> None:
        self.game_over(reason="spawn_blocked")

    def new_game(self) -> None:
        """Clear the board, score and any falling piece, then start playing."""
        for entity, _ in list(self.world.get_component(FallingPiece)):
            self.world.delete_entity(entity, immediate=True)
        get_grid(self.world).reset()
        get_score(self.world).reset()
        chain = get_chain_state(self.world)
        chain.active = False
        chain.depth = 0
        set_game_mode(self.world, self.event_bus, GameMode.PLAYING)
        logger.info("new game started")
        self.event_bus.emit(EVENT_GAME_STARTED)

    def game_over(self, *, reason: str) -> bool:
        if not trigger_game_over(self.world, self.event_bus, reason=reason):
            return False
        logger.info("game over (%s) with score %d", reason, get_score(self.world).total)
        return True
