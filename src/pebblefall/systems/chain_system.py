from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List

from esper import World

from pebblefall.components.pebble import Position
from pebblefall.constants import CHAIN_BONUS, GAME_OVER_COLUMNS, MATCH_THRESHOLD, PEBBLE_SCORE
from pebblefall.events.bus import (
    EventBus,
    EVENT_PIECE_LANDED,
    EVENT_PIECE_SETTLED,
    EVENT_MATCH_FOUND,
    EVENT_MATCH_CLEARED,
    EVENT_GRAVITY_APPLIED,
    EVENT_CHAIN_COMPLETE,
    EVENT_SCORE_CHANGED,
    EVENT_SPAWN_READY,
)
from pebblefall.systems.grid_ops import apply_gravity, find_all_matches, remove_positions, spawn_blocked
from pebblefall.utils.game_state import get_chain_state, get_grid, get_score, is_playing, trigger_game_over
from pebblefall.utils.grid_text import format_grid

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ChainResult:
    depth: int = 0
    groups: int = 0
    pebbles: int = 0
    score_delta: int = 0
    game_over: bool = False


class ChainSystem:
    """Runs the match -> clear -> gravity cycle after every landing.

    The whole chain resolves synchronously; each step is announced on the bus
    so the presentation layer can pace its own animations.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        threshold: int = MATCH_THRESHOLD,
        pebble_score: int = PEBBLE_SCORE,
        chain_bonus: int = CHAIN_BONUS,
        game_over_columns: Iterable[int] = GAME_OVER_COLUMNS,
        settle_split_pairs: bool = False,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.threshold = threshold
        self.pebble_score = pebble_score
        self.chain_bonus = chain_bonus
        self.game_over_columns = tuple(game_over_columns)
        self.settle_split_pairs = settle_split_pairs
        self.event_bus.subscribe(EVENT_PIECE_LANDED, self.on_piece_landed)

    def on_piece_landed(self, sender, **kwargs):
        self.resolve()

    def resolve(self) -> ChainResult:
        state = get_chain_state(self.world)
        grid = get_grid(self.world)
        result = ChainResult()
        state.active = True
        state.depth = 0
        if self.settle_split_pairs:
            moves = apply_gravity(grid)
            if moves:
                self.event_bus.emit(EVENT_PIECE_SETTLED, moves=moves)
        while True:
            matches = find_all_matches(grid, threshold=self.threshold)
            if not matches:
                break
            state.depth += 1
            self._clear_step(matches, state.depth, result)
            moves = apply_gravity(grid)
            self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=moves, depth=state.depth)
        state.active = False
        result.depth = state.depth
        self._finish(result)
        return result

    def _clear_step(self, matches: List[List[Position]], depth: int, result: ChainResult) -> None:
        grid = get_grid(self.world)
        score = get_score(self.world)
        positions = [pos for group in matches for pos in group]
        self.event_bus.emit(
            EVENT_MATCH_FOUND,
            groups=matches,
            group_count=len(matches),
            size=len(positions),
            depth=depth,
        )
        removed = remove_positions(grid, positions)
        delta = len(removed) * self.pebble_score + len(matches) * self.chain_bonus
        score.total += delta
        score.pebbles_cleared += len(removed)
        score.groups_cleared += len(matches)
        result.groups += len(matches)
        result.pebbles += len(removed)
        result.score_delta += delta
        logger.debug("chain step %d cleared %d pebbles in %d groups (+%d)", depth, len(removed), len(matches), delta)
        self.event_bus.emit(
            EVENT_MATCH_CLEARED,
            positions=[pos for pos, _ in removed],
            colors=removed,
            depth=depth,
            score_delta=delta,
            score=score.total,
        )
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=score.total, delta=delta)

    def _finish(self, result: ChainResult) -> None:
        grid = get_grid(self.world)
        score = get_score(self.world)
        score.last_chain = result.depth
        if result.depth > score.best_chain:
            score.best_chain = result.depth
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("board after chain of depth %d:\n%s", result.depth, format_grid(grid))
        self.event_bus.emit(
            EVENT_CHAIN_COMPLETE,
            depth=result.depth,
            score_delta=result.score_delta,
            score=score.total,
        )
        if spawn_blocked(grid, self.game_over_columns):
            result.game_over = True
            if trigger_game_over(self.world, self.event_bus, reason="spawn_columns_filled"):
                logger.info("game over with score %d", score.total)
            return
        if is_playing(self.world):
            self.event_bus.emit(EVENT_SPAWN_READY)
