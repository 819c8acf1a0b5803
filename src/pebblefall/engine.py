"""Headless entry point for the Pebblefall puzzle engine.

Sets up the ECS world, event bus and systems, and exposes the command and
query surface used by a presentation or input layer.
"""
from __future__ import annotations

import random
from typing import Callable, Iterable, List, Optional

from pebblefall.components.falling_piece import FallingPiece, MoveDirection, RotateDirection
from pebblefall.components.game_state import GameMode
from pebblefall.components.grid import Grid
from pebblefall.components.pebble import PebbleColor, Position
from pebblefall.components.piece_queue import ColorPair
from pebblefall.constants import (
    CHAIN_BONUS,
    DROP_SPEED,
    FALL_SPEED,
    GAME_OVER_COLUMNS,
    GRID_COLS,
    GRID_ROWS,
    LANDING_THRESHOLD,
    MATCH_THRESHOLD,
    PEBBLE_SCORE,
    PREVIEW_COUNT,
    SLIDE_SPEED,
    SPAWN_DELAY,
    SPAWN_OFFSET,
    SPAWN_PIVOT,
    WILDCARD_CHANCE,
)
from pebblefall.events.bus import EVENT_TICK, EventBus
from pebblefall.factories.pieces import PieceGenerator
from pebblefall.systems.chain_system import ChainSystem
from pebblefall.systems.game_flow_system import GameFlowSystem
from pebblefall.systems.piece_system import PieceSystem
from pebblefall.systems.spawn_system import SpawnSystem
from pebblefall.utils.game_state import get_game_state, get_grid, get_score
from pebblefall.world import create_world


class PuzzleEngine:
    def __init__(
        self,
        *,
        seed: int | None = None,
        rng: random.Random | None = None,
        cols: int = GRID_COLS,
        rows: int = GRID_ROWS,
        threshold: int = MATCH_THRESHOLD,
        pebble_score: int = PEBBLE_SCORE,
        chain_bonus: int = CHAIN_BONUS,
        fall_speed: float = FALL_SPEED,
        drop_speed: float = DROP_SPEED,
        slide_speed: float = SLIDE_SPEED,
        landing_threshold: float = LANDING_THRESHOLD,
        spawn_delay: float = SPAWN_DELAY,
        preview_count: int = PREVIEW_COUNT,
        wildcard_chance: float = WILDCARD_CHANCE,
        colors: Iterable[PebbleColor] | None = None,
        spawn_pivot: tuple[int, int] = SPAWN_PIVOT,
        spawn_offset: tuple[int, int] = SPAWN_OFFSET,
        game_over_columns: Iterable[int] = GAME_OVER_COLUMNS,
        settle_split_pairs: bool = False,
    ) -> None:
        if rng is None:
            rng = random.Random(seed)
        self.event_bus = EventBus()
        self.world = create_world(self.event_bus, cols=cols, rows=rows, rng=rng)

        generator_kwargs = {"wildcard_chance": wildcard_chance}
        if colors is not None:
            generator_kwargs["colors"] = tuple(colors)
        self.generator = PieceGenerator(rng, **generator_kwargs)

        # Flow and piece systems
        self.game_flow_system = GameFlowSystem(self.world, self.event_bus)
        self.piece_system = PieceSystem(
            self.world,
            self.event_bus,
            fall_speed=fall_speed,
            drop_speed=drop_speed,
            slide_speed=slide_speed,
            landing_threshold=landing_threshold,
        )
        # Board resolution systems
        self.chain_system = ChainSystem(
            self.world,
            self.event_bus,
            threshold=threshold,
            pebble_score=pebble_score,
            chain_bonus=chain_bonus,
            game_over_columns=game_over_columns,
            settle_split_pairs=settle_split_pairs,
        )
        self.spawn_system = SpawnSystem(
            self.world,
            self.event_bus,
            generator=self.generator,
            preview_count=preview_count,
            spawn_delay=spawn_delay,
            spawn_pivot=spawn_pivot,
            spawn_offset=spawn_offset,
        )

    # ------------------------------------------------------------------
    # Commands

    def start(self) -> None:
        self.game_flow_system.new_game()

    def tick(self, dt: float) -> None:
        self.event_bus.emit(EVENT_TICK, dt=dt)

    def move(self, direction: MoveDirection | str) -> bool:
        try:
            direction = MoveDirection(direction)
        except ValueError:
            return False
        return self.piece_system.move(direction)

    def rotate(self, direction: RotateDirection | str) -> bool:
        try:
            direction = RotateDirection(direction)
        except ValueError:
            return False
        return self.piece_system.rotate(direction)

    def drop(self) -> bool:
        return self.piece_system.drop()

    def subscribe(self, name: str, fn: Callable) -> None:
        self.event_bus.subscribe(name, fn)

    # ------------------------------------------------------------------
    # Queries

    @property
    def grid(self) -> Grid:
        return get_grid(self.world)

    @property
    def score(self) -> int:
        return get_score(self.world).total

    @property
    def mode(self) -> GameMode:
        return get_game_state(self.world).mode

    @property
    def is_game_over(self) -> bool:
        return self.mode == GameMode.GAME_OVER

    @property
    def active_piece(self) -> Optional[FallingPiece]:
        active = self.piece_system.active_piece()
        return active[1] if active else None

    @property
    def upcoming(self) -> List[ColorPair]:
        return self.spawn_system.upcoming()

    def is_cell_empty(self, pos: Position) -> bool:
        return self.grid.is_empty(pos)

    def highest_occupied(self, column: int) -> int:
        return self.grid.highest_occupied(column)
