from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from esper import World

from pebblefall.components.falling_piece import (
    FallingPiece,
    MoveDirection,
    PiecePhase,
    RotateDirection,
    rotate_offset,
    UNIT_OFFSETS,
)
from pebblefall.components.grid import Grid
from pebblefall.components.pebble import PebbleColor, Position
from pebblefall.constants import (
    DROP_SPEED,
    FALL_SPEED,
    LANDING_THRESHOLD,
    SLIDE_SPEED,
    SPAWN_OFFSET,
    SPAWN_PIVOT,
)
from pebblefall.events.bus import (
    EventBus,
    EVENT_TICK,
    EVENT_PIECE_SPAWN_REQUEST,
    EVENT_PIECE_MOVE_REQUEST,
    EVENT_PIECE_ROTATE_REQUEST,
    EVENT_PIECE_DROP_REQUEST,
    EVENT_PIECE_SPAWNED,
    EVENT_PIECE_SPAWN_BLOCKED,
    EVENT_PIECE_MOVED,
    EVENT_PIECE_ROTATED,
    EVENT_PIECE_DROPPED,
    EVENT_PIECE_LANDED,
    EVENT_PIECE_DISCARDED,
)
from pebblefall.systems.grid_ops import landing_row
from pebblefall.utils.game_state import get_grid, is_playing

logger = logging.getLogger(__name__)

# Pivot shifts tried in order when a rotation's direct target is blocked.
WALL_KICKS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1))


class PieceSystem:
    """Owns the falling piece: spawning, movement, rotation, fall and landing.

    The piece reads the grid only for occupancy checks while it falls. Landing
    is the single place where new pebbles are written into the grid; the piece
    entity is deleted right after and ``EVENT_PIECE_LANDED`` carries the
    committed cells.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        fall_speed: float = FALL_SPEED,
        drop_speed: float = DROP_SPEED,
        slide_speed: float = SLIDE_SPEED,
        landing_threshold: float = LANDING_THRESHOLD,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.fall_speed = fall_speed
        self.drop_speed = drop_speed
        self.slide_speed = slide_speed
        self.landing_threshold = landing_threshold
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.event_bus.subscribe(EVENT_PIECE_SPAWN_REQUEST, self.on_spawn_request)
        self.event_bus.subscribe(EVENT_PIECE_MOVE_REQUEST, self.on_move_request)
        self.event_bus.subscribe(EVENT_PIECE_ROTATE_REQUEST, self.on_rotate_request)
        self.event_bus.subscribe(EVENT_PIECE_DROP_REQUEST, self.on_drop_request)

    # ------------------------------------------------------------------
    # Event handlers

    def on_tick(self, sender, **kwargs):
        dt = kwargs.get('dt', 1/60)
        self.advance(dt)

    def on_spawn_request(self, sender, **kwargs):
        pivot_color = kwargs.get('pivot_color')
        rotating_color = kwargs.get('rotating_color')
        if not isinstance(pivot_color, PebbleColor) or not isinstance(rotating_color, PebbleColor):
            return
        self.spawn(
            pivot_color,
            rotating_color,
            pivot=kwargs.get('pivot') or SPAWN_PIVOT,
            offset=kwargs.get('offset') or SPAWN_OFFSET,
        )

    def on_move_request(self, sender, **kwargs):
        try:
            direction = MoveDirection(kwargs.get('direction'))
        except ValueError:
            return
        self.move(direction)

    def on_rotate_request(self, sender, **kwargs):
        try:
            direction = RotateDirection(kwargs.get('direction'))
        except ValueError:
            return
        self.rotate(direction)

    def on_drop_request(self, sender, **kwargs):
        self.drop()

    # ------------------------------------------------------------------
    # Commands

    def active_piece(self) -> Optional[Tuple[int, FallingPiece]]:
        for entity, piece in self.world.get_component(FallingPiece):
            return entity, piece
        return None

    def spawn(
        self,
        pivot_color: PebbleColor,
        rotating_color: PebbleColor,
        *,
        pivot: Position = SPAWN_PIVOT,
        offset: Tuple[int, int] = SPAWN_OFFSET,
    ) -> bool:
        if self.active_piece() is not None or not is_playing(self.world):
            return False
        if tuple(offset) not in UNIT_OFFSETS:
            return False
        grid = get_grid(self.world)
        col, row = pivot
        positions = [(col, row), (col + offset[0], row + offset[1])]
        if not self._cells_free(grid, positions):
            logger.debug("spawn blocked at %s", positions)
            self.event_bus.emit(EVENT_PIECE_SPAWN_BLOCKED, cells=positions)
            return False
        piece = FallingPiece(
            pivot_color=pivot_color,
            rotating_color=rotating_color,
            col=col,
            y=float(row),
            offset=tuple(offset),
        )
        entity = self.world.create_entity(piece)
        logger.debug("spawned %s/%s at %s", pivot_color.value, rotating_color.value, positions)
        self.event_bus.emit(EVENT_PIECE_SPAWNED, entity=entity, cells=piece.cells())
        return True

    def move(self, direction: MoveDirection) -> bool:
        active = self.active_piece()
        if active is None:
            return False
        _, piece = active
        grid = get_grid(self.world)
        dx = direction.dx
        targets = [(x + dx, y) for x, y in piece.positions()]
        if not self._cells_free(grid, targets):
            return False
        piece.col += dx
        self.event_bus.emit(EVENT_PIECE_MOVED, direction=direction, cells=piece.cells())
        return True

    def rotate(self, direction: RotateDirection) -> bool:
        active = self.active_piece()
        if active is None:
            return False
        _, piece = active
        grid = get_grid(self.world)
        new_offset = rotate_offset(piece.offset, direction)
        for kick in ((0, 0),) + WALL_KICKS:
            pivot = (piece.col + kick[0], piece.row + kick[1])
            rotated = (pivot[0] + new_offset[0], pivot[1] + new_offset[1])
            if not self._cells_free(grid, [pivot, rotated]):
                continue
            piece.col += kick[0]
            piece.y += kick[1]
            piece.offset = new_offset
            if kick != (0, 0):
                logger.debug("rotation %s kicked by %s", direction.value, kick)
            self.event_bus.emit(EVENT_PIECE_ROTATED, direction=direction, kick=kick, cells=piece.cells())
            return True
        return False

    def drop(self) -> bool:
        active = self.active_piece()
        if active is None:
            return False
        _, piece = active
        if piece.phase == PiecePhase.DROPPING:
            return False
        piece.phase = PiecePhase.DROPPING
        self.event_bus.emit(EVENT_PIECE_DROPPED, cells=piece.cells())
        return True

    def discard(self) -> bool:
        active = self.active_piece()
        if active is None:
            return False
        entity, piece = active
        cells = piece.cells()
        self.world.delete_entity(entity, immediate=True)
        self.event_bus.emit(EVENT_PIECE_DISCARDED, cells=cells)
        return True

    # ------------------------------------------------------------------
    # Simulation

    def advance(self, dt: float) -> bool:
        """Move the piece down by one tick's worth of fall; return True if it landed."""
        active = self.active_piece()
        if active is None:
            return False
        entity, piece = active
        grid = get_grid(self.world)
        self._slide(piece, dt)
        speed = self.drop_speed if piece.phase == PiecePhase.DROPPING else self.fall_speed
        limit = self._fall_limit(grid, piece)
        piece.y = min(piece.y + speed * max(dt, 0.0), float(limit))
        if limit - piece.y > self.landing_threshold:
            return False
        self._land(entity, piece, grid, limit)
        return True

    def _slide(self, piece: FallingPiece, dt: float) -> None:
        target = float(piece.col)
        step = self.slide_speed * max(dt, 0.0)
        if abs(target - piece.display_x) <= step:
            piece.display_x = target
        elif piece.display_x < target:
            piece.display_x += step
        else:
            piece.display_x -= step

    def _fall_limit(self, grid: Grid, piece: FallingPiece) -> int:
        # Deepest pivot row reachable before either cell would pass its floor.
        limits = []
        for (x, y), dy in ((piece.pivot_position, 0), (piece.rotating_position, piece.offset[1])):
            limits.append(landing_row(grid, x, y) - dy)
        return min(limits)

    def _land(self, entity: int, piece: FallingPiece, grid: Grid, row: int) -> None:
        # Snap to the nearest grid row, then commit each cell individually.
        piece.y = float(row)
        piece.display_x = float(piece.col)
        committed: List[Tuple[Position, PebbleColor]] = []
        for pos, color in piece.cells():
            if grid.place(pos, color):
                committed.append((pos, color))
        self.world.delete_entity(entity, immediate=True)
        logger.debug("landed %s", committed)
        self.event_bus.emit(EVENT_PIECE_LANDED, cells=committed)

    @staticmethod
    def _cells_free(grid: Grid, positions: List[Position]) -> bool:
        return all(grid.is_valid(pos) and grid.is_empty(pos) for pos in positions)
