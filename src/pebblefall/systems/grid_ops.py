from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Iterable, List, Set, Tuple

from pebblefall.components.grid import Grid
from pebblefall.components.pebble import PebbleColor, Position
from pebblefall.constants import GAME_OVER_COLUMNS, MATCH_THRESHOLD

NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = ((0, -1), (0, 1), (-1, 0), (1, 0))


@dataclass(slots=True)
class GravityMove:
    source: Position
    target: Position
    color: PebbleColor


def _joins(seed: PebbleColor, candidate: PebbleColor) -> bool:
    # A wildcard seed accepts any pebble; a concrete seed accepts its own color or a wildcard.
    if seed.is_wildcard:
        return True
    return candidate == seed or candidate.is_wildcard


def _flood(grid: Grid, start: Position, visited: Set[Position]) -> List[Position]:
    seed = grid.get(start)
    if seed is None:
        return []
    group: List[Position] = [start]
    visited.add(start)
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        for dx, dy in NEIGHBOR_OFFSETS:
            nxt = (x + dx, y + dy)
            if nxt in visited:
                continue
            color = grid.get(nxt)
            if color is None or not _joins(seed, color):
                continue
            visited.add(nxt)
            group.append(nxt)
            queue.append(nxt)
    return group


def find_all_matches(grid: Grid, *, threshold: int = MATCH_THRESHOLD) -> List[List[Position]]:
    """Return every connected group of at least ``threshold`` pebbles.

    Cells are scanned row-major and each unvisited pebble seeds a breadth-first
    flood. Every cell a flood reaches is marked visited for the rest of the
    scan, so a pebble belongs to at most one group and undersized groups are
    never reopened. Because a glowing seed joins every neighbour regardless of
    color, a mixed cluster touching a wildcard is reported as one group only
    when the scan reaches the wildcard before any concrete cell of the cluster.
    """
    visited: Set[Position] = set()
    matches: List[List[Position]] = []
    for y in range(grid.rows):
        for x in range(grid.cols):
            pos = (x, y)
            if pos in visited or grid.get(pos) is None:
                continue
            group = _flood(grid, pos, visited)
            if len(group) >= threshold:
                matches.append(group)
    return matches


def remove_positions(grid: Grid, positions: Iterable[Position]) -> List[Tuple[Position, PebbleColor]]:
    """Clear positions and report what was actually removed."""
    removed: List[Tuple[Position, PebbleColor]] = []
    for pos in positions:
        color = grid.get(pos)
        if color is None:
            continue
        grid.remove(pos)
        removed.append((pos, color))
    return removed


def apply_gravity(grid: Grid) -> List[GravityMove]:
    """Compact every column toward the bottom, keeping pebble order."""
    moves: List[GravityMove] = []
    for x in range(grid.cols):
        write_row = grid.rows - 1
        for y in range(grid.rows - 1, -1, -1):
            color = grid.get((x, y))
            if color is None:
                continue
            if y != write_row:
                grid.remove((x, y))
                grid.place((x, write_row), color)
                moves.append(GravityMove(source=(x, y), target=(x, write_row), color=color))
            write_row -= 1
    return moves


def landing_row(grid: Grid, column: int, from_row: int) -> int:
    """Lowest row a pebble at (column, from_row) can fall to without passing a pebble."""
    row = max(from_row, 0)
    while row + 1 < grid.rows and grid.is_empty((column, row + 1)):
        row += 1
    return row


def spawn_blocked(grid: Grid, columns: Iterable[int] = GAME_OVER_COLUMNS) -> bool:
    """True when row 0 of any spawn column is occupied."""
    return any(not grid.is_empty((column, 0)) for column in columns if 0 <= column < grid.cols)
