import pytest

from pebblefall.components.grid import Grid
from pebblefall.components.pebble import PebbleColor
from pebblefall.utils.grid_text import format_grid, load_rows


def test_place_then_get_returns_color():
    grid = Grid(cols=6, rows=12)
    assert grid.place((3, 7), PebbleColor.BLUE)
    assert grid.get((3, 7)) is PebbleColor.BLUE
    assert not grid.is_empty((3, 7))


def test_place_into_occupied_cell_never_overwrites():
    grid = Grid(cols=6, rows=12)
    grid.place((0, 0), PebbleColor.RED)
    assert not grid.place((0, 0), PebbleColor.GREEN)
    assert grid.get((0, 0)) is PebbleColor.RED


@pytest.mark.parametrize("pos", [(-1, 0), (6, 0), (0, -1), (0, 12), (99, 99)])
def test_invalid_positions_are_rejected_and_read_empty(pos):
    grid = Grid(cols=6, rows=12)
    assert not grid.is_valid(pos)
    assert not grid.place(pos, PebbleColor.RED)
    assert grid.get(pos) is None
    assert not grid.is_empty(pos)
    assert not grid.remove(pos)
    assert grid.count() == 0


def test_remove_then_is_empty():
    grid = Grid(cols=6, rows=12)
    grid.place((2, 5), PebbleColor.YELLOW)
    assert grid.remove((2, 5))
    assert grid.is_empty((2, 5))
    # Clearing an already empty valid cell still succeeds.
    assert grid.remove((2, 5))


def test_highest_occupied():
    grid = Grid(cols=6, rows=12)
    assert grid.highest_occupied(0) == 12
    grid.place((0, 9), PebbleColor.RED)
    grid.place((0, 4), PebbleColor.RED)
    assert grid.highest_occupied(0) == 4
    assert grid.highest_occupied(-1) == -1
    assert grid.highest_occupied(6) == -1


def test_reset_clears_every_cell():
    grid = Grid(cols=3, rows=3)
    for x in range(3):
        grid.place((x, 2), PebbleColor.PURPLE)
    grid.reset()
    assert grid.count() == 0
    assert all(grid.is_empty((x, y)) for x in range(3) for y in range(3))


def test_occupied_iterates_row_major():
    grid = Grid(cols=3, rows=3)
    grid.place((2, 2), PebbleColor.RED)
    grid.place((1, 0), PebbleColor.BLUE)
    grid.place((0, 2), PebbleColor.GREEN)
    assert [pos for pos, _ in grid.occupied()] == [(1, 0), (0, 2), (2, 2)]


def test_text_rows_load_bottom_aligned():
    grid = Grid(cols=4, rows=4)
    load_rows(grid, ["R*..", "GBYP"])
    assert format_grid(grid) == "....\n....\nR*..\nGBYP"
    assert grid.get((1, 2)) is PebbleColor.GLOWING
    assert grid.get((3, 3)) is PebbleColor.PURPLE


def test_text_rows_reject_oversized_input():
    grid = Grid(cols=2, rows=2)
    with pytest.raises(ValueError):
        load_rows(grid, ["RRR"])
    with pytest.raises(ValueError):
        load_rows(grid, ["R", "R", "R"])
