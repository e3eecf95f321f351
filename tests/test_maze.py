import random

import numpy as np
import pytest

from maze import PASSAGE, WALL, carve_maze, generate_maze, grid_center, spawn_clear_area
from pathfinding import reachable_cells


def open_cells(width, height, walls):
    walls = set(walls)
    return {(x, y) for x in range(width) for y in range(height) if (x, y) not in walls}


def blocker(width, height, walls):
    walls = set(walls)
    return lambda c: not (0 <= c[0] < width and 0 <= c[1] < height) or c in walls


@pytest.mark.parametrize("seed", range(8))
def test_maze_open_cells_are_connected(seed):
    walls = generate_maze(21, 21, random.Random(seed))
    free = open_cells(21, 21, walls)

    reached = reachable_cells(grid_center(21, 21), blocker(21, 21, walls))
    assert reached == free


def test_carved_maze_is_a_tree():
    grid = carve_maze(21, 21, random.Random(3))
    open_count = int(np.sum(grid == PASSAGE))
    edges = int(np.sum((grid[:, :-1] == PASSAGE) & (grid[:, 1:] == PASSAGE)))
    edges += int(np.sum((grid[:-1, :] == PASSAGE) & (grid[1:, :] == PASSAGE)))

    assert edges == open_count - 1


def test_carving_reaches_every_lattice_cell():
    grid = carve_maze(21, 21, random.Random(11))
    # Centre (10, 10) sits on the even lattice; every interior even cell is opened.
    for y in range(2, 20, 2):
        for x in range(2, 20, 2):
            assert grid[y, x] == PASSAGE


def test_border_stays_walled():
    walls = set(generate_maze(21, 21, random.Random(0)))
    for i in range(21):
        assert (i, 0) in walls
        assert (i, 20) in walls
        assert (0, i) in walls
        assert (20, i) in walls


def test_spawn_area_is_cleared():
    walls = set(generate_maze(21, 21, random.Random(4)))
    assert spawn_clear_area(21, 21) == [(10, 10), (9, 10), (11, 10), (10, 9), (10, 11)]
    for cell in spawn_clear_area(21, 21):
        assert cell not in walls


def test_same_seed_same_maze():
    assert generate_maze(15, 15, random.Random(42)) == generate_maze(15, 15, random.Random(42))


def test_different_seeds_differ():
    assert generate_maze(21, 21, random.Random(1)) != generate_maze(21, 21, random.Random(2))


def test_even_dimensions_still_connected():
    walls = generate_maze(12, 10, random.Random(7))
    free = open_cells(12, 10, walls)

    assert free
    assert reachable_cells(grid_center(12, 10), blocker(12, 10, walls)) == free


def test_carve_grid_shape_and_values():
    grid = carve_maze(9, 7, random.Random(0))
    assert grid.shape == (7, 9)
    assert set(np.unique(grid)) <= {WALL, PASSAGE}
