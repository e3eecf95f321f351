# Maze layout generation for the "maze" obstacle mode.
from __future__ import annotations

import random

import numpy as np

Cell = tuple[int, int]

WALL = 1
PASSAGE = 0

# Stride-2 carving steps: up, right, down, left.
CARVE_STEPS: tuple[Cell, ...] = ((0, -2), (2, 0), (0, 2), (-2, 0))


def grid_center(width: int, height: int) -> Cell:
    return width // 2, height // 2


def spawn_clear_area(width: int, height: int) -> list[Cell]:
    """The spawn cell and its four neighbours, kept free in every layout."""
    cx, cy = grid_center(width, height)
    return [(cx, cy), (cx - 1, cy), (cx + 1, cy), (cx, cy - 1), (cx, cy + 1)]


def _shuffled_steps(rng: random.Random) -> list[Cell]:
    steps = list(CARVE_STEPS)
    rng.shuffle(steps)
    return steps


def carve_maze(width: int, height: int, rng: random.Random) -> np.ndarray:
    """
    Recursive-backtracker maze on a (height, width) grid of WALL/PASSAGE.

    Carving starts at the centre and jumps two cells at a time, opening the
    cell in between, so passages live on the centre's parity lattice and the
    open cells form a spanning tree. An explicit stack replaces recursion;
    each cell shuffles its directions on entry, which keeps the visiting
    order identical to the recursive formulation for a given rng.
    """
    grid = np.full((height, width), WALL, dtype=np.int8)
    start = grid_center(width, height)
    grid[start[1], start[0]] = PASSAGE

    stack: list[tuple[Cell, list[Cell]]] = [(start, _shuffled_steps(rng))]
    while stack:
        (x, y), steps = stack[-1]
        if not steps:
            stack.pop()
            continue

        dx, dy = steps.pop(0)
        nx, ny = x + dx, y + dy
        if 0 < nx < width - 1 and 0 < ny < height - 1 and grid[ny, nx] == WALL:
            grid[y + dy // 2, x + dx // 2] = PASSAGE
            grid[ny, nx] = PASSAGE
            stack.append(((nx, ny), _shuffled_steps(rng)))

    return grid


def generate_maze(width: int, height: int, rng: random.Random | None = None) -> list[Cell]:
    """Wall cells of a freshly carved maze, minus the spawn area."""
    if rng is None:
        rng = random.Random()
    grid = carve_maze(width, height, rng)
    for x, y in spawn_clear_area(width, height):
        if 0 <= x < width and 0 <= y < height:
            grid[y, x] = PASSAGE

    rows, cols = np.nonzero(grid == WALL)
    return [(int(x), int(y)) for y, x in zip(rows, cols)]
