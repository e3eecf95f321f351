# A* search and flood fill over the 4-connected snake grid.
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
import heapq
from typing import Callable, Optional

Cell = tuple[int, int]
BlockedFn = Callable[[Cell], bool]
HeuristicFn = Callable[[Cell, Cell], int]

# Expansion order: up, right, down, left.
NEIGHBOR_OFFSETS: tuple[Cell, ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))


def squared_euclidean(cell: Cell, goal: Cell) -> int:
    """Squared straight-line distance; overestimates on long diagonals."""
    return (cell[0] - goal[0]) ** 2 + (cell[1] - goal[1]) ** 2


def manhattan(cell: Cell, goal: Cell) -> int:
    return abs(cell[0] - goal[0]) + abs(cell[1] - goal[1])


HEURISTICS: dict[str, HeuristicFn] = {
    "squared_euclidean": squared_euclidean,
    "manhattan": manhattan,
}


@dataclass
class SearchNode:
    cell: Cell
    parent: Optional["SearchNode"] = field(default=None, repr=False)
    g: int = 0
    h: int = 0

    @property
    def f(self) -> int:
        return self.g + self.h


def _reconstruct(node: SearchNode) -> list[Cell]:
    path: list[Cell] = []
    current: SearchNode | None = node
    while current is not None:
        path.append(current.cell)
        current = current.parent
    path.reverse()
    return path


def find_path(
    start: Cell,
    goal: Cell,
    is_blocked: BlockedFn,
    heuristic: HeuristicFn = squared_euclidean,
) -> list[Cell] | None:
    """
    A* from start to goal over axis-aligned moves.

    Returns the cells from start to goal (both included), or None when the
    open set runs dry. The start cell itself is never tested against
    is_blocked, since it is the snake head.

    The open set is a heap keyed by (f, insertion order), so equal-f nodes
    come out first-in-first-out. A cell may sit in the heap more than once;
    stale entries are skipped once the cell is closed.
    """
    if start == goal:
        return [start]

    counter = 0
    root = SearchNode(start, None, 0, heuristic(start, goal))
    open_heap: list[tuple[int, int, SearchNode]] = [(root.f, counter, root)]
    best_open_g: dict[Cell, int] = {start: 0}
    closed: set[Cell] = set()

    while open_heap:
        _, _, node = heapq.heappop(open_heap)
        if node.cell in closed:
            continue
        closed.add(node.cell)

        if node.cell == goal:
            return _reconstruct(node)

        x, y = node.cell
        for dx, dy in NEIGHBOR_OFFSETS:
            neighbor = (x + dx, y + dy)
            if is_blocked(neighbor) or neighbor in closed:
                continue

            g = node.g + 1
            # Only re-open a cell when this route is strictly cheaper.
            known_g = best_open_g.get(neighbor)
            if known_g is not None and known_g <= g:
                continue

            best_open_g[neighbor] = g
            child = SearchNode(neighbor, node, g, heuristic(neighbor, goal))
            counter += 1
            heapq.heappush(open_heap, (child.f, counter, child))

    return None


def reachable_cells(start: Cell, is_blocked: BlockedFn) -> set[Cell]:
    """Flood fill from start; start is included even if is_blocked says otherwise."""
    seen = {start}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        for dx, dy in NEIGHBOR_OFFSETS:
            neighbor = (x + dx, y + dy)
            if neighbor in seen or is_blocked(neighbor):
                continue
            seen.add(neighbor)
            queue.append(neighbor)
    return seen


def path_length(path: list[Cell] | None) -> int:
    """Number of moves in a path, -1 when there is no path."""
    if path is None:
        return -1
    return len(path) - 1
