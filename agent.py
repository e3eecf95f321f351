# Path-following autopilot that steers the snake toward the food.
from __future__ import annotations

from collections import deque
import logging
from typing import TYPE_CHECKING

try:
    from .pathfinding import NEIGHBOR_OFFSETS, Cell, HeuristicFn, find_path, squared_euclidean
except ImportError:
    from pathfinding import NEIGHBOR_OFFSETS, Cell, HeuristicFn, find_path, squared_euclidean

if TYPE_CHECKING:
    from game_logic import GameSession


logger = logging.getLogger(__name__)


def step_direction(src: Cell, dst: Cell) -> Cell:
    return dst[0] - src[0], dst[1] - src[1]


class Autopilot:
    """
    Caches an A* path from head to food and feeds it to the snake one cell
    per tick. The cache starts at the current head; it is rebuilt when it
    runs out, when the head is somewhere else than expected, or after
    invalidate().
    """

    def __init__(self, heuristic: HeuristicFn = squared_euclidean) -> None:
        self.heuristic = heuristic
        self.path: deque[Cell] = deque()
        self.replans = 0

    def invalidate(self) -> None:
        self.path.clear()

    def step(self, session: GameSession) -> Cell | None:
        """Queue the next direction on the snake; None means no route to the food."""
        head = session.snake.head
        if len(self.path) <= 1 or self.path[0] != head:
            planned = self.plan(session)
            if planned is None or len(planned) < 2:
                self.path.clear()
                return None
            self.path = deque(planned)

        self.path.popleft()
        direction = step_direction(head, self.path[0])
        session.snake.set_direction(*direction)
        return direction

    def plan(self, session: GameSession) -> list[Cell] | None:
        head, food = session.snake.head, session.food
        if food is None:
            return None
        self.replans += 1

        path = find_path(head, food, session.is_blocked, self.heuristic)
        if path is None or len(path) < 2:
            logger.debug("No path from %s to food at %s", head, food)
            return path

        dx, dy = session.snake.direction
        if step_direction(head, path[1]) == (-dx, -dy):
            logger.debug("Path from %s starts with a reversal; routing around", head)
            return self.detour(session)
        return path

    def detour(self, session: GameSession) -> list[Cell] | None:
        """
        Shortest route whose first move is not a reversal.

        Each legal first move is tried with the current head cell treated as
        blocked, so the route cannot double back through it.
        """
        head, food = session.snake.head, session.food
        dx, dy = session.snake.direction

        def blocked(cell: Cell) -> bool:
            return cell == head or session.is_blocked(cell)

        best: list[Cell] | None = None
        for ox, oy in NEIGHBOR_OFFSETS:
            if (ox, oy) == (-dx, -dy):
                continue
            first = (head[0] + ox, head[1] + oy)
            if session.is_blocked(first):
                continue
            rest = find_path(first, food, blocked, self.heuristic)
            if rest is not None and (best is None or len(rest) + 1 < len(best)):
                best = [head] + rest
        return best
