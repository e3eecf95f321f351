# Core Snake game state and rules, independent from GUI/simulation code.
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
import logging
import random
from typing import Callable, Iterable, Iterator

try:
    from .agent import Autopilot
    from .maze import generate_maze, grid_center, spawn_clear_area
    from .pathfinding import HEURISTICS, Cell, find_path
except ImportError:
    from agent import Autopilot
    from maze import generate_maze, grid_center, spawn_clear_area
    from pathfinding import HEURISTICS, Cell, find_path


logger = logging.getLogger(__name__)

# Bounds used by the GUI and CLIs when validating settings.
MIN_GRID_SIZE = 5
MAX_GRID_SIZE = 60
MIN_BLOCK_SIZE = 8
MAX_BLOCK_SIZE = 48
MIN_UPDATE_INTERVAL = 1
MAX_UPDATE_INTERVAL = 60

MODES = ("maze", "random")
ADD_OBSTACLES_MIN = 10
ADD_OBSTACLES_MAX = 20
PLACEMENT_ATTEMPTS = 10

UP: Cell = (0, -1)
DOWN: Cell = (0, 1)
LEFT: Cell = (-1, 0)
RIGHT: Cell = (1, 0)
DIRECTIONS = (UP, DOWN, LEFT, RIGHT)


@dataclass
class SnakeConfig:
    """Runtime settings shared between the logic layer, GUI and CLIs."""
    grid_width: int = 21
    grid_height: int = 21
    block_size: int = 20
    update_interval: int = 10         # frames per logical step
    random_obstacles: int = 60
    mode: str = "maze"
    autopilot: bool = True
    heuristic: str = "squared_euclidean"

    def validate(self) -> None:
        """Raise ValueError describing the first out-of-range setting."""
        for label, value in (("Grid width", self.grid_width), ("Grid height", self.grid_height)):
            if not (MIN_GRID_SIZE <= value <= MAX_GRID_SIZE):
                raise ValueError(f"{label} must be between {MIN_GRID_SIZE} and {MAX_GRID_SIZE}.")
        if not (MIN_BLOCK_SIZE <= self.block_size <= MAX_BLOCK_SIZE):
            raise ValueError(f"Block size must be between {MIN_BLOCK_SIZE} and {MAX_BLOCK_SIZE}.")
        if not (MIN_UPDATE_INTERVAL <= self.update_interval <= MAX_UPDATE_INTERVAL):
            raise ValueError(
                f"Update interval must be between {MIN_UPDATE_INTERVAL} and {MAX_UPDATE_INTERVAL}."
            )
        if not (0 <= self.random_obstacles <= self.grid_width * self.grid_height):
            raise ValueError("Random obstacle count must fit on the grid.")
        if self.mode not in MODES:
            raise ValueError(f"Unknown mode: {self.mode}")
        if self.heuristic not in HEURISTICS:
            raise ValueError(f"Unknown heuristic: {self.heuristic}")

    @property
    def pixel_size(self) -> tuple[int, int]:
        return self.grid_width * self.block_size, self.grid_height * self.block_size


def cell_to_pixel(cell: Cell, block_size: int) -> tuple[int, int]:
    """Top-left pixel of a cell."""
    return cell[0] * block_size, cell[1] * block_size


def pixel_to_cell(x: int, y: int, block_size: int) -> Cell:
    return x // block_size, y // block_size


@dataclass(frozen=True)
class TickResult:
    alive: bool
    grew: bool
    score: int
    advanced: bool = True


class Snake:
    """Head-first body, growth target and collision rules."""
    def __init__(self, head: Cell, grid_width: int, grid_height: int) -> None:
        self.grid_width = grid_width
        self.grid_height = grid_height
        self.positions: deque[Cell] = deque([head])    # ordered body, head at index 0
        self.cells: set[Cell] = {head}                 # O(1) body collision lookup
        self.length = 1                                # target size; body catches up
        self.direction: Cell = RIGHT
        self.pending_direction: Cell = RIGHT           # queued from input; applied next advance
        self.alive = True
        self.death_reason: str | None = None

    @property
    def head(self) -> Cell:
        return self.positions[0]

    def __len__(self) -> int:
        return len(self.positions)

    def occupies_body(self, cell: Cell) -> bool:
        """True for any segment except the head."""
        return cell in self.cells and cell != self.head

    def set_direction(self, dx: int, dy: int) -> bool:
        """Queue a direction; instant 180-degree turns are ignored."""
        if (dx, dy) not in DIRECTIONS:
            return False
        if (dx, dy) == (-self.direction[0], -self.direction[1]):
            return False
        self.pending_direction = (dx, dy)
        return True

    def next_head(self) -> Cell:
        hx, hy = self.head
        dx, dy = self.pending_direction
        return hx + dx, hy + dy

    def _in_bounds(self, cell: Cell) -> bool:
        return 0 <= cell[0] < self.grid_width and 0 <= cell[1] < self.grid_height

    def kill(self, reason: str) -> None:
        if self.alive:
            self.alive = False
            self.death_reason = reason

    def advance(self, is_blocked: Callable[[Cell], bool]) -> bool:
        """Move one cell. Returns False if the snake dies this step."""
        if not self.alive:
            return False

        self.direction = self.pending_direction
        new_head = self.next_head()

        if is_blocked(new_head):
            if not self._in_bounds(new_head):
                self.kill("wall")
            elif self.occupies_body(new_head):
                self.kill("self")
            else:
                self.kill("obstacle")
            return False

        self.positions.appendleft(new_head)
        self.cells.add(new_head)
        if len(self.positions) > self.length:
            self.cells.discard(self.positions.pop())
        return True


class Obstacles:
    """Obstacle layout for one session: bulk generation plus incremental growth."""
    def __init__(self, grid_width: int, grid_height: int, rng: random.Random) -> None:
        self.grid_width = grid_width
        self.grid_height = grid_height
        self.rng = rng
        self.positions: list[Cell] = []
        self.cells: set[Cell] = set()

    def __contains__(self, cell: object) -> bool:
        return cell in self.cells

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.positions)

    def __len__(self) -> int:
        return len(self.cells)

    def clear(self) -> None:
        self.positions = []
        self.cells = set()

    def _append(self, cell: Cell) -> None:
        if cell not in self.cells:
            self.positions.append(cell)
            self.cells.add(cell)

    def _random_cell(self) -> Cell:
        return self.rng.randrange(self.grid_width), self.rng.randrange(self.grid_height)

    def initialize(self, mode: str, random_count: int) -> None:
        """Build the starting layout and keep the spawn area free."""
        self.clear()
        if mode == "maze":
            self.generate_maze()
        else:
            self.generate_random(random_count)

        keep_clear = set(spawn_clear_area(self.grid_width, self.grid_height))
        self.positions = [cell for cell in self.positions if cell not in keep_clear]
        self.cells -= keep_clear

    def generate_maze(self) -> None:
        for cell in generate_maze(self.grid_width, self.grid_height, self.rng):
            self._append(cell)

    def generate_random(self, count: int) -> None:
        """Sample count cells with no rejection; repeats collapse into one obstacle."""
        for _ in range(count):
            self._append(self._random_cell())

    def can_place(self, cell: Cell, head: Cell, is_blocked: Callable[..., bool]) -> bool:
        if abs(cell[0] - head[0]) <= 1 and abs(cell[1] - head[1]) <= 1:
            return False
        return not is_blocked(cell, include_head=True, include_food=True)

    def add(self, cell: Cell, head: Cell, is_blocked: Callable[..., bool]) -> bool:
        """Place one specific cell under the incremental placement rules."""
        if not self.can_place(cell, head, is_blocked):
            return False
        self._append(cell)
        return True

    def add_single_random(self, head: Cell, is_blocked: Callable[..., bool]) -> Cell | None:
        """Try a few random cells; give up quietly when none fits."""
        for _ in range(PLACEMENT_ATTEMPTS):
            cell = self._random_cell()
            if self.add(cell, head, is_blocked):
                return cell
        return None

    def add_random(self, head: Cell, is_blocked: Callable[..., bool]) -> list[Cell]:
        count = self.rng.randint(ADD_OBSTACLES_MIN, ADD_OBSTACLES_MAX)
        added = []
        for _ in range(count):
            cell = self.add_single_random(head, is_blocked)
            if cell is not None:
                added.append(cell)
        return added


class GameSession:
    """One playthrough: snake, food, obstacles and the autopilot, advanced per tick."""
    def __init__(
        self,
        config: SnakeConfig | None = None,
        rng: random.Random | None = None,
        seed: int | None = None,
    ) -> None:
        self.config = config if config is not None else SnakeConfig()
        self.config.validate()
        self.rng = rng if rng is not None else random.Random(seed)
        self.auto_mode = self.config.autopilot
        self.autopilot = Autopilot(HEURISTICS[self.config.heuristic])
        self.mode = self.config.mode
        self.reset()

    def reset(self, mode: str | None = None) -> None:
        """Start a fresh session, optionally switching obstacle mode."""
        if mode is not None:
            if mode not in MODES:
                raise ValueError(f"Unknown mode: {mode}")
            self.mode = mode

        width, height = self.config.grid_width, self.config.grid_height
        self.score = 0
        self.frame_count = 0
        self.won = False
        self.snake = Snake(grid_center(width, height), width, height)
        self.food: Cell | None = None
        self.obstacles = Obstacles(width, height, self.rng)
        self.obstacles.initialize(self.mode, self.config.random_obstacles)
        self.food = self._random_free_cell()
        self.autopilot.invalidate()
        logger.debug(
            "Session reset: mode=%s grid=%dx%d obstacles=%d food=%s",
            self.mode, width, height, len(self.obstacles), self.food,
        )
        if self.food is None:
            self._end("board_full")

    # ----- queries -----

    @property
    def alive(self) -> bool:
        return self.snake.alive

    @property
    def death_reason(self) -> str | None:
        return self.snake.death_reason

    def in_bounds(self, cell: Cell) -> bool:
        return 0 <= cell[0] < self.config.grid_width and 0 <= cell[1] < self.config.grid_height

    def is_blocked(self, cell: Cell, include_head: bool = False, include_food: bool = False) -> bool:
        """
        Single occupancy query used by movement, search and placement.

        The head is left out by default because a candidate next head moves
        off it; placement code asks for the head and the food as well.
        """
        if not self.in_bounds(cell):
            return True
        if include_head and cell == self.snake.head:
            return True
        if self.snake.occupies_body(cell):
            return True
        if cell in self.obstacles:
            return True
        return include_food and cell == self.food

    def snake_cells(self) -> list[Cell]:
        return list(self.snake.positions)

    def food_cell(self) -> Cell | None:
        return self.food

    def obstacle_cells(self) -> list[Cell]:
        return list(self.obstacles)

    def snapshot(self) -> dict:
        """Read-only view for renderers."""
        return {
            "snake": self.snake_cells(),
            "food": self.food,
            "obstacles": self.obstacle_cells(),
            "score": self.score,
            "alive": self.alive,
            "death_reason": self.death_reason,
            "auto_mode": self.auto_mode,
            "mode": self.mode,
            "path": list(self.autopilot.path),
        }

    # ----- mutations -----

    def _random_free_cell(self) -> Cell | None:
        free = [
            (x, y)
            for y in range(self.config.grid_height)
            for x in range(self.config.grid_width)
            if not self.is_blocked((x, y), include_head=True)
        ]
        if not free:
            return None
        return self.rng.choice(free)

    def _end(self, reason: str) -> None:
        self.snake.kill(reason)
        logger.info("Game over (%s) with score %d.", self.snake.death_reason, self.score)

    def tick(self) -> TickResult:
        """Count one frame; every update_interval-th frame advances the game."""
        if not self.alive:
            return TickResult(alive=False, grew=False, score=self.score, advanced=False)

        self.frame_count += 1
        if self.frame_count % self.config.update_interval != 0:
            return TickResult(alive=True, grew=False, score=self.score, advanced=False)
        return self.step()

    def step(self) -> TickResult:
        """Advance the game by one logical step, ignoring the frame throttle."""
        if not self.alive:
            return TickResult(alive=False, grew=False, score=self.score, advanced=False)

        if self.auto_mode and self.autopilot.step(self) is None:
            self._end("stuck")
            return TickResult(alive=False, grew=False, score=self.score)

        if not self.snake.advance(self.is_blocked):
            self._end(self.snake.death_reason or "collision")
            return TickResult(alive=False, grew=False, score=self.score)

        grew = False
        if self.snake.head == self.food:
            self.snake.length += 1
            self.score += 1
            grew = True
            self.autopilot.invalidate()
            self.food = self._random_free_cell()
            if self.food is None:
                self.won = True
                self._end("board_full")

        return TickResult(alive=self.alive, grew=grew, score=self.score)

    def set_direction(self, dx: int, dy: int) -> bool:
        """Player input; ignored while the autopilot drives or after game over."""
        if self.auto_mode or not self.alive:
            return False
        return self.snake.set_direction(dx, dy)

    def toggle_autopilot(self) -> bool:
        self.auto_mode = not self.auto_mode
        self.autopilot.invalidate()
        return self.auto_mode

    def add_obstacles(self, cells: Iterable[Cell] | None = None) -> list[Cell]:
        """
        Grow the obstacle set between ticks.

        Without cells, a random batch is placed; otherwise each given cell is
        placed if the incremental rules allow it. Ends the session when the
        food can no longer be reached from the head.
        """
        if not self.alive:
            return []

        head = self.snake.head
        if cells is None:
            added = self.obstacles.add_random(head, self.is_blocked)
        else:
            added = [cell for cell in cells if self.obstacles.add(cell, head, self.is_blocked)]
        self.autopilot.invalidate()

        if self.food is not None and find_path(head, self.food, self.is_blocked) is None:
            self._end("unreachable")
        return added
