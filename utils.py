# Shared headless helpers: simulation config, board encoding, episode runner, score stats.
from __future__ import annotations

from dataclasses import dataclass
import random
import threading
from typing import Callable

import numpy as np

try:
    from .game_logic import MODES, GameSession, SnakeConfig
    from .pathfinding import HEURISTICS
except ImportError:
    from game_logic import MODES, GameSession, SnakeConfig
    from pathfinding import HEURISTICS


HEURISTIC_NAMES = tuple(HEURISTICS)

EMPTY = 0.0
FOOD = 0.5
BODY = -0.5
OBSTACLE = -1.0
HEAD = 1.0

BOARD_GLYPHS = {EMPTY: ".", FOOD: "F", BODY: "o", OBSTACLE: "#", HEAD: "@"}


@dataclass
class SimConfig:
    grid_width: int = 21
    grid_height: int = 21
    mode: str = "maze"
    episodes: int = 200
    max_ticks: int = 2000
    heuristic: str = "squared_euclidean"
    random_obstacles: int = 60
    seed: int | None = None

    def validate(self) -> None:
        if self.episodes <= 0:
            raise ValueError("episodes must be > 0")
        if self.max_ticks <= 0:
            raise ValueError("max_ticks must be > 0")
        if self.mode not in MODES:
            raise ValueError(f"Unknown mode: {self.mode}")
        self.game_config().validate()

    def game_config(self) -> SnakeConfig:
        return SnakeConfig(
            grid_width=self.grid_width,
            grid_height=self.grid_height,
            update_interval=1,
            random_obstacles=self.random_obstacles,
            mode=self.mode,
            autopilot=True,
            heuristic=self.heuristic,
        )


@dataclass
class EpisodeResult:
    score: int
    length: int
    ticks: int
    death_reason: str | None
    replans: int


def encode_board_state(session: GameSession) -> np.ndarray:
    """
    (height, width) float board:
    - 0.0: empty
    - 0.5: food
    - -0.5: snake body
    - -1.0: obstacle
    - 1.0: snake head
    """
    board = np.zeros((session.config.grid_height, session.config.grid_width), dtype=np.float32)

    for x, y in session.obstacle_cells():
        board[y, x] = OBSTACLE

    if session.food is not None:
        fx, fy = session.food
        board[fy, fx] = FOOD

    for idx, (x, y) in enumerate(session.snake_cells()):
        board[y, x] = HEAD if idx == 0 else BODY

    return board


def format_board(board: np.ndarray) -> str:
    """Text rendering of an encoded board, top row first."""
    return "\n".join("".join(BOARD_GLYPHS[float(v)] for v in row) for row in board)


def make_session(cfg: SimConfig, episode_index: int = 0) -> GameSession:
    """Fresh autopilot session; seeded sessions are reproducible per episode."""
    rng = random.Random(None if cfg.seed is None else cfg.seed + episode_index)
    return GameSession(cfg.game_config(), rng=rng)


def run_episode(
    cfg: SimConfig,
    episode_index: int = 0,
    render_step: Callable[[GameSession, int], None] | None = None,
    stop_flag: threading.Event | None = None,
    session: GameSession | None = None,
) -> EpisodeResult:
    """Drive one autopilot session until it ends or hits max_ticks."""
    if session is None:
        session = make_session(cfg, episode_index)

    ticks = 0
    for tick in range(cfg.max_ticks):
        if stop_flag and stop_flag.is_set():
            break
        result = session.step()
        ticks = tick + 1
        if render_step is not None:
            render_step(session, tick)
        if not result.alive:
            break

    return EpisodeResult(
        score=session.score,
        length=len(session.snake),
        ticks=ticks,
        death_reason=session.death_reason,
        replans=session.autopilot.replans,
    )


def chunked_mean(values: list[float], chunk_size: int) -> tuple[np.ndarray, np.ndarray]:
    """Mean value per fixed-size chunk, keyed by the episode index at the chunk end."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be > 0")

    arr = np.asarray(values, dtype=np.float32)
    if arr.size == 0:
        empty = np.array([], dtype=np.float32)
        return empty, empty

    x_end: list[float] = []
    means: list[float] = []
    for start in range(0, arr.size, chunk_size):
        chunk = arr[start : start + chunk_size]
        x_end.append(float(start + chunk.size))
        means.append(float(np.mean(chunk)))

    return np.asarray(x_end, dtype=np.float32), np.asarray(means, dtype=np.float32)


def score_summary(values: list[float]) -> dict[str, float]:
    """Descriptive stats used by the CLIs' result tables."""
    if not values:
        raise ValueError("values cannot be empty")
    arr = np.asarray(values, dtype=np.float32)
    return {
        "mean": float(arr.mean()),
        "median": float(np.median(arr)),
        "max": float(arr.max()),
        "min": float(arr.min()),
        "std": float(arr.std()),
        "p25": float(np.percentile(arr, 25)),
        "p75": float(np.percentile(arr, 75)),
    }
