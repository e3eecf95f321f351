import random
from collections import deque

import pytest

from game_logic import (
    ADD_OBSTACLES_MAX,
    DOWN,
    LEFT,
    RIGHT,
    UP,
    GameSession,
    Obstacles,
    Snake,
    SnakeConfig,
    cell_to_pixel,
    pixel_to_cell,
)
from maze import spawn_clear_area


def make_session(width=11, height=11, autopilot=False, seed=0, **overrides):
    settings = dict(
        grid_width=width,
        grid_height=height,
        mode="random",
        random_obstacles=0,
        update_interval=1,
        autopilot=autopilot,
    )
    settings.update(overrides)
    return GameSession(SnakeConfig(**settings), rng=random.Random(seed))


def shape_snake(snake, cells):
    snake.positions = deque(cells)
    snake.cells = set(cells)
    snake.length = len(cells)


@pytest.mark.parametrize(
    "overrides",
    [
        {"grid_width": 3},
        {"grid_height": 200},
        {"block_size": 2},
        {"update_interval": 0},
        {"mode": "spiral"},
        {"heuristic": "chebyshev"},
        {"random_obstacles": -1},
    ],
)
def test_config_validation_rejects_bad_values(overrides):
    with pytest.raises(ValueError):
        SnakeConfig(**overrides).validate()


def test_default_config_is_valid():
    cfg = SnakeConfig()
    cfg.validate()
    assert cfg.pixel_size == (420, 420)


def test_pixel_conversions():
    assert cell_to_pixel((3, 4), 20) == (60, 80)
    assert pixel_to_cell(60, 80, 20) == (3, 4)
    assert pixel_to_cell(79, 99, 20) == (3, 4)


def test_reset_places_snake_at_centre_and_food_on_free_cell():
    session = make_session()
    assert session.snake_cells() == [(5, 5)]
    assert session.snake.length == 1
    assert session.snake.direction == RIGHT
    assert session.score == 0
    assert session.alive
    assert session.food_cell() not in session.snake_cells()
    assert session.food_cell() not in session.obstacle_cells()


def test_reset_rejects_unknown_mode():
    session = make_session()
    with pytest.raises(ValueError):
        session.reset("spiral")


def test_is_blocked_variants():
    session = make_session()
    session.food = (0, 0)
    session.obstacles.add((8, 8), session.snake.head, session.is_blocked)

    assert session.is_blocked((-1, 0))
    assert session.is_blocked((11, 5))
    assert session.is_blocked((8, 8))
    assert not session.is_blocked((5, 5))
    assert session.is_blocked((5, 5), include_head=True)
    assert not session.is_blocked((0, 0))
    assert session.is_blocked((0, 0), include_food=True)


def test_reversal_is_ignored():
    session = make_session()
    assert not session.set_direction(-1, 0)
    assert session.snake.pending_direction == RIGHT
    assert session.set_direction(0, 1)
    assert session.snake.pending_direction == DOWN


def test_two_quick_turns_cannot_reverse():
    session = make_session()
    assert session.set_direction(*UP)
    # Still heading right until the next step applies the turn.
    assert not session.set_direction(*LEFT)
    assert session.snake.pending_direction == UP


def test_non_unit_direction_is_ignored():
    session = make_session()
    assert not session.set_direction(1, 1)
    assert not session.set_direction(2, 0)
    assert session.snake.pending_direction == RIGHT


def test_player_input_ignored_while_autopilot_drives():
    session = make_session(autopilot=True)
    assert not session.set_direction(*UP)
    assert session.snake.pending_direction == RIGHT


def test_wall_collision_ends_session():
    session = make_session()
    session.food = (0, 0)
    results = [session.tick() for _ in range(6)]

    assert all(r.alive for r in results[:5])
    assert not results[5].alive
    assert session.death_reason == "wall"
    assert session.snake.head == (10, 5)


def test_self_collision():
    snake = Snake((5, 5), 11, 11)
    shape_snake(snake, [(5, 5), (6, 5), (6, 4), (5, 4), (4, 4)])
    snake.direction = LEFT
    snake.pending_direction = LEFT
    assert snake.set_direction(*UP)

    assert not snake.advance(lambda c: snake.occupies_body(c))
    assert not snake.alive
    assert snake.death_reason == "self"


def test_obstacle_collision():
    session = make_session()
    session.food = (0, 0)
    assert session.add_obstacles(cells=[(7, 5)]) == [(7, 5)]

    assert session.tick().alive
    result = session.tick()
    assert not result.alive
    assert session.death_reason == "obstacle"


def test_eating_grows_by_one():
    session = make_session()
    session.food = (6, 5)
    before_positions = len(session.snake)
    before_length = session.snake.length

    result = session.tick()

    assert result.grew
    assert result.score == 1
    assert session.snake.length == before_length + 1
    assert len(session.snake) >= before_positions
    assert session.food_cell() not in session.snake_cells()

    session.food = (0, 0)
    session.tick()
    assert session.snake_cells() == [(7, 5), (6, 5)]


def test_tail_follows_at_target_length():
    session = make_session()
    for x in (6, 7, 8):
        session.food = (x, 5)
        assert session.tick().grew
    session.food = (0, 0)
    session.set_direction(*DOWN)
    session.tick()
    session.tick()

    assert session.snake.length == 4
    assert session.snake_cells() == [(8, 7), (8, 6), (8, 5), (7, 5)]


def test_positions_stay_unique_under_autopilot():
    for seed in range(5):
        cfg = SnakeConfig(mode="random", update_interval=1, grid_width=15, grid_height=15)
        session = GameSession(cfg, rng=random.Random(seed))
        for _ in range(400):
            result = session.tick()
            if not result.alive:
                break
            cells = session.snake_cells()
            assert len(cells) == len(set(cells))


def test_frame_throttle():
    session = make_session(update_interval=3)
    session.food = (0, 0)
    results = [session.tick() for _ in range(3)]

    assert [r.advanced for r in results] == [False, False, True]
    assert session.snake.head == (6, 5)


def test_dead_session_does_not_change():
    session = make_session()
    session.food = (0, 0)
    while session.tick().alive:
        pass
    cells = session.snake_cells()

    result = session.tick()
    assert not result.alive
    assert not result.advanced
    assert session.snake_cells() == cells
    assert session.add_obstacles() == []
    assert not session.set_direction(*UP)


def test_toggle_autopilot_clears_path():
    session = make_session(autopilot=True)
    session.food = (0, 0)
    session.tick()
    assert session.autopilot.path

    assert session.toggle_autopilot() is False
    assert not session.autopilot.path
    assert session.set_direction(*session.snake.direction)
    assert session.toggle_autopilot() is True
    assert not session.set_direction(*session.snake.direction)


def test_walling_in_food_ends_session():
    session = make_session(width=10, height=10)
    session.food = (2, 2)

    assert session.add_obstacles(cells=[(2, 1), (1, 2), (3, 2)]) == [(2, 1), (1, 2), (3, 2)]
    assert session.alive

    session.add_obstacles(cells=[(2, 3)])
    assert not session.alive
    assert session.death_reason == "unreachable"
    assert not session.tick().alive


def test_explicit_obstacles_follow_placement_rules():
    session = make_session()
    session.food = (0, 0)
    head = session.snake.head

    rejected = [(6, 6), (4, 5), (0, 0), head, (20, 20)]
    assert session.add_obstacles(cells=rejected) == []
    assert session.obstacle_cells() == []


def test_random_obstacle_growth_respects_rules():
    session = make_session(seed=3)
    session.tick()
    head = session.snake.head
    added = session.add_obstacles()

    assert 0 < len(added) <= ADD_OBSTACLES_MAX
    for cell in added:
        assert max(abs(cell[0] - head[0]), abs(cell[1] - head[1])) > 1
        assert cell != session.food_cell()
        assert cell not in session.snake_cells()
    assert len(set(added)) == len(added)
    assert not session.autopilot.path


def test_add_single_random_gives_up_quietly():
    obstacles = Obstacles(5, 5, random.Random(0))
    assert obstacles.add_single_random((2, 2), lambda cell, **kw: True) is None
    assert len(obstacles) == 0


def test_bulk_random_generation_tolerates_repeats():
    obstacles = Obstacles(5, 5, random.Random(0))
    obstacles.generate_random(100)
    assert 0 < len(obstacles) <= 25
    assert len(obstacles.positions) == len(obstacles)


def test_random_mode_keeps_spawn_clear():
    for seed in range(10):
        cfg = SnakeConfig(mode="random", random_obstacles=200)
        session = GameSession(cfg, rng=random.Random(seed))
        for cell in spawn_clear_area(21, 21):
            assert cell not in session.obstacle_cells()
        assert session.food_cell() not in session.obstacle_cells()


def test_maze_mode_reset():
    session = GameSession(SnakeConfig(mode="maze"), seed=8)
    obstacles = set(session.obstacle_cells())

    assert len(obstacles) > 100
    assert session.snake.head == (10, 10)
    assert session.food_cell() not in obstacles
    for cell in spawn_clear_area(21, 21):
        assert cell not in obstacles


def test_reset_switches_mode_and_clears_state():
    session = make_session(autopilot=True)
    session.food = (6, 5)
    session.tick()
    assert session.score == 1

    session.reset("maze")
    assert session.mode == "maze"
    assert session.score == 0
    assert session.snake_cells() == [(5, 5)]
    assert not session.autopilot.path
    assert session.obstacle_cells()


def test_snapshot_contents():
    session = make_session()
    snap = session.snapshot()
    assert snap["snake"] == [(5, 5)]
    assert snap["food"] == session.food
    assert snap["obstacles"] == []
    assert snap["score"] == 0
    assert snap["alive"] is True
    assert snap["mode"] == "random"
