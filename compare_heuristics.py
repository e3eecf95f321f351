"""Compare the two A* heuristics on identical autopilot sessions."""
from __future__ import annotations

import argparse
from dataclasses import replace
import numpy as np

try:
    from .game_logic import MODES
    from .utils import HEURISTIC_NAMES, SimConfig, run_episode, score_summary
except ImportError:
    from game_logic import MODES
    from utils import HEURISTIC_NAMES, SimConfig, run_episode, score_summary


def _compare_metric(name: str, value1: float, value2: float, label1: str, label2: str) -> None:
    if value1 > value2:
        winner = label1
    elif value2 > value1:
        winner = label2
    else:
        winner = "Tie"
    print(f"{name:<20} {value1:>18.2f} {value2:>18.2f} {winner:>18}")


def compare_heuristics(
    base: SimConfig,
    heuristic1: str = "squared_euclidean",
    heuristic2: str = "manhattan",
    num_episodes: int = 100,
) -> tuple[np.ndarray, np.ndarray]:
    """Replay the same seeded layouts under both heuristics and print a table."""
    if num_episodes <= 0:
        raise ValueError("num_episodes must be > 0")
    if base.seed is None:
        # Both runs must see the same layouts.
        base = replace(base, seed=0)

    cfg1 = replace(base, heuristic=heuristic1, episodes=num_episodes)
    cfg2 = replace(base, heuristic=heuristic2, episodes=num_episodes)
    cfg1.validate()
    cfg2.validate()

    scores1: list[float] = []
    scores2: list[float] = []
    ticks1: list[float] = []
    ticks2: list[float] = []

    print(f"\nRunning {num_episodes} episodes for each heuristic...")
    for episode in range(1, num_episodes + 1):
        if episode % 10 == 0 or episode == num_episodes:
            print(f"Episode {episode}/{num_episodes}", end="\r", flush=True)

        result1 = run_episode(cfg1, episode_index=episode)
        result2 = run_episode(cfg2, episode_index=episode)
        scores1.append(float(result1.score))
        scores2.append(float(result2.score))
        ticks1.append(float(result1.ticks) / max(1, result1.score))
        ticks2.append(float(result2.ticks) / max(1, result2.score))
    print()

    summary1 = score_summary(scores1)
    summary2 = score_summary(scores2)
    scores1_arr = np.asarray(scores1, dtype=np.float32)
    scores2_arr = np.asarray(scores2, dtype=np.float32)

    print("=" * 78)
    print("COMPARISON RESULTS")
    print("=" * 78)
    print(f"{'Metric':<20} {heuristic1:>18} {heuristic2:>18} {'Winner':>18}")
    print("-" * 78)
    _compare_metric("Mean score", summary1["mean"], summary2["mean"], heuristic1, heuristic2)
    _compare_metric("Median score", summary1["median"], summary2["median"], heuristic1, heuristic2)
    _compare_metric("Max score", summary1["max"], summary2["max"], heuristic1, heuristic2)
    _compare_metric("Min score", summary1["min"], summary2["min"], heuristic1, heuristic2)
    _compare_metric("25th percentile", summary1["p25"], summary2["p25"], heuristic1, heuristic2)
    _compare_metric("75th percentile", summary1["p75"], summary2["p75"], heuristic1, heuristic2)
    # Fewer ticks per food is better, so compare negated values.
    _compare_metric("-Ticks per food", -float(np.mean(ticks1)), -float(np.mean(ticks2)), heuristic1, heuristic2)
    print("=" * 78)

    wins1 = int(np.sum(scores1_arr > scores2_arr))
    wins2 = int(np.sum(scores2_arr > scores1_arr))
    ties = int(np.sum(scores1_arr == scores2_arr))
    print(f"Head-to-head: {heuristic1} wins {wins1}, {heuristic2} wins {wins2}, Ties {ties}")
    print(
        f"Win rate: {heuristic1} {wins1 / num_episodes * 100:.1f}%, "
        f"{heuristic2} {wins2 / num_episodes * 100:.1f}%"
    )
    return scores1_arr, scores2_arr


def main() -> None:
    defaults = SimConfig()
    parser = argparse.ArgumentParser(description="Compare A* heuristics for the Snake autopilot")
    parser.add_argument("--heuristic1", default="squared_euclidean", choices=HEURISTIC_NAMES)
    parser.add_argument("--heuristic2", default="manhattan", choices=HEURISTIC_NAMES)
    parser.add_argument("--episodes", type=int, default=100, help="Number of episodes per heuristic")
    parser.add_argument("--mode", default=defaults.mode, choices=MODES)
    parser.add_argument("--grid-width", type=int, default=defaults.grid_width)
    parser.add_argument("--grid-height", type=int, default=defaults.grid_height)
    parser.add_argument("--max-ticks", type=int, default=defaults.max_ticks)
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args()

    base = SimConfig(
        grid_width=args.grid_width,
        grid_height=args.grid_height,
        mode=args.mode,
        max_ticks=args.max_ticks,
        seed=args.seed,
    )
    try:
        compare_heuristics(base, args.heuristic1, args.heuristic2, args.episodes)
    except ValueError as exc:
        raise SystemExit(str(exc))


if __name__ == "__main__":
    main()
