# Headless autopilot simulation entrypoint with optional live matplotlib graph.
from __future__ import annotations

import argparse
from collections import Counter, deque
import logging
import os
import threading
import time
from typing import Callable

# Keep matplotlib cache local for environments without writable home config.
LOCAL_MPLCONFIG = os.path.join(os.path.dirname(os.path.abspath(__file__)), ".mplconfig")
os.makedirs(LOCAL_MPLCONFIG, exist_ok=True)
os.environ.setdefault("MPLCONFIGDIR", LOCAL_MPLCONFIG)

import matplotlib.pyplot as plt
import numpy as np

try:
    from .game_logic import MAX_GRID_SIZE, MIN_GRID_SIZE, MODES
    from .utils import (
        HEURISTIC_NAMES,
        EpisodeResult,
        SimConfig,
        chunked_mean,
        encode_board_state,
        format_board,
        make_session,
        run_episode,
        score_summary,
    )
except ImportError:
    from game_logic import MAX_GRID_SIZE, MIN_GRID_SIZE, MODES
    from utils import (
        HEURISTIC_NAMES,
        EpisodeResult,
        SimConfig,
        chunked_mean,
        encode_board_state,
        format_board,
        make_session,
        run_episode,
        score_summary,
    )


def _update_progress_plots(ax_trend: plt.Axes, ax_hist: plt.Axes, scores: list[float]) -> None: #type: ignore
    ax_trend.clear()
    ax_trend.set_title("Autopilot Score Trend (Average per 10 Episodes)")
    ax_trend.set_xlabel("Episode")
    ax_trend.set_ylabel("Food eaten")
    ax_trend.grid(alpha=0.25)

    x10, mean10 = chunked_mean(scores, chunk_size=10)
    if x10.size > 0:
        ax_trend.plot(
            x10,
            mean10,
            color="#1f77b4",
            linewidth=2.2,
            marker="o",
            markersize=3,
            label="Average score (per 10 episodes)",
        )
    handles, _ = ax_trend.get_legend_handles_labels()
    if handles:
        ax_trend.legend(loc="upper left")

    ax_hist.clear()
    ax_hist.set_title("Score Distribution")
    ax_hist.set_xlabel("Food eaten")
    ax_hist.set_ylabel("Count")
    ax_hist.grid(alpha=0.2)

    if scores:
        max_score = int(max(scores))
        bins = np.arange(-0.5, max_score + 1.5, 1.0)
        ax_hist.hist(scores, bins=bins, color="#44b5a4", alpha=0.85, edgecolor="#17323a") #type: ignore
        mean_all = float(np.mean(scores))
        median_all = float(np.median(scores))
        ax_hist.axvline(mean_all, color="#1f77b4", linestyle="--", linewidth=1.6, label=f"Mean: {mean_all:.2f}")
        ax_hist.axvline(median_all, color="#ff7f0e", linestyle="-", linewidth=1.6, label=f"Median: {median_all:.2f}")
        handles, _ = ax_hist.get_legend_handles_labels()
        if handles:
            ax_hist.legend(loc="upper right")


def _print_progress_bar(episode: int, total: int, bar_length: int = 50) -> None:
    """Print a compact progress bar in the terminal."""
    total_safe = max(1, int(total))
    percent = min(1.0, max(0.0, episode / total_safe))
    filled = int(bar_length * percent)
    bar = "#" * filled + "-" * (bar_length - filled)
    print(f"\rProgress: |{bar}| {episode}/{total_safe} ({percent * 100:.1f}%)", end="", flush=True)


def simulate_offline(
    cfg: SimConfig,
    show_plot: bool = True,
    print_every: int = 25,
    show_board: bool = False,
    stop_flag: threading.Event | None = None,
    episode_callback: Callable[[int, EpisodeResult], None] | None = None,
) -> list[EpisodeResult]:
    """Run cfg.episodes autopilot sessions; optionally show a live matplotlib chart."""
    cfg.validate()

    results: list[EpisodeResult] = []
    scores: list[float] = []
    log_chunk_size = max(1, int(print_every))
    recent_chunk: deque[float] = deque(maxlen=log_chunk_size)
    recent_ticks: deque[float] = deque(maxlen=log_chunk_size)
    recent_replans: deque[float] = deque(maxlen=log_chunk_size)
    best: EpisodeResult | None = None
    best_board: str | None = None

    header = (
        f"{'Episodes':<18}"
        f"{'TotSec':>9}"
        f"{'ChunkSec':>10}"
        f"{'Last':>6}"
        f"{'Avg':>8}"
        f"{'Med':>8}"
        f"{'Max':>6}"
        f"{'Ticks':>9}"
        f"{'Replans':>9}"
    )
    print(f"\nMode: {cfg.mode}  Grid: {cfg.grid_width}x{cfg.grid_height}  Heuristic: {cfg.heuristic}\n")
    print(header)
    print("-" * len(header))

    if show_plot:
        plt.ion()
        fig, (ax_trend, ax_hist) = plt.subplots(2, 1, figsize=(10, 8))
        fig.subplots_adjust(hspace=0.35)

    sim_start_t = time.perf_counter()
    chunk_start_t = sim_start_t

    for episode in range(1, cfg.episodes + 1):
        if stop_flag and stop_flag.is_set():
            break
        _print_progress_bar(episode, cfg.episodes)

        session = make_session(cfg, episode_index=episode)
        result = run_episode(cfg, episode_index=episode, stop_flag=stop_flag, session=session)
        results.append(result)
        scores.append(float(result.score))
        recent_chunk.append(float(result.score))
        recent_ticks.append(float(result.ticks))
        recent_replans.append(float(result.replans))
        if best is None or result.score > best.score:
            best = result
            best_board = format_board(encode_board_state(session))

        if episode_callback:
            episode_callback(episode, result)

        if show_plot and (episode == 1 or episode % 10 == 0 or episode == cfg.episodes):
            _update_progress_plots(ax_trend, ax_hist, scores) #type: ignore
            fig.canvas.draw_idle() #type: ignore
            fig.canvas.flush_events() #type: ignore
            plt.pause(0.001)

        if episode % log_chunk_size == 0 or episode == cfg.episodes:
            print()
            total_elapsed = time.perf_counter() - sim_start_t
            chunk_elapsed = time.perf_counter() - chunk_start_t
            range_start = episode - len(recent_chunk) + 1
            episode_label = f"{range_start}-{episode}/{cfg.episodes}"
            row = (
                f"{episode_label:<18}"
                f"{total_elapsed:>9.1f}"
                f"{chunk_elapsed:>10.1f}"
                f"{result.score:>6.0f}"
                f"{float(np.mean(recent_chunk)):>8.2f}"
                f"{float(np.median(recent_chunk)):>8.2f}"
                f"{float(np.max(recent_chunk)):>6.0f}"
                f"{float(np.mean(recent_ticks)):>9.1f}"
                f"{float(np.mean(recent_replans)):>9.1f}"
            )
            print(row)
            print()
            chunk_start_t = time.perf_counter()

    print()
    if results:
        summary = score_summary(scores)
        print(
            f"Score mean {summary['mean']:.2f}, median {summary['median']:.1f}, "
            f"max {summary['max']:.0f}, min {summary['min']:.0f}"
        )
        reasons = Counter(result.death_reason or "timeout" for result in results)
        print("Endings: " + ", ".join(f"{reason}={count}" for reason, count in reasons.most_common()))
    if show_board and best is not None and best_board is not None:
        print(f"\nFinal board of best episode (score {best.score}):")
        print(best_board)

    if show_plot:
        _update_progress_plots(ax_trend, ax_hist, scores) #type: ignore
        plt.ioff()
        plt.show()

    return results


def parse_args() -> argparse.Namespace:
    defaults = SimConfig()
    parser = argparse.ArgumentParser(description="Headless Snake autopilot simulation")
    parser.add_argument("--episodes", type=int, default=defaults.episodes)
    parser.add_argument("--mode", default=defaults.mode, choices=MODES)
    parser.add_argument("--grid-width", type=int, default=defaults.grid_width)
    parser.add_argument("--grid-height", type=int, default=defaults.grid_height)
    parser.add_argument("--max-ticks", type=int, default=defaults.max_ticks, help="Tick cap per episode")
    parser.add_argument("--heuristic", default=defaults.heuristic, choices=HEURISTIC_NAMES)
    parser.add_argument(
        "--random-obstacles",
        type=int,
        default=defaults.random_obstacles,
        help="Obstacle count for random mode",
    )
    parser.add_argument("--seed", type=int, default=None, help="Base seed; episode i uses seed + i")
    parser.add_argument("--print-every", type=int, default=25, help="Episodes per summary row")
    parser.add_argument("--no-plot", action="store_true", help="Disable matplotlib live plot")
    parser.add_argument("--show-board", action="store_true", help="Print the best episode's final board")
    parser.add_argument("--verbose", action="store_true", help="Log session events at DEBUG level")
    return parser.parse_args()


def run_offline_simulation_cli() -> None:
    args = parse_args()
    for label, value in (("--grid-width", args.grid_width), ("--grid-height", args.grid_height)):
        if not (MIN_GRID_SIZE <= value <= MAX_GRID_SIZE):
            raise SystemExit(f"{label} must be between {MIN_GRID_SIZE} and {MAX_GRID_SIZE}.")
    if args.print_every <= 0:
        raise SystemExit("--print-every must be > 0.")

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    cfg = SimConfig(
        grid_width=args.grid_width,
        grid_height=args.grid_height,
        mode=args.mode,
        episodes=args.episodes,
        max_ticks=args.max_ticks,
        heuristic=args.heuristic,
        random_obstacles=args.random_obstacles,
        seed=args.seed,
    )
    try:
        cfg.validate()
    except ValueError as exc:
        raise SystemExit(f"Invalid simulation settings: {exc}")

    simulate_offline(
        cfg,
        show_plot=not args.no_plot,
        print_every=args.print_every,
        show_board=args.show_board,
    )


if __name__ == "__main__":
    run_offline_simulation_cli()
