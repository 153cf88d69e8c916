"""Command-line interface and run loop."""

from __future__ import annotations

import argparse
import cProfile
import json
import logging
import os
import pstats
import time
from pathlib import Path
from typing import Dict, Optional

from . import config
from .batch import Stats, play_episode, play_multiple
from .registry import available_agents
from .rng import RandomSource
from .trace import AgentLog

logger = logging.getLogger(__name__)


def _resolve(path: str) -> Path:
    """Bare file names go to the runs directory; anything with a directory is used as given."""
    p = Path(path)
    if not p.is_absolute() and p.parent == Path("."):
        return config.RUNS_DIR / p
    return p


def _open_jsonl(path: Optional[str]):
    if not path:
        return None
    p = _resolve(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    return p.open("a", encoding="utf-8")


def _trace_path(path: str, episode: int, num_games: int) -> Path:
    p = _resolve(path)
    if num_games <= 1:
        return p
    return p.with_name(f"{p.stem}_{episode}{p.suffix}")


def run(
    agent_name: str,
    num_games: int,
    width: Optional[int] = None,
    height: Optional[int] = None,
    seed: Optional[int] = None,
    max_turns: Optional[int] = None,
    workers: Optional[int] = None,
    render: bool = False,
    debug: bool = False,
    log_jsonl: Optional[str] = None,
    trace: Optional[str] = None,
    runs_dir: Optional[str] = None,
) -> int:
    config_snapshot = {
        "BOARD_WIDTH": config.BOARD_WIDTH,
        "BOARD_HEIGHT": config.BOARD_HEIGHT,
        "MAX_TURNS_PER_GAME": config.MAX_TURNS_PER_GAME,
        "UI_DEBUG_MODE": config.UI_DEBUG_MODE,
        "RUNS_DIR": config.RUNS_DIR,
    }
    config.UI_DEBUG_MODE = bool(debug)
    if width is not None:
        config.BOARD_WIDTH = int(width)
    if height is not None:
        config.BOARD_HEIGHT = int(height)
    if max_turns is not None:
        config.MAX_TURNS_PER_GAME = int(max_turns)
    if runs_dir:
        config.set_runs_dir(runs_dir)

    jsonl_f = None
    try:
        config.validate_config()
        if agent_name not in available_agents():
            logger.error("Unknown agent %r; available: %s", agent_name, ", ".join(available_agents()))
            return 2
        seed = config.DEFAULT_SEED if seed is None else int(seed)
        logger.info(
            "Playing %d game(s) of %s on %dx%d (seed=%d)",
            num_games,
            agent_name,
            config.BOARD_WIDTH,
            config.BOARD_HEIGHT,
            seed,
        )

        jsonl_f = _open_jsonl(log_jsonl)

        def write_row(row: Dict) -> None:
            if jsonl_f is None:
                return
            out = {"ts": time.time()}
            out.update(row)
            jsonl_f.write(json.dumps(out) + "\n")
            jsonl_f.flush()

        t0 = time.time()
        if render or trace:
            # Rendering needs the main thread, and traces are per episode.
            stats = Stats()
            root = RandomSource(seed)
            for i in range(num_games):
                log = AgentLog() if trace else None
                row = play_episode(
                    agent_name,
                    root.spawn(i),
                    config.BOARD_WIDTH,
                    config.BOARD_HEIGHT,
                    config.MAX_TURNS_PER_GAME,
                    log,
                    render=render,
                )
                row["episode"] = i
                stats.record(row)
                write_row(row)
                if log is not None:
                    log.save(str(_trace_path(trace, i, num_games)))
                logger.info(
                    "Game %d/%d: %s after %d turns (length %d, %.2fs)",
                    i + 1,
                    num_games,
                    "won" if row["won"] else "lost",
                    row["turns"],
                    row["length"],
                    row["elapsed"],
                )
        else:
            stats = play_multiple(
                agent_name,
                num_games,
                seed=seed,
                workers=workers,
                width=config.BOARD_WIDTH,
                height=config.BOARD_HEIGHT,
                max_turns=config.MAX_TURNS_PER_GAME,
                on_episode=write_row,
            )

        elapsed = time.time() - t0
        if len(stats):
            logger.info("Session: %s | games=%d (%.2fs)", stats.summary(), len(stats), elapsed)
        return 0
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130
    finally:
        if jsonl_f is not None:
            jsonl_f.close()
        for attr, value in config_snapshot.items():
            setattr(config, attr, value)


def main(argv: Optional[list[str]] = None) -> int:
    # Ensure pygame banner stays hidden even when importing via `hamsnake.cli`.
    os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

    parser = argparse.ArgumentParser(description="Snake agents that keep the board reachable")
    parser.add_argument(
        "--agent",
        type=str,
        default=config.DEFAULT_AGENT,
        help=f"Agent to play with ({', '.join(available_agents())})",
    )
    parser.add_argument("--list-agents", action="store_true", help="Print the available agents and exit")
    parser.add_argument("--num-games", "--games", type=int, default=config.DEFAULT_NUM_GAMES, help="Number of games to run")
    parser.add_argument("--width", type=int, default=None, help="Board width (even)")
    parser.add_argument("--height", type=int, default=None, help="Board height (even)")
    parser.add_argument("--seed", type=int, default=None, help="Root seed; episode i is seeded from (seed, i)")
    parser.add_argument("--max-turns", type=int, default=None, help="Per-game turn cap; reaching it counts as a loss")
    parser.add_argument("--workers", type=int, default=None, help="Worker threads for batch runs")
    parser.add_argument("--render", action="store_true", help="Show the game in a pygame window (one game at a time)")
    parser.add_argument("--debug", action="store_true", help="Draw the agent's plan and cycle when rendering")
    parser.add_argument("--profile", action="store_true", help="Enable profiling output")
    parser.add_argument(
        "--log-jsonl",
        type=str,
        default=None,
        help="Append per-episode results to a JSONL file (e.g. runs/session.jsonl)",
    )
    parser.add_argument(
        "--trace",
        type=str,
        default=None,
        help="Save each episode's agent trace as msgpack (episode index appended when playing several games)",
    )
    parser.add_argument(
        "--runs-dir",
        type=str,
        default=None,
        help="Override the runs directory (default: runs/ or $HAMSNAKE_RUNS_DIR)",
    )

    args = parser.parse_args(argv)

    if args.list_agents:
        for name in available_agents():
            print(name)
        return 0

    kwargs = dict(
        agent_name=args.agent,
        num_games=args.num_games,
        width=args.width,
        height=args.height,
        seed=args.seed,
        max_turns=args.max_turns,
        workers=args.workers,
        render=args.render,
        debug=args.debug,
        log_jsonl=args.log_jsonl,
        trace=args.trace,
        runs_dir=args.runs_dir,
    )

    if args.profile:
        profiler = cProfile.Profile()
        profiler.enable()
        rc = run(**kwargs)
        profiler.disable()
        stats = pstats.Stats(profiler).sort_stats("cumulative")
        print("\n=== Profiling Results ===")
        stats.print_stats(30)
        return rc

    return run(**kwargs)
