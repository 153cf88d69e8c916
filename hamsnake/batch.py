"""Playing whole games, one at a time or as a threaded batch."""

from __future__ import annotations

import logging
import math
import threading
import time
from typing import Callable, Dict, List, Optional

from . import config
from .agent import Agent
from .game import SnakeGame
from .registry import make_agent
from .rng import RandomSource
from .trace import AgentLog, Channel

logger = logging.getLogger(__name__)

TurnCallback = Callable[[SnakeGame, Agent], None]
EpisodeCallback = Callable[[Dict], None]


def play(
    game: SnakeGame,
    agent: Agent,
    max_turns: Optional[int] = None,
    log: Optional[AgentLog] = None,
    on_turn: Optional[TurnCallback] = None,
) -> SnakeGame:
    """Run ``agent`` on ``game`` until it ends or ``max_turns`` is reached.

    Hitting the turn cap ends the game as a loss.
    """
    cap = int(config.MAX_TURNS_PER_GAME if max_turns is None else max_turns)
    while not game.done:
        if game.turn >= cap:
            logger.info("Reached per-game turn cap (%d); ending game", cap)
            game.stop("turn_limit")
            break
        game.move(agent.decide(game, log))
        if on_turn is not None:
            on_turn(game, agent)
        if game.turn % config.PROGRESS_LOG_INTERVAL == 0:
            logger.debug("Turn %d | length %d", game.turn, len(game.snake))
    return game


def _quantile(sorted_xs: List[float], q: float) -> float:
    pos = q * (len(sorted_xs) - 1)
    lo = int(math.floor(pos))
    hi = min(lo + 1, len(sorted_xs) - 1)
    frac = pos - lo
    return sorted_xs[lo] + (sorted_xs[hi] - sorted_xs[lo]) * frac


def debug_info(log: Optional[AgentLog], turn: int) -> Optional[Dict]:
    """Plan and cycle the agent logged for ``turn``, for the debug overlay."""
    if log is None:
        return None
    info: Dict = {}
    plan = log.entry(Channel.PLAN, turn)
    if isinstance(plan, list):
        info["plan"] = plan
    cycle = log.latest_cycle(turn)
    if isinstance(cycle, list):
        info["cycle"] = cycle
    return info


class Stats:
    """Per-episode results of a batch. Safe to record from several threads."""

    def __init__(self) -> None:
        self.episodes: List[Dict] = []
        self._lock = threading.Lock()

    def record(self, row: Dict) -> None:
        with self._lock:
            self.episodes.append(row)

    def __len__(self) -> int:
        return len(self.episodes)

    def sort(self) -> None:
        with self._lock:
            self.episodes.sort(key=lambda row: row.get("episode", 0))

    @property
    def turns(self) -> List[int]:
        with self._lock:
            return [row["turns"] for row in self.episodes]

    @property
    def wins(self) -> List[bool]:
        with self._lock:
            return [bool(row["won"]) for row in self.episodes]

    def mean_turns(self) -> float:
        turns = self.turns
        return sum(turns) / len(turns) if turns else 0.0

    def stddev(self) -> float:
        turns = self.turns
        if not turns:
            return 0.0
        mean = sum(turns) / len(turns)
        return math.sqrt(sum((t - mean) ** 2 for t in turns) / len(turns))

    def quantiles(self) -> List[float]:
        """Min, lower quartile, median, upper quartile and max of the turn counts."""
        turns = sorted(self.turns)
        if not turns:
            return []
        return [_quantile(turns, i / 4) for i in range(5)]

    def loss_rate(self) -> float:
        wins = self.wins
        return 1.0 - sum(wins) / len(wins) if wins else 0.0

    def summary(self) -> str:
        quantiles = ", ".join(f"{q:g}" for q in self.quantiles())
        out = f"turns: mean {self.mean_turns():.1f}, stddev {self.stddev():.1f}, quantiles [{quantiles}]"
        loss = self.loss_rate()
        if loss > 0:
            out += f"  LOST: {loss * 100:.1f}%"
        return out


def play_episode(
    agent_name: str,
    episode_rng: RandomSource,
    width: int,
    height: int,
    max_turns: Optional[int] = None,
    log: Optional[AgentLog] = None,
    render: bool = False,
) -> Dict:
    """Play one game with fresh game and agent sources split off ``episode_rng``."""
    game = SnakeGame(width, height, episode_rng.spawn(0), render_enabled=render)
    agent = make_agent(agent_name, width, height, episode_rng.spawn(1))
    on_turn = None
    if render:
        if log is None and config.UI_DEBUG_MODE:
            log = AgentLog()
        trace = log

        def on_turn(game: SnakeGame, agent: Agent) -> None:
            game.handle_pygame_events()
            game.render(debug_info(trace, game.turn - 1))

        game.render()
    t0 = time.time()
    play(game, agent, max_turns, log, on_turn)
    return {
        "agent": agent_name,
        "seed": episode_rng.seed,
        "turns": game.turn,
        "won": game.won,
        "length": len(game.snake),
        "terminal_reason": game.terminal_reason,
        "collision_reason": game.collision_reason,
        "width": width,
        "height": height,
        "elapsed": time.time() - t0,
    }


def play_multiple(
    agent_name: str,
    num_games: int,
    seed: Optional[int] = None,
    workers: Optional[int] = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
    max_turns: Optional[int] = None,
    on_episode: Optional[EpisodeCallback] = None,
) -> Stats:
    """Play ``num_games`` games spread over ``workers`` threads.

    Episode ``i`` only depends on ``seed`` and ``i``, so the set of results
    does not depend on the number of workers or on scheduling.
    """
    width = int(config.BOARD_WIDTH if width is None else width)
    height = int(config.BOARD_HEIGHT if height is None else height)
    workers = max(1, min(int(config.DEFAULT_WORKERS if workers is None else workers), num_games or 1))
    root = RandomSource(seed)
    stats = Stats()
    next_index = [0]
    index_lock = threading.Lock()
    callback_lock = threading.Lock()
    errors: List[BaseException] = []

    def worker(worker_id: int) -> None:
        while True:
            with index_lock:
                if errors or next_index[0] >= num_games:
                    return
                i = next_index[0]
                next_index[0] += 1
            try:
                row = play_episode(agent_name, root.spawn(i), width, height, max_turns)
            except Exception as exc:
                logger.error("Worker %d: episode %d failed: %s", worker_id, i, exc)
                with index_lock:
                    errors.append(exc)
                return
            row["episode"] = i
            stats.record(row)
            if not row["won"]:
                logger.warning(
                    "Episode %d lost after %d turns (%s) at length %d",
                    i,
                    row["turns"],
                    row["collision_reason"] or row["terminal_reason"],
                    row["length"],
                )
            if on_episode is not None:
                with callback_lock:
                    on_episode(row)
            logger.info("%d/%d  %s", len(stats), num_games, stats.summary())

    threads = []
    for worker_id in range(workers):
        t = threading.Thread(target=worker, args=(worker_id,), name=f"hamsnake-worker-{worker_id}")
        t.start()
        threads.append(t)
    for t in threads:
        t.join()

    if errors:
        raise errors[0]
    stats.sort()
    return stats
