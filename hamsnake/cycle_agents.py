"""Agents that follow a Hamiltonian cycle, with or without shortcuts."""

from __future__ import annotations

import logging
from typing import Optional

from . import config
from .agent import Agent
from .game import GameState
from .geometry import DIRS, Coord, Dir, direction_between, step
from .grid import Grid, GridPath
from .hamiltonian import CycleOrder, cycle_to_path, make_zig_zag_cycle, zig_zag_direction
from .search import INF, astar_shortest_path, first_step
from .trace import AgentLog, Channel

logger = logging.getLogger(__name__)


class FixedCycleAgent(Agent):
    """Follow a fixed Hamiltonian cycle. Slow, but it never dies."""

    name = "fixed_cycle"

    def __init__(self, cycle: GridPath) -> None:
        self.cycle = cycle

    def _log_cycle(self, state: GameState, log: Optional[AgentLog]) -> None:
        if log is not None and state.turn == 0:
            log.add(state.turn, Channel.CYCLE, cycle_to_path(self.cycle))

    def decide(self, state: GameState, log: Optional[AgentLog] = None) -> Dir:
        self._log_cycle(state, log)
        pos = state.head
        return direction_between(pos, self.cycle[pos])


class ZigZagAgent(FixedCycleAgent):
    name = "zig_zag"

    def __init__(self, width: int, height: int) -> None:
        super().__init__(make_zig_zag_cycle(width, height))
        self.width = width
        self.height = height

    def decide(self, state: GameState, log: Optional[AgentLog] = None) -> Dir:
        self._log_cycle(state, log)
        return zig_zag_direction(self.width, self.height, state.head)


def _any_occupied(occupied: Grid[bool], x0: int, x1: int, y0: int, y1: int) -> bool:
    return any(occupied[(x, y)] for y in range(y0, y1) for x in range(x0, x1))


class CutAgent(Agent):
    """Zig-zag through the columns, cutting across whenever the apple is ahead.

    Sweeps right going down the even columns and up the odd ones, then back
    left the same way. The column it climbs (heading right) or descends
    (heading left) may be left early for the next one if that leaves no gap
    behind. While the snake is short it also turns the sweep around when the
    apple is behind it.
    """

    name = "cut"

    def __init__(self, quick_dir_change: bool = True) -> None:
        self.quick_dir_change = bool(quick_dir_change)
        self.move_right = True

    def __repr__(self) -> str:
        return f"CutAgent(quick_dir_change={self.quick_dir_change})"

    def reset(self) -> None:
        self.move_right = True

    def decide(self, state: GameState, log: Optional[AgentLog] = None) -> Dir:
        x, y = state.head
        tx, ty = state.apple
        w, h = state.dimensions
        occupied = state.occupied
        short = len(state.snake) < state.board_size // 4
        if x == 0:
            self.move_right = True
        if x == w - 1 or (y == 0 and x > 0):
            self.move_right = False

        if self.move_right:
            if x % 2 == 0:
                if (
                    self.quick_dir_change
                    and tx < x
                    and short
                    and not _any_occupied(occupied, x + 1, w, 0, h)
                    and occupied.is_clear((x, y - 1))
                ):
                    self.move_right = False
                    return Dir.UP
                return Dir.RIGHT if y == h - 1 else Dir.DOWN
            if y <= 1:
                return Dir.RIGHT  # top row is the way back
            if occupied[(x, y - 1)]:
                return Dir.RIGHT
            if _any_occupied(occupied, x, x + 2, 0, y - 1):
                return Dir.UP  # cutting across would leave a gap
            if tx > x + 1 or (tx == x + 1 and ty >= y):
                return Dir.RIGHT
            if self.quick_dir_change and tx < x:
                self.move_right = False
            return Dir.UP

        if x % 2 == 1:
            if (
                self.quick_dir_change
                and tx > x
                and short
                and not _any_occupied(occupied, 0, x, 0, h)
                and occupied.is_clear((x, y + 1))
            ):
                self.move_right = True
                return Dir.DOWN
            return Dir.LEFT if y == 0 else Dir.UP
        if y >= h - 2:
            return Dir.LEFT
        if occupied[(x, y + 1)]:
            return Dir.LEFT
        if _any_occupied(occupied, x - 1, x + 1, y + 1, h):
            return Dir.DOWN
        if tx < x - 1 or (tx == x - 1 and ty <= y):
            return Dir.LEFT
        if self.quick_dir_change and tx > x:
            self.move_right = True
        return Dir.DOWN


class PerturbedHamiltonianCycleAgent(Agent):
    """Follow a fixed cycle, skipping ahead when that cannot catch up with the tail.

    A shortcut to a neighbor ``b`` is taken when ``b`` lies ahead of the head
    in cycle order but not beyond the apple, with some margin to the tail.
    The apple may already be past the tail if earlier shortcuts were taken.
    """

    name = "phc"

    def __init__(self, cycle: GridPath, use_shortest_path: bool = False) -> None:
        self.cycle = cycle
        self.order = CycleOrder(cycle)
        self.use_shortest_path = bool(use_shortest_path)
        self.shortcuts = 0

    def __repr__(self) -> str:
        return f"PerturbedHamiltonianCycleAgent(use_shortest_path={self.use_shortest_path})"

    def reset(self) -> None:
        self.shortcuts = 0

    def max_shortcut(self, state: GameState) -> int:
        pos = state.head
        dist_goal = self.order.distance(pos, state.apple)
        dist_tail = self.order.distance(pos, state.tail)
        bound = min(dist_goal, dist_tail - config.PHC_TAIL_MARGIN)
        if len(state.snake) > int(state.board_size * config.PHC_MAX_FILL):
            bound = 0
        if dist_goal < dist_tail:
            # room for growth, and for more apples on the way
            bound -= 1
            if (dist_tail - dist_goal) * 4 > state.board_size - len(state.snake):
                bound -= config.PHC_GROWTH_SLACK
        return bound

    def decide(self, state: GameState, log: Optional[AgentLog] = None) -> Dir:
        pos = state.head
        nxt = self.cycle[pos]
        if log is not None and state.turn == 0:
            log.add(state.turn, Channel.CYCLE, cycle_to_path(self.cycle))

        bound = self.max_shortcut(state)
        if bound > 0:
            if self.use_shortest_path:
                better = self._shortest_path_step(state)
                if state.occupied.is_clear(better):
                    nxt = better
            else:
                dist_next = 1
                for d in DIRS:
                    b = step(pos, d)
                    if not state.occupied.is_clear(b):
                        continue
                    dist_b = self.order.distance(pos, b)
                    if dist_next < dist_b <= bound:
                        nxt = b
                        dist_next = dist_b
        if nxt != self.cycle[pos]:
            self.shortcuts += 1
        return direction_between(pos, nxt)

    def _shortest_path_step(self, state: GameState) -> Coord:
        pos = state.head
        occupied = state.occupied
        dist_goal = self.order.distance(pos, state.apple)
        dist_tail = self.order.distance(pos, state.tail)

        def edge(a: Coord, b: Coord, d: Dir) -> float:
            dist_a = self.order.distance_round_down(pos, a)
            dist_b = self.order.distance(pos, b)
            if dist_a < dist_b < dist_tail and not occupied[b]:
                return 1
            if dist_b == dist_a + 1:
                return 1
            return INF

        to = state.apple if dist_goal < dist_tail else state.tail
        steps = astar_shortest_path(state.dimensions, edge, pos, to)
        return first_step(steps, pos, to)
