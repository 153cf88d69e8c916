"""Dynamic Hamiltonian cycle repair.

The agent always moves along a Hamiltonian cycle, but before each move it
tries to rewire the cycle so that the next edge points along the shortest
path to the apple.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Set

from . import config
from .agent import Agent
from .game import GameState
from .geometry import DIRS, Coord, Dir, direction_between, is_neighbor, step
from .grid import Grid, GridPath
from .hamiltonian import cycle_predecessor, cycle_to_path
from .reachability import Lookahead, after_moves, free_unreachables
from .search import INF, astar_shortest_path, read_path, shortest_path
from .trace import UNCHANGED, AgentLog, Channel

logger = logging.getLogger(__name__)


def repair_cycle(
    occupied: Grid[bool],
    cycle: GridPath,
    pos: Coord,
    d: Coord,
    goal: Optional[Coord] = None,
) -> bool:
    """Rewire ``cycle`` so that ``cycle[pos] == d``. Returns success.

    The cycle reads ``[..., pos, b, ..., c, d, ...]``. Pointing ``pos`` at
    ``d`` cuts ``b .. c`` off into its own loop (closed by ``c -> b``). That
    loop is spliced back in through a free edge ``u -> v`` running alongside
    a loop edge ``x -> y``::

        u -> v            u   v
                  into    |   ^
        y <- x            v   |
                          y   x

    Only free cells take part in the splice. With a ``goal`` the splice edge
    must lie between the goal and ``pos``, so the loop ends up behind the goal
    and the cycle distance from ``pos`` to the goal shrinks by its length.
    On failure ``cycle`` is left as it was.
    """
    b = cycle[pos]
    if b == d:
        return True
    if not is_neighbor(pos, d) or not occupied.is_clear(d):
        return False
    c = cycle_predecessor(cycle, d)
    if b != c and not is_neighbor(b, c):
        return False

    loop: List[Coord] = [b]
    while loop[-1] != c:
        loop.append(cycle[loop[-1]])
    in_loop: Set[Coord] = set(loop)
    if any(occupied[p] for p in loop):
        return False

    behind_goal: Optional[Set[Coord]] = None
    if goal is not None:
        if goal in in_loop or goal == pos:
            return False
        behind_goal = set()
        p = goal
        while p != pos:
            behind_goal.add(p)
            p = cycle[p]

    for x in loop:
        y = b if x == c else cycle[x]
        for dy in DIRS:
            u = step(y, dy)
            if not occupied.valid(u) or u in in_loop or occupied[u]:
                continue
            if behind_goal is not None and u not in behind_goal:
                continue
            v = cycle[u]
            if v in in_loop or occupied[v] or not is_neighbor(v, x):
                continue
            cycle[pos] = d
            cycle[c] = b
            cycle[x] = v
            cycle[u] = y
            return True
    return False


class DynamicHamiltonianCycleAgent(Agent):
    name = "dhcr"

    def __init__(
        self,
        cycle: GridPath,
        recalculate_path: bool = True,
        wall_follow_overshoot: Optional[int] = None,
    ) -> None:
        self.initial_cycle = cycle.copy()
        self.cycle = cycle.copy()
        self.recalculate_path = bool(recalculate_path)
        self.wall_follow_overshoot = int(
            config.WALL_FOLLOW_OVERSHOOT if wall_follow_overshoot is None else wall_follow_overshoot
        )
        self.wall_follow_mode = 0
        self.last_turn: Optional[Dir] = None
        self.last_move: Optional[Dir] = None
        self.cached_path: List[Coord] = []
        self.repairs = 0
        self.missed_repairs = 0
        self._cycle_logged = False

    def __repr__(self) -> str:
        return (
            f"DynamicHamiltonianCycleAgent(recalculate_path={self.recalculate_path}, "
            f"wall_follow_overshoot={self.wall_follow_overshoot})"
        )

    def reset(self) -> None:
        self.cycle = self.initial_cycle.copy()
        self.wall_follow_mode = 0
        self.last_turn = None
        self.last_move = None
        self.cached_path = []
        self.repairs = 0
        self.missed_repairs = 0
        self._cycle_logged = False

    def _dist_to_goal(self, goal: Coord) -> Grid[int]:
        """Number of cycle steps from every coordinate to ``goal``."""
        size = self.cycle.size
        dist: Grid[int] = Grid(self.cycle.w, self.cycle.h, 0)
        c = goal
        for idx in range(size):
            dist[c] = (size - idx) % size
            c = self.cycle[c]
        return dist

    def _plan(self, state: GameState) -> List[Coord]:
        pos, goal = state.head, state.apple
        if self.cached_path and not self.recalculate_path:
            if is_neighbor(pos, self.cached_path[-1]):
                return self.cached_path
            self.cached_path = []
        occupied = state.occupied
        dist = self._dist_to_goal(goal)

        def edge(a: Coord, b: Coord, d: Dir) -> float:
            return INF if occupied[b] else config.DHCR_CYCLE_COST + dist[b]

        steps = astar_shortest_path(state.dimensions, edge, pos, goal, config.DHCR_CYCLE_COST)
        self.cached_path = read_path(steps, pos, goal)
        return self.cached_path

    def _wall_follow(self, state: GameState, path: List[Coord], target: Coord) -> Coord:
        after = after_moves(state, path, Lookahead.MANY_KEEP_TAIL)
        dists = shortest_path(after.occupied, after.head)
        if free_unreachables(after, dists).any:
            self.wall_follow_mode = self.wall_follow_overshoot
        elif self.wall_follow_mode > 0:
            self.wall_follow_mode -= 1
        if self.wall_follow_mode > 0 and self.last_turn is not None:
            hug = step(state.head, self.last_turn)
            if state.occupied.is_clear(hug):
                return hug
        return target

    def decide(self, state: GameState, log: Optional[AgentLog] = None) -> Dir:
        pos = state.head
        path = self._plan(state)
        repaired = False
        if path:
            target = path[-1]
            if self.wall_follow_overshoot > 0:
                target = self._wall_follow(state, path, target)
            if self.cycle[pos] != target:
                if repair_cycle(state.occupied, self.cycle, pos, target, state.apple):
                    repaired = True
                    self.repairs += 1
                else:
                    self.missed_repairs += 1
                    logger.debug("Turn %d: could not rewire cycle %s -> %s", state.turn, pos, target)
        plan = [pos] + path[::-1]
        if self.cached_path:
            self.cached_path.pop()

        move = direction_between(pos, self.cycle[pos])
        if log is not None:
            if repaired or not self._cycle_logged:
                log.add(state.turn, Channel.CYCLE, cycle_to_path(self.cycle))
                self._cycle_logged = True
            else:
                log.add(state.turn, Channel.CYCLE, UNCHANGED)
            log.add(state.turn, Channel.PLAN, plan)
        if self.last_move is not None and move != self.last_move:
            self.last_turn = move
        self.last_move = move
        return move
