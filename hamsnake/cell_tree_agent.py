"""Shortest paths under the cell-tree constraints, with detours that keep the board reachable.

Heuristic, in order:

1. A* toward the apple using only moves allowed by the cell orientation and
   the tree implied by the snake's body.
2. Simulate following that plan and flood fill from the resulting head.
3. If some free cells would be cut off, take a detour instead of the plan:
   any other legal move, or the first step toward the nearest cell that would
   become unreachable.

Keeping every cell reachable is the part that cannot be decided locally, so
this can still fail; the fallbacks below never raise mid-episode.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional

from . import config
from .agent import Agent
from .celltree import can_move_in_cell_tree, cell, cell_tree_parents, move_to_parent
from .game import GameState
from .geometry import DIRS, CellCoord, Coord, Dir, direction_between, is_neighbor, step
from .grid import Grid
from .reachability import Lookahead, after_moves, cell_tree_unreachables
from .search import INF, astar_shortest_path, first_step, read_path
from .trace import AgentLog, Channel

logger = logging.getLogger(__name__)


class DetourStrategy(Enum):
    NONE = "none"
    ANY = "any"
    NEAREST_UNREACHABLE = "nearest_unreachable"


class CellTreeAgent(Agent):
    """Cell-tree constrained A* agent.

    Penalties are added to the base step cost. ``*_cell_penalty`` depends on
    the cell entered (same cell, new cell, parent cell); ``edge_*``, ``wall_*``
    and ``open_*`` depend on what lies to the right of the destination (board
    edge, snake, free), split by staying inside the cell or leaving it.
    """

    name = "cell_tree"

    def __init__(
        self,
        recalculate_path: bool = True,
        lookahead: Lookahead = Lookahead.MANY_MOVE_TAIL,
        detour: DetourStrategy = DetourStrategy.NEAREST_UNREACHABLE,
        *,
        same_cell_penalty: int = 0,
        new_cell_penalty: int = 0,
        parent_cell_penalty: int = 0,
        edge_penalty_in: int = 0,
        edge_penalty_out: int = 0,
        wall_penalty_in: int = 0,
        wall_penalty_out: int = 0,
        open_penalty_in: int = 0,
        open_penalty_out: int = 0,
        step_cost: Optional[int] = None,
    ) -> None:
        self.recalculate_path = bool(recalculate_path)
        self.lookahead = Lookahead(lookahead)
        self.detour = DetourStrategy(detour)
        self.same_cell_penalty = same_cell_penalty
        self.new_cell_penalty = new_cell_penalty
        self.parent_cell_penalty = parent_cell_penalty
        self.edge_penalty_in = edge_penalty_in
        self.edge_penalty_out = edge_penalty_out
        self.wall_penalty_in = wall_penalty_in
        self.wall_penalty_out = wall_penalty_out
        self.open_penalty_in = open_penalty_in
        self.open_penalty_out = open_penalty_out
        self.step_cost = int(config.STEP_COST if step_cost is None else step_cost)
        self.cached_path: List[Coord] = []
        self.detours = 0
        self.fallbacks = 0

    def __repr__(self) -> str:
        return (
            f"CellTreeAgent(detour={self.detour.value}, lookahead={self.lookahead.value}, "
            f"recalculate_path={self.recalculate_path})"
        )

    def reset(self) -> None:
        self.cached_path = []
        self.detours = 0
        self.fallbacks = 0

    # ----------------------------
    # Edge costs
    # ----------------------------
    def _edge(self, state: GameState, parents: Grid[CellCoord]):
        occupied = state.occupied

        def edge(a: Coord, b: Coord, d: Dir) -> float:
            if occupied[b] or not can_move_in_cell_tree(parents, a, b, d):
                return INF
            cell_a, cell_b = cell(a), cell(b)
            to_parent = cell_b == parents[cell_a]
            to_same = cell_b == cell_a
            right = step(b, d.rotate_clockwise())
            hugs_edge = not occupied.valid(right)
            hugs_wall = not hugs_edge and occupied[right]
            cost = self.step_cost
            if to_parent:
                cost += self.parent_cell_penalty
            elif to_same:
                cost += self.same_cell_penalty
            else:
                cost += self.new_cell_penalty
            if to_same:
                cost += self.edge_penalty_in if hugs_edge else self.wall_penalty_in if hugs_wall else self.open_penalty_in
            else:
                cost += self.edge_penalty_out if hugs_edge else self.wall_penalty_out if hugs_wall else self.open_penalty_out
            return cost

        return edge

    def _take_cached(self, state: GameState) -> Optional[Coord]:
        """Pop the next cached step if it is still a free neighbor, else drop the cache."""
        if not self.cached_path:
            return None
        nxt = self.cached_path.pop()
        if is_neighbor(state.head, nxt) and not state.occupied[nxt]:
            return nxt
        self.cached_path = []
        return None

    # ----------------------------
    # Main decision
    # ----------------------------
    def decide(self, state: GameState, log: Optional[AgentLog] = None) -> Dir:
        pos = state.head
        if self.cached_path and not self.recalculate_path:
            nxt = self._take_cached(state)
            if nxt is not None:
                return direction_between(pos, nxt)

        parents = cell_tree_parents(state.dimensions, state.snake)
        edge = self._edge(state, parents)
        dists = astar_shortest_path(state.dimensions, edge, pos, state.apple, self.step_cost)
        path = read_path(dists, pos, state.apple)

        if log is not None:
            log.add(state.turn, Channel.PLAN, [pos] + path[::-1])

        if not path:
            return self._recover(state, parents, edge)
        pos2 = path[-1]

        if self.detour is not DetourStrategy.NONE:
            after = after_moves(state, path, self.lookahead)
            unreachable = cell_tree_unreachables(after, dists)
            if unreachable.any:
                if log is not None:
                    log.add(state.turn, Channel.UNREACHABLE, unreachable.unreachable_grid())
                detour = self._detour(state, edge, dists, pos2, unreachable)
                if detour is not None:
                    self.detours += 1
                    return detour
                logger.debug(
                    "Turn %d: unreachable cells ahead but no alternative move or cached path",
                    state.turn,
                )

        self.cached_path = path[:-1]
        return direction_between(pos, pos2)

    def _detour(self, state: GameState, edge, dists, planned: Coord, unreachable) -> Optional[Dir]:
        pos = state.head
        if self.detour is DetourStrategy.ANY:
            for d in DIRS:
                b = step(pos, d)
                if b != planned and state.occupied.valid(b) and edge(pos, b, d) < INF:
                    self.cached_path = []
                    return d
        elif self.detour is DetourStrategy.NEAREST_UNREACHABLE:
            if unreachable.dist_to_nearest < INF:
                nxt = first_step(dists, pos, unreachable.nearest)
                self.cached_path = []
                return direction_between(pos, nxt)
            # Looked fine when the plan was made, but the moving tail opened a
            # shorter route since: stay on the previous plan.
            nxt = self._take_cached(state)
            if nxt is not None:
                return direction_between(pos, nxt)
        return None

    def _recover(self, state: GameState, parents: Grid[CellCoord], edge) -> Dir:
        """The apple is unreachable this turn: cached plan, retrace, any legal move, any free move."""
        self.fallbacks += 1
        pos = state.head
        occupied = state.occupied
        nxt = self._take_cached(state)
        if nxt is not None:
            return direction_between(pos, nxt)
        self.cached_path = []

        back = move_to_parent(parents, pos)
        if occupied.is_clear(step(pos, back)):
            return back
        for d in DIRS:
            b = step(pos, d)
            if occupied.valid(b) and edge(pos, b, d) < INF:
                return d
        for d in DIRS:
            if occupied.is_clear(step(pos, d)):
                logger.debug("Turn %d: leaving the cell tree to stay alive", state.turn)
                return d
        logger.debug("Turn %d: boxed in at %s", state.turn, pos)
        for d in DIRS:
            if occupied.valid(step(pos, d)):
                return d
        return back
