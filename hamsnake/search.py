"""Shortest paths (BFS / A*) and scanline flood fill over the board.

All searches take a predicate or cost function over single moves
``(a, b, dir)`` so the same engine serves plain occupancy, the cell-tree
constraints and cycle-biased costs. ``b`` is always on the board when the
callback is invoked.
"""

from __future__ import annotations

import heapq
import math
from collections import deque
from typing import Callable, List, NamedTuple, Optional, Tuple

from .geometry import DIRS, INVALID, Coord, Dir, manhattan_distance, step
from .grid import Grid

INF = math.inf

CanMove = Callable[[Coord, Coord, Dir], bool]
EdgeCost = Callable[[Coord, Coord, Dir], float]
Dimensions = Tuple[int, int]


class Step(NamedTuple):
    """Per-cell search result: cumulative cost and the cell we came from."""

    dist: float
    prev: Coord

    @property
    def reachable(self) -> bool:
        return self.dist < INF


UNREACHED = Step(INF, INVALID)


def bfs_shortest_path(
    dims: Dimensions,
    can_move: CanMove,
    start: Coord,
    to: Optional[Coord] = None,
) -> Grid[Step]:
    """Unit-cost shortest paths from ``start``.

    Stops as soon as ``to`` is labelled (its distance is final at that point).
    With ``to=None`` every reachable cell is labelled.
    """
    w, h = dims
    out: Grid[Step] = Grid(w, h, UNREACHED)
    out[start] = Step(0, INVALID)
    if start == to:
        return out
    queue: deque[Coord] = deque([start])
    while queue:
        a = queue.popleft()
        dist = out[a].dist + 1
        for d in DIRS:
            b = step(a, d)
            if not out.valid(b) or out[b].dist <= dist:
                continue
            if not can_move(a, b, d):
                continue
            out[b] = Step(dist, a)
            if b == to:
                return out
            queue.append(b)
    return out


def astar_shortest_path(
    dims: Dimensions,
    edge: EdgeCost,
    start: Coord,
    to: Optional[Coord] = None,
    min_edge_cost: float = 1,
) -> Grid[Step]:
    """A* over positive integer edge costs; ``INF`` marks a forbidden move.

    The heuristic is ``manhattan(b, to) * min_edge_cost``. It is admissible only
    if ``min_edge_cost`` really bounds every edge from below; with a larger value
    the returned path is plausible but not guaranteed shortest. Without ``to``
    this is plain Dijkstra over the whole board.
    """
    w, h = dims
    out: Grid[Step] = Grid(w, h, UNREACHED)
    closed: Grid[bool] = Grid(w, h, False)
    out[start] = Step(0, INVALID)

    def heuristic(c: Coord) -> float:
        if to is None:
            return 0
        return manhattan_distance(c, to) * min_edge_cost

    open_set: List[Tuple[float, float, Coord]] = [(heuristic(start), 0, start)]
    while open_set:
        _, g, a = heapq.heappop(open_set)
        if closed[a]:
            continue
        closed[a] = True
        if a == to:
            break
        for d in DIRS:
            b = step(a, d)
            if not out.valid(b) or closed[b]:
                continue
            cost = edge(a, b, d)
            if cost >= INF:
                continue
            tentative = g + cost
            if tentative < out[b].dist:
                out[b] = Step(tentative, a)
                heapq.heappush(open_set, (tentative + heuristic(b), tentative, b))
    return out


def read_path(steps: Grid[Step], start: Coord, to: Coord) -> List[Coord]:
    """Walk predecessors back from ``to``.

    Returns the path target-first, excluding ``start`` (so ``path[-1]`` is the
    first move). Empty when ``to`` is unreachable or equal to ``start``.
    """
    if to == start or not steps.valid(to) or not steps[to].reachable:
        return []
    path: List[Coord] = []
    c = to
    while c != start:
        path.append(c)
        c = steps[c].prev
    return path


def first_step(steps: Grid[Step], start: Coord, to: Coord) -> Coord:
    """First coordinate after ``start`` on the way to ``to`` (``INVALID`` if none)."""
    path = read_path(steps, start, to)
    return path[-1] if path else INVALID


def flood_fill(dims: Dimensions, can_move: CanMove, start: Coord) -> Grid[bool]:
    """Cells reachable from ``start`` under ``can_move``.

    Row-run scanline: each seed is extended left and right along its row, then
    the cells above and below the run are seeded. Every reached cell has all of
    its outgoing moves examined, so the result matches BFS connectivity even
    for direction-dependent predicates.
    """
    w, h = dims
    reached: Grid[bool] = Grid(w, h, False)
    reached[start] = True
    seeds: List[Coord] = [start]
    while seeds:
        seed = seeds.pop()
        run = [seed]
        for d in (Dir.LEFT, Dir.RIGHT):
            a = seed
            while True:
                b = step(a, d)
                if not reached.valid(b) or reached[b] or not can_move(a, b, d):
                    break
                reached[b] = True
                run.append(b)
                a = b
        for a in run:
            for d in (Dir.UP, Dir.DOWN):
                b = step(a, d)
                if reached.valid(b) and not reached[b] and can_move(a, b, d):
                    reached[b] = True
                    seeds.append(b)
    return reached


def shortest_path(occupied: Grid[bool], start: Coord, to: Optional[Coord] = None) -> Grid[Step]:
    """BFS over the free cells of an occupancy grid."""
    return bfs_shortest_path(occupied.dimensions, lambda a, b, d: not occupied[b], start, to)
