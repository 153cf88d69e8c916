"""Hamiltonian cycles on the board.

A cycle is stored as a ``GridPath``: every coordinate holds the coordinate
that follows it.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from .celltree import cell, cell_move_inside, cell_move_outside
from .geometry import DIRS, INVALID, ROOT, CellCoord, Coord, Dir, is_neighbor, step
from .grid import Grid, GridPath
from .rng import RandomSource

logger = logging.getLogger(__name__)

ORIGIN: Coord = (0, 0)


def is_hamiltonian_cycle(path: GridPath) -> bool:
    """Every step goes to a neighbor and we return to the start after exactly ``w*h`` steps."""
    pos = ORIGIN
    for i in range(path.size):
        nxt = path[pos]
        if not path.valid(nxt) or not is_neighbor(pos, nxt):
            return False
        pos = nxt
        if pos == ORIGIN:
            return i == path.size - 1
    return False


def random_spanning_tree(w: int, h: int, rng: RandomSource) -> Grid[CellCoord]:
    """Spanning tree of a ``w x h`` grid as parent pointers (``ROOT`` at the root).

    Grown from a random node by repeatedly attaching the endpoint of a random
    frontier edge. Not a uniform distribution over trees, but every output is
    a spanning tree.
    """
    tree: Grid[CellCoord] = Grid(w, h, INVALID)
    frontier: List[Tuple[CellCoord, CellCoord]] = []

    def attach(node: CellCoord, parent: CellCoord) -> None:
        tree[node] = parent
        for d in DIRS:
            nxt = step(node, d)
            if tree.valid(nxt):
                frontier.append((node, nxt))

    attach((rng.randrange(w), rng.randrange(h)), ROOT)
    while frontier:
        i = rng.randrange(len(frontier))
        parent, node = frontier[i]
        frontier[i] = frontier[-1]
        frontier.pop()
        if tree[node] == INVALID:
            attach(node, parent)
    return tree


def tree_to_hamiltonian_cycle(parents: Grid[CellCoord]) -> GridPath:
    """Cycle on the ``2w x 2h`` board that walks around a ``w x h`` spanning tree.

    Each coordinate takes its cell's outgoing lane when the tree connects the
    two cells on either side of it, and the inside lane otherwise.
    """
    path: GridPath = Grid(parents.w * 2, parents.h * 2, INVALID)
    for c in path.coords():
        out = step(c, cell_move_outside(c))
        cell_c = cell(c)
        if path.valid(out):
            cell_o = cell(out)
            if parents[cell_o] == cell_c or parents[cell_c] == cell_o:
                path[c] = out
                continue
        path[c] = step(c, cell_move_inside(c))
    if not is_hamiltonian_cycle(path):
        raise ValueError("Parent grid is not a spanning tree")
    return path


def random_hamiltonian_cycle(w: int, h: int, rng: RandomSource) -> GridPath:
    return tree_to_hamiltonian_cycle(random_spanning_tree(w // 2, h // 2, rng))


def make_zig_zag_cycle(w: int, h: int) -> GridPath:
    """Up and down the columns while going right, then back left along the top row."""
    path: GridPath = Grid(w, h, INVALID)
    for c in path.coords():
        path[c] = step(c, zig_zag_direction(w, h, c))
    return path


def zig_zag_direction(w: int, h: int, c: Coord) -> Dir:
    x, y = c
    if y == 0 and x > 0:
        return Dir.LEFT
    if x % 2 == 0:
        return Dir.RIGHT if y == h - 1 else Dir.DOWN
    if y == 1 and x != w - 1:
        return Dir.RIGHT
    return Dir.UP


# ----------------------------
# Cycle utilities
# ----------------------------
def cycle_distance(path: GridPath, start: Coord, to: Coord) -> int:
    """Number of steps from ``start`` to ``to`` following the cycle (0 when equal)."""
    dist = 0
    while start != to:
        start = path[start]
        dist += 1
        if dist > path.size:
            raise ValueError(f"{to} is not on the cycle through {start}")
    return dist


def reverse_cycle(path: GridPath) -> GridPath:
    out: GridPath = Grid(path.w, path.h, INVALID)
    for pos in path.coords():
        out[path[pos]] = pos
    return out


def cycle_predecessor(path: GridPath, to: Coord) -> Coord:
    """The neighbor whose successor is ``to``."""
    for d in DIRS:
        c = step(to, d)
        if path.valid(c) and path[c] == to:
            return c
    raise ValueError(f"No path into {to} from a neighbor")


def cycle_to_path(path: GridPath, start: Coord = ORIGIN) -> List[Coord]:
    """Coordinates in visiting order, starting at ``start``."""
    out = [start]
    c = path[start]
    while c != start and len(out) <= path.size:
        out.append(c)
        c = path[c]
    return out


class CycleOrder:
    """Position of every coordinate along a fixed cycle, for O(1) cyclic distances."""

    def __init__(self, cycle: GridPath) -> None:
        self.cycle = cycle
        self.order: Grid[int] = Grid(cycle.w, cycle.h, -1)
        c = ORIGIN
        for i in range(cycle.size):
            self.order[c] = i
            c = cycle[c]

    @property
    def size(self) -> int:
        return self.order.size

    def distance(self, a: Coord, b: Coord) -> int:
        """Forward distance from ``a`` to ``b``; a full lap when ``a == b``."""
        diff = self.order[b] - self.order[a]
        return diff if diff > 0 else diff + self.size

    def distance_round_down(self, a: Coord, b: Coord) -> int:
        """Forward distance from ``a`` to ``b``; 0 when ``a == b``."""
        diff = self.order[b] - self.order[a]
        return diff if diff >= 0 else diff + self.size
