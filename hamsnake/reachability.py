"""Look ahead along a planned path and detect board regions that would be cut off."""

from __future__ import annotations

from enum import Enum
from typing import Sequence

from .celltree import can_move_in_cell_tree, cell_tree_parents
from .game import GameState
from .geometry import INVALID, Coord, Dir, is_neighbor
from .grid import Grid
from .search import INF, CanMove, Step, flood_fill


class Lookahead(Enum):
    ONE = "one"  # only the move about to be made
    MANY_KEEP_TAIL = "many_keep_tail"  # extend the snake along the whole path, tail stays
    MANY_MOVE_TAIL = "many_move_tail"  # move the snake along the path, tail follows


def after_moves(state: GameState, path: Sequence[Coord], lookahead: Lookahead) -> GameState:
    """State after following ``path`` (target-first, ``path[-1]`` next to the head).

    Always works on a copy; ``state`` is left untouched.
    """
    if not path or not is_neighbor(path[-1], state.head):
        raise ValueError("Path must start next to the snake's head")
    after = state.copy()
    if lookahead is Lookahead.ONE:
        nxt = path[-1]
        after.occupied[nxt] = True
        after.snake.appendleft(nxt)
        return after
    move_tail = lookahead is Lookahead.MANY_MOVE_TAIL
    for p in reversed(path):
        after.occupied[p] = True
        after.snake.appendleft(p)
        if move_tail and p != state.apple:
            after.occupied[after.snake.pop()] = False
    return after


class Unreachables:
    """Result of the reachability check.

    ``reachable`` counts snake cells as reachable; ``nearest`` is the
    unreachable free cell with the smallest distance in the search it was
    measured against (``INVALID`` when none of them was reached by it).
    """

    def __init__(self, reachable: Grid[bool]) -> None:
        self.any = False
        self.nearest: Coord = INVALID
        self.dist_to_nearest: float = INF
        self.reachable = reachable

    def __repr__(self) -> str:
        return f"Unreachables(any={self.any}, nearest={self.nearest}, dist={self.dist_to_nearest})"

    def unreachable_grid(self) -> Grid[bool]:
        return self.reachable.map(lambda r: not r)


def unreachables(can_move: CanMove, state: GameState, dists: Grid[Step]) -> Unreachables:
    """Free cells not reachable from the head of ``state``.

    This is not exactly the same as the snake splitting the board in two:
    under cell-tree moves a region can be unreachable while still adjacent.
    """
    out = Unreachables(flood_fill(state.dimensions, can_move, state.head))
    for a in state.occupied.coords():
        if state.occupied[a]:
            out.reachable[a] = True
        elif not out.reachable[a]:
            out.any = True
            if dists[a].dist < out.dist_to_nearest:
                out.nearest = a
                out.dist_to_nearest = dists[a].dist
    return out


def cell_tree_unreachables(state: GameState, dists: Grid[Step]) -> Unreachables:
    parents = cell_tree_parents(state.dimensions, state.snake)
    occupied = state.occupied

    def can_move(a: Coord, b: Coord, d: Dir) -> bool:
        return can_move_in_cell_tree(parents, a, b, d) and not occupied[b]

    return unreachables(can_move, state, dists)


def free_unreachables(state: GameState, dists: Grid[Step]) -> Unreachables:
    """Plain occupancy version, for agents that do not follow the cell tree."""
    occupied = state.occupied
    return unreachables(lambda a, b, d: not occupied[b], state, dists)
