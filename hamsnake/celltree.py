"""Cell-tree move constraints.

The board is viewed as a half-size grid of 2x2 cells, like a town of two-lane
streets with right-hand traffic. Inside a cell the snake circles
counter-clockwise; leaving a cell is only possible on the outgoing lane.
For example the cell::

    #<-#<-
    |
    v
    #  #->
    |  ^
    v  |

is connected to the cell below and the cell to the right. When the connected
cells form a spanning tree, the lanes form a Hamiltonian cycle.

Taking the snake's tail as the root of the tree implied by its body:

* moving to the parent cell retraces our steps and is always possible,
* moving to an unvisited cell is always possible,
* moving into an already visited sibling never happens.

Whether a partial tree can still be extended to cover every cell is not
checked here; the reachability detector handles that heuristically.
"""

from __future__ import annotations

from typing import Iterable, Tuple

from .geometry import NOT_VISITED, ROOT, CellCoord, Coord, Dir
from .grid import Grid

# (x % 2, y % 2) -> (inside, outside)
_CELL_MOVES = {
    (0, 0): (Dir.DOWN, Dir.LEFT),
    (1, 0): (Dir.LEFT, Dir.UP),
    (0, 1): (Dir.RIGHT, Dir.DOWN),
    (1, 1): (Dir.UP, Dir.RIGHT),
}


def cell(c: Coord) -> CellCoord:
    return (c[0] // 2, c[1] // 2)


def cell_move_inside(c: Coord) -> Dir:
    """Direction that stays inside the cell."""
    return _CELL_MOVES[(c[0] & 1, c[1] & 1)][0]


def cell_move_outside(c: Coord) -> Dir:
    """Direction that moves out of the cell."""
    return _CELL_MOVES[(c[0] & 1, c[1] & 1)][1]


def is_cell_move(c: Coord, d: Dir) -> bool:
    inside, outside = _CELL_MOVES[(c[0] & 1, c[1] & 1)]
    return d is inside or d is outside


def cell_tree_parents(dims: Tuple[int, int], snake: Iterable[Coord]) -> Grid[CellCoord]:
    """Parent pointers of the cell tree traced by the snake (tail = root).

    ``snake`` is head-first. The returned grid is half the board size; cells
    the snake does not touch hold ``NOT_VISITED``.
    """
    w, h = dims
    parents: Grid[CellCoord] = Grid(w // 2, h // 2, NOT_VISITED)
    parent = ROOT
    for c in reversed(list(snake)):
        cell_c = cell(c)
        if parents[cell_c] == NOT_VISITED:
            parents[cell_c] = parent
        parent = cell_c
    return parents


def tree_allows(parents: Grid[CellCoord], cell_a: CellCoord, cell_b: CellCoord) -> bool:
    """Tree part of the move rule: stay, enter an unvisited cell, or go to the parent."""
    return cell_b == cell_a or parents[cell_b] == NOT_VISITED or parents[cell_a] == cell_b


def can_move_in_cell_tree(parents: Grid[CellCoord], a: Coord, b: Coord, d: Dir) -> bool:
    if not is_cell_move(a, d):
        return False
    return tree_allows(parents, cell(a), cell(b))


def move_to_parent(parents: Grid[CellCoord], a: Coord) -> Dir:
    """Next move retracing toward the parent cell of ``a``'s cell.

    Takes the outgoing lane when it leads to the parent, otherwise circles
    inside the cell; at most three inside moves reach the right exit. The root
    cell has no parent and just circles.
    """
    cell_a = cell(a)
    parent = parents[cell_a]
    if parent in (ROOT, NOT_VISITED):
        return cell_move_inside(a)
    x, y = a[0] & 1, a[1] & 1
    if x == 1 and y == 0:
        return Dir.UP if parent[1] < cell_a[1] else Dir.LEFT
    if x == 0 and y == 1:
        return Dir.DOWN if parent[1] > cell_a[1] else Dir.RIGHT
    if x == 0 and y == 0:
        return Dir.LEFT if parent[0] < cell_a[0] else Dir.DOWN
    return Dir.RIGHT if parent[0] > cell_a[0] else Dir.UP


