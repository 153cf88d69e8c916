"""Coordinates and directions on the board."""

from __future__ import annotations

from enum import Enum
from typing import Tuple

Coord = Tuple[int, int]
CellCoord = Tuple[int, int]

INVALID: Coord = (-1, -1)
NOT_VISITED: CellCoord = (-1, -1)
ROOT: CellCoord = (-2, -2)


class Dir(Enum):
    """Single-step move. ``y`` grows downward."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def delta(self) -> Tuple[int, int]:
        return self.value

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def opposite(self) -> "Dir":
        return _OPPOSITE[self]

    def rotate_clockwise(self) -> "Dir":
        return _CLOCKWISE[self]

    def rotate_counter_clockwise(self) -> "Dir":
        return _COUNTER_CLOCKWISE[self]

    def __neg__(self) -> "Dir":
        return _OPPOSITE[self]

    def __str__(self) -> str:
        return self.name[0].lower()


DIRS: Tuple[Dir, ...] = (Dir.UP, Dir.DOWN, Dir.LEFT, Dir.RIGHT)

_OPPOSITE = {Dir.UP: Dir.DOWN, Dir.DOWN: Dir.UP, Dir.LEFT: Dir.RIGHT, Dir.RIGHT: Dir.LEFT}
_CLOCKWISE = {Dir.UP: Dir.RIGHT, Dir.RIGHT: Dir.DOWN, Dir.DOWN: Dir.LEFT, Dir.LEFT: Dir.UP}
_COUNTER_CLOCKWISE = {v: k for k, v in _CLOCKWISE.items()}
_BY_DELTA = {d.value: d for d in Dir}


def step(c: Coord, d: Dir) -> Coord:
    return (c[0] + d.value[0], c[1] + d.value[1])


def direction_between(a: Coord, b: Coord) -> Dir:
    """Direction of the move ``a -> b``; the two coordinates must be neighbors."""
    d = _BY_DELTA.get((b[0] - a[0], b[1] - a[1]))
    if d is None:
        raise ValueError(f"Not neighbors: {a} and {b}")
    return d


def manhattan_distance(a: Coord, b: Coord) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def is_neighbor(a: Coord, b: Coord) -> bool:
    return manhattan_distance(a, b) == 1
