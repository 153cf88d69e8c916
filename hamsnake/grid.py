"""Dense ``w x h`` grid indexed by coordinate."""

from __future__ import annotations

from typing import Generic, Iterator, List, Tuple, TypeVar

from .geometry import Coord

T = TypeVar("T")


def iter_coords(w: int, h: int) -> Iterator[Coord]:
    """Row-major iteration over all coordinates of a ``w x h`` board."""
    for y in range(h):
        for x in range(w):
            yield (x, y)


class Grid(Generic[T]):
    """Value-semantics grid. Every consumer works on its own copy.

    Indexing outside the board raises ``IndexError``; callers are expected to
    check ``valid()`` first, so reaching it means a broken invariant.
    """

    __slots__ = ("w", "h", "_data")

    def __init__(self, w: int, h: int, init: T = None) -> None:  # type: ignore[assignment]
        self.w = int(w)
        self.h = int(h)
        self._data: List[T] = [init] * (self.w * self.h)

    @classmethod
    def from_rows(cls, rows: List[List[T]]) -> "Grid[T]":
        h = len(rows)
        w = len(rows[0]) if rows else 0
        grid: Grid[T] = cls(w, h)
        grid._data = [value for row in rows for value in row]
        return grid

    def _index(self, c: Coord) -> int:
        x, y = c
        if not (0 <= x < self.w and 0 <= y < self.h):
            raise IndexError(f"{c} outside {self.w}x{self.h} grid")
        return x + self.w * y

    def __getitem__(self, c: Coord) -> T:
        return self._data[self._index(c)]

    def __setitem__(self, c: Coord, value: T) -> None:
        self._data[self._index(c)] = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.w == other.w and self.h == other.h and self._data == other._data

    def __repr__(self) -> str:
        return f"Grid({self.w}x{self.h})"

    def __iter__(self) -> Iterator[T]:
        return iter(self._data)

    @property
    def size(self) -> int:
        return self.w * self.h

    @property
    def dimensions(self) -> Tuple[int, int]:
        return (self.w, self.h)

    def valid(self, c: Coord) -> bool:
        return 0 <= c[0] < self.w and 0 <= c[1] < self.h

    def is_clear(self, c: Coord) -> bool:
        """True when ``c`` is on the board and holds a falsy value."""
        return self.valid(c) and not self._data[c[0] + self.w * c[1]]

    def coords(self) -> Iterator[Coord]:
        return iter_coords(self.w, self.h)

    def values(self) -> List[T]:
        return list(self._data)

    def copy(self) -> "Grid[T]":
        out: Grid[T] = Grid(self.w, self.h)
        out._data = list(self._data)
        return out

    def map(self, fn) -> "Grid":
        out: Grid = Grid(self.w, self.h)
        out._data = [fn(v) for v in self._data]
        return out

    def count(self, value: T) -> int:
        return self._data.count(value)


# A Hamiltonian cycle (or any next-cell map): each coordinate holds the
# coordinate that follows it.
GridPath = Grid[Coord]
