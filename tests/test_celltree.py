from __future__ import annotations

import unittest

from hamsnake.celltree import (
    can_move_in_cell_tree,
    cell,
    cell_move_inside,
    cell_move_outside,
    cell_tree_parents,
    is_cell_move,
    move_to_parent,
    tree_allows,
)
from hamsnake.geometry import DIRS, NOT_VISITED, ROOT, Dir, step
from hamsnake.grid import Grid


class CellMoveTest(unittest.TestCase):
    def test_move_table(self):
        self.assertEqual((cell_move_inside((0, 0)), cell_move_outside((0, 0))), (Dir.DOWN, Dir.LEFT))
        self.assertEqual((cell_move_inside((1, 0)), cell_move_outside((1, 0))), (Dir.LEFT, Dir.UP))
        self.assertEqual((cell_move_inside((0, 1)), cell_move_outside((0, 1))), (Dir.RIGHT, Dir.DOWN))
        self.assertEqual((cell_move_inside((1, 1)), cell_move_outside((1, 1))), (Dir.UP, Dir.RIGHT))
        # depends only on parity
        self.assertIs(cell_move_inside((4, 7)), Dir.RIGHT)

    def test_inside_moves_circle_the_cell(self):
        c = (2, 2)
        seen = []
        for _ in range(4):
            seen.append(c)
            c = step(c, cell_move_inside(c))
            self.assertEqual(cell(c), (1, 1))
        self.assertEqual(c, (2, 2))
        self.assertEqual(len(set(seen)), 4)

    def test_outside_moves_leave_the_cell(self):
        for c in [(2, 2), (3, 2), (2, 3), (3, 3)]:
            self.assertNotEqual(cell(step(c, cell_move_outside(c))), cell(c))

    def test_exactly_two_moves_per_coordinate(self):
        for c in [(0, 0), (1, 0), (0, 1), (1, 1)]:
            self.assertEqual(sum(is_cell_move(c, d) for d in DIRS), 2)


class CellTreeTest(unittest.TestCase):
    def setUp(self):
        # Tail in cell (0,0), then cells (1,0), (1,1); the head sits in cell (0,1).
        self.snake = [(1, 2), (2, 2), (2, 1), (2, 0), (1, 0)]
        self.parents = cell_tree_parents((4, 4), self.snake)

    def test_parents_follow_the_body(self):
        self.assertEqual(self.parents[(0, 0)], ROOT)
        self.assertEqual(self.parents[(1, 0)], (0, 0))
        self.assertEqual(self.parents[(1, 1)], (1, 0))
        self.assertEqual(self.parents[(0, 1)], (1, 1))

    def test_unvisited_cells(self):
        parents = cell_tree_parents((4, 4), [(0, 0)])
        self.assertEqual(parents[(0, 0)], ROOT)
        self.assertEqual(parents[(1, 1)], NOT_VISITED)

    def test_visited_sibling_is_blocked(self):
        # (1,2) -> (1,1) is an outgoing lane into cell (0,0), which is visited but not the parent.
        self.assertTrue(is_cell_move((1, 2), Dir.UP))
        self.assertFalse(can_move_in_cell_tree(self.parents, (1, 2), (1, 1), Dir.UP))

    def test_same_cell_and_parent_are_allowed(self):
        self.assertTrue(can_move_in_cell_tree(self.parents, (1, 2), (0, 2), Dir.LEFT))
        self.assertTrue(can_move_in_cell_tree(self.parents, (1, 3), (2, 3), Dir.RIGHT))

    def test_non_cell_moves_are_rejected(self):
        self.assertFalse(can_move_in_cell_tree(self.parents, (1, 2), (1, 3), Dir.DOWN))

    def test_child_can_move_back_to_parent(self):
        parents = self.parents.copy()
        for child, parent in [((0, 1), (1, 1)), ((1, 1), (1, 0)), ((1, 0), (0, 0))]:
            self.assertTrue(tree_allows(parents, child, parent))
        # marking a fresh cell as child of its neighbor keeps the way back open
        parents = cell_tree_parents((4, 4), [(0, 0)])
        parents[(1, 0)] = (0, 0)
        self.assertTrue(tree_allows(parents, (1, 0), (0, 0)))


class MoveToParentTest(unittest.TestCase):
    def _retrace(self, parents: Grid, start):
        c = start
        for _ in range(4):
            d = move_to_parent(parents, c)
            self.assertTrue(is_cell_move(c, d), f"{d} is not a lane move at {c}")
            c = step(c, d)
            if cell(c) == parents[cell(start)]:
                return c
            self.assertEqual(cell(c), cell(start))
        self.fail(f"did not reach the parent cell from {start}")

    def test_reaches_parent_in_every_direction(self):
        cases = [
            ((1, 0), (0, 0)),  # parent to the left
            ((0, 0), (1, 0)),  # parent to the right
            ((0, 1), (0, 0)),  # parent above
            ((0, 0), (0, 1)),  # parent below
        ]
        for child, parent in cases:
            parents: Grid = Grid(2, 2, NOT_VISITED)
            parents[parent] = ROOT
            parents[child] = parent
            x0, y0 = child[0] * 2, child[1] * 2
            for c in [(x0, y0), (x0 + 1, y0), (x0, y0 + 1), (x0 + 1, y0 + 1)]:
                with self.subTest(child=child, parent=parent, start=c):
                    self._retrace(parents, c)

    def test_root_circles_inside(self):
        parents: Grid = Grid(2, 2, NOT_VISITED)
        parents[(0, 0)] = ROOT
        self.assertIs(move_to_parent(parents, (0, 0)), Dir.DOWN)


if __name__ == "__main__":
    unittest.main()
