from __future__ import annotations

import unittest

from hamsnake.geometry import INVALID, ROOT, is_neighbor
from hamsnake.grid import Grid
from hamsnake.hamiltonian import (
    ORIGIN,
    CycleOrder,
    cycle_distance,
    cycle_predecessor,
    cycle_to_path,
    is_hamiltonian_cycle,
    make_zig_zag_cycle,
    random_hamiltonian_cycle,
    random_spanning_tree,
    reverse_cycle,
    tree_to_hamiltonian_cycle,
)
from hamsnake.rng import RandomSource


class RandomCycleTest(unittest.TestCase):
    def test_random_cycles_are_hamiltonian(self):
        for seed in range(100):
            cycle = random_hamiltonian_cycle(6, 6, RandomSource(seed))
            self.assertTrue(is_hamiltonian_cycle(cycle), f"seed {seed}")

    def test_non_square_and_tiny_boards(self):
        for w, h in [(2, 2), (2, 6), (8, 4)]:
            cycle = random_hamiltonian_cycle(w, h, RandomSource(3))
            self.assertTrue(is_hamiltonian_cycle(cycle), f"{w}x{h}")

    def test_same_seed_same_cycle(self):
        a = random_hamiltonian_cycle(6, 6, RandomSource(42))
        b = random_hamiltonian_cycle(6, 6, RandomSource(42))
        self.assertEqual(a, b)

    def test_spanning_tree_shape(self):
        tree = random_spanning_tree(4, 3, RandomSource(9))
        self.assertEqual(tree.count(ROOT), 1)
        for c in tree.coords():
            node = c
            for _ in range(tree.size):
                if tree[node] == ROOT:
                    break
                self.assertTrue(is_neighbor(node, tree[node]))
                node = tree[node]
            self.assertEqual(tree[node], ROOT)

    def test_forest_is_rejected(self):
        with self.assertRaises(ValueError):
            tree_to_hamiltonian_cycle(Grid(2, 2, ROOT))


class ZigZagTest(unittest.TestCase):
    def test_zig_zag_cycles(self):
        for w, h in [(2, 2), (4, 4), (6, 4), (20, 20)]:
            self.assertTrue(is_hamiltonian_cycle(make_zig_zag_cycle(w, h)), f"{w}x{h}")

    def test_zig_zag_order(self):
        path = cycle_to_path(make_zig_zag_cycle(4, 4))
        self.assertEqual(path[:5], [(0, 0), (0, 1), (0, 2), (0, 3), (1, 3)])
        self.assertEqual(path[-1], (1, 0))


class CycleUtilitiesTest(unittest.TestCase):
    def setUp(self):
        self.cycle = random_hamiltonian_cycle(6, 6, RandomSource(5))

    def test_broken_cycle_is_detected(self):
        broken = self.cycle.copy()
        broken[ORIGIN] = INVALID
        self.assertFalse(is_hamiltonian_cycle(broken))

    def test_cycle_to_path(self):
        path = cycle_to_path(self.cycle)
        self.assertEqual(len(path), 36)
        self.assertEqual(path[0], ORIGIN)
        self.assertEqual(len(set(path)), 36)
        for a, b in zip(path, path[1:]):
            self.assertEqual(self.cycle[a], b)

    def test_predecessor_and_reverse(self):
        rev = reverse_cycle(self.cycle)
        for c in self.cycle.coords():
            self.assertEqual(cycle_predecessor(self.cycle, self.cycle[c]), c)
            self.assertEqual(rev[self.cycle[c]], c)

    def test_distances(self):
        order = CycleOrder(self.cycle)
        a = (2, 3)
        self.assertEqual(order.distance(a, a), 36)
        self.assertEqual(order.distance_round_down(a, a), 0)
        self.assertEqual(order.distance(a, self.cycle[a]), 1)
        self.assertEqual(cycle_distance(self.cycle, a, self.cycle[a]), 1)
        self.assertEqual(cycle_distance(self.cycle, a, a), 0)
        b = self.cycle[self.cycle[self.cycle[a]]]
        self.assertEqual(order.distance(a, b), 3)
        self.assertEqual(order.distance(b, a), 33)


if __name__ == "__main__":
    unittest.main()
