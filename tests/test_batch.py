from __future__ import annotations

import math
import unittest

from hamsnake.batch import Stats, debug_info, play_episode, play_multiple
from hamsnake.rng import RandomSource
from hamsnake.trace import UNCHANGED, AgentLog, Channel


def _stats(turns, wins=None):
    stats = Stats()
    wins = wins if wins is not None else [True] * len(turns)
    for i, (t, w) in enumerate(zip(turns, wins)):
        stats.record({"episode": i, "turns": t, "won": w})
    return stats


class StatsTest(unittest.TestCase):
    def test_summary_statistics(self):
        stats = _stats([1, 2, 3, 4, 5])
        self.assertEqual(stats.mean_turns(), 3)
        self.assertAlmostEqual(stats.stddev(), math.sqrt(2))
        self.assertEqual(stats.quantiles(), [1, 2, 3, 4, 5])
        self.assertEqual(stats.loss_rate(), 0)
        self.assertNotIn("LOST", stats.summary())

    def test_interpolated_quantiles(self):
        stats = _stats([10, 20])
        self.assertEqual(stats.quantiles(), [10, 12.5, 15, 17.5, 20])

    def test_losses_are_reported(self):
        stats = _stats([5, 7, 9, 11], [True, False, True, True])
        self.assertAlmostEqual(stats.loss_rate(), 0.25)
        self.assertIn("LOST: 25.0%", stats.summary())

    def test_empty(self):
        stats = Stats()
        self.assertEqual(stats.mean_turns(), 0.0)
        self.assertEqual(stats.quantiles(), [])
        self.assertEqual(stats.loss_rate(), 0.0)


class PlayTest(unittest.TestCase):
    def test_zig_zag_batch_always_wins(self):
        rows = []
        stats = play_multiple("zig_zag", 5, seed=3, workers=2, width=4, height=4, on_episode=rows.append)
        self.assertEqual(len(stats), 5)
        self.assertEqual(stats.loss_rate(), 0.0)
        self.assertEqual(len(rows), 5)
        self.assertTrue(all(row["length"] == 16 for row in rows))

    def test_episode_rows(self):
        row = play_episode("dhcr", RandomSource(1), 6, 6)
        self.assertTrue(row["won"])
        self.assertEqual(row["terminal_reason"], "win")
        self.assertEqual(row["length"], 36)

    def test_debug_info(self):
        log = AgentLog()
        log.add(0, Channel.CYCLE, [(0, 0), (0, 1), (1, 1), (1, 0)])
        log.add(1, Channel.CYCLE, UNCHANGED)
        log.add(1, Channel.PLAN, [(0, 1), (1, 1)])
        info = debug_info(log, 1)
        self.assertEqual(info["plan"], [(0, 1), (1, 1)])
        self.assertEqual(info["cycle"], [(0, 0), (0, 1), (1, 1), (1, 0)])
        self.assertIsNone(debug_info(None, 1))
        self.assertNotIn("plan", debug_info(log, 0))


if __name__ == "__main__":
    unittest.main()
