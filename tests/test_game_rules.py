from __future__ import annotations

import unittest

from hamsnake.batch import play
from hamsnake.cycle_agents import ZigZagAgent
from hamsnake.game import SnakeGame, Status
from hamsnake.geometry import Dir
from hamsnake.rng import RandomSource


class TailRuleBehaviorTest(unittest.TestCase):
    def test_tail_entry_is_a_collision(self):
        game = SnakeGame(4, 4, RandomSource(0), initial_body=[(1, 1), (1, 0), (0, 0), (0, 1)], apple=(3, 3))
        self.assertFalse(game.move(Dir.LEFT))
        self.assertTrue(game.lost)
        self.assertEqual(game.collision_reason, "self")
        self.assertEqual(game.terminal_reason, "collision")

    def test_leaving_the_board(self):
        game = SnakeGame(4, 4, RandomSource(0), initial_body=[(0, 0)], apple=(3, 3))
        game.move(Dir.UP)
        self.assertIs(game.status, Status.LOSS)
        self.assertEqual(game.collision_reason, "wall")

    def test_plain_move_keeps_length(self):
        game = SnakeGame(4, 4, RandomSource(0), initial_body=[(1, 0), (0, 0)], apple=(3, 3))
        self.assertFalse(game.move(Dir.DOWN))
        self.assertEqual(list(game.snake), [(1, 1), (1, 0)])
        self.assertFalse(game.occupied[(0, 0)])
        self.assertEqual(game.turn, 1)

    def test_eating_grows_and_respawns_apple(self):
        game = SnakeGame(4, 4, RandomSource(0), initial_body=[(1, 0), (0, 0)], apple=(2, 0))
        self.assertTrue(game.move(Dir.RIGHT))
        self.assertEqual(len(game.snake), 3)
        self.assertTrue(game.occupied[(0, 0)])
        self.assertFalse(game.occupied[game.apple])
        self.assertNotIn(game.apple, game.snake)

    def test_filling_the_board_wins(self):
        game = SnakeGame(2, 2, RandomSource(0), initial_body=[(0, 0), (0, 1), (1, 1)])
        self.assertEqual(game.apple, (1, 0))
        self.assertTrue(game.move(Dir.RIGHT))
        self.assertTrue(game.won)
        self.assertEqual(game.terminal_reason, "win")

    def test_moves_after_the_end_are_ignored(self):
        game = SnakeGame(4, 4, RandomSource(0), initial_body=[(0, 0)], apple=(3, 3))
        game.move(Dir.LEFT)
        turn = game.turn
        game.move(Dir.DOWN)
        self.assertEqual(game.turn, turn)


class SetupValidationTest(unittest.TestCase):
    def test_odd_dimensions_are_rejected(self):
        with self.assertRaises(ValueError):
            SnakeGame(5, 4, RandomSource(0))

    def test_broken_bodies_are_rejected(self):
        with self.assertRaises(ValueError):
            SnakeGame(4, 4, RandomSource(0), initial_body=[(0, 0), (2, 0)])
        with self.assertRaises(ValueError):
            SnakeGame(4, 4, RandomSource(0), initial_body=[(0, 0), (0, 1), (0, 0)])
        with self.assertRaises(ValueError):
            SnakeGame(4, 4, RandomSource(0), initial_body=[(4, 0)])
        with self.assertRaises(ValueError):
            SnakeGame(4, 4, RandomSource(0), initial_body=[])

    def test_apple_on_the_body_is_rejected(self):
        with self.assertRaises(ValueError):
            SnakeGame(4, 4, RandomSource(0), initial_body=[(0, 0)], apple=(0, 0))

    def test_same_seed_same_start(self):
        a = SnakeGame(8, 8, RandomSource(17))
        b = SnakeGame(8, 8, RandomSource(17))
        self.assertEqual((a.head, a.apple), (b.head, b.apple))


class TurnCapTest(unittest.TestCase):
    def test_turn_cap_is_a_loss(self):
        game = SnakeGame(20, 20, RandomSource(0))
        play(game, ZigZagAgent(20, 20), max_turns=5)
        self.assertEqual(game.turn, 5)
        self.assertTrue(game.lost)
        self.assertEqual(game.terminal_reason, "turn_limit")
        self.assertIsNone(game.collision_reason)


if __name__ == "__main__":
    unittest.main()
