import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from dfs_maze.core.grid import Grid
from dfs_maze.algo.tracer import trace
from dfs_maze.viz.replay import TraceCursor, format_step

class TestTraceCursor(unittest.TestCase):
    def setUp(self):
        self.steps = trace(Grid.from_text(["..#", ".#.", "..."]))
        self.cursor = TraceCursor(self.steps)

    def test_navigation(self):
        cursor = self.cursor
        self.assertTrue(cursor.at_start)
        self.assertIs(cursor.current, self.steps[0])
        self.assertIsNone(cursor.step_backward())

        self.assertIs(cursor.step_forward(), self.steps[1])
        self.assertIs(cursor.step_backward(), self.steps[0])

        cursor.seek(7)
        self.assertTrue(cursor.at_end)
        self.assertIsNone(cursor.step_forward())
        self.assertEqual(cursor.index, 7)

        cursor.reset()
        self.assertEqual(cursor.index, 0)

        with self.assertRaises(IndexError):
            cursor.seek(8)

    def test_stats_at_cursor(self):
        self.cursor.seek(2)
        stats = self.cursor.stats()
        self.assertEqual(stats.backtrack_count, 1)
        self.assertEqual(stats.path_length, 1)

        # Scrubbing backwards recomputes from the prefix
        self.cursor.seek(1)
        self.assertEqual(self.cursor.stats().backtrack_count, 0)

    def test_play_with_delay(self):
        sleeps = []
        self.cursor.seek(5)
        played = list(self.cursor.play(0.5, sleep=sleeps.append))
        self.assertEqual(played, self.steps[5:])
        self.assertEqual(sleeps, [0.5, 0.5])
        self.assertTrue(self.cursor.at_end)

    def test_log(self):
        self.cursor.seek(7)
        self.assertEqual(self.cursor.log(), [
            "DFS started at (0, 0)",
            "Visited: (0, 1)",
            "Backtracking from: (0, 1)",
            "Visited: (1, 0)",
            "Visited: (2, 0)",
            "Visited: (2, 1)",
            "Visited: (2, 2)",
            "Reached end at (2, 2)",
        ])

    def test_format_decision(self):
        steps = trace(Grid.from_text(["...", "...", "..."]))
        self.assertEqual(format_step(steps[1]), "Visited: (0, 1) (decision, 2 paths)")

    def test_empty(self):
        cursor = TraceCursor([])
        self.assertIsNone(cursor.current)
        self.assertEqual(list(cursor.play(0.0, sleep=lambda _: None)), [])
        self.assertEqual(cursor.log(), [])

if __name__ == '__main__':
    unittest.main()
