import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from dfs_maze.core.grid import Grid
from dfs_maze.core.complexity import MazeAnalyzer
from dfs_maze.core.steps import derive_stats
from dfs_maze.algo.backtracker import generate
from dfs_maze.algo.tracer import trace

class TestAnalyzer(unittest.TestCase):
    def test_stats(self):
        grid = Grid.from_text(["..#", ".#.", "..."])
        stats = MazeAnalyzer.calculate_stats(grid)
        self.assertEqual(stats["open_cells"], 7)
        self.assertEqual(stats["dead_ends"], 2)
        self.assertEqual(stats["corridors"], 5)
        self.assertEqual(stats["junctions"], 0)
        self.assertAlmostEqual(stats["dead_end_percent"], 200 / 7)

    def test_perfectness(self):
        self.assertTrue(MazeAnalyzer.is_perfect(Grid.from_text(["..#", ".#.", "..."])))
        # Loops
        self.assertFalse(MazeAnalyzer.is_perfect(Grid.from_text(["...", "...", "..."])))
        # Two pieces
        self.assertFalse(MazeAnalyzer.is_perfect(Grid.from_text(["..#", "###", "#.."])))
        # Nothing open
        self.assertFalse(MazeAnalyzer.is_perfect(Grid(3, 3)))

    def test_components(self):
        grid = Grid.from_text(["..#", "###", "#.."])
        groups = MazeAnalyzer.components(grid)
        self.assertEqual(len(groups), 2)
        self.assertFalse(MazeAnalyzer.connected(grid, grid.start, grid.end))
        self.assertTrue(MazeAnalyzer.connected(grid, (0, 0), (0, 1)))

    def test_generated_maze_has_dead_ends(self):
        grid = generate(31, 31, seed=42)
        stats = MazeAnalyzer.calculate_stats(grid)
        self.assertGreater(stats["dead_ends"], 0)
        # Tree: edges == cells - 1
        self.assertEqual(MazeAnalyzer.edge_count(grid), stats["open_cells"] - 1)

class TestDeriveStats(unittest.TestCase):
    def setUp(self):
        self.steps = trace(Grid.from_text(["..#", ".#.", "..."]))

    def test_prefix(self):
        stats = derive_stats(self.steps, 2) # the backtrack out of (0,1)
        self.assertEqual(stats.path_length, 1)
        self.assertEqual(stats.cells_visited, 2)
        self.assertEqual(stats.backtrack_count, 1)
        self.assertFalse(stats.solution_found)
        self.assertEqual(stats.current_step, 2)
        self.assertEqual(stats.total_steps, 8)

    def test_full(self):
        stats = derive_stats(self.steps, 7)
        self.assertEqual(stats.path_length, 5)
        self.assertEqual(stats.cells_visited, 6)
        self.assertEqual(stats.backtrack_count, 1)
        self.assertTrue(stats.solution_found)

    def test_out_of_range(self):
        with self.assertRaises(IndexError):
            derive_stats(self.steps, 8)
        with self.assertRaises(IndexError):
            derive_stats(self.steps, -1)
        with self.assertRaises(IndexError):
            derive_stats([], 0)

if __name__ == '__main__':
    unittest.main()
