import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from dfs_maze.core.grid import CellType, Grid
from dfs_maze.core.complexity import MazeAnalyzer
from dfs_maze.algo.backtracker import RecursiveBacktracker, generate

SIZES = [(3, 3), (5, 7), (21, 21), (20, 20), (10, 15), (4, 3), (3, 4)]

class TestGenerators(unittest.TestCase):
    def test_perfect_maze(self):
        for rows, cols in SIZES:
            for seed in range(5):
                grid = generate(rows, cols, seed=seed)
                self.assertTrue(MazeAnalyzer.is_perfect(grid),
                                f"{rows}x{cols} seed={seed} is not a tree:\n{grid.to_text()}")

    def test_start_end_reachable(self):
        for rows, cols in SIZES:
            grid = generate(rows, cols, seed=1)
            self.assertEqual(grid[grid.start], CellType.PATH)
            self.assertEqual(grid[grid.end], CellType.PATH)
            self.assertTrue(MazeAnalyzer.connected(grid, grid.start, grid.end))

    def test_lattice_alignment(self):
        grid = generate(21, 21, seed=3)
        for r in range(21):
            for c in range(21):
                if r % 2 == 1 and c % 2 == 1:
                    self.assertEqual(grid[r, c], CellType.PATH, f"room ({r}, {c}) not carved")
                elif r % 2 == 0 and c % 2 == 0 and (r, c) not in ((0, 0), (20, 20)):
                    self.assertEqual(grid[r, c], CellType.WALL, f"pillar ({r}, {c}) carved")

    def test_only_wall_and_path(self):
        grid = generate(15, 15, seed=8)
        self.assertEqual(grid.count(CellType.WALL) + grid.count(CellType.PATH), 15 * 15)

    def test_determinism(self):
        grid1 = generate(15, 15, seed=12345)

        grid2 = Grid(15, 15)
        rec = RecursiveBacktracker(grid2, seed=12345)
        for _ in rec.run(): pass

        self.assertEqual(grid1.cells.tobytes(), grid2.cells.tobytes())

    def test_seeds_differ(self):
        self.assertNotEqual(generate(31, 31, seed=1), generate(31, 31, seed=2))

    def test_run_yields_done(self):
        grid = Grid(41, 41)
        statuses = list(RecursiveBacktracker(grid, seed=0).run())
        self.assertEqual(statuses[-1], "Done")
        # 400 rooms -> 399 carves -> at least three progress updates
        self.assertTrue(any(s.startswith("Carving") for s in statuses))

    def test_degenerate_sizes(self):
        self.assertEqual(generate(1, 1).to_text(), ".")
        self.assertEqual(generate(1, 5).to_text(), ".###.")
        self.assertEqual(generate(2, 2).to_text(), ".#\n#.")
        self.assertEqual(generate(5, 2).to_text(), ".#\n##\n##\n##\n#.")

    def test_invalid_dimensions(self):
        with self.assertRaises(ValueError):
            generate(0, 5)
        with self.assertRaises(ValueError):
            generate(5, -3)

if __name__ == '__main__':
    unittest.main()
