from typing import Iterator, Tuple

from dfs_maze.core.grid import Grid
from dfs_maze.core.steps import Action, Result, Stats
from dfs_maze.algo.base import Solver


class FastSolver(Solver):
    """
    Same traversal as TraceSolver without building Step objects.

    run() yields (maze, stats) after each visit and backtrack. `maze` is the
    solver's live working copy, so a renderer should draw it before pulling
    the next pair. On success the path is re-tagged SOLUTION and the two
    terminals START/END.
    """

    def run(self) -> Iterator[Tuple[Grid, Stats]]:
        for action, _pos, _available in self.traverse():
            if action == Action.SOLUTION:
                continue
            yield self.maze, self.stats()

        # Final frame carries the solved flag and the re-tagged path
        yield self.maze, self.stats()

    def stats(self) -> Stats:
        return Stats(
            path_length=len(self.stack),
            cells_visited=len(self.visited),
            backtrack_count=self.backtrack_count,
            solution_found=self.found,
        )


def solve(grid: Grid) -> Result:
    """Solves grid with DFS; the caller's grid is left untouched."""
    return FastSolver(grid).run_all()
