from typing import Iterator, List

from dfs_maze.core.grid import CellType, Grid
from dfs_maze.core.steps import Action, Step
from dfs_maze.algo.base import Solver


class TraceSolver(Solver):
    """
    DFS that records every visit, decision point, backtrack and the final
    solution as a Step carrying its own snapshot of the working maze.

    A decision point is tagged DECISION only in the snapshot of the step that
    detects it; the working maze keeps it as VISITED afterwards.
    """

    def __init__(self, grid: Grid):
        super().__init__(grid)
        self.steps: List[Step] = []

    def run(self) -> Iterator[Step]:
        self.steps = []
        for action, pos, available in self.traverse():
            annotate = action == Action.DECISION and not self.is_terminal(pos)
            if annotate:
                self.maze[pos] = CellType.DECISION

            step = Step(
                position=pos,
                stack=tuple(self.stack),
                action=action,
                available_paths=tuple(available),
                maze=self.maze.copy(),
            )

            if annotate:
                self.maze[pos] = CellType.VISITED

            self.steps.append(step)
            yield step


def trace(grid: Grid) -> List[Step]:
    """Full ordered DFS trace of grid from (0, 0) to (rows-1, cols-1)."""
    solver = TraceSolver(grid)
    solver.run_all()
    return solver.steps
