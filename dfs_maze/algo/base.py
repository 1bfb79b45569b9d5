import logging
from abc import ABC, abstractmethod
from typing import Iterator, List, Tuple

from dfs_maze.core.grid import CellType, Grid, Position
from dfs_maze.core.steps import Action, Result

logger = logging.getLogger(__name__)


class Generator(ABC):
    def __init__(self, grid: Grid, seed: int = None):
        self.grid = grid
        self.seed = seed
        self.step_count = 0

    @abstractmethod
    def run(self) -> Iterator[str]:
        """
        Yields status strings or progress updates.
        The actual grid modifications happen in-place on self.grid.
        """
        pass

    def run_all(self) -> Grid:
        """Helper to run the generator to completion."""
        for _ in self.run():
            pass
        return self.grid


class Solver(ABC):
    """
    Depth-first search from the top-left to the bottom-right cell.

    The caller's grid is only read; all re-tagging happens on self.maze, a
    private working copy. Subclasses decide what to emit for each event of
    traverse().
    """

    def __init__(self, grid: Grid):
        self.grid = grid
        self.maze = grid.copy()
        self.start = grid.start
        self.end = grid.end

        self.stack: List[Position] = []
        self.path: List[Position] = []
        self.visited: List[Position] = []
        self.backtrack_count = 0
        self.found = False
        self._seen = bytearray(grid.rows * grid.cols)

    @abstractmethod
    def run(self) -> Iterator:
        pass

    def run_all(self) -> Result:
        for _ in self.run():
            pass
        return self.result()

    def result(self) -> Result:
        return Result(
            solution=list(self.path),
            visited_cells=list(self.visited),
            backtrack_count=self.backtrack_count,
            found=self.found,
        )

    def is_terminal(self, pos: Position) -> bool:
        return pos == self.start or pos == self.end

    def available_paths(self, pos: Position) -> List[Position]:
        """Open, unvisited neighbors of pos in up, right, down, left order."""
        cols = self.grid.cols
        return [
            n for n in self.grid.neighbors(pos)
            if self.grid.is_open(*n) and not self._seen[n.row * cols + n.col]
        ]

    def traverse(self) -> Iterator[Tuple[Action, Position, List[Position]]]:
        """
        Runs the search and yields (action, position, available_paths) for
        every visit, backtrack and the final solution event.

        Each frame holds an iterator over the neighbors available at first
        visit; neighbors visited meanwhile by a deeper branch are skipped.
        """
        cols = self.grid.cols
        self.maze = self.grid.copy()
        self.stack, self.path, self.visited = [], [], []
        self.backtrack_count = 0
        self.found = False
        self._seen = bytearray(self.grid.rows * cols)

        frames: List[Iterator[Position]] = []
        nxt = self.start

        while True:
            if nxt is not None:
                available = self._enter(nxt)
                yield (Action.DECISION if len(available) > 1 else Action.EXPLORE), nxt, available

                if nxt == self.end:
                    self.found = True
                    self.path = list(self.stack)
                    self.mark_solution()
                    logger.debug(f"Solved: path {len(self.path)}, visited {len(self.visited)}, "
                                 f"backtracks {self.backtrack_count}")
                    yield Action.SOLUTION, nxt, []
                    return

                frames.append(iter(available))

            nxt = next((n for n in frames[-1] if not self._seen[n.row * cols + n.col]), None)
            if nxt is None:
                frames.pop()
                pos = self.stack.pop()
                self.backtrack_count += 1
                yield Action.BACKTRACK, pos, self.available_paths(pos)

                if not frames:
                    logger.debug(f"No path: visited {len(self.visited)}, "
                                 f"backtracks {self.backtrack_count}")
                    return

    def _enter(self, pos: Position) -> List[Position]:
        self._seen[pos.row * self.grid.cols + pos.col] = 1
        self.stack.append(pos)
        self.visited.append(pos)
        if not self.is_terminal(pos):
            self.maze[pos] = CellType.VISITED
        return self.available_paths(pos)

    def mark_solution(self):
        for pos in self.path:
            if not self.is_terminal(pos):
                self.maze[pos] = CellType.SOLUTION
        self.maze[self.start] = CellType.START
        self.maze[self.end] = CellType.END
