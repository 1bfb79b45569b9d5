import logging
import random
from typing import Iterator, List, Tuple

from dfs_maze.core.grid import CellType, Grid
from dfs_maze.algo.base import Generator

logger = logging.getLogger(__name__)

# Moves between rooms: up, right, down, left
CARVE_MOVES = ((-2, 0), (0, 2), (2, 0), (0, -2))


class RecursiveBacktracker(Generator):
    """
    Randomized recursive backtracking on the odd-coordinate lattice.

    Odd (row, col) cells are rooms, the cells between them are connectors.
    The recursion is unrolled into a stack of (row, col, moves) frames, each
    holding the shuffled moves its cell has not tried yet, so carve order is
    the same as the recursive form.
    """

    def run(self) -> Iterator[str]:
        rng = random.Random(self.seed)
        grid = self.grid
        rows, cols = grid.rows, grid.cols

        if rows > 2 and cols > 2:
            grid[1, 1] = CellType.PATH
            stack: List[Tuple[int, int, List[Tuple[int, int]]]] = [(1, 1, self._shuffled(rng))]

            while stack:
                r, c, moves = stack[-1]

                if not moves:
                    stack.pop()
                    continue

                dr, dc = moves.pop()
                nr, nc = r + dr, c + dc
                if 0 <= nr < rows and 0 <= nc < cols and grid[nr, nc] == CellType.WALL:
                    grid[r + dr // 2, c + dc // 2] = CellType.PATH
                    grid[nr, nc] = CellType.PATH
                    stack.append((nr, nc, self._shuffled(rng)))
                    self.step_count += 1

                    # Yield every N steps to keep UI responsive without spamming
                    if self.step_count % 100 == 0:
                        yield f"Carving... Stack: {len(stack)}"

        self._open_terminals()
        logger.debug(f"Carved {self.step_count} passages in {rows}x{cols} grid")
        yield "Done"

    @staticmethod
    def _shuffled(rng: random.Random) -> List[Tuple[int, int]]:
        moves = list(CARVE_MOVES)
        rng.shuffle(moves)
        # Popped from the end, so reverse to try them in shuffled order
        moves.reverse()
        return moves

    def _open_terminals(self):
        """
        Opens the entrance and exit. A terminal on the border joins the
        carved lattice through one connector cell, never two, so the maze
        stays a tree.
        """
        grid = self.grid
        rows, cols = grid.rows, grid.cols
        carved = rows > 2 and cols > 2

        grid[0, 0] = CellType.PATH
        if carved:
            grid[1, 0] = CellType.PATH

        end_r, end_c = rows - 1, cols - 1
        grid[end_r, end_c] = CellType.PATH
        if carved and end_r % 2 == 0 and end_c % 2 == 0:
            # Corner cell: both neighbors are border walls
            grid[end_r - 1, end_c] = CellType.PATH


def generate(rows: int, cols: int, seed: int = None) -> Grid:
    """Generates a perfect rows x cols maze with open (0, 0) and (rows-1, cols-1)."""
    grid = Grid(rows, cols)
    RecursiveBacktracker(grid, seed=seed).run_all()
    return grid
