from dataclasses import dataclass, field
from enum import Enum
from typing import List, Sequence, Tuple

from dfs_maze.core.grid import Grid, Position


class Action(str, Enum):
    EXPLORE = "explore"
    DECISION = "decision"
    BACKTRACK = "backtrack"
    SOLUTION = "solution"

    def __str__(self) -> str:
        return self.value


# Actions that correspond to a first visit of a cell
VISIT_ACTIONS = (Action.EXPLORE, Action.DECISION)


@dataclass(frozen=True)
class Step:
    """
    One atomic DFS event. `maze` is an independent copy owned by this step,
    so any step can be inspected without replaying the ones before it.
    """
    position: Position
    stack: Tuple[Position, ...]
    action: Action
    available_paths: Tuple[Position, ...]
    maze: Grid = field(hash=False, repr=False)

    @property
    def is_visit(self) -> bool:
        return self.action in VISIT_ACTIONS


@dataclass
class Result:
    solution: List[Position] = field(default_factory=list)
    visited_cells: List[Position] = field(default_factory=list)
    backtrack_count: int = 0
    found: bool = False

    @property
    def cells_visited(self) -> int:
        return len(self.visited_cells)


@dataclass
class Stats:
    path_length: int = 0
    cells_visited: int = 0
    backtrack_count: int = 0
    solution_found: bool = False
    current_step: int = 0
    total_steps: int = 0


def derive_stats(steps: Sequence[Step], up_to_index: int) -> Stats:
    """
    Stats after replaying steps[0..up_to_index] (inclusive).

    cells_visited counts first visits (explore/decision steps), so over the
    full trace it equals Result.cells_visited for the same grid.
    """
    if not 0 <= up_to_index < len(steps):
        raise IndexError(f"Step index {up_to_index} out of range for {len(steps)} steps")

    visits = backtracks = 0
    solved = False
    for step in steps[:up_to_index + 1]:
        if step.action in VISIT_ACTIONS:
            visits += 1
        elif step.action == Action.BACKTRACK:
            backtracks += 1
        elif step.action == Action.SOLUTION:
            solved = True

    return Stats(
        path_length=len(steps[up_to_index].stack),
        cells_visited=visits,
        backtrack_count=backtracks,
        solution_found=solved,
        current_step=up_to_index,
        total_steps=len(steps),
    )
