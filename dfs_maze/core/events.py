import logging
import struct
from array import array
from typing import Iterator, List, Sequence, Tuple

import numpy as np

from dfs_maze.core.grid import Grid, Position
from dfs_maze.core.steps import Action, Step

logger = logging.getLogger(__name__)

MAGIC = b"DFSTRACE"

# Event Types
EVT_EXPLORE = 0x01
EVT_DECISION = 0x02
EVT_BACKTRACK = 0x03
EVT_SOLUTION = 0x04

ACTION_CODES = {
    Action.EXPLORE: EVT_EXPLORE,
    Action.DECISION: EVT_DECISION,
    Action.BACKTRACK: EVT_BACKTRACK,
    Action.SOLUTION: EVT_SOLUTION,
}
CODE_ACTIONS = {code: action for action, code in ACTION_CODES.items()}


def read_exact(f, n: int) -> bytes:
    """Reads exactly n bytes or raises ValueError on a truncated file."""
    data = f.read(n)
    if len(data) != n:
        raise ValueError(f"Truncated file: expected {n} bytes, got {len(data)}")
    return data


class TraceWriter:
    """
    Writes a DFS trace as a compact event log.

    Only the cells whose tag changed since the previous snapshot are stored
    per step; TraceReader replays them to rebuild full snapshots.

    Format:
    - MAGIC (8 bytes), ROWS, COLS (>II)
    - seed grid cells (ROWS * COLS bytes)
    - per step: ACTION, ROW, COL (>BHH), N_AVAIL (>B) + N_AVAIL * (>HH),
      N_CHANGES (>I) + N_CHANGES * (>HHB)
    """

    def __init__(self, filename: str):
        self.filename = filename
        self.file = open(filename, "wb")
        self.cols = 0
        self.prev = None
        self.step_count = 0

    def write_header(self, grid: Grid):
        self.file.write(MAGIC)
        self.file.write(struct.pack(">II", grid.rows, grid.cols))
        self.file.write(grid.cells.tobytes())
        self.cols = grid.cols
        self.prev = np.frombuffer(grid.cells.tobytes(), dtype=np.uint8)

    def log_step(self, step: Step):
        if self.prev is None:
            raise ValueError("write_header must be called before log_step")

        pos = step.position
        self.file.write(struct.pack(">BHH", ACTION_CODES[step.action], pos.row, pos.col))

        self.file.write(struct.pack(">B", len(step.available_paths)))
        for n in step.available_paths:
            self.file.write(struct.pack(">HH", n.row, n.col))

        current = np.frombuffer(step.maze.cells.tobytes(), dtype=np.uint8)
        changed = np.flatnonzero(current != self.prev)
        self.file.write(struct.pack(">I", len(changed)))
        for idx in changed:
            r, c = divmod(int(idx), self.cols)
            self.file.write(struct.pack(">HHB", r, c, int(current[idx])))

        self.prev = current
        self.step_count += 1

    def log_steps(self, steps: Sequence[Step]):
        for step in steps:
            self.log_step(step)

    def close(self):
        if self.file:
            self.file.close()
            self.file = None


class TraceReader:
    def __init__(self, filename: str):
        self.filename = filename
        self.file = open(filename, "rb")
        self.rows = 0
        self.cols = 0
        self.grid = None

    def read_header(self) -> Tuple[int, int]:
        magic = self.file.read(len(MAGIC))
        if magic != MAGIC:
            raise ValueError("Invalid trace log file")
        self.rows, self.cols = struct.unpack(">II", read_exact(self.file, 8))

        data = read_exact(self.file, self.rows * self.cols)
        self.grid = Grid(self.rows, self.cols)
        self.grid.cells = array('B', data)

        logger.debug(f"Trace log {self.filename}: {self.rows}x{self.cols}")
        return self.rows, self.cols

    def stream_steps(self) -> Iterator[Step]:
        """
        Yields full Steps, applying each diff to a running grid. The stack is
        rebuilt from the actions: visits push, backtracks pop.
        """
        if self.grid is None:
            self.read_header()

        maze = self.grid.copy()
        stack: List[Position] = []

        while True:
            head = self.file.read(1)
            if not head:
                break
            code = head[0]
            row, col = struct.unpack(">HH", read_exact(self.file, 4))
            action = CODE_ACTIONS.get(code)
            if action is None:
                raise ValueError(f"Unknown trace event 0x{code:02x}")
            pos = Position(row, col)

            n_avail = struct.unpack(">B", read_exact(self.file, 1))[0]
            available = tuple(
                Position(*struct.unpack(">HH", read_exact(self.file, 4))) for _ in range(n_avail)
            )

            n_changes = struct.unpack(">I", read_exact(self.file, 4))[0]
            for _ in range(n_changes):
                r, c, tag = struct.unpack(">HHB", read_exact(self.file, 5))
                if r >= self.rows or c >= self.cols:
                    raise ValueError(f"Trace change ({r}, {c}) outside {self.rows}x{self.cols} grid")
                maze.cells[r * self.cols + c] = tag

            if action in (Action.EXPLORE, Action.DECISION):
                stack.append(pos)
            elif action == Action.BACKTRACK:
                if not stack:
                    raise ValueError("Backtrack event with an empty stack")
                stack.pop()

            yield Step(
                position=pos,
                stack=tuple(stack),
                action=action,
                available_paths=available,
                maze=maze.copy(),
            )

    def close(self):
        if self.file:
            self.file.close()
            self.file = None


def write_trace(filename: str, grid: Grid, steps: Sequence[Step]) -> int:
    writer = TraceWriter(filename)
    try:
        writer.write_header(grid)
        writer.log_steps(steps)
        return writer.step_count
    finally:
        writer.close()


def read_trace(filename: str) -> Tuple[Grid, List[Step]]:
    reader = TraceReader(filename)
    try:
        reader.read_header()
        steps = list(reader.stream_steps())
        return reader.grid, steps
    finally:
        reader.close()
