from array import array
from enum import IntEnum
from typing import Iterable, Iterator, List, NamedTuple, Sequence, Tuple, Union

import numpy as np


class CellType(IntEnum):
    WALL = 0
    PATH = 1
    VISITED = 2
    DECISION = 3
    SOLUTION = 4
    START = 5
    END = 6

    @property
    def char(self) -> str:
        return CELL_CHARS[self]

    @classmethod
    def from_char(cls, ch: str) -> "CellType":
        try:
            return CHAR_CELLS[ch]
        except KeyError:
            raise ValueError(f"Unknown cell character {ch!r}") from None


CELL_CHARS = {
    CellType.WALL: "#",
    CellType.PATH: ".",
    CellType.VISITED: "o",
    CellType.DECISION: "?",
    CellType.SOLUTION: "*",
    CellType.START: "S",
    CellType.END: "E",
}
CHAR_CELLS = {ch: cell for cell, ch in CELL_CHARS.items()}


class Position(NamedTuple):
    row: int
    col: int

    def __str__(self) -> str:
        return f"({self.row}, {self.col})"


# Neighbor order: up, right, down, left
DIRECTIONS: Tuple[Tuple[int, int], ...] = ((-1, 0), (0, 1), (1, 0), (0, -1))


class Grid:
    """
    Rectangular maze of CellType tags, row-major, one byte per cell.

    Dimensions are fixed at creation. Carving and solving mutate cells in
    place; copy() gives an independent grid for snapshots.
    """

    __slots__ = ('rows', 'cols', 'cells')

    def __init__(self, rows: int, cols: int, fill: CellType = CellType.WALL):
        if rows < 1 or cols < 1:
            raise ValueError(f"Grid dimensions must be positive, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self.cells = array('B', [int(fill)] * (rows * cols))

    @classmethod
    def from_rows(cls, data: Sequence[Sequence[Union[CellType, str, int]]]) -> "Grid":
        """
        Builds a grid from nested rows. Cells may be CellType members,
        their names ("wall", "path", ...) or their text characters.
        """
        if not data or not data[0]:
            raise ValueError("Grid data must have at least one row and one column")
        cols = len(data[0])
        grid = cls(len(data), cols)
        for r, row in enumerate(data):
            if len(row) != cols:
                raise ValueError(f"Row {r} has {len(row)} cells, expected {cols}")
            for c, value in enumerate(row):
                grid.cells[r * cols + c] = _coerce(value)
        return grid

    @classmethod
    def from_text(cls, lines: Union[str, Iterable[str]]) -> "Grid":
        if isinstance(lines, str):
            lines = lines.split()
        return cls.from_rows([list(line) for line in lines if line])

    @property
    def start(self) -> Position:
        return Position(0, 0)

    @property
    def end(self) -> Position:
        return Position(self.rows - 1, self.cols - 1)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def get_index(self, row: int, col: int) -> int:
        if 0 <= row < self.rows and 0 <= col < self.cols:
            return row * self.cols + col
        raise IndexError(f"Coordinate ({row}, {col}) out of bounds")

    def __getitem__(self, pos: Tuple[int, int]) -> CellType:
        return CellType(self.cells[self.get_index(*pos)])

    def __setitem__(self, pos: Tuple[int, int], value: CellType):
        self.cells[self.get_index(*pos)] = int(value)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return (self.rows, self.cols) == (other.rows, other.cols) and self.cells == other.cells

    def __repr__(self) -> str:
        return f"Grid({self.rows}x{self.cols})"

    def copy(self) -> "Grid":
        clone = Grid.__new__(Grid)
        clone.rows = self.rows
        clone.cols = self.cols
        clone.cells = array('B', self.cells)
        return clone

    def is_open(self, row: int, col: int) -> bool:
        return self.cells[row * self.cols + col] != CellType.WALL

    def neighbors(self, pos: Tuple[int, int]) -> Iterator[Position]:
        """
        Yields in-bounds 4-neighbors in the fixed order up, right, down, left.
        Does NOT check walls.
        """
        row, col = pos
        for dr, dc in DIRECTIONS:
            nr, nc = row + dr, col + dc
            if 0 <= nr < self.rows and 0 <= nc < self.cols:
                yield Position(nr, nc)

    def count(self, cell: CellType) -> int:
        return self.cells.count(int(cell))

    def to_rows(self) -> List[List[CellType]]:
        return [
            [CellType(v) for v in self.cells[r * self.cols:(r + 1) * self.cols]]
            for r in range(self.rows)
        ]

    def to_text(self) -> str:
        return "\n".join(
            "".join(CELL_CHARS[CellType(v)] for v in self.cells[r * self.cols:(r + 1) * self.cols])
            for r in range(self.rows)
        )

    def to_numpy(self) -> np.ndarray:
        """Returns a read-only (rows, cols) uint8 array of the cell tags for renderers."""
        arr = np.frombuffer(self.cells.tobytes(), dtype=np.uint8)
        return arr.reshape((self.rows, self.cols))


def _coerce(value) -> int:
    if isinstance(value, CellType):
        return int(value)
    if isinstance(value, str):
        if len(value) == 1:
            return int(CellType.from_char(value))
        try:
            return int(CellType[value.upper()])
        except KeyError:
            raise ValueError(f"Unknown cell type {value!r}") from None
    return int(CellType(value))
