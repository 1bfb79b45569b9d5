from typing import Dict, List, Set

import numpy as np

from dfs_maze.core.grid import CellType, Grid, Position


class MazeAnalyzer:
    @staticmethod
    def open_mask(grid: Grid) -> np.ndarray:
        return grid.to_numpy() != CellType.WALL

    @staticmethod
    def degrees(grid: Grid) -> np.ndarray:
        """
        Number of open 4-neighbors for every cell (walls included, so mask
        with open_mask before reading it).
        """
        padded = np.pad(MazeAnalyzer.open_mask(grid).astype(np.int8), 1)
        return (padded[:-2, 1:-1] + padded[2:, 1:-1]
                + padded[1:-1, :-2] + padded[1:-1, 2:])

    @staticmethod
    def edge_count(grid: Grid) -> int:
        mask = MazeAnalyzer.open_mask(grid)
        horizontal = np.count_nonzero(mask[:, :-1] & mask[:, 1:])
        vertical = np.count_nonzero(mask[:-1, :] & mask[1:, :])
        return int(horizontal + vertical)

    @staticmethod
    def components(grid: Grid) -> List[Set[Position]]:
        """Connected groups of open cells (flood fill with an explicit stack)."""
        seen: Set[Position] = set()
        groups: List[Set[Position]] = []
        for r in range(grid.rows):
            for c in range(grid.cols):
                if not grid.is_open(r, c) or (r, c) in seen:
                    continue
                group = set()
                stack = [Position(r, c)]
                seen.add(stack[0])
                while stack:
                    cur = stack.pop()
                    group.add(cur)
                    for n in grid.neighbors(cur):
                        if n not in seen and grid.is_open(*n):
                            seen.add(n)
                            stack.append(n)
                groups.append(group)
        return groups

    @staticmethod
    def is_perfect(grid: Grid) -> bool:
        """
        True if the open cells form a tree: one connected component and
        exactly one edge fewer than cells.
        """
        cells = int(np.count_nonzero(MazeAnalyzer.open_mask(grid)))
        if cells == 0:
            return False
        if MazeAnalyzer.edge_count(grid) != cells - 1:
            return False
        return len(MazeAnalyzer.components(grid)) == 1

    @staticmethod
    def connected(grid: Grid, a: Position, b: Position) -> bool:
        for group in MazeAnalyzer.components(grid):
            if a in group:
                return b in group
        return False

    @staticmethod
    def calculate_stats(grid: Grid) -> Dict[str, float]:
        mask = MazeAnalyzer.open_mask(grid)
        deg = MazeAnalyzer.degrees(grid)

        open_cells = int(np.count_nonzero(mask))
        dead_ends = int(np.count_nonzero(mask & (deg == 1)))
        corridors = int(np.count_nonzero(mask & (deg == 2)))
        junctions = int(np.count_nonzero(mask & (deg >= 3)))

        return {
            "open_cells": open_cells,
            "dead_ends": dead_ends,
            "corridors": corridors,
            "junctions": junctions,
            "dead_end_percent": (dead_ends / open_cells) * 100 if open_cells > 0 else 0,
        }
