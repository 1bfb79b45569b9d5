import struct
import json
import zlib
from typing import Optional, Dict, Any, Tuple
from array import array
from dfs_maze.core.grid import Grid
from dfs_maze.core.events import read_exact

class MazeSerializer:
    MAGIC = b"MAZE"
    VERSION = 2

    # Flags
    FLAG_COMPRESSED = 1
    FLAG_SEED_ONLY = 2

    @staticmethod
    def save(grid: Grid, filepath: str, meta: Optional[Dict[str, Any]] = None, seed_only=False, compress=False):
        """
        Saves the maze to a binary file.
        Format:
        - MAGIC (4 bytes)
        - VERSION (1 byte)
        - FLAGS (1 byte)
        - ROWS (4 bytes)
        - COLS (4 bytes)
        - META_LEN (2 bytes)
        - META_JSON (META_LEN bytes)
        - DATA_LEN (4 bytes, 0 if seed_only)
        - DATA (one CellType byte per cell, row-major; compressed or raw)
        """
        if meta is None:
            meta = {}

        if seed_only and meta.get("seed") is None:
            raise ValueError("seed_only requires a 'seed' entry in meta")

        flags = 0
        if compress:
            flags |= MazeSerializer.FLAG_COMPRESSED
        if seed_only:
            flags |= MazeSerializer.FLAG_SEED_ONLY

        meta_bytes = json.dumps(meta).encode('utf-8')

        with open(filepath, "wb") as f:
            f.write(MazeSerializer.MAGIC)
            f.write(struct.pack("B", MazeSerializer.VERSION))
            f.write(struct.pack("B", flags))
            f.write(struct.pack("II", grid.rows, grid.cols))
            f.write(struct.pack("H", len(meta_bytes)))
            f.write(meta_bytes)

            if seed_only:
                f.write(struct.pack("I", 0)) # No data length
            else:
                data = grid.cells.tobytes()
                if compress:
                    data = zlib.compress(data)

                f.write(struct.pack("I", len(data)))
                f.write(data)

    @staticmethod
    def load(filepath: str) -> Tuple[Grid, Dict[str, Any]]:
        with open(filepath, "rb") as f:
            magic = f.read(4)
            if magic != MazeSerializer.MAGIC:
                raise ValueError("Invalid file format")

            version = struct.unpack("B", read_exact(f, 1))[0]
            if version != MazeSerializer.VERSION:
                raise ValueError(f"Unsupported maze file version {version}")
            flags = struct.unpack("B", read_exact(f, 1))[0]
            rows, cols = struct.unpack("II", read_exact(f, 8))
            meta_len = struct.unpack("H", read_exact(f, 2))[0]
            meta = json.loads(read_exact(f, meta_len).decode('utf-8'))
            if not isinstance(meta, dict):
                raise ValueError("Maze metadata must be a JSON object")

            data_len = struct.unpack("I", read_exact(f, 4))[0]

            if flags & MazeSerializer.FLAG_SEED_ONLY:
                # Same seed and dimensions reproduce the same maze
                if meta.get("seed") is None:
                    raise ValueError("Seed-only maze file has no 'seed' in its metadata")
                from dfs_maze.algo.backtracker import generate
                return generate(rows, cols, seed=meta["seed"]), meta

            grid = Grid(rows, cols)
            if data_len > 0:
                data = read_exact(f, data_len)
                if flags & MazeSerializer.FLAG_COMPRESSED:
                    try:
                        data = zlib.decompress(data)
                    except zlib.error as e:
                        raise ValueError(f"Corrupt compressed maze data: {e}") from e
                if len(data) != rows * cols:
                    raise ValueError(f"Expected {rows * cols} cells, found {len(data)}")

                # Replace cells completely
                grid.cells = array('B', data)

            return grid, meta
