import argparse
import sys
import os
import logging

# Ensure project root is in path so we can import 'dfs_maze' package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

DEFAULT_ROWS = 21
DEFAULT_COLS = 21
DEFAULT_DELAY = 0.05

def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="DFS Maze: perfect maze generator and step-traced DFS solver")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Generate Command
    gen_parser = subparsers.add_parser("generate", help="Generate a new maze")
    gen_parser.add_argument("--rows", type=int, default=DEFAULT_ROWS, help="Maze rows")
    gen_parser.add_argument("--cols", type=int, default=DEFAULT_COLS, help="Maze columns")
    gen_parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    gen_parser.add_argument("--out", type=str, help="Output file path (optional)")
    gen_parser.add_argument("--compress", action="store_true", help="zlib-compress the saved cells")
    gen_parser.add_argument("--seed-only", action="store_true", help="Save only dimensions and seed")
    gen_parser.add_argument("--show", action="store_true", help="Print the maze as text")

    # Solve Command
    solve_parser = subparsers.add_parser("solve", help="Solve a maze with DFS")
    solve_parser.add_argument("input_file", nargs="?", help="Path to maze file (omit to generate one)")
    solve_parser.add_argument("--rows", type=int, default=DEFAULT_ROWS, help="Rows of the generated maze")
    solve_parser.add_argument("--cols", type=int, default=DEFAULT_COLS, help="Columns of the generated maze")
    solve_parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    solve_parser.add_argument("--trace", action="store_true", help="Record the full step trace")
    solve_parser.add_argument("--events", type=str, help="Save the step trace to an event log")
    solve_parser.add_argument("--show", action="store_true", help="Print the solved maze as text")

    # Replay Command
    replay_parser = subparsers.add_parser("replay", help="Replay a trace event log")
    replay_parser.add_argument("event_file", help="Path to event log file")
    replay_parser.add_argument("--delay", type=float, default=DEFAULT_DELAY, help="Seconds between steps")
    replay_parser.add_argument("--to", type=int, default=None, help="Stop at this step index")
    replay_parser.add_argument("--show", action="store_true", help="Print the maze at the last replayed step")

    return parser

def cmd_generate(args, logger) -> int:
    from dfs_maze.algo.backtracker import generate
    from dfs_maze.core.complexity import MazeAnalyzer

    logger.info(f"Generating {args.rows}x{args.cols} maze (seed={args.seed})...")
    grid = generate(args.rows, args.cols, seed=args.seed)
    logger.info(f"Stats: {MazeAnalyzer.calculate_stats(grid)}")

    if args.show:
        print(grid.to_text())

    if args.out:
        from dfs_maze.io.serializer import MazeSerializer
        logger.info(f"Saving maze to {args.out}...")
        meta = {"algo": "backtracker", "seed": args.seed}
        MazeSerializer.save(grid, args.out, meta=meta, seed_only=args.seed_only, compress=args.compress)
        logger.info("Save complete.")
    return 0

def cmd_solve(args, logger) -> int:
    if args.input_file:
        from dfs_maze.io.serializer import MazeSerializer
        logger.info(f"Loading {args.input_file}...")
        grid, meta = MazeSerializer.load(args.input_file)
        logger.info(f"Loaded {grid.rows}x{grid.cols} maze. Meta: {meta}")
    else:
        from dfs_maze.algo.backtracker import generate
        grid = generate(args.rows, args.cols, seed=args.seed)
        logger.info(f"Generated {grid.rows}x{grid.cols} maze (seed={args.seed})")

    logger.info(f"Solving with DFS from {grid.start} to {grid.end}...")

    if args.trace or args.events:
        from dfs_maze.algo.tracer import TraceSolver
        from dfs_maze.core.steps import derive_stats

        solver = TraceSolver(grid)
        result = solver.run_all()
        stats = derive_stats(solver.steps, len(solver.steps) - 1)
        logger.info(f"Trace: {len(solver.steps)} steps, {stats}")

        if args.events:
            from dfs_maze.core.events import write_trace
            count = write_trace(args.events, grid, solver.steps)
            logger.info(f"Saved {count} steps to {args.events}")
    else:
        from dfs_maze.algo.solvers import FastSolver
        solver = FastSolver(grid)
        result = solver.run_all()

    if args.show:
        print(solver.maze.to_text())

    if result.found:
        print(f"Done. Path Length: {len(result.solution)} | Visited: {result.cells_visited} | Backtracks: {result.backtrack_count}")
    else:
        print(f"No path. Visited: {result.cells_visited} | Backtracks: {result.backtrack_count}")
    return 0

def cmd_replay(args, logger) -> int:
    from dfs_maze.core.events import read_trace
    from dfs_maze.viz.replay import TraceCursor, format_step

    logger.info(f"Replaying {args.event_file}...")
    grid, steps = read_trace(args.event_file)
    logger.info(f"Log Header: {grid.rows}x{grid.cols}, {len(steps)} steps")
    if not steps:
        logger.warning("Event log has no steps.")
        return 0

    if args.to is not None and args.to < 0:
        raise ValueError(f"--to must be non-negative, got {args.to}")
    last = len(steps) - 1 if args.to is None else min(args.to, len(steps) - 1)
    cursor = TraceCursor(steps[:last + 1])
    for step in cursor.play(args.delay):
        print(format_step(step))

    print(f"Stats: {cursor.stats()}")
    if args.show:
        print(cursor.current.maze.to_text())
    return 0

def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger("dfs_maze")

    if args.command is None:
        parser.print_help()
        return 0

    logger.info(f"Running command: {args.command}")

    commands = {"generate": cmd_generate, "solve": cmd_solve, "replay": cmd_replay}
    try:
        return commands[args.command](args, logger)
    except (OSError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1

if __name__ == "__main__":
    sys.exit(main())
