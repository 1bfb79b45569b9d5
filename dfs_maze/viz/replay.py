import time
from typing import Callable, Iterator, List, Optional, Sequence

from dfs_maze.core.steps import Action, Stats, Step, derive_stats


class TraceCursor:
    """
    Playback over an immutable step list. The cursor is just an index;
    play/pause/speed are left to the caller, which pulls steps at its own
    pace (see play()).
    """

    def __init__(self, steps: Sequence[Step]):
        self.steps = steps
        self.index = 0

    def __len__(self) -> int:
        return len(self.steps)

    @property
    def current(self) -> Optional[Step]:
        if not self.steps:
            return None
        return self.steps[self.index]

    @property
    def at_start(self) -> bool:
        return self.index == 0

    @property
    def at_end(self) -> bool:
        return self.index >= len(self.steps) - 1

    def seek(self, index: int) -> Step:
        if not 0 <= index < len(self.steps):
            raise IndexError(f"Step index {index} out of range for {len(self.steps)} steps")
        self.index = index
        return self.steps[index]

    def step_forward(self) -> Optional[Step]:
        if self.at_end:
            return None
        self.index += 1
        return self.steps[self.index]

    def step_backward(self) -> Optional[Step]:
        if self.at_start:
            return None
        self.index -= 1
        return self.steps[self.index]

    def reset(self):
        self.index = 0

    def stats(self) -> Stats:
        return derive_stats(self.steps, self.index)

    def play(self, delay: float, sleep: Callable[[float], None] = time.sleep) -> Iterator[Step]:
        """
        Yields the current step and every one after it, sleeping `delay`
        seconds before each advance. Stops at the last step.
        """
        if not self.steps:
            return
        yield self.steps[self.index]
        while not self.at_end:
            sleep(delay)
            yield self.step_forward()

    def log(self) -> List[str]:
        """Traversal log lines up to and including the cursor."""
        if not self.steps:
            return []
        lines = [f"DFS started at {self.steps[0].position}"]
        for i, step in enumerate(self.steps[:self.index + 1]):
            # The start cell is already announced
            if i == 0 and step.is_visit:
                continue
            lines.append(format_step(step))
        return lines


def format_step(step: Step) -> str:
    if step.action == Action.BACKTRACK:
        return f"Backtracking from: {step.position}"
    if step.action == Action.SOLUTION:
        return f"Reached end at {step.position}"
    if step.action == Action.DECISION:
        return f"Visited: {step.position} (decision, {len(step.available_paths)} paths)"
    return f"Visited: {step.position}"
