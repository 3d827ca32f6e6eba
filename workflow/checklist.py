"""Ordered step checklist for a single maintenance task.

State machine:
- Each step is PENDING, ELIGIBLE or DONE
- Initially step 0 is ELIGIBLE and every other step PENDING
- complete_step(i) is legal only while step i is ELIGIBLE; it marks i DONE
  and promotes i+1 to ELIGIBLE
- Once every step is DONE the checklist is terminal and rejects further
  completions with AlreadyCompleteError
- Rejected transitions never change state
"""

from enum import Enum
from typing import List, Optional

from utils.errors import AlreadyCompleteError, OutOfOrderError
from workflow.task import Task


class StepState(str, Enum):
    """Completion state of one checklist step."""

    PENDING = "pending"
    ELIGIBLE = "eligible"
    DONE = "done"


class OrderedChecklist:
    """Strict in-order completion tracker bound to one task.

    Attributes:
        task: Task whose steps are being worked
        cursor: Index of the single eligible step (== len(steps) when complete)
        closed: Set once the session finalizes or abandons the checklist
    """

    def __init__(self, task: Task, verbose: bool = False):
        """Initialize checklist.

        Args:
            task: Task to work through
            verbose: Print each completed step
        """
        self.task = task
        self.verbose = verbose
        self._done: List[bool] = [False] * len(task.steps)
        self.cursor = 0
        self.closed = False

    @property
    def steps(self):
        return self.task.steps

    @property
    def completed_count(self) -> int:
        return self.cursor

    def state_of(self, index: int) -> StepState:
        """Get the state of a single step.

        Raises:
            IndexError: If index is outside the step range
        """
        if not 0 <= index < len(self._done):
            raise IndexError(f"Step index {index} out of range for {len(self._done)} step(s)")
        if self._done[index]:
            return StepState.DONE
        if index == self.cursor:
            return StepState.ELIGIBLE
        return StepState.PENDING

    def states(self) -> List[StepState]:
        return [self.state_of(i) for i in range(len(self._done))]

    def is_complete(self) -> bool:
        """True iff every step is DONE (vacuously true for a task with no steps)."""
        return all(self._done)

    def eligible_index(self) -> Optional[int]:
        """Index of the step that may be completed next, None when complete."""
        return None if self.is_complete() else self.cursor

    def complete_step(self, index: int) -> None:
        """Mark a step as done.

        Args:
            index: Step index (0-based)

        Raises:
            AlreadyCompleteError: Checklist finished or closed, or step already done
            OutOfOrderError: Step is not the eligible one (or does not exist)
        """
        if self.closed:
            raise AlreadyCompleteError(f"Checklist for {self.task.name!r} is closed")
        if self.is_complete():
            raise AlreadyCompleteError(f"All steps of {self.task.name!r} are already complete")
        if not 0 <= index < len(self._done):
            raise OutOfOrderError(index, self.cursor)
        if self._done[index]:
            raise AlreadyCompleteError(f"Step {index} of {self.task.name!r} is already complete")
        if index != self.cursor:
            raise OutOfOrderError(index, self.cursor)

        self._done[index] = True
        self.cursor += 1

        if self.verbose:
            print(f"✅ Step {index + 1}/{len(self._done)}: {self.task.steps[index]}")

    def complete_next(self) -> int:
        """Complete the currently eligible step.

        Returns:
            Index of the step that was completed
        """
        index = self.cursor
        self.complete_step(index)
        return index

    def close(self) -> None:
        self.closed = True

    def __len__(self) -> int:
        return len(self._done)

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"OrderedChecklist(task={self.task.task_id!r}, "
            f"done={self.cursor}/{len(self._done)}, closed={self.closed})"
        )
