#!/usr/bin/env python3
"""
Unit tests for OrderedChecklist.

Tests the in-order completion state machine:
- Initial eligible/pending states
- Legal and rejected transitions
- Terminal state behavior
"""

import pytest
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from utils.errors import AlreadyCompleteError, OutOfOrderError
from workflow.checklist import OrderedChecklist, StepState
from workflow.task import Task


@pytest.fixture
def three_step_task():
    """Task with three ordered steps."""
    return Task(
        task_id="T003",
        name="Landing Gear Lubrication",
        system="Mechanical",
        steps=["Lift aircraft and secure", "Clean landing gear joints", "Apply lubrication grease"],
        required_parts=["LubricationGrease", "RagSet"],
    )


class TestChecklistInitialState:
    """Test checklist initial state."""

    def test_first_step_eligible_others_pending(self, three_step_task):
        checklist = OrderedChecklist(three_step_task)

        assert checklist.states() == [StepState.ELIGIBLE, StepState.PENDING, StepState.PENDING]
        assert checklist.cursor == 0
        assert checklist.eligible_index() == 0
        assert checklist.is_complete() is False
        assert len(checklist) == 3

    def test_empty_task_is_complete(self):
        """Test that a task with no steps is complete immediately."""
        checklist = OrderedChecklist(Task("T009", "Visual Walkaround", "Mechanical"))

        assert checklist.is_complete() is True
        assert checklist.eligible_index() is None

        with pytest.raises(AlreadyCompleteError):
            checklist.complete_step(0)

    def test_state_of_out_of_range(self, three_step_task):
        checklist = OrderedChecklist(three_step_task)

        with pytest.raises(IndexError):
            checklist.state_of(3)

    def test_repr(self, three_step_task):
        repr_str = repr(OrderedChecklist(three_step_task))

        assert "OrderedChecklist" in repr_str
        assert "T003" in repr_str
        assert "0/3" in repr_str


class TestCompleteStep:
    """Test complete_step transitions."""

    def test_in_order_completion(self, three_step_task):
        checklist = OrderedChecklist(three_step_task)

        checklist.complete_step(0)
        assert checklist.states() == [StepState.DONE, StepState.ELIGIBLE, StepState.PENDING]

        checklist.complete_step(1)
        assert checklist.states() == [StepState.DONE, StepState.DONE, StepState.ELIGIBLE]
        assert checklist.is_complete() is False

        checklist.complete_step(2)
        assert checklist.states() == [StepState.DONE] * 3
        assert checklist.is_complete() is True
        assert checklist.completed_count == 3

    def test_skip_ahead_rejected(self, three_step_task):
        """Test that completing a pending step raises and changes nothing."""
        checklist = OrderedChecklist(three_step_task)

        with pytest.raises(OutOfOrderError) as exc_info:
            checklist.complete_step(2)

        assert exc_info.value.step_index == 2
        assert exc_info.value.eligible_index == 0
        assert checklist.states() == [StepState.ELIGIBLE, StepState.PENDING, StepState.PENDING]
        assert checklist.cursor == 0

    def test_out_of_order_then_recover(self, three_step_task):
        """Test rejected step 1, then 0, 1, 2 in order still complete."""
        checklist = OrderedChecklist(three_step_task)

        with pytest.raises(OutOfOrderError):
            checklist.complete_step(1)

        checklist.complete_step(0)
        checklist.complete_step(1)
        checklist.complete_step(2)

        assert checklist.is_complete() is True

    def test_repeat_done_step_rejected(self, three_step_task):
        checklist = OrderedChecklist(three_step_task)
        checklist.complete_step(0)

        with pytest.raises(AlreadyCompleteError):
            checklist.complete_step(0)

        assert checklist.states() == [StepState.DONE, StepState.ELIGIBLE, StepState.PENDING]

    def test_completion_after_terminal_rejected(self, three_step_task):
        checklist = OrderedChecklist(three_step_task)
        for i in range(3):
            checklist.complete_step(i)

        for i in range(3):
            with pytest.raises(AlreadyCompleteError):
                checklist.complete_step(i)

        assert checklist.is_complete() is True

    @pytest.mark.parametrize("index", [-1, 3, 10])
    def test_index_out_of_range_rejected(self, three_step_task, index):
        checklist = OrderedChecklist(three_step_task)

        with pytest.raises(OutOfOrderError):
            checklist.complete_step(index)

        assert checklist.cursor == 0

    def test_closed_checklist_rejects_completion(self, three_step_task):
        checklist = OrderedChecklist(three_step_task)
        checklist.close()

        with pytest.raises(AlreadyCompleteError, match="closed"):
            checklist.complete_step(0)

        assert checklist.cursor == 0

    def test_complete_next(self, three_step_task):
        checklist = OrderedChecklist(three_step_task)

        assert checklist.complete_next() == 0
        assert checklist.complete_next() == 1
        assert checklist.complete_next() == 2
        assert checklist.is_complete() is True

        with pytest.raises(AlreadyCompleteError):
            checklist.complete_next()


class TestCompletionProperty:
    """is_complete is true iff every index was completed in order."""

    @pytest.mark.parametrize("n_steps", [1, 2, 5, 8])
    def test_complete_only_after_last_step(self, n_steps):
        task = Task("T100", "Generic Task", "Avionics", steps=[f"step {i}" for i in range(n_steps)])
        checklist = OrderedChecklist(task)

        for i in range(n_steps):
            assert checklist.is_complete() is False
            # Every index other than the eligible one is rejected at this point
            for j in range(n_steps):
                if j < i:
                    with pytest.raises(AlreadyCompleteError):
                        checklist.complete_step(j)
                elif j > i:
                    with pytest.raises(OutOfOrderError):
                        checklist.complete_step(j)
            checklist.complete_step(i)

        assert checklist.is_complete() is True
