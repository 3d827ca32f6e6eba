"""Error types raised by the MRO workflow.

All workflow errors derive from MROError so callers can catch them in one place.
MalformedRecordError is the only recoverable one: catalog and stock loaders catch
it per line, log a warning and keep loading.
"""

from typing import Dict, Optional, Tuple


class MROError(Exception):
    """Base class for maintenance workflow errors."""


class NotFoundError(MROError):
    """Task, system or aircraft lookup miss."""


class OutOfOrderError(MROError):
    """Checklist step completed before its predecessors."""

    def __init__(self, step_index: int, eligible_index: Optional[int]):
        self.step_index = step_index
        self.eligible_index = eligible_index
        super().__init__(
            f"Step {step_index} is not eligible for completion "
            f"(next eligible step: {eligible_index})"
        )


class AlreadyCompleteError(MROError):
    """Redundant completion attempt on a step or a finished checklist."""


class IncompleteChecklistError(MROError):
    """Finalize requested before every checklist step is done."""


class ShortageError(MROError):
    """Insufficient or missing stock at deduction time.

    Attributes:
        shortages: part_id -> (needed, available); available is 0 for unknown parts
    """

    def __init__(self, shortages: Dict[str, Tuple[int, int]]):
        self.shortages = dict(shortages)
        details = ", ".join(
            f"{part} (need {needed}, have {available})"
            for part, (needed, available) in self.shortages.items()
        )
        super().__init__(f"Not enough stock: {details}")

    @property
    def parts(self):
        """Short part identifiers in request order."""
        return list(self.shortages)


class MalformedRecordError(MROError):
    """Catalog or stock line that cannot be parsed."""

    def __init__(self, reason: str, line: str = "", line_number: Optional[int] = None):
        self.reason = reason
        self.line = line
        self.line_number = line_number
        where = f"line {line_number}: " if line_number is not None else ""
        super().__init__(f"{where}{reason} ({line!r})")
