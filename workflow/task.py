"""Maintenance task and problem dataclasses."""

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class Task:
    """Single maintenance task from the catalog.

    Immutable once loaded. Each entry in required_parts consumes one unit
    at finalize time; a part listed twice consumes two.

    Attributes:
        task_id: Catalog identifier (e.g. 'T002')
        name: Display name (e.g. 'Hydraulic Leak Repair')
        system: Owning aircraft system ('Avionics', 'Hydraulic', 'Mechanical', ...)
        steps: Ordered step descriptions
        required_parts: Ordered part identifiers
    """

    task_id: str
    name: str
    system: str
    steps: Tuple[str, ...] = field(default_factory=tuple)
    required_parts: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Accept lists from callers but store tuples
        object.__setattr__(self, "steps", tuple(self.steps))
        object.__setattr__(self, "required_parts", tuple(self.required_parts))

    @property
    def step_count(self) -> int:
        return len(self.steps)


@dataclass(frozen=True)
class Problem:
    """Reported aircraft problem used to suggest candidate tasks."""

    problem_id: str
    system: str
    description: str = ""
