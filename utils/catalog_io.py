"""Task catalog and stock file loading.

Record formats (separators configurable):
    tasks: System|Task Name|step1,step2,...|part1,part2,...
    stock: Part|Quantity

Parsing is per-line recoverable: a malformed line raises MalformedRecordError
inside the parser, the loader logs a warning, counts the line as skipped and
keeps going.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from utils.errors import MalformedRecordError
from workflow.task import Task

logger = logging.getLogger(__name__)

# Built-in catalog used when no tasks file is available
DEFAULT_TASK_RECORDS: List[Tuple[str, str, List[str], List[str]]] = [
    (
        "Avionics",
        "Avionics Diagnostic Check",
        [
            "Power off the avionics unit",
            "Remove protective covers",
            "Run diagnostic software",
            "Replace faulty modules if detected",
            "Reassemble and test system",
        ],
        ["AvionicsModule", "ScrewSet", "DiagnosticKit"],
    ),
    (
        "Hydraulic",
        "Hydraulic Leak Repair",
        [
            "Identify leak location",
            "Drain hydraulic fluid from reservoir",
            "Replace damaged O-rings",
            "Refill hydraulic fluid",
            "Test hydraulic pressure",
        ],
        ["O-Ring", "HydraulicFluid", "WrenchSet"],
    ),
    (
        "Mechanical",
        "Landing Gear Lubrication",
        [
            "Lift aircraft and secure",
            "Clean landing gear joints",
            "Apply lubrication grease",
            "Lower aircraft and perform operational check",
        ],
        ["LubricationGrease", "RagSet"],
    ),
]

DEFAULT_STOCK: Dict[str, int] = {
    "AvionicsModule": 2,
    "ScrewSet": 10,
    "DiagnosticKit": 1,
    "O-Ring": 5,
    "HydraulicFluid": 3,
    "WrenchSet": 2,
    "LubricationGrease": 4,
    "RagSet": 10,
}


@dataclass
class LoadResult:
    """Outcome of loading a catalog or stock source."""

    records: list = field(default_factory=list)
    skipped: int = 0
    skipped_lines: List[int] = field(default_factory=list)

    def skip(self, line_number: int) -> None:
        self.skipped += 1
        self.skipped_lines.append(line_number)


def make_task_id(index: int) -> str:
    """Catalog identifier for the task at a 0-based load position."""
    return f"T{index + 1:03d}"


def _split_list(text: str, list_separator: str) -> List[str]:
    return [item.strip() for item in text.split(list_separator) if item.strip()]


def parse_task_line(
    line: str,
    task_id: str,
    field_separator: str = "|",
    list_separator: str = ",",
    line_number: Optional[int] = None,
) -> Task:
    """Parse one catalog record into a Task.

    Raises:
        MalformedRecordError: Fewer than four fields, or empty system/task name
    """
    fields = line.split(field_separator)
    if len(fields) < 4:
        raise MalformedRecordError(
            f"expected 4 fields, found {len(fields)}", line=line, line_number=line_number
        )

    system, name, steps_text, parts_text = (f.strip() for f in fields[:4])
    if not system or not name:
        raise MalformedRecordError("system and task name are required", line=line, line_number=line_number)

    return Task(
        task_id=task_id,
        name=name,
        system=system,
        steps=_split_list(steps_text, list_separator),
        required_parts=_split_list(parts_text, list_separator),
    )


def parse_stock_line(line: str, field_separator: str = "|", line_number: Optional[int] = None) -> Tuple[str, int]:
    """Parse one stock record into (part_id, quantity).

    Raises:
        MalformedRecordError: Missing field, non-integer or negative quantity
    """
    fields = line.split(field_separator)
    if len(fields) < 2:
        raise MalformedRecordError("missing quantity", line=line, line_number=line_number)

    part_id, qty_text = fields[0].strip(), fields[1].strip()
    if not part_id:
        raise MalformedRecordError("missing part identifier", line=line, line_number=line_number)

    try:
        quantity = int(qty_text)
    except ValueError:
        raise MalformedRecordError(
            f"invalid quantity {qty_text!r}", line=line, line_number=line_number
        ) from None

    if quantity < 0:
        raise MalformedRecordError(f"negative quantity {quantity}", line=line, line_number=line_number)

    return part_id, quantity


def _iter_lines(path: Path):
    with open(path, "r", encoding="utf-8") as f:
        for line_number, raw in enumerate(f, start=1):
            line = raw.rstrip("\r\n")
            if line.strip():
                yield line_number, line


def load_tasks_from_file(path: str, field_separator: str = "|", list_separator: str = ",") -> LoadResult:
    """Load the task catalog.

    Args:
        path: Catalog file path
        field_separator: Separator between record fields
        list_separator: Separator inside the step and part lists

    Returns:
        LoadResult whose records are Task objects in file order

    Raises:
        FileNotFoundError: If the catalog file does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Tasks file not found: {path}")

    result = LoadResult()
    for line_number, line in _iter_lines(path):
        try:
            task = parse_task_line(
                line,
                task_id=make_task_id(len(result.records)),
                field_separator=field_separator,
                list_separator=list_separator,
                line_number=line_number,
            )
        except MalformedRecordError as e:
            logger.warning("Skipping invalid task record in %s: %s", path, e)
            result.skip(line_number)
            continue
        result.records.append(task)

    logger.info("Loaded %d task(s) from %s (%d skipped)", len(result.records), path, result.skipped)
    return result


def load_stock_from_file(path: str, field_separator: str = "|") -> LoadResult:
    """Load starting stock.

    A part listed more than once keeps its last quantity.

    Returns:
        LoadResult whose records are (part_id, quantity) tuples in file order

    Raises:
        FileNotFoundError: If the stock file does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Stock file not found: {path}")

    result = LoadResult()
    for line_number, line in _iter_lines(path):
        try:
            record = parse_stock_line(line, field_separator=field_separator, line_number=line_number)
        except MalformedRecordError as e:
            logger.warning("Skipping invalid stock record in %s: %s", path, e)
            result.skip(line_number)
            continue
        result.records.append(record)

    logger.info("Loaded %d stock record(s) from %s (%d skipped)", len(result.records), path, result.skipped)
    return result


def stock_to_dict(records: List[Tuple[str, int]]) -> Dict[str, int]:
    """Collapse stock records into a mapping (last quantity wins)."""
    stock: Dict[str, int] = {}
    for part_id, quantity in records:
        stock[part_id] = quantity
    return stock


def default_tasks() -> List[Task]:
    """Built-in task catalog."""
    return [
        Task(task_id=make_task_id(i), name=name, system=system, steps=steps, required_parts=parts)
        for i, (system, name, steps, parts) in enumerate(DEFAULT_TASK_RECORDS)
    ]
