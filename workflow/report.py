"""Maintenance report records, identifier generation and the report log.

The report log is an append-only text file: every write opens the file in
append mode and adds one fixed-format block.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple

import numpy as np

from utils.config import REPORT_ID_STRATEGIES

REPORT_HEADER = "=== Maintenance Report ==="
REPORT_FOOTER = "=========================="

# Random strategy draws from [RANDOM_ID_LOW, RANDOM_ID_LOW + RANDOM_ID_SPAN)
RANDOM_ID_LOW = 1000
RANDOM_ID_SPAN = 10000


@dataclass(frozen=True)
class MaintenanceReport:
    """Record of one finalized maintenance task."""

    report_id: str
    date: str  # YYYY-MM-DD
    task_name: str
    system: str
    used_parts: Tuple[str, ...] = field(default_factory=tuple)
    aircraft: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "used_parts", tuple(self.used_parts))

    def to_text(self) -> str:
        """Serialize as the fixed textual block written to the report log."""
        lines = [
            REPORT_HEADER,
            f"Report ID: {self.report_id}",
            f"Date: {self.date}",
        ]
        if self.aircraft:
            lines.append(f"Aircraft: {self.aircraft}")
        lines.append(f"System: {self.system}")
        lines.append(f"Completed Task: {self.task_name}")
        lines.append("Used Parts:")
        lines.extend(f"  - {part}" for part in self.used_parts)
        lines.append(REPORT_FOOTER)
        return "\n".join(lines) + "\n\n"


class ReportIdGenerator:
    """Issue report identifiers that are unique within one run.

    Strategies:
        counter: prefix + (base + n) for the n-th report, starting at base + 1
        random: prefix + random number in [1000, 10999], redrawn on collision

    Example:
        >>> ids = ReportIdGenerator()
        >>> ids.next_id(), ids.next_id()
        ('RPT-1001', 'RPT-1002')
    """

    def __init__(
        self,
        prefix: str = "RPT-",
        base: int = 1000,
        strategy: str = "counter",
        seed: Optional[int] = None,
    ):
        if strategy not in REPORT_ID_STRATEGIES:
            raise ValueError(f"Unknown report id strategy '{strategy}'. Must be one of: {list(REPORT_ID_STRATEGIES)}")
        if base < 0:
            raise ValueError("Report id base must be non-negative")

        self.prefix = prefix
        self.base = base
        self.strategy = strategy
        self.seed = seed
        self.rng = np.random.default_rng(seed)
        self._counter = base
        self._issued: Set[str] = set()
        self._existing: Set[str] = set()

    def next_id(self) -> str:
        """Generate the next unique report identifier."""
        if self.strategy == "counter":
            self._counter += 1
            report_id = f"{self.prefix}{self._counter}"
        else:
            if len(self._issued) + len(self._existing) >= RANDOM_ID_SPAN:
                raise RuntimeError("Random report id space exhausted")
            report_id = self._draw_random()
            while report_id in self._issued or report_id in self._existing:
                report_id = self._draw_random()

        self._issued.add(report_id)
        return report_id

    def release(self, report_id: str) -> None:
        """Return an unused identifier so the next call can issue it again."""
        if report_id not in self._issued:
            return
        self._issued.discard(report_id)
        if self.strategy == "counter" and report_id == f"{self.prefix}{self._counter}":
            self._counter -= 1

    def resume_after(self, existing_ids: Iterable[str]) -> None:
        """Continue past identifiers already written by an earlier run.

        Counter ids restart above the highest matching number; random ids
        never repeat any of them. Identifiers with another prefix are ignored.
        """
        for report_id in existing_ids:
            if not report_id.startswith(self.prefix):
                continue
            self._existing.add(report_id)
            suffix = report_id[len(self.prefix):]
            if suffix.isdigit():
                self._counter = max(self._counter, int(suffix))

    def _draw_random(self) -> str:
        return f"{self.prefix}{int(self.rng.integers(RANDOM_ID_LOW, RANDOM_ID_LOW + RANDOM_ID_SPAN))}"

    @property
    def issued_count(self) -> int:
        return len(self._issued)

    def __repr__(self) -> str:
        """String representation."""
        return f"ReportIdGenerator(strategy={self.strategy!r}, prefix={self.prefix!r}, issued={self.issued_count})"


class ReportLog:
    """Append-only text sink for finalized reports.

    Attributes:
        path: Log file path
        enabled: When False, append() is a no-op (reports stay in memory only)
    """

    def __init__(self, path: str = "maintenance_reports.txt", enabled: bool = True):
        self.path = Path(path)
        self.enabled = enabled

    def append(self, report: MaintenanceReport) -> Optional[Path]:
        """Append one report block to the log file.

        Returns:
            Log path, or None if disabled
        """
        if not self.enabled:
            return None

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(report.to_text())

        return self.path

    def read_report_ids(self) -> List[str]:
        """List report identifiers already present in the log, in file order."""
        if not self.path.exists():
            return []

        ids = []
        with open(self.path, "r", encoding="utf-8") as f:
            for line in f:
                if line.startswith("Report ID: "):
                    ids.append(line[len("Report ID: "):].strip())
        return ids

    def __repr__(self) -> str:
        """String representation."""
        return f"ReportLog(path='{self.path}', enabled={self.enabled})"
