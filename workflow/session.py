"""Maintenance session coordinator.

Owns the task catalog, the parts ledger and report emission for one run:

    select_task -> begin_checklist -> complete steps -> finalize | abandon

Finalize reserves a report id, deducts the task's required parts
(all-or-nothing) and only then closes the checklist and logs the report. A
report log that cannot be written is logged as an error; the report stands.
Abandoning never touches the ledger.
"""

import logging
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional

from inventory.ledger import InventoryLedger
from utils.errors import AlreadyCompleteError, IncompleteChecklistError, NotFoundError
from workflow.checklist import OrderedChecklist
from workflow.report import MaintenanceReport, ReportIdGenerator, ReportLog
from workflow.task import Problem, Task

logger = logging.getLogger(__name__)


class MaintenanceSession:
    """Coordinates task selection, checklist execution and finalization.

    Attributes:
        catalog: system -> tasks in load order
        ledger: Parts inventory
        report_ids: Report identifier generator
        report_log: Append-only report sink (None keeps reports in memory only)
        reports: Reports emitted during this session
        aircraft: Currently selected aircraft, if any
    """

    def __init__(
        self,
        tasks: Iterable[Task],
        ledger: InventoryLedger,
        report_ids: Optional[ReportIdGenerator] = None,
        report_log: Optional[ReportLog] = None,
        aircraft_types: Optional[List[str]] = None,
        clock: Optional[Callable[[], date]] = None,
        verbose: bool = False,
    ):
        """Initialize session.

        Args:
            tasks: Catalog tasks (grouped by system in first-seen order)
            ledger: Inventory the session deducts from
            report_ids: Identifier generator (default: counter from RPT-1001)
            report_log: Report sink (default: none)
            aircraft_types: Aircraft accepted by select_aircraft (None accepts any)
            clock: Returns today's date (default: local system clock)
            verbose: Print workflow progress
        """
        self.catalog: Dict[str, List[Task]] = {}
        for task in tasks:
            self.catalog.setdefault(task.system, []).append(task)

        self.ledger = ledger
        self.report_ids = report_ids if report_ids is not None else ReportIdGenerator()
        self.report_log = report_log
        self.aircraft_types = list(aircraft_types) if aircraft_types is not None else None
        self.clock = clock if clock is not None else date.today
        self.verbose = verbose

        self.aircraft: Optional[str] = None
        self.reports: List[MaintenanceReport] = []

    @classmethod
    def from_config(cls, config, clock: Optional[Callable[[], date]] = None) -> "MaintenanceSession":
        """Build a session from configuration.

        Catalog and stock come from the configured files; a missing file falls
        back to the built-in defaults. Report ids continue past those already in
        the report log.

        Args:
            config: MROConfig instance
            clock: Optional date source

        Returns:
            Ready-to-use session
        """
        from utils.catalog_io import (
            DEFAULT_STOCK,
            default_tasks,
            load_stock_from_file,
            load_tasks_from_file,
            stock_to_dict,
        )

        try:
            tasks = load_tasks_from_file(
                config.tasks_file, config.field_separator, config.list_separator
            ).records
        except FileNotFoundError:
            logger.info("Tasks file %s not found, using built-in catalog", config.tasks_file)
            tasks = default_tasks()

        try:
            stock = stock_to_dict(load_stock_from_file(config.stock_file, config.field_separator).records)
        except FileNotFoundError:
            logger.info("Stock file %s not found, using built-in stock", config.stock_file)
            stock = dict(DEFAULT_STOCK)

        report_ids = ReportIdGenerator(
            prefix=config.report_id_prefix,
            base=config.report_id_base,
            strategy=config.report_id_strategy,
            seed=config.seed,
        )
        report_log = ReportLog(config.report_log_file, enabled=config.write_reports)
        if report_log.enabled:
            # Never reissue an id already in the shared log
            report_ids.resume_after(report_log.read_report_ids())

        return cls(
            tasks=tasks,
            ledger=InventoryLedger(stock, verbose=config.verbose, history_limit=config.history_limit),
            report_ids=report_ids,
            report_log=report_log,
            aircraft_types=config.aircraft_types,
            clock=clock,
            verbose=config.verbose,
        )

    # -------- Catalog --------

    def systems(self) -> List[str]:
        """Systems that have at least one task."""
        return list(self.catalog)

    def suggest_tasks(self, system) -> List[Task]:
        """Candidate tasks for a system or a reported Problem (empty if none)."""
        if isinstance(system, Problem):
            system = system.system
        return list(self.catalog.get(system, []))

    def select_task(self, system: str, task_id: str) -> Task:
        """Look up a task by identifier (or display name) within a system.

        Raises:
            NotFoundError: No such system, or no matching task in it
        """
        if system not in self.catalog:
            raise NotFoundError(f"No tasks for system {system!r}")

        candidates = self.catalog[system]
        for task in candidates:
            if task.task_id == task_id:
                return task
        for task in candidates:
            if task.name == task_id:
                return task

        raise NotFoundError(f"Task {task_id!r} not found for system {system!r}")

    # -------- Aircraft context --------

    def select_aircraft(self, name: str) -> str:
        """Set the aircraft being serviced (recorded on subsequent reports).

        Raises:
            NotFoundError: Aircraft is not one of the configured types
        """
        if self.aircraft_types is not None and name not in self.aircraft_types:
            raise NotFoundError(f"Unknown aircraft {name!r}. Must be one of: {self.aircraft_types}")
        self.aircraft = name
        if self.verbose:
            print(f"✈️  Servicing aircraft: {name}")
        return name

    def clear_aircraft(self) -> None:
        self.aircraft = None

    # -------- Parts --------

    def missing_parts(self, task: Task) -> List[str]:
        """Required parts of a task that are short in the ledger."""
        return self.ledger.missing_parts(task.required_parts)

    def restock_missing(self, task: Task, qty: int = 5) -> List[str]:
        """Order and add stock for every part the task would find short.

        Args:
            task: Task about to be worked
            qty: Units to add per missing part

        Returns:
            Part identifiers that were restocked
        """
        missing = self.missing_parts(task)
        for part_id in missing:
            self.ledger.add_stock(part_id, qty, description=f"restock for {task.task_id}")
        if self.verbose and missing:
            print(f"🚚 Restocked {len(missing)} part(s) for {task.name}: {', '.join(missing)}")
        return missing

    # -------- Checklist lifecycle --------

    def begin_checklist(self, task: Task) -> OrderedChecklist:
        """Start a fresh checklist for a task."""
        if self.verbose:
            print(f"📋 Starting {task.name} ({task.task_id}, {task.step_count} steps)")
        return OrderedChecklist(task, verbose=self.verbose)

    def abandon(self, checklist: OrderedChecklist) -> None:
        """End a checklist without finalizing; the ledger is untouched."""
        checklist.close()
        if self.verbose:
            print(f"🛑 Abandoned {checklist.task.name}")

    def finalize(self, checklist: OrderedChecklist) -> MaintenanceReport:
        """Deduct the task's parts and emit a maintenance report.

        Args:
            checklist: Completed checklist

        Returns:
            The new report

        Raises:
            AlreadyCompleteError: Checklist was already finalized or abandoned
            IncompleteChecklistError: Not every step is done
            ShortageError: Parts are short; nothing is deducted and no report is made
        """
        task = checklist.task

        if checklist.closed:
            raise AlreadyCompleteError(f"Checklist for {task.name!r} was already closed")
        if not checklist.is_complete():
            raise IncompleteChecklistError(
                f"{task.name!r} has {len(checklist) - checklist.completed_count} step(s) remaining"
            )

        report_id = self.report_ids.next_id()
        try:
            report = MaintenanceReport(
                report_id=report_id,
                date=self.clock().strftime("%Y-%m-%d"),
                task_name=task.name,
                system=task.system,
                used_parts=task.required_parts,
                aircraft=self.aircraft,
            )
            self.ledger.deduct_parts(task.required_parts, description=f"{task.task_id} {task.name}")
        except Exception:
            self.report_ids.release(report_id)
            raise

        checklist.close()
        self.emit(report)

        if self.verbose:
            print(f"📝 Report {report.report_id} created for {task.name}")

        return report

    def emit(self, report: MaintenanceReport) -> None:
        """Record a report in memory and append it to the report log.

        A failed log write is logged and does not undo the report.
        """
        self.reports.append(report)
        if self.report_log is None:
            return
        try:
            self.report_log.append(report)
        except OSError as e:
            logger.error("Could not write report %s to %s: %s", report.report_id, self.report_log.path, e)

    def __repr__(self) -> str:
        """String representation."""
        task_count = sum(len(tasks) for tasks in self.catalog.values())
        return (
            f"MaintenanceSession(systems={len(self.catalog)}, tasks={task_count}, "
            f"reports={len(self.reports)}, aircraft={self.aircraft!r})"
        )
