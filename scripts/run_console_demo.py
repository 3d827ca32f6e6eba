#!/usr/bin/env python3
"""Run the console maintenance walkthrough.

Reports a problem, suggests tasks for the affected system, works the chosen
task's checklist in order, deducts parts and writes a maintenance report.

Usage:
    python scripts/run_console_demo.py --config config/default.yaml --system Hydraulic
"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from inventory.ledger import InventoryLedger
from utils.config import MROConfig, load_config_from_yaml
from utils.errors import MROError, ShortageError
from workflow.report import MaintenanceReport
from workflow.session import MaintenanceSession
from workflow.task import Problem, Task


def print_stock(ledger: InventoryLedger) -> None:
    print("\n--- Current Stock ---")
    for part_id, qty in ledger.snapshot():
        print(f"{part_id}: {qty}")
    print("---------------------")


def print_task_details(task: Task) -> None:
    print(f"Task ID: {task.task_id}")
    print(f"Task Name: {task.name}")
    print(f"System: {task.system}")
    print("Steps:")
    for i, step in enumerate(task.steps, start=1):
        print(f"{i}. {step}")
    print("Required Parts:")
    for part in task.required_parts:
        print(f"- {part}")


def run_walkthrough(session: MaintenanceSession, problem: Problem, task_choice: str = None,
                    restock: bool = True, restock_quantity: int = 5) -> MaintenanceReport:
    """Run one problem-to-report walkthrough.

    Args:
        session: Session holding catalog and stock
        problem: Reported problem
        task_choice: Task id or name (default: first suggested task)
        restock: Add stock for missing parts before working the task
        restock_quantity: Units ordered per missing part

    Returns:
        Maintenance report

    Raises:
        NotFoundError: No task matches the problem's system / choice
        ShortageError: Parts still short at finalize time
    """
    print("\n--- New Problem Reported ---")
    print(f"Problem ID: {problem.problem_id}")
    print(f"System Affected: {problem.system}")
    print(f"Description: {problem.description}")

    print(f"\n--- Suggested Tasks for {problem.system} ---")
    candidates = session.suggest_tasks(problem)
    for i, task in enumerate(candidates, start=1):
        print(f"{i}. {task.name} (Task ID: {task.task_id})")

    if task_choice is None and candidates:
        task_choice = candidates[0].task_id
    task = session.select_task(problem.system, task_choice or "")

    print("\n--- Chosen Task Details ---")
    print_task_details(task)

    print("\nChecking required parts in stock...")
    missing = session.missing_parts(task)
    for part in missing:
        print(f"Part not available in stock: {part}. Need to order.")
    if missing and restock:
        print("Not all parts are available. Ordering and restocking.")
        session.restock_missing(task, restock_quantity)

    checklist = session.begin_checklist(task)
    while not checklist.is_complete():
        index = checklist.complete_next()
        print(f"[x] {index + 1}. {task.steps[index]}")

    print("\nDeducting parts from stock to perform the task...")
    report = session.finalize(checklist)
    print("Parts successfully deducted from stock.")

    print("\n--- Maintenance Report Card ---")
    print(report.to_text(), end="")

    return report


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Run the console MRO walkthrough")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration YAML file (default: built-in settings)"
    )
    parser.add_argument(
        "--system",
        type=str,
        default="Avionics",
        help="Aircraft system affected by the problem"
    )
    parser.add_argument(
        "--task",
        type=str,
        default=None,
        help="Task ID or name to perform (default: first suggested task)"
    )
    parser.add_argument(
        "--aircraft",
        type=str,
        default=None,
        help="Aircraft being serviced"
    )
    parser.add_argument(
        "--problem",
        type=str,
        default="Faulty avionics display detected during flight.",
        help="Problem description"
    )
    parser.add_argument(
        "--no-restock",
        action="store_true",
        help="Do not order missing parts before working the task"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable detailed progress logging"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = load_config_from_yaml(args.config) if args.config else MROConfig()
    if args.verbose:
        config.verbose = True

    session = MaintenanceSession.from_config(config)

    try:
        if args.aircraft:
            session.select_aircraft(args.aircraft)

        print_stock(session.ledger)

        problem = Problem("P001", args.system, args.problem)
        run_walkthrough(
            session,
            problem,
            task_choice=args.task,
            restock=not args.no_restock,
            restock_quantity=config.restock_quantity,
        )
    except ShortageError as e:
        print(f"\n❌ Could not complete task due to parts shortage: {', '.join(e.parts)}")
        print_stock(session.ledger)
        return 1
    except MROError as e:
        print(f"\n❌ {e}")
        return 1

    print_stock(session.ledger)
    if session.report_log is not None and session.report_log.enabled:
        print(f"\n💾 Report appended to {session.report_log.path}")
    print("\nProcess completed successfully.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
