"""Aircraft maintenance task workflow."""

from .task import Task, Problem
from .checklist import OrderedChecklist, StepState
from .report import MaintenanceReport, ReportIdGenerator, ReportLog
from .session import MaintenanceSession

__all__ = [
    "Task",
    "Problem",
    "OrderedChecklist",
    "StepState",
    "MaintenanceReport",
    "ReportIdGenerator",
    "ReportLog",
    "MaintenanceSession",
]
