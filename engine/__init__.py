"""Exam scheduling engine (requirements, date selection, validation, allocation)."""

from .errors import (
    CapacityOverflow,
    DateOverflow,
    InvalidInput,
    SchedulingError,
    ValidationFailure,
)
from .requirements import (
    additional_dates_needed,
    dates_sufficient,
    required_days,
    summarize_requirements,
)
from .date_selector import DateSelection, select_dates
from .intake import CohortPlan, DateAssignment, PlannedDate, StudentEntry, build_plan
from .validator import ScheduleValidator, ValidationReport
from .allocator import AllocationResult, Allocator, distribute_cohort
from .assembler import assemble_schedule

__all__ = [
    "CapacityOverflow",
    "DateOverflow",
    "InvalidInput",
    "SchedulingError",
    "ValidationFailure",
    "additional_dates_needed",
    "dates_sufficient",
    "required_days",
    "summarize_requirements",
    "DateSelection",
    "select_dates",
    "CohortPlan",
    "DateAssignment",
    "PlannedDate",
    "StudentEntry",
    "build_plan",
    "ScheduleValidator",
    "ValidationReport",
    "AllocationResult",
    "Allocator",
    "distribute_cohort",
    "assemble_schedule",
]
