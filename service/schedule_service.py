"""Transport-neutral implementation of the scheduling API.

Each function takes the request model of one endpoint and returns its
response model. A web framework only has to (de)serialize:

  POST /schedule/generate               → generate_schedule()
  POST /schedule/validate               → validate_schedule()
  POST /schedule/auto-select-dates      → auto_select_dates()
  POST /schedule/calculate-requirements → calculate_requirements()
"""

import logging
from typing import Optional

from config.defaults import default_engine_config
from config.schema import EngineConfig
from engine.allocator import Allocator, distribute_cohort
from engine.assembler import assemble_schedule
from engine.date_selector import select_dates
from engine.errors import CapacityOverflow, InvalidInput
from engine.intake import CohortPlan, build_plan
from engine.requirements import required_days, summarize_requirements
from engine.validator import ScheduleValidator
from models.api import (
    AutoSelectDatesRequest,
    AutoSelectDatesResponse,
    CalculateRequirementsResponse,
    ScheduleApiResponse,
    ScheduleInfo,
    ScheduleRequest,
)
from models.exam_date import ExamDate, parse_exam_date

logger = logging.getLogger(__name__)


def _config(config: Optional[EngineConfig]) -> EngineConfig:
    return config if config is not None else default_engine_config()


# ─── Generate / validate ──────────────────────────────────────────────────────

def validate_schedule(
    request: ScheduleRequest, config: Optional[EngineConfig] = None
) -> ScheduleApiResponse:
    """Runs intake and validation only."""
    config = _config(config)
    plan = build_plan(request, config)
    report = ScheduleValidator(config).validate(plan)
    return ScheduleApiResponse(
        success=report.is_valid,
        errors=report.errors,
        warnings=report.warnings,
    )


def generate_schedule(
    request: ScheduleRequest, config: Optional[EngineConfig] = None
) -> ScheduleApiResponse:
    """Validates, allocates and assembles a schedule.

    Validation errors and capacity overflows come back as field-tagged
    errors with success=False; no partial schedule is returned.
    """
    _, response = generate_with_plan(request, config)
    return response


def generate_with_plan(
    request: ScheduleRequest, config: Optional[EngineConfig] = None
) -> tuple[CohortPlan, ScheduleApiResponse]:
    """Like generate_schedule(), but also returns the normalized plan the
    schedule was built from (students, labs, dates)."""
    config = _config(config)
    plan = build_plan(request, config)
    report = ScheduleValidator(config).validate(plan)
    warnings = list(report.warnings)

    if not report.is_valid:
        return plan, ScheduleApiResponse(success=False, errors=report.errors, warnings=warnings)

    if plan.is_per_date:
        assignments = list(plan.assignments)
    else:
        assignments = distribute_cohort(
            plan.students, plan.dates, config.day_capacity_for(len(plan.labs))
        )

    try:
        result = Allocator(config).allocate(
            assignments,
            plan.labs,
            plan.internal_examiners,
            plan.external_examiners,
        )
    except CapacityOverflow as e:
        return plan, ScheduleApiResponse(
            success=False, errors=e.to_field_errors(), warnings=warnings
        )

    warnings.extend(result.warnings)
    schedule = assemble_schedule(plan.metadata, result.entries)
    logger.info(
        f"Schedule generated: {plan.student_count} students, "
        f"{len(schedule.dates)} date(s), {len(schedule.schedule)} lab entries"
    )
    return plan, ScheduleApiResponse(success=True, data=schedule, warnings=warnings)


# ─── Date selection ───────────────────────────────────────────────────────────

def auto_select_dates(
    request: AutoSelectDatesRequest, config: Optional[EngineConfig] = None
) -> AutoSelectDatesResponse:
    """Chooses exam dates from the candidates. Problems are reported in the
    ``error`` field, never raised."""
    config = _config(config)
    per_day = config.capacity.daily_capacity

    try:
        candidates = [parse_exam_date(d) for d in request.available_dates]
        days = required_days(request.student_count, per_day)
        selection = select_dates(candidates, days, request.min_gap_days, per_day)
    except (InvalidInput, ValueError) as e:
        return AutoSelectDatesResponse(
            success=False,
            available_days=len(set(request.available_dates)),
            students_per_day=per_day,
            error=str(e),
        )

    labels = selection.selected_labels()
    subjects = [s.strip() for s in request.subjects if s and s.strip()]
    exam_dates = [
        ExamDate(date=label, subject=subjects[i] if i < len(subjects) else None)
        for i, label in enumerate(labels)
    ]
    info = ScheduleInfo(
        total_students=request.student_count,
        days_needed=selection.days_needed,
        days_selected=selection.days_selected,
        min_gap_requested=request.min_gap_days,
    )

    return AutoSelectDatesResponse(
        success=selection.success,
        selected_dates=labels,
        exam_dates=exam_dates,
        required_days=selection.days_needed,
        available_days=len(set(candidates)),
        students_per_day=per_day,
        message=selection.message,
        schedule_info=info,
        error=None if selection.success else selection.message,
    )


# ─── Requirements ─────────────────────────────────────────────────────────────

def calculate_requirements(
    student_count: int,
    available_dates: int = 0,
    config: Optional[EngineConfig] = None,
) -> CalculateRequirementsResponse:
    """Raises InvalidInput for a non-positive student count."""
    config = _config(config)
    return summarize_requirements(
        student_count, available_dates, config.capacity.daily_capacity
    )
