"""Pre-allocation checks on a CohortPlan.

Every check runs; errors and warnings are collected so the caller can fix
everything in one round trip. Errors block allocation, warnings never do.
"""

import logging

from pydantic import BaseModel

from config.schema import EngineConfig
from engine.errors import ValidationFailure
from engine.intake import CohortPlan
from engine.requirements import additional_dates_needed, required_days
from models.api import FieldError

logger = logging.getLogger(__name__)

# Number of register numbers quoted in a warning or error
_PREVIEW = 5


def _preview(values: list[str]) -> str:
    text = ", ".join(values[:_PREVIEW])
    if len(values) > _PREVIEW:
        text += ", ..."
    return text


class ValidationReport(BaseModel):
    """Result of the pre-allocation checks."""

    errors: list[FieldError]
    warnings: list[str]

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        if self.errors:
            raise ValidationFailure(self.errors)

    def print_rich(self) -> None:
        """Prints the report through rich."""
        from rich.console import Console
        from rich.panel import Panel

        console = Console()
        if self.is_valid:
            status = "[bold green]✓ READY TO SCHEDULE[/bold green]"
        else:
            status = "[bold red]✗ CANNOT SCHEDULE[/bold red]"

        lines = [status]
        if self.errors:
            lines.append("\n[red bold]Errors:[/red bold]")
            for e in self.errors:
                lines.append(f"  [red]• {e.field}: {e.message}[/red]")
        if self.warnings:
            lines.append("\n[yellow bold]Warnings:[/yellow bold]")
            for w in self.warnings:
                lines.append(f"  [yellow]• {w}[/yellow]")
        if not self.errors and not self.warnings:
            lines.append("[dim]No problems found.[/dim]")

        console.print(Panel("\n".join(lines), title="Input validation", border_style="cyan"))


class ScheduleValidator:
    """Checks a plan against the business rules before allocation."""

    def __init__(self, config: EngineConfig) -> None:
        self.config = config

    def validate(self, plan: CohortPlan) -> ValidationReport:
        errors: list[FieldError] = []
        warnings: list[str] = []

        self._check_duplicates(plan, warnings)
        self._check_other_shapes(plan, errors, warnings)
        self._check_cohort_size(plan, errors)
        self._check_dates(plan, errors, warnings)
        self._check_examiners(plan, errors)
        self._check_per_date_load(plan, warnings)

        if errors:
            logger.info(f"Validation failed with {len(errors)} error(s)")
        return ValidationReport(errors=errors, warnings=warnings)

    # ── Individual checks ─────────────────────────────────────────────────────

    def _check_duplicates(self, plan: CohortPlan, warnings: list[str]) -> None:
        if not plan.duplicates:
            return
        preview = _preview(list(dict.fromkeys(plan.duplicates)))
        warnings.append(
            f"Duplicate register numbers found: {len(plan.duplicates)} repeated "
            f"entr{'y' if len(plan.duplicates) == 1 else 'ies'} ignored ({preview}). "
            f"Only the first occurrence is scheduled."
        )

    def _check_other_shapes(
        self, plan: CohortPlan, errors: list[FieldError], warnings: list[str]
    ) -> None:
        """Students named outside the shape that drives the plan."""
        if plan.appended:
            warnings.append(
                f"{len(plan.appended)} register number(s) appear only in "
                f"register_numbers, not in any semester batch "
                f"({_preview(list(plan.appended))}). They are scheduled after the batches."
            )
        if plan.unassigned:
            errors.append(FieldError(
                field="register_numbers",
                message=(
                    f"{len(plan.unassigned)} register number(s) are not assigned to "
                    f"any exam date ({_preview(list(plan.unassigned))}). Add them to a "
                    f"date's list or remove them."
                ),
            ))

    def _check_cohort_size(self, plan: CohortPlan, errors: list[FieldError]) -> None:
        minimum = self.config.capacity.min_students
        if plan.student_count == 0:
            errors.append(FieldError(
                field="register_numbers",
                message="No students found. Add register numbers before scheduling.",
            ))
        elif plan.student_count < minimum:
            errors.append(FieldError(
                field="register_numbers",
                message=(
                    f"Minimum {minimum} register numbers required. "
                    f"Currently: {plan.student_count}"
                ),
            ))

    def _check_dates(
        self, plan: CohortPlan, errors: list[FieldError], warnings: list[str]
    ) -> None:
        for problem in plan.date_problems:
            errors.append(FieldError(field="dates", message=problem))

        if not plan.dates:
            if not plan.date_problems:
                errors.append(FieldError(
                    field="dates",
                    message="No exam dates selected. Add dates or auto-select them first.",
                ))
            return

        for label in dict.fromkeys(plan.merged_dates):
            warnings.append(f"Exam date {label} was given more than once; entries merged.")

        if plan.is_per_date or plan.student_count == 0:
            return
        per_day = self.config.day_capacity_for(len(plan.labs))
        needed = required_days(plan.student_count, per_day)
        if len(plan.dates) < needed:
            missing = additional_dates_needed(len(plan.dates), needed)
            warnings.append(
                f"{plan.student_count} students need {needed} exam date(s) at "
                f"{per_day} per day, but only "
                f"{len(plan.dates)} given. Add {missing} more date(s) or the last "
                f"date will overflow."
            )

    def _check_examiners(self, plan: CohortPlan, errors: list[FieldError]) -> None:
        internal_ids = {e.id for e in plan.internal_examiners}
        shared = [e.id for e in plan.external_examiners if e.id in internal_ids]
        if shared:
            errors.append(FieldError(
                field="external_examiners",
                message=(
                    f"Examiner id(s) {', '.join(shared)} appear in both the internal "
                    f"and the external roster."
                ),
            ))

    def _check_per_date_load(self, plan: CohortPlan, warnings: list[str]) -> None:
        if not plan.is_per_date:
            return
        capacity = self.config.day_capacity_for(len(plan.labs))
        for assignment in plan.assignments:
            count = len(assignment.students)
            if count > capacity:
                warnings.append(
                    f"{assignment.exam_date.label}: {count} students assigned, "
                    f"but one date holds at most {capacity}."
                )
