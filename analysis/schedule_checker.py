"""Post-allocation check of a finished schedule.

Re-verifies the schedule invariants independently of the allocator as a
safety net: coverage, slot and daily capacity, examiner double-booking and
chronological order.
"""

from collections import Counter, defaultdict
from itertools import groupby
from typing import Literal, Optional

from pydantic import BaseModel

from models.exam_date import parse_exam_date
from models.schedule import ScheduleResponse


class CheckViolation(BaseModel):
    """A single invariant violation."""

    severity: Literal["error", "warning"]
    constraint: str      # e.g. "examiner_double_booking"
    description: str
    entity: str          # register number / date / examiner id


class CheckReport(BaseModel):
    """Result of the post-allocation check."""

    violations: list[CheckViolation]
    is_valid: bool       # True when there are no errors (warnings are fine)

    def print_rich(self) -> None:
        """Prints the report through rich."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        errors = [v for v in self.violations if v.severity == "error"]
        warnings = [v for v in self.violations if v.severity == "warning"]

        status = (
            "[bold green]✓ VALID[/bold green]"
            if self.is_valid
            else "[bold red]✗ VIOLATIONS FOUND[/bold red]"
        )
        lines = [status, f"Errors: {len(errors)} | Warnings: {len(warnings)}"]
        console.print(Panel("\n".join(lines), title="Schedule check", border_style="cyan"))

        if not self.violations:
            return

        table = Table(box=box.ROUNDED, show_lines=True)
        table.add_column("Type", width=8)
        table.add_column("Constraint", width=26)
        table.add_column("Entity", width=14)
        table.add_column("Description")

        for v in self.violations:
            color = "red" if v.severity == "error" else "yellow"
            table.add_row(
                f"[{color}]{v.severity.upper()}[/{color}]",
                v.constraint,
                v.entity,
                v.description,
            )
        console.print(table)


class ScheduleChecker:
    """Checks a finished ScheduleResponse against the schedule invariants."""

    def __init__(self, day_capacity: int) -> None:
        """day_capacity: seats one date offers with the labs in use, i.e.
        EngineConfig.day_capacity_for(len(labs)), not the raw ceiling."""
        self.day_capacity = day_capacity

    def check(
        self,
        schedule: ScheduleResponse,
        expected_students: Optional[list[str]] = None,
    ) -> CheckReport:
        """Runs all checks. Coverage is checked only when the expected
        register numbers are given."""
        violations: list[CheckViolation] = []

        violations.extend(self._check_unique_placement(schedule))
        if expected_students is not None:
            violations.extend(self._check_coverage(schedule, expected_students))
        violations.extend(self._check_slot_capacity(schedule))
        violations.extend(self._check_daily_capacity(schedule))
        violations.extend(self._check_examiner_double_booking(schedule))
        violations.extend(self._check_date_order(schedule))

        has_errors = any(v.severity == "error" for v in violations)
        return CheckReport(violations=violations, is_valid=not has_errors)

    # ── Individual checks ─────────────────────────────────────────────────────

    def _check_unique_placement(self, schedule: ScheduleResponse) -> list[CheckViolation]:
        """No register number may sit in two slots."""
        counts = Counter(schedule.all_register_numbers())
        return [
            CheckViolation(
                severity="error",
                constraint="duplicate_placement",
                entity=reg,
                description=f"Placed {n} times.",
            )
            for reg, n in counts.items()
            if n > 1
        ]

    def _check_coverage(
        self, schedule: ScheduleResponse, expected: list[str]
    ) -> list[CheckViolation]:
        placed = set(schedule.all_register_numbers())
        wanted = set(expected)
        violations = [
            CheckViolation(
                severity="error",
                constraint="student_missing",
                entity=reg,
                description="Not placed in any time slot.",
            )
            for reg in dict.fromkeys(expected)
            if reg not in placed
        ]
        violations.extend(
            CheckViolation(
                severity="error",
                constraint="unknown_student",
                entity=reg,
                description="Placed but not part of the input.",
            )
            for reg in dict.fromkeys(schedule.all_register_numbers())
            if reg not in wanted
        )
        return violations

    def _check_slot_capacity(self, schedule: ScheduleResponse) -> list[CheckViolation]:
        violations: list[CheckViolation] = []
        for entry in schedule.schedule:
            for slot in entry.slots:
                if len(slot.register_numbers) > slot.capacity:
                    violations.append(CheckViolation(
                        severity="error",
                        constraint="slot_capacity",
                        entity=entry.date,
                        description=(
                            f"{entry.lab} {slot.time}: {len(slot.register_numbers)} "
                            f"students in a slot for {slot.capacity}."
                        ),
                    ))
        return violations

    def _check_daily_capacity(self, schedule: ScheduleResponse) -> list[CheckViolation]:
        per_date: dict[str, int] = defaultdict(int)
        for entry in schedule.schedule:
            per_date[entry.date] += entry.student_count
        return [
            CheckViolation(
                severity="error",
                constraint="daily_capacity",
                entity=date,
                description=f"{count} students exceed the day capacity of {self.day_capacity}.",
            )
            for date, count in per_date.items()
            if count > self.day_capacity
        ]

    def _check_examiner_double_booking(
        self, schedule: ScheduleResponse
    ) -> list[CheckViolation]:
        """An examiner may not serve two labs on the same date."""
        violations: list[CheckViolation] = []
        labs_by_key: dict[tuple[str, str], list[str]] = defaultdict(list)

        for entry in schedule.schedule:
            for examiner in (entry.internal_examiner, entry.external_examiner):
                if examiner is not None:
                    labs_by_key[(examiner.id, entry.date)].append(entry.lab)

        for (examiner_id, date), labs in labs_by_key.items():
            if len(set(labs)) > 1:
                violations.append(CheckViolation(
                    severity="error",
                    constraint="examiner_double_booking",
                    entity=examiner_id,
                    description=f"{date}: assigned to {', '.join(labs)}.",
                ))
        return violations

    def _check_date_order(self, schedule: ScheduleResponse) -> list[CheckViolation]:
        """Entries must be grouped by date in chronological order."""
        runs = [d for d, _ in groupby(e.date for e in schedule.schedule)]
        days = [parse_exam_date(d) for d in runs]
        if days != sorted(days) or len(days) != len(set(days)):
            return [CheckViolation(
                severity="error",
                constraint="date_order",
                entity=", ".join(runs),
                description="Dates are not unique and chronological.",
            )]
        return []
