"""Greedy-earliest selection of exam dates under a minimum gap.

The candidates are sorted chronologically and walked once; a date is taken
when it lies at least ``min_gap_days`` calendar days after the last taken
date. The walk stops as soon as enough dates are selected. Running out of
candidates is not an error: the result is flagged unsuccessful and tells
the caller how many more dates are needed.
"""

import logging
from datetime import date

from pydantic import BaseModel

from config.defaults import DAILY_CAPACITY
from engine.errors import InvalidInput
from models.exam_date import format_exam_date

logger = logging.getLogger(__name__)


class DateSelection(BaseModel):
    """Result of a date selection run."""

    success: bool
    selected_dates: list[date]
    days_needed: int
    days_selected: int
    students_per_day: int
    message: str

    @property
    def additional_dates_needed(self) -> int:
        return max(0, self.days_needed - self.days_selected)

    def selected_labels(self) -> list[str]:
        return [format_exam_date(d) for d in self.selected_dates]


def select_dates(
    candidates: list[date],
    required_days: int,
    min_gap_days: int = 1,
    students_per_day: int = DAILY_CAPACITY,
) -> DateSelection:
    """Picks ``required_days`` dates from ``candidates``, earliest first."""
    if min_gap_days <= 0:
        raise InvalidInput(f"min_gap_days must be at least 1 (got {min_gap_days})")
    if required_days <= 0:
        raise InvalidInput(f"required_days must be positive (got {required_days})")

    if not candidates:
        return DateSelection(
            success=False,
            selected_dates=[],
            days_needed=required_days,
            days_selected=0,
            students_per_day=students_per_day,
            message=f"No candidate dates given; {required_days} date(s) needed.",
        )

    selected: list[date] = []
    for day in sorted(set(candidates)):
        if len(selected) == required_days:
            break
        if selected and (day - selected[-1]).days < min_gap_days:
            logger.debug(f"Skipping {format_exam_date(day)}: closer than {min_gap_days} day(s)")
            continue
        selected.append(day)

    if len(selected) < required_days:
        missing = required_days - len(selected)
        message = (
            f"Only {len(selected)} of {required_days} required date(s) can be selected "
            f"with a minimum gap of {min_gap_days} day(s). "
            f"Add {missing} more date(s)."
        )
        logger.info(message)
        return DateSelection(
            success=False,
            selected_dates=selected,
            days_needed=required_days,
            days_selected=len(selected),
            students_per_day=students_per_day,
            message=message,
        )

    return DateSelection(
        success=True,
        selected_dates=selected,
        days_needed=required_days,
        days_selected=len(selected),
        students_per_day=students_per_day,
        message=(
            f"Selected {len(selected)} date(s) "
            f"from {format_exam_date(selected[0])} to {format_exam_date(selected[-1])}."
        ),
    )
