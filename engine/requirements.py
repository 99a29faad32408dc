"""How many exam days a cohort needs."""

import math
from typing import Optional

from config.defaults import DAILY_CAPACITY
from engine.errors import InvalidInput
from models.api import CalculateRequirementsResponse


def required_days(student_count: int, daily_capacity: int = DAILY_CAPACITY) -> int:
    """ceil(student_count / daily_capacity), e.g. 126 students → 2 days."""
    if student_count <= 0:
        raise InvalidInput(f"student_count must be positive (got {student_count})")
    if daily_capacity <= 0:
        raise InvalidInput(f"daily_capacity must be positive (got {daily_capacity})")
    return math.ceil(student_count / daily_capacity)


def dates_sufficient(available_dates: int, required: int) -> bool:
    return available_dates >= required


def additional_dates_needed(available_dates: int, required: int) -> int:
    return max(0, required - available_dates)


def summarize_requirements(
    student_count: int,
    available_dates: int = 0,
    daily_capacity: int = DAILY_CAPACITY,
) -> CalculateRequirementsResponse:
    """Payload of the calculate-requirements call."""
    if available_dates < 0:
        raise InvalidInput(f"available_dates must not be negative (got {available_dates})")
    days = required_days(student_count, daily_capacity)
    sufficient: Optional[bool] = None
    additional: Optional[int] = None
    if available_dates > 0:
        sufficient = dates_sufficient(available_dates, days)
        additional = additional_dates_needed(available_dates, days)
    return CalculateRequirementsResponse(
        student_count=student_count,
        daily_capacity=daily_capacity,
        required_days=days,
        available_dates=available_dates,
        dates_sufficient=sufficient,
        additional_dates_needed=additional,
    )
