"""Request/response layer of the exam scheduler."""

from .schedule_service import (
    auto_select_dates,
    calculate_requirements,
    generate_schedule,
    generate_with_plan,
    validate_schedule,
)

__all__ = [
    "auto_select_dates",
    "calculate_requirements",
    "generate_schedule",
    "generate_with_plan",
    "validate_schedule",
]
