"""Error types of the scheduling engine."""

from typing import NamedTuple

from models.api import FieldError


class SchedulingError(Exception):
    """Base class for all engine errors."""


class InvalidInput(SchedulingError, ValueError):
    """Malformed or contradictory parameters, rejected before allocation."""


class ValidationFailure(SchedulingError):
    """Business-rule violations. Carries every field error found."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in self.errors))


class DateOverflow(NamedTuple):
    date: str        # "DD-MM-YY"
    assigned: int
    capacity: int


class CapacityOverflow(SchedulingError):
    """One or more dates hold more students than their slots can take."""

    def __init__(self, overflows: list[DateOverflow]) -> None:
        self.overflows = list(overflows)
        super().__init__("; ".join(self.messages()))

    def messages(self) -> list[str]:
        return [
            f"{o.date}: {o.assigned} students assigned but only {o.capacity} "
            f"seats available ({o.assigned - o.capacity} over capacity)"
            for o in self.overflows
        ]

    def to_field_errors(self) -> list[FieldError]:
        return [FieldError(field="capacity", message=m) for m in self.messages()]
