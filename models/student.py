"""Data models for students, batches and semesters (Pydantic v2)."""

from pydantic import BaseModel, field_validator


def clean_register_numbers(values: list[str]) -> list[str]:
    """Strip whitespace and drop empty tokens. Order and repeats are kept."""
    return [v.strip() for v in values if v and v.strip()]


class Batch(BaseModel):
    """A named group of students, e.g. one lab section."""

    name: str
    register_numbers: list[str] = []

    @field_validator("register_numbers")
    @classmethod
    def _clean(cls, v: list[str]) -> list[str]:
        return clean_register_numbers(v)


class Semester(BaseModel):
    """A named group of batches."""

    name: str
    batches: list[Batch] = []

    @property
    def student_count(self) -> int:
        return sum(len(b.register_numbers) for b in self.batches)
