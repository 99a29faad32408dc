"""Exam dates and the DD-MM-YY wire format."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from models.student import clean_register_numbers

# Two-digit year, e.g. "05-01-24" for 5 January 2024
DATE_FORMAT = "%d-%m-%y"


def parse_exam_date(value: str) -> date:
    """Parses a DD-MM-YY string. Raises ValueError on any other format."""
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid date '{value}', expected DD-MM-YY") from None


def format_exam_date(day: date) -> str:
    return day.strftime(DATE_FORMAT)


def sort_date_strings(values: list[str]) -> list[str]:
    """Chronological sort of DD-MM-YY strings (not lexical)."""
    return sorted(values, key=parse_exam_date)


class ExamDate(BaseModel):
    """A calendar date with optional subject and its assigned students."""

    date: str                       # "DD-MM-YY"
    subject: Optional[str] = None
    register_numbers: list[str] = []

    @field_validator("register_numbers")
    @classmethod
    def _clean(cls, v: list[str]) -> list[str]:
        return clean_register_numbers(v)

    @field_validator("subject")
    @classmethod
    def _blank_subject(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()
