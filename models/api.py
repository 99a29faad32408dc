"""Request and response contracts of the scheduling service (Pydantic v2).

Field names follow the JSON wire format used by the front-end.
"""

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from models.exam_date import ExamDate
from models.examiner import Examiner, clean_roster
from models.schedule import ExamMetadata, ScheduleResponse
from models.student import Semester, clean_register_numbers


class FieldError(BaseModel):
    """A validation error tagged with the offending request field."""

    field: str
    message: str


# ─── Schedule generation ──────────────────────────────────────────────────────

class ScheduleRequest(BaseModel):
    """Input of /schedule/generate and /schedule/validate.

    Students arrive in one of three shapes: a flat register_numbers list,
    a semester/batch tree, or per-date lists inside exam_dates.
    """

    exam_metadata: ExamMetadata = Field(default_factory=ExamMetadata)
    register_numbers: list[str] = []
    semesters: list[Semester] = []
    dates: list[str] = []
    exam_dates: list[ExamDate] = []
    labs: list[str] = []
    internal_examiners: list[Examiner] = []
    external_examiners: list[Examiner] = []

    @field_validator("register_numbers")
    @classmethod
    def _clean_numbers(cls, v: list[str]) -> list[str]:
        return clean_register_numbers(v)

    @field_validator("dates")
    @classmethod
    def _clean_dates(cls, v: list[str]) -> list[str]:
        return [d.strip() for d in v if d and d.strip()]

    @field_validator("labs")
    @classmethod
    def _clean_labs(cls, v: list[str]) -> list[str]:
        labs: list[str] = []
        for lab in v:
            lab = (lab or "").strip()
            if lab and lab not in labs:
                labs.append(lab)
        return labs

    @field_validator("internal_examiners", "external_examiners")
    @classmethod
    def _clean_examiners(cls, v: list[Examiner]) -> list[Examiner]:
        return clean_roster(v)

    @property
    def has_per_date_students(self) -> bool:
        return any(ed.register_numbers for ed in self.exam_dates)

    @classmethod
    def load_json(cls, path: Path) -> "ScheduleRequest":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Request file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate(json.load(f))


class ScheduleApiResponse(BaseModel):
    """Envelope returned by generate/validate."""

    success: bool
    data: Optional[ScheduleResponse] = None
    errors: list[FieldError] = []
    warnings: list[str] = []


# ─── Date selection ───────────────────────────────────────────────────────────

class AutoSelectDatesRequest(BaseModel):
    """Input of /schedule/auto-select-dates."""

    available_dates: list[str]
    student_count: int
    min_gap_days: int = 1
    subjects: list[str] = []


class ScheduleInfo(BaseModel):
    total_students: int
    days_needed: int
    days_selected: int
    min_gap_requested: int


class AutoSelectDatesResponse(BaseModel):
    success: bool
    selected_dates: list[str] = []
    exam_dates: list[ExamDate] = []
    required_days: int = 0
    available_days: int = 0
    students_per_day: int = 0
    message: str = ""
    schedule_info: Optional[ScheduleInfo] = None
    error: Optional[str] = None


# ─── Requirements ─────────────────────────────────────────────────────────────

class CalculateRequirementsResponse(BaseModel):
    """Output of /schedule/calculate-requirements.

    dates_sufficient and additional_dates_needed stay null when no
    available-date count was given.
    """

    student_count: int
    daily_capacity: int
    required_days: int
    available_dates: int
    dates_sufficient: Optional[bool] = None
    additional_dates_needed: Optional[int] = None
