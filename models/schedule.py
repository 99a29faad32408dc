"""Result models: time slots, lab schedules and the assembled schedule."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from models.examiner import Examiner


class ExamMetadata(BaseModel):
    """Free-text exam header. All fields optional."""

    exam_name: Optional[str] = None
    semester: Optional[str] = None
    department: Optional[str] = None
    academic_year: Optional[str] = None


class TimeSlot(BaseModel):
    """One slot of one lab on one date."""

    time: str                 # "09:00 AM - 12:00 PM"
    session: str              # "morning" / "afternoon"
    capacity: int
    register_numbers: list[str] = []


class LabSchedule(BaseModel):
    """One (date, lab) pairing of the finished schedule."""

    date: str                 # "DD-MM-YY"
    subject: Optional[str] = None
    lab: str
    slots: list[TimeSlot]
    internal_examiner: Optional[Examiner] = None
    external_examiner: Optional[Examiner] = None
    semester: Optional[str] = None
    batch: Optional[str] = None

    @property
    def student_count(self) -> int:
        return sum(len(s.register_numbers) for s in self.slots)

    def register_numbers(self) -> list[str]:
        return [r for s in self.slots for r in s.register_numbers]


class ExaminerRoster(BaseModel):
    """Examiners actually assigned in a schedule."""

    internal: list[Examiner] = []
    external: list[Examiner] = []


class ScheduleResponse(BaseModel):
    """The finished schedule as returned to callers."""

    exam_metadata: ExamMetadata = Field(default_factory=ExamMetadata)
    examiners: ExaminerRoster = Field(default_factory=ExaminerRoster)
    schedule: list[LabSchedule] = []

    @property
    def dates(self) -> list[str]:
        """Distinct dates in schedule order."""
        seen: list[str] = []
        for entry in self.schedule:
            if entry.date not in seen:
                seen.append(entry.date)
        return seen

    def get_date_schedule(self, date: str) -> list[LabSchedule]:
        return [e for e in self.schedule if e.date == date]

    def all_register_numbers(self) -> list[str]:
        return [r for e in self.schedule for r in e.register_numbers()]

    def save_json(self, path: Path) -> None:
        """Saves the schedule as a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "ScheduleResponse":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Schedule not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())
