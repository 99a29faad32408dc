"""Sample data generator for the exam scheduler.

Builds a realistic ScheduleRequest: semesters with batches of students,
register numbers in the usual college format (year + department + serial,
e.g. "21CS001"), candidate dates, labs and examiner rosters.

Optional traps for testing:
  - repeated register numbers across batches (duplicate warning)
  - weekend candidate dates are skipped like a real timetable office would
"""

import math
import random
from datetime import date, timedelta
from typing import Optional

from config.defaults import DAILY_CAPACITY
from models.api import ScheduleRequest
from models.exam_date import ExamDate, format_exam_date
from models.examiner import Examiner
from models.schedule import ExamMetadata
from models.student import Batch, Semester

# ─── Name lists ───────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "Anitha", "Arun", "Deepa", "Ganesh", "Kavitha", "Lakshmi", "Manoj",
    "Meena", "Prakash", "Priya", "Rajesh", "Ramesh", "Revathi", "Sanjay",
    "Senthil", "Shalini", "Suresh", "Uma", "Vijay", "Vidya",
]

_LAST_NAMES = [
    "Kumar", "Raman", "Iyer", "Nair", "Reddy", "Pillai", "Menon",
    "Rao", "Krishnan", "Subramanian", "Natarajan", "Balaji",
]

_DEPARTMENTS = {
    "CS": "Computer Science and Engineering",
    "EC": "Electronics and Communication Engineering",
    "IT": "Information Technology",
    "ME": "Mechanical Engineering",
}

_SUBJECTS = [
    "Data Structures Lab", "Operating Systems Lab", "DBMS Lab",
    "Networks Lab", "Compiler Design Lab", "Microprocessors Lab",
]


class FakeCohortGenerator:
    """Seeded generator; the same seed always yields the same request."""

    def __init__(self, seed: int = 42, department: str = "CS", year: int = 21) -> None:
        if department not in _DEPARTMENTS:
            raise ValueError(
                f"Unknown department '{department}'. Known: {sorted(_DEPARTMENTS)}"
            )
        self.rng = random.Random(seed)
        self.department = department
        self.year = year
        self._serial = 0

    # ─── Building blocks ──────────────────────────────────────────────────────

    def register_number(self) -> str:
        self._serial += 1
        return f"{self.year:02d}{self.department}{self._serial:03d}"

    def semesters(
        self,
        num_semesters: int = 1,
        batches_per_semester: int = 3,
        batch_size: tuple[int, int] = (20, 30),
    ) -> list[Semester]:
        result = []
        for s in range(num_semesters):
            batches = []
            for b in range(batches_per_semester):
                size = self.rng.randint(*batch_size)
                batches.append(Batch(
                    name=f"Batch {chr(ord('A') + b)}",
                    register_numbers=[self.register_number() for _ in range(size)],
                ))
            result.append(Semester(name=f"Semester {2 * s + 5}", batches=batches))
        return result

    def examiners(self, count: int, prefix: str) -> list[Examiner]:
        names = set()
        roster = []
        while len(roster) < count:
            name = f"{self.rng.choice(_FIRST_NAMES)} {self.rng.choice(_LAST_NAMES)}"
            if name in names:
                continue
            names.add(name)
            title = "Dr." if self.rng.random() < 0.4 else "Prof."
            roster.append(Examiner(id=f"{prefix}{len(roster) + 1:02d}", name=f"{title} {name}"))
        return roster

    def candidate_dates(self, start: date, count: int) -> list[str]:
        """Weekdays only, starting at ``start``."""
        dates = []
        day = start
        while len(dates) < count:
            if day.weekday() < 5:
                dates.append(format_exam_date(day))
            day += timedelta(days=1)
        return dates

    # ─── Full request ─────────────────────────────────────────────────────────

    def generate(
        self,
        num_semesters: int = 1,
        batches_per_semester: int = 3,
        num_dates: Optional[int] = None,
        start: Optional[date] = None,
        num_labs: int = 5,
        num_internal: int = 5,
        num_external: int = 3,
        duplicates: int = 0,
        with_subjects: bool = False,
    ) -> ScheduleRequest:
        semesters = self.semesters(num_semesters, batches_per_semester)

        if duplicates:
            # Repeat students of the first batch in the last one
            first, last = semesters[0].batches[0], semesters[-1].batches[-1]
            repeats = first.register_numbers[:duplicates]
            last.register_numbers.extend(repeats)

        total = sum(s.student_count for s in semesters)
        if num_dates is None:
            num_dates = max(1, math.ceil(total / DAILY_CAPACITY))
        start = start or date.today() + timedelta(days=1)
        dates = self.candidate_dates(start, num_dates)
        exam_dates: list[ExamDate] = []
        if with_subjects:
            subjects = self.subjects(len(dates))
            exam_dates = [
                ExamDate(date=d, subject=subjects[i] if i < len(subjects) else None)
                for i, d in enumerate(dates)
            ]

        return ScheduleRequest(
            exam_metadata=ExamMetadata(
                exam_name="Practical Examinations",
                semester=", ".join(s.name for s in semesters),
                department=_DEPARTMENTS[self.department],
                academic_year=f"20{self.year + 3}-{self.year + 4}",
            ),
            semesters=semesters,
            dates=dates,
            exam_dates=exam_dates,
            labs=[f"Lab {i}" for i in range(1, num_labs + 1)],
            internal_examiners=self.examiners(num_internal, "INT"),
            external_examiners=self.examiners(num_external, "EXT"),
        )

    def subjects(self, count: int) -> list[str]:
        return self.rng.sample(_SUBJECTS, k=min(count, len(_SUBJECTS)))
