"""Normalizes a ScheduleRequest into one canonical CohortPlan.

The request may carry students in three shapes (flat list, semester/batch
tree, per-date lists). All of them end up as an ordered tuple of unique
StudentEntry objects plus chronologically sorted PlannedDates, so the
validator and allocator only ever see one structure.

Precedence when several shapes are filled:
  1. per-date lists (any exam_dates entry with register numbers)
  2. semester/batch tree
  3. flat register_numbers

Nothing from a lower-ranked shape is lost: in semester mode, flat-only
numbers are appended after the tree; in per-date mode, numbers that no
date lists are recorded as unassigned and rejected by the validator.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from config.schema import EngineConfig
from models.api import ScheduleRequest
from models.exam_date import ExamDate, format_exam_date, parse_exam_date
from models.examiner import Examiner
from models.schedule import ExamMetadata
from models.student import Semester

logger = logging.getLogger(__name__)

MODE_PER_DATE = "per-date"
MODE_SEMESTER = "semester"
MODE_FLAT = "flat"


@dataclass(frozen=True)
class StudentEntry:
    register_number: str
    semester: Optional[str] = None
    batch: Optional[str] = None

    @property
    def group_key(self) -> tuple[Optional[str], Optional[str]]:
        return (self.semester, self.batch)


@dataclass(frozen=True)
class PlannedDate:
    day: date
    subject: Optional[str] = None

    @property
    def label(self) -> str:
        return format_exam_date(self.day)


@dataclass(frozen=True)
class DateAssignment:
    """Students bound to one exam date, in allocation order."""

    exam_date: PlannedDate
    students: tuple[StudentEntry, ...]


@dataclass(frozen=True)
class CohortPlan:
    mode: str
    students: tuple[StudentEntry, ...]          # unique, input order
    dates: tuple[PlannedDate, ...]              # unique, chronological
    labs: tuple[str, ...]
    metadata: ExamMetadata
    internal_examiners: tuple[Examiner, ...] = ()
    external_examiners: tuple[Examiner, ...] = ()
    assignments: tuple[DateAssignment, ...] = ()   # only in per-date mode
    duplicates: tuple[str, ...] = ()            # one entry per ignored repeat
    merged_dates: tuple[str, ...] = ()
    date_problems: tuple[str, ...] = ()
    appended: tuple[str, ...] = ()              # flat-only numbers added after the tree
    unassigned: tuple[str, ...] = ()            # per-date mode: numbers without a date

    @property
    def student_count(self) -> int:
        return len(self.students)

    @property
    def is_per_date(self) -> bool:
        return self.mode == MODE_PER_DATE


# ─── Helpers ──────────────────────────────────────────────────────────────────

def _batch_tags(semesters: list[Semester]) -> dict[str, tuple[str, str]]:
    """register number → (semester, batch) of its first occurrence."""
    tags: dict[str, tuple[str, str]] = {}
    for sem in semesters:
        for batch in sem.batches:
            for reg in batch.register_numbers:
                tags.setdefault(reg, (sem.name, batch.name))
    return tags


def _entry(reg: str, tags: dict[str, tuple[str, str]]) -> StudentEntry:
    sem, batch = tags.get(reg, (None, None))
    return StudentEntry(register_number=reg, semester=sem, batch=batch)


class _Deduplicator:
    """Keeps the first occurrence of every register number."""

    def __init__(self) -> None:
        self.seen: set[str] = set()
        self.repeats: list[str] = []

    def accept(self, reg: str) -> bool:
        if reg in self.seen:
            self.repeats.append(reg)
            return False
        self.seen.add(reg)
        return True


def _parse_dates(
    exam_dates: list[ExamDate],
) -> tuple[dict[date, ExamDate], list[str], list[str]]:
    """Parses and merges exam dates. Returns (by_day, merged, problems).

    Repeated dates are merged: the first subject wins, register lists are
    concatenated in input order.
    """
    by_day: dict[date, ExamDate] = {}
    merged: list[str] = []
    problems: list[str] = []
    for ed in exam_dates:
        try:
            day = parse_exam_date(ed.date)
        except ValueError as e:
            problems.append(str(e))
            continue
        if day in by_day:
            prev = by_day[day]
            merged.append(format_exam_date(day))
            by_day[day] = prev.model_copy(update={
                "subject": prev.subject or ed.subject,
                "register_numbers": prev.register_numbers + ed.register_numbers,
            })
        else:
            by_day[day] = ed
    return by_day, merged, problems


# ─── Public API ───────────────────────────────────────────────────────────────

def build_plan(request: ScheduleRequest, config: EngineConfig) -> CohortPlan:
    """Builds the canonical plan. Never raises for bad data; problems are
    recorded on the plan and reported by the validator."""
    tags = _batch_tags(request.semesters)
    dedup = _Deduplicator()

    if request.has_per_date_students:
        mode = MODE_PER_DATE
        raw_dates = request.exam_dates
    else:
        mode = MODE_SEMESTER if request.semesters else MODE_FLAT
        raw_dates = request.exam_dates or [ExamDate(date=d) for d in request.dates]

    by_day, merged, problems = _parse_dates(raw_dates)
    dates = tuple(
        PlannedDate(day=day, subject=by_day[day].subject) for day in sorted(by_day)
    )

    assignments: list[DateAssignment] = []
    students: list[StudentEntry] = []

    if mode == MODE_PER_DATE:
        # First occurrence in request order wins, even across dates
        per_day: dict[date, list[StudentEntry]] = {}
        for ed in raw_dates:
            try:
                day = parse_exam_date(ed.date)
            except ValueError:
                day = None
            for reg in ed.register_numbers:
                if not dedup.accept(reg):
                    continue
                entry = _entry(reg, tags)
                students.append(entry)
                if day is not None:
                    per_day.setdefault(day, []).append(entry)
        assignments = [
            DateAssignment(exam_date=pd, students=tuple(per_day.get(pd.day, [])))
            for pd in dates
        ]
    elif mode == MODE_SEMESTER:
        for sem in request.semesters:
            for batch in sem.batches:
                for reg in batch.register_numbers:
                    if dedup.accept(reg):
                        students.append(StudentEntry(reg, sem.name, batch.name))
    else:
        for reg in request.register_numbers:
            if dedup.accept(reg):
                students.append(_entry(reg, tags))

    # Lower-ranked shapes may still name students the winning shape lacks
    appended: list[str] = []
    unassigned: list[str] = []
    if mode == MODE_SEMESTER:
        for reg in request.register_numbers:
            if reg not in dedup.seen:
                dedup.seen.add(reg)
                students.append(_entry(reg, tags))
                appended.append(reg)
    elif mode == MODE_PER_DATE:
        tree = [r for sem in request.semesters for b in sem.batches for r in b.register_numbers]
        for reg in tree + request.register_numbers:
            if reg not in dedup.seen:
                dedup.seen.add(reg)
                unassigned.append(reg)

    labs = tuple(request.labs) if request.labs else tuple(config.schedule.default_labs)

    logger.debug(
        f"Intake: mode={mode}, {len(students)} unique students, "
        f"{len(dedup.repeats)} repeats, {len(appended)} appended, "
        f"{len(unassigned)} unassigned, {len(dates)} dates, {len(labs)} labs"
    )

    return CohortPlan(
        mode=mode,
        students=tuple(students),
        dates=dates,
        labs=labs,
        metadata=request.exam_metadata,
        internal_examiners=tuple(request.internal_examiners),
        external_examiners=tuple(request.external_examiners),
        assignments=tuple(assignments),
        duplicates=tuple(dedup.repeats),
        merged_dates=tuple(merged),
        date_problems=tuple(problems),
        appended=tuple(appended),
        unassigned=tuple(unassigned),
    )
