"""Student and examiner allocation per exam date.

Architecture:
  - distribute_cohort() binds a flat cohort to dates (contiguous slices in
    input order, at most one day's capacity each)
  - Allocator.allocate() takes per-date assignments, whatever their origin,
    and fills a slot grid per date:
        for session:            morning, afternoon, ...
            for lab:            in the given lab order
                for slot:       templates of that session
  - Batches stay together where possible; a batch is split only when it is
    larger than a slot or the rest of the day would run out of seats
  - Examiners rotate round-robin across dates without double-booking a date

No randomness: identical input gives identical output.
"""

import logging
from dataclasses import dataclass, field
from itertools import groupby
from typing import Optional

from config.schema import EngineConfig, SlotTemplate
from engine.errors import CapacityOverflow, DateOverflow
from engine.intake import DateAssignment, PlannedDate, StudentEntry
from models.examiner import Examiner
from models.schedule import LabSchedule, TimeSlot

logger = logging.getLogger(__name__)


# ─── Internal structures ──────────────────────────────────────────────────────

@dataclass
class _OpenSlot:
    """A slot of the grid being filled for one date."""

    lab: str
    template: SlotTemplate
    capacity: int
    students: list[StudentEntry] = field(default_factory=list)

    @property
    def room(self) -> int:
        return self.capacity - len(self.students)


@dataclass
class AllocationResult:
    entries: list[LabSchedule]
    warnings: list[str] = field(default_factory=list)


class _RoundRobin:
    """Rotates through a roster; never hands out one examiner twice per call."""

    def __init__(self, roster: tuple[Examiner, ...]) -> None:
        self.roster = list(roster)
        self.cursor = 0

    def take(self, count: int) -> list[Optional[Examiner]]:
        if not self.roster:
            return [None] * count
        n = min(count, len(self.roster))
        picked: list[Optional[Examiner]] = [
            self.roster[(self.cursor + i) % len(self.roster)] for i in range(n)
        ]
        self.cursor = (self.cursor + n) % len(self.roster)
        return picked + [None] * (count - n)


def _group_runs(students: tuple[StudentEntry, ...]) -> list[list[StudentEntry]]:
    """Consecutive students of the same semester/batch form one run."""
    return [list(run) for _, run in groupby(students, key=lambda s: s.group_key)]


def _join_labels(values: list[Optional[str]]) -> Optional[str]:
    labels = [v for v in dict.fromkeys(values) if v]
    return ", ".join(labels) if labels else None


# ─── Cohort distribution ──────────────────────────────────────────────────────

def distribute_cohort(
    students: tuple[StudentEntry, ...],
    dates: tuple[PlannedDate, ...],
    day_capacity: int,
) -> list[DateAssignment]:
    """Spreads a cohort over dates in input order, filling each date up to
    day_capacity before moving on.

    A batch that does not fit the current date moves to the next one whole,
    as long as the remaining dates can still seat everyone left. Whatever is
    left when the last date is reached stays on the last date, where the
    allocator reports the overflow.
    """
    if not dates:
        return []

    buckets: list[list[StudentEntry]] = [[] for _ in dates]
    last = len(dates) - 1
    remaining = len(students)
    idx = 0

    for run in _group_runs(students):
        members = run
        while members:
            if idx == last:
                buckets[idx].extend(members)
                remaining -= len(members)
                break
            room = day_capacity - len(buckets[idx])
            if room <= 0:
                idx += 1
                continue
            if len(members) > room and buckets[idx] and len(members) <= day_capacity:
                seats_after = (last - idx) * day_capacity
                if seats_after >= remaining:
                    idx += 1
                    continue
            take = members[:room]
            buckets[idx].extend(take)
            remaining -= len(take)
            members = members[len(take):]

    return [
        DateAssignment(exam_date=pd, students=tuple(bucket))
        for pd, bucket in zip(dates, buckets)
    ]


# ─── Allocator ────────────────────────────────────────────────────────────────

class Allocator:
    """Fills labs, sessions and time slots for each exam date.

    Usage:
        result = Allocator(config).allocate(assignments, labs, internal, external)
    """

    def __init__(self, config: EngineConfig) -> None:
        self.config = config

    def allocate(
        self,
        assignments: list[DateAssignment],
        labs: tuple[str, ...],
        internal: tuple[Examiner, ...] = (),
        external: tuple[Examiner, ...] = (),
    ) -> AllocationResult:
        ordered = sorted(assignments, key=lambda a: a.exam_date.day)
        self._check_capacity(ordered, labs)

        internal_rr = _RoundRobin(internal)
        external_rr = _RoundRobin(external)
        result = AllocationResult(entries=[])

        for assignment in ordered:
            if not assignment.students:
                logger.debug(f"{assignment.exam_date.label}: no students, skipped")
                continue
            grid = self._fill_slots(assignment, labs)
            self._emit_entries(assignment.exam_date, grid, labs,
                               internal_rr, external_rr, result)

        logger.info(
            f"Allocated {sum(e.student_count for e in result.entries)} students "
            f"into {len(result.entries)} lab sessions"
        )
        return result

    # ── Capacity ──────────────────────────────────────────────────────────────

    def _check_capacity(self, assignments: list[DateAssignment], labs: tuple[str, ...]) -> None:
        capacity = self.config.day_capacity_for(len(labs))
        overflows = [
            DateOverflow(a.exam_date.label, len(a.students), capacity)
            for a in assignments
            if len(a.students) > capacity
        ]
        if overflows:
            for o in overflows:
                logger.error(f"Capacity overflow on {o.date}: {o.assigned} > {o.capacity}")
            raise CapacityOverflow(overflows)

    # ── Slot filling ──────────────────────────────────────────────────────────

    def _build_grid(self, labs: tuple[str, ...]) -> list[_OpenSlot]:
        grid: list[_OpenSlot] = []
        for session in self.config.schedule.sessions:
            for lab in labs:
                for template in self.config.schedule.time_slots:
                    if template.session == session:
                        grid.append(_OpenSlot(
                            lab=lab,
                            template=template,
                            capacity=self.config.slot_capacity_of(template),
                        ))
        return grid

    def _fill_slots(self, assignment: DateAssignment, labs: tuple[str, ...]) -> list[_OpenSlot]:
        grid = self._build_grid(labs)
        remaining = len(assignment.students)
        idx = 0

        for run in _group_runs(assignment.students):
            members = run
            while members:
                if idx >= len(grid):
                    # Unreachable after _check_capacity; kept as a hard stop
                    raise CapacityOverflow([DateOverflow(
                        assignment.exam_date.label,
                        len(assignment.students),
                        sum(s.capacity for s in grid),
                    )])
                slot = grid[idx]
                if slot.room == 0:
                    idx += 1
                    continue
                if len(members) > slot.room and slot.students and idx + 1 < len(grid):
                    fits_fresh = len(members) <= grid[idx + 1].capacity
                    seats_after = sum(s.room for s in grid[idx + 1:])
                    if fits_fresh and seats_after >= remaining:
                        idx += 1
                        continue
                take = members[:slot.room]
                slot.students.extend(take)
                remaining -= len(take)
                members = members[len(take):]

        return grid

    # ── Output ────────────────────────────────────────────────────────────────

    def _emit_entries(
        self,
        exam_date: PlannedDate,
        grid: list[_OpenSlot],
        labs: tuple[str, ...],
        internal_rr: _RoundRobin,
        external_rr: _RoundRobin,
        result: AllocationResult,
    ) -> None:
        used_labs = [lab for lab in labs if any(s.lab == lab and s.students for s in grid)]
        internals = internal_rr.take(len(used_labs))
        externals = external_rr.take(len(used_labs))

        for kind, rr in (("internal", internal_rr), ("external", external_rr)):
            if rr.roster and len(rr.roster) < len(used_labs):
                uncovered = used_labs[len(rr.roster):]
                result.warnings.append(
                    f"{exam_date.label}: only {len(rr.roster)} {kind} examiner(s) for "
                    f"{len(used_labs)} labs; no {kind} examiner for {', '.join(uncovered)}."
                )

        for lab, internal, external in zip(used_labs, internals, externals):
            slots = [s for s in grid if s.lab == lab and s.students]
            students = [st for s in slots for st in s.students]
            result.entries.append(LabSchedule(
                date=exam_date.label,
                subject=exam_date.subject,
                lab=lab,
                slots=[
                    TimeSlot(
                        time=s.template.time,
                        session=s.template.session,
                        capacity=s.capacity,
                        register_numbers=[st.register_number for st in s.students],
                    )
                    for s in slots
                ],
                internal_examiner=internal,
                external_examiner=external,
                semester=_join_labels([st.semester for st in students]),
                batch=_join_labels([st.batch for st in students]),
            ))
