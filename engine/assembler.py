"""Composes allocator output into the final ScheduleResponse."""

from typing import Optional

from models.examiner import Examiner
from models.schedule import ExamMetadata, ExaminerRoster, LabSchedule, ScheduleResponse


def _first_use(examiners: list[Optional[Examiner]]) -> list[Examiner]:
    roster: list[Examiner] = []
    seen: set[str] = set()
    for e in examiners:
        if e is not None and e.id not in seen:
            seen.add(e.id)
            roster.append(e)
    return roster


def assemble_schedule(metadata: ExamMetadata, entries: list[LabSchedule]) -> ScheduleResponse:
    """Only examiners that were actually assigned appear in the rosters,
    in order of first use."""
    return ScheduleResponse(
        exam_metadata=metadata,
        examiners=ExaminerRoster(
            internal=_first_use([e.internal_examiner for e in entries]),
            external=_first_use([e.external_examiner for e in entries]),
        ),
        schedule=list(entries),
    )
