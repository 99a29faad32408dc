from models.student import Batch, Semester
from models.examiner import Examiner
from models.exam_date import ExamDate, parse_exam_date, format_exam_date
from models.schedule import (
    ExamMetadata,
    ExaminerRoster,
    LabSchedule,
    ScheduleResponse,
    TimeSlot,
)
from models.api import (
    AutoSelectDatesRequest,
    AutoSelectDatesResponse,
    CalculateRequirementsResponse,
    FieldError,
    ScheduleApiResponse,
    ScheduleInfo,
    ScheduleRequest,
)

__all__ = [
    "Batch",
    "Semester",
    "Examiner",
    "ExamDate",
    "parse_exam_date",
    "format_exam_date",
    "ExamMetadata",
    "ExaminerRoster",
    "LabSchedule",
    "ScheduleResponse",
    "TimeSlot",
    "AutoSelectDatesRequest",
    "AutoSelectDatesResponse",
    "CalculateRequirementsResponse",
    "FieldError",
    "ScheduleApiResponse",
    "ScheduleInfo",
    "ScheduleRequest",
]
