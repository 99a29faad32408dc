"""Tests for requirements, date selection, intake and validation."""

from datetime import date

import pytest

from config.defaults import default_engine_config
from engine.date_selector import select_dates
from engine.errors import InvalidInput, ValidationFailure
from engine.intake import MODE_FLAT, MODE_PER_DATE, MODE_SEMESTER, build_plan
from engine.requirements import (
    additional_dates_needed,
    dates_sufficient,
    required_days,
    summarize_requirements,
)
from engine.validator import ScheduleValidator
from models.api import ScheduleRequest
from models.exam_date import ExamDate
from models.examiner import Examiner
from models.student import Batch, Semester


# ─── Helpers ──────────────────────────────────────────────────────────────────

def regs(count: int, start: int = 1, prefix: str = "21CS") -> list[str]:
    return [f"{prefix}{i:03d}" for i in range(start, start + count)]


def plan_for(request: ScheduleRequest):
    return build_plan(request, default_engine_config())


def validate(request: ScheduleRequest):
    config = default_engine_config()
    return ScheduleValidator(config).validate(build_plan(request, config))


# ─── REQUIREMENTS ─────────────────────────────────────────────────────────────

class TestRequirements:
    def test_exact_capacity_needs_one_day(self):
        assert required_days(125, 125) == 1

    def test_one_over_needs_second_day(self):
        assert required_days(126, 125) == 2

    def test_small_cohort(self):
        assert required_days(1) == 1

    @pytest.mark.parametrize("count", [0, -3])
    def test_non_positive_count_rejected(self, count):
        with pytest.raises(InvalidInput):
            required_days(count)

    def test_zero_capacity_rejected(self):
        with pytest.raises(InvalidInput):
            required_days(10, 0)

    def test_invalid_input_is_value_error(self):
        with pytest.raises(ValueError):
            required_days(0)

    def test_sufficiency(self):
        assert dates_sufficient(3, 3) is True
        assert dates_sufficient(2, 3) is False
        assert additional_dates_needed(2, 3) == 1
        assert additional_dates_needed(5, 3) == 0

    def test_summary_without_available_dates(self):
        summary = summarize_requirements(100)
        assert summary.required_days == 1
        assert summary.dates_sufficient is None
        assert summary.additional_dates_needed is None

    def test_summary_negative_available_rejected(self):
        with pytest.raises(InvalidInput):
            summarize_requirements(100, -1)


# ─── DATE SELECTION ───────────────────────────────────────────────────────────

class TestDateSelection:
    def test_gap_skips_close_dates(self):
        """1 Jan and 5 Jan are 4 days apart; 2 Jan is too close."""
        result = select_dates(
            [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 5)],
            required_days=2,
            min_gap_days=3,
        )
        assert result.success
        assert result.selected_dates == [date(2024, 1, 1), date(2024, 1, 5)]
        assert result.selected_labels() == ["01-01-24", "05-01-24"]

    def test_unsorted_candidates(self):
        result = select_dates(
            [date(2024, 1, 10), date(2024, 1, 3), date(2024, 1, 6)],
            required_days=2,
        )
        assert result.selected_dates == [date(2024, 1, 3), date(2024, 1, 6)]

    def test_stops_at_required_count(self):
        candidates = [date(2024, 3, d) for d in range(1, 11)]
        result = select_dates(candidates, required_days=3, min_gap_days=1)
        assert result.days_selected == 3
        assert result.selected_dates[-1] == date(2024, 3, 3)

    def test_gap_measured_in_calendar_days(self):
        result = select_dates([date(2024, 1, 1), date(2024, 1, 2)], 2, min_gap_days=1)
        assert result.success

    def test_insufficient_candidates(self):
        result = select_dates(
            [date(2024, 1, 1), date(2024, 1, 2)], required_days=2, min_gap_days=5
        )
        assert not result.success
        assert result.selected_dates == [date(2024, 1, 1)]
        assert result.additional_dates_needed == 1
        assert "Add 1 more date(s)" in result.message

    def test_no_candidates(self):
        result = select_dates([], required_days=2)
        assert not result.success
        assert result.days_selected == 0

    def test_single_day_always_succeeds(self):
        result = select_dates([date(2024, 6, 3)], required_days=1, min_gap_days=30)
        assert result.success

    def test_zero_gap_rejected(self):
        with pytest.raises(InvalidInput):
            select_dates([date(2024, 1, 1)], required_days=1, min_gap_days=0)

    def test_duplicate_candidates_count_once(self):
        day = date(2024, 1, 1)
        result = select_dates([day, day], required_days=2)
        assert not result.success
        assert result.selected_dates == [day]


# ─── INTAKE ───────────────────────────────────────────────────────────────────

class TestIntake:
    def test_flat_mode(self):
        plan = plan_for(ScheduleRequest(register_numbers=regs(30), dates=["01-01-24"]))
        assert plan.mode == MODE_FLAT
        assert plan.student_count == 30
        assert plan.students[0].semester is None

    def test_semester_tree_first_then_flat_only_numbers(self):
        """21CS019/020 are already in Batch B; 21CS021 and 21CS900.. are not."""
        request = ScheduleRequest(
            register_numbers=regs(3, start=19) + regs(5, start=900),
            semesters=[Semester(name="Semester 5", batches=[
                Batch(name="Batch A", register_numbers=regs(10)),
                Batch(name="Batch B", register_numbers=regs(10, start=11)),
            ])],
            dates=["01-01-24"],
        )
        plan = plan_for(request)
        assert plan.mode == MODE_SEMESTER
        assert plan.student_count == 26
        assert plan.students[10].batch == "Batch B"
        assert plan.appended == tuple(["21CS021"] + regs(5, start=900))
        assert plan.students[20].register_number == "21CS021"
        assert plan.students[20].semester is None
        assert plan.duplicates == ()

    def test_per_date_lists_take_precedence(self):
        request = ScheduleRequest(
            register_numbers=regs(15),
            exam_dates=[
                ExamDate(date="02-01-24", register_numbers=regs(10)),
                ExamDate(date="01-01-24", subject="DBMS Lab", register_numbers=regs(5, start=11)),
            ],
        )
        plan = plan_for(request)
        assert plan.mode == MODE_PER_DATE
        assert plan.student_count == 15
        assert plan.unassigned == ()
        assert [pd.label for pd in plan.dates] == ["01-01-24", "02-01-24"]
        assert [len(a.students) for a in plan.assignments] == [5, 10]
        assert plan.assignments[0].exam_date.subject == "DBMS Lab"

    def test_per_date_mode_records_undated_students(self):
        request = ScheduleRequest(
            register_numbers=regs(12) + ["99XX001"],
            semesters=[Semester(name="Semester 5", batches=[
                Batch(name="Batch A", register_numbers=["21CS001", "99XX002"]),
            ])],
            exam_dates=[ExamDate(date="01-01-24", register_numbers=regs(10))],
        )
        plan = plan_for(request)
        assert plan.student_count == 10
        assert plan.unassigned == ("99XX002", "21CS011", "21CS012", "99XX001")

    def test_duplicate_first_occurrence_wins(self):
        request = ScheduleRequest(
            register_numbers=["21CS001", "21CS002", "21CS001", "21CS003", "21CS002"],
            dates=["01-01-24"],
        )
        plan = plan_for(request)
        assert [s.register_number for s in plan.students] == ["21CS001", "21CS002", "21CS003"]
        assert plan.duplicates == ("21CS001", "21CS002")

    def test_duplicate_across_batches_keeps_first_batch(self):
        request = ScheduleRequest(semesters=[Semester(name="Semester 5", batches=[
            Batch(name="Batch A", register_numbers=["21CS001"]),
            Batch(name="Batch B", register_numbers=["21CS001", "21CS002"]),
        ])])
        plan = plan_for(request)
        assert plan.students[0].batch == "Batch A"
        assert plan.student_count == 2

    def test_duplicate_across_dates(self):
        request = ScheduleRequest(exam_dates=[
            ExamDate(date="01-01-24", register_numbers=["21CS001"]),
            ExamDate(date="02-01-24", register_numbers=["21CS001", "21CS002"]),
        ])
        plan = plan_for(request)
        assert [len(a.students) for a in plan.assignments] == [1, 1]

    def test_repeated_dates_merged(self):
        request = ScheduleRequest(exam_dates=[
            ExamDate(date="01-01-24", register_numbers=["21CS001"]),
            ExamDate(date="01-01-24", subject="Networks Lab", register_numbers=["21CS002"]),
        ])
        plan = plan_for(request)
        assert len(plan.dates) == 1
        assert plan.dates[0].subject == "Networks Lab"
        assert plan.merged_dates == ("01-01-24",)
        assert len(plan.assignments[0].students) == 2

    def test_malformed_date_recorded(self):
        plan = plan_for(ScheduleRequest(register_numbers=regs(30), dates=["2024-01-01", "02-01-24"]))
        assert len(plan.dates) == 1
        assert len(plan.date_problems) == 1

    def test_labs_fall_back_to_defaults(self):
        plan = plan_for(ScheduleRequest(register_numbers=regs(30)))
        assert plan.labs == ("Lab 1", "Lab 2", "Lab 3", "Lab 4", "Lab 5")

    def test_batch_tags_attached_to_flat_list(self):
        request = ScheduleRequest(
            exam_dates=[ExamDate(date="01-01-24", register_numbers=["21CS002"])],
            semesters=[Semester(name="Semester 5", batches=[
                Batch(name="Batch C", register_numbers=["21CS002"]),
            ])],
        )
        plan = plan_for(request)
        assert plan.students[0].batch == "Batch C"


# ─── VALIDATION ───────────────────────────────────────────────────────────────

class TestValidator:
    def test_below_minimum_rejected(self):
        report = validate(ScheduleRequest(register_numbers=regs(24), dates=["01-01-24"]))
        assert not report.is_valid
        assert report.errors[0].field == "register_numbers"
        assert "Currently: 24" in report.errors[0].message

    def test_minimum_accepted(self):
        report = validate(ScheduleRequest(register_numbers=regs(25), dates=["01-01-24"]))
        assert report.is_valid
        assert report.warnings == []

    def test_no_students(self):
        report = validate(ScheduleRequest(dates=["01-01-24"]))
        assert "No students" in report.errors[0].message

    def test_no_dates(self):
        report = validate(ScheduleRequest(register_numbers=regs(30)))
        assert [e.field for e in report.errors] == ["dates"]

    def test_all_errors_collected(self):
        request = ScheduleRequest(
            register_numbers=regs(3),
            internal_examiners=[Examiner(id="E1", name="Dr. A")],
            external_examiners=[Examiner(id="E1", name="Dr. A")],
        )
        fields = {e.field for e in validate(request).errors}
        assert fields == {"register_numbers", "dates", "external_examiners"}

    def test_malformed_date_is_error(self):
        report = validate(ScheduleRequest(register_numbers=regs(30), dates=["1/1/24"]))
        assert report.errors[0].field == "dates"
        assert "DD-MM-YY" in report.errors[0].message

    def test_duplicate_warning(self):
        request = ScheduleRequest(
            register_numbers=regs(30) + ["21CS001"], dates=["01-01-24"]
        )
        report = validate(request)
        assert report.is_valid
        assert "Duplicate" in report.warnings[0]
        assert "21CS001" in report.warnings[0]

    def test_too_few_dates_warns(self):
        report = validate(ScheduleRequest(register_numbers=regs(130), dates=["01-01-24"]))
        assert report.is_valid
        assert any("need 2 exam date(s)" in w for w in report.warnings)

    def test_few_labs_lower_day_capacity(self):
        request = ScheduleRequest(
            register_numbers=regs(110), dates=["01-01-24"], labs=["Lab 1", "Lab 2"]
        )
        assert any("at 100 per day" in w for w in validate(request).warnings)

    def test_per_date_overload_warns(self):
        request = ScheduleRequest(exam_dates=[
            ExamDate(date="01-01-24", register_numbers=regs(130)),
        ])
        report = validate(request)
        assert report.is_valid
        assert any("130 students assigned" in w for w in report.warnings)

    def test_flat_only_numbers_warned(self):
        request = ScheduleRequest(
            register_numbers=regs(30) + ["99XX001"],
            semesters=[Semester(name="Semester 5", batches=[
                Batch(name="Batch A", register_numbers=regs(30)),
            ])],
            dates=["01-01-24"],
        )
        report = validate(request)
        assert report.is_valid
        assert len(report.warnings) == 1
        assert report.warnings[0].startswith("1 register number(s) appear only")
        assert "99XX001" in report.warnings[0]

    def test_undated_students_rejected(self):
        request = ScheduleRequest(
            register_numbers=regs(31),
            exam_dates=[ExamDate(date="01-01-24", register_numbers=regs(30))],
        )
        report = validate(request)
        assert not report.is_valid
        assert report.errors[0].field == "register_numbers"
        assert "1 register number(s) are not assigned" in report.errors[0].message
        assert "21CS031" in report.errors[0].message

    def test_raise_for_errors(self):
        report = validate(ScheduleRequest(register_numbers=regs(3)))
        with pytest.raises(ValidationFailure) as exc_info:
            report.raise_for_errors()
        assert len(exc_info.value.errors) == 2
