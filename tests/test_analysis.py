"""Tests for the schedule checker and the sample data generator."""

import re
from datetime import date

import pytest

from analysis.schedule_checker import ScheduleChecker
from config.defaults import default_engine_config
from data.fake_data import FakeCohortGenerator
from models.examiner import Examiner
from models.schedule import LabSchedule, ScheduleResponse, TimeSlot
from service.schedule_service import generate_schedule, generate_with_plan


# ─── Helpers ──────────────────────────────────────────────────────────────────

def slot(regs: list[str], capacity: int = 25, session: str = "morning") -> TimeSlot:
    return TimeSlot(time="09:00 AM - 12:00 PM", session=session,
                    capacity=capacity, register_numbers=regs)


def entry(day: str, lab: str, regs: list[str], internal=None, capacity: int = 25) -> LabSchedule:
    return LabSchedule(date=day, lab=lab, slots=[slot(regs, capacity)],
                       internal_examiner=internal)


def constraints(report) -> set[str]:
    return {v.constraint for v in report.violations}


# ─── SCHEDULE CHECKER ─────────────────────────────────────────────────────────

class TestScheduleChecker:
    def test_clean_schedule(self):
        schedule = ScheduleResponse(schedule=[
            entry("01-01-24", "Lab 1", ["21CS001", "21CS002"]),
            entry("02-01-24", "Lab 1", ["21CS003"]),
        ])
        report = ScheduleChecker(125).check(schedule, ["21CS001", "21CS002", "21CS003"])
        assert report.is_valid
        assert report.violations == []

    def test_duplicate_placement(self):
        schedule = ScheduleResponse(schedule=[
            entry("01-01-24", "Lab 1", ["21CS001"]),
            entry("01-01-24", "Lab 2", ["21CS001"]),
        ])
        report = ScheduleChecker(125).check(schedule)
        assert not report.is_valid
        assert "duplicate_placement" in constraints(report)

    def test_missing_and_unknown_students(self):
        schedule = ScheduleResponse(schedule=[entry("01-01-24", "Lab 1", ["21CS001", "21CS099"])])
        report = ScheduleChecker(125).check(schedule, ["21CS001", "21CS002"])
        assert constraints(report) == {"student_missing", "unknown_student"}

    def test_slot_over_capacity(self):
        schedule = ScheduleResponse(schedule=[
            entry("01-01-24", "Lab 1", [f"21CS{i:03d}" for i in range(1, 12)], capacity=10),
        ])
        assert "slot_capacity" in constraints(ScheduleChecker(125).check(schedule))

    def test_daily_capacity(self):
        schedule = ScheduleResponse(schedule=[
            entry("01-01-24", "Lab 1", ["21CS001", "21CS002"]),
            entry("01-01-24", "Lab 2", ["21CS003"]),
        ])
        assert "daily_capacity" in constraints(ScheduleChecker(2).check(schedule))

    def test_day_capacity_follows_lab_count(self):
        """110 students fit the 125 ceiling but not two labs (100 seats)."""
        config = default_engine_config()
        regs = [f"21CS{i:03d}" for i in range(1, 111)]
        schedule = ScheduleResponse(schedule=[
            entry("01-01-24", f"Lab {n + 1}", regs[n * 22:(n + 1) * 22]) for n in range(5)
        ])
        assert ScheduleChecker(config.capacity.daily_capacity).check(schedule).is_valid
        report = ScheduleChecker(config.day_capacity_for(2)).check(schedule)
        assert "daily_capacity" in constraints(report)
        assert "day capacity of 100" in report.violations[0].description

    def test_examiner_double_booking(self):
        examiner = Examiner(id="INT01", name="Dr. A")
        schedule = ScheduleResponse(schedule=[
            entry("01-01-24", "Lab 1", ["21CS001"], internal=examiner),
            entry("01-01-24", "Lab 2", ["21CS002"], internal=examiner),
            entry("02-01-24", "Lab 1", ["21CS003"], internal=examiner),
        ])
        report = ScheduleChecker(125).check(schedule)
        violations = [v for v in report.violations if v.constraint == "examiner_double_booking"]
        assert len(violations) == 1
        assert violations[0].entity == "INT01"

    def test_dates_out_of_order(self):
        schedule = ScheduleResponse(schedule=[
            entry("02-01-24", "Lab 1", ["21CS001"]),
            entry("01-01-24", "Lab 1", ["21CS002"]),
        ])
        assert "date_order" in constraints(ScheduleChecker(125).check(schedule))

    def test_interleaved_dates(self):
        schedule = ScheduleResponse(schedule=[
            entry("01-01-24", "Lab 1", ["21CS001"]),
            entry("02-01-24", "Lab 1", ["21CS002"]),
            entry("01-01-24", "Lab 2", ["21CS003"]),
        ])
        assert "date_order" in constraints(ScheduleChecker(125).check(schedule))

    def test_generated_schedule_passes(self):
        request = FakeCohortGenerator(seed=7).generate(
            num_semesters=2, batches_per_semester=3, num_internal=5, num_external=5,
            start=date(2024, 1, 8),
        )
        config = default_engine_config()
        plan, response = generate_with_plan(request, config)
        assert response.success
        expected = [r for s in request.semesters for b in s.batches for r in b.register_numbers]
        assert [s.register_number for s in plan.students] == expected
        report = ScheduleChecker(config.day_capacity_for(len(plan.labs))).check(response.data, expected)
        assert report.is_valid, report.violations

    def test_generated_two_lab_schedule_passes(self):
        request = FakeCohortGenerator(seed=3).generate(
            num_semesters=1, batches_per_semester=3, num_labs=2, start=date(2024, 1, 8),
        )
        config = default_engine_config()
        plan, response = generate_with_plan(request, config)
        assert plan.labs == ("Lab 1", "Lab 2")
        assert response.success, response.errors
        report = ScheduleChecker(config.day_capacity_for(2)).check(
            response.data, [s.register_number for s in plan.students]
        )
        assert report.is_valid, report.violations


# ─── SAMPLE DATA ──────────────────────────────────────────────────────────────

class TestFakeCohortGenerator:
    def test_deterministic(self):
        a = FakeCohortGenerator(seed=42).generate(start=date(2024, 1, 8))
        b = FakeCohortGenerator(seed=42).generate(start=date(2024, 1, 8))
        assert a == b

    def test_register_number_format(self):
        request = FakeCohortGenerator().generate()
        regs = [r for s in request.semesters for b in s.batches for r in b.register_numbers]
        assert regs
        assert all(re.match(r"^21CS\d{3}$", r) for r in regs)
        assert len(set(regs)) == len(regs)

    def test_batch_sizes(self):
        semesters = FakeCohortGenerator(seed=1).semesters(2, 4, batch_size=(20, 30))
        assert [s.name for s in semesters] == ["Semester 5", "Semester 7"]
        for sem in semesters:
            assert len(sem.batches) == 4
            assert all(20 <= len(b.register_numbers) <= 30 for b in sem.batches)

    def test_enough_dates_for_cohort(self):
        request = FakeCohortGenerator().generate(num_semesters=3, batches_per_semester=4)
        total = sum(s.student_count for s in request.semesters)
        assert len(request.dates) * 125 >= total

    def test_candidate_dates_skip_weekends(self):
        # 6 January 2024 is a Saturday
        dates = FakeCohortGenerator().candidate_dates(date(2024, 1, 5), 3)
        assert dates == ["05-01-24", "08-01-24", "09-01-24"]

    def test_duplicates_injected(self):
        request = FakeCohortGenerator().generate(duplicates=3)
        response = generate_schedule(request)
        assert response.success
        assert any("Duplicate" in w for w in response.warnings)

    def test_subjects(self):
        request = FakeCohortGenerator().generate(with_subjects=True, num_dates=2)
        assert len(request.exam_dates) == 2
        assert all(ed.subject for ed in request.exam_dates)

    def test_examiner_ids(self):
        roster = FakeCohortGenerator().examiners(3, "EXT")
        assert [e.id for e in roster] == ["EXT01", "EXT02", "EXT03"]
        assert all(e.name.startswith(("Dr.", "Prof.")) for e in roster)

    def test_unknown_department(self):
        with pytest.raises(ValueError, match="Unknown department"):
            FakeCohortGenerator(department="XX")
