from config.schema import (
    CapacityConfig,
    EngineConfig,
    ScheduleDefaults,
    SlotTemplate,
)

DAILY_CAPACITY = 125
SLOT_CAPACITY = 25
MIN_STUDENTS = 25

DEFAULT_LABS = ["Lab 1", "Lab 2", "Lab 3", "Lab 4", "Lab 5"]


def default_time_slots() -> list[SlotTemplate]:
    """Standard slot grid of a practical exam day.

    Morning   09:00 AM - 12:00 PM
    Afternoon 01:00 PM - 04:00 PM

    With five labs the morning session alone covers the daily ceiling of
    125 students; the afternoon is used when fewer labs are available.
    """
    return [
        SlotTemplate(time="09:00 AM - 12:00 PM", session="morning"),
        SlotTemplate(time="01:00 PM - 04:00 PM", session="afternoon"),
    ]


def default_schedule_defaults() -> ScheduleDefaults:
    return ScheduleDefaults(
        default_labs=list(DEFAULT_LABS),
        time_slots=default_time_slots(),
        min_gap_days=1,
    )


def default_engine_config() -> EngineConfig:
    """Full default configuration (125 students/day, 25 per slot)."""
    return EngineConfig(
        institution_name="Engineering College",
        capacity=CapacityConfig(
            daily_capacity=DAILY_CAPACITY,
            slot_capacity=SLOT_CAPACITY,
            min_students=MIN_STUDENTS,
        ),
        schedule=default_schedule_defaults(),
    )
