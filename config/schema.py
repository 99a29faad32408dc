from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional


# ─── CAPACITY ───

class CapacityConfig(BaseModel):
    """Capacity limits used by the requirement calculator and the allocator."""
    # Maximum number of students examined on a single date
    daily_capacity: int = Field(125, ge=1,
        description="Students per exam day (ceiling)")
    # Default number of students per time slot
    slot_capacity: int = Field(25, ge=1,
        description="Students per time slot")
    # Smallest cohort that may be scheduled at all
    min_students: int = Field(25, ge=1,
        description="Minimum number of unique register numbers")


# ─── TIME SLOTS ───

class SlotTemplate(BaseModel):
    """One time slot offered by every lab on every exam date."""
    # Display label, e.g. "09:00 AM - 12:00 PM"
    time: str
    # Session tag, e.g. "morning" / "afternoon"
    session: str
    # Overrides CapacityConfig.slot_capacity for this slot only
    capacity: Optional[int] = Field(None, ge=1)

    @field_validator("time", "session")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Slot time and session must not be empty")
        return v.strip()


class ScheduleDefaults(BaseModel):
    """Defaults applied when a request leaves something out."""
    # Labs used when the request names none
    default_labs: list[str] = Field(
        default=["Lab 1", "Lab 2", "Lab 3", "Lab 4", "Lab 5"],
        description="Labs used when none are supplied")
    # Slot grid per lab and date, in session order
    time_slots: list[SlotTemplate] = Field(
        description="Time slots every lab offers per date")
    # Minimum gap in days for automatic date selection
    min_gap_days: int = Field(1, ge=1,
        description="Default minimum gap between auto-selected dates")

    @model_validator(mode='after')
    def _check_lists(self):
        labs = [lab.strip() for lab in self.default_labs if lab.strip()]
        if not labs:
            raise ValueError("At least one default lab is required")
        self.default_labs = labs
        if not self.time_slots:
            raise ValueError("At least one time slot is required")
        return self

    @property
    def sessions(self) -> list[str]:
        """Session tags in first-seen order."""
        seen: list[str] = []
        for slot in self.time_slots:
            if slot.session not in seen:
                seen.append(slot.session)
        return seen


# ─── OVERALL CONFIG ───

class EngineConfig(BaseModel):
    """Complete configuration of the scheduling engine."""
    # Shown in CLI output only
    institution_name: str = Field("Engineering College",
        description="Name of the institution")
    capacity: CapacityConfig = Field(default_factory=CapacityConfig)
    schedule: ScheduleDefaults

    def slot_capacity_of(self, slot: SlotTemplate) -> int:
        """Effective capacity of a slot template."""
        return slot.capacity if slot.capacity is not None else self.capacity.slot_capacity

    def day_capacity_for(self, lab_count: int) -> int:
        """Students a single date can hold with the given number of labs."""
        physical = lab_count * sum(self.slot_capacity_of(s) for s in self.schedule.time_slots)
        return min(self.capacity.daily_capacity, physical)
