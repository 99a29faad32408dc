"""Data model for an examiner (Pydantic v2)."""

from pydantic import BaseModel, field_validator


class Examiner(BaseModel):
    """An internal or external examiner.

    Incomplete entries (missing id or name) are allowed here so requests can
    be parsed; they are dropped before use.
    """

    id: str = ""      # staff id, e.g. "INT01"
    name: str = ""    # "Dr. R. Kumar"

    @field_validator("id", "name", mode="before")
    @classmethod
    def _strip(cls, v):
        return "" if v is None else str(v).strip()

    @property
    def is_complete(self) -> bool:
        return bool(self.id and self.name)


def clean_roster(examiners: list[Examiner]) -> list[Examiner]:
    """Drops incomplete entries and repeated ids (first entry wins)."""
    seen: set[str] = set()
    roster: list[Examiner] = []
    for e in examiners:
        if not e.is_complete or e.id in seen:
            continue
        seen.add(e.id)
        roster.append(e)
    return roster
