"""Datenmodell für einen Zeitslot im Wochenraster."""

from enum import Enum

from pydantic import Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from models.wire import WireModel

# 24-Stunden-Format, immer zweistellig ("09:00", nicht "9:00")
HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class Day(str, Enum):
    MON = "Mon"
    TUE = "Tue"
    WED = "Wed"
    THU = "Thu"
    FRI = "Fri"
    SAT = "Sat"
    SUN = "Sun"


class TimeSlot(WireModel):
    """Ein Zeitfenster an einem Wochentag.

    Beginn und Ende liegen im kanonischen Format ``HH:mm`` vor. Nur deshalb
    darf ``start < end`` als einfacher String-Vergleich geprüft werden:
    Strings fester Breite mit führenden Nullen sortieren wie die Uhrzeit.
    """

    id: str = Field(min_length=1)               # "t1"
    day: Day
    start: str = Field(pattern=HHMM_PATTERN)    # "09:00"
    end: str = Field(pattern=HHMM_PATTERN)      # "10:00"

    @field_validator("end")
    @classmethod
    def _end_after_start(cls, v: str, info: ValidationInfo) -> str:
        start = info.data.get("start")
        if start is not None and not start < v:
            raise PydanticCustomError(
                "time_range",
                "Endzeit ({end}) muss nach der Startzeit ({start}) liegen",
                {"start": start, "end": v},
            )
        return v

    @property
    def label(self) -> str:
        """Kurzform, z.B. "Mon 09:00–10:00"."""
        return f"{self.day.value} {self.start}–{self.end}"
