"""Stundenplan-Modelle: Zuweisungen und Gesamtplan (Pydantic v2)."""

from typing import Optional

from pydantic import Field

from models.wire import WireModel


class Assignment(WireModel):
    """Zuweisung Vorlesung → Raum → Zeitslot.

    Besitzt keine eigene Identität. Doppelte Zuweisungen sind erlaubt und
    werden als Konflikt angezeigt, nicht als Strukturfehler.
    """

    lecture_id: str = Field(min_length=1)
    room_id: str = Field(min_length=1)
    time_slot_id: str = Field(min_length=1)


class Schedule(WireModel):
    """Ein Lösungskandidat: geordnete Zuweisungen plus optionale Bewertung."""

    assignments: list[Assignment]
    score: Optional[float] = None   # meist 0..1, Bedeutung legt der Generator fest
