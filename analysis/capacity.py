"""Kapazitäts-Hinweise: Teilnehmerzahl vs. größter verfügbarer Raum.

Reine Hinweise (keine Fehler): sie blockieren die Einreichung nicht und
werden bei jeder Änderung an Vorlesungen oder Räumen neu berechnet.
"""

from typing import Sequence

from models.lecture import Lecture
from models.room import Room


def capacity_warnings(lectures: Sequence[Lecture], rooms: Sequence[Room]) -> list[str]:
    """Ein Hinweis pro Vorlesung, die in keinen Raum passt.

    Ohne Räume gibt es keine Kapazitätsinformation → keine Hinweise.
    """
    if not rooms:
        return []

    max_capacity = max(r.capacity for r in rooms)
    warnings: list[str] = []
    for position, lecture in enumerate(lectures, start=1):
        if lecture.enrollment > max_capacity:
            warnings.append(
                f"Vorlesung {position} ({lecture.id}): Teilnehmerzahl ({lecture.enrollment}) "
                f"übersteigt die größte Raumkapazität ({max_capacity})."
            )
    return warnings
