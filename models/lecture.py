"""Datenmodell für eine Vorlesung (Pydantic v2)."""

from pydantic import Field

from models.wire import WireModel


class Lecture(WireModel):
    """Eine einzelne Vorlesung eines Kurses.

    ``course_id`` wird hier NICHT aufgelöst – ein verwaister Verweis ist im
    Modell erlaubt und wird erst von ``analysis.integrity`` gemeldet.
    """

    id: str = Field(min_length=1)         # "l1"
    course_id: str = Field(min_length=1)  # Verweis auf Course.id
    title: str = Field(min_length=1)
    enrollment: int = Field(ge=0)         # Teilnehmerzahl
