"""Datenmodell für einen Raum (Pydantic v2)."""

from pydantic import Field

from models.wire import WireModel


class Room(WireModel):
    """Repräsentiert einen Hörsaal oder Seminarraum."""

    id: str = Field(min_length=1)    # "r1"
    name: str = Field(min_length=1)  # "Hörsaal A"
    capacity: int = Field(ge=1)      # Sitzplätze
