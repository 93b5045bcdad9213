"""Gemeinsame Basisklasse für alle Wire-Modelle (Pydantic v2).

Python-Attribute sind snake_case, das JSON-Format des Generator-Dienstes
verwendet camelCase (``courseId``, ``timeSlots``, ...).
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Unveränderlicher Datensatz mit camelCase-Aliasen im JSON."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_wire(self) -> dict:
        """Serialisiert in die JSON-Struktur des Dienstes (camelCase)."""
        return self.model_dump(by_alias=True, mode="json")
