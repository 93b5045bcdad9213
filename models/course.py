"""Datenmodell für einen Kurs (Pydantic v2)."""

from pydantic import Field

from models.wire import WireModel


class Course(WireModel):
    """Ein Kurs, dem beliebig viele Vorlesungen zugeordnet sind."""

    id: str = Field(min_length=1)    # "c1"
    name: str = Field(min_length=1)  # "Lineare Algebra"
