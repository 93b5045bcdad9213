"""Ergebnis-Modelle des externen Constraint-Validators (Pydantic v2)."""

from typing import Optional

from models.wire import WireModel


class Violation(WireModel):
    """Eine einzelne Constraint-Verletzung.

    Die optionalen Rückverweise dienen nur der Filterung in der Anzeige.
    """

    code: str       # z.B. "ROOM_DOUBLE_BOOKED"
    message: str
    lecture_id: Optional[str] = None
    room_id: Optional[str] = None
    time_slot_id: Optional[str] = None


class ValidationResult(WireModel):
    """Gesamtergebnis einer Validierung.

    ``valid=True`` mit Verletzungen ist der eigenständige Zustand
    "gültig mit Warnungen".
    """

    valid: bool
    violations: list[Violation]

    @property
    def status_label(self) -> str:
        if not self.valid:
            return "invalid"
        if self.violations:
            return "valid with warnings"
        return "valid"
