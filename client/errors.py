"""Fehlerklassen der Client-Grenze zum Generator-Dienst.

Jeder Fehler trägt einen numerischen Code, eine lesbare Meldung und
optional technische Details. Die Kategorien sind unterscheidbar, damit die
Oberfläche entscheiden kann, ob ein erneuter Versuch sinnvoll ist – der
Client selbst wiederholt nie.
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from analysis.integrity import StructuralError


class ApiError(Exception):
    """Basisklasse aller Client-Fehler."""

    code: int = 0

    def __init__(self, message: str, details: Optional[str] = None,
                 code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details
        if code is not None:
            self.code = code

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code}, message={self.message!r})"


class RequestValidationError(ApiError):
    """Lokale Vorprüfung fehlgeschlagen – die Anfrage wurde nie gesendet."""

    code = 400

    def __init__(self, errors: list["StructuralError"]) -> None:
        self.errors = list(errors)
        super().__init__(
            "Ungültige Anfragedaten",
            details="\n".join(str(e) for e in self.errors) or None,
        )


class NetworkError(ApiError):
    """Verbindung zum Dienst konnte nicht hergestellt oder gehalten werden."""

    code = 0


class ServiceTimeoutError(ApiError):
    """Das feste Zeitlimit ist vor Eintreffen der Antwort abgelaufen."""

    code = 408


class HttpError(ApiError):
    """Der Dienst antwortete mit einem Nicht-2xx-Status."""

    def __init__(self, status: int, message: str, details: Optional[str] = None) -> None:
        super().__init__(message, details=details, code=status)

    @property
    def status(self) -> int:
        return self.code


class SchemaError(ApiError):
    """Antwort entspricht nicht dem erwarteten Format."""

    code = 422
