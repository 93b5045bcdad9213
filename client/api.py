"""HTTP-Client für den externen Generator-/Validator-Dienst (httpx).

Drei Operationen:
  POST /api/schedule/generate               Problem → Schedule
  POST /api/schedule/validate               {problem, schedule} → ValidationResult
  POST /api/schedule/generate-and-validate  Problem → {schedule, validation}

Jede Anfrage wird vor dem Senden lokal geprüft, jede Antwort gegen das
Domänenmodell validiert. Alle Aufrufe teilen ein festes Zeitlimit.
"""

import json
import logging
from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from analysis.integrity import validate_problem, validate_schedule
from client.errors import (
    HttpError,
    NetworkError,
    RequestValidationError,
    SchemaError,
    ServiceTimeoutError,
)
from models.problem import SchedulingProblem
from models.schedule import Schedule
from models.validation import ValidationResult
from models.wire import WireModel

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8080"
API_TIMEOUT_SECONDS = 10.0

GENERATE_PATH = "/api/schedule/generate"
VALIDATE_PATH = "/api/schedule/validate"
GENERATE_AND_VALIDATE_PATH = "/api/schedule/generate-and-validate"

T = TypeVar("T", bound=BaseModel)


# ─── Anfrage-/Antwort-Hüllen ──────────────────────────────────────────────────

class ValidateRequest(WireModel):
    """Rumpf von POST /api/schedule/validate."""

    problem: SchedulingProblem
    schedule: Schedule


class GenerateAndValidateResponse(WireModel):
    """Antwort von POST /api/schedule/generate-and-validate."""

    schedule: Schedule
    validation: ValidationResult


# ─── Client ───────────────────────────────────────────────────────────────────

class ScheduleApiClient:
    """Typisierte Grenze zum Generator-Dienst.

    Keine Wiederholungen, keine Deduplizierung: jeder Aufruf ist genau eine
    HTTP-Anfrage, Fehler gehen einmal an den Aufrufer.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=API_TIMEOUT_SECONDS,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ScheduleApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ScheduleApiClient({self.base_url!r})"

    # ─── Operationen ───

    def generate(self, problem: SchedulingProblem) -> Schedule:
        """Lässt den Dienst einen Stundenplan erzeugen."""
        self._check_problem(problem)
        return self._post(GENERATE_PATH, problem.to_wire(), Schedule)

    def validate(self, problem: SchedulingProblem, schedule: Schedule) -> ValidationResult:
        """Lässt den Dienst einen Stundenplan gegen das Problem prüfen."""
        report = validate_schedule(schedule, problem)
        if not report.is_valid:
            logger.warning(f"Validierungsanfrage lokal abgelehnt: {len(report.errors)} Fehler")
            raise RequestValidationError(report.errors)
        body = ValidateRequest(problem=problem, schedule=schedule).to_wire()
        return self._post(VALIDATE_PATH, body, ValidationResult)

    def generate_and_validate(self, problem: SchedulingProblem) -> GenerateAndValidateResponse:
        """Erzeugen und Prüfen in einem Aufruf."""
        self._check_problem(problem)
        return self._post(
            GENERATE_AND_VALIDATE_PATH, problem.to_wire(), GenerateAndValidateResponse
        )

    # ─── Intern ───

    def _check_problem(self, problem: SchedulingProblem) -> None:
        report = validate_problem(problem)
        if not report.is_valid:
            logger.warning(f"Anfrage lokal abgelehnt: {len(report.errors)} Strukturfehler")
            raise RequestValidationError(report.errors)

    def _post(self, path: str, body: Any, response_model: type[T]) -> T:
        logger.info(f"POST {self.base_url}{path}")
        try:
            response = self._client.post(path, content=json.dumps(body))
        except httpx.TimeoutException as e:
            logger.warning(f"Zeitüberschreitung bei {path}: {e}")
            raise ServiceTimeoutError(
                "Zeitüberschreitung der Anfrage",
                details=f"Anfrage überschritt das Zeitlimit von {API_TIMEOUT_SECONDS:g} Sekunden",
            ) from e
        except httpx.TransportError as e:
            logger.warning(f"Netzwerkfehler bei {path}: {e}")
            raise NetworkError("Netzwerkfehler", details=str(e) or type(e).__name__) from e

        if not response.is_success:
            raise self._http_error(response)

        try:
            data = response.json()
        except ValueError as e:
            raise SchemaError(
                "Ungültiges Antwortformat vom Server",
                details=f"Antwort ist kein JSON: {e}",
            ) from e

        try:
            result = response_model.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Antwort von {path} verletzt das Schema ({e.error_count()} Fehler)")
            raise SchemaError("Ungültiges Antwortformat vom Server", details=str(e)) from e

        logger.debug(f"Antwort von {path}: {response.status_code}")
        return result

    @staticmethod
    def _http_error(response: httpx.Response) -> HttpError:
        """Meldung aus ``{"message": ...}`` im Rumpf, sonst "HTTP <status>"."""
        status = response.status_code
        message = f"HTTP {status}"
        raw = response.text or None
        if raw:
            try:
                parsed = json.loads(raw)
            except ValueError:
                parsed = None
            if isinstance(parsed, dict) and parsed.get("message"):
                message = str(parsed["message"])
        logger.warning(f"HTTP-Fehler {status}: {message}")
        return HttpError(status, message, details=raw)
