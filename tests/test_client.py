"""Tests für den HTTP-Client (httpx.MockTransport statt echtem Dienst)."""

import json

import httpx
import pytest

from client.api import (
    API_TIMEOUT_SECONDS,
    GENERATE_AND_VALIDATE_PATH,
    GENERATE_PATH,
    VALIDATE_PATH,
    ScheduleApiClient,
)
from client.errors import (
    ApiError,
    HttpError,
    NetworkError,
    RequestValidationError,
    SchemaError,
    ServiceTimeoutError,
)
from models.problem import SchedulingProblem
from models.schedule import Schedule


VALIDATION_BODY = {
    "valid": True,
    "violations": [{"code": "LATE_SLOT", "message": "Spät", "lectureId": "l2"}],
}


def _client(handler) -> ScheduleApiClient:
    return ScheduleApiClient("http://scheduler.test", transport=httpx.MockTransport(handler))


class Recorder:
    """Merkt sich alle Anfragen und antwortet mit festem Status/Rumpf."""

    def __init__(self, status: int = 200, body=None, text: str = None):
        self.requests: list[httpx.Request] = []
        self.status = status
        self.body = body
        self.text = text

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status, text=self.text)
        return httpx.Response(self.status, json=self.body)


# ─── ERFOLG ───────────────────────────────────────────────────────────────────

class TestSuccess:
    def test_generate(self, problem, schedule):
        recorder = Recorder(body=schedule.to_wire())
        with _client(recorder) as client:
            result = client.generate(problem)

        assert result == schedule
        request = recorder.requests[0]
        assert request.method == "POST"
        assert request.url.path == GENERATE_PATH
        assert request.headers["content-type"] == "application/json"
        assert request.headers["accept"] == "application/json"
        assert json.loads(request.content) == problem.to_wire()

    def test_validate(self, problem, schedule):
        recorder = Recorder(body=VALIDATION_BODY)
        with _client(recorder) as client:
            result = client.validate(problem, schedule)

        assert result.valid
        assert result.status_label == "valid with warnings"
        assert result.violations[0].lecture_id == "l2"
        request = recorder.requests[0]
        assert request.url.path == VALIDATE_PATH
        body = json.loads(request.content)
        assert body == {"problem": problem.to_wire(), "schedule": schedule.to_wire()}

    def test_generate_and_validate(self, problem, schedule):
        recorder = Recorder(body={"schedule": schedule.to_wire(), "validation": VALIDATION_BODY})
        with _client(recorder) as client:
            result = client.generate_and_validate(problem)

        assert result.schedule == schedule
        assert len(result.validation.violations) == 1
        assert recorder.requests[0].url.path == GENERATE_AND_VALIDATE_PATH

    def test_score_may_be_absent(self, problem):
        recorder = Recorder(body={"assignments": []})
        with _client(recorder) as client:
            assert client.generate(problem).score is None

    def test_fixed_timeout(self):
        client = ScheduleApiClient("http://scheduler.test/")
        assert API_TIMEOUT_SECONDS == 10.0
        assert client._client.timeout.read == 10.0
        assert client.base_url == "http://scheduler.test"
        client.close()


# ─── LOKALE VORPRÜFUNG ────────────────────────────────────────────────────────

class TestRequestValidation:
    def test_invalid_problem_never_sent(self):
        recorder = Recorder(body={"assignments": []})
        with _client(recorder) as client:
            with pytest.raises(RequestValidationError) as exc:
                client.generate(SchedulingProblem())

        assert recorder.requests == []
        assert exc.value.code == 400
        assert len(exc.value.errors) == 4

    def test_generate_and_validate_checked(self):
        recorder = Recorder(body={})
        with _client(recorder) as client:
            with pytest.raises(RequestValidationError):
                client.generate_and_validate(SchedulingProblem())
        assert recorder.requests == []

    def test_validate_checks_problem(self, schedule):
        recorder = Recorder(body=VALIDATION_BODY)
        with _client(recorder) as client:
            with pytest.raises(RequestValidationError) as exc:
                client.validate(SchedulingProblem(), schedule)
        assert recorder.requests == []
        assert exc.value.errors[0].path == "problem.courses"


# ─── FEHLERKATEGORIEN ─────────────────────────────────────────────────────────

class TestErrors:
    def test_http_error_with_message(self, problem):
        recorder = Recorder(status=500, body={"message": "Solver abgestürzt"})
        with _client(recorder) as client:
            with pytest.raises(HttpError) as exc:
                client.generate(problem)
        assert exc.value.status == 500
        assert exc.value.code == 500
        assert exc.value.message == "Solver abgestürzt"
        assert "Solver abgestürzt" in exc.value.details

    def test_http_error_plain_text(self, problem):
        recorder = Recorder(status=503, text="Service Unavailable")
        with _client(recorder) as client:
            with pytest.raises(HttpError) as exc:
                client.generate(problem)
        assert exc.value.message == "HTTP 503"
        assert exc.value.details == "Service Unavailable"

    def test_timeout(self, problem):
        def handler(request):
            raise httpx.ReadTimeout("zu langsam", request=request)

        with _client(handler) as client:
            with pytest.raises(ServiceTimeoutError) as exc:
                client.generate(problem)
        assert exc.value.code == 408
        assert "10 Sekunden" in exc.value.details

    def test_network_error(self, problem):
        def handler(request):
            raise httpx.ConnectError("Verbindung abgelehnt", request=request)

        with _client(handler) as client:
            with pytest.raises(NetworkError) as exc:
                client.generate(problem)
        assert exc.value.code == 0

    def test_wrong_shape(self, problem):
        recorder = Recorder(body={"assignments": [{"lectureId": "l1"}]})
        with _client(recorder) as client:
            with pytest.raises(SchemaError) as exc:
                client.generate(problem)
        assert exc.value.code == 422

    def test_not_json(self, problem):
        recorder = Recorder(text="<html>ok</html>")
        with _client(recorder) as client:
            with pytest.raises(SchemaError):
                client.generate(problem)

    def test_validation_response_missing_violations(self, problem, schedule):
        recorder = Recorder(body={"valid": True})
        with _client(recorder) as client:
            with pytest.raises(SchemaError):
                client.validate(problem, schedule)

    def test_all_errors_share_base(self):
        for cls in (HttpError, NetworkError, RequestValidationError, SchemaError, ServiceTimeoutError):
            assert issubclass(cls, ApiError)

    def test_error_str(self):
        assert str(HttpError(404, "Nicht gefunden")) == "[404] Nicht gefunden"
