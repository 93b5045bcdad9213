"""End-to-End-Tests der CLI (click.testing.CliRunner, isoliertes Verzeichnis)."""

import json
from pathlib import Path

import httpx
import pytest
from click.testing import CliRunner

import main
from client.api import ScheduleApiClient
from config.defaults import sample_problem, sample_schedule
from models.problem import SchedulingProblem
from models.validation import ValidationResult, Violation
from storage.store import JsonFileStore, SessionStore, StorageSlot

STORE_DIR = ".vorlesungsplaner"


@pytest.fixture
def runner(tmp_path):
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        yield runner


def _store() -> SessionStore:
    return SessionStore(JsonFileStore(STORE_DIR))


def _mock_service(monkeypatch, handler):
    """Ersetzt den echten Dienst durch einen httpx.MockTransport."""
    monkeypatch.setattr(
        main, "_make_client",
        lambda config: ScheduleApiClient(config.api.base_url,
                                         transport=httpx.MockTransport(handler)),
    )


# ─── GRUNDLAGEN ───────────────────────────────────────────────────────────────

class TestBasics:
    def test_help(self, runner):
        result = runner.invoke(main.cli, ["--help"])
        assert result.exit_code == 0
        assert "generate" in result.output

    def test_config_init_and_show(self, runner):
        result = runner.invoke(main.cli, ["config", "init", "--base-url", "http://scheduler.test"])
        assert result.exit_code == 0
        result = runner.invoke(main.cli, ["config", "show"])
        assert result.exit_code == 0
        assert "http://scheduler.test" in result.output

    def test_config_init_rejects_bad_url(self, runner):
        result = runner.invoke(main.cli, ["config", "init", "--base-url", "scheduler"])
        assert result.exit_code == 1

    def test_malformed_config_reported(self, runner):
        """Kaputte YAML-Datei: Meldung und Exit-Code 1 statt Traceback."""
        Path("config").mkdir()
        Path("config/client_config.yaml").write_text("api: [unclosed\n", encoding="utf-8")
        result = runner.invoke(main.cli, ["config", "show"])
        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)

    def test_verbose_flag(self, runner):
        assert runner.invoke(main.cli, ["-v", "config", "show"]).exit_code == 0

    def test_check_without_problem(self, runner):
        result = runner.invoke(main.cli, ["check"])
        assert result.exit_code == 1
        assert "Kein Problem gespeichert" in result.output


# ─── PROBLEM BEARBEITEN ───────────────────────────────────────────────────────

class TestProblemCommands:
    def test_sample_and_check(self, runner):
        assert runner.invoke(main.cli, ["problem", "sample"]).exit_code == 0
        assert _store().load(StorageSlot.LAST_PROBLEM) == sample_problem()
        result = runner.invoke(main.cli, ["check"])
        assert result.exit_code == 0
        assert "STRUKTUR OK" in result.output

    def test_build_problem_step_by_step(self, runner):
        steps = [
            ["problem", "add-course", "Informatik"],
            ["problem", "add-lecture", "c1", "Algorithmen", "40"],
            ["problem", "add-room", "Hörsaal 1", "80"],
            ["problem", "add-slot", "Wed", "08:00", "09:30"],
        ]
        for args in steps:
            result = runner.invoke(main.cli, args)
            assert result.exit_code == 0, result.output

        problem = _store().load(StorageSlot.LAST_PROBLEM)
        assert [c.id for c in problem.courses] == ["c1"]
        assert problem.lectures[0].enrollment == 40
        assert problem.rooms[0].capacity == 80
        assert problem.time_slots[0].id == "t1"
        assert runner.invoke(main.cli, ["check"]).exit_code == 0

    def test_add_slot_shows_label(self, runner):
        result = runner.invoke(main.cli, ["problem", "add-slot", "Wed", "08:00", "09:30"])
        assert result.exit_code == 0
        assert "Wed 08:00–09:30" in result.output

    def test_capacity_warning_shown(self, runner):
        runner.invoke(main.cli, ["problem", "sample"])
        result = runner.invoke(main.cli, ["problem", "add-lecture", "c1", "Riesig", "60"])
        assert result.exit_code == 0
        assert "übersteigt" in result.output

    def test_invalid_slot_rejected(self, runner):
        runner.invoke(main.cli, ["problem", "sample"])
        result = runner.invoke(main.cli, ["problem", "add-slot", "Mon", "10:00", "09:00"])
        assert result.exit_code == 1
        assert len(_store().load(StorageSlot.LAST_PROBLEM).time_slots) == 2

    def test_remove_keeps_references(self, runner):
        runner.invoke(main.cli, ["problem", "sample"])
        result = runner.invoke(main.cli, ["problem", "remove", "course", "c1"])
        assert result.exit_code == 0
        problem = _store().load(StorageSlot.LAST_PROBLEM)
        assert problem.courses == []
        assert len(problem.lectures) == 2
        assert runner.invoke(main.cli, ["check"]).exit_code == 1

    def test_remove_unknown(self, runner):
        runner.invoke(main.cli, ["problem", "sample"])
        assert runner.invoke(main.cli, ["problem", "remove", "room", "r9"]).exit_code == 1

    def test_import_valid(self, runner):
        sample_problem().save_json("problem.json")
        result = runner.invoke(main.cli, ["problem", "import", "problem.json"])
        assert result.exit_code == 0
        assert _store().load(StorageSlot.LAST_PROBLEM) == sample_problem()

    def test_import_invalid(self, runner):
        raw = sample_problem().to_wire()
        raw["lectures"][0]["courseId"] = "c99"
        with open("problem.json", "w", encoding="utf-8") as f:
            json.dump(raw, f)
        result = runner.invoke(main.cli, ["problem", "import", "problem.json"])
        assert result.exit_code == 1
        assert _store().load(StorageSlot.LAST_PROBLEM) is None

    def test_import_not_json(self, runner):
        with open("problem.json", "w", encoding="utf-8") as f:
            f.write("kein json")
        assert runner.invoke(main.cli, ["problem", "import", "problem.json"]).exit_code == 1

    def test_export(self, runner):
        runner.invoke(main.cli, ["problem", "sample"])
        assert runner.invoke(main.cli, ["problem", "export", "out.json"]).exit_code == 0
        assert SchedulingProblem.load_json("out.json") == sample_problem()


# ─── GENERATOR ────────────────────────────────────────────────────────────────

class TestGenerate:
    def test_generate_and_validate(self, runner, monkeypatch):
        def handler(request):
            assert request.url.path == "/api/schedule/generate-and-validate"
            return httpx.Response(200, json={
                "schedule": sample_schedule().to_wire(),
                "validation": {"valid": True, "violations": []},
            })

        _mock_service(monkeypatch, handler)
        runner.invoke(main.cli, ["problem", "sample"])
        result = runner.invoke(main.cli, ["generate"])
        assert result.exit_code == 0, result.output
        assert "0.87" in result.output

        store = _store()
        assert store.load(StorageSlot.LAST_SCHEDULE) == sample_schedule()
        assert store.load(StorageSlot.LAST_VALIDATION).status_label == "valid"

    def test_generate_without_validation(self, runner, monkeypatch):
        _mock_service(monkeypatch, lambda request: httpx.Response(
            200, json=sample_schedule().to_wire()))
        runner.invoke(main.cli, ["problem", "sample"])
        result = runner.invoke(main.cli, ["generate", "--no-validate"])
        assert result.exit_code == 0, result.output
        assert _store().load(StorageSlot.LAST_VALIDATION) is None

    def test_server_error(self, runner, monkeypatch):
        _mock_service(monkeypatch, lambda request: httpx.Response(
            500, json={"message": "Solver abgestürzt"}))
        runner.invoke(main.cli, ["problem", "sample"])
        result = runner.invoke(main.cli, ["generate"])
        assert result.exit_code == 1
        assert "HttpError" in result.output
        assert _store().load(StorageSlot.LAST_SCHEDULE) is None

    def test_invalid_problem_not_sent(self, runner, monkeypatch):
        calls = []
        _mock_service(monkeypatch, lambda request: calls.append(request))
        runner.invoke(main.cli, ["problem", "add-course", "Leer"])
        result = runner.invoke(main.cli, ["generate"])
        assert result.exit_code == 1
        assert calls == []

    def test_revalidate(self, runner, monkeypatch):
        _mock_service(monkeypatch, lambda request: httpx.Response(200, json={
            "valid": False,
            "violations": [{"code": "ROOM_DOUBLE_BOOKED", "message": "Doppelt",
                            "roomId": "r1", "timeSlotId": "t1"}],
        }))
        runner.invoke(main.cli, ["problem", "sample", "--with-schedule"])
        result = runner.invoke(main.cli, ["revalidate"])
        assert result.exit_code == 0, result.output
        assert "ROOM_DOUBLE_BOOKED" in result.output
        assert not _store().load(StorageSlot.LAST_VALIDATION).valid


# ─── ANZEIGE ──────────────────────────────────────────────────────────────────

class TestShow:
    def test_grid(self, runner):
        runner.invoke(main.cli, ["problem", "sample", "--with-schedule"])
        result = runner.invoke(main.cli, ["show", "grid"])
        assert result.exit_code == 0
        assert "Room A" in result.output

    def test_grid_filtered_empty(self, runner):
        runner.invoke(main.cli, ["problem", "sample", "--with-schedule"])
        result = runner.invoke(main.cli, ["show", "grid", "--day", "Sun"])
        assert result.exit_code == 0
        assert "No data matches" in result.output

    def test_list(self, runner):
        runner.invoke(main.cli, ["problem", "sample", "--with-schedule"])
        result = runner.invoke(main.cli, ["show", "list", "--sort", "enrollment", "--desc"])
        assert result.exit_code == 0
        assert result.output.index("l1") < result.output.index("l2")

    def test_list_without_schedule(self, runner):
        runner.invoke(main.cli, ["problem", "sample"])
        assert runner.invoke(main.cli, ["show", "list"]).exit_code == 1

    def test_days(self, runner):
        runner.invoke(main.cli, ["problem", "sample"])
        result = runner.invoke(main.cli, ["show", "days"])
        assert "Mon, Tue" in result.output

    def test_violations_focus(self, runner):
        runner.invoke(main.cli, ["problem", "sample", "--with-schedule"])
        store = _store()
        store.save(StorageSlot.LAST_VALIDATION, ValidationResult(
            valid=True,
            violations=[Violation(code="LATE", message="Spät", time_slot_id="t2")],
        ))
        result = runner.invoke(main.cli, ["show", "violations", "--focus", "1"])
        assert result.exit_code == 0, result.output
        assert "Tag=Tue" in result.output
        assert runner.invoke(main.cli, ["show", "violations", "--focus", "5"]).exit_code == 1


class TestStore:
    def test_clear(self, runner):
        runner.invoke(main.cli, ["problem", "sample", "--with-schedule"])
        result = runner.invoke(main.cli, ["store", "clear"])
        assert result.exit_code == 0
        state = _store().load_all()
        assert state.problem is None
        assert state.schedule is None
