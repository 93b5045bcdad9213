"""Vorlesungsplaner — Client-CLI.

Verwendung:
  python main.py config init                 Konfiguration anlegen
  python main.py config show                 Konfiguration anzeigen
  python main.py problem sample              Beispiel-Problem laden
  python main.py problem show                Aktuelles Problem anzeigen
  python main.py problem import <datei>      Problem aus JSON importieren
  python main.py problem export <datei>      Problem als JSON exportieren
  python main.py problem add-course <name>   Kurs hinzufügen (ebenso add-lecture,
                                             add-room, add-slot, remove)
  python main.py check                       Struktur- und Kapazitätsprüfung
  python main.py generate                    Stundenplan erzeugen (+ validieren)
  python main.py revalidate                  Gespeicherten Plan erneut prüfen
  python main.py show grid|list|violations   Ergebnis anzeigen
  python main.py store clear                 Sitzungsspeicher leeren
"""

import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich import box

from analysis.capacity import capacity_warnings
from analysis.filters import ScheduleFilters, available_days, filters_for_violation
from analysis.grid import build_grid
from analysis.integrity import validate_problem
from analysis.listing import SortDirection, SortField, build_assignment_list
from client.api import ScheduleApiClient
from client.errors import ApiError, RequestValidationError
from config.defaults import sample_problem, sample_schedule
from config.manager import ConfigManager
from config.schema import ClientConfig
from export.helpers import format_score
from export.tui_renderer import grid_table, list_table, problem_tables, violations_table
from models.course import Course
from models.lecture import Lecture
from models.problem import SchedulingProblem, generate_unique_id
from models.room import Room
from models.timeslot import Day, TimeSlot
from storage.store import JsonFileStore, MemoryStore, SessionStore, StorageSlot

console = Console()
logger = logging.getLogger(__name__)

DAY_CHOICES = [d.value for d in Day]


@dataclass
class AppContext:
    config: ClientConfig
    store: SessionStore


def _setup_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _open_store(config: ClientConfig) -> SessionStore:
    logger.debug(f"Sitzungsspeicher: {config.storage.directory} (aktiv: {config.storage.enabled})")
    if config.storage.enabled:
        return SessionStore(JsonFileStore(Path(config.storage.directory)))
    return SessionStore(MemoryStore())


def _make_client(config: ClientConfig) -> ScheduleApiClient:
    return ScheduleApiClient(config.api.base_url)


def _require_problem(app: AppContext) -> SchedulingProblem:
    """Lädt das letzte Problem oder bricht mit Hinweis ab."""
    problem = app.store.load(StorageSlot.LAST_PROBLEM)
    if problem is None:
        console.print(
            "[red]Kein Problem gespeichert.[/red]\n"
            "Verwenden Sie [bold]python main.py problem sample[/bold] oder "
            "[bold]python main.py problem import <datei>[/bold]."
        )
        sys.exit(1)
    return problem


def _require_schedule(app: AppContext):
    schedule = app.store.load(StorageSlot.LAST_SCHEDULE)
    if schedule is None:
        console.print(
            "[red]Kein Stundenplan gespeichert.[/red]\n"
            "Führen Sie zunächst [bold]python main.py generate[/bold] aus."
        )
        sys.exit(1)
    return schedule


def _print_capacity_warnings(problem: SchedulingProblem) -> None:
    for w in capacity_warnings(problem.lectures, problem.rooms):
        console.print(f"[yellow]⚠ {w}[/yellow]")


def _save_problem(app: AppContext, problem: SchedulingProblem) -> None:
    """Speichert nach jeder Änderung und berechnet die Kapazitäts-Hinweise neu."""
    if not app.store.save(StorageSlot.LAST_PROBLEM, problem):
        console.print("[yellow]Problem konnte nicht gespeichert werden.[/yellow]")
    _print_capacity_warnings(problem)


def _print_api_error(e: ApiError) -> None:
    lines = [f"[bold red]{escape(e.message)}[/bold red]  [dim](Code {e.code})[/dim]"]
    if isinstance(e, RequestValidationError):
        for err in e.errors:
            lines.append(f"  [red]• {escape(str(err))}[/red]")
    elif e.details:
        lines.append(f"[dim]{escape(e.details)}[/dim]")
    console.print(Panel("\n".join(lines), title=type(e).__name__, border_style="red"))


def _print_model_error(e: ValidationError) -> None:
    console.print("[red bold]Ungültige Eingabe:[/red bold]")
    for err in e.errors():
        loc = ".".join(str(p) for p in err["loc"])
        console.print(f"  [red]• {loc}: {err['msg']}[/red]")


def _filters(course: Optional[str], room: Optional[str], day: Optional[str]) -> ScheduleFilters:
    return ScheduleFilters(
        course_id=course or None,
        room_id=room or None,
        day=Day(day) if day else None,
    )


def filter_options(func):
    """Gemeinsame Filter-Optionen für die show-Befehle."""
    func = click.option("--day", type=click.Choice(DAY_CHOICES), default=None,
                        help="Nur Zeitslots dieses Wochentags.")(func)
    func = click.option("--room", default=None, help="Nur diesen Raum (ID).")(func)
    func = click.option("--course", default=None, help="Nur Vorlesungen dieses Kurses (ID).")(func)
    return func


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug-Ausgaben aktivieren.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """Vorlesungsplaner: Problem erfassen, Stundenplan erzeugen lassen, Ergebnis anzeigen."""
    mgr = ConfigManager()
    try:
        config = mgr.load_or_default()
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)
    _setup_logging(logging.DEBUG if verbose else config.log_level_value)
    ctx.obj = AppContext(config=config, store=_open_store(config))


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@cli.group("config")
def cmd_config():
    """Konfiguration anzeigen oder anlegen."""


@cmd_config.command("show")
@click.pass_obj
def config_show(app: AppContext):
    """Zeigt die aktive Konfiguration an."""
    mgr = ConfigManager()
    source = "Standardwerte" if mgr.first_run_check() else str(mgr.DEFAULT_CONFIG)
    table = Table(title=f"Konfiguration ({source})", box=box.ROUNDED)
    table.add_column("Parameter", style="bold")
    table.add_column("Wert")
    table.add_row("api.base_url", app.config.api.base_url)
    table.add_row("api.timeout", "10 s (fest)")
    table.add_row("storage.directory", app.config.storage.directory)
    table.add_row("storage.enabled", str(app.config.storage.enabled))
    table.add_row("log_level", app.config.log_level)
    console.print(table)


@cmd_config.command("init")
@click.option("--base-url", default=None, help="Basis-URL des Generator-Dienstes.")
@click.option("--force", is_flag=True, default=False, help="Bestehende Datei überschreiben.")
@click.pass_obj
def config_init(app: AppContext, base_url: Optional[str], force: bool):
    """Legt die Konfigurationsdatei an."""
    mgr = ConfigManager()
    if not mgr.first_run_check() and not force:
        console.print(
            "[yellow]Eine Konfiguration existiert bereits.[/yellow]\n"
            "Verwenden Sie [bold]--force[/bold] zum Überschreiben."
        )
        return
    config = app.config
    if base_url:
        try:
            config = ClientConfig.model_validate(
                {**config.model_dump(), "api": {"base_url": base_url}}
            )
        except ValidationError as e:
            _print_model_error(e)
            sys.exit(1)
    mgr.save(config)


# ─── PROBLEM ──────────────────────────────────────────────────────────────────

@cli.group("problem")
def cmd_problem():
    """Problem (Kurse, Vorlesungen, Räume, Zeitslots) bearbeiten."""


@cmd_problem.command("sample")
@click.option("--with-schedule", is_flag=True, default=False,
              help="Zusätzlich den Beispiel-Stundenplan speichern.")
@click.pass_obj
def problem_sample(app: AppContext, with_schedule: bool):
    """Lädt das Beispiel-Problem als aktuelles Problem."""
    problem = sample_problem()
    _save_problem(app, problem)
    app.store.discard(StorageSlot.LAST_VALIDATION)
    if with_schedule:
        app.store.save(StorageSlot.LAST_SCHEDULE, sample_schedule())
    else:
        app.store.discard(StorageSlot.LAST_SCHEDULE)
    console.print(f"[green]✓[/green] Beispiel-Problem geladen.\n[dim]{problem.summary()}[/dim]")


@cmd_problem.command("show")
@click.pass_obj
def problem_show(app: AppContext):
    """Zeigt das aktuelle Problem an."""
    problem = _require_problem(app)
    console.print(Panel(problem.summary(), title="Problem", border_style="cyan"))
    for table in problem_tables(problem):
        console.print(table)
    _print_capacity_warnings(problem)


@cmd_problem.command("import")
@click.argument("datei", type=click.Path(exists=True, path_type=Path))
@click.pass_obj
def problem_import(app: AppContext, datei: Path):
    """Importiert ein Problem aus einer JSON-Datei (wird vollständig geprüft)."""
    try:
        with open(datei, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, ValueError) as e:
        console.print(f"[red bold]Import fehlgeschlagen:[/red bold] {escape(str(e))}")
        sys.exit(1)

    report = validate_problem(raw)
    if not report.is_valid:
        report.print_rich()
        console.print("[red]Import abgelehnt.[/red]")
        sys.exit(1)

    problem = SchedulingProblem.model_validate(raw)
    _save_problem(app, problem)
    app.store.discard(StorageSlot.LAST_SCHEDULE)
    app.store.discard(StorageSlot.LAST_VALIDATION)
    console.print(f"[green]✓[/green] Import erfolgreich!\n[dim]{problem.summary()}[/dim]")


@cmd_problem.command("export")
@click.argument("datei", type=click.Path(path_type=Path))
@click.pass_obj
def problem_export(app: AppContext, datei: Path):
    """Exportiert das aktuelle Problem als JSON-Datei."""
    problem = _require_problem(app)
    problem.save_json(datei)
    console.print(f"[green]✓[/green] Problem gespeichert: {datei}")


def _current_or_empty(app: AppContext) -> SchedulingProblem:
    return app.store.load(StorageSlot.LAST_PROBLEM) or SchedulingProblem()


@cmd_problem.command("add-course")
@click.argument("name")
@click.option("--id", "entity_id", default=None, help="ID (Standard: nächste freie c<n>).")
@click.pass_obj
def problem_add_course(app: AppContext, name: str, entity_id: Optional[str]):
    """Fügt einen Kurs hinzu."""
    problem = _current_or_empty(app)
    entity_id = entity_id or generate_unique_id("c", [c.id for c in problem.courses])
    try:
        course = Course(id=entity_id, name=name)
    except ValidationError as e:
        _print_model_error(e)
        sys.exit(1)
    _save_problem(app, problem.model_copy(update={"courses": [*problem.courses, course]}))
    console.print(f"[green]✓[/green] Kurs {course.id} hinzugefügt.")


@cmd_problem.command("add-lecture")
@click.argument("course_id")
@click.argument("title")
@click.argument("enrollment", type=int)
@click.option("--id", "entity_id", default=None, help="ID (Standard: nächste freie l<n>).")
@click.pass_obj
def problem_add_lecture(app: AppContext, course_id: str, title: str, enrollment: int,
                        entity_id: Optional[str]):
    """Fügt eine Vorlesung hinzu."""
    problem = _current_or_empty(app)
    entity_id = entity_id or generate_unique_id("l", [l.id for l in problem.lectures])
    try:
        lecture = Lecture(id=entity_id, course_id=course_id, title=title, enrollment=enrollment)
    except ValidationError as e:
        _print_model_error(e)
        sys.exit(1)
    if not any(c.id == course_id for c in problem.courses):
        console.print(f"[yellow]⚠ Kurs '{course_id}' existiert (noch) nicht.[/yellow]")
    _save_problem(app, problem.model_copy(update={"lectures": [*problem.lectures, lecture]}))
    console.print(f"[green]✓[/green] Vorlesung {lecture.id} hinzugefügt.")


@cmd_problem.command("add-room")
@click.argument("name")
@click.argument("capacity", type=int)
@click.option("--id", "entity_id", default=None, help="ID (Standard: nächste freie r<n>).")
@click.pass_obj
def problem_add_room(app: AppContext, name: str, capacity: int, entity_id: Optional[str]):
    """Fügt einen Raum hinzu."""
    problem = _current_or_empty(app)
    entity_id = entity_id or generate_unique_id("r", [r.id for r in problem.rooms])
    try:
        room = Room(id=entity_id, name=name, capacity=capacity)
    except ValidationError as e:
        _print_model_error(e)
        sys.exit(1)
    _save_problem(app, problem.model_copy(update={"rooms": [*problem.rooms, room]}))
    console.print(f"[green]✓[/green] Raum {room.id} hinzugefügt.")


@cmd_problem.command("add-slot")
@click.argument("day", type=click.Choice(DAY_CHOICES))
@click.argument("start")
@click.argument("end")
@click.option("--id", "entity_id", default=None, help="ID (Standard: nächste freie t<n>).")
@click.pass_obj
def problem_add_slot(app: AppContext, day: str, start: str, end: str, entity_id: Optional[str]):
    """Fügt einen Zeitslot hinzu (START/END im Format HH:mm)."""
    problem = _current_or_empty(app)
    entity_id = entity_id or generate_unique_id("t", [t.id for t in problem.time_slots])
    try:
        slot = TimeSlot(id=entity_id, day=day, start=start, end=end)
    except ValidationError as e:
        _print_model_error(e)
        sys.exit(1)
    _save_problem(app, problem.model_copy(update={"time_slots": [*problem.time_slots, slot]}))
    console.print(f"[green]✓[/green] Zeitslot {slot.id} ({slot.label}) hinzugefügt.")


_REMOVE_KINDS = {
    "course": "courses",
    "lecture": "lectures",
    "room": "rooms",
    "slot": "time_slots",
}


@cmd_problem.command("remove")
@click.argument("kind", type=click.Choice(list(_REMOVE_KINDS)))
@click.argument("entity_id")
@click.pass_obj
def problem_remove(app: AppContext, kind: str, entity_id: str):
    """Entfernt eine Entität. Verweise darauf bleiben bestehen (→ "Unknown")."""
    problem = _require_problem(app)
    attr = _REMOVE_KINDS[kind]
    items = getattr(problem, attr)
    remaining = [i for i in items if i.id != entity_id]
    if len(remaining) == len(items):
        console.print(f"[yellow]Keine Entität '{entity_id}' vom Typ {kind} gefunden.[/yellow]")
        sys.exit(1)
    _save_problem(app, problem.model_copy(update={attr: remaining}))
    console.print(f"[green]✓[/green] {kind} {entity_id} entfernt.")


# ─── CHECK ────────────────────────────────────────────────────────────────────

@cli.command("check")
@click.pass_obj
def cmd_check(app: AppContext):
    """Strukturprüfung und Kapazitäts-Hinweise für das aktuelle Problem."""
    problem = _require_problem(app)
    console.print(f"\n{problem.summary()}\n")
    report = validate_problem(problem)
    report.print_rich()
    _print_capacity_warnings(problem)
    sys.exit(0 if report.is_valid else 1)


# ─── GENERATE / REVALIDATE ────────────────────────────────────────────────────

@cli.command("generate")
@click.option("--validate/--no-validate", "run_validate", default=True,
              help="Ergebnis direkt vom Dienst validieren lassen.")
@click.pass_obj
def cmd_generate(app: AppContext, run_validate: bool):
    """Lässt den Dienst einen Stundenplan für das aktuelle Problem erzeugen."""
    problem = _require_problem(app)
    console.print(f"[bold]Anfrage an[/bold] {app.config.api.base_url} ...")
    try:
        with _make_client(app.config) as client:
            if run_validate:
                response = client.generate_and_validate(problem)
                schedule, validation = response.schedule, response.validation
            else:
                schedule, validation = client.generate(problem), None
    except ApiError as e:
        _print_api_error(e)
        sys.exit(1)

    app.store.save(StorageSlot.LAST_SCHEDULE, schedule)
    if validation is not None:
        app.store.save(StorageSlot.LAST_VALIDATION, validation)
    else:
        app.store.discard(StorageSlot.LAST_VALIDATION)

    console.print(
        f"[green]✓[/green] Stundenplan erzeugt: {len(schedule.assignments)} Zuweisungen, "
        f"Score {format_score(schedule.score)}"
    )
    if validation is not None:
        console.print(f"Validierung: [bold]{validation.status_label}[/bold] "
                      f"({len(validation.violations)} Verletzungen)")


@cli.command("revalidate")
@click.pass_obj
def cmd_revalidate(app: AppContext):
    """Lässt den gespeicherten Stundenplan erneut vom Dienst prüfen."""
    problem = _require_problem(app)
    schedule = _require_schedule(app)
    try:
        with _make_client(app.config) as client:
            validation = client.validate(problem, schedule)
    except ApiError as e:
        _print_api_error(e)
        sys.exit(1)

    app.store.save(StorageSlot.LAST_VALIDATION, validation)
    console.print(violations_table(validation))


# ─── SHOW ─────────────────────────────────────────────────────────────────────

@cli.group("show")
def cmd_show():
    """Ergebnis anzeigen (Raster, Liste, Verletzungen)."""


@cmd_show.command("grid")
@filter_options
@click.pass_obj
def show_grid(app: AppContext, course: Optional[str], room: Optional[str], day: Optional[str]):
    """Raster Zeitslot × Raum mit Konflikt- und Kapazitätsmarkern."""
    problem = _require_problem(app)
    schedule = _require_schedule(app)
    grid = build_grid(problem, schedule, _filters(course, room, day))
    if grid.is_empty:
        console.print("[dim]No data matches the current filters.[/dim]")
        return
    console.print(grid_table(grid))
    conflicts, overfull = grid.conflicts(), grid.over_capacity()
    if conflicts or overfull:
        console.print(
            f"[red]{len(conflicts)} Konflikt(e), {len(overfull)} Kapazitätsüberschreitung(en)[/red]"
        )


@cmd_show.command("list")
@filter_options
@click.option("--sort", "sort_field", type=click.Choice([f.value for f in SortField]),
              default=SortField.LECTURE_ID.value, help="Sortierspalte.")
@click.option("--desc", is_flag=True, default=False, help="Absteigend sortieren.")
@click.pass_obj
def show_list(app: AppContext, course: Optional[str], room: Optional[str], day: Optional[str],
              sort_field: str, desc: bool):
    """Tabellarische Liste aller Zuweisungen."""
    problem = _require_problem(app)
    schedule = _require_schedule(app)
    direction = SortDirection.DESC if desc else SortDirection.ASC
    rows = build_assignment_list(
        problem, schedule, _filters(course, room, day), SortField(sort_field), direction,
    )
    if not rows:
        console.print("[dim]No assignments match the current filters.[/dim]")
        return
    console.print(list_table(rows, sort_label=f"{sort_field} {direction.value}"))


@cmd_show.command("violations")
@click.option("--focus", type=int, default=None,
              help="Nummer einer Verletzung: zeigt das Raster gefiltert auf deren Kontext.")
@click.pass_obj
def show_violations(app: AppContext, focus: Optional[int]):
    """Verletzungen der letzten Validierung."""
    problem = _require_problem(app)
    validation = app.store.load(StorageSlot.LAST_VALIDATION)
    if validation is None:
        console.print(
            "[yellow]Keine Validierungsergebnisse vorhanden.[/yellow] "
            "Führen Sie [bold]python main.py revalidate[/bold] aus."
        )
        return
    console.print(violations_table(validation))
    if focus is None:
        return

    if not 1 <= focus <= len(validation.violations):
        console.print(f"[red]Keine Verletzung Nr. {focus}.[/red]")
        sys.exit(1)
    filters = filters_for_violation(validation.violations[focus - 1], problem)
    console.print(
        f"[dim]Filter: Kurs={filters.course_id or '–'}, Raum={filters.room_id or '–'}, "
        f"Tag={filters.day.value if filters.day else '–'}[/dim]"
    )
    schedule = app.store.load(StorageSlot.LAST_SCHEDULE)
    if schedule is not None:
        grid = build_grid(problem, schedule, filters)
        if not grid.is_empty:
            console.print(grid_table(grid))


@cmd_show.command("days")
@click.pass_obj
def show_days(app: AppContext):
    """Wochentage, die als --day Filter sinnvoll sind."""
    problem = _require_problem(app)
    days = available_days(problem)
    console.print(", ".join(d.value for d in days) if days else "[dim]Keine Zeitslots.[/dim]")


# ─── STORE ────────────────────────────────────────────────────────────────────

@cli.group("store")
def cmd_store():
    """Sitzungsspeicher verwalten."""


@cmd_store.command("clear")
@click.pass_obj
def store_clear(app: AppContext):
    """Löscht letzte Eingabe, letzten Plan und letzte Validierung."""
    app.store.clear()
    console.print("[green]✓[/green] Sitzungsspeicher geleert.")


def main():
    """Einstiegspunkt."""
    cli()


if __name__ == "__main__":
    main()
