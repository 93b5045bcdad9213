"""Renderer für Raster-, Listen- und Verletzungsansicht im Terminal (Rich).

Wird von den ``show``-Befehlen in main.py verwendet. Die Zeilen-Funktionen
liefern reine Strings, damit sie ohne Konsole testbar sind.
"""

from typing import Optional, TYPE_CHECKING

from rich import box
from rich.table import Table

from analysis.lookup import UNKNOWN_LABEL
from export.helpers import (
    STYLES,
    format_lecture_chip,
    format_room_name,
    format_time_slot,
)

if TYPE_CHECKING:
    from analysis.grid import GridCell, ScheduleGrid
    from analysis.listing import AssignmentRow
    from models.problem import SchedulingProblem
    from models.validation import ValidationResult


# ─── Raster ───────────────────────────────────────────────────────────────────

def render_cell(cell: "GridCell") -> str:
    """Zelleninhalt: Chips der Belegung plus Konflikt-/Kapazitätsmarker."""
    if cell.is_empty:
        return "Empty"
    lines = []
    for o in cell.occupants:
        title = o.lecture.title if o.lecture else UNKNOWN_LABEL
        lecture_id = o.lecture.id if o.lecture else "?"
        course_id = o.course.id if o.course else "?"
        lines.append(format_lecture_chip(title, lecture_id, course_id))
        lines.append(f"  Enrollment: {o.enrollment}")
    flags = []
    if cell.has_conflict:
        flags.append("Conflict")
    if cell.is_over_capacity:
        flags.append("Over capacity")
    if flags:
        lines.append("⚠ " + " & ".join(flags))
    return "\n".join(lines)


def render_grid_rows(grid: "ScheduleGrid") -> list[list[str]]:
    """Tabellenzeilen: [Zeitslot, Zelle Raum 1, Zelle Raum 2, ...]."""
    rows: list[list[str]] = []
    for slot in grid.time_slots:
        cells = [format_time_slot(slot.day.value, slot.start, slot.end, slot.id)]
        cells.extend(render_cell(c) for c in grid.row(slot.id))
        rows.append(cells)
    return rows


def grid_table(grid: "ScheduleGrid") -> Table:
    table = Table(title="Schedule Grid", box=box.ROUNDED, show_lines=True)
    table.add_column("Time Slot", style="bold", no_wrap=True)
    for room in grid.rooms:
        table.add_column(f"{format_room_name(room.name, room.id)}\nCapacity: {room.capacity}")

    for slot, row in zip(grid.time_slots, render_grid_rows(grid)):
        styled = [row[0]]
        for cell, text in zip(grid.row(slot.id), row[1:]):
            if cell.has_conflict or cell.is_over_capacity:
                styled.append(f"[{STYLES['conflict']}]{text}[/]")
            elif cell.is_empty:
                styled.append(f"[{STYLES['empty']}]{text}[/]")
            else:
                styled.append(text)
        table.add_row(*styled)
    return table


# ─── Liste ────────────────────────────────────────────────────────────────────

LIST_COLUMNS = [
    "Lecture ID", "Lecture Title", "Course", "Enrollment",
    "Room", "Room Capacity", "Day", "Time Slot",
]


def render_list_rows(rows: list["AssignmentRow"]) -> list[list[str]]:
    result: list[list[str]] = []
    for r in rows:
        course = r.course_label + (f" ({r.course.id})" if r.course else "")
        room = r.room_label + (f" ({r.room.id})" if r.room else "")
        slot = r.time_label + (f" ({r.time_slot.id})" if r.time_slot else "")
        result.append([
            r.lecture_label,
            r.lecture_title,
            course,
            str(r.enrollment),
            room,
            str(r.room_capacity),
            r.day_label,
            slot,
        ])
    return result


def list_table(rows: list["AssignmentRow"], sort_label: Optional[str] = None) -> Table:
    title = "Assignment List" + (f" (sortiert: {sort_label})" if sort_label else "")
    table = Table(title=title, box=box.ROUNDED)
    for col in LIST_COLUMNS:
        table.add_column(col)
    for r, cells in zip(rows, render_list_rows(rows)):
        if r.is_over_capacity:
            cells[3] = f"[{STYLES['capacity']}]{cells[3]}[/]"
            cells[5] = f"[{STYLES['capacity']}]{cells[5]}[/]"
        table.add_row(*cells)
    return table


# ─── Verletzungen ─────────────────────────────────────────────────────────────

def violations_table(validation: "ValidationResult") -> Table:
    """Nummerierte Tabelle; die Nummer dient als Referenz für ``--focus``."""
    status = {
        "valid": f"[{STYLES['ok']}]Valid[/]",
        "valid with warnings": f"[{STYLES['warning']}]Valid with Warnings[/]",
        "invalid": f"[{STYLES['conflict']}]Invalid[/]",
    }[validation.status_label]
    count = len(validation.violations)
    table = Table(
        title=f"Validation Results – {status} ({count} violation{'s' if count != 1 else ''})",
        box=box.ROUNDED,
    )
    table.add_column("#", justify="right")
    table.add_column("Code", style="bold")
    table.add_column("Meldung")
    table.add_column("Vorlesung")
    table.add_column("Raum")
    table.add_column("Zeitslot")
    for i, v in enumerate(validation.violations, start=1):
        table.add_row(
            str(i), v.code, v.message,
            v.lecture_id or "", v.room_id or "", v.time_slot_id or "",
        )
    return table


# ─── Problem ──────────────────────────────────────────────────────────────────

def problem_tables(problem: "SchedulingProblem") -> list[Table]:
    """Je eine Tabelle für Kurse, Vorlesungen, Räume und Zeitslots."""
    courses = Table(title="Kurse", box=box.SIMPLE)
    courses.add_column("ID", style="bold")
    courses.add_column("Name")
    for c in problem.courses:
        courses.add_row(c.id, c.name)

    lectures = Table(title="Vorlesungen", box=box.SIMPLE)
    for col in ("ID", "Kurs", "Titel", "Teilnehmende"):
        lectures.add_column(col)
    for l in problem.lectures:
        lectures.add_row(l.id, l.course_id, l.title, str(l.enrollment))

    rooms = Table(title="Räume", box=box.SIMPLE)
    for col in ("ID", "Name", "Kapazität"):
        rooms.add_column(col)
    for r in problem.rooms:
        rooms.add_row(r.id, r.name, str(r.capacity))

    slots = Table(title="Zeitslots", box=box.SIMPLE)
    for col in ("ID", "Tag", "Beginn", "Ende"):
        slots.add_column(col)
    for t in problem.time_slots:
        slots.add_row(t.id, t.day.value, t.start, t.end)

    return [courses, lectures, rooms, slots]
