"""Gemeinsame Formatierungs-Hilfsfunktionen für die Terminal-Ausgabe."""

from typing import Optional

# ─── Farben (Rich-Styles) ─────────────────────────────────────────────────────

STYLES: dict[str, str] = {
    "ok":        "green",
    "conflict":  "bold red",
    "capacity":  "red",
    "warning":   "yellow",
    "empty":     "dim italic",
    "header":    "bold cyan",
}


def format_time_slot(day: str, start: str, end: str, slot_id: Optional[str] = None) -> str:
    """"Mon 09:00–10:00 (t1)"."""
    suffix = f" ({slot_id})" if slot_id else ""
    return f"{day} {start}–{end}{suffix}"


def format_room_name(name: str, room_id: Optional[str] = None) -> str:
    """"Room A (r1)"."""
    suffix = f" ({room_id})" if room_id else ""
    return f"{name}{suffix}"


def format_lecture_chip(lecture_title: str, lecture_id: str, course_id: str) -> str:
    """"l1 — Intro (c1)"."""
    return f"{lecture_id} — {lecture_title} ({course_id})"


def format_score(score: Optional[float]) -> str:
    return "—" if score is None else f"{score:.2f}"
