"""Renderer für den Wochenplan einer einzelnen Klasse.

Wird von den CLI-Befehlen ``show`` und ``edit`` verwendet.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from analysis.conflicts import ConflictIndex
    from models.timetable import TimetableSlot
    from planner.store import TimetableStore

NO_TIMETABLE_TEXT = "Kein Stundenplan verfügbar."
CONFLICT_MARK = "⚠"


def format_slot(
    slot: Optional["TimetableSlot"],
    store: "TimetableStore",
    conflict: bool = False,
) -> str:
    """Zelleninhalt: "Fach\\nLehrkraft", "—" für unbelegte Slots, "Pause" für Pausen."""
    if slot is None:
        return "—"
    if store.is_break_slot(slot):
        return "Pause"
    if not slot.subject_id and not slot.teacher_id:
        return "—"
    text = f"{store.subject_name(slot.subject_id) or '?'}\n{store.teacher_name(slot.teacher_id) or '?'}"
    if conflict:
        text = f"{CONFLICT_MARK} {text}"
    return text


def render_class_rows(
    class_id: str,
    store: "TimetableStore",
    index: Optional["ConflictIndex"] = None,
) -> list[list[str]]:
    """Gibt Tabellenzeilen für den Klassen-Stundenplan zurück.

    Jede Zeile: [Stunde, Uhrzeit, Tag 1, ..., Tag n]. Pausen erscheinen als
    eigene Zeilen. Ohne Stundenplan für die Klasse: leere Liste (die Ansicht
    zeigt dann ``NO_TIMETABLE_TEXT``). Mit ``index`` werden Konflikt-Zellen markiert.
    """
    timetable = store.get_timetable(class_id)
    if timetable is None:
        return []

    tg = store.time_grid
    rows: list[list[str]] = []
    for period in tg.periods:
        if period.is_break:
            rows.append([period.name, period.time_label] + ["─" * 8] * len(tg.day_names))
            continue
        cells = [period.name, period.time_label]
        for day in tg.day_names:
            slot = timetable.get_slot(day, period.name)
            conflict = bool(
                index is not None
                and slot is not None
                and slot.teacher_id
                and len(index.get((day, period.name, slot.teacher_id), [])) > 1
            )
            cells.append(format_slot(slot, store, conflict))
        rows.append(cells)
    return rows
