"""Erkennung von Lehrer-Doppelbelegungen über alle Klassen-Stundenpläne.

Zwei Prüfungen:
- Index/Report: alle (Tag, Stunde, Lehrkraft)-Tripel mit mehr als einer Klasse
- Vorab-Prüfung vor dem Speichern eines Slots (``is_teacher_assigned_elsewhere``)

Der Index wird bei jedem Aufruf vollständig neu aufgebaut.
"""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel

if TYPE_CHECKING:
    from planner.store import TimetableStore

ConflictIndex = dict[tuple[str, str, str], list[str]]


class ConflictGroup(BaseModel):
    """Eine Lehrkraft, die zur selben Zeit in mehreren Klassen eingeplant ist."""

    day: str
    period: str
    teacher_id: str
    class_ids: list[str]   # Reihenfolge wie im Speicher, mindestens 2 Einträge


class ConflictReport(BaseModel):
    """Alle gefundenen Konfliktgruppen."""

    groups: list[ConflictGroup]

    @property
    def has_conflicts(self) -> bool:
        return bool(self.groups)

    def print_rich(self, store: TimetableStore) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        status = (
            "[bold green]✓ KEINE KONFLIKTE[/bold green]"
            if not self.has_conflicts
            else f"[bold red]✗ {len(self.groups)} KONFLIKT(E)[/bold red]"
        )
        console.print(Panel(status, title="Lehrer-Konflikte", border_style="cyan"))
        if not self.has_conflicts:
            return

        table = Table(box=box.ROUNDED, show_lines=True)
        table.add_column("Tag", width=10)
        table.add_column("Stunde", width=10)
        table.add_column("Lehrkraft", width=18)
        table.add_column("Klassen")
        for g in self.groups:
            table.add_row(
                g.day,
                g.period,
                store.teacher_name(g.teacher_id),
                ", ".join(f"{store.class_name(c)} ({c})" for c in g.class_ids),
            )
        console.print(table)


class ConflictDetector:
    """Ermittelt Doppelbelegungen von Lehrkräften im aktuellen Speicher-Stand."""

    def __init__(self, store: TimetableStore) -> None:
        self.store = store

    def build_index(self) -> ConflictIndex:
        """(Tag, Stunde, Lehrkraft) → Klassen, über alle belegten Nicht-Pausen-Slots."""
        index: ConflictIndex = defaultdict(list)
        for class_id, timetable in self.store.timetables.items():
            for slot in timetable.slots:
                if not slot.teacher_id or self.store.is_break_slot(slot):
                    continue
                classes = index[(slot.day, slot.period, slot.teacher_id)]
                if class_id not in classes:
                    classes.append(class_id)
        return dict(index)

    def find_conflicts(self, index: Optional[ConflictIndex] = None) -> ConflictReport:
        """Alle Tripel mit mehr als einer Klasse, sortiert nach Raster-Reihenfolge."""
        if index is None:
            index = self.build_index()
        tg = self.store.time_grid
        day_order = {d: i for i, d in enumerate(tg.day_names)}
        period_order = {p: i for i, p in enumerate(tg.period_names)}

        groups = [
            ConflictGroup(day=day, period=period, teacher_id=teacher_id,
                          class_ids=list(class_ids))
            for (day, period, teacher_id), class_ids in index.items()
            if len(class_ids) > 1
        ]
        groups.sort(key=lambda g: (
            day_order.get(g.day, len(day_order)),
            period_order.get(g.period, len(period_order)),
            g.teacher_id,
        ))
        return ConflictReport(groups=groups)

    def has_conflict(
        self,
        day: str,
        period: str,
        teacher_id: Optional[str],
        index: Optional[ConflictIndex] = None,
    ) -> bool:
        if not teacher_id:
            return False
        if index is None:
            index = self.build_index()
        return len(index.get((day, period, teacher_id), [])) > 1

    def classes_with_conflicts(self, index: Optional[ConflictIndex] = None) -> set[str]:
        """IDs aller Klassen, die an mindestens einem Konflikt beteiligt sind."""
        if index is None:
            index = self.build_index()
        result: set[str] = set()
        for class_ids in index.values():
            if len(class_ids) > 1:
                result.update(class_ids)
        return result

    def is_teacher_assigned_elsewhere(
        self,
        teacher_id: str,
        day: str,
        period: str,
        exclude_class_id: str,
    ) -> Optional[str]:
        """Vorab-Prüfung: erste andere Klasse, in der die Lehrkraft bei (day, period) eingeplant ist.

        Die Klasse ``exclude_class_id`` wird übersprungen und daher nie
        zurückgegeben. Pausen-Slots zählen nicht.
        """
        for class_id, timetable in self.store.timetables.items():
            if class_id == exclude_class_id:
                continue
            slot = timetable.get_slot(day, period)
            if slot is None or self.store.is_break_slot(slot):
                continue
            if slot.teacher_id == teacher_id:
                return class_id
        return None
