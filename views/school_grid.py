"""Schulweite Kompaktansicht: alle Klassen nebeneinander, Konflikte markiert.

Zeilen sind die Stunden eines Tages, Spalten die Klassen. Die Ansicht hält
keinen eigenen Stundenplan-Zustand; der Konflikt-Index wird bei jedem
Rendern neu aus dem Speicher aufgebaut.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Optional

from analysis.conflicts import ConflictDetector
from views.class_grid import format_slot, NO_TIMETABLE_TEXT

if TYPE_CHECKING:
    from models.school_class import SchoolClass
    from planner.store import TimetableStore


@dataclass
class CellSelection:
    """Ergebnis eines Klicks auf eine Zelle der schulweiten Ansicht."""

    class_id: str
    day: str
    period: str
    editable: bool
    conflict: bool = False
    # Alle Klassen der Konfliktgruppe (inkl. class_id), sonst leer
    conflict_class_ids: list[str] = field(default_factory=list)


class SchoolGridView:
    """Kompaktes Raster aller Klassen mit Konfliktmarkierung und Klassen-Auswahl.

    ``on_class_select`` wird mit der Klassen-ID aufgerufen, wenn ein
    Klassenkopf oder eine Konflikt-Zelle ausgewählt wird.
    """

    def __init__(
        self,
        store: "TimetableStore",
        detector: Optional[ConflictDetector] = None,
        on_class_select: Optional[Callable[[str], None]] = None,
        conflicts_only: bool = False,
    ) -> None:
        self.store = store
        self.detector = detector or ConflictDetector(store)
        self.on_class_select = on_class_select
        self.conflicts_only = conflicts_only

    def visible_classes(self) -> list["SchoolClass"]:
        """Alle Klassen bzw. nur Klassen mit mindestens einem Konflikt."""
        if not self.conflicts_only:
            return self.store.classes
        involved = self.detector.classes_with_conflicts()
        return [c for c in self.store.classes if c.id in involved]

    def header(self) -> list[str]:
        return ["Stunde", "Uhrzeit"] + [c.name for c in self.visible_classes()]

    def render_day_rows(self, day: str) -> list[list[str]]:
        """Tabellenzeilen eines Tages: [Stunde, Uhrzeit, Zelle je sichtbarer Klasse]."""
        index = self.detector.build_index()
        classes = self.visible_classes()
        rows: list[list[str]] = []
        for period in self.store.time_grid.periods:
            cells = [period.name, period.time_label]
            for cls in classes:
                timetable = self.store.get_timetable(cls.id)
                if timetable is None:
                    cells.append(NO_TIMETABLE_TEXT)
                    continue
                slot = timetable.get_slot(day, period.name)
                conflict = self.detector.has_conflict(
                    day, period.name, slot.teacher_id if slot else None, index=index
                ) and not (slot is None or self.store.is_break_slot(slot))
                cells.append(format_slot(slot, self.store, conflict))
            rows.append(cells)
        return rows

    # ─── Auswahl ───

    def select_class(self, class_id: str) -> str:
        """Klassenkopf gewählt: Klassen-ID an die einbettende Ansicht melden."""
        if self.on_class_select is not None:
            self.on_class_select(class_id)
        return class_id

    def select_cell(self, class_id: str, day: str, period: str) -> CellSelection:
        """Zelle gewählt: beschreibt die Zelle und meldet Konflikt-Zellen weiter."""
        slot = self.store.get_slot(class_id, day, period)
        editable = slot is not None and not self.store.is_break_slot(slot)
        selection = CellSelection(class_id=class_id, day=day, period=period, editable=editable)
        if not editable or not slot.teacher_id:
            return selection

        index = self.detector.build_index()
        group = index.get((day, period, slot.teacher_id), [])
        if len(group) > 1:
            selection.conflict = True
            selection.conflict_class_ids = list(group)
            self.select_class(class_id)
        return selection
