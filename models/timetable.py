"""Datenmodell für Stundenplan-Slots und Klassen-Stundenpläne (Pydantic v2)."""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from config.schema import TimeGridConfig


class TimetableSlot(BaseModel):
    """Eine Zelle (Tag, Stunde) im Wochenplan einer Klasse.

    Immutable, damit unveränderte Slots bei Updates geteilt werden können.
    Fach und Lehrkraft werden vom Editor immer gemeinsam gesetzt.
    """

    model_config = ConfigDict(frozen=True)

    day: str                          # "Monday"
    period: str                       # "Period 1"
    subject_id: Optional[str] = None
    teacher_id: Optional[str] = None
    is_break: bool = False

    @property
    def key(self) -> tuple[str, str]:
        return (self.day, self.period)

    @property
    def is_assigned(self) -> bool:
        """True wenn Fach und Lehrkraft gesetzt sind."""
        return self.subject_id is not None and self.teacher_id is not None


class Timetable(BaseModel):
    """Vollständiger Wochenplan einer Klasse: ein Slot pro (Tag, Stunde)."""

    model_config = ConfigDict(frozen=True)

    class_id: str
    slots: tuple[TimetableSlot, ...] = ()

    def get_slot(self, day: str, period: str) -> Optional[TimetableSlot]:
        for slot in self.slots:
            if slot.day == day and slot.period == period:
                return slot
        return None

    def with_assignment(
        self,
        day: str,
        period: str,
        subject_id: Optional[str],
        teacher_id: Optional[str],
    ) -> "Timetable":
        """Gibt einen neuen Plan zurück, in dem nur der Slot (day, period) ersetzt ist.

        Alle anderen Slot-Objekte werden unverändert übernommen. Existiert der
        Slot nicht, wird ``self`` zurückgegeben.
        """
        changed = False
        slots: list[TimetableSlot] = []
        for slot in self.slots:
            if not changed and slot.day == day and slot.period == period:
                slot = slot.model_copy(
                    update={"subject_id": subject_id, "teacher_id": teacher_id}
                )
                changed = True
            slots.append(slot)
        if not changed:
            return self
        return self.model_copy(update={"slots": tuple(slots)})

    def missing_keys(self, time_grid: TimeGridConfig) -> list[tuple[str, str]]:
        """(Tag, Stunde)-Paare des Rasters, für die kein Slot existiert."""
        present = {s.key for s in self.slots}
        return [
            (day, period)
            for day in time_grid.day_names
            for period in time_grid.period_names
            if (day, period) not in present
        ]

    def duplicate_keys(self) -> list[tuple[str, str]]:
        seen: set[tuple[str, str]] = set()
        duplicates: list[tuple[str, str]] = []
        for slot in self.slots:
            if slot.key in seen and slot.key not in duplicates:
                duplicates.append(slot.key)
            seen.add(slot.key)
        return duplicates


def build_empty_timetable(class_id: str, time_grid: TimeGridConfig) -> Timetable:
    """Erzeugt einen leeren Plan mit allen (Tag, Stunde)-Kombinationen des Rasters."""
    breaks = time_grid.break_periods
    slots = [
        TimetableSlot(day=day, period=period, is_break=period in breaks)
        for day in time_grid.day_names
        for period in time_grid.period_names
    ]
    return Timetable(class_id=class_id, slots=tuple(slots))
