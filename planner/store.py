"""Zentraler In-Memory-Speicher für Stammdaten und Klassen-Stundenpläne.

Alle Änderungen an Stundenplänen laufen über ``TimetableStore.update_slot``.
Der Speicher wird als Objekt an Views, Editor und Konflikt-Erkennung
weitergereicht; es gibt keinen globalen Zustand.
"""

import logging
from types import MappingProxyType
from typing import Mapping, Optional

from config.schema import TimeGridConfig
from models.school_class import SchoolClass
from models.school_data import TimetableData
from models.subject import Subject
from models.teacher import Teacher
from models.timetable import Timetable, TimetableSlot

logger = logging.getLogger(__name__)


class TimetableStore:
    """Hält Klassen, Fächer, Lehrkräfte und die Zuordnung Klasse → Stundenplan.

    Zusätzlich wird ein Basis-Stand (zuletzt geladen/gespeichert) vorgehalten,
    gegen den ``changed_slots`` die lokalen Änderungen ermittelt.
    """

    def __init__(self, data: TimetableData) -> None:
        self._classes: list[SchoolClass] = list(data.classes)
        self._subjects: list[Subject] = list(data.subjects)
        self._teachers: list[Teacher] = list(data.teachers)
        self._time_grid: TimeGridConfig = data.time_grid
        self._timetables: dict[str, Timetable] = dict(data.timetables)
        self._baseline: dict[str, Timetable] = dict(self._timetables)
        self._created_at = data.created_at

        self._class_map = {c.id: c for c in self._classes}
        self._subject_map = {s.id: s for s in self._subjects}
        self._teacher_map = {t.id: t for t in self._teachers}

    # ─── Stammdaten ───

    @property
    def classes(self) -> list[SchoolClass]:
        return list(self._classes)

    @property
    def subjects(self) -> list[Subject]:
        return list(self._subjects)

    @property
    def teachers(self) -> list[Teacher]:
        return list(self._teachers)

    @property
    def time_grid(self) -> TimeGridConfig:
        return self._time_grid

    @property
    def timetables(self) -> Mapping[str, Timetable]:
        """Schreibgeschützte Sicht auf Klasse → Stundenplan (Lade-Reihenfolge)."""
        return MappingProxyType(self._timetables)

    def get_class(self, class_id: str) -> Optional[SchoolClass]:
        return self._class_map.get(class_id)

    def get_subject(self, subject_id: str) -> Optional[Subject]:
        return self._subject_map.get(subject_id)

    def get_teacher(self, teacher_id: str) -> Optional[Teacher]:
        return self._teacher_map.get(teacher_id)

    def class_name(self, class_id: str) -> str:
        cls = self._class_map.get(class_id)
        return cls.name if cls else class_id

    def subject_name(self, subject_id: Optional[str]) -> str:
        if not subject_id:
            return ""
        subject = self._subject_map.get(subject_id)
        return subject.name if subject else subject_id

    def teacher_name(self, teacher_id: Optional[str]) -> str:
        if not teacher_id:
            return ""
        teacher = self._teacher_map.get(teacher_id)
        return teacher.name if teacher else teacher_id

    def is_break_slot(self, slot: TimetableSlot) -> bool:
        """Pause laut Slot-Markierung oder laut Zeitraster."""
        return slot.is_break or self._time_grid.is_break(slot.period)

    # ─── Zugriff & Änderung ───

    def get_timetable(self, class_id: str) -> Optional[Timetable]:
        return self._timetables.get(class_id)

    def get_slot(self, class_id: str, day: str, period: str) -> Optional[TimetableSlot]:
        timetable = self._timetables.get(class_id)
        if timetable is None:
            return None
        return timetable.get_slot(day, period)

    def update_slot(
        self,
        class_id: str,
        day: str,
        period: str,
        subject_id: Optional[str],
        teacher_id: Optional[str],
    ) -> None:
        """Ersetzt Fach und Lehrkraft des Slots (day, period) der Klasse.

        Unbekannte Klasse oder unbekannter Slot: keine Änderung. Alle übrigen
        Slots und Stundenpläne bleiben dieselben Objekte.
        """
        timetable = self._timetables.get(class_id)
        if timetable is None:
            logger.debug(f"update_slot: kein Stundenplan für {class_id}")
            return
        updated = timetable.with_assignment(day, period, subject_id, teacher_id)
        if updated is timetable:
            logger.debug(f"update_slot: Slot {day}/{period} in {class_id} existiert nicht")
            return
        self._timetables[class_id] = updated
        logger.info(
            f"Slot {class_id} {day}/{period} → Fach={subject_id} Lehrkraft={teacher_id}"
        )

    def teachers_for_subject(self, subject_id: str) -> list[Teacher]:
        """Lehrkräfte, die das Fach unterrichten dürfen (Reihenfolge der Stammdaten)."""
        return [t for t in self._teachers if t.can_teach(subject_id)]

    # ─── Änderungsverfolgung ───

    def changed_slots(self, class_id: Optional[str] = None) -> list[tuple[str, TimetableSlot]]:
        """Slots, deren Fach/Lehrkraft vom Basis-Stand abweicht.

        Pausen werden nie als Änderung gemeldet.
        """
        result: list[tuple[str, TimetableSlot]] = []
        class_ids = [class_id] if class_id is not None else list(self._timetables)
        for cid in class_ids:
            current = self._timetables.get(cid)
            if current is None:
                continue
            base = self._baseline.get(cid)
            if base is current:
                continue
            for slot in current.slots:
                if self.is_break_slot(slot):
                    continue
                original = base.get_slot(slot.day, slot.period) if base else None
                if (
                    original is None
                    or original.subject_id != slot.subject_id
                    or original.teacher_id != slot.teacher_id
                ):
                    result.append((cid, slot))
        return result

    @property
    def has_unsaved_changes(self) -> bool:
        return bool(self.changed_slots())

    def mark_saved(self, class_id: Optional[str] = None) -> None:
        """Setzt den Basis-Stand auf den aktuellen Stand (eine oder alle Klassen)."""
        if class_id is None:
            self._baseline = dict(self._timetables)
        elif class_id in self._timetables:
            self._baseline[class_id] = self._timetables[class_id]

    def snapshot(self) -> TimetableData:
        """Aktueller Stand als serialisierbarer Datensatz."""
        return TimetableData(
            classes=list(self._classes),
            subjects=list(self._subjects),
            teachers=list(self._teachers),
            time_grid=self._time_grid,
            timetables=dict(self._timetables),
            created_at=self._created_at,
        )
