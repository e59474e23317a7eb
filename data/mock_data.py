"""Demo-Datenquelle für die Stundenplan-Verwaltung.

Erzeugt deterministische Demo-Daten mit absichtlichen Lehrer-Konflikten,
damit die schulweite Konfliktansicht sofort etwas zeigt.

Absichtliche Konflikte:
  1. teacher1 (Mathematics) Monday / Period 1 in class1 und class2
  2. teacher5 (Computer Science) Tuesday / Period 3 in class3 und class4
  3. teacher3 (Science) Thursday / Period 8 in class1 und class5

Alle übrigen Unterrichtsslots werden nach einer festen Formel aus Klassen-,
Tages- und Stundenindex belegt; daraus können weitere Konflikte entstehen.
"""

import logging
import time
from typing import Optional

from config.schema import TimeGridConfig
from data.source import DataSource, SaveResult
from models.school_class import SchoolClass
from models.school_data import TimetableData
from models.subject import Subject
from models.teacher import Teacher
from models.timetable import Timetable, TimetableSlot
from planner.store import TimetableStore

logger = logging.getLogger(__name__)

# ─── Stammdaten ───────────────────────────────────────────────────────────────

MOCK_CLASSES: list[SchoolClass] = [
    SchoolClass(id="class1", name="Class 6A"),
    SchoolClass(id="class2", name="Class 7B"),
    SchoolClass(id="class3", name="Class 8C"),
    SchoolClass(id="class4", name="Class 9D"),
    SchoolClass(id="class5", name="Class 10E"),
]

MOCK_SUBJECTS: list[Subject] = [
    Subject(id="sub1", name="Mathematics"),
    Subject(id="sub2", name="English"),
    Subject(id="sub3", name="Science"),
    Subject(id="sub4", name="Social Studies"),
    Subject(id="sub5", name="Physical Education"),
    Subject(id="sub6", name="Computer Science"),
]

MOCK_TEACHERS: list[Teacher] = [
    Teacher(id="teacher1", name="Mr. Johnson", subjects=["sub1", "sub3"]),
    Teacher(id="teacher2", name="Mrs. Smith", subjects=["sub2", "sub4"]),
    Teacher(id="teacher3", name="Ms. Davis", subjects=["sub3", "sub6"]),
    Teacher(id="teacher4", name="Mr. Wilson", subjects=["sub4", "sub5"]),
    Teacher(id="teacher5", name="Mrs. Brown", subjects=["sub1", "sub6"]),
]

# (Tag, Stunde) → (betroffene Klassen, Fach, Lehrkraft)
SEEDED_CONFLICTS: dict[tuple[str, str], tuple[tuple[str, ...], str, str]] = {
    ("Monday", "Period 1"): (("class1", "class2"), "sub1", "teacher1"),
    ("Tuesday", "Period 3"): (("class3", "class4"), "sub6", "teacher5"),
    ("Thursday", "Period 8"): (("class1", "class5"), "sub3", "teacher3"),
}


class MockDataSource(DataSource):
    """Liefert die Demo-Daten; Speichern bleibt lokal."""

    name = "mock"

    def __init__(self, time_grid: TimeGridConfig, delay_seconds: float = 0.0) -> None:
        self.time_grid = time_grid
        self.delay_seconds = delay_seconds

    # ─── Stundenpläne ─────────────────────────────────────────────────────────

    def _assignment(
        self, class_number: int, class_id: str, day_idx: int, day: str,
        period_idx: int, period: str,
    ) -> tuple[Optional[str], Optional[str]]:
        """Fach und Lehrkraft für einen Unterrichtsslot."""
        seeded = SEEDED_CONFLICTS.get((day, period))
        if seeded is not None and class_id in seeded[0]:
            return seeded[1], seeded[2]

        subject = MOCK_SUBJECTS[(class_number + period_idx) % len(MOCK_SUBJECTS)]
        options = [t for t in MOCK_TEACHERS if t.can_teach(subject.id)]
        if not options:
            return subject.id, None
        teacher = options[(class_number + day_idx + period_idx) % len(options)]
        return subject.id, teacher.id

    def _build_timetable(self, class_number: int, class_id: str) -> Timetable:
        breaks = self.time_grid.break_periods
        slots: list[TimetableSlot] = []
        for day_idx, day in enumerate(self.time_grid.day_names):
            for period_idx, period in enumerate(self.time_grid.period_names):
                if period in breaks:
                    slots.append(TimetableSlot(day=day, period=period, is_break=True))
                    continue
                subject_id, teacher_id = self._assignment(
                    class_number, class_id, day_idx, day, period_idx, period
                )
                slots.append(TimetableSlot(
                    day=day, period=period,
                    subject_id=subject_id, teacher_id=teacher_id,
                ))
        return Timetable(class_id=class_id, slots=tuple(slots))

    # ─── Schnittstelle ────────────────────────────────────────────────────────

    def load(self) -> TimetableData:
        if self.delay_seconds:
            time.sleep(self.delay_seconds)
        timetables = {
            cls.id: self._build_timetable(number, cls.id)
            for number, cls in enumerate(MOCK_CLASSES, start=1)
        }
        return TimetableData(
            classes=list(MOCK_CLASSES),
            subjects=list(MOCK_SUBJECTS),
            teachers=list(MOCK_TEACHERS),
            time_grid=self.time_grid,
            timetables=timetables,
        )

    def save(self, store: TimetableStore, class_id: Optional[str] = None) -> SaveResult:
        changed = store.changed_slots(class_id)
        logger.info(f"Demo-Daten: {len(changed)} geänderte Slot(s) werden nicht übertragen")
        return SaveResult(
            message="Stundenplan gespeichert (Demo-Daten, nur lokal).",
            saved_slots=len(changed),
        )
