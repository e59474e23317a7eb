"""Slot-Editor: Zustandsautomat für die Bearbeitung eines einzelnen Slots.

Zustände: IDLE → EDITING → IDLE (Speichern oder Abbrechen).
Abgelehnte Speicherversuche lassen den Editor im Zustand EDITING, damit
Fach oder Lehrkraft geändert und erneut gespeichert werden kann.
"""

import logging
from enum import Enum
from typing import Optional

from analysis.conflicts import ConflictDetector
from models.teacher import Teacher
from planner.store import TimetableStore

logger = logging.getLogger(__name__)


class SlotEditError(Exception):
    """Basisklasse aller Editor-Fehler (lokal, nicht fatal)."""


class EditorStateError(SlotEditError):
    """Aktion ist im aktuellen Editor-Zustand nicht erlaubt."""


class SlotNotEditableError(SlotEditError):
    """Slot existiert nicht oder ist eine Pause."""


class InvalidSelectionError(SlotEditError):
    """Auswahl passt nicht zu den angebotenen Fächern bzw. Lehrkräften."""


class MissingSelectionError(SlotEditError):
    """Fach oder Lehrkraft wurde vor dem Speichern nicht gewählt."""


class TeacherConflictError(SlotEditError):
    """Die gewählte Lehrkraft ist zur selben Zeit bereits in einer anderen Klasse."""

    def __init__(self, teacher_id: str, class_id: str, class_name: str) -> None:
        self.teacher_id = teacher_id
        self.class_id = class_id
        self.class_name = class_name
        super().__init__(
            f"Lehrkraft ist in dieser Stunde bereits in {class_name} eingeplant."
        )


class EditorState(str, Enum):
    IDLE = "idle"
    EDITING = "editing"


class SlotEditor:
    """Bearbeitet Fach/Lehrkraft eines Slots mit Vorab-Konfliktprüfung."""

    def __init__(self, store: TimetableStore, detector: Optional[ConflictDetector] = None) -> None:
        self.store = store
        self.detector = detector or ConflictDetector(store)
        self._reset()

    def _reset(self) -> None:
        self.state = EditorState.IDLE
        self.class_id: Optional[str] = None
        self.day: Optional[str] = None
        self.period: Optional[str] = None
        self.selected_subject_id: Optional[str] = None
        self.selected_teacher_id: Optional[str] = None
        self.available_teachers: list[Teacher] = []

    def _require(self, state: EditorState) -> None:
        if self.state != state:
            raise EditorStateError(
                f"Aktion im Zustand '{self.state.value}' nicht möglich "
                f"(erwartet: '{state.value}')."
            )

    # ─── Übergänge ───

    def open(self, class_id: str, day: str, period: str) -> None:
        """IDLE → EDITING: Slot auswählen und aktuelle Belegung übernehmen."""
        self._require(EditorState.IDLE)
        slot = self.store.get_slot(class_id, day, period)
        if slot is None:
            raise SlotNotEditableError(
                f"Kein Slot {day}/{period} für {self.store.class_name(class_id)}."
            )
        if self.store.is_break_slot(slot):
            raise SlotNotEditableError(f"{period} ist eine Pause und kann nicht belegt werden.")

        self.state = EditorState.EDITING
        self.class_id = class_id
        self.day = day
        self.period = period
        self.selected_subject_id = slot.subject_id
        self.selected_teacher_id = slot.teacher_id
        self.available_teachers = (
            self.store.teachers_for_subject(slot.subject_id) if slot.subject_id else []
        )

    def select_subject(self, subject_id: str) -> None:
        """Fach wechseln: Lehrkraft-Auswahl wird geleert und neu berechnet."""
        self._require(EditorState.EDITING)
        if self.store.get_subject(subject_id) is None:
            raise InvalidSelectionError(f"Unbekanntes Fach '{subject_id}'.")
        self.selected_subject_id = subject_id
        self.selected_teacher_id = None
        self.available_teachers = self.store.teachers_for_subject(subject_id)

    def select_teacher(self, teacher_id: str) -> None:
        self._require(EditorState.EDITING)
        if teacher_id not in {t.id for t in self.available_teachers}:
            raise InvalidSelectionError(
                f"{self.store.teacher_name(teacher_id)} unterrichtet "
                f"{self.store.subject_name(self.selected_subject_id) or 'kein gewähltes Fach'} nicht."
            )
        self.selected_teacher_id = teacher_id

    def save(self) -> None:
        """EDITING → IDLE, sofern Auswahl vollständig und konfliktfrei ist."""
        self._require(EditorState.EDITING)
        if not self.selected_subject_id or not self.selected_teacher_id:
            raise MissingSelectionError("Bitte Fach und Lehrkraft auswählen.")

        conflict_class = self.detector.is_teacher_assigned_elsewhere(
            self.selected_teacher_id, self.day, self.period, self.class_id
        )
        if conflict_class is not None:
            logger.warning(
                f"Speichern abgelehnt: {self.selected_teacher_id} ist {self.day}/{self.period} "
                f"bereits in {conflict_class} eingeplant"
            )
            raise TeacherConflictError(
                self.selected_teacher_id, conflict_class, self.store.class_name(conflict_class)
            )

        self.store.update_slot(
            self.class_id, self.day, self.period,
            self.selected_subject_id, self.selected_teacher_id,
        )
        self._reset()

    def clear(self) -> None:
        """EDITING → IDLE: Belegung des Slots entfernen (Fach und Lehrkraft)."""
        self._require(EditorState.EDITING)
        self.store.update_slot(self.class_id, self.day, self.period, None, None)
        self._reset()

    def cancel(self) -> None:
        """EDITING → IDLE ohne Änderung am Speicher."""
        self._require(EditorState.EDITING)
        self._reset()
