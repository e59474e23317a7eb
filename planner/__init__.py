"""Planer-Kern: Stundenplan-Speicher und Slot-Editor."""

from .store import TimetableStore
from .editor import (
    EditorState,
    SlotEditor,
    SlotEditError,
    EditorStateError,
    SlotNotEditableError,
    InvalidSelectionError,
    MissingSelectionError,
    TeacherConflictError,
)

__all__ = [
    "TimetableStore",
    "EditorState",
    "SlotEditor",
    "SlotEditError",
    "EditorStateError",
    "SlotNotEditableError",
    "InvalidSelectionError",
    "MissingSelectionError",
    "TeacherConflictError",
]
