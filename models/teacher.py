"""Datenmodell für eine Lehrkraft (Pydantic v2)."""

from pydantic import BaseModel, ConfigDict


class Teacher(BaseModel):
    """Repräsentiert eine einzelne Lehrkraft."""

    model_config = ConfigDict(frozen=True)

    id: str                 # "teacher1"
    name: str               # "Mr. Johnson"
    subjects: list[str] = []  # IDs der Fächer, für die die Lehrkraft qualifiziert ist

    def can_teach(self, subject_id: str) -> bool:
        return subject_id in self.subjects
