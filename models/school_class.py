"""Datenmodell für eine Schulklasse (Pydantic v2)."""

from pydantic import BaseModel, ConfigDict


class SchoolClass(BaseModel):
    """Repräsentiert eine Klasse bzw. Teilklasse (z.B. "Class 6A")."""

    model_config = ConfigDict(frozen=True)

    id: str     # "class1"
    name: str   # "Class 6A"
