"""Datenmodell für ein Unterrichtsfach (Pydantic v2)."""

from pydantic import BaseModel, ConfigDict


class Subject(BaseModel):
    """Repräsentiert ein Unterrichtsfach."""

    model_config = ConfigDict(frozen=True)

    id: str     # "sub1"
    name: str   # "Mathematics"
