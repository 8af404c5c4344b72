"""Datenmodell für ein Unterrichtsfach (Pydantic v2)."""

from pydantic import BaseModel, Field, field_validator

from models.level import Level


class Subject(BaseModel):
    """Ein Fach auf einer bestimmten Stufe mit Soll-Wochenstunden pro Klasse."""

    id: str
    name: str
    branch: str
    level: Level
    weekly_hours: int = Field(ge=1, le=10)

    @field_validator("name", "branch")
    @classmethod
    def _strip_and_check(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("mindestens 2 Zeichen erforderlich")
        if len(v) > 100:
            raise ValueError("höchstens 100 Zeichen erlaubt")
        return v
