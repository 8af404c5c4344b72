"""Datenmodell für eine Schulklasse (Pydantic v2)."""

from pydantic import BaseModel, field_validator

from models.level import Level


class SchoolClass(BaseModel):
    """Repräsentiert eine Klasse (z.B. "5-A")."""

    id: str
    name: str
    level: Level

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Klassenname darf nicht leer sein")
        if len(v) > 50:
            raise ValueError("höchstens 50 Zeichen erlaubt")
        return v
