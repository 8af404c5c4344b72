"""Datenmodell für eine Lehrkraft (Pydantic v2)."""

from pydantic import BaseModel, field_validator

from models.level import Level


class Teacher(BaseModel):
    """Repräsentiert eine einzelne Lehrkraft."""

    id: str
    name: str      # "Ayşe Yılmaz"
    branch: str    # Fachrichtung, z.B. "Matematik"
    level: Level

    @field_validator("name", "branch")
    @classmethod
    def _strip_and_check(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("mindestens 2 Zeichen erforderlich")
        if len(v) > 100:
            raise ValueError("höchstens 100 Zeichen erlaubt")
        return v

    def can_teach(self, branch: str, level: Level) -> bool:
        """True wenn Branş und Stufe zum Fach passen."""
        return self.branch == branch and self.level == level
