"""Wochenraster: Tage, Stunden und die festen (unterrichtsfreien) Perioden.

Das Raster ist für alle Stufen gleich; nur die Lage der festen Perioden
hängt von der Stufe ab:

  prep                 Ortaokul: Vorbereitung / sonst: Frühstück
  1
  breakfast            nur Ortaokul: Frühstück nach der 1. Stunde
  2 .. 4
  5                    İlkokul/Anaokulu: Mittagessen
  6                    Ortaokul: Mittagessen
  7, 8
  afternoon-breakfast  Nachmittagsimbiss (alle Stufen)
  9, 10
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from models.level import Level

DAYS: tuple[str, ...] = ("Pazartesi", "Salı", "Çarşamba", "Perşembe", "Cuma")

PERIODS: tuple[str, ...] = (
    "prep", "1", "breakfast", "2", "3", "4", "5", "6", "7", "8",
    "afternoon-breakfast", "9", "10",
)


class FixedKind(str, Enum):
    """Art einer festen Periode (Wert = historischer Marker im Speicherformat)."""

    PREP = "fixed-prep"
    BREAKFAST = "fixed-breakfast"
    LUNCH = "fixed-lunch"
    AFTERNOON_BREAKFAST = "fixed-afternoon-breakfast"


FIXED_LABELS: dict[FixedKind, str] = {
    FixedKind.PREP: "Hazırlık",
    FixedKind.BREAKFAST: "Kahvaltı",
    FixedKind.LUNCH: "Yemek",
    FixedKind.AFTERNOON_BREAKFAST: "İkindi Kahvaltısı",
}


def period_number(period: str) -> Optional[int]:
    """Stundennummer einer nummerierten Periode, sonst None."""
    return int(period) if period.isdigit() else None


def lunch_period(level: Level) -> str:
    """Mittagsperiode: 6 für Ortaokul, 5 für İlkokul/Anaokulu."""
    return "6" if level == Level.ORTAOKUL else "5"


def fixed_marker(period: str, level: Level) -> Optional[FixedKind]:
    """Gibt den festen Marker der Periode für die Stufe zurück (None = keiner)."""
    if period == "prep":
        return FixedKind.PREP if level == Level.ORTAOKUL else FixedKind.BREAKFAST
    if period == "breakfast":
        return FixedKind.BREAKFAST if level == Level.ORTAOKUL else None
    if period == "afternoon-breakfast":
        return FixedKind.AFTERNOON_BREAKFAST
    if period == lunch_period(level):
        return FixedKind.LUNCH
    return None


def is_fixed_period(period: str, level: Level) -> bool:
    return fixed_marker(period, level) is not None


def is_teaching_period(period: str, level: Level) -> bool:
    """Nur nummerierte Perioden außerhalb der Mittagspause sind belegbar."""
    return period_number(period) is not None and not is_fixed_period(period, level)


def teaching_periods(level: Level) -> list[str]:
    return [p for p in PERIODS if is_teaching_period(p, level)]


@dataclass(frozen=True)
class TimeSlot:
    """Eine Zelle im Wochenraster (Tag + Periode).

    Immutable (frozen=True) damit es als Dict-Key / Set-Element nutzbar ist.
    """

    day: str
    period: str

    @property
    def number(self) -> Optional[int]:
        return period_number(self.period)

    @property
    def is_valid(self) -> bool:
        """True wenn Tag und Periode zum festen Raster gehören."""
        return self.day in DAYS and self.period in PERIODS

    def __str__(self) -> str:
        return f"{self.day} {self.period}."
