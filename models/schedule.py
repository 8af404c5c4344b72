"""Stundenplan einer Lehrkraft (Pydantic v2).

Ein Slot ist entweder leer (Schlüssel fehlt), eine feste Periode
(``FixedSlot``) oder eine Unterrichtsstunde (``TeachingSlot``).
Die Unterscheidung läuft über das Feld ``kind`` (discriminated union).
"""

from datetime import datetime
from typing import Annotated, Iterator, Literal, Optional, Union

from pydantic import BaseModel, Field

from models.timeslot import DAYS, PERIODS, FixedKind, TimeSlot

# Sentinel-IDs des gespeicherten Dokumentformats
FIXED_CLASS_ID = "fixed-period"


class FixedSlot(BaseModel):
    """Feste, unterrichtsfreie Periode (Frühstück, Mittagessen, ...)."""

    kind: Literal["fixed"] = "fixed"
    marker: FixedKind


class TeachingSlot(BaseModel):
    """Unterrichtsstunde.

    Im Lehrerplan ist ``class_id`` gesetzt (Lehrer implizit),
    in der Klassenansicht ``teacher_id`` (Klasse implizit).
    """

    kind: Literal["teaching"] = "teaching"
    subject_id: Optional[str] = None
    class_id: Optional[str] = None
    teacher_id: Optional[str] = None


Slot = Annotated[Union[FixedSlot, TeachingSlot], Field(discriminator="kind")]

# Tag → Periode → Slot
Grid = dict[str, dict[str, Slot]]


def iter_grid(grid: Grid) -> Iterator[tuple[TimeSlot, Slot]]:
    """Belegte Zellen in kanonischer Reihenfolge; unbekannte Tage/Perioden entfallen."""
    for day in DAYS:
        row = grid.get(day) or {}
        for period in PERIODS:
            slot = row.get(period)
            if slot is not None:
                yield TimeSlot(day, period), slot


class Schedule(BaseModel):
    """Wochenplan genau einer Lehrkraft."""

    id: str
    teacher_id: str
    grid: Grid = {}
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def get(self, day: str, period: str) -> Optional[Slot]:
        return self.grid.get(day, {}).get(period)

    def set(self, day: str, period: str, slot: Slot) -> None:
        self.grid.setdefault(day, {})[period] = slot

    def clear(self, day: str, period: str) -> None:
        self.grid.get(day, {}).pop(period, None)

    def is_free(self, day: str, period: str) -> bool:
        return self.get(day, period) is None

    def slots(self) -> Iterator[tuple[TimeSlot, Slot]]:
        return iter_grid(self.grid)

    def teaching_slots(self) -> Iterator[tuple[TimeSlot, TeachingSlot]]:
        for ts, slot in self.slots():
            if isinstance(slot, TeachingSlot) and slot.class_id:
                yield ts, slot

    def teaching_hours(self) -> int:
        """Unterrichtsstunden pro Woche (feste Perioden zählen nicht)."""
        return sum(1 for _ in self.teaching_slots())

    def daily_teaching_hours(self) -> dict[str, int]:
        hours = {day: 0 for day in DAYS}
        for ts, _ in self.teaching_slots():
            hours[ts.day] += 1
        return hours

    # ─── Speicherformat ───────────────────────────────────────────────────

    def to_wire(self) -> dict:
        """Dokumentformat mit Sentinel-IDs (``classId = "fixed-period"``)."""
        days: dict[str, dict] = {}
        for ts, slot in self.slots():
            days.setdefault(ts.day, {})[ts.period] = _slot_to_wire(slot)
        return {"id": self.id, "teacherId": self.teacher_id, "schedule": days}

    @classmethod
    def from_wire(cls, doc: dict) -> "Schedule":
        """Liest das Dokumentformat; leere Zellen (``null``) werden übersprungen."""
        schedule = cls(id=doc["id"], teacher_id=doc["teacherId"])
        for day, row in (doc.get("schedule") or {}).items():
            for period, raw in (row or {}).items():
                if raw:
                    schedule.set(day, period, _slot_from_wire(raw))
        return schedule


def _slot_to_wire(slot: Slot) -> dict:
    if isinstance(slot, FixedSlot):
        return {"classId": FIXED_CLASS_ID, "subjectId": slot.marker.value}
    doc = {"subjectId": slot.subject_id, "classId": slot.class_id}
    if slot.teacher_id:
        doc["teacherId"] = slot.teacher_id
    return doc


def _slot_from_wire(raw: dict) -> Slot:
    if raw.get("classId") == FIXED_CLASS_ID:
        return FixedSlot(marker=FixedKind(raw["subjectId"]))
    return TeachingSlot(
        subject_id=raw.get("subjectId"),
        class_id=raw.get("classId"),
        teacher_id=raw.get("teacherId"),
    )


def build_class_schedule(class_id: str, schedules: list[Schedule]) -> Grid:
    """Leitet die Klassenansicht aus allen Lehrerplänen ab.

    Bei (fehlerhafter) Doppelbelegung gewinnt der erste Plan in Listenreihenfolge.
    """
    grid: Grid = {}
    for schedule in schedules:
        for ts, slot in schedule.teaching_slots():
            if slot.class_id != class_id:
                continue
            row = grid.setdefault(ts.day, {})
            if ts.period not in row:
                row[ts.period] = TeachingSlot(
                    subject_id=slot.subject_id, teacher_id=schedule.teacher_id
                )
    return grid
