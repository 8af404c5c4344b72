"""Konfliktprüfung für eine einzelne Zelle bei manueller Bearbeitung.

Zwei Blickrichtungen:
  teacher  – Lehrerplan wird bearbeitet: Hat die Klasse in dieser Zelle
             schon eine andere Lehrkraft?
  class    – Klassenplan wird bearbeitet: Ist die Lehrkraft in dieser
             Zelle schon anderweitig belegt?
"""

import logging
from enum import Enum
from typing import Iterable, Optional, Union

from pydantic import BaseModel

from models.schedule import FixedSlot, Schedule, TeachingSlot
from models.school_class import SchoolClass
from models.teacher import Teacher
from models.timeslot import FIXED_LABELS, TimeSlot

logger = logging.getLogger(__name__)

UNKNOWN_CLASS = "Bilinmeyen Sınıf"
UNKNOWN_TEACHER = "Bilinmeyen Öğretmen"


class ScheduleMode(str, Enum):
    TEACHER = "teacher"
    CLASS = "class"


class ConflictCheckResult(BaseModel):
    """Ergebnis einer Zellen-Prüfung."""

    has_conflict: bool
    message: str = ""


def parse_mode(mode: Union[str, ScheduleMode, None]) -> Optional[ScheduleMode]:
    """Normalisiert den Modus; None bei unbekanntem Wert."""
    if isinstance(mode, ScheduleMode):
        return mode
    try:
        return ScheduleMode(mode)
    except ValueError:
        return None


def _name_of(items: Iterable, item_id: Optional[str], fallback: str) -> str:
    return next((i.name for i in items if i.id == item_id), fallback)


def check_slot_conflict(
    mode: Union[str, ScheduleMode],
    day: str,
    period: str,
    target_id: str,
    current_entity_id: str,
    all_schedules: list[Schedule],
    teachers: Iterable[Teacher] = (),
    classes: Iterable[SchoolClass] = (),
) -> ConflictCheckResult:
    """Prüft ob eine geplante Zuweisung mit einem bestehenden Plan kollidiert.

    Args:
        mode: ``"teacher"`` (target_id = Klasse, current_entity_id = Lehrer)
            oder ``"class"`` (target_id = Lehrer, current_entity_id = Klasse).
        day, period: Zelle im Wochenraster.
        all_schedules: Alle Lehrerpläne.
        teachers, classes: Nur für die Namen in der Meldung.

    Ungültige Eingaben (leere IDs, unbekannter Tag/Periode/Modus) gelten
    als Konflikt. Die Funktion verändert nichts.
    """
    teachers = list(teachers)
    classes = list(classes)

    if not day or not period or not target_id or not current_entity_id:
        return ConflictCheckResult(has_conflict=True, message="Geçersiz parametre")

    day, period = day.strip(), period.strip()
    if not TimeSlot(day, period).is_valid:
        return ConflictCheckResult(
            has_conflict=True, message="Geçersiz gün veya ders saati"
        )

    parsed = parse_mode(mode)
    if parsed is None:
        return ConflictCheckResult(has_conflict=True, message="Geçersiz program modu")

    logger.debug(
        f"Konfliktprüfung: mode={parsed.value} {day}/{period} "
        f"target={target_id} current={current_entity_id} "
        f"({len(all_schedules)} Pläne)"
    )

    if parsed == ScheduleMode.TEACHER:
        # Erster fremder Plan, der die Klasse in dieser Zelle schon hat
        for schedule in all_schedules:
            if schedule.teacher_id == current_entity_id:
                continue
            slot = schedule.get(day, period)
            if isinstance(slot, TeachingSlot) and slot.class_id == target_id:
                class_name = _name_of(classes, target_id, UNKNOWN_CLASS)
                teacher_name = _name_of(
                    teachers, schedule.teacher_id, "başka bir öğretmen"
                )
                message = (
                    f"{class_name} sınıfı {day} günü {period}. ders saatinde "
                    f"{teacher_name} ile çakışıyor"
                )
                logger.debug(f"Konflikt: {message}")
                return ConflictCheckResult(has_conflict=True, message=message)
        return ConflictCheckResult(has_conflict=False)

    teacher_schedule = next(
        (s for s in all_schedules if s.teacher_id == target_id), None
    )
    if teacher_schedule is None:
        return ConflictCheckResult(has_conflict=False)

    existing = teacher_schedule.get(day, period)
    teacher_name = _name_of(teachers, target_id, UNKNOWN_TEACHER)
    if isinstance(existing, FixedSlot):
        # Feste Perioden blockieren die Lehrkraft ebenfalls
        message = (
            f"{teacher_name} öğretmeni {day} günü {period}. ders saatinde "
            f"{FIXED_LABELS[existing.marker]} periyodunda"
        )
        return ConflictCheckResult(has_conflict=True, message=message)
    if (
        isinstance(existing, TeachingSlot)
        and existing.class_id
        and existing.class_id != current_entity_id
    ):
        other_class = _name_of(classes, existing.class_id, UNKNOWN_CLASS)
        message = (
            f"{teacher_name} öğretmeni {day} günü {period}. ders saatinde "
            f"{other_class} sınıfı ile çakışıyor"
        )
        logger.debug(f"Konflikt: {message}")
        return ConflictCheckResult(has_conflict=True, message=message)

    return ConflictCheckResult(has_conflict=False)
