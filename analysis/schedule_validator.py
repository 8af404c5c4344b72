"""Validierung eines manuell bearbeiteten Plans vor dem Speichern.

Fehler blockieren das Speichern, Warnungen werden nur angezeigt.
"""

import logging
from typing import Iterable, Optional, Union

from pydantic import BaseModel

from analysis.conflict_detector import ScheduleMode, check_slot_conflict, parse_mode
from config.defaults import MAX_DAILY_TEACHING_HOURS, MAX_WEEKLY_TEACHING_HOURS
from models.schedule import Grid, Schedule, TeachingSlot, iter_grid
from models.school_class import SchoolClass
from models.subject import Subject
from models.teacher import Teacher
from models.timeslot import DAYS

logger = logging.getLogger(__name__)


class ValidationResult(BaseModel):
    """Ergebnis der Plan-Validierung."""

    is_valid: bool
    errors: list[str]
    warnings: list[str]

    def print_rich(self) -> None:
        """Gibt das Ergebnis formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel

        status = (
            "[bold green]✓ GÜLTIG[/bold green]"
            if self.is_valid
            else "[bold red]✗ UNGÜLTIG[/bold red]"
        )
        lines = [status]
        lines += [f"  [red]• {e}[/red]" for e in self.errors]
        lines += [f"  [yellow]• {w}[/yellow]" for w in self.warnings]
        Console().print(Panel("\n".join(lines), title="Plan-Validierung", border_style="cyan"))


def _invalid(message: str) -> ValidationResult:
    return ValidationResult(is_valid=False, errors=[message], warnings=[])


def _counted(slot: TeachingSlot, mode: ScheduleMode) -> Optional[str]:
    """ID der Gegenseite, falls der Slot als Unterrichtsstunde zählt."""
    return slot.class_id if mode == ScheduleMode.TEACHER else slot.teacher_id


def _compatibility_warnings(
    teacher: Optional[Teacher],
    school_class: Optional[SchoolClass],
    subject: Optional[Subject],
) -> list[str]:
    warnings = []
    if teacher and school_class and teacher.level != school_class.level:
        warnings.append(
            f"{teacher.name} ({teacher.level.value}) ile {school_class.name} "
            f"({school_class.level.value}) seviye uyumsuzluğu"
        )
    if teacher and subject and teacher.branch != subject.branch:
        warnings.append(
            f"{teacher.name} ({teacher.branch}) ile {subject.name} "
            f"({subject.branch}) branş uyumsuzluğu"
        )
    return warnings


def validate_schedule(
    mode: Union[str, ScheduleMode],
    current_schedule: Union[Schedule, Grid, None],
    selected_id: str,
    all_schedules: list[Schedule],
    teachers: Iterable[Teacher] = (),
    classes: Iterable[SchoolClass] = (),
    subjects: Iterable[Subject] = (),
) -> ValidationResult:
    """Prüft einen Lehrer- oder Klassenplan auf Stundengrenzen und Konflikte.

    ``current_schedule`` ist im Modus ``teacher`` der Plan der Lehrkraft
    ``selected_id``, im Modus ``class`` die Klassenansicht der Klasse
    ``selected_id`` (Slots mit ``teacher_id``).

    Harte Fehler: > 30 Wochenstunden, > 9 Stunden an einem Tag,
    Konflikte laut ``check_slot_conflict``. Stufen-/Branş-Abweichungen
    sind Warnungen. Fehler und Warnungen sind dedupliziert.
    """
    if not mode or current_schedule is None or not selected_id:
        return _invalid("Geçersiz program verisi")

    parsed = parse_mode(mode)
    if parsed is None:
        return _invalid("Geçersiz program modu")

    grid = current_schedule.grid if isinstance(current_schedule, Schedule) else current_schedule
    teachers, classes, subjects = list(teachers), list(classes), list(subjects)
    teacher_map = {t.id: t for t in teachers}
    class_map = {c.id: c for c in classes}
    subject_map = {s.id: s for s in subjects}

    errors: list[str] = []
    warnings: list[str] = []

    # ── Stundengrenzen ──────────────────────────────────────────────────
    daily = {day: 0 for day in DAYS}
    for ts, slot in iter_grid(grid):
        if isinstance(slot, TeachingSlot) and _counted(slot, parsed):
            daily[ts.day] += 1
    weekly = sum(daily.values())

    if weekly > MAX_WEEKLY_TEACHING_HOURS:
        errors.append(
            f"Haftalık ders saati {MAX_WEEKLY_TEACHING_HOURS}'u geçemez (şu an: {weekly})"
        )
    for day in DAYS:
        if daily[day] > MAX_DAILY_TEACHING_HOURS:
            errors.append(
                f"{day} günü için günlük ders saati {MAX_DAILY_TEACHING_HOURS}'u "
                f"geçemez (şu an: {daily[day]})"
            )

    # ── Konflikte + Kompatibilität pro Zelle ────────────────────────────
    for ts, slot in iter_grid(grid):
        if not isinstance(slot, TeachingSlot):
            continue
        other_id = _counted(slot, parsed)
        if not other_id:
            continue

        result = check_slot_conflict(
            parsed, ts.day, ts.period, other_id, selected_id,
            all_schedules, teachers, classes,
        )
        if result.has_conflict:
            errors.append(result.message)

        if parsed == ScheduleMode.TEACHER:
            teacher_id, class_id = selected_id, slot.class_id
        else:
            teacher_id, class_id = slot.teacher_id, selected_id
        warnings.extend(_compatibility_warnings(
            teacher_map.get(teacher_id),
            class_map.get(class_id),
            subject_map.get(slot.subject_id),
        ))

    errors = list(dict.fromkeys(errors))
    warnings = list(dict.fromkeys(warnings))
    logger.info(
        f"Validierung ({parsed.value} {selected_id}): "
        f"{weekly}h/Woche, {len(errors)} Fehler, {len(warnings)} Warnungen"
    )
    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)
