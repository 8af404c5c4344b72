"""Greedy-Stundenplan-Generator.

Ablauf eines Laufs (sequenziell, deterministisch):
  1. Reset             – leerer Plan pro Lehrkraft, Auslastung auf 0
  2. Feste Perioden    – Frühstück/Mittag/Imbiss je nach Stufe eintragen
  3. Hauptfächer       – (prioritize_core) in fester Reihenfolge zuerst
  4. Restliche Fächer  – alle übrigen Fächer
  5. Auffüllen         – Erweiterungspunkt (ohne Wirkung)
  6. Optimieren        – Erweiterungspunkt (ohne Wirkung)
  7. Statistik

Pro (Fach, Klasse) werden die passenden Lehrkräfte nach freier Kapazität
absteigend sortiert und nacheinander mit Stunden belegt. Die Zellen
werden über eine Prioritätsfunktion gewählt (frühe Stunden für
Hauptfächer, Wochenmitte im Modus "balanced") und übersprungen, wenn
die Klasse dort schon einen anderen Lehrer hat oder das gleiche Fach
direkt davor/danach liegt.

Unerfüllter Bedarf ist kein Fehler, sondern eine Warnung.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ValidationError

from config.defaults import MAX_DAILY_HOURS_RANGE, VALID_MODES
from config.schema import DistributionMode, EngineConstants, GenerationOptions
from models.schedule import FixedSlot, Schedule, TeachingSlot
from models.school_class import SchoolClass
from models.subject import Subject
from models.teacher import Teacher
from models.timeslot import (
    DAYS,
    PERIODS,
    TimeSlot,
    fixed_marker,
    is_teaching_period,
    period_number,
)

logger = logging.getLogger(__name__)


# ─── Ergebnis-Modelle ─────────────────────────────────────────────────────────

class TeacherWorkload(BaseModel):
    """Auslastung einer Lehrkraft während eines Laufs."""

    teacher_id: str
    max_weekly_hours: int
    current_hours: int = 0

    @property
    def remaining(self) -> int:
        return self.max_weekly_hours - self.current_hours


class GenerationStatistics(BaseModel):
    total_slots: int = 0
    filled_slots: int = 0
    empty_slots: int = 0
    teachers_assigned: int = 0
    classes_assigned: int = 0


class GenerationResult(BaseModel):
    """Ergebnis eines Generierungslaufs."""

    success: bool
    schedules: list[Schedule]
    conflicts: list[str]     # Echte Widersprüche / Systemfehler
    warnings: list[str]      # Unerfüllter Bedarf (nicht blockierend)
    statistics: GenerationStatistics

    def print_rich(self) -> None:
        """Gibt eine Zusammenfassung über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel

        st = self.statistics
        status = (
            "[bold green]✓ ERFOLGREICH[/bold green]"
            if self.success
            else "[bold red]✗ FEHLGESCHLAGEN[/bold red]"
        )
        fill = st.filled_slots / st.total_slots * 100 if st.total_slots else 0.0
        lines = [
            status,
            f"Pläne: {len(self.schedules)} | Lehrkräfte belegt: {st.teachers_assigned} "
            f"| Klassen belegt: {st.classes_assigned}",
            f"Slots: {st.filled_slots}/{st.total_slots} belegt ({fill:.0f}%), "
            f"{st.empty_slots} frei",
        ]
        if self.conflicts:
            lines.append("\n[red bold]Konflikte:[/red bold]")
            lines += [f"  [red]• {c}[/red]" for c in self.conflicts]
        if self.warnings:
            lines.append("\n[yellow bold]Warnungen:[/yellow bold]")
            lines += [f"  [yellow]• {w}[/yellow]" for w in self.warnings]
        Console().print(Panel("\n".join(lines), title="Generierung", border_style="cyan"))

    def save_json(self, path: Path) -> None:
        """Speichert das Ergebnis als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "GenerationResult":
        """Lädt ein gespeichertes Ergebnis aus JSON."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Ergebnis nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())


# ─── Optionen prüfen ──────────────────────────────────────────────────────────

def validate_generation_options(options: Union[GenerationOptions, dict]) -> list[str]:
    """Prüft die Optionen vor dem Lauf. Leere Liste = gültig."""
    if isinstance(options, dict):
        try:
            options = GenerationOptions.model_validate(options)
        except ValidationError as e:
            return [
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in e.errors()
            ]

    errors: list[str] = []
    lo, hi = MAX_DAILY_HOURS_RANGE
    if not lo <= options.max_daily_hours <= hi:
        errors.append(f"Günlük maksimum ders saati {lo}-{hi} arasında olmalıdır")
    if options.mode not in VALID_MODES:
        errors.append(f"Geçersiz dağılım modu: {options.mode}")
    for teacher_id, hours in options.teacher_weekly_hours.items():
        if hours < 0:
            errors.append(f"Geçersiz haftalık ders saati: {teacher_id} ({hours})")
    return errors


# ─── Laufkontext ──────────────────────────────────────────────────────────────

@dataclass
class GenerationContext:
    """Zustand genau eines Laufs: Pläne und Auslastung pro Lehrkraft."""

    schedules: dict[str, Schedule] = field(default_factory=dict)
    workloads: dict[str, TeacherWorkload] = field(default_factory=dict)

    def class_taken_by_other(
        self, class_id: str, teacher_id: str, day: str, period: str
    ) -> bool:
        """True wenn die Klasse in der Zelle schon bei einer anderen Lehrkraft sitzt."""
        for other_id, schedule in self.schedules.items():
            if other_id == teacher_id:
                continue
            slot = schedule.get(day, period)
            if isinstance(slot, TeachingSlot) and slot.class_id == class_id:
                return True
        return False


# ─── Generator ────────────────────────────────────────────────────────────────

class ScheduleGenerator:
    """Erzeugt für alle Lehrkräfte einen Wochenplan.

    Verwendung:
        generator = ScheduleGenerator(teachers, classes, subjects, options)
        result = generator.generate()

    Jeder Lauf arbeitet auf einem eigenen ``GenerationContext``; parallele
    Läufe brauchen je eine eigene Instanz.
    """

    def __init__(
        self,
        teachers: list[Teacher],
        classes: list[SchoolClass],
        subjects: list[Subject],
        options: Optional[GenerationOptions] = None,
        constants: Optional[EngineConstants] = None,
    ) -> None:
        self.teachers = list(teachers)
        self.classes = list(classes)
        self.subjects = list(subjects)
        self.options = options or GenerationOptions()
        self.constants = constants or EngineConstants()
        self._teacher_map = {t.id: t for t in self.teachers}

        self._context = GenerationContext()
        self._conflicts: list[str] = []
        self._warnings: list[str] = []

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def generate(self) -> GenerationResult:
        """Führt einen vollständigen Lauf durch."""
        self._conflicts = []
        self._warnings = []

        option_errors = validate_generation_options(self.options)
        if option_errors:
            return self._failed(option_errors)

        logger.info(
            f"Generierung gestartet: {len(self.teachers)} Lehrkräfte, "
            f"{len(self.classes)} Klassen, {len(self.subjects)} Fächer"
        )
        try:
            self._reset()
            self._seed_fixed_periods()
            if self.options.prioritize_core:
                self._assign_core_subjects()
            self._assign_remaining_subjects()
            self._fill_empty_slots()
            self._optimize_schedules()
            statistics = self._calculate_statistics()
        except Exception as e:
            logger.exception("Generierung abgebrochen")
            return self._failed([f"Sistem hatası: {e}"])

        logger.info(
            f"Generierung beendet: {statistics.filled_slots}/{statistics.total_slots} "
            f"Slots belegt, {len(self._warnings)} Warnungen"
        )
        return GenerationResult(
            success=not self._conflicts,
            schedules=list(self._context.schedules.values()),
            conflicts=list(self._conflicts),
            warnings=list(self._warnings),
            statistics=statistics,
        )

    @property
    def workloads(self) -> dict[str, TeacherWorkload]:
        """Auslastung des letzten Laufs (nur lesen)."""
        return dict(self._context.workloads)

    def _failed(self, conflicts: list[str]) -> GenerationResult:
        return GenerationResult(
            success=False,
            schedules=[],
            conflicts=conflicts,
            warnings=list(self._warnings),
            statistics=GenerationStatistics(),
        )

    # ─── Phasen ───────────────────────────────────────────────────────────────

    def _reset(self) -> None:
        self._context = GenerationContext()
        for teacher in self.teachers:
            self._context.schedules[teacher.id] = Schedule(
                id=f"auto-{teacher.id}",
                teacher_id=teacher.id,
            )
            override = self.options.teacher_weekly_hours.get(teacher.id)
            self._context.workloads[teacher.id] = TeacherWorkload(
                teacher_id=teacher.id,
                max_weekly_hours=(
                    self.constants.default_weekly_hours if override is None else override
                ),
            )

    def _seed_fixed_periods(self) -> None:
        for teacher in self.teachers:
            schedule = self._context.schedules[teacher.id]
            for day in DAYS:
                for period in PERIODS:
                    marker = fixed_marker(period, teacher.level)
                    if marker is not None:
                        schedule.set(day, period, FixedSlot(marker=marker))

    def _assign_core_subjects(self) -> None:
        for name in self.constants.core_subjects:
            self._assign_subject_to_classes(name, is_core=True)

    def _assign_remaining_subjects(self) -> None:
        # Hauptfächer gehören nie in diese Phase, auch ohne prioritize_core.
        done = set(self.constants.core_subjects)
        for name in dict.fromkeys(s.name for s in self.subjects):
            if name not in done:
                self._assign_subject_to_classes(name, is_core=False)

    def _fill_empty_slots(self) -> None:
        """Erweiterungspunkt für das Auffüllen freier Slots (derzeit ohne Wirkung)."""

    def _optimize_schedules(self) -> None:
        """Erweiterungspunkt für Umverteilung/Glättung (derzeit ohne Wirkung)."""

    # ─── Zuweisung ────────────────────────────────────────────────────────────

    def _assign_subject_to_classes(self, subject_name: str, is_core: bool) -> None:
        """Verteilt alle Fach-Datensätze mit diesem Namen auf die Klassen ihrer Stufe."""
        for subject in (s for s in self.subjects if s.name == subject_name):
            eligible = [
                t for t in self.teachers if t.can_teach(subject.branch, subject.level)
            ]
            for school_class in self.classes:
                if school_class.level == subject.level:
                    self._assign_subject_to_class(subject, school_class, eligible, is_core)

    def _assign_subject_to_class(
        self,
        subject: Subject,
        school_class: SchoolClass,
        eligible: list[Teacher],
        is_core: bool,
    ) -> None:
        required = subject.weekly_hours
        assigned = 0
        workloads = self._context.workloads

        # Stabile Sortierung an Ort und Stelle: Gleichstände behalten die
        # Reihenfolge der vorigen Klasse desselben Fachs.
        eligible.sort(key=lambda t: -workloads[t.id].remaining)

        for teacher in eligible:
            if assigned >= required:
                break
            workload = workloads[teacher.id]
            if workload.remaining <= 0:
                continue

            hours = min(required - assigned, workload.remaining, self.options.max_daily_hours)
            placed = self._place_hours(teacher, school_class, subject, hours, is_core)
            assigned += placed
            workload.current_hours += placed

        if assigned < required:
            message = (
                f"{school_class.name} sınıfı için {subject.name} dersi tam olarak "
                f"atanamadı ({assigned}/{required})"
            )
            logger.warning(message)
            self._warnings.append(message)

    def _place_hours(
        self,
        teacher: Teacher,
        school_class: SchoolClass,
        subject: Subject,
        hours: int,
        is_core: bool,
    ) -> int:
        """Belegt bis zu ``hours`` freie Zellen im Plan der Lehrkraft. Gibt die Anzahl zurück."""
        schedule = self._context.schedules[teacher.id]
        placed = 0

        for ts in self._prioritize_slots(self._available_slots(teacher), is_core):
            if placed >= hours:
                break
            if self._context.class_taken_by_other(
                school_class.id, teacher.id, ts.day, ts.period
            ):
                continue
            if self.options.avoid_consecutive and self._has_adjacent_subject(
                schedule, subject, ts
            ):
                continue

            schedule.set(
                ts.day, ts.period,
                TeachingSlot(subject_id=subject.id, class_id=school_class.id),
            )
            placed += 1
            logger.debug(
                f"  {teacher.id}: {subject.name} → {school_class.name} @ {ts}"
            )

        return placed

    def _available_slots(self, teacher: Teacher) -> list[TimeSlot]:
        schedule = self._context.schedules[teacher.id]
        return [
            TimeSlot(day, period)
            for day in DAYS
            for period in PERIODS
            if is_teaching_period(period, teacher.level) and schedule.is_free(day, period)
        ]

    def _prioritize_slots(self, slots: list[TimeSlot], is_core: bool) -> list[TimeSlot]:
        if is_core and self.options.prefer_morning_hours:
            return sorted(slots, key=lambda ts: (ts.number, self._day_priority(ts.day)))
        return sorted(slots, key=lambda ts: self._day_priority(ts.day))

    def _day_priority(self, day: str) -> int:
        index = DAYS.index(day)
        if self.options.mode == DistributionMode.BALANCED.value:
            priorities = self.constants.balanced_day_priority
            return priorities[index] if index < len(priorities) else len(DAYS)
        return index

    @staticmethod
    def _has_adjacent_subject(schedule: Schedule, subject: Subject, ts: TimeSlot) -> bool:
        number = period_number(ts.period)
        for neighbour in (number - 1, number + 1):
            slot = schedule.get(ts.day, str(neighbour))
            if isinstance(slot, TeachingSlot) and slot.subject_id == subject.id:
                return True
        return False

    # ─── Statistik ────────────────────────────────────────────────────────────

    def _calculate_statistics(self) -> GenerationStatistics:
        total = 0
        filled = 0
        teachers_assigned: set[str] = set()
        classes_assigned: set[str] = set()

        for teacher_id, schedule in self._context.schedules.items():
            level = self._teacher_map[teacher_id].level
            for day in DAYS:
                for period in PERIODS:
                    if not is_teaching_period(period, level):
                        continue
                    total += 1
                    slot = schedule.get(day, period)
                    if isinstance(slot, TeachingSlot) and slot.class_id:
                        filled += 1
                        teachers_assigned.add(teacher_id)
                        classes_assigned.add(slot.class_id)

        return GenerationStatistics(
            total_slots=total,
            filled_slots=filled,
            empty_slots=total - filled,
            teachers_assigned=len(teachers_assigned),
            classes_assigned=len(classes_assigned),
        )
