"""Nachprüfung aller generierten Pläne eines Laufs.

Prüft die fertigen Pläne auf Regelverletzungen als Sicherheitsnetz
unabhängig vom Generator.
"""

from collections import defaultdict
from typing import Literal, Optional

from pydantic import BaseModel

from config.schema import EngineConstants, GenerationOptions
from models.schedule import FixedSlot, Schedule
from models.school_data import SchoolData
from models.timeslot import DAYS, PERIODS, fixed_marker


class ValidationViolation(BaseModel):
    """Eine einzelne Regelverletzung."""

    severity: Literal["error", "warning"]
    constraint: str      # z.B. "class_double_booking"
    description: str
    entity: str          # teacher_id / class_id


class ValidationReport(BaseModel):
    """Ergebnis der Nachprüfung."""

    violations: list[ValidationViolation]
    is_valid: bool       # True wenn keine Errors (Warnings ok)

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        errors = [v for v in self.violations if v.severity == "error"]
        warnings = [v for v in self.violations if v.severity == "warning"]

        status = (
            "[bold green]✓ VALIDE[/bold green]"
            if self.is_valid
            else "[bold red]✗ VERLETZUNGEN GEFUNDEN[/bold red]"
        )
        lines = [status, f"Fehler: {len(errors)} | Warnungen: {len(warnings)}"]
        console.print(Panel("\n".join(lines), title="Lösung-Validierung", border_style="cyan"))

        if not self.violations:
            console.print("[dim]Keine Verletzungen gefunden.[/dim]")
            return

        table = Table(box=box.ROUNDED, show_lines=True)
        table.add_column("Typ", width=8)
        table.add_column("Regel", width=24)
        table.add_column("Entität", width=12)
        table.add_column("Beschreibung")

        for v in self.violations:
            color = "red" if v.severity == "error" else "yellow"
            table.add_row(
                f"[{color}]{v.severity.upper()}[/{color}]",
                v.constraint,
                v.entity,
                v.description,
            )
        console.print(table)


class SolutionValidator:
    """Prüft die Pläne eines Laufs gegen Doppelbelegung, Deputat und feste Perioden."""

    def validate(
        self,
        schedules: list[Schedule],
        school_data: SchoolData,
        options: Optional[GenerationOptions] = None,
        constants: Optional[EngineConstants] = None,
    ) -> ValidationReport:
        """Führt alle Checks durch und gibt einen ValidationReport zurück."""
        options = options or GenerationOptions()
        constants = constants or EngineConstants()
        violations: list[ValidationViolation] = []

        violations.extend(self._check_class_double_booking(schedules))
        violations.extend(self._check_weekly_hours(schedules, options, constants))
        violations.extend(self._check_fixed_periods(schedules, school_data))
        violations.extend(self._check_compatibility(schedules, school_data))

        has_errors = any(v.severity == "error" for v in violations)
        return ValidationReport(violations=violations, is_valid=not has_errors)

    # ── Einzelne Prüfungen ────────────────────────────────────────────────────

    def _check_class_double_booking(
        self, schedules: list[Schedule]
    ) -> list[ValidationViolation]:
        """Eine Klasse darf pro Zelle nur bei einer Lehrkraft sitzen."""
        seen: dict[tuple, list[str]] = defaultdict(list)
        for schedule in schedules:
            for ts, slot in schedule.teaching_slots():
                seen[(slot.class_id, ts.day, ts.period)].append(schedule.teacher_id)

        violations = []
        for (class_id, day, period), teacher_ids in seen.items():
            if len(teacher_ids) > 1:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="class_double_booking",
                    entity=class_id,
                    description=(
                        f"{day} {period}.: gleichzeitig bei "
                        f"{', '.join(teacher_ids)} eingeplant."
                    ),
                ))
        return violations

    def _check_weekly_hours(
        self,
        schedules: list[Schedule],
        options: GenerationOptions,
        constants: EngineConstants,
    ) -> list[ValidationViolation]:
        """Unterrichtsstunden ≤ individuelle Obergrenze (Default 20)."""
        violations = []
        for schedule in schedules:
            limit = options.teacher_weekly_hours.get(schedule.teacher_id)
            if limit is None:
                limit = constants.default_weekly_hours
            actual = schedule.teaching_hours()
            if actual > limit:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="weekly_hours_exceeded",
                    entity=schedule.teacher_id,
                    description=(
                        f"Ist {actual}h > Max {limit}h "
                        f"(Überschreitung: +{actual - limit}h)."
                    ),
                ))
        return violations

    def _check_fixed_periods(
        self, schedules: list[Schedule], school_data: SchoolData
    ) -> list[ValidationViolation]:
        """Jede feste Periode der Stufe ist an jedem Tag eingetragen."""
        violations = []
        for schedule in schedules:
            teacher = school_data.teacher(schedule.teacher_id)
            if teacher is None:
                continue
            missing = []
            for day in DAYS:
                for period in PERIODS:
                    marker = fixed_marker(period, teacher.level)
                    if marker is None:
                        continue
                    slot = schedule.get(day, period)
                    if not (isinstance(slot, FixedSlot) and slot.marker == marker):
                        missing.append(f"{day} {period}")
            if missing:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="fixed_period_missing",
                    entity=schedule.teacher_id,
                    description=f"Feste Perioden fehlen: {', '.join(missing)}.",
                ))
        return violations

    def _check_compatibility(
        self, schedules: list[Schedule], school_data: SchoolData
    ) -> list[ValidationViolation]:
        """Stufe Lehrkraft ↔ Klasse und Branş Lehrkraft ↔ Fach (nur Warnungen)."""
        violations = []
        reported: set[tuple] = set()
        for schedule in schedules:
            teacher = school_data.teacher(schedule.teacher_id)
            if teacher is None:
                continue
            for _, slot in schedule.teaching_slots():
                school_class = school_data.school_class(slot.class_id)
                if school_class and school_class.level != teacher.level:
                    key = ("level", teacher.id, school_class.id)
                    if key not in reported:
                        reported.add(key)
                        violations.append(ValidationViolation(
                            severity="warning",
                            constraint="level_mismatch",
                            entity=teacher.id,
                            description=(
                                f"{teacher.level.value}-Lehrkraft unterrichtet "
                                f"{school_class.name} ({school_class.level.value})."
                            ),
                        ))
                subject = school_data.subject(slot.subject_id) if slot.subject_id else None
                if subject and subject.branch != teacher.branch:
                    key = ("branch", teacher.id, subject.id)
                    if key not in reported:
                        reported.add(key)
                        violations.append(ValidationViolation(
                            severity="warning",
                            constraint="branch_mismatch",
                            entity=teacher.id,
                            description=(
                                f"Branş {teacher.branch} unterrichtet {subject.name} "
                                f"(Branş {subject.branch})."
                            ),
                        ))
        return violations
