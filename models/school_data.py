"""SchoolData: Vollständiger Datensatz + Machbarkeits-Check (Pydantic v2)."""

from collections import defaultdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from config.schema import EngineConstants, GenerationOptions
from models.level import Level
from models.schedule import Schedule
from models.school_class import SchoolClass
from models.subject import Subject
from models.teacher import Teacher


class FeasibilityReport(BaseModel):
    """Ergebnis des Machbarkeits-Checks."""

    is_feasible: bool
    errors: list[str]      # Kritische Probleme (Fächer bleiben sicher unbesetzt)
    warnings: list[str]    # Hinweise (Generierung knapp oder lückenhaft)

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel

        console = Console()
        if self.is_feasible:
            status = "[bold green]✓ LÖSBAR[/bold green]"
        else:
            status = "[bold red]✗ NICHT LÖSBAR[/bold red]"

        lines = [status]
        if self.errors:
            lines.append("\n[red bold]Fehler (kritisch):[/red bold]")
            for e in self.errors:
                lines.append(f"  [red]• {e}[/red]")
        if self.warnings:
            lines.append("\n[yellow bold]Warnungen:[/yellow bold]")
            for w in self.warnings:
                lines.append(f"  [yellow]• {w}[/yellow]")
        if not self.errors and not self.warnings:
            lines.append("[dim]Keine Probleme gefunden.[/dim]")

        console.print(Panel("\n".join(lines), title="Machbarkeits-Check", border_style="cyan"))


class SchoolData(BaseModel):
    """Vollständiger Datensatz: Lehrkräfte, Klassen, Fächer und gespeicherte Pläne."""

    teachers: list[Teacher]
    classes: list[SchoolClass]
    subjects: list[Subject]
    schedules: list[Schedule] = []
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    data_version: str = "1.0"

    # ─── Lookups ───

    def teacher(self, teacher_id: str) -> Optional[Teacher]:
        return next((t for t in self.teachers if t.id == teacher_id), None)

    def school_class(self, class_id: str) -> Optional[SchoolClass]:
        return next((c for c in self.classes if c.id == class_id), None)

    def subject(self, subject_id: str) -> Optional[Subject]:
        return next((s for s in self.subjects if s.id == subject_id), None)

    def schedule_for(self, teacher_id: str) -> Optional[Schedule]:
        return next((s for s in self.schedules if s.teacher_id == teacher_id), None)

    # ─── Übersicht ───

    def summary(self) -> str:
        """Kurze Übersicht über den Datensatz."""
        per_level: dict[Level, int] = defaultdict(int)
        for c in self.classes:
            per_level[c.level] += 1
        total_need = sum(
            s.weekly_hours * per_level.get(s.level, 0) for s in self.subjects
        )
        lines = [
            f"Lehrkräfte: {len(self.teachers)}",
            f"Klassen: {len(self.classes)} ("
            + ", ".join(f"{lvl.value}: {n}" for lvl, n in per_level.items())
            + ")",
            f"Fächer: {len(self.subjects)}",
            f"Gesamtbedarf (Soll): {total_need}h/Woche",
            f"Gespeicherte Pläne: {len(self.schedules)}" if self.schedules else "",
        ]
        return "\n".join(l for l in lines if l)

    # ─── Machbarkeits-Check ───

    def validate_feasibility(
        self,
        options: Optional[GenerationOptions] = None,
        constants: Optional[EngineConstants] = None,
    ) -> FeasibilityReport:
        """Prüft vor der Generierung, ob der Bedarf grundsätzlich gedeckt werden kann.

        Prüfungen:
        1. Pro Fach: mindestens eine passende Lehrkraft (Branş + Stufe)
        2. Pro (Branş, Stufe): Lehrerkapazität ≥ Stundenbedarf
        3. Pro Stufe mit Klassen: mindestens ein Fach definiert
        4. Pro Lehrkraft: mindestens ein Fach für Branş + Stufe
        """
        options = options or GenerationOptions()
        constants = constants or EngineConstants()
        errors: list[str] = []
        warnings: list[str] = []

        classes_per_level: dict[Level, int] = defaultdict(int)
        for c in self.classes:
            classes_per_level[c.level] += 1

        def capacity(teacher: Teacher) -> int:
            override = options.teacher_weekly_hours.get(teacher.id)
            return constants.default_weekly_hours if override is None else override

        # ── 1. + 2. Bedarf und Kapazität pro (Branş, Stufe) ──────────────
        need: dict[tuple[str, Level], int] = defaultdict(int)
        for subject in self.subjects:
            n_classes = classes_per_level.get(subject.level, 0)
            if n_classes == 0:
                continue
            if not any(t.can_teach(subject.branch, subject.level) for t in self.teachers):
                errors.append(
                    f"Fach '{subject.name}' ({subject.level.value}): Keine Lehrkraft mit "
                    f"Branş '{subject.branch}' verfügbar! "
                    f"({subject.weekly_hours * n_classes}h/Woche werden benötigt)"
                )
                continue
            need[(subject.branch, subject.level)] += subject.weekly_hours * n_classes

        for (branch, level), hours in need.items():
            cap = sum(
                capacity(t) for t in self.teachers if t.can_teach(branch, level)
            )
            if cap < hours:
                errors.append(
                    f"Branş '{branch}' ({level.value}): Lehrerkapazität ({cap}h) < "
                    f"Bedarf ({hours}h). Fehlen {hours - cap}h."
                )
            elif cap < hours * 1.10:
                warnings.append(
                    f"Branş '{branch}' ({level.value}): Auslastung sehr hoch – "
                    f"{hours}h Bedarf bei {cap}h Kapazität ({hours / cap * 100:.0f}%)."
                )

        # ── 3. Stufen ohne Fächer ─────────────────────────────────────────
        subject_levels = {s.level for s in self.subjects}
        for level, n in classes_per_level.items():
            if level not in subject_levels:
                warnings.append(
                    f"Stufe {level.value}: {n} Klasse(n), aber kein Fach definiert."
                )

        # ── 4. Lehrkräfte ohne passendes Fach ─────────────────────────────
        for teacher in self.teachers:
            if not any(teacher.can_teach(s.branch, s.level) for s in self.subjects):
                warnings.append(
                    f"Lehrkraft {teacher.id} ({teacher.name}): Kein Fach für Branş "
                    f"'{teacher.branch}' auf Stufe {teacher.level.value}."
                )

        return FeasibilityReport(
            is_feasible=len(errors) == 0,
            errors=errors,
            warnings=warnings,
        )

    # ─── Persistenz ────────────────────────────────────────────────────────

    def save_json(self, path: Path) -> None:
        """Speichert den kompletten Datensatz als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        now = datetime.now(timezone.utc)
        updated = self.model_copy(update={
            "modified_at": now,
            "created_at": self.created_at or now,
        })
        with open(path, "w", encoding="utf-8") as f:
            f.write(updated.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "SchoolData":
        """Lädt einen Datensatz aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())
