"""Ders Programı Generator: Haupt-CLI.

Verwendung:
  python main.py init                          Konfiguration anlegen
  python main.py config show                   Konfiguration anzeigen
  python main.py config check                  Konfiguration prüfen
  python main.py config hours <id> [<std>]     Wochenstunden einer Lehrkraft setzen
  python main.py demo                          Testdaten erzeugen (JSON)
  python main.py check                         Machbarkeits-Check
  python main.py generate                      Stundenpläne generieren
  python main.py validate teacher <id>         Lehrerplan prüfen
  python main.py validate class <id>           Klassenplan prüfen
  python main.py conflict <mode> <tag> <std> <ziel> <aktuell>
                                               Einzelne Zelle prüfen
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()

# Standard-Pfade für gespeicherte Daten
DEFAULT_DATA_JSON = Path("output/school_data.json")
DEFAULT_RESULT_JSON = Path("output/generation_result.json")


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config_or_default():
    """Lädt die Konfiguration; ohne Datei gelten die Standardwerte."""
    from config.defaults import default_app_config
    from config.manager import ConfigError, ConfigManager

    mgr = ConfigManager()
    if mgr.first_run_check():
        console.print(
            "[dim]Keine Konfiguration gefunden – Standardwerte werden verwendet "
            "([bold]python main.py init[/bold] legt sie an).[/dim]"
        )
        return default_app_config()
    try:
        return mgr.load()
    except ConfigError as e:
        _print_config_errors(e.errors)
        sys.exit(1)


def _print_config_errors(errors: list[str]) -> None:
    console.print("[red bold]Konfigurationsdatei ungültig:[/red bold]")
    for e in errors:
        console.print(f"  [red]• {e}[/red]")


def _load_data_or_abort(json_path: str):
    """Lädt den Datensatz oder bricht mit Fehlermeldung ab."""
    from models.school_data import SchoolData

    p = Path(json_path)
    if not p.exists():
        console.print(
            f"[red]Keine Datendatei gefunden: {p}[/red]\n"
            "Verwenden Sie zunächst [bold]python main.py demo[/bold]."
        )
        sys.exit(1)
    return SchoolData.load_json(p)


# ─── INIT ─────────────────────────────────────────────────────────────────────

@click.command("init")
@click.option("--school-name", default=None, help="Name der Schule.")
def cmd_init(school_name: Optional[str]):
    """Legt die Konfigurationsdatei mit Standardwerten an."""
    from config.defaults import default_app_config
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if not mgr.first_run_check():
        console.print("[yellow]Eine Konfiguration existiert bereits.[/yellow]")
        if not click.confirm("Mit Standardwerten überschreiben?", default=False):
            return

    config = default_app_config()
    if school_name:
        config.school_name = school_name
    mgr.save(config)
    console.print("Führen Sie jetzt [bold]python main.py demo[/bold] aus.")


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen, prüfen und anpassen."""


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration an."""
    config = _load_config_or_default()
    opts = config.options

    console.print(Panel(
        f"[bold]{config.school_name}[/bold]",
        title="Schulkonfiguration",
        border_style="cyan",
    ))

    table = Table(title="Generierungs-Optionen", box=box.ROUNDED)
    table.add_column("Option")
    table.add_column("Wert")
    table.add_row("max_daily_hours", str(opts.max_daily_hours))
    table.add_row("mode", opts.mode)
    table.add_row("avoid_consecutive", str(opts.avoid_consecutive))
    table.add_row("prioritize_core", str(opts.prioritize_core))
    table.add_row("respect_time_slots", str(opts.respect_time_slots))
    table.add_row("prefer_morning_hours", str(opts.prefer_morning_hours))
    console.print(table)

    if opts.teacher_weekly_hours:
        table2 = Table(title="Individuelle Wochenstunden", box=box.ROUNDED)
        table2.add_column("Lehrkraft")
        table2.add_column("Max. Stunden")
        for teacher_id, hours in opts.teacher_weekly_hours.items():
            table2.add_row(teacher_id, str(hours))
        console.print(table2)

    c = config.constants
    console.print(
        f"\n[bold]Hauptfächer:[/bold] {', '.join(c.core_subjects)}\n"
        f"[bold]Tagespriorität (balanced):[/bold] {c.balanced_day_priority} | "
        f"[bold]Standard-Wochenstunden:[/bold] {c.default_weekly_hours}"
    )


@cmd_config.command("check")
@click.option("--path", "config_path", default=None, help="Pfad zur Config-Datei.")
def config_check(config_path: Optional[str]):
    """Prüft die Konfigurationsdatei und listet alle Fehler auf."""
    from config.manager import ConfigManager

    try:
        errors = ConfigManager().check(Path(config_path) if config_path else None)
    except FileNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    if errors:
        _print_config_errors(errors)
        sys.exit(1)
    console.print("[green]✓[/green] Konfiguration gültig.")


@cmd_config.command("hours")
@click.argument("teacher_id")
@click.argument("hours", type=int, required=False)
@click.option("--clear", is_flag=True, default=False,
              help="Individuellen Eintrag entfernen (Standardwert gilt wieder).")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Datensatz für Lehrernamen im YAML-Kommentar.")
def config_hours(teacher_id: str, hours: Optional[int], clear: bool, json_path: str):
    """Setzt die maximalen Wochenstunden einer Lehrkraft."""
    from config.manager import ConfigError, ConfigManager
    from models.school_data import SchoolData

    if clear == (hours is not None):
        console.print("[red]Entweder HOURS oder --clear angeben.[/red]")
        sys.exit(1)

    p = Path(json_path)
    teachers = SchoolData.load_json(p).teachers if p.exists() else []
    if teachers and not any(t.id == teacher_id for t in teachers):
        console.print(f"[yellow]Lehrkraft {teacher_id} nicht im Datensatz.[/yellow]")

    try:
        ConfigManager().set_teacher_hours(teacher_id, hours, teachers=teachers)
    except ConfigError as e:
        _print_config_errors(e.errors)
        sys.exit(1)


# ─── DEMO ─────────────────────────────────────────────────────────────────────

@click.command("demo")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad für JSON-Export.")
def cmd_demo(seed: int, json_path: str):
    """Erzeugt Testdaten (Lehrkräfte, Klassen, Fächer) und speichert sie als JSON."""
    from data.fake_data import FakeDataGenerator

    console.print("[bold]Testdaten werden generiert...[/bold]")
    gen = FakeDataGenerator(seed=seed)
    data = gen.generate()
    gen.print_summary(data)
    console.print(f"\n[dim]{data.summary()}[/dim]")

    out_path = Path(json_path)
    data.save_json(out_path)
    console.print(f"[green]✓[/green] JSON gespeichert: {out_path}")


# ─── CHECK ────────────────────────────────────────────────────────────────────

@click.command("check")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zur gespeicherten JSON-Datei.")
def cmd_check(json_path: str):
    """Führt einen Machbarkeits-Check auf dem Datensatz durch."""
    config = _load_config_or_default()
    data = _load_data_or_abort(json_path)

    console.print(f"\n{data.summary()}\n")
    report = data.validate_feasibility(config.options, config.constants)
    report.print_rich()

    sys.exit(0 if report.is_feasible else 1)


# ─── GENERATE ─────────────────────────────────────────────────────────────────

@click.command("generate")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zur gespeicherten JSON-Datei.")
@click.option("--output", "-o", default=str(DEFAULT_RESULT_JSON),
              help="Pfad für das Generierungsergebnis.")
@click.option("--mode", default=None, help="Verteilungsmodus (überschreibt Config).")
@click.option("--max-daily-hours", type=int, default=None,
              help="Max. Stunden pro Zuweisung (überschreibt Config).")
def cmd_generate(json_path: str, output: str, mode: Optional[str],
                 max_daily_hours: Optional[int]):
    """Generiert Wochenpläne für alle Lehrkräfte des Datensatzes."""
    from analysis.solution_validator import SolutionValidator
    from solver.generator import ScheduleGenerator, validate_generation_options

    config = _load_config_or_default()
    data = _load_data_or_abort(json_path)

    overrides = {}
    if mode is not None:
        overrides["mode"] = mode
    if max_daily_hours is not None:
        overrides["max_daily_hours"] = max_daily_hours
    options = config.options.model_copy(update=overrides)

    errors = validate_generation_options(options)
    if errors:
        console.print("[red bold]Ungültige Optionen:[/red bold]")
        for e in errors:
            console.print(f"  [red]• {e}[/red]")
        sys.exit(1)

    generator = ScheduleGenerator(
        data.teachers, data.classes, data.subjects, options, config.constants
    )
    result = generator.generate()
    result.print_rich()

    out_path = Path(output)
    result.save_json(out_path)
    console.print(f"[green]✓[/green] Ergebnis gespeichert: {out_path}")

    if not result.success:
        sys.exit(1)

    report = SolutionValidator().validate(
        result.schedules, data, options, config.constants
    )
    report.print_rich()

    data.schedules = result.schedules
    data.save_json(Path(json_path))
    console.print(f"[green]✓[/green] Pläne im Datensatz gespeichert: {json_path}")

    sys.exit(0 if report.is_valid else 1)


# ─── VALIDATE ─────────────────────────────────────────────────────────────────

@click.command("validate")
@click.argument("mode", type=click.Choice(["teacher", "class"]))
@click.argument("entity_id")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zur gespeicherten JSON-Datei.")
def cmd_validate(mode: str, entity_id: str, json_path: str):
    """Prüft einen gespeicherten Lehrer- oder Klassenplan."""
    from analysis.schedule_validator import validate_schedule
    from models.schedule import build_class_schedule

    data = _load_data_or_abort(json_path)

    if mode == "teacher":
        if data.teacher(entity_id) is None:
            console.print(f"[red]Unbekannte Lehrkraft: {entity_id}[/red]")
            sys.exit(1)
        schedule = data.schedule_for(entity_id)
        if schedule is None:
            console.print(f"[red]Kein Plan für Lehrkraft {entity_id} gespeichert.[/red]")
            sys.exit(1)
        current = schedule.grid
    else:
        if data.school_class(entity_id) is None:
            console.print(f"[red]Unbekannte Klasse: {entity_id}[/red]")
            sys.exit(1)
        current = build_class_schedule(entity_id, data.schedules)

    result = validate_schedule(
        mode, current, entity_id, data.schedules,
        data.teachers, data.classes, data.subjects,
    )
    result.print_rich()
    sys.exit(0 if result.is_valid else 1)


# ─── CONFLICT ─────────────────────────────────────────────────────────────────

@click.command("conflict")
@click.argument("mode")
@click.argument("day")
@click.argument("period")
@click.argument("target_id")
@click.argument("current_id")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zur gespeicherten JSON-Datei.")
def cmd_conflict(mode: str, day: str, period: str, target_id: str,
                 current_id: str, json_path: str):
    """Prüft eine einzelne Zelle auf Konflikte mit den gespeicherten Plänen."""
    from analysis.conflict_detector import check_slot_conflict

    data = _load_data_or_abort(json_path)
    result = check_slot_conflict(
        mode, day, period, target_id, current_id,
        data.schedules, data.teachers, data.classes,
    )
    if result.has_conflict:
        console.print(f"[red bold]✗ Konflikt:[/red bold] {result.message}")
        sys.exit(1)
    console.print("[green]✓[/green] Kein Konflikt.")


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False,
              help="Ausführliche Log-Ausgabe (DEBUG).")
def cli(verbose: bool):
    """Ders Programı Generator für Anaokulu, İlkokul und Ortaokul.

    Starten Sie mit: python main.py init
    """
    _setup_logging(verbose)


def main():
    cli()


# Befehle registrieren
cli.add_command(cmd_init)
cli.add_command(cmd_config)
cli.add_command(cmd_demo)
cli.add_command(cmd_check)
cli.add_command(cmd_generate)
cli.add_command(cmd_validate)
cli.add_command(cmd_conflict)


if __name__ == "__main__":
    main()
