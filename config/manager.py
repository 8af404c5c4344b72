"""Konfigurationsmanager: Laden, Prüfen und Speichern der Generator-Config.

Nutzt ruamel.yaml für YAML-Serialisierung mit Kommentaren. Fehlerhafte
Optionen laufen durch ``validate_generation_options`` und kommen als
Fehlerliste zurück, nicht als Pydantic-Traceback.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Iterable, Optional

from pydantic import ValidationError
from rich.console import Console
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.defaults import default_app_config
from config.schema import AppConfig
from models.teacher import Teacher
from solver.generator import validate_generation_options

logger = logging.getLogger(__name__)

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML-KOMMENTAR-AUFBAU ───

_YAML_HEADER = f"""\
# ============================================
# Ders Programı Generator: Konfiguration
# Version: 1.0
# Erstellt: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "options": (
        "Generierungs-Optionen",
        "mode: balanced | compact | spread\n"
        "max_daily_hours: 1-10 (Stunden pro Lehrer und Klasse/Fach)",
    ),
    "teacher_weekly_hours": (
        "Wochenstunden pro Lehrkraft",
        "Lehrer-ID: max. Wochenstunden (fehlt = default_weekly_hours)",
    ),
    "constants": (
        "Prioritätslisten",
        "core_subjects: Hauptfächer in Verteilungsreihenfolge\n"
        "balanced_day_priority: pro Wochentag, kleiner = bevorzugt",
    ),
}

_OPTION_COMMENTS = {
    "avoid_consecutive": "gleiches Fach nicht direkt hintereinander",
    "prioritize_core": "aus = Hauptfächer werden nicht verteilt",
    "respect_time_slots": "ohne Wirkung",
    "prefer_morning_hours": "Hauptfächer früh am Tag",
}


class ConfigError(ValueError):
    """Config-Datei mit ungültigen Werten; ``errors`` enthält die Einzelfehler."""

    def __init__(self, path: Path, errors: list[str]):
        self.path = path
        self.errors = errors
        lines = "\n".join(f"  - {e}" for e in errors)
        super().__init__(f"Konfigurationsdatei ungültig: {path}\n{lines}")


def _collect_errors(raw) -> list[str]:
    """Alle Fehler einer geladenen YAML-Struktur, leer = gültig."""
    if raw is None:
        return []
    if not isinstance(raw, dict):
        return ["Wurzelelement muss eine Zuordnung sein"]

    errors: list[str] = []
    rest = dict(raw)
    options = rest.pop("options", None) or {}
    hours = rest.pop("teacher_weekly_hours", None)
    if not isinstance(options, dict):
        return ["options: muss eine Zuordnung sein"]
    options = dict(options)
    # Überschreibungen stehen in der Datei neben den Optionen
    if hours is not None:
        options["teacher_weekly_hours"] = hours
    errors.extend(f"options: {e}" for e in validate_generation_options(options))

    try:
        AppConfig.model_validate(rest)
    except ValidationError as e:
        errors.extend(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
    return errors


def _to_app_config(raw) -> AppConfig:
    data = dict(raw or {})
    options = dict(data.pop("options", None) or {})
    hours = data.pop("teacher_weekly_hours", None)
    if hours is not None:
        options["teacher_weekly_hours"] = dict(hours)
    data["options"] = options
    return AppConfig.model_validate(data)


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "scheduler_config.yaml"

    def first_run_check(self) -> bool:
        """Gibt True zurück wenn noch keine Config existiert (Erstaufruf)."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Laden ───

    def _read(self, path: Optional[Path]):
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Führen Sie 'python main.py init' aus, um die Konfiguration anzulegen."
            )
        with open(target, "r", encoding="utf-8") as f:
            return target, yaml.load(f)

    def check(self, path: Optional[Path] = None) -> list[str]:
        """Prüft die Config-Datei. Leere Liste = gültig."""
        _, raw = self._read(path)
        return _collect_errors(raw)

    def load(self, path: Optional[Path] = None) -> AppConfig:
        """Lade Config aus YAML. Ungültige Werte → ConfigError mit Fehlerliste."""
        target, raw = self._read(path)
        errors = _collect_errors(raw)
        if errors:
            logger.warning(f"Config {target}: {len(errors)} Fehler")
            raise ConfigError(target, errors)
        return _to_app_config(raw)

    # ─── Speichern ───

    def save(self, config: AppConfig, path: Optional[Path] = None,
             teachers: Iterable[Teacher] = ()) -> Path:
        """Speichere Config als YAML mit Abschnittskommentaren.

        Sind ``teachers`` bekannt, steht hinter jeder Wochenstunden-Zeile
        der Name der Lehrkraft als Kommentar.
        """
        target = path or self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config, {t.id: t.name for t in teachers})

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")
        return target

    def _build_commented_yaml(self, config: AppConfig,
                              names: dict[str, str]) -> CommentedMap:
        """Baut die YAML-Struktur mit Kommentaren auf."""
        raw = json.loads(config.model_dump_json())
        overrides = raw["options"].pop("teacher_weekly_hours")

        options = CommentedMap(raw["options"])
        for key, comment in _OPTION_COMMENTS.items():
            options.yaml_add_eol_comment(comment, key)

        hours = CommentedMap()
        for teacher_id in sorted(overrides):
            hours[teacher_id] = overrides[teacher_id]
            if teacher_id in names:
                hours.yaml_add_eol_comment(names[teacher_id], teacher_id)

        cm = CommentedMap()
        cm["school_name"] = raw["school_name"]
        cm["options"] = options
        cm["teacher_weekly_hours"] = hours
        cm["constants"] = raw["constants"]

        for field, (label, comment) in _SECTION_COMMENTS.items():
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )
        return cm

    # ─── Wochenstunden pro Lehrkraft ───

    def set_teacher_hours(self, teacher_id: str, hours: Optional[int],
                          path: Optional[Path] = None,
                          teachers: Iterable[Teacher] = ()) -> AppConfig:
        """Setzt (oder entfernt bei ``None``) die Wochenstunden einer Lehrkraft.

        Ohne Config-Datei wird von der Default-Config ausgegangen. Der neue
        Stand wird vor dem Speichern geprüft.
        """
        target = path or self.DEFAULT_CONFIG
        config = self.load(target) if target.exists() else default_app_config()

        overrides = dict(config.options.teacher_weekly_hours)
        if hours is None:
            overrides.pop(teacher_id, None)
        else:
            overrides[teacher_id] = hours
        options = config.options.model_copy(update={"teacher_weekly_hours": overrides})

        errors = validate_generation_options(options)
        if errors:
            raise ConfigError(target, errors)

        config = config.model_copy(update={"options": options})
        self.save(config, target, teachers)
        logger.info(f"Wochenstunden {teacher_id}: {hours}")
        return config
