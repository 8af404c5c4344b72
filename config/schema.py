from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DistributionMode(str, Enum):
    BALANCED = "balanced"
    COMPACT = "compact"
    SPREAD = "spread"


# ─── GENERIERUNGS-OPTIONEN ───

class GenerationOptions(BaseModel):
    """Einstellungen eines Generierungslaufs.

    Wertebereiche prüft ``validate_generation_options`` (Fehlerliste statt
    Exception).
    Felder akzeptieren zusätzlich die camelCase-Namen des Dokumentformats.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # Obergrenze der Stunden, die ein Lehrer pro (Fach, Klasse)-Zuweisung erhält
    max_daily_hours: int = 8
    # Verteilungsmodus; nur "balanced" beeinflusst die Tagesreihenfolge
    mode: str = DistributionMode.BALANCED.value
    # Gleiches Fach nicht in direkt aufeinanderfolgenden Stunden
    avoid_consecutive: bool = True
    # Hauptfächer vor allen anderen Fächern verteilen
    prioritize_core: bool = True
    # Akzeptiert und gespeichert, ohne Einfluss auf die Platzierung
    respect_time_slots: bool = True
    # Hauptfächer bevorzugt in frühe Stunden
    prefer_morning_hours: bool = True
    # Lehrer-ID → max. Wochenstunden (fehlt = EngineConstants.default_weekly_hours)
    teacher_weekly_hours: dict[str, int] = Field(default_factory=dict)


# ─── ENGINE-KONSTANTEN ───

class EngineConstants(BaseModel):
    """Prioritätslisten des Generators; austauschbar ohne Eingriff in die Platzierung."""
    # Hauptfächer in Verteilungsreihenfolge
    core_subjects: list[str] = Field(
        default=["Matematik", "Türkçe", "Fen Bilimleri", "Sosyal Bilgiler"])
    # Tagespriorität im Modus "balanced" (Index = Wochentag, kleiner = bevorzugt)
    balanced_day_priority: list[int] = Field(default=[2, 0, 1, 0, 2])
    # Wochenstunden-Obergrenze ohne individuellen Eintrag
    default_weekly_hours: int = Field(20, ge=0)


# ─── GESAMT-CONFIG ───

class AppConfig(BaseModel):
    """Gesamtkonfiguration (wird als YAML gespeichert)."""
    # Name der Schule
    school_name: str = Field("Örnek Okulu",
        description="Name der Schule")
    # Voreinstellungen für Generierungsläufe
    options: GenerationOptions = Field(default_factory=GenerationOptions)
    # Prioritätslisten des Generators
    constants: EngineConstants = Field(default_factory=EngineConstants)
