from config.schema import (
    AppConfig,
    DistributionMode,
    EngineConstants,
    GenerationOptions,
)

# Feste Prüfgrenzen für manuell bearbeitete Pläne (nicht konfigurierbar)
MAX_WEEKLY_TEACHING_HOURS = 30
MAX_DAILY_TEACHING_HOURS = 9

# Zulässiger Bereich für GenerationOptions.max_daily_hours
MAX_DAILY_HOURS_RANGE = (1, 10)

VALID_MODES: tuple[str, ...] = tuple(m.value for m in DistributionMode)


def default_generation_options() -> GenerationOptions:
    """Standard-Optionen: ausgewogene Verteilung, Hauptfächer morgens zuerst."""
    return GenerationOptions(
        max_daily_hours=8,
        mode=DistributionMode.BALANCED.value,
        avoid_consecutive=True,
        prioritize_core=True,
        respect_time_slots=True,
        prefer_morning_hours=True,
        teacher_weekly_hours={},
    )


def default_engine_constants() -> EngineConstants:
    return EngineConstants()


def default_app_config() -> AppConfig:
    return AppConfig(
        options=default_generation_options(),
        constants=default_engine_constants(),
    )
