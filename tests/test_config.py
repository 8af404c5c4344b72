"""Tests für das Konfigurationssystem."""

from pathlib import Path

import pytest

from config.defaults import (
    MAX_DAILY_TEACHING_HOURS,
    MAX_WEEKLY_TEACHING_HOURS,
    VALID_MODES,
    default_app_config,
    default_engine_constants,
    default_generation_options,
)
from config.manager import ConfigError, ConfigManager
from config.schema import DistributionMode, GenerationOptions
from models import Level, SchoolClass, SchoolData, Subject, Teacher


def make_manager(tmp_path: Path) -> ConfigManager:
    mgr = ConfigManager()
    mgr.CONFIG_DIR = tmp_path
    mgr.DEFAULT_CONFIG = tmp_path / "scheduler_config.yaml"
    return mgr


# ─── DEFAULT-KONFIGURATION ────────────────────────────────────────────────────

class TestDefaultConfig:
    def test_default_options(self):
        opts = default_generation_options()
        assert opts.max_daily_hours == 8
        assert opts.mode == DistributionMode.BALANCED.value
        assert opts.avoid_consecutive
        assert opts.prioritize_core
        assert opts.prefer_morning_hours
        assert opts.teacher_weekly_hours == {}

    def test_default_constants(self):
        c = default_engine_constants()
        assert c.core_subjects == ["Matematik", "Türkçe", "Fen Bilimleri", "Sosyal Bilgiler"]
        assert c.balanced_day_priority == [2, 0, 1, 0, 2]
        assert c.default_weekly_hours == 20

    def test_policy_limits(self):
        assert MAX_WEEKLY_TEACHING_HOURS == 30
        assert MAX_DAILY_TEACHING_HOURS == 9

    def test_valid_modes(self):
        assert set(VALID_MODES) == {"balanced", "compact", "spread"}

    def test_default_app_config(self):
        config = default_app_config()
        assert config.options == GenerationOptions()

    def test_options_by_alias(self):
        opts = GenerationOptions.model_validate({
            "maxDailyHours": 5,
            "preferMorningHours": False,
            "teacherWeeklyHours": {"T1": 12},
        })
        assert opts.max_daily_hours == 5
        assert not opts.prefer_morning_hours
        assert opts.teacher_weekly_hours == {"T1": 12}


# ─── CONFIG-MANAGER ───────────────────────────────────────────────────────────

class TestConfigManager:
    def test_save_and_load_roundtrip(self, tmp_path: Path):
        """Gespeicherte Config lässt sich identisch wieder laden."""
        mgr = make_manager(tmp_path)
        config = default_app_config()
        config.school_name = "Atatürk İlkokulu"
        config.options.teacher_weekly_hours = {"T001": 15}
        mgr.save(config)

        loaded = mgr.load()
        assert loaded == config

    def test_yaml_has_section_comments(self, tmp_path: Path):
        mgr = make_manager(tmp_path)
        mgr.save(default_app_config())
        text = mgr.DEFAULT_CONFIG.read_text(encoding="utf-8")
        assert "Ders Programı Generator" in text
        assert "Generierungs-Optionen" in text
        assert "max_daily_hours: 8" in text

    def test_first_run_check(self, tmp_path: Path):
        mgr = make_manager(tmp_path)
        assert mgr.first_run_check()
        mgr.save(default_app_config())
        assert not mgr.first_run_check()

    def test_load_nonexistent_raises(self, tmp_path: Path):
        mgr = make_manager(tmp_path)
        with pytest.raises(FileNotFoundError):
            mgr.load(tmp_path / "not_there.yaml")

    def test_load_invalid_raises_value_error(self, tmp_path: Path):
        path = tmp_path / "kaputt.yaml"
        path.write_text("options:\n  max_daily_hours: viele\n", encoding="utf-8")
        mgr = make_manager(tmp_path)
        with pytest.raises(ValueError, match="ungültig"):
            mgr.load(path)

    def test_load_partial_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "teil.yaml"
        path.write_text("school_name: Test\noptions:\n  mode: spread\n", encoding="utf-8")
        loaded = make_manager(tmp_path).load(path)
        assert loaded.school_name == "Test"
        assert loaded.options.mode == "spread"
        assert loaded.options.max_daily_hours == 8

    def test_teacher_names_as_comments(self, tmp_path: Path):
        mgr = make_manager(tmp_path)
        config = default_app_config()
        config.options.teacher_weekly_hours = {"T002": 12, "T001": 15}
        teacher = Teacher(id="T001", name="Ayşe Yılmaz", branch="Türkçe",
                          level=Level.ORTAOKUL)
        mgr.save(config, teachers=[teacher])

        lines = mgr.DEFAULT_CONFIG.read_text(encoding="utf-8").splitlines()
        t1 = next(line for line in lines if line.strip().startswith("T001:"))
        t2 = next(line for line in lines if line.strip().startswith("T002:"))
        assert "Ayşe Yılmaz" in t1
        assert "#" not in t2
        assert lines.index(t1) < lines.index(t2)


# ─── CONFIG-PRÜFUNG ───────────────────────────────────────────────────────────

class TestConfigCheck:
    def write(self, tmp_path: Path, text: str) -> Path:
        path = tmp_path / "scheduler_config.yaml"
        path.write_text(text, encoding="utf-8")
        return path

    def test_saved_default_is_valid(self, tmp_path: Path):
        mgr = make_manager(tmp_path)
        mgr.save(default_app_config())
        assert mgr.check() == []

    def test_daily_hours_out_of_range(self, tmp_path: Path):
        path = self.write(tmp_path, "options:\n  max_daily_hours: 12\n")
        assert make_manager(tmp_path).check(path) == [
            "options: Günlük maksimum ders saati 1-10 arasında olmalıdır"
        ]

    def test_unknown_mode(self, tmp_path: Path):
        path = self.write(tmp_path, "options:\n  mode: chaos\n")
        assert make_manager(tmp_path).check(path) == [
            "options: Geçersiz dağılım modu: chaos"
        ]

    def test_negative_teacher_hours(self, tmp_path: Path):
        path = self.write(tmp_path, "teacher_weekly_hours:\n  T001: -3\n")
        assert make_manager(tmp_path).check(path) == [
            "options: Geçersiz haftalık ders saati: T001 (-3)"
        ]

    def test_root_not_mapping(self, tmp_path: Path):
        path = self.write(tmp_path, "- a\n- b\n")
        assert make_manager(tmp_path).check(path) == [
            "Wurzelelement muss eine Zuordnung sein"
        ]

    def test_load_raises_with_error_list(self, tmp_path: Path):
        path = self.write(
            tmp_path, "options:\n  max_daily_hours: 0\n  mode: chaos\n"
        )
        with pytest.raises(ConfigError) as exc_info:
            make_manager(tmp_path).load(path)
        assert exc_info.value.errors == [
            "options: Günlük maksimum ders saati 1-10 arasında olmalıdır",
            "options: Geçersiz dağılım modu: chaos",
        ]

    def test_load_merges_teacher_hours_into_options(self, tmp_path: Path):
        path = self.write(tmp_path, "teacher_weekly_hours:\n  T001: 14\n")
        config = make_manager(tmp_path).load(path)
        assert config.options.teacher_weekly_hours == {"T001": 14}


# ─── WOCHENSTUNDEN PRO LEHRKRAFT ──────────────────────────────────────────────

class TestTeacherHours:
    def test_set_without_config_file(self, tmp_path: Path):
        mgr = make_manager(tmp_path)
        config = mgr.set_teacher_hours("T003", 10)
        assert config.options.teacher_weekly_hours == {"T003": 10}
        assert mgr.load().options.teacher_weekly_hours == {"T003": 10}

    def test_set_and_clear(self, tmp_path: Path):
        mgr = make_manager(tmp_path)
        mgr.set_teacher_hours("T001", 15)
        mgr.set_teacher_hours("T002", 0)
        assert mgr.load().options.teacher_weekly_hours == {"T001": 15, "T002": 0}

        mgr.set_teacher_hours("T001", None)
        assert mgr.load().options.teacher_weekly_hours == {"T002": 0}

    def test_keeps_other_settings(self, tmp_path: Path):
        mgr = make_manager(tmp_path)
        config = default_app_config()
        config.school_name = "Cumhuriyet Ortaokulu"
        config.options.mode = "spread"
        mgr.save(config)

        mgr.set_teacher_hours("T001", 18)
        loaded = mgr.load()
        assert loaded.school_name == "Cumhuriyet Ortaokulu"
        assert loaded.options.mode == "spread"

    def test_negative_rejected_and_not_saved(self, tmp_path: Path):
        mgr = make_manager(tmp_path)
        mgr.set_teacher_hours("T001", 15)
        with pytest.raises(ConfigError) as exc_info:
            mgr.set_teacher_hours("T001", -1)
        assert exc_info.value.errors == ["Geçersiz haftalık ders saati: T001 (-1)"]
        assert mgr.load().options.teacher_weekly_hours == {"T001": 15}

    def test_overrides_reach_feasibility_check(self, tmp_path: Path):
        mgr = make_manager(tmp_path)
        mgr.set_teacher_hours("T1", 3)
        data = SchoolData(
            teachers=[Teacher(id="T1", name="Ali Kaya", branch="Matematik",
                              level=Level.ORTAOKUL)],
            classes=[SchoolClass(id="C1", name="5-A", level=Level.ORTAOKUL)],
            subjects=[Subject(id="S1", name="Matematik", branch="Matematik",
                              level=Level.ORTAOKUL, weekly_hours=6)],
        )
        report = data.validate_feasibility(mgr.load().options)
        assert not report.is_feasible
