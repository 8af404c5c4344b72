"""Tests für die Kommandozeile (click.testing.CliRunner)."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from main import cli
from models.school_data import SchoolData
from solver.generator import GenerationResult


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def run_pipeline(runner: CliRunner) -> None:
    assert runner.invoke(cli, ["demo", "--seed", "42"]).exit_code == 0
    assert runner.invoke(cli, ["generate"]).exit_code == 0


class TestSetup:
    def test_init_creates_config(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["init", "--school-name", "Test Okulu"])
            assert result.exit_code == 0
            assert Path("config/scheduler_config.yaml").exists()

            shown = runner.invoke(cli, ["config", "show"])
            assert shown.exit_code == 0
            assert "Test Okulu" in shown.output

    def test_init_keeps_existing_on_no(self, runner):
        with runner.isolated_filesystem():
            runner.invoke(cli, ["init", "--school-name", "Erste Schule"])
            runner.invoke(cli, ["init", "--school-name", "Zweite"], input="n\n")
            shown = runner.invoke(cli, ["config", "show"])
            assert "Erste Schule" in shown.output

    def test_config_show_without_file_uses_defaults(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["config", "show"])
            assert result.exit_code == 0
            assert "Örnek Okulu" in result.output

    def test_config_hours_set_and_clear(self, runner):
        with runner.isolated_filesystem():
            runner.invoke(cli, ["demo"])
            result = runner.invoke(cli, ["config", "hours", "T001", "12"])
            assert result.exit_code == 0
            text = Path("config/scheduler_config.yaml").read_text(encoding="utf-8")
            line = next(l for l in text.splitlines() if l.strip().startswith("T001:"))
            data = SchoolData.load_json(Path("output/school_data.json"))
            assert data.teacher("T001").name in line

            shown = runner.invoke(cli, ["config", "show"])
            assert "Individuelle Wochenstunden" in shown.output

            cleared = runner.invoke(cli, ["config", "hours", "T001", "--clear"])
            assert cleared.exit_code == 0
            shown = runner.invoke(cli, ["config", "show"])
            assert "Individuelle Wochenstunden" not in shown.output

    def test_config_hours_needs_value_or_clear(self, runner):
        with runner.isolated_filesystem():
            assert runner.invoke(cli, ["config", "hours", "T001"]).exit_code == 1

    def test_config_check_reports_errors(self, runner):
        with runner.isolated_filesystem():
            runner.invoke(cli, ["init"])
            assert runner.invoke(cli, ["config", "check"]).exit_code == 0

            Path("config/scheduler_config.yaml").write_text(
                "options:\n  max_daily_hours: 12\n", encoding="utf-8"
            )
            result = runner.invoke(cli, ["config", "check"])
            assert result.exit_code == 1
            assert "1-10" in result.output

            generated = runner.invoke(cli, ["generate"])
            assert generated.exit_code == 1
            assert "Konfigurationsdatei ungültig" in generated.output


class TestPipeline:
    def test_demo_writes_json(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["demo", "--json-path", "daten.json"])
            assert result.exit_code == 0
            data = SchoolData.load_json(Path("daten.json"))
            assert data.teachers

    def test_check_feasible(self, runner):
        with runner.isolated_filesystem():
            runner.invoke(cli, ["demo"])
            result = runner.invoke(cli, ["check"])
            assert result.exit_code == 0

    def test_check_without_data(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["check"])
            assert result.exit_code == 1
            assert "Keine Datendatei" in result.output

    def test_generate_stores_schedules(self, runner):
        with runner.isolated_filesystem():
            run_pipeline(runner)
            data = SchoolData.load_json(Path("output/school_data.json"))
            assert len(data.schedules) == len(data.teachers)
            result = GenerationResult.load_json(Path("output/generation_result.json"))
            assert result.success

    def test_generate_invalid_option(self, runner):
        with runner.isolated_filesystem():
            runner.invoke(cli, ["demo"])
            result = runner.invoke(cli, ["generate", "--max-daily-hours", "12"])
            assert result.exit_code == 1
            assert "1-10" in result.output

    def test_validate_teacher_and_class(self, runner):
        with runner.isolated_filesystem():
            run_pipeline(runner)
            assert runner.invoke(cli, ["validate", "teacher", "T001"]).exit_code == 0
            assert runner.invoke(cli, ["validate", "class", "ORT-C01"]).exit_code == 0

    def test_validate_unknown_entity(self, runner):
        with runner.isolated_filesystem():
            run_pipeline(runner)
            assert runner.invoke(cli, ["validate", "teacher", "T999"]).exit_code == 1

    def test_conflict_command(self, runner):
        with runner.isolated_filesystem():
            run_pipeline(runner)
            free = runner.invoke(cli, ["conflict", "teacher", "Salı", "1", "XX", "T001"])
            assert free.exit_code == 0
            bad = runner.invoke(cli, ["conflict", "teacher", "Monday", "1", "XX", "T001"])
            assert bad.exit_code == 1
            assert "Geçersiz gün" in bad.output

    def test_verbose_flag(self, runner):
        with runner.isolated_filesystem():
            runner.invoke(cli, ["demo"])
            result = runner.invoke(cli, ["--verbose", "generate"])
            assert result.exit_code == 0
