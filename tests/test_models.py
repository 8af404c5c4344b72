"""Tests für Datenmodelle: Raster, feste Perioden, Pläne, Machbarkeit."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from config.schema import GenerationOptions
from data.fake_data import FakeDataGenerator
from models import (
    DAYS,
    PERIODS,
    FixedKind,
    FixedSlot,
    Level,
    Schedule,
    SchoolClass,
    SchoolData,
    Subject,
    Teacher,
    TeachingSlot,
    TimeSlot,
    build_class_schedule,
)
from models.timeslot import (
    fixed_marker,
    is_teaching_period,
    lunch_period,
    period_number,
    teaching_periods,
)


# ─── Hilfsfunktionen ──────────────────────────────────────────────────────────

def make_teacher(tid: str = "T1", branch: str = "Matematik",
                 level: Level = Level.ORTAOKUL) -> Teacher:
    return Teacher(id=tid, name=f"Lehrer {tid}", branch=branch, level=level)


def make_subject(sid: str = "S1", name: str = "Matematik", branch: str = "Matematik",
                 level: Level = Level.ORTAOKUL, hours: int = 4) -> Subject:
    return Subject(id=sid, name=name, branch=branch, level=level, weekly_hours=hours)


# ─── WOCHENRASTER ─────────────────────────────────────────────────────────────

class TestTimeGrid:
    def test_days_and_periods(self):
        assert len(DAYS) == 5
        assert DAYS[0] == "Pazartesi"
        assert len(PERIODS) == 13
        assert PERIODS[0] == "prep"
        assert PERIODS[-1] == "10"

    def test_period_number(self):
        assert period_number("7") == 7
        assert period_number("breakfast") is None

    def test_lunch_period_by_level(self):
        assert lunch_period(Level.ORTAOKUL) == "6"
        assert lunch_period(Level.ILKOKUL) == "5"
        assert lunch_period(Level.ANAOKULU) == "5"

    def test_fixed_markers_ortaokul(self):
        lvl = Level.ORTAOKUL
        assert fixed_marker("prep", lvl) == FixedKind.PREP
        assert fixed_marker("breakfast", lvl) == FixedKind.BREAKFAST
        assert fixed_marker("6", lvl) == FixedKind.LUNCH
        assert fixed_marker("afternoon-breakfast", lvl) == FixedKind.AFTERNOON_BREAKFAST
        assert fixed_marker("5", lvl) is None

    def test_fixed_markers_ilkokul(self):
        """Außerhalb Ortaokul: prep ist Frühstück, keine zweite Frühstückspause."""
        lvl = Level.ILKOKUL
        assert fixed_marker("prep", lvl) == FixedKind.BREAKFAST
        assert fixed_marker("breakfast", lvl) is None
        assert fixed_marker("5", lvl) == FixedKind.LUNCH
        assert fixed_marker("6", lvl) is None

    def test_breakfast_not_teachable_outside_ortaokul(self):
        assert not is_teaching_period("breakfast", Level.ANAOKULU)

    def test_teaching_periods(self):
        assert teaching_periods(Level.ORTAOKUL) == ["1", "2", "3", "4", "5", "7", "8", "9", "10"]
        assert teaching_periods(Level.ILKOKUL) == ["1", "2", "3", "4", "6", "7", "8", "9", "10"]

    def test_timeslot_validity(self):
        assert TimeSlot("Salı", "3").is_valid
        assert not TimeSlot("Monday", "3").is_valid
        assert not TimeSlot("Salı", "11").is_valid

    def test_timeslot_hashable(self):
        assert len({TimeSlot("Cuma", "1"), TimeSlot("Cuma", "1")}) == 1


# ─── STAMMDATEN ───────────────────────────────────────────────────────────────

class TestEntities:
    def test_teacher_name_stripped(self):
        t = Teacher(id="T1", name="  Ayşe Yılmaz ", branch="Türkçe", level=Level.ORTAOKUL)
        assert t.name == "Ayşe Yılmaz"

    def test_teacher_name_too_short(self):
        with pytest.raises(ValidationError):
            Teacher(id="T1", name="A", branch="Türkçe", level=Level.ORTAOKUL)

    def test_teacher_can_teach(self):
        t = make_teacher()
        assert t.can_teach("Matematik", Level.ORTAOKUL)
        assert not t.can_teach("Matematik", Level.ILKOKUL)
        assert not t.can_teach("Türkçe", Level.ORTAOKUL)

    def test_level_from_value(self):
        t = Teacher(id="T1", name="Ali Kaya", branch="Müzik", level="İlkokul")
        assert t.level == Level.ILKOKUL

    def test_subject_hours_bounds(self):
        with pytest.raises(ValidationError):
            make_subject(hours=0)
        with pytest.raises(ValidationError):
            make_subject(hours=11)

    def test_subject_name_too_long(self):
        with pytest.raises(ValidationError):
            make_subject(name="M" * 101)

    def test_class_empty_name(self):
        with pytest.raises(ValidationError):
            SchoolClass(id="C1", name="   ", level=Level.ORTAOKUL)


# ─── STUNDENPLAN ──────────────────────────────────────────────────────────────

class TestSchedule:
    def test_set_get_clear(self):
        s = Schedule(id="s1", teacher_id="T1")
        assert s.is_free("Pazartesi", "1")
        s.set("Pazartesi", "1", TeachingSlot(subject_id="S1", class_id="C1"))
        assert not s.is_free("Pazartesi", "1")
        s.clear("Pazartesi", "1")
        assert s.get("Pazartesi", "1") is None

    def test_teaching_hours_exclude_fixed(self):
        s = Schedule(id="s1", teacher_id="T1")
        s.set("Salı", "prep", FixedSlot(marker=FixedKind.PREP))
        s.set("Salı", "1", TeachingSlot(subject_id="S1", class_id="C1"))
        s.set("Cuma", "2", TeachingSlot(subject_id="S1", class_id="C1"))
        assert s.teaching_hours() == 2
        daily = s.daily_teaching_hours()
        assert daily["Salı"] == 1
        assert daily["Pazartesi"] == 0

    def test_wire_format(self):
        s = Schedule(id="s1", teacher_id="T1")
        s.set("Salı", "prep", FixedSlot(marker=FixedKind.PREP))
        s.set("Salı", "1", TeachingSlot(subject_id="S1", class_id="C1"))
        doc = s.to_wire()
        assert doc["teacherId"] == "T1"
        assert doc["schedule"]["Salı"]["prep"] == {
            "classId": "fixed-period", "subjectId": "fixed-prep"
        }
        assert doc["schedule"]["Salı"]["1"] == {"subjectId": "S1", "classId": "C1"}

    def test_from_wire_skips_null_cells(self):
        doc = {
            "id": "s1",
            "teacherId": "T1",
            "schedule": {
                "Pazartesi": {
                    "prep": {"classId": "fixed-period", "subjectId": "fixed-breakfast"},
                    "1": None,
                    "2": {"subjectId": "S1", "classId": "C1"},
                },
            },
        }
        s = Schedule.from_wire(doc)
        assert isinstance(s.get("Pazartesi", "prep"), FixedSlot)
        assert s.get("Pazartesi", "prep").marker == FixedKind.BREAKFAST
        assert s.get("Pazartesi", "1") is None
        assert s.get("Pazartesi", "2").class_id == "C1"

    def test_json_roundtrip_keeps_slot_kinds(self):
        s = Schedule(id="s1", teacher_id="T1")
        s.set("Cuma", "6", FixedSlot(marker=FixedKind.LUNCH))
        s.set("Cuma", "7", TeachingSlot(subject_id="S1", class_id="C1"))
        loaded = Schedule.model_validate_json(s.model_dump_json())
        assert isinstance(loaded.get("Cuma", "6"), FixedSlot)
        assert isinstance(loaded.get("Cuma", "7"), TeachingSlot)

    def test_build_class_schedule(self):
        a = Schedule(id="a", teacher_id="TA")
        b = Schedule(id="b", teacher_id="TB")
        a.set("Pazartesi", "1", TeachingSlot(subject_id="S1", class_id="C1"))
        b.set("Pazartesi", "2", TeachingSlot(subject_id="S2", class_id="C1"))
        b.set("Pazartesi", "3", TeachingSlot(subject_id="S2", class_id="C2"))
        a.set("Pazartesi", "prep", FixedSlot(marker=FixedKind.PREP))

        grid = build_class_schedule("C1", [a, b])
        assert set(grid["Pazartesi"]) == {"1", "2"}
        assert grid["Pazartesi"]["1"].teacher_id == "TA"
        assert grid["Pazartesi"]["2"].teacher_id == "TB"

    def test_build_class_schedule_first_wins(self):
        a = Schedule(id="a", teacher_id="TA")
        b = Schedule(id="b", teacher_id="TB")
        a.set("Salı", "2", TeachingSlot(subject_id="S1", class_id="C1"))
        b.set("Salı", "2", TeachingSlot(subject_id="S2", class_id="C1"))
        grid = build_class_schedule("C1", [a, b])
        assert grid["Salı"]["2"].teacher_id == "TA"


# ─── MACHBARKEITS-CHECK ───────────────────────────────────────────────────────

class TestFeasibility:
    def test_feasible_mini(self):
        data = SchoolData(
            teachers=[make_teacher()],
            classes=[SchoolClass(id="C1", name="5-A", level=Level.ORTAOKUL)],
            subjects=[make_subject()],
        )
        report = data.validate_feasibility()
        assert report.is_feasible
        assert report.errors == []

    def test_missing_teacher_is_error(self):
        data = SchoolData(
            teachers=[make_teacher(branch="Türkçe")],
            classes=[SchoolClass(id="C1", name="5-A", level=Level.ORTAOKUL)],
            subjects=[make_subject()],
        )
        report = data.validate_feasibility()
        assert not report.is_feasible
        assert any("Matematik" in e for e in report.errors)

    def test_capacity_respects_override(self):
        data = SchoolData(
            teachers=[make_teacher()],
            classes=[SchoolClass(id="C1", name="5-A", level=Level.ORTAOKUL)],
            subjects=[make_subject(hours=6)],
        )
        report = data.validate_feasibility(GenerationOptions(teacher_weekly_hours={"T1": 3}))
        assert not report.is_feasible
        assert any("Fehlen 3h" in e for e in report.errors)

    def test_subject_without_classes_ignored(self):
        data = SchoolData(
            teachers=[],
            classes=[],
            subjects=[make_subject()],
        )
        assert data.validate_feasibility().is_feasible

    def test_demo_data_feasible_with_warnings(self):
        data = FakeDataGenerator(seed=42).generate()
        report = data.validate_feasibility()
        assert report.is_feasible
        assert any("Fen Bilimleri" in w for w in report.warnings)
        assert any("Beden Eğitimi" in w for w in report.warnings)

    def test_save_and_load_json(self, tmp_path: Path):
        data = FakeDataGenerator(seed=1).generate()
        path = tmp_path / "data.json"
        data.save_json(path)
        loaded = SchoolData.load_json(path)
        assert len(loaded.teachers) == len(data.teachers)
        assert loaded.created_at is not None

    def test_load_json_missing(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            SchoolData.load_json(tmp_path / "fehlt.json")


# ─── TESTDATEN ────────────────────────────────────────────────────────────────

class TestFakeData:
    def test_same_seed_same_data(self):
        a = FakeDataGenerator(seed=7).generate()
        b = FakeDataGenerator(seed=7).generate()
        assert [t.name for t in a.teachers] == [t.name for t in b.teachers]

    def test_all_levels_present(self):
        data = FakeDataGenerator(seed=42).generate()
        assert {c.level for c in data.classes} == set(Level)
        assert {t.level for t in data.teachers} == set(Level)

    def test_teacher_ids_unique(self):
        data = FakeDataGenerator(seed=42).generate()
        ids = [t.id for t in data.teachers]
        assert len(ids) == len(set(ids))
