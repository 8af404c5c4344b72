"""Testdaten-Generator für den Ders-Programı-Generator.

Erzeugt einen reproduzierbaren Datensatz über alle drei Stufen mit
absichtlichen Engpässen für robuste Tests.

Absichtliche Engpässe:
  1. Fen Bilimleri (Ortaokul): nur eine Lehrkraft → Kapazität = Bedarf
     (Okul Öncesi analog), der Machbarkeits-Check warnt
  2. Beden Eğitimi (Ortaokul): Lehrkraft ohne passendes Fach

Lösbarkeits-Garantien:
  - Matematik/Türkçe (Ortaokul): je 2 Lehrkräfte → Bedarf gedeckt
  - Sınıf Öğretmenliği (İlkokul): je eine Klassenlehrkraft pro Klasse
"""

import random
from typing import Optional

from models.level import Level
from models.school_class import SchoolClass
from models.school_data import SchoolData
from models.subject import Subject
from models.teacher import Teacher

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "Ayşe", "Mehmet", "Fatma", "Ahmet", "Zeynep", "Mustafa", "Elif", "Ali",
    "Emine", "Hüseyin", "Hatice", "Hasan", "Merve", "İbrahim", "Büşra",
    "Murat", "Esra", "Ömer", "Selin", "Emre",
]

_LAST_NAMES = [
    "Yılmaz", "Kaya", "Demir", "Şahin", "Çelik", "Yıldız", "Yıldırım",
    "Öztürk", "Aydın", "Özdemir", "Arslan", "Doğan", "Kılıç", "Aslan",
    "Çetin", "Kara", "Koç", "Kurt", "Özkan", "Şimşek",
]

# ─── Stundentafeln: (Fach, Branş, Wochenstunden) pro Stufe ───────────────────

STUNDENTAFEL: dict[Level, list[tuple[str, str, int]]] = {
    Level.ANAOKULU: [
        ("Oyun", "Okul Öncesi", 10),
        ("Müzik", "Müzik", 2),
    ],
    Level.ILKOKUL: [
        ("Türkçe", "Sınıf Öğretmenliği", 8),
        ("Matematik", "Sınıf Öğretmenliği", 5),
        ("Hayat Bilgisi", "Sınıf Öğretmenliği", 4),
        ("İngilizce", "İngilizce", 2),
        ("Müzik", "Müzik", 1),
    ],
    Level.ORTAOKUL: [
        ("Matematik", "Matematik", 5),
        ("Türkçe", "Türkçe", 5),
        ("Fen Bilimleri", "Fen Bilimleri", 4),
        ("Sosyal Bilgiler", "Sosyal Bilgiler", 3),
        ("İngilizce", "İngilizce", 3),
        ("Müzik", "Müzik", 1),
    ],
}

# Klassen pro Stufe
_CLASS_COUNTS: dict[Level, int] = {
    Level.ANAOKULU: 2,
    Level.ILKOKUL: 3,
    Level.ORTAOKUL: 5,
}

# Lehrkräfte pro (Stufe, Branş)
_TEACHER_COUNTS: dict[tuple[Level, str], int] = {
    (Level.ANAOKULU, "Okul Öncesi"): 1,
    (Level.ANAOKULU, "Müzik"): 1,
    (Level.ILKOKUL, "Sınıf Öğretmenliği"): 3,
    (Level.ILKOKUL, "İngilizce"): 1,
    (Level.ILKOKUL, "Müzik"): 1,
    (Level.ORTAOKUL, "Matematik"): 2,
    (Level.ORTAOKUL, "Türkçe"): 2,
    (Level.ORTAOKUL, "Fen Bilimleri"): 1,    # Engpass 1
    (Level.ORTAOKUL, "Sosyal Bilgiler"): 1,
    (Level.ORTAOKUL, "İngilizce"): 1,
    (Level.ORTAOKUL, "Müzik"): 1,
    (Level.ORTAOKUL, "Beden Eğitimi"): 1,    # Engpass 2
}

_LEVEL_PREFIX = {Level.ANAOKULU: "ANA", Level.ILKOKUL: "ILK", Level.ORTAOKUL: "ORT"}


class FakeDataGenerator:
    """Generiert einen vollständigen Datensatz (gleicher Seed → gleiche Daten)."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self.rng = random.Random(seed)
        self._used_names: set[str] = set()

    # ─── Fächer ───────────────────────────────────────────────────────────────

    def _generate_subjects(self) -> list[Subject]:
        subjects = []
        for level, rows in STUNDENTAFEL.items():
            for idx, (name, branch, hours) in enumerate(rows, start=1):
                subjects.append(Subject(
                    id=f"{_LEVEL_PREFIX[level]}-S{idx:02d}",
                    name=name,
                    branch=branch,
                    level=level,
                    weekly_hours=hours,
                ))
        return subjects

    # ─── Klassen ──────────────────────────────────────────────────────────────

    def _generate_classes(self) -> list[SchoolClass]:
        """Anaokulu: "Papatya-1".., İlkokul: "1-A".., Ortaokul: "5-A", "5-B", "6-A".."""
        classes = []
        for level, count in _CLASS_COUNTS.items():
            for i in range(count):
                if level == Level.ANAOKULU:
                    name = f"Papatya-{i + 1}"
                elif level == Level.ILKOKUL:
                    name = f"{i + 1}-A"
                else:
                    name = f"{5 + i // 2}-{'AB'[i % 2]}"
                classes.append(SchoolClass(
                    id=f"{_LEVEL_PREFIX[level]}-C{i + 1:02d}",
                    name=name,
                    level=level,
                ))
        return classes

    # ─── Lehrkräfte ───────────────────────────────────────────────────────────

    def _make_name(self) -> str:
        """Eindeutiger Name; nach vielen Kollisionen mit Zähler-Suffix."""
        for _ in range(50):
            name = f"{self.rng.choice(_FIRST_NAMES)} {self.rng.choice(_LAST_NAMES)}"
            if name not in self._used_names:
                self._used_names.add(name)
                return name
        name = f"{self.rng.choice(_FIRST_NAMES)} {self.rng.choice(_LAST_NAMES)} {len(self._used_names)}"
        self._used_names.add(name)
        return name

    def _generate_teachers(self) -> list[Teacher]:
        teachers = []
        for (level, branch), count in _TEACHER_COUNTS.items():
            for _ in range(count):
                teachers.append(Teacher(
                    id=f"T{len(teachers) + 1:03d}",
                    name=self._make_name(),
                    branch=branch,
                    level=level,
                ))
        return teachers

    # ─── Gesamt ───────────────────────────────────────────────────────────────

    def generate(self) -> SchoolData:
        """Erzeugt den kompletten Datensatz."""
        return SchoolData(
            teachers=self._generate_teachers(),
            classes=self._generate_classes(),
            subjects=self._generate_subjects(),
        )

    def print_summary(self, data: SchoolData) -> None:
        """Gibt eine Lehrkräfte-Übersicht über Rich aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="Lehrkräfte", box=box.ROUNDED)
        table.add_column("ID", style="bold")
        table.add_column("Name")
        table.add_column("Branş")
        table.add_column("Stufe")
        for t in data.teachers:
            table.add_row(t.id, t.name, t.branch, t.level.value)
        console.print(table)
