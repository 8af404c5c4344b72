"""Schulstufen (Bildungsebenen) einer Schule."""

from enum import Enum


class Level(str, Enum):
    """Bildungsebene: bestimmt Pausenraster und zulässige Paarungen."""

    ANAOKULU = "Anaokulu"   # Kindergarten
    ILKOKUL = "İlkokul"     # Grundschule
    ORTAOKUL = "Ortaokul"   # Mittelstufe
