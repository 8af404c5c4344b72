"""Solver-Modul (Greedy-Generator)."""

from .generator import (
    GenerationContext,
    GenerationResult,
    GenerationStatistics,
    ScheduleGenerator,
    TeacherWorkload,
    validate_generation_options,
)

__all__ = [
    "GenerationContext",
    "GenerationResult",
    "GenerationStatistics",
    "ScheduleGenerator",
    "TeacherWorkload",
    "validate_generation_options",
]
