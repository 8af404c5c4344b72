from models.level import Level
from models.teacher import Teacher
from models.school_class import SchoolClass
from models.subject import Subject
from models.timeslot import DAYS, PERIODS, FixedKind, TimeSlot
from models.schedule import FixedSlot, Schedule, TeachingSlot, build_class_schedule
from models.school_data import SchoolData, FeasibilityReport

__all__ = [
    "Level",
    "Teacher",
    "SchoolClass",
    "Subject",
    "DAYS",
    "PERIODS",
    "FixedKind",
    "TimeSlot",
    "FixedSlot",
    "TeachingSlot",
    "Schedule",
    "build_class_schedule",
    "SchoolData",
    "FeasibilityReport",
]
