from models.teacher import Teacher
from models.school_class import SchoolClass
from models.subject import Subject
from models.timetable import Timetable, TimetableSlot, build_empty_timetable
from models.school_data import TimetableData, IntegrityReport

__all__ = [
    "Teacher",
    "SchoolClass",
    "Subject",
    "Timetable",
    "TimetableSlot",
    "build_empty_timetable",
    "TimetableData",
    "IntegrityReport",
]
