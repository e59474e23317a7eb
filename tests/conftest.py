"""Gemeinsame Testdaten: kleiner Datensatz mit drei Klassen und einer Pause."""

import pytest

from config.defaults import default_time_grid
from config.schema import PeriodDefinition, TimeGridConfig
from data.mock_data import MockDataSource
from models.school_class import SchoolClass
from models.school_data import TimetableData
from models.subject import Subject
from models.teacher import Teacher
from models.timetable import build_empty_timetable
from planner.store import TimetableStore


def make_mini_grid() -> TimeGridConfig:
    return TimeGridConfig(
        day_names=["Monday", "Tuesday"],
        periods=[
            PeriodDefinition(name="Period 1", start_time="08:00", end_time="08:45"),
            PeriodDefinition(name="Period 2", start_time="08:45", end_time="09:30"),
            PeriodDefinition(name="Break", start_time="09:30", end_time="09:45", is_break=True),
            PeriodDefinition(name="Period 3", start_time="09:45", end_time="10:30"),
        ],
    )


def make_mini_data() -> TimetableData:
    """Drei Klassen; T1 ist Tuesday/Period 3 in A und B gleichzeitig eingeplant."""
    grid = make_mini_grid()
    classes = [
        SchoolClass(id="A", name="Class A"),
        SchoolClass(id="B", name="Class B"),
        SchoolClass(id="C", name="Class C"),
    ]
    subjects = [
        Subject(id="math", name="Mathematics"),
        Subject(id="eng", name="English"),
        Subject(id="art", name="Art"),
    ]
    teachers = [
        Teacher(id="T1", name="Mr. One", subjects=["math", "eng"]),
        Teacher(id="T2", name="Ms. Two", subjects=["eng"]),
        Teacher(id="T3", name="Mx. Three", subjects=["math"]),
    ]
    timetables = {c.id: build_empty_timetable(c.id, grid) for c in classes}
    timetables["A"] = timetables["A"].with_assignment("Tuesday", "Period 3", "math", "T1")
    timetables["B"] = timetables["B"].with_assignment("Tuesday", "Period 3", "math", "T1")
    timetables["A"] = timetables["A"].with_assignment("Monday", "Period 1", "eng", "T2")
    timetables["C"] = timetables["C"].with_assignment("Monday", "Period 2", "math", "T1")
    return TimetableData(
        classes=classes, subjects=subjects, teachers=teachers,
        time_grid=grid, timetables=timetables,
    )


def make_mini_store() -> TimetableStore:
    return TimetableStore(make_mini_data())


# ─── FIXTURES ─────────────────────────────────────────────────────────────────

@pytest.fixture
def mini_grid() -> TimeGridConfig:
    return make_mini_grid()


@pytest.fixture
def mini_data() -> TimetableData:
    return make_mini_data()


@pytest.fixture
def mini_store() -> TimetableStore:
    return make_mini_store()


@pytest.fixture
def mock_store() -> TimetableStore:
    """Speicher mit den Demo-Daten im Standard-Raster."""
    return TimetableStore(MockDataSource(default_time_grid()).load())
