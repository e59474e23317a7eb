"""Terminal-Ansichten: Klassen-Stundenplan und schulweites Raster."""

from views.class_grid import render_class_rows, NO_TIMETABLE_TEXT
from views.school_grid import SchoolGridView, CellSelection

__all__ = ["render_class_rows", "NO_TIMETABLE_TEXT", "SchoolGridView", "CellSelection"]
