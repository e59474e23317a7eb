"""Tests für Klassen-Ansicht und schulweite Konfliktansicht."""

from analysis.conflicts import ConflictDetector
from planner.store import TimetableStore
from views import NO_TIMETABLE_TEXT, SchoolGridView, render_class_rows


def _store_without_c(mini_data) -> TimetableStore:
    timetables = dict(mini_data.timetables)
    del timetables["C"]
    return TimetableStore(mini_data.model_copy(update={"timetables": timetables}))


class TestClassGrid:
    def test_rows(self, mini_store):
        """Eine Zeile pro Stunde inkl. Pause; Zellen "Fach\\nLehrkraft" oder "—"."""
        rows = render_class_rows("A", mini_store)
        assert [r[0] for r in rows] == ["Period 1", "Period 2", "Break", "Period 3"]
        assert rows[0] == ["Period 1", "08:00–08:45", "English\nMs. Two", "—"]
        assert rows[2] == ["Break", "09:30–09:45", "─" * 8, "─" * 8]

    def test_conflict_marked(self, mini_store):
        index = ConflictDetector(mini_store).build_index()
        rows = render_class_rows("A", mini_store, index)
        assert rows[3][3] == "⚠ Mathematics\nMr. One"
        # Ohne Index keine Markierung
        assert render_class_rows("A", mini_store)[3][3] == "Mathematics\nMr. One"

    def test_no_timetable(self, mini_data):
        store = _store_without_c(mini_data)
        assert render_class_rows("C", store) == []

    def test_mock_week(self, mock_store):
        rows = render_class_rows("class1", mock_store)
        assert len(rows) == 13
        assert all(len(r) == 7 for r in rows)
        assert rows[0][2] == "Mathematics\nMr. Johnson"


class TestSchoolGrid:
    def test_header(self, mini_store):
        view = SchoolGridView(mini_store)
        assert view.header() == ["Stunde", "Uhrzeit", "Class A", "Class B", "Class C"]

    def test_day_rows(self, mini_store):
        rows = SchoolGridView(mini_store).render_day_rows("Tuesday")
        assert len(rows) == 4
        assert rows[2][2:] == ["Pause", "Pause", "Pause"]
        assert rows[3][2:] == ["⚠ Mathematics\nMr. One", "⚠ Mathematics\nMr. One", "—"]

    def test_conflicts_only(self, mini_store):
        """Filter zeigt nur Klassen mit mindestens einem Konflikt."""
        view = SchoolGridView(mini_store, conflicts_only=True)
        assert [c.id for c in view.visible_classes()] == ["A", "B"]
        assert view.header()[2:] == ["Class A", "Class B"]
        assert all(len(r) == 4 for r in view.render_day_rows("Monday"))

    def test_conflicts_only_without_conflicts(self, mini_store):
        mini_store.update_slot("B", "Tuesday", "Period 3", None, None)
        assert SchoolGridView(mini_store, conflicts_only=True).visible_classes() == []

    def test_placeholder(self, mini_data):
        store = _store_without_c(mini_data)
        rows = SchoolGridView(store).render_day_rows("Monday")
        assert all(r[4] == NO_TIMETABLE_TEXT for r in rows)

    def test_view_follows_store(self, mini_store):
        """Die Ansicht liest bei jedem Rendern den aktuellen Speicher-Stand."""
        view = SchoolGridView(mini_store)
        mini_store.update_slot("C", "Tuesday", "Period 1", "eng", "T2")
        assert view.render_day_rows("Tuesday")[0][4] == "English\nMs. Two"


class TestCellSelection:
    def test_conflict_cell_invokes_callback(self, mini_store):
        selected = []
        view = SchoolGridView(mini_store, on_class_select=selected.append)
        selection = view.select_cell("B", "Tuesday", "Period 3")
        assert selection.editable
        assert selection.conflict
        assert selection.conflict_class_ids == ["A", "B"]
        assert selected == ["B"]

    def test_normal_cell(self, mini_store):
        selected = []
        view = SchoolGridView(mini_store, on_class_select=selected.append)
        selection = view.select_cell("C", "Monday", "Period 2")
        assert selection.editable
        assert not selection.conflict
        assert selected == []

    def test_break_cell_not_editable(self, mini_store):
        view = SchoolGridView(mini_store)
        selection = view.select_cell("A", "Monday", "Break")
        assert not selection.editable

    def test_select_class(self, mini_store):
        selected = []
        view = SchoolGridView(mini_store, on_class_select=selected.append)
        assert view.select_class("C") == "C"
        assert selected == ["C"]
