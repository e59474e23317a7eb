"""Tests für Datenmodell und TimetableStore."""

import pytest

from config.defaults import default_time_grid
from models.school_class import SchoolClass
from models.timetable import Timetable, TimetableSlot, build_empty_timetable


# ─── DATENMODELL ──────────────────────────────────────────────────────────────

class TestTimetableModel:
    def test_empty_timetable_covers_grid(self):
        """Leerer Plan enthält jede (Tag, Stunde)-Kombination genau einmal."""
        tg = default_time_grid()
        tt = build_empty_timetable("c1", tg)
        assert len(tt.slots) == len(tg.day_names) * len(tg.periods)
        assert tt.missing_keys(tg) == []
        assert tt.duplicate_keys() == []
        assert tt.get_slot("Monday", "Lunch").is_break
        assert not tt.get_slot("Monday", "Period 1").is_break

    def test_with_assignment_replaces_only_one_slot(self):
        tt = build_empty_timetable("c1", default_time_grid())
        updated = tt.with_assignment("Monday", "Period 2", "sub1", "teacher1")
        assert updated is not tt
        for old, new in zip(tt.slots, updated.slots):
            if old.key == ("Monday", "Period 2"):
                assert new.subject_id == "sub1"
                assert new.teacher_id == "teacher1"
            else:
                assert new is old

    def test_with_assignment_unknown_slot(self):
        """Unbekannter Slot: derselbe Plan wird zurückgegeben."""
        tt = build_empty_timetable("c1", default_time_grid())
        assert tt.with_assignment("Sunday", "Period 1", "sub1", "teacher1") is tt

    def test_is_assigned(self):
        assert TimetableSlot(day="Monday", period="P1", subject_id="s", teacher_id="t").is_assigned
        assert not TimetableSlot(day="Monday", period="P1", subject_id="s").is_assigned

    def test_duplicate_keys(self):
        slot = TimetableSlot(day="Monday", period="P1")
        tt = Timetable(class_id="c1", slots=(slot, slot))
        assert tt.duplicate_keys() == [("Monday", "P1")]


# ─── INTEGRITÄT ───────────────────────────────────────────────────────────────

class TestIntegrity:
    def test_mini_data_complete(self, mini_data):
        report = mini_data.validate_integrity()
        assert report.is_complete, report.errors

    def test_mock_data_complete(self, mock_store):
        """Demo-Daten: jede Klasse hat einen vollständigen Plan."""
        report = mock_store.snapshot().validate_integrity()
        assert report.is_complete, report.errors
        assert report.warnings == []

    def test_class_without_timetable_is_error(self, mini_data):
        data = mini_data.model_copy(update={
            "classes": mini_data.classes + [SchoolClass(id="D", name="Class D")],
        })
        report = data.validate_integrity()
        assert not report.is_complete
        assert any("Klasse D" in e for e in report.errors)

    def test_unknown_teacher_is_error(self, mini_data):
        timetables = dict(mini_data.timetables)
        timetables["C"] = timetables["C"].with_assignment("Monday", "Period 1", "math", "T9")
        report = mini_data.model_copy(update={"timetables": timetables}).validate_integrity()
        assert any("T9" in e for e in report.errors)

    def test_incomplete_grid_is_error(self, mini_data):
        timetables = dict(mini_data.timetables)
        timetables["C"] = Timetable(class_id="C", slots=timetables["C"].slots[:-1])
        report = mini_data.model_copy(update={"timetables": timetables}).validate_integrity()
        assert any("fehlen" in e for e in report.errors)

    def test_assigned_break_is_warning(self, mini_data):
        timetables = dict(mini_data.timetables)
        timetables["C"] = timetables["C"].with_assignment("Monday", "Break", "math", "T3")
        report = mini_data.model_copy(update={"timetables": timetables}).validate_integrity()
        assert report.is_complete
        assert any("Pause" in w for w in report.warnings)

    def test_summary(self, mini_data):
        summary = mini_data.summary()
        assert "Klassen: 3" in summary
        assert "Belegte Slots: 4/18" in summary


# ─── SPEICHER ─────────────────────────────────────────────────────────────────

class TestTimetableStore:
    def test_lookups(self, mini_store):
        assert mini_store.get_timetable("A").class_id == "A"
        assert mini_store.get_timetable("X") is None
        assert mini_store.class_name("A") == "Class A"
        assert mini_store.class_name("X") == "X"
        assert mini_store.subject_name("math") == "Mathematics"
        assert mini_store.teacher_name(None) == ""

    def test_timetables_read_only(self, mini_store):
        assert list(mini_store.timetables) == ["A", "B", "C"]
        with pytest.raises(TypeError):
            mini_store.timetables["A"] = None
        assert mini_store.get_timetable("A") is not None

    def test_update_slot_locality(self, mini_store):
        """Nur der adressierte Slot ändert sich, alle anderen bleiben dieselben Objekte."""
        before = {cid: mini_store.get_timetable(cid) for cid in ("A", "B", "C")}
        mini_store.update_slot("C", "Monday", "Period 1", "eng", "T2")

        assert mini_store.get_timetable("A") is before["A"]
        assert mini_store.get_timetable("B") is before["B"]
        after_c = mini_store.get_timetable("C")
        for old, new in zip(before["C"].slots, after_c.slots):
            if old.key == ("Monday", "Period 1"):
                assert (new.subject_id, new.teacher_id) == ("eng", "T2")
            else:
                assert new is old

    def test_update_unknown_class_is_noop(self, mini_store):
        before = dict(mini_store.timetables)
        mini_store.update_slot("X", "Monday", "Period 1", "eng", "T2")
        assert dict(mini_store.timetables) == before
        assert not mini_store.has_unsaved_changes

    def test_update_unknown_slot_is_noop(self, mini_store):
        before = mini_store.get_timetable("A")
        mini_store.update_slot("A", "Sunday", "Period 1", "eng", "T2")
        assert mini_store.get_timetable("A") is before

    def test_update_can_clear(self, mini_store):
        mini_store.update_slot("A", "Monday", "Period 1", None, None)
        slot = mini_store.get_slot("A", "Monday", "Period 1")
        assert slot.subject_id is None and slot.teacher_id is None

    def test_teachers_for_subject_order(self, mini_store):
        """Reihenfolge entspricht der Lehrkräfte-Liste."""
        assert [t.id for t in mini_store.teachers_for_subject("math")] == ["T1", "T3"]
        assert [t.id for t in mini_store.teachers_for_subject("eng")] == ["T1", "T2"]
        assert mini_store.teachers_for_subject("art") == []

    def test_is_break_slot(self, mini_store):
        assert mini_store.is_break_slot(mini_store.get_slot("A", "Monday", "Break"))
        # Pause laut Raster, auch wenn der Slot selbst nicht markiert ist
        assert mini_store.is_break_slot(TimetableSlot(day="Monday", period="Break"))
        assert not mini_store.is_break_slot(mini_store.get_slot("A", "Monday", "Period 1"))


class TestChangeTracking:
    def test_no_changes_after_load(self, mini_store):
        assert mini_store.changed_slots() == []
        assert not mini_store.has_unsaved_changes

    def test_changed_slots(self, mini_store):
        mini_store.update_slot("C", "Monday", "Period 1", "eng", "T2")
        mini_store.update_slot("A", "Tuesday", "Period 1", "math", "T3")
        changed = [(cid, s.key) for cid, s in mini_store.changed_slots()]
        assert changed == [("A", ("Tuesday", "Period 1")), ("C", ("Monday", "Period 1"))]
        assert [s.key for _, s in mini_store.changed_slots("C")] == [("Monday", "Period 1")]

    def test_revert_is_no_change(self, mini_store):
        """Zurücksetzen auf den alten Wert gilt nicht als Änderung."""
        mini_store.update_slot("A", "Monday", "Period 1", None, None)
        mini_store.update_slot("A", "Monday", "Period 1", "eng", "T2")
        assert mini_store.changed_slots() == []

    def test_mark_saved_single_class(self, mini_store):
        mini_store.update_slot("A", "Tuesday", "Period 1", "math", "T3")
        mini_store.update_slot("C", "Monday", "Period 1", "eng", "T2")
        mini_store.mark_saved("A")
        assert [cid for cid, _ in mini_store.changed_slots()] == ["C"]
        mini_store.mark_saved()
        assert not mini_store.has_unsaved_changes

    def test_snapshot_reflects_updates(self, mini_store):
        mini_store.update_slot("C", "Monday", "Period 1", "eng", "T2")
        data = mini_store.snapshot()
        assert data.timetables["C"].get_slot("Monday", "Period 1").teacher_id == "T2"
        assert [c.id for c in data.classes] == ["A", "B", "C"]
