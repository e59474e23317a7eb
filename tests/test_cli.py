"""Tests für die Kommandozeile (click CliRunner, Demo-Daten)."""

import pytest
from click.testing import CliRunner

from config.defaults import default_app_config
from config.manager import ConfigManager
from config.schema import DataSourceConfig, DataSourceKind
from main import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def config_path(tmp_path):
    """Config-Pfad im Temp-Verzeichnis (Datei existiert zunächst nicht)."""
    return tmp_path / "timetable_config.yaml"


def _run(runner, config_path, *args):
    return runner.invoke(cli, ["--config", str(config_path), "--source", "mock", *args])


class TestConfigCommands:
    def test_config_show(self, runner, config_path):
        result = _run(runner, config_path, "config", "show")
        assert result.exit_code == 0, result.output
        assert "Demo Secondary School" in result.output

    def test_config_init(self, runner, config_path):
        result = runner.invoke(cli, ["--config", str(config_path), "config", "init"])
        assert result.exit_code == 0, result.output
        assert config_path.exists()

        again = runner.invoke(cli, ["--config", str(config_path), "config", "init"])
        assert "existiert bereits" in again.output

    def test_invalid_config_exits(self, runner, config_path):
        config_path.write_text("log_level: LAUT\n", encoding="utf-8")
        result = runner.invoke(cli, ["--config", str(config_path), "check"])
        assert result.exit_code == 1


class TestViewCommands:
    def test_show(self, runner, config_path):
        result = _run(runner, config_path, "show", "class1")
        assert result.exit_code == 0, result.output
        assert "Stundenplan" in result.output

    def test_show_by_name(self, runner, config_path):
        result = _run(runner, config_path, "show", "class 6a")
        assert result.exit_code == 0, result.output

    def test_show_unknown_class(self, runner, config_path):
        result = _run(runner, config_path, "show", "class9")
        assert result.exit_code == 2

    def test_school_conflicts_only(self, runner, config_path):
        result = _run(runner, config_path, "school", "--day", "Monday", "--conflicts-only")
        assert result.exit_code == 0, result.output
        assert "Monday" in result.output

    def test_conflicts_exit_code(self, runner, config_path):
        """Demo-Daten enthalten Konflikte → Exit-Code 1."""
        result = _run(runner, config_path, "conflicts")
        assert result.exit_code == 1
        assert "KONFLIKT" in result.output

    def test_check(self, runner, config_path):
        result = _run(runner, config_path, "check")
        assert result.exit_code == 0, result.output
        assert "Klassen: 5" in result.output


class TestEditCommands:
    def test_assign_conflict_rejected(self, runner, config_path):
        """teacher1 ist Monday/Period 1 bereits in class1 eingeplant."""
        result = _run(runner, config_path, "assign", "class3", "Monday", "Period 1",
                      "sub1", "teacher1", "--no-save")
        assert result.exit_code == 1
        assert "Nicht gespeichert" in result.output

    def test_assign_free_teacher(self, runner, config_path):
        result = _run(runner, config_path, "assign", "Class 8C", "monday", "period 2",
                      "English", "Mrs. Smith")
        assert result.exit_code == 0, result.output
        assert "Demo-Daten" in result.output

    def test_assign_unqualified_teacher(self, runner, config_path):
        result = _run(runner, config_path, "assign", "class3", "Monday", "Period 2",
                      "sub2", "teacher1", "--no-save")
        assert result.exit_code == 1

    def test_clear(self, runner, config_path):
        result = _run(runner, config_path, "clear", "class1", "Monday", "Period 1")
        assert result.exit_code == 0, result.output

    def test_clear_break_refused(self, runner, config_path):
        result = _run(runner, config_path, "clear", "class1", "Monday", "Lunch")
        assert result.exit_code == 1


class TestJsonWorkflow:
    def test_load_then_edit_json(self, runner, tmp_path):
        """Demo-Daten als JSON ablegen, per JSON-Quelle bearbeiten und erneut laden."""
        json_path = tmp_path / "out" / "timetables.json"
        config_path = tmp_path / "config.yaml"
        config = default_app_config().model_copy(update={
            "data_source": DataSourceConfig(kind=DataSourceKind.JSON, json_path=str(json_path)),
        })
        ConfigManager(config_path).save(config)

        result = runner.invoke(cli, ["--config", str(config_path), "--source", "mock", "load"])
        assert result.exit_code == 0, result.output
        assert json_path.exists()

        result = runner.invoke(cli, ["--config", str(config_path), "clear",
                                     "class2", "Monday", "Period 1"])
        assert result.exit_code == 0, result.output

        result = runner.invoke(cli, ["--config", str(config_path), "assign",
                                     "class3", "Monday", "Period 1", "sub1", "teacher5"])
        assert result.exit_code == 1  # teacher5 ist Monday/Period 1 in class5

        from data.json_store import JsonDataSource
        data = JsonDataSource(json_path).load()
        slot = data.timetables["class2"].get_slot("Monday", "Period 1")
        assert slot.subject_id is None and slot.teacher_id is None

    def test_json_missing_file(self, runner, tmp_path):
        config_path = tmp_path / "config.yaml"
        config = default_app_config().model_copy(update={
            "data_source": DataSourceConfig(
                kind=DataSourceKind.JSON, json_path=str(tmp_path / "fehlt.json")),
        })
        ConfigManager(config_path).save(config)
        result = runner.invoke(cli, ["--config", str(config_path), "show", "class1"])
        assert result.exit_code == 1
        assert "Laden fehlgeschlagen" in result.output
