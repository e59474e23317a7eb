"""JSON-Datenquelle: kompletter Datensatz in einer lokalen Datei."""

import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from data.source import DataSource, DataSourceError, SaveResult
from models.school_data import TimetableData
from planner.store import TimetableStore

logger = logging.getLogger(__name__)


class JsonDataSource(DataSource):
    """Lädt und speichert ``TimetableData`` als JSON (immer alle Klassen)."""

    name = "json"
    saves_all_classes = True

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> TimetableData:
        try:
            return TimetableData.load_json(self.path)
        except FileNotFoundError as e:
            raise DataSourceError(
                f"{e}\nVerwenden Sie zuerst 'python main.py load', um Daten abzulegen."
            ) from e
        except ValidationError as e:
            raise DataSourceError(f"JSON-Datei ungültig: {self.path}\n{e}") from e

    def save(self, store: TimetableStore, class_id: Optional[str] = None) -> SaveResult:
        changed = store.changed_slots(class_id)
        store.snapshot().save_json(self.path)
        logger.info(f"Datensatz gespeichert: {self.path}")
        return SaveResult(
            message=f"Stundenplan gespeichert: {self.path}",
            saved_slots=len(changed),
        )
