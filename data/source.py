"""Gemeinsame Schnittstelle der Datenquellen (Demo, JSON-Datei, REST-API).

Jede Quelle liefert beim Laden den vollständigen Datensatz und nimmt beim
Speichern den aktuellen Stand des Speichers entgegen. Der Produktionspfad
(Speicher, Editor, Views) ist unabhängig von der Herkunft der Daten.
"""

import logging
from typing import Optional

from pydantic import BaseModel

from config.schema import AppConfig, DataSourceKind
from models.school_data import TimetableData
from planner.store import TimetableStore

logger = logging.getLogger(__name__)


class DataSourceError(Exception):
    """Fehler beim Laden oder Speichern über eine Datenquelle."""


class DataIntegrityError(DataSourceError):
    """Geladener Datensatz ist unvollständig (z.B. Klasse ohne Stundenplan)."""


class SaveResult(BaseModel):
    """Rückmeldung eines erfolgreichen Speichervorgangs (nur zur Anzeige)."""

    message: str
    saved_slots: int = 0


class DataSource:
    """Basisklasse: ``load`` liefert den Datensatz, ``save`` übermittelt Änderungen.

    ``save`` ändert keine Stundenpläne; Quellen, die klassenweise übertragen,
    dürfen bereits gespeicherte Klassen per ``mark_saved`` markieren. Fehler
    werden als ``DataSourceError`` gemeldet.
    """

    name = "base"
    # True wenn save() unabhängig von class_id immer alle Klassen schreibt
    saves_all_classes = False

    def load(self) -> TimetableData:
        raise NotImplementedError

    def save(self, store: TimetableStore, class_id: Optional[str] = None) -> SaveResult:
        raise NotImplementedError


def create_data_source(config: AppConfig) -> DataSource:
    """Erzeugt die in der Konfiguration gewählte Datenquelle."""
    ds = config.data_source
    if ds.kind == DataSourceKind.MOCK:
        from data.mock_data import MockDataSource
        return MockDataSource(config.time_grid, delay_seconds=ds.simulated_delay_seconds)
    if ds.kind == DataSourceKind.JSON:
        from data.json_store import JsonDataSource
        return JsonDataSource(ds.json_path)
    if ds.kind == DataSourceKind.API:
        from data.api_client import ApiDataSource
        return ApiDataSource(
            base_url=ds.api_base_url,
            token=ds.api_token,
            academic_year_id=ds.academic_year_id,
            timeout=ds.timeout_seconds,
            fallback_time_grid=config.time_grid,
        )
    raise ValueError(f"Unbekannte Datenquelle: {ds.kind}")


def load_store(source: DataSource, missing_timetable_policy: str = "placeholder") -> TimetableStore:
    """Lädt den Datensatz und baut daraus den Speicher.

    Klassen ohne Stundenplan werden je nach Policy nur protokolliert
    ("placeholder") oder führen zum Abbruch ("error").
    """
    data = source.load()
    missing = [c.id for c in data.classes if c.id not in data.timetables]
    if missing:
        if missing_timetable_policy == "error":
            raise DataIntegrityError(
                f"Kein Stundenplan für Klasse(n): {', '.join(missing)}"
            )
        logger.warning(f"Kein Stundenplan für Klasse(n) {', '.join(missing)} – Platzhalter wird angezeigt")
    logger.info(
        f"Datenquelle '{source.name}': {len(data.classes)} Klassen, "
        f"{len(data.teachers)} Lehrkräfte, {len(data.timetables)} Stundenpläne geladen"
    )
    return TimetableStore(data)


def save_changes(source: DataSource, store: TimetableStore, class_id: Optional[str] = None) -> SaveResult:
    """Speichert über die Quelle und setzt bei Erfolg den Basis-Stand zurück."""
    result = source.save(store, class_id)
    store.mark_saved(None if source.saves_all_classes else class_id)
    logger.info(f"Gespeichert über '{source.name}': {result.saved_slots} Slot(s)")
    return result
