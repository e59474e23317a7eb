import re
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


# ─── ZEITRASTER ───

class PeriodDefinition(BaseModel):
    """Eine benannte Stunde im Tagesraster (Unterricht oder Pause)."""
    # Anzeigename, zugleich Schlüssel im Stundenplan (z.B. "Period 1", "Lunch")
    name: str
    # Beginn im Format "HH:MM" (optional, nur für die Anzeige)
    start_time: Optional[str] = None
    # Ende im Format "HH:MM"
    end_time: Optional[str] = None
    # Pausen werden weder belegt noch bei Konflikten berücksichtigt
    is_break: bool = False

    @model_validator(mode='after')
    def _check_times(self):
        for value in (self.start_time, self.end_time):
            if value is not None and not _TIME_RE.match(value):
                raise ValueError(
                    f"Stunde '{self.name}': Uhrzeit '{value}' nicht im Format HH:MM")
        if self.start_time and self.end_time and self.start_time >= self.end_time:
            raise ValueError(
                f"Stunde '{self.name}': Beginn {self.start_time} liegt nicht vor Ende {self.end_time}")
        return self

    @property
    def time_label(self) -> str:
        if self.start_time and self.end_time:
            return f"{self.start_time}–{self.end_time}"
        return ""


class TimeGridConfig(BaseModel):
    """Wochenraster: Unterrichtstage und geordnete Stunden pro Tag.

    Jede Klasse erhält für jede Kombination (Tag, Stunde) genau einen Slot.
    """
    # Namen der Unterrichtstage in Anzeige-Reihenfolge
    day_names: list[str] = Field(
        default=["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"],
        description="Unterrichtstage")
    # Alle Stunden des Tages in Reihenfolge (inkl. Pausen)
    periods: list[PeriodDefinition] = Field(
        description="Geordnete Stunden inkl. Pausen")

    @model_validator(mode='after')
    def _check_grid(self):
        if not self.day_names:
            raise ValueError("Mindestens ein Unterrichtstag erforderlich")
        if len(set(self.day_names)) != len(self.day_names):
            raise ValueError(f"Doppelte Tagesnamen: {self.day_names}")
        names = [p.name for p in self.periods]
        if len(set(names)) != len(names):
            raise ValueError(f"Doppelte Stundennamen: {names}")
        if not any(not p.is_break for p in self.periods):
            raise ValueError("Das Zeitraster enthält keine Unterrichtsstunde")
        return self

    @property
    def period_names(self) -> list[str]:
        return [p.name for p in self.periods]

    @property
    def break_periods(self) -> set[str]:
        """Namen aller Pausen-Stunden."""
        return {p.name for p in self.periods if p.is_break}

    def get_period(self, name: str) -> Optional[PeriodDefinition]:
        for p in self.periods:
            if p.name == name:
                return p
        return None

    def is_break(self, period: str) -> bool:
        return period in self.break_periods


# ─── DATENQUELLE ───

class DataSourceKind(str, Enum):
    MOCK = "mock"
    JSON = "json"
    API = "api"


class DataSourceConfig(BaseModel):
    """Woher Stammdaten und Stundenpläne geladen werden."""
    # mock = Demo-Daten, json = lokale Datei, api = REST-Backend
    kind: DataSourceKind = Field(DataSourceKind.MOCK)
    # Pfad für die JSON-Datenquelle und den Befehl 'load'
    json_path: str = Field("output/timetables.json")
    # Basis-URL des REST-Backends
    api_base_url: str = Field("http://localhost:4000/api/v1")
    # Bearer-Token; ohne Token werden Anfragen nicht gesendet
    api_token: Optional[str] = None
    # Schuljahr für Laden und Speichern; ohne Angabe das erste Schuljahr des Backends
    academic_year_id: Optional[str] = None
    # Zeitlimit pro HTTP-Anfrage in Sekunden
    timeout_seconds: float = Field(10.0, gt=0, le=300)
    # Künstliche Ladeverzögerung der Demo-Daten
    simulated_delay_seconds: float = Field(0.0, ge=0, le=10)


# ─── GESAMT-CONFIG ───

class AppConfig(BaseModel):
    """Gesamtkonfiguration der Stundenplan-Verwaltung."""
    # Name der Schule (nur Anzeige)
    school_name: str = Field("Demo Secondary School")
    # Wochenraster
    time_grid: TimeGridConfig
    # Datenquelle für Laden und Speichern
    data_source: DataSourceConfig = Field(default_factory=DataSourceConfig)
    # Klasse ohne Stundenplan: "placeholder" = Hinweis anzeigen, "error" = Laden abbrechen
    missing_timetable_policy: Literal["placeholder", "error"] = "placeholder"
    # Log-Level für die CLI (DEBUG, INFO, WARNING, ERROR)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
