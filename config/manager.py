"""Konfigurationsmanager: Laden, Speichern und Validieren.

Nutzt ruamel.yaml für YAML-Serialisierung mit Kommentaren.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.defaults import default_app_config
from config.schema import AppConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML-KOMMENTAR-AUFBAU ───

_YAML_HEADER = f"""\
# ============================================
# Stundenplan-Verwaltung — Konfiguration
# Erstellt: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "time_grid": (
        "Zeitraster",
        "Unterrichtstage und geordnete Stunden. Pausen (is_break) werden nie belegt.",
    ),
    "data_source": (
        "Datenquelle",
        "kind: mock | json | api",
    ),
    "missing_timetable_policy": (
        "Fehlende Stundenpläne",
        "placeholder = Hinweis anzeigen, error = Laden abbrechen",
    ),
    "log_level": (
        "Logging",
        None,
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "timetable_config.yaml"

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else self.DEFAULT_CONFIG

    def exists(self) -> bool:
        return self.path.exists()

    # ─── Laden ───

    def load(self) -> AppConfig:
        """Lade Config aus YAML. Ohne Datei gelten die Defaults."""
        if not self.path.exists():
            return default_app_config()
        with open(self.path, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        if raw is None:
            return default_app_config()
        try:
            return AppConfig.model_validate(json.loads(json.dumps(raw)))
        except Exception as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {self.path}\n"
                f"Pydantic-Fehler: {e}"
            ) from e

    # ─── Speichern ───

    def save(self, config: AppConfig) -> None:
        """Speichere Config als YAML mit Abschnitts-Kommentaren."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = self._build_commented_yaml(config)
        with open(self.path, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)
        console.print(f"[green]✓[/green] Konfiguration gespeichert: {self.path}")

    def _build_commented_yaml(self, config: AppConfig) -> CommentedMap:
        """Baut die YAML-Struktur mit Kommentaren auf."""
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)
        for field, (label, comment) in _SECTION_COMMENTS.items():
            if field not in cm:
                continue
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )
        return cm
