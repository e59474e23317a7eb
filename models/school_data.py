"""TimetableData: Vollständiger Datensatz + Integritäts-Check (Pydantic v2)."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from config.schema import TimeGridConfig
from models.school_class import SchoolClass
from models.subject import Subject
from models.teacher import Teacher
from models.timetable import Timetable


class IntegrityReport(BaseModel):
    """Ergebnis des Integritäts-Checks eines Datensatzes."""

    is_complete: bool
    errors: list[str]      # Datenfehler (z.B. Klasse ohne Stundenplan)
    warnings: list[str]    # Auffälligkeiten, die die Anzeige nicht verhindern

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel

        console = Console()
        if self.is_complete:
            status = "[bold green]✓ VOLLSTÄNDIG[/bold green]"
        else:
            status = "[bold red]✗ DATENFEHLER[/bold red]"

        lines = [status]
        if self.errors:
            lines.append("\n[red bold]Fehler:[/red bold]")
            for e in self.errors:
                lines.append(f"  [red]• {e}[/red]")
        if self.warnings:
            lines.append("\n[yellow bold]Warnungen:[/yellow bold]")
            for w in self.warnings:
                lines.append(f"  [yellow]• {w}[/yellow]")
        if not self.errors and not self.warnings:
            lines.append("[dim]Keine Probleme gefunden.[/dim]")

        console.print(Panel("\n".join(lines), title="Integritäts-Check", border_style="cyan"))


class TimetableData(BaseModel):
    """Vollständiger Datensatz: Stammdaten, Zeitraster und ein Plan pro Klasse."""

    classes: list[SchoolClass]
    subjects: list[Subject]
    teachers: list[Teacher]
    time_grid: TimeGridConfig
    timetables: dict[str, Timetable]
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    data_version: str = "1.0"

    # ─── Übersicht ───

    def summary(self) -> str:
        """Kurze Übersicht über den Datensatz."""
        assigned = sum(
            1 for tt in self.timetables.values() for s in tt.slots if s.is_assigned
        )
        teaching = sum(
            1 for tt in self.timetables.values() for s in tt.slots if not s.is_break
        )
        lines = [
            f"Klassen: {len(self.classes)}",
            f"Fächer: {len(self.subjects)}",
            f"Lehrkräfte: {len(self.teachers)}",
            f"Raster: {len(self.time_grid.day_names)} Tage × "
            f"{len(self.time_grid.periods)} Stunden "
            f"({len(self.time_grid.break_periods)} Pausen)",
            f"Belegte Slots: {assigned}/{teaching}",
        ]
        return "\n".join(lines)

    # ─── Integritäts-Check ───

    def validate_integrity(self) -> IntegrityReport:
        """Prüft den Datensatz auf Vollständigkeit und Referenzfehler.

        Prüfungen:
        1. Eindeutige IDs in Klassen, Fächern und Lehrkräften
        2. Jede Klasse hat einen Stundenplan
        3. Jeder Plan deckt jede (Tag, Stunde)-Kombination genau einmal ab
        4. Slots referenzieren bekannte Fächer und Lehrkräfte
        5. Fach und Lehrkraft sind gemeinsam gesetzt; Pausen sind unbelegt
        """
        errors: list[str] = []
        warnings: list[str] = []

        # ── 1. Eindeutige IDs ────────────────────────────────────────────
        for label, items in (
            ("Klassen", self.classes),
            ("Fächer", self.subjects),
            ("Lehrkräfte", self.teachers),
        ):
            ids = [i.id for i in items]
            dupes = sorted({i for i in ids if ids.count(i) > 1})
            if dupes:
                errors.append(f"{label}: doppelte IDs {', '.join(dupes)}")

        # ── 2. Stundenplan pro Klasse ────────────────────────────────────
        class_ids = {c.id for c in self.classes}
        for cls in self.classes:
            if cls.id not in self.timetables:
                errors.append(f"Klasse {cls.id} ({cls.name}): kein Stundenplan vorhanden.")
        for class_id in self.timetables:
            if class_id not in class_ids:
                warnings.append(f"Stundenplan für unbekannte Klasse {class_id}.")

        # ── 3.–5. Raster und Referenzen ──────────────────────────────────
        subject_ids = {s.id for s in self.subjects}
        teacher_ids = {t.id for t in self.teachers}
        grid_days = set(self.time_grid.day_names)
        grid_periods = set(self.time_grid.period_names)
        breaks = self.time_grid.break_periods

        for class_id, timetable in self.timetables.items():
            missing = timetable.missing_keys(self.time_grid)
            if missing:
                sample = ", ".join(f"{d}/{p}" for d, p in missing[:3])
                errors.append(
                    f"Stundenplan {class_id}: {len(missing)} Slots fehlen ({sample}"
                    f"{'...' if len(missing) > 3 else ''})."
                )
            for day, period in timetable.duplicate_keys():
                errors.append(f"Stundenplan {class_id}: Slot {day}/{period} mehrfach vorhanden.")

            for slot in timetable.slots:
                where = f"{class_id} {slot.day}/{slot.period}"
                if slot.day not in grid_days or slot.period not in grid_periods:
                    errors.append(f"Slot {where} liegt außerhalb des Zeitrasters.")
                    continue
                if slot.subject_id and slot.subject_id not in subject_ids:
                    errors.append(f"Slot {where}: unbekanntes Fach '{slot.subject_id}'.")
                if slot.teacher_id and slot.teacher_id not in teacher_ids:
                    errors.append(f"Slot {where}: unbekannte Lehrkraft '{slot.teacher_id}'.")
                if slot.is_break or slot.period in breaks:
                    if slot.subject_id or slot.teacher_id:
                        warnings.append(f"Pause {where} ist belegt (wird ignoriert).")
                elif bool(slot.subject_id) != bool(slot.teacher_id):
                    warnings.append(f"Slot {where}: Fach und Lehrkraft nur teilweise gesetzt.")

        return IntegrityReport(
            is_complete=len(errors) == 0,
            errors=errors,
            warnings=warnings,
        )

    # ─── Persistenz ────────────────────────────────────────────────────────

    def save_json(self, path: Path) -> None:
        """Speichert den kompletten Datensatz als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        now = datetime.now(timezone.utc)
        updated = self.model_copy(update={
            "modified_at": now,
            "created_at": self.created_at or now,
        })
        with open(path, "w", encoding="utf-8") as f:
            f.write(updated.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "TimetableData":
        """Lädt einen Datensatz aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())
