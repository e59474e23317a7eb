"""Stundenplan-Verwaltung — Haupt-CLI.

Verwendung:
  python main.py config show                     Konfiguration anzeigen
  python main.py config init                     Default-Konfiguration anlegen
  python main.py load                            Daten laden und als JSON ablegen
  python main.py check                           Integritäts-Check
  python main.py show <klasse>                   Stundenplan einer Klasse
  python main.py school [--day D] [--conflicts-only]
                                                 Schulweite Ansicht
  python main.py conflicts                       Lehrer-Konflikte auflisten
  python main.py assign <klasse> <tag> <stunde> <fach> <lehrkraft>
                                                 Slot belegen (mit Konfliktprüfung)
  python main.py clear <klasse> <tag> <stunde>   Slot leeren
  python main.py edit                            Interaktiver Editor

Globale Optionen: --config PFAD, --source mock|json|api, --log-level LEVEL
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table
from rich import box

console = Console()


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


# ─── Hilfsfunktionen ──────────────────────────────────────────────────────────

def _open_store(ctx: click.Context):
    """Lädt Datenquelle und Speicher oder bricht mit Fehlermeldung ab."""
    from data.source import DataSourceError, create_data_source, load_store

    config = ctx.obj["config"]
    source = create_data_source(config)
    try:
        store = load_store(source, config.missing_timetable_policy)
    except DataSourceError as e:
        console.print(f"[red bold]Laden fehlgeschlagen:[/red bold]\n{e}")
        sys.exit(1)
    return source, store


def _match(value: str, candidates: list[tuple[str, str]], label: str) -> str:
    """Findet eine ID anhand von ID oder Anzeigename (ohne Groß-/Kleinschreibung)."""
    needle = value.strip().lower()
    for item_id, name in candidates:
        if item_id.lower() == needle or name.lower() == needle:
            return item_id
    known = ", ".join(f"{name} ({item_id})" for item_id, name in candidates)
    raise click.BadParameter(f"{label} '{value}' unbekannt. Verfügbar: {known}")


def _resolve_class(store, value: str) -> str:
    return _match(value, [(c.id, c.name) for c in store.classes], "Klasse")


def _resolve_day(store, value: str) -> str:
    return _match(value, [(d, d) for d in store.time_grid.day_names], "Tag")


def _resolve_period(store, value: str) -> str:
    return _match(value, [(p, p) for p in store.time_grid.period_names], "Stunde")


def _resolve_subject(store, value: str) -> str:
    return _match(value, [(s.id, s.name) for s in store.subjects], "Fach")


def _resolve_teacher(store, value: str) -> str:
    return _match(value, [(t.id, t.name) for t in store.teachers], "Lehrkraft")


def _print_class_timetable(store, class_id: str) -> None:
    from analysis.conflicts import ConflictDetector
    from views.class_grid import NO_TIMETABLE_TEXT, render_class_rows

    name = store.class_name(class_id)
    rows = render_class_rows(class_id, store, ConflictDetector(store).build_index())
    if not rows:
        console.print(Panel(f"[yellow]{NO_TIMETABLE_TEXT}[/yellow]", title=name))
        return

    table = Table(title=f"Stundenplan {name}", box=box.ROUNDED, show_lines=True)
    table.add_column("Stunde", style="bold")
    table.add_column("Uhrzeit", style="dim")
    for day in store.time_grid.day_names:
        table.add_column(day)
    for row in rows:
        styled = [c if not c.startswith("⚠") else f"[red]{c}[/red]" for c in row]
        table.add_row(*styled)
    console.print(table)


def _commit(source, store, class_id: Optional[str]) -> None:
    """Änderungen über die Datenquelle speichern; Fehler nur melden."""
    from data.source import DataSourceError, save_changes

    try:
        result = save_changes(source, store, class_id)
    except DataSourceError as e:
        console.print(f"[red bold]Speichern fehlgeschlagen:[/red bold] {e}")
        return
    console.print(f"[green]✓[/green] {result.message}")


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None,
              help="Pfad zur YAML-Konfiguration.")
@click.option("--source", "source_kind", type=click.Choice(["mock", "json", "api"]),
              default=None, help="Datenquelle überschreiben.")
@click.option("--log-level", default=None,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
              help="Log-Level überschreiben.")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], source_kind: Optional[str],
        log_level: Optional[str]):
    """Stundenplan-Verwaltung mit schulweiter Konflikterkennung."""
    from config.manager import ConfigManager
    from config.schema import DataSourceKind

    mgr = ConfigManager(config_path)
    try:
        config = mgr.load()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    if source_kind:
        config = config.model_copy(update={
            "data_source": config.data_source.model_copy(
                update={"kind": DataSourceKind(source_kind)})
        })
    _setup_logging(log_level or config.log_level)
    ctx.obj = {"config": config, "config_manager": mgr}


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@cli.group("config")
def cmd_config():
    """Konfiguration anzeigen oder anlegen."""


@cmd_config.command("show")
@click.pass_context
def config_show(ctx: click.Context):
    """Zeigt die aktuelle Konfiguration an."""
    config = ctx.obj["config"]
    ds = config.data_source
    console.print(Panel(
        f"[bold]{config.school_name}[/bold]  |  Datenquelle: {ds.kind.value}  |  "
        f"Fehlende Pläne: {config.missing_timetable_policy}",
        title="Konfiguration",
        border_style="cyan",
    ))

    table = Table(title="Zeitraster", box=box.ROUNDED)
    table.add_column("Stunde")
    table.add_column("Beginn")
    table.add_column("Ende")
    table.add_column("Pause")
    for p in config.time_grid.periods:
        table.add_row(p.name, p.start_time or "", p.end_time or "", "✓" if p.is_break else "")
    console.print(table)
    console.print(f"[bold]Tage:[/bold] {', '.join(config.time_grid.day_names)}")
    if ds.kind.value == "api":
        console.print(f"[bold]API:[/bold] {ds.api_base_url} (Timeout {ds.timeout_seconds}s)")
        if ds.academic_year_id:
            console.print(f"[bold]Schuljahr:[/bold] {ds.academic_year_id}")
    elif ds.kind.value == "json":
        console.print(f"[bold]JSON:[/bold] {ds.json_path}")


@cmd_config.command("init")
@click.option("--force", is_flag=True, default=False, help="Bestehende Datei überschreiben.")
@click.pass_context
def config_init(ctx: click.Context, force: bool):
    """Legt die Konfigurationsdatei mit den aktuellen Werten an."""
    mgr = ctx.obj["config_manager"]
    if mgr.exists() and not force:
        console.print(
            f"[yellow]Konfiguration existiert bereits: {mgr.path}[/yellow]\n"
            "Mit [bold]--force[/bold] überschreiben."
        )
        return
    mgr.save(ctx.obj["config"])


# ─── LOAD / CHECK ─────────────────────────────────────────────────────────────

@cli.command("load")
@click.option("--output", "-o", default=None, help="Zielpfad der JSON-Datei.")
@click.pass_context
def cmd_load(ctx: click.Context, output: Optional[str]):
    """Lädt alle Daten aus der Datenquelle und legt sie als JSON ab."""
    _, store = _open_store(ctx)
    data = store.snapshot()
    out_path = Path(output or ctx.obj["config"].data_source.json_path)
    data.save_json(out_path)
    console.print(f"\n[dim]{data.summary()}[/dim]")
    console.print(f"[green]✓[/green] JSON gespeichert: {out_path}")


@cli.command("check")
@click.pass_context
def cmd_check(ctx: click.Context):
    """Prüft Vollständigkeit und Referenzen des Datensatzes."""
    _, store = _open_store(ctx)
    data = store.snapshot()
    console.print(f"\n{data.summary()}\n")
    report = data.validate_integrity()
    report.print_rich()
    sys.exit(0 if report.is_complete else 1)


# ─── ANSICHTEN ────────────────────────────────────────────────────────────────

@cli.command("show")
@click.argument("klasse")
@click.pass_context
def cmd_show(ctx: click.Context, klasse: str):
    """Zeigt den Stundenplan einer Klasse (ID oder Name)."""
    _, store = _open_store(ctx)
    _print_class_timetable(store, _resolve_class(store, klasse))


@cli.command("school")
@click.option("--day", default=None, help="Nur diesen Tag anzeigen.")
@click.option("--conflicts-only", is_flag=True, default=False,
              help="Nur Klassen mit Konflikten anzeigen.")
@click.pass_context
def cmd_school(ctx: click.Context, day: Optional[str], conflicts_only: bool):
    """Schulweite Ansicht aller Klassen mit Konfliktmarkierung."""
    from views.school_grid import SchoolGridView

    _, store = _open_store(ctx)
    view = SchoolGridView(store, conflicts_only=conflicts_only)
    days = [_resolve_day(store, day)] if day else store.time_grid.day_names
    if conflicts_only and not view.visible_classes():
        console.print("[green]Keine Klassen mit Konflikten.[/green]")
        return

    for d in days:
        table = Table(title=d, box=box.SIMPLE_HEAVY, show_lines=True)
        for col in view.header():
            table.add_column(col)
        for row in view.render_day_rows(d):
            table.add_row(*[c if not c.startswith("⚠") else f"[red]{c}[/red]" for c in row])
        console.print(table)


@cli.command("conflicts")
@click.pass_context
def cmd_conflicts(ctx: click.Context):
    """Listet alle Lehrer-Doppelbelegungen auf."""
    from analysis.conflicts import ConflictDetector

    _, store = _open_store(ctx)
    report = ConflictDetector(store).find_conflicts()
    report.print_rich(store)
    sys.exit(1 if report.has_conflicts else 0)


# ─── BEARBEITEN ───────────────────────────────────────────────────────────────

@cli.command("assign")
@click.argument("klasse")
@click.argument("tag")
@click.argument("stunde")
@click.argument("fach")
@click.argument("lehrkraft")
@click.option("--save/--no-save", default=True, help="Änderung sofort speichern.")
@click.pass_context
def cmd_assign(ctx: click.Context, klasse: str, tag: str, stunde: str,
               fach: str, lehrkraft: str, save: bool):
    """Belegt einen Slot mit Fach und Lehrkraft (mit Konfliktprüfung)."""
    from planner.editor import SlotEditError, SlotEditor

    source, store = _open_store(ctx)
    class_id = _resolve_class(store, klasse)
    editor = SlotEditor(store)
    try:
        editor.open(class_id, _resolve_day(store, tag), _resolve_period(store, stunde))
        editor.select_subject(_resolve_subject(store, fach))
        editor.select_teacher(_resolve_teacher(store, lehrkraft))
        editor.save()
    except SlotEditError as e:
        console.print(f"[red bold]Nicht gespeichert:[/red bold] {e}")
        sys.exit(1)

    console.print(f"[green]✓[/green] Slot aktualisiert: {store.class_name(class_id)} {tag} {stunde}")
    if save:
        _commit(source, store, class_id)


@cli.command("clear")
@click.argument("klasse")
@click.argument("tag")
@click.argument("stunde")
@click.option("--save/--no-save", default=True, help="Änderung sofort speichern.")
@click.pass_context
def cmd_clear(ctx: click.Context, klasse: str, tag: str, stunde: str, save: bool):
    """Entfernt Fach und Lehrkraft aus einem Slot."""
    from planner.editor import SlotEditError, SlotEditor

    source, store = _open_store(ctx)
    class_id = _resolve_class(store, klasse)
    editor = SlotEditor(store)
    try:
        editor.open(class_id, _resolve_day(store, tag), _resolve_period(store, stunde))
        editor.clear()
    except SlotEditError as e:
        console.print(f"[red bold]Nicht geändert:[/red bold] {e}")
        sys.exit(1)

    console.print(f"[green]✓[/green] Slot geleert: {store.class_name(class_id)} {tag} {stunde}")
    if save:
        _commit(source, store, class_id)


@cli.command("edit")
@click.pass_context
def cmd_edit(ctx: click.Context):
    """Interaktiver Editor: Klasse wählen, Slots bearbeiten, speichern."""
    from planner.editor import SlotEditError, SlotEditor

    source, store = _open_store(ctx)
    editor = SlotEditor(store)
    class_ids = [c.id for c in store.classes]
    if not class_ids:
        console.print("[yellow]Keine Klassen vorhanden.[/yellow]")
        return

    class_id = Prompt.ask("Klasse", choices=class_ids, default=class_ids[0])
    while True:
        _print_class_timetable(store, class_id)
        console.print(
            "\n[1] Slot bearbeiten  [2] Slot leeren  [3] Klasse wechseln  "
            "[0] Beenden"
        )
        choice = Prompt.ask("Auswahl", default="0")
        if choice == "0":
            break
        if choice == "3":
            class_id = Prompt.ask("Klasse", choices=class_ids, default=class_id)
            continue
        if choice not in ("1", "2"):
            console.print("[yellow]Ungültige Auswahl.[/yellow]")
            continue

        day = Prompt.ask("Tag", choices=store.time_grid.day_names)
        period = Prompt.ask("Stunde", choices=store.time_grid.period_names)
        try:
            editor.open(class_id, day, period)
        except SlotEditError as e:
            console.print(f"[yellow]{e}[/yellow]")
            continue

        if choice == "2":
            editor.clear()
            continue

        subject_ids = [s.id for s in store.subjects]
        while editor.state.value == "editing":
            subject_id = Prompt.ask(
                "Fach (" + ", ".join(f"{s.id}={s.name}" for s in store.subjects) + ")",
                choices=subject_ids,
                default=editor.selected_subject_id or subject_ids[0],
                show_choices=False,
            )
            if subject_id != editor.selected_subject_id or editor.selected_teacher_id is None:
                editor.select_subject(subject_id)
            if not editor.available_teachers:
                console.print("[yellow]Keine Lehrkraft für dieses Fach verfügbar.[/yellow]")
                if not Confirm.ask("Anderes Fach wählen?", default=True):
                    editor.cancel()
                continue
            teacher_ids = [t.id for t in editor.available_teachers]
            teacher_id = Prompt.ask(
                "Lehrkraft (" + ", ".join(f"{t.id}={t.name}" for t in editor.available_teachers) + ")",
                choices=teacher_ids,
                default=editor.selected_teacher_id if editor.selected_teacher_id in teacher_ids else teacher_ids[0],
                show_choices=False,
            )
            editor.select_teacher(teacher_id)
            try:
                editor.save()
                console.print("[green]✓[/green] Slot lokal aktualisiert.")
            except SlotEditError as e:
                console.print(f"[red]{e}[/red]")
                if not Confirm.ask("Andere Auswahl treffen?", default=True):
                    editor.cancel()

    if store.has_unsaved_changes and Confirm.ask("Änderungen speichern?", default=True):
        _commit(source, store, None)


def main():
    """Einstiegspunkt."""
    cli()


if __name__ == "__main__":
    main()
