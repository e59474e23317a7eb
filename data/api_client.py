"""REST-Datenquelle: Stammdaten und Stundenpläne vom Schul-Backend.

Endpunkte (relativ zur Basis-URL):
  GET  /academic-years               Schuljahre (erstes gilt, wenn keines konfiguriert ist)
  GET  /classes/sub-classes          Klassen (Teilklassen), für die Pläne existieren
  GET  /subjects                     Fächer
  GET  /periods                      Wochen-Slots (Tag × Stunde, mit ID und Pausen-Flag)
  GET  /users/teachers               Lehrkräfte inkl. Fächer
  GET  /timetables?subClassId=<id>&academicYearId=<id>
                                     Belegte Slots einer Klasse im Schuljahr
  POST /timetables/bulk-update       Geänderte Slots einer Klasse

Alle Antworten haben die Form ``{"data": ...}``. Fehlt ``/periods`` (404),
wird das konfigurierte Zeitraster verwendet; Speichern ist dann nicht möglich.
Schlägt das Laden einer einzelnen Klasse fehl, fehlt nur deren Stundenplan;
über ``missing_timetable_policy`` wird dann wie bei jeder Klasse ohne Plan
entschieden.
"""

import logging
from typing import Any, Optional

import requests
from pydantic import ValidationError

from config.schema import PeriodDefinition, TimeGridConfig
from data.source import DataSource, DataSourceError, SaveResult
from models.school_class import SchoolClass
from models.school_data import TimetableData
from models.subject import Subject
from models.teacher import Teacher
from models.timetable import Timetable, build_empty_timetable
from planner.store import TimetableStore

logger = logging.getLogger(__name__)


def _as_number(value: Optional[str]) -> Any:
    """Numerische IDs als int übertragen, alle anderen unverändert."""
    if value is None:
        return None
    return int(value) if str(value).isdigit() else value


def _normalize_time(value: Any) -> Optional[str]:
    """"07:30:00" → "07:30"; unbrauchbare Werte → None."""
    if not isinstance(value, str) or len(value) < 5:
        return None
    hhmm = value[:5]
    if hhmm[2] != ":" or not (hhmm[:2] + hhmm[3:]).isdigit():
        return None
    return hhmm


class ApiDataSource(DataSource):
    """Lädt über das REST-Backend und speichert geänderte Slots pro Klasse."""

    name = "api"

    def __init__(
        self,
        base_url: str,
        token: Optional[str],
        academic_year_id: Optional[str] = None,
        timeout: float = 10.0,
        fallback_time_grid: Optional[TimeGridConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.academic_year_id = academic_year_id
        self.timeout = timeout
        self.fallback_time_grid = fallback_time_grid
        self.session = session or requests.Session()
        # (Tag, Stunde) → Perioden-ID des Backends, gefüllt beim Laden
        self.period_ids: dict[tuple[str, str], str] = {}

    # ─── HTTP ─────────────────────────────────────────────────────────────────

    def _send(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        payload: Optional[dict] = None,
    ) -> requests.Response:
        if not self.token:
            raise DataSourceError("Kein API-Token konfiguriert (data_source.api_token).")
        url = f"{self.base_url}{path}"
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/json",
        }
        logger.debug(f"{method} {url} params={params}")
        try:
            return self.session.request(
                method, url, headers=headers, params=params, json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise DataSourceError(f"Netzwerkfehler bei {method} {path}: {e}") from e

    @staticmethod
    def _parse(method: str, path: str, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise DataSourceError(
                f"{method} {path}: keine gültige JSON-Antwort (HTTP {response.status_code})"
            ) from e

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        payload: Optional[dict] = None,
        allow_404: bool = False,
    ) -> Optional[dict]:
        response = self._send(method, path, params=params, payload=payload)
        if allow_404 and response.status_code == 404:
            logger.warning(f"{path} nicht gefunden (404)")
            return None
        body = self._parse(method, path, response)
        if not response.ok:
            message = body.get("message") or body.get("error") if isinstance(body, dict) else None
            raise DataSourceError(
                f"{method} {path} fehlgeschlagen (HTTP {response.status_code})"
                + (f": {message}" if message else "")
            )
        return body

    def _get_list(self, path: str, params: Optional[dict] = None, allow_404: bool = False) -> Optional[list]:
        body = self._request("GET", path, params=params, allow_404=allow_404)
        if body is None:
            return None
        data = body.get("data") if isinstance(body, dict) else None
        return data if isinstance(data, list) else []

    # ─── Laden ────────────────────────────────────────────────────────────────

    def _map_day(self, raw_day: str) -> str:
        """Backend-Tag ("MONDAY") auf den Namen im Zeitraster abbilden."""
        if self.fallback_time_grid:
            for name in self.fallback_time_grid.day_names:
                if name.lower() == str(raw_day).lower():
                    return name
        return str(raw_day).capitalize()

    def _build_time_grid(self, periods: list[dict]) -> TimeGridConfig:
        """Zeitraster aus den Wochen-Slots des Backends ableiten.

        Stundennamen werden nach Startzeit sortiert; eine Stunde gilt als Pause,
        wenn irgendein Wochen-Slot dieses Namens als Pause markiert ist.
        """
        self.period_ids = {}
        by_name: dict[str, dict] = {}
        days: list[str] = []
        for p in periods:
            name = str(p.get("name", ""))
            day = self._map_day(p.get("dayOfWeek", ""))
            if not name or not day:
                continue
            if day not in days:
                days.append(day)
            self.period_ids[(day, name)] = str(p.get("id"))
            entry = by_name.setdefault(name, {
                "start": _normalize_time(p.get("startTime")),
                "end": _normalize_time(p.get("endTime")),
                "is_break": False,
            })
            entry["is_break"] = entry["is_break"] or bool(p.get("isBreak"))

        if self.fallback_time_grid:
            order = {d: i for i, d in enumerate(self.fallback_time_grid.day_names)}
            days.sort(key=lambda d: order.get(d, len(order)))

        names = sorted(by_name, key=lambda n: (by_name[n]["start"] is None, by_name[n]["start"] or ""))
        definitions = []
        for name in names:
            entry = by_name[name]
            start, end = entry["start"], entry["end"]
            if start and end and start >= end:
                start = end = None
            definitions.append(PeriodDefinition(
                name=name, start_time=start, end_time=end, is_break=entry["is_break"],
            ))
        return TimeGridConfig(day_names=days, periods=definitions)

    def _resolve_academic_year(self) -> Optional[str]:
        """Konfiguriertes Schuljahr oder das erste vom Backend gelieferte."""
        if self.academic_year_id:
            return self.academic_year_id
        years = self._get_list("/academic-years", allow_404=True)
        if not years:
            logger.info("Kein Schuljahr verfügbar – Stundenpläne werden ohne Schuljahr geladen")
            return None
        self.academic_year_id = str(years[0]["id"])
        logger.info(f"Schuljahr {years[0].get('name', self.academic_year_id)} ausgewählt")
        return self.academic_year_id

    def _fetch_timetable(self, class_id: str, time_grid: TimeGridConfig) -> Timetable:
        """Belegte Slots vom Backend in das vollständige Raster einfügen."""
        params = {"subClassId": class_id}
        if self.academic_year_id:
            params["academicYearId"] = self.academic_year_id
        body = self._request("GET", "/timetables", params=params)
        data = body.get("data") if isinstance(body, dict) else None
        api_slots = data.get("slots", []) if isinstance(data, dict) else []
        by_period_id = {str(s.get("periodId")): s for s in api_slots}

        timetable = build_empty_timetable(class_id, time_grid)
        for slot in timetable.slots:
            if slot.is_break:
                continue
            period_id = self.period_ids.get(slot.key)
            assigned = by_period_id.get(period_id) if period_id else None
            if assigned is None:
                continue
            subject_id = assigned.get("subjectId")
            teacher_id = assigned.get("teacherId")
            timetable = timetable.with_assignment(
                slot.day, slot.period,
                str(subject_id) if subject_id is not None else None,
                str(teacher_id) if teacher_id is not None else None,
            )
        return timetable

    def load(self) -> TimetableData:
        self._resolve_academic_year()
        classes = [
            SchoolClass(id=str(c["id"]), name=c.get("name", str(c["id"])))
            for c in self._get_list("/classes/sub-classes")
        ]
        subjects = [
            Subject(id=str(s["id"]), name=s.get("name", str(s["id"])))
            for s in self._get_list("/subjects")
        ]
        periods = self._get_list("/periods", allow_404=True)
        teachers = [
            Teacher(
                id=str(t["id"]),
                name=t.get("name", str(t["id"])),
                subjects=[str(s["id"]) for s in t.get("subjects") or []],
            )
            for t in self._get_list("/users/teachers")
        ]

        try:
            if periods:
                time_grid = self._build_time_grid(periods)
            elif self.fallback_time_grid is not None:
                logger.warning("Keine Wochen-Slots vom Backend – konfiguriertes Zeitraster wird verwendet")
                self.period_ids = {}
                time_grid = self.fallback_time_grid
            else:
                raise DataSourceError("Backend liefert keine Wochen-Slots und kein Zeitraster konfiguriert.")
        except ValidationError as e:
            raise DataSourceError(f"Wochen-Slots des Backends ungültig: {e}") from e

        timetables: dict[str, Timetable] = {}
        for cls in classes:
            try:
                timetables[cls.id] = self._fetch_timetable(cls.id, time_grid)
            except DataSourceError as e:
                # Übrige Klassen bleiben nutzbar; die Policy entscheidet über die fehlende
                logger.warning(f"Stundenplan für {cls.name} ({cls.id}) nicht geladen: {e}")
        return TimetableData(
            classes=classes,
            subjects=subjects,
            teachers=teachers,
            time_grid=time_grid,
            timetables=timetables,
        )

    # ─── Speichern ────────────────────────────────────────────────────────────

    def _save_class(self, store: TimetableStore, class_id: str) -> int:
        changed = [slot for _, slot in store.changed_slots(class_id)]
        if not changed:
            return 0

        payload_slots = []
        for slot in changed:
            period_id = self.period_ids.get(slot.key)
            if period_id is None:
                logger.error(f"Keine Perioden-ID für {slot.day}/{slot.period} – Slot wird übersprungen")
                continue
            payload_slots.append({
                "periodId": _as_number(period_id),
                "subjectId": _as_number(slot.subject_id),
                "teacherId": _as_number(slot.teacher_id),
            })
        if not payload_slots:
            raise DataSourceError(
                "Stundennamen konnten keinen Perioden-IDs zugeordnet werden – Speichern nicht möglich."
            )

        payload: dict[str, Any] = {"subClassId": _as_number(class_id)}
        if self.academic_year_id:
            payload["academicYearId"] = _as_number(self.academic_year_id)
        payload["slots"] = payload_slots

        path = "/timetables/bulk-update"
        response = self._send("POST", path, payload=payload)
        body = self._parse("POST", path, response)
        # Konflikt-Antworten (z.B. HTTP 409) tragen die Details im Body
        if not response.ok or not isinstance(body, dict) or not body.get("success", False):
            raise DataSourceError(self._describe_failure(body, response.status_code))
        return len(payload_slots)

    @staticmethod
    def _describe_failure(body: Any, status_code: Optional[int] = None) -> str:
        """Fehlermeldung aus den Fehlerstrukturen des Backends."""
        status = f" (HTTP {status_code})" if status_code and status_code >= 400 else ""
        if not isinstance(body, dict):
            return f"Speichern fehlgeschlagen{status}: unbekannte Antwort."
        data = body.get("data")
        errors = data.get("errors") if isinstance(data, dict) else None
        if errors:
            details = "; ".join(
                str(e.get("error", e)) if isinstance(e, dict) else str(e) for e in errors[:2]
            )
            return f"Speichern fehlgeschlagen{status}: {details}{'...' if len(errors) > 2 else ''}"
        conflicts = body.get("conflicts")
        if conflicts:
            details = "; ".join(
                f"{c.get('teacherName')} hat am {c.get('day')} (Periode {c.get('periodId')}) "
                f"einen Konflikt mit {c.get('conflictingSubclassName')}"
                for c in conflicts
            )
            return f"Speichern wegen Konflikten fehlgeschlagen{status}: {details}"
        reason = body.get("error") or body.get("message") or "unbekannter Fehler"
        return f"Speichern fehlgeschlagen{status}: {reason}"

    def save(self, store: TimetableStore, class_id: Optional[str] = None) -> SaveResult:
        """Überträgt die Änderungen klassenweise.

        Jede erfolgreich übertragene Klasse wird sofort als gespeichert
        markiert; scheitert eine spätere Klasse, bleiben nur deren und die
        noch nicht übertragenen Änderungen offen.
        """
        class_ids = [class_id] if class_id is not None else list(store.timetables)
        total = 0
        for cid in class_ids:
            saved = self._save_class(store, cid)
            if saved:
                store.mark_saved(cid)
            total += saved
        if total == 0:
            return SaveResult(message="Keine Änderungen zu speichern.", saved_slots=0)
        return SaveResult(message=f"{total} Slot(s) an das Backend übertragen.", saved_slots=total)
