# app/client/filters.py
"""
In-memory filtering over the entry list the client fetched from GET /entries.
Entries are the API's JSON dicts (camelCase keys, ISO timestamps).
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

TODAY_LIMIT = 100


def _parse(value) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _entry_date(entry: dict) -> Optional[date]:
    entered = _parse(entry.get("fechaEntrada"))
    return entered.date() if entered else None


def _entered_between(entry: dict, start: Optional[datetime], end: Optional[datetime]) -> bool:
    """Entries without an entry time never match a date window."""
    entered = _parse(entry.get("fechaEntrada"))
    if entered is None:
        return False
    return (start is None or entered >= start) and (end is None or entered <= end)


@dataclass
class EntryFilters:
    search: str = ""
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    vehicle_type: str = "all"
    location: str = "all"
    has_exit: str = "all"     # all | yes | no


def matches_search(entry: dict, term: str) -> bool:
    term = term.strip()
    if not term:
        return True
    lowered = term.lower()
    return (
        lowered in entry.get("nombre", "").lower()
        or lowered in entry.get("apellidos", "").lower()
        or term in entry.get("ci", "")
    )


def matches_location(entry: dict, location: str) -> bool:
    destinations = entry.get("lugarDestino") or {}
    return location in destinations or any(location in subs for subs in destinations.values())


def apply_filters(entries: list[dict], filters: EntryFilters) -> list[dict]:
    result = [e for e in entries if matches_search(e, filters.search)]

    if filters.date_from:
        start = datetime.combine(filters.date_from, time.min)
        result = [e for e in result if _entered_between(e, start, None)]
    if filters.date_to:
        end = datetime.combine(filters.date_to, time.max)
        result = [e for e in result if _entered_between(e, None, end)]

    if filters.vehicle_type != "all":
        result = [e for e in result if filters.vehicle_type in (e.get("tipoVehiculo") or [])]

    if filters.location and filters.location != "all":
        result = [e for e in result if matches_location(e, filters.location)]

    if filters.has_exit == "yes":
        result = [e for e in result if e.get("fechaSalida")]
    elif filters.has_exit == "no":
        result = [e for e in result if not e.get("fechaSalida")]

    return result


def todays_entries(entries: list[dict], today: Optional[date] = None,
                   limit: int = TODAY_LIMIT) -> list[dict]:
    """The main view only lists entries that came in today, capped at `limit`."""
    today = today or date.today()
    return [e for e in entries if _entry_date(e) == today][:limit]


def summarize(entries: list[dict], today: Optional[date] = None) -> dict:
    today = today or date.today()
    with_exit = sum(1 for e in entries if e.get("fechaSalida"))
    return {
        "total": len(entries),
        "withExit": with_exit,
        "withoutExit": len(entries) - with_exit,
        "todayEntries": sum(1 for e in entries if _entry_date(e) == today),
    }
