from __future__ import annotations

import csv
import json
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

from pydantic import ValidationError

from .dates import parse_iso
from .log import get_logger
from .models import BorderEvent


log = get_logger()


class IngestionError(ValueError):
    """Input rejected before it reaches the calculator."""


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(x) for x in err.get("loc", ()))
    return f"{loc}: {err.get('msg', 'invalid value')}"


def events_from_rows(rows: Iterable[Dict[str, Any]]) -> List[BorderEvent]:
    """
    Validate raw feed rows (camelCase keys). Any bad row rejects the batch,
    naming the row (1-based) and the offending field.
    """
    out: List[BorderEvent] = []
    for i, row in enumerate(rows, start=1):
        if not isinstance(row, dict):
            raise IngestionError(f"row {i}: expected an object, got {type(row).__name__}")
        # CSV gives "" for empty optional cells
        cleaned = {k: (None if v == "" else v) for k, v in row.items() if k}
        try:
            out.append(BorderEvent.model_validate(cleaned))
        except ValidationError as exc:
            raise IngestionError(f"row {i}: {_first_error(exc)}") from exc
    return out


def _rows_from_json(data: Any) -> List[Dict[str, Any]]:
    # PDF parser output wraps records: {"success": true, "records": [...]}
    if isinstance(data, dict) and isinstance(data.get("records"), list):
        return data["records"]
    if isinstance(data, list):
        return data
    raise IngestionError("JSON must be a list of records or an object with a 'records' list")


def load_events(path: Union[str, Path]) -> List[BorderEvent]:
    p = Path(path)
    if not p.exists():
        raise IngestionError(f"Missing events file: {p}")

    if p.suffix.lower() == ".csv":
        with p.open("r", encoding="utf-8-sig", newline="") as f:
            rows = list(csv.DictReader(f))
    else:
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise IngestionError(f"{p.name}: invalid JSON ({exc.msg} at line {exc.lineno})") from exc
        rows = _rows_from_json(data)

    events = events_from_rows(rows)
    log.info("loaded {} events from {}", len(events), p)
    return events


def dump_events(events: Iterable[BorderEvent], path: Union[str, Path]) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(
        json.dumps([e.model_dump(mode="json", by_alias=True) for e in events], indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    return p


def parse_query_bound(text: str) -> Union[date, datetime]:
    """YYYY-MM-DD or an ISO datetime (offsets honoured, naive = UTC)."""
    try:
        return parse_iso(text)
    except ValueError as exc:
        raise IngestionError(f"Invalid date: {text!r}. Use YYYY-MM-DD (e.g., 2024-04-01)") from exc
