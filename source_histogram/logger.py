from __future__ import annotations

import csv
import io
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from . import config
from .arbiter import TriggerState


def current_timestamp() -> str:
    ts = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return ts.replace("+00:00", "Z")


def _parse_timestamp(raw: Any) -> Optional[datetime]:
    if not isinstance(raw, str) or not raw:
        return None
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None


def next_seq_and_elapsed(previous: Optional[Dict[str, Any]], now_iso: str) -> Dict[str, Any]:
    seq = 1
    elapsed = 0
    if isinstance(previous, dict):
        try:
            seq = int(previous.get("seq") or 0) + 1
        except (TypeError, ValueError):
            seq = 1
        last = _parse_timestamp(previous.get("t_server_iso"))
        now = _parse_timestamp(now_iso)
        if last is not None and now is not None:
            elapsed = max(int((now - last).total_seconds() * 1000), 0)
    return {"seq": seq, "elapsed_time_ms": elapsed}


def build_event_record(
    session_id: str,
    *,
    event: str,
    state: TriggerState,
    previous: Optional[Dict[str, Any]] = None,
    source: Optional[str] = None,
    extras: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    now_iso = current_timestamp()
    record: Dict[str, Any] = dict.fromkeys(config.CSV_COLUMNS, None)
    record.update(
        {
            "schema_version": config.SCHEMA_VERSION,
            "session_id": session_id or "unknown",
            "t_server_iso": now_iso,
            "event": event,
            "source": source,
            "mode": config.APP_MODE,
            **state.to_dict(),
        }
    )
    record.update(next_seq_and_elapsed(previous, now_iso))
    if extras:
        for key, value in extras.items():
            if key in record:
                record[key] = value
    return record


def append_event(events: Any, record: Dict[str, Any]) -> List[Dict[str, Any]]:
    entries = list(events) if isinstance(events, list) else []
    entries.append(record)
    return entries[-config.EVENT_HISTORY_CAPACITY:]


def last_event(events: Any) -> Optional[Dict[str, Any]]:
    if isinstance(events, list) and events and isinstance(events[-1], dict):
        return events[-1]
    return None


def format_preview_message(record: Dict[str, Any]) -> str:
    event = record.get("event", "event")
    if event in {"generate_normal", "generate_poisson"}:
        return f"{event}: {record.get('n_values')} values"
    if event == "load_file":
        header = "header" if record.get("header") else "no header"
        return f"load_file: {record.get('file_name')} ({record.get('n_values')} values, {header})"
    if event == "parse_error":
        return f"parse_error: {record.get('message')}"
    if event == "file_cleared":
        return "file_cleared: selection removed"
    if event == "reset":
        return "reset: file input cleared"
    return str(event)


def preview_lines(events: Any) -> str:
    if not isinstance(events, list) or not events:
        return "Recent events will appear here."
    recent = events[-config.EVENT_PREVIEW_SIZE:]
    lines = [f"- {format_preview_message(rec)}" for rec in reversed(recent) if isinstance(rec, dict)]
    return "\n".join(["Recent events:", *lines])


def build_csv_content(records: List[Dict[str, Any]]) -> Optional[str]:
    if not records:
        return None
    columns = list(config.CSV_COLUMNS)
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=columns, extrasaction="ignore")
    writer.writeheader()
    for rec in records:
        if isinstance(rec, dict):
            writer.writerow({col: rec.get(col) for col in columns})
    return buffer.getvalue()
