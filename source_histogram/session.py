"""Callback bodies for the Dash app, kept free of Dash so they can be tested directly."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import plotly.graph_objects as go

from . import config
from .arbiter import ArbiterResult, Source, TriggerInputs, TriggerState, arbitrate
from .data_sources import FileParseError, load_single_column, upload_file_spec
from .graph_engine import empty_figure, render_dataset
from .logger import append_event, build_event_record, last_event
from .verbal_descriptions import describe_dataset, source_label

logger = logging.getLogger(__name__)

_EVENT_NAMES = {
    Source.NORMAL: "generate_normal",
    Source.POISSON: "generate_poisson",
    Source.FILE: "load_file",
}


@dataclass
class SourceUpdate:
    # None means leave the current figure and status on screen.
    figure: Optional[go.Figure]
    status: Optional[str]
    error: str
    trigger_data: Dict[str, int]
    events: List[Dict[str, Any]]


def new_session_data() -> Dict[str, str]:
    return {"session_id": uuid.uuid4().hex}


def get_session_id(session_data: Optional[Dict[str, Any]]) -> str:
    if isinstance(session_data, dict):
        raw = session_data.get("session_id")
        if isinstance(raw, str) and raw:
            return raw
    return "unknown"


def _uirevision(source: Optional[Source], seq: int) -> str:
    tag = source.value if source is not None else "empty"
    return f"{config.UI_BASE_TOKEN}{tag}-{seq}"


def _render(result: ArbiterResult, file_name: Optional[str], seq: int) -> go.Figure:
    if result.is_empty:
        return empty_figure(_uirevision(None, seq), config.EMPTY_PLOT_MESSAGE)
    return render_dataset(
        result.dataset,
        source_label=source_label(result.source, file_name),
        uirevision=_uirevision(result.source, seq),
        color=config.FIGURE_COLORS.get(result.source.value),
    )


def handle_source_event(
    normal_clicks: Optional[int],
    poisson_clicks: Optional[int],
    upload_contents: Optional[str],
    upload_filename: Optional[str],
    header_flag: Any,
    trigger_data: Optional[Dict[str, Any]],
    session_data: Optional[Dict[str, Any]],
    event_data: Any,
) -> SourceUpdate:
    """Run the arbiter for one UI event and build everything the page shows."""
    state = TriggerState.from_dict(trigger_data)
    header = _is_checked(header_flag)
    inputs = TriggerInputs(
        normal_clicks=normal_clicks,
        poisson_clicks=poisson_clicks,
        file_present=bool(upload_contents),
    )
    session_id = get_session_id(session_data)
    events = event_data if isinstance(event_data, list) else []

    def load_upload():
        spec = upload_file_spec(upload_contents, upload_filename, header)
        return load_single_column(spec)

    try:
        result = arbitrate(inputs, state, load_upload)
    except FileParseError as exc:
        logger.warning("file parse failed: %s", exc)
        record = build_event_record(
            session_id,
            event="parse_error",
            state=state,
            previous=last_event(events),
            source=Source.FILE.value,
            extras={"file_name": upload_filename, "header": header, "message": str(exc)},
        )
        return SourceUpdate(
            figure=empty_figure(_uirevision(None, record["seq"]), config.EMPTY_PLOT_MESSAGE),
            status=describe_dataset(None),
            error=f"Could not load file. {exc}",
            trigger_data=state.to_dict(),
            events=append_event(events, record),
        )

    if result.is_empty and (result.file_cleared or events):
        # Only the page-load call draws the empty plot; a cleared upload keeps
        # whatever histogram is showing.
        recorded = list(events)
        previous = last_event(events)
        if result.file_cleared and not (previous and previous.get("event") == "reset"):
            recorded = append_event(
                events,
                build_event_record(
                    session_id,
                    event="file_cleared",
                    state=result.state,
                    previous=previous,
                    source=Source.FILE.value,
                    extras={"message": "pending file selection removed"},
                ),
            )
        return SourceUpdate(
            figure=None,
            status=None,
            error="",
            trigger_data=result.state.to_dict(),
            events=recorded,
        )

    if result.source is None:
        return SourceUpdate(
            figure=_render(result, upload_filename, len(events) + 1),
            status=describe_dataset(None),
            error="",
            trigger_data=result.state.to_dict(),
            events=list(events),
        )

    event = _EVENT_NAMES[result.source]
    extras: Dict[str, Any] = {"n_values": int(len(result.dataset))}
    if result.source is Source.FILE:
        extras.update({"file_name": upload_filename, "header": header})
    record = build_event_record(
        session_id,
        event=event,
        state=result.state,
        previous=last_event(events),
        source=result.source.value,
        extras=extras,
    )
    label = source_label(result.source, upload_filename)
    return SourceUpdate(
        figure=_render(result, upload_filename, record["seq"]),
        status=describe_dataset(result.dataset, label),
        error="",
        trigger_data=result.state.to_dict(),
        events=append_event(events, record),
    )


def handle_reset(
    trigger_data: Optional[Dict[str, Any]],
    session_data: Optional[Dict[str, Any]],
    event_data: Any,
) -> List[Dict[str, Any]]:
    events = event_data if isinstance(event_data, list) else []
    record = build_event_record(
        get_session_id(session_data),
        event="reset",
        state=TriggerState.from_dict(trigger_data),
        previous=last_event(events),
        source=Source.FILE.value,
    )
    logger.info("file input reset requested")
    return append_event(events, record)


def _is_checked(value: Any) -> bool:
    if isinstance(value, (list, tuple, set)):
        return "on" in value
    return bool(value)
