"""Dash app: one histogram fed by two random generators or an uploaded file."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import dash
from dash import Input, Output, State, dcc, html

from source_histogram import config
from source_histogram.arbiter import TriggerState
from source_histogram.graph_engine import empty_figure
from source_histogram.logger import build_csv_content, preview_lines
from source_histogram.session import (
    get_session_id,
    handle_reset,
    handle_source_event,
    new_session_data,
)
from source_histogram.verbal_descriptions import describe_dataset

logger = logging.getLogger(__name__)

_ERROR_STYLE_BASE: Dict[str, Any] = {
    "color": "#cc3311",
    "fontSize": "0.9rem",
    "minHeight": "1.2em",
    "marginTop": "8px",
}

_UPLOAD_STYLE: Dict[str, Any] = {
    "width": "100%",
    "padding": "14px 8px",
    "borderWidth": "1px",
    "borderStyle": "dashed",
    "borderRadius": "8px",
    "textAlign": "center",
    "cursor": "pointer",
}

_INITIAL_FIGURE = empty_figure(f"{config.UI_BASE_TOKEN}{config.DEFAULT_UI_NONCE}", config.EMPTY_PLOT_MESSAGE)


app = dash.Dash(__name__, title=config.PAGE_TITLE)
server = app.server


def _build_upload() -> dcc.Upload:
    return dcc.Upload(
        id="upload-file",
        accept=config.UPLOAD_ACCEPT,
        multiple=False,
        children=html.Div(["Drop a file here or ", html.A("browse")]),
        style=_UPLOAD_STYLE,
    )


def _error_style(message: Optional[str]) -> Dict[str, Any]:
    style = dict(_ERROR_STYLE_BASE)
    style["visibility"] = "visible" if message else "hidden"
    return style


def _serve_layout() -> html.Div:
    controls_column = html.Div(
        [
            html.H2("Data source"),
            html.Div(
                [
                    html.Button(
                        config.LABEL_GEN_NORMAL,
                        id="btn-gen-normal",
                        n_clicks=0,
                        title=config.LABEL_GEN_NORMAL,
                    ),
                    html.Button(
                        config.LABEL_GEN_POISSON,
                        id="btn-gen-poisson",
                        n_clicks=0,
                        title=config.LABEL_GEN_POISSON,
                        style={"marginLeft": "8px"},
                    ),
                ],
            ),
            html.Hr(style={"margin": "20px 0"}),
            html.Label(config.LABEL_UPLOAD, htmlFor="upload-file"),
            html.Div(_build_upload(), id="upload-container", style={"marginTop": "8px"}),
            html.Div(
                dcc.Checklist(
                    id="toggle-header",
                    options=[{"label": config.LABEL_HEADER, "value": "on"}],
                    value=["on"] if config.HEADER_DEFAULT else [],
                    labelStyle={
                        "display": "flex",
                        "alignItems": "center",
                        "gap": "6px",
                    },
                    inputStyle={"marginRight": "6px"},
                ),
                style={"marginTop": "12px"},
            ),
            html.Button(
                config.LABEL_RESET_FILE,
                id="btn-reset-file",
                n_clicks=0,
                title="Clear the file selection so the same file can be loaded again",
                style={"marginTop": "12px"},
            ),
            html.Div(
                "",
                id="file-error",
                role="alert",
                style=_error_style(None),
            ),
        ],
        style={"flex": "1", "minWidth": "280px"},
    )

    graph_column = html.Div(
        [
            dcc.Graph(
                id="graph-hist",
                figure=_INITIAL_FIGURE,
                config={"displaylogo": False},
                style={"width": "100%"},
            ),
            html.Div(
                describe_dataset(None),
                id="dataset-status",
                role="status",
                **{"aria-live": "polite"},
                style={"fontSize": "0.95rem", "color": "#444444", "marginTop": "8px"},
            ),
            dcc.Markdown(
                preview_lines([]),
                id="event-display",
                style={"marginTop": "16px", "fontSize": "0.9rem"},
            ),
            html.Div(
                [
                    html.Button("Download CSV", id="btn-download-csv", n_clicks=0),
                    dcc.Download(id="download-csv"),
                ],
                style={"marginTop": "8px"},
            ),
        ],
        style={"flex": "2", "minWidth": "0"},
    )

    return html.Div(
        [
            dcc.Store(id="store-session", data=new_session_data()),
            dcc.Store(id="store-trigger", data=TriggerState().to_dict()),
            dcc.Store(id="store-events", data=[]),
            html.H1(config.PAGE_TITLE),
            html.Div(
                [controls_column, graph_column],
                style={
                    "display": "flex",
                    "gap": "32px",
                    "alignItems": "flex-start",
                },
            ),
        ],
        style={"padding": "32px"},
    )


app.layout = _serve_layout


@app.callback(
    Output("graph-hist", "figure"),
    Output("dataset-status", "children"),
    Output("file-error", "children"),
    Output("file-error", "style"),
    Output("store-trigger", "data"),
    Output("store-events", "data"),
    Input("btn-gen-normal", "n_clicks"),
    Input("btn-gen-poisson", "n_clicks"),
    Input("upload-file", "contents"),
    State("upload-file", "filename"),
    State("toggle-header", "value"),
    State("store-trigger", "data"),
    State("store-session", "data"),
    State("store-events", "data"),
)
def _update_histogram(
    normal_clicks,
    poisson_clicks,
    upload_contents,
    upload_filename,
    header_value,
    trigger_data,
    session_data,
    event_data,
):
    update = handle_source_event(
        normal_clicks,
        poisson_clicks,
        upload_contents,
        upload_filename,
        header_value,
        trigger_data,
        session_data,
        event_data,
    )
    return (
        dash.no_update if update.figure is None else update.figure,
        dash.no_update if update.status is None else update.status,
        update.error,
        _error_style(update.error),
        update.trigger_data,
        update.events,
    )


@app.callback(
    Output("upload-container", "children"),
    Output("store-events", "data", allow_duplicate=True),
    Input("btn-reset-file", "n_clicks"),
    State("store-trigger", "data"),
    State("store-session", "data"),
    State("store-events", "data"),
    prevent_initial_call=True,
)
def _reset_file_input(n_clicks, trigger_data, session_data, event_data):
    if not n_clicks:
        return dash.no_update, dash.no_update
    # A fresh Upload component forgets the previous selection, so picking the
    # same file name again fires a new contents change.
    return _build_upload(), handle_reset(trigger_data, session_data, event_data)


@app.callback(
    Output("event-display", "children"),
    Input("store-events", "data"),
)
def _render_event_display(event_data):
    return preview_lines(event_data)


@app.callback(
    Output("download-csv", "data"),
    Input("btn-download-csv", "n_clicks"),
    State("store-events", "data"),
    State("store-session", "data"),
    prevent_initial_call=True,
)
def _handle_download_csv(n_clicks, event_data, session_data):
    if not n_clicks:
        return dash.no_update
    csv_content = build_csv_content(event_data if isinstance(event_data, list) else [])
    if csv_content is None:
        return dash.no_update
    filename = f"session_{get_session_id(session_data)}_events.csv"
    logger.info("exporting %d events to %s", len(event_data), filename)
    return dcc.send_string(csv_content, filename=filename)


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    app.run(debug=True)
