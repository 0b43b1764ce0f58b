from __future__ import annotations

import logging

# Random generators
SAMPLE_SIZE = 1000
NORMAL_MEAN = 0.0
NORMAL_SD = 1.0
POISSON_RATE = 2.0

# Upload handling
ACCEPTED_EXTENSIONS = (".csv", ".txt")
ACCEPTED_MIME_TYPES = ("text/csv", "text/comma-separated-values", "text/plain")
UPLOAD_ACCEPT = ",".join([*ACCEPTED_EXTENSIONS, *ACCEPTED_MIME_TYPES])
UPLOAD_ENCODINGS = ("utf-8-sig", "utf-8", "cp1252")
HEADER_DEFAULT = True

# UI text
PAGE_TITLE = "1 Histogram: 2 sources of data"
LABEL_GEN_NORMAL = "Generate normal distribution"
LABEL_GEN_POISSON = "Generate Poisson distribution"
LABEL_UPLOAD = "Choose text file with 1 column of numbers"
LABEL_HEADER = "1st row of the file is a header"
LABEL_RESET_FILE = "Reset file input"
EMPTY_PLOT_MESSAGE = "Generate a distribution or load a file to draw the histogram."

# Plot palette and styles (Okabe-Ito)
FIGURE_COLORS = {
    "normal": "#0072B2",
    "poisson": "#D55E00",
    "file": "#009E73",
    "edge": "#ffffff",
    "muted": "#777777",
}
FIGURE_HEIGHT = 520
FIGURE_MARGIN = {"l": 48, "r": 16, "t": 48, "b": 40}
AXIS_LINE_STYLE = {"zerolinecolor": "#777777", "gridcolor": "#e5e5e5"}
UI_BASE_TOKEN = "histogram-"
DEFAULT_UI_NONCE = "0"

# Session event trail
SCHEMA_VERSION = 1
APP_MODE = "dash"
EVENT_HISTORY_CAPACITY = 200
EVENT_PREVIEW_SIZE = 5

CSV_COLUMNS = [
    "schema_version",
    "session_id",
    "seq",
    "t_server_iso",
    "elapsed_time_ms",
    "event",
    "source",
    "n_values",
    "file_name",
    "header",
    "normal_count",
    "poisson_count",
    "file_count",
    "message",
    "mode",
]

# Diagnostics
LOG_LEVEL = logging.INFO
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
