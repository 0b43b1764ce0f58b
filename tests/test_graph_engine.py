"""
Unit tests for histogram figure construction and dataset descriptions.
"""

import numpy as np
import plotly.graph_objects as go

from source_histogram.arbiter import Source
from source_histogram.graph_engine import (
    build_histogram_figure,
    empty_figure,
    render_dataset,
    sturges_bins,
)
from source_histogram.verbal_descriptions import describe_dataset, source_label


class TestSturgesBins:
    """Test cases for the default bin count."""

    def test_known_values(self):
        assert sturges_bins(1000) == 11
        assert sturges_bins(1) == 1
        assert sturges_bins(0) == 1


class TestFigures:
    """Test cases for figure builders."""

    def test_histogram_trace(self):
        fig = build_histogram_figure([1.0, 2.0, 2.0, 3.0], title="t", uirevision="r")
        assert isinstance(fig, go.Figure)
        assert len(fig.data) == 1
        assert fig.data[0].type == "histogram"
        assert list(fig.data[0].x) == [1.0, 2.0, 2.0, 3.0]
        assert fig.layout.uirevision == "r"

    def test_empty_figure_has_no_traces(self):
        fig = empty_figure("r", "nothing")
        assert len(fig.data) == 0
        assert fig.layout.annotations[0].text == "nothing"

    def test_render_none_does_not_raise(self):
        """Rendering an empty result clears the display."""
        assert len(render_dataset(None, source_label="x", uirevision="r").data) == 0
        assert len(render_dataset(np.array([]), source_label="x", uirevision="r").data) == 0

    def test_render_dataset_titles_by_source(self):
        fig = render_dataset(np.arange(10.0), source_label="file a.csv", uirevision="r")
        assert fig.layout.title.text == "Histogram of file a.csv"


class TestDescriptions:
    """Test cases for verbal summaries."""

    def test_source_labels(self):
        assert "Poisson" in source_label(Source.POISSON)
        assert "normal" in source_label(Source.NORMAL)
        assert source_label(Source.FILE, "a.csv") == "file a.csv"
        assert source_label(None) == "no data"

    def test_describe_dataset(self):
        text = describe_dataset(np.array([1.0, 2.0, 3.0]), "file a.csv")
        assert text.startswith("3 values from the file a.csv")
        assert "mean 2" in text

    def test_describe_empty(self):
        assert describe_dataset(None).startswith("No data yet")
