"""
Unit tests for the random generators and the single-column file loader.
"""

import base64
import io

import numpy as np
import pytest

from source_histogram.data_sources import (
    FileParseError,
    FileSpec,
    decode_upload_contents,
    generate_normal,
    generate_poisson,
    is_accepted_filename,
    load_single_column,
    upload_file_spec,
)


def _payload(text, encoding="utf-8"):
    return "data:text/csv;base64," + base64.b64encode(text.encode(encoding)).decode("ascii")


class TestGenerators:
    """Test cases for the random generators."""

    def test_normal_default_size(self):
        data = generate_normal(rng=np.random.default_rng(0))
        assert data.shape == (1000,)
        assert data.dtype == float

    def test_poisson_support(self):
        data = generate_poisson(rng=np.random.default_rng(0))
        assert data.shape == (1000,)
        assert data.min() >= 0
        assert np.array_equal(data, np.round(data))

    def test_rng_makes_draws_reproducible(self):
        a = generate_normal(50, rng=np.random.default_rng(7))
        b = generate_normal(50, rng=np.random.default_rng(7))
        assert np.array_equal(a, b)


class TestLoadSingleColumn:
    """Test cases for parsing uploaded files."""

    def test_header_row_is_skipped(self, tmp_path):
        """N lines with the header flag give N - 1 values."""
        path = tmp_path / "values.csv"
        path.write_text("value\n1.5\n2\n-3\n")
        data = load_single_column(FileSpec(path, header=True))
        assert data.tolist() == [1.5, 2.0, -3.0]

    def test_no_header_keeps_every_row(self, tmp_path):
        path = tmp_path / "values.txt"
        path.write_text("4\n5\n6\n7\n")
        assert len(load_single_column(FileSpec(path, header=False))) == 4
        assert len(load_single_column(FileSpec(path, header=True))) == 3

    def test_blank_lines_are_ignored(self):
        spec = FileSpec(io.StringIO("1\n\n2\n\n"), header=False)
        assert load_single_column(spec).tolist() == [1.0, 2.0]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileParseError, match="not found"):
            load_single_column(FileSpec(tmp_path / "nope.csv"))

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("")
        with pytest.raises(FileParseError, match="empty"):
            load_single_column(FileSpec(path))

    def test_header_only(self):
        with pytest.raises(FileParseError, match="no data rows"):
            load_single_column(FileSpec(io.StringIO("value\n"), header=True))

    def test_two_columns_rejected(self):
        with pytest.raises(FileParseError, match="one column"):
            load_single_column(FileSpec(io.StringIO("a,b\n1,2\n3,4\n"), header=True))

    def test_text_header_without_flag_rejected(self):
        """A header read as data is not numeric."""
        with pytest.raises(FileParseError, match="Non-numeric"):
            load_single_column(FileSpec(io.StringIO("value\n1\n2\n"), header=False))

    def test_error_names_the_file(self):
        spec = FileSpec(io.StringIO("1\nabc\n"), header=False, name="numbers.csv")
        with pytest.raises(FileParseError) as excinfo:
            load_single_column(spec)
        assert excinfo.value.file_name == "numbers.csv"
        assert str(excinfo.value).startswith("numbers.csv:")


class TestUploads:
    """Test cases for browser upload payloads."""

    def test_decode_payload(self):
        assert decode_upload_contents(_payload("1\n2\n")) == "1\n2\n"

    def test_decode_cp1252_fallback(self):
        text = "caf\xe9\n1\n"
        assert decode_upload_contents(_payload(text, "cp1252")) == text

    def test_decode_rejects_undecodable_bytes(self):
        """Bytes no configured encoding accepts raise instead of garbling."""
        raw = "data:text/plain;base64," + base64.b64encode(b"\x81\x8d\x90\n").decode("ascii")
        with pytest.raises(FileParseError, match="decode"):
            decode_upload_contents(raw, file_name="odd.txt")

    def test_decode_rejects_missing_separator(self):
        with pytest.raises(FileParseError):
            decode_upload_contents("not-a-data-url")

    def test_decode_rejects_empty(self):
        with pytest.raises(FileParseError):
            decode_upload_contents(None)

    def test_accepted_extensions(self):
        assert is_accepted_filename("data.CSV")
        assert is_accepted_filename("data.txt")
        assert not is_accepted_filename("data.xlsx")
        assert not is_accepted_filename(None)

    def test_upload_file_spec_parses(self):
        spec = upload_file_spec(_payload("x\n1\n2\n"), "data.csv", header=True)
        assert spec.display_name == "data.csv"
        assert load_single_column(spec).tolist() == [1.0, 2.0]

    def test_upload_file_spec_rejects_extension(self):
        with pytest.raises(FileParseError, match="accepted"):
            upload_file_spec(_payload("1\n"), "data.xlsx", header=False)
